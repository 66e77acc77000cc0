"""
Multisite host lookups: current site, users, site ownership
"""
import logging
from typing import List, Optional

from flask import g, has_app_context

from prosites.app.models import Site, User
from prosites.core.constants import DEFAULT_MAIN_SITE_ID

logger = logging.getLogger(__name__)

class SiteDirectory:
    """
    Answers questions about sites and users of the network
    """

    def __init__(self, session, main_site_id: int = DEFAULT_MAIN_SITE_ID):
        self.session = session
        self.main_site_id = main_site_id

    def current_blog_id(self) -> int:
        """Site handling the current request, or the main site outside of one"""
        if has_app_context():
            blog_id = g.get('blog_id')
            if blog_id:
                return int(blog_id)
        return self.main_site_id

    def is_main_site(self, blog_id: int) -> bool:
        return int(blog_id) == self.main_site_id

    def get_site(self, blog_id: int) -> Optional[Site]:
        return self.session.get(Site, blog_id)

    def get_blog_name(self, blog_id: Optional[int] = None) -> str:
        site = self.get_site(blog_id or self.main_site_id)
        return site.name if site else ''

    def get_user_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        return self.session.query(User).filter(User.email == email).one_or_none()

    def get_blogs_of_user(self, user_id: int) -> List[Site]:
        user = self.session.get(User, user_id)
        if user is None:
            return []
        return list(user.sites)

    def last_gateway(self, blog_id: int) -> Optional[str]:
        site = self.get_site(blog_id)
        return site.last_gateway if site else None
