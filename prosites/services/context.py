"""
Dependencies shared by the billing services
"""
from dataclasses import dataclass, field
from typing import Any, Dict

from prosites.core.base import MessageBag
from prosites.core.constants import DEFAULT_CACHE_GROUP, DEFAULT_MAIN_SITE_ID
from .site_directory import SiteDirectory

@dataclass
class BillingContext:
    """
    Everything a billing service needs, passed in explicitly

    Attributes:
        config: Application configuration mapping
        cache: Object with get/set/delete (a Flask-Caching ``Cache``)
        session: SQLAlchemy session
        sites: Host lookups
        errors: User-visible messages raised while serving the request
    """
    config: Dict[str, Any]
    cache: Any
    session: Any
    sites: SiteDirectory
    errors: MessageBag = field(default_factory=MessageBag)

    @property
    def cache_group(self) -> str:
        return self.config.get('CACHE_GROUP') or DEFAULT_CACHE_GROUP

    @classmethod
    def from_app(cls, app) -> 'BillingContext':
        """Build a context from a Flask app and its extensions"""
        from prosites.app.extensions import db, cache

        session = db.session
        return cls(
            config=app.config,
            cache=cache,
            session=session,
            sites=SiteDirectory(session, app.config.get('MAIN_SITE_ID', DEFAULT_MAIN_SITE_ID))
        )
