"""
Database models for sites, users and Stripe customer bindings
"""
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from .extensions import db

site_members = db.Table(
    'site_members',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
    db.Column('site_id', db.Integer, db.ForeignKey('sites.id'), primary_key=True),
)

class Site(db.Model):
    __tablename__ = 'sites'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, default='')
    domain = db.Column(db.String(255), nullable=True)
    # Key of the gateway the site last paid with
    last_gateway = db.Column(db.String(50), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Site {self.id} {self.name}>'

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    user_login = db.Column(db.String(100), unique=True, nullable=False)
    display_name = db.Column(db.String(200), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    sites = db.relationship(
        'Site',
        secondary=site_members,
        lazy='select',
        order_by='Site.id',
        backref=db.backref('members', lazy='select')
    )

    def __repr__(self):
        return f'<User {self.user_login}>'

class StripeCustomer(db.Model):
    """Durable mapping of a site to its Stripe customer and subscription"""
    __tablename__ = 'pro_sites_stripe_customers'

    blog_id = db.Column(db.Integer, primary_key=True, autoincrement=False)
    customer_id = db.Column(db.String(255), nullable=True, index=True)
    subscription_id = db.Column(db.String(255), nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_binding(self) -> 'TenantBinding':
        return TenantBinding(
            blog_id=self.blog_id,
            customer_id=self.customer_id or None,
            subscription_id=self.subscription_id
        )

    def __repr__(self):
        return f'<StripeCustomer {self.blog_id} {self.customer_id}>'

@dataclass
class TenantBinding:
    """
    Plain copy of a StripeCustomer row, safe to keep in the cache.

    A binding without a customer is what lookups return when nothing
    is stored for the site.
    """
    blog_id: Optional[int]
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None

    @property
    def has_customer(self) -> bool:
        return bool(self.customer_id)

    @classmethod
    def empty(cls, blog_id: Optional[int]) -> 'TenantBinding':
        return cls(blog_id=blog_id)

    def to_dict(self):
        return asdict(self)
