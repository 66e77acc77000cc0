# tests/conftest.py
from unittest.mock import MagicMock

import pytest
from flask_jwt_extended import create_access_token

from prosites.app import create_app
from prosites.app.config import TestingConfig
from prosites.app.extensions import db
from prosites.app.models import Site, User
from prosites.providers.stripe_provider import StripeProvider
from prosites.services.context import BillingContext
from prosites.services.customer_service import StripeCustomerService

MAIN_SITE_NAME = 'Pro Network'
ALICE_EMAIL = 'alice@example.com'


def _seed():
    main = Site(id=1, name=MAIN_SITE_NAME, domain='network.example.com')
    blog = Site(id=2, name='Alice Blog', domain='alice.network.example.com')
    shop = Site(id=3, name='Alice Shop', domain='shop.network.example.com', last_gateway='stripe')
    answers = Site(id=42, name='Answers', domain='answers.network.example.com')

    alice = User(id=10, email=ALICE_EMAIL, user_login='alice', display_name='Alice Liddell')
    alice.sites = [main, blog, shop]

    db.session.add_all([main, blog, shop, answers, alice])
    db.session.commit()


@pytest.fixture
def app():
    """App on TestingConfig (in-memory SQLite, SimpleCache) with seeded sites and users."""
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        _seed()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def provider(app):
    """Stripe provider stand-in, also used by the API and CLI."""
    fake = MagicMock(spec=StripeProvider)
    app.extensions['stripe_provider'] = fake
    return fake


@pytest.fixture
def context(app):
    return BillingContext.from_app(app)


@pytest.fixture
def service(context, provider):
    return StripeCustomerService(context, provider)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity='network-admin')
    return {'Authorization': f'Bearer {token}'}
