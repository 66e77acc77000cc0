from unittest.mock import MagicMock

import stripe

from prosites.app.extensions import db
from prosites.app.models import StripeCustomer
from prosites.core.constants import CURRENCIES, STRIPE_CUSTOMER_CREATE_FAILED
from prosites.core.exceptions import StripeError, StripeValidationError
from prosites.providers.stripe_provider import StripeProvider

from tests.conftest import ALICE_EMAIL

BASE = '/api/v1/billing'


def test_health(client):
    response = client.get(f'{BASE}/health')

    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok', 'stripe_configured': True}


def test_requires_token(client):
    response = client.get(f'{BASE}/sites/42/customer')

    assert response.status_code == 401


def test_gateways(client, auth_headers):
    response = client.get(f'{BASE}/gateways', headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json()['gateways'] == [
        {'key': 'stripe', 'name': 'Stripe', 'only_active': True, 'currencies': list(CURRENCIES)}
    ]


def test_gateways_last_used_by_site(client, auth_headers):
    used = client.get(f'{BASE}/gateways?blog_id=3', headers=auth_headers)
    unused = client.get(f'{BASE}/gateways?blog_id=2', headers=auth_headers)

    assert used.get_json()['gateways'][0]['last_used'] is True
    assert unused.get_json()['gateways'][0]['last_used'] is False


def test_put_then_get_site_customer(client, auth_headers, provider):
    provider.retrieve_customer.return_value = {'id': 'cus_abc', 'email': ALICE_EMAIL}

    put = client.put(f'{BASE}/sites/42/customer', json={'customer_id': 'cus_abc'}, headers=auth_headers)
    get = client.get(f'{BASE}/sites/42/customer', headers=auth_headers)

    assert put.status_code == 200
    assert put.get_json()['binding'] == {'blog_id': 42, 'customer_id': 'cus_abc', 'subscription_id': ''}
    assert get.status_code == 200
    assert get.get_json()['customer']['id'] == 'cus_abc'
    assert get.get_json()['binding']['customer_id'] == 'cus_abc'


def test_get_unbound_site_customer(client, auth_headers, provider):
    response = client.get(f'{BASE}/sites/42/customer', headers=auth_headers)

    assert response.status_code == 404
    assert response.get_json() == {
        'binding': {'blog_id': 42, 'customer_id': None, 'subscription_id': None},
        'customer': None,
    }
    provider.retrieve_customer.assert_not_called()


def test_put_site_customer_requires_customer_id(client, auth_headers):
    response = client.put(f'{BASE}/sites/42/customer', json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error']['code'] == 'VALIDATION_ERROR'
    assert response.get_json()['error']['details']['field'] == 'customer_id'


def test_post_site_customer_creates_customer(client, auth_headers, provider):
    provider.list_customers.return_value = []
    provider.create_customer.return_value = {'id': 'cus_fresh'}

    response = client.post(
        f'{BASE}/sites/2/customer', json={'email': ALICE_EMAIL, 'token': 'tok_visa'}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.get_json() == {'customer': {'id': 'cus_fresh'}}
    assert db.session.get(StripeCustomer, 2).customer_id == 'cus_fresh'


def test_post_site_customer_failure_returns_messages(client, auth_headers, provider):
    provider.list_customers.return_value = []
    provider.create_customer.side_effect = StripeValidationError("Your card was declined.")

    response = client.post(
        f'{BASE}/sites/2/customer', json={'email': ALICE_EMAIL, 'token': 'tok_chargeDeclined'}, headers=auth_headers
    )

    body = response.get_json()
    assert response.status_code == 400
    assert body['status'] == 'validation_error'
    assert body['messages'] == {'stripe': [STRIPE_CUSTOMER_CREATE_FAILED]}


def test_post_site_customer_requires_email(client, auth_headers):
    response = client.post(f'{BASE}/sites/2/customer', json={'token': 'tok_visa'}, headers=auth_headers)

    assert response.status_code == 400


def test_card_vendor_error_is_retryable(client, auth_headers, provider):
    client.put(f'{BASE}/sites/42/customer', json={'customer_id': 'cus_abc'}, headers=auth_headers)
    provider.retrieve_customer.side_effect = StripeError("Connection reset", transient=True)

    response = client.get(f'{BASE}/sites/42/card', headers=auth_headers)

    assert response.status_code == 502
    assert response.get_json()['status'] == 'vendor_error'
    assert response.get_json()['retryable'] is True


def test_card_for_unbound_site(client, auth_headers):
    response = client.get(f'{BASE}/sites/42/card', headers=auth_headers)

    assert response.status_code == 404


def test_last_invoice(client, auth_headers, provider):
    client.put(f'{BASE}/sites/42/customer', json={'customer_id': 'cus_abc'}, headers=auth_headers)
    provider.list_invoices.return_value = [{'id': 'in_1', 'status': 'paid'}]

    response = client.get(f'{BASE}/sites/42/invoices/last', headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == {'invoice': {'id': 'in_1', 'status': 'paid'}}


def test_upcoming_invoice_uses_stored_subscription(client, auth_headers, provider):
    client.put(
        f'{BASE}/sites/42/customer', json={'customer_id': 'cus_abc', 'subscription_id': 'sub_1'}, headers=auth_headers
    )
    provider.upcoming_invoice.return_value = {'amount_due': 1000}

    response = client.get(f'{BASE}/sites/42/invoices/upcoming', headers=auth_headers)

    assert response.status_code == 200
    provider.upcoming_invoice.assert_called_once_with('cus_abc', 'sub_1')


def test_post_site_customer_rejects_invalid_email(client, auth_headers, provider):
    response = client.post(f'{BASE}/sites/2/customer', json={'email': 'not-an-email'}, headers=auth_headers)

    assert response.status_code == 400
    assert response.get_json()['error']['details']['field'] == 'email'
    provider.create_customer.assert_not_called()


def test_get_site_customer_with_stripe_objects(app, client, auth_headers, monkeypatch):
    app.extensions['stripe_provider'] = StripeProvider(config=app.config)
    customer = stripe.Customer.construct_from({
        'id': 'cus_abc',
        'object': 'customer',
        'email': ALICE_EMAIL,
        'default_source': 'card_123',
        'metadata': {'user': 'alice'},
    }, 'sk_test_123')
    card = stripe.Card.construct_from({'id': 'card_123', 'object': 'card', 'last4': '4242'}, 'sk_test_123')
    monkeypatch.setattr(stripe.Customer, 'retrieve', MagicMock(return_value=customer))
    monkeypatch.setattr(stripe.Customer, 'retrieve_source', MagicMock(return_value=card))
    client.put(f'{BASE}/sites/42/customer', json={'customer_id': 'cus_abc'}, headers=auth_headers)

    customer_response = client.get(f'{BASE}/sites/42/customer', headers=auth_headers)
    card_response = client.get(f'{BASE}/sites/42/card', headers=auth_headers)

    assert customer_response.status_code == 200
    assert customer_response.get_json()['customer']['metadata'] == {'user': 'alice'}
    assert card_response.status_code == 200
    assert card_response.get_json()['card']['last4'] == '4242'
