from unittest.mock import MagicMock

import pytest
import stripe

from prosites.core.exceptions import StripeError, StripeNotFoundError, StripeValidationError
from prosites.providers.stripe_provider import StripeProvider


@pytest.fixture
def provider():
    return StripeProvider(api_key='sk_test_123')


def test_sets_api_key_from_config(monkeypatch):
    monkeypatch.setattr(stripe, 'api_key', None)

    StripeProvider(config={'STRIPE_SECRET_KEY': 'sk_test_456'})

    assert stripe.api_key == 'sk_test_456'


def test_retrieve_customer_returns_plain_dict(provider, monkeypatch):
    customer = stripe.Customer.construct_from(
        {'id': 'cus_abc', 'object': 'customer', 'default_source': 'card_123',
         'metadata': {'user': 'alice'}},
        'sk_test_123'
    )
    retrieve = MagicMock(return_value=customer)
    monkeypatch.setattr(stripe.Customer, 'retrieve', retrieve)

    result = provider.retrieve_customer('cus_abc')

    assert type(result) is dict
    assert result['default_source'] == 'card_123'
    assert type(result['metadata']) is dict
    retrieve.assert_called_once_with('cus_abc')


def test_missing_customer_raises_not_found(provider, monkeypatch):
    error = stripe.InvalidRequestError(
        "No such customer: 'cus_missing'", 'id', code='resource_missing', http_status=404
    )
    monkeypatch.setattr(stripe.Customer, 'retrieve', MagicMock(side_effect=error))

    with pytest.raises(StripeNotFoundError) as excinfo:
        provider.retrieve_customer('cus_missing')

    assert excinfo.value.details['stripe_code'] == 'resource_missing'
    assert excinfo.value.__cause__ is error


def test_invalid_request_raises_validation_error(provider, monkeypatch):
    error = stripe.InvalidRequestError("Invalid email address", 'email', http_status=400)
    monkeypatch.setattr(stripe.Customer, 'create', MagicMock(side_effect=error))

    with pytest.raises(StripeValidationError):
        provider.create_customer('not-an-email')


def test_card_error_raises_validation_error(provider, monkeypatch):
    error = stripe.CardError("Your card was declined.", None, 'card_declined', http_status=402)
    monkeypatch.setattr(stripe.Customer, 'create', MagicMock(side_effect=error))

    with pytest.raises(StripeValidationError):
        provider.create_customer('alice@example.com', 'tok_chargeDeclined')


def test_connection_error_is_transient(provider, monkeypatch):
    error = stripe.APIConnectionError("Network error")
    monkeypatch.setattr(stripe.Invoice, 'list', MagicMock(side_effect=error))

    with pytest.raises(StripeError) as excinfo:
        provider.list_invoices('cus_abc')

    assert excinfo.value.transient


def test_authentication_error_is_not_transient(provider, monkeypatch):
    error = stripe.AuthenticationError("Invalid API Key provided")
    monkeypatch.setattr(stripe.Customer, 'retrieve', MagicMock(side_effect=error))

    with pytest.raises(StripeError) as excinfo:
        provider.retrieve_customer('cus_abc')

    assert not excinfo.value.transient
    assert not isinstance(excinfo.value, (StripeNotFoundError, StripeValidationError))


def test_list_customers_returns_page_data(provider, monkeypatch):
    page = stripe.ListObject.construct_from({
        'object': 'list',
        'data': [{'id': 'cus_2', 'object': 'customer'}, {'id': 'cus_1', 'object': 'customer'}],
    }, 'sk_test_123')
    listing = MagicMock(return_value=page)
    monkeypatch.setattr(stripe.Customer, 'list', listing)

    customers = provider.list_customers('alice@example.com', 10)

    assert customers == [{'id': 'cus_2', 'object': 'customer'}, {'id': 'cus_1', 'object': 'customer'}]
    assert all(type(c) is dict for c in customers)
    listing.assert_called_once_with(email='alice@example.com', limit=10)


def test_create_customer_sends_source_only_when_given(provider, monkeypatch):
    create = MagicMock(return_value={'id': 'cus_new'})
    monkeypatch.setattr(stripe.Customer, 'create', create)

    provider.create_customer('alice@example.com', description='Pro Network')
    provider.create_customer('alice@example.com', 'tok_visa')

    assert create.call_args_list[0].kwargs == {'email': 'alice@example.com', 'description': 'Pro Network'}
    assert create.call_args_list[1].kwargs == {'email': 'alice@example.com', 'source': 'tok_visa'}


def test_update_customer(provider, monkeypatch):
    modify = MagicMock(return_value={'id': 'cus_abc', 'description': 'VIP'})
    monkeypatch.setattr(stripe.Customer, 'modify', modify)

    provider.update_customer('cus_abc', {'description': 'VIP'})

    modify.assert_called_once_with('cus_abc', description='VIP')


def test_retrieve_source(provider, monkeypatch):
    retrieve_source = MagicMock(return_value={'id': 'card_123'})
    monkeypatch.setattr(stripe.Customer, 'retrieve_source', retrieve_source)

    provider.retrieve_source('cus_abc', 'card_123')

    retrieve_source.assert_called_once_with('cus_abc', 'card_123')


def test_upcoming_invoice_previews_subscription(provider, monkeypatch):
    preview = MagicMock(return_value={'amount_due': 1000})
    monkeypatch.setattr(stripe.Invoice, 'create_preview', preview)

    provider.upcoming_invoice('cus_abc')
    provider.upcoming_invoice('cus_abc', 'sub_1')

    assert preview.call_args_list[0].kwargs == {'customer': 'cus_abc'}
    assert preview.call_args_list[1].kwargs == {'customer': 'cus_abc', 'subscription': 'sub_1'}
