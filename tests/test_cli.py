import json

import pytest

from prosites.core.exceptions import StripeNotFoundError


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def test_init_db(runner):
    result = runner.invoke(args=['init-db'])

    assert result.exit_code == 0
    assert 'Database tables created' in result.output


def test_bind_then_show(runner, provider):
    bound = runner.invoke(args=['stripe-customer', 'bind', '42', 'cus_abc', 'sub_1'])
    shown = runner.invoke(args=['stripe-customer', 'show', '42'])

    assert bound.exit_code == 0
    assert 'Site 42 bound to cus_abc' in bound.output
    assert shown.exit_code == 0
    assert json.loads(shown.output) == {'blog_id': 42, 'customer_id': 'cus_abc', 'subscription_id': 'sub_1'}
    provider.retrieve_customer.assert_not_called()


def test_show_unbound_site(runner):
    result = runner.invoke(args=['stripe-customer', 'show', '42'])

    assert result.exit_code == 0
    assert 'Site 42 has no Stripe customer' in result.output


def test_show_remote_customer(runner, provider):
    provider.retrieve_customer.return_value = {'id': 'cus_abc', 'email': 'alice@example.com'}
    runner.invoke(args=['stripe-customer', 'bind', '42', 'cus_abc'])

    result = runner.invoke(args=['stripe-customer', 'show', '42', '--remote'])

    assert result.exit_code == 0
    assert '"email": "alice@example.com"' in result.output


def test_show_remote_customer_lookup_failure(runner, provider):
    provider.retrieve_customer.side_effect = StripeNotFoundError("No such customer: 'cus_abc'")
    runner.invoke(args=['stripe-customer', 'bind', '42', 'cus_abc'])

    result = runner.invoke(args=['stripe-customer', 'show', '42', '--remote'])

    assert result.exit_code == 1
    assert 'Stripe lookup failed (not_found)' in result.output


def test_bind_rejects_missing_site_id(runner):
    result = runner.invoke(args=['stripe-customer', 'bind', '0', 'cus_abc'])

    assert result.exit_code == 1
    assert 'Could not store Stripe customer for site 0' in result.output


def test_gateways_list(runner):
    result = runner.invoke(args=['gateways', 'list'])

    assert result.exit_code == 0
    assert result.output == 'stripe\tStripe\n'


def test_gateways_list_empty(app, runner):
    app.config['GATEWAYS_ENABLED'] = []

    result = runner.invoke(args=['gateways', 'list'])

    assert 'No gateways enabled' in result.output
