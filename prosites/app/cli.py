"""
Command-line interface commands for administration and maintenance
"""
import json
import click
from flask import current_app
from flask.cli import with_appcontext

from prosites.app.extensions import db
from prosites.services.context import BillingContext
from prosites.services.customer_service import StripeCustomerService

def register_commands(app):
    """Register CLI commands with Flask application"""

    # ========== DATABASE COMMANDS ==========

    @app.cli.command('init-db')
    @with_appcontext
    def init_db_command():
        """Initialize the database"""
        click.echo("Creating database tables...")
        db.create_all()
        click.echo("✓ Database tables created")

    # ========== STRIPE CUSTOMER COMMANDS ==========

    @app.cli.group('stripe-customer')
    def stripe_customer_group():
        """Inspect and edit site -> Stripe customer bindings"""

    @stripe_customer_group.command('show')
    @click.argument('blog_id', type=int)
    @click.option('--force', is_flag=True, help='Skip the cache')
    @click.option('--remote', is_flag=True, help='Also fetch the customer from Stripe')
    @with_appcontext
    def show_customer_command(blog_id, force, remote):
        """Show the Stripe binding of a site"""
        service = StripeCustomerService(
            BillingContext.from_app(current_app),
            current_app.extensions.get('stripe_provider')
        )
        binding = service.get_db_customer(blog_id, force=force)

        click.echo(json.dumps(binding.to_dict(), indent=2))

        if not binding.has_customer:
            click.echo(f"Site {blog_id} has no Stripe customer")
            return

        if remote:
            result = service.get_customer(binding.customer_id, force=force)
            if not result:
                raise click.ClickException(f"Stripe lookup failed ({result.status.value}): {result.error}")
            click.echo(json.dumps(result.value, indent=2, default=str))

    @stripe_customer_group.command('bind')
    @click.argument('blog_id', type=int)
    @click.argument('customer_id')
    @click.argument('subscription_id', required=False, default='')
    @with_appcontext
    def bind_customer_command(blog_id, customer_id, subscription_id):
        """Store the Stripe customer (and subscription) of a site"""
        service = StripeCustomerService(
            BillingContext.from_app(current_app),
            current_app.extensions.get('stripe_provider')
        )

        if not service.set_db_customer(blog_id, customer_id, subscription_id):
            raise click.ClickException(f"Could not store Stripe customer for site {blog_id}")

        click.echo(f"✓ Site {blog_id} bound to {customer_id}")

    # ========== GATEWAY COMMANDS ==========

    @app.cli.group('gateways')
    def gateways_group():
        """Payment gateway information"""

    @gateways_group.command('list')
    @with_appcontext
    def list_gateways_command():
        """List the enabled gateways"""
        registry = current_app.extensions['gateway_registry']
        gateways = registry.get_gateways()

        if not gateways:
            click.echo("No gateways enabled")
            return

        for key, gateway in gateways.items():
            click.echo(f"{key}\t{gateway.name}")
