"""
Flask application factory and core components
"""

import logging

from flask import Flask

from .config import ProductionConfig, DevelopmentConfig, TestingConfig
from .extensions import db, migrate, cache, jwt
from .models import Site, User, StripeCustomer, TenantBinding
from prosites.core.constants import DEFAULT_MAIN_SITE_ID
from prosites.core.exceptions import MissingConfigurationError

__all__ = [
    # Configurations
    'ProductionConfig', 'DevelopmentConfig', 'TestingConfig',

    # Extensions
    'db', 'migrate', 'cache', 'jwt',

    # Models
    'Site', 'User', 'StripeCustomer', 'TenantBinding',

    # Application factory
    'create_app'
]

def create_app(config_class=ProductionConfig):
    """Application factory"""
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class)

    setup_app_logging(app)
    setup_monitoring(app)

    # Initialize extensions
    initialize_extensions(app)
    check_stripe_config(app)
    initialize_gateways(app)

    # Register blueprints/views
    register_blueprints(app)

    # Import inside function to avoid circular imports
    from .errors import register_error_handlers
    from .cli import register_commands

    register_error_handlers(app)
    register_commands(app)

    logging.getLogger(__name__).info(f"Flask application created with {app.config.get('ENV')} settings")
    return app

def setup_app_logging(app):
    """Configure logging from the app settings"""
    from prosites.core.logging import setup_logging

    setup_logging({
        'log_level': app.config.get('LOG_LEVEL'),
        'log_format': app.config.get('LOG_FORMAT'),
        'log_file': app.config.get('LOG_FILE'),
        'json': app.config.get('LOG_JSON', False),
    })

def setup_monitoring(app):
    """Send errors to Sentry when a DSN is configured"""
    dsn = app.config.get('SENTRY_DSN')
    if not dsn:
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=0.1,
        environment=app.config.get('ENV'),
    )

def initialize_extensions(app):
    """Initialize Flask extensions."""
    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    jwt.init_app(app)

    # One Stripe executor per app, looked up by request handlers
    from prosites.providers.stripe_provider import StripeProvider
    app.extensions['stripe_provider'] = StripeProvider(config=app.config)

def initialize_gateways(app):
    """Load the enabled gateways and their currencies once per app"""
    from prosites.gateways.registry import GatewayRegistry
    from prosites.services.site_directory import SiteDirectory

    registry = GatewayRegistry(
        app.config,
        sites=SiteDirectory(db.session, app.config.get('MAIN_SITE_ID', DEFAULT_MAIN_SITE_ID))
    )
    if not registry.initialize():
        logging.getLogger(__name__).warning("No payment gateways enabled")

    app.extensions['gateway_registry'] = registry

def check_stripe_config(app):
    """Refuse to start in production without Stripe credentials"""
    from prosites.services.context import BillingContext
    from prosites.services.customer_service import StripeCustomerService

    service = StripeCustomerService(BillingContext.from_app(app), app.extensions['stripe_provider'])
    if service.initialize():
        return

    if app.config.get('ENV') == 'production':
        raise MissingConfigurationError(config_key='STRIPE_SECRET_KEY')
    logging.getLogger(__name__).warning("STRIPE_SECRET_KEY is not set, Stripe calls will fail")

def register_blueprints(app):
    """Register all API blueprints."""
    from prosites.api.v1.billing import billing_bp

    app.register_blueprint(billing_bp, url_prefix='/api/v1/billing')
