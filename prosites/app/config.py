"""
Configuration management for all environments
"""
import os
import secrets
from datetime import timedelta
from pathlib import Path

from prosites.core.constants import (
    DEFAULT_CACHE_GROUP, DEFAULT_MAIN_SITE_ID, DEFAULT_GATEWAYS_ENABLED
)

def _csv(value: str):
    return [item.strip() for item in value.split(',') if item.strip()]

class BaseConfig:
    """Base configuration - shared across all environments"""

    # ========== SECURITY ==========
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_urlsafe(64)
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)

    # ========== DATABASE ==========
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///prosites.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    }

    # ========== CACHING ==========
    REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'RedisCache')
    CACHE_REDIS_URL = REDIS_URL
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 300))
    CACHE_GROUP = os.environ.get('CACHE_GROUP', DEFAULT_CACHE_GROUP)

    # ========== PAYMENT PROCESSING ==========
    STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')
    STRIPE_PUBLISHABLE_KEY = os.environ.get('STRIPE_PUBLISHABLE_KEY', '')
    STRIPE_API_VERSION = os.environ.get('STRIPE_API_VERSION') or None

    # Dotted import paths of the enabled gateway classes
    GATEWAYS_ENABLED = _csv(os.environ.get('GATEWAYS_ENABLED', '')) or list(DEFAULT_GATEWAYS_ENABLED)

    # ========== MULTISITE ==========
    MAIN_SITE_ID = int(os.environ.get('MAIN_SITE_ID', DEFAULT_MAIN_SITE_ID))

    # ========== LOGGING ==========
    BASE_DIR = Path(__file__).parent.parent.parent
    LOGS_FOLDER = BASE_DIR / 'data' / 'logs'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE = LOGS_FOLDER / 'app.log'
    LOG_JSON = False

    # ========== MONITORING ==========
    SENTRY_DSN = os.environ.get('SENTRY_DSN', '')

    # ========== PERFORMANCE ==========
    JSON_SORT_KEYS = False

class ProductionConfig(BaseConfig):
    """Production configuration"""

    ENV = 'production'
    DEBUG = False
    TESTING = False

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 20,
        'max_overflow': 30,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
        'pool_timeout': 30,
    }

    # Cache with longer timeout
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', 600))

    LOG_JSON = True

class DevelopmentConfig(BaseConfig):
    """Development configuration"""

    ENV = 'development'
    DEBUG = True
    TESTING = False

    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///development.db')
    SQLALCHEMY_ENGINE_OPTIONS = {}

    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'SimpleCache')

    # Logging - more verbose
    LOG_LEVEL = 'DEBUG'

class TestingConfig(BaseConfig):
    """Testing configuration"""

    ENV = 'testing'
    DEBUG = False
    TESTING = True

    SECRET_KEY = 'test-secret-key'
    JWT_SECRET_KEY = 'test-jwt-secret-key-with-enough-length'

    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}

    CACHE_TYPE = 'SimpleCache'
    CACHE_DEFAULT_TIMEOUT = 300

    STRIPE_SECRET_KEY = 'sk_test_123'
    STRIPE_API_VERSION = None

    GATEWAYS_ENABLED = list(DEFAULT_GATEWAYS_ENABLED)
    MAIN_SITE_ID = DEFAULT_MAIN_SITE_ID

    LOG_FILE = None
    SENTRY_DSN = ''

# Configuration dictionary for easy access
config = {
    'production': ProductionConfig,
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'default': ProductionConfig
}
