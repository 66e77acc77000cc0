"""
Flask extensions initialization
"""
from flask_sqlalchemy import SQLAlchemy
from flask_caching import Cache
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager

# Database
db = SQLAlchemy()
migrate = Migrate()

# Caching
cache = Cache()

# API authentication
jwt = JWTManager()

# Export all extensions
__all__ = [
    'db', 'migrate', 'cache', 'jwt'
]
