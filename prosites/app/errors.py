"""
Error handlers for the Pro Sites billing API
"""
import logging
from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from prosites.app.extensions import db
from prosites.core.exceptions import ProSitesError

logger = logging.getLogger(__name__)

def register_error_handlers(app):
    """Register error handlers for the application"""

    @app.errorhandler(ProSitesError)
    def handle_prosites_error(error):
        """Application errors carry their own status and body"""
        if error.status_code >= 500:
            logger.error(f"{error.code}: {request.path} - {error.message}")
        else:
            logger.warning(f"{error.code}: {request.path} - {error.message}")

        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        """HTTP errors raised by Flask/werkzeug"""
        logger.info(f"{error.code} {error.name}: {request.method} {request.path}")

        return jsonify({
            'error': error.name,
            'message': error.description,
            'code': error.code
        }), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        """Database errors"""
        db.session.rollback()
        logger.error(f"Database error: {request.path} - {str(error)}", exc_info=True)

        return jsonify({
            'error': 'Database Error',
            'message': 'A database error occurred',
            'code': 500
        }), 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Anything else"""
        logger.error(f"Unhandled error: {request.path} - {str(error)}", exc_info=True)

        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred',
            'code': 500
        }), 500
