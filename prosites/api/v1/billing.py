"""
Billing API endpoints: site Stripe customers, cards, invoices, gateways
"""
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required

from prosites.core.base import ResultStatus, ServiceResult
from prosites.services.context import BillingContext
from prosites.services.customer_service import StripeCustomerService
from .schemas import SiteCustomerCreate, SiteCustomerUpdate, parse_body

logger = logging.getLogger(__name__)

billing_bp = Blueprint('billing', __name__)

RESULT_STATUS_CODES = {
    ResultStatus.OK: 200,
    ResultStatus.NOT_FOUND: 404,
    ResultStatus.VALIDATION_ERROR: 400,
    ResultStatus.VENDOR_ERROR: 502,
}

def _customer_service() -> StripeCustomerService:
    return StripeCustomerService(
        BillingContext.from_app(current_app),
        current_app.extensions.get('stripe_provider')
    )

def _result_response(result: ServiceResult, key: str):
    """Turn a service result into a JSON response"""
    if result:
        return jsonify({key: result.value}), 200

    return jsonify({
        'error': result.error,
        'status': result.status.value,
        'retryable': result.retryable,
        'details': result.error_details,
    }), RESULT_STATUS_CODES[result.status]

@billing_bp.route('/health', methods=['GET'])
def health():
    """Service health"""
    return jsonify({
        'status': 'ok',
        'stripe_configured': bool(current_app.config.get('STRIPE_SECRET_KEY'))
    }), 200

@billing_bp.route('/gateways', methods=['GET'])
@jwt_required()
def get_gateways():
    """Enabled gateways, with their currencies and, given ?blog_id=, whether the site last used them"""
    registry = current_app.extensions['gateway_registry']
    blog_id = request.args.get('blog_id', type=int)

    gateways = []
    for key, gateway in registry.get_gateways().items():
        info = {
            'key': key,
            'name': gateway.name,
            'only_active': registry.is_only_active(key),
            'currencies': registry.currencies_for(key),
        }
        if blog_id:
            info['last_used'] = registry.is_last_gateway_used(blog_id, key)
        gateways.append(info)

    return jsonify({'gateways': gateways}), 200

@billing_bp.route('/sites/<int:blog_id>/customer', methods=['GET'])
@jwt_required()
def get_site_customer(blog_id):
    """Stored binding and Stripe customer of a site"""
    force = request.args.get('force', '').lower() in ('1', 'true', 'yes')
    service = _customer_service()

    binding = service.get_db_customer(blog_id, force=force)
    if not binding.has_customer:
        return jsonify({'binding': binding.to_dict(), 'customer': None}), 404

    result = service.get_customer(binding.customer_id, force=force)
    response, status_code = _result_response(result, 'customer')
    payload = response.get_json()
    payload['binding'] = binding.to_dict()

    return jsonify(payload), status_code

@billing_bp.route('/sites/<int:blog_id>/customer', methods=['PUT'])
@jwt_required()
def put_site_customer(blog_id):
    """Store the Stripe customer/subscription IDs of a site"""
    body = parse_body(SiteCustomerUpdate, request.get_json(silent=True))

    service = _customer_service()
    if not service.set_db_customer(blog_id, body.customer_id, body.subscription_id or ''):
        return jsonify({'error': 'Failed to store Stripe customer'}), 500

    return jsonify({'binding': service.get_db_customer(blog_id).to_dict()}), 200

@billing_bp.route('/sites/<int:blog_id>/customer', methods=['POST'])
@jwt_required()
def post_site_customer(blog_id):
    """Get or create the Stripe customer of a site"""
    body = parse_body(SiteCustomerCreate, request.get_json(silent=True))

    service = _customer_service()
    result = service.set_blog_customer(body.email, blog_id, body.token, persist=True)

    response, status_code = _result_response(result, 'customer')
    if service.context.errors.has():
        payload = response.get_json()
        payload['messages'] = service.context.errors.to_dict()
        return jsonify(payload), status_code

    return response, status_code

@billing_bp.route('/sites/<int:blog_id>/card', methods=['GET'])
@jwt_required()
def get_site_card(blog_id):
    """Default payment source of a site's customer"""
    service = _customer_service()
    binding = service.get_db_customer(blog_id)

    if not binding.has_customer:
        return jsonify({'error': f'Site {blog_id} has no Stripe customer'}), 404

    return _result_response(service.default_card(binding.customer_id), 'card')

@billing_bp.route('/sites/<int:blog_id>/invoices/last', methods=['GET'])
@jwt_required()
def get_last_invoice(blog_id):
    """Most recent invoice of a site's customer"""
    service = _customer_service()
    binding = service.get_db_customer(blog_id)

    if not binding.has_customer:
        return jsonify({'error': f'Site {blog_id} has no Stripe customer'}), 404

    return _result_response(service.last_invoice(binding.customer_id), 'invoice')

@billing_bp.route('/sites/<int:blog_id>/invoices/upcoming', methods=['GET'])
@jwt_required()
def get_upcoming_invoice(blog_id):
    """Projected next invoice of a site's customer"""
    service = _customer_service()
    binding = service.get_db_customer(blog_id)

    if not binding.has_customer:
        return jsonify({'error': f'Site {blog_id} has no Stripe customer'}), 404

    result = service.upcoming_invoice(binding.customer_id, subscription_id=binding.subscription_id or None)
    return _result_response(result, 'invoice')
