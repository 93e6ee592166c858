"""
Orders API Routes
=================

Thin handlers over the order store: marshal JSON in and out, map store
errors onto HTTP status codes.
"""

from flask import request, jsonify

from orderdesk.core.gateway import GatewayError, get_gateway
from orderdesk.core.logging_service import LoggingService
from orderdesk.modules.dashboard.auth import admin_api_required
from . import orders_api_bp
from .models import OrderNotFound, OrderValidationError
from .store import create_order, list_orders, update_order_status


@orders_api_bp.route('', methods=['GET'])
@admin_api_required
def api_list_orders():
    """List every order, newest first"""
    try:
        orders = list_orders(get_gateway())
        return jsonify({'orders': orders})

    except GatewayError as e:
        LoggingService.error('orders', f"Error fetching orders: {e.message}")
        return jsonify({'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('orders', e)
        return jsonify({'error': 'Failed to fetch orders'}), 500


@orders_api_bp.route('', methods=['POST'])
def api_create_order():
    """Public order creation"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        order = create_order(
            get_gateway(),
            data.get('items'),
            data.get('totalAmount'),
            customer_id=data.get('customerId'),
        )
        LoggingService.info('orders', f"Order created: {order.get('id')}")
        return jsonify({
            'success': True,
            'message': 'Order created successfully',
            'order': order
        })

    except OrderValidationError as e:
        return jsonify({'error': str(e)}), 400
    except GatewayError as e:
        LoggingService.error('orders', f"Error creating order: {e.message}", {'request_body': data})
        return jsonify({'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('orders', e, {'request_body': data})
        return jsonify({'error': 'Failed to create order'}), 500


@orders_api_bp.route('/<order_id>', methods=['PATCH'])
@admin_api_required
def api_update_order_status(order_id):
    """Change an order's status"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        order = update_order_status(get_gateway(), order_id, data.get('status'))
        LoggingService.info('orders', f"Order {order_id} status set to {order.get('status')}")
        return jsonify({
            'success': True,
            'message': 'Order status updated successfully',
            'order': order
        })

    except OrderValidationError as e:
        return jsonify({'error': str(e)}), 400
    except OrderNotFound:
        return jsonify({'error': 'Order not found'}), 404
    except GatewayError as e:
        LoggingService.error('orders', f"Error updating order status: {e.message}")
        return jsonify({'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('orders', e)
        return jsonify({'error': 'Failed to update order status'}), 500
