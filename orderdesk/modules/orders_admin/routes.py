"""
Orders Admin Routes
===================

The page renders every order server side and hides the rows outside the
requested status. The inline script filters those rows in the browser, polls
/api/feed for all orders and swaps in freshly rendered rows.
"""

from flask import current_app, jsonify, render_template, request

from orderdesk.core.config import get_config_value
from orderdesk.core.gateway import GatewayError, get_gateway
from orderdesk.core.logging_service import LoggingService
from orderdesk.modules.dashboard.auth import admin_api_required, admin_required
from orderdesk.modules.orders.models import (
    FILTER_ALL,
    FILTER_CHOICES,
    ORDER_STATUSES,
    OrderNotFound,
    OrderValidationError,
)
from orderdesk.modules.orders.store import update_order_status
from . import orders_admin_bp
from .feed import EXTENSION_KEY, OrdersFeed, count_by_status, filter_orders


def get_feed():
    """Return the app's feed, creating it on first use"""
    feed = current_app.extensions.get(EXTENSION_KEY)
    if feed is None:
        workers = int(get_config_value('ORDERS_ENRICH_WORKERS', 8))
        feed = OrdersFeed(get_gateway(), max_workers=workers)
        current_app.extensions[EXTENSION_KEY] = feed
    return feed


def _requested_filter():
    status = request.args.get('status', FILTER_ALL).strip().lower() or FILTER_ALL
    if status not in FILTER_CHOICES:
        return None
    return status


@orders_admin_bp.route('/')
@admin_required
def orders_page():
    """Order management page"""
    status = _requested_filter() or FILTER_ALL
    orders, error = [], None

    try:
        orders = get_feed().refresh()
    except GatewayError as e:
        LoggingService.error('orders_admin', f"Error fetching orders: {e.message}")
        error = e.message or 'An unexpected error occurred while fetching orders.'
    except Exception as e:
        LoggingService.log_error_with_traceback('orders_admin', e)
        error = 'An unexpected error occurred while fetching orders.'

    return render_template(
        'orders_admin/orders.html',
        orders=orders,
        counts=count_by_status(orders),
        current_filter=status,
        filter_choices=FILTER_CHOICES,
        statuses=ORDER_STATUSES,
        error=error,
        refresh_seconds=int(get_config_value('ORDERS_REFRESH_SECONDS', 30)),
    )


@orders_admin_bp.route('/api/feed')
@admin_api_required
def api_feed():
    """Enriched orders filtered by ?status=, plus rows for the whole set"""
    status = _requested_filter()
    if status is None:
        return jsonify({'success': False, 'error': 'Unknown status filter'}), 400

    feed = get_feed()
    try:
        orders = feed.refresh()
    except GatewayError as e:
        LoggingService.error('orders_admin', f"Error fetching orders: {e.message}")
        return jsonify({'success': False, 'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('orders_admin', e)
        return jsonify({
            'success': False,
            'error': 'An unexpected error occurred while fetching orders.'
        }), 500

    visible = filter_orders(orders, status)
    return jsonify({
        'success': True,
        'filter': status,
        'orders': visible,
        'counts': count_by_status(orders),
        'refreshed_at': feed.refreshed_at,
        'rows_html': render_template('orders_admin/_rows.html', orders=orders,
                                     current_filter=status, statuses=ORDER_STATUSES),
    })


@orders_admin_bp.route('/api/orders/<order_id>/status', methods=['POST'])
@admin_api_required
def api_update_status(order_id):
    """Inline status change from the table"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        order = update_order_status(get_gateway(), order_id, data.get('status'))
    except OrderValidationError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except OrderNotFound:
        return jsonify({'success': False, 'error': 'Order not found'}), 404
    except GatewayError as e:
        LoggingService.error('orders_admin', f"Error updating order status: {e.message}")
        return jsonify({'success': False, 'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('orders_admin', e)
        return jsonify({'success': False, 'error': 'Failed to update order status'}), 500

    get_feed().apply_status(order_id, order.get('status'), order.get('updated_at'))
    LoggingService.info('orders_admin', f"Order {order_id} status set to {order.get('status')}")
    return jsonify({'success': True, 'order': order})
