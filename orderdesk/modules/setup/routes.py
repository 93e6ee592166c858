from flask import jsonify

from orderdesk.core.gateway import GatewayError, get_gateway
from orderdesk.core.logging_service import LoggingService
from orderdesk.modules.dashboard.auth import admin_api_required
from . import setup_bp
from .bootstrap import create_orders_table


@setup_bp.route('/orders-table', methods=['POST'])
@admin_api_required
def api_setup_orders_table():
    """Create the orders table if it does not exist yet"""
    try:
        create_orders_table(get_gateway())
        LoggingService.info('setup', 'Orders table setup requested over HTTP')
        return jsonify({'success': True, 'message': 'Orders table created successfully'})

    except GatewayError as e:
        LoggingService.error('setup', f"Error creating orders table: {e.message}")
        return jsonify({'error': e.message}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('setup', e)
        return jsonify({'error': 'Failed to create orders table'}), 500
