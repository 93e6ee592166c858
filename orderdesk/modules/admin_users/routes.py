from flask import jsonify

from orderdesk.core.gateway import GatewayError, GatewayNotFound, get_gateway
from orderdesk.core.logging_service import LoggingService
from orderdesk.modules.dashboard.auth import admin_api_required
from . import admin_users_bp

USERS_PAGE_SIZE = 100


@admin_users_bp.route('', methods=['GET'])
@admin_api_required
def api_list_users():
    """Every user in the directory, across all pages"""
    try:
        users = list(get_gateway().iter_users(per_page=USERS_PAGE_SIZE))
        return jsonify({'users': users})

    except GatewayError as e:
        LoggingService.error('admin_users', f"Error fetching users: {e.message}")
        return jsonify({'error': 'Failed to fetch users'}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('admin_users', e)
        return jsonify({'error': 'An unexpected error occurred'}), 500


@admin_users_bp.route('/<user_id>', methods=['GET'])
@admin_api_required
def api_get_user(user_id):
    """One user, including user_metadata"""
    try:
        user = get_gateway().get_user(user_id)
        return jsonify({'user': user})

    except GatewayNotFound:
        return jsonify({'error': 'User not found'}), 404
    except GatewayError as e:
        LoggingService.error('admin_users', f"Error fetching user {user_id}: {e.message}")
        return jsonify({'error': 'Failed to fetch user'}), 500
    except Exception as e:
        LoggingService.log_error_with_traceback('admin_users', e)
        return jsonify({'error': 'An unexpected error occurred'}), 500
