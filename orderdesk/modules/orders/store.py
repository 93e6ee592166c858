"""
Order store operations on top of the Supabase gateway.

Shared by the REST endpoints and the admin orders view so both apply the
same validation and timestamps.
"""

from orderdesk.core.config import get_config_flag, get_config_value
from .models import (
    PENDING,
    OrderNotFound,
    OrderValidationError,
    is_valid_status,
    parse_total_amount,
    utc_now_iso,
    validate_items,
)


def orders_table():
    return get_config_value('ORDERS_TABLE', 'orders')


def list_orders(gateway):
    """All orders, newest first"""
    return gateway.select(orders_table(), order_by='created_at', descending=True)


def create_order(gateway, items, total_amount, customer_id=None):
    """Validate and insert a new order; status is always pending"""
    validate_items(items)
    row = {
        'items': items,
        'total_amount': parse_total_amount(total_amount),
        'status': PENDING,
    }
    if customer_id:
        row['customer_id'] = customer_id

    inserted = gateway.insert(orders_table(), row)
    return inserted[0] if inserted else row


def update_order_status(gateway, order_id, status):
    """Set a new status and refresh updated_at; returns the updated row"""
    if not status:
        raise OrderValidationError('Status is required')

    if get_config_flag('ORDERS_STRICT_STATUS', True) and not is_valid_status(status):
        raise OrderValidationError(f'Invalid status: {status}')

    updated = gateway.update(
        orders_table(),
        {'status': status, 'updated_at': utc_now_iso()},
        {'id': order_id},
    )
    if not updated:
        raise OrderNotFound(f'Order {order_id} not found')
    return updated[0]
