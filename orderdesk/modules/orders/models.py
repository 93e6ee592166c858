"""
Order shapes and validation.

Orders travel as plain dicts, exactly as the database returns them:

    {
        'id': '3f6c...',
        'items': [{'name': 'Latte', 'quantity': 2, 'customizations': {'milk': 'oat'}}],
        'total_amount': 9.5,
        'status': 'pending',
        'created_at': '2024-05-16T10:00:00+00:00',
        'updated_at': '2024-05-16T10:00:00+00:00',
        'customer_id': None,
        'profiles': {'full_name': 'Ada', 'email': 'ada@example.com'},
    }
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

PENDING = 'pending'
PROCESSING = 'processing'
COMPLETED = 'completed'
CANCELLED = 'cancelled'

ORDER_STATUSES = (PENDING, PROCESSING, COMPLETED, CANCELLED)

# Filter values accepted by the admin view
FILTER_ALL = 'all'
FILTER_CHOICES = (FILTER_ALL,) + ORDER_STATUSES

# Largest total a numeric(10, 2) column holds
MAX_TOTAL_AMOUNT = Decimal('99999999.99')


class OrderValidationError(ValueError):
    """Request data cannot become an order (maps to HTTP 400)."""


class OrderNotFound(LookupError):
    """No order row matched (maps to HTTP 404)."""


def utc_now_iso():
    return datetime.now(timezone.utc).isoformat()


def is_valid_status(status):
    return status in ORDER_STATUSES


def validate_items(items):
    """Items must be a non-empty list of {name, quantity[, customizations]}"""
    if not items or not isinstance(items, list):
        raise OrderValidationError('Invalid order data')

    for item in items:
        if not isinstance(item, dict):
            raise OrderValidationError('Invalid order data')

        name = item.get('name')
        if not isinstance(name, str) or not name.strip():
            raise OrderValidationError('Each item needs a name')

        quantity = item.get('quantity')
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise OrderValidationError('Each item needs a positive whole quantity')

        customizations = item.get('customizations')
        if customizations is not None and not isinstance(customizations, dict):
            raise OrderValidationError('Item customizations must be an object')

    return items


def parse_total_amount(value):
    """Return the submitted total unrounded; whole cents from 0 to MAX_TOTAL_AMOUNT"""
    if value is None or isinstance(value, bool):
        raise OrderValidationError('Total amount is required')

    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise OrderValidationError('Total amount must be a number')

    if not amount.is_finite():
        raise OrderValidationError('Total amount must be a number')
    if amount < 0:
        raise OrderValidationError('Total amount cannot be negative')
    if amount > MAX_TOTAL_AMOUNT:
        raise OrderValidationError('Total amount is too large')
    if amount.normalize().as_tuple().exponent < -2:
        raise OrderValidationError('Total amount cannot have more than two decimal places')

    return float(amount)


def has_profile_identity(order):
    """True if the embedded profile already carries a name or an email"""
    profile = order.get('profiles') or {}
    return bool(profile.get('full_name') or profile.get('email'))


def needs_enrichment(order):
    return bool(order.get('customer_id')) and not has_profile_identity(order)
