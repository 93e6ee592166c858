"""Jinja filters for the orders table."""

from datetime import datetime

from . import orders_admin_bp


@orders_admin_bp.app_template_filter('customer_label')
def customer_label(order):
    profile = order.get('profiles') or {}
    return profile.get('full_name') or profile.get('email') or 'Anonymous'


@orders_admin_bp.app_template_filter('format_total')
def format_total(amount):
    try:
        return f"${float(amount):.2f}"
    except (TypeError, ValueError):
        return '$0.00'


@orders_admin_bp.app_template_filter('short_id')
def short_id(order_id):
    return str(order_id or '')[:8]


@orders_admin_bp.app_template_filter('format_customizations')
def format_customizations(customizations):
    """[(key, 'a, b'), ...] with list values joined"""
    formatted = []
    for key, value in (customizations or {}).items():
        if isinstance(value, (list, tuple)):
            value = ', '.join(str(v) for v in value)
        formatted.append((key, value))
    return formatted


@orders_admin_bp.app_template_filter('format_timestamp')
def format_timestamp(value):
    if not value:
        return ''
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00')).strftime('%Y-%m-%d %H:%M')
    except ValueError:
        return str(value)
