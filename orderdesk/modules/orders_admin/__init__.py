"""
Orders Admin Module
===================

Admin interface for order management.
Plugs into the admin dashboard module.

Provides:
- Order table with customer names filled in from the user directory
- Status filter (all / pending / processing / completed / cancelled)
- Inline status changes
- Silent auto-refresh every ORDERS_REFRESH_SECONDS
"""

from flask import Blueprint

orders_admin_bp = Blueprint(
    'orders_admin',
    __name__,
    url_prefix='/admin/orders',
    template_folder='templates'
)

from .feed import OrdersFeed, EnrichmentResult, filter_orders, enrich_orders
from . import display, routes

__all__ = ['orders_admin_bp', 'OrdersFeed', 'EnrichmentResult', 'filter_orders', 'enrich_orders']
