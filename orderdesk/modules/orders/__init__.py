"""
Orders API Module
=================

REST endpoints for order records.

Provides:
- GET   /api/orders             list all orders, newest first (admin)
- POST  /api/orders             public order creation, always 'pending'
- PATCH /api/orders/<order_id>  status update (admin)
"""

from flask import Blueprint

orders_api_bp = Blueprint(
    'orders_api',
    __name__,
    url_prefix='/api/orders'
)

from . import routes

__all__ = ['orders_api_bp']
