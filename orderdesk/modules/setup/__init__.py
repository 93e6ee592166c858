"""
Setup Module
============

Idempotent schema bootstrap for the orders table.

- ensure_orders_table(gateway): call the create-if-not-exists procedure
- run_startup_bootstrap(app): once per process, failures logged, never fatal
- POST /api/admin/setup/orders-table: the same routine over HTTP (admin)
"""

from flask import Blueprint

setup_bp = Blueprint(
    'setup',
    __name__,
    url_prefix='/api/admin/setup'
)

from .bootstrap import ensure_orders_table, run_startup_bootstrap
from . import routes

__all__ = ['setup_bp', 'ensure_orders_table', 'run_startup_bootstrap']
