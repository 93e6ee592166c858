"""
Dashboard Module
================

Admin session boundary for OrderDesk.

Provides:
- Staff sign-in against the auth provider (email must be on ADMIN_EMAILS)
- Logout
- admin_required / admin_api_required decorators used by every elevated route

This is the foundation module the other admin features plug into.
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so url_for('admin.login') works everywhere
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

from .auth import admin_required, admin_api_required
from . import routes

__all__ = ['dashboard_bp', 'admin_required', 'admin_api_required']
