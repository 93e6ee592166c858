"""
Admin Users Module
==================

Read-only view of the auth provider's user directory, used to put names on
orders that arrive without profile data. Runs with service-role credentials,
so every route sits behind the admin session.
"""

from flask import Blueprint

admin_users_bp = Blueprint(
    'admin_users',
    __name__,
    url_prefix='/api/admin/users'
)

from . import routes

__all__ = ['admin_users_bp']
