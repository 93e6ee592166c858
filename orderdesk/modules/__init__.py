"""
OrderDesk Modules
=================

Flask blueprint modules for the orders admin panel and its REST layer.
"""

__all__ = ['admin_users', 'dashboard', 'ops', 'orders', 'orders_admin', 'setup']
