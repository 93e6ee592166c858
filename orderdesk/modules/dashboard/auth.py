from functools import wraps

from flask import jsonify, redirect, request, session, url_for


def is_admin():
    return 'admin_id' in session


def admin_required(f):
    """Decorator to require admin login on pages"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_admin():
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def admin_api_required(f):
    """Decorator to require admin login on JSON endpoints"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_admin():
            return jsonify({'success': False, 'error': 'Authentication required'}), 401
        return f(*args, **kwargs)
    return decorated_function
