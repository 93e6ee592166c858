"""
Admin Dashboard Routes
======================

Staff sign-in is delegated to the auth provider. A sign-in only opens an
admin session when the provider accepts the credentials and the email is
listed in ADMIN_EMAILS.
"""

from flask import render_template, request, redirect, url_for, flash, session

from orderdesk.core.config import get_config_list
from orderdesk.core.gateway import GatewayError, get_gateway
from orderdesk.core.logging_service import LoggingService
from . import dashboard_bp
from .auth import admin_required


def _safe_next(next_page):
    """Only follow local redirects after login"""
    if next_page and next_page.startswith('/') and not next_page.startswith('//'):
        return next_page
    return None


def _allowed_admin(email):
    allowed = {e.lower() for e in get_config_list('ADMIN_EMAILS')}
    return email.lower() in allowed


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password', 'error')
            return render_template('dashboard/login.html'), 400

        if not _allowed_admin(email):
            LoggingService.log_security_event('Admin login rejected: not on ADMIN_EMAILS',
                                              {'email': email})
            flash('Invalid email or password', 'error')
            return render_template('dashboard/login.html'), 401

        try:
            user = get_gateway().sign_in_with_password(email, password)
        except GatewayError as e:
            LoggingService.error('admin', f"Auth provider error during login: {e.message}")
            flash('Sign-in is unavailable right now', 'error')
            return render_template('dashboard/login.html'), 502

        if not user:
            LoggingService.log_security_event('Admin login failed', {'email': email})
            flash('Invalid email or password', 'error')
            return render_template('dashboard/login.html'), 401

        session['admin_id'] = user.get('id') or email
        session['admin_email'] = email
        LoggingService.info('admin', f"Admin {email} signed in")

        next_page = _safe_next(request.args.get('next'))
        return redirect(next_page or url_for('orders_admin.orders_page'))

    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout')
def logout():
    """Admin logout route"""
    admin_email = session.pop('admin_email', None)
    session.pop('admin_id', None)
    if admin_email:
        LoggingService.info('admin', f"Admin {admin_email} signed out")
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/')
@admin_required
def dashboard():
    """The orders view is the admin landing page"""
    return redirect(url_for('orders_admin.orders_page'))
