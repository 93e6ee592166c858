"""
OrderDesk - Flask admin panel for e-commerce orders
===================================================

Admin panel and REST layer over a Supabase-hosted orders table:
- Order listing, public order creation and status updates
- Customer names filled in from the auth provider's user directory
- Idempotent orders table bootstrap at startup
- Session-guarded admin pages and APIs

Usage:
    from flask import Flask
    from orderdesk import OrderDesk

    app = Flask(__name__)
    OrderDesk(app)
"""

__version__ = '0.1.0'

from flask_cors import CORS

from .core.config import Config
from .core.gateway import EXTENSION_KEY as GATEWAY_KEY, SupabaseGateway
from .modules.admin_users import admin_users_bp
from .modules.dashboard import dashboard_bp
from .modules.ops import ops_health_bp
from .modules.orders import orders_api_bp
from .modules.orders_admin import orders_admin_bp
from .modules.orders_admin.feed import EXTENSION_KEY as FEED_KEY, OrdersFeed
from .modules.setup import run_startup_bootstrap, setup_bp

MODULES = {
    'dashboard': dashboard_bp,
    'orders': orders_api_bp,
    'admin_users': admin_users_bp,
    'setup': setup_bp,
    'orders_admin': orders_admin_bp,
    'ops': ops_health_bp,
}


class OrderDesk:
    """Flask extension that registers every OrderDesk module on an app"""

    def __init__(self, app=None, gateway=None):
        self.gateway = None
        self._registered = []
        if app is not None:
            self.init_app(app, gateway=gateway)

    def init_app(self, app, gateway=None):
        self._apply_defaults(app)

        if gateway is None:
            gateway = SupabaseGateway(app=app)
        else:
            app.extensions[GATEWAY_KEY] = gateway
        self.gateway = gateway

        app.extensions[FEED_KEY] = OrdersFeed(
            gateway, max_workers=int(app.config['ORDERS_ENRICH_WORKERS'])
        )

        for name, blueprint in MODULES.items():
            app.register_blueprint(blueprint)
            self._registered.append(name)

        origins = app.config.get('CORS_ORIGINS') or []
        if origins:
            # Storefronts on other origins may only create orders
            CORS(app, resources={r'/api/orders$': {'origins': origins, 'methods': ['POST']}})

        @app.context_processor
        def inject_orderdesk():
            return {'brand_name': app.config.get('ORDERDESK_BRAND_NAME', 'OrderDesk')}

        app.extensions['orderdesk'] = self

        if app.config.get('ORDERDESK_BOOTSTRAP_ON_STARTUP'):
            run_startup_bootstrap(app, gateway)

    @staticmethod
    def _apply_defaults(app):
        """Fill app.config from Config without overriding host settings"""
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))
        if not app.config.get('SECRET_KEY') and Config.SECRET_KEY:
            app.config['SECRET_KEY'] = Config.SECRET_KEY
        app.config.setdefault('ORDERDESK_BRAND_NAME', 'OrderDesk')

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['OrderDesk', 'Config', 'SupabaseGateway']
