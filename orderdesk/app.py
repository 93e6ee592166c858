"""
OrderDesk application
=====================

Run with:
    python -m orderdesk.app

Or under a WSGI server:
    gunicorn 'orderdesk.app:create_app()'

Visit:
    http://localhost:5000/admin/orders  - Orders panel
    http://localhost:5000/admin/login   - Admin login
"""

import logging

from flask import Flask

from orderdesk import OrderDesk
from orderdesk.core.config import Config


def create_app(config=None, gateway=None):
    """Build a Flask app with every OrderDesk module registered"""
    logging.basicConfig(level=logging.INFO)

    app = Flask(__name__)
    app.config['SECRET_KEY'] = Config.SECRET_KEY

    # Session security
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['SESSION_COOKIE_SECURE'] = not (app.debug or (config or {}).get('TESTING'))

    if config:
        app.config.update(config)

    OrderDesk(app, gateway=gateway)
    return app


if __name__ == '__main__':
    print("[ORDERDESK] Starting on port %s..." % Config.port)
    create_app().run(debug=True, port=Config.port, host='0.0.0.0')
