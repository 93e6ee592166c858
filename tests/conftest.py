"""
Shared fixtures for the OrderDesk tests.

FakeGateway stands in for SupabaseGateway with an in-memory orders table and
user directory, so route tests never touch the network.
"""

import shutil
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from orderdesk.app import create_app
from orderdesk.core.gateway import GatewayError, GatewayNotFound

ADMIN_EMAIL = 'admin@example.com'


class FakeGateway:
    """In-memory implementation of the gateway interface"""

    configured = True

    def __init__(self):
        self.tables = {'orders': []}
        self.users = {}
        self.rpc_calls = []
        self.user_lookups = []
        self.failing_users = set()
        self.select_error = None
        self.insert_error = None
        self.update_error = None
        self.rpc_error = None
        self.sign_ins = {}
        self._lock = threading.Lock()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self):
        self._clock += timedelta(minutes=1)
        return self._clock.isoformat()

    # Tables

    def select(self, table, order_by=None, descending=False, filters=None):
        if self.select_error:
            raise self.select_error
        rows = [dict(r) for r in self.tables.get(table, [])]
        for column, value in (filters or {}).items():
            rows = [r for r in rows if r.get(column) == value]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or '', reverse=descending)
        return rows

    def insert(self, table, row):
        if self.insert_error:
            raise self.insert_error
        stamp = self._tick()
        stored = {
            'id': uuid4().hex,
            'created_at': stamp,
            'updated_at': stamp,
            'customer_id': None,
            'profiles': None,
        }
        stored.update(row)
        self.tables.setdefault(table, []).append(stored)
        return [dict(stored)]

    def update(self, table, values, filters):
        if self.update_error:
            raise self.update_error
        updated = []
        for row in self.tables.get(table, []):
            if all(row.get(k) == v for k, v in filters.items()):
                row.update(values)
                updated.append(dict(row))
        return updated

    def rpc(self, function, params=None):
        self.rpc_calls.append(function)
        if self.rpc_error:
            raise self.rpc_error
        return None

    # Users

    def add_user(self, user_id, email=None, **metadata):
        self.users[user_id] = {'id': user_id, 'email': email, 'user_metadata': metadata}

    def iter_users(self, per_page=50):
        return iter(list(self.users.values()))

    def get_user(self, user_id):
        with self._lock:
            self.user_lookups.append(user_id)
        if user_id in self.failing_users:
            raise GatewayError('directory unavailable', 503)
        if user_id not in self.users:
            raise GatewayNotFound(f'User {user_id} not found', 404)
        return dict(self.users[user_id])

    def sign_in_with_password(self, email, password):
        if self.sign_ins.get(email) == password:
            return {'id': f'user-{email}', 'email': email}
        return None

    # Helpers

    def seed_order(self, **fields):
        row = {
            'items': [{'name': 'Espresso', 'quantity': 1}],
            'total_amount': 3.0,
            'status': 'pending',
        }
        row.update(fields)
        return self.insert('orders', row)[0]


@pytest.fixture
def tmp_log_dir():
    """Temporary directory for the app_logs database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="orderdesk-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app_config(tmp_log_dir):
    return {
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'LOG_DB': f'{tmp_log_dir}/app_logs.db',
        'ORDERDESK_BOOTSTRAP_ON_STARTUP': False,
        'ADMIN_EMAILS': [ADMIN_EMAIL],
        'SESSION_COOKIE_SECURE': False,
    }


@pytest.fixture
def app(app_config, gateway):
    return create_app(app_config, gateway=gateway)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client with an admin session already open"""
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['admin_id'] = 'admin-1'
        sess['admin_email'] = ADMIN_EMAIL
    return client
