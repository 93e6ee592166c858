"""
Supabase Gateway
================

Single configured handle on the managed database (PostgREST), its stored
procedures (RPC) and the administrative user directory (GoTrue).

Uses service-role credentials, so it must only ever run server side.
One gateway is built per Flask app and kept on ``app.extensions``; route
handlers fetch it with :func:`get_gateway`.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

import requests
from flask import current_app
from requests.utils import quote

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'orderdesk_gateway'


class GatewayError(Exception):
    """A call to the managed database or its user directory failed."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class GatewayNotFound(GatewayError):
    """The requested row or user does not exist."""


class GatewayConfigError(GatewayError):
    """The gateway has no URL or service key."""


def _error_message(response):
    """Pull the provider's message out of an error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f'HTTP {response.status_code}'

    if isinstance(body, dict):
        for key in ('message', 'msg', 'error_description', 'error'):
            if body.get(key):
                return str(body[key])
    return f'HTTP {response.status_code}'


class SupabaseGateway:
    """
    Thin client for Supabase's REST, RPC and auth-admin endpoints.

    Configuration (Flask app.config, read by init_app):
        SUPABASE_URL: Project base URL, e.g. https://xyz.supabase.co
        SUPABASE_SERVICE_ROLE_KEY: Service-role key (elevated)
        SUPABASE_ANON_KEY: Public key used for password sign-in (optional)
        SUPABASE_TIMEOUT: Per-request timeout in seconds (default 15)
    """

    def __init__(self, url: str = None, service_key: str = None, anon_key: str = None,
                 timeout: int = 15, session: requests.Session = None, app=None):
        self.url = (url or '').rstrip('/')
        self.service_key = service_key
        self.anon_key = anon_key
        self.timeout = timeout
        self.session = session or requests.Session()

        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Read credentials from the app config and register on the app"""
        self.url = (app.config.get('SUPABASE_URL') or self.url or '').rstrip('/')
        self.service_key = app.config.get('SUPABASE_SERVICE_ROLE_KEY') or self.service_key
        self.anon_key = app.config.get('SUPABASE_ANON_KEY') or self.anon_key
        self.timeout = int(app.config.get('SUPABASE_TIMEOUT') or self.timeout)

        app.extensions[EXTENSION_KEY] = self

        if self.configured:
            logger.info(f"Supabase gateway configured for {self.url}")
        else:
            logger.warning("Supabase gateway is missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY")

    @property
    def configured(self) -> bool:
        return bool(self.url and self.service_key)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, key=None, extra=None):
        key = key or self.service_key
        headers = {
            'apikey': key,
            'Authorization': f'Bearer {key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method, path, params=None, json=None, headers=None, key=None):
        if not self.configured:
            raise GatewayConfigError('Supabase gateway is not configured')

        url = f'{self.url}{path}'
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(key, headers),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GatewayError(f'Request to Supabase failed: {e}') from e

        if response.status_code == 404:
            raise GatewayNotFound(_error_message(response), 404)
        if not response.ok:
            raise GatewayError(_error_message(response), response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError('Supabase returned a non-JSON response', response.status_code) from e

    @staticmethod
    def _filter_params(filters):
        # PostgREST equality filters: ?column=eq.value
        return {column: f'eq.{value}' for column, value in (filters or {}).items()}

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def select(self, table: str, order_by: str = None, descending: bool = False,
               filters: Dict[str, Any] = None) -> List[Dict[str, Any]]:
        """Select all columns of matching rows"""
        params = {'select': '*'}
        params.update(self._filter_params(filters))
        if order_by:
            params['order'] = f"{order_by}.{'desc' if descending else 'asc'}"
        return self._request('GET', f'/rest/v1/{table}', params=params) or []

    def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert one row and return the stored representation"""
        return self._request(
            'POST',
            f'/rest/v1/{table}',
            json=row,
            headers={'Prefer': 'return=representation'},
        ) or []

    def update(self, table: str, values: Dict[str, Any],
               filters: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Update matching rows and return them; an empty list means nothing matched"""
        if not filters:
            raise ValueError('update() requires at least one filter')
        return self._request(
            'PATCH',
            f'/rest/v1/{table}',
            params=self._filter_params(filters),
            json=values,
            headers={'Prefer': 'return=representation'},
        ) or []

    def rpc(self, function: str, params: Dict[str, Any] = None) -> Any:
        """Call a Postgres function exposed over PostgREST"""
        return self._request('POST', f'/rest/v1/rpc/{function}', json=params or {})

    # ------------------------------------------------------------------
    # Auth admin (user directory)
    # ------------------------------------------------------------------

    def list_users(self, page: int = 1, per_page: int = 50) -> List[Dict[str, Any]]:
        """Return one page of users from the auth provider"""
        data = self._request('GET', '/auth/v1/admin/users',
                             params={'page': page, 'per_page': per_page})
        if isinstance(data, dict):
            return data.get('users', [])
        return data or []

    def iter_users(self, per_page: int = 50) -> Iterator[Dict[str, Any]]:
        """Walk every page of the user directory until a short page comes back"""
        page = 1
        while True:
            users = self.list_users(page=page, per_page=per_page)
            for user in users:
                yield user
            if len(users) < per_page:
                return
            page += 1

    def get_user(self, user_id: str) -> Dict[str, Any]:
        """Return one user; raises GatewayNotFound if the id is unknown"""
        # One path segment, whatever characters the id holds
        data = self._request('GET', f"/auth/v1/admin/users/{quote(str(user_id), safe='')}")
        if not data:
            raise GatewayNotFound(f'User {user_id} not found', 404)
        return data

    def sign_in_with_password(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Check staff credentials against the auth provider.

        Returns the provider's user record, or None if the credentials are rejected.
        """
        try:
            data = self._request(
                'POST',
                '/auth/v1/token',
                params={'grant_type': 'password'},
                json={'email': email, 'password': password},
                key=self.anon_key or self.service_key,
            )
        except GatewayError as e:
            if e.status_code in (400, 401, 403):
                return None
            raise
        return (data or {}).get('user')


def get_gateway() -> SupabaseGateway:
    """Return the gateway registered on the current app"""
    gateway = current_app.extensions.get(EXTENSION_KEY)
    if gateway is None:
        raise GatewayConfigError('Supabase gateway has not been initialised on this app')
    return gateway
