import json
from unittest.mock import MagicMock

import pytest
import requests

from orderdesk.core.gateway import (
    GatewayConfigError,
    GatewayError,
    GatewayNotFound,
    SupabaseGateway,
)


def _response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.content = b'' if body is None else json.dumps(body).encode()
    resp.text = resp.content.decode()
    resp.json.return_value = body
    return resp


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def gateway(session):
    return SupabaseGateway(url='https://proj.supabase.co/', service_key='service-key',
                           anon_key='anon-key', session=session)


def _call(session, index=-1):
    args, kwargs = session.request.call_args_list[index]
    return args[0], args[1], kwargs


def test_select_orders_newest_first(gateway, session):
    session.request.return_value = _response(body=[{'id': '1'}])

    rows = gateway.select('orders', order_by='created_at', descending=True)

    method, url, kwargs = _call(session)
    assert rows == [{'id': '1'}]
    assert method == 'GET'
    assert url == 'https://proj.supabase.co/rest/v1/orders'
    assert kwargs['params'] == {'select': '*', 'order': 'created_at.desc'}
    assert kwargs['headers']['apikey'] == 'service-key'
    assert kwargs['headers']['Authorization'] == 'Bearer service-key'
    assert kwargs['timeout'] == 15


def test_insert_asks_for_representation(gateway, session):
    session.request.return_value = _response(201, [{'id': '1', 'status': 'pending'}])

    rows = gateway.insert('orders', {'status': 'pending'})

    method, url, kwargs = _call(session)
    assert rows[0]['status'] == 'pending'
    assert method == 'POST'
    assert kwargs['json'] == {'status': 'pending'}
    assert kwargs['headers']['Prefer'] == 'return=representation'


def test_update_uses_equality_filters(gateway, session):
    session.request.return_value = _response(body=[])

    rows = gateway.update('orders', {'status': 'completed'}, {'id': 'abc'})

    method, url, kwargs = _call(session)
    assert rows == []
    assert method == 'PATCH'
    assert kwargs['params'] == {'id': 'eq.abc'}


def test_update_without_filters_is_refused(gateway, session):
    with pytest.raises(ValueError):
        gateway.update('orders', {'status': 'completed'}, {})
    session.request.assert_not_called()


def test_rpc_with_empty_body(gateway, session):
    session.request.return_value = _response(204)

    assert gateway.rpc('create_orders_table_if_not_exists') is None

    method, url, kwargs = _call(session)
    assert url.endswith('/rest/v1/rpc/create_orders_table_if_not_exists')
    assert kwargs['json'] == {}


def test_error_message_passed_through(gateway, session):
    session.request.return_value = _response(400, {'code': '23514', 'message': 'violates check constraint'})

    with pytest.raises(GatewayError) as excinfo:
        gateway.select('orders')

    assert excinfo.value.message == 'violates check constraint'
    assert excinfo.value.status_code == 400


def test_not_found_raises_specific_error(gateway, session):
    session.request.return_value = _response(404, {'msg': 'User not found'})

    with pytest.raises(GatewayNotFound) as excinfo:
        gateway.get_user('missing')

    assert excinfo.value.message == 'User not found'


def test_transport_error_wrapped(gateway, session):
    session.request.side_effect = requests.ConnectionError('connection refused')

    with pytest.raises(GatewayError) as excinfo:
        gateway.select('orders')

    assert 'connection refused' in excinfo.value.message


def test_unconfigured_gateway_raises_on_use():
    gateway = SupabaseGateway(session=MagicMock())

    assert not gateway.configured
    with pytest.raises(GatewayConfigError):
        gateway.select('orders')


def test_iter_users_walks_every_page(gateway, session):
    pages = {
        1: [{'id': 'u1'}, {'id': 'u2'}],
        2: [{'id': 'u3'}, {'id': 'u4'}],
        3: [{'id': 'u5'}],
    }
    session.request.side_effect = lambda method, url, **kw: _response(
        body={'users': pages[kw['params']['page']], 'aud': 'authenticated'}
    )

    users = list(gateway.iter_users(per_page=2))

    assert [u['id'] for u in users] == ['u1', 'u2', 'u3', 'u4', 'u5']
    assert session.request.call_count == 3


def test_iter_users_stops_on_empty_page(gateway, session):
    session.request.side_effect = [
        _response(body={'users': [{'id': 'u1'}, {'id': 'u2'}]}),
        _response(body={'users': []}),
    ]

    assert len(list(gateway.iter_users(per_page=2))) == 2
    assert session.request.call_count == 2


def test_get_user(gateway, session):
    session.request.return_value = _response(body={'id': 'u1', 'user_metadata': {'full_name': 'Ada'}})

    user = gateway.get_user('u1')

    method, url, kwargs = _call(session)
    assert url == 'https://proj.supabase.co/auth/v1/admin/users/u1'
    assert user['user_metadata']['full_name'] == 'Ada'


def test_sign_in_uses_anon_key(gateway, session):
    session.request.return_value = _response(body={'access_token': 't', 'user': {'id': 'u1'}})

    user = gateway.sign_in_with_password('admin@example.com', 'pw')

    method, url, kwargs = _call(session)
    assert user == {'id': 'u1'}
    assert kwargs['params'] == {'grant_type': 'password'}
    assert kwargs['headers']['apikey'] == 'anon-key'


def test_sign_in_rejected_returns_none(gateway, session):
    session.request.return_value = _response(400, {'error_description': 'Invalid login credentials'})

    assert gateway.sign_in_with_password('admin@example.com', 'bad') is None


def test_sign_in_provider_failure_raises(gateway, session):
    session.request.return_value = _response(500, {'message': 'database error'})

    with pytest.raises(GatewayError):
        gateway.sign_in_with_password('admin@example.com', 'pw')


def test_get_user_encodes_id_as_one_segment(gateway, session):
    session.request.return_value = _response(body={'id': 'x'})

    gateway.get_user('../users?page=2')

    method, url, kwargs = _call(session)
    assert url == 'https://proj.supabase.co/auth/v1/admin/users/..%2Fusers%3Fpage%3D2'
    assert kwargs['params'] is None
