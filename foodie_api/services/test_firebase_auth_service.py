# foodie_api/services/test_firebase_auth_service.py
import pytest
import requests
from firebase_admin import auth as firebase_auth

from foodie_api.core.exceptions import IdentityProviderError, NotFoundError
from foodie_api.services import firebase_auth_service
from foodie_api.services.firebase_auth_service import FirebaseAuthService


class _Response:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


@pytest.fixture
def provider():
    service = FirebaseAuthService()
    service.api_key = 'web-api-key'
    return service


def test_authenticate_returns_local_id(provider, monkeypatch):
    calls = []

    def fake_post(url, params=None, json=None, timeout=None):
        calls.append((url, params, json))
        return _Response(200, {'localId': 'uid-1', 'idToken': 'x'})

    monkeypatch.setattr(firebase_auth_service.requests, 'post', fake_post)

    assert provider.authenticate('ann@example.com', 'Secret!Pass1') == 'uid-1'
    url, params, body = calls[0]
    assert url.endswith('accounts:signInWithPassword')
    assert params == {'key': 'web-api-key'}
    assert body['email'] == 'ann@example.com'


def test_authenticate_rejected(provider, monkeypatch):
    monkeypatch.setattr(firebase_auth_service.requests, 'post',
                        lambda *a, **kw: _Response(400, {'error': {'message': 'INVALID_LOGIN_CREDENTIALS'}}))

    with pytest.raises(IdentityProviderError) as excinfo:
        provider.authenticate('ann@example.com', 'Wrong!Pass1')
    assert excinfo.value.reason == 'INVALID_LOGIN_CREDENTIALS'


def test_authenticate_unreachable(provider, monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(firebase_auth_service.requests, 'post', fake_post)

    with pytest.raises(IdentityProviderError):
        provider.authenticate('ann@example.com', 'Secret!Pass1')


def test_authenticate_without_api_key():
    with pytest.raises(IdentityProviderError):
        FirebaseAuthService().authenticate('ann@example.com', 'Secret!Pass1')


def test_delete_account_tolerates_missing_user(provider, monkeypatch):
    def fake_delete(uid):
        raise firebase_auth.UserNotFoundError("gone")

    monkeypatch.setattr(firebase_auth_service.firebase_auth, 'delete_user', fake_delete)
    provider.delete_account('uid-1')


def test_set_password_missing_user(provider, monkeypatch):
    def fake_update(uid, **kwargs):
        raise firebase_auth.UserNotFoundError("gone")

    monkeypatch.setattr(firebase_auth_service.firebase_auth, 'update_user', fake_update)
    with pytest.raises(NotFoundError):
        provider.set_password('uid-1', 'Secret!Pass1')
