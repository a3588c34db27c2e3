"""
Pytest configuration
Application, database and signed-in client fixtures shared by every test module
"""

import json

import pytest

from app import create_app
from extensions import db
from utils.security import register_account


PASSWORD = 'correct-horse-battery'


# ==================== Application Fixtures ====================

@pytest.fixture(scope="function")
def app():
    """
    Fresh application per test
    The testing config uses in-memory SQLite, so every test starts from empty tables
    """
    app = create_app('testing')

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def ctx(app):
    """Application context for tests that call the access layer directly"""
    with app.app_context():
        yield app
        db.session.remove()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


# ==================== Account Fixtures ====================

@pytest.fixture(scope="function")
def make_account(app):
    """Factory registering an account; returns the account id"""
    def _make(username, display_name=None):
        with app.app_context():
            user = register_account(f'{username}@example.com', PASSWORD, username, display_name)
            return user.id
    return _make


@pytest.fixture(scope="function")
def alice(make_account):
    return make_account('alice', 'Alice Example')


@pytest.fixture(scope="function")
def bob(make_account):
    return make_account('bob', 'Bob Example')


def login(client, username):
    response = client.post('/auth/login', data={
        'email': f'{username}@example.com',
        'password': PASSWORD,
    })
    assert response.status_code == 302
    return client


@pytest.fixture(scope="function")
def alice_client(app, alice):
    return login(app.test_client(), 'alice')


@pytest.fixture(scope="function")
def bob_client(app, bob):
    return login(app.test_client(), 'bob')


# ==================== API Client Transport ====================

class ClientResponse:
    """The slice of requests.Response the management client reads"""

    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body
        self.content = b'' if body is None else json.dumps(body).encode()

    def json(self):
        return self._body


class FlaskClientSession:
    """
    requests.Session stand-in routing calls through the Flask test client
    `fail` maps a 1-based call number to the ClientResponse (or exception)
    returned instead of reaching the app.
    """

    def __init__(self, client, fail=None):
        self.client = client
        self.fail = fail or {}
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        injected = self.fail.get(len(self.calls))
        if isinstance(injected, Exception):
            raise injected
        if injected is not None:
            return injected

        response = self.client.open(url, method=method, json=json)
        return ClientResponse(response.status_code, response.get_json(silent=True))
