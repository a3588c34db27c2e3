"""
Sign-up and sign-in tests
"""

from extensions import db
from models import Profile, User


def register(client, **overrides):
    data = {
        'email': 'carol@example.com',
        'password': 'long-enough-password',
        'username': 'carol',
        'display_name': 'Carol',
    }
    data.update(overrides)
    return client.post('/auth/register', data=data)


class TestRegister:
    """Account creation"""

    def test_register_creates_account_and_profile(self, app, client):
        response = register(client)

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/dashboard/profile')
        with app.app_context():
            user = User.query.filter_by(email='carol@example.com').one()
            profile = db.session.get(Profile, user.id)
            assert profile.username == 'carol'
            assert profile.is_public is True

    def test_username_taken(self, client, alice):
        response = register(client, username='Alice')

        assert response.status_code == 409
        assert b'This username is already taken' in response.data

    def test_reserved_username(self, client):
        assert register(client, username='dashboard').status_code == 400

    def test_short_password(self, client):
        response = register(client, password='short')

        assert response.status_code == 400
        assert b'at least 8 characters' in response.data


class TestLogin:
    """Session sign-in"""

    def test_wrong_password(self, client, alice):
        response = client.post('/auth/login', data={'email': 'alice@example.com', 'password': 'nope'})

        assert response.status_code == 200
        assert b'Invalid credentials' in response.data

    def test_login_follows_local_next(self, client, alice):
        response = client.post('/auth/login?next=/dashboard/blog', data={
            'email': 'alice@example.com', 'password': 'correct-horse-battery'})

        assert response.headers['Location'].endswith('/dashboard/blog')

    def test_login_ignores_external_next(self, client, alice):
        response = client.post('/auth/login?next=//evil.example', data={
            'email': 'alice@example.com', 'password': 'correct-horse-battery'})

        assert 'evil.example' not in response.headers['Location']

    def test_dashboard_redirects_anonymous(self, client):
        response = client.get('/dashboard/')

        assert response.status_code == 302
        assert '/auth/login' in response.headers['Location']

    def test_logout(self, alice_client):
        assert alice_client.get('/dashboard/').status_code == 200

        alice_client.get('/auth/logout')

        assert alice_client.get('/dashboard/').status_code == 302
