import os
import sys

import pytest
from flask import g

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from paranoia_app import create_app, db
from paranoia_app.config import Config
from paranoia_app.models import Role, User


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'connect_args': {'check_same_thread': False}
    }
    WTF_CSRF_ENABLED = False
    SCHEDULER_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    SESSION_BACKEND = 'database'
    LOG_DIR = None


@pytest.fixture
def app():
    app = create_app(TestConfig)

    @app.teardown_request
    def forget_request_user(_exc):
        # Test requests share the fixture's app context and so flask.g.
        g.pop('_login_user', None)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(username, password='password', roles=(), **kwargs):
        user = User(username=username, email=kwargs.pop('email', f'{username}@example.com'), **kwargs)
        user.set_password(password)
        for role_id in roles:
            user.roles.append(db.session.get(Role, role_id))
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def login():
    def _login(client, username, password='password'):
        return client.post('/auth/login', data={'username': username, 'password': password})
    return _login
