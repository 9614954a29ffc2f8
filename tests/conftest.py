"""
Shared pytest fixtures for Finance Tracker tests.
"""

import pytest
import os
import sys
from datetime import timedelta
from unittest.mock import MagicMock

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


class TestConfig:
    """Test configuration that bypasses MySQL."""
    SECRET_KEY = 'test-secret-key-for-testing-only'
    JWT_SECRET_KEY = 'test-jwt-secret-key-for-testing-only-0123456789'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    TESTING = True
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'WARNING'
    LOG_JSON = False

    @staticmethod
    def init_db(app):
        """Mock DB initialization - no real MySQL needed."""
        app.db_pool = MagicMock()


def make_mock_connection():
    """Create a mock MySQL connection with cursor context manager."""
    conn = MagicMock()
    cursor = MagicMock()
    cursor.__enter__ = MagicMock(return_value=cursor)
    cursor.__exit__ = MagicMock(return_value=False)
    conn.cursor.return_value = cursor
    return conn, cursor


def bearer(app, user_id=1, expires_delta=None):
    """Authorization header carrying a real access token."""
    from flask_jwt_extended import create_access_token
    with app.app_context():
        kwargs = {} if expires_delta is None else {'expires_delta': expires_delta}
        token = create_access_token(identity=str(user_id), **kwargs)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def app():
    """Create application for testing."""
    from app import create_app
    application = create_app(config_class=TestConfig)
    yield application


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Headers for user 1."""
    return bearer(app)


@pytest.fixture
def expired_headers(app):
    """Headers whose token expired a minute ago."""
    return bearer(app, expires_delta=timedelta(minutes=-1))


@pytest.fixture
def mock_db(app):
    """Provide mock database connection and cursor."""
    conn, cursor = make_mock_connection()
    app.db_pool.get_connection.return_value = conn
    return conn, cursor
