"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import Mock, patch

from mysqlquery.config.settings import Settings
from mysqlquery.database.connection import DatabaseConnection


TEST_CONFIG = {
    'host': 'localhost',
    'port': 3306,
    'username': 'test_user',
    'password': 'test_password',
    'database': 'test_db',
    'timeout': 5,
    'benchmark': False
}


def make_cursor(columns=None, rows=None, rowcount=0, lastrowid=None, error=None):
    """Build a mock driver cursor.

    ``columns`` set means the statement produced a result set; ``error`` is
    raised from ``execute``.
    """
    cursor = Mock()
    cursor.description = [(name,) for name in columns] if columns is not None else None
    cursor.fetchall.return_value = [tuple(row) for row in (rows or [])]
    cursor.rowcount = rowcount
    cursor.lastrowid = lastrowid
    if error is not None:
        cursor.execute.side_effect = error
    return cursor


@pytest.fixture
def cursor_factory():
    """Factory for mock driver cursors."""
    return make_cursor


@pytest.fixture
def mock_settings():
    """Create mock settings for testing."""
    settings = Mock(spec=Settings)
    settings.db_host = "localhost"
    settings.db_port = 3306
    settings.db_name = "test_db"
    settings.db_user = "test_user"
    settings.db_password = "test_password"
    settings.db_connect_timeout = 5
    settings.db_benchmark = False
    settings.debug = False
    settings.log_level = "INFO"
    settings.default_output_format = "table"
    settings.connection_config.return_value = dict(TEST_CONFIG)
    return settings


@pytest.fixture
def mock_handle():
    """Create a mock MySQL connection handle."""
    handle = Mock()
    handle.cursor.return_value = make_cursor()
    handle.is_connected.return_value = True
    return handle


@pytest.fixture
def db_connection(mock_settings, mock_handle):
    """A DatabaseConnection initialized against the mock handle."""
    with patch('mysqlquery.database.connection.mysql.connector.connect') as mock_connect:
        mock_connect.return_value = mock_handle
        connection = DatabaseConnection(mock_settings)
        connection.initialize(dict(TEST_CONFIG))
    return connection


@pytest.fixture(autouse=True)
def reset_global_instances():
    """Reset global instances before each test."""
    import mysqlquery.config.settings
    import mysqlquery.database.connection

    mysqlquery.config.settings._settings = None
    mysqlquery.database.connection._db_connection = None

    yield

    mysqlquery.config.settings._settings = None
    mysqlquery.database.connection._db_connection = None


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires database)"
    )
