"""Database connection and statement execution module."""

from .connection import DatabaseConnection, get_db_connection
from .exceptions import MySQLQueryError, DatabaseConnectionError, StatementError
from .models import QueryStats, StatementType
from .query import MySQLQuery

__all__ = [
    "DatabaseConnection",
    "get_db_connection",
    "MySQLQuery",
    "MySQLQueryError",
    "DatabaseConnectionError",
    "StatementError",
    "QueryStats",
    "StatementType",
]
