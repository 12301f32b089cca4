"""Errors raised by the database layer."""

from typing import Optional


class MySQLQueryError(Exception):
    """Base class for all database layer errors."""


class DatabaseConnectionError(MySQLQueryError, ConnectionError):
    """Raised when the connection handle cannot be opened or is missing."""


class StatementError(MySQLQueryError):
    """Raised when the driver reports a failure for a statement."""

    def __init__(self, statement: str, error: str, database: Optional[str] = None):
        self.statement = statement
        self.error = error
        self.database = database
        message = f'"{statement}": {error}.'
        if database:
            message = f'{message} (database: {database})'
        super().__init__(message)
