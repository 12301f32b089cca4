"""Execution and measurement of single SQL statements."""

import logging
import time
from functools import cached_property
from typing import Any, Optional

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection, get_db_connection
from .exceptions import StatementError
from .formatting import FORMATTED_TYPES, format_results
from .models import StatementType

logger = logging.getLogger(__name__)


class MySQLQuery:
    """Runs a statement on construction and records how long it took.

    Example::

        connection = DatabaseConnection()
        connection.initialize({
            'host': 'localhost',
            'port': 3306,
            'username': 'root',
            'password': '',
            'database': 'mysql'
        })
        query = MySQLQuery('SELECT * FROM `user`', connection=connection)
        print(query.get_results())

    A statement the driver rejects raises StatementError and is never
    logged with the connection.
    """

    def __init__(
        self,
        statement: str,
        database: Optional[str] = None,
        connection: Optional[DatabaseConnection] = None
    ):
        self.connection = connection or get_db_connection()
        self.statement = statement
        self.type = StatementType.keyword(statement)
        self.statement_type = StatementType.classify(statement)
        self.inserted_id: Optional[int] = None
        self.cursor = None

        if database:
            self.connection.select_database(database)

        self.start = time.time()
        self.raw = self._run(statement)
        self.end = time.time()

        if self.connection.benchmark:
            logger.info(f"{self.duration:.4f}s {self.statement}")

        self._log()

    def _run(self, statement: str) -> Any:
        """Execute the statement, returning a buffered cursor or the affected row count."""
        cursor = self.connection.get_connection().cursor(buffered=True)
        try:
            cursor.execute(statement)
        except MySQLError as e:
            cursor.close()
            logger.error(f"Statement failed: {e}")
            raise StatementError(statement, e.msg, self.connection.database) from e

        self.inserted_id = cursor.lastrowid or None
        if cursor.description is None:
            affected = cursor.rowcount
            cursor.close()
            return affected
        self.cursor = cursor
        return cursor

    def _log(self) -> None:
        self.connection.log(self)

    @property
    def duration(self) -> float:
        """Execution time in seconds, rounded to four decimals."""
        return round(self.end - self.start, 4)

    @cached_property
    def results(self) -> Any:
        """Formatted results, computed on first access.

        Statements that produced no result set, including SELECT ... INTO,
        hand back the raw affected row count.
        """
        if self.cursor is None or self.statement_type not in FORMATTED_TYPES:
            return self.raw
        results = format_results(self.statement, self.statement_type, self.cursor)
        self.cursor.close()
        self.cursor = None
        return results

    def get_results(self) -> Any:
        return self.results

    def close(self) -> None:
        """Release the buffered cursor.

        Rows of SELECT, EXPLAIN and SHOW statements are formatted first so
        their results stay readable afterwards.
        """
        if self.cursor is None:
            return
        if self.statement_type in FORMATTED_TYPES:
            self.get_results()
        else:
            self.cursor.close()
            self.cursor = None

    def __repr__(self) -> str:
        return f"<MySQLQuery {self.type!r} {self.duration}s: {self.statement!r}>"
