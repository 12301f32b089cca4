"""Database connection management."""

import logging
from collections import Counter
from typing import List, Dict, Any, Optional, Mapping, TYPE_CHECKING

import mysql.connector
from mysql.connector import Error as MySQLError

from ..config.settings import get_settings
from .exceptions import DatabaseConnectionError, StatementError
from .models import QueryStats, StatementType

if TYPE_CHECKING:
    from .query import MySQLQuery

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Holds a single MySQL handle and the statistics of every statement run on it."""

    def __init__(self, settings=None):
        """Initialize the connection holder; the handle is opened by initialize()."""
        self.settings = settings or get_settings()
        self._handle = None
        self._database: Optional[str] = None
        self._timeout: Optional[int] = None
        self._benchmark = False
        self._inserted: Optional[int] = None
        self._queries: List["MySQLQuery"] = []
        self._counts: Counter = Counter()

    def initialize(self, config: Optional[Mapping[str, Any]] = None) -> None:
        """Open the MySQL handle.

        ``config`` holds ``host``, ``port``, ``username``, ``password`` and
        ``database``, plus the optional ``timeout`` and ``benchmark`` keys.
        When omitted it is built from the application settings. A previously
        opened handle is replaced.
        """
        if config is None:
            config = self.settings.connection_config()

        options = {
            'host': config['host'],
            'port': int(config['port']),
            'user': config['username'],
            'password': config['password'],
            'charset': 'utf8mb4',
            'collation': 'utf8mb4_unicode_ci',
            'autocommit': True
        }
        if config.get('database'):
            options['database'] = config['database']
        if config.get('timeout') is not None:
            options['connection_timeout'] = int(config['timeout'])

        try:
            handle = mysql.connector.connect(**options)
        except MySQLError as e:
            logger.error(f"Failed to establish connection: {e}")
            raise DatabaseConnectionError(f"Couldn't establish connection: {e.msg}.") from e

        self._handle = handle
        self._database = config.get('database') or None
        self._timeout = options.get('connection_timeout')
        self._benchmark = bool(config.get('benchmark', False))
        logger.info(f"Connected to {config['host']}:{config['port']}")

    @property
    def is_initialized(self) -> bool:
        return self._handle is not None

    @property
    def database(self) -> Optional[str]:
        """Name of the currently selected database."""
        return self._database

    @property
    def timeout(self) -> Optional[int]:
        return self._timeout

    @property
    def benchmark(self) -> bool:
        return self._benchmark

    def get_connection(self):
        """Return the live handle."""
        if self._handle is None:
            raise DatabaseConnectionError("Connection has not been initialized.")
        return self._handle

    def select_database(self, name: str) -> bool:
        """Switch to ``name`` unless it is already selected.

        Returns True when a switch happened.
        """
        if name == self._database:
            return False

        handle = self.get_connection()
        try:
            handle.database = name
        except MySQLError as e:
            logger.error(f"Failed to select database {name}: {e}")
            raise StatementError(f"USE `{name}`", e.msg, self._database) from e

        logger.debug(f"Selected database {name}")
        self._database = name
        return True

    def test_connection(self) -> bool:
        """Test the database connection."""
        try:
            cursor = self.get_connection().cursor()
            cursor.execute("SELECT 1")
            cursor.fetchone()
            cursor.close()
            return True
        except (MySQLError, DatabaseConnectionError) as e:
            logger.error(f"Connection test failed: {e}")
            return False

    def log(self, query: "MySQLQuery") -> None:
        """Store a reference to an executed query and bump its counter."""
        self._queries.append(query)
        if query.statement_type.is_counted:
            self._counts[query.statement_type] += 1
        if query.inserted_id:
            self._inserted = query.inserted_id

    def get_count(self, statement_type: StatementType) -> int:
        """Number of statements of the given kind executed so far."""
        return self._counts[StatementType(statement_type)]

    def get_duration(self) -> float:
        """Cumulative execution time of every logged statement."""
        return sum(query.duration for query in self._queries)

    def get_inserted(self) -> Optional[int]:
        """Last auto-increment id reported by an executed statement."""
        return self._inserted

    def get_queries(self) -> List[Dict[str, Any]]:
        """Metric-focused view of every logged statement."""
        return [
            {
                'duration': query.duration,
                'statement': query.statement,
                'type': query.type
            }
            for query in self._queries
        ]

    @property
    def stats(self) -> QueryStats:
        counters = {
            statement_type.counter_name: self._counts[statement_type]
            for statement_type in StatementType
            if statement_type.is_counted
        }
        return QueryStats(
            total=len(self._queries),
            duration=self.get_duration(),
            **counters
        )

    def get_stats(self) -> Dict[str, int]:
        """Statement counters plus the total number of statements."""
        return self.stats.to_dict()

    def close(self) -> None:
        """Release the cursors still held by logged queries and close the handle."""
        for query in self._queries:
            query.close()
        if self._handle is not None:
            logger.info("Closing database connection")
            self._handle.close()
            self._handle = None


# Global database connection instance
_db_connection: Optional[DatabaseConnection] = None


def get_db_connection() -> DatabaseConnection:
    """Get the global database connection instance."""
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection
