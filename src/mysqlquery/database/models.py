"""Database models and data structures."""

from enum import Enum
from typing import Dict, Any
from dataclasses import dataclass


class StatementType(str, Enum):
    """Kind of SQL statement, derived from its leading keyword."""

    DELETE = "delete"
    EXPLAIN = "explain"
    INSERT = "insert"
    SELECT = "select"
    SHOW = "show"
    UPDATE = "update"
    USE = "use"
    OTHER = "other"

    @staticmethod
    def keyword(statement: str) -> str:
        """Return the lowercase first whitespace-delimited token."""
        tokens = statement.split(None, 1)
        return tokens[0].lower() if tokens else ""

    @classmethod
    def classify(cls, statement: str) -> "StatementType":
        """Classify a statement by its leading keyword."""
        try:
            return cls(cls.keyword(statement))
        except ValueError:
            return cls.OTHER

    @property
    def is_counted(self) -> bool:
        """Whether statements of this kind have a named counter."""
        return self is not StatementType.OTHER

    @property
    def counter_name(self) -> str:
        """Key used for this kind in the statistics mapping."""
        return f"{self.value}s"


@dataclass
class QueryStats:
    """Snapshot of the statement counters of a connection."""

    deletes: int = 0
    explains: int = 0
    inserts: int = 0
    selects: int = 0
    shows: int = 0
    updates: int = 0
    uses: int = 0
    total: int = 0
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert the counters to a dictionary."""
        return {
            "deletes": self.deletes,
            "explains": self.explains,
            "inserts": self.inserts,
            "selects": self.selects,
            "shows": self.shows,
            "updates": self.updates,
            "uses": self.uses,
            "total": self.total,
        }
