"""Conversion of raw cursors into plain rows."""

from typing import List, Dict, Any, Sequence, Union

from .models import StatementType

Row = Dict[Union[int, str], Any]

# Statement kinds whose cursor is consumed by format_results
FORMATTED_TYPES = (StatementType.SELECT, StatementType.EXPLAIN, StatementType.SHOW)


def column_names(cursor) -> List[str]:
    return [desc[0] for desc in cursor.description] if cursor.description else []


def fetch_assoc(cursor) -> List[Dict[str, Any]]:
    """Fetch every row as a column name -> value mapping."""
    columns = column_names(cursor)
    rows = cursor.fetchall() if cursor.description else []
    return [dict(zip(columns, row)) for row in rows]


def fetch_both(cursor) -> List[Row]:
    """Fetch every row keyed both by position and by column name."""
    columns = column_names(cursor)
    rows = cursor.fetchall() if cursor.description else []
    results = []
    for row in rows:
        result: Row = {}
        for index, (column, value) in enumerate(zip(columns, row)):
            result[index] = value
            result[column] = value
        results.append(result)
    return results


def drop_positional(rows: Sequence[Row]) -> List[Dict[str, Any]]:
    return [
        {key: value for key, value in row.items() if not isinstance(key, int)}
        for row in rows
    ]


def format_show(statement: str, rows: Sequence[Row]) -> List[Any]:
    """Reshape SHOW rows based on which SHOW variant the statement is."""
    lowercase = statement.lower()
    if "show tables" in lowercase:
        return [row[0] for row in rows]
    if "show variables" in lowercase or "show index" in lowercase:
        return drop_positional(rows)
    return list(rows)


def format_results(statement: str, statement_type: StatementType, raw: Any) -> Any:
    """Normalize a raw driver result according to the statement type.

    SELECT and EXPLAIN cursors become lists of dicts and SHOW cursors are
    reshaped by ``format_show``. Anything else is handed back untouched.
    """
    if statement_type in (StatementType.SELECT, StatementType.EXPLAIN):
        return fetch_assoc(raw)
    if statement_type is StatementType.SHOW:
        return format_show(statement, fetch_both(raw))
    return raw
