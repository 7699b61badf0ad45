from typing import Any, Callable, Dict, TypeVar, Union
from sqlalchemy.sql.elements import BinaryExpression, BooleanClauseList

C = TypeVar("C")  # Column type


# Lookup name -> clause builder for additional search form fields
OPERATORS: Dict[str, Callable[[C, Any], Union[BinaryExpression, BooleanClauseList]]] = {
    "eq": lambda c, v: c == v,
    "ne": lambda c, v: c != v,
    "gt": lambda c, v: c > v,
    "lt": lambda c, v: c < v,
    "gte": lambda c, v: c >= v,
    "lte": lambda c, v: c <= v,
    "in": lambda c, v: c.in_(v),
    "like": lambda c, v: c.ilike(f"%{escape_like(v)}%", escape="\\"),
    "startswith": lambda c, v: c.ilike(f"{escape_like(v)}%", escape="\\"),
    "endswith": lambda c, v: c.ilike(f"%{escape_like(v)}", escape="\\"),
    "is_null": lambda c, v: c.is_(None) if v else c.isnot(None),
}


def escape_like(value: Any) -> str:
    """Escape LIKE wildcards so user input is matched literally"""
    return (
        str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


def build_clause(column: C, lookup: str, value: Any):
    """
    Build a filter clause for `column` using one of the named lookups.

    Raises:
        KeyError: if the lookup is not one of OPERATORS
    """
    return OPERATORS[lookup](column, value)
