from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement


def ilike_escape(q: str) -> str:
    """Escape LIKE wildcards in ``q`` (backslash as escape) and wrap in ``%``."""
    escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def ilike_any(columns, q: str) -> ColumnElement[bool]:
    """Case-insensitive substring match of ``q`` against any of ``columns``."""
    pattern = ilike_escape(q)
    return or_(*(column.ilike(pattern, escape="\\") for column in columns))
