"""Classify constraint violations raised at commit time.

SQLite reports violations in the message text; PostgreSQL drivers expose
a SQLSTATE (``23505`` unique, ``23503`` foreign key). Both are mapped to
the same two kinds so services can report CONFLICT vs NOT_FOUND.
"""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy.exc import IntegrityError


class ViolationKind(StrEnum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    NOT_NULL = "not_null"
    OTHER = "other"


_SQLSTATE_KINDS: dict[str, ViolationKind] = {
    "23505": ViolationKind.UNIQUE,
    "23503": ViolationKind.FOREIGN_KEY,
    "23514": ViolationKind.CHECK,
    "23502": ViolationKind.NOT_NULL,
}

_MESSAGE_KINDS: tuple[tuple[str, ViolationKind], ...] = (
    ("unique constraint", ViolationKind.UNIQUE),
    ("duplicate key", ViolationKind.UNIQUE),
    ("foreign key constraint", ViolationKind.FOREIGN_KEY),
    ("check constraint", ViolationKind.CHECK),
    ("not null constraint", ViolationKind.NOT_NULL),
)


def classify_integrity_error(exc: IntegrityError) -> ViolationKind:
    """Return which kind of constraint *exc* violated."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _SQLSTATE_KINDS:
        return _SQLSTATE_KINDS[sqlstate]

    message = str(orig).lower()
    for needle, kind in _MESSAGE_KINDS:
        if needle in message:
            return kind
    return ViolationKind.OTHER
