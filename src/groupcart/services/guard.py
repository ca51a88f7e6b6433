"""Integrity guard — maps store failures inside a transaction to results.

Every cross-entity mutation runs in one ``Store.transaction()`` block and
is decorated with :func:`guarded`. Whatever escapes the block has already
rolled the transaction back; the guard only decides what the caller sees:

- a UNIQUE violation at commit time (a concurrent writer won the race)
  becomes ``CONFLICT``;
- a FOREIGN KEY violation (a referenced row vanished) becomes ``NOT_FOUND``;
- a CHECK or NOT NULL violation becomes ``VALIDATION_FAILED``;
- :class:`Rollback`, raised by a service after it has already written,
  becomes the error it carries;
- any other ``SQLAlchemyError`` becomes a single ``INTERNAL`` error.

Nothing is retried.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, Concatenate, ParamSpec, TypeVar

import structlog
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from groupcart.infrastructure.database.errors import ViolationKind, classify_integrity_error
from groupcart.services.result import ErrorCode, ServiceResult

log = structlog.get_logger(__name__)

_P = ParamSpec("_P")
_S = TypeVar("_S")

_KIND_CODES: dict[ViolationKind, ErrorCode] = {
    ViolationKind.UNIQUE: ErrorCode.CONFLICT,
    ViolationKind.FOREIGN_KEY: ErrorCode.NOT_FOUND,
    ViolationKind.CHECK: ErrorCode.VALIDATION_FAILED,
    ViolationKind.NOT_NULL: ErrorCode.VALIDATION_FAILED,
}

_DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CONFLICT: "Record already exists",
    ErrorCode.NOT_FOUND: "A referenced record no longer exists",
    ErrorCode.VALIDATION_FAILED: "Input violates a database constraint",
    ErrorCode.INTERNAL: "Internal storage error",
}


class Rollback(Exception):  # noqa: N818
    """Abort the enclosing transaction and report an error.

    Raise inside ``with store.transaction()`` after writes have been issued
    when a later check fails; the writes are undone and the guard returns
    the carried error.
    """

    def __init__(self, code: ErrorCode, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail


def guarded(
    op: str,
    *,
    conflict: str | None = None,
) -> Callable[
    [Callable[Concatenate[_S, _P], ServiceResult]],
    Callable[Concatenate[_S, _P], ServiceResult],
]:
    """Decorator: turn store failures of a service method into a failed result.

    Args:
        op: Operation name reported in the result.
        conflict: Message used when a UNIQUE constraint fires at commit.
    """

    def decorator(
        func: Callable[Concatenate[_S, _P], ServiceResult],
    ) -> Callable[Concatenate[_S, _P], ServiceResult]:
        @functools.wraps(func)
        def wrapper(self: _S, *args: _P.args, **kwargs: _P.kwargs) -> ServiceResult:
            try:
                return func(self, *args, **kwargs)
            except Rollback as exc:
                log.info("guard.rollback", op=op, code=str(exc.code), reason=exc.message)
                return ServiceResult.failure(op, exc.code, exc.message, **exc.detail)
            except IntegrityError as exc:
                kind = classify_integrity_error(exc)
                code = _KIND_CODES.get(kind, ErrorCode.INTERNAL)
                log.warning("guard.constraint", op=op, kind=str(kind), code=str(code))
                message = conflict if code is ErrorCode.CONFLICT and conflict else None
                return ServiceResult.failure(
                    op,
                    code,
                    message or _DEFAULT_MESSAGES[code],
                    constraint=str(kind),
                )
            except SQLAlchemyError:
                log.error("guard.store_failure", op=op, exc_info=True)
                return ServiceResult.failure(
                    op, ErrorCode.INTERNAL, _DEFAULT_MESSAGES[ErrorCode.INTERNAL]
                )

        return wrapper

    return decorator
