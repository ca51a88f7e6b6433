"""BaseService — foundation for all groupcart services.

Every service receives a :class:`Store` at construction time. Services own
their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from groupcart.domain.models import validate_input
from groupcart.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from typing import Any

    from pydantic import BaseModel

    from groupcart.domain.models import ValidationResult
    from groupcart.infrastructure.store import Store


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ListService(BaseService):
            @guarded("create_item")
            def create_item(self, username: str, ...) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @staticmethod
    def _validate(model_cls: type[BaseModel], data: dict[str, Any]) -> ValidationResult:
        return validate_input(model_cls, data)

    @staticmethod
    def _invalid(op: str, vr: ValidationResult) -> ServiceResult:
        return ServiceResult.failure(op, ErrorCode.VALIDATION_FAILED, "; ".join(vr.errors))

    @staticmethod
    def _user_not_found(op: str, username: str) -> ServiceResult:
        return ServiceResult.failure(
            op, ErrorCode.NOT_FOUND, f"User not found: {username}", username=username
        )
