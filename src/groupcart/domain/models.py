"""Input models and validation for every mutating operation.

Each model captures the business rules for one operation's input. Length
limits mirror the column sizes of the original schema (usernames 32,
names 64). Services call :func:`validate_input` before touching the store,
so validation failures never leave partial effects.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StringConstraints,
    ValidationError,
    field_validator,
    model_validator,
)

Username = Annotated[str, StringConstraints(min_length=1, max_length=32)]
PersonName = Annotated[str, StringConstraints(min_length=1, max_length=64)]
ItemName = Annotated[str, StringConstraints(min_length=1, max_length=64)]
GroupId = Annotated[str, StringConstraints(min_length=1, max_length=64)]

MIN_PRIORITY = 1
MAX_PRIORITY = 3

_COLOR_RE = re.compile(r"^[0-9a-fA-F]{6}$")


# ---------------------------------------------------------------------------
# Validation result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one operation's input."""

    valid: bool
    value: Any = None
    errors: list[str] = field(default_factory=list)


def _format_error(err: Any) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()) if part != "__root__")
    msg = str(err.get("msg", "invalid value")).removeprefix("Value error, ")
    return f"{loc}: {msg}" if loc else msg


def validate_input[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> ValidationResult:
    """Validate *data* against *model_cls*, collecting readable error strings."""
    try:
        model = model_cls.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(valid=False, errors=[_format_error(e) for e in exc.errors()])
    return ValidationResult(valid=True, value=model)


def _reject_missing(data: Any, names: tuple[str, ...]) -> Any:
    if isinstance(data, dict):
        missing = [n for n in names if data.get(n) is None]
        if missing:
            verb = "is" if len(missing) == 1 else "are"
            raise ValueError(f"{', '.join(missing)} {verb} required")
    return data


def normalize_color(value: str) -> str:
    """Strip a leading ``#`` and check for six hex digits."""
    raw = value.removeprefix("#")
    if not _COLOR_RE.match(raw):
        raise ValueError("color must be six hex digits, e.g. 'ff8800'")
    return raw.lower()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class NewUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: Username
    first_name: PersonName
    last_name: PersonName


class UserChanges(BaseModel):
    """Sparse partial update for a user.

    One optional slot per updatable attribute. Only slots present in
    ``model_fields_set`` are applied, so ``group_id=None`` removes group
    membership while an omitted ``group_id`` leaves it alone.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    first_name: PersonName | None = None
    last_name: PersonName | None = None
    color: str | None = None
    group_id: GroupId | None = None

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_color(value)

    @model_validator(mode="after")
    def _check_supplied(self) -> Self:
        if not self.model_fields_set:
            raise ValueError(
                "At least one field (first_name, last_name, color, or group_id) must be provided"
            )
        for name in ("first_name", "last_name"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def applied(self) -> dict[str, Any]:
        """The populated slots as column values."""
        return {name: getattr(self, name) for name in sorted(self.model_fields_set)}


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class NewGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    group_id: GroupId
    name: PersonName
    usernames: list[Username] = Field(default_factory=list)

    @field_validator("usernames")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


# ---------------------------------------------------------------------------
# List items
# ---------------------------------------------------------------------------


class ItemInput(BaseModel):
    """Name and priority of a list item (used for create and replace)."""

    model_config = ConfigDict(frozen=True)

    item_name: ItemName
    priority: StrictInt

    @model_validator(mode="before")
    @classmethod
    def _require(cls, data: Any) -> Any:
        return _reject_missing(data, ("item_name", "priority"))

    @field_validator("priority")
    @classmethod
    def _check_priority(cls, value: int) -> int:
        if not MIN_PRIORITY <= value <= MAX_PRIORITY:
            raise ValueError(f"priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}")
        return value


# ---------------------------------------------------------------------------
# Favors
# ---------------------------------------------------------------------------


def _check_amount(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("amount must be a finite number")
    if value < 0:
        raise ValueError("amount must not be negative")
    return value


class NewFavor(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int
    by_username: Username
    for_username: Username
    amount: StrictFloat

    @model_validator(mode="before")
    @classmethod
    def _require(cls, data: Any) -> Any:
        return _reject_missing(data, ("item_id", "by_username", "for_username", "amount"))

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> float:
        return _check_amount(value)


class FavorChanges(BaseModel):
    """Full replacement of a favor's mutable fields (not a sparse patch)."""

    model_config = ConfigDict(frozen=True)

    reimbursed: StrictBool
    amount: StrictFloat

    @model_validator(mode="before")
    @classmethod
    def _require(cls, data: Any) -> Any:
        return _reject_missing(data, ("reimbursed", "amount"))

    @field_validator("amount")
    @classmethod
    def _amount(cls, value: float) -> float:
        return _check_amount(value)
