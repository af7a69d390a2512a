# 📄 File: app/shared/core/validation.py
# 🧭 Purpose (Layman Explanation):
# Small shared building blocks for checking user input: a "field error" that says which
# field is wrong and why, plus helpers for the common checks (ranges, lengths, allowed values).
# 🧪 Purpose (Technical Summary):
# FieldError value type and pure helper functions used by the plant and notification
# validation engines. No I/O, no side effects; every helper returns Optional[FieldError].
# 🔗 Dependencies:
# dataclasses, enum, typing
# 🔄 Connected Modules / Calls From:
# app.modules.plants.domain.services.plant_validation,
# app.modules.notifications.domain.services.notification_validation,
# app.shared.core.exceptions (ValidationError payload)

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Type, Union

Number = Union[int, float]


@dataclass(frozen=True)
class FieldError:
    """A single validation failure addressed by a dotted/indexed field path."""

    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


def enum_values(enum_cls: Type[Enum]) -> List[str]:
    """Return the allowed string values of a closed enum, in declaration order."""
    return [member.value for member in enum_cls]


def is_enum_member(value: Optional[str], enum_cls: Type[Enum]) -> bool:
    return value is not None and value in enum_values(enum_cls)


def check_enum(
    field: str,
    value: Optional[str],
    enum_cls: Type[Enum],
    label: str
) -> Optional[FieldError]:
    """
    Exact membership check against a closed set.

    Args:
        field: Field path reported on failure
        value: Candidate value
        enum_cls: Enum whose values form the allowed set
        label: Human label used as the message subject

    Returns:
        Optional[FieldError]: One error listing every allowed value, or None
    """
    if is_enum_member(value, enum_cls):
        return None
    allowed = ", ".join(enum_values(enum_cls))
    return FieldError(field, f"{label} must be one of: {allowed}")


def check_range(
    field: str,
    value: Number,
    minimum: Number,
    maximum: Number,
    message: str
) -> Optional[FieldError]:
    """Inclusive numeric range check."""
    if value < minimum or value > maximum:
        return FieldError(field, message)
    return None


def check_required_text(
    field: str,
    value: Optional[str],
    max_length: int,
    required_message: str,
    length_message: str
) -> Optional[FieldError]:
    """Required string: non-empty after trimming and at most ``max_length`` chars."""
    trimmed = (value or "").strip()
    if not trimmed:
        return FieldError(field, required_message)
    if len(trimmed) > max_length:
        return FieldError(field, length_message)
    return None


def check_max_length(
    field: str,
    value: Optional[str],
    max_length: int,
    message: str
) -> Optional[FieldError]:
    if value and len(value.strip()) > max_length:
        return FieldError(field, message)
    return None


def collect(*errors: Optional[FieldError]) -> List[FieldError]:
    """Drop the ``None`` results of a batch of checks."""
    return [error for error in errors if error is not None]
