# 📄 File: app/shared/core/patch.py
# 🧭 Purpose (Layman Explanation):
# When someone edits a plant they may leave a field alone, wipe it, or give it a new value.
# This file gives each field a clear label for which of those three things was asked for.
# 🧪 Purpose (Technical Summary):
# Tagged three-state field patch (UNSET | CLEAR | SET(value)) used to express PATCH
# semantics without relying on None-vs-zero-value ambiguity.
# 🔗 Dependencies:
# dataclasses, enum, typing
# 🔄 Connected Modules / Calls From:
# app.modules.plants.domain.models.plant (PlantPatch),
# app.modules.plants.domain.services.plant_validation,
# app.modules.plants.infrastructure.database.plant_repository_impl

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class PatchState(str, Enum):
    """What a partial update asks for on one field."""
    UNSET = "unset"    # leave the stored value untouched
    CLEAR = "clear"    # remove the stored value
    SET = "set"        # replace the stored value entirely


@dataclass(frozen=True)
class FieldPatch(Generic[T]):
    """
    One field of a partial update.

    Build instances through ``unset()``, ``clear()`` and ``set()``; a SET patch
    always carries a value, the other two never do.
    """

    state: PatchState = PatchState.UNSET
    value: Optional[T] = None

    @classmethod
    def unset(cls) -> "FieldPatch[T]":
        return cls(PatchState.UNSET)

    @classmethod
    def clear(cls) -> "FieldPatch[T]":
        return cls(PatchState.CLEAR)

    @classmethod
    def set(cls, value: T) -> "FieldPatch[T]":
        if value is None:
            raise ValueError("A SET patch needs a value; use FieldPatch.clear() instead")
        return cls(PatchState.SET, value)

    @property
    def is_unset(self) -> bool:
        return self.state is PatchState.UNSET

    @property
    def is_clear(self) -> bool:
        return self.state is PatchState.CLEAR

    @property
    def is_set(self) -> bool:
        return self.state is PatchState.SET

    def map(self, fn: Callable[[T], R]) -> "FieldPatch[R]":
        """Transform the carried value of a SET patch; other states pass through."""
        if self.is_set:
            return FieldPatch(PatchState.SET, fn(self.value))
        return FieldPatch(self.state)


def patch_from_payload(
    provided: bool,
    value: Optional[T],
    is_empty: Optional[Callable[[T], bool]] = None
) -> FieldPatch[T]:
    """
    Translate one decoded request field into a FieldPatch.

    Args:
        provided: Whether the client sent the field at all
        value: The decoded value (``None`` for an explicit JSON null)
        is_empty: Emptiness predicate; an empty value counts as a clear

    Returns:
        FieldPatch: UNSET when absent, CLEAR when null or empty, SET otherwise
    """
    if not provided:
        return FieldPatch.unset()
    if value is None:
        return FieldPatch.clear()
    if is_empty is not None and is_empty(value):
        return FieldPatch.clear()
    return FieldPatch.set(value)
