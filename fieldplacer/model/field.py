"""Placed field model definitions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from fieldplacer.geometry.resolver import PercentRect

if TYPE_CHECKING:
    from fieldplacer.model.meta import FieldMeta


class FieldType(str, Enum):
    SIGNATURE = "SIGNATURE"
    EMAIL = "EMAIL"
    NAME = "NAME"
    DATE = "DATE"
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    RADIO = "RADIO"
    CHECKBOX = "CHECKBOX"
    DROPDOWN = "DROPDOWN"


@dataclass(frozen=True, slots=True)
class PlacedField:
    form_id: str
    page_number: int
    field_type: FieldType
    page_x: float
    page_y: float
    page_width: float
    page_height: float
    signer_email: str
    native_id: int | None = None
    field_meta: FieldMeta | None = None

    @property
    def rect(self) -> PercentRect:
        return PercentRect(self.page_x, self.page_y, self.page_width, self.page_height)


@dataclass(frozen=True, slots=True)
class GeometryPatch:
    """Subset of a field's percentage geometry; unset members are left alone."""

    page_x: float | None = None
    page_y: float | None = None
    page_width: float | None = None
    page_height: float | None = None

    @classmethod
    def move(cls, rect: PercentRect) -> GeometryPatch:
        return cls(page_x=rect.x, page_y=rect.y)

    @classmethod
    def resize(cls, rect: PercentRect) -> GeometryPatch:
        return cls(page_x=rect.x, page_y=rect.y, page_width=rect.width, page_height=rect.height)

    def changes(self) -> dict[str, float]:
        values = {
            "page_x": self.page_x,
            "page_y": self.page_y,
            "page_width": self.page_width,
            "page_height": self.page_height,
        }
        return {key: value for key, value in values.items() if value is not None}

    def apply(self, field: PlacedField) -> PlacedField:
        return replace(field, **self.changes())
