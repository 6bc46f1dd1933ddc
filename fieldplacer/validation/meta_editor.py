"""Editing session for one field's metadata."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any

from fieldplacer.model.field import PlacedField
from fieldplacer.model.meta import (
    BaseFieldMeta,
    DropdownFieldMeta,
    DropdownValue,
    FieldMeta,
    FieldValue,
    default_meta,
)
from fieldplacer.validation.rules import ValidationResult, validate_field_meta

if TYPE_CHECKING:
    from fieldplacer.state.collection import FieldCollection

logger = logging.getLogger(__name__)

INTEGER_KEYS = frozenset({"character_limit", "validation_length"})
NUMERIC_KEYS = frozenset({"value", "min_value", "max_value"}) | INTEGER_KEYS


def parse_numeric(raw: Any, integer: bool = False) -> float | int | None:
    """Parse a numeric input, returning ``None`` (unset) for anything unusable.

    Empty and half-typed inputs must not turn into 0, which would trip
    min/max rules while the user is still typing.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        source = raw
    else:
        source = str(raw).strip()
        if not source:
            return None
    try:
        number = float(source)
    except (ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    if integer:
        return int(number) if number.is_integer() else None
    return number


class FieldMetaEditor:
    """Applies edits to a field's metadata and validates each prospective state.

    Every edit is validated against the current state with only the edited
    key substituted, then applied regardless of the outcome. The latest
    result stays available as :attr:`violations` so the caller can decide
    whether to block a save.
    """

    def __init__(self, field: PlacedField) -> None:
        self._field = field
        self._state: FieldMeta = field.field_meta or default_meta(field.field_type)
        self._keys = self._key_lookup(type(self._state))
        self._result = ValidationResult()

    @property
    def field(self) -> PlacedField:
        return self._field

    @property
    def state(self) -> FieldMeta:
        return self._state

    @property
    def violations(self) -> list[str]:
        return list(self._result.violations)

    def validate(self) -> ValidationResult:
        self._result = validate_field_meta(self._state)
        return self._result

    def change(self, key: str, value: Any) -> ValidationResult:
        name = self._resolve(key)
        prospective = self._state.model_copy(update={name: self._coerce(name, value)})
        self._result = validate_field_meta(prospective)
        if self._result.violations:
            logger.debug(
                "Field %s edit %s has violations: %s",
                self._field.form_id,
                name,
                self._result.violations,
            )
        self._state = prospective
        return self._result

    def toggle(self, key: str) -> ValidationResult:
        name = self._resolve(key)
        current = getattr(self._state, name)
        if not isinstance(current, bool):
            raise TypeError(f"{key} is not a toggle")
        return self.change(name, not current)

    def save(self, collection: FieldCollection) -> PlacedField:
        self._field = collection.update_meta(self._field.form_id, self._state)
        return self._field

    def _resolve(self, key: str) -> str:
        try:
            return self._keys[key]
        except KeyError:
            raise KeyError(
                f"{type(self._state).__name__} has no editable key {key!r}"
            ) from None

    def _coerce(self, name: str, value: Any) -> Any:
        if name in NUMERIC_KEYS:
            return parse_numeric(value, integer=name in INTEGER_KEYS)
        if name in ("required", "read_only"):
            return bool(value)
        if name == "values":
            item_class = DropdownValue if isinstance(self._state, DropdownFieldMeta) else FieldValue
            return [
                item if isinstance(item, item_class) else item_class.model_validate(item)
                for item in value
            ]
        return "" if value is None else str(value)

    @staticmethod
    def _key_lookup(meta_class: type[BaseFieldMeta]) -> dict[str, str]:
        keys: dict[str, str] = {}
        for name, info in meta_class.model_fields.items():
            if name == "type":
                continue
            keys[name] = name
            if info.alias:
                keys[info.alias] = name
        return keys
