"""Type-specific field metadata.

Each configurable field type carries its own metadata variant, tagged by
``type``. Stored metadata uses camelCase keys (``readOnly``,
``characterLimit``), so every variant accepts both the alias and the
Python attribute name.

Numeric members are optional: ``None`` means "unset", which is what an empty
or half-typed numeric input becomes while the user is editing.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from fieldplacer.errors import UnsupportedFieldTypeError
from fieldplacer.model.field import FieldType

logger = logging.getLogger(__name__)


class _MetaModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class FieldValue(_MetaModel):
    value: str = ""
    checked: bool = False


class DropdownValue(_MetaModel):
    value: str = ""


class BaseFieldMeta(_MetaModel):
    label: str = ""
    placeholder: str = ""
    required: bool = False
    read_only: bool = False


class TextFieldMeta(BaseFieldMeta):
    type: Literal["text"] = "text"
    text: str = ""
    character_limit: int | None = 0


class NumberFieldMeta(BaseFieldMeta):
    type: Literal["number"] = "number"
    number_format: str = ""
    value: float | None = 0
    min_value: float | None = 0
    max_value: float | None = 0


class RadioFieldMeta(BaseFieldMeta):
    type: Literal["radio"] = "radio"
    values: list[FieldValue] = Field(default_factory=list)


class CheckboxFieldMeta(BaseFieldMeta):
    type: Literal["checkbox"] = "checkbox"
    values: list[FieldValue] = Field(default_factory=list)
    validation_rule: str = ""
    validation_length: int | None = 0


class DropdownFieldMeta(BaseFieldMeta):
    type: Literal["dropdown"] = "dropdown"
    values: list[DropdownValue] = Field(default_factory=list)
    default_value: str = ""


FieldMeta = Annotated[
    Union[TextFieldMeta, NumberFieldMeta, RadioFieldMeta, CheckboxFieldMeta, DropdownFieldMeta],
    Field(discriminator="type"),
]

_field_meta_adapter: TypeAdapter[FieldMeta] = TypeAdapter(FieldMeta)

META_CLASSES: dict[FieldType, type[BaseFieldMeta]] = {
    FieldType.TEXT: TextFieldMeta,
    FieldType.NUMBER: NumberFieldMeta,
    FieldType.RADIO: RadioFieldMeta,
    FieldType.CHECKBOX: CheckboxFieldMeta,
    FieldType.DROPDOWN: DropdownFieldMeta,
}


def has_meta(field_type: FieldType) -> bool:
    return field_type in META_CLASSES


def default_meta(field_type: FieldType) -> FieldMeta:
    """Return the initial metadata state for ``field_type``.

    Raises:
        UnsupportedFieldTypeError: the type has no default-state entry.
    """
    try:
        meta_class = META_CLASSES[field_type]
    except KeyError:
        raise UnsupportedFieldTypeError(f"Unsupported field type: {field_type}") from None
    return meta_class()


def meta_matches(field_type: FieldType, meta: BaseFieldMeta) -> bool:
    return type(meta) is META_CLASSES.get(field_type)


def parse_field_meta(raw: Any) -> FieldMeta:
    """Strictly parse stored metadata (a mapping or a JSON string)."""
    if isinstance(raw, (str, bytes)):
        return _field_meta_adapter.validate_json(raw)
    return _field_meta_adapter.validate_python(raw)


def coerce_field_meta(field_type: FieldType, raw: Any) -> FieldMeta | None:
    """Parse stored metadata for a field, failing closed to the type defaults.

    Absent metadata stays absent. Field types without metadata always yield
    ``None``. Anything that does not parse as this type's variant is replaced
    by ``default_meta(field_type)``.
    """
    if raw is None or raw == {} or raw == "":
        return None
    if not has_meta(field_type):
        logger.warning("Ignoring stored metadata for %s field", field_type.value)
        return None

    try:
        meta = parse_field_meta(raw)
    except ValidationError as exc:
        logger.warning(
            "Malformed %s metadata, falling back to defaults: %s",
            field_type.value,
            exc.errors(include_url=False),
        )
        return default_meta(field_type)

    if not meta_matches(field_type, meta):
        logger.warning(
            "Stored metadata of type %r does not belong to a %s field, falling back to defaults",
            meta.type,
            field_type.value,
        )
        return default_meta(field_type)
    return meta


def dump_field_meta(meta: BaseFieldMeta) -> dict[str, Any]:
    return meta.model_dump(by_alias=True)
