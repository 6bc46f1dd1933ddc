"""Tests for field metadata defaults and coercion."""

import logging

import pytest

from fieldplacer.errors import UnsupportedFieldTypeError
from fieldplacer.model.field import FieldType
from fieldplacer.model.meta import (
    CheckboxFieldMeta,
    DropdownFieldMeta,
    NumberFieldMeta,
    RadioFieldMeta,
    TextFieldMeta,
    coerce_field_meta,
    default_meta,
    dump_field_meta,
    has_meta,
    parse_field_meta,
)


class TestDefaultMeta:
    """Default state per field type."""

    @pytest.mark.parametrize(
        "field_type, meta_class",
        [
            (FieldType.TEXT, TextFieldMeta),
            (FieldType.NUMBER, NumberFieldMeta),
            (FieldType.RADIO, RadioFieldMeta),
            (FieldType.CHECKBOX, CheckboxFieldMeta),
            (FieldType.DROPDOWN, DropdownFieldMeta),
        ],
    )
    def test_variant(self, field_type, meta_class):
        meta = default_meta(field_type)
        assert type(meta) is meta_class
        assert not meta.required
        assert not meta.read_only

    def test_number_defaults(self):
        meta = default_meta(FieldType.NUMBER)
        assert (meta.value, meta.min_value, meta.max_value) == (0, 0, 0)
        assert meta.number_format == ""

    def test_checkbox_defaults(self):
        meta = default_meta(FieldType.CHECKBOX)
        assert meta.values == []
        assert meta.validation_rule == ""
        assert meta.validation_length == 0

    def test_defaults_not_shared(self):
        first = default_meta(FieldType.RADIO)
        first.values.append({"value": "x"})
        assert default_meta(FieldType.RADIO).values == []

    @pytest.mark.parametrize(
        "field_type", [FieldType.SIGNATURE, FieldType.EMAIL, FieldType.NAME, FieldType.DATE]
    )
    def test_unsupported(self, field_type):
        assert not has_meta(field_type)
        with pytest.raises(UnsupportedFieldTypeError):
            default_meta(field_type)


class TestParsing:
    """Stored metadata uses camelCase keys."""

    def test_aliases(self):
        meta = parse_field_meta(
            {"type": "text", "characterLimit": 20, "readOnly": True, "text": "fixed"}
        )
        assert isinstance(meta, TextFieldMeta)
        assert meta.character_limit == 20
        assert meta.read_only

    def test_json(self):
        meta = parse_field_meta('{"type": "dropdown", "values": [{"value": "a"}], "defaultValue": "a"}')
        assert isinstance(meta, DropdownFieldMeta)
        assert meta.default_value == "a"

    def test_dump_uses_aliases(self):
        dumped = dump_field_meta(NumberFieldMeta(min_value=1, read_only=True))
        assert dumped["minValue"] == 1
        assert dumped["readOnly"] is True
        assert dumped["type"] == "number"


class TestCoerceFieldMeta:
    """Persisted metadata fails closed to defaults."""

    def test_valid(self):
        meta = coerce_field_meta(FieldType.RADIO, {"type": "radio", "values": [{"value": "a", "checked": True}]})
        assert meta.values[0].checked

    @pytest.mark.parametrize("raw", [None, {}, ""])
    def test_absent(self, raw):
        assert coerce_field_meta(FieldType.TEXT, raw) is None

    @pytest.mark.parametrize(
        "raw",
        [
            {"type": "number", "value": "abc"},
            {"type": "unknown"},
            {"characterLimit": 5},
            ["not", "a", "mapping"],
            "{broken json",
        ],
    )
    def test_malformed_falls_back(self, raw, caplog):
        with caplog.at_level(logging.WARNING, logger="fieldplacer.model.meta"):
            assert coerce_field_meta(FieldType.NUMBER, raw) == NumberFieldMeta()
        assert caplog.records

    def test_wrong_variant_falls_back(self):
        assert coerce_field_meta(FieldType.TEXT, {"type": "number"}) == TextFieldMeta()

    def test_types_without_meta(self):
        assert coerce_field_meta(FieldType.SIGNATURE, {"type": "text"}) is None
