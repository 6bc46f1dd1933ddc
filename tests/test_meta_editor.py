"""Tests for the field metadata editing session."""

import pytest

from fieldplacer.errors import UnsupportedFieldTypeError
from fieldplacer.model.field import FieldType, PlacedField
from fieldplacer.model.meta import DropdownValue, FieldValue, NumberFieldMeta, TextFieldMeta
from fieldplacer.validation.meta_editor import FieldMetaEditor, parse_numeric
from fieldplacer.validation.rules import MIN_EXCEEDS_MAX, READ_ONLY_REQUIRED


def make_field(field_type: FieldType, form_id: str = "abc", meta=None) -> PlacedField:
    return PlacedField(
        form_id=form_id,
        page_number=1,
        field_type=field_type,
        page_x=10.0,
        page_y=10.0,
        page_width=15.0,
        page_height=5.0,
        signer_email="signer@example.com",
        field_meta=meta,
    )


class TestParseNumeric:
    """Numeric inputs that cannot be read become unset."""

    @pytest.mark.parametrize("raw", [None, "", "   ", "12a", "-", True, float("nan"), "inf"])
    def test_unset(self, raw):
        assert parse_numeric(raw) is None

    @pytest.mark.parametrize("raw, expected", [("10", 10.0), (" 2.5 ", 2.5), (-3, -3.0), ("1e2", 100.0)])
    def test_numbers(self, raw, expected):
        assert parse_numeric(raw) == expected

    def test_overflow_is_unset(self):
        assert parse_numeric(10**400) is None
        assert parse_numeric(str(10**400)) is None
        assert parse_numeric(10**400, integer=True) is None

    def test_integer(self):
        assert parse_numeric("20", integer=True) == 20
        assert parse_numeric("2.5", integer=True) is None


class TestEditing:
    """Edits are validated against the prospective state and always applied."""

    def test_starts_from_defaults(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        assert editor.state == NumberFieldMeta()
        assert editor.violations == []

    def test_starts_from_field_meta(self):
        meta = TextFieldMeta(text="hello")
        editor = FieldMetaEditor(make_field(FieldType.TEXT, meta=meta))
        assert editor.state.text == "hello"

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFieldTypeError):
            FieldMetaEditor(make_field(FieldType.SIGNATURE))

    def test_prospective_state_validated(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        editor.change("max_value", "5")
        result = editor.change("min_value", "10")
        assert MIN_EXCEEDS_MAX in result.violations
        assert editor.state.min_value == 10

    def test_violations_are_advisory(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        editor.change("max_value", "20")
        editor.change("value", "3")
        result = editor.change("min_value", "10")
        assert not result.ok
        assert editor.violations == ["Value 3 is less than the min value 10"]
        assert editor.state.value == 3
        assert editor.state.min_value == 10

    def test_cleared_input_is_unset(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        editor.change("maxValue", "20")
        editor.change("minValue", "10")
        result = editor.change("value", "")
        assert editor.state.value is None
        assert result.ok

    def test_half_typed_input_is_unset(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        editor.change("max_value", "20")
        editor.change("min_value", "10")
        result = editor.change("value", "-")
        assert editor.state.value is None
        assert result.ok

    def test_huge_input_is_unset(self):
        editor = FieldMetaEditor(make_field(FieldType.NUMBER))
        result = editor.change("value", 10**400)
        assert editor.state.value is None
        assert result.ok

    def test_camel_case_keys(self):
        editor = FieldMetaEditor(make_field(FieldType.TEXT))
        editor.change("characterLimit", "4")
        assert editor.state.character_limit == 4

    def test_unknown_key(self):
        editor = FieldMetaEditor(make_field(FieldType.TEXT))
        with pytest.raises(KeyError):
            editor.change("minValue", 3)
        with pytest.raises(KeyError):
            editor.change("type", "number")

    def test_toggle(self):
        editor = FieldMetaEditor(make_field(FieldType.TEXT, meta=TextFieldMeta(text="x")))
        editor.toggle("readOnly")
        result = editor.toggle("required")
        assert editor.state.read_only and editor.state.required
        assert result.violations == [READ_ONLY_REQUIRED]

    def test_toggle_non_bool(self):
        editor = FieldMetaEditor(make_field(FieldType.TEXT))
        with pytest.raises(TypeError):
            editor.toggle("text")

    def test_option_values(self):
        editor = FieldMetaEditor(make_field(FieldType.RADIO))
        editor.change("values", [{"value": "a", "checked": True}, FieldValue(value="b")])
        assert editor.state.values == [FieldValue(value="a", checked=True), FieldValue(value="b")]

    def test_dropdown_values(self):
        editor = FieldMetaEditor(make_field(FieldType.DROPDOWN))
        editor.change("values", [{"value": "a"}])
        result = editor.change("defaultValue", "a")
        assert editor.state.values == [DropdownValue(value="a")]
        assert result.ok

    def test_validate(self):
        meta = NumberFieldMeta(value=0, read_only=True)
        editor = FieldMetaEditor(make_field(FieldType.NUMBER, meta=meta))
        assert editor.violations == []
        assert not editor.validate().ok
        assert editor.violations


class TestSave:
    """Saving writes the edited state back to the collection."""

    def test_save(self, collection, record):
        field = collection.append(make_field(FieldType.NUMBER, form_id=""))
        changes = record(collection.meta_changed)
        editor = FieldMetaEditor(field)
        editor.change("value", "7")
        saved = editor.save(collection)

        assert saved.field_meta.value == 7
        assert collection.get(field.form_id).field_meta == editor.state
        assert changes.last == (field.form_id, editor.state)
        assert editor.field is saved

    def test_save_unknown_field(self, collection):
        editor = FieldMetaEditor(make_field(FieldType.TEXT, form_id="missing"))
        with pytest.raises(KeyError):
            editor.save(collection)
