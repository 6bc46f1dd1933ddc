"""Per-type field metadata validation.

Every rule set reports all of its violations at once. Violations are
advisory: callers show them and decide whether to block a save, but the
edit itself is never refused here.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable

from fieldplacer.model.meta import (
    BaseFieldMeta,
    CheckboxFieldMeta,
    DropdownFieldMeta,
    NumberFieldMeta,
    RadioFieldMeta,
    TextFieldMeta,
)

READ_ONLY_REQUIRED = "A field cannot be both read only and required"
MIN_EXCEEDS_MAX = "Min value cannot be greater than max value"
READ_ONLY_NUMBER_VALUE = "A read only field must have a value greater than 0"
READ_ONLY_TEXT = "A read only field must have text"
NEGATIVE_CHARACTER_LIMIT = "Character limit cannot be negative"
MULTIPLE_DEFAULT_OPTIONS = "Only one option can be selected by default"
READ_ONLY_RADIO = "A read only field must have one option selected"
READ_ONLY_CHECKBOX = "A read only field must have at least one option checked"
RULE_WITHOUT_LENGTH = "A validation rule needs a number of options"
LENGTH_WITHOUT_RULE = "A number of options needs a validation rule"
READ_ONLY_DROPDOWN = "A read only field must have a default value"

# Checkbox validation rules and how the checked count must compare.
CHECKBOX_VALIDATION_RULES: dict[str, Callable[[int, int], bool]] = {
    "Select at least": lambda checked, length: checked >= length,
    "Select exactly": lambda checked, length: checked == length,
    "Select at most": lambda checked, length: checked <= length,
}


@dataclass(slots=True)
class ValidationResult:
    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations


def _fmt(number: float) -> str:
    if float(number).is_integer():
        return str(int(number))
    return repr(float(number))


def _duplicates(values: Iterable[str]) -> list[str]:
    counts = Counter(values)
    return [value for value, count in counts.items() if count > 1]


def _duplicate_violations(values: Iterable[str]) -> list[str]:
    return [f"Duplicate option value: {value!r}" for value in _duplicates(values)]


def _flag_violations(meta: BaseFieldMeta) -> list[str]:
    if meta.read_only and meta.required:
        return [READ_ONLY_REQUIRED]
    return []


def validate_number(meta: NumberFieldMeta) -> list[str]:
    errors: list[str] = []
    value, minimum, maximum = meta.value, meta.min_value, meta.max_value

    # Unset operands take no part in a comparison.
    if value is not None and minimum is not None and minimum > 0 and value < minimum:
        errors.append(f"Value {_fmt(value)} is less than the min value {_fmt(minimum)}")
    if value is not None and maximum is not None and maximum > 0 and value > maximum:
        errors.append(f"Value {_fmt(value)} is greater than the max value {_fmt(maximum)}")
    if minimum is not None and maximum is not None and minimum > maximum:
        errors.append(MIN_EXCEEDS_MAX)
    if meta.read_only and (value is None or value < 1):
        errors.append(READ_ONLY_NUMBER_VALUE)
    errors.extend(_flag_violations(meta))
    return errors


def validate_text(meta: TextFieldMeta) -> list[str]:
    errors: list[str] = []
    limit = meta.character_limit

    if limit is not None and limit < 0:
        errors.append(NEGATIVE_CHARACTER_LIMIT)
    elif limit and len(meta.text) > limit:
        errors.append(f"Text length {len(meta.text)} exceeds the character limit {limit}")
    if meta.read_only and not meta.text:
        errors.append(READ_ONLY_TEXT)
    errors.extend(_flag_violations(meta))
    return errors


def validate_radio(meta: RadioFieldMeta) -> list[str]:
    errors = _duplicate_violations(item.value for item in meta.values)
    checked = sum(1 for item in meta.values if item.checked)

    if checked > 1:
        errors.append(MULTIPLE_DEFAULT_OPTIONS)
    if meta.read_only and checked == 0:
        errors.append(READ_ONLY_RADIO)
    errors.extend(_flag_violations(meta))
    return errors


def validate_checkbox(meta: CheckboxFieldMeta) -> list[str]:
    errors = _duplicate_violations(item.value for item in meta.values)
    checked = sum(1 for item in meta.values if item.checked)
    rule = meta.validation_rule
    length = meta.validation_length or 0

    if meta.read_only and checked == 0:
        errors.append(READ_ONLY_CHECKBOX)

    if rule and rule not in CHECKBOX_VALIDATION_RULES:
        errors.append(f"Unknown validation rule: {rule!r}")
    elif rule and length <= 0:
        errors.append(RULE_WITHOUT_LENGTH)
    elif not rule and length > 0:
        errors.append(LENGTH_WITHOUT_RULE)
    elif rule:
        if length > len(meta.values):
            errors.append(
                f"Validation length {length} exceeds the number of options {len(meta.values)}"
            )
        elif meta.read_only and not CHECKBOX_VALIDATION_RULES[rule](checked, length):
            errors.append(f"{rule} {length} option(s) is not met: {checked} checked")

    errors.extend(_flag_violations(meta))
    return errors


def validate_dropdown(meta: DropdownFieldMeta) -> list[str]:
    values = [item.value for item in meta.values]
    errors = _duplicate_violations(values)

    if meta.default_value and meta.default_value not in values:
        errors.append(f"Default value {meta.default_value!r} is not one of the options")
    if meta.read_only and not meta.default_value:
        errors.append(READ_ONLY_DROPDOWN)
    errors.extend(_flag_violations(meta))
    return errors


_RULES: dict[type[BaseFieldMeta], Callable[..., list[str]]] = {
    TextFieldMeta: validate_text,
    NumberFieldMeta: validate_number,
    RadioFieldMeta: validate_radio,
    CheckboxFieldMeta: validate_checkbox,
    DropdownFieldMeta: validate_dropdown,
}


def validate_field_meta(meta: BaseFieldMeta) -> ValidationResult:
    return ValidationResult(violations=_RULES[type(meta)](meta))
