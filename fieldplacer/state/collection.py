"""In-memory, ordered collection of placed fields."""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import replace
from typing import Any

from PySide6.QtCore import QObject, Signal

from fieldplacer.config import PlacementSettings, get_settings
from fieldplacer.errors import DuplicateFormIdError, FieldNotFoundError
from fieldplacer.model.field import FieldType, GeometryPatch, PlacedField
from fieldplacer.model.meta import FieldMeta, coerce_field_meta, meta_matches
from fieldplacer.model.recipient import Recipient

logger = logging.getLogger(__name__)

_FORM_ID_ALPHABET = string.ascii_letters + string.digits + "_-"


class FieldCollection(QObject):
    """Placed fields in placement order.

    Index addressing is used by move/resize interactions, which always act on
    the field currently at that position. Metadata updates address fields by
    ``form_id`` instead, since indices shift when earlier fields are removed.
    A ``form_id`` is never reused within one collection, even after removal.
    """

    field_appended = Signal(int, object)
    geometry_changed = Signal(int, object)
    meta_changed = Signal(str, object)
    field_removed = Signal(int, object)
    cleared = Signal()

    def __init__(self, settings: PlacementSettings | None = None) -> None:
        super().__init__()
        self._settings = settings or get_settings()
        self._fields: list[PlacedField] = []
        self._seen_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[PlacedField]:
        return iter(list(self._fields))

    def __getitem__(self, index: int) -> PlacedField:
        return self._fields[index]

    def fields(self) -> list[PlacedField]:
        return list(self._fields)

    def fields_for_page(self, page_number: int) -> list[PlacedField]:
        return [field for field in self._fields if field.page_number == page_number]

    def next_form_id(self) -> str:
        length = self._settings.form_id_length
        while True:
            form_id = "".join(secrets.choice(_FORM_ID_ALPHABET) for _ in range(length))
            if form_id not in self._seen_ids:
                return form_id

    def index_of(self, form_id: str) -> int:
        for index, field in enumerate(self._fields):
            if field.form_id == form_id:
                return index
        raise FieldNotFoundError(form_id)

    def get(self, form_id: str) -> PlacedField:
        return self._fields[self.index_of(form_id)]

    def append(self, field: PlacedField) -> PlacedField:
        if not field.form_id:
            field = replace(field, form_id=self.next_form_id())
        elif field.form_id in self._seen_ids:
            raise DuplicateFormIdError(f"Form id already used in this session: {field.form_id}")

        self._seen_ids.add(field.form_id)
        self._fields.append(field)
        index = len(self._fields) - 1
        logger.debug(
            "Appended %s field %s at index %d (page %d)",
            field.field_type.value,
            field.form_id,
            index,
            field.page_number,
        )
        self.field_appended.emit(index, field)
        return field

    def update_geometry(self, index: int, patch: GeometryPatch) -> PlacedField:
        updated = patch.apply(self._fields[index])
        self._fields[index] = updated
        logger.debug("Geometry of field %s patched: %s", updated.form_id, patch.changes())
        self.geometry_changed.emit(index, patch)
        return updated

    def update_meta(self, form_id: str, meta: FieldMeta) -> PlacedField:
        index = self.index_of(form_id)
        field = self._fields[index]
        if not meta_matches(field.field_type, meta):
            raise ValueError(
                f"{type(meta).__name__} cannot configure a {field.field_type.value} field"
            )
        updated = replace(field, field_meta=meta)
        self._fields[index] = updated
        self.meta_changed.emit(form_id, meta)
        return updated

    def remove(self, index: int) -> PlacedField:
        removed = self._fields.pop(index)
        logger.debug("Removed field %s from index %d", removed.form_id, index)
        self.field_removed.emit(index, removed)
        return removed

    def remove_all(self) -> None:
        self._fields.clear()
        self.cleared.emit()

    def load(
        self,
        records: Iterable[Mapping[str, Any]],
        recipients: Iterable[Recipient],
    ) -> None:
        """Start a new editing session from persisted field records.

        Records carry the stored shape: ``id``, ``documentId``, ``recipientId``,
        ``page``, ``type``, ``positionX``/``positionY``, ``width``/``height``
        (percentages, possibly as strings) and ``fieldMeta``.
        """
        emails = {recipient.id: recipient.email for recipient in recipients}
        loaded: list[PlacedField] = []
        form_ids: set[str] = set()
        for record in records:
            field_type = FieldType(record["type"])
            field = PlacedField(
                form_id=f"{record['id']}-{record['documentId']}",
                page_number=int(record["page"]),
                field_type=field_type,
                page_x=float(record["positionX"]),
                page_y=float(record["positionY"]),
                page_width=float(record["width"]),
                page_height=float(record["height"]),
                signer_email=emails.get(record.get("recipientId"), ""),
                native_id=int(record["id"]),
                field_meta=coerce_field_meta(field_type, record.get("fieldMeta")),
            )
            if field.form_id in form_ids:
                raise DuplicateFormIdError(f"Duplicate stored field: {field.form_id}")
            form_ids.add(field.form_id)
            loaded.append(field)

        # The current session is only replaced once every record has parsed.
        self.remove_all()
        self._seen_ids.clear()
        for field in loaded:
            self.append(field)
