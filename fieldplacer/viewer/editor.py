"""Field placement editor: placement, move/resize and recipient selection."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QRectF, Signal

from fieldplacer.config import PlacementSettings, get_settings
from fieldplacer.geometry.resolver import (
    FieldBounds,
    PercentRect,
    clamp_rect,
    clamp_resized_rect,
    field_rect_to_percent,
)
from fieldplacer.model.field import FieldType, GeometryPatch, PlacedField
from fieldplacer.model.recipient import Recipient
from fieldplacer.state.collection import FieldCollection
from fieldplacer.validation.meta_editor import FieldMetaEditor
from fieldplacer.viewer.page_layout import PageLayout
from fieldplacer.viewer.pointer import PointerEventSource
from fieldplacer.viewer.session import PointerTrackingSession

logger = logging.getLogger(__name__)


class FieldPlacementEditor(QObject):
    placement_armed = Signal(object)
    placement_finished = Signal()
    preview_changed = Signal(object)
    selected_recipient_changed = Signal(object)

    def __init__(
        self,
        layout: PageLayout,
        pointer: PointerEventSource,
        collection: FieldCollection | None = None,
        settings: PlacementSettings | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings or get_settings()
        self._layout = layout
        self._pointer = pointer
        self._collection = collection if collection is not None else FieldCollection(self._settings)
        self._bounds = FieldBounds(self._settings)
        self._recipients: list[Recipient] = []
        self._selected_recipient: Recipient | None = None
        self._session: PointerTrackingSession | None = None

        surface_size = layout.first_surface_size()
        if surface_size is not None:
            self._bounds.update(surface_size)
        layout.surface_resized.connect(self._bounds.update)

    @property
    def collection(self) -> FieldCollection:
        return self._collection

    @property
    def bounds(self) -> FieldBounds:
        return self._bounds

    @property
    def session(self) -> PointerTrackingSession | None:
        return self._session

    @property
    def selected_recipient(self) -> Recipient | None:
        return self._selected_recipient

    @property
    def placement_enabled(self) -> bool:
        recipient = self._selected_recipient
        return recipient is not None and recipient.can_place_fields

    def set_recipients(self, recipients: list[Recipient]) -> None:
        self._recipients = list(recipients)
        selected = next((r for r in self._recipients if not r.has_been_sent), None)
        if selected is None and self._recipients:
            selected = self._recipients[0]
        self._set_selected(selected)

    def select_recipient(self, email: str) -> Recipient:
        for recipient in self._recipients:
            if recipient.email == email:
                self._set_selected(recipient)
                return recipient
        raise KeyError(email)

    def can_edit(self, field: PlacedField) -> bool:
        recipient = self._selected_recipient
        if recipient is None or recipient.has_been_sent:
            return False
        return recipient.email == field.signer_email

    def arm(self, field_type: FieldType) -> bool:
        if not self.placement_enabled:
            logger.debug("Placement disabled for current recipient, ignoring %s", field_type.value)
            return False

        if self._session is None:
            session = PointerTrackingSession(
                pointer=self._pointer,
                locator=self._layout,
                bounds=self._bounds,
                recipient=self._placement_recipient,
                form_id_factory=self._collection.next_form_id,
            )
            session.preview_changed.connect(self.preview_changed)
            session.committed.connect(self._on_committed)
            session.cancelled.connect(self._on_session_finished)
            self._session = session
        self._session.arm(field_type)
        self.placement_armed.emit(field_type)
        return True

    def cancel_placement(self) -> None:
        if self._session is not None:
            self._session.cancel()

    def move_field(self, index: int, field_rect: QRectF) -> PlacedField | None:
        field = self._editable_field(index)
        if field is None:
            return None
        rect = self._settled_rect(field, field_rect)
        if rect is None:
            return None
        # Moves keep the stored size; only the origin is re-clamped against it.
        moved = clamp_rect(PercentRect(rect.x, rect.y, field.page_width, field.page_height))
        return self._collection.update_geometry(index, GeometryPatch.move(moved))

    def resize_field(self, index: int, field_rect: QRectF) -> PlacedField | None:
        field = self._editable_field(index)
        if field is None:
            return None
        rect = self._settled_rect(field, field_rect)
        if rect is None:
            return None
        patch = GeometryPatch.resize(clamp_resized_rect(rect))
        return self._collection.update_geometry(index, patch)

    def remove_field(self, index: int) -> PlacedField | None:
        if self._editable_field(index) is None:
            return None
        return self._collection.remove(index)

    def remove_all_fields(self) -> None:
        self.cancel_placement()
        self._collection.remove_all()

    def open_meta_editor(self, form_id: str) -> FieldMetaEditor:
        return FieldMetaEditor(self._collection.get(form_id))

    def _editable_field(self, index: int) -> PlacedField | None:
        field = self._collection[index]
        if not self.can_edit(field):
            logger.debug("Field %s is not editable by the selected recipient", field.form_id)
            return None
        return field

    def _settled_rect(self, field: PlacedField, field_rect: QRectF) -> PercentRect | None:
        page_rect = self._layout.page_rect(field.page_number)
        if page_rect is None:
            logger.debug("Page %d not mounted, ignoring geometry change", field.page_number)
            return None
        if field_rect.width() <= 0 or field_rect.height() <= 0:
            logger.debug("Ignoring empty geometry for field %s", field.form_id)
            return None
        return field_rect_to_percent(field_rect, page_rect)

    def _placement_recipient(self) -> Recipient | None:
        return self._selected_recipient if self.placement_enabled else None

    def _set_selected(self, recipient: Recipient | None) -> None:
        if recipient == self._selected_recipient:
            return
        self._selected_recipient = recipient
        if not self.placement_enabled:
            self.cancel_placement()
        self.selected_recipient_changed.emit(recipient)

    def _on_committed(self, field: PlacedField) -> None:
        self._collection.append(field)
        self._on_session_finished()

    def _on_session_finished(self) -> None:
        self._session = None
        self.placement_finished.emit()
