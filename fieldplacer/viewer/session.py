"""Armed placement interaction driven by pointer events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from PySide6.QtCore import QObject, QPointF, QRectF, Signal

from fieldplacer.geometry.resolver import FieldBounds, is_within_page_bounds, placement_rect
from fieldplacer.model.field import FieldType, PlacedField
from fieldplacer.model.recipient import Recipient
from fieldplacer.viewer.page_layout import PageSurface
from fieldplacer.viewer.pointer import PointerEventSource

logger = logging.getLogger(__name__)


class PageLocator(Protocol):
    def resolve_page_at(self, point: QPointF) -> PageSurface | None: ...

    def page_rect(self, page_number: int) -> QRectF | None: ...


class SessionState(str, Enum):
    IDLE = "idle"
    ARMED = "armed"


@dataclass(frozen=True, slots=True)
class PlacementPreview:
    """Live candidate marker, in device pixels and never clamped."""

    field_type: FieldType
    rect: QRectF
    in_bounds: bool
    page_number: int | None


class PointerTrackingSession(QObject):
    """Tracks the pointer while a field type is armed for placement.

    Moves only produce previews. A release either commits exactly one field or
    cancels; both return the session to idle and disconnect it from the
    pointer source before anything is emitted.
    """

    preview_changed = Signal(object)
    committed = Signal(object)
    cancelled = Signal()

    def __init__(
        self,
        pointer: PointerEventSource,
        locator: PageLocator,
        bounds: FieldBounds,
        recipient: Callable[[], Recipient | None],
        form_id_factory: Callable[[], str],
    ) -> None:
        super().__init__()
        self._pointer = pointer
        self._locator = locator
        self._bounds = bounds
        self._recipient = recipient
        self._form_id_factory = form_id_factory
        self._state = SessionState.IDLE
        self._field_type: FieldType | None = None
        self._listening = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def field_type(self) -> FieldType | None:
        return self._field_type

    @property
    def is_listening(self) -> bool:
        return self._listening

    def arm(self, field_type: FieldType) -> None:
        if self._state is SessionState.ARMED:
            logger.debug("Replacing armed %s with %s", self._field_type.value, field_type.value)
            self._field_type = field_type
            return

        self._field_type = field_type
        self._state = SessionState.ARMED
        self._start_listening()
        logger.debug("Armed %s placement", field_type.value)

    def cancel(self) -> None:
        was_armed = self._state is SessionState.ARMED
        self._reset()
        if was_armed:
            logger.debug("Placement cancelled")
            self.cancelled.emit()

    def _on_moved(self, point: QPointF) -> None:
        if self._state is not SessionState.ARMED or self._field_type is None:
            return

        size = self._bounds.size
        surface = self._locator.resolve_page_at(point)
        in_bounds = surface is not None and is_within_page_bounds(point, surface.rect, size)
        rect = QRectF(
            point.x() - size.width() / 2.0,
            point.y() - size.height() / 2.0,
            size.width(),
            size.height(),
        )
        self.preview_changed.emit(
            PlacementPreview(
                field_type=self._field_type,
                rect=rect,
                in_bounds=in_bounds,
                page_number=surface.page_number if surface is not None else None,
            )
        )

    def _on_released(self, point: QPointF) -> None:
        if self._state is not SessionState.ARMED or self._field_type is None:
            return

        size = self._bounds.size
        surface = self._locator.resolve_page_at(point)
        if surface is None:
            logger.debug("No page surface under pointer, cancelling placement")
            self.cancel()
            return
        if not is_within_page_bounds(point, surface.rect, size):
            logger.debug("Field out of page %d bounds, cancelling placement", surface.page_number)
            self.cancel()
            return
        recipient = self._recipient()
        if recipient is None:
            logger.debug("No recipient selected, cancelling placement")
            self.cancel()
            return

        rect = placement_rect(point, size, surface.rect)
        field = PlacedField(
            form_id=self._form_id_factory(),
            page_number=surface.page_number,
            field_type=self._field_type,
            page_x=rect.x,
            page_y=rect.y,
            page_width=rect.width,
            page_height=rect.height,
            signer_email=recipient.email,
        )
        self._reset()
        logger.debug(
            "Committed %s field %s on page %d at (%.2f%%, %.2f%%)",
            field.field_type.value,
            field.form_id,
            field.page_number,
            field.page_x,
            field.page_y,
        )
        self.committed.emit(field)

    def _start_listening(self) -> None:
        if self._listening:
            return
        self._pointer.moved.connect(self._on_moved)
        self._pointer.released.connect(self._on_released)
        self._listening = True

    def _stop_listening(self) -> None:
        if not self._listening:
            return
        self._listening = False
        self._pointer.moved.disconnect(self._on_moved)
        self._pointer.released.disconnect(self._on_released)

    def _reset(self) -> None:
        self._stop_listening()
        self._state = SessionState.IDLE
        self._field_type = None
