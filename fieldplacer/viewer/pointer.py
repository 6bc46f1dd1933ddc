"""Pointer events delivered by the host view."""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class PointerEventSource(QObject):
    """Host-owned relay for global pointer events.

    The host forwards its native move/release events here in device pixels;
    placement sessions connect while armed and disconnect when they finish.
    """

    moved = Signal(object)
    released = Signal(object)
