"""Mapping between device pixels and page-relative percentages.

Pixel-space values are Qt geometry types measured in the host's device
coordinate space. Percentage-space values are relative to one page
surface: ``x`` and ``width`` to the page width, ``y`` and ``height`` to the
page height. Persisted geometry is always percentages, so it survives zoom,
window resizes and device pixel ratio changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QPointF, QRectF, QSizeF

from fieldplacer.config import PlacementSettings, get_settings

logger = logging.getLogger(__name__)

FULL_PAGE = 100.0


@dataclass(frozen=True, slots=True)
class PercentPoint:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class PercentSize:
    width: float
    height: float


@dataclass(frozen=True, slots=True)
class PercentRect:
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> PercentPoint:
        return PercentPoint(self.x, self.y)

    @property
    def size(self) -> PercentSize:
        return PercentSize(self.width, self.height)

    def is_settled(self) -> bool:
        """True when the rect satisfies the bounds a committed field must hold."""
        return (
            self.width > 0
            and self.height > 0
            and self.x >= 0
            and self.y >= 0
            and self.x + self.width <= FULL_PAGE
            and self.y + self.height <= FULL_PAGE
        )


def _check_page_rect(page_rect: QRectF) -> None:
    if page_rect.width() <= 0 or page_rect.height() <= 0:
        raise ValueError(
            f"Page surface has no area: {page_rect.width()}x{page_rect.height()}"
        )


def to_page_percent(point: QPointF, page_rect: QRectF) -> PercentPoint:
    _check_page_rect(page_rect)
    return PercentPoint(
        x=(point.x() - page_rect.left()) / page_rect.width() * FULL_PAGE,
        y=(point.y() - page_rect.top()) / page_rect.height() * FULL_PAGE,
    )


def from_page_percent(point: PercentPoint, page_rect: QRectF) -> QPointF:
    _check_page_rect(page_rect)
    return QPointF(
        page_rect.left() + point.x / FULL_PAGE * page_rect.width(),
        page_rect.top() + point.y / FULL_PAGE * page_rect.height(),
    )


def size_to_page_percent(size: QSizeF, page_rect: QRectF) -> PercentSize:
    # Width and height scale separately: pages are not assumed to be square.
    _check_page_rect(page_rect)
    return PercentSize(
        width=size.width() / page_rect.width() * FULL_PAGE,
        height=size.height() / page_rect.height() * FULL_PAGE,
    )


def size_from_page_percent(size: PercentSize, page_rect: QRectF) -> QSizeF:
    _check_page_rect(page_rect)
    return QSizeF(
        size.width / FULL_PAGE * page_rect.width(),
        size.height / FULL_PAGE * page_rect.height(),
    )


def center_on(point: PercentPoint, size: PercentSize) -> PercentPoint:
    return PercentPoint(point.x - size.width / 2.0, point.y - size.height / 2.0)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def clamp_rect(rect: PercentRect) -> PercentRect:
    """Clamp a rect into the page: size into (0, 100], origin into [0, 100 - size].

    Zero or negative sizes cannot be repaired here and raise ``ValueError``.
    """
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(f"Field size must be positive, got {rect.width}x{rect.height}")

    width = min(rect.width, FULL_PAGE)
    height = min(rect.height, FULL_PAGE)
    return PercentRect(
        x=_clamp(rect.x, 0.0, FULL_PAGE - width),
        y=_clamp(rect.y, 0.0, FULL_PAGE - height),
        width=width,
        height=height,
    )


def clamp_resized_rect(rect: PercentRect) -> PercentRect:
    """Clamp a resized rect by trimming its size at the page edge.

    The origin only moves when it lies outside the page itself.
    """
    x = _clamp(rect.x, 0.0, FULL_PAGE)
    y = _clamp(rect.y, 0.0, FULL_PAGE)
    width = min(rect.width, FULL_PAGE - x)
    height = min(rect.height, FULL_PAGE - y)
    if width <= 0 or height <= 0:
        return clamp_rect(rect)
    return PercentRect(x, y, width, height)


def field_rect_to_percent(field_rect: QRectF, page_rect: QRectF) -> PercentRect:
    """Express a field element's pixel rect relative to its page surface."""
    origin = to_page_percent(field_rect.topLeft(), page_rect)
    size = size_to_page_percent(field_rect.size(), page_rect)
    return PercentRect(origin.x, origin.y, size.width, size.height)


def placement_rect(point: QPointF, field_size: QSizeF, page_rect: QRectF) -> PercentRect:
    """Committed geometry for a field dropped with its center under ``point``."""
    size = size_to_page_percent(field_size, page_rect)
    origin = center_on(to_page_percent(point, page_rect), size)
    return clamp_rect(PercentRect(origin.x, origin.y, size.width, size.height))


def is_within_page_bounds(point: QPointF, page_rect: QRectF, field_size: QSizeF) -> bool:
    """True when a field centered on ``point`` lies entirely inside ``page_rect``."""
    half_width = field_size.width() / 2.0
    half_height = field_size.height() / 2.0

    if point.y() > page_rect.top() + page_rect.height() - half_height:
        return False
    if point.y() < page_rect.top() + half_height:
        return False
    if point.x() > page_rect.left() + page_rect.width() - half_width:
        return False
    if point.x() < page_rect.left() + half_width:
        return False
    return True


class FieldBounds:
    """Pixel size a new field occupies on the page surface.

    The size is a share of the surface (15% wide, 5% tall by default) but
    never below the pixel minimums, so fields stay usable on small pages.
    Hosts call :meth:`update` whenever the surface is resized or zoomed.
    """

    def __init__(self, settings: PlacementSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._surface_size: QSizeF | None = None
        self._size = QSizeF(self._settings.min_field_width_px, self._settings.min_field_height_px)

    @property
    def size(self) -> QSizeF:
        return QSizeF(self._size)

    @property
    def surface_size(self) -> QSizeF | None:
        return None if self._surface_size is None else QSizeF(self._surface_size)

    def update(self, surface_size: QSizeF) -> bool:
        settings = self._settings
        width = max(
            surface_size.width() * (settings.default_field_width_percent / FULL_PAGE),
            settings.min_field_width_px,
        )
        height = max(
            surface_size.height() * (settings.default_field_height_percent / FULL_PAGE),
            settings.min_field_height_px,
        )
        self._surface_size = QSizeF(surface_size)
        new_size = QSizeF(width, height)
        if new_size == self._size:
            return False
        logger.debug(
            "Field bounds %.1fx%.1f -> %.1fx%.1f px",
            self._size.width(),
            self._size.height(),
            width,
            height,
        )
        self._size = new_size
        return True
