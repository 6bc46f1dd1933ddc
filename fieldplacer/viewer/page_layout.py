"""Device-pixel layout of rendered PDF pages.

Pages are stacked top to bottom at the current zoom with a fixed gap, each
centered on the widest page. Rects are recomputed on every query so callers
never hold stale geometry across zoom or scroll changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import fitz
from PySide6.QtCore import QObject, QPointF, QRectF, QSizeF, Signal

from fieldplacer.config import PlacementSettings, get_settings
from fieldplacer.errors import PdfLoadError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PageMetrics:
    width_pt: float
    height_pt: float


@dataclass(frozen=True, slots=True)
class PageSurface:
    page_number: int
    rect: QRectF


class PageLayout(QObject):
    surface_resized = Signal(object)

    def __init__(
        self,
        pages: list[PageMetrics] | None = None,
        zoom: float | None = None,
        settings: PlacementSettings | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings or get_settings()
        self._pages: list[PageMetrics] = list(pages or [])
        self._zoom = zoom if zoom is not None else self._settings.default_zoom
        self._origin = QPointF(0.0, 0.0)
        if self._zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {self._zoom}")

    @classmethod
    def from_document(
        cls,
        document: fitz.Document,
        zoom: float | None = None,
        settings: PlacementSettings | None = None,
    ) -> PageLayout:
        pages = []
        for page_index in range(document.page_count):
            page = document.load_page(page_index)
            pages.append(PageMetrics(width_pt=float(page.rect.width), height_pt=float(page.rect.height)))
        return cls(pages, zoom=zoom, settings=settings)

    @classmethod
    def open(
        cls,
        path: str | Path,
        zoom: float | None = None,
        settings: PlacementSettings | None = None,
    ) -> PageLayout:
        source_path = Path(path)
        if not source_path.exists():
            raise PdfLoadError(f"File not found: {source_path}")

        try:
            document = fitz.open(source_path)
        except Exception as exc:  # pragma: no cover - PyMuPDF error types vary
            raise PdfLoadError(f"Failed to open PDF: {source_path}") from exc

        try:
            return cls.from_document(document, zoom=zoom, settings=settings)
        finally:
            document.close()

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def origin(self) -> QPointF:
        return QPointF(self._origin)

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def is_mounted(self) -> bool:
        return bool(self._pages)

    def set_pages(self, pages: list[PageMetrics]) -> None:
        before = self.first_surface_size()
        self._pages = list(pages)
        self._notify_if_resized(before)

    def set_zoom(self, zoom: float) -> None:
        if zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {zoom}")
        before = self.first_surface_size()
        self._zoom = zoom
        self._notify_if_resized(before)

    def set_origin(self, origin: QPointF) -> None:
        """Move the layout, e.g. when the host scrolls its viewport."""
        self._origin = QPointF(origin)

    def surfaces(self) -> list[PageSurface]:
        if not self._pages:
            return []

        content_width = max(page.width_pt for page in self._pages) * self._zoom
        gap = self._settings.page_gap_px
        top = self._origin.y()
        surfaces: list[PageSurface] = []
        for page_number, page in enumerate(self._pages, start=1):
            width = page.width_pt * self._zoom
            height = page.height_pt * self._zoom
            left = self._origin.x() + (content_width - width) / 2.0
            surfaces.append(PageSurface(page_number, QRectF(left, top, width, height)))
            top += height + gap
        return surfaces

    def page_rect(self, page_number: int) -> QRectF | None:
        if page_number < 1 or page_number > len(self._pages):
            return None
        return self.surfaces()[page_number - 1].rect

    def resolve_page_at(self, point: QPointF) -> PageSurface | None:
        for surface in self.surfaces():
            if surface.rect.contains(point):
                return surface
        return None

    def first_surface_size(self) -> QSizeF | None:
        if not self._pages:
            return None
        page = self._pages[0]
        return QSizeF(page.width_pt * self._zoom, page.height_pt * self._zoom)

    def _notify_if_resized(self, before: QSizeF | None) -> None:
        after = self.first_surface_size()
        if after is None or after == before:
            return
        logger.debug("Page surface resized to %.1fx%.1f px", after.width(), after.height())
        self.surface_resized.emit(after)
