"""Shared fixtures for placement engine tests."""

import pytest
from PySide6.QtCore import QCoreApplication, QPointF, QRectF

from fieldplacer.config import PlacementSettings
from fieldplacer.model.recipient import Recipient, RecipientRole, SendStatus
from fieldplacer.state.collection import FieldCollection
from fieldplacer.viewer.page_layout import PageLayout, PageMetrics
from fieldplacer.viewer.pointer import PointerEventSource


class SignalRecorder:
    """Collects every emission of a Qt signal."""

    def __init__(self, signal) -> None:
        self.calls: list[tuple] = []
        signal.connect(self.slot)

    def slot(self, *args) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)

    @property
    def last(self) -> tuple:
        return self.calls[-1]


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def settings() -> PlacementSettings:
    return PlacementSettings(_env_file=None)


@pytest.fixture
def page_rect() -> QRectF:
    return QRectF(100, 50, 800, 600)


@pytest.fixture
def layout(settings) -> PageLayout:
    """Two 800x600 px pages, the first at (100, 50)."""
    layout = PageLayout([PageMetrics(800, 600), PageMetrics(800, 600)], zoom=1.0, settings=settings)
    layout.set_origin(QPointF(100, 50))
    return layout


@pytest.fixture
def pointer() -> PointerEventSource:
    return PointerEventSource()


@pytest.fixture
def collection(settings) -> FieldCollection:
    return FieldCollection(settings)


@pytest.fixture
def signer() -> Recipient:
    return Recipient(id=1, email="signer@example.com", name="Signer")


@pytest.fixture
def recipients(signer) -> list[Recipient]:
    return [
        signer,
        Recipient(id=2, email="viewer@example.com", role=RecipientRole.VIEWER),
        Recipient(id=3, email="cc@example.com", role=RecipientRole.CC),
        Recipient(id=4, email="sent@example.com", send_status=SendStatus.SENT),
    ]


@pytest.fixture
def record():
    """Start recording a signal: ``calls = record(obj.signal)``."""
    return SignalRecorder
