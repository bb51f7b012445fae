"""Shared pytest fixtures and test helpers for Bilingual Reader tests."""

import os
import tempfile
from pathlib import Path

# Set temporary data and database paths for tests before any other imports.
# This prevents bireader from creating directories in the user's home.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
if "BIREADER_DATA_PATH" not in os.environ:
    os.environ["BIREADER_DATA_PATH"] = tempfile.mkdtemp(prefix="bireader-tests-")
if "BIREADER_DB_PATH" not in os.environ:
    _temp_db = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    _temp_db.close()
    os.environ["BIREADER_DB_PATH"] = _temp_db.name

import pytest
from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication, QScrollBar
from sqlalchemy.orm import sessionmaker

# Qt requires a QApplication before any widget is created, including during
# test collection.
if QApplication.instance() is None:
    _ = QApplication([])

# Keep QSettings written by the windows under test out of the user's config.
QSettings.setDefaultFormat(QSettings.Format.IniFormat)
QSettings.setPath(
    QSettings.Format.IniFormat,
    QSettings.Scope.UserScope,
    os.environ["BIREADER_DATA_PATH"],
)
QApplication.setOrganizationName("bireader-tests")
QApplication.setApplicationName("bireader-tests")

from bireader.db import Base, create_engine_with_path
from bireader.models import Document, Paragraph, ParagraphKind
from bireader.services.document_store import DocumentStore
from bireader.services.history import HistoryService
from bireader.settings import ViewerSettings


class Element:
    """A stand-in for a rendered paragraph; weak-referenceable."""

    def __init__(self, name: str = "") -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<Element {self.name}>"


class FakeRect:
    """The parts of QRectF the lookup controller reads."""

    def __init__(self, left: float, top: float, width: float = 40.0) -> None:
        self._left = left
        self._top = top
        self._width = width

    def left(self) -> float:
        return self._left

    def top(self) -> float:
        return self._top

    def width(self) -> float:
        return self._width


def make_scroll_bar(maximum: int, minimum: int = 0) -> QScrollBar:
    """A detached vertical scroll bar with the given range."""
    bar = QScrollBar()
    bar.setRange(minimum, maximum)
    return bar


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for testing PySide6 widgets."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def db_session():
    """Create a temporary database and session for testing."""
    temp_db = tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".db")
    temp_db.close()
    db_path = Path(temp_db.name)

    engine = create_engine_with_path(db_path)
    Base.metadata.create_all(engine)
    SessionFactory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionFactory()

    yield session

    session.close()
    engine.dispose()
    os.unlink(temp_db.name)


@pytest.fixture
def history(db_session):
    """A history service over the temporary database."""
    return HistoryService(db_session)


@pytest.fixture
def qsettings(tmp_path):
    """An isolated, file-backed QSettings."""
    return QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)


@pytest.fixture
def settings():
    """Default viewer settings."""
    return ViewerSettings()


@pytest.fixture
def sample_document():
    """
    A small document with a title, an abstract, a section heading and body
    paragraphs; every target is already translated.
    """
    return Document(
        id="doc-sample",
        display_name="sample.pdf",
        paragraphs=[
            Paragraph(1, ParagraphKind.TITLE, "A Study of Things", "事物研究"),
            Paragraph(
                2,
                ParagraphKind.ABSTRACT,
                "We study things. The results are surprising.",
                "我们研究事物。结果令人惊讶。",
            ),
            Paragraph(
                3,
                ParagraphKind.BODY,
                "The transformer changed the field. It uses attention.",
                "Transformer 改变了这个领域。它使用注意力机制。",
            ),
            Paragraph(4, ParagraphKind.SECTION, "2 Methods", "2 方法"),
            Paragraph(5, ParagraphKind.BODY, "We collected a corpus.", "我们收集了语料库。"),
            Paragraph(6, ParagraphKind.BODY, "Results follow.", "结果如下。"),
        ],
        size_bytes=2048,
    )


@pytest.fixture
def pending_document():
    """A plain text document whose paragraphs are all pending."""
    return Document(
        id="doc-pending",
        display_name="notes.txt",
        paragraphs=[
            Paragraph(1, ParagraphKind.BODY, "First paragraph of the notes."),
            Paragraph(2, ParagraphKind.BODY, "Second paragraph of the notes."),
        ],
    )


@pytest.fixture
def store(qapp, sample_document):
    """A document store with the sample document loaded."""
    store = DocumentStore()
    store.load(sample_document)
    return store
