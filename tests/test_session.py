"""Tests for the viewer session flows."""

import pytest

from bireader.exc import DoesNotExist, UnsupportedFileType
from bireader.models import DocumentSummary, Side
from bireader.services.ingestion import (
    SAMPLE_DOCUMENT_ID,
    UNAVAILABLE_TEXT,
    sample_document,
)
from bireader.services.progress import ProgressState, TranslationProgress
from bireader.services.session import ViewerSession
from bireader.services.translation import DEMO_PLACEHOLDER, DemoTranslator

NOTES = (
    "The first paragraph of some notes.\n\n"
    "The second paragraph of the notes.\n\n"
    "The third and last paragraph."
)


@pytest.fixture
def make_session(qapp):
    def factory(history=None):
        return ViewerSession(
            history,
            translator=DemoTranslator(text_delay_ms=10, default_delay_ms=10),
            progress=TranslationProgress(((0, 5), (5, 40)), settle_ms=10),
        )

    return factory


@pytest.fixture
def session(make_session, history):
    return make_session(history)


@pytest.fixture
def notes_path(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text(NOTES, encoding="utf-8")
    return path


class TestViewerSession:
    """Test opening, uploading and reopening documents."""

    def test_open_sample(self, qtbot, session):
        with qtbot.waitSignal(session.document_opened) as blocker:
            document = session.open_sample()
        assert blocker.args == [SAMPLE_DOCUMENT_ID]
        assert session.document is document
        assert document.is_fully_translated
        assert session.state.document_id == SAMPLE_DOCUMENT_ID

    def test_opening_clears_active_paragraph(self, session):
        session.open_sample()
        session.navigation.navigate(7, Side.SOURCE)
        assert session.state.active_paragraph_id == 7
        session.open_sample()
        assert session.state.active_paragraph_id is None

    def test_upload_text(self, qtbot, session, history, notes_path):
        with qtbot.waitSignal(session.translations_applied, timeout=2000) as blocker:
            document = session.upload(notes_path)
            assert session.progress.in_progress
            assert not session.progress.is_pane_interactive(Side.TARGET)
        assert blocker.args == [document.id, 3]
        assert document.is_fully_translated
        assert document.paragraph(1).target_text == DEMO_PLACEHOLDER
        assert session.progress.percent == 100
        assert history.list()[0].id == document.id
        qtbot.waitUntil(
            lambda: session.progress.state == ProgressState.IDLE, timeout=1000
        )

    def test_upload_pdf_gets_article_translations(self, qtbot, session, tmp_path):
        path = tmp_path / "paper.pdf"
        path.write_bytes(b"%PDF-1.7")
        with qtbot.waitSignal(session.translations_applied, timeout=2000):
            document = session.upload(path)
        assert document.display_name == "paper.pdf"
        expected = sample_document().paragraph(1).target_text
        assert document.paragraph(1).target_text == expected

    def test_upload_unsupported(self, session, tmp_path):
        session.open_sample()
        path = tmp_path / "image.png"
        path.write_bytes(b"\x89PNG")
        with pytest.raises(UnsupportedFileType):
            session.upload(path)
        assert session.document.id == SAMPLE_DOCUMENT_ID

    def test_switching_document_drops_translation(self, qtbot, session, notes_path):
        document = session.upload(notes_path)
        session.open_sample()
        with qtbot.assertNotEmitted(session.translations_applied, wait=60):
            pass
        assert document.pending_count == 3
        assert session.progress.state == ProgressState.IDLE
        assert session.progress.is_pane_interactive(Side.TARGET)

    def test_reopen_cached_document(self, qtbot, session, notes_path):
        with qtbot.waitSignal(session.translations_applied, timeout=2000):
            document = session.upload(notes_path)
        session.open_sample()
        assert session.open_from_history(document.id) is document
        assert session.document is document
        assert not session.progress.in_progress

    def test_reopen_pending_document_translates(self, qtbot, session, notes_path):
        document = session.upload(notes_path)
        session.open_sample()
        with qtbot.waitSignal(session.translations_applied, timeout=2000):
            session.open_from_history(document.id)
            assert session.progress.in_progress
        assert document.is_fully_translated

    def test_reopen_demo(self, session, history):
        history.seed_demos()
        document = session.open_from_history("demo-transformer")
        assert document.id == "demo-transformer"
        assert document.display_name == history.get("demo-transformer").name
        assert document.is_fully_translated

    def test_reopen_forgotten_content(self, session, history):
        history.upsert(
            DocumentSummary(
                id="doc-gone", name="gone.txt", size=100, kind="txt", page_count=1
            )
        )
        document = session.open_from_history("doc-gone")
        assert document.display_name == "gone.txt"
        assert document.paragraphs[0].text_for(Side.SOURCE) == UNAVAILABLE_TEXT
        assert not session.progress.in_progress

    def test_reopen_unknown(self, session):
        with pytest.raises(DoesNotExist):
            session.open_from_history("doc-unknown")

    def test_remove_from_history(self, qtbot, session, history, notes_path):
        with qtbot.waitSignal(session.translations_applied, timeout=2000):
            document = session.upload(notes_path)
        assert session.remove_from_history(document.id)
        assert not session.store.has(document.id)
        assert session.document is document
        assert history.list() == []

    def test_removing_open_document_still_applies_translation(
        self, qtbot, session, notes_path
    ):
        document = session.upload(notes_path)
        assert session.remove_from_history(document.id)
        with qtbot.waitSignal(session.translations_applied, timeout=2000) as blocker:
            pass
        assert blocker.args == [document.id, 3]
        assert session.document is document
        assert document.pending_count == 0
        assert session.store.get(document.id) is None

    def test_without_history(self, qtbot, make_session, notes_path):
        session = make_session()
        with qtbot.waitSignal(session.translations_applied, timeout=2000):
            session.upload(notes_path)
        assert not session.remove_from_history("anything")
        with pytest.raises(DoesNotExist):
            session.open_from_history("doc-unknown")
