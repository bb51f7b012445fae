"""Tests for the demo translator."""

import pytest

from bireader.models import DocumentKind
from bireader.services.ingestion import sample_document
from bireader.services.translation import (
    DEFAULT_DELAY_MS,
    DEMO_PLACEHOLDER,
    TEXT_DELAY_MS,
    DemoTranslator,
)


@pytest.fixture
def translator(qapp):
    return DemoTranslator(text_delay_ms=10, default_delay_ms=20)


class TestDemoTranslator:
    """Test translation results and their timing."""

    def test_default_delays(self, pending_document):
        translator = DemoTranslator()
        pending_document.kind = DocumentKind.TXT
        assert translator.delay_for(pending_document) == TEXT_DELAY_MS
        pending_document.kind = DocumentKind.PDF
        assert translator.delay_for(pending_document) == DEFAULT_DELAY_MS

    def test_bundled_article_gets_bundled_translations(self, translator):
        document = sample_document("doc-upload", "paper.pdf", translated=False)
        assert translator.translations_for(document) == {
            p.id: p.target_text for p in sample_document().paragraphs
        }

    def test_other_text_gets_placeholder(self, translator, pending_document):
        assert translator.translations_for(pending_document) == {
            1: DEMO_PLACEHOLDER,
            2: DEMO_PLACEHOLDER,
        }

    def test_translated_paragraphs_are_skipped(self, translator, sample_document):
        assert translator.translations_for(sample_document) == {}

    def test_translate_emits_after_delay(self, qtbot, translator, pending_document):
        with qtbot.waitSignal(translator.finished, timeout=1000) as blocker:
            translator.translate(pending_document)
            assert translator.busy
        document_id, translations = blocker.args
        assert document_id == "doc-pending"
        assert translations == {1: DEMO_PLACEHOLDER, 2: DEMO_PLACEHOLDER}
        assert not translator.busy

    def test_cancel(self, qtbot, translator, pending_document):
        translator.translate(pending_document)
        translator.cancel()
        assert not translator.busy
        with qtbot.assertNotEmitted(translator.finished, wait=60):
            pass

    def test_new_request_replaces_old(self, qtbot, translator, pending_document):
        document = sample_document("doc-upload", "paper.pdf", translated=False)
        results = []
        translator.finished.connect(lambda doc_id, _t: results.append(doc_id))
        translator.translate(pending_document)
        translator.translate(document)
        qtbot.waitUntil(lambda: bool(results), timeout=1000)
        qtbot.wait(40)
        assert results == ["doc-upload"]
