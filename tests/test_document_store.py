"""Tests for the document store."""

from bireader.models import Side
from bireader.services.document_store import DocumentStore


class TestDocumentStore:
    """Test loading, caching and resolving translations."""

    def test_load_makes_current(self, qtbot, sample_document):
        store = DocumentStore()
        with qtbot.waitSignal(store.document_changed) as blocker:
            store.load(sample_document)
        assert blocker.args == ["doc-sample"]
        assert store.current is sample_document
        assert store.current_id == "doc-sample"
        assert len(store.paragraphs) == 6

    def test_reloading_current_does_not_notify(self, qtbot, store, sample_document):
        with qtbot.assertNotEmitted(store.document_changed):
            store.load(sample_document)

    def test_cache(self, store, pending_document):
        store.load(pending_document)
        assert store.has("doc-sample")
        assert store.get("doc-sample").display_name == "sample.pdf"
        store.forget("doc-sample")
        assert not store.has("doc-sample")
        assert store.get("doc-sample") is None

    def test_forget_keeps_current_displayed(self, store):
        store.forget("doc-sample")
        assert store.current_id == "doc-sample"

    def test_resolve_translations(self, qtbot, store, pending_document):
        store.load(pending_document)
        with qtbot.waitSignal(store.paragraphs_resolved) as blocker:
            changed = store.resolve_translations(
                "doc-pending", {1: "第一段", 2: "第二段", 99: "不存在"}
            )
        assert changed == 2
        assert blocker.args == ["doc-pending", [1, 2]]
        assert pending_document.is_fully_translated

    def test_resolve_is_single_transition(self, qtbot, store):
        # The sample document is already translated.
        with qtbot.assertNotEmitted(store.paragraphs_resolved):
            changed = store.resolve_translations("doc-sample", {3: "另一个"})
        assert changed == 0
        assert store.paragraph_text(3, Side.TARGET).startswith("Transformer")

    def test_resolve_forgotten_current_document(self, qtbot, store, pending_document):
        store.load(pending_document)
        store.forget("doc-pending")
        with qtbot.waitSignal(store.paragraphs_resolved) as blocker:
            changed = store.resolve_translations("doc-pending", {1: "第一段"})
        assert changed == 1
        assert blocker.args == ["doc-pending", [1]]
        assert store.paragraph_text(1, Side.TARGET) == "第一段"

    def test_resolve_unknown_document(self, store):
        assert store.resolve_translations("missing", {1: "x"}) == 0

    def test_paragraph_text(self, store):
        assert store.paragraph_text(6, Side.SOURCE) == "Results follow."
        assert store.paragraph_text(6, Side.TARGET) == "结果如下。"
        assert store.paragraph_text(60, Side.SOURCE) is None

    def test_paragraph_text_without_document(self):
        assert DocumentStore().paragraph_text(1, Side.SOURCE) is None
