"""Tests for the history side panel."""

from datetime import datetime, timedelta

import pytest

from bireader.models import DocumentSummary
from bireader.ui.history_panel import DOCUMENT_ID_ROLE, HistoryPanel

NOW = datetime(2024, 5, 10, 15, 0, 0)


@pytest.fixture
def panel(qtbot, history):
    for document_id, name, age in (
        ("doc-old", "old survey.pdf", timedelta(days=30)),
        ("doc-week", "weekly notes.txt", timedelta(days=3)),
        ("doc-today", "today draft.docx", timedelta(hours=1)),
    ):
        history.upsert(
            DocumentSummary(
                id=document_id,
                name=name,
                uploaded_at=NOW - age,
                size=2048,
                kind=name.rsplit(".", 1)[1],
                page_count=2,
            )
        )
    panel = HistoryPanel(history)
    qtbot.addWidget(panel)
    panel.refresh(now=NOW)
    return panel


def group_labels(panel):
    return [
        panel.tree.topLevelItem(i).text(0)
        for i in range(panel.tree.topLevelItemCount())
    ]


class TestHistoryPanel:
    """Test listing, searching, opening and deleting entries."""

    def test_groups(self, panel):
        assert group_labels(panel) == ["Today", "Last 7 days", "Older"]
        today = panel.tree.topLevelItem(0)
        assert today.child(0).data(0, DOCUMENT_ID_ROLE) == "doc-today"
        assert "today draft.docx" in today.child(0).text(0)
        assert panel.count_label.text() == "3 documents"

    def test_search(self, panel):
        panel.search_input.setText("NOTES")
        assert group_labels(panel) == ["Last 7 days"]
        assert panel.count_label.text() == "1 documents"

    def test_open(self, qtbot, panel):
        item = panel.tree.topLevelItem(2).child(0)
        with qtbot.waitSignal(panel.document_selected) as blocker:
            panel.tree.itemDoubleClicked.emit(item, 0)
        assert blocker.args == ["doc-old"]

    def test_group_headings_do_not_open(self, qtbot, panel):
        with qtbot.assertNotEmitted(panel.document_selected):
            panel.tree.itemDoubleClicked.emit(panel.tree.topLevelItem(0), 0)

    def test_delete_selected(self, qtbot, panel, history):
        panel.document_removed.connect(history.remove)
        panel.tree.setCurrentItem(panel.tree.topLevelItem(1).child(0))
        with qtbot.waitSignal(panel.document_removed) as blocker:
            panel.delete_selected()
        assert blocker.args == ["doc-week"]
        assert [s.id for s in history.list()] == ["doc-today", "doc-old"]

    def test_delete_without_selection(self, qtbot, panel):
        panel.tree.setCurrentItem(None)
        with qtbot.assertNotEmitted(panel.document_removed):
            panel.delete_selected()
