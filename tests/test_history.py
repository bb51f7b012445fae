"""Tests for the document history."""

from datetime import datetime, timedelta

import pytest

from bireader.exc import DoesNotExist
from bireader.models import DocumentSummary
from bireader.services.history import MAX_HISTORY, group_by_date
from bireader.services.ingestion import demo_document_ids

NOW = datetime(2024, 5, 10, 15, 0, 0)


def make_summary(document_id, name=None, uploaded_at=NOW, **kwargs):
    return DocumentSummary(
        id=document_id,
        name=name or f"{document_id}.pdf",
        uploaded_at=uploaded_at,
        size=kwargs.pop("size", 1024),
        kind=kwargs.pop("kind", "pdf"),
        page_count=kwargs.pop("page_count", 1),
        paragraph_count=kwargs.pop("paragraph_count", 6),
        is_demo=kwargs.pop("is_demo", False),
    )


class TestHistoryService:
    """Test recording, trimming, searching and removing entries."""

    def test_upsert_new_entry(self, history):
        history.upsert(make_summary("doc-1"))
        entries = history.list()
        assert [e.id for e in entries] == ["doc-1"]
        assert history.get("doc-1").name == "doc-1.pdf"

    def test_most_recent_first(self, history):
        for document_id in ("doc-1", "doc-2", "doc-3"):
            history.upsert(make_summary(document_id))
        assert [e.id for e in history.list()] == ["doc-3", "doc-2", "doc-1"]

    def test_upsert_is_idempotent_and_moves_to_front(self, history):
        history.upsert(make_summary("doc-1"))
        history.upsert(make_summary("doc-2"))
        history.upsert(make_summary("doc-1", name="renamed.pdf", size=4096))
        entries = history.list()
        assert [e.id for e in entries] == ["doc-1", "doc-2"]
        assert entries[0].name == "renamed.pdf"
        assert entries[0].size == 4096

    def test_history_is_capped(self, history):
        for n in range(MAX_HISTORY + 5):
            history.upsert(make_summary(f"doc-{n}"))
        entries = history.list()
        assert len(entries) == MAX_HISTORY
        assert entries[0].id == f"doc-{MAX_HISTORY + 4}"
        assert entries[-1].id == "doc-5"
        with pytest.raises(DoesNotExist):
            history.get("doc-0")

    def test_get_missing(self, history):
        with pytest.raises(DoesNotExist) as excinfo:
            history.get("missing")
        assert excinfo.value.resource_id == "missing"

    def test_search(self, history):
        history.upsert(make_summary("doc-1", name="Attention Is All You Need.pdf"))
        history.upsert(make_summary("doc-2", name="notes.txt"))
        assert [e.id for e in history.search("attention")] == ["doc-1"]
        assert [e.id for e in history.search("NOTES")] == ["doc-2"]
        assert history.search("nothing") == []
        assert len(history.search("  ")) == 2

    def test_remove(self, history):
        history.upsert(make_summary("doc-1"))
        assert history.remove("doc-1")
        assert not history.remove("doc-1")
        assert history.list() == []

    def test_seed_demos(self, history):
        history.upsert(make_summary("doc-mine"))
        added = history.seed_demos(now=NOW)
        assert added == len(demo_document_ids())
        entries = history.list()
        assert entries[0].id == "doc-mine"
        assert {e.id for e in entries[1:]} == demo_document_ids()
        assert all(e.is_demo for e in entries[1:])
        assert all(e.uploaded_at <= NOW for e in entries[1:])

    def test_seed_demos_is_idempotent(self, history):
        history.seed_demos(now=NOW)
        assert history.seed_demos(now=NOW) == 0
        assert len(history.list()) == len(demo_document_ids())

    def test_new_upload_goes_before_demos(self, history):
        history.seed_demos(now=NOW)
        history.upsert(make_summary("doc-new"))
        assert history.list()[0].id == "doc-new"


class TestGroupByDate:
    def test_groups(self):
        summaries = [
            make_summary("today", uploaded_at=NOW - timedelta(hours=2)),
            make_summary("yesterday", uploaded_at=datetime(2024, 5, 9, 23, 0)),
            make_summary("week", uploaded_at=datetime(2024, 5, 5, 8, 0)),
            make_summary("old", uploaded_at=datetime(2024, 4, 1, 8, 0)),
        ]
        groups = group_by_date(summaries, now=NOW)
        assert list(groups) == ["today", "yesterday", "last_week", "older"]
        assert [s.id for s in groups["today"]] == ["today"]
        assert [s.id for s in groups["yesterday"]] == ["yesterday"]
        assert [s.id for s in groups["last_week"]] == ["week"]
        assert [s.id for s in groups["older"]] == ["old"]

    def test_midnight_boundary(self):
        summaries = [make_summary("late", uploaded_at=datetime(2024, 5, 9, 23, 59))]
        groups = group_by_date(summaries, now=datetime(2024, 5, 10, 0, 1))
        assert [s.id for s in groups["yesterday"]] == ["late"]
        assert groups["today"] == []

    def test_empty(self):
        groups = group_by_date([], now=NOW)
        assert all(entries == [] for entries in groups.values())
