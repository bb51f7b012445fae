"""Recently opened documents."""

from __future__ import annotations

import builtins
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Final

from sqlalchemy import func, select

from bireader.exc import DoesNotExist
from bireader.models import DocumentSummary
from bireader.services.ingestion import demo_history
from bireader.services.logs import get_logger
from bireader.utils import utc_now

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

logger = get_logger(__name__)

#: How many entries the history keeps.
MAX_HISTORY: Final[int] = 30
#: Group keys returned by :func:`group_by_date`, in display order.
DATE_GROUPS: Final[tuple[str, ...]] = ("today", "yesterday", "last_week", "older")


def group_by_date(
    summaries: Iterable[DocumentSummary], now: datetime | None = None
) -> dict[str, list[DocumentSummary]]:
    """
    Bucket history entries by upload date.

    - ``today``: uploaded since midnight
    - ``yesterday``: uploaded the previous calendar day
    - ``last_week``: uploaded in the six days before that
    - ``older``: everything else

    Args:
        summaries: The entries, in the order they should be listed

    Keyword Args:
        now: Naive UTC "now"; defaults to the current time

    Returns:
        A dictionary with every key of :data:`DATE_GROUPS`

    """
    now = now or utc_now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    yesterday = today - timedelta(days=1)
    last_week = today - timedelta(days=7)
    groups: dict[str, list[DocumentSummary]] = {key: [] for key in DATE_GROUPS}
    for summary in summaries:
        if summary.uploaded_at >= today:
            groups["today"].append(summary)
        elif summary.uploaded_at >= yesterday:
            groups["yesterday"].append(summary)
        elif summary.uploaded_at >= last_week:
            groups["last_week"].append(summary)
        else:
            groups["older"].append(summary)
    return groups


class HistoryService:
    """
    Stores :class:`~bireader.models.DocumentSummary` records, newest first.

    Args:
        session: The database session

    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> builtins.list[DocumentSummary]:
        """All entries, most recent first."""
        return builtins.list(
            self.session.scalars(
                select(DocumentSummary).order_by(DocumentSummary.sequence.desc())
            ).all()
        )

    def get(self, document_id: str) -> DocumentSummary:
        """
        Get an entry by document id.

        Raises:
            DoesNotExist: There is no such entry

        """
        summary = self.session.get(DocumentSummary, document_id)
        if summary is None:
            raise DoesNotExist("DocumentSummary", document_id)  # noqa: EM101
        return summary

    def search(self, text: str) -> builtins.list[DocumentSummary]:
        """
        Entries whose name contains ``text`` (case-insensitive), most recent
        first.  Blank text returns every entry.
        """
        text = text.strip()
        if not text:
            return self.list()
        return builtins.list(
            self.session.scalars(
                select(DocumentSummary)
                .where(func.lower(DocumentSummary.name).contains(text.lower()))
                .order_by(DocumentSummary.sequence.desc())
            ).all()
        )

    def _next_sequence(self) -> int:
        current = self.session.scalar(select(func.max(DocumentSummary.sequence)))
        return (current or 0) + 1

    def upsert(self, summary: DocumentSummary) -> DocumentSummary:
        """
        Record a document as the most recent entry.

        - If an entry with the same id exists, update it in place
        - Move the entry to the front
        - Drop the oldest entries beyond :data:`MAX_HISTORY`

        Args:
            summary: The entry to record

        Returns:
            The stored entry

        """
        stored = self.session.get(DocumentSummary, summary.id)
        if stored is None:
            stored = summary
            self.session.add(stored)
        elif stored is not summary:
            stored.name = summary.name
            stored.uploaded_at = summary.uploaded_at or utc_now()
            stored.size = summary.size
            stored.kind = summary.kind
            stored.page_count = summary.page_count
            stored.paragraph_count = summary.paragraph_count
            stored.is_demo = bool(summary.is_demo)
        stored.sequence = self._next_sequence()
        self.session.flush()
        self._trim()
        self.session.commit()
        logger.info("history entry recorded", document_id=stored.id)
        return stored

    def _trim(self) -> None:
        overflow = self.session.scalars(
            select(DocumentSummary)
            .order_by(DocumentSummary.sequence.desc())
            .offset(MAX_HISTORY)
        ).all()
        for summary in overflow:
            self.session.delete(summary)
        if overflow:
            self.session.flush()
            logger.debug("history trimmed", dropped=len(overflow))

    def remove(self, document_id: str) -> bool:
        """
        Delete an entry.

        Returns:
            Whether an entry was deleted

        """
        summary = self.session.get(DocumentSummary, document_id)
        if summary is None:
            return False
        self.session.delete(summary)
        self.session.commit()
        logger.info("history entry removed", document_id=document_id)
        return True

    def seed_demos(self, now: datetime | None = None) -> int:
        """
        Add the bundled demo entries that are missing, behind every existing
        entry.

        Keyword Args:
            now: Naive UTC "now"; defaults to the current time

        Returns:
            The number of entries added

        """
        now = now or utc_now()
        lowest = self.session.scalar(select(func.min(DocumentSummary.sequence)))
        sequence = lowest if lowest is not None else 0
        added = 0
        for entry in demo_history():
            if self.session.get(DocumentSummary, entry["id"]) is not None:
                continue
            sequence -= 1
            self.session.add(
                DocumentSummary(
                    id=entry["id"],
                    name=entry["name"],
                    uploaded_at=now - timedelta(minutes=entry["age_minutes"]),
                    size=entry["size"],
                    kind=entry["kind"],
                    page_count=entry["page_count"],
                    paragraph_count=entry["paragraph_count"],
                    is_demo=True,
                    sequence=sequence,
                )
            )
            added += 1
        if added:
            self.session.commit()
        return added
