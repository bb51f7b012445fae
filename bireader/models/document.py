"""Document model."""

from __future__ import annotations

import builtins
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import PurePath
from typing import TYPE_CHECKING

from bireader.models.paragraph import Paragraph, Side
from bireader.utils import estimate_page_count, utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from bireader.models.history import DocumentSummary

__all__ = ["Document", "DocumentKind", "Side"]


class DocumentKind(StrEnum):
    """The file type a document was ingested from."""

    PDF = "pdf"
    TXT = "txt"
    DOCX = "docx"
    OTHER = "other"

    @classmethod
    def from_filename(cls, filename: str) -> DocumentKind:
        """
        Infer the kind from a file name's extension.

        Args:
            filename: The file name (or path)

        Returns:
            The matching kind, or :attr:`OTHER`

        """
        suffix = PurePath(filename).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            return cls.OTHER


@dataclass
class Document:
    """
    A document and its paragraphs.

    Documents are created at ingestion time and never change afterwards, except
    for the ``target_text`` of their paragraphs, which each move from pending
    to final text exactly once.
    """

    #: Opaque id generated at ingestion time.
    id: str
    #: Name shown to the user, usually the uploaded file name.
    display_name: str
    #: Paragraphs in display order.
    paragraphs: builtins.list[Paragraph] = field(default_factory=list)
    #: Size of the uploaded file in bytes.
    size_bytes: int = 0
    #: The file type the document was ingested from.
    kind: DocumentKind = DocumentKind.OTHER
    #: Rough page count, for display.  Estimated from the paragraphs when 0.
    page_count_estimate: int = 0
    #: Number of paragraphs.
    paragraph_count: int = 0

    def __post_init__(self) -> None:
        ids = [p.id for p in self.paragraphs]
        if len(ids) != len(set(ids)):
            msg = f"Duplicate paragraph ids in document {self.id}"
            raise ValueError(msg)
        self.paragraphs.sort(key=lambda p: p.id)
        self._by_id: dict[int, Paragraph] = {p.id: p for p in self.paragraphs}
        self.kind = DocumentKind(self.kind)
        if not self.paragraph_count:
            self.paragraph_count = len(self.paragraphs)
        if self.page_count_estimate < 1:
            self.page_count_estimate = estimate_page_count(self.paragraph_count)

    def paragraph(self, paragraph_id: int) -> Paragraph | None:
        """
        Get a paragraph by id.

        Args:
            paragraph_id: The paragraph id

        Returns:
            The paragraph, or ``None``

        """
        return self._by_id.get(paragraph_id)

    @property
    def navigable_paragraphs(self) -> builtins.list[Paragraph]:
        """Abstract and body paragraphs, in order."""
        return [p for p in self.paragraphs if p.is_navigable]

    @property
    def pending_count(self) -> int:
        """Number of paragraphs still waiting for their translation."""
        return sum(1 for p in self.paragraphs if p.is_pending)

    @property
    def is_fully_translated(self) -> bool:
        """Whether no paragraph is pending."""
        return self.pending_count == 0

    def text_for(self, paragraph_id: int, side: Side) -> str | None:
        """
        Get the text of a paragraph as shown on ``side``.

        Returns:
            The text, or ``None`` if there is no such paragraph

        """
        paragraph = self.paragraph(paragraph_id)
        return paragraph.text_for(side) if paragraph else None

    def summary(self, uploaded_at: datetime | None = None) -> DocumentSummary:
        """
        Build the history projection of this document.

        Keyword Args:
            uploaded_at: Naive UTC timestamp; defaults to now

        Returns:
            A new (unsaved) :class:`~bireader.models.history.DocumentSummary`

        """
        from bireader.models.history import DocumentSummary  # noqa: PLC0415

        return DocumentSummary(
            id=self.id,
            name=self.display_name,
            uploaded_at=uploaded_at or utc_now(),
            size=self.size_bytes,
            kind=self.kind.value,
            page_count=self.page_count_estimate,
            paragraph_count=self.paragraph_count,
            is_demo=False,
        )
