"""Data models for Bilingual Reader."""

from bireader.models.document import Document, DocumentKind
from bireader.models.history import DocumentSummary
from bireader.models.paragraph import (
    PENDING_TRANSLATION,
    Paragraph,
    ParagraphKind,
    Side,
)

__all__ = [
    "PENDING_TRANSLATION",
    "Document",
    "DocumentKind",
    "DocumentSummary",
    "Paragraph",
    "ParagraphKind",
    "Side",
]
