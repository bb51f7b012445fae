"""The current document and the cache of loaded documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from bireader.models import Document, Paragraph, Side

logger = get_logger(__name__)


class DocumentStore(QObject):
    """
    Holds the currently displayed document and a cache of every document
    loaded during this session, keyed by document id.

    Args:
        parent: The parent object (optional)

    """

    #: Emitted with the document id when a different document becomes current.
    document_changed = Signal(str)
    #: Emitted with the document id and the ids of newly translated paragraphs.
    paragraphs_resolved = Signal(str, object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._current: Document | None = None
        self._cache: dict[str, Document] = {}

    @property
    def current(self) -> Document | None:
        """The document being displayed, if any."""
        return self._current

    @property
    def current_id(self) -> str | None:
        """The id of the document being displayed, if any."""
        return self._current.id if self._current else None

    @property
    def paragraphs(self) -> list[Paragraph]:
        """The paragraphs of the current document, in display order."""
        return list(self._current.paragraphs) if self._current else []

    def load(self, document: Document) -> None:
        """
        Make ``document`` current and cache it.

        - Cache the document by id (replacing any cached copy)
        - If it is already current, do nothing else
        - Otherwise make it current and emit :attr:`document_changed`

        Args:
            document: The document to display

        """
        self._cache[document.id] = document
        if self._current is document:
            return
        self._current = document
        logger.info(
            "document loaded",
            document_id=document.id,
            paragraphs=len(document.paragraphs),
        )
        self.document_changed.emit(document.id)

    def get(self, document_id: str) -> Document | None:
        """Get a cached document by id."""
        return self._cache.get(document_id)

    def has(self, document_id: str) -> bool:
        """Whether a document body is still cached."""
        return document_id in self._cache

    def forget(self, document_id: str) -> None:
        """
        Drop a document body from the cache.  The current document is kept
        displayed even if it is forgotten.
        """
        self._cache.pop(document_id, None)

    def resolve_translations(
        self, document_id: str, translations: Mapping[int, str]
    ) -> int:
        """
        Apply final translations to a cached document, or to the current one
        if its cache entry has been dropped.

        Each paragraph moves from pending to final text at most once; ids that
        are unknown or already translated are skipped.

        Args:
            document_id: The document the translations belong to
            translations: Map of paragraph id to translated text

        Returns:
            The number of paragraphs that changed

        """
        document = self._cache.get(document_id)
        if document is None and document_id == self.current_id:
            document = self._current
        if document is None:
            return 0
        changed: list[int] = []
        for paragraph_id, text in translations.items():
            paragraph = document.paragraph(paragraph_id)
            if paragraph is not None and paragraph.resolve(text):
                changed.append(paragraph_id)
        if changed:
            self.paragraphs_resolved.emit(document_id, changed)
        return len(changed)

    def paragraph_text(self, paragraph_id: int, side: Side) -> str | None:
        """
        Text of a paragraph of the current document as shown on ``side``.
        """
        if self._current is None:
            return None
        return self._current.text_for(paragraph_id, side)
