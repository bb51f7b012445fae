"""Simulated asynchronous translation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from PySide6.QtCore import QObject, Signal

from bireader.models import DocumentKind
from bireader.services.ingestion import sample_document
from bireader.services.logs import get_logger
from bireader.services.scheduler import TaskScheduler

if TYPE_CHECKING:
    from bireader.models import Document

logger = get_logger(__name__)

#: Delay before translations of plain text uploads arrive.
TEXT_DELAY_MS: Final[int] = 1800
#: Delay before translations of any other upload arrive.
DEFAULT_DELAY_MS: Final[int] = 1600
#: Translation used for paragraphs no engine can translate in demo mode.
DEMO_PLACEHOLDER: Final[str] = (
    "(Demo mode: connect a translation engine to see the actual translation.)"
)


class DemoTranslator(QObject):
    """
    Stands in for a translation engine.

    After a delay it emits :attr:`finished` with a translation for every pending
    paragraph: paragraphs of the bundled article get their bundled translation,
    anything else gets :data:`DEMO_PLACEHOLDER`.

    Keyword Args:
        text_delay_ms: Delay for plain text uploads
        default_delay_ms: Delay for other uploads
        parent: The parent object (optional)

    """

    #: Emitted with the document id and a map of paragraph id to translation.
    finished = Signal(str, object)

    def __init__(
        self,
        text_delay_ms: int = TEXT_DELAY_MS,
        default_delay_ms: int = DEFAULT_DELAY_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.text_delay_ms = text_delay_ms
        self.default_delay_ms = default_delay_ms
        self._scheduler = TaskScheduler("translator", self)

    @property
    def busy(self) -> bool:
        """Whether a translation is pending."""
        return self._scheduler.pending > 0

    def delay_for(self, document: Document) -> int:
        """How long the translation of ``document`` takes."""
        if document.kind == DocumentKind.TXT:
            return self.text_delay_ms
        return self.default_delay_ms

    def translations_for(self, document: Document) -> dict[int, str]:
        """
        Produce the translations for every pending paragraph of ``document``.
        """
        reference = {p.id: p for p in sample_document(translated=True).paragraphs}
        translations: dict[int, str] = {}
        for paragraph in document.paragraphs:
            if not paragraph.is_pending:
                continue
            known = reference.get(paragraph.id)
            if known is not None and known.source_text == paragraph.source_text:
                translations[paragraph.id] = known.target_text
            else:
                translations[paragraph.id] = DEMO_PLACEHOLDER
        return translations

    def translate(self, document: Document) -> None:
        """
        Start translating ``document``, replacing any translation in flight.

        Args:
            document: The document to translate

        """
        self._scheduler.advance()
        document_id = document.id
        translations = self.translations_for(document)
        self._scheduler.schedule(
            self.delay_for(document),
            lambda: self.finished.emit(document_id, translations),
            "translation",
        )
        logger.debug(
            "translation scheduled",
            document_id=document_id,
            paragraphs=len(translations),
        )

    def cancel(self) -> None:
        """Drop the translation in flight, if any."""
        self._scheduler.advance()
