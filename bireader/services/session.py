"""The viewer session: wiring of the document store, navigation, progress
and the collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from bireader.exc import DoesNotExist
from bireader.services.anchors import AnchorRegistry
from bireader.services.document_store import DocumentStore
from bireader.services.ingestion import (
    SAMPLE_DOCUMENT_ID,
    demo_document_ids,
    ingest,
    sample_document,
    unavailable_document,
)
from bireader.services.logs import get_logger
from bireader.services.navigation import NavigationController, ViewerState
from bireader.services.progress import TranslationProgress
from bireader.services.translation import DemoTranslator

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from bireader.models import Document
    from bireader.services.history import HistoryService

logger = get_logger(__name__)


class ViewerSession(QObject):
    """
    Everything one viewer window works with, and the flows that span several
    services: uploading a file, finishing a translation and reopening a
    document from history.

    Keyword Args:
        history: The history service; history is not recorded without one
        translator: The translation collaborator
        progress: The progress state machine
        parent: The parent object (optional)

    """

    #: Emitted with the document id whenever a document is (re)opened.
    document_opened = Signal(str)
    #: Emitted with the document id and the number of paragraphs translated.
    translations_applied = Signal(str, int)

    def __init__(
        self,
        history: HistoryService | None = None,
        translator: DemoTranslator | None = None,
        progress: TranslationProgress | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.history = history
        self.store = DocumentStore(self)
        self.state = ViewerState(self)
        self.registry = AnchorRegistry()
        self.navigation = NavigationController(
            self.registry, self.state, self.store, self
        )
        self.progress = progress or TranslationProgress(parent=self)
        self.translator = translator or DemoTranslator(parent=self)
        self.translator.finished.connect(self._on_translated)

    @property
    def document(self) -> Document | None:
        """The open document."""
        return self.store.current

    def open_document(self, document: Document) -> None:
        """
        Display ``document`` and clear the active paragraph.

        Any translation still in flight is dropped and the progress indicator
        returns to idle.

        Args:
            document: The document to display

        """
        self.translator.cancel()
        self.progress.cancel()
        self.store.load(document)
        self.state.reset(document.id)
        self.document_opened.emit(document.id)

    def open_sample(self) -> Document:
        """Open the bundled article, fully translated."""
        document = self.store.get(SAMPLE_DOCUMENT_ID) or sample_document()
        self.open_document(document)
        return document

    def upload(self, path: Path) -> Document:
        """
        Upload a file.

        - Validate and ingest the file
        - Display the new document and start the progress indicator
        - Record the document in history
        - Hand the document to the translator

        Args:
            path: The file to upload

        Raises:
            UnsupportedFileType: The extension is not accepted
            FileTooLarge: The file is too large

        Returns:
            The new document

        """
        document = ingest(path)
        self.open_document(document)
        self.progress.start(document.id)
        if self.history is not None:
            self.history.upsert(document.summary())
        self.translator.translate(document)
        return document

    def _on_translated(self, document_id: str, translations: Mapping[int, str]) -> None:
        """
        Apply translations, unless the user has switched to another document
        since they were requested.
        """
        if document_id != self.store.current_id:
            logger.debug(
                "translation for closed document dropped",
                document_id=document_id,
                current=self.store.current_id,
            )
            return
        changed = self.store.resolve_translations(document_id, translations)
        self.progress.complete(document_id)
        self.translations_applied.emit(document_id, changed)

    def open_from_history(self, document_id: str) -> Document:
        """
        Reopen a document from history.

        - Use the cached document if its content is still in memory
        - Otherwise use the bundled article for the demo entries
        - Otherwise show the "content unavailable" placeholder
        - If the document still has pending paragraphs, translate them

        Args:
            document_id: The history entry's document id

        Raises:
            DoesNotExist: The entry is neither cached, a demo, nor in history

        Returns:
            The document now displayed

        """
        document = self.store.get(document_id)
        if document is None and document_id in demo_document_ids():
            name = None
            if self.history is not None:
                try:
                    name = self.history.get(document_id).name
                except DoesNotExist:
                    name = None
            document = sample_document(document_id, name)
        if document is None:
            if self.history is None:
                raise DoesNotExist("DocumentSummary", document_id)  # noqa: EM101
            document = unavailable_document(self.history.get(document_id))
        self.open_document(document)
        if document.pending_count:
            self.progress.start(document.id)
            self.translator.translate(document)
        logger.info("document reopened", document_id=document_id)
        return document

    def remove_from_history(self, document_id: str) -> bool:
        """
        Delete a history entry and drop its cached content.  The open document
        stays on screen.

        Returns:
            Whether an entry was deleted

        """
        if self.store.has(document_id):
            self.store.forget(document_id)
            logger.debug("cached content dropped", document_id=document_id)
        if self.history is None:
            return False
        return self.history.remove(document_id)

