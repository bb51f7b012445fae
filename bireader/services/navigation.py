"""Active paragraph state and bidirectional paragraph navigation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from bireader.models import Side
from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from bireader.services.anchors import AnchorRegistry
    from bireader.services.document_store import DocumentStore

logger = get_logger(__name__)


class ViewerState(QObject):
    """
    The single active paragraph of the open document.

    Both panes highlight the same active id; this object is their only owner.
    Construct one per viewer (tests construct their own).

    Args:
        parent: The parent object (optional)

    """

    #: Emitted with the new active paragraph id (or ``None``).
    active_paragraph_changed = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        #: The open document's id.
        self.document_id: str | None = None
        self._active_paragraph_id: int | None = None

    @property
    def active_paragraph_id(self) -> int | None:
        """The active paragraph id, if any."""
        return self._active_paragraph_id

    def set_active(self, paragraph_id: int | None) -> bool:
        """
        Set the active paragraph.

        Setting the same id again is a no-op, so duplicate events for one
        click only notify once.

        Args:
            paragraph_id: The id, or ``None`` to clear

        Returns:
            Whether the active paragraph changed

        """
        if paragraph_id == self._active_paragraph_id:
            return False
        self._active_paragraph_id = paragraph_id
        self.active_paragraph_changed.emit(paragraph_id)
        return True

    def reset(self, document_id: str | None) -> None:
        """
        Switch to another document and clear the selection.

        Args:
            document_id: The newly opened document's id

        """
        self.document_id = document_id
        self.set_active(None)


class NavigationController(QObject):
    """
    Resolves a paragraph click in one pane to its counterpart in the other and
    asks that pane to scroll it into view.

    Args:
        registry: The anchor registry
        state: The viewer state holding the active paragraph
        store: The document store (for paragraph kinds)
        parent: The parent object (optional)

    """

    #: Emitted with the element to centre and the pane it lives in.
    scroll_requested = Signal(object, object)

    def __init__(
        self,
        registry: AnchorRegistry,
        state: ViewerState,
        store: DocumentStore,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.registry = registry
        self.state = state
        self.store = store

    def handle_click(self, paragraph_id: int, side: Side) -> bool:
        """
        Handle a click on a paragraph.

        - Look up the paragraph in the current document
        - If it does not exist or its kind is not navigable, ignore the click
        - Otherwise call :meth:`navigate`

        Args:
            paragraph_id: The clicked paragraph
            side: The pane that was clicked

        Returns:
            Whether the click was handled

        """
        document = self.store.current
        paragraph = document.paragraph(paragraph_id) if document else None
        if paragraph is None or not paragraph.is_navigable:
            return False
        self.navigate(paragraph_id, Side(side))
        return True

    def navigate(self, paragraph_id: int, from_side: Side) -> object | None:
        """
        Activate a paragraph and scroll its counterpart into view.

        The highlight is applied first so the counterpart is already highlighted
        when it scrolls into view.  If the counterpart is not mounted, only the
        selection changes.

        Args:
            paragraph_id: The paragraph to activate
            from_side: The pane the navigation started from

        Returns:
            The element a scroll was requested for, or ``None``

        """
        self.state.set_active(paragraph_id)
        target_side = Side(from_side).opposite
        element = self.registry.lookup(paragraph_id, target_side)
        if element is None:
            logger.debug(
                "counterpart not mounted",
                paragraph_id=paragraph_id,
                side=target_side,
            )
            return None
        self.scroll_requested.emit(element, target_side)
        return element

    def step(self, offset: int) -> int | None:
        """
        Move the active paragraph by ``offset`` navigable paragraphs and scroll
        it into view in both panes.

        With no active paragraph, stepping forward starts at the first
        navigable paragraph and stepping back at the last.  Steps past either
        end stop at that end.

        Args:
            offset: Number of paragraphs to move; negative moves back

        Returns:
            The new active paragraph id, or ``None`` if nothing is navigable

        """
        document = self.store.current
        ids = [p.id for p in document.navigable_paragraphs] if document else []
        if not ids:
            return None
        active = self.state.active_paragraph_id
        if active in ids:
            index = min(max(ids.index(active) + offset, 0), len(ids) - 1)
        else:
            index = 0 if offset > 0 else len(ids) - 1
        paragraph_id = ids[index]
        self.state.set_active(paragraph_id)
        for side in Side:
            element = self.registry.lookup(paragraph_id, side)
            if element is not None:
                self.scroll_requested.emit(element, side)
        return paragraph_id

    def clear(self) -> None:
        """Clear the active paragraph."""
        self.state.set_active(None)
