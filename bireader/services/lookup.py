"""Word lookup on text selection and tooltip placement."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Protocol, cast

from PySide6.QtCore import QEvent, QObject, QPoint, Signal, SignalInstance
from PySide6.QtGui import QMouseEvent
from PySide6.QtWidgets import QApplication

from bireader.models import Side
from bireader.services.logs import get_logger
from bireader.services.scheduler import TaskScheduler
from bireader.settings import ViewerSettings

if TYPE_CHECKING:
    from PySide6.QtWidgets import QWidget

    from bireader.services.dictionary import Dictionary
    from bireader.services.document_store import DocumentStore

logger = get_logger(__name__)

#: Tooltip width.
TOOLTIP_WIDTH: Final[int] = 280
#: Tooltip height.
TOOLTIP_HEIGHT: Final[int] = 140
#: Gap between the anchor and the bottom of a tooltip placed above it.
TOOLTIP_GAP: Final[int] = 12
#: Offset from the anchor to the top of a tooltip placed below it.
TOOLTIP_BELOW_OFFSET: Final[int] = 24
#: Minimum distance between the tooltip and the viewport edges.
VIEWPORT_MARGIN: Final[int] = 8
#: Sentence boundary used when picking an example from the paragraph text.
SENTENCE_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"(?<=[.!?。！？])\s*")


class LookupState(StrEnum):
    """States of the lookup controller."""

    IDLE = "idle"
    SELECTING = "selecting"
    SHOWING = "showing"


class RectLike(Protocol):
    """The parts of :class:`QRectF` used for a selection's bounding box."""

    def left(self) -> float: ...
    def top(self) -> float: ...
    def width(self) -> float: ...


class SelectionSource(Protocol):
    """A widget that reports finished text selections."""

    #: Emitted with ``(text, bounding rect, paragraph id or None, side)``.
    selection_finished: SignalInstance


@dataclass(frozen=True)
class TooltipPayload:
    """Everything the tooltip shows, plus where it points at."""

    word: str
    phonetic: str
    part_of_speech: str
    translation: str
    example: str | None
    #: Horizontal midpoint of the selection, viewport coordinates.
    anchor_x: float
    #: Top of the selection, viewport coordinates.
    anchor_y: float


@dataclass(frozen=True)
class TooltipGeometry:
    """Where a tooltip is drawn, in viewport coordinates."""

    left: float
    top: float
    width: float
    height: float
    #: Whether the tooltip sits above its anchor.
    placed_above: bool
    #: Horizontal position of the pointer arrow, relative to ``left``.
    arrow_x: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def contains(self, x: float, y: float) -> bool:
        """Whether a point is inside the tooltip."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def within(self, viewport_width: float, viewport_height: float) -> bool:
        """Whether the tooltip lies entirely inside the viewport."""
        return (
            self.left >= 0
            and self.top >= 0
            and self.right <= viewport_width
            and self.bottom <= viewport_height
        )


def place_tooltip(  # noqa: PLR0913
    anchor_x: float,
    anchor_y: float,
    viewport_width: float,
    viewport_height: float,
    width: float = TOOLTIP_WIDTH,
    height: float = TOOLTIP_HEIGHT,
    gap: float = TOOLTIP_GAP,
    margin: float = VIEWPORT_MARGIN,
    below_offset: float = TOOLTIP_BELOW_OFFSET,
) -> TooltipGeometry:
    """
    Compute the tooltip rectangle for an anchor point.

    - Centre the tooltip horizontally on the anchor, above it with ``gap``
    - If that would put its top closer than ``margin`` to the top edge, place
      it ``below_offset`` below the anchor instead
    - Clamp horizontally to ``margin`` from the left and right edges
    - Clamp vertically to ``margin`` from the bottom and top edges

    Args:
        anchor_x: Anchor x in viewport coordinates
        anchor_y: Anchor y in viewport coordinates
        viewport_width: Viewport width
        viewport_height: Viewport height

    Keyword Args:
        width: Tooltip width
        height: Tooltip height
        gap: Gap between anchor and tooltip when placed above
        margin: Minimum distance from the viewport edges
        below_offset: Distance from anchor to tooltip top when placed below

    Returns:
        The tooltip geometry

    """
    left = min(anchor_x - width / 2, viewport_width - width - margin)
    left = max(left, margin)

    top = anchor_y - height - gap
    placed_above = True
    if top < margin:
        top = anchor_y + below_offset
        placed_above = False
    top = max(min(top, viewport_height - height - margin), margin)

    arrow_x = min(max(anchor_x - left, 12), width - 12)
    return TooltipGeometry(left, top, width, height, placed_above, arrow_x)


class LookupController(QObject):
    """
    Turns finished text selections into tooltip payloads.

    State machine: ``idle -> selecting -> showing -> idle``.

    - A selection is only a lookup target if, once trimmed, it is non-empty and
      at most ``max_selection_length`` characters long.
    - A selection with no dictionary entry and more than
      ``max_unmatched_tokens`` whitespace separated tokens is ignored.
    - Misses still produce a tooltip: single words show the not-found marker,
      short phrases show a quoted echo of the phrase.

    Once a tooltip is shown, a click outside it closes it.  The outside-click
    listener is armed ``arm_delay_ms`` after opening, so the click that
    produced the selection cannot close the tooltip it just opened.

    The selection subscription belongs to this controller: disabling the
    feature disconnects it, closes any open tooltip and drops pending timers.

    Args:
        dictionary: The lookup collaborator

    Keyword Args:
        store: The document store, used to find example sentences
        settings: Thresholds and the not-found marker
        parent: The parent object (optional)

    """

    #: Emitted with the payload and its geometry when a tooltip opens.
    tooltip_shown = Signal(object, object)
    #: Emitted when the open tooltip closes.
    tooltip_closed = Signal()
    #: Emitted with the new :class:`LookupState`.
    state_changed = Signal(object)

    def __init__(
        self,
        dictionary: Dictionary,
        store: DocumentStore | None = None,
        settings: ViewerSettings | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.dictionary = dictionary
        self.store = store
        self.settings = settings or ViewerSettings()
        #: Viewport size used for placement: ``(width, height)``.
        self.viewport_size: tuple[float, float] = (1280.0, 800.0)
        #: Widget whose coordinate space anchors are expressed in.
        self.viewport: QWidget | None = None
        self._sources: list[SelectionSource] = []
        self._enabled = False
        self._state = LookupState.IDLE
        self._tooltip: TooltipPayload | None = None
        self._geometry: TooltipGeometry | None = None
        self._armed = False
        self._scheduler = TaskScheduler("tooltip-arm", self)

    # ------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def state(self) -> LookupState:
        return self._state

    @property
    def tooltip(self) -> TooltipPayload | None:
        """The open tooltip, if any."""
        return self._tooltip

    @property
    def geometry(self) -> TooltipGeometry | None:
        """Where the open tooltip is drawn, if any."""
        return self._geometry

    @property
    def armed(self) -> bool:
        """Whether outside clicks currently close the tooltip."""
        return self._armed

    # ------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------

    def attach(self, source: SelectionSource) -> None:
        """
        Register a widget that reports selections.  It is only listened to
        while the controller is enabled.
        """
        if source in self._sources:
            return
        self._sources.append(source)
        if self._enabled:
            source.selection_finished.connect(self.handle_selection)

    def set_enabled(self, enabled: bool) -> None:  # noqa: FBT001
        """
        Turn lookup on or off.

        Turning it off disconnects every selection source, closes the open
        tooltip immediately and cancels the pending arm timer.

        Args:
            enabled: Whether lookups are active

        """
        if enabled == self._enabled:
            return
        self._enabled = enabled
        for source in self._sources:
            if enabled:
                source.selection_finished.connect(self.handle_selection)
            else:
                source.selection_finished.disconnect(self.handle_selection)
        if not enabled:
            self.close()
            self._scheduler.advance()
        logger.info("word lookup toggled", enabled=enabled)

    # ------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------

    def handle_selection(
        self,
        text: str,
        rect: RectLike,
        paragraph_id: int | None = None,
        side: Side = Side.SOURCE,
    ) -> TooltipPayload | None:
        """
        Handle a finished selection.

        - Build the payload with :meth:`build_payload`
        - If the selection is not a lookup target, leave any open tooltip as is
        - If it is the same selection as the open tooltip (a duplicate event),
          keep the open tooltip
        - Otherwise show the new tooltip

        Args:
            text: The selected text
            rect: Bounding rectangle of the selection, viewport coordinates

        Keyword Args:
            paragraph_id: The paragraph the selection is in, if known
            side: The pane the selection is in

        Returns:
            The payload being shown, or ``None`` if the selection was ignored

        """
        previous = self._state
        self._set_state(LookupState.SELECTING)
        payload = self.build_payload(text, rect, paragraph_id, side)
        if payload is None:
            self._set_state(
                previous if previous != LookupState.SELECTING else LookupState.IDLE
            )
            return None
        if self._tooltip is not None and self._same_selection(payload, self._tooltip):
            self._set_state(LookupState.SHOWING)
            return self._tooltip
        self.show(payload)
        return payload

    def build_payload(
        self,
        text: str,
        rect: RectLike,
        paragraph_id: int | None = None,
        side: Side = Side.SOURCE,
    ) -> TooltipPayload | None:
        """
        Apply the lookup rules to a selection.

        Args:
            text: The selected text
            rect: Bounding rectangle of the selection

        Keyword Args:
            paragraph_id: The paragraph the selection is in, if known
            side: The pane the selection is in

        Returns:
            The payload, or ``None`` if the selection is not a lookup target

        """
        word = text.strip()
        if not word or len(word) > self.settings.max_selection_length:
            return None
        entry = self.dictionary.lookup(word)
        tokens = word.split()
        if entry is None and len(tokens) > self.settings.max_unmatched_tokens:
            return None

        if entry is not None:
            translation = entry.translation
            example = entry.example
        elif len(tokens) == 1:
            translation = self.settings.not_found_marker
            example = None
        else:
            translation = f"“{word}”"
            example = None
        if example is None and paragraph_id is not None:
            example = self._example_from_paragraph(word, paragraph_id, side)

        return TooltipPayload(
            word=word,
            phonetic=entry.phonetic if entry else "",
            part_of_speech=entry.part_of_speech if entry else "",
            translation=translation,
            example=example,
            anchor_x=rect.left() + rect.width() / 2,
            anchor_y=rect.top(),
        )

    def _example_from_paragraph(
        self, word: str, paragraph_id: int, side: Side
    ) -> str | None:
        if self.store is None:
            return None
        text = self.store.paragraph_text(paragraph_id, side)
        if not text:
            return None
        needle = word.lower()
        for sentence in SENTENCE_BOUNDARY.split(text):
            if needle in sentence.lower() and sentence.strip() != word:
                return sentence.strip()
        return None

    @staticmethod
    def _same_selection(a: TooltipPayload, b: TooltipPayload) -> bool:
        return (a.word, a.anchor_x, a.anchor_y) == (b.word, b.anchor_x, b.anchor_y)

    # ------------------------------------------------------------
    # Tooltip lifecycle
    # ------------------------------------------------------------

    def show(self, payload: TooltipPayload) -> TooltipGeometry:
        """
        Open the tooltip for ``payload``, replacing any open one.

        - Compute the placement for the current viewport size
        - Disarm outside clicks and schedule re-arming after ``arm_delay_ms``
        - Emit :attr:`tooltip_shown`

        Returns:
            The tooltip geometry

        """
        self._disarm()
        self._scheduler.advance()
        self._tooltip = payload
        self._geometry = place_tooltip(payload.anchor_x, payload.anchor_y, *self.viewport_size)
        self._set_state(LookupState.SHOWING)
        self._scheduler.schedule(self.settings.arm_delay_ms, self._arm, "tooltip-arm")
        logger.debug("tooltip shown", word=payload.word)
        self.tooltip_shown.emit(payload, self._geometry)
        return self._geometry

    def close(self) -> None:
        """
        Close the open tooltip, if any.  Safe to call repeatedly.
        """
        self._disarm()
        self._scheduler.advance()
        had_tooltip = self._tooltip is not None
        self._tooltip = None
        self._geometry = None
        self._set_state(LookupState.IDLE)
        if had_tooltip:
            self.tooltip_closed.emit()

    def handle_outside_press(self, x: float, y: float) -> bool:
        """
        Handle a mouse press at viewport coordinates ``(x, y)``.

        Args:
            x: Press x
            y: Press y

        Returns:
            Whether the press closed the tooltip

        """
        if not self._armed or self._geometry is None:
            return False
        if self._geometry.contains(x, y):
            return False
        self.close()
        return True

    def _arm(self) -> None:
        if self._tooltip is None:
            return
        self._armed = True
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    def _disarm(self) -> None:
        if self._armed:
            app = QApplication.instance()
            if app is not None:
                app.removeEventFilter(self)
        self._armed = False

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        """
        Close the tooltip on presses outside of it.  Events are never consumed.
        """
        if self._armed and event.type() == QEvent.Type.MouseButtonPress:
            global_pos = cast("QMouseEvent", event).globalPosition().toPoint()
            pos = (
                self.viewport.mapFromGlobal(global_pos)
                if self.viewport is not None
                else QPoint(global_pos)
            )
            self.handle_outside_press(pos.x(), pos.y())
        return super().eventFilter(watched, event)

    def _set_state(self, state: LookupState) -> None:
        if state != self._state:
            self._state = state
            self.state_changed.emit(state)
