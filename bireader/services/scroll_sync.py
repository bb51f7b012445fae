"""Proportional scroll synchronization between the two panes."""

from __future__ import annotations

from typing import Protocol

from PySide6.QtCore import QObject, Signal, SignalInstance

from bireader.models import Side
from bireader.services.logs import get_logger
from bireader.services.scheduler import TaskScheduler

logger = get_logger(__name__)


class ScrollBarLike(Protocol):
    """The parts of :class:`QScrollBar` the synchronizer uses."""

    valueChanged: SignalInstance  # noqa: N815

    def value(self) -> int: ...
    def minimum(self) -> int: ...
    def maximum(self) -> int: ...
    def setValue(self, value: int) -> None: ...  # noqa: N802


def scroll_ratio(value: int, minimum: int, maximum: int) -> float:
    """
    Relative scroll position in ``[0, 1]``.

    This is ``scrollTop / (scrollHeight - clientHeight)``; a pane whose content
    fits without scrolling has no range and yields 0.

    Args:
        value: Current scroll position
        minimum: Minimum scroll position
        maximum: Maximum scroll position

    Returns:
        The ratio

    """
    span = maximum - minimum
    if span <= 0:
        return 0.0
    return min(1.0, max(0.0, (value - minimum) / span))


class ScrollSynchronizer(QObject):
    """
    Mirrors the relative scroll position of one pane onto the other.

    When the user scrolls pane A, pane B is moved to the same ratio.  That write
    makes B emit its own scroll event; to avoid bouncing it back to A, B is
    marked as synthetically scrolled for ``guard_ms`` milliseconds, during
    which B's scroll events are not mirrored.

    Disabling disconnects both listeners and drops the pending guard timer, so
    nothing can write to either pane afterwards.

    Args:
        source_bar: Vertical scroll bar of the source pane
        target_bar: Vertical scroll bar of the target pane

    Keyword Args:
        guard_ms: Suppression window for mirrored writes
        parent: The parent object (optional)

    """

    #: Emitted with the pane written to and the value written.
    mirrored = Signal(object, int)

    def __init__(
        self,
        source_bar: ScrollBarLike,
        target_bar: ScrollBarLike,
        guard_ms: int = 50,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.bars: dict[Side, ScrollBarLike] = {
            Side.SOURCE: source_bar,
            Side.TARGET: target_bar,
        }
        #: Suppression window for mirrored writes, in milliseconds.
        self.guard_ms = guard_ms
        self._enabled = False
        #: The pane currently being written to synthetically, if any.
        self._suppressed: Side | None = None
        self._guard = TaskScheduler("scroll-guard", self)

    @property
    def enabled(self) -> bool:
        """Whether scroll events are being mirrored."""
        return self._enabled

    @property
    def suppressed_side(self) -> Side | None:
        """The pane whose scroll events are currently ignored, if any."""
        return self._suppressed

    def set_enabled(self, enabled: bool) -> None:  # noqa: FBT001
        """
        Attach or fully detach the scroll listeners.

        Args:
            enabled: Whether to mirror scrolling

        """
        if enabled == self._enabled:
            return
        self._enabled = enabled
        source = self.bars[Side.SOURCE]
        target = self.bars[Side.TARGET]
        if enabled:
            source.valueChanged.connect(self._on_source_scrolled)
            target.valueChanged.connect(self._on_target_scrolled)
        else:
            source.valueChanged.disconnect(self._on_source_scrolled)
            target.valueChanged.disconnect(self._on_target_scrolled)
            self._guard.advance()
            self._suppressed = None
        logger.info("scroll sync toggled", enabled=enabled)

    def ratio(self, side: Side) -> float:
        """
        The relative scroll position of one pane.
        """
        bar = self.bars[Side(side)]
        return scroll_ratio(bar.value(), bar.minimum(), bar.maximum())

    def mirror(self, from_side: Side) -> int:
        """
        Move the other pane to the same relative position as ``from_side``.

        - Compute the ratio of ``from_side``
        - Mark the other pane as synthetically scrolled and (re)start the
          guard timer
        - Write the corresponding value to the other pane

        Args:
            from_side: The pane the user scrolled

        Returns:
            The value written to the other pane

        """
        from_side = Side(from_side)
        to_side = from_side.opposite
        bar = self.bars[to_side]
        value = round(
            bar.minimum() + self.ratio(from_side) * (bar.maximum() - bar.minimum())
        )
        self._suppressed = to_side
        self._guard.advance()
        self._guard.schedule(self.guard_ms, self._release_guard, "scroll-guard")
        if bar.value() != value:
            bar.setValue(value)
        self.mirrored.emit(to_side, value)
        return value

    def _release_guard(self) -> None:
        self._suppressed = None

    def _on_scrolled(self, side: Side) -> None:
        if not self._enabled or self._suppressed == side:
            return
        self.mirror(side)

    def _on_source_scrolled(self, _value: int) -> None:
        self._on_scrolled(Side.SOURCE)

    def _on_target_scrolled(self, _value: int) -> None:
        self._on_scrolled(Side.TARGET)
