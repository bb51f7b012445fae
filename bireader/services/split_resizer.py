"""Drag-to-resize the split between the two panes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

from PySide6.QtCore import QEvent, QObject, QPoint, Qt, Signal
from PySide6.QtGui import QCursor, QMouseEvent
from PySide6.QtWidgets import QApplication

from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from PySide6.QtWidgets import QWidget

logger = get_logger(__name__)

#: Narrowest the source pane may get, in percent of the container.
MIN_PERCENT: Final[float] = 20.0
#: Widest the source pane may get, in percent of the container.
MAX_PERCENT: Final[float] = 80.0


def clamp_split(
    percent: float, minimum: float = MIN_PERCENT, maximum: float = MAX_PERCENT
) -> float:
    """
    Clamp a split percentage into ``[minimum, maximum]``.

    Args:
        percent: Requested width of the source pane in percent

    Keyword Args:
        minimum: Lower bound
        maximum: Upper bound

    Returns:
        The clamped percentage

    """
    return min(max(percent, minimum), maximum)


class SplitResizer(QObject):
    """
    Tracks a pointer drag on the splitter handle and converts it into a width
    percentage for the source pane.

    While dragging, pointer tracking is done by an application-wide event
    filter rather than on the handle itself, so the drag keeps working when the
    pointer leaves the handle or the window and comes back, and a button
    release anywhere ends it.  The resize cursor is forced and text selection
    is suppressed for the duration of the drag; both are restored on every
    drag end.

    Args:
        container: The widget holding both panes; its geometry defines 0–100%

    Keyword Args:
        left_percent: Initial width of the source pane
        parent: The parent object (optional)

    """

    #: Emitted with the new source pane width in percent.
    split_changed = Signal(float)
    #: Emitted with ``True`` when a drag starts and ``False`` when it ends.
    selection_suppressed = Signal(bool)

    def __init__(
        self,
        container: QWidget | None = None,
        left_percent: float = 50.0,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.container = container
        self._left_percent = clamp_split(left_percent)
        self._dragging = False
        self._cursor_overridden = False

    @property
    def left_percent(self) -> float:
        """Width of the source pane in percent; always within ``[20, 80]``."""
        return self._left_percent

    @property
    def dragging(self) -> bool:
        """Whether a drag is in progress."""
        return self._dragging

    def set_left_percent(self, percent: float) -> float:
        """
        Set the split directly (for example from saved settings).

        Returns:
            The clamped value that was applied

        """
        clamped = clamp_split(percent)
        if clamped != self._left_percent:
            self._left_percent = clamped
            self.split_changed.emit(clamped)
        return clamped

    def begin_drag(self) -> None:
        """
        Start tracking the pointer.

        - Install the application-wide event filter
        - Force the horizontal resize cursor
        - Emit :attr:`selection_suppressed` with ``True``
        """
        if self._dragging:
            return
        self._dragging = True
        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)
            QApplication.setOverrideCursor(QCursor(Qt.CursorShape.SplitHCursor))
            self._cursor_overridden = True
        self.selection_suppressed.emit(True)  # noqa: FBT003
        logger.debug("split drag started", left_percent=self._left_percent)

    def pointer_moved(
        self, pointer_x: float, container_left: float, container_width: float
    ) -> float:
        """
        Update the split from a pointer position.

        Args:
            pointer_x: Pointer x coordinate
            container_left: Left edge of the container, same coordinate space
            container_width: Width of the container

        Returns:
            The (clamped) source pane width in percent

        """
        if not self._dragging or container_width <= 0:
            return self._left_percent
        percent = (pointer_x - container_left) / container_width * 100
        return self.set_left_percent(percent)

    def end_drag(self) -> None:
        """
        Stop tracking the pointer and restore the cursor and text selection.

        Safe to call when no drag is in progress.
        """
        app = QApplication.instance()
        if app is not None:
            app.removeEventFilter(self)
        if self._cursor_overridden:
            QApplication.restoreOverrideCursor()
            self._cursor_overridden = False
        if not self._dragging:
            return
        self._dragging = False
        self.selection_suppressed.emit(False)  # noqa: FBT003
        logger.debug("split drag ended", left_percent=self._left_percent)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        """
        Follow pointer moves and releases anywhere in the application.

        Events are never consumed.
        """
        if not self._dragging:
            return super().eventFilter(watched, event)
        event_type = event.type()
        if event_type == QEvent.Type.MouseMove and self.container is not None:
            pointer_x = cast("QMouseEvent", event).globalPosition().x()
            left = self.container.mapToGlobal(QPoint(0, 0)).x()
            self.pointer_moved(pointer_x, left, self.container.width())
        elif event_type in (
            QEvent.Type.MouseButtonRelease,
            QEvent.Type.ApplicationDeactivate,
        ):
            self.end_drag()
        return super().eventFilter(watched, event)
