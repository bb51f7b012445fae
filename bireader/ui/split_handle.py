"""The draggable bar between the two panes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget

if TYPE_CHECKING:
    from PySide6.QtGui import QMouseEvent

    from bireader.services.split_resizer import SplitResizer

#: Width of the handle in pixels.
HANDLE_WIDTH: Final[int] = 6


class SplitHandle(QWidget):
    """
    Starts a split drag on press.  Tracking and ending the drag is left to the
    :class:`~bireader.services.split_resizer.SplitResizer`, which follows the
    pointer everywhere in the application.

    Args:
        resizer: The split resizer

    Keyword Args:
        parent: The parent widget (optional)

    """

    def __init__(self, resizer: SplitResizer, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.resizer = resizer
        self.setFixedWidth(HANDLE_WIDTH)
        self.setCursor(Qt.CursorShape.SplitHCursor)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)  # noqa: FBT003
        self.setStyleSheet("background-color: #cbd5e1;")

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self.resizer.begin_drag()
            event.accept()
            return
        super().mousePressEvent(event)
