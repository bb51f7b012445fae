"""One side of the reader: a scrollable column of paragraphs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

from PySide6.QtCore import (
    QEasingCurve,
    QPoint,
    QPointF,
    QPropertyAnimation,
    QRectF,
    Qt,
    Signal,
)
from PySide6.QtGui import (
    QAction,
    QFont,
    QMouseEvent,
    QTextLayout,
    QTextLine,
    QTextOption,
)
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QMenu,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from bireader.models import ParagraphKind, Side
from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from PySide6.QtGui import QContextMenuEvent

    from bireader.models import Document, Paragraph
    from bireader.services.anchors import AnchorRegistry

logger = get_logger(__name__)

#: Accent colours cycled through for the active paragraph's left border.
PARAGRAPH_COLORS: Final[tuple[str, ...]] = (
    "#3b82f6",
    "#8b5cf6",
    "#06b6d4",
    "#10b981",
    "#f59e0b",
    "#ec4899",
    "#14b8a6",
    "#6366f1",
    "#f97316",
    "#84cc16",
)
#: Base font size in points at 100% zoom.
BASE_POINT_SIZE: Final[float] = 11.0
#: Relative font size and weight per paragraph kind.
KIND_STYLES: Final[dict[ParagraphKind, tuple[float, bool]]] = {
    ParagraphKind.TITLE: (1.6, True),
    ParagraphKind.AUTHORS: (1.0, False),
    ParagraphKind.AFFILIATION: (0.9, False),
    ParagraphKind.KEYWORDS_LABEL: (0.9, True),
    ParagraphKind.KEYWORDS: (0.9, False),
    ParagraphKind.ABSTRACT_LABEL: (1.1, True),
    ParagraphKind.ABSTRACT: (1.0, False),
    ParagraphKind.SECTION: (1.25, True),
    ParagraphKind.BODY: (1.0, False),
}
#: Shown in the target pane until a paragraph's translation arrives.
PENDING_LABEL: Final[str] = "Translating..."
#: Duration of the scroll-into-view animation.
SCROLL_ANIMATION_MS: Final[int] = 300


def _cursor_x(line: QTextLine, position: int) -> float:
    """x of the cursor at ``position`` on ``line``."""
    # PySide6 returns (x, position)
    result = line.cursorToX(position)
    return float(result[0] if isinstance(result, tuple) else result)


class ParagraphWidget(QLabel):
    """
    A single paragraph in one pane.

    Args:
        paragraph: The paragraph to show
        side: Which pane it is in
        index: Position in the document, used to pick its accent colour

    Keyword Args:
        parent: The parent widget (optional)

    """

    #: Emitted with the paragraph id on a plain click.
    clicked = Signal(int)
    #: Emitted with the selected text and its bounding rectangle, in widget
    #: coordinates.
    text_selected = Signal(str, QRectF)

    def __init__(
        self,
        paragraph: Paragraph,
        side: Side,
        index: int = 0,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.paragraph = paragraph
        self.side = side
        self.color = PARAGRAPH_COLORS[index % len(PARAGRAPH_COLORS)]
        self._active = False
        self._zoom = 100
        self.setWordWrap(True)
        self.setTextFormat(Qt.TextFormat.PlainText)
        self.setContentsMargins(10, 4, 6, 4)
        self.set_selectable(True)
        if paragraph.is_navigable:
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.refresh()

    @property
    def paragraph_id(self) -> int:
        return self.paragraph.id

    @property
    def active(self) -> bool:
        return self._active

    def refresh(self) -> None:
        """Re-read the paragraph text and restyle."""
        if self.side == Side.TARGET and self.paragraph.is_pending:
            self.setText(PENDING_LABEL)
        else:
            self.setText(self.paragraph.text_for(self.side))
        self._apply_style()

    def set_active(self, active: bool) -> None:  # noqa: FBT001
        if active != self._active:
            self._active = active
            self._apply_style()

    def set_zoom(self, zoom: int) -> None:
        self._zoom = zoom
        self._apply_style()

    def set_selectable(self, selectable: bool) -> None:  # noqa: FBT001
        """Allow or suppress text selection with the mouse."""
        self.setTextInteractionFlags(
            Qt.TextInteractionFlag.TextSelectableByMouse
            if selectable
            else Qt.TextInteractionFlag.NoTextInteraction
        )

    def _apply_style(self) -> None:
        scale, bold = KIND_STYLES.get(self.paragraph.kind, (1.0, False))
        font = QFont(self.font())
        font.setPointSizeF(BASE_POINT_SIZE * scale * self._zoom / 100)
        font.setBold(bold)
        font.setItalic(self.side == Side.TARGET and self.paragraph.is_pending)
        self.setFont(font)
        if self._active and self.paragraph.is_navigable:
            self.setStyleSheet(
                f"border-left: 3px solid {self.color}; background-color: #eef2ff;"
            )
        elif self.paragraph.is_navigable:
            self.setStyleSheet("border-left: 3px solid transparent;")
        else:
            self.setStyleSheet("")

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        """
        Report a finished selection, or a click if nothing is selected.

        Args:
            event: Mouse release event

        """
        super().mouseReleaseEvent(event)
        if event.button() != Qt.MouseButton.LeftButton:
            return
        text = self.selectedText()
        if text.strip():
            self.text_selected.emit(text, self.selection_rect())
        else:
            self.clicked.emit(self.paragraph.id)

    def selection_rect(self) -> QRectF:
        """
        The bounding rectangle of the selected text, in widget coordinates.

        The text is laid out again at the label's content width, the way
        the label wraps it, and the rectangles of every line the selection
        touches are united.

        Returns:
            The rectangle, or an empty one if nothing is selected

        """
        start = self.selectionStart()
        if start < 0:
            return QRectF()
        end = start + len(self.selectedText())
        contents = self.contentsRect()
        layout = QTextLayout(self.text(), self.font(), self)
        option = QTextOption()
        option.setWrapMode(QTextOption.WrapMode.WordWrap)
        layout.setTextOption(option)
        layout.beginLayout()
        y = 0.0
        while True:
            line = layout.createLine()
            if not line.isValid():
                break
            line.setLineWidth(contents.width())
            line.setPosition(QPointF(0, y))
            y += line.height()
        layout.endLayout()

        rect: QRectF | None = None
        for index in range(layout.lineCount()):
            line = layout.lineAt(index)
            line_start = line.textStart()
            line_end = line_start + line.textLength()
            if line_end <= start or line_start >= end:
                continue
            left = _cursor_x(line, max(start, line_start))
            right = _cursor_x(line, min(end, line_end))
            part = QRectF(left, line.y(), right - left, line.height())
            rect = part if rect is None else rect.united(part)
        if rect is None:
            return QRectF()
        return rect.translated(QPointF(contents.topLeft()))

    def contextMenuEvent(self, event: QContextMenuEvent) -> None:  # noqa: N802
        """Offer to copy the paragraph text."""
        menu = QMenu(self)
        copy_action = QAction("Copy paragraph", menu)
        copy_action.triggered.connect(self.copy_text)
        menu.addAction(copy_action)
        menu.exec(event.globalPos())

    def copy_text(self) -> None:
        """Copy the paragraph's text for this pane to the clipboard."""
        QApplication.clipboard().setText(self.paragraph.text_for(self.side))


class DocumentPane(QScrollArea):
    """
    One pane of the reader.

    Every render registers an anchor for each paragraph widget, and drops the
    anchors of the previous render, so navigation always resolves to widgets
    that are actually on screen.

    Args:
        side: Which pane this is
        registry: The anchor registry

    Keyword Args:
        parent: The parent widget (optional)

    """

    #: Emitted with the paragraph id and this pane's side on a click.
    paragraph_clicked = Signal(int, object)
    #: Emitted with ``(text, rect, paragraph id, side)`` when a selection ends.
    selection_finished = Signal(str, QRectF, object, object)

    def __init__(
        self, side: Side, registry: AnchorRegistry, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self.side = Side(side)
        self.registry = registry
        #: Widget whose coordinates selection rectangles are reported in.
        self.viewport_widget: QWidget | None = None
        self.widgets: dict[int, ParagraphWidget] = {}
        self._zoom = 100
        self._selectable = True
        self._animation: QPropertyAnimation | None = None

        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.content = QWidget()
        self.content_layout = QVBoxLayout(self.content)
        self.content_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        self.content_layout.setContentsMargins(40, 32, 40, 32)
        self.content_layout.setSpacing(10)
        self.setWidget(self.content)

        self.overlay = QLabel(PENDING_LABEL, self)
        self.overlay.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.overlay.setStyleSheet(
            "background-color: rgba(255, 255, 255, 180); color: #4f46e5;"
            " font-size: 14pt;"
        )
        self.overlay.hide()

    # ------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------

    def render_document(self, document: Document | None) -> None:
        """
        Replace the pane's content with ``document``.

        - Stop any running scroll animation
        - Drop this side's anchors and the old widgets
        - Create one widget per paragraph and register its anchor

        Args:
            document: The document, or ``None`` to clear the pane

        """
        self._stop_animation()
        self.registry.clear_side(self.side)
        for widget in self.widgets.values():
            self.content_layout.removeWidget(widget)
            widget.deleteLater()
        self.widgets.clear()
        if document is None:
            return
        for index, paragraph in enumerate(document.paragraphs):
            widget = ParagraphWidget(paragraph, self.side, index, self.content)
            widget.set_zoom(self._zoom)
            widget.set_selectable(self._selectable)
            widget.clicked.connect(self._on_paragraph_clicked)
            widget.text_selected.connect(
                lambda text, rect, w=widget: self._on_text_selected(w, text, rect)
            )
            self.content_layout.addWidget(widget)
            self.widgets[paragraph.id] = widget
            self.registry.register(paragraph.id, self.side, widget)
        self.verticalScrollBar().setValue(0)
        logger.debug(
            "pane rendered", side=self.side, paragraphs=len(document.paragraphs)
        )

    def refresh_paragraphs(self, paragraph_ids: Iterable[int]) -> None:
        """Re-read the text of some paragraphs, e.g. after translation."""
        for paragraph_id in paragraph_ids:
            widget = self.widgets.get(paragraph_id)
            if widget is not None:
                widget.refresh()

    def set_active(self, paragraph_id: int | None) -> None:
        """Highlight ``paragraph_id`` and un-highlight everything else."""
        for pid, widget in self.widgets.items():
            widget.set_active(pid == paragraph_id)

    def set_zoom(self, zoom: int) -> None:
        self._zoom = zoom
        for widget in self.widgets.values():
            widget.set_zoom(zoom)

    def set_selectable(self, selectable: bool) -> None:  # noqa: FBT001
        """Allow or suppress text selection in every paragraph."""
        self._selectable = selectable
        for widget in self.widgets.values():
            widget.set_selectable(selectable)

    def set_interactive(self, interactive: bool) -> None:  # noqa: FBT001
        """
        Lock or unlock the pane.  A locked pane shows the "translating"
        overlay and ignores input.
        """
        self.content.setEnabled(interactive)
        self.overlay.setVisible(not interactive)
        if not interactive:
            self.overlay.setGeometry(self.viewport().geometry())
            self.overlay.raise_()

    def resizeEvent(self, event) -> None:  # noqa: N802, ANN001
        super().resizeEvent(event)
        if self.overlay.isVisible():
            self.overlay.setGeometry(self.viewport().geometry())

    # ------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------

    def centered_value(self, widget: QWidget) -> int:
        """
        The scroll bar value that vertically centres ``widget`` in the pane.
        """
        bar = self.verticalScrollBar()
        top = widget.mapTo(self.content, QPoint(0, 0)).y()
        target = top + widget.height() // 2 - self.viewport().height() // 2
        return max(bar.minimum(), min(target, bar.maximum()))

    def scroll_to_widget(self, widget: QWidget, *, animate: bool = True) -> int:
        """
        Smoothly scroll ``widget`` to the vertical centre of the pane.

        Args:
            widget: A paragraph widget of this pane

        Keyword Args:
            animate: Animate the scroll; jump directly if ``False``

        Returns:
            The target scroll bar value

        """
        self._stop_animation()
        bar = self.verticalScrollBar()
        target = self.centered_value(widget)
        if not animate:
            bar.setValue(target)
            return target
        self._animation = QPropertyAnimation(bar, b"value", self)
        self._animation.setDuration(SCROLL_ANIMATION_MS)
        self._animation.setStartValue(bar.value())
        self._animation.setEndValue(target)
        self._animation.setEasingCurve(QEasingCurve.Type.InOutQuad)
        self._animation.start()
        return target

    def _stop_animation(self) -> None:
        if self._animation is not None:
            self._animation.stop()
            self._animation = None

    # ------------------------------------------------------------
    # Events
    # ------------------------------------------------------------

    def _on_paragraph_clicked(self, paragraph_id: int) -> None:
        self.paragraph_clicked.emit(paragraph_id, self.side)

    def _on_text_selected(
        self, widget: ParagraphWidget, text: str, rect: QRectF
    ) -> None:
        """
        Report a selection with its bounding rectangle moved from the
        paragraph widget into :attr:`viewport_widget` coordinates.
        """
        target = self.viewport_widget or cast("QWidget", self.window())
        origin = target.mapFromGlobal(widget.mapToGlobal(QPoint(0, 0)))
        rect = rect.translated(origin.x(), origin.y())
        self.selection_finished.emit(text, rect, widget.paragraph_id, self.side)
