"""The word lookup tooltip."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

if TYPE_CHECKING:
    from bireader.services.lookup import TooltipGeometry, TooltipPayload


class WordTooltip(QFrame):
    """
    Floating card showing a word's gloss.  It lives inside the main window's
    central widget, so its geometry is in the same coordinates as the
    selection anchors.

    Args:
        parent: The central widget

    """

    #: Emitted when the close button is pressed.
    close_requested = Signal()
    #: Emitted with the shown word when the speak button is pressed.
    pronounce_requested = Signal(str)

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self.setObjectName("wordTooltip")
        self.setStyleSheet(
            "#wordTooltip { background-color: #1e293b; border-radius: 10px; }"
            " QLabel { color: #e2e8f0; }"
        )
        layout = QVBoxLayout(self)
        layout.setContentsMargins(14, 10, 14, 10)
        layout.setSpacing(4)

        header = QHBoxLayout()
        self.word_label = QLabel()
        self.word_label.setStyleSheet("font-weight: bold; font-size: 13pt;")
        self.phonetic_label = QLabel()
        self.phonetic_label.setStyleSheet("color: #94a3b8;")
        self.speak_button = QToolButton()
        self.speak_button.setText("🔊")
        self.speak_button.setToolTip("Pronounce")
        self.speak_button.setAutoRaise(True)
        self.speak_button.clicked.connect(self._on_speak_clicked)
        self.close_button = QToolButton()
        self.close_button.setText("×")
        self.close_button.setAutoRaise(True)
        self.close_button.clicked.connect(self.close_requested.emit)
        header.addWidget(self.word_label)
        header.addWidget(self.phonetic_label)
        header.addStretch(1)
        header.addWidget(self.speak_button)
        header.addWidget(self.close_button)
        layout.addLayout(header)

        self.translation_label = QLabel()
        self.translation_label.setWordWrap(True)
        self.example_label = QLabel()
        self.example_label.setWordWrap(True)
        self.example_label.setStyleSheet("color: #94a3b8; font-style: italic;")
        layout.addWidget(self.translation_label)
        layout.addWidget(self.example_label)
        layout.addStretch(1)

        self.arrow = QLabel(self.parentWidget())
        self.arrow.setStyleSheet("color: #1e293b; font-size: 14pt;")
        self.arrow.hide()
        self.hide()

    def show_payload(self, payload: TooltipPayload, geometry: TooltipGeometry) -> None:
        """
        Fill in the card and show it at ``geometry``.

        Args:
            payload: What to show
            geometry: Where to show it

        """
        self.word_label.setText(payload.word)
        self.phonetic_label.setText(payload.phonetic)
        pos = f"{payload.part_of_speech} " if payload.part_of_speech else ""
        self.translation_label.setText(f"{pos}{payload.translation}")
        self.example_label.setText(payload.example or "")
        self.example_label.setVisible(bool(payload.example))
        self.setGeometry(
            round(geometry.left),
            round(geometry.top),
            round(geometry.width),
            round(geometry.height),
        )
        self.arrow.setText("▼" if geometry.placed_above else "▲")
        self.arrow.adjustSize()
        arrow_x = round(geometry.left + geometry.arrow_x - self.arrow.width() / 2)
        arrow_y = (
            round(geometry.bottom) - 4
            if geometry.placed_above
            else round(geometry.top) - self.arrow.height() + 4
        )
        self.arrow.move(arrow_x, arrow_y)
        self.show()
        self.raise_()
        self.arrow.show()
        self.arrow.raise_()

    def _on_speak_clicked(self) -> None:
        word = self.word_label.text()
        if word:
            self.pronounce_requested.emit(word)

    def dismiss(self) -> None:
        """Hide the card and its arrow."""
        self.hide()
        self.arrow.hide()

    def keyPressEvent(self, event) -> None:  # noqa: N802, ANN001
        if event.key() == Qt.Key.Key_Escape:
            self.close_requested.emit()
            return
        super().keyPressEvent(event)
