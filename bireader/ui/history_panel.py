"""History side panel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDockWidget,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from bireader.services.history import group_by_date
from bireader.utils import format_file_size, relative_time

if TYPE_CHECKING:
    from datetime import datetime

    from bireader.models import DocumentSummary
    from bireader.services.history import HistoryService

#: Headings of the date groups.
GROUP_LABELS: Final[dict[str, str]] = {
    "today": "Today",
    "yesterday": "Yesterday",
    "last_week": "Last 7 days",
    "older": "Older",
}
#: Item data role holding the document id.
DOCUMENT_ID_ROLE: Final[int] = Qt.ItemDataRole.UserRole + 1  # type: ignore[operator]


class HistoryPanel(QDockWidget):
    """
    Recently opened documents, grouped by upload date, with a name filter.

    Args:
        history: The history service

    Keyword Args:
        parent: The parent widget (optional)

    """

    #: Emitted with the document id when an entry is opened.
    document_selected = Signal(str)
    #: Emitted with the document id after an entry is deleted.
    document_removed = Signal(str)

    def __init__(self, history: HistoryService, parent: QWidget | None = None) -> None:
        super().__init__("History", parent)
        self.history = history
        #: The open document, highlighted in the list.
        self.current_id: str | None = None
        self.setObjectName("historyPanel")
        self.setAllowedAreas(
            Qt.DockWidgetArea.LeftDockWidgetArea | Qt.DockWidgetArea.RightDockWidgetArea
        )
        self.build()

    def build(self) -> None:
        """Build the panel."""
        body = QWidget(self)
        layout = QVBoxLayout(body)
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search documents...")
        self.search_input.setClearButtonEnabled(True)
        self.search_input.textChanged.connect(lambda _text: self.refresh())
        layout.addWidget(self.search_input)

        self.tree = QTreeWidget()
        self.tree.setHeaderHidden(True)
        self.tree.setRootIsDecorated(False)
        self.tree.itemActivated.connect(self._on_item_activated)
        self.tree.itemDoubleClicked.connect(self._on_item_activated)
        layout.addWidget(self.tree, 1)

        buttons = QHBoxLayout()
        self.delete_button = QPushButton("Delete")
        self.delete_button.clicked.connect(self.delete_selected)
        buttons.addStretch(1)
        buttons.addWidget(self.delete_button)
        layout.addLayout(buttons)

        self.count_label = QLabel()
        self.count_label.setStyleSheet("color: palette(mid);")
        layout.addWidget(self.count_label)
        self.setWidget(body)

    def refresh(self, now: datetime | None = None) -> None:
        """
        Reload the list from the history service, applying the search text.

        Keyword Args:
            now: Naive UTC "now" for grouping; defaults to the current time

        """
        summaries = self.history.search(self.search_input.text())
        self.tree.clear()
        for key, entries in group_by_date(summaries, now).items():
            if not entries:
                continue
            group = QTreeWidgetItem([GROUP_LABELS[key]])
            group.setFlags(Qt.ItemFlag.ItemIsEnabled)
            font = group.font(0)
            font.setBold(True)
            group.setFont(0, font)
            self.tree.addTopLevelItem(group)
            for summary in entries:
                group.addChild(self._make_item(summary, now))
            group.setExpanded(True)
        self.count_label.setText(f"{len(summaries)} documents")

    def _make_item(
        self, summary: DocumentSummary, now: datetime | None
    ) -> QTreeWidgetItem:
        details = " · ".join(
            [
                summary.kind.upper(),
                f"{summary.page_count} pages",
                format_file_size(summary.size),
                relative_time(summary.uploaded_at, now),
            ]
        )
        item = QTreeWidgetItem([f"{summary.name}\n{details}"])
        item.setData(0, DOCUMENT_ID_ROLE, summary.id)
        item.setToolTip(0, summary.name)
        if summary.id == self.current_id:
            font = item.font(0)
            font.setBold(True)
            item.setFont(0, font)
        return item

    def selected_document_id(self) -> str | None:
        item = self.tree.currentItem()
        return item.data(0, DOCUMENT_ID_ROLE) if item is not None else None

    def delete_selected(self) -> None:
        """Delete the selected entry, if any."""
        document_id = self.selected_document_id()
        if document_id is None:
            return
        self.document_removed.emit(document_id)
        self.refresh()

    def _on_item_activated(self, item: QTreeWidgetItem, _column: int = 0) -> None:
        document_id = item.data(0, DOCUMENT_ID_ROLE)
        if document_id:
            self.document_selected.emit(document_id)
