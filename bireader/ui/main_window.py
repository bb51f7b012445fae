"""Main application window."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Final

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QToolBar,
    QVBoxLayout,
    QWidget,
)

from bireader.exc import DoesNotExist, FileTooLarge, UnsupportedFileType
from bireader.models import Side
from bireader.services.dictionary import GlossaryDictionary
from bireader.services.logs import get_logger
from bireader.services.lookup import LookupController
from bireader.services.progress import ProgressState
from bireader.services.pronunciation import Pronouncer
from bireader.services.scroll_sync import ScrollSynchronizer
from bireader.services.split_resizer import SplitResizer
from bireader.settings import ViewerSettings
from bireader.ui.dialogs import ExportDialog, PreferencesDialog
from bireader.ui.history_panel import HistoryPanel
from bireader.ui.pane import DocumentPane
from bireader.ui.split_handle import SplitHandle
from bireader.ui.tooltip import WordTooltip

if TYPE_CHECKING:
    from PySide6.QtCore import QMimeData
    from PySide6.QtGui import (
        QCloseEvent,
        QDragEnterEvent,
        QDropEvent,
        QResizeEvent,
    )

    from bireader.services.dictionary import Dictionary
    from bireader.services.session import ViewerSession

logger = get_logger(__name__)

#: Smallest text zoom in percent.
MIN_ZOOM: Final[int] = 70
#: Largest text zoom in percent.
MAX_ZOOM: Final[int] = 150
#: Zoom change per step.
ZOOM_STEP: Final[int] = 10


class MainMenu:
    """Main application menu."""

    def __init__(self, main_window: MainWindow) -> None:
        """
        Initialize main menu.

        Args:
            main_window: Main window instance

        """
        #: Main window instance
        self.main_window = main_window
        #: Menu bar
        self.menu = self.main_window.menuBar()

    def add_file_menu(self) -> None:
        """
        Create file menu.

        This means adding a "File" menu to :attr:`self.menu`, the main menu bar,
        with the following actions:

        - Upload...
        - Export...
        - Preferences...
        - Quit

        """
        actions = self.main_window.window_actions
        file_menu = self.menu.addMenu("&File")
        file_menu.addAction(actions["upload"])
        file_menu.addAction(actions["export"])
        file_menu.addSeparator()
        file_menu.addAction(actions["preferences"])
        file_menu.addSeparator()
        file_menu.addAction(actions["quit"])

    def add_view_menu(self) -> None:
        """
        Create view menu.

        This means adding a "View" menu to :attr:`self.menu` with the history,
        feature toggle and zoom actions.
        """
        actions = self.main_window.window_actions
        view_menu = self.menu.addMenu("&View")
        view_menu.addAction(actions["history"])
        view_menu.addSeparator()
        view_menu.addAction(actions["sync_scroll"])
        view_menu.addAction(actions["word_lookup"])
        view_menu.addSeparator()
        view_menu.addAction(actions["zoom_in"])
        view_menu.addAction(actions["zoom_out"])

    def build(self) -> None:
        """Build the main menu."""
        self.add_file_menu()
        self.add_view_menu()


class MainWindow(QMainWindow):
    """
    Main application window: two synchronized panes with the original on the
    left and the translation on the right.

    Args:
        session: The viewer session

    Keyword Args:
        settings: Viewer settings; loaded from QSettings when omitted
        dictionary: The word lookup dictionary; the bundled glossary when
            omitted

    """

    def __init__(
        self,
        session: ViewerSession,
        settings: ViewerSettings | None = None,
        dictionary: Dictionary | None = None,
    ) -> None:
        super().__init__()
        #: The viewer session
        self.session = session
        #: Viewer settings
        self.settings = settings or ViewerSettings.load()
        #: Word lookup dictionary
        self.dictionary = dictionary or GlossaryDictionary.from_json()
        #: Window actions, by name
        self.window_actions: dict[str, QAction] = {}
        self.history_panel: HistoryPanel | None = None

        # Build the main window
        self.build()

    # ------------------------------------------------------------
    # Building
    # ------------------------------------------------------------

    def build(self) -> None:
        """
        Build the main window.

        - Setup the main window and the panes.
        - Setup the controllers.
        - Setup the actions, toolbar and main menu.
        - Setup the history panel and the status bar.
        - Connect signals.

        """
        self._setup_main_window()
        self._setup_controllers()
        self._setup_actions()
        self._setup_toolbar()
        MainMenu(self).build()
        self._setup_history_panel()
        self._setup_status_bar()
        self._connect_signals()
        self._setup_shortcuts()
        self._apply_split(self.resizer.left_percent)
        self.set_zoom(self.settings.zoom)
        self.update_status()

    def _setup_main_window(self) -> None:
        """
        Set up the main window: pane labels, the two panes and the handle.
        """
        self.setWindowTitle("Bilingual Reader")
        app = QApplication.instance()
        if isinstance(app, QApplication) and not app.windowIcon().isNull():
            self.setWindowIcon(app.windowIcon())
        self.setGeometry(100, 100, 1280, 800)
        self.setAcceptDrops(True)

        self.central = QWidget()
        self.setCentralWidget(self.central)
        layout = QVBoxLayout(self.central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        labels = QHBoxLayout()
        labels.setContentsMargins(12, 4, 12, 4)
        self.source_label = QLabel("Original")
        self.target_label = QLabel("Translation")
        labels.addWidget(self.source_label)
        labels.addStretch(1)
        labels.addWidget(self.target_label)
        layout.addLayout(labels)

        self.container = QWidget()
        self.container_layout = QHBoxLayout(self.container)
        self.container_layout.setContentsMargins(0, 0, 0, 0)
        self.container_layout.setSpacing(0)
        registry = self.session.registry
        self.source_pane = DocumentPane(Side.SOURCE, registry, self.container)
        self.target_pane = DocumentPane(Side.TARGET, registry, self.container)
        for pane in (self.source_pane, self.target_pane):
            pane.viewport_widget = self.central
        layout.addWidget(self.container, 1)

        self.tooltip = WordTooltip(self.central)
        self.pronouncer = Pronouncer(self)
        self.tooltip.speak_button.setVisible(Pronouncer.available())

    def _setup_controllers(self) -> None:
        """
        Create the scroll synchronizer, the split resizer and the lookup
        controller, and put the handle between the panes.
        """
        self.scroll_sync = ScrollSynchronizer(
            self.source_pane.verticalScrollBar(),
            self.target_pane.verticalScrollBar(),
            self.settings.guard_ms,
            self,
        )
        self.resizer = SplitResizer(self.container, self.settings.left_percent, self)
        self.handle = SplitHandle(self.resizer, self.container)
        self.container_layout.addWidget(self.source_pane)
        self.container_layout.addWidget(self.handle)
        self.container_layout.addWidget(self.target_pane)

        self.lookup = LookupController(
            self.dictionary, self.session.store, self.settings, self
        )
        self.lookup.viewport = self.central
        self.lookup.attach(self.source_pane)
        self.lookup.attach(self.target_pane)
        self.lookup.set_enabled(self.settings.word_lookup)
        self.scroll_sync.set_enabled(self.settings.sync_scroll)

    def _add_action(
        self,
        name: str,
        text: str,
        slot,  # noqa: ANN001
        shortcut: str | None = None,
        *,
        checkable: bool = False,
        checked: bool = False,
    ) -> QAction:
        action = QAction(text, self)
        if shortcut:
            action.setShortcut(QKeySequence(shortcut))
        if checkable:
            action.setCheckable(True)
            action.setChecked(checked)
            action.toggled.connect(slot)
        else:
            action.triggered.connect(slot)
        self.window_actions[name] = action
        return action

    def _setup_actions(self) -> None:
        """Create the window actions."""
        self._add_action("upload", "&Upload...", self.upload, "Ctrl+O")
        self._add_action("export", "&Export...", self.export_document, "Ctrl+E")
        self._add_action("preferences", "&Preferences...", self.show_preferences)
        self._add_action("quit", "&Quit", self.close, "Ctrl+Q")
        self._add_action("history", "&History", self.toggle_history, "Ctrl+H")
        self._add_action(
            "sync_scroll",
            "&Sync scrolling",
            self.set_sync_scroll,
            "Ctrl+Shift+S",
            checkable=True,
            checked=self.settings.sync_scroll,
        )
        self._add_action(
            "word_lookup",
            "&Word lookup",
            self.set_word_lookup,
            "Ctrl+Shift+L",
            checkable=True,
            checked=self.settings.word_lookup,
        )
        self._add_action("zoom_in", "Zoom &in", self.zoom_in, "Ctrl++")
        self._add_action("zoom_out", "Zoom &out", self.zoom_out, "Ctrl+-")

    def _setup_toolbar(self) -> None:
        """Set up the toolbar."""
        self.toolbar = QToolBar("Main", self)
        self.toolbar.setObjectName("mainToolbar")
        self.toolbar.setMovable(False)
        for name in ("history", "upload"):
            self.toolbar.addAction(self.window_actions[name])
        self.toolbar.addSeparator()
        for name in ("sync_scroll", "word_lookup"):
            self.toolbar.addAction(self.window_actions[name])
        self.toolbar.addSeparator()
        self.toolbar.addAction(self.window_actions["zoom_out"])
        self.zoom_label = QLabel()
        self.toolbar.addWidget(self.zoom_label)
        self.toolbar.addAction(self.window_actions["zoom_in"])
        self.toolbar.addSeparator()
        self.toolbar.addAction(self.window_actions["export"])
        self.addToolBar(self.toolbar)

    def _setup_history_panel(self) -> None:
        """Set up the history panel, if there is a history service."""
        if self.session.history is None:
            self.window_actions["history"].setEnabled(False)
            return
        self.history_panel = HistoryPanel(self.session.history, self)
        self.history_panel.document_selected.connect(self.open_from_history)
        self.history_panel.document_removed.connect(self.remove_from_history)
        self.addDockWidget(Qt.DockWidgetArea.LeftDockWidgetArea, self.history_panel)
        self.history_panel.hide()

    def _setup_status_bar(self) -> None:
        """Set up the status bar labels and the progress bar."""
        self.active_label = QLabel()
        self.features_label = QLabel()
        self.count_label = QLabel()
        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setMaximumWidth(160)
        self.progress_bar.hide()
        status = self.statusBar()
        status.addWidget(self.active_label)
        status.addWidget(self.features_label)
        status.addPermanentWidget(self.progress_bar)
        status.addPermanentWidget(self.count_label)

    def _connect_signals(self) -> None:
        """Wire the panes, the controllers and the session together."""
        session = self.session
        for pane in (self.source_pane, self.target_pane):
            pane.paragraph_clicked.connect(session.navigation.handle_click)
        session.navigation.scroll_requested.connect(self._on_scroll_requested)
        session.state.active_paragraph_changed.connect(self._on_active_changed)
        session.document_opened.connect(self._on_document_opened)
        session.store.paragraphs_resolved.connect(self._on_paragraphs_resolved)
        session.progress.progress_changed.connect(self.progress_bar.setValue)
        session.progress.state_changed.connect(self._on_progress_state_changed)

        self.resizer.split_changed.connect(self._apply_split)
        self.resizer.selection_suppressed.connect(self._on_selection_suppressed)

        self.lookup.tooltip_shown.connect(self.tooltip.show_payload)
        self.lookup.tooltip_closed.connect(self.tooltip.dismiss)
        self.tooltip.close_requested.connect(self.lookup.close)
        self.tooltip.pronounce_requested.connect(self.speak_word)

    def _setup_shortcuts(self) -> None:
        """
        Add the window shortcuts.

        - Escape closes the tooltip
        - J/K step to the next/previous paragraph
        """
        close_tooltip = QShortcut(QKeySequence("Escape"), self)
        close_tooltip.activated.connect(self.lookup.close)
        navigation = self.session.navigation
        for key, offset in (("J", 1), ("K", -1)):
            shortcut = QShortcut(QKeySequence(key), self)
            shortcut.activated.connect(lambda offset=offset: navigation.step(offset))

    # ------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------

    def show_message(self, message: str, duration: int = 2000) -> None:
        """
        Show a message in the status bar.

        Args:
            message: Message to show

        Keyword Args:
            duration: Duration of the message in milliseconds (default: 2000)

        """
        self.statusBar().showMessage(message, duration)

    def show_warning(self, message: str, title: str = "Warning") -> None:
        """
        Show a warning message.

        Args:
            message: Message to show

        Keyword Args:
            title: Title of the message (default: "Warning")

        """
        QMessageBox.warning(self, title, message)

    def show_error(self, message: str, title: str = "Error") -> None:
        """
        Show an error message.

        Args:
            message: Message to show

        Keyword Args:
            title: Title of the message (default: "Error")

        """
        QMessageBox.critical(self, title, message)

    # ------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------

    def upload(self) -> None:
        """
        Ask for a file and upload it.

        - If the user cancels the dialog, do nothing.
        - If the file is rejected, show a warning.
        - Otherwise the session opens it and starts translating.
        """
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Upload document", "", "Documents (*.pdf *.txt *.docx)"
        )
        if file_path:
            self.upload_path(Path(file_path))

    def upload_path(self, path: Path) -> None:
        """
        Upload a file, reporting rejections to the user.

        Args:
            path: The file to upload

        """
        try:
            document = self.session.upload(path)
        except (UnsupportedFileType, FileTooLarge) as e:
            self.show_warning(str(e), "Cannot upload")
            return
        except OSError as e:
            self.show_error(f"Could not read {path.name}: {e}")
            return
        self.show_message(f"Uploaded {document.display_name}")

    def speak_word(self, word: str) -> None:
        """Pronounce a looked-up word."""
        if not self.pronouncer.speak(word):
            self.show_message("Speech is not available")

    def export_document(self) -> None:
        """Open the export dialog."""
        if self.session.document is None:
            self.show_message("Nothing to export")
            return
        ExportDialog(self).execute()

    def show_preferences(self) -> None:
        """Open the preferences dialog."""
        PreferencesDialog(self).execute()

    def toggle_history(self) -> None:
        """Show or hide the history panel."""
        if self.history_panel is None:
            return
        visible = not self.history_panel.isVisible()
        if visible:
            self.history_panel.refresh()
        self.history_panel.setVisible(visible)

    def open_from_history(self, document_id: str) -> None:
        """Reopen a document chosen in the history panel."""
        try:
            self.session.open_from_history(document_id)
        except DoesNotExist as e:
            self.show_warning(str(e))
            return
        if self.history_panel is not None:
            self.history_panel.hide()

    def remove_from_history(self, document_id: str) -> None:
        """Delete a history entry."""
        if self.session.remove_from_history(document_id):
            self.show_message("Removed from history")

    def set_sync_scroll(self, enabled: bool) -> None:  # noqa: FBT001
        self.scroll_sync.set_enabled(enabled)
        self.settings.sync_scroll = enabled
        self.update_status()

    def set_word_lookup(self, enabled: bool) -> None:  # noqa: FBT001
        self.lookup.set_enabled(enabled)
        self.settings.word_lookup = enabled
        self.update_status()

    def set_zoom(self, zoom: int) -> None:
        """
        Set the text zoom, clamped to ``[MIN_ZOOM, MAX_ZOOM]``.
        """
        zoom = max(MIN_ZOOM, min(zoom, MAX_ZOOM))
        self.settings.zoom = zoom
        self.source_pane.set_zoom(zoom)
        self.target_pane.set_zoom(zoom)
        self.zoom_label.setText(f" {zoom}% ")

    def zoom_in(self) -> None:
        self.set_zoom(self.settings.zoom + ZOOM_STEP)

    def zoom_out(self) -> None:
        self.set_zoom(self.settings.zoom - ZOOM_STEP)

    def pane_for(self, side: Side) -> DocumentPane:
        return self.source_pane if Side(side) == Side.SOURCE else self.target_pane

    # ------------------------------------------------------------
    # Signal handlers
    # ------------------------------------------------------------

    def _on_document_opened(self, document_id: str) -> None:
        """
        Render both panes for the newly opened document.
        """
        self.lookup.close()
        document = self.session.document
        self.source_pane.render_document(document)
        self.target_pane.render_document(document)
        name = document.display_name if document else ""
        self.setWindowTitle(f"Bilingual Reader - {name}" if name else "Bilingual Reader")
        if self.history_panel is not None:
            self.history_panel.current_id = document_id
            if self.history_panel.isVisible():
                self.history_panel.refresh()
        self.update_status()

    def _on_paragraphs_resolved(self, document_id: str, paragraph_ids: list) -> None:
        if document_id == self.session.store.current_id:
            self.target_pane.refresh_paragraphs(paragraph_ids)

    def _on_active_changed(self, paragraph_id: int | None) -> None:
        self.source_pane.set_active(paragraph_id)
        self.target_pane.set_active(paragraph_id)
        self.update_status()

    def _on_scroll_requested(self, element: QWidget, side: Side) -> None:
        self.pane_for(side).scroll_to_widget(element)

    def _on_progress_state_changed(self, state: ProgressState) -> None:
        progress = self.session.progress
        self.target_pane.set_interactive(progress.is_pane_interactive(Side.TARGET))
        self.progress_bar.setVisible(state != ProgressState.IDLE)
        if state == ProgressState.COMPLETE:
            self.show_message("Translation complete")

    def _on_selection_suppressed(self, suppressed: bool) -> None:  # noqa: FBT001
        self.source_pane.set_selectable(not suppressed)
        self.target_pane.set_selectable(not suppressed)

    def _apply_split(self, left_percent: float) -> None:
        """Give the panes widths proportional to the split."""
        self.settings.left_percent = left_percent
        self.container_layout.setStretch(0, round(left_percent * 10))
        self.container_layout.setStretch(2, round((100 - left_percent) * 10))

    def update_status(self) -> None:
        """Refresh the status bar labels."""
        active = self.session.state.active_paragraph_id
        self.active_label.setText(
            f"Paragraph {active}" if active is not None else "No paragraph selected"
        )
        features = [
            f"sync scrolling {'on' if self.scroll_sync.enabled else 'off'}",
            f"word lookup {'on' if self.lookup.enabled else 'off'}",
        ]
        self.features_label.setText(" | ".join(features))
        document = self.session.document
        self.count_label.setText(
            f"{len(document.paragraphs)} paragraphs" if document else ""
        )

    # ------------------------------------------------------------
    # Events
    # ------------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:  # noqa: N802
        super().resizeEvent(event)
        self.lookup.viewport_size = (
            float(self.central.width()),
            float(self.central.height()),
        )

    @staticmethod
    def _dropped_path(mime: QMimeData) -> Path | None:
        """The first local file in a drag, if any."""
        for url in mime.urls():
            if url.isLocalFile():
                return Path(url.toLocalFile())
        return None

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:  # noqa: N802
        """Accept drags that carry a local file."""
        if self._dropped_path(event.mimeData()) is None:
            event.ignore()
            return
        event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent) -> None:  # noqa: N802
        """Upload a dropped file."""
        path = self._dropped_path(event.mimeData())
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        self.upload_path(path)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        """
        End any drag, drop pending timers and save the settings.
        """
        self.resizer.end_drag()
        self.lookup.set_enabled(False)
        self.scroll_sync.set_enabled(False)
        if self.session.translator.busy:
            logger.info("pending translation dropped on close")
        self.session.translator.cancel()
        self.settings.save()
        logger.info("main window closed")
        super().closeEvent(event)
