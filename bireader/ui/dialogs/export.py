from pathlib import Path
from typing import TYPE_CHECKING, Final

from PySide6.QtWidgets import (
    QButtonGroup,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QLabel,
    QRadioButton,
    QVBoxLayout,
)

from bireader.services.export import (
    ExportFormat,
    ExportMode,
    ExportService,
    export_filename,
)

if TYPE_CHECKING:
    from bireader.ui.main_window import MainWindow


class ExportDialog:
    """
    Lets the user pick an export format and content, then asks where to save.
    """

    #: Dialog width
    DIALOG_WIDTH: Final[int] = 460
    #: Dialog height
    DIALOG_HEIGHT: Final[int] = 320
    #: Labels for the formats, in display order.
    FORMATS: Final[dict[ExportFormat, str]] = {
        ExportFormat.TXT: "Plain text (.txt)",
        ExportFormat.HTML: "Web page (.html)",
        ExportFormat.MD: "Markdown (.md)",
        ExportFormat.DOCX: "Word document, side by side (.docx)",
    }
    #: Labels for the content modes, in display order.
    MODES: Final[dict[ExportMode, str]] = {
        ExportMode.BILINGUAL: "Bilingual (original + translation)",
        ExportMode.TRANSLATION_ONLY: "Translation only",
        ExportMode.SOURCE_ONLY: "Original only",
    }
    #: Number of paragraphs shown in the preview.
    PREVIEW_PARAGRAPHS: Final[int] = 2

    def __init__(self, main_window: "MainWindow") -> None:
        self.main_window = main_window
        self.service = ExportService()

    def build(self) -> None:
        """
        Build the export dialog.
        """
        self.dialog = QDialog(self.main_window)
        self.dialog.setWindowTitle("Export")
        self.dialog.setMinimumSize(self.DIALOG_WIDTH, self.DIALOG_HEIGHT)
        self.layout = QVBoxLayout(self.dialog)

        self.layout.addWidget(QLabel("Format:"))
        self.format_combo = QComboBox(self.dialog)
        for fmt, label in self.FORMATS.items():
            self.format_combo.addItem(label, fmt.value)
        self.layout.addWidget(self.format_combo)

        self.layout.addWidget(QLabel("Content:"))
        self.mode_group = QButtonGroup(self.dialog)
        self.mode_buttons: dict[ExportMode, QRadioButton] = {}
        for mode, label in self.MODES.items():
            button = QRadioButton(label, self.dialog)
            self.mode_group.addButton(button)
            self.mode_buttons[mode] = button
            self.layout.addWidget(button)
        self.mode_buttons[ExportMode.BILINGUAL].setChecked(True)

        self.preview = QLabel(self.preview_text())
        self.preview.setWordWrap(True)
        self.preview.setStyleSheet("color: palette(mid); padding: 6px;")
        self.layout.addWidget(self.preview)

        self.button_box = QDialogButtonBox(self.dialog)
        self.button_box.addButton(QDialogButtonBox.StandardButton.Save)
        self.button_box.addButton(QDialogButtonBox.StandardButton.Cancel)
        self.button_box.accepted.connect(self.save)
        self.button_box.rejected.connect(self.dialog.reject)
        self.layout.addWidget(self.button_box)

    @property
    def selected_format(self) -> ExportFormat:
        return ExportFormat(self.format_combo.currentData())

    @property
    def selected_mode(self) -> ExportMode:
        for mode, button in self.mode_buttons.items():
            if button.isChecked():
                return mode
        return ExportMode.BILINGUAL

    def preview_text(self) -> str:
        """The first exported paragraphs, shortened."""
        document = self.main_window.session.document
        if document is None:
            return ""
        paragraphs = self.service.exported_paragraphs(document.paragraphs)
        lines = [
            p.source_text[:120] + ("..." if len(p.source_text) > 120 else "")  # noqa: PLR2004
            for p in paragraphs[: self.PREVIEW_PARAGRAPHS]
        ]
        return "\n\n".join(lines)

    def save(self) -> None:
        """
        Ask for a file name and write the export.

        - If there is no open document, or the user cancels the file dialog,
          do nothing
        - Otherwise write the file and report the result in the main window
        """
        document = self.main_window.session.document
        if document is None:
            self.dialog.reject()
            return
        fmt = self.selected_format
        file_path, _ = QFileDialog.getSaveFileName(
            self.dialog,
            "Export",
            export_filename(document.display_name, fmt),
            f"{self.FORMATS[fmt]} (*.{fmt.value})",
        )
        if not file_path:
            return
        if self.service.save(
            Path(file_path),
            document.paragraphs,
            self.selected_mode,
            fmt,
            document.display_name,
        ):
            self.main_window.show_message("Exported successfully")
            self.dialog.accept()
        else:
            self.main_window.show_error("Export failed")

    def execute(self) -> None:
        """
        Execute the export dialog.
        """
        self.build()
        self.dialog.exec()
