from typing import TYPE_CHECKING, Final

from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QLabel,
    QLineEdit,
    QSpinBox,
    QVBoxLayout,
)

from bireader.services.logs import LOG_LEVELS, set_log_level

if TYPE_CHECKING:
    from bireader.ui.main_window import MainWindow


class PreferencesDialog:
    """
    Preferences dialog for the word lookup and scroll sync thresholds.
    """

    #: Dialog width
    DIALOG_WIDTH: Final[int] = 400
    #: Dialog height
    DIALOG_HEIGHT: Final[int] = 300

    def __init__(self, main_window: "MainWindow") -> None:
        self.main_window = main_window
        self.settings = main_window.settings

    def build(self) -> None:
        """
        Build the preferences dialog.
        """
        self.create_layout()
        self.max_length_spin = self.add_spin_box(
            "Longest selection looked up (characters):",
            1,
            500,
            self.settings.max_selection_length,
        )
        self.max_tokens_spin = self.add_spin_box(
            "Most words in a selection with no dictionary entry:",
            1,
            20,
            self.settings.max_unmatched_tokens,
        )
        self.arm_delay_spin = self.add_spin_box(
            "Tooltip click-away delay (ms):", 0, 1000, self.settings.arm_delay_ms
        )
        self.guard_spin = self.add_spin_box(
            "Scroll sync guard (ms):", 0, 1000, self.settings.guard_ms
        )
        self.layout.addWidget(QLabel("Shown for words not in the dictionary:"))
        self.marker_edit = QLineEdit(self.settings.not_found_marker, self.dialog)
        self.layout.addWidget(self.marker_edit)
        self.layout.addWidget(QLabel("Log level:"))
        self.log_level_combo = QComboBox(self.dialog)
        self.log_level_combo.addItems(list(LOG_LEVELS))
        self.log_level_combo.setCurrentText(self.settings.log_level.upper())
        self.layout.addWidget(self.log_level_combo)
        self.button_box = self.add_button_box()

    def create_layout(self) -> None:
        """
        Create a layout for the preferences dialog.
        """
        self.dialog = QDialog(self.main_window)
        self.dialog.setWindowTitle("Preferences")
        self.dialog.setMinimumSize(self.DIALOG_WIDTH, self.DIALOG_HEIGHT)
        self.layout = QVBoxLayout(self.dialog)

    def add_spin_box(
        self, label: str, minimum: int, maximum: int, value: int
    ) -> QSpinBox:
        """
        Create a spin box for an integer setting.

        Args:
            label: Label for the spin box
            minimum: Minimum value for the spin box
            maximum: Maximum value for the spin box
            value: Value for the spin box

        Returns:
            Spin box widget

        """
        spin_box = QSpinBox(self.dialog)
        spin_box.setMinimum(minimum)
        spin_box.setMaximum(maximum)
        spin_box.setValue(value)
        self.layout.addWidget(QLabel(label))
        self.layout.addWidget(spin_box)
        return spin_box

    def add_button_box(self) -> QDialogButtonBox:
        """
        Add the button box to the dialog.

        Returns:
            Button box widget

        """
        button_box = QDialogButtonBox(self.dialog)
        button_box.addButton(QDialogButtonBox.StandardButton.Ok)
        button_box.addButton(QDialogButtonBox.StandardButton.Cancel)
        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.dialog.reject)
        self.layout.addWidget(button_box)
        return button_box

    def save_settings(self) -> None:
        """
        Apply the values to the live settings and persist them.  The lookup
        controller and the scroll synchronizer read them on their next use.
        """
        self.settings.max_selection_length = self.max_length_spin.value()
        self.settings.max_unmatched_tokens = self.max_tokens_spin.value()
        self.settings.arm_delay_ms = self.arm_delay_spin.value()
        self.settings.guard_ms = self.guard_spin.value()
        self.settings.not_found_marker = (
            self.marker_edit.text().strip() or self.settings.not_found_marker
        )
        self.settings.log_level = self.log_level_combo.currentText()
        self.main_window.scroll_sync.guard_ms = self.settings.guard_ms
        set_log_level(self.settings.log_level)
        self.settings.save()
        self.dialog.accept()

    def execute(self) -> None:
        """
        Execute the preferences dialog.
        """
        self.build()
        self.dialog.exec()
