"""Translation progress state machine."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final

from PySide6.QtCore import QObject, Signal

from bireader.models import Side
from bireader.services.logs import get_logger
from bireader.services.scheduler import TaskScheduler

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

#: Default ``(delay in ms, percent)`` checkpoints of a run.
DEFAULT_CHECKPOINTS: Final[tuple[tuple[int, int], ...]] = (
    (0, 5),
    (200, 40),
    (700, 70),
    (1200, 90),
)
#: Highest percent a checkpoint may report; only completion reaches 100.
CHECKPOINT_CEILING: Final[int] = 90
#: How long the completed state is shown before returning to idle.
DEFAULT_SETTLE_MS: Final[int] = 800


class ProgressState(StrEnum):
    """States of a translation run."""

    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class TranslationProgress(QObject):
    """
    Reports the progress of the translation of the current document.

    The percent is driven by scheduled checkpoints rather than by real work,
    so it only says "something is happening"; it never goes down during a run
    and never reaches 100 until :meth:`complete` is called for the document
    that is actually running.

    Keyword Args:
        checkpoints: ``(delay in ms, percent)`` pairs, delays relative to start
        settle_ms: Delay between completion and the return to idle
        parent: The parent object (optional)

    """

    #: Emitted with the new percent.
    progress_changed = Signal(int)
    #: Emitted with the new :class:`ProgressState`.
    state_changed = Signal(object)

    def __init__(
        self,
        checkpoints: Sequence[tuple[int, int]] = DEFAULT_CHECKPOINTS,
        settle_ms: int = DEFAULT_SETTLE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self.checkpoints = tuple(checkpoints)
        self.settle_ms = settle_ms
        #: The document the current run belongs to.
        self.document_id: str | None = None
        self._percent = 0
        self._state = ProgressState.IDLE
        self._scheduler = TaskScheduler("progress", self)

    @property
    def percent(self) -> int:
        return self._percent

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def in_progress(self) -> bool:
        return self._state == ProgressState.IN_PROGRESS

    def start(self, document_id: str) -> None:
        """
        Start a run for a document.

        - Drop every pending checkpoint of a previous run
        - Reset the percent to 0 and enter ``in_progress``
        - Schedule the checkpoints

        Args:
            document_id: The document being translated

        """
        self._scheduler.advance()
        self.document_id = document_id
        self._set_percent(0, force=True)
        self._set_state(ProgressState.IN_PROGRESS)
        for delay_ms, percent in self.checkpoints:
            self._scheduler.schedule(
                delay_ms,
                lambda percent=percent: self._checkpoint(percent),
                f"progress-{percent}",
            )
        logger.info("translation started", document_id=document_id)

    def complete(self, document_id: str) -> bool:
        """
        Finish the run for ``document_id``.

        A completion for any other document (a stale run) is ignored.

        Args:
            document_id: The document whose translation finished

        Returns:
            Whether the completion was applied

        """
        if not self.in_progress or document_id != self.document_id:
            logger.debug(
                "stale completion dropped",
                document_id=document_id,
                current=self.document_id,
            )
            return False
        self._scheduler.advance()
        self._set_percent(100, force=True)
        self._set_state(ProgressState.COMPLETE)
        self._scheduler.schedule(self.settle_ms, self._settle, "progress-settle")
        logger.info("translation complete", document_id=document_id)
        return True

    def cancel(self) -> None:
        """Abandon the current run and return to idle immediately."""
        self._scheduler.advance()
        self._settle()

    def is_pane_interactive(self, side: Side) -> bool:
        """
        Whether a pane accepts input.  The target pane is locked while a run
        is in progress; the source pane never is.
        """
        return Side(side) == Side.SOURCE or not self.in_progress

    def _checkpoint(self, percent: int) -> None:
        if self.in_progress:
            self._set_percent(min(percent, CHECKPOINT_CEILING))

    def _settle(self) -> None:
        self._set_state(ProgressState.IDLE)
        self._set_percent(0, force=True)

    def _set_percent(self, percent: int, *, force: bool = False) -> None:
        if percent == self._percent or (not force and percent < self._percent):
            return
        self._percent = percent
        self.progress_changed.emit(percent)

    def _set_state(self, state: ProgressState) -> None:
        if state != self._state:
            self._state = state
            self.state_changed.emit(state)
