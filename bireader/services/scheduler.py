"""Cancellable, generation-aware timer callbacks."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QTimer

from bireader.services.logs import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger(__name__)


class ScheduledTask:
    """
    A single-shot callback bound to the generation it was scheduled in.

    Args:
        scheduler: The owning scheduler
        generation: The scheduler generation captured at scheduling time
        callback: What to run when the timer fires
        name: Label used in log records

    """

    def __init__(
        self,
        scheduler: TaskScheduler,
        generation: int,
        callback: Callable[[], None],
        name: str,
    ) -> None:
        #: The generation this task belongs to.
        self.generation = generation
        #: Label used in log records.
        self.name = name
        self._scheduler = scheduler
        self._callback = callback
        self._timer: QTimer | None = QTimer(scheduler)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        #: Whether the callback actually ran.
        self.fired = False

    @property
    def active(self) -> bool:
        """Whether the task is still waiting to fire."""
        return self._timer is not None and self._timer.isActive()

    def start(self, delay_ms: int) -> None:
        """Start the underlying timer."""
        if self._timer is not None:
            self._timer.start(max(0, delay_ms))

    def cancel(self) -> None:
        """
        Stop the timer and release it.  Safe to call more than once.
        """
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None
        self._scheduler._forget(self)

    def _fire(self) -> None:
        """
        Run the callback unless the scheduler has moved to a newer generation.

        - Release the timer
        - If the captured generation is stale, drop the callback
        - Otherwise run it
        """
        self.cancel()
        if self.generation != self._scheduler.generation:
            logger.debug(
                "stale task dropped",
                task=self.name,
                generation=self.generation,
                live_generation=self._scheduler.generation,
            )
            return
        self.fired = True
        self._callback()


class TaskScheduler(QObject):
    """
    Schedules single-shot callbacks tied to a generation counter.

    Every task captures the generation that was live when it was scheduled.
    :meth:`advance` moves to a new generation (for example, when a new document
    is loaded) and stops all pending timers; any task that still fires with an
    older generation is dropped.

    Args:
        name: Label used in log records
        parent: The parent object (optional)

    """

    def __init__(self, name: str = "scheduler", parent: QObject | None = None):
        super().__init__(parent)
        #: Label used in log records.
        self.name = name
        #: The live generation.
        self.generation = 0
        self._tasks: list[ScheduledTask] = []

    @property
    def pending(self) -> int:
        """Number of tasks waiting to fire."""
        return len(self._tasks)

    def schedule(
        self, delay_ms: int, callback: Callable[[], None], name: str = ""
    ) -> ScheduledTask:
        """
        Run ``callback`` after ``delay_ms`` if the generation is unchanged.

        Args:
            delay_ms: Delay in milliseconds
            callback: The callback
            name: Label used in log records

        Returns:
            The scheduled task

        """
        task = ScheduledTask(self, self.generation, callback, name or self.name)
        self._tasks.append(task)
        task.start(delay_ms)
        return task

    def advance(self) -> int:
        """
        Start a new generation, cancelling everything pending.

        Returns:
            The new generation

        """
        self.cancel_all()
        self.generation += 1
        return self.generation

    def cancel_all(self) -> None:
        """Stop every pending task without changing the generation."""
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    def _forget(self, task: ScheduledTask) -> None:
        if task in self._tasks:
            self._tasks.remove(task)
