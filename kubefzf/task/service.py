"""Task tracking service for kubefzf.

This service owns long running background tasks and cancels them on shutdown.
"""

import asyncio
from abc import ABC, abstractmethod
import logging
from typing import Any, Coroutine

_LOGGER = logging.getLogger(__name__)

__all__: list[str] = []


class TaskService(ABC):
    """Service owning long running background tasks."""

    @abstractmethod
    def create_background_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a new long running background task.

        Args:
            coro: The coroutine to run as a task
            name: Optional name of the task, used in logs

        Returns:
            The created task
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Cancel all background tasks and wait for them to exit."""

    @abstractmethod
    def get_num_background_tasks(self) -> int:
        """Get the number of background tasks that are still running."""


class TaskServiceImpl(TaskService):
    """Service owning long running background tasks."""

    def __init__(self) -> None:
        """Initialize the task service."""
        self._background_tasks: set[asyncio.Task[Any]] = set()

    def create_background_task(
        self, coro: Coroutine[None, None, Any], name: str | None = None
    ) -> asyncio.Task[Any]:
        """Create and track a new background task."""
        task = asyncio.create_task(coro, name=name)
        self._background_tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        """Callback when a task is done."""
        self._background_tasks.discard(task)
        if task.cancelled():
            _LOGGER.debug("Task %s cancelled", task.get_name())
            return
        if (err := task.exception()) is not None:
            _LOGGER.error("Task %s failed: %s", task.get_name(), err)

    async def shutdown(self) -> None:
        """Cancel all background tasks and wait for them to exit."""
        tasks = list(self._background_tasks)
        if not tasks:
            return
        _LOGGER.debug("Cancelling %d background tasks", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def get_num_background_tasks(self) -> int:
        """Get the number of background tasks that are still running."""
        return len(self._background_tasks)
