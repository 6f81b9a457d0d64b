"""Store module holding the cache of a resource type and persisting it to disk.

A Store receives add/update/delete notifications for a single resource type
and keeps the latest known object per resource key. A background loop wakes
on a fixed interval and, only if the cache changed since the last write,
writes a full snapshot of the cache to `<dest_dir>/<plural name>`. A burst of
notifications between two ticks results in a single write.
"""

import asyncio
from enum import Enum
import logging
import os
import time
from pathlib import Path
from types import TracebackType

from kubefzf.codec import encode_to_file
from kubefzf.config import StoreConfig
from kubefzf.exceptions import DumpException, InputException, StoreSetupError
from kubefzf.resources import BaseResource, ResourceType
from kubefzf.task import TaskService, get_task_service

from .cache import ResourceCache

_LOGGER = logging.getLogger(__name__)


class StoreState(str, Enum):
    """Lifecycle of a Store."""

    INITIALIZED = "initialized"
    RUNNING = "running"
    STOPPED = "stopped"


class Store:
    """Cache of the resources of a single resource type, persisted on an interval.

    The dump loop is started on construction as a background task of the task
    service and runs until that task is cancelled, either with `stop()` or by
    shutting down the task service.
    """

    def __init__(
        self,
        config: StoreConfig,
        resource_type: ResourceType,
        task_service: TaskService | None = None,
    ) -> None:
        """Initialize the Store and start the dump loop."""
        dest_dir = config.dest_dir
        if not dest_dir.is_dir():
            raise StoreSetupError(f"Destination directory {dest_dir} does not exist")
        if not os.access(dest_dir, os.W_OK):
            raise StoreSetupError(f"Destination directory {dest_dir} is not writable")

        self._config = config
        self._resource_type = resource_type
        self._file_path = config.resource_path(resource_type)
        self._cache = ResourceCache()
        self._dump_lock = asyncio.Lock()
        self._last_dump_time: float | None = None
        self._state = StoreState.INITIALIZED

        task_service = task_service or get_task_service()
        self._task = task_service.create_background_task(
            self._dump_loop(), name=f"dump-{resource_type}"
        )
        self._task.add_done_callback(self._loop_done)
        self._state = StoreState.RUNNING

    @property
    def resource_type(self) -> ResourceType:
        """The resource type held by the Store."""
        return self._resource_type

    @property
    def file_path(self) -> Path:
        """The path of the snapshot file."""
        return self._file_path

    @property
    def state(self) -> StoreState:
        """The lifecycle state of the Store."""
        return self._state

    @property
    def dump_required(self) -> bool:
        """True if the cache changed since the last snapshot was written by the loop."""
        return self._cache.dirty

    @property
    def last_dump_time(self) -> float | None:
        """Time, in seconds since the epoch, of the last successful dump."""
        return self._last_dump_time

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def add_resource(self, resource: BaseResource) -> None:
        """Add or replace a resource in the cache."""
        if not isinstance(resource, self._resource_type.resource_cls):
            raise InputException(
                f"Expected {self._resource_type.resource_cls.__name__} for "
                f"{self._resource_type} but was {resource.__class__.__name__}"
            )
        key = self._cache.put(resource)
        _LOGGER.debug("Added %s %s", self._resource_type, key)

    def delete_resource(self, key: str) -> None:
        """Remove the resource with the key from the cache, if present."""
        if self._cache.remove(key):
            _LOGGER.debug("Deleted %s %s", self._resource_type, key)
        else:
            _LOGGER.debug("Ignoring delete of unknown %s %s", self._resource_type, key)

    async def dump_full_state(self) -> None:
        """Write a full snapshot of the cache to the snapshot file.

        This does not change whether a dump is required; only the dump loop
        clears that flag.

        Raises:
            DumpException: If the snapshot could not be encoded or written.
        """
        async with self._dump_lock:
            await self._write_snapshot()

    async def _write_snapshot(self) -> int:
        """Write the snapshot and return the cache generation it reflects."""
        snapshot = self._cache.snapshot()
        t1 = time.perf_counter()
        await encode_to_file(snapshot.resources, self._resource_type, self._file_path)
        self._last_dump_time = time.time()
        _LOGGER.debug(
            "Dumped %d %s to %s (%0.3fs)",
            len(snapshot.resources),
            self._resource_type,
            self._file_path,
            time.perf_counter() - t1,
        )
        return snapshot.generation

    async def _dump_if_required(self) -> bool:
        """Write a snapshot if the cache changed, returning True if written."""
        if not self._cache.dirty:
            return False
        async with self._dump_lock:
            try:
                generation = await self._write_snapshot()
            except DumpException as err:
                _LOGGER.error("Failed to dump %s, will retry: %s", self._resource_type, err)
                return False
            self._cache.mark_clean(generation)
        return True

    async def _dump_loop(self) -> None:
        interval = self._config.time_between_full_dump
        _LOGGER.debug("Starting dump loop for %s every %ss", self._resource_type, interval)
        while True:
            await asyncio.sleep(interval)
            await self._dump_if_required()

    def _loop_done(self, task: "asyncio.Task[None]") -> None:
        self._state = StoreState.STOPPED
        _LOGGER.debug("Stopped dump loop for %s", self._resource_type)

    async def stop(self) -> None:
        """Stop the dump loop and wait for it to exit."""
        if self._task.done():
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            # Propagate if the caller itself is being cancelled
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    async def __aenter__(self) -> "Store":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()
