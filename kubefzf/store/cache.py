"""Module for the in memory cache of resources of a single resource type."""

from collections.abc import Mapping
from dataclasses import dataclass
import logging
import threading
from types import MappingProxyType

from kubefzf.resources import BaseResource

_LOGGER = logging.getLogger(__name__)

__all__ = ["ResourceCache", "CacheSnapshot"]


@dataclass(frozen=True)
class CacheSnapshot:
    """A consistent copy of the cache taken at a single instant."""

    resources: Mapping[str, BaseResource]
    """Read-only mapping of resource key to resource."""

    generation: int
    """Number of mutations applied to the cache when the copy was taken."""


class ResourceCache:
    """Mapping of resource key to the latest known resource, with a dirty flag.

    The dirty flag is set by every mutation and is only cleared when a
    snapshot taken after the last mutation has been persisted. All state is
    guarded by a single lock so mutations may come from any thread.
    """

    def __init__(self) -> None:
        """Initialize the ResourceCache."""
        self._lock = threading.Lock()
        self._resources: dict[str, BaseResource] = {}
        self._dirty = False
        self._generation = 0

    def put(self, resource: BaseResource) -> str:
        """Insert or replace a resource, returning its key."""
        key = resource.key
        with self._lock:
            self._resources[key] = resource
            self._generation += 1
            self._dirty = True
        return key

    def remove(self, key: str) -> bool:
        """Remove the resource with the key, returning True if it was present."""
        with self._lock:
            if self._resources.pop(key, None) is None:
                return False
            self._generation += 1
            self._dirty = True
        return True

    def snapshot(self) -> CacheSnapshot:
        """Return a copy of the cache that is not affected by later mutations."""
        with self._lock:
            return CacheSnapshot(
                resources=MappingProxyType(dict(self._resources)),
                generation=self._generation,
            )

    def mark_clean(self, generation: int) -> bool:
        """Clear the dirty flag if nothing changed since the snapshot generation.

        Returns True if the flag was cleared.
        """
        with self._lock:
            if generation != self._generation:
                _LOGGER.debug(
                    "Cache changed since generation %d (now %d), staying dirty",
                    generation,
                    self._generation,
                )
                return False
            self._dirty = False
            return True

    @property
    def dirty(self) -> bool:
        """True if the cache changed since it was last persisted."""
        with self._lock:
            return self._dirty

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._resources
