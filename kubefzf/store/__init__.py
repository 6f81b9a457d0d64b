"""
The store module keeps a local, continuously updated snapshot of the
resources of a cluster so that command line completion never has to call the
cluster API.

- One Store per resource type, keyed by `<namespace>_<name>` (or `<name>`).
- Notifications are applied to an in memory cache guarded by a lock.
- A background loop writes the full cache to disk on an interval, only when
  it changed since the last write.
"""

from .cache import CacheSnapshot, ResourceCache
from .store import Store, StoreState
from .watcher import WatchEvent, WatchEventType, ingest, parse_watch_event

__all__ = [
    "CacheSnapshot",
    "ResourceCache",
    "Store",
    "StoreState",
    "WatchEvent",
    "WatchEventType",
    "ingest",
    "parse_watch_event",
]
