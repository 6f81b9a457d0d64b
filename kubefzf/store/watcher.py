"""Ingestion of watch notifications into a Store.

Notifications are applied in the order they are received; the latest
notification for a key wins.
"""

from collections.abc import AsyncIterable
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any

from kubefzf.config import ResourceConfig
from kubefzf.exceptions import InputException
from kubefzf.resources import BaseResource, ResourceType, parse_raw_obj

from .store import Store

_LOGGER = logging.getLogger(__name__)

__all__ = [
    "WatchEventType",
    "WatchEvent",
    "parse_watch_event",
    "ingest",
]


class WatchEventType(str, Enum):
    """Type of a watch notification."""

    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    DELETED = "DELETED"
    BOOKMARK = "BOOKMARK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class WatchEvent:
    """A single watch notification for a resource."""

    type: WatchEventType
    resource: BaseResource | None = None
    message: str | None = None
    """Reason reported by ERROR notifications."""

    @property
    def key(self) -> str:
        """Return the key of the resource the notification is about."""
        if self.resource is None:
            raise InputException(f"{self.type.value} notification has no resource")
        return self.resource.key


def parse_watch_event(
    doc: dict[str, Any],
    resource_type: ResourceType,
    config: ResourceConfig | None = None,
) -> WatchEvent:
    """Parse a raw watch notification of the form `{"type": ..., "object": ...}`."""
    if not isinstance(doc, dict):
        raise InputException(f"Invalid watch notification, expected a mapping: {doc}")
    try:
        event_type = WatchEventType(doc.get("type"))
    except ValueError as err:
        raise InputException(f"Invalid watch notification type: {doc.get('type')}") from err
    if not isinstance(obj := doc.get("object"), dict):
        raise InputException(f"Invalid watch notification missing object: {doc}")
    if event_type == WatchEventType.BOOKMARK:
        return WatchEvent(type=event_type)
    if event_type == WatchEventType.ERROR:
        return WatchEvent(type=event_type, message=obj.get("message"))
    return WatchEvent(
        type=event_type, resource=parse_raw_obj(obj, resource_type, config)
    )


async def ingest(store: Store, events: AsyncIterable[WatchEvent]) -> int:
    """Apply a stream of notifications to the Store.

    Returns the number of add, update and delete notifications applied.
    """
    applied = 0
    async for event in events:
        if event.type in (WatchEventType.ADDED, WatchEventType.MODIFIED):
            if event.resource is None:
                raise InputException(f"{event.type.value} notification has no resource")
            store.add_resource(event.resource)
        elif event.type == WatchEventType.DELETED:
            store.delete_resource(event.key)
        elif event.type == WatchEventType.ERROR:
            _LOGGER.warning(
                "Watch error for %s: %s", store.resource_type, event.message
            )
            continue
        else:
            continue
        applied += 1
    _LOGGER.debug("Applied %d notifications to %s", applied, store.resource_type)
    return applied
