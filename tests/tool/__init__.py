"""Test helpers for kubefzf tools."""

import asyncio
from pathlib import Path

from kubefzf.codec import encode_to_file
from kubefzf.resources import BaseResource, ResourceType


def write_snapshot(
    path: Path, resource_type: ResourceType, resources: list[BaseResource]
) -> None:
    """Write a snapshot file outside of an event loop."""
    path.parent.mkdir(parents=True, exist_ok=True)
    asyncio.run(
        encode_to_file(
            {resource.key: resource for resource in resources}, resource_type, path
        )
    )
