"""Configuration objects for kubefzf."""

from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from .exceptions import StoreSetupError

if TYPE_CHECKING:
    from .resources import ResourceType

_LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "kubefzf"
DEFAULT_TIME_BETWEEN_FULL_DUMP = 60.0


@dataclass
class ResourceConfig:
    """Configuration for parsing resources."""

    cluster: str = ""


@dataclass(frozen=True)
class StoreConfig:
    """Configuration for the Stores of a single cluster."""

    cluster_name: str
    """Name of the cluster, used as a directory within the cache directory."""

    cache_dir: Path = DEFAULT_CACHE_DIR
    """Root directory holding the snapshots of every cluster."""

    time_between_full_dump: float = DEFAULT_TIME_BETWEEN_FULL_DUMP
    """Seconds between two checks of whether a Store needs to be dumped."""

    def __post_init__(self) -> None:
        if self.time_between_full_dump <= 0:
            raise ValueError(
                f"time_between_full_dump must be positive: {self.time_between_full_dump}"
            )

    @property
    def dest_dir(self) -> Path:
        """Directory holding one snapshot file per resource type."""
        return Path(self.cache_dir) / self.cluster_name

    def resource_path(self, resource_type: "ResourceType") -> Path:
        """Return the path of the snapshot file for the resource type."""
        return self.dest_dir / resource_type.value

    def create_dest_dir(self) -> Path:
        """Create the destination directory if it does not exist."""
        dest_dir = self.dest_dir
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise StoreSetupError(
                f"Failed to create destination directory {dest_dir}: {err}"
            ) from err
        if not os.access(dest_dir, os.W_OK):
            raise StoreSetupError(f"Destination directory {dest_dir} is not writable")
        _LOGGER.debug("Using destination directory %s", dest_dir)
        return dest_dir
