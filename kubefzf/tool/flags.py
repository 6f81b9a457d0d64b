"""Library for flags shared by the kubefzf commands."""

from argparse import ArgumentParser
import pathlib
from typing import Any

from kubefzf.config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_TIME_BETWEEN_FULL_DUMP,
    StoreConfig,
)
from kubefzf.exceptions import InputException
from kubefzf.resources import ResourceType

DEFAULT_CLUSTER = "default"


def add_store_flags(args: ArgumentParser) -> None:
    """Add flags locating the snapshots of a cluster."""
    args.add_argument(
        "resource_type",
        help="Resource type as a plural name, kind or short name e.g. pods, Pod, po",
    )
    args.add_argument(
        "--cache-dir",
        type=pathlib.Path,
        default=DEFAULT_CACHE_DIR,
        help="Directory holding the snapshots of every cluster",
    )
    args.add_argument(
        "--cluster",
        default=DEFAULT_CLUSTER,
        help="Name of the cluster, the snapshots live in <cache-dir>/<cluster>",
    )


def resource_type(resource_type: str, **kwargs: Any) -> ResourceType:
    """Return the resource type selected on the command line."""
    return ResourceType.from_str(resource_type)


def store_config(
    cache_dir: pathlib.Path,
    cluster: str,
    time_between_full_dump: float = DEFAULT_TIME_BETWEEN_FULL_DUMP,
    **kwargs: Any,
) -> StoreConfig:
    """Return the StoreConfig selected on the command line."""
    try:
        return StoreConfig(
            cluster_name=cluster,
            cache_dir=cache_dir,
            time_between_full_dump=time_between_full_dump,
        )
    except ValueError as err:
        raise InputException(str(err)) from err
