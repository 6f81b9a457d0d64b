"""Encoding of the cached resources to and from snapshot files.

A snapshot file holds the full mapping from resource key to resource for a
single resource type, encoded as YAML. Files are replaced atomically so a
reader never observes a partially written snapshot.
"""

from collections.abc import Mapping
import logging
import os
from pathlib import Path
import tempfile

import aiofiles
import aiofiles.os
from mashumaro.codecs.yaml import yaml_decode, yaml_encode
from mashumaro.exceptions import InvalidFieldValue, MissingField
import yaml

from .exceptions import CodecException, DumpException
from .resources import BaseResource, ResourceType

__all__ = [
    "encode_resources",
    "decode_resources",
    "encode_to_file",
    "load_from_file",
]

_LOGGER = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"
FILE_MODE = 0o666


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def encode_resources(
    resources: Mapping[str, BaseResource], resource_type: ResourceType
) -> str:
    """Return the YAML representation of the resources of a resource type."""
    shape_type = dict[str, resource_type.resource_cls]  # type: ignore[valid-type]
    content = yaml_encode(dict(resources), shape_type)
    if isinstance(content, bytes):
        return content.decode()
    return content


def decode_resources(
    content: str, resource_type: ResourceType
) -> dict[str, BaseResource]:
    """Parse the resources of a resource type from a YAML snapshot."""
    if not content:
        raise CodecException(f"Empty snapshot for {resource_type}")
    shape_type = dict[str, resource_type.resource_cls]  # type: ignore[valid-type]
    try:
        return yaml_decode(content, shape_type)
    except (
        yaml.YAMLError,
        MissingField,
        InvalidFieldValue,
        ValueError,
        TypeError,
        AttributeError,
    ) as err:
        raise CodecException(f"Invalid snapshot for {resource_type}: {err}") from err


async def encode_to_file(
    resources: Mapping[str, BaseResource],
    resource_type: ResourceType,
    path: Path,
) -> None:
    """Write the snapshot file, replacing any previous content atomically."""
    try:
        content = encode_resources(resources, resource_type)
    except (yaml.YAMLError, ValueError, TypeError) as err:
        raise DumpException(str(path), f"Failed to encode: {err}") from err

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=TEMP_SUFFIX
        )
        os.close(fd)
    except OSError as err:
        raise DumpException(str(path), str(err)) from err

    tmp_path = Path(tmp_name)
    try:
        # mkstemp creates the file owner-only, use the mode of a new file
        os.chmod(tmp_path, FILE_MODE & ~_current_umask())
        async with aiofiles.open(tmp_path, mode="w") as tmp_file:
            await tmp_file.write(content)
        await aiofiles.os.replace(tmp_path, path)
    except OSError as err:
        tmp_path.unlink(missing_ok=True)
        raise DumpException(str(path), str(err)) from err
    except BaseException:
        # Cancelled while writing, the previous snapshot is left in place
        tmp_path.unlink(missing_ok=True)
        raise
    _LOGGER.debug("Wrote %d %s to %s", len(resources), resource_type, path)


async def load_from_file(
    path: Path, resource_type: ResourceType
) -> dict[str, BaseResource]:
    """Return the contents of a snapshot file."""
    try:
        async with aiofiles.open(path) as snapshot_file:
            content = await snapshot_file.read()
    except OSError as err:
        raise CodecException(f"Failed to read snapshot {path}: {err}") from err
    return decode_resources(content, resource_type)
