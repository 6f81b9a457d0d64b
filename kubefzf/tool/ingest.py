"""kubefzf ingest action."""

import asyncio
import logging
import pathlib
import sys
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from collections.abc import AsyncGenerator
from typing import TextIO, cast

import yaml

from kubefzf.config import DEFAULT_TIME_BETWEEN_FULL_DUMP, ResourceConfig
from kubefzf.exceptions import InputException
from kubefzf.resources import ResourceType
from kubefzf.store import Store, WatchEvent, ingest, parse_watch_event
from kubefzf.task import task_service_context

from . import flags

_LOGGER = logging.getLogger(__name__)

DOCUMENT_START = "---"
DOCUMENT_END = "..."


async def read_documents(stream: TextIO) -> AsyncGenerator[str, None]:
    """Yield the YAML documents of a stream as soon as each one is complete.

    Lines are read in a worker thread so the event loop, and the dump loop of
    the Store, keeps running while a live stream waits for input. A document
    is complete at the next `---` or `...` line, or at the end of the stream.
    """
    lines: list[str] = []
    while line := await asyncio.to_thread(stream.readline):
        marker = line[:3]
        if marker in (DOCUMENT_START, DOCUMENT_END) and not line[3:4].strip():
            if lines:
                yield "".join(lines)
            # Content may follow the start marker on the same line
            rest = line[3:]
            lines = [rest] if marker == DOCUMENT_START and rest.strip() else []
            continue
        lines.append(line)
    if lines:
        yield "".join(lines)


async def read_events(
    stream: TextIO, resource_type: ResourceType, config: ResourceConfig
) -> AsyncGenerator[WatchEvent, None]:
    """Yield the notifications of a YAML stream, one document per notification."""
    async for content in read_documents(stream):
        try:
            doc = yaml.safe_load(content)
        except yaml.YAMLError as err:
            raise InputException(f"Invalid watch notification stream: {err}") from err
        if not doc:
            continue
        yield parse_watch_event(doc, resource_type, config)


class IngestAction:
    """Apply watch notifications to a Store and write its snapshot."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "ingest",
                help="Ingest watch notifications into a snapshot",
                description=(
                    "Read a YAML stream of watch notifications such as "
                    "`{type: ADDED, object: {...}}` and write the resulting snapshot. "
                    "Each notification is applied once the `---` or `...` line "
                    "following it is read, or at the end of the stream"
                ),
            ),
        )
        flags.add_store_flags(args)
        args.add_argument(
            "--file",
            type=pathlib.Path,
            default=None,
            help="File holding the notifications, defaults to stdin",
        )
        args.add_argument(
            "--time-between-full-dump",
            type=float,
            default=DEFAULT_TIME_BETWEEN_FULL_DUMP,
            help="Seconds between two checks of whether the snapshot must be written",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        file: pathlib.Path | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        if file is not None and not file.is_file():
            raise InputException(f"Notification file {file} does not exist")
        resource_type = flags.resource_type(**kwargs)
        config = flags.store_config(**kwargs)
        config.create_dest_dir()
        resource_config = ResourceConfig(cluster=config.cluster_name)

        with task_service_context() as service:
            store = Store(config, resource_type, service)
            try:
                if file is None:
                    applied = await ingest(
                        store, read_events(sys.stdin, resource_type, resource_config)
                    )
                else:
                    with file.open() as stream:
                        applied = await ingest(
                            store, read_events(stream, resource_type, resource_config)
                        )
            finally:
                await service.shutdown()
            await store.dump_full_state()

        print(
            f"Applied {applied} notifications, wrote {len(store)} "
            f"{resource_type} to {store.file_path}"
        )
