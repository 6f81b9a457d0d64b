"""Library for formatting output."""

from typing import Generator, Any

import sys
from typing import TextIO
import yaml
import json


PADDING = 3


def column_format_string(rows: list[list[str]]) -> str:
    """Produce a format string based on max width of columns."""
    widths = [max(len(row[i]) for row in rows) for i in range(len(rows[0]))]
    return "".join([f"{{:{w+PADDING}}}" for w in widths]).rstrip()


def format_columns(
    headers: list[str], rows: list[list[str]]
) -> Generator[str, None, None]:
    """Yield the headers and rows aligned in columns."""
    data = [headers] + rows
    format_string = column_format_string(data)
    for row in data:
        yield format_string.format(*row).rstrip()


def format_value(value: Any) -> str:
    """Render a single field of a resource in a table cell."""
    if value is None:
        return ""
    if isinstance(value, dict):
        return ",".join(f"{k}={v}" for k, v in sorted(value.items()))
    if isinstance(value, list):
        return ",".join(str(getattr(item, "name", item)) for item in value)
    return str(value)


class PrintFormatter:
    """A formatter that prints human readable console output."""

    def __init__(self, keys: list[str]):
        """Initialize the PrintFormatter with the keys to print."""
        self._keys = keys

    def format(self, data: list[Any]) -> Generator[str, None, None]:
        """Format the attributes of the data objects."""
        if not data:
            return
        rows = [
            [format_value(getattr(item, key, None)) for key in self._keys]
            for item in data
        ]
        cols = [col.upper() for col in self._keys]
        yield from format_columns(cols, rows)

    def print(self, data: list[Any], file: TextIO | None = None) -> None:
        """Output the data objects, to stdout by default."""
        file = file or sys.stdout
        for result in self.format(data):
            print(result, file=file)


class YamlFormatter:
    """A formatter that prints a yaml list."""

    def print(
        self, data: list[dict[str, Any]], file: TextIO | None = None
    ) -> None:
        """Output the data objects."""
        file = file or sys.stdout
        print(yaml.dump(data, sort_keys=False, explicit_start=True), end="", file=file)


class JsonFormatter:
    """A formatter that prints a json list."""

    def print(
        self, data: list[dict[str, Any]], file: TextIO | None = None
    ) -> None:
        """Output the data objects."""
        file = file or sys.stdout
        json.dump(data, sort_keys=False, indent=4, fp=file)
        print(file=file)
