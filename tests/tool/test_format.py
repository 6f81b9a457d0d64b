"""Tests for the format library."""

import io

import pytest

from kubefzf.resources import Pod
from kubefzf.tool.format import (
    JsonFormatter,
    PrintFormatter,
    YamlFormatter,
    format_columns,
    format_value,
)


def test_format_columns() -> None:
    """Tests format with normal rows."""
    assert list(
        format_columns(
            ["name", "namespace"], [["podinfo", "podinfo"], ["metallb", "network"]]
        )
    ) == [
        "name      namespace",
        "podinfo   podinfo",
        "metallb   network",
    ]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("Running", "Running"),
        (3, "3"),
        ({"b": "2", "a": "1"}, "a=1,b=2"),
        (["web", "sidecar"], "web,sidecar"),
    ],
)
def test_format_value(value: object, expected: str) -> None:
    """Test rendering a single table cell."""
    assert format_value(value) == expected


def test_print_formatter_empty() -> None:
    """Print formatting with empty data."""
    assert list(PrintFormatter(["name"]).format([])) == []


def test_print_formatter_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the formatters write to the current stdout by default."""
    pods = [Pod(name="web-0", namespace="default", phase="Running")]
    PrintFormatter(["name", "phase"]).print(pods)
    YamlFormatter().print([{"name": "web-0"}])
    JsonFormatter().print([{"name": "web-0"}])

    assert capsys.readouterr().out.splitlines() == [
        "NAME    PHASE",
        "web-0   Running",
        "---",
        "- name: web-0",
        "[",
        "    {",
        '        "name": "web-0"',
        "    }",
        "]",
    ]


def test_print_formatter_file() -> None:
    """Test writing to an explicit file."""
    output = io.StringIO()
    PrintFormatter(["name"]).print([Pod(name="web-0")], file=output)
    assert output.getvalue() == "NAME\nweb-0\n"
