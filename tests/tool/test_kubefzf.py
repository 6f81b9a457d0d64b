"""Tests for the kubefzf command line tool."""

import json
from pathlib import Path

import pytest

from kubefzf.resources import Namespace, Pod, ResourceType
from kubefzf.tool.kubefzf import main

from . import write_snapshot

EVENTS = """\
type: ADDED
object:
  apiVersion: v1
  kind: Pod
  metadata:
    name: web-0
    namespace: default
    labels:
      app: web
  status:
    phase: Pending
---
type: ADDED
object:
  apiVersion: v1
  kind: Pod
  metadata:
    name: web-1
    namespace: default
  status:
    phase: Running
---
type: MODIFIED
object:
  apiVersion: v1
  kind: Pod
  metadata:
    name: web-0
    namespace: default
    labels:
      app: web
  status:
    phase: Running
---
type: DELETED
object:
  apiVersion: v1
  kind: Pod
  metadata:
    name: web-1
    namespace: default
"""


def test_get_table(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing a snapshot as a table."""
    write_snapshot(
        tmp_path / "prod" / "pods",
        ResourceType.PODS,
        [
            Pod(name="web-1", namespace="default", phase="Running", labels={"app": "web"}),
            Pod(name="api-0", namespace="backend", phase="Pending", node_name="worker-1"),
        ],
    )

    main(["get", "po", "--cache-dir", str(tmp_path), "--cluster", "prod"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["NAMESPACE", "NAME", "PHASE", "POD_IP", "NODE_NAME", "LABELS"]
    assert lines[1].split() == ["backend", "api-0", "Pending", "worker-1"]
    assert lines[2].split() == ["default", "web-1", "Running", "app=web"]


def test_get_cluster_scoped(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test cluster scoped resources have no namespace column."""
    write_snapshot(
        tmp_path / "prod" / "namespaces",
        ResourceType.NAMESPACES,
        [Namespace(name="kube-system", phase="Active")],
    )

    main(["get", "namespaces", "--cache-dir", str(tmp_path), "--cluster", "prod"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["NAME", "PHASE", "LABELS"]
    assert lines[1].split() == ["kube-system", "Active"]


def test_get_empty(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test printing an empty snapshot."""
    write_snapshot(tmp_path / "prod" / "pods", ResourceType.PODS, [])

    main(["get", "pods", "--cache-dir", str(tmp_path), "--cluster", "prod"])

    assert capsys.readouterr().out.startswith("No pods found in")


def test_get_missing_snapshot(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test a missing snapshot is reported as an error."""
    with pytest.raises(SystemExit) as exc_info:
        main(["get", "pods", "--cache-dir", str(tmp_path), "--cluster", "prod"])

    assert exc_info.value.code == 1
    assert "kubefzf error:" in capsys.readouterr().err


def test_get_unknown_resource_type(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test an unsupported resource type is reported as an error."""
    with pytest.raises(SystemExit) as exc_info:
        main(["get", "widgets", "--cache-dir", str(tmp_path)])

    assert exc_info.value.code == 1
    assert "Unsupported resource type 'widgets'" in capsys.readouterr().err


def test_ingest_then_get(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test ingesting notifications and reading back the snapshot."""
    events_file = tmp_path / "events.yaml"
    events_file.write_text(EVENTS)
    cache_dir = tmp_path / "cache"

    main(
        [
            "ingest",
            "pods",
            "--file",
            str(events_file),
            "--cache-dir",
            str(cache_dir),
            "--cluster",
            "prod",
        ]
    )
    out = capsys.readouterr().out
    assert "Applied 4 notifications, wrote 1 pods" in out
    assert (cache_dir / "prod" / "pods").exists()

    main(["get", "pods", "--cache-dir", str(cache_dir), "--cluster", "prod", "-o", "json"])
    assert json.loads(capsys.readouterr().out) == [
        {
            "name": "web-0",
            "namespace": "default",
            "labels": {"app": "web"},
            "cluster": "prod",
            "phase": "Running",
            "containers": [],
        }
    ]


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("type: UPSERTED\nobject: {}\n", "Invalid watch notification type"),
        ("- just\n- a list\n", "expected a mapping"),
    ],
    ids=["unknown-type", "list"],
)
def test_ingest_invalid_stream(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], content: str, message: str
) -> None:
    """Test an invalid notification stream is reported as an error."""
    events_file = tmp_path / "events.yaml"
    events_file.write_text(content)

    with pytest.raises(SystemExit) as exc_info:
        main(["ingest", "pods", "--file", str(events_file), "--cache-dir", str(tmp_path)])

    assert exc_info.value.code == 1
    assert message in capsys.readouterr().err


def test_get_yaml_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test structured yaml output of a snapshot."""
    write_snapshot(
        tmp_path / "prod" / "pods",
        ResourceType.PODS,
        [Pod(name="web-0", namespace="default")],
    )

    main(["get", "pods", "--cache-dir", str(tmp_path), "--cluster", "prod", "-o", "yaml"])

    assert capsys.readouterr().out == (
        "---\n- name: web-0\n  namespace: default\n  containers: []\n"
    )
