"""Test fixtures for the store."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from kubefzf.config import StoreConfig
from kubefzf.resources import Pod
from kubefzf.task.service import TaskServiceImpl

from . import pod_resource


@pytest.fixture(name="pods")
def pods_fixture() -> list[Pod]:
    return [
        pod_resource("Test1", "ns1", {"app": "app1"}),
        pod_resource("Test2", "ns2", {"app": "app2"}),
        pod_resource("Test3", "ns2", {"app": "app2"}),
        pod_resource("Test4", "aaa", {"app": "app3"}),
    ]


@pytest.fixture(name="store_config")
def store_config_fixture(tmp_path: Path) -> StoreConfig:
    """Create the destination directory of a store that dumps every 500ms."""
    config = StoreConfig(
        cluster_name="test", cache_dir=tmp_path, time_between_full_dump=0.5
    )
    config.create_dest_dir()
    return config


@pytest.fixture(name="task_service")
async def task_service_fixture() -> AsyncGenerator[TaskServiceImpl, None]:
    """Task service owning the dump loops, shut down after each test."""
    service = TaskServiceImpl()
    yield service
    await service.shutdown()
