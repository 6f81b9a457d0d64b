"""kubefzf get action."""

import logging
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import Any, cast

from kubefzf.codec import load_from_file
from kubefzf.resources import (
    APIResourceList,
    BaseResource,
    ConfigMap,
    DaemonSet,
    Namespace,
    Node,
    Pod,
    Secret,
    Service,
    Workload,
)

from . import flags
from .format import JsonFormatter, PrintFormatter, YamlFormatter

_LOGGER = logging.getLogger(__name__)

EXTRA_COLUMNS: dict[type[BaseResource], list[str]] = {
    Pod: ["phase", "pod_ip", "node_name"],
    Service: ["service_type", "cluster_ip", "ports"],
    ConfigMap: ["data_keys"],
    Secret: ["secret_type", "data_keys"],
    Namespace: ["phase"],
    Node: ["roles", "internal_ip", "kubelet_version"],
    Workload: ["ready_replicas", "replicas"],
    DaemonSet: ["desired", "ready"],
    APIResourceList: ["resources"],
}


class GetAction:
    """Print the resources of a snapshot."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "get",
                help="Print the resources of a snapshot",
                description="Print the resources held in the snapshot file of a resource type",
            ),
        )
        flags.add_store_flags(args)
        args.add_argument(
            "--output",
            "-o",
            choices=["table", "yaml", "json"],
            default="table",
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        resource_type = flags.resource_type(**kwargs)
        config = flags.store_config(**kwargs)
        path = config.resource_path(resource_type)
        resources = await load_from_file(path, resource_type)
        _LOGGER.debug("Loaded %d %s from %s", len(resources), resource_type, path)
        if not resources:
            print(f"No {resource_type} found in {path}")
            return

        items = [resources[key] for key in sorted(resources)]
        if output == "yaml":
            YamlFormatter().print([item.compact_dict() for item in items])
            return
        if output == "json":
            JsonFormatter().print([item.compact_dict() for item in items])
            return

        cols = ["name"]
        if resource_type.namespaced:
            cols.insert(0, "namespace")
        cols.extend(EXTRA_COLUMNS.get(resource_type.resource_cls, []))
        cols.append("labels")
        PrintFormatter(cols).print(items)
