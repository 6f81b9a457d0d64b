"""Representation of the cluster resources that are cached on disk.

Each supported resource type is a closed variant with a uniform identity
(name and optional namespace) used to derive the key of the object in the
cache, plus a small set of payload fields extracted from the raw kubernetes
object that are useful when completing on the command line.
"""

from dataclasses import dataclass, field
import datetime
from enum import Enum
import logging
from typing import Any, NamedTuple

from mashumaro import DataClassDictMixin
from mashumaro.config import BaseConfig

from .config import ResourceConfig
from .exceptions import InputException

__all__ = [
    "resource_key",
    "parse_raw_obj",
    "ResourceType",
    "BaseResource",
    "Pod",
    "Service",
    "ConfigMap",
    "Secret",
    "Namespace",
    "Node",
    "Workload",
    "DaemonSet",
    "GenericResource",
    "APIResource",
    "APIResourceList",
]

_LOGGER = logging.getLogger(__name__)

KEY_SEPARATOR = "_"
NODE_ROLE_LABEL_PREFIX = "node-role.kubernetes.io/"


def resource_key(namespace: str | None, name: str) -> str:
    """Return the key of a resource, unique within a single resource type."""
    if namespace:
        return f"{namespace}{KEY_SEPARATOR}{name}"
    return name


class ResourceType(str, Enum):
    """Supported resource types, named by their plural name."""

    PODS = "pods"
    SERVICES = "services"
    CONFIG_MAPS = "configmaps"
    SECRETS = "secrets"
    NAMESPACES = "namespaces"
    NODES = "nodes"
    DEPLOYMENTS = "deployments"
    STATEFUL_SETS = "statefulsets"
    DAEMON_SETS = "daemonsets"
    REPLICA_SETS = "replicasets"
    JOBS = "jobs"
    CRON_JOBS = "cronjobs"
    PERSISTENT_VOLUMES = "persistentvolumes"
    PERSISTENT_VOLUME_CLAIMS = "persistentvolumeclaims"
    INGRESSES = "ingresses"
    ENDPOINTS = "endpoints"
    SERVICE_ACCOUNTS = "serviceaccounts"
    API_RESOURCES = "apiresources"

    @property
    def kind(self) -> str:
        """The kubernetes kind of objects of this type."""
        return _RESOURCE_INFO[self].kind

    @property
    def namespaced(self) -> bool:
        """True if objects of this type live in a namespace."""
        return _RESOURCE_INFO[self].namespaced

    @property
    def resource_cls(self) -> type["BaseResource"]:
        """The resource variant used to hold objects of this type."""
        return _RESOURCE_INFO[self].resource_cls

    @classmethod
    def from_str(cls, value: str) -> "ResourceType":
        """Parse a resource type from a plural name, kind or short name."""
        value = value.lower()
        for resource_type in cls:
            info = _RESOURCE_INFO[resource_type]
            if value in (resource_type.value, info.kind.lower(), *info.short_names):
                return resource_type
        raise InputException(f"Unsupported resource type '{value}'")

    def __str__(self) -> str:
        return self.value


def _parse_timestamp(value: Any) -> str | None:
    # yaml loaders resolve unquoted timestamps to datetime objects
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if value is None:
        return None
    return str(value)


def _parse_metadata(doc: dict[str, Any], config: ResourceConfig | None) -> dict[str, Any]:
    """Return the identity and common fields of a raw kubernetes object."""
    if not (metadata := doc.get("metadata")):
        raise InputException(f"Invalid object missing metadata: {doc}")
    if not (name := metadata.get("name")):
        raise InputException(f"Invalid object missing metadata.name: {doc}")
    return {
        "name": name,
        "namespace": metadata.get("namespace") or None,
        "labels": metadata.get("labels") or None,
        "creation_timestamp": _parse_timestamp(metadata.get("creationTimestamp")),
        "cluster": (config.cluster or None) if config else None,
    }


@dataclass
class BaseResource(DataClassDictMixin):
    """Base class for all cached resources."""

    name: str
    """The name of the object."""

    namespace: str | None = None
    """The namespace of the object, unset for cluster scoped objects."""

    labels: dict[str, str] | None = None
    """Labels attached to the object."""

    creation_timestamp: str | None = None
    """When the object was created, in ISO 8601 format."""

    cluster: str | None = None
    """The cluster the object was read from."""

    @property
    def key(self) -> str:
        """Return the key of the object in the cache."""
        if not self.name:
            raise InputException(f"Invalid {self.__class__.__name__} missing name")
        return resource_key(self.namespace, self.name)

    @property
    def namespaced_name(self) -> str:
        """Return the namespace and name concatenated as an id."""
        if self.namespace:
            return f"{self.namespace}/{self.name}"
        return self.name

    def compact_dict(self) -> dict[str, Any]:
        """Return a compact dictionary representation of the object."""
        return self.to_dict()

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "BaseResource":
        """Parse the resource from a raw kubernetes object."""
        return cls(**_parse_metadata(doc, config))

    class Config(BaseConfig):
        omit_none = True


@dataclass
class Pod(BaseResource):
    """A cached Pod."""

    node_name: str | None = None
    phase: str | None = None
    pod_ip: str | None = None
    host_ip: str | None = None
    containers: list[str] = field(default_factory=list)

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Pod":
        """Parse a Pod from a raw kubernetes object."""
        spec = doc.get("spec") or {}
        status = doc.get("status") or {}
        return cls(
            **_parse_metadata(doc, config),
            node_name=spec.get("nodeName"),
            phase=status.get("phase"),
            pod_ip=status.get("podIP"),
            host_ip=status.get("hostIP"),
            containers=[
                container["name"]
                for container in spec.get("containers") or []
                if container.get("name")
            ],
        )


def _format_port(port: dict[str, Any]) -> str:
    protocol = port.get("protocol", "TCP")
    if node_port := port.get("nodePort"):
        return f"{port.get('port')}:{node_port}/{protocol}"
    return f"{port.get('port')}/{protocol}"


@dataclass
class Service(BaseResource):
    """A cached Service."""

    service_type: str | None = None
    cluster_ip: str | None = None
    ports: list[str] = field(default_factory=list)
    selector: dict[str, str] | None = None

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Service":
        """Parse a Service from a raw kubernetes object."""
        spec = doc.get("spec") or {}
        return cls(
            **_parse_metadata(doc, config),
            service_type=spec.get("type"),
            cluster_ip=spec.get("clusterIP"),
            ports=[_format_port(port) for port in spec.get("ports") or []],
            selector=spec.get("selector") or None,
        )


@dataclass
class ConfigMap(BaseResource):
    """A cached ConfigMap, only the names of the keys are kept."""

    data_keys: list[str] = field(default_factory=list)

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "ConfigMap":
        """Parse a ConfigMap from a raw kubernetes object."""
        keys = set(doc.get("data") or {}) | set(doc.get("binaryData") or {})
        return cls(**_parse_metadata(doc, config), data_keys=sorted(keys))


@dataclass
class Secret(BaseResource):
    """A cached Secret.

    Secret values are never written to disk, only the names of the keys.
    """

    secret_type: str | None = None
    data_keys: list[str] = field(default_factory=list)

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Secret":
        """Parse a Secret from a raw kubernetes object."""
        keys = set(doc.get("data") or {}) | set(doc.get("stringData") or {})
        return cls(
            **_parse_metadata(doc, config),
            secret_type=doc.get("type"),
            data_keys=sorted(keys),
        )


@dataclass
class Namespace(BaseResource):
    """A cached Namespace."""

    phase: str | None = None

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Namespace":
        """Parse a Namespace from a raw kubernetes object."""
        status = doc.get("status") or {}
        return cls(**_parse_metadata(doc, config), phase=status.get("phase"))


@dataclass
class Node(BaseResource):
    """A cached Node."""

    roles: list[str] = field(default_factory=list)
    internal_ip: str | None = None
    kubelet_version: str | None = None

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Node":
        """Parse a Node from a raw kubernetes object."""
        metadata = _parse_metadata(doc, config)
        status = doc.get("status") or {}
        roles = [
            label[len(NODE_ROLE_LABEL_PREFIX) :]
            for label in metadata["labels"] or {}
            if label.startswith(NODE_ROLE_LABEL_PREFIX)
        ]
        internal_ip = next(
            (
                address.get("address")
                for address in status.get("addresses") or []
                if address.get("type") == "InternalIP"
            ),
            None,
        )
        return cls(
            **metadata,
            roles=sorted(roles),
            internal_ip=internal_ip,
            kubelet_version=(status.get("nodeInfo") or {}).get("kubeletVersion"),
        )


@dataclass
class Workload(BaseResource):
    """A cached Deployment, StatefulSet or ReplicaSet."""

    replicas: int | None = None
    ready_replicas: int = 0
    selector: dict[str, str] | None = None

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "Workload":
        """Parse a replicated workload from a raw kubernetes object."""
        spec = doc.get("spec") or {}
        status = doc.get("status") or {}
        return cls(
            **_parse_metadata(doc, config),
            replicas=spec.get("replicas"),
            ready_replicas=status.get("readyReplicas") or 0,
            selector=(spec.get("selector") or {}).get("matchLabels") or None,
        )


@dataclass
class DaemonSet(BaseResource):
    """A cached DaemonSet."""

    desired: int = 0
    ready: int = 0
    selector: dict[str, str] | None = None

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "DaemonSet":
        """Parse a DaemonSet from a raw kubernetes object."""
        spec = doc.get("spec") or {}
        status = doc.get("status") or {}
        return cls(
            **_parse_metadata(doc, config),
            desired=status.get("desiredNumberScheduled") or 0,
            ready=status.get("numberReady") or 0,
            selector=(spec.get("selector") or {}).get("matchLabels") or None,
        )


@dataclass
class GenericResource(BaseResource):
    """A cached object of a type with no type specific fields."""


@dataclass
class APIResource(DataClassDictMixin):
    """A resource served by an API group version."""

    name: str
    kind: str
    namespaced: bool = False
    short_names: list[str] | None = None

    class Config(BaseConfig):
        omit_none = True


@dataclass
class APIResourceList(BaseResource):
    """The resources served by an API group version, named by the group version."""

    resources: list[APIResource] = field(default_factory=list)

    @property
    def group_version(self) -> str:
        """Return the group version e.g. `apps/v1`."""
        return self.name

    @classmethod
    def parse_doc(
        cls, doc: dict[str, Any], config: ResourceConfig | None = None
    ) -> "APIResourceList":
        """Parse an APIResourceList from an API discovery document."""
        if not (group_version := doc.get("groupVersion")):
            raise InputException(f"Invalid object missing groupVersion: {doc}")
        resources = []
        for resource in doc.get("resources") or []:
            if not (name := resource.get("name")) or not (kind := resource.get("kind")):
                _LOGGER.debug("Skipping invalid API resource %s", resource)
                continue
            resources.append(
                APIResource(
                    name=name,
                    kind=kind,
                    namespaced=bool(resource.get("namespaced")),
                    short_names=resource.get("shortNames") or None,
                )
            )
        return cls(
            name=group_version,
            cluster=(config.cluster or None) if config else None,
            resources=resources,
        )


class _ResourceInfo(NamedTuple):
    kind: str
    namespaced: bool
    resource_cls: type[BaseResource]
    short_names: tuple[str, ...] = ()


_RESOURCE_INFO: dict[ResourceType, _ResourceInfo] = {
    ResourceType.PODS: _ResourceInfo("Pod", True, Pod, ("po",)),
    ResourceType.SERVICES: _ResourceInfo("Service", True, Service, ("svc",)),
    ResourceType.CONFIG_MAPS: _ResourceInfo("ConfigMap", True, ConfigMap, ("cm",)),
    ResourceType.SECRETS: _ResourceInfo("Secret", True, Secret),
    ResourceType.NAMESPACES: _ResourceInfo("Namespace", False, Namespace, ("ns",)),
    ResourceType.NODES: _ResourceInfo("Node", False, Node, ("no",)),
    ResourceType.DEPLOYMENTS: _ResourceInfo(
        "Deployment", True, Workload, ("deploy",)
    ),
    ResourceType.STATEFUL_SETS: _ResourceInfo("StatefulSet", True, Workload, ("sts",)),
    ResourceType.DAEMON_SETS: _ResourceInfo("DaemonSet", True, DaemonSet, ("ds",)),
    ResourceType.REPLICA_SETS: _ResourceInfo("ReplicaSet", True, Workload, ("rs",)),
    ResourceType.JOBS: _ResourceInfo("Job", True, GenericResource),
    ResourceType.CRON_JOBS: _ResourceInfo("CronJob", True, GenericResource, ("cj",)),
    ResourceType.PERSISTENT_VOLUMES: _ResourceInfo(
        "PersistentVolume", False, GenericResource, ("pv",)
    ),
    ResourceType.PERSISTENT_VOLUME_CLAIMS: _ResourceInfo(
        "PersistentVolumeClaim", True, GenericResource, ("pvc",)
    ),
    ResourceType.INGRESSES: _ResourceInfo("Ingress", True, GenericResource, ("ing",)),
    ResourceType.ENDPOINTS: _ResourceInfo("Endpoints", True, GenericResource, ("ep",)),
    ResourceType.SERVICE_ACCOUNTS: _ResourceInfo(
        "ServiceAccount", True, GenericResource, ("sa",)
    ),
    ResourceType.API_RESOURCES: _ResourceInfo(
        "APIResourceList", False, APIResourceList
    ),
}


def parse_raw_obj(
    doc: dict[str, Any],
    resource_type: ResourceType,
    config: ResourceConfig | None = None,
) -> BaseResource:
    """Parse a raw kubernetes object into the variant for the resource type."""
    if (kind := doc.get("kind")) and kind != resource_type.kind:
        raise InputException(
            f"Invalid object expected kind '{resource_type.kind}' but was '{kind}'"
        )
    return resource_type.resource_cls.parse_doc(doc, config)
