"""Test helpers for the store."""

import datetime

from kubefzf.resources import Pod


def pod_resource(name: str, namespace: str, labels: dict[str, str]) -> Pod:
    """Return a Pod created now."""
    return Pod(
        name=name,
        namespace=namespace,
        labels=labels,
        creation_timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
    )
