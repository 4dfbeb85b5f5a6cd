"""Object metadata generation for Redis cluster PodDisruptionBudgets."""

from typing import Dict, Optional

from kubernetes import client

from .config import (
    CRD_GROUP,
    CRD_VERSION,
    CRD_KIND,
    MANAGED_BY_ANNOTATION,
    MANAGED_BY_VALUE,
    SETUP_TYPE,
)
from .policy import ObjectKey, OwnerReference, RedisClusterSpec


def object_key(cluster: RedisClusterSpec, role: str) -> ObjectKey:
    """PodDisruptionBudgets are named <cluster>-<role> in the cluster's namespace."""
    return ObjectKey(namespace=cluster.namespace, name=f"{cluster.name}-{role}")


def cluster_labels(cluster_name: str, role: str) -> Dict[str, str]:
    """Labels attached to every object generated for a cluster role."""
    return {
        "app": cluster_name,
        "redis_setup_type": SETUP_TYPE,
        "role": role,
    }


def selector_labels(cluster_name: str, role: str) -> Dict[str, str]:
    """Labels selecting the pods of a cluster role."""
    return {"app": cluster_name, "role": role}


def default_annotations() -> Dict[str, str]:
    """Annotations every generated object starts with."""
    return {MANAGED_BY_ANNOTATION: MANAGED_BY_VALUE}


def cluster_owner(cluster: RedisClusterSpec) -> OwnerReference:
    """Owner reference pointing at the RedisCluster."""
    return OwnerReference(
        api_version=f"{CRD_GROUP}/{CRD_VERSION}",
        kind=CRD_KIND,
        name=cluster.name,
        uid=cluster.uid,
    )


def generate_object_meta(
    key: ObjectKey,
    labels: Dict[str, str],
    annotations: Dict[str, str],
    owner: Optional[OwnerReference] = None
) -> client.V1ObjectMeta:
    """
    Build the metadata for a generated object.

    Args:
        key: Namespace and name of the object
        labels: Object labels
        annotations: Object annotations
        owner: Owning RedisCluster; omitted when the cluster has no uid yet

    Returns:
        V1ObjectMeta with copies of the given maps
    """
    owner_references = None
    if owner is not None and owner.uid:
        owner_references = [
            client.V1OwnerReference(
                api_version=owner.api_version,
                kind=owner.kind,
                name=owner.name,
                uid=owner.uid,
                controller=True,
                block_owner_deletion=True,
            )
        ]

    return client.V1ObjectMeta(
        name=key.name,
        namespace=key.namespace,
        labels=dict(labels),
        annotations=dict(annotations),
        owner_references=owner_references,
    )
