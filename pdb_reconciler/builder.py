"""Desired state construction for Redis cluster PodDisruptionBudgets."""

import logging

from kubernetes import client

from .config import PDB_API_VERSION, PDB_KIND
from .errors import InvalidPolicyError
from .meta import (
    cluster_labels,
    cluster_owner,
    default_annotations,
    generate_object_meta,
    selector_labels,
)
from .policy import DesiredPolicy, ObjectKey, RedisClusterSpec

logger = logging.getLogger(__name__)


def quorum(cluster_size: int) -> int:
    """
    Majority of a cluster, used when no bound is configured.

    Examples:
        1 -> 1
        3 -> 2
        4 -> 3
    """
    return cluster_size // 2 + 1


def build(cluster: RedisClusterSpec, role: str) -> DesiredPolicy:
    """
    Compute the desired PodDisruptionBudget policy for one cluster role.

    Args:
        cluster: Parsed RedisCluster
        role: Cluster role ("leader" or "follower")

    Returns:
        DesiredPolicy with at most one bound set
    """
    pdb = cluster.pdb_for_role(role)

    min_available = pdb.min_available
    max_unavailable = pdb.max_unavailable
    if min_available is not None and max_unavailable is not None:
        logger.warning(
            f"Cluster {cluster.namespace}/{cluster.name} role {role} sets both bounds, "
            f"using minAvailable={min_available}"
        )
        max_unavailable = None

    if pdb.enabled and min_available is None and max_unavailable is None:
        min_available = quorum(cluster.cluster_size)

    return DesiredPolicy(
        enabled=pdb.enabled,
        cluster_size=cluster.cluster_size,
        selector_labels=selector_labels(cluster.name, role),
        min_available=min_available,
        max_unavailable=max_unavailable,
        labels=cluster_labels(cluster.name, role),
        owner=cluster_owner(cluster),
    )


def build_pdb(desired: DesiredPolicy, key: ObjectKey) -> client.V1PodDisruptionBudget:
    """
    Build a fresh PodDisruptionBudget object from a desired policy.

    Raises:
        InvalidPolicyError: if the client models reject a policy value
    """
    try:
        spec = client.V1PodDisruptionBudgetSpec(
            selector=client.V1LabelSelector(match_labels=dict(desired.selector_labels)),
        )
        if desired.min_available is not None:
            spec.min_available = desired.min_available
        if desired.max_unavailable is not None:
            spec.max_unavailable = desired.max_unavailable

        return client.V1PodDisruptionBudget(
            api_version=PDB_API_VERSION,
            kind=PDB_KIND,
            metadata=generate_object_meta(key, desired.labels, default_annotations(), desired.owner),
            spec=spec,
        )
    except (TypeError, ValueError) as e:
        raise InvalidPolicyError(f"Cannot build PodDisruptionBudget {key}: {e}") from e
