"""Parsed RedisCluster specifications and the desired PodDisruptionBudget policy."""

from typing import Dict, Any, Optional
from dataclasses import dataclass, field

from .config import DEFAULT_CLUSTER_SIZE, ROLE_LEADER, ROLE_FOLLOWER
from .errors import InvalidPolicyError


def _parse_bound(pdb: Dict[str, Any], key: str) -> Optional[int]:
    value = pdb.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPolicyError(f"{key} must be a non-negative integer, got {value!r}")
    return value


@dataclass
class PodDisruptionBudgetConfig:
    """User-supplied PodDisruptionBudget settings for one role."""
    enabled: bool = False
    min_available: Optional[int] = None
    max_unavailable: Optional[int] = None

    @classmethod
    def from_dict(cls, pdb: Optional[Dict[str, Any]]) -> "PodDisruptionBudgetConfig":
        """
        Parse the `pdb` block of a role spec.

        A missing block means the budget is disabled. Setting both
        minAvailable and maxUnavailable is rejected here so that the
        builder never sees a conflicting policy.
        """
        if not pdb:
            return cls()

        min_available = _parse_bound(pdb, "minAvailable")
        max_unavailable = _parse_bound(pdb, "maxUnavailable")
        if min_available is not None and max_unavailable is not None:
            raise InvalidPolicyError("minAvailable and maxUnavailable are mutually exclusive")

        return cls(
            enabled=bool(pdb.get("enabled", False)),
            min_available=min_available,
            max_unavailable=max_unavailable,
        )


@dataclass
class RedisClusterSpec:
    """Parsed RedisCluster custom resource."""
    name: str
    namespace: str
    uid: str = ""
    cluster_size: int = DEFAULT_CLUSTER_SIZE
    leader_pdb: PodDisruptionBudgetConfig = field(default_factory=PodDisruptionBudgetConfig)
    follower_pdb: PodDisruptionBudgetConfig = field(default_factory=PodDisruptionBudgetConfig)

    @classmethod
    def from_crd(cls, crd_object: Dict[str, Any]) -> "RedisClusterSpec":
        """Create RedisClusterSpec from CRD object."""
        metadata = crd_object.get("metadata", {})
        spec = crd_object.get("spec", {})

        cluster_size = spec.get("clusterSize", DEFAULT_CLUSTER_SIZE)
        if isinstance(cluster_size, bool) or not isinstance(cluster_size, int) or cluster_size < 1:
            raise InvalidPolicyError(f"clusterSize must be a positive integer, got {cluster_size!r}")

        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", "default"),
            uid=metadata.get("uid", ""),
            cluster_size=cluster_size,
            leader_pdb=PodDisruptionBudgetConfig.from_dict((spec.get("redisLeader") or {}).get("pdb")),
            follower_pdb=PodDisruptionBudgetConfig.from_dict((spec.get("redisFollower") or {}).get("pdb")),
        )

    def pdb_for_role(self, role: str) -> PodDisruptionBudgetConfig:
        """Return the PodDisruptionBudget config for a cluster role."""
        if role == ROLE_LEADER:
            return self.leader_pdb
        if role == ROLE_FOLLOWER:
            return self.follower_pdb
        raise ValueError(f"Unknown role: {role}")


@dataclass(frozen=True)
class ObjectKey:
    """Namespace and name of a PodDisruptionBudget."""
    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


@dataclass(frozen=True)
class OwnerReference:
    """Ownership relation recorded on the object for the garbage collector."""
    api_version: str
    kind: str
    name: str
    uid: str


@dataclass
class DesiredPolicy:
    """The PodDisruptionBudget this reconciler wants to exist."""
    enabled: bool
    cluster_size: int
    selector_labels: Dict[str, str] = field(default_factory=dict)
    min_available: Optional[int] = None
    max_unavailable: Optional[int] = None
    labels: Dict[str, str] = field(default_factory=dict)
    owner: Optional[OwnerReference] = None
