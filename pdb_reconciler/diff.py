"""Three-way comparison between a live PodDisruptionBudget and the desired policy."""

import copy
import logging
from typing import List, Tuple
from dataclasses import dataclass, field

from kubernetes import client

from .annotator import annotate, get_last_applied
from .builder import build_pdb
from .policy import DesiredPolicy, ObjectKey
from .utils import attribute_name, sanitize, deserialize_spec

logger = logging.getLogger(__name__)

SPEC_FIELD = "spec"
LAST_APPLIED_FIELD = "last-applied"


@dataclass
class PatchResult:
    """Outcome of comparing the merged object against the live one."""
    changed: List[str] = field(default_factory=list)
    preserved: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.changed


def _preserve_unowned_spec_fields(
    candidate: client.V1PodDisruptionBudget,
    live: client.V1PodDisruptionBudget,
    last_applied: dict
) -> List[str]:
    """
    Copy live spec fields this reconciler never set into the candidate.

    A field is ours if the candidate sets it or the last-applied snapshot
    recorded it. Everything else was written by someone else and is kept.
    """
    owned = set(sanitize(candidate.spec) or {}) | set(last_applied)
    preserved = []
    for api_name in sorted(set(sanitize(live.spec) or {}) - owned):
        attr = attribute_name(api_name)
        value = getattr(live.spec, attr, None)
        if value is None:
            logger.debug(f"Cannot carry over unknown spec field {api_name}")
            continue
        setattr(candidate.spec, attr, copy.deepcopy(value))
        preserved.append(api_name)
    return preserved


def diff(
    live: client.V1PodDisruptionBudget,
    desired: DesiredPolicy,
    key: ObjectKey
) -> Tuple[client.V1PodDisruptionBudget, PatchResult]:
    """
    Compute the object to write over a live PodDisruptionBudget.

    The candidate is built exactly as for a fresh create, then takes the
    server-owned metadata of the live object verbatim and keeps any
    annotation it does not set itself. It is stamped with a new
    last-applied snapshot of the desired spec. Live spec fields that are
    neither desired nor in the previous snapshot are carried over, so only
    fields this reconciler owns can produce a change.

    Args:
        live: Object as last read from the API server (not modified)
        desired: Desired policy
        key: Namespace and name of the object

    Returns:
        Tuple of (merged object, PatchResult)

    Raises:
        InvalidPolicyError: if the desired policy cannot be built
        SerializationFailure: if the snapshot cannot be serialized
    """
    candidate = build_pdb(desired, key)
    live_meta = live.metadata or client.V1ObjectMeta()

    # Server-owned fields are carried over, never regenerated
    candidate.metadata.resource_version = live_meta.resource_version
    candidate.metadata.creation_timestamp = live_meta.creation_timestamp
    candidate.metadata.managed_fields = copy.deepcopy(live_meta.managed_fields)

    for name, value in (live_meta.annotations or {}).items():
        if name not in candidate.metadata.annotations:
            candidate.metadata.annotations[name] = value

    # Snapshot holds only what we set, never the carried-over fields
    annotate(candidate, candidate.spec)

    live_snapshot = get_last_applied(live)
    result = PatchResult()
    if live.spec is not None:
        result.preserved = _preserve_unowned_spec_fields(
            candidate, live, deserialize_spec(live_snapshot)
        )

    if sanitize(candidate.spec) != (sanitize(live.spec) or {}):
        result.changed.append(SPEC_FIELD)
    if get_last_applied(candidate) != live_snapshot:
        result.changed.append(LAST_APPLIED_FIELD)

    if result.preserved:
        logger.debug(f"PodDisruptionBudget {key} keeps unowned spec fields: {', '.join(result.preserved)}")

    return candidate, result
