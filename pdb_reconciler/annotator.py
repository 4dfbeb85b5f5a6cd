"""Last-applied snapshot annotation for PodDisruptionBudgets."""

import logging
from typing import Any, Optional

from kubernetes import client

from .config import LAST_APPLIED_ANNOTATION
from .errors import SerializationFailure
from .utils import serialize_spec

logger = logging.getLogger(__name__)


def annotate(obj: client.V1PodDisruptionBudget, spec: Any) -> None:
    """
    Stamp an object with a snapshot of the spec being applied.

    The annotation is written in place and replaces any previous
    snapshot. Must run before the object is sent to the API server.

    Raises:
        SerializationFailure: if the spec cannot be serialized
    """
    try:
        snapshot = serialize_spec(spec)
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializationFailure(f"Unable to serialize last-applied snapshot: {e}") from e

    if obj.metadata is None:
        obj.metadata = client.V1ObjectMeta()
    if obj.metadata.annotations is None:
        obj.metadata.annotations = {}
    obj.metadata.annotations[LAST_APPLIED_ANNOTATION] = snapshot
    logger.debug(f"Set last-applied snapshot on {obj.metadata.namespace}/{obj.metadata.name}")


def get_last_applied(obj: client.V1PodDisruptionBudget) -> Optional[str]:
    """Return the stored snapshot, or None if the object was never annotated."""
    if obj.metadata is None or not obj.metadata.annotations:
        return None
    return obj.metadata.annotations.get(LAST_APPLIED_ANNOTATION)
