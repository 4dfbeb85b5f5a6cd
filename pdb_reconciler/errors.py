"""Error taxonomy for PodDisruptionBudget reconciliation."""

from typing import Optional


class ReconcileError(Exception):
    """Base class for every error a reconcile step can produce."""


class InvalidPolicyError(ReconcileError):
    """The RedisCluster carries a PodDisruptionBudget config we refuse to apply."""


class SerializationFailure(ReconcileError):
    """The last-applied snapshot could not be serialized."""


class BackendError(ReconcileError):
    """A Kubernetes API call failed (transport, auth, validation, ...)."""

    def __init__(self, message: str, status: Optional[int] = None, reason: str = ""):
        super().__init__(message)
        self.status = status
        self.reason = reason


class NotFoundError(BackendError):
    """The requested object does not exist."""


class ConflictError(BackendError):
    """The write carried a stale resourceVersion; re-fetch and retry."""


def is_not_found(error: Exception) -> bool:
    """Return True if the error means the object is absent."""
    return isinstance(error, NotFoundError)
