"""Access to PodDisruptionBudgets in the Kubernetes API."""

import logging
from contextlib import contextmanager
from typing import Optional, Protocol

from kubernetes import client
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from .errors import BackendError, ConflictError, NotFoundError, ReconcileError

logger = logging.getLogger(__name__)


class ClusterStateStore(Protocol):
    """Backend the reconciler reads and writes PodDisruptionBudgets through."""

    def get(self, namespace: str, name: str) -> client.V1PodDisruptionBudget:
        ...

    def create(self, namespace: str, obj: client.V1PodDisruptionBudget) -> None:
        ...

    def update(self, namespace: str, obj: client.V1PodDisruptionBudget) -> None:
        ...

    def delete(self, namespace: str, name: str) -> None:
        ...


def classify(e: ApiException) -> ReconcileError:
    """Map an API exception onto the reconcile error taxonomy."""
    message = f"{e.status} {e.reason or ''}".strip()
    if e.status == 404:
        return NotFoundError(message, status=e.status, reason=e.reason or "")
    if e.status == 409:
        return ConflictError(message, status=e.status, reason=e.reason or "")
    return BackendError(message, status=e.status, reason=e.reason or "")


@contextmanager
def _api_call(operation: str, namespace: str, name: str):
    try:
        yield
    except ApiException as e:
        logger.debug(f"{operation} PodDisruptionBudget {namespace}/{name} failed: {e.status}")
        raise classify(e) from e
    except HTTPError as e:
        logger.debug(f"{operation} PodDisruptionBudget {namespace}/{name} failed: {e}")
        raise BackendError(f"Transport error: {e}") from e


class KubernetesStateStore:
    """ClusterStateStore backed by the policy/v1 API."""

    def __init__(self, api: Optional[client.PolicyV1Api] = None):
        """
        Initialize the store.

        Args:
            api: PolicyV1Api to use (defaults to one on the loaded kube config)
        """
        self.policy_api = api or client.PolicyV1Api()

    def get(self, namespace: str, name: str) -> client.V1PodDisruptionBudget:
        """
        Read a PodDisruptionBudget.

        Raises:
            NotFoundError: if it does not exist
            BackendError: on any other API or transport failure
        """
        with _api_call("Get", namespace, name):
            return self.policy_api.read_namespaced_pod_disruption_budget(
                name=name,
                namespace=namespace
            )

    def create(self, namespace: str, obj: client.V1PodDisruptionBudget) -> None:
        """Create a PodDisruptionBudget from a fully built object."""
        with _api_call("Create", namespace, obj.metadata.name):
            self.policy_api.create_namespaced_pod_disruption_budget(
                namespace=namespace,
                body=obj
            )

    def update(self, namespace: str, obj: client.V1PodDisruptionBudget) -> None:
        """Replace a PodDisruptionBudget; the body's resourceVersion guards the write."""
        with _api_call("Update", namespace, obj.metadata.name):
            self.policy_api.replace_namespaced_pod_disruption_budget(
                name=obj.metadata.name,
                namespace=namespace,
                body=obj
            )

    def delete(self, namespace: str, name: str) -> None:
        """Delete a PodDisruptionBudget by name."""
        with _api_call("Delete", namespace, name):
            self.policy_api.delete_namespaced_pod_disruption_budget(
                name=name,
                namespace=namespace
            )
