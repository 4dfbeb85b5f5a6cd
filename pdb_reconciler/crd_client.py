"""Client for reading RedisCluster custom resources."""

import logging
from typing import Optional, Dict, Any, List

from kubernetes import client, watch
from kubernetes.client.rest import ApiException

from .config import CRD_GROUP, CRD_VERSION, CRD_PLURAL, WATCH_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class RedisClusterClient:
    """Client for RedisCluster custom resources."""

    def __init__(self, api: Optional[client.CustomObjectsApi] = None):
        """Initialize the CRD client."""
        self.custom_api = api or client.CustomObjectsApi()

    def list_clusters(self, namespace: str = "") -> List[Dict[str, Any]]:
        """
        List all RedisCluster objects.

        Args:
            namespace: Namespace to list from ("" for all namespaces)

        Returns:
            List of cluster objects
        """
        try:
            if namespace:
                response = self.custom_api.list_namespaced_custom_object(
                    group=CRD_GROUP,
                    version=CRD_VERSION,
                    namespace=namespace,
                    plural=CRD_PLURAL
                )
            else:
                response = self.custom_api.list_cluster_custom_object(
                    group=CRD_GROUP,
                    version=CRD_VERSION,
                    plural=CRD_PLURAL
                )
            return response.get("items", [])
        except ApiException as e:
            if e.status == 404:
                logger.warning("RedisCluster CRD not found. Please install the CRD first.")
            else:
                logger.error(f"Error listing clusters: {e}")
            return []

    def watch_clusters(self, namespace: str = "", timeout: int = WATCH_TIMEOUT_SECONDS):
        """
        Create a watch stream for RedisCluster objects.

        Args:
            namespace: Namespace to watch ("" for all namespaces)
            timeout: Watch timeout in seconds

        Yields:
            Watch events
        """
        w = watch.Watch()

        try:
            if namespace:
                stream = w.stream(
                    self.custom_api.list_namespaced_custom_object,
                    group=CRD_GROUP,
                    version=CRD_VERSION,
                    namespace=namespace,
                    plural=CRD_PLURAL,
                    timeout_seconds=timeout
                )
            else:
                stream = w.stream(
                    self.custom_api.list_cluster_custom_object,
                    group=CRD_GROUP,
                    version=CRD_VERSION,
                    plural=CRD_PLURAL,
                    timeout_seconds=timeout
                )

            for event in stream:
                yield event

        except ApiException as e:
            logger.error(f"Watch error: {e}")
            raise
