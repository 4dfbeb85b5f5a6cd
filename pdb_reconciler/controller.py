"""Main controller logic for the Redis PodDisruptionBudget reconciler."""

import logging
import threading
import time
from typing import Any, Dict, List, Optional

from kubernetes.client.rest import ApiException

from .builder import build
from .config import ROLES, RECONCILE_INTERVAL_SECONDS, WATCH_TIMEOUT_SECONDS, WATCH_RETRY_SECONDS
from .crd_client import RedisClusterClient
from .errors import InvalidPolicyError
from .meta import object_key
from .policy import ObjectKey, RedisClusterSpec
from .reconciler import ERROR, PDBReconciler, ReconcileResult
from .store import ClusterStateStore, KubernetesStateStore

logger = logging.getLogger(__name__)


class PDBController:
    """
    Watches RedisCluster objects and keeps the PodDisruptionBudget of
    each cluster role in line with the cluster's spec.
    """

    def __init__(
        self,
        namespace: str = "",
        dry_run: bool = False,
        interval: int = RECONCILE_INTERVAL_SECONDS,
        store: Optional[ClusterStateStore] = None,
        cluster_client: Optional[RedisClusterClient] = None,
    ):
        """
        Initialize the controller.

        Args:
            namespace: Namespace to watch ("" for all namespaces)
            dry_run: If True, don't make actual changes
            interval: Seconds between full resyncs
            store: PodDisruptionBudget backend (defaults to the Kubernetes API)
            cluster_client: RedisCluster reader (defaults to the Kubernetes API)
        """
        self.namespace = namespace
        self.dry_run = dry_run
        self.interval = interval

        self.cluster_client = cluster_client or RedisClusterClient()
        self.reconciler = PDBReconciler(store or KubernetesStateStore(), dry_run=dry_run)

        self._stop_event = threading.Event()

    def reconcile_cluster(self, cluster_obj: Dict[str, Any]) -> List[ReconcileResult]:
        """
        Reconcile the PodDisruptionBudgets of every role of a cluster.

        Args:
            cluster_obj: The RedisCluster object from the API

        Returns:
            One ReconcileResult per role
        """
        metadata = cluster_obj.get("metadata", {})
        name = metadata.get("name", "")
        namespace = metadata.get("namespace", "default")

        try:
            cluster = RedisClusterSpec.from_crd(cluster_obj)
        except InvalidPolicyError as e:
            logger.error(f"Invalid RedisCluster {namespace}/{name}: {e}")
            return [
                ReconcileResult(key=ObjectKey(namespace, f"{name}-{role}"), action=ERROR, error=e)
                for role in ROLES
            ]

        results = []
        for role in ROLES:
            desired = build(cluster, role)
            results.append(self.reconciler.reconcile(desired, object_key(cluster, role)))
        return results

    def reconcile_all(self) -> List[ReconcileResult]:
        """Reconcile every RedisCluster currently in the watched namespace."""
        results = []
        for cluster_obj in self.cluster_client.list_clusters(self.namespace):
            results.extend(self.reconcile_cluster(cluster_obj))
        return results

    def handle_cluster_event(self, event_type: str, cluster_obj: Dict[str, Any]) -> None:
        """
        Handle a RedisCluster watch event.

        Args:
            event_type: ADDED, MODIFIED, or DELETED
            cluster_obj: The cluster object from the event
        """
        metadata = cluster_obj.get("metadata", {})
        name = metadata.get("name", "")
        namespace = metadata.get("namespace", "default")

        if event_type in ("ADDED", "MODIFIED"):
            logger.debug(f"RedisCluster {event_type}: {namespace}/{name}")
            self.reconcile_cluster(cluster_obj)
        elif event_type == "DELETED":
            # Owner references hand the PodDisruptionBudgets to the garbage collector
            logger.info(f"RedisCluster DELETED: {namespace}/{name}")

    def watch_clusters(self) -> None:
        """Watch for RedisCluster events in a loop."""
        logger.info("Starting cluster watcher...")

        while not self._stop_event.is_set():
            try:
                for event in self.cluster_client.watch_clusters(
                    namespace=self.namespace,
                    timeout=WATCH_TIMEOUT_SECONDS
                ):
                    if self._stop_event.is_set():
                        break

                    self.handle_cluster_event(event["type"], event["object"])

            except ApiException as e:
                logger.error(f"Cluster watch error: {e}")
                self._stop_event.wait(WATCH_RETRY_SECONDS)
            except Exception as e:
                logger.exception(f"Unexpected error in cluster watcher: {e}")
                self._stop_event.wait(WATCH_RETRY_SECONDS)

    def periodic_reconcile(self) -> None:
        """Periodically reconcile all clusters."""
        logger.info(f"Starting periodic reconciler (interval: {self.interval}s)")

        while not self._stop_event.wait(self.interval):
            logger.debug("Running periodic reconciliation...")
            results = self.reconcile_all()
            failed = [r for r in results if not r.ok]
            if failed:
                logger.warning(f"{len(failed)} of {len(results)} PodDisruptionBudget(s) failed to reconcile")

    def run(self) -> None:
        """Run the controller."""
        logger.info("=" * 60)
        logger.info("Starting Redis PodDisruptionBudget reconciler")
        logger.info("=" * 60)
        logger.info(f"Namespace: {self.namespace or 'all namespaces'}")
        logger.info(f"Dry run: {self.dry_run}")

        watch_thread = threading.Thread(
            target=self.watch_clusters,
            name="cluster-watcher",
            daemon=True
        )

        reconcile_thread = threading.Thread(
            target=self.periodic_reconcile,
            name="periodic-reconciler",
            daemon=True
        )

        watch_thread.start()
        reconcile_thread.start()

        logger.info("Controller is running. Press Ctrl+C to stop.")

        try:
            while not self._stop_event.is_set():
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Shutdown requested...")
            self._stop_event.set()

    def stop(self) -> None:
        """Stop the controller."""
        logger.info("Stopping controller...")
        self._stop_event.set()
