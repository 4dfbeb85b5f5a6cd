"""Reconciliation logic for Redis cluster PodDisruptionBudgets."""

import logging
from typing import Optional
from dataclasses import dataclass

from .annotator import annotate
from .builder import build_pdb
from .diff import diff
from .errors import ReconcileError, is_not_found
from .policy import DesiredPolicy, ObjectKey
from .store import ClusterStateStore

logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
DELETED = "deleted"
UNCHANGED = "unchanged"
ABSENT = "absent"
ERROR = "error"


@dataclass
class ReconcileResult:
    """Outcome of one reconcile call."""
    key: ObjectKey
    action: str
    error: Optional[ReconcileError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PDBReconciler:
    """Reconciles one PodDisruptionBudget per call against its desired policy."""

    def __init__(self, store: ClusterStateStore, dry_run: bool = False):
        """
        Initialize the reconciler.

        Args:
            store: Backend to read and write PodDisruptionBudgets through
            dry_run: If True, log writes instead of making them
        """
        self.store = store
        self.dry_run = dry_run

    def reconcile(self, desired: DesiredPolicy, key: ObjectKey) -> ReconcileResult:
        """
        Bring the PodDisruptionBudget at `key` in line with `desired`.

        Issues at most one write. Errors are returned in the result, never
        retried here; a ConflictError means the caller should re-run on the
        next tick.
        """
        try:
            action = self._reconcile(desired, key)
        except ReconcileError as e:
            logger.error(f"PodDisruptionBudget {key} reconcile failed: {e}")
            return ReconcileResult(key=key, action=ERROR, error=e)
        except Exception:
            logger.exception(f"PodDisruptionBudget {key} reconcile failed unexpectedly")
            raise

        logger.info(f"PodDisruptionBudget {key} reconciled: {action}")
        return ReconcileResult(key=key, action=action)

    def _reconcile(self, desired: DesiredPolicy, key: ObjectKey) -> str:
        try:
            live = self.store.get(key.namespace, key.name)
        except ReconcileError as e:
            if not is_not_found(e):
                raise
            live = None

        if live is None:
            if not desired.enabled:
                return ABSENT
            return self._create(desired, key)

        if not desired.enabled:
            return self._delete(key)

        merged, patch = diff(live, desired, key)
        if patch.is_empty:
            return UNCHANGED

        logger.debug(f"PodDisruptionBudget {key} differs in: {', '.join(patch.changed)}")
        if self.dry_run:
            logger.debug(f"[DRY-RUN] Would update PodDisruptionBudget {key}")
            return f"dry-run-{UPDATED}"
        self.store.update(key.namespace, merged)
        return UPDATED

    def _create(self, desired: DesiredPolicy, key: ObjectKey) -> str:
        pdb = build_pdb(desired, key)
        annotate(pdb, pdb.spec)

        if self.dry_run:
            logger.debug(f"[DRY-RUN] Would create PodDisruptionBudget {key}")
            return f"dry-run-{CREATED}"
        self.store.create(key.namespace, pdb)
        return CREATED

    def _delete(self, key: ObjectKey) -> str:
        # NOTE: a recreation between the get and this delete is not guarded against
        if self.dry_run:
            logger.debug(f"[DRY-RUN] Would delete PodDisruptionBudget {key}")
            return f"dry-run-{DELETED}"
        self.store.delete(key.namespace, key.name)
        return DELETED
