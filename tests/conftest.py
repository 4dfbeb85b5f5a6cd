"""
Pytest configuration and fixtures for the PodDisruptionBudget reconciler tests
"""

import copy
from datetime import datetime, timezone

import pytest
from kubernetes import client

from pdb_reconciler.errors import ConflictError, NotFoundError
from pdb_reconciler.policy import (
    DesiredPolicy,
    ObjectKey,
    OwnerReference,
    PodDisruptionBudgetConfig,
    RedisClusterSpec,
)


class FakeStateStore:
    """In-memory ClusterStateStore that behaves like the API server."""

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.written = []
        self.fail_on = {}
        self._version = 100

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _maybe_fail(self, op):
        if op in self.fail_on:
            raise self.fail_on[op]

    def ops(self, op):
        return [call for call in self.calls if call[0] == op]

    @property
    def write_count(self):
        return len(self.ops("create")) + len(self.ops("update")) + len(self.ops("delete"))

    def get(self, namespace, name):
        self.calls.append(("get", namespace, name))
        self._maybe_fail("get")
        if (namespace, name) not in self.objects:
            raise NotFoundError("404 Not Found", status=404, reason="Not Found")
        return copy.deepcopy(self.objects[(namespace, name)])

    def create(self, namespace, obj):
        self.calls.append(("create", namespace, obj.metadata.name))
        self._maybe_fail("create")
        self.written.append(copy.deepcopy(obj))
        stored = copy.deepcopy(obj)
        stored.metadata.resource_version = self._next_version()
        stored.metadata.creation_timestamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stored.metadata.managed_fields = [
            client.V1ManagedFieldsEntry(manager="pdb-reconciler", operation="Update")
        ]
        self.objects[(namespace, obj.metadata.name)] = stored

    def update(self, namespace, obj):
        self.calls.append(("update", namespace, obj.metadata.name))
        self._maybe_fail("update")
        self.written.append(copy.deepcopy(obj))
        current = self.objects.get((namespace, obj.metadata.name))
        if current is None:
            raise NotFoundError("404 Not Found", status=404, reason="Not Found")
        if obj.metadata.resource_version != current.metadata.resource_version:
            raise ConflictError("409 Conflict", status=409, reason="Conflict")
        stored = copy.deepcopy(obj)
        stored.metadata.resource_version = self._next_version()
        self.objects[(namespace, obj.metadata.name)] = stored

    def delete(self, namespace, name):
        self.calls.append(("delete", namespace, name))
        self._maybe_fail("delete")
        if self.objects.pop((namespace, name), None) is None:
            raise NotFoundError("404 Not Found", status=404, reason="Not Found")


@pytest.fixture
def store():
    """Fixture for an empty in-memory state store."""
    return FakeStateStore()


@pytest.fixture
def key():
    return ObjectKey(namespace="redis", name="redis-cluster-leader")


@pytest.fixture
def desired():
    """An enabled policy with the quorum default for three nodes."""
    return DesiredPolicy(
        enabled=True,
        cluster_size=3,
        selector_labels={"app": "redis-cluster", "role": "leader"},
        min_available=2,
        labels={"app": "redis-cluster", "redis_setup_type": "cluster", "role": "leader"},
        owner=OwnerReference(
            api_version="redis.redis.opstreelabs.in/v1beta1",
            kind="RedisCluster",
            name="redis-cluster",
            uid="0f5e7a2c-1111-2222-3333-444455556666",
        ),
    )


@pytest.fixture
def cluster():
    """A parsed RedisCluster with a leader budget enabled and no follower budget."""
    return RedisClusterSpec(
        name="redis-cluster",
        namespace="redis",
        uid="0f5e7a2c-1111-2222-3333-444455556666",
        cluster_size=3,
        leader_pdb=PodDisruptionBudgetConfig(enabled=True),
    )


@pytest.fixture
def cluster_obj():
    """Sample RedisCluster object as returned by the custom objects API."""
    return {
        "apiVersion": "redis.redis.opstreelabs.in/v1beta1",
        "kind": "RedisCluster",
        "metadata": {
            "name": "redis-cluster",
            "namespace": "redis",
            "uid": "0f5e7a2c-1111-2222-3333-444455556666",
        },
        "spec": {
            "clusterSize": 3,
            "redisLeader": {"pdb": {"enabled": True}},
            "redisFollower": {"pdb": {"enabled": False}},
        },
    }
