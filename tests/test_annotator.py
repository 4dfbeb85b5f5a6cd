"""Tests for the last-applied snapshot annotation."""

import json

import pytest
from kubernetes import client

from pdb_reconciler.annotator import annotate, get_last_applied
from pdb_reconciler.builder import build_pdb
from pdb_reconciler.config import LAST_APPLIED_ANNOTATION
from pdb_reconciler.errors import SerializationFailure


def test_annotate_writes_spec_snapshot(desired, key):
    pdb = build_pdb(desired, key)

    annotate(pdb, pdb.spec)

    snapshot = pdb.metadata.annotations[LAST_APPLIED_ANNOTATION]
    assert json.loads(snapshot) == {
        "minAvailable": 2,
        "selector": {"matchLabels": {"app": "redis-cluster", "role": "leader"}},
    }
    assert get_last_applied(pdb) == snapshot


def test_annotate_is_deterministic(desired, key):
    first = build_pdb(desired, key)
    second = build_pdb(desired, key)

    annotate(first, first.spec)
    annotate(second, second.spec)

    assert get_last_applied(first) == get_last_applied(second)


def test_annotate_overwrites_previous_snapshot(desired, key):
    pdb = build_pdb(desired, key)
    pdb.metadata.annotations[LAST_APPLIED_ANNOTATION] = "stale"

    annotate(pdb, pdb.spec)

    assert get_last_applied(pdb) != "stale"


def test_annotate_creates_missing_annotations():
    pdb = client.V1PodDisruptionBudget(metadata=client.V1ObjectMeta(name="x"))

    annotate(pdb, {"maxUnavailable": 1})

    assert json.loads(pdb.metadata.annotations[LAST_APPLIED_ANNOTATION]) == {"maxUnavailable": 1}


def test_unserializable_spec_raises(desired, key):
    pdb = build_pdb(desired, key)

    with pytest.raises(SerializationFailure):
        annotate(pdb, {"minAvailable": float("nan")})

    assert get_last_applied(pdb) is None


def test_serializer_error_becomes_serialization_failure(desired, key, monkeypatch):
    def fail(spec):
        raise ValueError("cannot encode")

    monkeypatch.setattr("pdb_reconciler.annotator.serialize_spec", fail)
    pdb = build_pdb(desired, key)

    with pytest.raises(SerializationFailure, match="cannot encode"):
        annotate(pdb, pdb.spec)


def test_get_last_applied_without_annotations():
    pdb = client.V1PodDisruptionBudget(metadata=client.V1ObjectMeta(name="x"))

    assert get_last_applied(pdb) is None
