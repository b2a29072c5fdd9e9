"""Registry Snapshot — serialization and validated restore.

Tests cover:
    - snapshots are JSON-safe (json.dumps succeeds)
    - restore rebuilds equal records and keeps the counter
    - restored registries continue allocating after last_id
    - malformed payloads raise SnapshotError
    - empty / None payloads yield empty registries
"""

import json

import pytest

from algoledger.core.algorithm_registry import AlgorithmRegistry
from algoledger.core.errors import FieldValidationError, SnapshotError
from algoledger.core.project_registry import ResearchProjectRegistry
from algoledger.core.registry_snapshot import (
    algorithms_from_snapshot,
    algorithms_to_snapshot,
    projects_from_snapshot,
    projects_to_snapshot,
    tokens_from_snapshot,
    tokens_to_snapshot,
)
from algoledger.core.token_registry import CertifiedTokenRegistry

OWNER = "CONTRACT_OWNER"


def _algorithms(clock) -> AlgorithmRegistry:
    registry = AlgorithmRegistry(clock=clock)
    registry.submit("A", "d", "impl", "alice")
    certified = registry.submit("B", "d", "impl", "bob")
    registry.certify(certified, OWNER)
    revoked = registry.submit("C", "d", "impl", "carol")
    registry.certify(revoked, OWNER)
    registry.revoke(revoked, OWNER)
    return registry


# ─── algorithms ──────────────────────────────────────────────────

def test_algorithm_snapshot_is_json_safe(clock):
    snapshot = algorithms_to_snapshot(_algorithms(clock))
    decoded = json.loads(json.dumps(snapshot))
    assert decoded["last_id"] == 3
    assert [r["status"] for r in decoded["records"]] == ["pending", "certified", "revoked"]


def test_algorithm_restore_preserves_records(clock):
    original = _algorithms(clock)
    restored = algorithms_from_snapshot(
        json.loads(json.dumps(algorithms_to_snapshot(original))),
    )
    assert list(restored.records()) == list(original.records())
    assert restored.last_id == 3
    assert restored.submit("D", "d", "i", "dave") == 4


def test_algorithm_restore_rejects_date_without_certification():
    with pytest.raises(SnapshotError) as exc:
        algorithms_from_snapshot({
            "last_id": 1,
            "records": [{
                "id": 1, "submitter": "a", "name": "n", "description": "d",
                "implementation": "i", "status": "pending",
                "certification_date": "2024-01-01T00:00:00+00:00",
            }],
        })
    assert exc.value.code == "INVALID_SNAPSHOT"


def test_algorithm_restore_rejects_unknown_status():
    with pytest.raises(SnapshotError):
        algorithms_from_snapshot({"records": [{
            "id": 1, "submitter": "a", "name": "n", "description": "d",
            "implementation": "i", "status": "approved",
        }]})


def test_empty_snapshot_yields_empty_registry():
    assert len(algorithms_from_snapshot(None)) == 0
    assert tokens_from_snapshot({}).last_id == 0


# ─── tokens ──────────────────────────────────────────────────────

def test_token_roundtrip_keeps_owner(clock):
    registry = CertifiedTokenRegistry()
    token_id = registry.mint("n", "d", 7, clock(), OWNER)
    registry.transfer(token_id, OWNER, "alice")
    restored = tokens_from_snapshot(json.loads(json.dumps(tokens_to_snapshot(registry))))
    assert restored.owner_of(token_id) == "alice"
    assert restored.get(token_id) == registry.get(token_id)


def test_token_snapshot_survives_rejected_undated_mint(clock):
    registry = CertifiedTokenRegistry()
    with pytest.raises(FieldValidationError):
        registry.mint("n", "d", 1, None, OWNER)
    token_id = registry.mint("n", "d", 1, clock(), OWNER)
    snapshot = json.loads(json.dumps(tokens_to_snapshot(registry)))
    assert snapshot["last_id"] == 1
    restored = tokens_from_snapshot(snapshot)
    assert restored.get(token_id) == registry.get(token_id)


def test_token_restore_rejects_counter_below_ids():
    with pytest.raises(SnapshotError):
        tokens_from_snapshot({
            "last_id": 1,
            "records": [{
                "id": 2, "name": "n", "description": "d", "algorithm_id": 1,
                "certification_date": "2024-01-01T00:00:00+00:00", "owner": "a",
            }],
        })


def test_token_restore_without_last_id_uses_highest_id():
    restored = tokens_from_snapshot({"records": [{
        "id": 4, "name": "n", "description": "d", "algorithm_id": 1,
        "certification_date": "2024-01-01T00:00:00+00:00", "owner": "a",
    }]})
    assert restored.last_id == 4


def test_restore_keeps_counter_above_records(clock):
    restored = tokens_from_snapshot({"last_id": 9, "records": []})
    assert restored.mint("n", "d", 1, clock(), OWNER) == 10


# ─── projects ────────────────────────────────────────────────────

def test_project_roundtrip_with_contributions(clock):
    registry = ResearchProjectRegistry(clock=clock)
    project_id = registry.create_project("T", "d", "lead")
    registry.add_collaborator(project_id, "bob", "lead")
    registry.add_contribution(project_id, "notes", "bob")
    snapshot = json.loads(json.dumps(projects_to_snapshot(registry)))
    restored = projects_from_snapshot(snapshot)
    assert restored.get(project_id) == registry.get(project_id)
    assert restored.get_contribution(project_id, "bob") == registry.get_contribution(project_id, "bob")


def test_project_restore_rejects_contribution_from_non_member():
    with pytest.raises(SnapshotError):
        projects_from_snapshot({
            "records": [{
                "id": 1, "title": "T", "description": "d",
                "lead_researcher": "lead", "collaborators": ["lead"],
            }],
            "contributions": [{
                "project_id": 1, "contributor": "stranger", "text": "x",
                "timestamp": "2024-01-01T00:00:00+00:00",
            }],
        })


def test_project_restore_rejects_cap_overflow():
    data = {"records": [{
        "id": 1, "title": "T", "description": "d",
        "lead_researcher": "lead", "collaborators": ["lead", "a", "b"],
    }]}
    with pytest.raises(SnapshotError):
        projects_from_snapshot(data, max_collaborators=2)
    assert projects_from_snapshot(data, max_collaborators=3).get(1).member_count == 3
