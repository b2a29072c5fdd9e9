"""Snapshot Schemas — Pydantic validation of externally stored registry state."""

import pytest
from pydantic import ValidationError

from algoledger.core.domain_types import AlgorithmStatus
from algoledger.schemas.snapshot import (
    AlgorithmRegistrySnapshot,
    AlgorithmSnapshot,
    ProjectRegistrySnapshot,
    ProjectSnapshot,
)


def _project(**overrides) -> dict:
    data = {
        "id": 1, "title": "T", "description": "d",
        "lead_researcher": "lead", "collaborators": ["lead", "bob"],
    }
    data.update(overrides)
    return data


def test_algorithm_defaults_to_pending():
    record = AlgorithmSnapshot.model_validate({
        "id": 1, "submitter": "a", "name": "n", "description": "d", "implementation": "i",
    })
    assert record.status == AlgorithmStatus.PENDING
    assert record.certification_date is None


def test_certified_algorithm_requires_date():
    with pytest.raises(ValidationError):
        AlgorithmSnapshot.model_validate({
            "id": 1, "submitter": "a", "name": "n", "description": "d",
            "implementation": "i", "status": "certified",
        })


def test_record_id_must_be_positive():
    with pytest.raises(ValidationError):
        AlgorithmSnapshot.model_validate({
            "id": 0, "submitter": "a", "name": "n", "description": "d", "implementation": "i",
        })


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        ProjectSnapshot.model_validate(_project(owner="x"))


def test_duplicate_record_ids_rejected():
    record = {"id": 1, "submitter": "a", "name": "n", "description": "d", "implementation": "i"}
    with pytest.raises(ValidationError):
        AlgorithmRegistrySnapshot.model_validate({"records": [record, record]})


def test_missing_last_id_defaults_to_highest():
    snapshot = AlgorithmRegistrySnapshot.model_validate({"records": [
        {"id": 3, "submitter": "a", "name": "n", "description": "d", "implementation": "i"},
    ]})
    assert snapshot.last_id == 3


def test_collaborators_must_be_unique():
    with pytest.raises(ValidationError):
        ProjectSnapshot.model_validate(_project(collaborators=["lead", "bob", "bob"]))


def test_lead_must_be_first_collaborator():
    with pytest.raises(ValidationError):
        ProjectSnapshot.model_validate(_project(collaborators=["bob", "lead"]))


def test_collaborators_cannot_be_empty():
    with pytest.raises(ValidationError):
        ProjectSnapshot.model_validate(_project(collaborators=[]))


def test_cap_read_from_validation_context():
    members = ["lead"] + [f"m{i}" for i in range(20)]
    with pytest.raises(ValidationError):
        ProjectSnapshot.model_validate(_project(collaborators=members))
    project = ProjectSnapshot.model_validate(
        _project(collaborators=members), context={"max_collaborators": 21},
    )
    assert len(project.collaborators) == 21


def test_contribution_must_reference_existing_project():
    with pytest.raises(ValidationError):
        ProjectRegistrySnapshot.model_validate({
            "records": [_project()],
            "contributions": [{
                "project_id": 2, "contributor": "bob", "text": "x",
                "timestamp": "2024-01-01T00:00:00+00:00",
            }],
        })


def test_duplicate_contribution_key_rejected():
    entry = {
        "project_id": 1, "contributor": "bob", "text": "x",
        "timestamp": "2024-01-01T00:00:00+00:00",
    }
    with pytest.raises(ValidationError):
        ProjectRegistrySnapshot.model_validate({
            "records": [_project()], "contributions": [entry, entry],
        })
