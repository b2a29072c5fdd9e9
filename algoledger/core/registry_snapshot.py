"""Registry Snapshot — serialization / deserialization for the three registries.

Invariants:
    - *_to_snapshot produces a JSON-safe dict (ISO datetimes, enum values, lists)
    - *_from_snapshot validates through schemas/snapshot.py before building a registry
    - A restored counter is never below the highest stored id
    - Missing last_id falls back to the highest record id

Design Decisions:
    - Clock and privileged identity are not state: supplied again on restore
    - Pydantic ValidationError wrapped in SnapshotError: callers catch one hierarchy
"""

from pydantic import BaseModel, ValidationError

from algoledger.core.clock import Clock, utc_now
from algoledger.core.algorithm_registry import AlgorithmRegistry
from algoledger.core.domain_types import (
    DEFAULT_MAX_COLLABORATORS, DEFAULT_PRIVILEGED_IDENTITY,
    AlgorithmId, Identity, ProjectId, RegistryName, TokenId,
)
from algoledger.core.errors import SnapshotError
from algoledger.core.project_registry import ResearchProjectRegistry
from algoledger.core.records import (
    AlgorithmRecord, CertifiedToken, Contribution, ResearchProject,
)
from algoledger.core.token_registry import CertifiedTokenRegistry
from algoledger.schemas.snapshot import (
    AlgorithmRegistrySnapshot,
    ProjectRegistrySnapshot,
    TokenRegistrySnapshot,
)


def _validate(model: type[BaseModel], data: dict | None, registry: RegistryName,
              context: dict | None = None):
    try:
        return model.model_validate(data or {}, context=context)
    except ValidationError as e:
        raise SnapshotError(
            f"{e.error_count()} validation error(s)", registry.value,
            [
                {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
        ) from e


# ─── Algorithms ──────────────────────────────────────────────────

def algorithms_to_snapshot(registry: AlgorithmRegistry) -> dict:
    """Serialize algorithm registry to JSON-safe dict. Pure, no IO."""
    return {
        "last_id": registry.last_id,
        "records": [
            {
                "id": r.id,
                "submitter": r.submitter,
                "name": r.name,
                "description": r.description,
                "implementation": r.implementation,
                "status": r.status.value,
                "certification_date": (
                    r.certification_date.isoformat() if r.certification_date else None
                ),
            }
            for r in registry.records()
        ],
    }


def algorithms_from_snapshot(
    data: dict | None,
    privileged_identity: str = DEFAULT_PRIVILEGED_IDENTITY,
    clock: Clock = utc_now,
) -> AlgorithmRegistry:
    snapshot = _validate(AlgorithmRegistrySnapshot, data, RegistryName.ALGORITHMS)
    return AlgorithmRegistry(
        privileged_identity=privileged_identity,
        clock=clock,
        records=[
            AlgorithmRecord(
                id=AlgorithmId(r.id),
                submitter=Identity(r.submitter),
                name=r.name,
                description=r.description,
                implementation=r.implementation,
                status=r.status,
                certification_date=r.certification_date,
            )
            for r in snapshot.records
        ],
        last_id=snapshot.last_id,
    )


# ─── Tokens ──────────────────────────────────────────────────────

def tokens_to_snapshot(registry: CertifiedTokenRegistry) -> dict:
    """Serialize token registry to JSON-safe dict. Pure, no IO."""
    return {
        "last_id": registry.last_id,
        "records": [
            {
                "id": t.id,
                "name": t.name,
                "description": t.description,
                "algorithm_id": t.algorithm_id,
                "certification_date": t.certification_date.isoformat(),
                "owner": t.owner,
            }
            for t in registry.records()
        ],
    }


def tokens_from_snapshot(
    data: dict | None,
    privileged_identity: str = DEFAULT_PRIVILEGED_IDENTITY,
) -> CertifiedTokenRegistry:
    snapshot = _validate(TokenRegistrySnapshot, data, RegistryName.TOKENS)
    return CertifiedTokenRegistry(
        privileged_identity=privileged_identity,
        records=[
            CertifiedToken(
                id=TokenId(t.id),
                name=t.name,
                description=t.description,
                algorithm_id=AlgorithmId(t.algorithm_id),
                certification_date=t.certification_date,
                owner=Identity(t.owner),
            )
            for t in snapshot.records
        ],
        last_id=snapshot.last_id,
    )


# ─── Projects ────────────────────────────────────────────────────

def projects_to_snapshot(registry: ResearchProjectRegistry) -> dict:
    """Serialize project registry (projects + contributions) to JSON-safe dict."""
    return {
        "last_id": registry.last_id,
        "records": [
            {
                "id": p.id,
                "title": p.title,
                "description": p.description,
                "lead_researcher": p.lead_researcher,
                "collaborators": list(p.collaborators),
                "status": p.status.value,
            }
            for p in registry.records()
        ],
        "contributions": [
            {
                "project_id": c.project_id,
                "contributor": c.contributor,
                "text": c.text,
                "timestamp": c.timestamp.isoformat(),
            }
            for c in registry.contributions()
        ],
    }


def projects_from_snapshot(
    data: dict | None,
    max_collaborators: int = DEFAULT_MAX_COLLABORATORS,
    clock: Clock = utc_now,
) -> ResearchProjectRegistry:
    snapshot = _validate(
        ProjectRegistrySnapshot, data, RegistryName.PROJECTS,
        context={"max_collaborators": max_collaborators},
    )
    return ResearchProjectRegistry(
        max_collaborators=max_collaborators,
        clock=clock,
        records=[
            ResearchProject(
                id=ProjectId(p.id),
                title=p.title,
                description=p.description,
                lead_researcher=Identity(p.lead_researcher),
                collaborators=tuple(Identity(m) for m in p.collaborators),
                status=p.status,
            )
            for p in snapshot.records
        ],
        contributions=[
            Contribution(
                project_id=ProjectId(c.project_id),
                contributor=Identity(c.contributor),
                text=c.text,
                timestamp=c.timestamp,
            )
            for c in snapshot.contributions
        ],
        last_id=snapshot.last_id,
    )
