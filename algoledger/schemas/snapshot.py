"""Snapshot Schemas — Pydantic models guarding registry state loaded from outside.

Invariants:
    - Record ids are positive and unique within a registry
    - last_id >= highest record id (a restored counter never hands out a used id)
    - Collaborators: non-empty, unique, led by lead_researcher, within the cap
    - Contributions reference an existing project and one of its members

Design Decisions:
    - Validation at the storage boundary only: in-process records are already trusted
    - Cap passed through validation context, since it is configuration, not data
"""

from datetime import datetime

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator,
)

from algoledger.core.domain_types import (
    DEFAULT_MAX_COLLABORATORS, AlgorithmStatus, ProjectStatus,
)


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int = Field(ge=1)


class AlgorithmSnapshot(_Record):
    submitter: str
    name: str
    description: str
    implementation: str
    status: AlgorithmStatus = AlgorithmStatus.PENDING
    certification_date: datetime | None = None

    @model_validator(mode="after")
    def date_matches_status(self) -> "AlgorithmSnapshot":
        certified = self.status == AlgorithmStatus.CERTIFIED
        if certified != (self.certification_date is not None):
            raise ValueError(
                "certification_date must be set exactly when status is certified",
            )
        return self


class TokenSnapshot(_Record):
    name: str
    description: str
    algorithm_id: int
    certification_date: datetime
    owner: str


class ProjectSnapshot(_Record):
    title: str
    description: str
    lead_researcher: str
    collaborators: list[str] = Field(min_length=1)
    status: ProjectStatus = ProjectStatus.ACTIVE

    @field_validator("collaborators")
    @classmethod
    def unique_collaborators(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError("collaborators must be unique")
        return v

    @model_validator(mode="after")
    def lead_first_and_within_cap(self, info: ValidationInfo) -> "ProjectSnapshot":
        if self.collaborators[0] != self.lead_researcher:
            raise ValueError("lead_researcher must be the first collaborator")
        limit = (info.context or {}).get("max_collaborators", DEFAULT_MAX_COLLABORATORS)
        if len(self.collaborators) > limit:
            raise ValueError(f"collaborators exceed the cap of {limit}")
        return self


class ContributionSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project_id: int = Field(ge=1)
    contributor: str
    text: str
    timestamp: datetime


def _check_counter(last_id: int | None, ids: list[int]) -> int:
    if len(set(ids)) != len(ids):
        raise ValueError("record ids must be unique")
    highest = max(ids, default=0)
    if last_id is None:
        return highest
    if last_id < highest:
        raise ValueError(f"last_id {last_id} is below highest record id {highest}")
    return last_id


class AlgorithmRegistrySnapshot(BaseModel):
    last_id: int | None = Field(None, ge=0)
    records: list[AlgorithmSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def counter_covers_ids(self) -> "AlgorithmRegistrySnapshot":
        self.last_id = _check_counter(self.last_id, [r.id for r in self.records])
        return self


class TokenRegistrySnapshot(BaseModel):
    last_id: int | None = Field(None, ge=0)
    records: list[TokenSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def counter_covers_ids(self) -> "TokenRegistrySnapshot":
        self.last_id = _check_counter(self.last_id, [r.id for r in self.records])
        return self


class ProjectRegistrySnapshot(BaseModel):
    last_id: int | None = Field(None, ge=0)
    records: list[ProjectSnapshot] = Field(default_factory=list)
    contributions: list[ContributionSnapshot] = Field(default_factory=list)

    @model_validator(mode="after")
    def counter_and_contributions(self) -> "ProjectRegistrySnapshot":
        self.last_id = _check_counter(self.last_id, [r.id for r in self.records])
        members = {p.id: set(p.collaborators) for p in self.records}
        seen: set[tuple[int, str]] = set()
        for c in self.contributions:
            if c.project_id not in members:
                raise ValueError(f"contribution references unknown project {c.project_id}")
            if c.contributor not in members[c.project_id]:
                raise ValueError(
                    f"contributor '{c.contributor}' is not a member of "
                    f"project {c.project_id}",
                )
            key = (c.project_id, c.contributor)
            if key in seen:
                raise ValueError(f"duplicate contribution for {key}")
            seen.add(key)
        return self
