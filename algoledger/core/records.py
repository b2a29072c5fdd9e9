"""Registry Records — immutable value objects stored by the three registries.

Invariants:
    - Records are frozen: a transition builds a new record via dataclasses.replace
    - AlgorithmRecord.certification_date is set iff status == CERTIFIED
    - ResearchProject.collaborators is unique, non-empty, and starts with lead_researcher

Design Decisions:
    - Frozen dataclasses over mutable dicts: a rejected call cannot leave half-written state
    - Collaborators stored as a tuple: ordered set semantics with cheap copy-on-write
    - index_unique guards registry constructors: a repeated id raises, never overwrites
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, TypeVar

from algoledger.core.domain_types import (
    AlgorithmId, AlgorithmStatus, Identity, ProjectId, ProjectStatus, RegistryName,
    TokenId,
)
from algoledger.core.errors import DuplicateRecordError

T = TypeVar("T")
K = TypeVar("K")


@dataclass(frozen=True)
class AlgorithmRecord:
    """A submitted algorithm and its certification status."""
    id: AlgorithmId
    submitter: Identity
    name: str
    description: str
    implementation: str
    status: AlgorithmStatus = AlgorithmStatus.PENDING
    certification_date: datetime | None = None

    @property
    def is_certified(self) -> bool:
        return self.status == AlgorithmStatus.CERTIFIED


@dataclass(frozen=True)
class CertifiedToken:
    """A non-fungible token referencing an algorithm id (opaque, unchecked)."""
    id: TokenId
    name: str
    description: str
    algorithm_id: AlgorithmId
    certification_date: datetime
    owner: Identity


@dataclass(frozen=True)
class ResearchProject:
    """A collaborative project with bounded, lead-controlled membership."""
    id: ProjectId
    title: str
    description: str
    lead_researcher: Identity
    collaborators: tuple[Identity, ...]
    status: ProjectStatus = ProjectStatus.ACTIVE

    @property
    def member_count(self) -> int:
        return len(self.collaborators)


@dataclass(frozen=True)
class Contribution:
    """Latest contribution of one collaborator to one project (last write wins)."""
    project_id: ProjectId
    contributor: Identity
    text: str
    timestamp: datetime


def index_unique(
    items: Iterable[T], key: Callable[[T], K], registry: RegistryName,
) -> dict[K, T]:
    """Build a key -> item mapping, raising on a repeated key instead of overwriting."""
    index: dict[K, T] = {}
    for item in items:
        k = key(item)
        if k in index:
            raise DuplicateRecordError(registry.value, k)
        index[k] = item
    return index
