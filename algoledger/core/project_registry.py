"""Research Project Registry — bounded membership and per-member contribution log.

Invariants:
    - create_project always succeeds: lead_researcher = creator, collaborators = (creator,)
    - Only the lead researcher grows membership; membership never shrinks
    - Membership is capped (default 20); the creator counts toward the cap
    - Only members contribute; one stored contribution per (project, contributor), last write wins
    - Projects and contributions are never deleted

Design Decisions:
    - Re-adding an existing member is an accepted no-op (membership stays a unique set)
    - Contributions keyed by (project_id, contributor) tuple, not a formatted string key
"""

from dataclasses import replace
from typing import Iterable, Iterator

from algoledger.core.clock import Clock, utc_now
from algoledger.core.domain_types import (
    DEFAULT_MAX_COLLABORATORS, Identity, ProjectId, RegistryName,
)
from algoledger.core.enforce_authority import (
    check_exists,
    is_member,
    validate_add_collaborator,
    validate_contribution,
)
from algoledger.core.records import Contribution, ResearchProject, index_unique


class ResearchProjectRegistry:
    """Owns research projects, their membership and contributions."""

    name = RegistryName.PROJECTS

    def __init__(
        self,
        max_collaborators: int = DEFAULT_MAX_COLLABORATORS,
        clock: Clock = utc_now,
        records: Iterable[ResearchProject] = (),
        contributions: Iterable[Contribution] = (),
        last_id: int = 0,
    ):
        self.max_collaborators = max_collaborators
        self._clock = clock
        self._projects: dict[ProjectId, ResearchProject] = index_unique(
            records, lambda p: p.id, self.name,
        )
        self._contributions: dict[tuple[ProjectId, Identity], Contribution] = index_unique(
            contributions, lambda c: (c.project_id, c.contributor), self.name,
        )
        self._last_id = max([last_id, *self._projects])

    @property
    def last_id(self) -> int:
        return self._last_id

    def __len__(self) -> int:
        return len(self._projects)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._projects

    def find(self, project_id: int) -> ResearchProject | None:
        return self._projects.get(ProjectId(project_id))

    def get(self, project_id: int) -> ResearchProject:
        project = self.find(project_id)
        error = check_exists(project, "Project", project_id, self.name)
        if error:
            raise error
        return project

    def is_collaborator(self, project_id: int, identity: str) -> bool:
        project = self.find(project_id)
        return project is not None and is_member(project, identity)

    def get_contribution(self, project_id: int, contributor: str) -> Contribution | None:
        return self._contributions.get((ProjectId(project_id), Identity(contributor)))

    def contributions_for(self, project_id: int) -> list[Contribution]:
        """Contributions of one project, in collaborator order."""
        project = self.get(project_id)
        found = (self.get_contribution(project.id, m) for m in project.collaborators)
        return [c for c in found if c is not None]

    def contributions(self) -> Iterator[Contribution]:
        return iter(sorted(
            self._contributions.values(), key=lambda c: (c.project_id, c.contributor),
        ))

    def records(self) -> Iterator[ResearchProject]:
        return iter(sorted(self._projects.values(), key=lambda p: p.id))

    def create_project(self, title: str, description: str, creator: str) -> ProjectId:
        """Open a project led by its creator. Always succeeds."""
        self._last_id += 1
        project_id = ProjectId(self._last_id)
        self._projects[project_id] = ResearchProject(
            id=project_id,
            title=title,
            description=description,
            lead_researcher=Identity(creator),
            collaborators=(Identity(creator),),
        )
        return project_id

    def add_collaborator(
        self, project_id: int, new_collaborator: str, adder: str,
    ) -> ResearchProject:
        """Append a member. Lead only, bounded by max_collaborators."""
        project = self.find(project_id)
        error = validate_add_collaborator(
            project, project_id, new_collaborator, adder, self.max_collaborators,
        )
        if error:
            raise error
        if is_member(project, new_collaborator):
            return project

        updated = replace(
            project,
            collaborators=(*project.collaborators, Identity(new_collaborator)),
        )
        self._projects[project.id] = updated
        return updated

    def add_contribution(self, project_id: int, text: str, contributor: str) -> Contribution:
        """Store or overwrite the contributor's entry for this project. Members only."""
        project = self.find(project_id)
        error = validate_contribution(project, project_id, contributor)
        if error:
            raise error

        contribution = Contribution(
            project_id=project.id,
            contributor=Identity(contributor),
            text=text,
            timestamp=self._clock(),
        )
        self._contributions[(project.id, contribution.contributor)] = contribution
        return contribution
