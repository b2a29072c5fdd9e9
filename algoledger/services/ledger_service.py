"""Ledger Service — the external caller that sequences the three registries.

Invariants:
    - Every operation runs under one lock: at most one transition in flight,
      so per-id transitions are linearizable and id allocation is exclusive
    - Rejections are logged at WARNING with error_code, then re-raised unchanged
    - No retries, no recovery: a LedgerError is terminal for that call
    - Registries never see each other; cross-registry checks happen here only

Design Decisions:
    - Follows impureim sandwich: lock -> pure validate (inside registry) -> write -> log
    - mint_certified is the optional algorithm check that the token registry leaves to callers
"""

import logging
import threading
from datetime import datetime
from contextlib import contextmanager
from typing import Iterator

from algoledger.config import Settings, get_settings
from algoledger.core.algorithm_registry import AlgorithmRegistry
from algoledger.core.clock import Clock, utc_now
from algoledger.core.domain_types import (
    AlgorithmId, ProjectId, RegistryName, TokenId,
)
from algoledger.core.enforce_authority import check_privileged
from algoledger.core.errors import ErrorContext, LedgerError, UncertifiedAlgorithmError
from algoledger.core.ledger_stats import compute_ledger_stats
from algoledger.core.project_registry import ResearchProjectRegistry
from algoledger.core.records import (
    AlgorithmRecord, CertifiedToken, Contribution, ResearchProject,
)
from algoledger.core.registry_snapshot import (
    algorithms_from_snapshot,
    algorithms_to_snapshot,
    projects_from_snapshot,
    projects_to_snapshot,
    tokens_from_snapshot,
    tokens_to_snapshot,
)
from algoledger.core.token_registry import CertifiedTokenRegistry

logger = logging.getLogger(__name__)


class LedgerService:
    """Owns one registry of each kind and serializes access to them."""

    def __init__(
        self,
        settings: Settings | None = None,
        clock: Clock = utc_now,
        algorithms: AlgorithmRegistry | None = None,
        tokens: CertifiedTokenRegistry | None = None,
        projects: ResearchProjectRegistry | None = None,
    ):
        self.settings = settings or get_settings()
        self._lock = threading.RLock()
        self.algorithms = algorithms if algorithms is not None else AlgorithmRegistry(
            privileged_identity=self.settings.privileged_identity, clock=clock,
        )
        self.tokens = tokens if tokens is not None else CertifiedTokenRegistry(
            privileged_identity=self.settings.privileged_identity,
        )
        self.projects = projects if projects is not None else ResearchProjectRegistry(
            max_collaborators=self.settings.max_collaborators, clock=clock,
        )

    @contextmanager
    def _transition(
        self, operation: str, registry: RegistryName, caller: str,
        record_id: int | None = None,
    ) -> Iterator[None]:
        """Serialize one operation; log and re-raise any rejection."""
        with self._lock:
            try:
                yield
            except LedgerError as e:
                logger.warning(
                    f"{operation} rejected: {e.message}",
                    extra={
                        "registry": registry.value, "record_id": record_id,
                        "caller": caller, "error_code": e.code,
                    },
                )
                raise

    @staticmethod
    def _log_applied(
        operation: str, registry: RegistryName, record_id: int, caller: str,
    ) -> None:
        logger.info(
            f"{operation} applied to {registry.value} #{record_id}",
            extra={"registry": registry.value, "record_id": record_id, "caller": caller},
        )

    # ─── Algorithms ──────────────────────────────────────────────

    def submit_algorithm(
        self, name: str, description: str, implementation: str, submitter: str,
    ) -> AlgorithmId:
        with self._transition("submit", RegistryName.ALGORITHMS, submitter):
            algorithm_id = self.algorithms.submit(
                name, description, implementation, submitter,
            )
        self._log_applied("submit", RegistryName.ALGORITHMS, algorithm_id, submitter)
        return algorithm_id

    def certify_algorithm(self, algorithm_id: int, caller: str) -> AlgorithmRecord:
        with self._transition("certify", RegistryName.ALGORITHMS, caller, algorithm_id):
            record = self.algorithms.certify(algorithm_id, caller)
        self._log_applied("certify", RegistryName.ALGORITHMS, algorithm_id, caller)
        return record

    def revoke_certification(self, algorithm_id: int, caller: str) -> AlgorithmRecord:
        with self._transition("revoke", RegistryName.ALGORITHMS, caller, algorithm_id):
            record = self.algorithms.revoke(algorithm_id, caller)
        self._log_applied("revoke", RegistryName.ALGORITHMS, algorithm_id, caller)
        return record

    # ─── Tokens ──────────────────────────────────────────────────

    def mint_token(
        self, name: str, description: str, algorithm_id: int,
        certification_date: datetime, minter: str,
    ) -> TokenId:
        """Mint without consulting the algorithm registry (opaque reference)."""
        with self._transition("mint", RegistryName.TOKENS, minter):
            token_id = self.tokens.mint(
                name, description, algorithm_id, certification_date, minter,
            )
        self._log_applied("mint", RegistryName.TOKENS, token_id, minter)
        return token_id

    def mint_certified(
        self, algorithm_id: int, name: str, description: str, minter: str,
    ) -> TokenId:
        """Mint only for an existing, currently certified algorithm.

        Privilege is checked first, then existence, then certification.
        The token carries the algorithm's own certification date.
        """
        with self._transition("mint", RegistryName.TOKENS, minter, algorithm_id):
            error = check_privileged(
                minter, self.tokens.privileged_identity, RegistryName.TOKENS,
            )
            if error:
                raise error
            algorithm = self.algorithms.get(algorithm_id)
            if not algorithm.is_certified:
                raise UncertifiedAlgorithmError(
                    algorithm.id, algorithm.status.value,
                    ErrorContext(
                        registry=RegistryName.ALGORITHMS.value,
                        record_id=algorithm.id, caller=minter,
                    ),
                )
            token_id = self.tokens.mint(
                name, description, algorithm.id, algorithm.certification_date, minter,
            )
        self._log_applied("mint", RegistryName.TOKENS, token_id, minter)
        return token_id

    def transfer_token(self, token_id: int, sender: str, recipient: str) -> CertifiedToken:
        with self._transition("transfer", RegistryName.TOKENS, sender, token_id):
            token = self.tokens.transfer(token_id, sender, recipient)
        logger.info(
            f"transfer applied to tokens #{token_id}",
            extra={
                "registry": RegistryName.TOKENS.value, "record_id": token_id,
                "caller": sender, "recipient": recipient,
            },
        )
        return token

    # ─── Projects ────────────────────────────────────────────────

    def create_project(self, title: str, description: str, creator: str) -> ProjectId:
        with self._transition("create_project", RegistryName.PROJECTS, creator):
            project_id = self.projects.create_project(title, description, creator)
        self._log_applied("create_project", RegistryName.PROJECTS, project_id, creator)
        return project_id

    def add_collaborator(
        self, project_id: int, new_collaborator: str, adder: str,
    ) -> ResearchProject:
        with self._transition("add_collaborator", RegistryName.PROJECTS, adder, project_id):
            project = self.projects.add_collaborator(project_id, new_collaborator, adder)
        self._log_applied("add_collaborator", RegistryName.PROJECTS, project_id, adder)
        return project

    def add_contribution(self, project_id: int, text: str, contributor: str) -> Contribution:
        with self._transition(
            "add_contribution", RegistryName.PROJECTS, contributor, project_id,
        ):
            contribution = self.projects.add_contribution(project_id, text, contributor)
        self._log_applied(
            "add_contribution", RegistryName.PROJECTS, project_id, contributor,
        )
        return contribution

    # ─── Whole-ledger views ──────────────────────────────────────

    def stats(self) -> dict:
        with self._lock:
            return compute_ledger_stats(self.algorithms, self.tokens, self.projects)

    def snapshot(self) -> dict:
        """JSON-safe state of all three registries, taken atomically."""
        with self._lock:
            return {
                RegistryName.ALGORITHMS.value: algorithms_to_snapshot(self.algorithms),
                RegistryName.TOKENS.value: tokens_to_snapshot(self.tokens),
                RegistryName.PROJECTS.value: projects_to_snapshot(self.projects),
            }

    @classmethod
    def restore(
        cls, data: dict, settings: Settings | None = None, clock: Clock = utc_now,
    ) -> "LedgerService":
        """Rebuild a service from snapshot(); raises SnapshotError on bad input."""
        settings = settings or get_settings()
        service = cls(
            settings=settings,
            clock=clock,
            algorithms=algorithms_from_snapshot(
                data.get(RegistryName.ALGORITHMS.value),
                settings.privileged_identity, clock,
            ),
            tokens=tokens_from_snapshot(
                data.get(RegistryName.TOKENS.value), settings.privileged_identity,
            ),
            projects=projects_from_snapshot(
                data.get(RegistryName.PROJECTS.value), settings.max_collaborators, clock,
            ),
        )
        logger.info(
            f"ledger restored: {len(service.algorithms)} algorithms, "
            f"{len(service.tokens)} tokens, {len(service.projects)} projects",
        )
        return service
