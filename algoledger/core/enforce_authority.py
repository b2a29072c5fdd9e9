"""Authorization Enforcement — pure predicates and per-operation validators.

Invariants:
    - All functions are PURE: no IO, no clock, no registry mutation
    - Validators return the first violated rule as a LedgerError, None on success
    - Check order is fixed: NotFound -> Unauthorized -> CapacityExceeded,
      argument shape (validation) last

Design Decisions:
    - Predicates separated from validators: each authority rule is testable on its own
    - Return errors (not raise): registries raise, so validators stay composable with `or`
"""

from datetime import datetime

from algoledger.core.domain_types import RegistryName
from algoledger.core.errors import (
    CapacityExceededError,
    ErrorContext,
    FieldValidationError,
    LedgerError,
    NotFoundError,
    UnauthorizedError,
)
from algoledger.core.records import AlgorithmRecord, CertifiedToken, ResearchProject


# ─── Predicates ──────────────────────────────────────────────────

def is_privileged(caller: str, privileged_identity: str) -> bool:
    """The single fixed identity that certifies, revokes and mints."""
    return caller == privileged_identity


def is_owner(token: CertifiedToken, sender: str) -> bool:
    """Transfer capability follows the current owner, not the original minter."""
    return token.owner == sender


def is_lead(project: ResearchProject, adder: str) -> bool:
    return project.lead_researcher == adder


def is_member(project: ResearchProject, identity: str) -> bool:
    return identity in project.collaborators


def has_capacity(project: ResearchProject, limit: int) -> bool:
    return project.member_count < limit


# ─── Rule checks ─────────────────────────────────────────────────

def check_exists(
    record: object | None, resource_type: str, record_id: int, registry: RegistryName,
    caller: str | None = None,
) -> LedgerError | None:
    if record is None:
        return NotFoundError(
            resource_type, record_id,
            ErrorContext(registry=registry.value, record_id=record_id, caller=caller),
        )
    return None


def check_privileged(
    caller: str, privileged_identity: str, registry: RegistryName,
    record_id: int | None = None,
) -> LedgerError | None:
    if not is_privileged(caller, privileged_identity):
        return UnauthorizedError(
            caller, "privileged identity",
            ErrorContext(registry=registry.value, record_id=record_id, caller=caller),
        )
    return None


# ─── Operation validators ────────────────────────────────────────

def validate_certification(
    record: AlgorithmRecord | None, algorithm_id: int, caller: str,
    privileged_identity: str,
) -> LedgerError | None:
    """certify / revoke: record must exist, caller must be privileged."""
    return (
        check_exists(record, "Algorithm", algorithm_id, RegistryName.ALGORITHMS, caller)
        or check_privileged(
            caller, privileged_identity, RegistryName.ALGORITHMS, algorithm_id,
        )
    )


def check_timestamp(value: object, field: str, registry: RegistryName) -> LedgerError | None:
    if not isinstance(value, datetime):
        return FieldValidationError(
            f"{field} must be a datetime, got {type(value).__name__}", field,
            ErrorContext(registry=registry.value),
        )
    return None


def validate_mint(
    minter: str, privileged_identity: str, certification_date: object,
) -> LedgerError | None:
    """mint: only the privileged identity may create tokens, and only with a real date."""
    return (
        check_privileged(minter, privileged_identity, RegistryName.TOKENS)
        or check_timestamp(certification_date, "certification_date", RegistryName.TOKENS)
    )


def validate_transfer(
    token: CertifiedToken | None, token_id: int, sender: str,
) -> LedgerError | None:
    """transfer: token must exist, sender must be its current owner."""
    error = check_exists(token, "Token", token_id, RegistryName.TOKENS, sender)
    if error:
        return error
    if not is_owner(token, sender):
        return UnauthorizedError(
            sender, "token owner",
            ErrorContext(
                registry=RegistryName.TOKENS.value, record_id=token_id, caller=sender,
            ),
        )
    return None


def _check_project_exists(
    project: ResearchProject | None, project_id: int, caller: str,
) -> LedgerError | None:
    return check_exists(project, "Project", project_id, RegistryName.PROJECTS, caller)


def validate_add_collaborator(
    project: ResearchProject | None, project_id: int, new_collaborator: str,
    adder: str, limit: int,
) -> LedgerError | None:
    """add_collaborator: project exists, adder is lead, room under the cap.

    An identity that is already a member passes without a capacity check;
    the registry treats that addition as a no-op.
    """
    error = _check_project_exists(project, project_id, adder)
    if error:
        return error
    context = ErrorContext(
        registry=RegistryName.PROJECTS.value, record_id=project_id, caller=adder,
    )
    if not is_lead(project, adder):
        return UnauthorizedError(adder, "lead researcher", context)
    if is_member(project, new_collaborator):
        return None
    if not has_capacity(project, limit):
        return CapacityExceededError(limit, context)
    return None


def validate_contribution(
    project: ResearchProject | None, project_id: int, contributor: str,
) -> LedgerError | None:
    """add_contribution: project exists, contributor is a member."""
    error = _check_project_exists(project, project_id, contributor)
    if error:
        return error
    if not is_member(project, contributor):
        return UnauthorizedError(
            contributor, "project collaborator",
            ErrorContext(
                registry=RegistryName.PROJECTS.value, record_id=project_id,
                caller=contributor,
            ),
        )
    return None
