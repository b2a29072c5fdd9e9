"""Ledger Stats — pure summary counts across the three registries.

Invariants:
    - Reads registries only through their public read surface (no IO, no mutation)
    - Returns a flat dict of integer counts (serializable as JSON)
"""

from algoledger.core.algorithm_registry import AlgorithmRegistry
from algoledger.core.domain_types import AlgorithmStatus
from algoledger.core.project_registry import ResearchProjectRegistry
from algoledger.core.token_registry import CertifiedTokenRegistry


def compute_ledger_stats(
    algorithms: AlgorithmRegistry,
    tokens: CertifiedTokenRegistry,
    projects: ResearchProjectRegistry,
) -> dict:
    """Compute summary statistics for the whole ledger. Pure, no IO."""
    statuses = [r.status for r in algorithms.records()]
    project_list = list(projects.records())

    return {
        "algorithms_total": len(statuses),
        "algorithms_pending": statuses.count(AlgorithmStatus.PENDING),
        "algorithms_certified": statuses.count(AlgorithmStatus.CERTIFIED),
        "algorithms_revoked": statuses.count(AlgorithmStatus.REVOKED),
        "tokens_total": len(tokens),
        "token_owners": len({t.owner for t in tokens.records()}),
        "projects_total": len(project_list),
        "collaborators_total": sum(p.member_count for p in project_list),
        "contributions_total": sum(1 for _ in projects.contributions()),
    }
