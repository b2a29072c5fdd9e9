"""Domain Types — rich types that replace bare primitives across the registries.

Invariants:
    - AlgorithmId, TokenId, ProjectId wrap positive ints assigned by a registry counter
    - Identity wraps the opaque caller string supplied by upstream authentication
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AlgorithmId = NewType("AlgorithmId", int)
TokenId = NewType("TokenId", int)
ProjectId = NewType("ProjectId", int)
Identity = NewType("Identity", str)


# ─── Defaults ────────────────────────────────────────────────────

DEFAULT_PRIVILEGED_IDENTITY = "CONTRACT_OWNER"
DEFAULT_MAX_COLLABORATORS = 20


# ─── Enums ───────────────────────────────────────────────────────

class AlgorithmStatus(str, Enum):
    """Certification lifecycle of a submitted algorithm."""
    PENDING = "pending"
    CERTIFIED = "certified"
    REVOKED = "revoked"


class ProjectStatus(str, Enum):
    """Research project lifecycle. Only ACTIVE is reachable today."""
    ACTIVE = "active"


class RegistryName(str, Enum):
    """Registry labels for errors, logs and snapshots."""
    ALGORITHMS = "algorithms"
    TOKENS = "tokens"
    PROJECTS = "projects"
