"""Core Layer — registries, authorization predicates and snapshots. No IO.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Every failure is detected before the first write (atomic transitions)

Design Decisions:
    - Functional core separated from imperative shell (services/ logs and sequences)
"""
