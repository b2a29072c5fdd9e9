"""Algorithm Registry — submission and certification lifecycle of algorithm records.

Invariants:
    - Ids come from one counter per registry: start at 1, incremented before use, never reused
    - submit always succeeds and stores status PENDING with no certification date
    - certify/revoke: NotFound before Unauthorized, both checked before any write
    - certify stamps the date (re-stamps if already certified); revoke clears it
    - Records are never deleted

Design Decisions:
    - Owned aggregate (counter + mapping) per instance: no module-level state
    - Validation delegated to core/enforce_authority.py; this class only applies writes
"""

from dataclasses import replace
from typing import Iterable, Iterator

from algoledger.core.clock import Clock, utc_now
from algoledger.core.domain_types import (
    DEFAULT_PRIVILEGED_IDENTITY, AlgorithmId, AlgorithmStatus, Identity,
    RegistryName,
)
from algoledger.core.enforce_authority import check_exists, validate_certification
from algoledger.core.records import AlgorithmRecord, index_unique


class AlgorithmRegistry:
    """Owns algorithm records and their certification status."""

    name = RegistryName.ALGORITHMS

    def __init__(
        self,
        privileged_identity: str = DEFAULT_PRIVILEGED_IDENTITY,
        clock: Clock = utc_now,
        records: Iterable[AlgorithmRecord] = (),
        last_id: int = 0,
    ):
        self.privileged_identity = privileged_identity
        self._clock = clock
        self._records: dict[AlgorithmId, AlgorithmRecord] = index_unique(
            records, lambda r: r.id, self.name,
        )
        self._last_id = max([last_id, *self._records])

    # ── reads ──

    @property
    def last_id(self) -> int:
        return self._last_id

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, algorithm_id: object) -> bool:
        return algorithm_id in self._records

    def find(self, algorithm_id: int) -> AlgorithmRecord | None:
        return self._records.get(AlgorithmId(algorithm_id))

    def get(self, algorithm_id: int) -> AlgorithmRecord:
        record = self.find(algorithm_id)
        error = check_exists(record, "Algorithm", algorithm_id, self.name)
        if error:
            raise error
        return record

    def is_certified(self, algorithm_id: int) -> bool:
        record = self.find(algorithm_id)
        return record is not None and record.is_certified

    def records(self) -> Iterator[AlgorithmRecord]:
        """All records in id order."""
        return iter(sorted(self._records.values(), key=lambda r: r.id))

    # ── transitions ──

    def submit(
        self, name: str, description: str, implementation: str, submitter: str,
    ) -> AlgorithmId:
        """Store a new PENDING record and return its id. Always succeeds."""
        self._last_id += 1
        algorithm_id = AlgorithmId(self._last_id)
        self._records[algorithm_id] = AlgorithmRecord(
            id=algorithm_id,
            submitter=Identity(submitter),
            name=name,
            description=description,
            implementation=implementation,
        )
        return algorithm_id

    def certify(self, algorithm_id: int, caller: str) -> AlgorithmRecord:
        """Mark the record CERTIFIED and stamp the certification date."""
        record = self._authorize(algorithm_id, caller)
        updated = replace(
            record, status=AlgorithmStatus.CERTIFIED, certification_date=self._clock(),
        )
        self._records[record.id] = updated
        return updated

    def revoke(self, algorithm_id: int, caller: str) -> AlgorithmRecord:
        """Mark the record REVOKED and clear the certification date, whatever its status."""
        record = self._authorize(algorithm_id, caller)
        updated = replace(
            record, status=AlgorithmStatus.REVOKED, certification_date=None,
        )
        self._records[record.id] = updated
        return updated

    def _authorize(self, algorithm_id: int, caller: str) -> AlgorithmRecord:
        record = self.find(algorithm_id)
        error = validate_certification(
            record, algorithm_id, caller, self.privileged_identity,
        )
        if error:
            raise error
        return record
