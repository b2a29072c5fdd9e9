"""Certified Token Registry — minting and ownership transfer of algorithm tokens.

Invariants:
    - mint is privileged-gated and needs a datetime certification_date;
      a rejected mint leaves the counter untouched
    - A minted token's owner starts as the minter; metadata never changes afterwards
    - transfer: NotFound before Unauthorized; only the current owner may transfer
    - algorithm_id is an opaque reference; existence/certification is the caller's concern
    - Tokens are never deleted or re-minted

Design Decisions:
    - Self-transfer and transfer to never-seen identities are accepted
    - Ownership lives on the record itself: owner_of is a plain lookup
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Iterator

from algoledger.core.domain_types import (
    DEFAULT_PRIVILEGED_IDENTITY, AlgorithmId, Identity, RegistryName, TokenId,
)
from algoledger.core.enforce_authority import (
    check_exists, validate_mint, validate_transfer,
)
from algoledger.core.records import CertifiedToken, index_unique


class CertifiedTokenRegistry:
    """Owns token records minted from certified algorithms."""

    name = RegistryName.TOKENS

    def __init__(
        self,
        privileged_identity: str = DEFAULT_PRIVILEGED_IDENTITY,
        records: Iterable[CertifiedToken] = (),
        last_id: int = 0,
    ):
        self.privileged_identity = privileged_identity
        self._tokens: dict[TokenId, CertifiedToken] = index_unique(
            records, lambda t: t.id, self.name,
        )
        self._last_id = max([last_id, *self._tokens])

    @property
    def last_id(self) -> int:
        return self._last_id

    def __len__(self) -> int:
        return len(self._tokens)

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._tokens

    def find(self, token_id: int) -> CertifiedToken | None:
        return self._tokens.get(TokenId(token_id))

    def get(self, token_id: int) -> CertifiedToken:
        token = self.find(token_id)
        error = check_exists(token, "Token", token_id, self.name)
        if error:
            raise error
        return token

    def owner_of(self, token_id: int) -> Identity:
        return self.get(token_id).owner

    def tokens_of(self, owner: str) -> list[CertifiedToken]:
        return [t for t in self.records() if t.owner == owner]

    def tokens_for_algorithm(self, algorithm_id: int) -> list[CertifiedToken]:
        return [t for t in self.records() if t.algorithm_id == algorithm_id]

    def records(self) -> Iterator[CertifiedToken]:
        return iter(sorted(self._tokens.values(), key=lambda t: t.id))

    def mint(
        self,
        name: str,
        description: str,
        algorithm_id: int,
        certification_date: datetime,
        minter: str,
    ) -> TokenId:
        """Create a token owned by the minter. Privileged identity only."""
        error = validate_mint(minter, self.privileged_identity, certification_date)
        if error:
            raise error

        self._last_id += 1
        token_id = TokenId(self._last_id)
        self._tokens[token_id] = CertifiedToken(
            id=token_id,
            name=name,
            description=description,
            algorithm_id=AlgorithmId(algorithm_id),
            certification_date=certification_date,
            owner=Identity(minter),
        )
        return token_id

    def transfer(self, token_id: int, sender: str, recipient: str) -> CertifiedToken:
        """Reassign ownership. Only the current owner may send."""
        token = self.find(token_id)
        error = validate_transfer(token, token_id, sender)
        if error:
            raise error

        updated = replace(token, owner=Identity(recipient))
        self._tokens[token.id] = updated
        return updated
