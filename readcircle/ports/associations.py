"""Association port: membership rows for the four relation kinds."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from readcircle.domain.associations import MemberRef, RelationKind


class AssociationPort(ABC):
    """Reads and writes (owner, member) pairs by id."""

    @abstractmethod
    async def member_ids(self, relation: RelationKind, owner_id: int) -> set[int]:
        """Return the ids currently linked to ``owner_id``."""
        ...

    @abstractmethod
    async def existing_member_ids(self, relation: RelationKind, member_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``member_ids`` that exist as member rows."""
        ...

    @abstractmethod
    async def link(self, owner_id: int, refs: Iterable[MemberRef]) -> set[int]:
        """
        Insert-if-absent one association per reference.

        Returns the member ids that were actually inserted; pairs that
        already existed are skipped, never duplicated.
        """
        ...

    @abstractmethod
    async def unlink(self, relation: RelationKind, owner_id: int, member_ids: Iterable[int]) -> set[int]:
        """Remove-if-present; returns the member ids that were actually removed."""
        ...
