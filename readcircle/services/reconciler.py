"""Membership reconciliation for many-to-many associations."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from readcircle.domain.associations import MemberRef, RelationKind
from readcircle.domain.errors import NoChangeError, NotFoundError
from readcircle.ports.associations import AssociationPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    """The minimal change between a current and a requested membership set."""

    to_add: frozenset[int] = frozenset()
    to_remove: frozenset[int] = frozenset()

    @property
    def no_op(self) -> bool:
        return not self.to_add and not self.to_remove

    def references(self, relation: RelationKind) -> list[MemberRef]:
        """Identity-only references for every member to add."""
        return [MemberRef(relation=relation, member_id=member_id) for member_id in sorted(self.to_add)]


class SetReconciler:
    """
    Add and remove members of an owner's set through the association port.

    Adding and removing are separate operations. An operation that would
    change nothing raises ``NoChangeError`` before touching storage.
    """

    def __init__(self, associations: AssociationPort) -> None:
        self._associations = associations

    @staticmethod
    def plan_add(current: Iterable[int], requested: Iterable[int]) -> Reconciliation:
        return Reconciliation(to_add=frozenset(requested) - frozenset(current))

    @staticmethod
    def plan_remove(current: Iterable[int], requested: Iterable[int]) -> Reconciliation:
        return Reconciliation(to_remove=frozenset(current) & frozenset(requested))

    async def add(self, relation: RelationKind, owner_id: int, requested: Iterable[int]) -> set[int]:
        """Link the requested members that are not linked yet; return the ids linked."""
        label = relation.member_label
        current = await self._associations.member_ids(relation, owner_id)
        plan = self.plan_add(current, requested)
        if plan.no_op:
            raise NoChangeError(f"{label} already exist")

        known = await self._associations.existing_member_ids(relation, plan.to_add)
        if not known:
            raise NotFoundError(f"no {label} with the given ids were found")
        unknown = plan.to_add - known
        if unknown:
            logger.warning("Skipping unknown %s for %s %s: %s", label, relation.value, owner_id, sorted(unknown))

        plan = Reconciliation(to_add=frozenset(known))
        linked = await self._associations.link(owner_id, plan.references(relation))
        logger.info("Added %d %s to %s %s", len(linked), label, relation.value, owner_id)
        return linked

    async def remove(self, relation: RelationKind, owner_id: int, requested: Iterable[int]) -> set[int]:
        """Unlink the requested members that are currently linked; return the ids unlinked."""
        label = relation.member_label
        current = await self._associations.member_ids(relation, owner_id)
        plan = self.plan_remove(current, requested)
        if plan.no_op:
            raise NoChangeError(f"no {label} to remove")

        removed = await self._associations.unlink(relation, owner_id, plan.to_remove)
        logger.info("Removed %d %s from %s %s", len(removed), label, relation.value, owner_id)
        return removed
