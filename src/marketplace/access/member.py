"""Member aggregate: an identity's role in the marketplace.

Roles are granted once by the registry owner and never change. Workers also
carry their current claim: the order they last took from a stage queue. A new
claim overwrites the previous one; completing a stage does not clear it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from marketplace.access.events import MemberRegistered, OrderClaimed
from marketplace.domain import marketplace


class Role(Enum):
    CLIENT = "Client"
    WAREHOUSE_WORKER = "WarehouseWorker"
    DISPATCHER_WORKER = "DispatcherWorker"


_WORKER_ROLES = {Role.WAREHOUSE_WORKER, Role.DISPATCHER_WORKER}


@marketplace.aggregate
class Member:
    identity = Identifier(identifier=True, required=True)
    role = String(required=True, choices=Role)
    label = String(required=True, max_length=100)
    claimed_order_id = Identifier()
    registered_at = DateTime()
    claimed_at = DateTime()

    @invariant.post
    def only_workers_hold_claims(self):
        if self.claimed_order_id and Role(self.role) not in _WORKER_ROLES:
            raise ValidationError({"claimed_order_id": ["Only workers can claim orders"]})

    @classmethod
    def register(cls, identity: str, role: Role, label: str):
        now = datetime.now(UTC)
        member = cls(identity=identity, role=role.value, label=label, registered_at=now)
        member.raise_(
            MemberRegistered(
                identity=identity,
                role=role.value,
                label=label,
                registered_at=now,
            )
        )
        return member

    def holds(self, role: Role) -> bool:
        return Role(self.role) == role

    def claim(self, order_id: str) -> None:
        """Record ``order_id`` as the order this worker is handling."""
        now = datetime.now(UTC)
        self.claimed_order_id = order_id
        self.claimed_at = now
        self.raise_(
            OrderClaimed(
                identity=str(self.identity),
                role=self.role,
                order_id=order_id,
                claimed_at=now,
            )
        )


@marketplace.repository(part_of=Member)
class MemberRepository:
    def find(self, identity: str) -> Member | None:
        """Return the member registered under ``identity``, if any."""
        return self._dao.query.filter(identity=identity).all().first

    def role_of(self, identity: str) -> Role | None:
        member = self.find(identity)
        return Role(member.role) if member else None
