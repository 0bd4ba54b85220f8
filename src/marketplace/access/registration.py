"""Member registration: commands and handler.

Only the storefront owner may register members, and an identity can hold a
single role for its lifetime.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.member import Member, Role
from marketplace.domain import marketplace
from marketplace.errors import AlreadyRegistered, Unauthorized
from marketplace.storefront.storefront import Storefront

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Member")
class RegisterClient:
    """Grant the Client role to an identity."""

    caller_id = Identifier(required=True)
    identity = Identifier(required=True)
    label = String(required=True, max_length=100)


@marketplace.command(part_of="Member")
class RegisterWarehouseWorker:
    """Grant the WarehouseWorker role to an identity."""

    caller_id = Identifier(required=True)
    identity = Identifier(required=True)
    label = String(required=True, max_length=100)


@marketplace.command(part_of="Member")
class RegisterDispatcherWorker:
    """Grant the DispatcherWorker role to an identity."""

    caller_id = Identifier(required=True)
    identity = Identifier(required=True)
    label = String(required=True, max_length=100)


@marketplace.command_handler(part_of=Member)
class RegistrationHandler:
    @handle(RegisterClient)
    def register_client(self, command):
        return self._register(command, Role.CLIENT)

    @handle(RegisterWarehouseWorker)
    def register_warehouse_worker(self, command):
        return self._register(command, Role.WAREHOUSE_WORKER)

    @handle(RegisterDispatcherWorker)
    def register_dispatcher_worker(self, command):
        return self._register(command, Role.DISPATCHER_WORKER)

    def _register(self, command, role: Role) -> str:
        storefront = current_domain.repository_for(Storefront).current()
        if not storefront.is_owner(command.caller_id):
            raise Unauthorized(f"Only the registry owner can register members, not {command.caller_id}")
        if storefront.is_owner(command.identity):
            raise AlreadyRegistered(f"{command.identity} is the registry owner")

        repo = current_domain.repository_for(Member)
        existing = repo.find(command.identity)
        if existing is not None:
            raise AlreadyRegistered(f"{command.identity} is already registered as {existing.role}")

        member = Member.register(identity=command.identity, role=role, label=command.label)
        repo.add(member)
        logger.info("Member registered", identity=command.identity, role=role.value)
        return str(member.identity)
