"""User address book management — commands and handler.

Commands naming a user that is not in the registry are ignored.
"""

from protean.fields import Identifier, ValueObject
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.domain import bitshub, logger
from bitshub.identity.user import Address, User


@bitshub.command(part_of="User")
class AddAddress:
    """Add an address; it gets a fresh id whatever id the caller sent."""

    user_id = Identifier(required=True)
    address = ValueObject(Address, required=True)


@bitshub.command(part_of="User")
class UpdateAddress:
    """Replace the address with the same id."""

    user_id = Identifier(required=True)
    address = ValueObject(Address, required=True)


@bitshub.command(part_of="User")
class DeleteAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@bitshub.command(part_of="User")
class SetDefaultAddress:
    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@bitshub.command_handler(part_of=User)
class ManageAddressesHandler:
    def _user(self, user_id) -> User | None:
        user = current_domain.repository_for(User).get_or_none(user_id)
        if user is None:
            logger.warning("Address change for unknown user ignored", user_id=user_id)
        return user

    @handle(AddAddress)
    def add_address(self, command):
        user = self._user(command.user_id)
        if user is None:
            return None

        address = user.add_address(command.address)
        current_domain.repository_for(User).add(user)
        return address.id

    @handle(UpdateAddress)
    def update_address(self, command):
        user = self._user(command.user_id)
        if user is not None:
            user.update_address(command.address)
            current_domain.repository_for(User).add(user)

    @handle(DeleteAddress)
    def delete_address(self, command):
        user = self._user(command.user_id)
        if user is not None:
            user.remove_address(command.address_id)
            current_domain.repository_for(User).add(user)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        user = self._user(command.user_id)
        if user is not None:
            user.set_default_address(command.address_id)
            current_domain.repository_for(User).add(user)
