"""User aggregate with its Address book, and the active Session.

Registered users live in a single registry keyed by id. The session refers to
a user by id only, so there is exactly one copy of every user and its address
book. The administrator is a fixed identity that never enters the registry;
its record is synthesised from configuration when needed.
"""

from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, List, Text, ValueObject

from bitshub.config import get_settings
from bitshub.domain import bitshub

ADMIN_USER_ID = "admin"

# There is only ever one session
CURRENT_SESSION_ID = "current"


@bitshub.value_object
class Address:
    """A delivery address in a user's address book.

    Orders keep a copy of the address they ship to, so later edits to the
    address book do not change where a placed order goes.
    """

    id = Identifier()
    name = Text(required=True, sanitize=False)
    phone = Text(required=True, sanitize=False)
    address_line1 = Text(required=True, sanitize=False)
    address_line2 = Text(sanitize=False)
    city = Text(required=True, sanitize=False)
    state = Text(required=True, sanitize=False)
    pincode = Text(required=True, sanitize=False)
    is_default = Boolean(default=False)


@bitshub.aggregate
class User:
    """A person who can sign in, keep addresses and place orders.

    Address book rules kept here:

    * the first address ever added is always the default;
    * ``set_default_address`` leaves exactly one default;
    * adding another address flagged as default does not demote the current
      default, and removing the default does not promote another one.
    """

    full_name = Text(sanitize=False, default="")
    email = Text(required=True, sanitize=False)
    is_admin = Boolean(default=False)
    addresses = List(content_type=ValueObject(Address))
    created_at = DateTime(required=True)

    @classmethod
    def register(cls, full_name, email, now) -> "User":
        return cls(full_name=full_name, email=email, is_admin=False, addresses=[], created_at=now)

    @property
    def default_address(self) -> Address | None:
        """The address to preselect at checkout: the default, else the first."""
        return next((a for a in self.addresses if a.is_default), self.addresses[0] if self.addresses else None)

    def find_address(self, address_id) -> Address | None:
        return next((a for a in self.addresses if a.id == address_id), None)

    # -------------------------------------------------------------------
    # Address book
    # -------------------------------------------------------------------
    def add_address(self, address: Address) -> Address:
        # First address is always default
        is_default = True if not self.addresses else address.is_default
        added = address.replace(id=str(uuid4()), is_default=is_default)
        self.addresses = [*self.addresses, added]
        return added

    def update_address(self, address: Address) -> None:
        self.addresses = [address if a.id == address.id else a for a in self.addresses]

    def remove_address(self, address_id) -> None:
        self.addresses = [a for a in self.addresses if a.id != address_id]

    def set_default_address(self, address_id) -> None:
        if self.find_address(address_id) is None:
            raise ValidationError({"address_id": [f"Address {address_id} not found"]})

        self.addresses = [a.replace(is_default=a.id == address_id) for a in self.addresses]


@bitshub.aggregate
class Session:
    """The signed-in user, by reference."""

    user_id = Identifier(required=True)
    started_at = DateTime(required=True)

    @classmethod
    def start(cls, user_id, now) -> "Session":
        return cls(id=CURRENT_SESSION_ID, user_id=user_id, started_at=now)

    def restart(self, user_id, now) -> None:
        self.user_id = user_id
        self.started_at = now


def admin_user(session: Session) -> User:
    return User(
        id=ADMIN_USER_ID,
        full_name="Admin User",
        email=get_settings().admin_email,
        is_admin=True,
        addresses=[],
        created_at=session.started_at,
    )
