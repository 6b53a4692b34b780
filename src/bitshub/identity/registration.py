"""User registration — commands and handler."""

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, List, String, Text, ValueObject
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.domain import bitshub, logger
from bitshub.identity.session import sign_in
from bitshub.identity.user import Address, User

REGISTERED_NOTICE = "Account created successfully! Please login now."


@bitshub.command(part_of="User")
class Register:
    """Create a user account and sign it in.

    Passwords are compared with each other and then dropped; nothing about
    them is stored.
    """

    full_name = Text(sanitize=False, default="")
    email = Text(required=True, sanitize=False)
    password = String(required=True, sanitize=False)
    confirm_password = String(required=True, sanitize=False)


@bitshub.command(part_of="User")
class RestoreUser:
    """Put a previously persisted user back into the registry."""

    user_id = Identifier(required=True)
    full_name = Text(sanitize=False, default="")
    email = Text(required=True, sanitize=False)
    is_admin = Boolean(default=False)
    addresses = List(content_type=ValueObject(Address))
    created_at = DateTime(required=True)


@bitshub.command_handler(part_of=User)
class RegistrationHandler:
    @handle(Register)
    def register(self, command):
        if command.password != command.confirm_password:
            raise ValidationError({"confirm_password": ["Passwords do not match"]})

        repo = current_domain.repository_for(User)
        if repo.query.filter(email=command.email).all().items:
            raise ValidationError({"email": ["Account with this email already exists. Please login."]})

        user = User.register(full_name=command.full_name, email=command.email, now=current_domain.clock.now())
        repo.add(user)
        sign_in(user.id)

        logger.info("User registered", user_id=user.id)
        return user.id

    @handle(RestoreUser)
    def restore_user(self, command):
        details = {
            "full_name": command.full_name,
            "email": command.email,
            "is_admin": command.is_admin,
            "addresses": command.addresses,
            "created_at": command.created_at,
        }

        repo = current_domain.repository_for(User)
        user = repo.get_or_none(command.user_id)
        if user is None:
            user = User(id=command.user_id, **details)
        else:
            # Same id restored twice: the later record wins
            for field, value in details.items():
                setattr(user, field, value)
        repo.add(user)
