"""Sign-in and sign-out — commands and handler."""

from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from bitshub.config import get_settings
from bitshub.domain import bitshub, logger
from bitshub.identity.user import ADMIN_USER_ID, CURRENT_SESSION_ID, Session, User
from bitshub.ordering.cart.cart import SESSION_CART_ID, Cart


@bitshub.command(part_of="Session")
class Login:
    """Sign in by email.

    Only the administrator's password is checked. Registered users are matched
    on email alone.
    """

    email = String(required=True, sanitize=False)
    password = String(required=True, sanitize=False)


@bitshub.command(part_of="Session")
class Logout:
    pass


@bitshub.command(part_of="Session")
class RestoreSession:
    """Re-establish the persisted session for a known user."""

    user_id = Identifier(required=True)


def sign_in(user_id) -> Session:
    """Make ``user_id`` the signed-in user, replacing whoever was signed in."""
    repo = current_domain.repository_for(Session)
    now = current_domain.clock.now()

    session = repo.get_or_none(CURRENT_SESSION_ID)
    if session is None:
        session = Session.start(user_id, now)
    else:
        session.restart(user_id, now)
    repo.add(session)
    return session


@bitshub.command_handler(part_of=Session)
class SessionHandler:
    @handle(Login)
    def login(self, command):
        settings = get_settings()

        if command.email == settings.admin_email and command.password == settings.admin_password:
            user_id = ADMIN_USER_ID
        else:
            users = current_domain.repository_for(User).query.filter(email=command.email, is_admin=False)
            user = next(iter(users.limit(None).all().items), None)
            if user is None:
                raise ValidationError({"email": ["Account not found. Please sign up first."]})
            user_id = user.id

        sign_in(user_id)
        logger.info("User signed in", user_id=user_id)

    @handle(Logout)
    def logout(self, command):
        repo = current_domain.repository_for(Session)
        session = repo.get_or_none(CURRENT_SESSION_ID)
        if session is not None:
            repo._dao.delete(session)

        # The cart belongs to the session, not to the account
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(SESSION_CART_ID)
        cart.clear()
        cart_repo.add(cart)

    @handle(RestoreSession)
    def restore_session(self, command):
        user = current_domain.repository_for(User).get_or_none(command.user_id)
        known = command.user_id == ADMIN_USER_ID or user is not None
        if not known:
            logger.warning("Persisted session refers to an unknown user", user_id=command.user_id)
            return
        sign_in(command.user_id)
