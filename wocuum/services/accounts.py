import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wocuum.config import Settings
from wocuum.errors import AuthenticationFailed, CapacityReached, Conflict, NotFound
from wocuum.models.booking import Booking
from wocuum.models.user import User
from wocuum.schemas.user import RegisterRequest
from wocuum.utils.auth import get_password_hash, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password!"


class AccountService:
    """Registration, credential checks and account removal."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register(self, data: RegisterRequest) -> User:
        """
        Create a user account.

        Raises Conflict when the email is taken and CapacityReached when the
        configured number of accounts already exists.
        """
        if self.db.query(User).filter(User.email == data.email).first():
            logger.warning(f"Registration rejected for {data.email}: user already exists")
            raise Conflict("User with this email already exists")

        limit = self.settings.MAX_REGISTERED_USERS
        if limit is not None and self.db.query(User).count() >= limit:
            logger.warning(f"Registration rejected for {data.email}: limit of {limit} users reached")
            raise CapacityReached("Registration is closed: the maximum number of users has been reached")

        user = User(
            email=data.email,
            password_hash=get_password_hash(data.password),
            full_name=data.full_name or None,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("User with this email already exists")
        self.db.refresh(user)

        logger.info(f"User registered: {user.email}")
        return user

    def authenticate(self, email: str, password: str) -> User:
        logger.info(f"Login attempt: {email}")

        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            logger.warning(f"Login failed for {email}: unknown email")
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed for {email}: wrong password")
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        logger.info(f"Login successful: {email}")
        return user

    def request_password_reset(self, email: str) -> None:
        # Answered identically whether or not the email is registered.
        # TODO: issue an expiring reset token and email a reset link once a mail provider is configured.
        logger.info(f"Password reset requested: {email}")

    def get_user(self, user_id: str) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotFound("User not found")
        return user

    def delete_account(self, user_id: str, password: str) -> None:
        """Remove the user and all of their bookings after re-checking the password."""
        user = self.get_user(user_id)
        email = user.email
        if not verify_password(password, user.password_hash):
            logger.warning(f"Account deletion refused for {email}: invalid password")
            raise AuthenticationFailed("Invalid password")

        try:
            self.db.query(Booking).filter(Booking.user_id == user.id).delete()
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.warning(f"User account deleted: {email}")
