"""Credential storage and password hashing."""

import logging
from datetime import UTC, datetime

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coinfolio.config import get_settings
from coinfolio.exceptions import ConflictError
from coinfolio.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

DUPLICATE_EMAIL_MESSAGE = "An account with this email already exists"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def normalize_email(email: str) -> str:
    """Lower-case and trim an email so lookups are case-insensitive."""
    return email.strip().lower()


class CredentialStore:
    """Account records keyed by normalized email."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, full_name: str, email: str, password: str) -> User:
        """Hash the password and insert a new account.

        Raises:
            ConflictError: if the normalized email is already taken, including
                when a concurrent signup wins the unique index.
        """
        user = User(
            full_name=full_name,
            email=normalize_email(email),
            password_hash=get_password_hash(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info("Signup lost the unique email race")
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from e
        self.db.refresh(user)
        return user

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the account if the password matches, else None."""
        user = self.get_by_email(email)
        if not user:
            # Keep timing close to a real comparison
            pwd_context.dummy_verify()
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def touch_last_login(self, user: User) -> None:
        user.last_login_at = datetime.now(UTC)
        self.db.commit()

    def delete(self, user_id: int) -> bool:
        """Delete the account row without committing; the caller owns the transaction."""
        deleted = self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self.db.flush()
        return deleted > 0
