"""Account service: signup, login, token verification and account deletion."""

import logging
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coinfolio.exceptions import (
    AccountDeletionError,
    AuthError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from coinfolio.models.user import User
from coinfolio.schemas.auth import AuthResponse, UserResponse
from coinfolio.services.credentials import (
    DUPLICATE_EMAIL_MESSAGE,
    CredentialStore,
    normalize_email,
)
from coinfolio.services.tokens import INVALID_TOKEN_MESSAGE, TokenIssuer

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class TrackedAssetPurger(Protocol):
    """Removes every tracked asset an account owns, inside the caller's transaction."""

    def purge_for_user(self, user_id: int) -> int: ...


class AccountService:
    """Service for account lifecycle and session operations."""

    def __init__(
        self,
        db: Session,
        tokens: TokenIssuer,
        tracked_assets: TrackedAssetPurger,
        credentials: CredentialStore | None = None,
    ):
        self.db = db
        self.tokens = tokens
        self.tracked_assets = tracked_assets
        self.credentials = credentials or CredentialStore(db)

    def signup(self, full_name: str, email: str, password: str) -> AuthResponse:
        """Create an account and start a session for it.

        Raises:
            ValidationError: a field is empty or the password is too short.
            ConflictError: the email (compared case-insensitively) is taken.
        """
        full_name = (full_name or "").strip()
        email = normalize_email(email or "")
        if not full_name or not email or not password:
            raise ValidationError("Full name, email and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        if self.credentials.get_by_email(email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        user = self.credentials.create(full_name, email, password)
        logger.info(f"Created account {user.id}")
        return self._start_session(user)

    def login(self, email: str, password: str) -> AuthResponse:
        """Authenticate by email and password.

        Unknown emails and wrong passwords fail with the same message.
        """
        email = normalize_email(email or "")
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.credentials.authenticate(email, password)
        if not user:
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        return self._start_session(user)

    def verify_token(self, token: str) -> UserResponse:
        """Resolve a bearer token to the account it was issued for."""
        claims = self.tokens.verify(token)
        user = self.credentials.get_by_id(claims.account_id)
        if user is None:
            raise AuthError(INVALID_TOKEN_MESSAGE)
        return UserResponse.model_validate(user)

    def get_account(self, account_id: int) -> UserResponse:
        user = self.credentials.get_by_id(account_id)
        if user is None:
            raise NotFoundError("Account not found")
        return UserResponse.model_validate(user)

    def delete_account(self, account_id: int) -> int:
        """Delete an account and every tracked asset it owns.

        Both deletions run in one transaction, so either everything is gone
        or nothing changed. Returns the number of tracked assets removed.

        Raises:
            NotFoundError: no account with this id exists.
            AccountDeletionError: a persistence step failed; ``stage`` is
                ``"tracked_assets"`` or ``"account"``.
        """
        try:
            purged = self.tracked_assets.purge_for_user(account_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to purge tracked assets for account {account_id}: {e}")
            raise AccountDeletionError(
                "Could not remove tracked assets", stage="tracked_assets"
            ) from e

        try:
            deleted = self.credentials.delete(account_id)
            if deleted:
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete account {account_id}: {e}")
            raise AccountDeletionError("Could not remove account", stage="account") from e

        if not deleted:
            self.db.rollback()
            raise NotFoundError("Account not found")

        logger.info(f"Deleted account {account_id} and {purged} tracked assets")
        return purged

    def _start_session(self, user: User) -> AuthResponse:
        token = self.tokens.issue(user.id, user.email)
        self.credentials.touch_last_login(user)
        return AuthResponse(access_token=token, user=UserResponse.model_validate(user))
