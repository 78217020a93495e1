"""Bearer token issuing and verification.

Tokens are HS256 JWTs carrying the account id (``sub``), the email and an
expiry exactly seven days after issue. Verification is purely cryptographic
and clock-based; checking that the account still exists is left to the
account service.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from coinfolio.config import Settings, get_settings
from coinfolio.database import MAX_INTEGER_ID
from coinfolio.exceptions import AuthError

TOKEN_LIFETIME = timedelta(days=7)
INVALID_TOKEN_MESSAGE = "Invalid or expired token"  # noqa: S105


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token."""

    account_id: int
    email: str
    expires_at: datetime


class TokenIssuer:
    """Stateless signer/verifier for bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TokenIssuer":
        settings = settings or get_settings()
        return cls(settings.jwt_secret, settings.jwt_algorithm)

    def issue(self, account_id: int, email: str, issued_at: datetime | None = None) -> str:
        """Create a signed token that expires seven days after ``issued_at``."""
        issued_at = issued_at or datetime.now(UTC)
        to_encode = {
            "sub": str(account_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + TOKEN_LIFETIME,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Decode and validate a token.

        Raises:
            AuthError: if the token is malformed, badly signed, expired or
                lacks the account id / email claims.
        """
        if not token or not isinstance(token, str):
            raise AuthError(INVALID_TOKEN_MESSAGE)

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise AuthError(INVALID_TOKEN_MESSAGE) from e

        sub = payload.get("sub")
        email = payload.get("email")
        exp = payload.get("exp")
        if not isinstance(sub, str) or not sub.isdigit():
            raise AuthError(INVALID_TOKEN_MESSAGE)
        if not 1 <= int(sub) <= MAX_INTEGER_ID:
            raise AuthError(INVALID_TOKEN_MESSAGE)
        if not isinstance(email, str) or not isinstance(exp, int | float):
            raise AuthError(INVALID_TOKEN_MESSAGE)

        expires_at = datetime.fromtimestamp(exp, tz=UTC)
        if expires_at <= datetime.now(UTC):
            raise AuthError(INVALID_TOKEN_MESSAGE)

        return TokenClaims(account_id=int(sub), email=email, expires_at=expires_at)
