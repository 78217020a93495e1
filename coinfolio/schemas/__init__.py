"""Pydantic schemas for API requests and responses."""

from coinfolio.schemas.auth import (
    AccountDeletedResponse,
    AuthResponse,
    TokenVerify,
    UserLogin,
    UserResponse,
    UserSignup,
)
from coinfolio.schemas.crypto import (
    ListingEntry,
    MessageResponse,
    QuoteSnapshot,
    SearchResult,
    TrackedAssetCreate,
    TrackedAssetView,
)

__all__ = [
    "UserSignup",
    "UserLogin",
    "TokenVerify",
    "UserResponse",
    "AuthResponse",
    "AccountDeletedResponse",
    "QuoteSnapshot",
    "SearchResult",
    "ListingEntry",
    "TrackedAssetCreate",
    "TrackedAssetView",
    "MessageResponse",
]
