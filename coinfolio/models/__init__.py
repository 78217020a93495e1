"""SQLAlchemy models."""

from coinfolio.models.tracked_asset import TrackedAsset
from coinfolio.models.user import User

__all__ = [
    "User",
    "TrackedAsset",
]
