"""Persistence for the assets each user tracks."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coinfolio.models.tracked_asset import TrackedAsset

logger = logging.getLogger(__name__)


class TrackedAssetStore:
    """(user, asset) pairs with their display metadata; one row per pair."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, asset_id: int) -> TrackedAsset | None:
        return (
            self.db.query(TrackedAsset)
            .filter(TrackedAsset.user_id == user_id, TrackedAsset.asset_id == asset_id)
            .first()
        )

    def add(self, user_id: int, asset_id: int, symbol: str, name: str) -> bool:
        """Insert a tracked asset. Returns False if the pair already exists."""
        if self.get(user_id, asset_id):
            return False

        tracked = TrackedAsset(
            user_id=user_id,
            asset_id=asset_id,
            symbol=symbol.upper(),
            name=name,
            added_at=datetime.now(UTC),
        )
        self.db.add(tracked)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Concurrent add of asset {asset_id} for user {user_id} lost the race")
            return False
        return True

    def remove(self, user_id: int, asset_id: int) -> bool:
        """Delete a tracked asset. Returns False if there was nothing to delete."""
        deleted = (
            self.db.query(TrackedAsset)
            .filter(TrackedAsset.user_id == user_id, TrackedAsset.asset_id == asset_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def list_for_user(self, user_id: int) -> list[TrackedAsset]:
        """All tracked assets for a user, in the order they were added."""
        return (
            self.db.query(TrackedAsset)
            .filter(TrackedAsset.user_id == user_id)
            .order_by(TrackedAsset.id)
            .all()
        )

    def purge_for_user(self, user_id: int) -> int:
        """Delete every tracked asset a user owns without committing."""
        deleted = (
            self.db.query(TrackedAsset)
            .filter(TrackedAsset.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted
