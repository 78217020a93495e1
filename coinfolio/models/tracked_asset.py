"""Tracked asset model for a user's watched cryptocurrencies."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from coinfolio.database import Base


class TrackedAsset(Base):
    """An upstream asset a user has added to their portfolio."""

    __tablename__ = "tracked_assets"
    __table_args__ = (
        UniqueConstraint("user_id", "asset_id", name="uq_tracked_assets_user_asset"),
    )

    id = Column(Integer, primary_key=True, index=True)  # insertion order
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    asset_id = Column(Integer, nullable=False)  # CoinMarketCap id, not the symbol
    symbol = Column(String(50), nullable=False)  # Always upper-cased
    name = Column(String(255), nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    user = relationship("User", back_populates="tracked_assets")
