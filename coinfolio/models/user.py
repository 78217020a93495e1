"""User model."""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from coinfolio.database import Base


class User(Base):
    """Account holder; email is stored lower-cased so the unique index is case-insensitive."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    # Signup time; updated_at moves on profile changes and logins
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    tracked_assets = relationship(
        "TrackedAsset",
        back_populates="user",
        passive_deletes=True,
        order_by="TrackedAsset.id",
    )
