"""Cryptocurrency quote and portfolio schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuoteSnapshot(BaseModel):
    """Live market data for one asset, as returned by a single upstream fetch."""

    model_config = ConfigDict(frozen=True)

    id: int
    symbol: str
    name: str
    rank: int | None = None
    price: float | None = None
    percent_change_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    last_updated: datetime | None = None


class SearchResult(BaseModel):
    """Search hit built from a quote snapshot."""

    id: int
    symbol: str
    name: str
    current_price: float | None = None
    price_change_percentage_24h: float | None = None
    market_cap: float | None = None
    cmc_rank: int | None = None

    @classmethod
    def from_snapshot(cls, snapshot: QuoteSnapshot) -> "SearchResult":
        return cls(
            id=snapshot.id,
            symbol=snapshot.symbol,
            name=snapshot.name,
            current_price=snapshot.price,
            price_change_percentage_24h=snapshot.percent_change_24h,
            market_cap=snapshot.market_cap,
            cmc_rank=snapshot.rank,
        )


class ListingEntry(SearchResult):
    """Ranked listing row; adds trading volume to the search view."""

    volume_24h: float | None = None

    @classmethod
    def from_snapshot(cls, snapshot: QuoteSnapshot) -> "ListingEntry":
        return cls(
            id=snapshot.id,
            symbol=snapshot.symbol,
            name=snapshot.name,
            current_price=snapshot.price,
            price_change_percentage_24h=snapshot.percent_change_24h,
            market_cap=snapshot.market_cap,
            cmc_rank=snapshot.rank,
            volume_24h=snapshot.volume_24h,
        )


class TrackedAssetCreate(BaseModel):
    """Add an asset to the current user's portfolio."""

    asset_id: int
    symbol: str = Field(..., max_length=50)
    name: str = Field(..., max_length=255)


class TrackedAssetView(BaseModel):
    """Tracked asset enriched with live quote fields.

    Quote fields stay null when the provider did not return the asset.
    """

    id: int
    symbol: str
    name: str
    added_at: datetime
    current_price: float | None = None
    price_change_percentage_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    cmc_rank: int | None = None
    last_updated: datetime | None = None


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
