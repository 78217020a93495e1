"""Wire models for CoinMarketCap API responses.

Only the fields this service reads are declared; everything else in the
payload is ignored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from coinfolio.schemas.crypto import QuoteSnapshot

QUOTE_CURRENCY = "USD"


class CmcStatus(BaseModel):
    """The ``status`` block present on every response."""

    error_code: int = 0
    error_message: str | None = None


class CmcEnvelope(BaseModel):
    """Top-level response envelope."""

    status: CmcStatus
    data: Any = None


class CmcQuote(BaseModel):
    """Per-currency quote block (``quote.USD``)."""

    price: float | None = None
    volume_24h: float | None = None
    percent_change_24h: float | None = None
    market_cap: float | None = None
    last_updated: datetime | None = None


class CmcAsset(BaseModel):
    """One cryptocurrency entry from the listings or quotes endpoints."""

    id: int
    name: str
    symbol: str
    cmc_rank: int | None = None
    last_updated: datetime | None = None
    quote: dict[str, CmcQuote] = Field(default_factory=dict)

    def to_snapshot(self) -> QuoteSnapshot:
        usd = self.quote.get(QUOTE_CURRENCY) or CmcQuote()
        return QuoteSnapshot(
            id=self.id,
            symbol=self.symbol,
            name=self.name,
            rank=self.cmc_rank,
            price=usd.price,
            percent_change_24h=usd.percent_change_24h,
            market_cap=usd.market_cap,
            volume_24h=usd.volume_24h,
            last_updated=usd.last_updated or self.last_updated,
        )
