"""Portfolio service: asset search and tracked assets joined with live quotes."""

import logging
from collections.abc import Iterable
from typing import Protocol

from coinfolio.database import MAX_INTEGER_ID
from coinfolio.exceptions import ValidationError
from coinfolio.schemas.crypto import ListingEntry, QuoteSnapshot, SearchResult, TrackedAssetView
from coinfolio.services.tracked_assets import TrackedAssetStore

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
DEFAULT_LISTING_SIZE = 1000


class QuoteSource(Protocol):
    """Upstream quote lookups the aggregator needs."""

    def fetch_listing(self, limit: int = 100, start: int = 1) -> list[QuoteSnapshot]: ...

    def fetch_by_ids(self, ids: Iterable[int]) -> list[QuoteSnapshot]: ...


class PortfolioAggregator:
    """Service for searching assets and building a user's enriched portfolio."""

    def __init__(
        self,
        store: TrackedAssetStore,
        quotes: QuoteSource,
        listing_size: int = DEFAULT_LISTING_SIZE,
    ):
        self.store = store
        self.quotes = quotes
        self.listing_size = listing_size

    def search(self, query: str, limit: int = 20) -> list[SearchResult]:
        """Substring search over the top of the ranked listing.

        Matches are case-insensitive against name or symbol and keep the
        provider's rank order. No fuzzy matching or scoring.
        """
        term = (query or "").strip().lower()
        if len(term) < MIN_QUERY_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_QUERY_LENGTH} characters"
            )
        if limit < 1:
            raise ValidationError("Search limit must be positive")

        listing = self.quotes.fetch_listing(limit=self.listing_size, start=1)

        results = []
        for snapshot in listing:
            if term in snapshot.name.lower() or term in snapshot.symbol.lower():
                results.append(SearchResult.from_snapshot(snapshot))
                if len(results) >= limit:
                    break

        logger.debug(f"Search '{term}' matched {len(results)} of {len(listing)} assets")
        return results

    def listings(self, limit: int = 100, start: int = 1) -> list[ListingEntry]:
        """Ranked listing page, as provided upstream."""
        if limit < 1 or start < 1:
            raise ValidationError("Listing limit and start must be positive")
        return [ListingEntry.from_snapshot(s) for s in self.quotes.fetch_listing(limit, start)]

    def add_tracked_asset(self, user_id: int, asset_id: int, symbol: str, name: str) -> bool:
        """Track an asset for a user. Returns False if it is already tracked."""
        symbol = (symbol or "").strip()
        name = (name or "").strip()
        if not 1 <= asset_id <= MAX_INTEGER_ID:
            raise ValidationError("Asset id must be a positive integer")
        if not symbol or not name:
            raise ValidationError("Asset symbol and name are required")

        return self.store.add(user_id, asset_id, symbol, name)

    def remove_tracked_asset(self, user_id: int, asset_id: int) -> bool:
        """Stop tracking an asset. Returns False if it was not tracked."""
        if not 1 <= asset_id <= MAX_INTEGER_ID:
            return False
        return self.store.remove(user_id, asset_id)

    def list_tracked_assets(self, user_id: int) -> list[TrackedAssetView]:
        """Tracked assets in the order they were added, with live quote fields.

        Makes one upstream call for the whole portfolio, and none when the
        portfolio is empty. Assets the provider omits keep null quote fields.
        """
        tracked = self.store.list_for_user(user_id)
        if not tracked:
            return []

        snapshots = self.quotes.fetch_by_ids({t.asset_id for t in tracked})
        by_id = {s.id: s for s in snapshots}

        views = []
        for t in tracked:
            snapshot = by_id.get(t.asset_id)
            view = TrackedAssetView(
                id=t.asset_id,
                symbol=t.symbol,
                name=t.name,
                added_at=t.added_at,
            )
            if snapshot is not None:
                view.current_price = snapshot.price
                view.price_change_percentage_24h = snapshot.percent_change_24h
                view.market_cap = snapshot.market_cap
                view.volume_24h = snapshot.volume_24h
                view.cmc_rank = snapshot.rank
                view.last_updated = snapshot.last_updated
            views.append(view)

        missing = len(tracked) - sum(1 for t in tracked if t.asset_id in by_id)
        if missing:
            logger.warning(f"Provider returned no quote for {missing} tracked assets of user {user_id}")
        return views
