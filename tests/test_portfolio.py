"""Tests for asset search and the tracked-asset portfolio."""

import pytest

from coinfolio.exceptions import ValidationError
from coinfolio.models.user import User
from coinfolio.services.portfolio import PortfolioAggregator
from coinfolio.services.tracked_assets import TrackedAssetStore


@pytest.fixture
def user(db):
    """Create a portfolio owner."""
    test_user = User(full_name="Portfolio Test", email="folio@example.com", password_hash="fake")
    db.add(test_user)
    db.commit()
    return test_user


def test_search_finds_bitcoin_first(db, quote_source, snapshot):
    """Test 'bt' matches Bitcoin first among unrelated assets."""
    listing = [snapshot(1, "BTC", "Bitcoin", 1)]
    listing += [snapshot(100 + i, f"Z{i:02d}", f"Filler {i}", i + 2) for i in range(20)]
    quotes = quote_source(listing)
    service = PortfolioAggregator(TrackedAssetStore(db), quotes)

    results = service.search("bt", 5)

    assert results[0].name == "Bitcoin"
    assert results[0].cmc_rank == 1
    assert len(results) <= 5
    assert quotes.listing_calls == [(1000, 1)]


def test_search_keeps_upstream_order(portfolio):
    """Test matches on name and symbol keep the provider's rank order."""
    results = portfolio.search("bitcoin")
    assert [r.symbol for r in results] == ["BTC", "WBTC"]


def test_search_is_case_insensitive_and_trimmed(portfolio):
    """Test the query is lower-cased and trimmed before matching."""
    results = portfolio.search("  SOL ")
    assert [r.id for r in results] == [5426]


def test_search_matches_symbol_substring(portfolio):
    """Test a symbol fragment matches."""
    results = portfolio.search("us")
    assert [r.symbol for r in results] == ["USDT"]


def test_search_truncates_to_limit(portfolio):
    """Test results stop at the limit."""
    assert len(portfolio.search("bitcoin", limit=1)) == 1


def test_search_maps_quote_fields(portfolio):
    """Test search results expose price data."""
    result = portfolio.search("sol")[0]
    assert result.current_price == 150.0
    assert result.price_change_percentage_24h == 0.5
    assert result.market_cap == 150.0 * 1_000_000


@pytest.mark.parametrize("query", ["", " ", "b", "  b  "])
def test_search_rejects_short_query(portfolio, market, query):
    """Test queries under two characters are rejected without an upstream call."""
    with pytest.raises(ValidationError):
        portfolio.search(query)
    assert market.call_count == 0


def test_search_rejects_non_positive_limit(portfolio):
    """Test a zero limit is rejected."""
    with pytest.raises(ValidationError):
        portfolio.search("bitcoin", limit=0)


def test_search_listing_size_is_configurable(db, market):
    """Test the aggregator fetches the configured listing size."""
    service = PortfolioAggregator(TrackedAssetStore(db), market, listing_size=250)
    service.search("eth")
    assert market.listing_calls == [(250, 1)]


def test_listings_page(portfolio, market):
    """Test listings pass paging through and include volume."""
    entries = portfolio.listings(limit=2, start=2)
    assert [e.symbol for e in entries] == ["ETH", "USDT"]
    assert entries[0].volume_24h == 3200.0 * 10_000
    assert market.listing_calls == [(2, 2)]


def test_add_tracked_asset_twice(portfolio, user):
    """Test a duplicate add returns False and keeps a single row."""
    assert portfolio.add_tracked_asset(user.id, 1, "btc", "Bitcoin") is True
    assert portfolio.add_tracked_asset(user.id, 1, "BTC", "Bitcoin Again") is False

    tracked = portfolio.list_tracked_assets(user.id)
    assert len(tracked) == 1
    assert tracked[0].name == "Bitcoin"


def test_add_tracked_asset_uppercases_symbol(portfolio, user, db):
    """Test symbols are stored upper-cased with a timestamp."""
    portfolio.add_tracked_asset(user.id, 5426, "sol", "Solana")
    stored = TrackedAssetStore(db).get(user.id, 5426)
    assert stored.symbol == "SOL"
    assert stored.added_at is not None


def test_same_asset_for_different_users(portfolio, user, db):
    """Test uniqueness is per user."""
    other = User(full_name="Other", email="other@example.com", password_hash="fake")
    db.add(other)
    db.commit()

    assert portfolio.add_tracked_asset(user.id, 1, "BTC", "Bitcoin") is True
    assert portfolio.add_tracked_asset(other.id, 1, "BTC", "Bitcoin") is True


def test_add_tracked_asset_lost_race(db, user):
    """Test a unique-index violation after the existence check returns False."""
    store = TrackedAssetStore(db)
    store.add(user.id, 1, "BTC", "Bitcoin")
    store.get = lambda user_id, asset_id: None
    assert store.add(user.id, 1, "BTC", "Bitcoin") is False


@pytest.mark.parametrize(
    "asset_id,symbol,name",
    [
        (0, "BTC", "Bitcoin"),
        (-1, "BTC", "Bitcoin"),
        (2**31, "BTC", "Bitcoin"),
        (2**64, "BTC", "Bitcoin"),
        (1, "", "Bitcoin"),
        (1, "BTC", "  "),
    ],
)
def test_add_tracked_asset_validation(portfolio, user, asset_id, symbol, name):
    """Test invalid asset input is rejected."""
    with pytest.raises(ValidationError):
        portfolio.add_tracked_asset(user.id, asset_id, symbol, name)


def test_remove_tracked_asset(portfolio, user):
    """Test removing reports whether a row existed."""
    portfolio.add_tracked_asset(user.id, 1, "BTC", "Bitcoin")
    assert portfolio.remove_tracked_asset(user.id, 1) is True
    assert portfolio.remove_tracked_asset(user.id, 1) is False
    assert portfolio.list_tracked_assets(user.id) == []


def test_remove_out_of_range_asset(portfolio, user):
    """Test ids no row can hold are simply not tracked."""
    assert portfolio.remove_tracked_asset(user.id, 2**64) is False
    assert portfolio.remove_tracked_asset(user.id, 0) is False


def test_list_empty_portfolio_skips_upstream(portfolio, user, market):
    """Test an empty portfolio makes no upstream call."""
    assert portfolio.list_tracked_assets(user.id) == []
    assert market.call_count == 0


def test_list_tracked_assets_joins_quotes(portfolio, user, market):
    """Test tracked assets are enriched in insertion order with one call."""
    portfolio.add_tracked_asset(user.id, 5426, "SOL", "Solana")
    portfolio.add_tracked_asset(user.id, 1, "BTC", "Bitcoin")
    portfolio.add_tracked_asset(user.id, 1027, "ETH", "Ethereum")

    tracked = portfolio.list_tracked_assets(user.id)

    assert [t.symbol for t in tracked] == ["SOL", "BTC", "ETH"]
    assert tracked[1].current_price == 65000.0
    assert tracked[1].cmc_rank == 1
    assert tracked[1].volume_24h == 65000.0 * 10_000
    assert market.id_calls == [{5426, 1, 1027}]
    assert market.listing_calls == []


def test_list_tracked_assets_tolerates_missing_quotes(portfolio, user):
    """Test assets the provider omits come back with null quote fields."""
    portfolio.add_tracked_asset(user.id, 1, "BTC", "Bitcoin")
    portfolio.add_tracked_asset(user.id, 999999, "GONE", "Delisted Coin")

    tracked = portfolio.list_tracked_assets(user.id)

    assert len(tracked) == 2
    gone = tracked[1]
    assert gone.id == 999999
    assert gone.symbol == "GONE"
    assert gone.current_price is None
    assert gone.cmc_rank is None
    assert gone.last_updated is None
