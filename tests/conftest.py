"""Pytest configuration and fixtures."""

import os

# Settings are cached on first import, so the test environment must be set first
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["COINMARKETCAP_API_KEY"] = "test-key"
os.environ["JWT_SECRET"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from coinfolio import models  # noqa: E402, F401
from coinfolio.api.dependencies import get_quote_client  # noqa: E402
from coinfolio.database import Base, get_db  # noqa: E402
from coinfolio.main import app  # noqa: E402
from coinfolio.schemas.crypto import QuoteSnapshot  # noqa: E402
from coinfolio.services.accounts import AccountService  # noqa: E402
from coinfolio.services.portfolio import PortfolioAggregator  # noqa: E402
from coinfolio.services.tokens import TokenIssuer  # noqa: E402
from coinfolio.services.tracked_assets import TrackedAssetStore  # noqa: E402

connect_args = {"check_same_thread": False} if "sqlite" in TEST_DATABASE_URL else {}
engine = create_engine(TEST_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


class FakeQuoteClient:
    """In-memory quote source that records every upstream call."""

    def __init__(self, snapshots: list[QuoteSnapshot] | None = None):
        self.snapshots = snapshots or []
        self.listing_calls: list[tuple[int, int]] = []
        self.id_calls: list[set[int]] = []

    def fetch_listing(self, limit: int = 100, start: int = 1) -> list[QuoteSnapshot]:
        self.listing_calls.append((limit, start))
        return self.snapshots[start - 1 : start - 1 + limit]

    def fetch_by_ids(self, ids) -> list[QuoteSnapshot]:
        wanted = set(ids)
        self.id_calls.append(wanted)
        return [s for s in self.snapshots if s.id in wanted]

    @property
    def call_count(self) -> int:
        return len(self.listing_calls) + len(self.id_calls)


def make_snapshot(asset_id: int, symbol: str, name: str, rank: int, price: float = 1.0):
    return QuoteSnapshot(
        id=asset_id,
        symbol=symbol,
        name=name,
        rank=rank,
        price=price,
        percent_change_24h=0.5,
        market_cap=price * 1_000_000,
        volume_24h=price * 10_000,
    )


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def snapshot():
    """Factory for quote snapshots."""
    return make_snapshot


@pytest.fixture
def quote_source():
    """Factory for in-memory quote sources."""
    return FakeQuoteClient


@pytest.fixture
def market():
    """Quote source with Bitcoin, Ethereum and a handful of other assets."""
    return FakeQuoteClient(
        [
            make_snapshot(1, "BTC", "Bitcoin", 1, price=65000.0),
            make_snapshot(1027, "ETH", "Ethereum", 2, price=3200.0),
            make_snapshot(825, "USDT", "Tether", 3),
            make_snapshot(5426, "SOL", "Solana", 4, price=150.0),
            make_snapshot(3717, "WBTC", "Wrapped Bitcoin", 5, price=64900.0),
        ]
    )


@pytest.fixture
def account_service(db):
    return AccountService(db, TokenIssuer("test-secret"), TrackedAssetStore(db))


@pytest.fixture
def portfolio(db, market):
    return PortfolioAggregator(TrackedAssetStore(db), market)


@pytest.fixture(scope="function")
def client(db, market):
    """Create a test client with database and quote provider overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_quote_client] = lambda: market
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"full_name": "Test User", "email": "test@example.com", "password": "testpass123"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )
