"""FastAPI dependencies for authentication, database and services."""

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from coinfolio.config import get_settings
from coinfolio.database import get_db
from coinfolio.schemas.auth import UserResponse
from coinfolio.services.accounts import AccountService
from coinfolio.services.portfolio import PortfolioAggregator
from coinfolio.services.quote_client import QuoteProviderClient
from coinfolio.services.tokens import TokenIssuer
from coinfolio.services.tracked_assets import TrackedAssetStore

security = HTTPBearer()


def get_account_service(
    db: Annotated[Session, Depends(get_db)],
) -> AccountService:
    """Get account service with its token issuer and tracked-asset purger."""
    return AccountService(db, TokenIssuer.from_settings(), TrackedAssetStore(db))


def get_quote_client() -> Generator[QuoteProviderClient, None, None]:
    """Provide a quote client for the duration of one request."""
    with QuoteProviderClient.from_settings() as client:
        yield client


def get_portfolio_service(
    db: Annotated[Session, Depends(get_db)],
    quotes: Annotated[QuoteProviderClient, Depends(get_quote_client)],
) -> PortfolioAggregator:
    """Get portfolio service with dependencies."""
    return PortfolioAggregator(
        TrackedAssetStore(db),
        quotes,
        listing_size=get_settings().search_listing_size,
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    """Get the current authenticated user from the bearer token."""
    return accounts.verify_token(credentials.credentials)
