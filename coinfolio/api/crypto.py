"""Cryptocurrency search and portfolio API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from coinfolio.api.dependencies import get_current_user, get_portfolio_service
from coinfolio.exceptions import ConflictError, NotFoundError
from coinfolio.schemas.auth import UserResponse
from coinfolio.schemas.crypto import (
    ListingEntry,
    MessageResponse,
    SearchResult,
    TrackedAssetCreate,
    TrackedAssetView,
)
from coinfolio.services.portfolio import PortfolioAggregator

router = APIRouter(prefix="/api/v1/crypto", tags=["crypto"])


@router.get("/search", response_model=list[SearchResult])
def search(
    portfolio: Annotated[PortfolioAggregator, Depends(get_portfolio_service)],
    q: Annotated[str, Query(max_length=100)] = "",
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """Search assets by name or symbol."""
    return portfolio.search(q, limit)


@router.get("/listings", response_model=list[ListingEntry])
def listings(
    portfolio: Annotated[PortfolioAggregator, Depends(get_portfolio_service)],
    limit: Annotated[int, Query(ge=1, le=5000)] = 100,
    start: Annotated[int, Query(ge=1)] = 1,
):
    """Get the ranked listing."""
    return portfolio.listings(limit, start)


@router.get("/portfolio", response_model=list[TrackedAssetView])
def list_portfolio(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    portfolio: Annotated[PortfolioAggregator, Depends(get_portfolio_service)],
):
    """List the current user's tracked assets with live quotes."""
    return portfolio.list_tracked_assets(current_user.id)


@router.post("/portfolio", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def add_to_portfolio(
    asset: TrackedAssetCreate,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    portfolio: Annotated[PortfolioAggregator, Depends(get_portfolio_service)],
):
    """Track an asset."""
    added = portfolio.add_tracked_asset(current_user.id, asset.asset_id, asset.symbol, asset.name)
    if not added:
        raise ConflictError("Asset is already in your portfolio")
    return MessageResponse(message="Asset added to portfolio")


@router.delete("/portfolio/{asset_id}", response_model=MessageResponse)
def remove_from_portfolio(
    asset_id: int,
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    portfolio: Annotated[PortfolioAggregator, Depends(get_portfolio_service)],
):
    """Stop tracking an asset."""
    if not portfolio.remove_tracked_asset(current_user.id, asset_id):
        raise NotFoundError("Asset is not in your portfolio")
    return MessageResponse(message="Asset removed from portfolio")
