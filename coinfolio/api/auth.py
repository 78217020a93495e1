"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from coinfolio.api.dependencies import get_account_service, get_current_user
from coinfolio.schemas.auth import (
    AccountDeletedResponse,
    AuthResponse,
    TokenVerify,
    UserLogin,
    UserResponse,
    UserSignup,
)
from coinfolio.services.accounts import AccountService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    user_data: UserSignup,
    accounts: Annotated[AccountService, Depends(get_account_service)],
):
    """Register a new user."""
    return accounts.signup(user_data.full_name, user_data.email, user_data.password)


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    accounts: Annotated[AccountService, Depends(get_account_service)],
):
    """Login with email and password."""
    return accounts.login(credentials.email, credentials.password)


@router.post("/verify", response_model=UserResponse)
def verify(
    body: TokenVerify,
    accounts: Annotated[AccountService, Depends(get_account_service)],
):
    """Check a token passed in the request body."""
    return accounts.verify_token(body.token)


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.delete("/account", response_model=AccountDeletedResponse)
def delete_account(
    current_user: Annotated[UserResponse, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
):
    """Delete the current user's account and portfolio."""
    removed = accounts.delete_account(current_user.id)
    return AccountDeletedResponse(tracked_assets_removed=removed)
