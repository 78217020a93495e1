"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from coinfolio.api import auth, crypto
from coinfolio.api.errors import register_exception_handlers
from coinfolio.config import get_settings
from coinfolio.database import get_db, init_db, ping

settings = get_settings()

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    configure_logging()
    init_db()
    logger.info(f"Coinfolio API started ({settings.environment})")
    yield


app = FastAPI(
    title="Coinfolio API",
    description="Accounts and personal cryptocurrency portfolios with live CoinMarketCap quotes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:5173"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(crypto.router)


@app.get("/health")
def health_check(db: Annotated[Session, Depends(get_db)]):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "database": "connected" if ping(db) else "disconnected",
    }
