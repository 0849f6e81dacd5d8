"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardhack.api import draws
from cardhack.core.config import get_settings
from cardhack.core.logging_config import setup_logging
from cardhack.middleware.logging_middleware import RequestLoggingMiddleware
from cardhack.services.deck_client import DeckContentClient

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    app.state.deck_client = DeckContentClient(settings)
    yield
    await app.state.deck_client.aclose()


app = FastAPI(
    title="CardHack Draw API",
    description="Test draws for card decks with weighted image and interpretation variants",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(draws.router, prefix="/draws", tags=["draws"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "CardHack Draw API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
