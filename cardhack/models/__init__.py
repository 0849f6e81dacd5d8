"""Pydantic models for the card draw service."""

from cardhack.models.deck_models import (
    CardImage,
    Deck,
    DeckCard,
    Interpretation,
)
from cardhack.models.draw_models import (
    CandidateView,
    DrawPhase,
    DrawResult,
    DrawSessionView,
)

__all__ = [
    # Deck content
    "CardImage",
    "Deck",
    "DeckCard",
    "Interpretation",
    # Draw sessions
    "CandidateView",
    "DrawPhase",
    "DrawResult",
    "DrawSessionView",
]
