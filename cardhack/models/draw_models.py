"""Pydantic models describing draw sessions to callers."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DrawPhase(str, Enum):
    """Phases of a draw session."""

    SELECTING = "selecting"  # Face-down candidates shown
    REVEALING = "revealing"  # Image fixed, interpretation loading
    RESULT = "result"  # Card revealed


class DrawResult(BaseModel):
    """What the result screen shows for a revealed card."""

    card_id: int | None = Field(default=None, description="Revealed card identifier")
    card_title: str = Field(description="Card title, or a fallback when untitled")
    image_id: int | None = Field(default=None, description="Shown image identifier")
    image_url: str | None = Field(
        default=None,
        description="Artwork URL; None when the card has no images",
    )
    placeholder: str | None = Field(
        default=None,
        description="Glyph rendered in place of artwork when there is none",
    )
    caption: str = Field(default="", description="Caption of the shown image")
    interpretation_title: str | None = Field(default=None)
    interpretation_content: str | None = Field(default=None)
    message: str | None = Field(
        default=None,
        description="Notice shown when no interpretation is available",
    )


class CandidateView(BaseModel):
    """A candidate card as the caller may see it."""

    position: int = Field(description="Position among the displayed candidates")
    face_down: bool = Field(description="Whether the card is still face down")
    title: str | None = Field(default=None, description="Title, once flipped")
    image_url: str | None = Field(default=None, description="Artwork, once flipped")


class DrawSessionView(BaseModel):
    """Snapshot of a draw session returned by the API."""

    draw_id: str = Field(description="Identifier of the open draw")
    deck_id: int = Field(description="Deck being drawn from")
    deck_name: str = Field(description="Deck display name")
    card_back: str = Field(description="Card-back image URL")
    phase: DrawPhase = Field(description="Current phase")
    candidates: list[CandidateView] = Field(default_factory=list)
    selected_position: int | None = Field(default=None)
    loading: bool = Field(
        default=False,
        description="True while the interpretation is being fetched",
    )
    result: DrawResult | None = Field(default=None)
