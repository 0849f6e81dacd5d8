"""Pydantic models for deck content.

A ``Deck`` is a read-only snapshot of what the deck content service
returned at load time. The draw engine never mutates it; editing a deck
requires loading a fresh snapshot.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNTITLED_CARD = "Untitled"


def _none_to_empty(value):
    return "" if value is None else value


class Interpretation(BaseModel):
    """A titled block of text attached to an image, with a relative weight."""

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Interpretation identifier")
    title: str = Field(default="", description="Interpretation title")
    content: str = Field(default="", description="Free-text interpretation body")
    numerator: int | None = Field(
        default=None,
        description="Relative selection weight; missing or non-positive counts as 1",
    )

    blank_text = field_validator("title", "content", mode="before")(_none_to_empty)


class CardImage(BaseModel):
    """One visual variant of a card.

    ``interpretations`` is ``None`` while unknown (not yet fetched) and a
    tuple, possibly empty, once known.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Image identifier")
    url: str = Field(default="", description="Image URL")
    caption: str = Field(default="", description="Image caption")
    interpretations: tuple[Interpretation, ...] | None = Field(
        default=None,
        description="Interpretations, or None when not fetched",
    )

    blank_text = field_validator("url", "caption", mode="before")(_none_to_empty)


class DeckCard(BaseModel):
    """A single drawable unit within a deck."""

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Card identifier")
    title: str = Field(default="", description="Card title")
    images: tuple[CardImage, ...] = Field(
        default=(),
        description="Ordered image variants (may be empty)",
    )

    blank_text = field_validator("title", mode="before")(_none_to_empty)

    @field_validator("images", mode="before")
    @classmethod
    def no_images(cls, value):
        return () if value is None else value

    @property
    def display_title(self) -> str:
        return self.title or UNTITLED_CARD


class Deck(BaseModel):
    """Immutable snapshot of a deck used for drawing."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Deck identifier")
    name: str = Field(default="", description="Deck display name")
    card_style: str | None = Field(
        default=None,
        description="Card-back image URL; the configured default is used when empty",
    )
    cards: tuple[DeckCard, ...] = Field(default=(), description="Ordered cards")
