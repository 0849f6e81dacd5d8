"""Shared pytest fixtures."""

import pytest

from cardhack.models.deck_models import CardImage, Deck, DeckCard, Interpretation


def make_loader(interpretations=None):
    """Build an async interpretation loader that records the image ids it is asked for.

    Args:
        interpretations: Mapping of image id to the list (or None) to return.
            Unknown ids return an empty list.
    """
    interpretations = interpretations or {}
    calls = []

    async def loader(image_id):
        calls.append(image_id)
        return interpretations.get(image_id, [])

    loader.calls = calls
    return loader


@pytest.fixture
def sample_deck():
    """Fixture providing a five-card deck with varied image setups."""
    return Deck(
        id=1,
        name="Moon Oracle",
        card_style="https://cdn.test/back.png",
        cards=(
            DeckCard(
                id=101,
                title="The Moon",
                images=(
                    CardImage(id=11, url="https://cdn.test/moon-a.png", caption="Waxing"),
                    CardImage(id=12, url="https://cdn.test/moon-b.png", caption="Waning"),
                ),
            ),
            DeckCard(
                id=102,
                title="The Sun",
                images=(CardImage(id=21, url="https://cdn.test/sun.png"),),
            ),
            DeckCard(id=103, title="The Star", images=(CardImage(id=31, url="https://cdn.test/star.png"),)),
            DeckCard(id=104, title="", images=(CardImage(id=41, url="https://cdn.test/blank.png"),)),
            DeckCard(id=105, title="The Void"),
        ),
    )


@pytest.fixture
def single_card_deck():
    """Fixture providing a deck with one card, one image, one interpretation."""
    return Deck(
        id=2,
        name="Single",
        cards=(
            DeckCard(
                id=201,
                title="The Fool",
                images=(CardImage(id=51, url="https://cdn.test/fool.png", caption="Leap"),),
            ),
        ),
    )


@pytest.fixture
def fool_interpretation():
    """Fixture providing the only interpretation of the Fool image."""
    return Interpretation(id=900, title="New beginnings", content="Step off the cliff.", numerator=1)


@pytest.fixture
def loader_factory():
    """Fixture providing ``make_loader`` for building fake interpretation loaders."""
    return make_loader
