"""Choosing which cards are offered face down."""

import random


def pick_candidates(
    deck_size: int, count: int, rng: random.Random | None = None
) -> list[int]:
    """Pick up to ``count`` distinct card indices from a deck.

    Shuffles the full index range with Fisher-Yates (swapping from the end)
    and keeps the first ``min(count, deck_size)`` entries, so every subset of
    that size is equally likely.

    Args:
        deck_size: Number of cards in the deck.
        count: Number of candidates wanted.
        rng: Random source (defaults to the module-level generator).

    Returns:
        Distinct indices in ``[0, deck_size)``.
    """
    rng = rng or random
    indices = list(range(max(deck_size, 0)))
    for i in range(len(indices) - 1, 0, -1):
        j = rng.randint(0, i)
        indices[i], indices[j] = indices[j], indices[i]
    return indices[: max(min(count, deck_size), 0)]
