"""Weighted random selection.

One helper serves both weighted choices made during a draw: picking an
image variant for the chosen card and picking an interpretation for the
chosen image. The weight rules for each live beside it so the default of
1 is applied in exactly one place.
"""

import random
from collections.abc import Callable, Sequence
from typing import TypeVar

from cardhack.models.deck_models import CardImage, Interpretation

T = TypeVar("T")


def weighted_select(
    items: Sequence[T],
    weight_of: Callable[[T], float],
    rng: random.Random | None = None,
) -> int:
    """Return the index of one item, chosen with probability proportional to weight.

    Single-item sequences and sequences whose total weight is zero return
    index 0 without consuming randomness. Negative weights count as zero.
    A draw landing exactly on a boundary between two items goes to the
    earlier one.

    Args:
        items: Non-empty sequence to choose from.
        weight_of: Maps an item to its non-negative weight.
        rng: Random source (defaults to the module-level generator).

    Returns:
        Index into ``items``.

    Raises:
        ValueError: If ``items`` is empty.
    """
    if not items:
        raise ValueError("Cannot select from an empty sequence")
    if len(items) == 1:
        return 0

    weights = [max(weight_of(item), 0) for item in items]
    total = sum(weights)
    if total == 0:
        return 0

    r = (rng or random).random() * total
    cumulative = 0.0
    last_positive = 0
    for index, weight in enumerate(weights):
        if weight <= 0:
            continue
        cumulative += weight
        last_positive = index
        if r <= cumulative:
            return index

    # Float rounding can push r past the final sum; land on the last real candidate
    return last_positive


def interpretation_weight(interpretation: Interpretation) -> int:
    """Weight of an interpretation: its numerator, or 1 when unset or non-positive."""
    numerator = interpretation.numerator
    if numerator is None or numerator <= 0:
        return 1
    return numerator


def image_weight(image: CardImage) -> int:
    """Effective weight of an image variant.

    The sum of its interpretation weights, or 1 when it has none (or they
    are not known yet), so every image stays selectable.
    """
    if not image.interpretations:
        return 1
    return sum(interpretation_weight(i) for i in image.interpretations)


def select_image(images: Sequence[CardImage], rng: random.Random | None = None) -> int:
    """Pick an image variant index by effective weight."""
    return weighted_select(images, image_weight, rng)


def select_interpretation(
    interpretations: Sequence[Interpretation], rng: random.Random | None = None
) -> int:
    """Pick an interpretation index by numerator."""
    return weighted_select(interpretations, interpretation_weight, rng)
