"""Tests for weighted random selection."""

import random
from collections import Counter
from unittest.mock import MagicMock

import pytest

from cardhack.models.deck_models import CardImage, Interpretation
from cardhack.services.sampler import (
    image_weight,
    interpretation_weight,
    select_image,
    select_interpretation,
    weighted_select,
)


def _frequencies(weights, trials, seed=1234):
    rng = random.Random(seed)
    counts = Counter(weighted_select(weights, lambda w: w, rng) for _ in range(trials))
    return {i: counts[i] / trials for i in range(len(weights))}


# =============================================================================
# Test weighted_select
# =============================================================================


class TestWeightedSelect:
    """Tests for the generic weighted selector."""

    @pytest.mark.parametrize(
        "weights",
        [[1, 2, 3, 4], [5, 5], [1, 9], [0.5, 0.25, 0.25]],
    )
    def test_frequencies_match_weights(self, weights):
        """Empirical frequencies converge to weight / total."""
        total = sum(weights)
        freqs = _frequencies(weights, 20000)
        for i, w in enumerate(weights):
            assert freqs[i] == pytest.approx(w / total, abs=0.02)

    def test_zero_weight_never_selected(self):
        """Zero-weight items lose to any positive-weight item."""
        freqs = _frequencies([0, 1, 0, 2, 0], 5000)
        assert freqs[0] == 0
        assert freqs[2] == 0
        assert freqs[4] == 0

    def test_zero_weight_excluded_at_lower_boundary(self):
        """A draw of exactly 0 skips leading zero-weight items."""
        rng = MagicMock()
        rng.random.return_value = 0.0
        assert weighted_select([0, 0, 3], lambda w: w, rng) == 2

    def test_upper_boundary_lands_on_last_positive(self):
        """A draw equal to the total still returns a positive-weight item."""
        rng = MagicMock()
        rng.random.return_value = 1.0
        assert weighted_select([2, 3, 0], lambda w: w, rng) == 1

    @pytest.mark.parametrize(
        ("draw", "weights", "expected"),
        [(0.25, [1, 3], 0), (0.5, [1, 1, 2], 1), (0.5, [2, 0, 2], 0)],
    )
    def test_interior_boundary_goes_to_earlier_item(self, draw, weights, expected):
        """A draw exactly on a band boundary resolves to the earlier item."""
        rng = MagicMock()
        rng.random.return_value = draw
        assert weighted_select(weights, lambda w: w, rng) == expected

    def test_single_item_is_deterministic(self):
        """Single-item sequences return 0 without touching randomness."""
        rng = MagicMock()
        assert weighted_select(["only"], lambda _: 7, rng) == 0
        rng.random.assert_not_called()

    def test_zero_total_is_deterministic(self):
        """All-zero weights return 0 without touching randomness."""
        rng = MagicMock()
        for _ in range(50):
            assert weighted_select([0, 0, 0], lambda w: w, rng) == 0
        rng.random.assert_not_called()

    def test_negative_weights_count_as_zero(self):
        """Negative weights cannot be selected."""
        freqs = _frequencies([-5, 1], 1000)
        assert freqs[0] == 0

    def test_empty_sequence_raises(self):
        """Selecting from nothing is a caller error."""
        with pytest.raises(ValueError):
            weighted_select([], lambda w: w)

    def test_equal_weights_are_uniform(self):
        """Identical weights behave as a uniform choice."""
        freqs = _frequencies([3, 3, 3], 15000)
        for i in range(3):
            assert freqs[i] == pytest.approx(1 / 3, abs=0.02)


# =============================================================================
# Test weight rules
# =============================================================================


class TestWeightRules:
    """Tests for image and interpretation weights."""

    def test_interpretation_weight_uses_numerator(self):
        assert interpretation_weight(Interpretation(numerator=4)) == 4

    @pytest.mark.parametrize("numerator", [None, 0, -3])
    def test_interpretation_weight_defaults_to_one(self, numerator):
        """Missing or non-positive numerators count as 1."""
        assert interpretation_weight(Interpretation(numerator=numerator)) == 1

    def test_image_weight_sums_interpretations(self):
        image = CardImage(
            id=1,
            interpretations=(
                Interpretation(numerator=2),
                Interpretation(numerator=None),
                Interpretation(numerator=5),
            ),
        )
        assert image_weight(image) == 8

    def test_image_weight_without_interpretations(self):
        """Images with no (or unknown) interpretations weigh 1."""
        assert image_weight(CardImage(id=1)) == 1
        assert image_weight(CardImage(id=1, interpretations=())) == 1


# =============================================================================
# Test image and interpretation selection
# =============================================================================


class TestSelectImage:
    """Tests for picking image variants and interpretations."""

    def test_heavier_image_chosen_proportionally(self):
        """An image weighted 9 beats one weighted 1 about 90% of the time."""
        images = [
            CardImage(id=1, interpretations=(Interpretation(numerator=1),)),
            CardImage(id=2, interpretations=(Interpretation(numerator=9),)),
        ]
        rng = random.Random(42)
        trials = 10000
        hits = sum(1 for _ in range(trials) if images[select_image(images, rng)].id == 2)
        assert hits / trials == pytest.approx(0.9, abs=0.02)

    def test_interpretation_numerators_drive_choice(self):
        interpretations = [Interpretation(id=1, numerator=3), Interpretation(id=2, numerator=1)]
        rng = random.Random(7)
        trials = 8000
        hits = sum(1 for _ in range(trials) if select_interpretation(interpretations, rng) == 0)
        assert hits / trials == pytest.approx(0.75, abs=0.02)
