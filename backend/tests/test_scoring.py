"""Tests for consensus tier scoring."""

import pytest
from crowdguess.models import RankedEntry
from crowdguess.scoring import calculate_consensus_tier, check_answer, tier_from_percentage


def _aggregation(rows):
    return [
        RankedEntry(guess=guess, count=count, percentage=pct, rank=i)
        for i, (guess, count, pct) in enumerate(rows, start=1)
    ]


DESIGN_EXAMPLE = _aggregation([
    ("jellyfish", 5183, 85.2),
    ("squid", 193, 3.2),
    ("octopus", 95, 1.6),
    ("house", 47, 0.8),
])


def _triple(score):
    return score.points_earned, score.match_percentage, score.tier


# ── tier_from_percentage ──────────────────────────────────────────────────

class TestTierFromPercentage:
    @pytest.mark.parametrize("pct,points,tier", [
        (100, 100, "majority"),
        (50, 100, "majority"),
        (49.9, 50, "common"),
        (20, 50, "common"),
        (19.9, 25, "uncommon"),
        (5, 25, "uncommon"),
        (4.9, 10, "rare"),
        (1, 10, "rare"),
    ])
    def test_boundaries_inclusive_on_lower_bound(self, pct, points, tier):
        score = tier_from_percentage(pct)
        assert (score.points_earned, score.tier) == (points, tier)
        assert score.match_percentage == pct

    @pytest.mark.parametrize("pct", [0, 0.5, 0.99])
    def test_below_one_percent_is_unique(self, pct):
        assert _triple(tier_from_percentage(pct)) == (0, 0, "unique")


# ── calculate_consensus_tier ──────────────────────────────────────────────

class TestCalculateConsensusTier:
    def test_majority(self):
        assert _triple(calculate_consensus_tier("jellyfish", DESIGN_EXAMPLE)) == (100, 85.2, "majority")

    def test_rare_exact_match(self):
        assert _triple(calculate_consensus_tier("squid", DESIGN_EXAMPLE)) == (10, 3.2, "rare")
        assert _triple(calculate_consensus_tier("octopus", DESIGN_EXAMPLE)) == (10, 1.6, "rare")

    def test_exact_match_below_one_percent(self):
        assert _triple(calculate_consensus_tier("house", DESIGN_EXAMPLE)) == (0, 0, "unique")

    def test_close_match_bonus(self):
        assert _triple(calculate_consensus_tier("jely fish", DESIGN_EXAMPLE)) == (5, 85.2, "rare")

    def test_player_guess_is_normalized(self):
        assert calculate_consensus_tier("  JellyFish ", DESIGN_EXAMPLE).tier == "majority"

    def test_common_and_uncommon(self):
        aggregation = _aggregation([
            ("jellyfish", 3000, 60.0),
            ("squid", 1500, 30.0),
            ("octopus", 500, 10.0),
        ])
        assert _triple(calculate_consensus_tier("squid", aggregation)) == (50, 30.0, "common")
        assert _triple(calculate_consensus_tier("octopus", aggregation)) == (25, 10.0, "uncommon")

    def test_exact_match_beats_close_match(self):
        aggregation = _aggregation([("tree", 4000, 80.0), ("three", 1000, 20.0)])
        # "three" is 80% similar to "tree", listed first, but the exact entry wins
        assert _triple(calculate_consensus_tier("three", aggregation)) == (50, 20.0, "common")

    def test_first_close_match_wins(self):
        aggregation = _aggregation([("house", 600, 60.0), ("horse", 400, 40.0)])
        assert calculate_consensus_tier("hose", aggregation).match_percentage == 60.0

    def test_no_match_is_unique(self):
        aggregation = _aggregation([("cat", 9000, 90.0), ("dog", 1000, 10.0)])
        assert _triple(calculate_consensus_tier("spaceship", aggregation)) == (0, 0, "unique")

    def test_empty_aggregation(self):
        assert _triple(calculate_consensus_tier("anything", [])) == (0, 0, "unique")

    def test_empty_guess_falls_through(self):
        assert _triple(calculate_consensus_tier("", DESIGN_EXAMPLE)) == (0, 0, "unique")


# ── check_answer ──────────────────────────────────────────────────────────

class TestCheckAnswer:
    def _triple(self, check):
        return check.is_correct, check.is_close, check.points_earned

    def test_exact_answer(self):
        assert self._triple(check_answer("  House ", "house", ["home"])) == (True, False, 10)

    def test_exact_alternative(self):
        assert self._triple(check_answer("HOME", "house", ["home"])) == (True, False, 10)

    def test_close_to_answer(self):
        assert self._triple(check_answer("hous", "house", [])) == (False, True, 5)

    def test_close_to_alternative_only(self):
        # "dumbel" is far from "barbell" but within 70 of "dumbbell"
        assert self._triple(check_answer("dumbel", "barbell", ["dumbbell"])) == (False, True, 5)

    def test_miss(self):
        assert self._triple(check_answer("octopus", "house", ["home"])) == (False, False, 0)

    @pytest.mark.parametrize("threshold,expected", [(80, True), (81, False)])
    def test_threshold_inclusive(self, threshold, expected):
        check = check_answer("hous", "house", close_match_threshold=threshold)
        assert check.is_close is expected

    def test_empty_guess_misses(self):
        assert self._triple(check_answer("", "house")) == (False, False, 0)
