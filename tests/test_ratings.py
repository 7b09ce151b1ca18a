"""Unit tests for rating aggregation."""

import unittest

from recipe_api.schemas.rating import RatingOut
from recipe_api.services.ratings import round_half_up, summarize_ratings


def _ratings(*values: int) -> list[RatingOut]:
    return [RatingOut(rating=v, username=f"user{i}") for i, v in enumerate(values)]


class TestRoundHalfUp(unittest.TestCase):
    def test_half_rounds_up(self) -> None:
        self.assertEqual(round_half_up(4.25), 4.3)
        self.assertEqual(round_half_up(2.5, digits=0), 3.0)

    def test_below_half_rounds_down(self) -> None:
        self.assertEqual(round_half_up(4.24), 4.2)


class TestSummarizeRatings(unittest.TestCase):
    def test_average_rounded_to_one_decimal(self) -> None:
        summary = summarize_ratings(_ratings(4, 4, 4, 5))
        self.assertEqual(summary.average_rating, 4.3)
        self.assertEqual(summary.total_ratings, 4)
        self.assertEqual(len(summary.ratings), 4)

    def test_unrated_recipe(self) -> None:
        summary = summarize_ratings([])
        self.assertEqual(summary.average_rating, 0.0)
        self.assertEqual(summary.total_ratings, 0)
        self.assertEqual(summary.ratings, [])


if __name__ == "__main__":
    unittest.main()
