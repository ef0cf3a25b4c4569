"""
Tests for cross-bookmaker consensus probability
Run with: pytest tests/test_consensus.py -v
"""

import pytest

from oddsboard.core.consensus import ConsensusProbability, book_pair, estimate_probabilities
from oddsboard.core.errors import InvalidOddsError, MissingMarketError
from oddsboard.core.market import Match

HOME = "Boston Celtics"
AWAY = "Dallas Mavericks"


def _book(key, home_price=None, away_price=None, market="h2h"):
    outcomes = []
    if home_price is not None:
        outcomes.append({"name": HOME, "price": home_price})
    if away_price is not None:
        outcomes.append({"name": AWAY, "price": away_price})
    return {"key": key, "title": key.title(), "markets": [{"key": market, "outcomes": outcomes}]}


def _match(*books):
    return Match.from_api({"id": "m1", "home_team": HOME, "away_team": AWAY, "bookmakers": list(books)})


# Hand-computed vig-free splits
#   -150 / +130 → raw 0.6, 10/23  → home 13.8/23.8 = 0.57983, away 10/23.8 = 0.42017
#   -140 / +120 → raw 7/12, 5/11  → home 77/137    = 0.56204, away 60/137   = 0.43796
BOOK_A_HOME, BOOK_A_AWAY = 13.8 / 23.8, 10 / 23.8
BOOK_B_HOME, BOOK_B_AWAY = 77 / 137, 60 / 137


class TestBookPair:
    """Test single-bookmaker vig removal"""

    def test_single_book_sums_to_one(self):
        match = _match(_book("draftkings", -150, 130))
        home, away = book_pair(match.bookmakers[0], "h2h", HOME, AWAY)

        assert abs(home - BOOK_A_HOME) < 1e-12
        assert abs(away - BOOK_A_AWAY) < 1e-12
        assert abs(home + away - 1.0) < 1e-12

    def test_missing_side_raises(self):
        match = _match(_book("draftkings", -150, None))

        with pytest.raises(MissingMarketError):
            book_pair(match.bookmakers[0], "h2h", HOME, AWAY)

    def test_missing_market_raises(self):
        match = _match(_book("draftkings", -150, 130, market="spreads"))

        with pytest.raises(MissingMarketError):
            book_pair(match.bookmakers[0], "h2h", HOME, AWAY)

    def test_zero_price_raises(self):
        match = _match(_book("draftkings", 0, 130))

        with pytest.raises(InvalidOddsError):
            book_pair(match.bookmakers[0], "h2h", HOME, AWAY)


class TestEstimateProbabilities:
    """Test averaging across selected bookmakers"""

    def test_two_books_average(self):
        match = _match(_book("draftkings", -150, 130), _book("fanduel", -140, 120))

        result = estimate_probabilities(match, "h2h", {"draftkings", "fanduel"})

        assert result.home_prob == pytest.approx((BOOK_A_HOME + BOOK_B_HOME) / 2)
        assert result.away_prob == pytest.approx((BOOK_A_AWAY + BOOK_B_AWAY) / 2)
        assert abs(result.home_prob - 0.5709) < 1e-4
        assert abs(result.away_prob - 0.4291) < 1e-4
        assert result.books_used == 2

    def test_unselected_books_are_ignored(self):
        match = _match(_book("draftkings", -150, 130), _book("fanduel", -140, 120))

        result = estimate_probabilities(match, "h2h", ["draftkings"])

        assert result.home_prob == pytest.approx(BOOK_A_HOME)
        assert result.books_used == 1

    def test_selection_is_case_insensitive(self):
        match = _match(_book("draftkings", -150, 130))

        result = estimate_probabilities(match, "h2h", ["DraftKings"])

        assert result.books_used == 1

    def test_bare_string_selects_one_book(self):
        match = _match(_book("draftkings", -150, 130), _book("fanduel", -140, 120))

        result = estimate_probabilities(match, "h2h", "draftkings")

        assert result.books_used == 1
        assert result.home_prob == pytest.approx(BOOK_A_HOME)

    def test_repeated_book_key_counts_once(self):
        match = _match(_book("draftkings", -150, 130), _book("draftkings", 105, -125))

        result = estimate_probabilities(match, "h2h", ["draftkings"])

        assert result.books_used == 1
        assert result.home_prob == pytest.approx(BOOK_A_HOME)

    def test_book_missing_away_side_is_excluded_from_both(self):
        with_partial = _match(
            _book("draftkings", -150, 130),
            _book("fanduel", -140, 120),
            _book("betmgm", -300, None),
        )
        without_partial = _match(_book("draftkings", -150, 130), _book("fanduel", -140, 120))
        keys = {"draftkings", "fanduel", "betmgm"}

        a = estimate_probabilities(with_partial, "h2h", keys)
        b = estimate_probabilities(without_partial, "h2h", keys)

        assert a == b
        assert a.books_used == 2

    def test_invalid_price_excludes_book(self):
        match = _match(_book("draftkings", -150, 130), _book("fanduel", "abc", 120))

        result = estimate_probabilities(match, "h2h", {"draftkings", "fanduel"})

        assert result.home_prob == pytest.approx(BOOK_A_HOME)
        assert result.books_used == 1

    def test_no_selected_books_yields_zero(self):
        match = _match(_book("draftkings", -150, 130))

        result = estimate_probabilities(match, "h2h", set())

        assert result == ConsensusProbability(home_prob=0.0, away_prob=0.0, books_used=0)

    def test_no_book_prices_market_yields_zero(self):
        match = _match(_book("draftkings", -150, 130))

        result = estimate_probabilities(match, "spreads", {"draftkings"})

        assert result.home_prob == 0.0
        assert result.away_prob == 0.0

    def test_order_does_not_matter(self):
        books = [_book("draftkings", -150, 130), _book("fanduel", -140, 120), _book("betus", 105, -125)]
        keys = {"draftkings", "fanduel", "betus"}

        forward = estimate_probabilities(_match(*books), "h2h", keys)
        reverse = estimate_probabilities(_match(*reversed(books)), "h2h", keys)

        assert forward.home_prob == pytest.approx(reverse.home_prob)
        assert forward.away_prob == pytest.approx(reverse.away_prob)

    def test_averaged_pair_is_reported_as_computed(self):
        match = _match(_book("draftkings", -150, 130), _book("betus", 105, -125))

        result = estimate_probabilities(match, "h2h", {"draftkings", "betus"})

        # Every qualifying book contributes to both means, so the pair still sums to 1
        assert abs(result.home_prob + result.away_prob - 1.0) < 1e-12

    def test_spreads_market(self):
        book = {
            "key": "draftkings",
            "title": "DraftKings",
            "markets": [{"key": "spreads", "outcomes": [
                {"name": HOME, "price": -110, "point": -5.5},
                {"name": AWAY, "price": -110, "point": 5.5},
            ]}],
        }

        result = estimate_probabilities(_match(book), "spreads", {"draftkings"})

        assert result.home_prob == 0.5
        assert result.away_prob == 0.5

    def test_for_side(self):
        result = ConsensusProbability(home_prob=0.6, away_prob=0.4, books_used=1)

        assert result.for_side("home") == 0.6
        assert result.for_side("away") == 0.4


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
