"""Cross-bookmaker consensus ("true") probability for two-outcome markets.

Pure: no I/O, no logging.  The estimate is recomputed from scratch on every
call from exactly the bookmakers passed in.

Algorithm
---------
For each selected bookmaker quoting **both** sides of ``market_type``::

    ω_home = 1 / decimal(home_price)        ω_away = 1 / decimal(away_price)
    p_home = ω_home / (ω_home + ω_away)     p_away = ω_away / (ω_home + ω_away)

then average ``p_home`` and ``p_away`` separately across bookmakers.  A book
that misses one side, lacks the market or carries an unusable price is
dropped from *both* sequences, so the two means are always taken over the
same set of books.

Run tests with::

    pytest tests/test_consensus.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from oddsboard.core.errors import InvalidOddsError, MissingMarketError
from oddsboard.core.market import BookmakerQuote, Match
from oddsboard.core.odds_math import implied_prob, remove_vig_proportional


@dataclass(frozen=True)
class ConsensusProbability:
    """Averaged vig-free probabilities for the home and away sides."""

    home_prob: float
    away_prob: float
    books_used: int = 0

    def for_side(self, side: str) -> float:
        return self.home_prob if side == "home" else self.away_prob


def book_pair(
    book: BookmakerQuote,
    market_type: str,
    home_team: str,
    away_team: str,
) -> Tuple[float, float]:
    """Vig-free ``(home, away)`` probabilities at a single bookmaker.

    Raises:
        MissingMarketError: Market or either side's outcome is absent.
        InvalidOddsError: Either price cannot be converted.
    """
    market = book.market(market_type)
    home_raw = implied_prob(market.outcome_for(home_team).price)
    away_raw = implied_prob(market.outcome_for(away_team).price)
    return remove_vig_proportional(home_raw, away_raw)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def estimate_probabilities(
    match: Match,
    market_type: str,
    selected_bookmakers: Iterable[str],
) -> ConsensusProbability:
    """Consensus home/away probabilities over the selected bookmakers.

    Args:
        match: Match carrying every bookmaker's quotes.
        market_type: Market key, e.g. ``"h2h"`` or ``"spreads"``.
        selected_bookmakers: Bookmaker keys to include.  Keys absent from
            the match are ignored; an empty selection yields zeros.

    Returns:
        :class:`ConsensusProbability`.  With no qualifying bookmaker both
        probabilities are 0.0.  The averaged pair is reported as computed,
        without a second renormalisation.
    """
    home_probs: List[float] = []
    away_probs: List[float] = []

    for book in match.selected(selected_bookmakers):
        try:
            home_norm, away_norm = book_pair(
                book, market_type, match.home_team, match.away_team
            )
        except (MissingMarketError, InvalidOddsError):
            # This bookmaker doesn't count; one bad quote must not blank the match.
            continue
        home_probs.append(home_norm)
        away_probs.append(away_norm)

    return ConsensusProbability(
        home_prob=_mean(home_probs),
        away_prob=_mean(away_probs),
        books_used=len(home_probs),
    )
