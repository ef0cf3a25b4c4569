"""Fundamental odds mathematics — the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in services.

The pillars exposed are:

1. **Odds conversion** — American ↔ decimal ↔ implied probability.
2. **Vig removal** — proportional two-outcome normalisation.
3. **Display** — signed American strings for rendered cells.

Design decisions
----------------
* Prices arrive from The Odds API as American integers, but floats are
  accepted so that averaged or hand-entered prices convert the same way.
* Validation fails fast with :class:`~oddsboard.core.errors.InvalidOddsError`
  instead of letting ``inf``/``nan`` leak into downstream averages.  Callers
  that render a table catch the error per cell.
* Any nonzero American price is accepted.  The Odds API never publishes
  ``|odds| < 100``, but ``+50`` still has a well-defined decimal (1.5) and
  rejecting it would blank cells for books that quote odd increments.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import math
from numbers import Real

from oddsboard.core.errors import InvalidOddsError


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _require_finite(value: object, label: str) -> float:
    """Return ``value`` as a float or raise :class:`InvalidOddsError`."""
    # bool is a Real subclass; True as a price is always a parsing bug.
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidOddsError(f"{label} must be a number, got {value!r}.")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidOddsError(f"{label} must be finite, got {value!r}.")
    return number


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def american_to_decimal(american: int | float) -> float:
    """Convert American odds to decimal (European) format.

    Decimal odds represent the total payout per unit staked, **including**
    the return of the stake itself.  Examples::

        american_to_decimal(+100) → 2.0000
        american_to_decimal(-200) → 1.5000   (risk 200 to win 100)
        american_to_decimal(+150) → 2.5000   (risk 100 to win 150)

    Args:
        american: American odds.  Sign convention: negative = favourite
            (stake required to win 100), positive = underdog (profit per
            100 staked).

    Returns:
        Decimal odds, strictly greater than 1.0.  Not rounded.

    Raises:
        InvalidOddsError: If ``american`` is zero, NaN, infinite, not a
            number, or so close to zero that the result overflows.
    """
    value = _require_finite(american, "American odds")
    if value == 0:
        raise InvalidOddsError("American odds of 0 are not a valid price.")
    if value > 0:
        decimal = value / 100.0 + 1.0
    else:
        # Negative: risk |american| to win 100
        decimal = 100.0 / abs(value) + 1.0
    # Near-zero prices overflow the division or round to exactly 1.0.
    if not math.isfinite(decimal) or decimal <= 1.0:
        raise InvalidOddsError(
            f"American odds {american!r} do not convert to a finite price above 1.0."
        )
    return decimal


def decimal_to_implied_prob(decimal_odds: float) -> float:
    """Break-even win probability implied by a decimal price.

    Examples::

        decimal_to_implied_prob(2.0) → 0.5000
        decimal_to_implied_prob(1.5) → 0.6667

    Raises:
        InvalidOddsError: If ``decimal_odds <= 0`` or is not finite.
    """
    value = _require_finite(decimal_odds, "Decimal odds")
    if value <= 0.0:
        raise InvalidOddsError(
            f"Decimal odds {decimal_odds!r} must be > 0 to imply a probability."
        )
    return 1.0 / value


def implied_prob(american: int | float) -> float:
    """Raw implied probability from American odds (vig-inclusive).

    This is the bookmaker's *stated* probability and includes the overround.
    For a vig-free split of a two-outcome market use
    :func:`remove_vig_proportional`.

    Examples::

        implied_prob(-110) → 0.5238
        implied_prob(+150) → 0.4000
    """
    return decimal_to_implied_prob(american_to_decimal(american))


def decimal_to_american(decimal_odds: float) -> int:
    """Convert decimal odds to the nearest American integer.

    Inverse of :func:`american_to_decimal`.  Rounds to the nearest integer;
    use the result for display, not for further arithmetic.

    Raises:
        InvalidOddsError: If ``decimal_odds <= 1.0`` (no payout to express).
    """
    value = _require_finite(decimal_odds, "Decimal odds")
    if value <= 1.0:
        raise InvalidOddsError(
            f"Decimal odds {decimal_odds!r} must be > 1.0 to convert to American."
        )
    if value >= 2.0:
        return round((value - 1.0) * 100)
    # Favourite: decimal < 2.0 → negative American
    return -round(100.0 / (value - 1.0))


def format_american(american: int | float) -> str:
    """Signed display string: ``+150``, ``-200``, ``+100``."""
    value = _require_finite(american, "American odds")
    if value == 0:
        raise InvalidOddsError("American odds of 0 are not a valid price.")
    rounded = int(round(value))
    return f"+{rounded}" if rounded > 0 else str(rounded)


# ---------------------------------------------------------------------------
# Vig removal
# ---------------------------------------------------------------------------


def remove_vig_proportional(raw_a: float, raw_b: float) -> tuple[float, float]:
    """Scale a two-outcome pair of raw implied probabilities to sum to 1.

    Each side is divided by the pair total (the overround ``K``)::

        p_a = ω_a / (ω_a + ω_b)        p_b = ω_b / (ω_a + ω_b)

    Example: -150 / +130 → raw (0.6000, 0.4348), K = 1.0348,
    vig-free (0.5798, 0.4202).

    Returns:
        ``(p_a, p_b)`` summing to 1.0, or ``(0.0, 0.0)`` when both raw
        inputs are zero (nothing to normalise).
    """
    total = raw_a + raw_b
    if total == 0:
        return 0.0, 0.0
    return raw_a / total, raw_b / total
