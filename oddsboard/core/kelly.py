"""Kelly criterion sizing — the single source of truth for bet sizing math.

All functions here are **pure**: no I/O, no logging.
Import from this module; never reimplement Kelly locally in services.

Design decisions
----------------
* **Full Kelly, hard-capped.**  The fraction is the closed-form Kelly
  ``f* = (b·p − q) / b`` clipped to ``[0, 0.25]``.  The 25% ceiling is the
  only conservatism applied; there is no fractional divisor.
* **No edge, no bet.**  Negative Kelly floors to 0, and a raw edge within
  floating-point noise of zero is treated as exactly zero so that pricing a
  bet at its own implied probability never produces a dust-sized stake.
* **No bankroll, no stake.**  An unset, zero, negative or non-numeric
  bankroll sizes every bet at 0 instead of raising.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Final

from oddsboard.core.errors import DivisionGuardError, InvalidOddsError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Hard cap on any single Kelly output, irrespective of edge.
MAX_KELLY_FRACTION: Final[float] = 0.25

#: Raw Kelly values at or below this are rounding residue, not edge.
#: (b · (1/d) − (1 − 1/d)) is analytically 0 but can land at ±1e-17.
_EDGE_EPSILON: Final[float] = 1e-12


@dataclass(frozen=True)
class KellyResult:
    """Stake sizing for one bookmaker cell."""

    kelly_fraction: float
    recommended_bet: float


# ---------------------------------------------------------------------------
# Kelly fraction
# ---------------------------------------------------------------------------


def _full_kelly(net_odds: float, win_prob: float) -> float:
    if net_odds == 0.0:
        raise DivisionGuardError("Net odds of 0 (decimal 1.0): Kelly is undefined.")
    return (net_odds * win_prob - (1.0 - win_prob)) / net_odds


def kelly_fraction(
    decimal_odds: float,
    estimated_prob: float,
    *,
    max_fraction: float = MAX_KELLY_FRACTION,
) -> float:
    """Compute the capped Kelly stake fraction for a win/loss bet.

    The Kelly criterion maximises expected log-wealth::

        b  =  decimal_odds − 1            (profit per unit staked)
        q  =  1 − p
        f* =  (b · p − q) / b

    and the result is ``clamp(f*, 0, max_fraction)``.

    Args:
        decimal_odds: Decimal odds for the bet.  Use
            :func:`~oddsboard.core.odds_math.american_to_decimal` to convert.
        estimated_prob: Estimated true probability of winning, in ``[0, 1]``.
        max_fraction: Hard cap on the output.  Default 0.25.

    Returns:
        Kelly fraction in ``[0, max_fraction]``.  0.0 when there is no edge
        or when ``decimal_odds == 1`` (nothing to win).

    Raises:
        InvalidOddsError: If ``decimal_odds`` is below 1.0 or not finite.
        ValueError: If ``estimated_prob`` is outside ``[0, 1]``.

    Examples::

        kelly_fraction(2.0, 0.55)   →  0.100
        kelly_fraction(2.0, 0.50)   →  0.000  (no edge)
        kelly_fraction(2.3, 0.60)   →  0.250  (raw 0.292, capped)
        kelly_fraction(1.0, 0.90)   →  0.000  (b == 0 guard)
    """
    if isinstance(decimal_odds, bool) or not isinstance(decimal_odds, Real) \
            or not math.isfinite(decimal_odds) or decimal_odds < 1.0:
        raise InvalidOddsError(
            f"decimal_odds must be a finite number ≥ 1.0, got {decimal_odds!r}."
        )
    if not isinstance(estimated_prob, Real) or not (0.0 <= estimated_prob <= 1.0):
        raise ValueError(
            f"estimated_prob must be in [0, 1], got {estimated_prob!r}."
        )

    try:
        raw = _full_kelly(decimal_odds - 1.0, estimated_prob)
    except DivisionGuardError:
        return 0.0

    if raw <= _EDGE_EPSILON:
        return 0.0
    return min(raw, max_fraction)


# ---------------------------------------------------------------------------
# Stake sizing
# ---------------------------------------------------------------------------


def normalize_bankroll(bankroll: object) -> float:
    """Coerce a bankroll input to a usable amount; anything unusable is 0.

    Examples::

        normalize_bankroll(10000)    → 10000.0
        normalize_bankroll("2500")   →  2500.0
        normalize_bankroll(None)     →     0.0
        normalize_bankroll(-50)      →     0.0
        normalize_bankroll("lots")   →     0.0
    """
    if bankroll is None or isinstance(bankroll, bool):
        return 0.0
    try:
        value = float(bankroll)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value) or value <= 0.0:
        return 0.0
    return value


def recommended_bet(kelly_fraction_val: float, bankroll: object) -> float:
    """Dollar stake: ``kelly_fraction × bankroll``.

    Examples::

        recommended_bet(0.05, 10000)  →  500.0
        recommended_bet(0.05, None)   →    0.0
    """
    amount = normalize_bankroll(bankroll)
    if amount == 0.0 or kelly_fraction_val <= 0.0:
        return 0.0
    return kelly_fraction_val * amount


def size_bet(decimal_odds: float, estimated_prob: float, bankroll: object) -> KellyResult:
    """Kelly fraction and dollar stake for one priced outcome."""
    fraction = kelly_fraction(decimal_odds, estimated_prob)
    return KellyResult(
        kelly_fraction=fraction,
        recommended_bet=recommended_bet(fraction, bankroll),
    )
