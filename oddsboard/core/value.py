"""Value-bet classification: does our probability beat the bookmaker's?

Pure: no I/O, no logging.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValueAssessment:
    """Gap between estimated and implied probability for one cell."""

    prob_difference: float
    is_value_bet: bool


def classify(estimated_prob: float, implied_prob: float) -> ValueAssessment:
    """Flag a positive-EV price.

    ``prob_difference = estimated_prob − implied_prob``; the price is a value
    bet only when the difference is strictly positive.

    Examples::

        classify(0.55, 0.50)  → ValueAssessment(0.05, True)
        classify(0.50, 0.50)  → ValueAssessment(0.0, False)
    """
    difference = estimated_prob - implied_prob
    return ValueAssessment(prob_difference=difference, is_value_bet=difference > 0)


def is_actionable(assessment: ValueAssessment, kelly_fraction: float) -> bool:
    """Highlight a cell only when the value signal and Kelly agree.

    A positive probability gap whose Kelly fraction was clipped to zero
    (e.g. decimal odds of 1.0) is not actionable.
    """
    return assessment.is_value_bet and kelly_fraction > 0.0
