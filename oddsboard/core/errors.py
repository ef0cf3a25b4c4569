"""Exception taxonomy for the odds analytics engine.

All engine errors derive from :class:`ValueError` so callers that already
guard odds parsing with ``except ValueError`` keep working.

* :class:`InvalidOddsError`   — a price that cannot be converted.
* :class:`MissingMarketError` — a bookmaker lacks the requested market or
  one side's outcome.  Handled by exclusion inside the engine.
* :class:`DivisionGuardError` — internal Kelly ``b == 0`` guard.  Never
  escapes :func:`~oddsboard.core.kelly.kelly_fraction`.
"""


class OddsAnalyticsError(ValueError):
    """Base class for every error raised by ``oddsboard.core``."""


class InvalidOddsError(OddsAnalyticsError):
    """Zero, NaN, non-finite or non-numeric odds."""


class MissingMarketError(OddsAnalyticsError, LookupError):
    """Requested market or outcome is absent for a bookmaker."""


class DivisionGuardError(OddsAnalyticsError, ZeroDivisionError):
    """Net odds of zero (decimal 1.0) reached the Kelly formula."""
