"""Core mathematics and catalogue for the odds board.

This package contains pure, sport-agnostic building blocks:

- ``odds_math`` — American/decimal/implied-probability conversion, vig removal
- ``consensus`` — cross-bookmaker consensus probability for two-outcome markets
- ``kelly``     — capped Kelly sizing and bankroll handling
- ``value``     — value-bet classification
- ``market``    — immutable DTOs parsed from The Odds API payloads
- ``catalog``   — sports, markets and bookmakers shown on the board
- ``errors``    — exception taxonomy

Nothing in this package imports from ``oddsboard.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
