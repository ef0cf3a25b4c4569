"""Catalogue of sports, markets and bookmakers offered on the odds board.

This module is the **registry** for every key the board knows about.
Nowhere else in the codebase should sport keys, market labels or bookmaker
titles be hard-coded.

Keys are The Odds API identifiers; see
https://the-odds-api.com/sports-odds-data/sports-apis.html and
https://the-odds-api.com/sports-odds-data/bookmaker-apis.html

Typical usage::

    from oddsboard.core.catalog import POPULAR_BOOKMAKERS, get_sport

    nba = get_sport("basketball_nba")
    default_books = [b.key for b in POPULAR_BOOKMAKERS]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Final, Tuple

#: Sport group identifiers.
GROUP_MAIN: Final[str] = "main"
GROUP_SOCCER: Final[str] = "soccer"

#: Bankroll pre-filled for stake sizing when the caller supplies none.
DEFAULT_BANKROLL: Final[float] = 10000.0

#: Market shown when the caller does not pick one.
DEFAULT_MARKET: Final[str] = "h2h"


@dataclass(frozen=True)
class SportInfo:
    """A sport or league selectable on the board.

    Attributes:
        key: The Odds API ``sport_key``.
        title: Short display name.
        group: ``"main"`` for the top-level tabs, ``"soccer"`` for the
            leagues nested under the Soccer tab.
    """

    key: str
    title: str
    group: str = GROUP_MAIN


@dataclass(frozen=True)
class MarketInfo:
    """A two-outcome market the engine can price."""

    key: str
    label: str
    has_point: bool = False


@dataclass(frozen=True)
class BookmakerInfo:
    key: str
    title: str


MAIN_SPORTS: Final[Tuple[SportInfo, ...]] = (
    SportInfo("americanfootball_nfl", "NFL"),
    SportInfo("americanfootball_ncaaf", "NCAAF"),
    SportInfo("basketball_nba", "NBA"),
    SportInfo("baseball_mlb", "MLB"),
    SportInfo("mma_mixed_martial_arts", "MMA"),
    SportInfo("icehockey_nhl", "NHL"),
    SportInfo("tennis_atp_french_open", "Tennis"),
)

SOCCER_LEAGUES: Final[Tuple[SportInfo, ...]] = (
    SportInfo("soccer_usa_mls", "MLS", GROUP_SOCCER),
    SportInfo("soccer_brazil_campeonato", "Brazil Série A", GROUP_SOCCER),
    SportInfo("soccer_spain_segunda_division", "La Liga 2", GROUP_SOCCER),
    SportInfo("soccer_uefa_european_championship", "UEFA Euro", GROUP_SOCCER),
    SportInfo("soccer_australia_aleague", "A-League", GROUP_SOCCER),
    SportInfo("soccer_japan_j_league", "J League", GROUP_SOCCER),
)

ALL_SPORTS: Final[Tuple[SportInfo, ...]] = MAIN_SPORTS + SOCCER_LEAGUES

MARKETS: Final[Tuple[MarketInfo, ...]] = (
    MarketInfo("h2h", "Moneyline"),
    MarketInfo("spreads", "Spread", has_point=True),
)

POPULAR_BOOKMAKERS: Final[Tuple[BookmakerInfo, ...]] = (
    BookmakerInfo("draftkings", "DraftKings"),
    BookmakerInfo("williamhill_us", "Caesars"),
    BookmakerInfo("betus", "BetUS"),
    BookmakerInfo("fanduel", "FanDuel"),
    BookmakerInfo("mybookieag", "MyBookie.ag"),
    BookmakerInfo("betrivers", "BetRivers"),
    BookmakerInfo("betmgm", "BetMGM"),
    BookmakerInfo("betonlineag", "BetOnline.ag"),
    BookmakerInfo("lowvig", "LowVig.ag"),
    BookmakerInfo("bovada", "Bovada"),
)

_SPORTS_BY_KEY: Dict[str, SportInfo] = {s.key: s for s in ALL_SPORTS}
_MARKETS_BY_KEY: Dict[str, MarketInfo] = {m.key: m for m in MARKETS}


def get_sport(key: str) -> SportInfo:
    """Catalogue entry for ``key``; raises ``KeyError`` if unknown."""
    try:
        return _SPORTS_BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown sport key {key!r}") from None


def get_market(key: str) -> MarketInfo:
    """Catalogue entry for ``key``; raises ``KeyError`` if unknown."""
    try:
        return _MARKETS_BY_KEY[key]
    except KeyError:
        raise KeyError(f"Unknown market key {key!r}") from None


def default_bookmaker_keys() -> Tuple[str, ...]:
    return tuple(b.key for b in POPULAR_BOOKMAKERS)
