"""Immutable DTOs for odds payloads from The Odds API.

The API returns one JSON object per match::

    {
        "id": "e912304de2b2ce35b473ce2ecd3d1502",
        "sport_key": "basketball_nba",
        "commence_time": "2024-06-07T00:30:00Z",
        "home_team": "Boston Celtics",
        "away_team": "Dallas Mavericks",
        "bookmakers": [
            {"key": "draftkings", "title": "DraftKings", "markets": [
                {"key": "h2h", "outcomes": [
                    {"name": "Boston Celtics", "price": -200},
                    {"name": "Dallas Mavericks", "price": 165}]}]}
        ]
    }

``from_api`` constructors are deliberately lenient: missing fields become
empty collections or ``None`` and prices are kept exactly as received.
Price validation is the converter's job, so one malformed quote only
disqualifies itself (see :mod:`oddsboard.core.consensus`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

from oddsboard.core.errors import MissingMarketError


def _mappings(items: Any) -> Iterator[Mapping[str, Any]]:
    """Dict entries of a payload list; ``null`` and other junk entries are dropped."""
    if not isinstance(items, (list, tuple)):
        return iter(())
    return (item for item in items if isinstance(item, Mapping))


def _team_name(data: Mapping[str, Any], field_name: str) -> str:
    name = data[field_name]
    if not isinstance(name, str) or not name.strip():
        raise TypeError(f"{field_name} must be a non-empty string, got {name!r}")
    return name


@dataclass(frozen=True)
class Outcome:
    """One side of a market at one bookmaker."""

    name: str
    price: Any  # American odds as received; validated on conversion
    point: Optional[float] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Outcome":
        return cls(
            name=data.get("name", ""),
            price=data.get("price"),
            point=data.get("point"),
        )


@dataclass(frozen=True)
class Market:
    """A market (``h2h``, ``spreads``) and its ordered outcomes."""

    key: str
    outcomes: Tuple[Outcome, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Market":
        return cls(
            key=data.get("key", ""),
            outcomes=tuple(Outcome.from_api(o) for o in _mappings(data.get("outcomes"))),
        )

    def outcome_for(self, name: str) -> Outcome:
        """First outcome named ``name``.

        Raises:
            MissingMarketError: If no outcome carries that name.
        """
        for outcome in self.outcomes:
            if outcome.name == name:
                return outcome
        raise MissingMarketError(f"No outcome for {name!r} in market {self.key!r}.")


@dataclass(frozen=True)
class BookmakerQuote:
    """A bookmaker's markets for one match, keyed by market key."""

    key: str
    title: str
    markets: Mapping[str, Market] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view so a frozen quote cannot be mutated through its dict.
        object.__setattr__(self, "markets", MappingProxyType(dict(self.markets)))

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BookmakerQuote":
        markets = {}
        for raw in _mappings(data.get("markets")):
            market = Market.from_api(raw)
            # The API never repeats a market key per book; keep the first if it does.
            markets.setdefault(market.key, market)
        key = (data.get("key") or "").strip().lower()
        return cls(key=key, title=data.get("title") or key, markets=markets)

    def market(self, key: str) -> Market:
        """Market ``key`` or :class:`MissingMarketError`."""
        try:
            return self.markets[key]
        except KeyError:
            raise MissingMarketError(
                f"Bookmaker {self.key!r} has no {key!r} market."
            ) from None

    def outcome(self, market_key: str, team: str) -> Outcome:
        """Shortcut for ``market(market_key).outcome_for(team)``."""
        return self.market(market_key).outcome_for(team)


@dataclass(frozen=True)
class Match:
    """A two-sided fixture with every bookmaker's quotes."""

    id: str
    home_team: str
    away_team: str
    bookmakers: Tuple[BookmakerQuote, ...] = ()
    sport_key: Optional[str] = None
    sport_title: Optional[str] = None
    commence_time: Optional[str] = None

    @classmethod
    def from_api(
        cls,
        data: Mapping[str, Any],
        sport_key: Optional[str] = None,
        sport_title: Optional[str] = None,
    ) -> "Match":
        """Build a match from an API dict.

        Malformed bookmaker, market or outcome entries are dropped on their
        own; they never reject the match.

        Raises:
            KeyError: If ``id``, ``home_team`` or ``away_team`` is missing;
                without them the match cannot be rendered at all.
            TypeError: If a team name is not a non-empty string.
        """
        return cls(
            id=str(data["id"]),
            home_team=_team_name(data, "home_team"),
            away_team=_team_name(data, "away_team"),
            bookmakers=tuple(
                BookmakerQuote.from_api(b) for b in _mappings(data.get("bookmakers"))
            ),
            sport_key=sport_key or data.get("sport_key"),
            sport_title=sport_title or data.get("sport_title"),
            commence_time=data.get("commence_time"),
        )

    def selected(self, bookmaker_keys: Union[str, Iterable[str]]) -> Tuple[BookmakerQuote, ...]:
        """Bookmakers whose key is in ``bookmaker_keys``, in payload order.

        A bare string is one key.  A key repeated in the payload keeps only
        its first quote.
        """
        if isinstance(bookmaker_keys, str):
            bookmaker_keys = (bookmaker_keys,)
        wanted = {k.strip().lower() for k in bookmaker_keys}
        books = {}
        for book in self.bookmakers:
            if book.key in wanted:
                books.setdefault(book.key, book)
        return tuple(books.values())
