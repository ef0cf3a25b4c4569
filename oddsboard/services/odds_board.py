"""
Odds board assembly: turns parsed matches into per-bookmaker cell records.

Data flow per match:

    selected bookmakers ──► consensus probability (home, away)
                     │
                     └────► per (bookmaker, team) cell:
                              decimal odds → implied probability
                              Kelly fraction → recommended bet
                              value classification → actionable flag
                              best-price flag across selected books

Everything here is recomputed from the explicit arguments on each call.
The caller owns bankroll, market and bookmaker selection and calls
``build_board`` again when any of them change.

A cell whose bookmaker lacks the outcome, or whose price cannot be
converted, renders as ``"N/A"``; it never aborts the rest of the board.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from oddsboard.core.catalog import POPULAR_BOOKMAKERS, BookmakerInfo
from oddsboard.core.consensus import ConsensusProbability, estimate_probabilities
from oddsboard.core.errors import InvalidOddsError, MissingMarketError
from oddsboard.core.kelly import normalize_bankroll, size_bet
from oddsboard.core.market import BookmakerQuote, Match
from oddsboard.core.odds_math import american_to_decimal, decimal_to_implied_prob
from oddsboard.core.value import classify, is_actionable

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_UNAVAILABLE = "N/A"

REASON_MISSING_OUTCOME = "missing_outcome"
REASON_INVALID_ODDS = "invalid_odds"
REASON_NOT_QUOTED = "not_quoted"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BookmakerCellData:
    """Render data for one (bookmaker, team) cell."""

    bookmaker_key: str
    bookmaker_title: str
    team: str
    status: str = STATUS_OK
    reason: Optional[str] = None
    odds: Optional[float] = None  # American, as quoted
    decimal_odds: Optional[float] = None
    implied_probability: Optional[float] = None
    prob_difference: Optional[float] = None
    kelly_fraction: Optional[float] = None
    recommended_bet: Optional[float] = None
    point: Optional[float] = None
    is_best_odds: bool = False
    is_value_bet: bool = False
    is_actionable: bool = False

    @property
    def is_available(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def unavailable(
        cls, bookmaker_key: str, bookmaker_title: str, team: str, reason: str
    ) -> "BookmakerCellData":
        return cls(
            bookmaker_key=bookmaker_key,
            bookmaker_title=bookmaker_title,
            team=team,
            status=STATUS_UNAVAILABLE,
            reason=reason,
        )


@dataclass
class TeamRow:
    """One team's row: consensus probability plus a cell per bookmaker."""

    match_id: str
    team: str
    side: str  # "home" or "away"
    estimated_probability: float
    cells: Dict[str, BookmakerCellData] = field(default_factory=dict)

    def cell_for(self, bookmaker_key: str, bookmaker_title: str = "") -> BookmakerCellData:
        """Stored cell, or an ``"N/A"`` placeholder for an unquoted column."""
        cell = self.cells.get(bookmaker_key)
        if cell is not None:
            return cell
        return BookmakerCellData.unavailable(
            bookmaker_key, bookmaker_title or bookmaker_key, self.team, REASON_NOT_QUOTED
        )


@dataclass
class MatchBoard:
    """Both team rows for a single match under one market."""

    match_id: str
    sport_key: Optional[str]
    sport_title: Optional[str]
    home_team: str
    away_team: str
    market: str
    consensus: ConsensusProbability
    home_row: TeamRow
    away_row: TeamRow

    @property
    def rows(self) -> Tuple[TeamRow, TeamRow]:
        return self.home_row, self.away_row


@dataclass
class OddsBoard:
    """The full table: bookmaker columns and one board per match."""

    market: str
    bankroll: float
    columns: Tuple[BookmakerInfo, ...]
    matches: List[MatchBoard] = field(default_factory=list)

    @property
    def actionable_cells(self) -> List[BookmakerCellData]:
        return [
            cell
            for board in self.matches
            for row in board.rows
            for cell in row.cells.values()
            if cell.is_actionable
        ]


@dataclass
class MatchDetail:
    """A single match priced under several markets."""

    match: Match
    bankroll: float
    columns: Tuple[BookmakerInfo, ...]
    boards: List[MatchBoard] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------

def best_decimal_odds(
    bookmakers: Iterable[BookmakerQuote],
    team: str,
    market_type: str,
) -> Optional[float]:
    """Highest decimal price offered for ``team`` among ``bookmakers``.

    Books without the outcome or with an unusable price are skipped.
    Returns None when no book prices the team.
    """
    best: Optional[float] = None
    for book in bookmakers:
        try:
            decimal = american_to_decimal(book.outcome(market_type, team).price)
        except (MissingMarketError, InvalidOddsError):
            continue
        if best is None or decimal > best:
            best = decimal
    return best


def build_cell(
    book: BookmakerQuote,
    team: str,
    market_type: str,
    estimated_prob: float,
    bankroll: object,
    best_decimal: Optional[float] = None,
) -> BookmakerCellData:
    """Compute one bookmaker cell for ``team``.

    Args:
        book:           Bookmaker quotes for the match.
        team:           Outcome name to price.
        market_type:    Market key (``"h2h"``, ``"spreads"``).
        estimated_prob: Consensus probability for ``team``.
        bankroll:       Stake base; unusable values size every bet at 0.
        best_decimal:   Best decimal price across the selected books, used
                        for the ``is_best_odds`` flag.

    Returns:
        A populated cell, or an ``"N/A"`` cell when the outcome is missing
        or its price is invalid.
    """
    try:
        outcome = book.outcome(market_type, team)
    except MissingMarketError:
        return BookmakerCellData.unavailable(book.key, book.title, team, REASON_MISSING_OUTCOME)

    try:
        decimal = american_to_decimal(outcome.price)
        implied = decimal_to_implied_prob(decimal)
    except InvalidOddsError as exc:
        logger.debug("Invalid odds at %s for %s: %s", book.key, team, exc)
        return BookmakerCellData.unavailable(book.key, book.title, team, REASON_INVALID_ODDS)

    sizing = size_bet(decimal, estimated_prob, bankroll)
    assessment = classify(estimated_prob, implied)

    return BookmakerCellData(
        bookmaker_key=book.key,
        bookmaker_title=book.title,
        team=team,
        odds=outcome.price,
        decimal_odds=decimal,
        implied_probability=implied,
        prob_difference=assessment.prob_difference,
        kelly_fraction=sizing.kelly_fraction,
        recommended_bet=sizing.recommended_bet,
        point=outcome.point,
        is_best_odds=best_decimal is not None and decimal == best_decimal,
        is_value_bet=assessment.is_value_bet,
        is_actionable=is_actionable(assessment, sizing.kelly_fraction),
    )


# ---------------------------------------------------------------------------
# Match and board
# ---------------------------------------------------------------------------

def build_match_board(
    match: Match,
    market_type: str,
    selected_bookmakers: Iterable[str],
    bankroll: object,
) -> MatchBoard:
    """Consensus plus home and away rows for one match."""
    selected = tuple(selected_bookmakers)
    books = match.selected(selected)
    consensus = estimate_probabilities(match, market_type, selected)

    logger.debug(
        "Match %s (%s vs %s): %d/%d selected books qualify for %s consensus",
        match.id, match.home_team, match.away_team,
        consensus.books_used, len(books), market_type,
    )

    rows = {}
    for side, team in (("home", match.home_team), ("away", match.away_team)):
        estimated = consensus.for_side(side)
        best = best_decimal_odds(books, team, market_type)
        rows[side] = TeamRow(
            match_id=match.id,
            team=team,
            side=side,
            estimated_probability=estimated,
            cells={
                book.key: build_cell(book, team, market_type, estimated, bankroll, best)
                for book in books
            },
        )

    return MatchBoard(
        match_id=match.id,
        sport_key=match.sport_key,
        sport_title=match.sport_title,
        home_team=match.home_team,
        away_team=match.away_team,
        market=market_type,
        consensus=consensus,
        home_row=rows["home"],
        away_row=rows["away"],
    )


def filter_matches(
    matches: Sequence[Match],
    search_query: Optional[str] = None,
    sport_key: Optional[str] = None,
) -> List[Match]:
    """Team-name search across all sports, else optional sport restriction.

    A non-empty ``search_query`` matches home or away team names
    case-insensitively and ignores ``sport_key`` so a user can find a team
    without knowing its league.
    """
    query = (search_query or "").strip().lower()
    if query:
        return [
            m for m in matches
            if query in m.home_team.lower() or query in m.away_team.lower()
        ]
    if sport_key:
        return [m for m in matches if m.sport_key == sport_key]
    return list(matches)


def bookmaker_columns(
    matches: Sequence[Match],
    selected_bookmakers: Iterable[str],
) -> Tuple[BookmakerInfo, ...]:
    """Selected bookmakers that quote at least one of ``matches``.

    Catalogue bookmakers come first in catalogue order; selected books
    outside the catalogue follow in first-seen order with their API title.
    """
    selected = {k.strip().lower() for k in selected_bookmakers}
    seen: Dict[str, str] = {}
    for match in matches:
        for book in match.bookmakers:
            if book.key in selected and book.key not in seen:
                seen[book.key] = book.title

    columns = [b for b in POPULAR_BOOKMAKERS if b.key in seen]
    known = {b.key for b in columns}
    columns.extend(
        BookmakerInfo(key, title) for key, title in seen.items() if key not in known
    )
    return tuple(columns)


def _fill_columns(board: MatchBoard, columns: Sequence[BookmakerInfo]) -> None:
    for row in board.rows:
        for column in columns:
            row.cells.setdefault(column.key, row.cell_for(column.key, column.title))


def build_board(
    matches: Sequence[Match],
    market_type: str,
    selected_bookmakers: Iterable[str],
    bankroll: object,
    search_query: Optional[str] = None,
    sport_key: Optional[str] = None,
) -> OddsBoard:
    """Filter matches and compute every row and cell of the odds table.

    Every row carries a cell for every column; a column whose bookmaker
    does not quote a match is filled with an ``"N/A"`` placeholder.
    """
    selected = tuple(selected_bookmakers)
    visible = filter_matches(matches, search_query=search_query, sport_key=sport_key)
    columns = bookmaker_columns(visible, selected)

    boards = []
    for match in visible:
        board = build_match_board(match, market_type, selected, bankroll)
        _fill_columns(board, columns)
        boards.append(board)

    result = OddsBoard(
        market=market_type,
        bankroll=normalize_bankroll(bankroll),
        columns=columns,
        matches=boards,
    )
    logger.info(
        "Odds board built: %d/%d matches, %d bookmaker columns, market=%s, %d actionable cells",
        len(boards), len(matches), len(columns), market_type, len(result.actionable_cells),
    )
    return result


def build_match_detail(
    match: Match,
    market_types: Iterable[str],
    selected_bookmakers: Iterable[str],
    bankroll: object,
) -> MatchDetail:
    """One :class:`MatchBoard` per market for a single match.

    Columns are shared across markets, so a bookmaker quoting only one of
    them shows ``"N/A"`` placeholders under the other.
    """
    selected = tuple(selected_bookmakers)
    columns = bookmaker_columns([match], selected)

    boards = []
    for market_type in market_types:
        board = build_match_board(match, market_type, selected, bankroll)
        _fill_columns(board, columns)
        boards.append(board)

    logger.info(
        "Match detail built for %s: %d markets, %d bookmaker columns",
        match.id, len(boards), len(columns),
    )
    return MatchDetail(
        match=match,
        bankroll=normalize_bankroll(bankroll),
        columns=columns,
        boards=boards,
    )
