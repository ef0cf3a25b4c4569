"""
FastAPI application for the Odds Board
Serves the sport/market/bookmaker catalogue and computed odds tables
"""

from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dataclasses import asdict
from datetime import datetime, timezone
from typing import List, Optional
import logging
import os

from dotenv import load_dotenv

load_dotenv()

from oddsboard.core.catalog import (  # noqa: E402
    ALL_SPORTS,
    DEFAULT_MARKET,
    MARKETS,
    POPULAR_BOOKMAKERS,
    default_bookmaker_keys,
    get_market,
    get_sport,
)
from oddsboard.core.market import Match  # noqa: E402
from oddsboard.services.odds import (  # noqa: E402
    DETAIL_MARKETS,
    OddsAPIClient,
    get_data_freshness,
    get_odds_client,
)
from oddsboard.services.odds_board import (  # noqa: E402
    MatchBoard,
    OddsBoard,
    build_board,
    build_match_detail,
)
from oddsboard.schemas import (  # noqa: E402
    BoardResponse,
    BookmakerColumn,
    CellResponse,
    EvaluateRequest,
    MarketResponse,
    MatchBoardResponse,
    MatchDetailResponse,
    SportResponse,
    TeamRowResponse,
)

# Logging setup
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_BANKROLL = float(os.getenv("DEFAULT_BANKROLL", "10000"))
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

app = FastAPI(
    title="Odds Board",
    description="Sportsbook odds comparison with consensus probability and Kelly sizing",
    version="1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# HELPERS
# ============================================================================

def odds_client() -> OddsAPIClient:
    """Dependency wrapper: a missing API key is a 503, not a 500."""
    try:
        return get_odds_client()
    except ValueError as exc:
        logger.error("Odds client unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Odds provider is not configured")


def _parse_bookmakers(raw: Optional[str]) -> List[str]:
    """Comma-separated keys; None means the popular catalogue, "" means none."""
    if raw is None:
        return list(default_bookmaker_keys())
    return [k.strip().lower() for k in raw.split(",") if k.strip()]


def _match_board_response(m: MatchBoard) -> MatchBoardResponse:
    return MatchBoardResponse(
        match_id=m.match_id,
        sport_key=m.sport_key,
        sport_title=m.sport_title,
        home_team=m.home_team,
        away_team=m.away_team,
        market=m.market,
        home_prob=m.consensus.home_prob,
        away_prob=m.consensus.away_prob,
        books_used=m.consensus.books_used,
        rows=[
            TeamRowResponse(
                team=row.team,
                side=row.side,
                estimated_probability=row.estimated_probability,
                cells={key: CellResponse(**asdict(cell)) for key, cell in row.cells.items()},
            )
            for row in m.rows
        ],
    )


def _board_response(board: OddsBoard, freshness: Optional[dict] = None) -> BoardResponse:
    return BoardResponse(
        market=board.market,
        bankroll=board.bankroll,
        columns=[BookmakerColumn(key=c.key, title=c.title) for c in board.columns],
        total_matches=len(board.matches),
        actionable_cells=len(board.actionable_cells),
        matches=[_match_board_response(m) for m in board.matches],
        freshness=freshness,
    )


# ============================================================================
# PUBLIC ENDPOINTS
# ============================================================================

@app.get("/")
async def root():
    """Health check"""
    return {
        "app": "Odds Board",
        "version": "1.0",
        "status": "operational",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    configured = bool(os.getenv("THE_ODDS_API_KEY"))
    return {
        "status": "healthy" if configured else "degraded",
        "odds_provider": "configured" if configured else "missing THE_ODDS_API_KEY",
    }


@app.get("/api/sports", response_model=List[SportResponse])
async def list_sports():
    return [SportResponse(key=s.key, title=s.title, group=s.group) for s in ALL_SPORTS]


@app.get("/api/markets", response_model=List[MarketResponse])
async def list_markets():
    return [MarketResponse(key=m.key, label=m.label, has_point=m.has_point) for m in MARKETS]


@app.get("/api/bookmakers", response_model=List[BookmakerColumn])
async def list_bookmakers():
    return [BookmakerColumn(key=b.key, title=b.title) for b in POPULAR_BOOKMAKERS]


# ============================================================================
# ODDS BOARD
# ============================================================================

@app.get("/api/odds", response_model=BoardResponse)
def get_odds_board(
    sport: Optional[str] = Query(None, description="Sport key; omit for every catalogue sport"),
    market: str = Query(DEFAULT_MARKET),
    bookmakers: Optional[str] = Query(None, description="Comma-separated bookmaker keys"),
    bankroll: Optional[float] = Query(DEFAULT_BANKROLL),
    q: Optional[str] = Query(None, max_length=120, description="Team name search"),
    client: OddsAPIClient = Depends(odds_client),
):
    """Fetch live odds and compute the odds table."""
    try:
        get_market(market)
        if sport:
            get_sport(sport)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0])

    # A search spans every sport, so it overrides the sport filter for fetching too.
    sport_keys = [sport] if sport and not q else [s.key for s in ALL_SPORTS]
    fetched_at = datetime.now(timezone.utc)
    matches = client.get_all_odds(sport_keys, markets=market)

    board = build_board(
        matches,
        market,
        _parse_bookmakers(bookmakers),
        bankroll,
        search_query=q,
        sport_key=sport,
    )
    return _board_response(board, freshness=get_data_freshness(fetched_at))


@app.get("/api/odds/{sport}/{match_id}", response_model=MatchDetailResponse)
def get_match_detail(
    sport: str,
    match_id: str,
    markets: str = Query(DETAIL_MARKETS, description="Comma-separated market keys"),
    bookmakers: Optional[str] = Query(None, description="Comma-separated bookmaker keys"),
    bankroll: Optional[float] = Query(DEFAULT_BANKROLL),
    client: OddsAPIClient = Depends(odds_client),
):
    """Fetch one match and compute a table per market."""
    market_keys = [k.strip() for k in markets.split(",") if k.strip()]
    try:
        get_sport(sport)
        for key in market_keys:
            get_market(key)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=exc.args[0])
    if not market_keys:
        raise HTTPException(status_code=422, detail="At least one market is required")

    fetched_at = datetime.now(timezone.utc)
    match = client.get_event_odds(sport, match_id, markets=",".join(market_keys))
    if match is None:
        raise HTTPException(status_code=404, detail=f"No odds for match {match_id!r}")

    detail = build_match_detail(match, market_keys, _parse_bookmakers(bookmakers), bankroll)
    return MatchDetailResponse(
        match_id=match.id,
        sport_key=match.sport_key,
        sport_title=match.sport_title,
        home_team=match.home_team,
        away_team=match.away_team,
        commence_time=match.commence_time,
        bankroll=detail.bankroll,
        columns=[BookmakerColumn(key=c.key, title=c.title) for c in detail.columns],
        markets=[_match_board_response(b) for b in detail.boards],
        freshness=get_data_freshness(fetched_at),
    )


@app.post("/api/odds/evaluate", response_model=BoardResponse)
async def evaluate_odds(payload: EvaluateRequest):
    """Compute the odds table for a caller-supplied odds payload."""
    matches = [Match.from_api(m.model_dump()) for m in payload.matches]
    selected = (
        list(default_bookmaker_keys()) if payload.bookmakers is None
        else [k.strip().lower() for k in payload.bookmakers if k.strip()]
    )
    board = build_board(
        matches,
        payload.market,
        selected,
        payload.bankroll,
        search_query=payload.search,
        sport_key=payload.sport,
    )
    return _board_response(board)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Catch-all exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
