"""
Pydantic request/response schemas for the Odds Board API.

Request payloads mirror The Odds API match shape so a client can post
odds it already holds to ``/api/odds/evaluate``.  Response models are the
render contract for the odds table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from oddsboard.core.catalog import DEFAULT_BANKROLL, DEFAULT_MARKET, MARKETS


# ---------------------------------------------------------------------------
# Odds payload (request)
# ---------------------------------------------------------------------------

class OutcomePayload(BaseModel):
    """One side of a market as quoted by a bookmaker."""

    name: str
    price: Optional[Union[int, float]] = Field(
        None, description="American odds; unusable values render the cell as N/A"
    )
    point: Optional[float] = Field(None, description="Spread/total line")

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Optional[Union[int, float]]:
        # A garbled price disqualifies this quote only, never the whole request.
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return v
        try:
            return float(v)
        except (TypeError, ValueError):
            return None


class MarketPayload(BaseModel):
    key: str
    outcomes: List[OutcomePayload] = Field(default_factory=list)


class BookmakerPayload(BaseModel):
    key: str
    title: Optional[str] = None
    markets: List[MarketPayload] = Field(default_factory=list)


class MatchPayload(BaseModel):
    """A match in The Odds API ``/odds`` response format."""

    id: Union[str, int]
    home_team: str
    away_team: str
    sport_key: Optional[str] = None
    sport_title: Optional[str] = None
    commence_time: Optional[str] = None
    bookmakers: List[BookmakerPayload] = Field(default_factory=list)


class EvaluateRequest(BaseModel):
    """
    Payload for POST /api/odds/evaluate.

    ``bookmakers`` omitted means the popular-bookmaker catalogue; an empty
    list means no bookmaker is selected (every cell renders N/A).
    """

    matches: List[MatchPayload]
    market: str = Field(DEFAULT_MARKET, description='Market key, e.g. "h2h" or "spreads"')
    bookmakers: Optional[List[str]] = Field(None, description="Selected bookmaker keys")
    bankroll: Optional[float] = Field(
        DEFAULT_BANKROLL, description="Stake base; null or ≤ 0 disables stake sizing"
    )
    search: Optional[str] = Field(None, max_length=120)
    sport: Optional[str] = None

    @field_validator("market")
    @classmethod
    def validate_market(cls, v: str) -> str:
        known = {m.key for m in MARKETS}
        if v not in known:
            raise ValueError(f"market={v!r} is not supported. Use one of {sorted(known)}.")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "market": "h2h",
                "bookmakers": ["draftkings", "fanduel"],
                "bankroll": 10000,
                "matches": [
                    {
                        "id": "abc123",
                        "home_team": "Boston Celtics",
                        "away_team": "Dallas Mavericks",
                        "bookmakers": [
                            {
                                "key": "draftkings",
                                "title": "DraftKings",
                                "markets": [
                                    {
                                        "key": "h2h",
                                        "outcomes": [
                                            {"name": "Boston Celtics", "price": -150},
                                            {"name": "Dallas Mavericks", "price": 130},
                                        ],
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        }
    }


# ---------------------------------------------------------------------------
# Board (response)
# ---------------------------------------------------------------------------

class CellResponse(BaseModel):
    """Render data for one bookmaker cell."""

    bookmaker_key: str
    bookmaker_title: str
    team: str
    status: str = Field(..., description='"ok" or "N/A"')
    reason: Optional[str] = None
    odds: Optional[Union[int, float]] = Field(None, description="American odds as quoted")
    decimal_odds: Optional[float] = None
    implied_probability: Optional[float] = None
    prob_difference: Optional[float] = None
    kelly_fraction: Optional[float] = Field(None, ge=0.0, le=0.25)
    recommended_bet: Optional[float] = Field(None, ge=0.0)
    point: Optional[float] = None
    is_best_odds: bool = False
    is_value_bet: bool = False
    is_actionable: bool = False


class TeamRowResponse(BaseModel):
    team: str
    side: str
    estimated_probability: float
    cells: Dict[str, CellResponse]


class MatchBoardResponse(BaseModel):
    match_id: str
    sport_key: Optional[str]
    sport_title: Optional[str]
    home_team: str
    away_team: str
    market: str
    home_prob: float
    away_prob: float
    books_used: int
    rows: List[TeamRowResponse]


class BookmakerColumn(BaseModel):
    key: str
    title: str


class BoardResponse(BaseModel):
    """Structure for /api/odds and /api/odds/evaluate."""

    market: str
    bankroll: float
    columns: List[BookmakerColumn]
    total_matches: int
    actionable_cells: int
    matches: List[MatchBoardResponse]
    freshness: Optional[Dict[str, Any]] = None


class MatchDetailResponse(BaseModel):
    """Structure for /api/odds/{sport}/{match_id}: one board per market."""

    match_id: str
    sport_key: Optional[str]
    sport_title: Optional[str]
    home_team: str
    away_team: str
    commence_time: Optional[str] = None
    bankroll: float
    columns: List[BookmakerColumn]
    markets: List[MatchBoardResponse]
    freshness: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

class SportResponse(BaseModel):
    key: str
    title: str
    group: str


class MarketResponse(BaseModel):
    key: str
    label: str
    has_point: bool
