"""
The Odds API integration for live sportsbook odds.
https://the-odds-api.com/

Only the read endpoints the odds board needs are wrapped:

  /sports                 — sports currently offered
  /bookmakers             — bookmaker keys and titles
  /sports/{sport}/odds    — per-match odds for one or more markets
  /sports/{sport}/events/{id}/odds
                          — every requested market for one match

Responses are parsed into :class:`~oddsboard.core.market.Match` objects
tagged with the sport they were fetched for.  A failed request is logged
and yields an empty list so one unavailable sport never blanks the board.
"""

import logging
import os
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

import requests

from oddsboard.core.catalog import DEFAULT_MARKET, get_sport
from oddsboard.core.market import Match

logger = logging.getLogger(__name__)

BASE_URL = "https://api.the-odds-api.com/v4"
DEFAULT_REGIONS = os.getenv("ODDS_API_REGIONS", "us")
REQUEST_TIMEOUT = float(os.getenv("ODDS_API_TIMEOUT", "10"))
DETAIL_MARKETS = "h2h,spreads"


class OddsAPIClient:
    """Client for The Odds API"""

    def __init__(self, api_key: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        self.api_key = api_key or os.getenv("THE_ODDS_API_KEY")
        if not self.api_key:
            raise ValueError("THE_ODDS_API_KEY not set in environment")
        self.timeout = timeout
        self.requests_remaining: Optional[str] = None

    def _get(self, path: str, **params) -> Optional[Union[list, dict]]:
        url = f"{BASE_URL}{path}"
        params["apiKey"] = self.api_key

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.error("Odds API error on %s: %s", path, e)
            return None

        remaining = response.headers.get("x-requests-remaining")
        used = response.headers.get("x-requests-used")
        if remaining is not None:
            self.requests_remaining = remaining
        logger.info("Odds API %s: quota %s used, %s remaining", path, used, remaining)

        try:
            return response.json()
        except ValueError as e:
            logger.error("Odds API returned non-JSON body for %s: %s", path, e)
            return None

    def get_sports(self) -> List[Dict]:
        """Sports currently in season."""
        return self._get("/sports") or []

    def get_bookmakers(self) -> List[Dict]:
        """Bookmaker keys and titles known to the API."""
        return self._get("/bookmakers") or []

    def get_odds(
        self,
        sport_key: str,
        markets: str = DEFAULT_MARKET,
        regions: str = DEFAULT_REGIONS,
        odds_format: str = "american",
    ) -> List[Match]:
        """
        Fetch current odds for one sport.

        Returns parsed matches tagged with ``sport_key``.  Entries missing
        an id or either team are skipped with a warning.
        """
        data = self._get(
            f"/sports/{sport_key}/odds",
            regions=regions,
            markets=markets,
            oddsFormat=odds_format,
        )
        if not data:
            return []

        try:
            sport_title = get_sport(sport_key).title
        except KeyError:
            sport_title = None

        matches = []
        for raw in data:
            try:
                matches.append(Match.from_api(raw, sport_key=sport_key, sport_title=sport_title))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping malformed %s match: %s", sport_key, e)

        logger.info("Odds API: %d %s matches parsed (markets=%s)", len(matches), sport_key, markets)
        return matches

    def get_event_odds(
        self,
        sport_key: str,
        event_id: str,
        markets: str = DETAIL_MARKETS,
        regions: str = DEFAULT_REGIONS,
        odds_format: str = "american",
    ) -> Optional[Match]:
        """
        Fetch every requested market for a single match.

        Returns None when the request fails or the event payload cannot be
        parsed into a match.
        """
        data = self._get(
            f"/sports/{sport_key}/events/{event_id}/odds",
            regions=regions,
            markets=markets,
            oddsFormat=odds_format,
        )
        if not isinstance(data, dict):
            return None

        try:
            sport_title = get_sport(sport_key).title
        except KeyError:
            sport_title = None

        try:
            return Match.from_api(data, sport_key=sport_key, sport_title=sport_title)
        except (KeyError, TypeError) as e:
            logger.warning("Malformed %s event %s: %s", sport_key, event_id, e)
            return None

    def get_all_odds(
        self,
        sport_keys: Iterable[str],
        markets: str = DEFAULT_MARKET,
        regions: str = DEFAULT_REGIONS,
    ) -> List[Match]:
        """Fetch each sport in turn and concatenate the matches."""
        matches: List[Match] = []
        for sport_key in sport_keys:
            matches.extend(self.get_odds(sport_key, markets=markets, regions=regions))
        return matches


def get_data_freshness(fetched_at: datetime) -> Dict:
    """Calculate data freshness tier."""
    now = datetime.now(timezone.utc)
    if fetched_at.tzinfo is None:
        fetched_at = fetched_at.replace(tzinfo=timezone.utc)
    age_minutes = (now - fetched_at).total_seconds() / 60

    if age_minutes < 10:
        tier = "Tier 1"
    elif age_minutes < 30:
        tier = "Tier 2"
    else:
        tier = "Tier 3"

    return {
        "fetched_at": fetched_at.isoformat(),
        "age_minutes": age_minutes,
        "tier": tier,
    }


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_odds_client: Optional[OddsAPIClient] = None


def get_odds_client() -> OddsAPIClient:
    global _odds_client
    if _odds_client is None:
        _odds_client = OddsAPIClient()
    return _odds_client


if __name__ == "__main__":
    client = OddsAPIClient()
    matches = client.get_odds("basketball_nba")

    print(f"Found {len(matches)} matches:")
    for match in matches[:3]:
        print(f"  {match.away_team} @ {match.home_team} ({len(match.bookmakers)} books)")
