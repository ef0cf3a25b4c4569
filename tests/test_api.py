"""
Tests for the FastAPI surface
Run with: pytest tests/test_api.py -v
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from oddsboard.core.market import Match
from oddsboard.main import app, odds_client

HOME = "Boston Celtics"
AWAY = "Dallas Mavericks"

RAW_MATCH = {
    "id": "abc123",
    "home_team": HOME,
    "away_team": AWAY,
    "bookmakers": [
        {"key": "draftkings", "title": "DraftKings", "markets": [
            {"key": "h2h", "outcomes": [{"name": HOME, "price": -150}, {"name": AWAY, "price": 130}]}]},
        {"key": "fanduel", "title": "FanDuel", "markets": [
            {"key": "h2h", "outcomes": [{"name": HOME, "price": -140}, {"name": AWAY, "price": 120}]}]},
        {"key": "betus", "title": "BetUS", "markets": [
            {"key": "h2h", "outcomes": [{"name": HOME, "price": 105}, {"name": AWAY, "price": -125}]}]},
    ],
}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_odds_client():
    fake = MagicMock()
    fake.get_all_odds.return_value = [Match.from_api(RAW_MATCH, sport_key="basketball_nba")]
    app.dependency_overrides[odds_client] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


class TestCatalogue:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "operational"

    def test_sports(self, client):
        keys = [s["key"] for s in client.get("/api/sports").json()]
        assert "basketball_nba" in keys
        assert "soccer_usa_mls" in keys

    def test_markets(self, client):
        markets = client.get("/api/markets").json()
        assert [m["key"] for m in markets] == ["h2h", "spreads"]

    def test_bookmakers(self, client):
        books = client.get("/api/bookmakers").json()
        assert books[0] == {"key": "draftkings", "title": "DraftKings"}


class TestEvaluate:
    """POST /api/odds/evaluate"""

    def test_end_to_end(self, client):
        resp = client.post("/api/odds/evaluate", json={
            "matches": [RAW_MATCH],
            "market": "h2h",
            "bookmakers": ["draftkings", "fanduel", "betus"],
            "bankroll": 10000,
        })

        assert resp.status_code == 200
        body = resp.json()
        match = body["matches"][0]
        assert abs(match["home_prob"] - 0.5365) < 1e-4
        assert match["books_used"] == 3
        home = match["rows"][0]
        assert home["side"] == "home"
        cell = home["cells"]["betus"]
        assert cell["odds"] == 105
        assert abs(cell["kelly_fraction"] - 0.0950) < 1e-4
        assert abs(cell["recommended_bet"] - 950.1) < 0.1
        assert cell["is_actionable"] is True
        assert body["actionable_cells"] == 3

    def test_empty_selection_renders_na(self, client):
        resp = client.post("/api/odds/evaluate", json={"matches": [RAW_MATCH], "bookmakers": []})

        body = resp.json()
        match = body["matches"][0]
        assert match["home_prob"] == 0.0
        assert match["away_prob"] == 0.0
        assert body["columns"] == []
        assert all(row["cells"] == {} for row in match["rows"])

    def test_garbled_price_is_na(self, client):
        raw = {
            "id": 7, "home_team": HOME, "away_team": AWAY,
            "bookmakers": [{"key": "draftkings", "markets": [{"key": "h2h", "outcomes": [
                {"name": HOME, "price": "n/a"}, {"name": AWAY, "price": 130}]}]}],
        }

        resp = client.post("/api/odds/evaluate", json={"matches": [raw], "bookmakers": ["draftkings"]})

        assert resp.status_code == 200
        match = resp.json()["matches"][0]
        assert match["match_id"] == "7"
        assert match["rows"][0]["cells"]["draftkings"]["status"] == "N/A"
        assert match["rows"][1]["cells"]["draftkings"]["status"] == "ok"

    def test_unknown_market_rejected(self, client):
        resp = client.post("/api/odds/evaluate", json={"matches": [], "market": "totals"})

        assert resp.status_code == 422


class TestLiveBoard:
    """GET /api/odds with the odds client stubbed"""

    def test_board(self, client, fake_odds_client):
        resp = client.get("/api/odds", params={
            "sport": "basketball_nba", "bookmakers": "draftkings,fanduel", "bankroll": 5000,
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["bankroll"] == 5000
        assert [c["key"] for c in body["columns"]] == ["draftkings", "fanduel"]
        assert body["freshness"]["tier"] == "Tier 1"
        fake_odds_client.get_all_odds.assert_called_once_with(["basketball_nba"], markets="h2h")

    def test_unknown_sport_is_404(self, client, fake_odds_client):
        resp = client.get("/api/odds", params={"sport": "curling"})

        assert resp.status_code == 404

    def test_search_spans_sports(self, client, fake_odds_client):
        resp = client.get("/api/odds", params={"q": "celtics", "bookmakers": "draftkings"})

        assert resp.status_code == 200
        assert resp.json()["total_matches"] == 1

    def test_missing_api_key_is_503(self, client, monkeypatch):
        monkeypatch.setattr("oddsboard.main.get_odds_client", MagicMock(side_effect=ValueError("no key")))

        resp = client.get("/api/odds", params={"sport": "basketball_nba"})

        assert resp.status_code == 503


class TestMatchDetail:
    """GET /api/odds/{sport}/{match_id}"""

    def _with_spreads(self):
        raw = {**RAW_MATCH, "bookmakers": [dict(b) for b in RAW_MATCH["bookmakers"]]}
        raw["bookmakers"][0]["markets"] = RAW_MATCH["bookmakers"][0]["markets"] + [
            {"key": "spreads", "outcomes": [
                {"name": HOME, "price": -110, "point": -4.5},
                {"name": AWAY, "price": -110, "point": 4.5}]},
        ]
        return Match.from_api(raw, sport_key="basketball_nba", sport_title="NBA")

    def test_board_per_market(self, client, fake_odds_client):
        fake_odds_client.get_event_odds.return_value = self._with_spreads()

        resp = client.get("/api/odds/basketball_nba/abc123", params={"bookmakers": "draftkings,fanduel"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["match_id"] == "abc123"
        assert [m["market"] for m in body["markets"]] == ["h2h", "spreads"]
        assert [c["key"] for c in body["columns"]] == ["draftkings", "fanduel"]
        spreads = body["markets"][1]
        assert spreads["books_used"] == 1
        assert spreads["rows"][0]["cells"]["draftkings"]["point"] == -4.5
        assert spreads["rows"][0]["cells"]["fanduel"]["status"] == "N/A"
        fake_odds_client.get_event_odds.assert_called_once_with(
            "basketball_nba", "abc123", markets="h2h,spreads"
        )

    def test_single_market(self, client, fake_odds_client):
        fake_odds_client.get_event_odds.return_value = self._with_spreads()

        resp = client.get("/api/odds/basketball_nba/abc123", params={"markets": "h2h"})

        assert [m["market"] for m in resp.json()["markets"]] == ["h2h"]

    def test_unknown_match_is_404(self, client, fake_odds_client):
        fake_odds_client.get_event_odds.return_value = None

        resp = client.get("/api/odds/basketball_nba/missing")

        assert resp.status_code == 404

    def test_unknown_market_is_404(self, client, fake_odds_client):
        resp = client.get("/api/odds/basketball_nba/abc123", params={"markets": "h2h,totals"})

        assert resp.status_code == 404
        fake_odds_client.get_event_odds.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
