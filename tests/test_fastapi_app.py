"""HTTP contract tests for the FastAPI app with injected fakes."""

import json

import pytest
from fastapi.testclient import TestClient

from src.domain.entities.stock_price import CompanyInfo, SymbolMatch
from src.infrastructure.config.settings import Settings
from src.infrastructure.entrypoints.fastapi_app import create_app
from tests.conftest import FakeLanguageModel, FakeStockDataProvider, make_series


def client_for(provider=None, llm=None) -> TestClient:
    app = create_app(
        stock_provider=provider or FakeStockDataProvider(),
        llm=llm or FakeLanguageModel(reply="HOLD"),
        settings=Settings(llm_timeout_seconds=2.0),
    )
    return TestClient(app)


def analysis_body(closes, current_price=110.0, **extra) -> dict:
    body = {
        "symbol": "AAPL",
        "currentPrice": current_price,
        "historicalData": [
            {
                "date": p.date,
                "open": p.open,
                "high": p.high,
                "low": p.low,
                "close": p.close,
                "volume": p.volume,
            }
            for p in make_series(closes)
        ],
    }
    body.update(extra)
    return body


class TestAnalysisEndpoint:
    def test_structured_reply(self) -> None:
        reply = json.dumps(
            {"recommendation": "BUY", "confidence": 80, "riskLevel": "LOW", "keyPoints": ["x"], "analysis": "y"}
        )
        client = client_for(llm=FakeLanguageModel(reply=reply))

        resp = client.post("/api/ai-analysis", json=analysis_body([100.0] * 10 + [105.0] * 20))

        assert resp.status_code == 200
        assert resp.json() == {
            "analysis": "y",
            "recommendation": "BUY",
            "confidence": 80,
            "riskLevel": "LOW",
            "keyPoints": ["x"],
        }
        assert resp.headers["X-Analysis-Tier"] == "structured"

    def test_gateway_failure_returns_technical_analysis(self, failing_llm) -> None:
        client = client_for(llm=failing_llm)

        resp = client.post("/api/ai-analysis", json=analysis_body([100.0] * 10 + [105.0] * 20))

        assert resp.status_code == 200
        data = resp.json()
        assert data["recommendation"] == "BUY"
        assert data["confidence"] == 65
        assert len(data["keyPoints"]) == 5
        assert resp.headers["X-Analysis-Tier"] == "deterministic"

    def test_company_info_reaches_prompt(self) -> None:
        llm = FakeLanguageModel(reply="HOLD")
        client = client_for(llm=llm)
        body = analysis_body(
            [100.0, 101.0, 102.0],
            companyInfo={"Name": "Apple Inc", "Sector": "TECHNOLOGY", "MarketCapitalization": "3000000000000"},
        )

        resp = client.post("/api/ai-analysis", json=body)

        assert resp.status_code == 200
        assert "Company: Apple Inc" in llm.prompts[0]

    @pytest.mark.parametrize("missing", ["symbol", "currentPrice", "historicalData"])
    def test_missing_field_is_400(self, missing) -> None:
        body = analysis_body([100.0, 101.0])
        del body[missing]

        resp = client_for().post("/api/ai-analysis", json=body)

        assert resp.status_code == 400
        assert resp.json()["error"] == "Missing required fields"

    def test_single_point_is_400(self) -> None:
        resp = client_for().post("/api/ai-analysis", json=analysis_body([100.0]))

        assert resp.status_code == 400
        assert resp.json()["error"] == "Not enough historical data to analyze"

    def test_non_positive_close_is_400(self) -> None:
        resp = client_for().post("/api/ai-analysis", json=analysis_body([100.0, 0.0, 101.0]))
        assert resp.status_code == 400

    def test_descending_history_is_400(self) -> None:
        body = analysis_body([100.0 + i for i in range(30)])
        body["historicalData"].reverse()
        llm = FakeLanguageModel(reply="BUY")

        resp = client_for(llm=llm).post("/api/ai-analysis", json=body)

        assert resp.status_code == 400
        assert resp.json()["error"] == "Historical data must be in ascending date order"
        assert llm.prompts == []


class TestStockEndpoint:
    def test_snapshot_shape(self, sample_quote) -> None:
        provider = FakeStockDataProvider(
            quote=sample_quote,
            history=make_series([100.0, 101.0]),
            company=CompanyInfo(name="Apple Inc", sector="TECHNOLOGY"),
        )

        resp = client_for(provider=provider).get("/api/stock/aapl")

        assert resp.status_code == 200
        data = resp.json()
        assert data["symbol"] == "AAPL"
        assert data["currentPrice"] == 110.0
        assert data["changePercent"] == 1.38
        assert data["previousClose"] == 108.5
        assert data["companyName"] == "Apple Inc"
        assert data["companyInfo"]["Sector"] == "TECHNOLOGY"
        assert [p["close"] for p in data["historicalData"]] == [100.0, 101.0]

    def test_unknown_symbol_is_404(self) -> None:
        resp = client_for().get("/api/stock/NOPE")

        assert resp.status_code == 404
        assert "API limit" in resp.json()["error"]


class TestSearchEndpoint:
    def test_results(self) -> None:
        match = SymbolMatch(symbol="AAPL", name="Apple Inc", type="Equity", region="United States")
        resp = client_for(provider=FakeStockDataProvider(matches=[match])).get("/api/search", params={"q": "app"})

        assert resp.status_code == 200
        assert resp.json() == {
            "results": [{"symbol": "AAPL", "name": "Apple Inc", "type": "Equity", "region": "United States"}]
        }

    @pytest.mark.parametrize("params", [{}, {"q": "a"}])
    def test_short_query_is_400(self, params) -> None:
        resp = client_for().get("/api/search", params=params)

        assert resp.status_code == 400
        assert resp.json() == {"error": "Query must be at least 2 characters"}


def test_health() -> None:
    assert client_for().get("/health").json() == {"status": "ok"}
