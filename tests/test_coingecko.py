"""Tests for CoinGeckoListing."""

from typing import Any

import httpx
import pytest

from coinscout.batch import is_rate_limit_error
from coinscout.errors import ListingCredentialError
from coinscout.knowledge import CoinGeckoListing


class TestCoinGeckoListing:
    """Tests for CoinGeckoListing."""

    @pytest.fixture
    def listing(self) -> CoinGeckoListing:
        return CoinGeckoListing(api_key="test-key")

    @pytest.fixture
    def market_rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": "bitcoin",
                "symbol": "btc",
                "name": "Bitcoin",
                "current_price": 65000.5,
                "market_cap": 1_280_000_000_000,
                "total_volume": 32_000_000_000,
                "price_change_percentage_24h": -1.25,
                "high_24h": 66000,
                "low_24h": 64000,
            },
            {
                "id": "obscure",
                "symbol": "obs",
                "name": "Obscure",
                "current_price": 0.01,
                "market_cap": None,
                "total_volume": 1200,
            },
            {"symbol": "noid", "name": "No Id"},
        ]

    def _patch_get(
        self,
        monkeypatch: pytest.MonkeyPatch,
        payload: Any,
        status_code: int = 200,
    ) -> list[dict[str, Any]]:
        captured: list[dict[str, Any]] = []

        async def mock_get(self: Any, url: str, **kwargs: Any) -> httpx.Response:
            captured.append({"url": url, **kwargs})
            return httpx.Response(status_code, json=payload, request=httpx.Request("GET", url))

        monkeypatch.setattr(httpx.AsyncClient, "get", mock_get)
        return captured

    def test_missing_api_key_is_reported_on_use(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
        listing = CoinGeckoListing()
        with pytest.raises(ListingCredentialError, match="COINGECKO_API_KEY"):
            listing._headers()

    def test_uses_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COINGECKO_API_KEY", "env-key")
        listing = CoinGeckoListing()
        assert listing._headers() == {"x-cg-pro-api-key": "env-key"}

    async def test_fetch_page_parses_rows(
        self,
        listing: CoinGeckoListing,
        market_rows: list[dict[str, Any]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        captured = self._patch_get(monkeypatch, market_rows)

        rows = await listing.fetch_page(2, 250)

        assert [r.id for r in rows] == ["bitcoin", "obscure"]
        assert rows[0].market_cap == 1_280_000_000_000.0
        assert rows[0].total_volume == 32_000_000_000.0
        assert rows[1].market_cap is None

        request = captured[0]
        assert request["url"] == "https://pro-api.coingecko.com/api/v3/coins/markets"
        assert request["params"] == {
            "vs_currency": "usd",
            "order": "market_cap_desc",
            "per_page": 250,
            "page": 2,
        }
        assert request["headers"] == {"x-cg-pro-api-key": "test-key"}

    async def test_fetch_page_empty(
        self, listing: CoinGeckoListing, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        self._patch_get(monkeypatch, [])
        assert await listing.fetch_page(99, 250) == []

    async def test_rate_limit_response_is_retryable(
        self, listing: CoinGeckoListing, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        self._patch_get(monkeypatch, {"error": "Too Many Requests"}, status_code=429)

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await listing.fetch_page(1, 250)
        assert is_rate_limit_error(exc_info.value)

    async def test_fetch_quotes_maps_market_figures(
        self,
        listing: CoinGeckoListing,
        market_rows: list[dict[str, Any]],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        captured = self._patch_get(monkeypatch, market_rows[:1])

        quotes = await listing.fetch_quotes(["bitcoin"])

        quote = quotes["bitcoin"]
        assert quote.current_price == 65000.5
        assert quote.price_change_24h == -1.25
        assert quote.high_24h == 66000.0
        assert quote.low_24h == 64000.0
        assert captured[0]["params"] == {"vs_currency": "usd", "ids": "bitcoin"}

    async def test_fetch_quotes_without_ids_makes_no_request(
        self, listing: CoinGeckoListing, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        captured = self._patch_get(monkeypatch, [])
        assert await listing.fetch_quotes([]) == {}
        assert captured == []
