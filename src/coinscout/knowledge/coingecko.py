"""CoinGecko market listing over the Pro REST API."""

import logging
import os
from typing import Any

import httpx

from coinscout.data import MarketListing, MarketQuote
from coinscout.errors import ListingCredentialError

COINGECKO_PRO_URL = "https://pro-api.coingecko.com/api/v3"

logger = logging.getLogger(__name__)


class CoinGeckoListing:
    """Paged ``/coins/markets`` listing from CoinGecko.

    The API key is checked when a request is made rather than at
    construction, so a fresh on-disk cache can be used without one.

    Args:
        api_key: CoinGecko Pro API key (defaults to COINGECKO_API_KEY env var).
        base_url: API root.
        vs_currency: Quote currency for market figures.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str = COINGECKO_PRO_URL,
        vs_currency: str = "usd",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("COINGECKO_API_KEY")
        self._base_url = base_url.rstrip("/")
        self._vs_currency = vs_currency
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise ListingCredentialError(
                "CoinGecko API key required. Pass api_key or set COINGECKO_API_KEY env var."
            )
        return {"x-cg-pro-api-key": self._api_key}

    async def _get(self, params: dict[str, str | int]) -> list[dict[str, Any]]:
        headers = self._headers()
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.get(
                f"{self._base_url}/coins/markets", params=params, headers=headers
            )
            response.raise_for_status()
            data = response.json()
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    async def fetch_page(self, page: int, per_page: int) -> list[MarketListing]:
        """Fetch one page of assets ordered by descending market cap."""
        rows = await self._get(
            {
                "vs_currency": self._vs_currency,
                "order": "market_cap_desc",
                "per_page": per_page,
                "page": page,
            }
        )
        return [
            MarketListing(
                id=str(row["id"]),
                symbol=str(row.get("symbol", "")),
                name=str(row.get("name", "")),
                market_cap=_as_float(row.get("market_cap")),
                total_volume=_as_float(row.get("total_volume")),
                current_price=_as_float(row.get("current_price")),
            )
            for row in rows
            if row.get("id")
        ]

    async def fetch_quotes(self, ids: list[str]) -> dict[str, MarketQuote]:
        """Fetch price, market cap and 24h figures for the given asset ids."""
        if not ids:
            return {}
        rows = await self._get({"vs_currency": self._vs_currency, "ids": ",".join(ids)})
        quotes: dict[str, MarketQuote] = {}
        for row in rows:
            if not row.get("id"):
                continue
            quote = MarketQuote(
                id=str(row["id"]),
                symbol=str(row.get("symbol", "")),
                name=str(row.get("name", "")),
                current_price=_as_float(row.get("current_price")),
                market_cap=_as_float(row.get("market_cap")),
                price_change_24h=_as_float(row.get("price_change_percentage_24h")),
                high_24h=_as_float(row.get("high_24h")),
                low_24h=_as_float(row.get("low_24h")),
            )
            quotes[quote.id] = quote
        return quotes


def _as_float(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
