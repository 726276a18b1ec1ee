"""Tavily search over its REST API."""

import os

import httpx

from coinscout.data import SearchHit

TAVILY_SEARCH_URL = "https://api.tavily.com/search"


class TavilyProvider:
    """Search the web with the Tavily search API.

    Args:
        api_key: Tavily API key (defaults to TAVILY_API_KEY env var).
        query_delay: Pause in seconds between consecutive queries.
        search_depth: Tavily search depth ("basic" or "advanced").
        timeout: Request timeout in seconds.
    """

    name = "tavily"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        query_delay: float = 0.5,
        search_depth: str = "basic",
        timeout: float = 30.0,
    ) -> None:
        self._api_key = api_key or os.environ.get("TAVILY_API_KEY")
        if not self._api_key:
            raise ValueError(
                "Tavily API key required. Pass api_key or set TAVILY_API_KEY env var."
            )
        self.query_delay = query_delay
        self._search_depth = search_depth
        self._timeout = timeout

    async def search(self, query: str, *, max_results: int = 3) -> list[SearchHit]:
        """Execute a single Tavily search query."""
        payload = {
            "query": query,
            "search_depth": self._search_depth,
            "max_results": max_results,
            "include_answer": False,
            "include_raw_content": False,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(TAVILY_SEARCH_URL, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()

        hits: list[SearchHit] = []
        for item in data.get("results", []):
            url = item.get("url")
            if not url:
                continue
            score = item.get("score")
            hits.append(
                SearchHit(
                    url=url,
                    title=item.get("title") or "No title",
                    provider=self.name,
                    published_at=item.get("published_date"),
                    score=float(score) if isinstance(score, (int, float)) else None,
                    query=query,
                )
            )
        return hits[:max_results]
