"""Exa search using the official exa-py SDK."""

import os

from exa_py import AsyncExa

from coinscout.data import SearchHit


class ExaProvider:
    """Search the web with the Exa neural search API.

    Args:
        api_key: Exa API key (defaults to EXA_API_KEY env var).
        query_delay: Pause in seconds between consecutive queries.
    """

    name = "exa"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        query_delay: float = 0.2,
    ) -> None:
        self._api_key = api_key or os.environ.get("EXA_API_KEY")
        if not self._api_key:
            raise ValueError("Exa API key required. Pass api_key or set EXA_API_KEY env var.")
        self.query_delay = query_delay
        self._client = AsyncExa(api_key=self._api_key)

    async def search(self, query: str, *, max_results: int = 3) -> list[SearchHit]:
        """Execute a single Exa search query."""
        response = await self._client.search(query, num_results=max_results, type="neural")

        hits: list[SearchHit] = []
        for result in response.results:
            score = getattr(result, "score", None)
            hits.append(
                SearchHit(
                    url=result.url,
                    title=result.title or "No title",
                    provider=self.name,
                    published_at=result.published_date,
                    score=float(score) if isinstance(score, (int, float)) else None,
                    query=query,
                )
            )
        return hits
