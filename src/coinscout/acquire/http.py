"""Fast fetch method: a direct HTTP request."""

import httpx

from coinscout.acquire.base import FetchResult, random_user_agent


class HttpFetchMethod:
    """Fetch raw markup with a single HTTP GET and a randomized user agent.

    Args:
        timeout: Request timeout in seconds.
        max_redirects: Maximum redirects followed.
    """

    name = "http"

    def __init__(self, *, timeout: float = 10.0, max_redirects: int = 3) -> None:
        self._timeout = timeout
        self._max_redirects = max_redirects

    async def fetch(self, url: str) -> FetchResult:
        headers = {"User-Agent": random_user_agent()}
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                max_redirects=self._max_redirects,
            ) as client:
                response = await client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return FetchResult.failure(self.name, f"{type(e).__name__}: {e}")

        if not response.is_success:
            return FetchResult.failure(self.name, f"HTTP {response.status_code}")
        return FetchResult.success(self.name, response.text)

    async def close(self) -> None:
        return None
