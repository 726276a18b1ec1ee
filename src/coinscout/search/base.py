from typing import Protocol

from coinscout.data import SearchHit


class SearchProvider(Protocol):
    """Interface for a web search provider.

    Attributes:
        name: Provider tag recorded on every hit (e.g. "exa").
        query_delay: Pause in seconds between consecutive queries.
    """

    name: str
    query_delay: float

    async def search(self, query: str, *, max_results: int = 3) -> list[SearchHit]:
        """Run one search query.

        Args:
            query: Search query text.
            max_results: Maximum hits to return.

        Returns:
            Hits for the query; empty when nothing matched.
        """
        ...
