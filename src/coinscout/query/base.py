from typing import Protocol

from coinscout.data import AssetRecord


class QueryGenerator(Protocol):
    """Interface for turning a resolved query into search-query variants."""

    async def generate(
        self,
        query: str,
        assets: list[AssetRecord],
        *,
        num_queries: int = 3,
    ) -> list[str]:
        """Generate search queries for the resolved assets.

        Args:
            query: The sanitized user query.
            assets: Assets the query was resolved to.
            num_queries: Number of queries to request per asset.

        Returns:
            Search query strings, most important first.
        """
        ...
