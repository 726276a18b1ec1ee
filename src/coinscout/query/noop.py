"""No-op query generator that passes through the user query as-is."""

from coinscout.data import AssetRecord


class NoOpQueryGenerator:
    """Query generator that returns the user query as the single search query.

    No API calls are made. Useful when query variants are not worth the cost
    of a model call.
    """

    async def generate(
        self,
        query: str,
        assets: list[AssetRecord],
        *,
        num_queries: int = 3,
    ) -> list[str]:
        """Return the query unchanged.

        ``assets`` and ``num_queries`` are accepted for protocol compatibility
        but ignored.
        """
        return [query]
