"""Dual-provider search aggregation with URL deduplication."""

import asyncio
import logging
from collections.abc import Iterable, Sequence

from coinscout.batch import RateLimitedBatchExecutor, Sleep
from coinscout.data import SearchHit
from coinscout.errors import ProviderNotConfiguredError
from coinscout.search.base import SearchProvider

logger = logging.getLogger(__name__)


def dedupe_hits(hits: Iterable[SearchHit]) -> list[SearchHit]:
    """Drop hits whose URL was already seen, keeping the first occurrence."""
    seen_urls: set[str] = set()
    unique: list[SearchHit] = []
    for hit in hits:
        if hit.url not in seen_urls:
            seen_urls.add(hit.url)
            unique.append(hit)
    return unique


class SearchAggregator:
    """Fan query variants out to search providers and merge their hits.

    Each provider call is paced: only the first ``max_queries`` queries are
    issued, one at a time, with the provider's ``query_delay`` between them.
    A failing query is logged and skipped after a single attempt. Providers
    listed first win URL collisions in :meth:`query_dual`.

    Args:
        providers: Configured providers in precedence order.
        max_queries: Maximum queries consulted per provider call.
        results_per_query: Maximum hits requested per query.
        sleep: Awaitable used for inter-query pauses.
    """

    def __init__(
        self,
        providers: Sequence[SearchProvider],
        *,
        max_queries: int = 3,
        results_per_query: int = 3,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._providers: dict[str, SearchProvider] = {}
        self._executors: dict[str, RateLimitedBatchExecutor] = {}
        for provider in providers:
            if provider.name in self._providers:
                raise ValueError(f"Duplicate search provider: {provider.name}")
            self._providers[provider.name] = provider
            self._executors[provider.name] = RateLimitedBatchExecutor(
                batch_size=1,
                min_delay=provider.query_delay,
                max_retries=0,
                sleep=sleep,
            )
        self._max_queries = max_queries
        self._results_per_query = results_per_query

    @property
    def provider_names(self) -> list[str]:
        return list(self._providers)

    async def query_provider(self, name: str, queries: Sequence[str]) -> list[SearchHit]:
        """Run the first ``max_queries`` queries against one provider.

        Raises:
            ProviderNotConfiguredError: No provider with that name is configured.
        """
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotConfiguredError(f"Search provider '{name}' is not configured")

        selected = list(queries)[: self._max_queries]
        logger.info(f"Searching with {name} ({len(selected)} queries)")

        async def search_one(query: str) -> list[SearchHit]:
            return await provider.search(query, max_results=self._results_per_query)

        per_query = await self._executors[name].run(selected, search_one)
        hits = dedupe_hits(hit for query_hits in per_query for hit in query_hits)
        logger.info(f"{name} found {len(hits)} results")
        return hits

    async def query_dual(self, queries: Sequence[str]) -> list[SearchHit]:
        """Query every configured provider concurrently and merge the hits.

        One provider failing does not affect the other. An empty result means
        no sources were found, not an error.
        """
        names = self.provider_names
        results = await asyncio.gather(
            *(self.query_provider(name, queries) for name in names),
            return_exceptions=True,
        )

        merged: list[SearchHit] = []
        for name, result in zip(names, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f"Search provider {name} failed. Error: {result}")
                continue
            merged.extend(result)

        unique = dedupe_hits(merged)
        logger.info(
            f"Dual search found {len(merged)} total results, {len(unique)} unique URLs"
        )
        if not unique:
            logger.warning("No sources found by any search provider")
        return unique
