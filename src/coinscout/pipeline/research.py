"""End-to-end research pipeline: resolve, search, acquire."""

import logging
import time
from typing import Literal

from coinscout.acquire import ContentAcquirer
from coinscout.data import (
    AssetRecord,
    MarketQuote,
    Rejected,
    ResearchReport,
    SearchHit,
)
from coinscout.errors import ProviderNotConfiguredError
from coinscout.knowledge import AssetListing, KnowledgeBaseCache
from coinscout.matching import EntityMatcher
from coinscout.query import QueryGenerator
from coinscout.run_logger import RunLogger
from coinscout.search import SearchAggregator

logger = logging.getLogger(__name__)

SearchEngine = Literal["exa", "tavily", "dual"]


class ResearchPipeline:
    """Resolve a query to known assets and gather documents about them.

    Flow:
    1. Load the knowledge base (cache or upstream); failure here is fatal
    2. Resolve the query to assets; a rejection ends the run
    3. Generate search-query variants (falls back to the query itself)
    4. Search with the selected engine
    5. Acquire readable documents from the hit URLs
    6. Fetch live market quotes for the resolved assets

    The acquirer is closed when the run ends, whatever the outcome.

    Args:
        knowledge_base: Asset catalogue cache.
        matcher: Entity matcher used for resolution.
        generator: Query-variant generator.
        aggregator: Search aggregator holding the configured providers.
        acquirer: Content acquirer.
        engine: "exa", "tavily", or "dual" (both providers merged).
        listing: Optional market listing used for live quotes.
        num_queries: Query variants requested per asset.
        run_logger: Optional RunLogger for intermediate result logging.
    """

    def __init__(
        self,
        knowledge_base: KnowledgeBaseCache,
        matcher: EntityMatcher,
        generator: QueryGenerator,
        aggregator: SearchAggregator,
        acquirer: ContentAcquirer,
        *,
        engine: SearchEngine = "dual",
        listing: AssetListing | None = None,
        num_queries: int = 3,
        run_logger: RunLogger | None = None,
    ) -> None:
        if engine != "dual" and engine not in aggregator.provider_names:
            raise ProviderNotConfiguredError(
                f"Search engine {engine!r} selected but not configured "
                f"(configured: {', '.join(aggregator.provider_names) or 'none'})"
            )
        self._knowledge_base = knowledge_base
        self._matcher = matcher
        self._generator = generator
        self._aggregator = aggregator
        self._acquirer = acquirer
        self._engine = engine
        self._listing = listing
        self._num_queries = num_queries
        self._run_logger = run_logger

    async def run(self, query: str) -> ResearchReport:
        """Execute the pipeline for one query.

        Raises:
            KnowledgeBaseUnavailableError: If no knowledge base can be loaded.
        """
        if self._run_logger:
            self._run_logger.start_run(query)

        try:
            report = await self._run(query)
        finally:
            await self._acquirer.close()

        if self._run_logger:
            self._run_logger.finish_run(list(report.documents), accepted=report.accepted)
        return report

    async def _run(self, query: str) -> ResearchReport:
        t0 = time.monotonic()
        snapshot = await self._knowledge_base.load()
        self._log_stage(
            "knowledge_base",
            self._knowledge_base,
            {"path": self._knowledge_base.path},
            {"records": len(snapshot.records), "from_cache": snapshot.from_cache},
            t0,
        )

        t0 = time.monotonic()
        resolution = await self._matcher.resolve(query, snapshot)
        self._log_stage("resolution", self._matcher, query, resolution, t0)

        if isinstance(resolution, Rejected):
            logger.info(f"Query rejected: {resolution.message}")
            return ResearchReport(query=query, resolution=resolution)

        assets = list(resolution.assets)
        logger.info("Resolved to: %s", ", ".join(a.name for a in assets))

        queries = await self._generate_queries(query, assets)
        hits = await self._search(queries)

        t0 = time.monotonic()
        urls = [hit.url for hit in hits]
        documents = await self._acquirer.acquire_many(urls)
        self._log_stage("acquisition", self._acquirer, urls, documents, t0)

        quotes = await self._fetch_quotes(assets)

        return ResearchReport(
            query=query,
            resolution=resolution,
            search_queries=tuple(queries),
            hits=tuple(hits),
            documents=tuple(documents),
            quotes=quotes,
        )

    async def _generate_queries(self, query: str, assets: list[AssetRecord]) -> list[str]:
        t0 = time.monotonic()
        try:
            queries = await self._generator.generate(query, assets, num_queries=self._num_queries)
        except Exception as e:
            logger.warning(f"Error in query generation, using original query: {e}")
            queries = []
        if not queries:
            queries = [query]
        self._log_stage("query_generation", self._generator, query, queries, t0)
        return queries

    async def _search(self, queries: list[str]) -> list[SearchHit]:
        t0 = time.monotonic()
        if self._engine == "dual":
            hits = await self._aggregator.query_dual(queries)
        else:
            hits = await self._aggregator.query_provider(self._engine, queries)
        logger.info("Found %d unique URLs", len(hits))
        self._log_stage("search", self._aggregator, queries, hits, t0)
        return hits

    async def _fetch_quotes(self, assets: list[AssetRecord]) -> dict[str, MarketQuote]:
        if self._listing is None:
            return {}
        t0 = time.monotonic()
        ids = [a.id for a in assets]
        try:
            quotes = await self._listing.fetch_quotes(ids)
        except Exception as e:
            logger.warning(f"Error fetching market quotes: {e}")
            quotes = {}
        self._log_stage("market_quotes", self._listing, ids, quotes, t0)
        return quotes

    def _log_stage(
        self,
        stage: str,
        component: object,
        input_data: object,
        output_data: object,
        started: float,
    ) -> None:
        if self._run_logger:
            self._run_logger.log_stage(
                stage=stage,
                component=type(component).__name__,
                input_data=input_data,
                output_data=output_data,
                duration_seconds=time.monotonic() - started,
            )
