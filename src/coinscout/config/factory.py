"""Factory functions to create components from configuration."""

import logging
from pathlib import Path

from coinscout.acquire import BrowserFetchMethod, ContentAcquirer, FetchMethod, HttpFetchMethod
from coinscout.config.models import (
    AcquisitionConfig,
    ClaudeQueryGeneratorConfig,
    CoinGeckoListingConfig,
    CoinScoutConfig,
    ExaProviderConfig,
    KnowledgeBaseConfig,
    MatchingConfig,
    NoOpQueryGeneratorConfig,
    QueryGeneratorConfig,
    SearchConfig,
    TavilyProviderConfig,
)
from coinscout.errors import ProviderNotConfiguredError
from coinscout.knowledge import CoinGeckoListing, KnowledgeBaseCache
from coinscout.matching import ClaudeConfidenceClassifier, EntityMatcher
from coinscout.pipeline import ResearchPipeline
from coinscout.query import ClaudeQueryGenerator, NoOpQueryGenerator, QueryGenerator
from coinscout.run_logger import RunLogger
from coinscout.search import ExaProvider, SearchAggregator, SearchProvider, TavilyProvider

logger = logging.getLogger(__name__)


def create_listing(config: CoinGeckoListingConfig) -> CoinGeckoListing:
    """Create the upstream market listing from config."""
    if isinstance(config, CoinGeckoListingConfig):
        return CoinGeckoListing(
            base_url=config.base_url,
            vs_currency=config.vs_currency,
            timeout=config.timeout,
        )
    msg = f"Unknown listing config type: {type(config)}"
    raise ValueError(msg)


def create_knowledge_base(
    config: KnowledgeBaseConfig, listing: CoinGeckoListing
) -> KnowledgeBaseCache:
    """Create the knowledge-base cache from config."""
    return KnowledgeBaseCache(
        listing,
        Path(config.cache_path),
        ttl_seconds=config.ttl_seconds,
        min_market_cap=config.min_market_cap,
        min_volume=config.min_volume,
        page_size=config.page_size,
        page_delay=config.page_delay,
    )


def create_matcher(config: MatchingConfig) -> EntityMatcher:
    """Create the entity matcher with a Claude confidence classifier."""
    classifier = ClaudeConfidenceClassifier(model=config.model, threshold=config.threshold)
    return EntityMatcher(classifier, threshold=config.threshold)


def create_generator(config: QueryGeneratorConfig) -> QueryGenerator:
    """Create a query generator from config.

    Uses explicit type matching rather than getattr.
    """
    if isinstance(config, ClaudeQueryGeneratorConfig):
        return ClaudeQueryGenerator(
            model=config.model,
            system_prompt=config.system_prompt,
        )
    if isinstance(config, NoOpQueryGeneratorConfig):
        return NoOpQueryGenerator()
    msg = f"Unknown generator config type: {type(config)}"
    raise ValueError(msg)


def create_provider(config: ExaProviderConfig | TavilyProviderConfig) -> SearchProvider:
    """Create a search provider from config."""
    if isinstance(config, ExaProviderConfig):
        return ExaProvider(query_delay=config.query_delay)
    if isinstance(config, TavilyProviderConfig):
        return TavilyProvider(
            query_delay=config.query_delay,
            search_depth=config.search_depth,
        )
    msg = f"Unknown provider config type: {type(config)}"
    raise ValueError(msg)


def create_aggregator(config: SearchConfig) -> SearchAggregator:
    """Create the search aggregator.

    With a single-engine selection only that engine's provider is built, so
    the other provider's credential is not required. In dual mode a provider
    whose credential is missing is skipped with a warning.

    Raises:
        ValueError: The selected single engine cannot be built.
        ProviderNotConfiguredError: Dual mode and no provider could be built.
    """
    providers: list[SearchProvider]
    if config.engine != "dual":
        providers = [create_provider(p) for p in config.providers if p.type == config.engine]
    else:
        providers = []
        for provider_config in config.providers:
            try:
                providers.append(create_provider(provider_config))
            except ValueError as e:
                logger.warning(f"Skipping {provider_config.type} search provider: {e}")
        if not providers:
            raise ProviderNotConfiguredError(
                "No search provider could be configured; set EXA_API_KEY or TAVILY_API_KEY"
            )
    return SearchAggregator(
        providers,
        max_queries=config.max_queries,
        results_per_query=config.results_per_query,
    )


def create_acquirer(config: AcquisitionConfig) -> ContentAcquirer:
    """Create the content acquirer with its fetch-method chain."""
    methods: list[FetchMethod] = [
        HttpFetchMethod(timeout=config.timeout, max_redirects=config.max_redirects)
    ]
    if config.use_browser:
        methods.append(BrowserFetchMethod(timeout=config.timeout, headless=config.headless))
    return ContentAcquirer(
        methods,
        min_content_chars=config.min_content_chars,
        max_content_chars=config.max_content_chars,
        max_urls=config.max_urls,
        request_delay=config.request_delay,
        blocked_domains=config.blocked_domains,
    )


def create_pipeline(
    config: CoinScoutConfig,
    run_logger: RunLogger | None = None,
) -> ResearchPipeline:
    """Create the research pipeline from config."""
    listing = create_listing(config.listing)
    return ResearchPipeline(
        knowledge_base=create_knowledge_base(config.knowledge_base, listing),
        matcher=create_matcher(config.matching),
        generator=create_generator(config.query_generator),
        aggregator=create_aggregator(config.search),
        acquirer=create_acquirer(config.acquisition),
        engine=config.search.engine,
        listing=listing if config.listing.fetch_quotes else None,
        num_queries=config.search.num_queries,
        run_logger=run_logger,
    )


def create_from_config(
    config: CoinScoutConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[ResearchPipeline, RunLogger | None]:
    """Create a complete pipeline from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (pipeline, run_logger).
        run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    pipeline = create_pipeline(config, run_logger=run_logger)
    return (pipeline, run_logger)
