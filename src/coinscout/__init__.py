"""CoinScout: resolve crypto questions to known assets and gather fresh sources."""

from coinscout.acquire import (
    BrowserFetchMethod,
    ContentAcquirer,
    ExtractedContent,
    FetchMethod,
    FetchResult,
    HttpFetchMethod,
    extract_publish_date,
    extract_readable,
)
from coinscout.batch import RateLimitedBatchExecutor, is_rate_limit_error
from coinscout.config import CoinScoutConfig, create_from_config, load_config
from coinscout.data import (
    AcquiredDocument,
    Accepted,
    AssetRecord,
    ClassifierVerdict,
    KnowledgeBaseSnapshot,
    MarketListing,
    MarketQuote,
    MatchCandidate,
    MatchKind,
    Rejected,
    ResearchReport,
    ResolutionResult,
    SearchHit,
)
from coinscout.errors import (
    ClassifierError,
    CoinScoutError,
    KnowledgeBaseUnavailableError,
    ListingCredentialError,
    ProviderNotConfiguredError,
    RateLimitError,
)
from coinscout.knowledge import (
    AssetListing,
    CoinGeckoListing,
    KnowledgeBaseCache,
    passes_quality_filter,
)
from coinscout.matching import (
    ClaudeConfidenceClassifier,
    ConfidenceClassifier,
    EntityMatcher,
    extract_candidate_tokens,
    parse_verdict,
)
from coinscout.pipeline import ResearchPipeline
from coinscout.query import (
    DEFAULT_SYSTEM_PROMPT,
    ClaudeQueryGenerator,
    NoOpQueryGenerator,
    QueryGenerator,
)
from coinscout.run_logger import RunLogger
from coinscout.search import (
    ExaProvider,
    SearchAggregator,
    SearchProvider,
    TavilyProvider,
    dedupe_hits,
)
from coinscout.url import extract_domain, is_blocked_domain

__all__ = [
    # Models
    "AcquiredDocument",
    "Accepted",
    "AssetRecord",
    "ClassifierVerdict",
    "KnowledgeBaseSnapshot",
    "MarketListing",
    "MarketQuote",
    "MatchCandidate",
    "MatchKind",
    "Rejected",
    "ResearchReport",
    "ResolutionResult",
    "SearchHit",
    # Errors
    "ClassifierError",
    "CoinScoutError",
    "KnowledgeBaseUnavailableError",
    "ListingCredentialError",
    "ProviderNotConfiguredError",
    "RateLimitError",
    # Functions
    "dedupe_hits",
    "extract_candidate_tokens",
    "extract_domain",
    "extract_publish_date",
    "extract_readable",
    "is_blocked_domain",
    "is_rate_limit_error",
    "parse_verdict",
    "passes_quality_filter",
    # Protocols
    "AssetListing",
    "ConfidenceClassifier",
    "FetchMethod",
    "QueryGenerator",
    "SearchProvider",
    # Knowledge base
    "CoinGeckoListing",
    "KnowledgeBaseCache",
    # Matching
    "ClaudeConfidenceClassifier",
    "EntityMatcher",
    # Query Generators
    "ClaudeQueryGenerator",
    "DEFAULT_SYSTEM_PROMPT",
    "NoOpQueryGenerator",
    # Search
    "ExaProvider",
    "SearchAggregator",
    "TavilyProvider",
    # Acquisition
    "BrowserFetchMethod",
    "ContentAcquirer",
    "ExtractedContent",
    "FetchResult",
    "HttpFetchMethod",
    # Execution
    "RateLimitedBatchExecutor",
    "ResearchPipeline",
    # Logging
    "RunLogger",
    # Config
    "CoinScoutConfig",
    "create_from_config",
    "load_config",
]
