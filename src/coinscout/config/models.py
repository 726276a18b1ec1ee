"""Pydantic configuration models for coinscout components."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

# ============================================================
# Knowledge Base Configs
# ============================================================


class KnowledgeBaseConfig(BaseModel):
    """Configuration for the file-backed asset catalogue cache."""

    cache_path: str = "cache/coins.json"
    ttl_seconds: float = 1800
    min_market_cap: float = 1_000_000
    min_volume: float = 10_000
    page_size: int = 250
    page_delay: float = 0.12

    model_config = {"frozen": True}


class CoinGeckoListingConfig(BaseModel):
    """Configuration for the CoinGecko market listing."""

    type: Literal["coingecko"] = "coingecko"
    base_url: str = "https://pro-api.coingecko.com/api/v3"
    vs_currency: str = "usd"
    timeout: float = 30.0
    fetch_quotes: bool = True

    model_config = {"frozen": True}


# ============================================================
# Matching Configs
# ============================================================


class MatchingConfig(BaseModel):
    """Configuration for entity matching and the Claude confidence classifier."""

    model: str = "claude-haiku-4-5-20251001"
    threshold: int = Field(default=60, ge=0, le=100)

    model_config = {"frozen": True}


# ============================================================
# Generator Configs
# ============================================================


class ClaudeQueryGeneratorConfig(BaseModel):
    """Configuration for ClaudeQueryGenerator."""

    type: Literal["claude"] = "claude"
    model: str = "claude-haiku-4-5-20251001"
    system_prompt: str | None = None

    model_config = {"frozen": True}


class NoOpQueryGeneratorConfig(BaseModel):
    """Pass-through generator (searches the query as-is)."""

    type: Literal["noop"] = "noop"

    model_config = {"frozen": True}


QueryGeneratorConfig = Annotated[
    ClaudeQueryGeneratorConfig | NoOpQueryGeneratorConfig,
    Field(discriminator="type"),
]


# ============================================================
# Search Configs
# ============================================================


class ExaProviderConfig(BaseModel):
    """Configuration for ExaProvider."""

    type: Literal["exa"] = "exa"
    query_delay: float = 0.2

    model_config = {"frozen": True}


class TavilyProviderConfig(BaseModel):
    """Configuration for TavilyProvider."""

    type: Literal["tavily"] = "tavily"
    query_delay: float = 0.5
    search_depth: Literal["basic", "advanced"] = "basic"

    model_config = {"frozen": True}


ProviderConfig = Annotated[
    ExaProviderConfig | TavilyProviderConfig,
    Field(discriminator="type"),
]


def _default_providers() -> list[ExaProviderConfig | TavilyProviderConfig]:
    return [ExaProviderConfig(), TavilyProviderConfig()]


class SearchConfig(BaseModel):
    """Configuration for search-engine selection and aggregation."""

    engine: Literal["exa", "tavily", "dual"] = "dual"
    providers: list[ProviderConfig] = Field(default_factory=_default_providers)
    num_queries: int = 3
    max_queries: int = 3
    results_per_query: int = 3

    model_config = {"frozen": True}


# ============================================================
# Acquisition Configs
# ============================================================


class AcquisitionConfig(BaseModel):
    """Configuration for content acquisition."""

    min_content_chars: int = 100
    max_content_chars: int = 8000
    max_urls: int = 10
    request_delay: float = 1.0
    timeout: float = 10.0
    max_redirects: int = 3
    use_browser: bool = True
    headless: bool = True
    blocked_domains: list[str] = Field(
        default_factory=lambda: ["mexc.com", "bitget.com", "gate.io"]
    )

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for intermediate pipeline logging."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class CoinScoutConfig(BaseModel):
    """Root configuration for coinscout."""

    knowledge_base: KnowledgeBaseConfig = Field(default_factory=KnowledgeBaseConfig)
    listing: CoinGeckoListingConfig = Field(default_factory=CoinGeckoListingConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    query_generator: QueryGeneratorConfig = Field(default_factory=ClaudeQueryGeneratorConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    acquisition: AcquisitionConfig = Field(default_factory=AcquisitionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
