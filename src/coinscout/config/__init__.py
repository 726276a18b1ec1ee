"""Configuration module for coinscout."""

from coinscout.config.factory import create_from_config
from coinscout.config.loader import get_default_config_path, load_config
from coinscout.config.models import (
    AcquisitionConfig,
    ClaudeQueryGeneratorConfig,
    CoinGeckoListingConfig,
    CoinScoutConfig,
    ExaProviderConfig,
    KnowledgeBaseConfig,
    LoggingConfig,
    MatchingConfig,
    NoOpQueryGeneratorConfig,
    ProviderConfig,
    QueryGeneratorConfig,
    SearchConfig,
    TavilyProviderConfig,
)

__all__ = [
    "AcquisitionConfig",
    "ClaudeQueryGeneratorConfig",
    "CoinGeckoListingConfig",
    "CoinScoutConfig",
    "ExaProviderConfig",
    "KnowledgeBaseConfig",
    "LoggingConfig",
    "MatchingConfig",
    "NoOpQueryGeneratorConfig",
    "ProviderConfig",
    "QueryGeneratorConfig",
    "SearchConfig",
    "TavilyProviderConfig",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
