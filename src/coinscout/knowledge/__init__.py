"""Asset knowledge base: upstream listing and file-backed cache."""

from coinscout.knowledge.base import AssetListing
from coinscout.knowledge.cache import KnowledgeBaseCache, passes_quality_filter
from coinscout.knowledge.coingecko import CoinGeckoListing

__all__ = [
    "AssetListing",
    "CoinGeckoListing",
    "KnowledgeBaseCache",
    "passes_quality_filter",
]
