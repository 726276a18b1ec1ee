from coinscout.search.aggregator import SearchAggregator, dedupe_hits
from coinscout.search.base import SearchProvider
from coinscout.search.exa import ExaProvider
from coinscout.search.tavily import TavilyProvider

__all__ = [
    "ExaProvider",
    "SearchAggregator",
    "SearchProvider",
    "TavilyProvider",
    "dedupe_hits",
]
