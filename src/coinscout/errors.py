"""Exception types shared across coinscout components."""


class CoinScoutError(Exception):
    """Base class for all coinscout errors."""


class RateLimitError(CoinScoutError):
    """An upstream explicitly signalled "too many requests"."""


class ListingCredentialError(CoinScoutError):
    """The upstream listing API key is missing."""


class KnowledgeBaseUnavailableError(CoinScoutError):
    """No knowledge base could be produced; the pipeline cannot continue."""


class ClassifierError(CoinScoutError):
    """The confidence classifier failed or returned an unparseable response."""


class ProviderNotConfiguredError(CoinScoutError):
    """A search provider was requested by name but is not configured."""
