from typing import Protocol

from coinscout.data import MarketListing, MarketQuote


class AssetListing(Protocol):
    """Interface for the paged upstream asset listing."""

    async def fetch_page(self, page: int, per_page: int) -> list[MarketListing]:
        """Fetch one page of the listing, ordered by market cap.

        Args:
            page: 1-based page number.
            per_page: Requested page size.

        Returns:
            The page rows; fewer than ``per_page`` (or none) marks the last page.
        """
        ...

    async def fetch_quotes(self, ids: list[str]) -> dict[str, MarketQuote]:
        """Fetch live market figures keyed by asset id."""
        ...
