"""File-backed knowledge-base cache with TTL freshness."""

import functools
import json
import logging
import time
from dataclasses import asdict
from datetime import UTC, datetime
from pathlib import Path

from coinscout.batch import RateLimitedBatchExecutor
from coinscout.data import AssetRecord, KnowledgeBaseSnapshot, MarketListing
from coinscout.errors import KnowledgeBaseUnavailableError
from coinscout.knowledge.base import AssetListing

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60


def passes_quality_filter(listing: MarketListing, *, min_market_cap: float, min_volume: float) -> bool:
    """Return True if the listing meets both the market-cap and volume floors."""
    if listing.market_cap is None or listing.total_volume is None:
        return False
    return listing.market_cap >= min_market_cap and listing.total_volume >= min_volume


class KnowledgeBaseCache:
    """Loads the asset catalogue from a JSON cache file or the upstream listing.

    A snapshot is served from the cache file while the file's modification
    time is younger than the TTL; otherwise the full listing is paged from
    upstream, filtered, persisted, and returned. Partial listings are never
    returned.

    Args:
        listing: Paged upstream listing.
        path: Cache file location.
        ttl_seconds: Maximum cache age in seconds.
        min_market_cap: Market-cap floor for the filtered set.
        min_volume: Trading-volume floor for the filtered set.
        page_size: Records requested per upstream page.
        page_delay: Pause in seconds before each page request.
        executor: Executor used for pacing and rate-limit retries. Defaults to
            a fixed 1s backoff with up to 5 retries.
    """

    def __init__(
        self,
        listing: AssetListing,
        path: Path | str,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        min_market_cap: float = 1_000_000,
        min_volume: float = 10_000,
        page_size: int = 250,
        page_delay: float = 0.12,
        executor: RateLimitedBatchExecutor | None = None,
    ) -> None:
        self._listing = listing
        self._path = Path(path)
        self._ttl = ttl_seconds
        self._min_market_cap = min_market_cap
        self._min_volume = min_volume
        self._page_size = page_size
        self._page_delay = page_delay
        self._executor = executor or RateLimitedBatchExecutor(
            batch_size=1,
            min_delay=0.0,
            max_retries=5,
            base_backoff=1.0,
            backoff_factor=1.0,
        )

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> KnowledgeBaseSnapshot:
        """Return a fresh-enough snapshot, refreshing from upstream if needed.

        Raises:
            KnowledgeBaseUnavailableError: The cache is unusable and the
                upstream fetch failed.
        """
        cached = self.read_cached()
        if cached is not None:
            age_minutes = (datetime.now(tz=UTC) - cached.captured_at).total_seconds() / 60
            logger.info(
                "Using cached knowledge base (%d filtered assets, %.0f minutes old)",
                len(cached.records),
                age_minutes,
            )
            return cached
        return await self.refresh()

    def read_cached(self) -> KnowledgeBaseSnapshot | None:
        """Read the cache file if it exists, is younger than the TTL, and parses."""
        try:
            mtime = self._path.stat().st_mtime
        except OSError:
            logger.info("No knowledge base cache at %s", self._path)
            return None

        if time.time() - mtime >= self._ttl:
            logger.info("Knowledge base cache expired, fetching fresh data")
            return None

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            filtered, unfiltered = _parse_cache_document(raw)
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning(f"Ignoring malformed knowledge base cache {self._path}. Error: {e}")
            return None

        return KnowledgeBaseSnapshot(
            records=filtered,
            all_records=unfiltered,
            captured_at=datetime.fromtimestamp(mtime, tz=UTC),
            from_cache=True,
        )

    async def refresh(self) -> KnowledgeBaseSnapshot:
        """Fetch the complete listing from upstream, filter it, and persist it.

        Raises:
            KnowledgeBaseUnavailableError: The upstream fetch failed.
        """
        try:
            listings = await self._fetch_all()
        except Exception as e:
            raise KnowledgeBaseUnavailableError(
                f"Could not fetch the asset listing; cannot continue without a knowledge base: {e}"
            ) from e

        unfiltered = tuple(listing.to_record() for listing in listings)
        filtered = tuple(
            listing.to_record()
            for listing in listings
            if passes_quality_filter(
                listing, min_market_cap=self._min_market_cap, min_volume=self._min_volume
            )
        )
        logger.info(
            "Retrieved %d assets, %d pass market cap >= %s and volume >= %s",
            len(unfiltered),
            len(filtered),
            f"{self._min_market_cap:,.0f}",
            f"{self._min_volume:,.0f}",
        )

        snapshot = KnowledgeBaseSnapshot(
            records=filtered,
            all_records=unfiltered,
            captured_at=datetime.now(tz=UTC),
        )
        self._write(snapshot)
        return snapshot

    async def _fetch_all(self) -> list[MarketListing]:
        listings: list[MarketListing] = []
        page = 1
        while True:
            await self._executor.pause(self._page_delay)
            rows = await self._executor.call(
                functools.partial(self._listing.fetch_page, page, self._page_size)
            )
            listings.extend(rows)
            if len(rows) < self._page_size:
                return listings
            page += 1

    def _write(self, snapshot: KnowledgeBaseSnapshot) -> None:
        document = {
            "filtered": [asdict(r) for r in snapshot.records],
            "unfiltered": [asdict(r) for r in snapshot.all_records],
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(document, indent=2), encoding="utf-8")
            logger.info("Knowledge base cached at %s", self._path)
        except OSError as e:
            logger.warning(f"Could not cache knowledge base. Error: {e}")


def _parse_records(items: object) -> tuple[AssetRecord, ...]:
    if not isinstance(items, list):
        raise TypeError("expected a list of asset records")
    records: list[AssetRecord] = []
    for item in items:
        if not isinstance(item, dict):
            raise TypeError("expected an asset record object")
        records.append(
            AssetRecord(id=str(item["id"]), symbol=str(item["symbol"]), name=str(item["name"]))
        )
    return tuple(records)


def _parse_cache_document(raw: object) -> tuple[tuple[AssetRecord, ...], tuple[AssetRecord, ...]]:
    """Parse the cache JSON into (filtered, unfiltered) record tuples.

    A bare list is accepted as a filtered-only cache.
    """
    if isinstance(raw, list):
        records = _parse_records(raw)
        return records, records
    if not isinstance(raw, dict):
        raise TypeError("cache document must be an object")
    filtered = _parse_records(raw["filtered"])
    unfiltered = _parse_records(raw["unfiltered"]) if "unfiltered" in raw else filtered
    return filtered, unfiltered
