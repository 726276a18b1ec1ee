"""Tests for KnowledgeBaseCache."""

import json
import os
import time
from pathlib import Path

import pytest

from coinscout.batch import RateLimitedBatchExecutor
from coinscout.data import AssetRecord, MarketListing, MarketQuote
from coinscout.errors import KnowledgeBaseUnavailableError, ListingCredentialError, RateLimitError
from coinscout.knowledge import KnowledgeBaseCache, passes_quality_filter
from tests.conftest import SleepRecorder


def _listing(
    asset_id: str,
    market_cap: float | None = 5_000_000,
    total_volume: float | None = 50_000,
) -> MarketListing:
    return MarketListing(
        id=asset_id,
        symbol=asset_id[:3],
        name=asset_id.title(),
        market_cap=market_cap,
        total_volume=total_volume,
    )


class FakeListing:
    """Paged listing returning canned pages and recording requests."""

    def __init__(self, pages: list[list[MarketListing]], failures: list[Exception] | None = None):
        self.pages = pages
        self.failures = list(failures or [])
        self.calls: list[tuple[int, int]] = []

    async def fetch_page(self, page: int, per_page: int) -> list[MarketListing]:
        self.calls.append((page, per_page))
        if self.failures:
            raise self.failures.pop(0)
        return self.pages[page - 1] if page <= len(self.pages) else []

    async def fetch_quotes(self, ids: list[str]) -> dict[str, MarketQuote]:
        return {}


def _cache(
    listing: FakeListing,
    path: Path,
    sleep: SleepRecorder,
    **kwargs: object,
) -> KnowledgeBaseCache:
    executor = RateLimitedBatchExecutor(
        batch_size=1, min_delay=0.0, max_retries=5, backoff_factor=1.0, sleep=sleep
    )
    kwargs.setdefault("page_size", 2)
    return KnowledgeBaseCache(listing, path, executor=executor, **kwargs)  # type: ignore[arg-type]


# -- quality filter --


def test_quality_filter_is_inclusive() -> None:
    listing = _listing("edge", market_cap=1_000_000, total_volume=10_000)
    assert passes_quality_filter(listing, min_market_cap=1_000_000, min_volume=10_000)


def test_quality_filter_rejects_missing_figures() -> None:
    assert not passes_quality_filter(
        _listing("nocap", market_cap=None), min_market_cap=0, min_volume=0
    )
    assert not passes_quality_filter(
        _listing("novol", total_volume=None), min_market_cap=0, min_volume=0
    )


# -- refresh --


async def test_refresh_pages_until_short_page(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing([[_listing("alpha"), _listing("beta")], [_listing("gamma")]])
    cache = _cache(listing, tmp_path / "coins.json", sleep, page_delay=0.12)

    snapshot = await cache.refresh()

    assert listing.calls == [(1, 2), (2, 2)]
    assert [r.id for r in snapshot.records] == ["alpha", "beta", "gamma"]
    assert snapshot.from_cache is False
    assert sleep.calls == [0.12, 0.12]


async def test_refresh_filters_and_keeps_unfiltered(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing(
        [
            [
                _listing("big"),
                _listing("tiny", market_cap=999_999),
                _listing("illiquid", total_volume=9_999),
                _listing("unknown", market_cap=None),
            ]
        ]
    )
    cache = _cache(listing, tmp_path / "coins.json", sleep, page_size=250)

    snapshot = await cache.refresh()

    assert [r.id for r in snapshot.records] == ["big"]
    assert [r.id for r in snapshot.all_records] == ["big", "tiny", "illiquid", "unknown"]
    assert set(snapshot.records) < set(snapshot.all_records)


async def test_refresh_writes_cache_file(tmp_path: Path, sleep: SleepRecorder) -> None:
    path = tmp_path / "nested" / "coins.json"
    cache = _cache(FakeListing([[_listing("alpha")]]), path, sleep)

    await cache.refresh()

    document = json.loads(path.read_text())
    assert document["filtered"] == [{"id": "alpha", "symbol": "alp", "name": "Alpha"}]
    assert document["unfiltered"] == document["filtered"]


async def test_rate_limited_page_is_retried(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing([[_listing("alpha")]], failures=[RateLimitError("429")])
    cache = _cache(listing, tmp_path / "coins.json", sleep, page_delay=0.0)

    snapshot = await cache.refresh()

    assert [r.id for r in snapshot.records] == ["alpha"]
    assert sleep.calls == [1.0]


async def test_upstream_failure_is_fatal(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing([], failures=[RuntimeError("connection refused")])
    cache = _cache(listing, tmp_path / "coins.json", sleep)

    with pytest.raises(KnowledgeBaseUnavailableError, match="connection refused"):
        await cache.load()
    assert not (tmp_path / "coins.json").exists()


async def test_missing_credential_is_fatal(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing([], failures=[ListingCredentialError("CoinGecko API key required.")])
    cache = _cache(listing, tmp_path / "coins.json", sleep)

    with pytest.raises(KnowledgeBaseUnavailableError) as exc_info:
        await cache.load()
    assert isinstance(exc_info.value.__cause__, ListingCredentialError)


async def test_exhausted_rate_limit_retries_are_fatal(tmp_path: Path, sleep: SleepRecorder) -> None:
    listing = FakeListing([], failures=[RateLimitError("429")] * 6)
    cache = _cache(listing, tmp_path / "coins.json", sleep, page_delay=0.0)

    with pytest.raises(KnowledgeBaseUnavailableError):
        await cache.load()
    assert len(listing.calls) == 6


# -- load / read_cached --


async def test_fresh_cache_is_used_without_upstream_call(
    tmp_path: Path, sleep: SleepRecorder
) -> None:
    path = tmp_path / "coins.json"
    first = await _cache(FakeListing([[_listing("alpha"), _listing("beta")], []]), path, sleep).load()

    untouched = FakeListing([], failures=[AssertionError("upstream must not be called")])
    second = await _cache(untouched, path, sleep).load()

    assert untouched.calls == []
    assert second.from_cache is True
    assert second.records == first.records
    assert second.all_records == first.all_records


async def test_expired_cache_triggers_refresh(tmp_path: Path, sleep: SleepRecorder) -> None:
    path = tmp_path / "coins.json"
    path.write_text(json.dumps({"filtered": [{"id": "old", "symbol": "old", "name": "Old"}]}))
    stale = time.time() - 3600
    os.utime(path, (stale, stale))

    listing = FakeListing([[_listing("fresh")]])
    snapshot = await _cache(listing, path, sleep, ttl_seconds=1800).load()

    assert listing.calls
    assert [r.id for r in snapshot.records] == ["fresh"]
    assert snapshot.from_cache is False


async def test_malformed_cache_is_a_miss(tmp_path: Path, sleep: SleepRecorder) -> None:
    path = tmp_path / "coins.json"
    path.write_text("{not json")

    listing = FakeListing([[_listing("alpha")]])
    snapshot = await _cache(listing, path, sleep).load()

    assert listing.calls
    assert [r.id for r in snapshot.records] == ["alpha"]


def test_read_cached_missing_file_returns_none(tmp_path: Path, sleep: SleepRecorder) -> None:
    cache = _cache(FakeListing([]), tmp_path / "absent.json", sleep)
    assert cache.read_cached() is None


def test_read_cached_accepts_bare_list(tmp_path: Path, sleep: SleepRecorder) -> None:
    path = tmp_path / "coins.json"
    path.write_text(json.dumps([{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"}]))

    snapshot = _cache(FakeListing([]), path, sleep).read_cached()

    assert snapshot is not None
    assert snapshot.records == (AssetRecord(id="bitcoin", symbol="btc", name="Bitcoin"),)


def test_read_cached_rejects_records_missing_fields(tmp_path: Path, sleep: SleepRecorder) -> None:
    path = tmp_path / "coins.json"
    path.write_text(json.dumps({"filtered": [{"id": "bitcoin"}]}))

    assert _cache(FakeListing([]), path, sleep).read_cached() is None
