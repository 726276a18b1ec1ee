"""Shared fixtures and helpers for coinscout tests."""

from datetime import UTC, datetime

import pytest

from coinscout.data import AssetRecord, KnowledgeBaseSnapshot


class SleepRecorder:
    """Stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


BITCOIN = AssetRecord(id="bitcoin", symbol="btc", name="Bitcoin")
ETHEREUM = AssetRecord(id="ethereum", symbol="eth", name="Ethereum")
SOLANA = AssetRecord(id="solana", symbol="sol", name="Solana")
WRAPPED_BITCOIN = AssetRecord(id="wrapped-bitcoin", symbol="wbtc", name="Wrapped Bitcoin")
CHAINLINK = AssetRecord(id="chainlink", symbol="link", name="Chainlink")


def make_snapshot(*records: AssetRecord) -> KnowledgeBaseSnapshot:
    return KnowledgeBaseSnapshot(
        records=tuple(records),
        all_records=tuple(records),
        captured_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def snapshot() -> KnowledgeBaseSnapshot:
    return make_snapshot(BITCOIN, ETHEREUM, SOLANA, WRAPPED_BITCOIN, CHAINLINK)
