"""Tests for SearchAggregator."""

import pytest

from coinscout.data import SearchHit
from coinscout.errors import ProviderNotConfiguredError
from coinscout.search import SearchAggregator, dedupe_hits
from tests.conftest import SleepRecorder


class FakeProvider:
    """Search provider returning canned hits per query."""

    def __init__(
        self,
        name: str,
        hits: dict[str, list[str]] | None = None,
        *,
        query_delay: float = 0.0,
        error: Exception | None = None,
        failing_queries: set[str] | None = None,
    ) -> None:
        self.name = name
        self.query_delay = query_delay
        self._hits = hits or {}
        self._error = error
        self._failing = failing_queries or set()
        self.queries: list[tuple[str, int]] = []

    async def search(self, query: str, *, max_results: int = 3) -> list[SearchHit]:
        self.queries.append((query, max_results))
        if self._error is not None:
            raise self._error
        if query in self._failing:
            raise RuntimeError(f"{self.name} failed on {query}")
        return [
            SearchHit(url=url, title=url, provider=self.name, query=query)
            for url in self._hits.get(query, [])
        ][:max_results]


def test_dedupe_keeps_first_occurrence() -> None:
    hits = [
        SearchHit(url="x", title="A", provider="a"),
        SearchHit(url="y", title="B", provider="a"),
        SearchHit(url="x", title="C", provider="b"),
    ]
    assert [(h.url, h.provider) for h in dedupe_hits(hits)] == [("x", "a"), ("y", "a")]


def test_duplicate_provider_names_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        SearchAggregator([FakeProvider("exa"), FakeProvider("exa")])


async def test_query_dual_attributes_shared_url_to_first_provider(sleep: SleepRecorder) -> None:
    provider_a = FakeProvider("a", {"q": ["x", "only-a"]})
    provider_b = FakeProvider("b", {"q": ["x", "only-b"]})
    aggregator = SearchAggregator([provider_a, provider_b], sleep=sleep)

    hits = await aggregator.query_dual(["q"])

    assert [h.url for h in hits] == ["x", "only-a", "only-b"]
    shared = [h for h in hits if h.url == "x"]
    assert len(shared) == 1
    assert shared[0].provider == "a"


async def test_query_dual_survives_one_provider_failing(sleep: SleepRecorder) -> None:
    healthy = FakeProvider("exa", {"q": ["https://a.com"]})
    broken = FakeProvider("tavily", error=RuntimeError("503"))
    aggregator = SearchAggregator([healthy, broken], sleep=sleep)

    hits = await aggregator.query_dual(["q"])

    assert [h.url for h in hits] == ["https://a.com"]


async def test_query_dual_with_no_results_is_empty(sleep: SleepRecorder) -> None:
    aggregator = SearchAggregator([FakeProvider("exa"), FakeProvider("tavily")], sleep=sleep)
    assert await aggregator.query_dual(["nothing"]) == []


async def test_query_provider_limits_queries_and_results(sleep: SleepRecorder) -> None:
    provider = FakeProvider(
        "exa",
        {"q1": ["u1", "u2", "u3", "u4"], "q2": ["u2", "u5"], "q3": [], "q4": ["u9"]},
        query_delay=0.2,
    )
    aggregator = SearchAggregator([provider], max_queries=3, results_per_query=3, sleep=sleep)

    hits = await aggregator.query_provider("exa", ["q1", "q2", "q3", "q4"])

    assert [h.url for h in hits] == ["u1", "u2", "u3", "u5"]
    assert provider.queries == [("q1", 3), ("q2", 3), ("q3", 3)]
    # Paced between consecutive queries only
    assert sleep.calls == [0.2, 0.2]


async def test_failed_query_is_skipped(sleep: SleepRecorder) -> None:
    provider = FakeProvider("tavily", {"q1": ["u1"], "q3": ["u3"]}, failing_queries={"q2"})
    aggregator = SearchAggregator([provider], sleep=sleep)

    hits = await aggregator.query_provider("tavily", ["q1", "q2", "q3"])

    assert [h.url for h in hits] == ["u1", "u3"]
    assert [q for q, _ in provider.queries] == ["q1", "q2", "q3"]


async def test_unknown_provider_raises(sleep: SleepRecorder) -> None:
    aggregator = SearchAggregator([FakeProvider("exa")], sleep=sleep)
    with pytest.raises(ProviderNotConfiguredError, match="tavily"):
        await aggregator.query_provider("tavily", ["q"])


def test_provider_names_in_precedence_order() -> None:
    aggregator = SearchAggregator([FakeProvider("tavily"), FakeProvider("exa")])
    assert aggregator.provider_names == ["tavily", "exa"]
