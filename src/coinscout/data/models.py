"""Core data models for coinscout."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


@dataclass(frozen=True)
class AssetRecord:
    """A catalogued asset from the upstream listing."""

    id: str
    symbol: str
    name: str


@dataclass(frozen=True)
class MarketListing:
    """One raw row of the upstream market listing.

    ``market_cap`` and ``total_volume`` are ``None`` when the upstream reports
    no figure; such rows never pass the quality filter.
    """

    id: str
    symbol: str
    name: str
    market_cap: float | None = None
    total_volume: float | None = None
    current_price: float | None = None

    def to_record(self) -> AssetRecord:
        return AssetRecord(id=self.id, symbol=self.symbol, name=self.name)


@dataclass(frozen=True)
class MarketQuote:
    """Live market figures for an accepted asset."""

    id: str
    symbol: str
    name: str
    current_price: float | None = None
    market_cap: float | None = None
    price_change_24h: float | None = None
    high_24h: float | None = None
    low_24h: float | None = None


@dataclass(frozen=True)
class KnowledgeBaseSnapshot:
    """A complete, timestamped copy of the asset catalogue.

    ``records`` is the quality-filtered set used for matching and
    ``all_records`` the unfiltered set from the same fetch cycle.
    """

    records: tuple[AssetRecord, ...]
    all_records: tuple[AssetRecord, ...]
    captured_at: datetime
    from_cache: bool = False


class MatchKind(StrEnum):
    """How a token was bound to an asset, strongest first."""

    EXACT_SYMBOL = "exact_symbol"
    EXACT_NAME = "exact_name"
    PARTIAL_NAME = "partial_name"

    @property
    def is_exact(self) -> bool:
        return self is not MatchKind.PARTIAL_NAME


@dataclass(frozen=True)
class MatchCandidate:
    """A query token bound to an asset."""

    token: str
    asset: AssetRecord
    kind: MatchKind


@dataclass(frozen=True)
class ClassifierVerdict:
    """Decision returned by the confidence classifier."""

    accepted: bool
    confidence: int | None = None


@dataclass(frozen=True)
class Accepted:
    """Resolution that produced a validated set of assets."""

    assets: tuple[AssetRecord, ...]
    confidence: int | None = None
    via_fallback: bool = False


@dataclass(frozen=True)
class Rejected:
    """Resolution that was turned down, with optional suggestions for the user."""

    message: str
    suggestions: tuple[AssetRecord, ...] = ()
    confidence: int | None = None


ResolutionResult = Accepted | Rejected


@dataclass(frozen=True)
class SearchHit:
    """A single search-provider result referencing one URL."""

    url: str
    title: str
    provider: str
    published_at: str | None = None
    score: float | None = None
    query: str | None = None


@dataclass(frozen=True)
class AcquiredDocument:
    """Readable text fetched and extracted from one URL."""

    url: str
    title: str
    content: str
    truncated_content: str
    method: str
    word_count: int = 0
    published_date: str | None = None


@dataclass(frozen=True)
class ResearchReport:
    """Everything one pipeline run produced for the narrative stage."""

    query: str
    resolution: ResolutionResult
    search_queries: tuple[str, ...] = ()
    hits: tuple[SearchHit, ...] = ()
    documents: tuple[AcquiredDocument, ...] = ()
    quotes: dict[str, MarketQuote] = field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return isinstance(self.resolution, Accepted)

    def describe_rejection(self) -> str:
        """Render the rejection message and suggestions for display.

        Returns an empty string for accepted resolutions.
        """
        if not isinstance(self.resolution, Rejected):
            return ""
        lines = [self.resolution.message]
        if self.resolution.suggestions:
            lines.append("")
            lines.append("Suggested tokens:")
            for i, asset in enumerate(self.resolution.suggestions[:3], 1):
                lines.append(f"{i}. {asset.name} ({asset.symbol.upper()})")
        return "\n".join(lines)
