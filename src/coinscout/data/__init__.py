"""Data models for coinscout."""

from coinscout.data.models import (
    AcquiredDocument,
    Accepted,
    AssetRecord,
    ClassifierVerdict,
    KnowledgeBaseSnapshot,
    MarketListing,
    MarketQuote,
    MatchCandidate,
    MatchKind,
    Rejected,
    ResearchReport,
    ResolutionResult,
    SearchHit,
)

__all__ = [
    "AcquiredDocument",
    "Accepted",
    "AssetRecord",
    "ClassifierVerdict",
    "KnowledgeBaseSnapshot",
    "MarketListing",
    "MarketQuote",
    "MatchCandidate",
    "MatchKind",
    "Rejected",
    "ResearchReport",
    "ResolutionResult",
    "SearchHit",
]
