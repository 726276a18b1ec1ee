"""Two-stage entity matching: lexical binding gated by a confidence classifier."""

import logging
from collections.abc import Callable, Sequence

from coinscout.data import (
    Accepted,
    AssetRecord,
    KnowledgeBaseSnapshot,
    MatchCandidate,
    MatchKind,
    Rejected,
    ResolutionResult,
)
from coinscout.matching.classifier import DEFAULT_THRESHOLD, ConfidenceClassifier
from coinscout.matching.tokens import extract_candidate_tokens

logger = logging.getLogger(__name__)

RESERVED_WORDS = frozenset({"protocol", "token", "coin", "network", "chain", "finance"})

NO_MATCH_MESSAGE = (
    "Sorry, we only serve mid to popular coins for now. "
    "Please ask about well-known cryptocurrencies."
)

MAX_SUGGESTIONS = 3

_Predicate = Callable[[AssetRecord, str], bool]

# Strongest kind first; each kind is scanned over the whole catalogue before
# falling through to the next.
_MATCH_RULES: tuple[tuple[MatchKind, _Predicate], ...] = (
    (MatchKind.EXACT_SYMBOL, lambda asset, token: asset.symbol.lower() == token),
    (MatchKind.EXACT_NAME, lambda asset, token: asset.name.lower() == token),
    (MatchKind.PARTIAL_NAME, lambda asset, token: len(token) > 2 and token in asset.name.lower()),
)


class EntityMatcher:
    """Resolve query tokens to known assets.

    Tokens are bound lexically against the filtered catalogue, then the
    bindings are put to an external confidence classifier. When the
    classifier fails, only exact symbol/name bindings can be accepted.

    Args:
        classifier: Confidence classifier collaborator.
        threshold: Minimum confidence (inclusive) for acceptance.
    """

    def __init__(
        self,
        classifier: ConfidenceClassifier,
        *,
        threshold: int = DEFAULT_THRESHOLD,
    ) -> None:
        self._classifier = classifier
        self._threshold = threshold

    def match(self, tokens: Sequence[str], snapshot: KnowledgeBaseSnapshot) -> list[MatchCandidate]:
        """Bind each token to at most one asset, and each asset to at most one token.

        Tokens that are reserved generic words or that bind to nothing are
        dropped. Binding order is deterministic for a given snapshot.
        """
        bound_ids: set[str] = set()
        candidates: list[MatchCandidate] = []

        for token in tokens:
            lowered = token.lower()
            if lowered in RESERVED_WORDS:
                logger.debug("Skipping reserved word: %s", lowered)
                continue

            binding = self._bind(lowered, snapshot.records, bound_ids)
            if binding is None:
                continue
            asset, kind = binding
            bound_ids.add(asset.id)
            candidates.append(MatchCandidate(token=token, asset=asset, kind=kind))
            logger.info(f'Found {kind.value.replace("_", " ")} match for "{token}": {asset.name}')

        return candidates

    @staticmethod
    def _bind(
        token: str,
        records: Sequence[AssetRecord],
        bound_ids: set[str],
    ) -> tuple[AssetRecord, MatchKind] | None:
        for kind, predicate in _MATCH_RULES:
            for asset in records:
                if asset.id not in bound_ids and predicate(asset, token):
                    return (asset, kind)
        return None

    async def resolve(self, query: str, snapshot: KnowledgeBaseSnapshot) -> ResolutionResult:
        """Resolve a sanitized free-text query against the snapshot."""
        tokens = extract_candidate_tokens(query)
        logger.info(f"Extracted candidate tokens: {tokens}")
        return await self.resolve_tokens(tokens, snapshot)

    async def resolve_tokens(
        self,
        tokens: Sequence[str],
        snapshot: KnowledgeBaseSnapshot,
    ) -> ResolutionResult:
        """Resolve already-extracted tokens against the snapshot."""
        candidates = self.match(tokens, snapshot)
        if not candidates:
            logger.info("No matches found in filtered knowledge base")
            return Rejected(message=NO_MATCH_MESSAGE)

        try:
            verdict = await self._classifier.classify(list(tokens), candidates)
        except Exception as e:
            logger.warning(f"Classifier failed, falling back to exact-match validation. Error: {e}")
            return self._fallback(candidates)

        assets = tuple(c.asset for c in candidates)
        confidence = verdict.confidence
        if verdict.accepted and (confidence is None or confidence >= self._threshold):
            logger.info(f"Validated {len(assets)} matches (confidence: {confidence}%)")
            return Accepted(assets=assets, confidence=confidence)

        suggestions = assets[:MAX_SUGGESTIONS]
        return Rejected(
            message=self._rejection_message(suggestions, confidence),
            suggestions=suggestions,
            confidence=confidence,
        )

    def _rejection_message(self, suggestions: Sequence[AssetRecord], confidence: int | None) -> str:
        names = ", ".join(asset.name for asset in suggestions)
        if confidence is not None and confidence < self._threshold:
            lead = f"Match confidence is {confidence}% (below {self._threshold}% threshold)."
        else:
            lead = "Could not confidently match your query to a supported cryptocurrency."
        return (
            f"{lead} Found these tokens: {names}. "
            "Please clarify by using complete token names from this list."
        )

    @staticmethod
    def _fallback(candidates: Sequence[MatchCandidate]) -> ResolutionResult:
        exact = tuple(c.asset for c in candidates if c.kind.is_exact)
        if exact:
            logger.info(f"Fallback validation accepted {len(exact)} exact matches")
            return Accepted(assets=exact, via_fallback=True)
        logger.info("Fallback validation rejected: no exact symbol or name match")
        return Rejected(message=NO_MATCH_MESSAGE)
