"""Entity matching: token extraction, lexical binding, confidence gating."""

from coinscout.matching.classifier import (
    ClaudeConfidenceClassifier,
    ConfidenceClassifier,
    parse_verdict,
)
from coinscout.matching.matcher import NO_MATCH_MESSAGE, RESERVED_WORDS, EntityMatcher
from coinscout.matching.tokens import extract_candidate_tokens

__all__ = [
    "ClaudeConfidenceClassifier",
    "ConfidenceClassifier",
    "EntityMatcher",
    "NO_MATCH_MESSAGE",
    "RESERVED_WORDS",
    "extract_candidate_tokens",
    "parse_verdict",
]
