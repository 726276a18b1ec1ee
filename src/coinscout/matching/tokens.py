"""Candidate-token extraction from free-text queries."""

import re
from datetime import date

_TOKEN_PATTERN = re.compile(r"\b[a-zA-Z0-9]{2,20}\b", re.ASCII)

ENGLISH_STOPWORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "am", "an", "and",
        "any", "are", "as", "at", "be", "because", "been", "before", "being", "below",
        "between", "both", "but", "by", "can", "could", "did", "do", "does", "doing",
        "down", "during", "each", "few", "for", "from", "further", "had", "has", "have",
        "having", "he", "her", "here", "hers", "herself", "him", "himself", "his", "how",
        "if", "in", "into", "is", "it", "its", "itself", "just", "me", "more", "most",
        "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once", "only",
        "or", "other", "our", "ours", "ourselves", "out", "over", "own", "same", "she",
        "should", "so", "some", "such", "than", "that", "the", "their", "theirs", "them",
        "themselves", "then", "there", "these", "they", "this", "those", "through", "to",
        "too", "under", "until", "up", "very", "was", "we", "were", "what", "when",
        "where", "which", "while", "who", "whom", "why", "will", "with", "would", "you",
        "your", "yours", "yourself", "yourselves",
    }
)  # fmt: skip

CRYPTO_STOPWORDS = frozenset(
    {
        "analysis", "technical", "price", "token", "coin", "crypto", "cryptocurrency",
        "vs", "comparison", "compare", "latest", "news", "market", "trends", "about",
        "please", "give", "show", "tell", "explain", "current", "recent",
    }
)  # fmt: skip


def _year_tokens(today: date) -> frozenset[str]:
    return frozenset({str(today.year), str(today.year - 1)})


def extract_candidate_tokens(query: str | None, *, today: date | None = None) -> list[str]:
    """Split a query into tokens that may name an asset.

    Keeps alphanumeric runs of 2-20 characters, drops English connector words,
    generic crypto terms and the current/previous year, and removes repeats
    (case-insensitively) while keeping first positions.

    Args:
        query: Free-text user query.
        today: Reference date for year filtering (defaults to today).

    Returns:
        Tokens in query order, original casing preserved.
    """
    if not isinstance(query, str):
        return []

    years = _year_tokens(today or date.today())
    seen: set[str] = set()
    tokens: list[str] = []
    for word in _TOKEN_PATTERN.findall(query):
        lowered = word.lower()
        if lowered in ENGLISH_STOPWORDS or lowered in CRYPTO_STOPWORDS or lowered in years:
            continue
        if lowered in seen:
            continue
        seen.add(lowered)
        tokens.append(word)
    return tokens
