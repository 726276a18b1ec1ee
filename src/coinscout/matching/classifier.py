"""Confidence classifier that judges token/asset matches with Claude."""

import logging
import os
import re
from typing import Protocol

import anthropic

from coinscout.data import ClassifierVerdict, MatchCandidate
from coinscout.errors import ClassifierError

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 60

SYSTEM_PROMPT = """\
You are a cryptocurrency expert who determines whether user query tokens \
match the cryptocurrencies found for them with high semantic confidence.\
"""

USER_PROMPT_TEMPLATE = """\
TASK: Decide whether the user's query tokens semantically match the \
cryptocurrencies found for them, with enough confidence for financial analysis.

USER TOKENS: [{tokens}]

FOUND CRYPTOCURRENCY MATCHES:
{matches}

HIGH CONFIDENCE (accept):
- Exact symbol matches (BTC -> Bitcoin)
- Exact name matches (Bitcoin -> Bitcoin)
- Common abbreviations (ETH -> Ethereum, SOL -> Solana)
- Well-known alternative names (DOGE -> Dogecoin)

LOW CONFIDENCE (reject):
- Generic terms without a clear crypto reference (coin, token, crypto)
- Random strings that do not name a known asset
- Ambiguous partial matches with several plausible meanings
- Tokens unrelated to every match found

DECISION THRESHOLD: {threshold}% confidence.

Respond with EXACTLY this format and nothing else:
CONFIDENCE: [0-100]%
DECISION: [VALID/INVALID]\
"""

_CONFIDENCE_PATTERN = re.compile(r"CONFIDENCE:\s*(\d{1,3})\s*%", re.IGNORECASE)
_DECISION_PATTERN = re.compile(r"DECISION:\s*(VALID|INVALID)\b", re.IGNORECASE)


class ConfidenceClassifier(Protocol):
    """Interface for judging whether bound candidates match the user's intent."""

    async def classify(
        self,
        tokens: list[str],
        candidates: list[MatchCandidate],
    ) -> ClassifierVerdict:
        """Judge the candidate bindings.

        Args:
            tokens: All candidate tokens extracted from the query.
            candidates: Token/asset bindings with their match kind.

        Returns:
            The accept/reject verdict, with a 0-100 confidence when known.

        Raises:
            ClassifierError: The classifier could not produce a decision.
        """
        ...


def parse_verdict(text: str, *, threshold: int = DEFAULT_THRESHOLD) -> ClassifierVerdict:
    """Parse a ``CONFIDENCE: NN%`` / ``DECISION: VALID|INVALID`` response.

    A missing decision is derived from the confidence and the threshold. A
    response with neither field is a classifier failure.

    Raises:
        ClassifierError: Neither a confidence nor a decision could be parsed.
    """
    confidence_match = _CONFIDENCE_PATTERN.search(text)
    decision_match = _DECISION_PATTERN.search(text)

    confidence = min(int(confidence_match.group(1)), 100) if confidence_match else None
    if decision_match:
        accepted = decision_match.group(1).upper() == "VALID"
    elif confidence is not None:
        accepted = confidence >= threshold
    else:
        raise ClassifierError(f"Unparseable classifier response: {text[:200]!r}")

    return ClassifierVerdict(accepted=accepted, confidence=confidence)


def _format_candidates(candidates: list[MatchCandidate]) -> str:
    return "\n".join(
        f'{i}. "{c.asset.name}" ({c.asset.symbol.upper()}) [ID: {c.asset.id}] '
        f'matched "{c.token}" by {c.kind.value.replace("_", " ")}'
        for i, c in enumerate(candidates, 1)
    )


class ClaudeConfidenceClassifier:
    """Ask Claude how confidently the query tokens name the matched assets.

    Args:
        model: Anthropic model to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        threshold: Acceptance threshold quoted in the prompt and used when the
            response omits an explicit decision.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        threshold: int = DEFAULT_THRESHOLD,
    ) -> None:
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._model = model
        self._threshold = threshold

    async def classify(
        self,
        tokens: list[str],
        candidates: list[MatchCandidate],
    ) -> ClassifierVerdict:
        user_prompt = USER_PROMPT_TEMPLATE.format(
            tokens=", ".join(tokens),
            matches=_format_candidates(candidates),
            threshold=self._threshold,
        )

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=64,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIError as e:
            raise ClassifierError(f"Classifier request failed: {e}") from e

        response_text = ""
        for block in response.content:
            if hasattr(block, "text"):
                response_text += block.text

        verdict = parse_verdict(response_text, threshold=self._threshold)
        logger.info(
            "Classifier verdict: %s (confidence: %s%%)",
            "VALID" if verdict.accepted else "INVALID",
            verdict.confidence if verdict.confidence is not None else "?",
        )
        return verdict
