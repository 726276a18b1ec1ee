import json
import os
from datetime import date

import anthropic
from anthropic.types import TextBlock

from coinscout.data import AssetRecord

DEFAULT_SYSTEM_PROMPT = """\
You are a research assistant specialized in cryptocurrency insights. Given a \
user's question and the assets it refers to, generate search queries that will \
find recent news and analysis answering the question.

Today's date is {today}. Use the current month or year when the question asks \
about the latest events.

If the question covers MULTIPLE assets, segment the queries: produce {num_queries} \
focused queries for EACH asset rather than mixing assets in one query. Queries \
must not be redundant; each should approach the question from a different angle \
(price action, on-chain activity, ecosystem news, sentiment).

Respond with a JSON array of query strings. Return ONLY the JSON array, no other text.\
"""


class ClaudeQueryGenerator:
    """Generate search-query variants using Anthropic's Claude API.

    Args:
        model: Anthropic model ID to use.
        api_key: API key (defaults to CLAUDE_API_KEY env var).
        system_prompt: Custom system prompt template. May contain ``{today}``
            and ``{num_queries}`` placeholders. If *None*, the built-in
            default is used.
    """

    def __init__(
        self,
        *,
        model: str = "claude-haiku-4-5-20251001",
        api_key: str | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self._model = model
        resolved_key = api_key or os.environ.get("CLAUDE_API_KEY")
        self._client = anthropic.AsyncAnthropic(api_key=resolved_key)
        self._system_prompt = system_prompt or DEFAULT_SYSTEM_PROMPT

    async def generate(
        self,
        query: str,
        assets: list[AssetRecord],
        *,
        num_queries: int = 3,
    ) -> list[str]:
        user_content = f"User question: {query}"
        if assets:
            names = ", ".join(f"{a.name} ({a.symbol.upper()})" for a in assets)
            user_content += f"\nAssets: {names}"

        response = await self._client.messages.create(
            model=self._model,
            max_tokens=1024,
            system=self._system_prompt.format(
                today=date.today().strftime("%d %B %Y"),
                num_queries=num_queries,
            ),
            messages=[{"role": "user", "content": user_content}],
        )

        content_block = response.content[0]
        if not isinstance(content_block, TextBlock):
            raise ValueError(f"Expected TextBlock, got {type(content_block).__name__}")
        raw: str = content_block.text.strip()
        # Strip markdown code fences if present
        if raw.startswith("```"):
            raw = raw.split("\n", 1)[1].rsplit("```", 1)[0]

        return _parse_queries(json.loads(raw))


def _parse_queries(parsed: object) -> list[str]:
    """Accept either a JSON array or a numbered ``{"1": "...", ...}`` object."""
    if isinstance(parsed, dict):
        items = [parsed[k] for k in sorted(parsed, key=_numeric_key)]
    elif isinstance(parsed, list):
        items = parsed
    else:
        raise ValueError(f"Expected JSON array or object, got {type(parsed).__name__}")
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]


def _numeric_key(key: str) -> tuple[int, str]:
    return (int(key), "") if key.isdigit() else (1 << 30, key)
