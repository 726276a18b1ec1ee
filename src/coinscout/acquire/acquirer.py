"""Content acquisition with an ordered fetch-method fallback chain."""

import asyncio
import logging
from collections.abc import Iterable, Sequence
from types import TracebackType

from coinscout.acquire.base import FetchMethod
from coinscout.acquire.dates import extract_publish_date
from coinscout.acquire.extract import extract_readable
from coinscout.batch import RateLimitedBatchExecutor, Sleep
from coinscout.data import AcquiredDocument
from coinscout.url import is_blocked_domain

logger = logging.getLogger(__name__)


class ContentAcquirer:
    """Fetch URLs and extract their readable text.

    Fetch methods are tried in order until one returns markup. Extraction
    runs once on that markup; text shorter than ``min_content_chars`` fails
    the URL without trying the remaining methods.

    Args:
        methods: Fetch methods in preference order (fast first).
        min_content_chars: Minimum extracted text length for a usable document.
        max_content_chars: Length of the ``truncated_content`` field.
        max_urls: Maximum number of URLs attempted per ``acquire_many`` call.
        request_delay: Pause in seconds between consecutive URLs.
        blocked_domains: Domains skipped without fetching (subdomains included).
        sleep: Sleep function used for pacing.
    """

    def __init__(
        self,
        methods: Sequence[FetchMethod],
        *,
        min_content_chars: int = 100,
        max_content_chars: int = 8000,
        max_urls: int = 10,
        request_delay: float = 1.0,
        blocked_domains: Iterable[str] = (),
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if not methods:
            raise ValueError("At least one fetch method is required")
        self._methods = list(methods)
        self._min_content_chars = min_content_chars
        self._max_content_chars = max_content_chars
        self._max_urls = max_urls
        self._blocked_domains = tuple(blocked_domains)
        self._executor = RateLimitedBatchExecutor(
            batch_size=1,
            min_delay=request_delay,
            max_retries=0,
            sleep=sleep,
        )

    @property
    def methods(self) -> list[FetchMethod]:
        return list(self._methods)

    async def __aenter__(self) -> "ContentAcquirer":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def is_blocked(self, url: str) -> bool:
        return is_blocked_domain(url, self._blocked_domains)

    async def acquire(self, url: str) -> AcquiredDocument | None:
        """Acquire a single URL.

        Returns:
            The document, or None when every fetch method failed or the
            extracted text was too short.
        """
        for method in self._methods:
            result = await method.fetch(url)
            if result.markup is not None:
                return self._build_document(url, method.name, result.markup)
            logger.info(f"{method.name} fetch failed for {url}: {result.error}")

        logger.warning(f"All fetch methods failed for {url}")
        return None

    def _build_document(self, url: str, method: str, markup: str) -> AcquiredDocument | None:
        extracted = extract_readable(url, markup, min_chars=self._min_content_chars)
        if extracted is None:
            logger.warning(f"Insufficient content from {url} via {method}")
            return None

        return AcquiredDocument(
            url=url,
            title=extracted.title,
            content=extracted.text,
            truncated_content=extracted.text[: self._max_content_chars],
            method=method,
            word_count=len(extracted.text.split()),
            published_date=extract_publish_date(markup, url),
        )

    async def acquire_many(self, urls: Iterable[str]) -> list[AcquiredDocument]:
        """Acquire URLs one at a time, in order, with a delay between them.

        Duplicate and blocked URLs are skipped before the ``max_urls`` cap is
        applied. Failed URLs are logged and left out of the result.
        """
        candidates: list[str] = []
        for url in dict.fromkeys(urls):
            if self.is_blocked(url):
                logger.info(f"Skipping blocked domain: {url}")
                continue
            candidates.append(url)
        candidates = candidates[: self._max_urls]

        logger.info("Acquiring %d URLs", len(candidates))
        results = await self._executor.run(candidates, self.acquire)
        documents = [doc for doc in results if doc is not None]
        logger.info("Acquired %d of %d URLs", len(documents), len(candidates))
        return documents

    async def close(self) -> None:
        """Close every fetch method, releasing browser resources."""
        for method in self._methods:
            try:
                await method.close()
            except Exception as e:
                logger.warning(f"Failed to close {method.name} fetch method: {e}")
