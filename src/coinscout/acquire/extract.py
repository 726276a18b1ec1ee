"""Readable-text extraction from fetched markup."""

from dataclasses import dataclass

import trafilatura
from bs4 import BeautifulSoup

NO_TITLE = "No title"

_NOISE_TAGS = ("script", "style", "noscript", "nav", "footer", "header", "aside")


@dataclass(frozen=True)
class ExtractedContent:
    """Title and main readable text of a page."""

    title: str
    text: str


def extract_title(soup: BeautifulSoup) -> str:
    """Return the page title, falling back to the first heading."""
    if soup.title and soup.title.get_text(strip=True):
        return soup.title.get_text(strip=True)
    heading = soup.find("h1")
    if heading and heading.get_text(strip=True):
        return heading.get_text(strip=True)
    return NO_TITLE


def _fallback_text(soup: BeautifulSoup) -> str:
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    root = soup.body or soup
    return " ".join(root.get_text(separator=" ").split())


def extract_readable(url: str, markup: str, *, min_chars: int = 100) -> ExtractedContent | None:
    """Extract the main article text from ``markup``.

    Uses trafilatura's boilerplate removal first and falls back to the
    visible body text when it finds nothing.

    Args:
        url: Source URL, used by trafilatura for link resolution.
        markup: Raw HTML.
        min_chars: Minimum text length for the extraction to count.

    Returns:
        The extracted content, or None when the text is shorter than
        ``min_chars``.
    """
    if not markup.strip():
        return None

    soup = BeautifulSoup(markup, "html.parser")
    title = extract_title(soup)

    text = trafilatura.extract(
        markup,
        url=url,
        include_comments=False,
        include_tables=False,
    )
    if not text:
        text = _fallback_text(soup)

    text = text.strip()
    if len(text) < min_chars:
        return None
    return ExtractedContent(title=title, text=text)
