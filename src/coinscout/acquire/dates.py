"""Best-effort publication date extraction.

Three passes are tried in order: date-bearing markup elements, JSON-LD
structured data, then a ``/YYYY/MM/DD/`` segment in the URL. A date only
counts when it falls within the last two years and is not in the future.
"""

import json
import logging
import re
from datetime import UTC, date, datetime
from typing import Any

from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DATE_SELECTORS = (
    "time[datetime]",
    "[datetime]",
    'meta[property="article:published_time"]',
    'meta[name="publishdate"]',
    'meta[property="og:article:published_time"]',
    ".published-date",
    ".publication-date",
    ".post-date",
    ".article-date",
    ".date-published",
    ".entry-date",
    ".timestamp",
    ".date",
)

MAX_AGE = relativedelta(years=2)

_URL_DATE_PATTERN = re.compile(r"/(\d{4})/(\d{1,2})/(\d{1,2})/")
_JSON_LD_FIELDS = ("datePublished", "dateCreated")

# Leap years, so an explicit "Feb 29" parses under both.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2004, 2, 2))


def parse_date(value: str) -> date | None:
    """Parse a free-form date string, returning None when it is not a date.

    The string must name a full calendar date. Values such as "10:30 AM",
    "Monday" or "May 5" are rejected rather than completed from today.
    """
    value = value.strip()
    if not value:
        return None
    try:
        parsed, *others = (
            date_parser.parse(value, default=default) for default in _PARSE_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    # Any year, month or day missing from the string differs between defaults.
    if any(other.date() != parsed.date() for other in others):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def is_plausible(value: date, today: date) -> bool:
    """Whether ``value`` is within the last two years and not in the future."""
    return today - MAX_AGE <= value <= today


def _from_markup(soup: BeautifulSoup) -> date | None:
    for selector in DATE_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        raw = element.get("datetime") or element.get("content") or element.get_text(strip=True)
        if isinstance(raw, list):
            raw = " ".join(raw)
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
    return None


def _json_ld_value(data: Any) -> str | None:
    if isinstance(data, list):
        for item in data:
            value = _json_ld_value(item)
            if value:
                return value
        return None
    if not isinstance(data, dict):
        return None
    for field in _JSON_LD_FIELDS:
        if isinstance(data.get(field), str):
            return data[field]
    graph = data.get("@graph")
    if isinstance(graph, list) and graph:
        return _json_ld_value(graph[0])
    return None


def _from_json_ld(soup: BeautifulSoup) -> date | None:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or script.get_text())
        except ValueError:
            continue
        value = _json_ld_value(data)
        if value:
            return parse_date(value)
    return None


def _from_url(url: str) -> date | None:
    match = _URL_DATE_PATTERN.search(url)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def extract_publish_date(markup: str, url: str, *, today: date | None = None) -> str | None:
    """Find the publication date of a page.

    Args:
        markup: Raw HTML of the page.
        url: The page URL.
        today: Reference date for the recency check (defaults to today, UTC).

    Returns:
        ISO date string (YYYY-MM-DD) or None when no plausible date is found.
    """
    today = today or datetime.now(tz=UTC).date()
    soup = BeautifulSoup(markup, "html.parser")

    for found in (_from_markup(soup), _from_json_ld(soup), _from_url(url)):
        if found is not None and is_plausible(found, today):
            return found.isoformat()
    logger.debug(f"No publication date found for {url}")
    return None
