"""URL handling utilities."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Extract the host name from a URL.

    Args:
        url: The URL to extract the domain from.

    Returns:
        The lowercased host (without 'www.' prefix), or "" if extraction fails.
    """
    try:
        domain = urlparse(url).hostname
    except ValueError:
        domain = None
    if not domain:
        logger.warning(f"Could not get domain from url {url}")
        return ""
    domain = domain.lower()
    # Remove www. prefix
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def is_blocked_domain(url: str, blocked: Iterable[str]) -> bool:
    """Whether ``url`` is on a blocked domain or any subdomain of one."""
    domain = extract_domain(url)
    if not domain:
        return False
    for entry in blocked:
        entry = entry.lower().removeprefix("www.")
        if domain == entry or domain.endswith("." + entry):
            return True
    return False
