"""Tests for URL helpers."""

import pytest

from coinscout.url import extract_domain, is_blocked_domain


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://www.CoinDesk.com/markets/btc", "coindesk.com"),
        ("https://news.example.com:8443/a?b=c", "news.example.com"),
        ("not a url", ""),
        ("", ""),
    ],
)
def test_extract_domain(url: str, expected: str) -> None:
    assert extract_domain(url) == expected


def test_blocked_domain_matches_subdomains() -> None:
    blocked = ["mexc.com", "gate.io"]
    assert is_blocked_domain("https://www.mexc.com/news", blocked)
    assert is_blocked_domain("https://futures.gate.io/x", blocked)
    assert not is_blocked_domain("https://notmexc.com/news", blocked)
    assert not is_blocked_domain("https://example.com/gate.io", blocked)


def test_blocked_domain_unparseable_url() -> None:
    assert not is_blocked_domain("garbage", ["gate.io"])
