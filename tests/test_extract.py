"""Tests for readable-text extraction."""

from coinscout.acquire import extract_readable
from coinscout.acquire.extract import NO_TITLE

PARAGRAPH = (
    "Bitcoin climbed above its previous weekly high on Tuesday as spot ETF inflows "
    "accelerated, with analysts pointing to renewed institutional demand and a sharp "
    "drop in exchange balances over the past month."
)


def _article(title: str = "<title>BTC rallies</title>", body: str = "") -> str:
    return (
        f"<html><head>{title}</head><body>"
        "<script>var tracking = 'should never appear';</script>"
        f"<article><h1>Bitcoin rallies</h1><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></article>"
        f"{body}</body></html>"
    )


def test_extracts_main_text_and_title() -> None:
    content = extract_readable("https://example.com/btc", _article())

    assert content is not None
    assert content.title == "BTC rallies"
    assert "spot ETF inflows" in content.text
    assert "tracking" not in content.text


def test_title_falls_back_to_heading() -> None:
    content = extract_readable("https://example.com/btc", _article(title=""))
    assert content is not None
    assert content.title == "Bitcoin rallies"


def test_title_defaults_when_missing() -> None:
    markup = f"<html><body><div><p>{PARAGRAPH}</p></div></body></html>"
    content = extract_readable("https://example.com/btc", markup)
    assert content is not None
    assert content.title == NO_TITLE


def test_short_text_is_rejected() -> None:
    markup = "<html><head><title>Short</title></head><body><p>" + "x" * 50 + "</p></body></html>"
    assert extract_readable("https://example.com/short", markup) is None


def test_min_chars_is_configurable() -> None:
    markup = "<html><body><p>" + "word " * 10 + "</p></body></html>"
    assert extract_readable("https://example.com/w", markup, min_chars=1000) is None
    assert extract_readable("https://example.com/w", markup, min_chars=10) is not None


def test_empty_markup_is_rejected() -> None:
    assert extract_readable("https://example.com/empty", "") is None
