from coinscout.acquire.acquirer import ContentAcquirer
from coinscout.acquire.base import FetchMethod, FetchResult, random_user_agent
from coinscout.acquire.browser import BrowserFetchMethod
from coinscout.acquire.dates import extract_publish_date
from coinscout.acquire.extract import ExtractedContent, extract_readable
from coinscout.acquire.http import HttpFetchMethod

__all__ = [
    "BrowserFetchMethod",
    "ContentAcquirer",
    "ExtractedContent",
    "FetchMethod",
    "FetchResult",
    "HttpFetchMethod",
    "extract_publish_date",
    "extract_readable",
    "random_user_agent",
]
