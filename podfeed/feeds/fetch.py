"""Feed download and the normalize -> convert pipeline."""

from __future__ import annotations

import logging
from typing import Any

import requests

from podfeed.config import DEFAULT_HTTP_TIMEOUT
from podfeed.errors import FetchError
from podfeed.feeds.convert import lookup, to_record
from podfeed.feeds.namespaces import NAMESPACE_ALTER, normalize

logger = logging.getLogger(__name__)

USER_AGENT = "podfeed/0.1"


def get_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    return session


def describe_request_error(e: requests.RequestException, url: str) -> str:
    """Turn a requests failure into a one-line, user-facing message."""
    if isinstance(e, requests.Timeout):
        return f"Timeout reached for URL: {url}"
    if isinstance(e, requests.TooManyRedirects):
        return f"Too many redirects for URL: {url}"
    if isinstance(e, (requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema, requests.exceptions.InvalidURL)):
        return f"Invalid URL: {url}"
    if isinstance(e, requests.HTTPError):
        status = e.response.status_code if e.response is not None else "?"
        return f"Server error {status}: {url}"
    if isinstance(e, requests.exceptions.ContentDecodingError):
        return f"Failed to decode response from URL: {url}"
    if isinstance(e, requests.ConnectionError):
        return f"Failed to connect. Ensure you're connected to the internet: {url}"
    return f"An unexpected error occurred: {e}"


def _get(url: str, session: requests.Session | None, timeout: float) -> requests.Response:
    session = session or get_session()
    logger.info("Fetching %s", url)
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        return response
    except requests.RequestException as e:
        raise FetchError(describe_request_error(e, url), url=url) from e


def download_text(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> str:
    """GET a URL and return its body decoded the way requests guesses.

    Raises:
        FetchError: for any transport or HTTP status failure.
    """
    return _get(url, session, timeout).text


def download_bytes(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> bytes:
    """GET a URL and return the raw body.

    Feeds go through this: requests decodes `text/*` without a charset as
    ISO-8859-1, which garbles UTF-8 XML.

    Raises:
        FetchError: for any transport or HTTP status failure.
    """
    return _get(url, session, timeout).content


def load_feed(
    url: str,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    replacement: str = NAMESPACE_ALTER,
) -> dict[str, Any]:
    """Download a feed, normalize namespace prefixes, convert to plain data."""
    xml = download_bytes(url, session=session, timeout=timeout)
    return to_record(normalize(xml, replacement))


def feed_items(record: dict[str, Any]) -> list[dict[str, Any]]:
    """Return `rss.channel.item` as a list (single items are wrapped)."""
    items = lookup(record, "rss.channel.item")
    if items is None:
        return []
    if isinstance(items, list):
        return [i for i in items if isinstance(i, dict)]
    if isinstance(items, dict):
        return [items]
    return []
