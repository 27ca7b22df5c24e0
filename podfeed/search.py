"""iTunes podcast search and result formatting."""

from __future__ import annotations

import logging
from typing import Any, Sequence
from urllib.parse import quote

import requests

from podfeed.config import DEFAULT_HTTP_TIMEOUT, ITUNES_SEARCH_URL
from podfeed.errors import FetchError
from podfeed.feeds.fetch import describe_request_error, get_session
from podfeed.patterns import render, truncate

logger = logging.getLogger(__name__)


def build_search_url(terms: str) -> str:
    encoded = quote(terms, safe="")
    return f"{ITUNES_SEARCH_URL}?media=podcast&entity=podcast&term={encoded}"


def search(
    terms: str,
    session: requests.Session | None = None,
    limit: int | None = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
) -> list[dict[str, Any]]:
    """Search iTunes for podcasts and return the raw result records.

    Raises:
        FetchError: on transport failures or an unexpected response body.
    """
    session = session or get_session()
    url = build_search_url(terms)
    logger.info("Searching podcasts: %r", terms)
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except ValueError as e:
        # requests' JSONDecodeError is both a ValueError and a RequestException
        raise FetchError(f"Failed to decode response from URL: {url}", url=url) from e
    except requests.RequestException as e:
        raise FetchError(describe_request_error(e, url), url=url) from e

    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise FetchError(f"Search response has no 'results' list: {url}", url=url)

    if limit is not None:
        results = results[:limit]
    logger.info("Search returned %s results", len(results))
    return results


def format_results(results: Sequence[dict[str, Any]], pattern: str, max_width: int) -> list[str]:
    """One display line per result: `"<n>: <rendered pattern>"`, 1-based."""
    lines = []
    for idx, res in enumerate(results, start=1):
        line = f"{idx}: {render(res, pattern)}"
        lines.append(truncate(line, max_width))
    return lines
