"""
Feed documents: namespace normalization, XML -> data conversion, download.

- `podfeed.feeds.namespaces`: rewrite `prefix:local` element names
- `podfeed.feeds.convert`: generic XML -> dict and dotted-pattern lookup
- `podfeed.feeds.fetch`: HTTP download and the normalize -> convert pipeline
"""

from podfeed.feeds.convert import get_guid, lookup, to_record
from podfeed.feeds.fetch import download_bytes, download_text, feed_items, load_feed
from podfeed.feeds.namespaces import NAMESPACE_ALTER, iter_events, normalize, normalize_pattern

__all__ = [
    "NAMESPACE_ALTER",
    "download_bytes",
    "download_text",
    "feed_items",
    "get_guid",
    "iter_events",
    "load_feed",
    "lookup",
    "normalize",
    "normalize_pattern",
    "to_record",
]
