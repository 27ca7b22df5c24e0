"""
podfeed: podcast feed helpers.

- `podfeed.feeds`: namespace normalization + XML -> data conversion for feeds
- `podfeed.patterns`: `{field}` display patterns for search results and episodes
- `podfeed.search`: iTunes podcast search
"""

from podfeed.feeds import normalize
from podfeed.patterns import render

__all__ = ["normalize", "render"]
