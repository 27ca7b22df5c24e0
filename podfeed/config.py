import os
from dataclasses import dataclass

from dotenv import load_dotenv

from podfeed.errors import ConfigError

# Load environment variables (no filesystem side-effects)
load_dotenv()

# Search endpoint
ITUNES_SEARCH_URL = "https://itunes.apple.com/search"

# Display patterns (see `podfeed.patterns.render`)
DEFAULT_SEARCH_PATTERN = "{artistName} - {collectionName}"
DEFAULT_EPISODE_PATTERN = "{title}"

DEFAULT_MAX_SEARCH_RESULTS = 10
DEFAULT_MAX_LINE_WIDTH = 80
DEFAULT_HTTP_TIMEOUT = 30

# Refer to `podfeed.feeds.namespaces.normalize` for an explanation.
DEFAULT_NAMESPACE_ALTER = "__placeholder__"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@dataclass
class Settings:
    """Runtime settings for the CLI and the feed pipeline."""

    search_pattern: str = DEFAULT_SEARCH_PATTERN
    episode_pattern: str = DEFAULT_EPISODE_PATTERN
    max_search_results: int = DEFAULT_MAX_SEARCH_RESULTS
    max_line_width: int = DEFAULT_MAX_LINE_WIDTH
    http_timeout: int = DEFAULT_HTTP_TIMEOUT
    namespace_alter: str = DEFAULT_NAMESPACE_ALTER

    @classmethod
    def from_env(cls) -> "Settings":
        alter = os.getenv("PODFEED_NAMESPACE_ALTER") or DEFAULT_NAMESPACE_ALTER
        if ":" in alter:
            raise ConfigError("PODFEED_NAMESPACE_ALTER must not contain ':'")
        return cls(
            search_pattern=os.getenv("PODFEED_SEARCH_PATTERN") or DEFAULT_SEARCH_PATTERN,
            episode_pattern=os.getenv("PODFEED_EPISODE_PATTERN") or DEFAULT_EPISODE_PATTERN,
            max_search_results=_env_int("PODFEED_MAX_SEARCH_RESULTS", DEFAULT_MAX_SEARCH_RESULTS),
            max_line_width=_env_int("PODFEED_MAX_LINE_WIDTH", DEFAULT_MAX_LINE_WIDTH),
            http_timeout=_env_int("PODFEED_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            namespace_alter=alter,
        )
