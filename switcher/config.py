"""Configuration for the task switcher filter and MCP server."""
import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FilterConfig:
    """Configuration for the window filterer."""
    # Candidate count at which scoring moves onto a thread pool
    parallel_threshold: int = 30
    max_workers: Optional[int] = None  # None = ThreadPoolExecutor default

    @classmethod
    def from_env(cls) -> "FilterConfig":
        """Create config from environment variables."""
        workers_str = os.environ.get("SWITCHER_MAX_WORKERS")

        return cls(
            parallel_threshold=int(os.environ.get("SWITCHER_PARALLEL_THRESHOLD", "30")),
            max_workers=int(workers_str) if workers_str else None,
        )


@dataclass
class Config:
    """Main configuration for the task switcher MCP server."""
    filter: FilterConfig = field(default_factory=FilterConfig.from_env)
    highlight_tag: str = "Bold"  # Element wrapped around matched text
    max_results: int = 50  # Cap on windows returned by filter_windows

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        return cls(
            filter=FilterConfig.from_env(),
            highlight_tag=os.environ.get("SWITCHER_HIGHLIGHT_TAG", "Bold"),
            max_results=int(os.environ.get("SWITCHER_MAX_RESULTS", "50")),
        )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.

    Returns:
        Config loaded from environment
    """
    global _config

    if _config is None:
        _config = Config.from_env()

    return _config
