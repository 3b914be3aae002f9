"""Configuration classes for flowcut components."""

from dataclasses import dataclass
from typing import Optional

from flowcut.algorithms.base import PathSearch


@dataclass
class FlowConfig:
    """Defaults applied to flow construction when callers pass no override."""

    # Path search used when none is given explicitly ("bfs" or "dfs")
    default_search: str = "bfs"

    # Emit a debug progress line every this many stages
    progress_interval: int = 1000

    # Hard cap on stages per construction run; None means unbounded
    max_stages: Optional[int] = None

    # Level name and record format for the "flowcut" logger
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def resolve_search(self) -> PathSearch:
        """Return the configured default as a PathSearch member."""
        return PathSearch.from_string(self.default_search)


# Global configuration instance
FLOW_CONFIG = FlowConfig()
