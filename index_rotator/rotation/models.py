"""
Rotation data models and settings
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from index_rotator import get_env_bool, get_env_float, get_env_int

# Fixed backoff between primary reads (seconds)
RETRY_TIME_COPY = 0.5

# Retries after the first attempt before giving up
MAX_RETRY_COUNT = 5

# Upper bound for history searches (default index.max_result_window)
SEARCH_SIZE = 10000


def now_epoch() -> int:
    """Current time in whole epoch seconds"""
    return int(time.time())


def to_epoch_seconds(value: Union[datetime, int, float, None]) -> int:
    """
    Normalize a cutoff to epoch seconds.

    None means "up to now": entries stamped in the current second are
    included, so history written a moment ago is not filtered out.
    """
    if value is None:
        return now_epoch() + 1
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected datetime or epoch seconds, got {type(value).__name__}")
    return int(value)


@dataclass
class PointerDocument:
    """Primary or secondary pointer stored in the configuration index"""
    name: str
    timestamp: int = field(default_factory=now_epoch)
    id: Optional[str] = None

    def to_es_doc(self) -> dict:
        """Convert to ES document body"""
        return {
            "name": self.name,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_hit(cls, hit: dict) -> "PointerDocument":
        """Build from a search hit or get response"""
        source = hit["_source"]
        return cls(
            name=source["name"],
            timestamp=int(source.get("timestamp", 0)),
            id=hit.get("_id"),
        )


@dataclass
class SecondaryDeletion:
    """Outcome of pruning one secondary index"""
    index: str
    deleted: bool
    acknowledged: Optional[bool] = None
    pointer_ids: list = field(default_factory=list)
    protected: bool = False


@dataclass
class RotatorSettings:
    """Tunables for IndexRotator"""
    retry_delay: float = RETRY_TIME_COPY
    max_retry_count: int = MAX_RETRY_COUNT
    search_size: int = SEARCH_SIZE
    refresh: bool = True

    def __post_init__(self):
        if self.max_retry_count < 0:
            raise ValueError("max_retry_count must be >= 0")
        if self.retry_delay < 0:
            raise ValueError("retry_delay must be >= 0")
        if self.search_size <= 0:
            raise ValueError("search_size must be > 0")

    @classmethod
    def from_env(cls) -> "RotatorSettings":
        """Read settings from ROTATOR_* env vars, falling back to defaults"""
        return cls(
            retry_delay=get_env_float("ROTATOR_RETRY_DELAY_SECONDS", RETRY_TIME_COPY),
            max_retry_count=get_env_int("ROTATOR_MAX_RETRY_COUNT", MAX_RETRY_COUNT),
            search_size=get_env_int("ROTATOR_SEARCH_SIZE", SEARCH_SIZE),
            refresh=get_env_bool("ROTATOR_REFRESH", True),
        )
