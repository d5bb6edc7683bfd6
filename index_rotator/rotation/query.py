"""
Secondary history queries with engine version compatibility

Elasticsearch 2.0 merged filters into the query DSL. Older engines need
the range filter as a top-level sibling of the query instead of a
`filter` clause inside `bool`.
"""

import re
from typing import Callable, Dict, Tuple

from .config_schema import PRIMARY_ID

# First engine version that accepts bool.filter
COMBINED_FILTER_MIN_VERSION = (2, 0, 0)

_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?")


def parse_version(version: str) -> Tuple[int, int, int]:
    """
    Parse an engine version string into a comparable tuple.

    Pre-release and build suffixes are ignored ("5.0.0-alpha5" -> (5, 0, 0),
    "7.10.2-SNAPSHOT" -> (7, 10, 2)).

    Raises:
        ValueError: If version does not start with MAJOR.MINOR
    """
    match = _VERSION_RE.match(version or "")
    if not match:
        raise ValueError(f"Invalid engine version (expected X.Y.Z): {version!r}")
    major, minor, patch = match.groups()
    return int(major), int(minor), int(patch or 0)


def supports_combined_query_filter(version: str) -> bool:
    """Whether bool queries may carry their own filter clause"""
    return parse_version(version) >= COMBINED_FILTER_MIN_VERSION


def _exclude_primary() -> dict:
    return {"term": {"_id": PRIMARY_ID}}


def _older_than(cutoff: int) -> dict:
    return {"range": {"timestamp": {"lt": cutoff}}}


def build_combined_filter_query(cutoff: int, size: int) -> dict:
    """Query for engines >= 2.0: filter nested inside bool"""
    return {
        "size": size,
        "query": {
            "bool": {
                "must_not": _exclude_primary(),
                "filter": _older_than(cutoff),
            }
        },
        "sort": [{"_doc": "asc"}],
    }


def build_legacy_filter_query(cutoff: int, size: int) -> dict:
    """Query for 1.x engines: filter as a top-level sibling of query"""
    return {
        "size": size,
        "query": {
            "bool": {
                "must_not": _exclude_primary(),
            }
        },
        "filter": _older_than(cutoff),
        "sort": [{"_doc": "asc"}],
    }


QUERY_BUILDERS: Dict[bool, Callable[[int, int], dict]] = {
    True: build_combined_filter_query,
    False: build_legacy_filter_query,
}


def build_secondary_query(version: str, cutoff: int, size: int) -> dict:
    """Pick the query shape for the engine version and build it"""
    builder = QUERY_BUILDERS[supports_combined_query_filter(version)]
    return builder(cutoff, size)
