"""
Elasticsearch Index Rotator
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Library default: stay silent unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

_TRUE_VALUES = ("1", "true", "yes", "y", "on")
_FALSE_VALUES = ("0", "false", "no", "n", "off")


def _load_dotenv():
    """Load .env from nearest parents (preferred) with safe fallback."""
    here = Path(__file__).resolve()

    # Note: override=False to keep real env (CI, containers) as source of truth.
    for p in here.parents:
        env_path = p / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)
            return

    cwd_env = Path.cwd() / ".env"
    if cwd_env.exists():
        load_dotenv(cwd_env, override=False)


def get_env(name: str, default: str = None) -> str:
    """Get env var; raise if missing/empty and no default given."""
    value = os.getenv(name)
    if value is None or str(value).strip() == "":
        if default is not None:
            return default
        raise RuntimeError(f"Missing required env var: {name}")
    return value


def get_env_int(name: str, default: int = None) -> int:
    """Get int env var, raise if missing/invalid."""
    raw = get_env(name, None if default is None else str(default))
    try:
        return int(raw)
    except Exception as e:
        raise RuntimeError(f"Invalid int env var {name}={raw!r}") from e


def get_env_float(name: str, default: float = None) -> float:
    """Get float env var, raise if missing/invalid."""
    raw = get_env(name, None if default is None else str(default))
    try:
        return float(raw)
    except Exception as e:
        raise RuntimeError(f"Invalid float env var {name}={raw!r}") from e


def get_env_bool(name: str, default: bool = None) -> bool:
    """Get bool env var, raise if missing/invalid."""
    fallback = None if default is None else ("true" if default else "false")
    raw = get_env(name, fallback).strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise RuntimeError(f"Invalid bool env var {name}={raw!r}")


_load_dotenv()

__version__ = "1.0.0"

from .exceptions import (  # noqa: E402
    IndexRotatorError,
    MissingPrimaryIndex,
    PrimaryIndexCopyFailure,
    TransientStoreError,
    DocumentNotFound,
)
from .rotation import (  # noqa: E402
    IndexRotator,
    ElasticsearchStore,
    RotatorSettings,
    PointerDocument,
    SecondaryDeletion,
)

__all__ = [
    "get_env",
    "get_env_int",
    "get_env_float",
    "get_env_bool",
    "IndexRotatorError",
    "MissingPrimaryIndex",
    "PrimaryIndexCopyFailure",
    "TransientStoreError",
    "DocumentNotFound",
    "IndexRotator",
    "ElasticsearchStore",
    "RotatorSettings",
    "PointerDocument",
    "SecondaryDeletion",
]
