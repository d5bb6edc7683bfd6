"""
Rotation module exports
"""

from .config_schema import (
    INDEX_NAME_CONFIG,
    PRIMARY_ID,
    TYPE_CONFIGURATION,
    get_configuration_index_name,
    get_configuration_mapping,
    get_document_type,
)
from .models import PointerDocument, RotatorSettings, SecondaryDeletion, MAX_RETRY_COUNT
from .query import build_secondary_query, parse_version, supports_combined_query_filter
from .store import ElasticsearchStore, is_transient_error
from .rotator import IndexRotator

__all__ = [
    "INDEX_NAME_CONFIG",
    "PRIMARY_ID",
    "TYPE_CONFIGURATION",
    "get_configuration_index_name",
    "get_configuration_mapping",
    "get_document_type",
    "PointerDocument",
    "RotatorSettings",
    "SecondaryDeletion",
    "MAX_RETRY_COUNT",
    "build_secondary_query",
    "parse_version",
    "supports_combined_query_filter",
    "ElasticsearchStore",
    "is_transient_error",
    "IndexRotator",
]
