"""
Configuration index naming and mappings
"""

# Configuration index per prefix, dot-prefixed to keep it apart from data indexes
INDEX_NAME_CONFIG = ".{prefix}_configuration"

# Document type used by engines that still have mapping types (< 7.0)
TYPE_CONFIGURATION = "configuration"

# Fixed id of the primary pointer document
PRIMARY_ID = "primary"


def get_configuration_index_name(prefix: str) -> str:
    """Configuration index name for a prefix"""
    if not prefix:
        raise ValueError("Prefix must be a non-empty string")
    return INDEX_NAME_CONFIG.format(prefix=prefix)


def get_configuration_mapping(version: tuple = (8, 0, 0)) -> dict:
    """
    Build the configuration index body for an engine version.

    A fresh dict is returned on every call so callers can't alter the
    mapping used by other rotators.

    - >= 7.0: typeless mappings
    - 5.x / 6.x: mappings nested under the configuration type
    - < 5.0: no keyword type yet, uses a not_analyzed string
    - < 2.0: no epoch_second date format; longs are read as epoch millis,
      which keeps range comparisons on raw seconds consistent
    """
    major = version[0]

    if major < 5:
        name_field = {"type": "string", "index": "not_analyzed"}
    else:
        name_field = {"type": "keyword"}

    timestamp_field = {"type": "date"}
    if major >= 2:
        timestamp_field["format"] = "epoch_second"

    properties = {
        "name": name_field,
        "timestamp": timestamp_field,
    }

    if major >= 7:
        return {"mappings": {"properties": properties}}
    return {"mappings": {TYPE_CONFIGURATION: {"properties": properties}}}


def get_document_type(version: tuple):
    """Document type for pointer calls; None on typeless engines (>= 7.0)"""
    if version[0] >= 7:
        return None
    return TYPE_CONFIGURATION
