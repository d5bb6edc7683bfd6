"""
Example: Initialize the rotation configuration index for a prefix

Usage:
    python examples/init_config.py products

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - ES_API_KEY: Elastic Cloud API Key (optional, for cloud auth)
"""

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from index_rotator import MissingPrimaryIndex
from index_rotator.es_client import create_es_client, create_index_rotator, get_es_info


def main():
    """Create configuration index and show the current primary"""
    parser = argparse.ArgumentParser(description="Initialize rotation configuration index")
    parser.add_argument("prefix", help="Dataset prefix whose rotation state to manage")
    args = parser.parse_args()

    print("=== Rotation Configuration ===")

    # Connect to ES
    print("\nConnecting to Elasticsearch...")
    es = create_es_client()

    info = get_es_info(es)
    print(f"\nCluster Info:")
    print(f"  Name: {info['cluster_name']}")
    print(f"  Version: {info['version']['number']}")

    rotator = create_index_rotator(es, args.prefix)

    if rotator.ensure_configuration_index():
        print(f"\n✓ Configuration index '{rotator.configuration_index_name}' created")
    else:
        print(f"\n✓ Configuration index '{rotator.configuration_index_name}' already exists")

    try:
        print(f"Primary index: {rotator.get_primary_index()}")
    except MissingPrimaryIndex:
        print("Primary index: (not set)")

    secondaries = rotator.get_secondary_indexes()
    print(f"Secondary indexes: {len(secondaries)}")
    for name in secondaries:
        print(f"  - {name}")


if __name__ == "__main__":
    main()
