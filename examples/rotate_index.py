"""
Example: Promote a new index to primary, keeping the old one as secondary

Usage:
    python examples/rotate_index.py products products_20240102

The new index must already exist and hold the data; this only moves the
primary pointer.

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - ES_API_KEY: Elastic Cloud API Key (optional, for cloud auth)
    - ROTATOR_MAX_RETRY_COUNT: Primary read retries (default: 5)
    - ROTATOR_RETRY_DELAY_SECONDS: Delay between retries (default: 0.5)
"""

import sys
import os
import argparse

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from index_rotator import PrimaryIndexCopyFailure
from index_rotator.es_client import create_es_client, create_index_rotator


def main():
    """Rotate primary index"""
    parser = argparse.ArgumentParser(description="Rotate primary index for a prefix")
    parser.add_argument("prefix", help="Dataset prefix whose rotation state to manage")
    parser.add_argument("index", help="Index to promote to primary")
    parser.add_argument(
        "--yes",
        action="store_true",
        help="Skip confirmation"
    )
    args = parser.parse_args()

    print("=== Index Rotation ===")

    # Connect to ES
    print("\nConnecting to Elasticsearch...")
    es = create_es_client()
    print(f"Connected to cluster: {es.info()['cluster_name']}")

    if not es.indices.exists(index=args.index):
        print(f"✗ Index '{args.index}' does not exist")
        sys.exit(1)

    # Confirm before proceeding
    if not args.yes:
        print(f"\nThis will make '{args.index}' the primary index for '{args.prefix}'.")
        confirm = input("Continue? [y/N]: ").strip().lower()
        if confirm != 'y':
            print("Aborted.")
            return

    rotator = create_index_rotator(es, args.prefix)

    print("\nPerforming rotation...")
    try:
        secondary_id = rotator.rotate(args.index)
    except PrimaryIndexCopyFailure as e:
        print(f"✗ Rotation aborted: {e}")
        sys.exit(1)

    if secondary_id is None:
        print("No previous primary (first rotation)")
    else:
        print(f"Previous primary kept as secondary entry: {secondary_id}")

    print(f"\nRotation complete!")
    print(f"Primary index: {rotator.get_primary_index()}")


if __name__ == "__main__":
    main()
