"""
Example: Delete secondary indexes older than N days

Usage:
    python examples/prune_secondaries.py products --days 7

    # Keep pointer documents as an audit trail
    python examples/prune_secondaries.py products --days 7 --keep-pointers

    # Expose prune counters to Prometheus while the run lasts
    python examples/prune_secondaries.py products --metrics-port 8000

Environment variables:
    - ES_URL: Elasticsearch URL (default: http://localhost:9200)
    - ES_API_KEY: Elastic Cloud API Key (optional, for cloud auth)
"""

import sys
import os
import argparse
from datetime import datetime, timedelta

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from index_rotator.es_client import create_es_client, create_index_rotator
from index_rotator.metrics import start_metrics_server


def main():
    """Prune old secondary indexes"""
    parser = argparse.ArgumentParser(description="Delete old secondary indexes")
    parser.add_argument("prefix", help="Dataset prefix whose rotation state to manage")
    parser.add_argument(
        "--days",
        type=int,
        default=0,
        help="Only delete secondaries demoted more than this many days ago (default: all)"
    )
    parser.add_argument(
        "--keep-pointers",
        action="store_true",
        help="Keep secondary pointer documents after deleting their indexes"
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Expose Prometheus metrics on this port while pruning"
    )
    args = parser.parse_args()

    if args.metrics_port:
        start_metrics_server(args.metrics_port)

    print("=== Secondary Index Pruning ===")

    print("\nConnecting to Elasticsearch...")
    es = create_es_client()

    rotator = create_index_rotator(es, args.prefix)
    older_than = datetime.now() - timedelta(days=args.days)

    candidates = rotator.get_secondary_indexes(older_than)
    if not candidates:
        print("Nothing to prune.")
        return

    print(f"\nSecondary indexes older than {older_than:%Y-%m-%d %H:%M}:")
    for name in candidates:
        print(f"  - {name}")

    confirm = input("Delete these indexes? [y/N]: ").strip().lower()
    if confirm != 'y':
        print("Aborted.")
        return

    results = rotator.delete_secondary_indexes(
        older_than,
        remove_pointers=not args.keep_pointers
    )

    for name, outcome in results.items():
        if outcome.protected:
            status = "kept (current primary)"
        elif outcome.deleted:
            status = "deleted"
        else:
            status = "already gone"
        print(f"  {name}: {status}")

    print(f"\nDone! {sum(1 for r in results.values() if r.deleted)} index(es) deleted")


if __name__ == "__main__":
    main()
