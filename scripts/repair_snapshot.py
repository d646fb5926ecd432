#!/usr/bin/env python3
"""Script to check a catalog snapshot and repair drifted collection counters."""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from deals.errors import ValidationError
from deals.services import IntegrityChecker
from deals.utils.json_processor import JSONProcessor


def repair_snapshot(snapshot_path: str, dry_run: bool = True) -> bool:
    """Report integrity issues in a snapshot and, unless dry-running, fix and save them."""
    processor = JSONProcessor()
    try:
        store = processor.load_store(snapshot_path)
    except (FileNotFoundError, ValidationError) as e:
        print(f"❌ Cannot load snapshot: {e}")
        return False

    checker = IntegrityChecker(store)
    issues = checker.check()

    print("📋 Integrity Report:")
    print(f"   Snapshot: {snapshot_path}")
    print(f"   Records: {store.counts()}")
    print(f"   Issues found: {len(issues)}")
    for issue in issues:
        print(f"   - {issue.describe()}")

    if not issues:
        return True

    if dry_run:
        print("\n🔍 DRY RUN - No changes will be made")
        return True

    checker.repair()
    processor.save_store(store, snapshot_path)
    print(f"✅ Repaired {len(issues)} issue(s) and saved {snapshot_path}")
    return True


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Check and repair a catalog snapshot')
    parser.add_argument('snapshot', help='Path to the snapshot JSON file')
    parser.add_argument('--execute', action='store_true', help='Actually write the repairs (default is dry-run)')

    args = parser.parse_args()

    dry_run = not args.execute

    if dry_run:
        print("🔍 Running in DRY RUN mode (use --execute to actually make changes)\n")
    else:
        print("⚠️  EXECUTING repair - this will rewrite the snapshot!\n")

    if not repair_snapshot(args.snapshot, dry_run=dry_run):
        print("\n❌ Repair failed!")
        sys.exit(1)


if __name__ == '__main__':
    main()
