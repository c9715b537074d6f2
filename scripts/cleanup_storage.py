"""Cron entry point for reclaiming expired payloads without the server."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime, timezone

from tempdrop.config import AppConfig
from tempdrop.storage.object_store import ObjectStore
from tempdrop.storage.recovery import count_expired


@dataclass(slots=True)
class CleanupSummary:
    expired: int
    live: int
    failed: int
    dry_run: bool


def perform_cleanup(*, dry_run: bool, reference_time: datetime | None = None) -> CleanupSummary:
    """Scan the storage directory and delete expired payloads unless ``dry_run``."""
    config = AppConfig.build_default()
    now = reference_time or datetime.now(timezone.utc)
    store = ObjectStore.from_config(config, clock=lambda: now)

    if dry_run:
        expired = count_expired(payloads=store.payloads, naming=store.naming, now=now)
        return CleanupSummary(expired=expired, live=0, failed=0, dry_run=True)

    report = store.load_existing()
    return CleanupSummary(
        expired=report.discarded,
        live=report.restored,
        failed=len(report.failures),
        dry_run=False,
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reclaim expired stored files.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    try:
        summary = perform_cleanup(dry_run=args.dry_run)
    except Exception as exc:
        print(f"cleanup failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"cleanup dry-run, expired={summary.expired}", file=sys.stdout)
    else:
        print(
            f"cleanup done, removed={summary.expired}, live={summary.live}, failed={summary.failed}",
            file=sys.stdout,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
