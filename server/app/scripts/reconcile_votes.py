"""Repair track vote counters that drifted from the recorded votes."""

import argparse
import sys

from app.core.errors import StoreFailure
from app.db.session import SessionLocal
from app.services.vote import reconcile_vote_counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Reconcile track vote counters")
    parser.parse_args()

    db = SessionLocal()
    try:
        drifts = reconcile_vote_counts(db)
    except StoreFailure as e:
        print(f"Reconcile error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    if not drifts:
        print("All track vote counters match the recorded votes.")
        return
    for drift in drifts:
        print(f"{drift.track_id}: {drift.stored_votes} -> {drift.actual_votes}")
    print(f"Repaired {len(drifts)} track(s).")


if __name__ == "__main__":
    main()
