import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parents[1] / ".env")

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from app.db import SessionLocal, init_db  # noqa: E402
from app.services.hazard_service import purge_expired  # noqa: E402
from app.services.hazard_store import HazardStore  # noqa: E402

log = logging.getLogger("purge_expired")


def run(dry_run: bool = False) -> int:
    db = SessionLocal()
    try:
        return purge_expired(HazardStore(db), dry_run=dry_run)
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description="Delete hazards older than 24 hours (cron entry point).")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only count expired hazards, delete nothing.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s - %(message)s")

    init_db()
    count = run(dry_run=args.dry_run)

    if args.dry_run:
        print(f"{count} expired hazard(s) would be deleted.")
    else:
        print(f"Deleted {count} expired hazard(s).")


if __name__ == "__main__":
    main()
