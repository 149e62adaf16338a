import argparse
import json
import logging
import sys
from pathlib import Path

from salesdash.config import get_settings
from salesdash.core.errors import DashboardError
from salesdash.core.logging import setup_logging
from salesdash.database.store import SaleStore
from salesdash.services.seed_service import (
    decode_seed_payload,
    initialize_store,
    parse_seed_records,
    replace_records,
)

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Replace all sale records from the seed feed.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--url", help="Seed feed URL (defaults to SEED_URL).")
    source.add_argument("--file", type=Path, help="Load a local JSON array instead of fetching.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()
    settings = get_settings()

    store = SaleStore.from_url(settings.DATABASE_URL, query_workers=settings.QUERY_WORKERS)
    try:
        store.create_schema()
        if args.file:
            records = parse_seed_records(decode_seed_payload(args.file.read_bytes()))
            inserted = replace_records(store, records)
        else:
            inserted = initialize_store(store, url=args.url).inserted
    except (DashboardError, OSError) as exc:
        logger.error("Initialization failed: %s", exc)
        return 1
    finally:
        store.dispose()

    print(json.dumps({"inserted": inserted}))
    return 0


if __name__ == "__main__":
    sys.exit(main())
