import logging
import os
import sys
from typing import List, Optional

from csv_io import write_accounts
from exceptions import PaymentsError
from payments_engine import PaymentsEngine

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_WORKERS = 4


def configure_logging() -> None:
    level_name = os.environ.get("PAYMENTS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def worker_count() -> int:
    """Worker threads from PAYMENTS_WORKERS; raises ValueError if not a positive integer."""
    value = int(os.environ.get("PAYMENTS_WORKERS", DEFAULT_WORKERS))
    if value < 1:
        raise ValueError(f"PAYMENTS_WORKERS must be positive, got {value}")
    return value


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    configure_logging()

    try:
        engine = PaymentsEngine(num_workers=worker_count())
        accounts = engine.process_file(args[0])
    except (PaymentsError, OSError, ValueError) as e:
        print(f"Processing error: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts.values(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
