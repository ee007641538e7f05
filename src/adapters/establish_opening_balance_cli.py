"""CLI adapter bootstrapping the ledger with operator-entered balances."""

import os

from src.adapters.cli_helpers import read_amount, read_date
from src.domain.errors import LedgerError
from src.infrastructure.container import build_ledger_services
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger

AMOUNT_VARIABLES = (
    "OPENING_PROCESSOR_AVAILABLE",
    "OPENING_PROCESSOR_PENDING",
    "OPENING_PLATFORM_PENDING",
)


def main() -> int:
    """Store the opening balance and re-derive later dates."""
    logger = get_app_logger()
    opening_date = read_date("OPENING_DATE", logger)
    if opening_date is None:
        print("OPENING_DATE (YYYY-MM-DD) is required.")
        return 2
    amounts = {name: read_amount(name, logger) for name in AMOUNT_VARIABLES}
    missing = [name for name, value in amounts.items() if value is None]
    if missing:
        print(f"Missing or invalid amounts: {', '.join(missing)}")
        return 2

    services = build_ledger_services()
    get_usage_logger().info(f"establish_opening_balance_cli date={opening_date}")
    try:
        record = services.ledger.establish_opening_balance(
            opening_date,
            processor_available=amounts["OPENING_PROCESSOR_AVAILABLE"],
            processor_pending=amounts["OPENING_PROCESSOR_PENDING"],
            platform_pending=amounts["OPENING_PLATFORM_PENDING"],
            notes=os.getenv("OPENING_NOTES", ""),
        )
        services.worker.drain()
    except LedgerError as exc:
        logger.error(f"Opening balance failed: {exc}")
        print(f"Opening balance failed: {exc}")
        return 1

    print(
        f"Opening balance stored on {record.ledger_date}: "
        f"total available {record.total_available}."
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
