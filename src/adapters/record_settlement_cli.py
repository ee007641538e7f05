"""CLI adapter recording the amounts settled on a ledger date."""

from decimal import Decimal

from src.adapters.cli_helpers import read_amount, read_date
from src.domain.errors import LedgerError
from src.infrastructure.container import build_ledger_services
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def main() -> int:
    """Store the same-day settlement inputs and run the cascade."""
    logger = get_app_logger()
    day = read_date("SETTLEMENT_DATE", logger)
    if day is None:
        print("SETTLEMENT_DATE (YYYY-MM-DD) is required.")
        return 2
    zero = Decimal("0")
    processor_settled = read_amount("PROCESSOR_SETTLED_TODAY", logger, zero)
    platform_settled = read_amount("PLATFORM_SETTLED_TODAY", logger, zero)
    tax_withheld = read_amount("PLATFORM_TAX_WITHHELD_TODAY", logger, zero)
    if None in (processor_settled, platform_settled, tax_withheld):
        print("Settlement amounts must be numeric.")
        return 2

    services = build_ledger_services()
    get_usage_logger().info(f"record_settlement_cli date={day}")
    try:
        services.ledger.apply_same_day_inputs(
            day,
            processor_settled,
            platform_settled,
            tax_withheld,
        )
        services.worker.drain()
        record = services.ledger.read(day)
    except LedgerError as exc:
        logger.error(f"Settlement input failed: {exc}")
        print(f"Settlement input failed: {exc}")
        return 1

    print(
        f"{record.ledger_date}: available {record.processor.available}, "
        f"processor pending {record.processor.pending_settlement}, "
        f"platform pending {record.platform.pending_settlement}."
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
