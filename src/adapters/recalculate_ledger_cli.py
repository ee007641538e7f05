"""CLI adapter re-deriving ledger balances.

With ``RECALC_FROM_DATE`` set, a cascade runs from that date. Without it, an
interrupted cascade is resumed, or else dirty records are repaired.
"""

import os

from src.adapters.cli_helpers import parse_date
from src.domain.errors import LedgerError
from src.domain.models import CascadeResult
from src.infrastructure.container import build_ledger_services
from src.infrastructure.logging.logger import get_app_logger, get_usage_logger


def _describe(result: CascadeResult | None) -> str:
    if result is None or result.end_date is None:
        return "Ledger already up to date."
    return (
        f"Recalculated {result.processed_days} day(s) from "
        f"{result.start_date} to {result.end_date}: "
        f"{result.written_days} updated, {result.created_days} created."
    )


def main() -> int:
    """Run the requested ledger recalculation."""
    logger = get_app_logger()
    raw_start = os.getenv("RECALC_FROM_DATE")
    start = parse_date(raw_start, logger)
    if raw_start and start is None:
        print(f"Invalid RECALC_FROM_DATE: {raw_start}")
        return 2

    services = build_ledger_services()
    get_usage_logger().info(
        f"recalculate_ledger_cli from={start.isoformat() if start else 'auto'}"
    )
    try:
        if start is not None:
            result = services.recalculate.recalculate_from(start)
        else:
            result = services.recalculate.resume()
            if result is None:
                result = services.recalculate.recalculate_dirty()
    except LedgerError as exc:
        logger.error(f"Ledger recalculation failed: {exc}")
        print(f"Ledger recalculation failed: {exc}")
        return 1

    print(_describe(result))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
