"""CLI adapter reporting ledger records that drifted from their inputs."""

from src.adapters.cli_helpers import read_date
from src.infrastructure.container import build_ledger_services
from src.infrastructure.logging.logger import get_app_logger


def main() -> int:
    """Print the audit report; exit code 1 when drifts were found."""
    logger = get_app_logger()
    start = read_date("AUDIT_START_DATE", logger)
    end = read_date("AUDIT_END_DATE", logger)

    report = build_ledger_services().audit.execute(start=start, end=end)

    print(f"Checked {report.checked_days} ledger record(s).")
    for drift in report.drifts:
        print(f"{drift.ledger_date}: {drift.reason}")
        for name in drift.fields:
            print(
                f"  {name}: expected {drift.expected[name]}, "
                f"stored {drift.actual.get(name)}"
            )
    if report.is_consistent:
        print("Ledger is consistent.")
        return 0
    print(f"{len(report.drifts)} drift(s) found; run recalculate_ledger_cli.")
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
