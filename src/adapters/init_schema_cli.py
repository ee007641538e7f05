"""CLI adapter creating the back office tables on a fresh database."""

from src.infrastructure.container import build_database_adapter
from src.infrastructure.logging.logger import get_app_logger
from src.infrastructure.schema import create_schema


def main() -> None:
    """Create every missing table."""
    logger = get_app_logger()
    engine = build_database_adapter().get_backoffice_engine()
    create_schema(engine)
    logger.info("Back office schema is up to date.")
    print("Schema created (existing tables were left untouched).")


if __name__ == "__main__":  # pragma: no cover
    main()
