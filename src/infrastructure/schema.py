"""Table definitions of the back office store.

Sales, expense/income entries and rates are owned by the CRUD layer; this
module declares them so the ledger can read them and so a local database
can be created for development and tests. The ledger tables are owned
here.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine

MONEY = Numeric(14, 2)
RATIO = Numeric(8, 4)

metadata = MetaData()

sales_table = Table(
    "sales",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("sale_date", Date, nullable=False, index=True),
    Column("channel", String(20), nullable=False),
    Column("payment_method", String(30), nullable=False),
    Column("condition", String(40), nullable=False, default="Normal"),
    Column("quantity", Integer, nullable=False, default=1),
    Column("product_id", String(64)),
    Column("gross_price", MONEY, nullable=False),
    Column("shipping_cost", MONEY, nullable=False, default=0),
    Column("product_cost", MONEY, nullable=False, default=0),
    Column("commission", MONEY, nullable=False, default=0),
    Column("tax", MONEY, nullable=False, default=0),
    Column("gross_receipts_tax", MONEY, nullable=False, default=0),
    Column("net_price", MONEY, nullable=False, default=0),
    Column("margin", MONEY, nullable=False, default=0),
    Column("buyer", String(200), nullable=False, default=""),
    Column("tracking_url", Text),
    Column("shipping_status", String(60)),
    Column("courier", String(60)),
    Column("shipping_address", Text),
    Column("external_order_id", String(64)),
)

movements_table = Table(
    "movements",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("entry_date", Date, nullable=False, index=True),
    Column("kind", String(20), nullable=False),
    Column("category", String(120), nullable=False),
    Column("amount", MONEY, nullable=False),
    Column("channel", String(20), nullable=False, default="General"),
    Column("is_personal", Boolean, nullable=False, default=False),
    Column("description", Text, nullable=False, default=""),
)

rates_table = Table(
    "rates",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("channel", String(20), nullable=False),
    Column("payment_method", String(30), nullable=False),
    Column("condition", String(40), nullable=False),
    Column("commission_pct", RATIO, nullable=False),
    Column("fixed_fee", MONEY, nullable=False, default=0),
    Column("discount_pct", RATIO, nullable=False, default=0),
    Column("extra_commission_pct", RATIO, nullable=False, default=0),
    Column("gross_receipts_pct", RATIO, nullable=False, default=0.03),
    UniqueConstraint(
        "channel",
        "payment_method",
        "condition",
        name="uq_rates_key",
    ),
)

ledger_days_table = Table(
    "ledger_days",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("ledger_date", Date, nullable=False, unique=True),
    Column("processor_available", MONEY, nullable=False, default=0),
    Column("processor_pending", MONEY, nullable=False, default=0),
    Column("processor_settled_today", MONEY, nullable=False, default=0),
    Column("platform_pending", MONEY, nullable=False, default=0),
    Column("platform_settled_today", MONEY, nullable=False, default=0),
    Column("platform_tax_withheld_today", MONEY, nullable=False, default=0),
    Column("notes", Text, nullable=False, default=""),
    Column("is_opening", Boolean, nullable=False, default=False),
    Column("needs_recalculation", Boolean, nullable=False, default=False),
    Column("updated_at", DateTime, nullable=False),
)

ledger_recalc_state_table = Table(
    "ledger_recalc_state",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("resume_from", Date),
    Column("updated_at", DateTime, nullable=False),
)


def create_schema(engine: Engine) -> None:
    """Create every missing table of the back office store."""
    metadata.create_all(engine)


__all__ = [
    "metadata",
    "sales_table",
    "movements_table",
    "rates_table",
    "ledger_days_table",
    "ledger_recalc_state_table",
    "create_schema",
]
