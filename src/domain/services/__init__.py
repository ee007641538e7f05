"""Domain services package."""

from .contributions import (
    aggregate_day,
    aggregate_movements,
    aggregate_platform_rail,
    aggregate_processor_rail,
)
from .ledger import balance_snapshot, carry_forward, derive_record
from .normalization import (
    normalize_category,
    normalize_flag,
    normalize_optional_text,
    normalize_text,
)
from .recalculation_planner import (
    plan_movement_recalculation,
    plan_recalculation,
    plan_sale_recalculation,
)
from .sale_calculator import compute_sale
from .tax_policies import TaxSplit, select_tax_policy
from .validation import validate_balance_signs, validate_settlement_inputs

__all__ = [
    "aggregate_day",
    "aggregate_movements",
    "aggregate_platform_rail",
    "aggregate_processor_rail",
    "balance_snapshot",
    "carry_forward",
    "derive_record",
    "normalize_category",
    "normalize_flag",
    "normalize_optional_text",
    "normalize_text",
    "plan_movement_recalculation",
    "plan_recalculation",
    "plan_sale_recalculation",
    "compute_sale",
    "TaxSplit",
    "select_tax_policy",
    "validate_balance_signs",
    "validate_settlement_inputs",
]
