"""group-settle - Track shared group expenses and work out who owes whom."""

__version__ = "0.1.0"

from .balances import compute_balances, compute_balances_by_currency, group_by_currency
from .config import Settings, load_settings
from .currency import DEFAULT_RATES, convert, currency_for_location
from .db import Database
from .exclusions import EXCLUSION_RULES, ExclusionRule, extract_exclusions
from .models import (
    Balance,
    CurrencySummary,
    Expense,
    Settlement,
    SplitRequest,
    SplitResult,
)
from .money import EPSILON, round2
from .service import LedgerService
from .settlement import (
    format_balances,
    format_settlements,
    plan_settlements,
    settle_balances,
)
from .splitter import split_expense

__all__ = [
    "Settings",
    "load_settings",
    "Database",
    "Balance",
    "CurrencySummary",
    "Expense",
    "Settlement",
    "SplitRequest",
    "SplitResult",
    "EPSILON",
    "round2",
    "split_expense",
    "group_by_currency",
    "compute_balances",
    "compute_balances_by_currency",
    "settle_balances",
    "plan_settlements",
    "format_balances",
    "format_settlements",
    "EXCLUSION_RULES",
    "ExclusionRule",
    "extract_exclusions",
    "DEFAULT_RATES",
    "convert",
    "currency_for_location",
    "LedgerService",
]
