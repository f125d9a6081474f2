"""Pydantic domain models for group-settle."""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .money import EPSILON, is_whole_cents


def _require_cents(value: Decimal) -> Decimal:
    if not is_whole_cents(value):
        raise ValueError(f"{value} has a fraction of a cent")
    return value


# ============================================================================
# Expense Models
# ============================================================================


class Expense(BaseModel):
    """A shared expense with the share each participant owes.

    Amounts and shares are whole cents. Expenses are immutable; corrections
    produce a new Expense with recomputed splits. Deleting an expense flips
    ``deleted`` instead of removing the row.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    payer: str
    amount: Decimal = Field(gt=0)
    currency: str
    splits: dict[str, Decimal]
    participants: list[str] = Field(default_factory=list)  # roster at creation
    description: str = ""
    category: str = "other"
    split_mode: Literal["equal", "custom"] = "equal"
    is_shared: bool = True  # False = personal expense, never split
    deleted: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("amount")
    @classmethod
    def _amount_in_cents(cls, value: Decimal) -> Decimal:
        return _require_cents(value)

    @field_validator("splits")
    @classmethod
    def _shares_in_cents(cls, value: dict[str, Decimal]) -> dict[str, Decimal]:
        for share in value.values():
            _require_cents(share)
        return value

    @field_validator("currency")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_splits(self) -> "Expense":
        total = sum(self.splits.values(), Decimal("0"))
        if abs(total - self.amount) > EPSILON:
            raise ValueError(
                f"splits sum to {total} but expense amount is {self.amount}"
            )
        if self.participants:
            unknown = set(self.splits) - set(self.participants)
            if unknown:
                raise ValueError(f"splits name non-participants: {sorted(unknown)}")
        return self

    @property
    def counts_toward_balances(self) -> bool:
        """Whether this expense takes part in balance computation."""
        return self.is_shared and not self.deleted


# ============================================================================
# Splitting Models
# ============================================================================


class SplitRequest(BaseModel):
    """Input to the split calculator.

    ``custom_splits`` selects custom mode; otherwise the total is split equally
    among ``participants`` minus ``excluded_participants``.
    """

    model_config = ConfigDict(frozen=True)

    total_amount: Decimal = Field(gt=0)
    currency: str
    payer: str
    participants: list[str]
    excluded_participants: list[str] = Field(default_factory=list)
    custom_splits: dict[str, Decimal] | None = None

    @field_validator("currency")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        return value.strip().upper()

    @field_validator("total_amount")
    @classmethod
    def _total_in_cents(cls, value: Decimal) -> Decimal:
        return _require_cents(value)

    @field_validator("custom_splits")
    @classmethod
    def _custom_shares_in_cents(
        cls, value: dict[str, Decimal] | None
    ) -> dict[str, Decimal] | None:
        for share in (value or {}).values():
            _require_cents(share)
        return value


class SplitResult(BaseModel):
    """Per-participant shares produced by the split calculator."""

    model_config = ConfigDict(frozen=True)

    shares: dict[str, Decimal]
    payer: str
    total_amount: Decimal
    currency: str


# ============================================================================
# Balance / Settlement Models
# ============================================================================


class Balance(BaseModel):
    """A participant's net position in one currency.

    Positive means the group owes them; negative means they owe the group.
    """

    model_config = ConfigDict(frozen=True)

    person: str
    net_balance: Decimal
    currency: str

    @property
    def is_creditor(self) -> bool:
        return self.net_balance > EPSILON

    @property
    def is_debtor(self) -> bool:
        return self.net_balance < -EPSILON


class Settlement(BaseModel):
    """A suggested payment from a debtor to a creditor."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_person: str = Field(alias="from")
    to_person: str = Field(alias="to")
    amount: Decimal = Field(gt=0)
    currency: str


class CurrencySummary(BaseModel):
    """Balances and suggested settlements for a single currency."""

    currency: str
    balances: list[Balance]
    settlements: list[Settlement]

    @property
    def is_settled(self) -> bool:
        return not self.balances
