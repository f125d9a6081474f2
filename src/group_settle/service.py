"""Service layer that composes the ledger store and the settlement engine.

The engine modules (splitter, balances, settlement, exclusions, currency) are
pure functions. This module is where they meet persistence: it validates names
against the roster, stores expenses, and assembles per-currency summaries.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from .balances import compute_balances, group_by_currency
from .config import Settings
from .currency import convert
from .db import Database
from .exceptions import ExpenseNotFoundError, UnknownParticipantError
from .exclusions import extract_exclusions
from .models import (
    Balance,
    CurrencySummary,
    Expense,
    Settlement,
    SplitRequest,
)
from .money import to_decimal
from .settlement import settle_balances
from .splitter import split_expense

logger = logging.getLogger(__name__)


class LedgerService:
    """Records shared expenses and reports who owes whom."""

    def __init__(self, settings: Settings, database: Database):
        """Initialize the service and seed the configured roster."""
        self.settings = settings
        self.db = database
        for name in settings.participants:
            self.db.add_participant(name)

    # ========================================================================
    # Roster
    # ========================================================================

    def add_participant(self, name: str) -> bool:
        """Add someone to the roster. Returns False if already present."""
        name = name.strip()
        if not name:
            raise ValueError("Participant name cannot be empty")
        added = self.db.add_participant(name)
        if added:
            logger.info(f"Added participant {name}")
        return added

    def participants(self) -> list[str]:
        """The roster in join order."""
        return self.db.get_participants()

    def _check_known(self, names: Iterable[str], roster: list[str]) -> None:
        for name in names:
            if name not in roster:
                raise UnknownParticipantError(name)

    # ========================================================================
    # Expenses
    # ========================================================================

    def record_expense(
        self,
        payer: str,
        amount: Decimal | int | float | str,
        currency: str | None = None,
        description: str = "",
        category: str = "other",
        note: str | None = None,
        excluded: list[str] | None = None,
        custom_splits: dict[str, Decimal] | None = None,
        is_shared: bool = True,
    ) -> Expense:
        """
        Split an expense and store it.

        Args:
            payer: Who paid (must be on the roster)
            amount: Total amount paid
            currency: Currency code, defaults to the configured default
            description: Free-form description
            category: Spending category
            note: Free-form text scanned for exclusion phrases
            excluded: Names explicitly left out of an equal split
            custom_splits: Explicit shares; switches to custom mode
            is_shared: False records a personal expense owed entirely by the
                payer

        Returns:
            The stored expense, with its id

        Raises:
            UnknownParticipantError: A name is not on the roster
            EmptyParticipantsError: Everyone was excluded
            ValidationError: Custom splits don't add up to the amount
        """
        roster = self.participants()
        self._check_known([payer], roster)

        excluded_names = list(excluded or [])
        self._check_known(excluded_names, roster)
        if note:
            for name in extract_exclusions(note, roster):
                if name not in excluded_names:
                    excluded_names.append(name)
        if custom_splits is not None:
            self._check_known(custom_splits.keys(), roster)

        split_roster = roster if is_shared else [payer]
        request = SplitRequest(
            total_amount=to_decimal(amount),
            currency=currency or self.settings.default_currency,
            payer=payer,
            participants=split_roster,
            excluded_participants=excluded_names if is_shared else [],
            custom_splits=custom_splits if is_shared else None,
        )
        result = split_expense(request)

        expense = Expense(
            payer=payer,
            amount=result.total_amount,
            currency=result.currency,
            splits=result.shares,
            participants=split_roster,
            description=description,
            category=category,
            split_mode="custom" if request.custom_splits is not None else "equal",
            is_shared=is_shared,
        )
        expense_id = self.db.save_expense(expense)
        expense = expense.model_copy(update={"id": expense_id})

        logger.info(
            f"Recorded expense {expense_id}: {payer} paid {expense.amount} "
            f"{expense.currency} split {len(expense.splits)} ways"
        )
        return expense

    def get_expense(self, expense_id: int) -> Expense:
        """Fetch a live (non-deleted) expense."""
        expense = self.db.get_expense(expense_id)
        if expense is None or expense.deleted:
            raise ExpenseNotFoundError(expense_id)
        return expense

    def correct_expense(
        self,
        expense_id: int,
        amount: Decimal | int | float | str | None = None,
        custom_splits: dict[str, Decimal] | None = None,
        description: str | None = None,
        category: str | None = None,
    ) -> Expense:
        """
        Correct an expense, recomputing its splits in the original mode.

        Equal splits are redone over the same active participants. Custom
        splits are re-validated against the (possibly new) amount, so changing
        the amount of a custom expense requires new ``custom_splits``.
        """
        original = self.get_expense(expense_id)
        new_amount = to_decimal(amount) if amount is not None else original.amount

        if custom_splits is not None:
            self._check_known(custom_splits.keys(), original.participants)
            split_mode = "custom"
            splits_input: dict[str, Decimal] | None = custom_splits
        elif original.split_mode == "custom":
            split_mode = "custom"
            splits_input = original.splits
        else:
            split_mode = "equal"
            splits_input = None

        request = SplitRequest(
            total_amount=new_amount,
            currency=original.currency,
            payer=original.payer,
            participants=original.participants,
            excluded_participants=[
                p for p in original.participants if p not in original.splits
            ],
            custom_splits=splits_input,
        )
        result = split_expense(request)

        # Rebuilt rather than model_copy'd so the splits invariant is re-checked
        corrected = Expense(
            **{
                **original.model_dump(),
                "amount": result.total_amount,
                "splits": result.shares,
                "split_mode": split_mode,
                "description": (
                    description if description is not None else original.description
                ),
                "category": category if category is not None else original.category,
            }
        )
        self.db.update_expense(corrected)

        logger.info(f"Corrected expense {expense_id}: amount {corrected.amount}")
        return corrected

    def delete_expense(self, expense_id: int) -> Expense:
        """Logically delete an expense so it no longer counts toward balances."""
        expense = self.db.get_expense(expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        if not self.db.mark_expense_deleted(expense_id):
            logger.warning(f"Expense {expense_id} was already deleted")
            raise ExpenseNotFoundError(expense_id)

        logger.info(f"Deleted expense {expense_id}")
        return expense.model_copy(update={"deleted": True})

    def expenses(self, include_deleted: bool = False) -> list[Expense]:
        """All recorded expenses, oldest first."""
        return self.db.get_expenses(include_deleted=include_deleted)

    # ========================================================================
    # Balances & settlements
    # ========================================================================

    def summaries(self) -> list[CurrencySummary]:
        """Balances and suggested settlements for every currency in use."""
        summaries = []
        for currency, bucket in group_by_currency(self.expenses()).items():
            balances = compute_balances(bucket)
            settlements = settle_balances(balances, currency)
            summaries.append(
                CurrencySummary(
                    currency=currency, balances=balances, settlements=settlements
                )
            )

        logger.info(f"Summarized {len(summaries)} currencies")
        return summaries

    def convert_summary(
        self, summary: CurrencySummary, to_currency: str
    ) -> CurrencySummary:
        """
        Re-express a summary in another currency for display only.

        The converted figures are rounded independently and may no longer
        sum exactly to zero; never feed them back into balance math.
        """
        to_currency = to_currency.upper()
        rates = self.settings.rate_table()

        balances = [
            Balance(
                person=b.person,
                net_balance=convert(b.net_balance, b.currency, to_currency, rates),
                currency=to_currency,
            )
            for b in summary.balances
        ]
        settlements = []
        for s in summary.settlements:
            amount = convert(s.amount, s.currency, to_currency, rates)
            if amount <= 0:
                # Too small to show in the target currency
                continue
            settlements.append(
                Settlement(
                    from_person=s.from_person,
                    to_person=s.to_person,
                    amount=amount,
                    currency=to_currency,
                )
            )
        return CurrencySummary(
            currency=to_currency, balances=balances, settlements=settlements
        )
