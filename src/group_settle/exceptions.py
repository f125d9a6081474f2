"""Custom exceptions for group-settle."""

from decimal import Decimal


class GroupSettleError(Exception):
    """Base exception for all group-settle errors."""

    pass


class ConfigurationError(GroupSettleError):
    """Raised when configuration is invalid or missing."""

    pass


class ValidationError(GroupSettleError):
    """Raised when custom split amounts don't add up to the expense total."""

    def __init__(self, expected_total: Decimal, supplied_total: Decimal):
        self.expected_total = expected_total
        self.supplied_total = supplied_total
        self.difference = supplied_total - expected_total
        super().__init__(
            f"Custom splits ({supplied_total}) don't match total ({expected_total})"
        )


class EmptyParticipantsError(GroupSettleError):
    """Raised when an equal split has nobody left to split among."""

    def __init__(self, participants: list[str], excluded: list[str]):
        self.participants = list(participants)
        self.excluded = list(excluded)
        super().__init__(
            f"No participants to split among "
            f"(roster: {self.participants}, excluded: {self.excluded})"
        )


class InvariantError(GroupSettleError):
    """Raised when settlement planning leaves unmatched creditors or debtors.

    This means the balances fed to the planner did not sum to zero, which is a
    bug upstream rather than a user error.
    """

    def __init__(
        self,
        leftover_creditors: dict[str, Decimal],
        leftover_debtors: dict[str, Decimal],
        currency: str,
    ):
        self.leftover_creditors = leftover_creditors
        self.leftover_debtors = leftover_debtors
        self.currency = currency
        super().__init__(
            f"Unbalanced {currency} ledger: creditors left {leftover_creditors}, "
            f"debtors left {leftover_debtors}"
        )


class MixedCurrencyError(GroupSettleError):
    """Raised when balances are requested over more than one currency."""

    def __init__(self, currencies: list[str]):
        self.currencies = currencies
        super().__init__(
            f"Cannot aggregate expenses across currencies: {', '.join(currencies)}"
        )


class UnknownParticipantError(GroupSettleError):
    """Raised when a name is not on the ledger's roster."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is not a participant in this ledger")


class ExpenseNotFoundError(GroupSettleError):
    """Raised when an expense id does not refer to a live expense."""

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__(f"Expense {expense_id} not found")
