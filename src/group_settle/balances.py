"""Currency grouping and net balance aggregation."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from .exceptions import MixedCurrencyError
from .models import Balance, Expense
from .money import is_zero

logger = logging.getLogger(__name__)


def group_by_currency(expenses: Iterable[Expense]) -> dict[str, list[Expense]]:
    """
    Partition expenses into per-currency buckets.

    Balances are never fungible across currencies, so every downstream
    computation runs on one bucket at a time. Buckets keep the order in which
    each currency first appears. Deleted and personal expenses are dropped.

    Args:
        expenses: Expenses in any mix of currencies

    Returns:
        Mapping of currency code to the expenses in that currency
    """
    groups: dict[str, list[Expense]] = {}
    for expense in expenses:
        if not expense.counts_toward_balances:
            continue
        groups.setdefault(expense.currency, []).append(expense)
    return groups


def compute_balances(expenses: Iterable[Expense]) -> list[Balance]:
    """
    Fold same-currency expenses into a net balance per participant.

    Every participant is debited their share and the payer is credited what
    those shares cover. That equals the amount for equal splits; a custom
    split may be up to EPSILON off, and crediting the shares keeps each
    expense netting to exactly zero so the drift cannot pile up across
    expenses. Nets stay exact Decimal cents, so the result does not depend on
    expense order. Settled participants (|net| <= EPSILON) are omitted and the
    rest are returned sorted by name.

    Args:
        expenses: Expenses that all share one currency

    Returns:
        Non-zero balances, alphabetical by person

    Raises:
        MixedCurrencyError: If the expenses span more than one currency
    """
    totals: defaultdict[str, Decimal] = defaultdict(Decimal)
    currencies: list[str] = []

    for expense in expenses:
        if not expense.counts_toward_balances:
            continue
        if expense.currency not in currencies:
            currencies.append(expense.currency)
        for person, share in expense.splits.items():
            totals[person] -= share
            totals[expense.payer] += share

    if len(currencies) > 1:
        raise MixedCurrencyError(currencies)
    if not currencies:
        return []

    currency = currencies[0]
    balances = [
        Balance(person=person, net_balance=net, currency=currency)
        for person, net in sorted(totals.items())
        if not is_zero(net)
    ]

    logger.debug(
        f"Computed {len(balances)} non-zero {currency} balances "
        f"from {len(totals)} participants"
    )
    return balances


def compute_balances_by_currency(
    expenses: Iterable[Expense],
) -> dict[str, list[Balance]]:
    """Group expenses by currency and compute balances for each bucket."""
    return {
        currency: compute_balances(bucket)
        for currency, bucket in group_by_currency(expenses).items()
    }
