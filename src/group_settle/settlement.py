"""Settlement planning: greedy largest-creditor / largest-debtor matching.

The minimum number of payments needed to clear a set of debts is NP-hard to
find in general. This module implements the greedy approximation most
expense-splitting tools use: repeatedly pair the largest creditor with the
largest debtor and transfer as much as possible. Every pairing fully settles
at least one side, so n non-zero balances produce at most n - 1 payments.
The result is often but not always the minimum.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from .balances import compute_balances, group_by_currency
from .exceptions import InvariantError
from .models import Balance, Expense, Settlement
from .money import EPSILON, is_zero, round2

logger = logging.getLogger(__name__)


def settle_balances(balances: Iterable[Balance], currency: str) -> list[Settlement]:
    """
    Plan payments that bring every balance to zero.

    Args:
        balances: Net balances for one currency
        currency: Currency of the balances (stamped onto each settlement)

    Returns:
        Settlements in the order they were matched

    Raises:
        InvariantError: If creditors or debtors remain once the other side is
            exhausted, meaning the balances did not sum to zero
    """
    creditors: list[list] = []
    debtors: list[list] = []
    for balance in balances:
        if balance.net_balance > EPSILON:
            creditors.append([balance.person, balance.net_balance])
        elif balance.net_balance < -EPSILON:
            debtors.append([balance.person, -balance.net_balance])

    # Stable sort: ties keep the incoming (alphabetical) order
    creditors.sort(key=lambda entry: entry[1], reverse=True)
    debtors.sort(key=lambda entry: entry[1], reverse=True)

    settlements: list[Settlement] = []
    c_idx = 0
    d_idx = 0
    while c_idx < len(creditors) and d_idx < len(debtors):
        creditor = creditors[c_idx]
        debtor = debtors[d_idx]

        transfer: Decimal = min(creditor[1], debtor[1])
        if transfer > EPSILON:
            settlements.append(
                Settlement(
                    from_person=debtor[0],
                    to_person=creditor[0],
                    amount=round2(transfer),
                    currency=currency,
                )
            )
            logger.debug(f"{debtor[0]} -> {creditor[0]}: {round2(transfer)} {currency}")

        creditor[1] -= transfer
        debtor[1] -= transfer

        if is_zero(creditor[1]):
            c_idx += 1
        if is_zero(debtor[1]):
            d_idx += 1

    leftover_creditors = {
        person: amount for person, amount in creditors[c_idx:] if not is_zero(amount)
    }
    leftover_debtors = {
        person: amount for person, amount in debtors[d_idx:] if not is_zero(amount)
    }
    if leftover_creditors or leftover_debtors:
        raise InvariantError(leftover_creditors, leftover_debtors, currency)

    logger.info(f"Planned {len(settlements)} {currency} settlements")
    return settlements


def plan_settlements(expenses: Iterable[Expense]) -> list[Settlement]:
    """
    Plan settlements for a mixed-currency expense history.

    Each currency is balanced and settled on its own; results are concatenated
    in the order currencies first appear.
    """
    settlements: list[Settlement] = []
    for currency, bucket in group_by_currency(expenses).items():
        settlements.extend(settle_balances(compute_balances(bucket), currency))
    return settlements


def format_settlements(settlements: list[Settlement]) -> str:
    """
    Generate a human-readable settlement summary.

    Example:
        To settle up:
        Carol → Alice: $40.00 CAD
    """
    if not settlements:
        return "All settled up! No payments needed."

    lines = [
        f"{s.from_person} → {s.to_person}: ${s.amount:.2f} {s.currency}"
        for s in settlements
    ]
    return "To settle up:\n" + "\n".join(lines)


def format_balances(balances: list[Balance]) -> str:
    """One line per balance: who is owed and who owes."""
    if not balances:
        return "All balanced! No one owes anything."

    lines = []
    for balance in balances:
        status = "is owed" if balance.net_balance > 0 else "owes"
        lines.append(
            f"{balance.person} {status} ${abs(balance.net_balance):.2f} "
            f"{balance.currency}"
        )
    return "\n".join(lines)
