"""Split calculator: turns an expense total into per-participant shares."""

import logging
from decimal import Decimal

from .exceptions import (
    EmptyParticipantsError,
    UnknownParticipantError,
    ValidationError,
)
from .models import SplitRequest, SplitResult
from .money import EPSILON, round2

logger = logging.getLogger(__name__)


def split_expense(request: SplitRequest) -> SplitResult:
    """
    Split an expense among participants.

    Equal mode gives each of the first n-1 active participants round2(total / n)
    and the last one whatever remains, so shares always add up to the total.
    Which participant absorbs the leftover cent depends on roster order:
    100 split three ways is 33.33, 33.33, 33.34.

    Custom mode uses the caller's amounts as-is once they are checked against
    the total and every named person is on the roster.

    Args:
        request: The split request

    Returns:
        Shares keyed by participant

    Raises:
        EmptyParticipantsError: Equal split with every participant excluded
        ValidationError: Custom splits don't sum to the total within EPSILON
        UnknownParticipantError: A custom split names someone off the roster
    """
    if request.custom_splits is not None:
        shares = _custom_shares(
            request.total_amount, request.custom_splits, request.participants
        )
    else:
        shares = _equal_shares(
            request.total_amount,
            request.participants,
            request.excluded_participants,
        )

    return SplitResult(
        shares=shares,
        payer=request.payer,
        total_amount=request.total_amount,
        currency=request.currency,
    )


def active_participants(participants: list[str], excluded: list[str]) -> list[str]:
    """Roster minus excluded names, in roster order, without duplicates."""
    excluded_set = set(excluded)
    return [
        person for person in dict.fromkeys(participants) if person not in excluded_set
    ]


def _equal_shares(
    total: Decimal, participants: list[str], excluded: list[str]
) -> dict[str, Decimal]:
    active = active_participants(participants, excluded)
    if not active:
        raise EmptyParticipantsError(participants, excluded)

    per_person = round2(total / len(active))
    shares: dict[str, Decimal] = {}
    assigned = Decimal("0")
    for person in active[:-1]:
        shares[person] = per_person
        assigned += per_person
    shares[active[-1]] = round2(total - assigned)

    logger.debug(
        f"Equal split of {total} among {len(active)}: "
        f"{per_person} each, {shares[active[-1]]} to {active[-1]}"
    )
    return shares


def _custom_shares(
    total: Decimal, custom_splits: dict[str, Decimal], participants: list[str]
) -> dict[str, Decimal]:
    for person in custom_splits:
        if person not in participants:
            raise UnknownParticipantError(person)

    supplied = sum(custom_splits.values(), Decimal("0"))
    if abs(supplied - total) > EPSILON:
        raise ValidationError(expected_total=total, supplied_total=supplied)
    return dict(custom_splits)
