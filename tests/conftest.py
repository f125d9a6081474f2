"""Shared fixtures for group-settle tests."""

import random
from decimal import Decimal

import pytest

from group_settle.config import Settings
from group_settle.db import Database
from group_settle.models import Expense, SplitRequest
from group_settle.service import LedgerService
from group_settle.splitter import split_expense


def make_expense(
    payer: str,
    amount: str,
    splits: dict[str, str],
    currency: str = "CAD",
    **kwargs,
) -> Expense:
    """Create an Expense from string amounts."""
    return Expense(
        payer=payer,
        amount=Decimal(amount),
        currency=currency,
        splits={person: Decimal(share) for person, share in splits.items()},
        **kwargs,
    )


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a temporary database, isolated from the host env."""
    for var in (
        "GROUP_SETTLE_DEFAULT_CURRENCY",
        "GROUP_SETTLE_ANCHOR_CURRENCY",
        "GROUP_SETTLE_EXCHANGE_RATES",
        "GROUP_SETTLE_PARTICIPANTS",
        "GROUP_SETTLE_DATABASE_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return Settings(
        database_path=tmp_path / "ledger" / "test.db",
        participants=["Alice", "Bob", "Carol"],
    )


@pytest.fixture
def db(settings):
    """Create a temporary database."""
    database = Database(settings.database_path)
    yield database
    database.close()


@pytest.fixture
def service(settings, db):
    """Create a LedgerService with Alice, Bob and Carol on the roster."""
    return LedgerService(settings, db)


def random_expenses(
    seed: int, count: int = 25, currency: str = "CAD"
) -> list[Expense]:
    """Generate a plausible same-currency expense history of equal splits."""
    rng = random.Random(seed)
    people = ["Alice", "Bob", "Carol", "Dan", "Eve", "Frank"]
    expenses = []
    for _ in range(count):
        roster = rng.sample(people, rng.randint(1, len(people)))
        payer = rng.choice(people)
        result = split_expense(
            SplitRequest(
                total_amount=Decimal(rng.randint(1, 50_000)) / 100,
                currency=currency,
                payer=payer,
                participants=roster,
            )
        )
        expenses.append(
            Expense(
                payer=payer,
                amount=result.total_amount,
                currency=currency,
                splits=result.shares,
                participants=roster,
            )
        )
    return expenses


def random_custom_expenses(
    seed: int, count: int = 25, currency: str = "CAD"
) -> list[Expense]:
    """Generate custom-split expenses whose shares miss the total by up to a cent."""
    rng = random.Random(seed)
    people = ["Alice", "Bob", "Carol", "Dan", "Eve", "Frank"]
    expenses = []
    for _ in range(count):
        roster = rng.sample(people, rng.randint(1, len(people)))
        payer = rng.choice(people)
        cents = [rng.randint(2, 20_000) for _ in roster]
        drift = rng.choice([-1, 0, 1])
        shares = {person: Decimal(c) / 100 for person, c in zip(roster, cents)}
        result = split_expense(
            SplitRequest(
                total_amount=Decimal(sum(cents) + drift) / 100,
                currency=currency,
                payer=payer,
                participants=roster,
                custom_splits=shares,
            )
        )
        expenses.append(
            Expense(
                payer=payer,
                amount=result.total_amount,
                currency=currency,
                splits=result.shares,
                participants=roster,
                split_mode="custom",
            )
        )
    return expenses
