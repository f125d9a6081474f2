"""SQLite database operations for group-settle."""

import json
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from .models import Expense


class Database:
    """SQLite database manager."""

    def __init__(self, db_path: Path | str):
        """Initialize database connection."""
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()

        # Roster, in join order
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS participants (
                position INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                joined_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        # Expenses table (amounts stored as decimal strings)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                payer TEXT NOT NULL,
                amount TEXT NOT NULL,
                currency TEXT NOT NULL,
                splits TEXT NOT NULL,
                participants TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                category TEXT NOT NULL DEFAULT 'other',
                split_mode TEXT NOT NULL DEFAULT 'equal',
                is_shared INTEGER NOT NULL DEFAULT 1,
                deleted INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    # ========================================================================
    # Participant operations
    # ========================================================================

    def add_participant(self, name: str) -> bool:
        """Add a participant. Returns False if they were already present."""
        cursor = self.conn.cursor()
        cursor.execute(
            "INSERT OR IGNORE INTO participants (name, joined_at) VALUES (?, ?)",
            (name, datetime.now().isoformat()),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def get_participants(self) -> list[str]:
        """Get the roster in join order."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT name FROM participants ORDER BY position")
        return [row["name"] for row in cursor.fetchall()]

    # ========================================================================
    # Expense operations
    # ========================================================================

    def save_expense(self, expense: Expense) -> int:
        """Save a new expense and return its id."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO expenses (
                payer, amount, currency, splits, participants, description,
                category, split_mode, is_shared, deleted, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                expense.payer,
                str(expense.amount),
                expense.currency,
                _dump_splits(expense.splits),
                json.dumps(expense.participants),
                expense.description,
                expense.category,
                expense.split_mode,
                int(expense.is_shared),
                int(expense.deleted),
                expense.created_at.isoformat(),
            ),
        )
        self.conn.commit()
        row_id = cursor.lastrowid
        if row_id is None:
            raise RuntimeError("Failed to insert expense")
        return row_id

    def update_expense(self, expense: Expense) -> None:
        """Overwrite a stored expense with a corrected version."""
        if expense.id is None:
            raise ValueError("Cannot update an expense without an id")
        cursor = self.conn.cursor()
        cursor.execute(
            """
            UPDATE expenses SET
                payer = ?, amount = ?, currency = ?, splits = ?,
                participants = ?, description = ?, category = ?,
                split_mode = ?, is_shared = ?, deleted = ?
            WHERE id = ?
            """,
            (
                expense.payer,
                str(expense.amount),
                expense.currency,
                _dump_splits(expense.splits),
                json.dumps(expense.participants),
                expense.description,
                expense.category,
                expense.split_mode,
                int(expense.is_shared),
                int(expense.deleted),
                expense.id,
            ),
        )
        self.conn.commit()

    def mark_expense_deleted(self, expense_id: int) -> bool:
        """Logically delete an expense. Returns False if nothing changed."""
        cursor = self.conn.cursor()
        cursor.execute(
            "UPDATE expenses SET deleted = 1 WHERE id = ? AND deleted = 0",
            (expense_id,),
        )
        self.conn.commit()
        return cursor.rowcount > 0

    def get_expense(self, expense_id: int) -> Expense | None:
        """Get an expense by id, deleted or not."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
        row = cursor.fetchone()
        return _row_to_expense(row) if row else None

    def get_expenses(self, include_deleted: bool = False) -> list[Expense]:
        """Get expenses in the order they were recorded."""
        cursor = self.conn.cursor()
        if include_deleted:
            cursor.execute("SELECT * FROM expenses ORDER BY id")
        else:
            cursor.execute("SELECT * FROM expenses WHERE deleted = 0 ORDER BY id")
        return [_row_to_expense(row) for row in cursor.fetchall()]


def _dump_splits(splits: dict[str, Decimal]) -> str:
    return json.dumps({person: str(share) for person, share in splits.items()})


def _row_to_expense(row: sqlite3.Row) -> Expense:
    return Expense(
        id=row["id"],
        payer=row["payer"],
        amount=Decimal(row["amount"]),
        currency=row["currency"],
        splits={
            person: Decimal(share)
            for person, share in json.loads(row["splits"]).items()
        },
        participants=json.loads(row["participants"]),
        description=row["description"],
        category=row["category"],
        split_mode=row["split_mode"],
        is_shared=bool(row["is_shared"]),
        deleted=bool(row["deleted"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
