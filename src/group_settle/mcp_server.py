"""MCP server for group-settle: exposes the expense ledger as assistant tools."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .currency import convert
from .db import Database
from .exceptions import GroupSettleError
from .exclusions import extract_exclusions
from .service import LedgerService
from .settlement import format_balances, format_settlements

logger = logging.getLogger(__name__)

mcp_app = FastMCP("group-settle")

# ---------------------------------------------------------------------------
# Session state: one MCP server process per conversation
# ---------------------------------------------------------------------------

WORKFLOW_INSTRUCTIONS = """\
You are keeping the books for a group sharing expenses. Follow this workflow:

1. ROSTER: Call list_participants to learn who is in the group.

2. RECORD: For each expense the user mentions, call record_expense with the
   payer and amount. Put any wording about who was left out ("Bob didn't
   join", "without Carol") in the note argument; call parse_exclusions first
   if you want to check who the note would exclude.

3. BALANCES: Call show_balances to see who is owed and who owes, per currency.

4. SETTLE: Call suggest_settlements for the payments that clear all debts.
   These are suggestions from a greedy heuristic, not guaranteed minimal.

Never add amounts across currencies. Use convert_amount only to help the user
picture an amount in another currency.\
"""


@dataclass
class SessionState:
    """Holds state between MCP tool calls within a single conversation."""

    service: LedgerService | None = None
    db: Database | None = None


_state = SessionState()


def _ensure_service() -> LedgerService:
    """Lazily initialize the LedgerService (loads .env config)."""
    if _state.service is None:
        settings = load_settings()
        _state.db = Database(settings.database_path)
        _state.service = LedgerService(settings, _state.db)
    return _state.service


# ---------------------------------------------------------------------------
# MCP Tools
# ---------------------------------------------------------------------------


@mcp_app.tool()
def list_participants() -> str:
    """List everyone in the group."""
    try:
        service = _ensure_service()
        participants = service.participants()
        if not participants:
            return "No participants yet."
        return "Participants: " + ", ".join(participants)
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to list participants: {e}"


@mcp_app.tool()
def record_expense(
    payer: str,
    amount: str,
    currency: str | None = None,
    description: str = "",
    note: str | None = None,
) -> str:
    """Record an expense split equally among the group.

    Args:
        payer: Who paid (must be a participant).
        amount: Total paid, as a decimal string such as "42.50".
        currency: Currency code; defaults to the configured currency.
        description: What the expense was for.
        note: Free-form text naming who to leave out, e.g. "Bob didn't join".
    """
    try:
        service = _ensure_service()
        expense = service.record_expense(
            payer=payer,
            amount=Decimal(amount),
            currency=currency,
            description=description,
            note=note,
        )
        shares = ", ".join(
            f"{person}: {share:.2f}" for person, share in expense.splits.items()
        )
        return (
            f"Recorded expense {expense.id}: {payer} paid {expense.amount:.2f} "
            f"{expense.currency}. Shares: {shares}"
        )
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to record expense: {e}"


@mcp_app.tool()
def show_balances() -> str:
    """Show each participant's net balance, per currency."""
    try:
        service = _ensure_service()
        summaries = [s for s in service.summaries() if not s.is_settled]
        if not summaries:
            return "All balanced! No one owes anything."

        lines = []
        for summary in summaries:
            lines.append(f"{summary.currency}:")
            lines.append(format_balances(summary.balances))
            lines.append("")
        return "\n".join(lines).rstrip()
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to compute balances: {e}"


@mcp_app.tool()
def suggest_settlements() -> str:
    """Suggest payments that settle all debts, per currency."""
    try:
        service = _ensure_service()
        summaries = [s for s in service.summaries() if s.settlements]
        if not summaries:
            return "All settled! No payments needed."

        lines = []
        for summary in summaries:
            lines.append(f"{summary.currency}:")
            lines.append(format_settlements(summary.settlements))
            lines.append("")
        return "\n".join(lines).rstrip()
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to plan settlements: {e}"


@mcp_app.tool()
def parse_exclusions(text: str) -> str:
    """Show which participants a free-form note would leave out of a split.

    Args:
        text: The note, e.g. "dinner without Carol".
    """
    try:
        service = _ensure_service()
        excluded = extract_exclusions(text, service.participants())
        if not excluded:
            return "No one would be excluded."
        return "Would exclude: " + ", ".join(excluded)
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to parse note: {e}"


@mcp_app.tool()
def convert_amount(amount: str, from_currency: str, to_currency: str) -> str:
    """Convert an amount between currencies using the static rate table.

    Args:
        amount: Decimal string such as "100".
        from_currency: Source currency code.
        to_currency: Target currency code.
    """
    try:
        service = _ensure_service()
        result = convert(
            Decimal(amount), from_currency, to_currency, service.settings.rate_table()
        )
        return (
            f"{amount} {from_currency.upper()} ≈ {result:.2f} {to_currency.upper()}"
        )
    except GroupSettleError as e:
        return f"Error: {e}"
    except Exception as e:
        return f"Failed to convert: {e}"


# ---------------------------------------------------------------------------
# MCP Prompt
# ---------------------------------------------------------------------------


@mcp_app.prompt()
def settle_workflow() -> str:
    """Orchestration instructions for tracking and settling group expenses."""
    return WORKFLOW_INSTRUCTIONS


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server():
    """Start the MCP server (stdio transport)."""
    mcp_app.run(transport="stdio")
