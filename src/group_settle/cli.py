"""CLI for group-settle using Typer."""

import logging
import sys
from decimal import Decimal, InvalidOperation

import typer
from rich.console import Console
from rich.table import Table

from .config import load_settings
from .currency import convert
from .db import Database
from .exclusions import extract_exclusions
from .mcp_server import run_server
from .models import CurrencySummary, Expense, SplitRequest
from .service import LedgerService
from .settlement import format_settlements
from .splitter import split_expense
from .ui import prompt_split_note

app = typer.Typer(
    name="group-settle",
    help="Track shared group expenses and work out who owes whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _open_service() -> tuple[LedgerService, Database]:
    settings = load_settings()
    db = Database(settings.database_path)
    return LedgerService(settings, db), db


def _fail(e: Exception, verbose: bool):
    console.print(f"\n[bold red]Error:[/bold red] {e}")
    if verbose:
        raise e
    sys.exit(1)


def parse_amount(value: str) -> Decimal:
    """Parse a CLI amount, rejecting anything that isn't a plain number."""
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"'{value}' is not a valid amount") from None


def parse_custom_splits(values: list[str] | None) -> dict[str, Decimal] | None:
    """
    Parse repeated ``NAME=AMOUNT`` options into a custom split mapping.

    Returns:
        The mapping, or None when no custom splits were given
    """
    if not values:
        return None

    splits: dict[str, Decimal] = {}
    for value in values:
        name, sep, amount = value.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"Expected NAME=AMOUNT, got '{value}'")
        splits[name.strip()] = parse_amount(amount.strip())
    return splits


def format_money(amount: Decimal, use_color: bool = True) -> str:
    """
    Format money in accounting style with alignment.

    Negative amounts use parentheses: ($85.02)
    Positive amounts have spaces:      $85.02
    The spaces ensure decimal points align in tables.
    """
    abs_amount = abs(amount)
    if amount < 0:
        if use_color:
            formatted = f"($[red]{abs_amount:,.2f}[/red])"
        else:
            formatted = f"(${abs_amount:,.2f})"
    else:
        if use_color:
            formatted = f" [green]${abs_amount:,.2f}[/green] "
        else:
            formatted = f" ${abs_amount:,.2f} "
    return formatted


# ============================================================================
# Roster
# ============================================================================


@app.command()
def join(
    names: list[str] = typer.Argument(..., help="Names to add to the roster"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Add participants to the group."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        for name in names:
            if service.add_participant(name):
                console.print(f"[green]✓ Added {name}[/green]")
            else:
                console.print(f"[yellow]{name} is already in the group[/yellow]")
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def roster(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """List the participants in the group."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        participants = service.participants()
        if not participants:
            console.print("[yellow]No participants yet. Add some with 'join'.[/yellow]")
            return
        for name in participants:
            console.print(f"  • {name}")
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


# ============================================================================
# Expenses
# ============================================================================


@app.command()
def add(
    amount: str = typer.Argument(..., help="Total amount paid"),
    payer: str = typer.Option(..., "--payer", "-p", help="Who paid"),
    currency: str | None = typer.Option(
        None, "--currency", "-c", help="Currency code (defaults to settings)"
    ),
    description: str = typer.Option("", "--description", "-d", help="What it was"),
    category: str = typer.Option("other", "--category", help="Spending category"),
    exclude: list[str] | None = typer.Option(
        None, "--exclude", "-x", help="Leave a participant out (repeatable)"
    ),
    note: str | None = typer.Option(
        None, "--note", "-n", help='Free-form note, e.g. "Bob didn\'t join"'
    ),
    split: list[str] | None = typer.Option(
        None, "--split", "-s", help="Custom share as NAME=AMOUNT (repeatable)"
    ),
    personal: bool = typer.Option(
        False, "--personal", help="Personal expense, not shared with the group"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Prompt for a split note with completion"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Record an expense.

    Splits equally among everyone on the roster unless participants are
    excluded (--exclude, --note, --interactive) or custom shares are given
    with --split.
    """
    setup_logging(verbose)

    try:
        service, db = _open_service()
        excluded = list(exclude or [])
        if interactive and not split and not personal:
            excluded += prompt_split_note(service.participants())

        expense = service.record_expense(
            payer=payer,
            amount=parse_amount(amount),
            currency=currency,
            description=description,
            category=category,
            note=note,
            excluded=excluded,
            custom_splits=parse_custom_splits(split),
            is_shared=not personal,
        )

        display_expense(expense)
        console.print("\n[bold green]✓ Expense recorded![/bold green]")
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def correct(
    expense_id: int = typer.Argument(..., help="Expense id (see 'history')"),
    amount: str | None = typer.Option(None, "--amount", "-a", help="New amount"),
    split: list[str] | None = typer.Option(
        None, "--split", "-s", help="New custom share as NAME=AMOUNT (repeatable)"
    ),
    description: str | None = typer.Option(None, "--description", "-d"),
    category: str | None = typer.Option(None, "--category"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Correct an expense; its splits are recomputed."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        expense = service.correct_expense(
            expense_id,
            amount=parse_amount(amount) if amount is not None else None,
            custom_splits=parse_custom_splits(split),
            description=description,
            category=category,
        )
        display_expense(expense)
        console.print("\n[bold green]✓ Expense corrected![/bold green]")
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def delete(
    expense_id: int = typer.Argument(..., help="Expense id (see 'history')"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Delete an expense (it stops counting toward balances)."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        expense = service.delete_expense(expense_id)
        console.print(
            f"[green]✓ Deleted expense {expense_id} "
            f"({expense.description or 'no description'})[/green]"
        )
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command()
def history(
    show_all: bool = typer.Option(
        False, "--all", help="Include deleted expenses"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show recorded expenses."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        expenses = service.expenses(include_deleted=show_all)
        if not expenses:
            console.print("[yellow]No expenses recorded.[/yellow]")
            return

        table = Table(title="Expenses", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim", width=6)
        table.add_column("Date", width=10)
        table.add_column("Description", style="cyan", width=30)
        table.add_column("Payer", width=12)
        table.add_column("Amount", justify="right", width=14)
        table.add_column("Split", style="yellow", no_wrap=False)

        for exp in expenses:
            desc = exp.description or "—"
            if exp.deleted:
                desc = f"[strike]{desc}[/strike]"
            elif not exp.is_shared:
                desc = f"👤 {desc}"
            table.add_row(
                str(exp.id),
                exp.created_at.date().isoformat(),
                desc[:30] + "..." if len(desc) > 30 else desc,
                exp.payer,
                f"{format_money(exp.amount)} {exp.currency}",
                ", ".join(exp.splits),
            )

        console.print(table)
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


def display_expense(expense: Expense):
    """Display a single expense and its shares."""
    console.print(f"\n[bold]Expense {expense.id}:[/bold] {expense.description}")
    console.print(f"  Paid by: {expense.payer}")
    console.print(f"  Total: {format_money(expense.amount)} {expense.currency}")
    console.print(f"  Split: {expense.split_mode}")
    display_shares(expense.splits, expense.currency)


def display_shares(shares: dict[str, Decimal], currency: str):
    """Display per-participant shares in a table."""
    table = Table(title="Shares", show_header=True, header_style="bold magenta")
    table.add_column("Participant", style="cyan")
    table.add_column(f"Owes ({currency})", justify="right", width=14)
    for person, share in shares.items():
        table.add_row(person, format_money(share))
    console.print(table)


# ============================================================================
# Balances & settlements
# ============================================================================


@app.command()
def balances(
    display_currency: str | None = typer.Option(
        None, "--in", help="Also show amounts converted to this currency"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show each participant's net balance, per currency."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        summaries = [s for s in service.summaries() if not s.is_settled]
        if not summaries:
            console.print("[green]📊 All balanced! No one owes anything.[/green]")
            return

        for summary in summaries:
            converted = (
                service.convert_summary(summary, display_currency)
                if display_currency
                else None
            )
            display_balances(summary, converted)
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


def display_balances(summary: CurrencySummary, converted: CurrencySummary | None):
    """Display one currency's balances."""
    table = Table(
        title=f"{summary.currency} Balances",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Participant", style="cyan")
    table.add_column("Status")
    table.add_column(f"Net ({summary.currency})", justify="right", width=14)
    if converted:
        table.add_column(f"≈ {converted.currency}", justify="right", width=14)

    for idx, balance in enumerate(summary.balances):
        status = "💚 is owed" if balance.net_balance > 0 else "🔴 owes"
        row = [balance.person, status, format_money(balance.net_balance)]
        if converted:
            row.append(format_money(converted.balances[idx].net_balance))
        table.add_row(*row)

    console.print(table)


@app.command()
def settle(
    display_currency: str | None = typer.Option(
        None, "--in", help="Show payments converted to this currency"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Suggest payments that settle everyone up, per currency."""
    setup_logging(verbose)

    try:
        service, db = _open_service()
        summaries = [s for s in service.summaries() if s.settlements]
        if not summaries:
            console.print("[green]💸 All settled! No payments needed.[/green]")
            return

        for summary in summaries:
            console.print(f"\n[bold]{summary.currency}:[/bold]")
            console.print(format_settlements(summary.settlements))
            if display_currency:
                converted = service.convert_summary(summary, display_currency)
                console.print(
                    f"[dim]{format_settlements(converted.settlements)}[/dim]"
                )
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


# ============================================================================
# Stateless helpers
# ============================================================================


@app.command(name="split")
def split_preview(
    amount: str = typer.Argument(..., help="Total amount"),
    participant: list[str] = typer.Option(
        ..., "--participant", "-P", help="Participant (repeatable, in order)"
    ),
    payer: str | None = typer.Option(None, "--payer", "-p", help="Who paid"),
    currency: str = typer.Option("CAD", "--currency", "-c", help="Currency code"),
    exclude: list[str] | None = typer.Option(None, "--exclude", "-x"),
    note: str | None = typer.Option(None, "--note", "-n", help="Free-form note"),
    split: list[str] | None = typer.Option(
        None, "--split", "-s", help="Custom share as NAME=AMOUNT (repeatable)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Preview how an amount would be split, without recording anything."""
    setup_logging(verbose)

    try:
        excluded = list(exclude or [])
        if note:
            excluded += extract_exclusions(note, participant)
        result = split_expense(
            SplitRequest(
                total_amount=parse_amount(amount),
                currency=currency,
                payer=payer or participant[0],
                participants=participant,
                excluded_participants=excluded,
                custom_splits=parse_custom_splits(split),
            )
        )
        display_shares(result.shares, result.currency)
    except Exception as e:
        _fail(e, verbose)


@app.command()
def exclusions(
    text: str = typer.Argument(..., help="Free-form text to scan"),
    participant: list[str] | None = typer.Option(
        None, "--participant", "-P", help="Known name (defaults to the roster)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show which participants a note would leave out of a split."""
    setup_logging(verbose)

    try:
        if participant:
            names = participant
        else:
            service, db = _open_service()
            names = service.participants()

        excluded = extract_exclusions(text, names)
        if excluded:
            console.print(f"Excluded: [bold]{', '.join(excluded)}[/bold]")
        else:
            console.print("[dim]No one excluded[/dim]")
    except Exception as e:
        _fail(e, verbose)
    finally:
        if "db" in locals():
            db.close()


@app.command(name="convert")
def convert_amount(
    amount: str = typer.Argument(..., help="Amount to convert"),
    from_currency: str = typer.Argument(..., help="Source currency"),
    to_currency: str = typer.Argument(..., help="Target currency"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Convert an amount using the configured (static) rate table."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        result = convert(
            parse_amount(amount), from_currency, to_currency, settings.rate_table()
        )
        console.print(
            f"{amount} {from_currency.upper()} ≈ {result:,.2f} {to_currency.upper()}"
        )
    except Exception as e:
        _fail(e, verbose)


@app.command()
def mcp():
    """Start the MCP server for assistant integration."""
    run_server()


if __name__ == "__main__":
    app()
