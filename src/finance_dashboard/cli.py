"""Command-line interface for the finance dashboard."""

import argparse
import os
import sys
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from finance_dashboard import __version__
from finance_dashboard.config import Config, ConfigError, load_config
from finance_dashboard.models.unit import BusinessUnit
from finance_dashboard.parsers.base import ParseError
from finance_dashboard.service import FinanceReport, FinanceService
from finance_dashboard.sources.base import SourceError
from finance_dashboard.sources.workbook_source import WorkbookSource
from finance_dashboard.utils.cells import MoneyPolicy
from finance_dashboard.utils.decimal_utils import ZERO, format_money
from finance_dashboard.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

UNIT_CHOICES = ["all"] + [u.value for u in BusinessUnit]


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="finance-dashboard",
        description=(
            "Build daily revenue, expense and profit per business unit "
            "from the revenue and expense workbooks"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --revenue revenue.xlsx --expenses expenses.xlsx
  %(prog)s --revenue revenue.xlsx --expenses expenses.xlsx --unit hotel -o hotel.json
  %(prog)s --from 2025-01-01 --to 2025-01-31   (workbooks from REVENUE_WORKBOOK/EXPENSE_WORKBOOK)
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Sources
    parser.add_argument(
        "--revenue",
        type=Path,
        default=None,
        help="Revenue workbook (default: $REVENUE_WORKBOOK)",
    )
    parser.add_argument(
        "--expenses",
        type=Path,
        default=None,
        help="Expense workbook with cash and account sheets (default: $EXPENSE_WORKBOOK)",
    )
    parser.add_argument(
        "--breakfast",
        type=Path,
        default=None,
        help="Breakfast ledger workbook (default: $BREAKFAST_WORKBOOK)",
    )

    # Configuration
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )
    parser.add_argument(
        "--money-policy",
        choices=[p.value for p in MoneyPolicy],
        default=None,
        help="Override treatment of non-numeric money cells",
    )

    # Filters
    parser.add_argument(
        "--unit",
        choices=UNIT_CHOICES,
        default="all",
        help="Business unit to report (default: all)",
    )
    parser.add_argument(
        "--from",
        dest="start_date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="Start date for filtering (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--to",
        dest="end_date",
        type=lambda s: date.fromisoformat(s),
        default=None,
        help="End date for filtering (YYYY-MM-DD)",
    )

    # Output
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output JSON path (default: reports/report_YYYYMMDD_HHMMSS.json)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the report but do not write output",
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration only",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def generate_default_output_path() -> Path:
    """Generate default output path with timestamp."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(f"reports/report_{timestamp}.json")


def resolve_source(path: Path | None, env_var: str) -> WorkbookSource | None:
    """Pick a workbook from the CLI argument or an environment variable.

    Args:
        path: Path given on the command line, or None.
        env_var: Environment variable consulted when no path was given.

    Returns:
        WorkbookSource, or None if neither is set.
    """
    if path is None:
        env_value = os.environ.get(env_var)
        if not env_value:
            return None
        path = Path(env_value)
    return WorkbookSource(path)


def validate_config(args: argparse.Namespace) -> int:
    """Validate the settings file and print the effective layouts.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration...[/bold]\n")

    settings_path = args.config or (args.config_dir / "settings.yaml")
    if settings_path.exists():
        console.print(f"[green]✓[/green] Settings: {settings_path}")
    else:
        console.print(f"[yellow]Settings file not found: {settings_path} (defaults apply)[/yellow]")

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"\n[red]Error: {e}[/red]")
        return 1

    console.print("\n[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - money policy: {config.pipeline.money_policy.value}")
    console.print(f"  - year repair: {'on' if config.pipeline.repair_years else 'off'}")
    for sheet_type, layout in config.layouts.items():
        units = ", ".join(u.value for u in layout.columns)
        console.print(f"  - {sheet_type.value} sheet '{config.sheets.expense_sheet(sheet_type)}': {units}")
    return 0


def display_summary(report: FinanceReport) -> None:
    """Print per-unit totals and parse diagnostics.

    Args:
        report: The built report.
    """
    totals: dict[BusinessUnit, list[Decimal]] = {}
    for row in report.data:
        unit_totals = totals.setdefault(row.unit, [ZERO, ZERO, ZERO])
        unit_totals[0] += row.revenue.total
        unit_totals[1] += row.expense.total
        unit_totals[2] += row.profit

    table = Table(title="Totals by unit")
    table.add_column("Unit")
    table.add_column("Revenue", justify="right")
    table.add_column("Expense", justify="right")
    table.add_column("Profit", justify="right")
    for unit in BusinessUnit:
        if unit not in totals:
            continue
        revenue, expense, profit = totals[unit]
        profit_style = "red" if profit < 0 else "green"
        table.add_row(
            unit.value,
            format_money(revenue),
            format_money(expense),
            f"[{profit_style}]{format_money(profit)}[/{profit_style}]",
        )
    console.print(table)

    if report.data:
        dates = sorted({row.date for row in report.data})
        console.print(f"  Period: {dates[0]} to {dates[-1]}")
    console.print(f"  Rows: {len(report.data)}")
    if report.breakfast_info is not None:
        console.print(
            f"  Breakfasts: {report.breakfast_info.count} "
            f"({format_money(report.breakfast_info.amount)})"
        )

    dropped = [s for s in report.stats if s.dropped]
    if dropped:
        console.print(f"\n[yellow]Dropped malformed data ({len(dropped)} sources):[/yellow]")
        for stats in dropped:
            console.print(f"  - {stats.summary()}")


def main() -> int:
    """Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args()

    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, console_output=args.verbose > 0)

    if args.validate_only:
        return validate_config(args)

    try:
        config: Config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("Run with --validate-only to check configuration.")
        return 1

    # Re-apply logging with the configured file and level
    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    if args.money_policy:
        config.pipeline.money_policy = MoneyPolicy(args.money_policy)

    revenue_source = resolve_source(args.revenue, "REVENUE_WORKBOOK")
    expense_source = resolve_source(args.expenses, "EXPENSE_WORKBOOK")
    breakfast_source = resolve_source(args.breakfast, "BREAKFAST_WORKBOOK")
    if revenue_source is None and expense_source is None:
        console.print("[red]Error: --revenue or --expenses is required[/red]")
        parser.print_usage()
        return 1

    start_date = args.start_date.isoformat() if args.start_date else None
    end_date = args.end_date.isoformat() if args.end_date else None

    console.print(f"[bold]Finance Dashboard v{__version__}[/bold]\n")
    if start_date or end_date:
        console.print(f"Date range: {start_date or 'start'} to {end_date or 'present'}")

    service = FinanceService(config, revenue_source, expense_source, breakfast_source)
    try:
        with console.status("[bold green]Building report..."):
            report = service.get_report(
                unit=args.unit,
                start_date=start_date,
                end_date=end_date,
                include_breakfast=breakfast_source is not None,
            )
    except (SourceError, ParseError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        logger.error(f"Report failed: {e}")
        return 1

    if not args.dry_run:
        from finance_dashboard.output import JSONExporter

        output_path = args.output or generate_default_output_path()
        JSONExporter().export(output_path, report)
        console.print(f"[green]Report written to {output_path}[/green]\n")
    else:
        console.print("[yellow]Dry run - no output generated[/yellow]\n")

    display_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
