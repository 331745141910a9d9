"""Command-line entry point."""
import sys
import argparse
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional

from playspend.analysis import BreakdownPath, Granularity
from playspend.analysis.listing import TABLE_COLUMNS
from playspend.analysis.totals import missing_rates
from playspend.config.settings import get_settings, use_settings
from playspend.currency.formatter import format_currency
from playspend.drive import DriveImporter, extract_purchase_history
from playspend.session import AnalysisSnapshot
from playspend.utils.exceptions import PlaySpendError
from playspend.utils.logger import get_logger, set_console_level

logger = get_logger()

COLUMN_WIDTHS = {"Date": 12, "App": 24, "Title": 40, "Type": 18, "Amount": 14}


def load_snapshot(args: argparse.Namespace) -> AnalysisSnapshot:
    """Read the export named on the command line and apply rate/currency options."""
    source = Path(args.source)
    text = extract_purchase_history(source.name, source.read_bytes())

    snapshot = AnalysisSnapshot().with_upload(text, source_name=source.name)
    if snapshot.error:
        raise PlaySpendError(snapshot.error)

    for from_currency, to_currency, value in args.rate or []:
        updated = snapshot.with_rate(from_currency, to_currency, value)
        if updated is snapshot:
            logger.warning(f"Ignored rate {from_currency}:{to_currency}={value}")
        snapshot = updated

    if args.all_currencies:
        snapshot = snapshot.with_currency("")
    elif args.currency:
        snapshot = snapshot.with_currency(args.currency)

    return snapshot


def parse_rate_option(text: str) -> tuple:
    """Parse FROM:TO=VALUE, e.g. SGD:USD=0.74."""
    try:
        pair, value = text.split("=", 1)
        from_currency, to_currency = pair.split(":", 1)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected FROM:TO=VALUE, got {text!r}")
    return from_currency.strip(), to_currency.strip(), value.strip()


def table_command(snapshot: AnalysisSnapshot) -> None:
    """Print every purchase."""
    rows = snapshot.rows()
    print(f"\nPurchase History ({len(rows)} items)")
    print(" ".join(f"{column:<{COLUMN_WIDTHS[column]}}" for column in TABLE_COLUMNS))
    print("-" * (sum(COLUMN_WIDTHS.values()) + len(COLUMN_WIDTHS) - 1))

    for row in rows:
        print(" ".join(
            f"{_clip(row[column], COLUMN_WIDTHS[column]):<{COLUMN_WIDTHS[column]}}"
            for column in TABLE_COLUMNS
        ))


def currencies_command(snapshot: AnalysisSnapshot) -> None:
    """Print currencies found and the rates known between them."""
    currencies = snapshot.currencies
    if not currencies:
        print("No priced purchases found.")
        return

    print(f"Currencies: {', '.join(currencies)}")
    print(f"Selected: {snapshot.selected_currency or 'all currencies'}")
    for currency in currencies:
        for other in currencies:
            if other == currency:
                continue
            rate = snapshot.rates.get_rate(currency, other)
            print(f"  1 {currency} = {rate if rate else '?'} {other}")


def breakdown_command(snapshot: AnalysisSnapshot, drill: List[str]) -> None:
    """Print the app breakdown, or a drilled-down level of it."""
    path = BreakdownPath(tuple(drill or ()))
    views = snapshot.breakdown(path)

    if not views:
        print("No priced purchases found.")
        return

    for currency, view in views.items():
        heading = " > ".join((currency or "(no currency)",) + path.keys)
        print(f"\n{heading} [{view.level}]")
        _print_buckets(view.result.buckets, currency, view.result.total)


def timeline_command(snapshot: AnalysisSnapshot, granularity: Granularity) -> None:
    """Print spending per period."""
    series = snapshot.timeline(granularity)

    if isinstance(series, dict):
        for currency, buckets in series.items():
            print(f"\n{currency or '(no currency)'} ({granularity.value})")
            _print_buckets(buckets, currency)
        return

    print(f"\n{snapshot.selected_currency} ({granularity.value})")
    _print_buckets(series, snapshot.selected_currency)
    _warn_missing_rates(snapshot)


def total_command(snapshot: AnalysisSnapshot) -> None:
    """Print total spent."""
    total = snapshot.total()

    if isinstance(total, dict):
        print("Total Spent")
        for currency, amount in total.items():
            print(f"  {format_currency(amount, currency)}")
        return

    print(f"Total Spent: {format_currency(total, snapshot.selected_currency)}")
    _warn_missing_rates(snapshot)


def drive_list_command() -> None:
    """List candidate exports on Google Drive."""
    files = DriveImporter().list_candidates()
    if not files:
        print("No Purchase History or Takeout files found on Drive.")
        return

    print(f"{'File ID':<36} {'Modified':<20} Name")
    print("-" * 90)
    for drive_file in files:
        modified = drive_file.modified_time.strftime("%Y-%m-%d %H:%M:%S") if drive_file.modified_time else ""
        print(f"{drive_file.id:<36} {modified:<20} {drive_file.name}")


def drive_import_command(file_id: str, output: Optional[str]) -> None:
    """Fetch an export from Drive and save the Purchase History JSON."""
    importer = DriveImporter()
    matches = [f for f in importer.list_candidates() if f.id == file_id]
    if not matches:
        raise PlaySpendError(f"No export file with ID {file_id} found on Drive")

    text = importer.import_purchase_history(matches[0])
    target = Path(output or "Purchase History.json")
    target.write_text(text, encoding="utf-8")
    print(f"✓ Saved {matches[0].name} purchase history to {target}")


def _print_buckets(buckets, currency: str, total: Optional[Decimal] = None) -> None:
    if not buckets:
        print("  (nothing to show)")
        return

    for bucket in buckets:
        line = f"  {_clip(bucket.key, 40):<40} {format_currency(bucket.amount, currency):>16}"
        if total:
            line += f" {bucket.amount / total * 100:6.1f}%"
        print(line)


def _warn_missing_rates(snapshot: AnalysisSnapshot) -> None:
    missing = missing_rates(snapshot.purchases, snapshot.selected_currency, snapshot.rates)
    if missing:
        print(
            f"\nNote: purchases in {', '.join(c or '(no currency)' for c in missing)} are not "
            f"counted; add --rate CUR:{snapshot.selected_currency}=VALUE to include them."
        )


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width - 1] + "…"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="playspend",
        description="Google Play purchase history analyzer"
    )
    parser.add_argument("--config", help="Path to an alternative config.yaml")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging on the console")

    source_options = argparse.ArgumentParser(add_help=False)
    source_options.add_argument("source", help="Purchase History.json or Google Takeout ZIP")
    source_options.add_argument("--currency", help="Currency to calculate values in")
    source_options.add_argument(
        "--all-currencies",
        action="store_true",
        help="Show each currency separately without conversion"
    )
    source_options.add_argument(
        "--rate",
        action="append",
        type=parse_rate_option,
        metavar="FROM:TO=VALUE",
        help="Conversion rate, e.g. SGD:USD=0.74 (repeatable)"
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("table", parents=[source_options], help="List all purchases")
    commands.add_parser("currencies", parents=[source_options], help="List currencies and rates")
    commands.add_parser("total", parents=[source_options], help="Total spent")

    breakdown = commands.add_parser("breakdown", parents=[source_options], help="Spending by app")
    breakdown.add_argument(
        "--drill",
        action="append",
        metavar="KEY",
        help="Bucket to drill into, e.g. an app name or Others (repeatable)"
    )

    timeline = commands.add_parser("timeline", parents=[source_options], help="Spending over time")
    timeline.add_argument(
        "--granularity",
        choices=[g.value for g in Granularity],
        default=None,
        help="Period size (default from config)"
    )

    commands.add_parser("drive-list", help="List exports on Google Drive")
    drive_import = commands.add_parser("drive-import", help="Download an export from Google Drive")
    drive_import.add_argument("file_id", help="Drive file ID from drive-list")
    drive_import.add_argument("--output", help="Where to save the JSON (default: ./Purchase History.json)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the PlaySpend CLI."""
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            use_settings(Path(args.config))
        if args.verbose:
            set_console_level("DEBUG")

        if args.command == "drive-list":
            drive_list_command()
            return 0

        if args.command == "drive-import":
            drive_import_command(args.file_id, args.output)
            return 0

        snapshot = load_snapshot(args)

        if args.command == "table":
            table_command(snapshot)
        elif args.command == "currencies":
            currencies_command(snapshot)
        elif args.command == "breakdown":
            breakdown_command(snapshot, args.drill)
        elif args.command == "timeline":
            granularity = Granularity(args.granularity or get_settings().timeline_granularity)
            timeline_command(snapshot, granularity)
        elif args.command == "total":
            total_command(snapshot)
    except (PlaySpendError, ValueError, OSError) as e:
        logger.info(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
