"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from frescalo_trends import __version__
from frescalo_trends.config import Settings, get_settings
from frescalo_trends.errors import FrescaloTrendsError
from frescalo_trends.flows.analysis import build_report, classify_occurrences, run_analysis
from frescalo_trends.occurrences import ColumnMap, load_epochs
from frescalo_trends.periods import EpochSet, parse_epoch_spec


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="frescalo-trends",
        description="Prepare occurrence records for Frescalo and report species trends",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    # Options shared by 'classify' and 'run'
    records_parent = argparse.ArgumentParser(add_help=False)
    records_parent.add_argument("occurrences", type=Path, help="Occurrence CSV file")
    epochs_group = records_parent.add_mutually_exclusive_group(required=True)
    epochs_group.add_argument(
        "--epoch",
        dest="epochs",
        action="append",
        metavar="START-END",
        help="Time period as a year range (repeatable), e.g. --epoch 1960-1999",
    )
    epochs_group.add_argument(
        "--epochs-file",
        type=Path,
        help="CSV with 'start' and 'end' year columns",
    )
    records_parent.add_argument(
        "--run-dir",
        type=Path,
        default=None,
        help="Run directory (default: <data_dir>/<occurrences file stem>)",
    )
    records_parent.add_argument(
        "--lenient",
        action="store_true",
        help="Skip rows with malformed dates instead of stopping at the first",
    )

    # 'classify' command
    subparsers.add_parser(
        "classify",
        parents=[records_parent],
        help="Classify records into time periods and write audit tables",
    )

    # 'run' command
    run_parser = subparsers.add_parser(
        "run",
        parents=[records_parent],
        help="Classify records, run Frescalo, and build the trend report",
    )
    run_parser.add_argument("weights", type=Path, help="Site neighbour weights file")
    run_parser.add_argument("--phi", type=float, default=None, help="Target frequency (0.50-0.95)")
    run_parser.add_argument("--alpha", type=float, default=None, help="Benchmark share (0.08-0.50)")
    run_parser.add_argument(
        "--non-benchmark",
        action="append",
        default=None,
        metavar="TAXON",
        help="Taxon to exclude from benchmarking (repeatable)",
    )
    run_parser.add_argument(
        "--geometric",
        action="store_true",
        help="Fit trends to log time factors",
    )

    # 'report' command
    report_parser = subparsers.add_parser("report", help="Re-render the report for a run")
    report_parser.add_argument("run_dir", type=Path, help="Run directory with Frescalo output")
    report_parser.add_argument("--geometric", action="store_true", help="Fit log time factors")

    return parser


def _epochs_from_args(args: argparse.Namespace) -> EpochSet:
    if args.epochs_file is not None:
        return load_epochs(args.epochs_file)
    return EpochSet(parse_epoch_spec(spec) for spec in args.epochs)


def _columns(settings: Settings) -> ColumnMap:
    return ColumnMap(
        taxon=settings.taxon_column,
        site=settings.site_column,
        start=settings.start_column,
        end=settings.end_column,
    )


def _run_dir(args: argparse.Namespace, settings: Settings) -> Path:
    if args.run_dir is not None:
        return Path(args.run_dir)
    return settings.data_dir / Path(args.occurrences).stem


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Frescalo: {settings.frescalo_path}")
    print(f"Data directory: {settings.data_dir}")
    return 0


def cmd_classify(args: argparse.Namespace) -> int:
    """Handle the 'classify' command."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    summary = classify_occurrences(
        occurrences_path=args.occurrences,
        epochs=_epochs_from_args(args).to_pairs(),
        run_dir=_run_dir(args, settings),
        columns=_columns(settings),
        date_format=settings.date_format,
        strict=not args.lenient,
    )
    for epoch in summary["epochs"]:
        print(f"  {epoch['label']}: {epoch['count']}")
    print(f"  unclassified: {summary['unclassified']}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command: the full analysis flow."""
    settings = get_settings()
    if args.debug:
        print(f"Debug mode enabled. Settings: {settings}")

    result = run_analysis(
        occurrences_path=args.occurrences,
        epochs=_epochs_from_args(args).to_pairs(),
        weights_path=args.weights,
        run_dir=_run_dir(args, settings),
        frescalo_path=settings.frescalo_path,
        phi=args.phi if args.phi is not None else settings.phi,
        alpha=args.alpha if args.alpha is not None else settings.alpha,
        non_benchmark=args.non_benchmark,
        columns=_columns(settings),
        date_format=settings.date_format,
        strict=not args.lenient,
        timeout=settings.frescalo_timeout,
        geometric=args.geometric,
    )
    print(f"Report: {result['report']}")
    return 0


def cmd_report(args: argparse.Namespace) -> int:
    """Handle the 'report' command."""
    result = build_report(run_dir=args.run_dir, geometric=args.geometric)
    if "error" in result:
        print(f"Error: no Frescalo output in {args.run_dir}", file=sys.stderr)
        return 1
    print(f"Report: {result['report']}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "info": cmd_info,
        "classify": cmd_classify,
        "run": cmd_run,
        "report": cmd_report,
    }

    handler = commands.get(args.command)
    if not handler:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except FrescaloTrendsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
