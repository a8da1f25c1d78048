# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line interface for scanning and copying EVE character settings."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ess.config import (
    DEFAULT_PACING_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ESI_DEFAULT_BASE_URL,
    SyncConfig,
    default_settings_path,
)
from ess.controller import SettingsSyncController
from ess.esi import EsiClient
from ess.lookup_client import LookupClient
from ess.model import Failed, Record, Resolved

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="ess")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan")
    scan_parser.add_argument(
        "--path",
        default=None,
        help="EVE settings root. Defaults to the Steam/Proton install location.",
    )
    scan_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    scan_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    scan_parser.add_argument(
        "--skip-lookup",
        action="store_true",
        help="Do not resolve character names.",
    )
    scan_parser.add_argument(
        "--esi-url", default=ESI_DEFAULT_BASE_URL, help="ESI base URL."
    )
    scan_parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="Per-request timeout in seconds.",
    )
    scan_parser.add_argument(
        "--pacing",
        type=float,
        default=DEFAULT_PACING_SECONDS,
        help="Delay between name lookups in seconds.",
    )

    copy_parser = subparsers.add_parser("copy")
    copy_parser.add_argument(
        "--path",
        default=None,
        help="EVE settings root. Defaults to the Steam/Proton install location.",
    )
    copy_parser.add_argument(
        "--from", dest="source", required=True, help="Source character ID."
    )
    copy_parser.add_argument(
        "--to",
        dest="destinations",
        action="append",
        required=True,
        help="Destination character ID; repeat for several destinations.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "scan":
        return _run_scan(args=args, stdout=stdout, stderr=stderr)
    if args.command == "copy":
        return _run_copy(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def build_lookup_client(config: SyncConfig) -> LookupClient:
    """Create the configured name lookup client.

    Args:
        config: Run configuration.

    Returns:
        Configured lookup client.
    """
    return EsiClient(
        base_url=config.esi_base_url,
        datasource=config.datasource,
        timeout_seconds=config.timeout_seconds,
    )


def _run_scan(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run scan command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    if args.timeout <= 0:
        stderr.write("timeout must be > 0\n")
        return 2
    if args.pacing < 0:
        stderr.write("pacing must be >= 0\n")
        return 2

    config = SyncConfig(
        root_path=args.path or default_settings_path(),
        esi_base_url=args.esi_url,
        timeout_seconds=args.timeout,
        pacing_seconds=args.pacing,
        lookup_names=not args.skip_lookup,
    )
    lookup_client = build_lookup_client(config)
    try:
        controller = SettingsSyncController(config=config, lookup_client=lookup_client)
        if not controller.scan():
            stderr.write(f"Error: {controller.error_message}\n")
            return 2
        controller.wait_for_enrichment()
    finally:
        _close_client(lookup_client)

    records = controller.store.records()
    if args.format == "json":
        payload = _records_payload(records)
        if args.output:
            try:
                output_path = Path(args.output)
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(
                    json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
                )
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            console = Console(file=stdout, force_terminal=False, color_system="truecolor")
            console.print(
                json.dumps(payload, indent=2, sort_keys=True),
                markup=False,
                highlight=False,
                soft_wrap=True,
            )
    else:
        _write_table(records=records, stdout=stdout)
    return 0


def _run_copy(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run copy command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 when every destination was written, 1 when some failed
        or no destination matched a scanned record, 2 when a precondition failed.
    """
    config = SyncConfig(
        root_path=args.path or default_settings_path(), lookup_names=False
    )
    lookup_client = build_lookup_client(config)
    try:
        controller = SettingsSyncController(config=config, lookup_client=lookup_client)
        if not controller.scan():
            stderr.write(f"Error: {controller.error_message}\n")
            return 2
        selection = controller.store.selection
        selection.select_source(args.source)
        for identifier in args.destinations:
            selection.add_destination(identifier)
        outcome = controller.copy()
    finally:
        _close_client(lookup_client)

    if outcome is None:
        stderr.write(f"Error: {controller.status_message}\n")
        return 2
    if outcome.succeeded and outcome.success_count == 0:
        logger.warning(
            f"No destination matched a scanned record (destinations={args.destinations})"
        )
        missing = ", ".join(sorted(set(args.destinations) - {args.source}))
        stderr.write(f"No settings files found for destination(s): {missing}\n")
        return 1
    if outcome.succeeded:
        stdout.write(f"{outcome.summary()}\n")
        return 0
    stderr.write(f"{outcome.summary()}\n")
    return 1


def _close_client(lookup_client: LookupClient) -> None:
    close = getattr(lookup_client, "close", None)
    if callable(close):
        close()


def _status_fields(record: Record) -> dict[str, str | None]:
    status = record.resolution
    if isinstance(status, Resolved):
        return {"status": "resolved", "name": status.display_name, "error": None}
    if isinstance(status, Failed):
        return {"status": "failed", "name": None, "error": status.reason}
    return {"status": "pending", "name": None, "error": None}


def _records_payload(records: list[Record]) -> dict[str, object]:
    return {
        "records": [
            {
                "path": str(record.path),
                "filename": record.filename,
                "identifier": record.identifier,
                **_status_fields(record),
            }
            for record in records
        ]
    }


def _name_cell(record: Record) -> str:
    status = record.resolution
    if isinstance(status, Resolved):
        return status.display_name
    if isinstance(status, Failed):
        return f"error: {status.reason}"
    return "Loading..."


def _write_table(records: list[Record], stdout: TextIO) -> None:
    """Write records as a table.

    Args:
        records: Scanned records.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if not records:
        console.print("No character settings files found in the specified path.")
        return
    console.print(f"Found {len(records)} character settings files:")
    table = Table(show_header=True, expand=True)
    table.add_column("Filename", ratio=2, overflow="fold")
    table.add_column("Character ID", ratio=1, overflow="fold")
    table.add_column("Character Name", ratio=2, overflow="fold")
    table.add_column("Path", ratio=4, overflow="fold")
    for record in records:
        table.add_row(
            record.filename, record.identifier, _name_cell(record), str(record.path)
        )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
