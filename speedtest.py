#!/usr/bin/env python3
"""
Speedtest CLI -- measure latency and throughput against an HTTP endpoint.

Usage::

    python speedtest.py http://192.168.1.100:3001          # rich dashboard
    python speedtest.py URL --simple                       # plain text
    python speedtest.py URL --json                         # JSON only
    python speedtest.py URL -o result.json                 # save report
    python speedtest.py URL --download-size 5000 --no-upload
    python speedtest.py URL --ping-count 20 --save-defaults

The final JSON report is always written to stdout; the dashboard, plain-text
summary and log messages go to stderr.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from client.config import config_path, load_config, set_config_value
from client.constants import (
    MAX_PING_COUNT,
    MAX_SIZE_KB,
    MAX_TIMEOUT,
    MIN_PING_COUNT,
    MIN_SIZE_KB,
    MIN_TIMEOUT,
)
from client.runner import SpeedTester, TestOptions
from logging_setup import configure_logging
from ui.dashboard import (
    console,
    print_final_results,
    print_header,
    print_latency_details,
    print_network_info,
    print_transfer_result,
)
from ui.output import format_text_result, report_to_json, save_json


# ---------------------------------------------------------------------------
# Parameter validation
# ---------------------------------------------------------------------------

def _validate(
    ping_count: int,
    download_size: int,
    upload_size: int,
    timeout: float,
) -> None:
    """Raise ``ValueError`` if any parameter is out of range."""
    if not MIN_PING_COUNT <= ping_count <= MAX_PING_COUNT:
        raise ValueError(f"Ping count must be between {MIN_PING_COUNT} and {MAX_PING_COUNT}")
    if not MIN_SIZE_KB <= download_size <= MAX_SIZE_KB:
        raise ValueError(f"Download size must be between {MIN_SIZE_KB} and {MAX_SIZE_KB} KB")
    if not MIN_SIZE_KB <= upload_size <= MAX_SIZE_KB:
        raise ValueError(f"Upload size must be between {MIN_SIZE_KB} and {MAX_SIZE_KB} KB")
    if not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        raise ValueError(f"Timeout must be between {MIN_TIMEOUT:g} and {MAX_TIMEOUT:g} s")


def build_options(args: argparse.Namespace) -> TestOptions:
    return TestOptions(
        latency_samples=args.ping_count,
        download_size_kb=args.download_size,
        upload_size_kb=args.upload_size,
        test_latency=not args.no_latency,
        test_download=not args.no_download,
        test_upload=not args.no_upload,
    )


# ---------------------------------------------------------------------------
# Core test runner
# ---------------------------------------------------------------------------

async def run_speedtest(
    server_url: str,
    options: TestOptions,
    *,
    timeout: float,
    json_output: bool = False,
    simple: bool = False,
    output_file: Optional[str] = None,
) -> Dict[str, Any]:
    """Run the full test, render it, and return the JSON-serialisable report."""

    show_ui = not json_output and not simple
    tester = SpeedTester(server_url, timeout=timeout)

    if show_ui:
        print_header(tester.server_url)
        with console.status("[bold]Starting...[/bold]") as status:
            tester.on_step = lambda step: status.update(f"[bold]{step}...[/bold]")
            report = await tester.run_full_test(options)
    else:
        report = await tester.run_full_test(options)

    tests = report["tests"]

    if show_ui:
        if "latency" in tests:
            print_latency_details(tests["latency"])
        if "download" in tests:
            print_transfer_result(tests["download"], "Download Results", "green")
        if "upload" in tests:
            print_transfer_result(tests["upload"], "Upload Results", "blue")
        if "networkInfo" in tests:
            print_network_info(tests["networkInfo"])
        print_final_results(report)
    elif simple:
        print(format_text_result(report), file=sys.stderr)

    print(report_to_json(report))

    if output_file:
        save_json(report, output_file)
        if show_ui:
            console.print(f"[green]Results saved to:[/green] {output_file}")

    return report


def _save_defaults(args: argparse.Namespace, server_url: str) -> None:
    set_config_value("server_url", server_url)
    set_config_value("ping_count", args.ping_count)
    set_config_value("download_size", args.download_size)
    set_config_value("upload_size", args.upload_size)
    path = set_config_value("timeout", args.timeout)
    console.print(f"[green]Defaults saved to:[/green] {path}")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser(defaults: Dict[str, Any]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Speedtest CLI -- latency and throughput against an HTTP speedtest endpoint",
    )
    parser.add_argument("server_url", nargs="?", default=None, help="Endpoint base URL, e.g. http://192.168.1.100:3001")

    # Test parameters
    parser.add_argument("--download-size", type=int, default=defaults["download_size"], metavar="KB", help="Size for download test (default: %(default)s)")
    parser.add_argument("--upload-size", type=int, default=defaults["upload_size"], metavar="KB", help="Size for upload test (default: %(default)s)")
    parser.add_argument("--ping-count", type=int, default=defaults["ping_count"], metavar="N", help="Number of ping samples (default: %(default)s)")
    parser.add_argument("--timeout", type=float, default=defaults["timeout"], metavar="SECS", help="Per-request timeout (default: %(default)s)")
    parser.add_argument("--no-download", action="store_true", help="Skip download test")
    parser.add_argument("--no-upload", action="store_true", help="Skip upload test")
    parser.add_argument("--no-latency", action="store_true", help="Skip latency test")

    # Output modes
    parser.add_argument("--json", "-j", action="store_true", help="Output only the JSON report")
    parser.add_argument("--simple", "-s", action="store_true", help="Simple output mode (no dashboard)")
    parser.add_argument("--output", "-o", type=str, metavar="FILE", help="Save the report to a JSON file")

    parser.add_argument("--save-defaults", action="store_true", help=f"Remember URL and test parameters in {config_path()}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    defaults = load_config()
    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else None)

    server_url = args.server_url or defaults.get("server_url")
    if not server_url:
        parser.print_usage(sys.stderr)
        print("error: a server URL is required, e.g. http://192.168.1.100:3001", file=sys.stderr)
        sys.exit(1)

    # Validate
    try:
        _validate(
            ping_count=args.ping_count,
            download_size=args.download_size,
            upload_size=args.upload_size,
            timeout=args.timeout,
        )
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if args.save_defaults:
        _save_defaults(args, server_url)

    try:
        report = asyncio.run(
            run_speedtest(
                server_url,
                build_options(args),
                timeout=args.timeout,
                json_output=args.json,
                simple=args.simple,
                output_file=args.output,
            )
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Test cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as exc:
        console.print(f"\n[red]Error: {exc}[/red]")
        sys.exit(1)

    if report.get("error"):
        sys.exit(1)


if __name__ == "__main__":
    main()
