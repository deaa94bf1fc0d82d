#!/usr/bin/env python3
"""
parmove - CLI Entry Point
=========================

Usage:
    python -m parmove sort . -o sorted --threads 8
    python -m parmove sort ~/Downloads -o ~/Sorted --move --blacklist "tmp,part"
    python -m parmove index sorted
    python -m parmove serve sorted --port 8000
"""

import argparse
import sys
from pathlib import Path

from tqdm import tqdm

from .config import build_config, load_environment, prepare_output_dir
from .errors import ConfigError
from .executor import Dispatcher
from .extensions import ExtensionIndex, load_blacklist, load_categories
from .html_index import write_index
from .notify import send_finished_notification
from .scanner import describe_depth, walk_files
from .server import DEFAULT_BIND, DEFAULT_PORT, serve_directory
from .transfer import TransferMode
from .utils import (
    ConsoleLog,
    console,
    print_error,
    print_header,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)

# Errors shown without --verbose
ERROR_PREVIEW = 5


def print_errors(errors: list[str], verbose: bool) -> None:
    """Print the per-file errors of a run."""
    if not errors:
        return

    console.print("\n[bold red]Errors encountered during processing:[/bold red]")
    shown = errors if verbose else errors[:ERROR_PREVIEW]
    for err in shown:
        console.print(f"  {err}", markup=False, highlight=False)
    if len(errors) > len(shown):
        console.print(f"  ... and {len(errors) - len(shown)} more (use --verbose to list all)")
    console.print(f"\nProcessing completed with {len(errors)} errors.")


# =============================================================================
# Subcommands
# =============================================================================

def cmd_sort(args) -> int:
    """Sort command - classify files under ROOT into the output directory."""
    log = ConsoleLog(console)

    try:
        config = build_config(args)
        print_header("parmove", f"Root: {config.root}\nOutput: {config.output_dir}\nMode: {config.mode.value}")

        suffix = " (default)" if config.workers_is_default else ""
        log.info(f"Using {config.workers} threads for parallel processing{suffix}")

        blacklist = load_blacklist(config.blacklist, config.blacklist_file)
        if blacklist:
            log.info("Blacklisted extensions: " + ", ".join(f".{ext}" for ext in sorted(blacklist)))

        categories = load_categories(config.categories_file, log)
        index = ExtensionIndex(blacklist=blacklist, categories=categories)

        if config.follow_symlinks:
            log.info("Following symbolic links")
        else:
            log.info("Not following symbolic links (use --follow-symlinks to include them)")
        log.info(describe_depth(config.max_depth))

        scan = walk_files(
            config.root,
            max_depth=config.max_depth,
            follow_symlinks=config.follow_symlinks,
            exclude=[config.output_dir],
            log=log,
        )
        log.info(f"Scanned {scan.directories_scanned} directories, found {len(scan.entries)} files")

        if not scan.entries:
            log.info("No files found to process.")
            return 0

        prepare_output_dir(config.output_dir)
        dispatcher = Dispatcher(index, config.output_dir, config.mode, config.workers)
    except ConfigError as e:
        print_error(str(e))
        return 1

    # Nothing may print through the console while the bar is drawn
    log.info(f"Starting {config.mode.verb} {len(scan.entries)} files to '{config.output_dir}'...")
    try:
        with tqdm(total=len(scan.entries), unit="file") as pbar:
            dispatcher.progress = pbar
            report = dispatcher.run(scan.entries, scan.directories_scanned)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130

    print_errors(report.errors, config.verbose)
    print_summary_table(report.to_dict())

    if config.report_out:
        save_json(report.to_dict(), config.report_out)

    if config.render_index:
        index_path = write_index(config.output_dir)
        log.info(f"Index written: {index_path}")

    if report.failed == 0:
        print_success(f"Finished {config.mode.verb} files to '{config.output_dir}'")
    else:
        print_warning(f"{report.failed} of {report.total} files could not be transferred")

    if config.notify:
        operation = "moving" if config.mode is TransferMode.MOVE else "sorting"
        send_finished_notification(operation, log)

    return 0


def cmd_index(args) -> int:
    """Index command - render index.html for a sorted directory."""
    directory = args.directory.resolve()
    if not directory.is_dir():
        print_error(f"Invalid directory: {directory}")
        return 1

    try:
        out_path = write_index(directory, args.output)
    except OSError as e:
        print_error(f"Failed to write index: {e}")
        return 1

    print_success(f"Index written: {out_path}")
    return 0


def cmd_serve(args) -> int:
    """Serve command - serve a sorted directory over HTTP."""
    directory = args.directory.resolve()
    if not directory.is_dir():
        print_error(f"Invalid directory: {directory}")
        return 1

    try:
        serve_directory(directory, args.bind, args.port, ConsoleLog(console))
    except OSError as e:
        print_error(f"Failed to start server: {e}")
        return 1
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parmove",
        description="Sort files into per-extension or per-category folders, in parallel",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- SORT command ---
    sort_parser = subparsers.add_parser("sort", help="Copy or move files into category folders")
    sort_parser.add_argument("root", type=Path, nargs="?", default=Path("."),
                             help="Directory to sort (default: current directory)")
    sort_parser.add_argument("-o", "--output-dir", type=str, default=None,
                             help="The directory to sort the files into (default: sorted)")
    sort_parser.add_argument("-m", "--move", action="store_true",
                             help="Move files instead of copying them")
    sort_parser.add_argument("-b", "--blacklist", type=str, default=None, metavar="EXTS",
                             help="Extensions to exclude from sorting (comma-separated, e.g. 'txt,log,tmp')")
    sort_parser.add_argument("--blacklist-file", type=str, default=None, metavar="PATH",
                             help="File containing blacklisted extensions (one per line)")
    sort_parser.add_argument("-j", "--threads", type=int, default=None,
                             help="Number of threads to use (default: number of CPU cores)")
    sort_parser.add_argument("-d", "--max-depth", type=int, default=None,
                             help="Maximum depth to recurse into directories (0 = current directory only, default: unlimited)")
    sort_parser.add_argument("-c", "--categories", type=str, default=None, metavar="PATH",
                             help="JSON file mapping category names to extension lists")
    sort_parser.add_argument("--follow-symlinks", action="store_true",
                             help="Follow symbolic links to files and directories")
    sort_parser.add_argument("-n", "--notify", action="store_true",
                             help="Send a desktop notification when finished")
    sort_parser.add_argument("-v", "--verbose", action="store_true",
                             help="List every per-file error")
    sort_parser.add_argument("--report-out", type=Path, default=None,
                             help="Write a JSON report of the run")
    sort_parser.add_argument("--index", action="store_true",
                             help="Render index.html into the output directory after sorting")
    sort_parser.set_defaults(func=cmd_sort)

    # --- INDEX command ---
    index_parser = subparsers.add_parser("index", help="Render an HTML index of a sorted directory")
    index_parser.add_argument("directory", type=Path, help="Sorted output directory")
    index_parser.add_argument("-o", "--output", type=Path, default=None,
                              help="Output HTML file (default: DIRECTORY/index.html)")
    index_parser.set_defaults(func=cmd_index)

    # --- SERVE command ---
    serve_parser = subparsers.add_parser("serve", help="Serve a sorted directory over HTTP")
    serve_parser.add_argument("directory", type=Path, nargs="?", default=Path("sorted"),
                              help="Directory to serve (default: sorted)")
    serve_parser.add_argument("--bind", type=str, default=DEFAULT_BIND,
                              help=f"Address to bind (default: {DEFAULT_BIND})")
    serve_parser.add_argument("--port", type=int, default=DEFAULT_PORT,
                              help=f"Port to listen on (default: {DEFAULT_PORT})")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_environment()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
