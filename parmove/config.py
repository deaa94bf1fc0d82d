"""
Run configuration.

A RunConfig is resolved once at startup from defaults, environment variables
(including a .env file) and command-line flags, then passed by reference to
every component of the run.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

from .errors import ConfigError
from .transfer import TransferMode

DEFAULT_OUTPUT_DIR = "sorted"

ENV_OUTPUT_DIR = "PARMOVE_OUTPUT_DIR"
ENV_THREADS = "PARMOVE_THREADS"
ENV_MAX_DEPTH = "PARMOVE_MAX_DEPTH"
ENV_BLACKLIST = "PARMOVE_BLACKLIST"
ENV_BLACKLIST_FILE = "PARMOVE_BLACKLIST_FILE"
ENV_CATEGORIES = "PARMOVE_CATEGORIES"


def load_environment(dotenv_path: Path | None = None) -> bool:
    """Load a .env file into os.environ without overriding existing values."""
    return load_dotenv(dotenv_path=dotenv_path, override=False)


@dataclass(frozen=True)
class RunConfig:
    root: Path
    output_dir: Path
    mode: TransferMode = TransferMode.COPY
    workers: int = 1
    workers_is_default: bool = True
    max_depth: int | None = None
    blacklist: str | None = None
    blacklist_file: Path | None = None
    categories_file: Path | None = None
    follow_symlinks: bool = False
    notify: bool = False
    verbose: bool = False
    report_out: Path | None = None
    render_index: bool = False


def _as_int(value, what: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{what} must be an integer, got {value!r}") from None


def resolve_workers(value) -> int:
    """
    Resolve the worker pool size.

    None means one worker per CPU. Zero or a negative number is rejected.
    """
    if value is None or value == "":
        return os.cpu_count() or 1
    count = _as_int(value, "Thread count")
    if count <= 0:
        raise ConfigError("Thread count must be greater than 0")
    return count


def resolve_max_depth(value) -> int | None:
    if value is None or value == "":
        return None
    depth = _as_int(value, "Maximum depth")
    if depth < 0:
        raise ConfigError("Maximum depth must be 0 or greater")
    return depth


def prepare_output_dir(path: Path) -> Path:
    """Create the output directory, or fail with a ConfigError."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Failed to create output directory '{path}': {e}") from e
    if not os.access(path, os.W_OK):
        raise ConfigError(f"Output directory '{path}' is not writable")
    return path


def build_config(args, environ: Mapping[str, str] | None = None) -> RunConfig:
    """
    Build the RunConfig for the `sort` command.

    Command-line values win over environment variables, which win over the
    built-in defaults.

    Args:
        args: Parsed argparse namespace.
        environ: Environment mapping (defaults to os.environ).

    Raises:
        ConfigError: For any invalid value.
    """
    env = os.environ if environ is None else environ

    def pick(arg_value, env_name):
        if arg_value is not None:
            return arg_value
        return env.get(env_name) or None

    root = Path(args.root or ".").resolve()
    if not root.is_dir():
        raise ConfigError(f"Invalid directory: {root}")

    output_dir = Path(pick(args.output_dir, ENV_OUTPUT_DIR) or DEFAULT_OUTPUT_DIR)
    if not output_dir.is_absolute():
        output_dir = Path.cwd() / output_dir

    threads = pick(args.threads, ENV_THREADS)
    blacklist_file = pick(args.blacklist_file, ENV_BLACKLIST_FILE)
    categories_file = pick(args.categories, ENV_CATEGORIES)
    report_out = getattr(args, "report_out", None)

    return RunConfig(
        root=root,
        output_dir=output_dir,
        mode=TransferMode.MOVE if args.move else TransferMode.COPY,
        workers=resolve_workers(threads),
        workers_is_default=threads is None,
        max_depth=resolve_max_depth(pick(args.max_depth, ENV_MAX_DEPTH)),
        blacklist=pick(args.blacklist, ENV_BLACKLIST),
        blacklist_file=Path(blacklist_file) if blacklist_file else None,
        categories_file=Path(categories_file) if categories_file else None,
        follow_symlinks=bool(getattr(args, "follow_symlinks", False)),
        notify=bool(getattr(args, "notify", False)),
        verbose=bool(getattr(args, "verbose", False)),
        report_out=Path(report_out) if report_out else None,
        render_index=bool(getattr(args, "index", False)),
    )
