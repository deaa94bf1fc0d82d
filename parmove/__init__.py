"""
parmove
=======

Sorts every file beneath a directory into per-category or per-extension
folders, copying or moving them on a thread pool.
"""

__version__ = "2.0.0"

from .classifier import UNKNOWN_FOLDER, Decision, classify
from .config import RunConfig, build_config
from .errors import ConfigError, ParmoveError
from .executor import Dispatcher, RunAccumulator, RunReport, TransferOutcome, OutcomeStatus
from .extensions import (
    DEFAULT_CATEGORIES,
    ExtensionIndex,
    load_blacklist,
    load_categories,
    normalize_extension,
)
from .scanner import FileEntry, ScanResult, walk_files
from .transfer import TransferMode, transfer

__all__ = [
    "UNKNOWN_FOLDER",
    "Decision",
    "classify",
    "RunConfig",
    "build_config",
    "ConfigError",
    "ParmoveError",
    "Dispatcher",
    "RunAccumulator",
    "RunReport",
    "TransferOutcome",
    "OutcomeStatus",
    "DEFAULT_CATEGORIES",
    "ExtensionIndex",
    "load_blacklist",
    "load_categories",
    "normalize_extension",
    "FileEntry",
    "ScanResult",
    "walk_files",
    "TransferMode",
    "transfer",
]
