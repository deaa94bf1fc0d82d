"""
Parallel execution of a sort run.

Fans the discovered files out over a thread pool, classifies and transfers
each one, and collects skip counts and per-file errors.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Sequence

from .classifier import classify
from .errors import ConfigError
from .extensions import ExtensionIndex
from .scanner import FileEntry
from .transfer import TransferMode, transfer


class OutcomeStatus(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class TransferOutcome:
    entry: FileEntry
    status: OutcomeStatus
    destination: Path | None = None
    message: str | None = None


class RunAccumulator:
    """
    Counters and error log shared by all workers of one run.

    Every mutation happens under a single lock; read the totals only after
    the pool has joined.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._skipped = 0
        self._succeeded = 0
        self._errors: list[str] = []

    def record_skip(self) -> None:
        with self._lock:
            self._skipped += 1

    def record_success(self) -> None:
        with self._lock:
            self._succeeded += 1

    def record_error(self, message: str) -> None:
        with self._lock:
            self._errors.append(message)

    @property
    def skipped(self) -> int:
        with self._lock:
            return self._skipped

    @property
    def succeeded(self) -> int:
        with self._lock:
            return self._succeeded

    @property
    def errors(self) -> list[str]:
        with self._lock:
            return list(self._errors)


@dataclass
class RunReport:
    """
    Final figures of a run.

    `processed` is total - skipped and therefore still counts failed
    transfers; `succeeded` and `failed` give the exact split.
    """
    total: int
    skipped: int
    succeeded: int
    errors: list[str] = field(default_factory=list)
    mode: str = TransferMode.COPY.value
    output_dir: str = ""
    directories_scanned: int = 0

    @property
    def processed(self) -> int:
        return self.total - self.skipped

    @property
    def failed(self) -> int:
        return len(self.errors)

    def to_dict(self) -> dict:
        return {
            "output_dir": self.output_dir,
            "mode": self.mode,
            "finished_at": datetime.now().isoformat(timespec='seconds'),
            "directories_scanned": self.directories_scanned,
            "total": self.total,
            "processed": self.processed,
            "skipped": self.skipped,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "errors": list(self.errors),
        }


def format_error(entry: FileEntry, error: BaseException) -> str:
    return f"Failed to process '{entry.path}': {error}"


class Dispatcher:
    """
    Runs classification and transfer for every entry on a bounded pool.

    Args:
        index: Shared, read-only blacklist and categories.
        output_dir: Root of the sorted tree.
        mode: Copy or move.
        workers: Pool size, must be > 0.
        progress: Anything with update(n), advanced once per finished entry.
    """

    def __init__(
        self,
        index: ExtensionIndex,
        output_dir: Path,
        mode: TransferMode,
        workers: int,
        progress=None,
    ):
        if not isinstance(workers, int) or isinstance(workers, bool) or workers <= 0:
            raise ConfigError("Thread count must be greater than 0")
        self.index = index
        self.output_dir = Path(output_dir)
        self.mode = TransferMode(mode)
        self.workers = workers
        self.progress = progress

    def process_entry(self, entry: FileEntry, acc: RunAccumulator) -> TransferOutcome:
        """Classify and transfer one file; never raises."""
        try:
            decision = classify(entry, self.index)
            if decision.skip:
                acc.record_skip()
                return TransferOutcome(entry, OutcomeStatus.SKIPPED)

            dst = transfer(entry, self.output_dir, decision.target, self.mode)
        except Exception as e:
            message = format_error(entry, e)
            acc.record_error(message)
            return TransferOutcome(entry, OutcomeStatus.FAILED, message=message)

        acc.record_success()
        return TransferOutcome(entry, OutcomeStatus.SUCCEEDED, destination=dst)

    def run(self, entries: Sequence[FileEntry], directories_scanned: int = 0) -> RunReport:
        """
        Process every entry exactly once and return the run's figures.

        A failing file is recorded in the report's error list and does not
        stop the others.
        """
        acc = RunAccumulator()

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            futures = {pool.submit(self.process_entry, entry, acc): entry for entry in entries}

            for future in as_completed(futures):
                future.result()
                if self.progress is not None:
                    self.progress.update(1)

        return RunReport(
            total=len(entries),
            skipped=acc.skipped,
            succeeded=acc.succeeded,
            errors=acc.errors,
            mode=self.mode.value,
            output_dir=str(self.output_dir),
            directories_scanned=directories_scanned,
        )
