"""
Copy or move a single file into its destination folder.
"""

import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path

from .scanner import FileEntry


class TransferMode(str, Enum):
    COPY = "copy"
    MOVE = "move"

    @property
    def verb(self) -> str:
        return "moving" if self is TransferMode.MOVE else "copying"


def destination_for(entry: FileEntry, destination_root: Path, subfolder: str) -> Path:
    """
    Destination path of a file: <root>/<subfolder>/<file name>.

    The source directory is dropped, so files with the same name from
    different directories share a destination and the last transfer wins.
    """
    return Path(destination_root) / subfolder / entry.name


def copy_file(src: Path, dst: Path) -> None:
    """
    Copy the full contents of src to dst, replacing dst if present.

    Bytes are duplicated with a plain read/write loop into a temporary file
    beside dst, which then replaces dst in one rename. Concurrent copies onto
    the same name never see each other's partial writes; the last rename wins.
    No metadata is copied. A failed copy never touches the source.
    """
    fd, tmp = tempfile.mkstemp(dir=dst.parent, prefix=f".{dst.name}.", suffix=".part")
    try:
        with os.fdopen(fd, 'wb') as writer, open(src, 'rb') as reader:
            shutil.copyfileobj(reader, writer)
        os.replace(tmp, dst)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def _same_file(src: Path, dst: Path) -> bool:
    """True if dst already is src. A dst removed concurrently is not."""
    try:
        return dst.samefile(src)
    except FileNotFoundError:
        return False


def move_file(src: Path, dst: Path) -> None:
    """Move src to dst, creating dst's parent if needed."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(src), str(dst))


def transfer(entry: FileEntry, destination_root: Path, subfolder: str, mode: TransferMode) -> Path:
    """
    Copy or move one file into destination_root/subfolder.

    Args:
        entry: The file to transfer.
        destination_root: Output directory.
        subfolder: Category, extension or "unknown".
        mode: TransferMode.COPY or TransferMode.MOVE.

    Returns:
        The destination path.

    Raises:
        FileNotFoundError: If the source no longer exists.
        OSError: For any other filesystem failure.
    """
    src = entry.path
    if not src.exists():
        raise FileNotFoundError(f"Source file does not exist: {src}")

    dst = destination_for(entry, destination_root, subfolder)
    dst.parent.mkdir(parents=True, exist_ok=True)

    if _same_file(src, dst):
        return dst

    if mode is TransferMode.MOVE:
        move_file(src, dst)
    else:
        copy_file(src, dst)

    return dst
