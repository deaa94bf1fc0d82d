"""
Maps a discovered file to the subfolder it is sorted into.
"""

from dataclasses import dataclass

from .extensions import ExtensionIndex
from .scanner import FileEntry

# Subfolder for files without an extension
UNKNOWN_FOLDER = "unknown"


@dataclass(frozen=True)
class Decision:
    """Either skip the file or sort it into `target`."""
    target: str | None = None

    @property
    def skip(self) -> bool:
        return self.target is None


SKIP = Decision()


def classify(entry: FileEntry, index: ExtensionIndex) -> Decision:
    """
    Decide where a file goes.

    Rules, in order:
    1. Blacklisted extension -> skip.
    2. Extension claimed by a category -> the category name.
    3. Any other extension -> the lowercased extension itself.
    4. No extension -> UNKNOWN_FOLDER.
    """
    if index.is_blacklisted(entry.path):
        return SKIP

    if entry.ext:
        category = index.category_for(entry.ext)
        return Decision(category or entry.ext)

    return Decision(UNKNOWN_FOLDER)
