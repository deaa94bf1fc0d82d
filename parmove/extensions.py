"""
Extension normalization, blacklist and category lookup.

The ExtensionIndex built here is constructed once per run and then only read,
so worker threads share it without locking.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from .errors import ConfigError
from .utils import load_json


# -----------------------------------------------------------------------------
# Built-in categories
# -----------------------------------------------------------------------------

DEFAULT_CATEGORIES = {
    "Images": ["jpg", "jpeg", "png", "gif", "bmp", "svg", "webp", "ico", "tiff", "heic"],
    "Documents": ["pdf", "doc", "docx", "txt", "rtf", "odt", "xls", "xlsx", "ppt", "pptx", "csv", "md"],
    "Audio": ["mp3", "wav", "flac", "aac", "ogg", "wma", "m4a"],
    "Video": ["mp4", "avi", "mkv", "mov", "wmv", "flv", "webm", "m4v"],
    "Archives": ["zip", "rar", "7z", "tar", "gz", "bz2", "xz"],
    "Code": ["py", "js", "ts", "html", "css", "json", "xml", "yml", "yaml", "sh", "c", "cpp", "h", "java", "go", "rs"],
    "Executables": ["exe", "msi", "dmg", "deb", "rpm", "appimage"],
    "Fonts": ["ttf", "otf", "woff", "woff2"],
}


def normalize_extension(token: str) -> str | None:
    """
    Normalize an extension as typed by a user.

    Trims whitespace, lowercases and strips one leading dot.
    Returns None for tokens that are empty after trimming.
    """
    ext = token.strip().lower()
    if ext.startswith('.'):
        ext = ext[1:]
    return ext or None


def split_extension(name: str) -> str | None:
    """
    Return the lowercased extension of a file name, or None.

    The extension is the text after the last dot, provided both the stem and
    the suffix are non-empty: "archive.tar.gz" -> "gz", ".bashrc" -> None,
    "notes." -> None, "README" -> None.
    """
    stem, dot, suffix = name.rpartition('.')
    if not dot or not stem or not suffix:
        return None
    return suffix.lower()


def parse_extension_list(items: Iterable[str]) -> set[str]:
    """Normalize a sequence of extension tokens, dropping empty ones."""
    result = set()
    for item in items:
        ext = normalize_extension(item)
        if ext:
            result.add(ext)
    return result


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------

def load_blacklist(inline: str | None = None, path: Path | None = None) -> frozenset[str]:
    """
    Build the blacklist from a comma-separated string and/or a file.

    Args:
        inline: Comma-separated extensions, e.g. "txt, .LOG,tmp".
        path: File with one extension per line. Blank lines and lines
            starting with '#' are ignored.

    Returns:
        The union of both sources.

    Raises:
        ConfigError: If the blacklist file cannot be read.
    """
    blacklist = set()

    if inline:
        blacklist |= parse_extension_list(inline.split(','))

    if path is not None:
        try:
            content = Path(path).read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read blacklist file '{path}': {e}") from e

        for line in content.splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            ext = normalize_extension(line)
            if ext:
                blacklist.add(ext)

    return frozenset(blacklist)


def is_folder_name(name: str) -> bool:
    """True if name is a single path component: not absolute, no separators, not . or .."""
    if name in ('.', '..') or '/' in name or os.sep in name:
        return False
    if os.altsep and os.altsep in name:
        return False
    return not Path(name).is_absolute() and not Path(name).drive


def parse_categories(data, source: str = "<categories>") -> dict[str, frozenset[str]]:
    """
    Validate a decoded category document.

    The document must be an object mapping category names to lists of
    extension strings. Key order is kept; it decides which category wins
    when an extension is listed twice.

    Raises:
        ConfigError: If the document does not have that shape.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Category config {source} must be an object mapping names to extension lists")

    categories: dict[str, frozenset[str]] = {}
    for name, extensions in data.items():
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"Category config {source}: category names must be non-empty strings")
        if not is_folder_name(name.strip()):
            raise ConfigError(f"Category config {source}: '{name}' is not a plain folder name")
        if not isinstance(extensions, list):
            raise ConfigError(f"Category config {source}: '{name}' must map to a list of extensions")
        for ext in extensions:
            if not isinstance(ext, str):
                raise ConfigError(f"Category config {source}: '{name}' contains a non-string entry {ext!r}")
        categories[name.strip()] = frozenset(parse_extension_list(extensions))

    return categories


def load_categories(path: Path | None = None, log=None) -> dict[str, frozenset[str]]:
    """
    Load the category map.

    Args:
        path: JSON file of {"Category": ["ext", ...]}. None means the
            built-in categories.
        log: Sink for the fallback warning.

    Returns:
        Ordered mapping of category name to normalized extensions.

    Raises:
        ConfigError: If the file is readable but malformed.
    """
    if path is None:
        return parse_categories(DEFAULT_CATEGORIES, "defaults")

    try:
        data = load_json(Path(path))
    except OSError as e:
        if log is not None:
            log.warning(f"Could not read category config '{path}' ({e}); using default categories")
        return parse_categories(DEFAULT_CATEGORIES, "defaults")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Category config '{path}' is not valid JSON: {e}") from e

    return parse_categories(data, f"'{path}'")


# -----------------------------------------------------------------------------
# Lookup
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtensionIndex:
    """
    Read-only blacklist and category map.

    Never mutated after construction; category_for() scans the map without
    locking and is safe to call from any number of threads.
    """
    blacklist: frozenset[str] = frozenset()
    categories: Mapping[str, frozenset[str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "blacklist", frozenset(self.blacklist))
        object.__setattr__(
            self,
            "categories",
            MappingProxyType({name: frozenset(exts) for name, exts in self.categories.items()}),
        )

    def is_blacklisted(self, path) -> bool:
        """True iff the file has an extension and it is blacklisted."""
        if not self.blacklist:
            return False

        ext = split_extension(Path(path).name)
        if ext is None:
            return False
        return ext in self.blacklist

    def category_for(self, extension: str) -> str | None:
        """Return the first category claiming the extension, or None."""
        ext = normalize_extension(extension)
        if ext is None:
            return None
        for name, extensions in self.categories.items():
            if ext in extensions:
                return name
        return None
