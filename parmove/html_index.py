"""
HTML index of a sorted output directory.
"""

import html
from pathlib import Path
from urllib.parse import quote

INDEX_NAME = "index.html"

STYLE = (
    "body{font-family:system-ui,Segoe UI,Roboto,Arial,sans-serif;margin:24px}"
    "table{width:100%;border-collapse:collapse;margin-top:8px;margin-bottom:24px}"
    "th,td{border:1px solid #ddd;padding:6px 8px;font-size:14px}"
    "th{background:#f7f7f7;text-align:left}"
    ".mono{font-family:ui-monospace,Menlo,Consolas,monospace;color:#555}"
)


def human(size: int) -> str:
    """Format a byte count, e.g. 1536 -> '1.5 KB'."""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if value < 1024 or unit == "TB":
            if unit == "B":
                return f"{int(value)} {unit}"
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"


def collect_tree(directory: Path) -> dict[str, list[tuple[str, int]]]:
    """
    Files per top-level subfolder of directory.

    Returns:
        {subfolder: [(file name, size), ...]} sorted by name.
    """
    directory = Path(directory)
    tree: dict[str, list[tuple[str, int]]] = {}

    for sub in sorted(p for p in directory.iterdir() if p.is_dir()):
        files = []
        for entry in sorted(sub.iterdir(), key=lambda p: p.name.lower()):
            try:
                if entry.is_file():
                    files.append((entry.name, entry.stat().st_size))
            except OSError:
                continue
        tree[sub.name] = files

    return tree


def render_index(directory: Path, title: str | None = None) -> str:
    """Render an HTML page listing every subfolder and its files."""
    directory = Path(directory)
    tree = collect_tree(directory)
    title = title or f"Index of {directory.name or directory}"
    total_files = sum(len(files) for files in tree.values())

    page = [
        "<!DOCTYPE html><html><head><meta charset='utf-8'>",
        f"<title>{html.escape(title)}</title>",
        f"<style>{STYLE}</style>",
        "</head><body>",
        f"<h1>{html.escape(title)}</h1>",
        f"<div class='mono'>{len(tree)} folders, {total_files} files</div>",
    ]

    for folder, files in tree.items():
        folder_href = quote(folder)
        page.append(f"<h2 id='{html.escape(folder, quote=True)}'>{html.escape(folder)} ({len(files)})</h2>")
        page.append("<table><thead><tr><th>Name</th><th>Size</th></tr></thead><tbody>")
        for name, size in files:
            href = f"{folder_href}/{quote(name)}"
            page.append(
                f"<tr><td class='mono'><a href='{html.escape(href, quote=True)}'>{html.escape(name)}</a></td>"
                f"<td>{human(size)}</td></tr>"
            )
        page.append("</tbody></table>")

    page.append("</body></html>")
    return "\n".join(page)


def write_index(directory: Path, out_path: Path | None = None) -> Path:
    """Write the index page, by default to <directory>/index.html."""
    directory = Path(directory)
    out_path = Path(out_path) if out_path else directory / INDEX_NAME
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_index(directory), encoding="utf-8")
    return out_path
