"""Directory-based sources -- the most common real-world pattern.

Loads every file under ``site/`` with FileSystemLoader, shares a layout and
a navigation partial between two pages, and exports both pages.

Run:
    python app.py
"""

import tempfile
from pathlib import Path

from collate import ExportResult, Library

site_dir = Path(__file__).parent / "site"
library = Library.from_directory(site_dir)


def export(output_dir: Path) -> list[ExportResult]:
    """Write both pages under ``output_dir``."""
    return library.export_all(output_dir)


def main() -> None:
    with tempfile.TemporaryDirectory(prefix="collate-site-") as tmp:
        for result in export(Path(tmp)):
            print(f"=== {result.name} -> {result.path} ({result.size}B) ===")
            print(result.path.read_text(encoding="utf-8"))
            print()


if __name__ == "__main__":
    main()
