"""Generative blocks -- block exports feeding the library.

A block declared with a bare ``^|x|`` is rendered and its output imported
back as new source. Here one generator stamps out a page block per color;
each generated page is a file export of its own. Escaped flags (``^^``)
become the commands of the generated source.

Run:
    python app.py
"""

import tempfile
from pathlib import Path

from collate import ExportResult, Library

SOURCE = """\
^|n swatch|
^|p color|
^^|n page_^|u #color||
^^|x ^|u #color|.txt|
Swatch: ^|u #color|
^^|e|
^|e|

^|n palette|
^|x|
^|u swatch (red)|
^|u swatch (green)|
^|e|
"""

library = Library()
library.import_string(SOURCE, filename="palette.txt")

passes = library.expand()
generated = [name for name in library.list_blocks() if name.startswith("page_")]


def export(output_dir: Path) -> list[ExportResult]:
    """Write the generated pages under ``output_dir``."""
    return library.export_all(output_dir)


def main() -> None:
    print(f"Expanded in {passes} pass(es); generated: {', '.join(generated)}")
    with tempfile.TemporaryDirectory(prefix="collate-palette-") as tmp:
        for result in export(Path(tmp)):
            print(f"{result.path}: {result.path.read_text(encoding='utf-8')}")


if __name__ == "__main__":
    main()
