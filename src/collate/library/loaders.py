"""Source loaders for the collate library.

Loaders supply source units to ``Library.from_loader``. They implement
``list_sources()`` (names, in ingestion order) and ``get_source(name)``
returning ``(source, filename)``.

Built-in Loaders:
- ``FileSystemLoader``: every regular file under a directory, recursively
- ``DictLoader``: in-memory mapping (testing/embedded)

Custom Loaders:
Implement the ``Loader`` protocol:
    ```python
    class DatabaseLoader:
        def list_sources(self) -> list[str]:
            return [r.name for r in db.query("SELECT name FROM sources ORDER BY name")]

        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT body FROM sources WHERE name = ?", name)
            return row.body, f"db://{name}"
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from collate.library.exceptions import ErrorCode, SourceError


class Loader(Protocol):
    def list_sources(self) -> list[str]: ...

    def get_source(self, name: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load every regular file under a directory tree.

    Names are paths relative to the root, in POSIX form, sorted so that
    ingestion order (and so which file is blamed for a name collision) does
    not depend on directory traversal order. Entries that are neither files
    nor directories are ignored.

    Example:
        >>> loader = FileSystemLoader("site/")
        >>> loader.list_sources()
        ['index.txt', 'partials/header.txt']
        >>> source, filename = loader.get_source("partials/header.txt")
        >>> filename
        'site/partials/header.txt'

    Raises:
        SourceError: Root is not a directory, or a file cannot be read
    """

    __slots__ = ("_encoding", "_root")

    def __init__(self, root: str | Path, encoding: str = "utf-8"):
        self._root = Path(root)
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def list_sources(self) -> list[str]:
        if not self._root.is_dir():
            raise SourceError(
                "Source directory does not exist",
                self._root,
                code=ErrorCode.SOURCE_NOT_FOUND,
            )
        return sorted(
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        )

    def get_source(self, name: str) -> tuple[str, str]:
        path = self._root / name
        try:
            return path.read_text(self._encoding), str(path)
        except FileNotFoundError:
            raise SourceError(
                "Source file not found", path, code=ErrorCode.SOURCE_NOT_FOUND
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Couldn't read file: {e}", path) from e


class DictLoader:
    """Load source units from an in-memory dictionary.

    Names are listed in sorted order, like ``FileSystemLoader``. The
    filename reported for errors is the name itself.

    Example:
        >>> loader = DictLoader({
        ...     "greet.txt": "^|n greet|\\n^|p name|\\nHello, ^|u #name|!\\n^|e|",
        ...     "main.txt": "^|n main|\\n^|x main.txt|\\n^|u greet (World)|\\n^|e|",
        ... })
        >>> library = Library.from_loader(loader)
        >>> library.render("main")
        'Hello, World!'
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def list_sources(self) -> list[str]:
        return sorted(self._mapping)

    def get_source(self, name: str) -> tuple[str, str]:
        if name not in self._mapping:
            raise SourceError(
                f"Source '{name}' not found", code=ErrorCode.SOURCE_NOT_FOUND
            )
        return self._mapping[name], name
