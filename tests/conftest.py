"""Pytest configuration and fixtures for collate tests."""

import pytest

from collate import CollateConfig, DictLoader, Library

GREET = "^|n greet|\n^|p name|\nHello, ^|u #name|!\n^|e|\n"


@pytest.fixture
def library():
    """Create an empty Library with the default configuration."""
    return Library()


@pytest.fixture
def greet_library():
    """Library holding the ``greet`` block: ``Hello, <name>!``."""
    library = Library()
    library.import_string(GREET, filename="greet.txt")
    return library


@pytest.fixture
def make_library():
    """Build a Library from in-memory sources, one unit per keyword."""

    def _make(config: CollateConfig | None = None, **sources: str) -> Library:
        return Library.from_loader(DictLoader(sources), config)

    return _make


def write_tree(root, files: dict[str, str]) -> None:
    """Create ``files`` (relative path -> text) under ``root``."""
    for name, text in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
