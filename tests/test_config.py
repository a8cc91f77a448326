"""Tests for CollateConfig validation."""

from __future__ import annotations

import dataclasses

import pytest

from collate import DEFAULT_CONFIG, CollateConfig


def test_defaults() -> None:
    assert DEFAULT_CONFIG.command_flag == "^"
    assert DEFAULT_CONFIG.command_start == "|"
    assert DEFAULT_CONFIG.command_end == "|"
    assert DEFAULT_CONFIG.indent_unit == "    "
    assert DEFAULT_CONFIG.max_render_depth == 64
    assert DEFAULT_CONFIG.max_expansion_passes == 100


def test_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.indent_unit = "\t"  # type: ignore[misc]


def test_replace() -> None:
    config = dataclasses.replace(DEFAULT_CONFIG, max_expansion_passes=None)
    assert config.max_expansion_passes is None
    assert config.command_flag == "^"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"command_flag": ""},
        {"command_flag": "^^"},
        {"command_start": " "},
        {"command_end": "\n"},
        {"command_flag": "|"},
        {"command_start": "^", "command_flag": "^"},
        {"indent_unit": ""},
        {"max_render_depth": 0},
        {"max_expansion_passes": 0},
    ],
)
def test_invalid(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        CollateConfig(**kwargs)


def test_same_start_and_end_allowed() -> None:
    config = CollateConfig(command_start="[", command_end="[")
    assert config.command_start == config.command_end
