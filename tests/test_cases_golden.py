from __future__ import annotations

from pathlib import Path

import pytest

from jsonxf.formatting.stream import minimize, pretty_print

CASES_DIR = Path(__file__).resolve().parent / "test_cases"

CASE_NAMES = [
    "backslash-string",
    "empty-list",
    "empty-nest",
    "empty-object",
    "multiple-objects",
    "simple-list",
    "simple-object",
]


def _read(name: str) -> str:
    return (CASES_DIR / name).read_text(encoding="utf-8")


@pytest.mark.parametrize("name", CASE_NAMES)
def test_case_pretty(name: str) -> None:
    assert pretty_print(_read(f"{name}.json")) == _read(f"{name}.pretty.json")


@pytest.mark.parametrize("name", CASE_NAMES)
def test_case_min(name: str) -> None:
    assert minimize(_read(f"{name}.json")) == _read(f"{name}.min.json")
