from __future__ import annotations

import dataclasses

import pytest

from jsonxf.formatting.config import FormatterOptions, minimizer, preset, pretty_printer


def test_pretty_printer_preset_values() -> None:
    opts = pretty_printer()
    assert opts.indent == "  "
    assert opts.line_separator == "\n"
    assert opts.record_separator == "\n"
    assert opts.after_colon == " "
    assert opts.trailing_output == ""
    assert opts.eager_record_separator is True


def test_minimizer_preset_values() -> None:
    opts = minimizer()
    assert opts.indent == ""
    assert opts.line_separator == ""
    assert opts.record_separator == "\n"
    assert opts.after_colon == ""
    assert opts.trailing_output == ""
    assert opts.eager_record_separator is False


def test_options_are_immutable() -> None:
    opts = pretty_printer()
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.indent = "\t"  # type: ignore[misc]


def test_with_overrides_replaces_only_given_fields() -> None:
    base = minimizer()
    opts = base.with_overrides(indent="X", after_colon=None)
    assert opts.indent == "X"
    assert opts.after_colon == ""
    assert opts.record_separator == "\n"
    assert base.indent == ""


def test_with_overrides_without_changes_returns_same_instance() -> None:
    base = pretty_printer()
    assert base.with_overrides() is base
    assert base.with_overrides(indent=None) is base


def test_with_overrides_rejects_unknown_fields() -> None:
    with pytest.raises(TypeError, match="tab_width"):
        FormatterOptions().with_overrides(tab_width="4")


def test_preset_lookup() -> None:
    assert preset("pretty") == pretty_printer()
    assert preset("minimize") == minimizer()
    with pytest.raises(ValueError, match="unknown preset"):
        preset("compact")
