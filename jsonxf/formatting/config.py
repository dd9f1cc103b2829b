from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class FormatterOptions:
    # All strings are copied verbatim into the output; none are read as JSON.
    indent: str = "  "
    line_separator: str = "\n"
    record_separator: str = "\n"
    after_colon: str = " "
    trailing_output: str = ""

    # Write the record separator right after each root-level structure closes
    # instead of before the next one opens.
    eager_record_separator: bool = True

    def with_overrides(self, **overrides: str | bool | None) -> FormatterOptions:
        """Return a copy with the given fields replaced; ``None`` values are ignored."""

        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise TypeError(f"unknown formatter option(s): {', '.join(unknown)}")
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def pretty_printer() -> FormatterOptions:
    return FormatterOptions()


def minimizer() -> FormatterOptions:
    # Root-level records stay newline-delimited even when minimized.
    return FormatterOptions(
        indent="",
        line_separator="",
        record_separator="\n",
        after_colon="",
        trailing_output="",
        eager_record_separator=False,
    )


PRESETS = {
    "pretty": pretty_printer,
    "minimize": minimizer,
}


def preset(name: str) -> FormatterOptions:
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(f"unknown preset: {name!r} (expected one of: {', '.join(PRESETS)})") from None
    return factory()
