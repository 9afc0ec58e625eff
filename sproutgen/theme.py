"""Colour theme for command-line help text."""

from __future__ import annotations

from typing import Callable

import click


def _head(text: str) -> str:
    return click.style(text, fg="cyan", bold=True)


def _command(text: str) -> str:
    return click.style(text, fg="green", bold=True)


def _flag(text: str) -> str:
    return click.style(text, fg="yellow")


_HEADINGS = ("Usage:", "Available Commands:", "Flags:", "Global Flags:")


def highlight_flags(line: str, paint: Callable[[str], str]) -> str:
    """Paint every space-separated token that looks like a flag."""
    parts = []
    for token in line.split(" "):
        if token and (
            token.startswith("--") or (token.startswith("-") and len(token) <= 3)
        ):
            token = paint(token)
        parts.append(token)
    return " ".join(parts)


def colorize_help(text: str) -> str:
    """Colour headings, command names and flags of a help text; each line ends in a newline."""
    out = []
    for line in text.split("\n"):
        stripped = line.strip()
        for heading in _HEADINGS:
            if stripped.startswith(heading):
                line = line.replace(heading, _head(heading), 1)
                break

        if line.startswith("  ") and line.lstrip(" "):
            first = line.split()[0]
            if not first.startswith("-") and first == first.lower():
                idx = line.find(first)
                if idx >= 0:
                    line = line[:idx] + _command(first) + line[idx + len(first):]

        out.append(highlight_flags(line, _flag) + "\n")
    return "".join(out)