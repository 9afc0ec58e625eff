"""Shared helpers for the code generators: naming, field specs and file output."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

SPROUT_VERSION = "v0.0.5"
SPROUTX_VERSION = "v0.0.5"

PathLike = Union[str, "os.PathLike[str]"]

_GO_TYPES = {
    "string": "string",
    "int": "int",
    "int64": "int64",
    "int32": "int32",
    "float": "float64",
    "float64": "float64",
    "bool": "bool",
}


class GenerationError(OSError):
    """Raised when a generated file cannot be written."""


@dataclass(frozen=True)
class EntityField:
    """An entity field given as ``name:type``."""

    name: str
    type: str


def title(s: str) -> str:
    """Upper-case the first character of ``s``."""
    return s[:1].upper() + s[1:]


def parse_fields(fields_str: str) -> List[EntityField]:
    """Parse ``"name:string,age:int"`` into fields; malformed items are skipped."""
    if not fields_str.strip():
        return []
    fields = []
    for item in fields_str.split(","):
        parts = item.strip().split(":")
        if len(parts) == 2:
            fields.append(EntityField(name=parts[0], type=parts[1]))
    return fields


def go_type_from_name(name: str) -> str:
    """Map a short type name to a Go type; unknown names are returned as-is."""
    return _GO_TYPES.get(name, name)


def module_name_from_go_mod(directory: PathLike) -> Optional[str]:
    """Return the module path declared in ``directory/go.mod``, or None."""
    try:
        text = (Path(directory) / "go.mod").read_text(encoding="utf-8")
    except OSError:
        return None
    for line in text.split("\n"):
        line = line.strip()
        if line.startswith("module "):
            return line[len("module "):].strip()
    return None


def _ensure_parent(path: PathLike) -> None:
    parent = os.path.dirname(os.fspath(path))
    if parent and parent != ".":
        try:
            os.makedirs(parent, mode=0o755, exist_ok=True)
        except OSError as exc:
            raise GenerationError(f"mkdir {parent}: {exc}") from exc


def _write(path: PathLike, content: str) -> None:
    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise GenerationError(f"write {os.fspath(path)}: {exc}") from exc


def write_file(path: PathLike, content: str) -> None:
    """Write ``content`` to ``path``, creating parent directories and overwriting."""
    _ensure_parent(path)
    _write(path, content)


def generate_file_if_absent(path: PathLike, content: str) -> bool:
    """Write ``path`` only if it does not exist yet; return whether it was written."""
    if os.path.exists(path):
        return False
    _ensure_parent(path)
    _write(path, content)
    return True


def generate_file_force(path: PathLike, content: str) -> None:
    """Write ``path`` unconditionally, overwriting any existing content."""
    write_file(path, content)