"""Layering checks for generated service projects, based on import lines."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import click


@dataclass(frozen=True)
class Rule:
    """Imports forbidden under ``internal/<package>``."""

    package: str
    forbidden: Tuple[str, ...]
    description: str


@dataclass(frozen=True)
class Violation:
    """One forbidden import found on a line."""

    path: str
    line: int
    description: str
    forbidden: str


class LintError(Exception):
    """Raised when layering violations are found."""

    def __init__(self, violations: List[Violation]):
        self.violations = violations
        super().__init__(f"发现 {len(violations)} 个分层约束违规")


RULES: Tuple[Rule, ...] = (
    Rule(
        "web",
        ("repository/", "gorm.io/", "github.com/redis/"),
        "web 禁止直接依赖 repository 或基础设施库",
    ),
    Rule(
        "server",
        ("gorm.io/", "github.com/redis/"),
        "server 禁止直接依赖 gorm/redis",
    ),
    Rule(
        "domain",
        ("gorm.io/", "github.com/redis/", "github.com/gin-gonic/", "database/sql"),
        "domain 禁止依赖任何基础设施库",
    ),
    Rule(
        "domain/entity",
        ("gorm.io/", "github.com/redis/", "github.com/gin-gonic/", "database/sql"),
        "domain/entity 禁止依赖任何基础设施库",
    ),
    Rule(
        "domain/port",
        ("gorm.io/", "github.com/redis/", "github.com/gin-gonic/"),
        "domain/port 禁止依赖具体实现",
    ),
)


def _go_files(top: str) -> Iterator[str]:
    for dirpath, dirnames, filenames in os.walk(top):
        dirnames.sort()
        for name in sorted(filenames):
            if name.endswith(".go"):
                yield os.path.join(dirpath, name)


def find_violations(root: str) -> List[Violation]:
    """Scan ``root/internal`` for imports that break the layering rules."""
    found: List[Violation] = []
    for rule in RULES:
        pkg_path = os.path.join(root, "internal", *rule.package.split("/"))
        if not os.path.exists(pkg_path):
            continue
        for path in _go_files(pkg_path):
            try:
                with open(path, encoding="utf-8", errors="replace") as handle:
                    lines = handle.read().splitlines()
            except OSError:
                continue
            rel = os.path.relpath(path, root)
            for number, text in enumerate(lines, start=1):
                if "import" not in text:
                    continue
                found.extend(
                    Violation(rel, number, rule.description, forbidden)
                    for forbidden in rule.forbidden
                    if forbidden in text
                )
    return found


def lint_arch(root: str) -> None:
    """Report layering violations under ``root``; raise :class:`LintError` if any."""
    violations = find_violations(root)
    for v in violations:
        click.secho(f"❌ {v.path}:{v.line}: {v.description}", fg="red")
        click.echo(f"   发现违规 import: {v.forbidden}\n")
    if violations:
        raise LintError(violations)
    click.secho("✓ 分层约束检查通过", fg="green")