"""Generate DAO and repository code from a SQL ``CREATE TABLE`` statement."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .util import PathLike, module_name_from_go_mod, write_file

_COLUMN_RE = re.compile(r"^(\w+)\s+(\w+)(?:\([^)]*\))?(.*)$", re.ASCII)
_SKIP_PREFIXES = ("PRIMARY", "KEY", "INDEX", "UNIQUE", "CONSTRAINT", "FOREIGN")
_GENERATED_HEADER = "// Code generated by sprout-gen. DO NOT EDIT.\n\n"


@dataclass
class ColumnInfo:
    """One column of a table definition."""

    name: str
    type: str
    nullable: bool = True


@dataclass
class TableInfo:
    """A table name and its columns in declaration order."""

    name: str
    columns: List[ColumnInfo] = field(default_factory=list)


def _is_separator(ch: str) -> bool:
    if ch.isascii():
        return not (ch.isalnum() or ch == "_")
    if ch.isalpha() or ch.isdigit():
        return False
    return ch.isspace()


def _word_title(s: str) -> str:
    """Upper-case the first letter of every word, words split on separators."""
    out = []
    prev = " "
    for ch in s:
        out.append(ch.upper() if _is_separator(prev) else ch)
        prev = ch
    return "".join(out)


def parse_ddl(text: str, table_name: str) -> TableInfo:
    """Extract the columns of ``table_name`` from DDL text.

    Raises ValueError if the table has no column definitions.
    """
    info = TableInfo(name=table_name)
    in_table = False
    lower_name = table_name.lower()

    for raw in text.split("\n"):
        line = raw.strip()
        upper_line = line.upper()
        lower_line = line.lower()

        if "CREATE TABLE" in upper_line:
            if (
                f"`{table_name}`" in line
                or f" {lower_name} " in lower_line
                or f" {lower_name}(" in lower_line
                or f"{lower_name} (" in lower_line
            ):
                in_table = True
            continue

        if not in_table:
            continue

        if line.startswith(")") or line.startswith("ENGINE"):
            break

        line = line.removesuffix(",").replace("`", "")
        if not line or line.startswith(_SKIP_PREFIXES):
            continue

        match = _COLUMN_RE.match(line)
        if match:
            rest = match.group(3).upper()
            info.columns.append(
                ColumnInfo(
                    name=match.group(1),
                    type=match.group(2),
                    nullable="NOT NULL" not in rest,
                )
            )

    if not info.columns:
        raise ValueError(f"表 {table_name} 未找到任何列定义")
    return info


def parse_ddl_file(path: PathLike, table_name: str) -> TableInfo:
    """Read a DDL file and extract the columns of ``table_name``."""
    return parse_ddl(Path(path).read_text(encoding="utf-8"), table_name)


def sql_type_to_go(sql_type: str, nullable: bool) -> str:
    """Map a SQL column type to a Go type; nullable columns become pointers."""
    t = sql_type.upper()
    if "INT" in t:
        if "BIGINT" in t:
            go = "int64"
        elif "SMALLINT" in t or "TINYINT" in t:
            go = "int8"
        else:
            go = "int"
    elif "VARCHAR" in t or "TEXT" in t or "CHAR" in t:
        go = "string"
    elif "BOOL" in t:
        go = "bool"
    elif "FLOAT" in t or "DOUBLE" in t or "DECIMAL" in t:
        go = "float64"
    elif "DATE" in t or "TIME" in t:
        go = "time.Time"
    else:
        go = "string"
    return "*" + go if nullable else go


def to_camel_case(s: str) -> str:
    """Turn ``snake_case`` into ``CamelCase``."""
    return "".join(part[:1].upper() + part[1:] for part in s.split("_"))


def render_dao_model(name: str, table: TableInfo) -> str:
    """Return the Go source of the DAO model for ``table``."""
    upper = _word_title(name)
    out = [
        _GENERATED_HEADER,
        "package dao\n\n",
        'import "time"\n\n',
        f"// {upper} {table.name} 表模型\n",
        f"type {upper} struct {{\n",
    ]
    for col in table.columns:
        go = sql_type_to_go(col.type, col.nullable)
        out.append(f'\t{to_camel_case(col.name)} {go} `gorm:"column:{col.name}"`\n')
    out += [
        "}\n\n",
        "// TableName 表名\n",
        f"func ({upper}) TableName() string {{\n",
        f'\treturn "{table.name}"\n',
        "}\n",
    ]
    return "".join(out)


def render_dao_repo(name: str) -> str:
    """Return the Go source of the GORM data access object for ``name``."""
    upper = _word_title(name)
    dao = f"{upper}DAO"
    return "".join(
        [
            _GENERATED_HEADER,
            "package dao\n\n",
            "import (\n",
            '\t"context"\n',
            '\t"gorm.io/gorm"\n',
            ")\n\n",
            f"// {dao} {name} 数据访问对象\n",
            f"type {dao} struct {{\n",
            "\tdb *gorm.DB\n",
            "}\n\n",
            f"// New{dao} 创建 DAO\n",
            f"func New{dao}(db *gorm.DB) *{dao} {{\n",
            f"\treturn &{dao}{{db: db}}\n",
            "}\n\n",
            "// Create 创建记录\n",
            f"func (d *{dao}) Create(ctx context.Context, m *{upper}) error {{\n",
            "\treturn d.db.WithContext(ctx).Create(m).Error\n",
            "}\n\n",
            "// GetByID 根据 ID 获取\n",
            f"func (d *{dao}) GetByID(ctx context.Context, id int64) (*{upper}, error) {{\n",
            f"\tvar m {upper}\n",
            '\terr := d.db.WithContext(ctx).Where("id = ?", id).First(&m).Error\n',
            "\treturn &m, err\n",
            "}\n\n",
            "// Update 更新记录\n",
            f"func (d *{dao}) Update(ctx context.Context, m *{upper}) error {{\n",
            "\treturn d.db.WithContext(ctx).Save(m).Error\n",
            "}\n\n",
            "// Delete 删除记录\n",
            f"func (d *{dao}) Delete(ctx context.Context, id int64) error {{\n",
            f"\treturn d.db.WithContext(ctx).Delete(&{upper}{{}}, id).Error\n",
            "}\n",
        ]
    )


def render_repo_interface(name: str, module_name: Optional[str]) -> str:
    """Return the Go source of the repository port interface for ``name``."""
    upper = _word_title(name)
    return "".join(
        [
            "package port\n\n",
            "import (\n",
            '\t"context"\n',
            f'\t"{module_name or ""}/internal/domain/entity"\n',
            ")\n\n",
            f"// {upper}Repository {name} 仓库接口\n",
            f"type {upper}Repository interface {{\n",
            f"\tCreate(ctx context.Context, entity *entity.{upper}) error\n",
            f"\tGetByID(ctx context.Context, id int64) (*entity.{upper}, error)\n",
            f"\tUpdate(ctx context.Context, entity *entity.{upper}) error\n",
            "\tDelete(ctx context.Context, id int64) error\n",
            "}\n",
        ]
    )


def generate_repo(name: str, ddl_file: PathLike, table: str = "") -> List[str]:
    """Parse ``ddl_file`` and write the DAO model, DAO and port files; return their paths.

    The table defaults to ``name + "s"``. Files go into the current directory
    when it holds ``internal/domain``, otherwise into ``<name>/``.
    """
    table_info = parse_ddl_file(ddl_file, table or name + "s")

    service_dir = "." if os.path.exists(os.path.join("internal", "domain")) else name
    module_name = module_name_from_go_mod(service_dir)

    outputs = [
        (
            os.path.join(service_dir, "internal", "repository", "dao", "model.go"),
            render_dao_model(name, table_info),
        ),
        (
            os.path.join(service_dir, "internal", "repository", "dao", "repo.go"),
            render_dao_repo(name),
        ),
        (
            os.path.join(
                service_dir, "internal", "domain", "port", name.lower() + "_repo.go"
            ),
            render_repo_interface(name, module_name),
        ),
    ]
    for path, content in outputs:
        write_file(path, content)
    return [path for path, _ in outputs]