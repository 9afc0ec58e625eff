"""Generate the entity, port, DAO, repository and service layers of a business entity."""

from __future__ import annotations

import os
from typing import Iterable, List

from .util import (
    EntityField,
    go_type_from_name,
    module_name_from_go_mod,
    parse_fields,
    title,
    write_file,
)


def _in_service_dir() -> bool:
    return os.path.exists(os.path.join("internal", "domain", "entity"))


def _target(name: str, in_service_dir: bool, *parts: str) -> str:
    if in_service_dir:
        return os.path.join("internal", *parts)
    return os.path.join(name, "internal", *parts)


def _crud_signatures(upper: str) -> List[str]:
    return [
        f"\tCreate(ctx context.Context, entity *entity.{upper}) error\n",
        f"\tFindByID(ctx context.Context, id int64) (*entity.{upper}, error)\n",
        f"\tUpdate(ctx context.Context, entity *entity.{upper}) error\n",
        "\tDelete(ctx context.Context, id int64) error\n",
    ]


def _dao_interface(name: str, upper: str) -> List[str]:
    return [
        f"// {upper}DAO {name} DAO 接口\n",
        f"type {upper}DAO interface {{\n",
        *_crud_signatures(upper),
        "}\n\n",
    ]


def render_entity(name: str, fields: Iterable[EntityField]) -> str:
    """Return the Go source of the entity struct for ``name``."""
    upper = title(name)
    out = [
        f"// {upper} {name} 实体\n",
        f"type {upper} struct {{\n",
        '\tID        int64 `json:"id"`\n',
    ]
    for fld in fields:
        out.append(
            f'\t{title(fld.name)} {go_type_from_name(fld.type)} `json:"{fld.name}"`\n'
        )
    out += [
        '\tCreatedAt int64 `json:"created_at"`\n',
        '\tUpdatedAt int64 `json:"updated_at"`\n',
        "}\n",
    ]
    return "package entity\n\n" + "".join(out)


def render_port(name: str, module_name: str) -> str:
    """Return the Go source of the repository port interface."""
    upper = title(name)
    body = [
        f"// {upper}Repository {name} 仓储接口\n",
        f"type {upper}Repository interface {{\n",
        *_crud_signatures(upper),
        "}\n",
    ]
    imports = f'import (\n\t"context"\n\t"{module_name}/internal/domain/entity"\n)\n\n'
    return "package port\n\n" + imports + "".join(body)


def render_memory_dao(name: str, module_name: str) -> str:
    """Return the Go source of the DAO interface with an in-memory implementation."""
    upper = title(name)
    impl = f"{upper}DAOImpl"
    body = _dao_interface(name, upper) + [
        f"// {impl} 内存实现\n",
        f"type {impl} struct {{\n",
        "\tmu     sync.RWMutex\n",
        f"\tdata   map[int64]*entity.{upper}\n",
        "\tnextID int64\n",
        "}\n\n",
        f"// New{upper}DAO 创建 DAO\n",
        f"func New{upper}DAO() *{impl} {{\n",
        f"\treturn &{impl}{{\n",
        f"\t\tdata:   make(map[int64]*entity.{upper}),\n",
        "\t\tnextID: 1,\n",
        "\t}\n",
        "}\n\n",
        f"func (d *{impl}) Create(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\td.mu.Lock()\n\tdefer d.mu.Unlock()\n",
        "\tentity.ID = d.nextID\n\td.nextID++\n",
        "\td.data[entity.ID] = entity\n\treturn nil\n",
        "}\n\n",
        f"func (d *{impl}) FindByID(ctx context.Context, id int64) (*entity.{upper}, error) {{\n",
        "\td.mu.RLock()\n\tdefer d.mu.RUnlock()\n",
        "\treturn d.data[id], nil\n",
        "}\n\n",
        f"func (d *{impl}) Update(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\td.mu.Lock()\n\tdefer d.mu.Unlock()\n",
        "\td.data[entity.ID] = entity\n\treturn nil\n",
        "}\n\n",
        f"func (d *{impl}) Delete(ctx context.Context, id int64) error {{\n",
        "\td.mu.Lock()\n\tdefer d.mu.Unlock()\n",
        "\tdelete(d.data, id)\n\treturn nil\n",
        "}\n",
    ]
    imports = (
        f'import (\n\t"context"\n\t"sync"\n\t"{module_name}/internal/domain/entity"\n)\n\n'
    )
    return "package dao\n\n" + imports + "".join(body)


def render_gorm_dao(name: str, module_name: str) -> str:
    """Return the Go source of the DAO interface with a GORM implementation."""
    upper = title(name)
    impl = f"{upper}GormDAO"
    body = _dao_interface(name, upper) + [
        f"// {impl} GORM 实现\n",
        f"type {impl} struct {{\n",
        "\tdb *gorm.DB\n",
        "}\n\n",
        f"// New{impl} 创建 DAO\n",
        f"func New{impl}(db *gorm.DB) *{impl} {{\n",
        f"\treturn &{impl}{{db: db}}\n",
        "}\n\n",
        f"func (d *{impl}) Create(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn d.db.Create(entity).Error\n",
        "}\n\n",
        f"func (d *{impl}) FindByID(ctx context.Context, id int64) (*entity.{upper}, error) {{\n",
        f"\tvar entity entity.{upper}\n",
        "\terr := d.db.First(&entity, id).Error\n",
        "\treturn &entity, err\n",
        "}\n\n",
        f"func (d *{impl}) Update(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn d.db.Save(entity).Error\n",
        "}\n\n",
        f"func (d *{impl}) Delete(ctx context.Context, id int64) error {{\n",
        f"\treturn d.db.Delete(&entity.{upper}{{}}, id).Error\n",
        "}\n",
    ]
    imports = (
        f'import (\n\t"context"\n\t"gorm.io/gorm"\n\t"{module_name}/internal/domain/entity"\n)\n\n'
    )
    return "package dao\n\n" + imports + "".join(body)


def render_repository(name: str, module_name: str) -> str:
    """Return the Go source of the repository implementation backed by the DAO."""
    upper = title(name)
    repo = f"{upper}Repository"
    body = [
        f"// {repo} {name} 仓储实现\n",
        f"type {repo} struct {{\n",
        f"\tdao dao.{upper}DAO\n",
        "}\n\n",
        f"// New{repo} 创建仓储\n",
        f"func New{repo}(dao dao.{upper}DAO) port.{repo} {{\n",
        f"\treturn &{repo}{{dao: dao}}\n",
        "}\n\n",
        f"func (r *{repo}) Create(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn r.dao.Create(ctx, entity)\n",
        "}\n\n",
        f"func (r *{repo}) FindByID(ctx context.Context, id int64) (*entity.{upper}, error) {{\n",
        "\treturn r.dao.FindByID(ctx, id)\n",
        "}\n\n",
        f"func (r *{repo}) Update(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn r.dao.Update(ctx, entity)\n",
        "}\n\n",
        f"func (r *{repo}) Delete(ctx context.Context, id int64) error {{\n",
        "\treturn r.dao.Delete(ctx, id)\n",
        "}\n",
    ]
    imports = (
        "import (\n"
        '\t"context"\n'
        f'\t"{module_name}/internal/domain/entity"\n'
        f'\t"{module_name}/internal/domain/port"\n'
        f'\t"{module_name}/internal/repository/dao"\n'
        ")\n\n"
    )
    return "package repository\n\n" + imports + "".join(body)


def render_module_service(name: str, module_name: str) -> str:
    """Return the Go source of the service layer for ``name``."""
    upper = title(name)
    svc = f"{upper}Service"
    body = [
        f"// {svc} {name} 服务\n",
        f"type {svc} struct {{\n",
        f"\trepo port.{upper}Repository\n",
        "}\n\n",
        f"// New{svc} 创建服务\n",
        f"func New{svc}(repo port.{upper}Repository) *{svc} {{\n",
        f"\treturn &{svc}{{repo: repo}}\n",
        "}\n\n",
        f"// Create 创建{name}\n",
        f"func (s *{svc}) Create(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn s.repo.Create(ctx, entity)\n",
        "}\n\n",
        f"// GetByID 根据ID获取{name}\n",
        f"func (s *{svc}) GetByID(ctx context.Context, id int64) (*entity.{upper}, error) {{\n",
        "\treturn s.repo.FindByID(ctx, id)\n",
        "}\n\n",
        f"// Update 更新{name}\n",
        f"func (s *{svc}) Update(ctx context.Context, entity *entity.{upper}) error {{\n",
        "\treturn s.repo.Update(ctx, entity)\n",
        "}\n\n",
        f"// Delete 删除{name}\n",
        f"func (s *{svc}) Delete(ctx context.Context, id int64) error {{\n",
        "\treturn s.repo.Delete(ctx, id)\n",
        "}\n",
    ]
    imports = (
        "import (\n"
        '\t"context"\n'
        f'\t"{module_name}/internal/domain/entity"\n'
        f'\t"{module_name}/internal/domain/port"\n'
        ")\n\n"
    )
    return "package service\n\n" + imports + "".join(body)


def generate_entity(name: str, fields_str: str = "", dao_type: str = "memory") -> List[str]:
    """Write the entity, port, DAO and repository files; return the paths written.

    Files go under ``internal/`` when run inside a service directory, otherwise
    under ``<name>/internal/``. ``dao_type`` ``"gorm"`` selects the GORM DAO,
    anything else the in-memory one.
    """
    fields = parse_fields(fields_str)
    module_name = module_name_from_go_mod(".") or name
    in_service = _in_service_dir()
    lower = name.lower()

    dao_render = render_gorm_dao if dao_type == "gorm" else render_memory_dao
    outputs = [
        (_target(name, in_service, "domain", "entity", lower + ".go"),
         render_entity(name, fields)),
        (_target(name, in_service, "domain", "port", lower + "_repository.go"),
         render_port(name, module_name)),
        (_target(name, in_service, "repository", "dao", lower + ".go"),
         dao_render(name, module_name)),
        (_target(name, in_service, "repository", lower + ".go"),
         render_repository(name, module_name)),
    ]
    for path, content in outputs:
        write_file(path, content)
    return [path for path, _ in outputs]


def generate_module(name: str, fields_str: str = "") -> List[str]:
    """Write the four entity layers plus the service layer; return the paths written."""
    module_name = module_name_from_go_mod(".") or name
    in_service = _in_service_dir()

    written = generate_entity(name, fields_str, "memory")
    svc_path = _target(name, in_service, "service", name.lower() + ".go")
    write_file(svc_path, render_module_service(name, module_name))
    return written + [svc_path]