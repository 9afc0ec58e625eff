# sproutgen

`sproutgen` is a Python library for working with layered microservice
projects written in Go. It can:

- parse `.sprout` API description files (`sproutgen.parser`);
- write the entity, port, DAO, repository and service layers of an entity
  (`sproutgen.entity`);
- write a DAO model, DAO and repository port from a SQL `CREATE TABLE`
  statement (`sproutgen.ddl`);
- check the layering rules of a generated project (`sproutgen.lint`);
- run a small HTTP registry that hands out unique, stable service IDs
  (`sproutgen.registry_store`, `sproutgen.registry_server`);
- map business errors to HTTP statuses and gRPC codes, and run simple health
  checks (`sproutgen.bizerror`).

## Installation

```bash
pip install sproutgen
```

This installs one command, `sprout-registry`.

## The `.sprout` format

```text
syntax = "v1"

type ExampleReq {
    Name string `json:"name" validate:"required"`
}

type ExampleResp {
    Message string `json:"message"`
}

server {
    prefix "/api"
}

service demo {
    public {
        GET "/ping" Ping -> ExampleResp
        POST "/create" Create(ExampleReq) -> ExampleResp
    }

    private {
        GET "/info" GetInfo -> ExampleResp
    }
}
```

Endpoints are written as `METHOD "path" Handler -> Response`, or
`METHOD "path" Handler(Request) -> Response` when the handler takes a request.

```python
from sproutgen.parser import parse_file, SproutValidationError

spec = parse_file("demo/.sprout")
spec.validate()          # raises SproutValidationError without types or services
print(spec.server.prefix)
for service in spec.services:
    for ep in service.public:
        print(ep.method, ep.path, ep.handler, ep.request, ep.response)
```

`parse_content(text)`, `parse_field(line)` and `parse_endpoint(line)` parse
text directly; `go_type(t)` maps a `.sprout` type to its Go type.

## Entity and module layers

```python
from sproutgen.entity import generate_entity, generate_module

generate_entity("order", "name:string,price:int64")          # in-memory DAO
generate_entity("product", dao_type="gorm")                  # GORM DAO
generate_module("user", "name:string,age:int")               # plus service layer
```

Both return the paths written. Files go under `internal/` when the current
directory already has `internal/domain/entity`, otherwise under
`<name>/internal/`. The module path is read from `go.mod` in the current
directory, falling back to the entity name. The `render_*` functions return
the same Go sources as strings without writing anything.

## Code from SQL DDL

```python
from sproutgen.ddl import generate_repo, parse_ddl

generate_repo("user", "schema.sql")                 # table defaults to "users"
generate_repo("user", "schema.sql", table="users")
```

This writes `internal/repository/dao/model.go`, `internal/repository/dao/repo.go`
and `internal/domain/port/<name>_repo.go`, in the current directory when it
holds `internal/domain`, otherwise under `<name>/`. `parse_ddl` raises
`ValueError` when the table has no column definitions.

## Layering check

```python
from sproutgen.lint import find_violations, lint_arch, LintError

for v in find_violations("."):
    print(v.path, v.line, v.forbidden)

try:
    lint_arch(".")       # prints each violation, then raises
except LintError as exc:
    print(len(exc.violations))
```

The rules: `web` must not import repository code or gorm/redis, `server` must
not import gorm or redis, and `domain`, `domain/entity` and `domain/port` must
not import infrastructure libraries. Only lines containing `import` are
scanned.

## ServiceID registry

```bash
sprout-registry --port 18080 --data registry.db
sprout-registry --token token
```

The registry stores services in SQLite and numbers them from `101` upwards;
asking again for a known name returns the same ID. With `--token`, every
request must carry `Authorization: Bearer token`.

| Method | Path                     | Body               |
|--------|--------------------------|--------------------|
| POST   | `/v1/services:allocate`  | `{"name": "demo"}` |
| GET    | `/v1/services/<name>`    |                    |
| GET    | `/v1/services`           |                    |

Responses carry `service_id` and `name`; the list endpoint wraps them in
`{"services": [...]}`. An unknown name gives 404, a missing name in the
allocate body gives 400.

The store and the web application can be used directly:

```python
from sproutgen.registry_store import SQLiteStore
from sproutgen.registry_server import create_app

with SQLiteStore("registry.db") as store:
    print(store.allocate("demo").service_id)
    app = create_app(store, token="token")
```

`SQLiteStore.get` raises `ServiceNotFoundError` for unknown names.

## Business errors and health checks

```python
from sproutgen.bizerror import BizError, map_to_http, map_to_grpc, HealthServer, PingChecker

status, body = map_to_http(BizError(1010004, "not found"))    # 404
code, msg = map_to_grpc(BizError(1010004, "not found"))       # "NOT_FOUND"

health = HealthServer()
health.register("db", PingChecker(lambda: None))
print(health.check("db"))                                     # HealthStatus.SERVING
```

The last four digits of a business code choose the status: 1 bad request,
2 unauthorized, 3 forbidden, 4 not found, 5 conflict, anything else internal.
`readiness(checks)` returns 503 if any check returns False, else 200.
`ErrorDetail` serialises to and from JSON.

## Help colouring

`sproutgen.theme.colorize_help(text)` colours headings, command names and
flags of a help text with ANSI styles.

## What this package does not do

There is no `sprout-gen` command: the generators above are used from Python.
The package does not generate types, routes or handler stubs from a `.sprout`
file (it only parses them), does not create a new service skeleton, does not
request service IDs from the registry as a client, and does not run `protoc`
or write gRPC server wrappers.