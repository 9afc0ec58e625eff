import pytest

from sproutgen.parser import (
    APIEndpoint,
    ServiceDefinition,
    SproutFile,
    SproutValidationError,
    TypeDefinition,
    go_type,
    parse_content,
    parse_endpoint,
    parse_field,
    parse_file,
)

CONTENT = '''syntax = "v1"

type ExampleReq {
    Name string `json:"name" validate:"required"`
}

type ExampleResp {
    Message string `json:"message"`
}

server {
    prefix "/api"
}

service TestService {
    public {
        GET "/ping" Ping -> ExampleResp
        POST "/create" Create -> ExampleResp
    }
    
    private {
        GET "/info" GetInfo -> ExampleResp
    }
}
'''


def test_parse_content():
    parsed = parse_content(CONTENT)
    assert len(parsed.types) == 2
    assert parsed.types[0].name == "ExampleReq"
    assert len(parsed.types[0].fields) == 1
    assert parsed.types[0].fields[0].name == "Name"
    assert parsed.server.prefix == "/api"
    assert len(parsed.services) == 1
    service = parsed.services[0]
    assert service.name == "TestService"
    assert len(service.public) == 2
    assert len(service.private) == 1
    assert service.public[0].method == "GET"
    assert service.public[0].path == "/ping"
    assert service.public[0].handler == "Ping"


def test_parse_file(tmp_path):
    content = '''syntax = "v1"

type TestReq {
    ID int `json:"id"`
}

service Test {
    public {
        GET "/test" Test -> TestReq
    }
}
'''
    path = tmp_path / "test.sprout"
    path.write_text(content, encoding="utf-8")
    parsed = parse_file(path)
    assert len(parsed.types) == 1
    assert parsed.types[0].fields[0].tags == 'json:"id"'
    assert parsed.services[0].public[0].response == "TestReq"


def test_parse_file_missing(tmp_path):
    with pytest.raises(OSError):
        parse_file(tmp_path / "absent.sprout")


@pytest.mark.parametrize(
    "line, name, type_name, tags",
    [
        ('Name string `json:"name" validate:"required"`', "Name", "string",
         'json:"name" validate:"required"'),
        ("ID int", "ID", "int", ""),
        ('Count int `json:"count"`', "Count", "int", 'json:"count"'),
    ],
)
def test_parse_field(line, name, type_name, tags):
    parsed = parse_field(line)
    assert parsed is not None
    assert parsed.name == name
    assert parsed.type == type_name
    assert parsed.tags == tags


def test_parse_field_rejects_single_word():
    assert parse_field("Name") is None


@pytest.mark.parametrize(
    "line, method, path, handler, request, response",
    [
        ('GET "/ping" Ping -> ExampleResp', "GET", "/ping", "Ping", "", "ExampleResp"),
        ('POST "/create" Create(CreateReq) -> CreateResp', "POST", "/create",
         "Create", "CreateReq", "CreateResp"),
        ('PUT "/update" Update -> ExampleResp', "PUT", "/update", "Update", "",
         "ExampleResp"),
    ],
)
def test_parse_endpoint(line, method, path, handler, request, response):
    endpoint = parse_endpoint(line)
    assert endpoint == APIEndpoint(
        method=method, path=path, handler=handler, request=request, response=response
    )


def test_parse_endpoint_empty_parens():
    endpoint = parse_endpoint('GET "/ping" Ping() -> PingResp')
    assert endpoint is not None
    assert endpoint.request == ""
    assert endpoint.handler == "Ping"


def test_parse_endpoint_invalid():
    assert parse_endpoint("GET /ping Ping") is None


def test_go_type():
    assert go_type("string") == "string"
    assert go_type("[]Item") == "[]Item"
    assert go_type("[][]int64") == "[][]int64"


def test_validate_no_types():
    with pytest.raises(SproutValidationError, match="no types defined"):
        SproutFile().validate()


def test_validate_no_services():
    parsed = SproutFile(types=[TypeDefinition(name="A")])
    with pytest.raises(SproutValidationError, match="no services defined"):
        parsed.validate()


def test_validate_ok():
    parsed = parse_content(CONTENT)
    parsed.validate()
    assert parsed.services[0] == ServiceDefinition(
        name="TestService",
        public=parsed.services[0].public,
        private=parsed.services[0].private,
    )


def test_comments_skipped():
    parsed = parse_content("// type Hidden {\ntype Shown {\n}\n")
    assert [t.name for t in parsed.types] == ["Shown"]