import pytest

from sproutgen.util import (
    EntityField,
    GenerationError,
    generate_file_force,
    generate_file_if_absent,
    go_type_from_name,
    module_name_from_go_mod,
    parse_fields,
    title,
    write_file,
)


def test_title():
    assert title("user") == "User"
    assert title("") == ""
    assert title("X") == "X"


def test_title_keeps_rest():
    word = "orderItem"
    assert title(word)[1:] == word[1:]


def test_parse_fields():
    assert parse_fields("name:string,age:int") == [
        EntityField("name", "string"),
        EntityField("age", "int"),
    ]


def test_parse_fields_empty_and_malformed():
    assert parse_fields("   ") == []
    assert parse_fields("bad,x:y:z") == []
    assert parse_fields(" price:int64 ") == [EntityField("price", "int64")]


def test_go_type_from_name():
    assert go_type_from_name("float") == "float64"
    assert go_type_from_name("int32") == "int32"
    assert go_type_from_name("time.Time") == "time.Time"


def test_module_name_from_go_mod(tmp_path):
    (tmp_path / "go.mod").write_text("module example.com/demo\n\ngo 1.25\n")
    assert module_name_from_go_mod(tmp_path) == "example.com/demo"


def test_module_name_missing(tmp_path):
    assert module_name_from_go_mod(tmp_path) is None
    (tmp_path / "go.mod").write_text("go 1.25\n")
    assert module_name_from_go_mod(tmp_path) is None


def test_write_file_creates_dirs_and_overwrites(tmp_path):
    target = tmp_path / "a" / "b" / "c.go"
    write_file(target, "first")
    write_file(target, "second")
    assert target.read_text() == "second"


def test_write_file_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(GenerationError):
        write_file(blocker / "child.go", "content")


def test_generate_file_if_absent(tmp_path):
    target = tmp_path / "dir" / "f.txt"
    assert generate_file_if_absent(target, "one") is True
    assert generate_file_if_absent(target, "two") is False
    assert target.read_text() == "one"


def test_generate_file_force(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("old")
    generate_file_force(target, "new")
    assert target.read_text() == "new"