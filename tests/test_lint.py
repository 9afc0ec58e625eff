import os

import pytest

from sproutgen.lint import LintError, RULES, find_violations, lint_arch


def _write(root, rel, content):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_clean_project(tmp_path, capsys):
    _write(tmp_path, "internal/web/handler.go", 'package web\n\nimport "fmt"\n')
    assert find_violations(str(tmp_path)) == []
    lint_arch(str(tmp_path))
    assert "分层约束检查通过" in capsys.readouterr().out


def test_web_imports_gorm(tmp_path):
    _write(tmp_path, "internal/web/handler.go", 'package web\n\nimport "gorm.io/gorm"\n')
    violations = find_violations(str(tmp_path))
    assert len(violations) == 1
    v = violations[0]
    assert v.line == 3
    assert v.forbidden == "gorm.io/"
    assert v.path == os.path.join("internal", "web", "handler.go")
    assert v.description == RULES[0].description


def test_lint_arch_raises(tmp_path):
    _write(tmp_path, "internal/server/s.go", 'import "github.com/redis/go-redis/v9"\n')
    with pytest.raises(LintError) as info:
        lint_arch(str(tmp_path))
    assert len(info.value.violations) == 1
    assert str(info.value) == "发现 1 个分层约束违规"


def test_nested_package_matched_by_two_rules(tmp_path):
    _write(tmp_path, "internal/domain/entity/user.go", 'import "database/sql"\n')
    violations = find_violations(str(tmp_path))
    assert len(violations) == 2
    assert {v.description for v in violations} == {
        RULES[2].description,
        RULES[3].description,
    }


def test_multiline_import_block_not_checked(tmp_path):
    _write(
        tmp_path,
        "internal/web/handler.go",
        'package web\n\nimport (\n\t"gorm.io/gorm"\n)\n',
    )
    assert find_violations(str(tmp_path)) == []


def test_non_go_files_ignored(tmp_path):
    _write(tmp_path, "internal/web/notes.txt", 'import "gorm.io/gorm"\n')
    assert find_violations(str(tmp_path)) == []


def test_missing_internal_dir(tmp_path):
    assert find_violations(str(tmp_path)) == []