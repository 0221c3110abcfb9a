import asyncio
import logging
import os
import re
import threading

from repocheck import scanner
from repocheck.result import READ_ERROR, RULE_ERROR
from repocheck.rules import Rule, load_rules
from repocheck.scanner import run_scan, scan_lines, scan_tree


class ExplodingPattern:
    def search(self, line):
        raise RuntimeError("boom")


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_scan_lines_reports_each_rule_once_per_line():
    lines = [
        "export class Login {",
        "  check(flag: Boolean, name: String) {",
        "  }",
        "}",
    ]

    violations = list(scan_lines("/repo/src/login.ts", lines, load_rules()))

    assert [(v.rule, v.line) for v in violations] == [
        ("boolean-wrapper", 2),
        ("string-wrapper", 2),
    ]


def test_scan_lines_skips_rules_filtered_out_by_path():
    lines = ["fdescribe('x', () => {});"]

    assert list(scan_lines("/repo/src/login.ts", lines, load_rules())) == []
    assert len(list(scan_lines("/repo/src/login.spec.ts", lines, load_rules()))) == 1


def test_run_scan_counts_all_files_but_checks_only_extension(tmp_path):
    root = tmp_path / "src"
    target = _write(root / "app" / "foo.spec.ts", "describe('x', () => {\n  fit('y', () => {});\n});\n")
    _write(root / "README.md", "let x: Boolean = true;\n")
    _write(root / "styles" / "main.scss", "body: String;\n")

    result = run_scan(root, load_rules())

    assert result.files_scanned == 3
    assert result.files_matched == 1
    assert len(result.violations) == 1
    violation = result.violations[0]
    assert violation.message == "Disallow fdescribe/fit"
    assert violation.path == str(target)
    assert violation.line == 2
    assert result.exit_code() == 1


def test_run_scan_clean_tree_passes(tmp_path):
    root = tmp_path / "src"
    _write(root / "bar.ts", "let x: boolean = true;\r\nlet y: string = 'a';\r\n")

    result = run_scan(root, load_rules())

    assert result.files_matched == 1
    assert result.violations == []
    assert result.exit_code() == 0


def test_violations_are_reported_in_line_order(tmp_path):
    root = tmp_path / "src"
    _write(root / "types.ts", "let a: Boolean = true;\nlet b = 1;\nlet c: Number = 2;\n")
    seen = []

    run_scan(root, load_rules(), on_violation=seen.append)

    assert [(v.rule, v.line) for v in seen] == [("boolean-wrapper", 1), ("number-wrapper", 3)]


def test_many_files_are_all_scanned(tmp_path):
    root = tmp_path / "src"
    for index in range(40):
        _write(root / f"pkg{index % 4}" / f"file{index}.ts", "let x: Boolean;\n")

    result = run_scan(root, load_rules(), concurrency=3)

    assert result.files_matched == 40
    assert len(result.violations) == 40
    assert len({v.path for v in result.violations}) == 40


def test_missing_root_completes_with_zero_files(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        result = run_scan(tmp_path / "src", load_rules())

    assert result.files_scanned == 0
    assert result.exit_code() == 0
    assert "error while walking tree" in caplog.text


def test_unreadable_file_does_not_abort_scan(tmp_path, caplog):
    root = tmp_path / "src"
    _write(root / "ok.ts", "let x: Boolean = true;\n")
    os.symlink(tmp_path / "missing.ts", root / "dangling.ts")

    with caplog.at_level(logging.ERROR):
        result = run_scan(root, load_rules())

    assert result.files_scanned == 2
    assert result.files_matched == 2
    assert len(result.violations) == 1
    assert [(error.kind, error.path) for error in result.errors] == [(READ_ERROR, str(root / "dangling.ts"))]
    assert result.exit_code() == 1
    assert "unable to read" in caplog.text


def test_rule_failure_is_isolated_per_file(tmp_path):
    root = tmp_path / "src"
    _write(root / "a.ts", "one\n")
    _write(root / "b.js", "let x: Boolean;\n")
    only_ts = Rule(name="exploding", pattern=ExplodingPattern(), message="never", file_filter=re.compile(r"\.ts$"))
    rules = [only_ts, *load_rules()]

    result = run_scan(root, rules, extension="s")

    assert [(error.kind, error.path) for error in result.errors] == [(RULE_ERROR, str(root / "a.ts"))]
    assert [v.path for v in result.violations] == [str(root / "b.js")]


def test_symlink_cycles_terminate(tmp_path):
    root = tmp_path / "src"
    _write(root / "app" / "x.ts", "let x: boolean;\n")
    os.symlink(root, root / "app" / "loop")

    result = run_scan(root, load_rules())

    assert result.files_scanned == 1


def test_aliased_directories_are_walked_through_every_link(tmp_path):
    root = tmp_path / "src"
    _write(root / "lib" / "a.ts", "let x: Boolean;\n")
    os.symlink(root / "lib", root / "alias")

    result = run_scan(root, load_rules())

    assert result.files_scanned == 2
    assert sorted(v.path for v in result.violations) == [
        str(root / "alias" / "a.ts"),
        str(root / "lib" / "a.ts"),
    ]


def test_unlistable_subdirectory_does_not_stop_the_walk(tmp_path, monkeypatch, caplog):
    root = tmp_path / "src"
    _write(root / "locked" / "hidden.ts", "let x: Boolean;\n")
    _write(root / "open" / "visible.ts", "let y: Boolean;\n")
    _write(root / "top.ts", "let z: boolean;\n")
    real_scandir = os.scandir

    def guarded_scandir(path):
        if os.path.basename(path) == "locked":
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", guarded_scandir)

    with caplog.at_level(logging.ERROR):
        result = run_scan(root, load_rules())

    assert result.files_scanned == 2
    assert [v.path for v in result.violations] == [str(root / "open" / "visible.ts")]
    assert "error while walking tree" in caplog.text


def test_followed_symlinks_are_scanned(tmp_path):
    shared = tmp_path / "shared"
    _write(shared / "util.ts", "let x: String;\n")
    root = tmp_path / "src"
    root.mkdir()
    os.symlink(shared, root / "shared")

    result = run_scan(root, load_rules())

    assert [v.rule for v in result.violations] == ["string-wrapper"]


def test_scan_tree_is_awaitable(tmp_path):
    root = tmp_path / "src"
    _write(root / "x.ts", "import { MatButtonModule } from '@angular/material';\n")

    result = asyncio.run(scan_tree(root, load_rules()))

    assert [v.rule for v in result.violations] == ["material-root-import"]
    assert result.to_dict()["passed"] is False


def test_files_are_scanned_while_the_walk_is_in_progress(tmp_path, monkeypatch):
    root = tmp_path / "src"
    first = _write(root / "first.ts", "let a: Boolean;\n")
    second = _write(root / "second.ts", "let b: Boolean;\n")
    first_reported = threading.Event()
    waits = []

    def slow_walk(_root):
        yield first
        waits.append(first_reported.wait(timeout=5))
        yield second

    monkeypatch.setattr(scanner, "walk_files", slow_walk)

    result = run_scan(root, load_rules(), on_violation=lambda violation: first_reported.set())

    assert waits == [True]
    assert result.files_scanned == 2
    assert sorted(v.path for v in result.violations) == [str(first), str(second)]
