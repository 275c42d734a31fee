"""Tests for the lint command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from acp_lsp.__main__ import build_parser
from acp_lsp.lint import lint_files
from acp_lsp.lint.run_lint import find_lint_files, main


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "billing.ts").write_text(
        "/**\n * @acp:purpose Billing\n * @acp:lock sealed\n */\nexport {}\n", encoding="utf-8"
    )
    (tmp_path / "src" / "util.py").write_text("# @acp:mystery thing\n", encoding="utf-8")
    (tmp_path / "README.md").write_text("@acp:lock sealed\n", encoding="utf-8")
    (tmp_path / ".acp.config.json").write_text('{"version": "1.0.0"}\n', encoding="utf-8")
    (tmp_path / "node_modules" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "dep" / "index.js").write_text("// @acp:lock sealed\n", encoding="utf-8")
    return tmp_path


class TestFindFiles:
    def test_walks_directories(self, project: Path) -> None:
        names = [p.relative_to(project).as_posix() for p in find_lint_files([str(project)])]
        assert names == [".acp.config.json", "src/billing.ts", "src/util.py"]

    def test_reports_unsupported_file(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert find_lint_files([str(project / "README.md")]) == []
        assert "Not a supported" in capsys.readouterr().err


class TestLintFiles:
    def test_results_per_file(self, project: Path) -> None:
        results = {r.file_path.name: r for r in lint_files(find_lint_files([str(project)]))}
        assert results[".acp.config.json"].errors == []

        billing = results["billing.ts"]
        assert [e["code"] for e in billing.errors] == ["invalid-lock-level"]
        assert billing.errors[0]["line"] == 3
        assert billing.errors[0]["column"] == 4

        util = results["util.py"]
        assert util.errors == []
        assert [w["code"] for w in util.warnings] == ["unknown-namespace"]

    def test_unreadable_file(self, tmp_path: Path) -> None:
        missing = tmp_path / "gone.ts"
        result = lint_files([missing])[0]
        assert result.errors[0]["message"].startswith("Failed to read file")


class TestCli:
    def test_human_output_and_exit_code(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main([str(project / "src")])
        assert exc.value.code == 1
        out = capsys.readouterr().out
        assert "billing.ts:3:4: error: Invalid lock level 'sealed'." in out
        assert "[invalid-lock-level]" in out
        assert "util.py:1:3: warning: Unknown namespace 'mystery' [unknown-namespace]" in out

    def test_clean_run(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc:
            main([str(project / ".acp.config.json")])
        assert exc.value.code == 0
        assert "Lint succeeded" in capsys.readouterr().out

    def test_json_output(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main([str(project / "src"), "--format", "json"])
        report = json.loads(capsys.readouterr().out)
        assert report["files"] == 2
        assert report["errors"] == 1
        assert report["warnings"] == 1

    def test_github_actions_output(self, project: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main([str(project / "src" / "billing.ts"), "--format", "github-actions"])
        assert "::error file=" in capsys.readouterr().out

    def test_no_files(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main([str(tmp_path)])
        assert exc.value.code == 1

    def test_entry_point_parser(self) -> None:
        args = build_parser().parse_args(["lint", "src", "--format", "json"])
        assert args.command == "lint"
        assert args.paths == ["src"]
        serve = build_parser().parse_args(["serve", "--tcp", "--port", "9000"])
        assert serve.tcp and serve.port == 9000
