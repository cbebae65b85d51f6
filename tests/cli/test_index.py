"""Tests for srcmodel index command."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from srcmodel.cli.main import cli

runner = CliRunner()


class TestIndexOutput:
    """Output formats."""

    def test_summary_lists_packages(self, go_project: Path) -> None:
        # When
        result = runner.invoke(cli, ["index", str(go_project)])

        # Then
        assert result.exit_code == 0, result.output
        assert "Indexed 3 files into 3 packages" in result.output
        assert "main" in result.output
        assert "pkg_test" in result.output

    def test_json_output(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["imports"]["main"] == ["fmt", "pkg"]
        assert "Name" in data["packages"]["pkg"]["types"]["Service"]["methods"]

    def test_yaml_output(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--format", "yaml"])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load(result.output)
        assert "NewService" in data["packages"]["pkg"]["functions"]

    def test_output_file(self, go_project: Path, tmp_path: Path) -> None:
        # Given
        out = tmp_path / "model.json"

        # When
        result = runner.invoke(cli, ["index", str(go_project), "--format", "json", "--output", str(out)])

        # Then
        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text())["stats"]["packages"] == 3

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "srcmodel" in result.output


class TestIndexOptions:
    """Flags map onto configuration."""

    def test_exclude_tests(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--format", "json", "--exclude-tests"])

        assert result.exit_code == 0, result.output
        assert sorted(json.loads(result.output)["packages"]) == ["main", "pkg"]

    def test_no_relations(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--format", "json", "--no-relations"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["relations"] == {}

    def test_single_pass_reports_dropped_method(self, tmp_path: Path) -> None:
        # Given
        root = tmp_path / "late"
        root.mkdir()
        (root / "a.go").write_text("package p\n\nfunc (t *T) M() {}\n")
        (root / "b.go").write_text("package p\n\ntype T struct{}\n")

        # When
        result = runner.invoke(cli, ["index", str(root), "--single-pass"])

        # Then
        assert result.exit_code == 0, result.output
        assert "unresolved_receiver" in result.output

    def test_parallel_workers(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--format", "json", "--workers", "3"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["stats"]["files_indexed"] == 3

    def test_zero_workers_is_a_usage_error(self, go_project: Path) -> None:
        result = runner.invoke(cli, ["index", str(go_project), "--workers", "0"])

        assert result.exit_code == 2


class TestIndexErrors:
    """Fatal errors exit non-zero; diagnostics do not."""

    def test_missing_root_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["index", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "INDEX_ROOT_NOT_FOUND" in result.output

    def test_root_is_a_file_fails_with_summary_format(self, tmp_path: Path) -> None:
        # Given
        file_root = tmp_path / "main.go"
        file_root.write_text("package main\n")

        # When
        result = runner.invoke(cli, ["index", str(file_root), "--format", "summary"])

        # Then
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "INDEX_ROOT_NOT_DIRECTORY" in result.output

    def test_invalid_repo_config_fails(self, go_project: Path) -> None:
        # Given
        config_dir = go_project / ".srcmodel"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("indexer:\n  max_workers: 0\n")

        # When
        result = runner.invoke(cli, ["index", str(go_project)])

        # Then
        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_diagnostics_are_not_fatal(self, tmp_path: Path) -> None:
        root = tmp_path / "mixed"
        root.mkdir()
        (root / "ok.go").write_text("package ok\n")
        (root / "nopkg.go").write_text("type X int\n")

        result = runner.invoke(cli, ["index", str(root)])

        assert result.exit_code == 0, result.output
        assert "missing_package" in result.output
