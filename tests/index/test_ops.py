"""End-to-end tests for index_project / IndexCoordinator (index/ops.py)."""

from __future__ import annotations

import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog
from structlog.testing import capture_logs

from srcmodel.config.models import IndexerConfig, SrcModelConfig
from srcmodel.core.errors import ErrorCode, IndexingError
from srcmodel.index import IndexCoordinator, index_project
from srcmodel.index.models import DiagnosticKind, TypeKind


class TestEndToEnd:
    """main.go + pkg/service.go."""

    def test_two_packages_with_service_type_and_constructor(self, sample_project: Path) -> None:
        # Given
        root = sample_project

        # When
        result = index_project(root)
        model = result.model

        # Then
        assert sorted(model.packages) == ["main", "pkg"]

        service = model.get_type("pkg", "Service")
        assert service is not None
        assert service.kind is TypeKind.STRUCT
        assert service.fields == {"name": "string"}
        assert list(service.methods) == ["Name"]
        assert service.methods["Name"].returns == ["string"]

        pkg_functions = model.packages["pkg"].functions
        assert list(pkg_functions) == ["NewService"]
        assert pkg_functions["NewService"].returns == ["*Service"]

        assert model.imports["main"] == ["fmt", "pkg"]
        assert "main" in model.packages["main"].functions
        assert result.diagnostics == []

    def test_stats(self, sample_project: Path) -> None:
        result = index_project(sample_project)

        assert result.stats.files_seen == 2
        assert result.stats.files_indexed == 2
        assert result.stats.files_failed == 0
        assert result.stats.packages == 2
        assert result.stats.types == 1
        assert result.stats.functions == 2
        assert result.stats.methods == 1
        assert result.run_id

    def test_relations_detected_by_default(self, sample_project: Path) -> None:
        result = index_project(sample_project)

        assert result.model.relation_pairs("depends_on") == [("main", "pkg")]

    def test_relations_can_be_disabled(self, sample_project: Path) -> None:
        config = SrcModelConfig(indexer=IndexerConfig(detect_relations=False))

        result = index_project(sample_project, config)

        assert result.model.relations == {}
        assert result.stats.relations == 0

    def test_single_pass_mode_drops_method_declared_before_type(
        self, write_files: Callable[[dict[str, str]], Path]
    ) -> None:
        # Given
        root = write_files(
            {
                "svc/a_name.go": "package svc\n\nfunc (s *Service) Name() string { return \"\" }\n",
                "svc/b_type.go": "package svc\n\ntype Service struct{}\n",
            }
        )
        config = SrcModelConfig(indexer=IndexerConfig(attach_mode="single_pass"))

        # When
        result = index_project(root, config)

        # Then
        assert result.model.get_type("svc", "Service").methods == {}
        assert result.diagnostic_pairs[0][0] == "svc/a_name.go"
        assert result.diagnostics[0].kind is DiagnosticKind.UNRESOLVED_RECEIVER

    def test_diagnostics_do_not_abort_the_run(self, write_files: Callable[[dict[str, str]], Path]) -> None:
        root = write_files({"ok.go": "package ok\n", "nopkg.go": "type X int\n"})

        result = index_project(root)

        assert list(result.model.packages) == ["ok"]
        assert result.diagnostic_pairs == [("nopkg.go", "no package clause; file ignored")]


    def test_completion_event_reports_counts_and_parse_time(self, sample_project: Path) -> None:
        # Given
        structlog.reset_defaults()

        # When
        with capture_logs() as logs:
            result = index_project(sample_project)

        # Then
        complete = next(e for e in logs if e["event"] == "index_complete")
        assert complete["files"] == result.stats.files_indexed
        assert isinstance(complete["parse_ms"], int)
        assert complete["parse_ms"] >= 0


class TestFatalErrors:
    """Run-level failures raise IndexingError."""

    def test_missing_root_is_fatal(self, temp_dir: Path) -> None:
        with pytest.raises(IndexingError) as exc_info:
            index_project(temp_dir / "does-not-exist")
        assert exc_info.value.code == ErrorCode.INDEX_ROOT_NOT_FOUND

    def test_cancelled_run(self, sample_project: Path) -> None:
        # Given
        coordinator = IndexCoordinator(sample_project)

        # When
        coordinator.cancel()

        # Then
        with pytest.raises(IndexingError) as exc_info:
            coordinator.run()
        assert exc_info.value.code == ErrorCode.INDEX_CANCELLED

    def test_unreadable_root_is_fatal(self, sample_project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        real_scandir = os.scandir

        def scandir(path: str | os.PathLike[str] = ".") -> Any:
            if Path(path) == sample_project:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)

        with pytest.raises(IndexingError) as exc_info:
            index_project(sample_project)
        assert exc_info.value.code == ErrorCode.INDEX_ROOT_UNREADABLE
        assert exc_info.value.details["reason"] == "Permission denied"

    def test_external_cancel_event(self, sample_project: Path) -> None:
        event = threading.Event()
        event.set()

        with pytest.raises(IndexingError):
            index_project(sample_project, cancel_event=event)


class TestIndependentRuns:
    """Each run builds its own model."""

    def test_two_runs_do_not_share_state(self, sample_project: Path) -> None:
        first = index_project(sample_project)
        second = index_project(sample_project)

        assert first.model is not second.model
        assert first.model.imports["main"] == second.model.imports["main"] == ["fmt", "pkg"]
        assert first.run_id != second.run_id
