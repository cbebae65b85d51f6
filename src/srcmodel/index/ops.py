"""High-level orchestration of one indexing run.

This module implements the IndexCoordinator, the entry point for building a
ProjectModel from a directory:

    config -> FileWalker -> Aggregator -> RelationDetector -> IndexResult

A coordinator runs at most one index at a time; the model of each run is
independent of every other run.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from srcmodel.config.models import SrcModelConfig
from srcmodel.core.logging import clear_run_id, set_run_id
from srcmodel.index._internal.discovery import FileWalker
from srcmodel.index._internal.discovery.walker import ProgressCallback
from srcmodel.index._internal.indexing import Aggregator, RelationDetector, get_policy
from srcmodel.index.models import Diagnostic, ProjectModel

log = structlog.get_logger(__name__)


@dataclass
class IndexStats:
    """Statistics from an indexing run."""

    files_seen: int = 0
    files_indexed: int = 0
    files_failed: int = 0
    files_skipped: int = 0
    packages: int = 0
    types: int = 0
    functions: int = 0
    methods: int = 0
    relations: int = 0
    duration_seconds: float = 0.0


@dataclass
class IndexResult:
    """Model, diagnostics and stats of one run."""

    model: ProjectModel
    diagnostics: list[Diagnostic] = field(default_factory=list)
    stats: IndexStats = field(default_factory=IndexStats)
    run_id: str | None = None

    @property
    def diagnostic_pairs(self) -> list[tuple[str, str]]:
        return [d.as_pair() for d in self.diagnostics]


class IndexCoordinator:
    """
    Builds a ProjectModel for one root directory.

    Usage::

        coordinator = IndexCoordinator(Path("."), config)
        result = coordinator.run()
        result.model.get_type("pkg", "Service")
    """

    def __init__(
        self,
        root: Path,
        config: SrcModelConfig | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.root = Path(root)
        self.config = config or SrcModelConfig()
        self.cancel_event = cancel_event or threading.Event()
        self._run_lock = threading.Lock()

    def cancel(self) -> None:
        """Request cancellation; takes effect before the next file."""
        self.cancel_event.set()

    def run(self, *, on_progress: ProgressCallback | None = None) -> IndexResult:
        """Index the root.

        Raises:
            IndexingError: Root missing or not a directory, or cancelled.
        """
        with self._run_lock:
            run_id = set_run_id()
            try:
                return self._run(run_id, on_progress)
            finally:
                clear_run_id()

    def _run(self, run_id: str, on_progress: ProgressCallback | None) -> IndexResult:
        indexer_cfg = self.config.indexer
        start = time.perf_counter()
        log.info(
            "index_started",
            root=str(self.root),
            workers=indexer_cfg.max_workers,
            attach_mode=indexer_cfg.attach_mode,
            duplicate_policy=indexer_cfg.duplicate_policy,
        )

        aggregator = Aggregator(duplicate_policy=get_policy(indexer_cfg.duplicate_policy))
        walker = FileWalker(
            self.root,
            self.config.index,
            max_workers=indexer_cfg.max_workers,
            cancel_event=self.cancel_event,
            on_progress=on_progress,
        )
        walk_stats = walker.walk(aggregator, attach_mode=indexer_cfg.attach_mode)
        diagnostics = aggregator.diagnostics
        model = aggregator.finish()

        relation_count = 0
        if indexer_cfg.detect_relations:
            relation_count = RelationDetector(model).detect().total

        stats = IndexStats(
            files_seen=walk_stats.files_seen,
            files_indexed=walk_stats.files_indexed,
            files_failed=walk_stats.files_failed,
            files_skipped=walk_stats.files_skipped,
            packages=len(model.packages),
            types=sum(1 for _ in model.iter_types()),
            functions=sum(1 for _ in model.iter_functions()),
            methods=sum(1 for _ in model.iter_methods()),
            relations=relation_count,
            duration_seconds=time.perf_counter() - start,
        )
        log.info(
            "index_complete",
            files=stats.files_indexed,
            failed=stats.files_failed,
            packages=stats.packages,
            types=stats.types,
            diagnostics=len(diagnostics),
            parse_ms=walk_stats.parse_time_ms,
            duration_s=round(stats.duration_seconds, 3),
        )
        return IndexResult(model=model, diagnostics=diagnostics, stats=stats, run_id=run_id)


def index_project(
    root: Path | str,
    config: SrcModelConfig | None = None,
    *,
    cancel_event: threading.Event | None = None,
    on_progress: ProgressCallback | None = None,
) -> IndexResult:
    """Index ``root`` and return its model with diagnostics."""
    coordinator = IndexCoordinator(Path(root), config, cancel_event=cancel_event)
    return coordinator.run(on_progress=on_progress)
