"""Source file enumeration and per-file extraction.

The walker is the only component that touches the filesystem. It:

1. validates the root (fatal ``IndexingError`` before any file is read),
2. enumerates source files in sorted order, pruning dependency/VCS dirs,
3. extracts each file, sequentially or on a thread pool,
4. feeds the facts to an ``Aggregator`` from the calling thread only.

Per-file failures become diagnostics; enumeration always continues.
"""

from __future__ import annotations

import os
import threading
import time
from collections import deque
from collections.abc import Callable, Iterator
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from srcmodel.config.models import AttachMode, IndexConfig
from srcmodel.core.errors import IndexingError
from srcmodel.core.excludes import build_prune_set
from srcmodel.index._internal.extraction import ExtractorRegistry, get_registry
from srcmodel.index._internal.indexing.aggregator import Aggregator
from srcmodel.index.models import DiagnosticKind, FileFacts

log = structlog.get_logger(__name__)

ProgressCallback = Callable[[int, int], None]

_TEST_SUFFIX = "_test"


@dataclass
class ExtractionResult:
    """Result of extracting facts from a single file."""

    file_path: str  # Root-relative, POSIX separators
    facts: FileFacts | None = None
    error: str | None = None
    parse_time_ms: int = 0


@dataclass
class WalkStats:
    """Counters for one walk."""

    files_seen: int = 0
    files_indexed: int = 0
    files_failed: int = 0
    files_skipped: int = 0
    parse_time_ms: int = 0
    skipped: list[str] = field(default_factory=list)
    unreadable_dirs: list[tuple[str, str]] = field(default_factory=list)  # (rel dir, reason)


def _extract_file(
    root: Path,
    file_path: str,
    registry: ExtractorRegistry,
    strict_syntax: bool,
) -> ExtractionResult:
    """Read and extract one file (worker function). Never raises."""
    start = time.monotonic()
    result = ExtractionResult(file_path=file_path)
    try:
        full_path = root / file_path
        extractor = registry.get_for_path(full_path)
        if extractor is None:
            result.error = str(IndexingError.unsupported_file(file_path))
            return result

        content = full_path.read_bytes()
        facts = extractor.extract(full_path, content)

        if facts.error_count:
            if strict_syntax:
                result.error = f"syntax errors: {facts.error_count} error node(s) in parse tree"
                return result
            log.debug("file_parse_errors", file=file_path, error_count=facts.error_count)
        result.facts = facts
    except Exception as e:
        result.error = f"{type(e).__name__}: {e}"
    finally:
        result.parse_time_ms = int((time.monotonic() - start) * 1000)
    return result


class FileWalker:
    """Enumerates and extracts the source files under one root.

    Usage::

        walker = FileWalker(root, config.index, max_workers=4)
        stats = walker.walk(aggregator)
    """

    def __init__(
        self,
        root: Path,
        config: IndexConfig | None = None,
        *,
        max_workers: int = 1,
        registry: ExtractorRegistry | None = None,
        cancel_event: threading.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.root = Path(root)
        self.config = config or IndexConfig()
        self.max_workers = max(1, max_workers)
        self._registry = registry or get_registry()
        self._cancel_event = cancel_event
        self._on_progress = on_progress
        self._prune = build_prune_set(self.config.excluded_dirs, self.config.included_dirs)
        self._extensions = frozenset(self.config.extensions)
        self._max_bytes = self.config.max_file_size_mb * 1024 * 1024

    # -- enumeration -----------------------------------------------------

    def check_root(self) -> None:
        """Raise if the root is missing, not a directory, or unreadable."""
        if not self.root.exists():
            raise IndexingError.root_not_found(str(self.root))
        if not self.root.is_dir():
            raise IndexingError.root_not_directory(str(self.root))
        try:
            with os.scandir(self.root):
                pass
        except OSError as e:
            raise IndexingError.root_unreadable(str(self.root), e.strerror or type(e).__name__) from e

    def _accept(self, rel_path: str, full_path: Path, stats: WalkStats) -> bool:
        suffix = full_path.suffix.lower()
        if suffix not in self._extensions:
            return False
        if not self.config.include_test_files and full_path.stem.endswith(_TEST_SUFFIX):
            stats.files_skipped += 1
            stats.skipped.append(rel_path)
            return False
        try:
            size = full_path.stat().st_size
        except OSError:
            # Let extraction report it
            return True
        if size > self._max_bytes:
            log.info("file_skipped_too_large", file=rel_path, size=size, limit=self._max_bytes)
            stats.files_skipped += 1
            stats.skipped.append(rel_path)
            return False
        return True

    def discover(self, stats: WalkStats | None = None) -> list[str]:
        """Return root-relative POSIX paths of source files, sorted."""
        self.check_root()
        stats = stats if stats is not None else WalkStats()
        results: list[str] = []

        def _on_walk_error(err: OSError) -> None:
            rel_dir = self._relative(err.filename)
            reason = f"directory unreadable: {type(err).__name__}: {err.strerror or err}"
            log.warning("dir_unreadable", dir=rel_dir, error=reason)
            stats.unreadable_dirs.append((rel_dir, reason))

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in self._prune)
            rel_dir = Path(dirpath).relative_to(self.root)
            for filename in filenames:
                full_path = Path(dirpath) / filename
                rel_path = (rel_dir / filename).as_posix()
                if not full_path.is_file():
                    continue
                if self._accept(rel_path, full_path, stats):
                    results.append(rel_path)
        results.sort()
        return results

    def _relative(self, path: str | os.PathLike[str] | None) -> str:
        if path is None:
            return "."
        try:
            return Path(path).relative_to(self.root).as_posix()
        except ValueError:
            return Path(path).as_posix()

    # -- extraction --------------------------------------------------------

    def _cancelled(self) -> bool:
        return self._cancel_event is not None and self._cancel_event.is_set()

    def _sequential_extract(self, file_paths: list[str]) -> Iterator[ExtractionResult]:
        for done, path in enumerate(file_paths):
            if self._cancelled():
                raise IndexingError.cancelled(done)
            yield _extract_file(self.root, path, self._registry, self.config.strict_syntax)

    def _parallel_extract(self, file_paths: list[str]) -> Iterator[ExtractionResult]:
        """Extract on a thread pool, yielding in submission order.

        At most ``2 * max_workers`` files are in flight so cancellation
        takes effect promptly.
        """
        window = self.max_workers * 2
        pending: deque[Future[ExtractionResult]] = deque()
        remaining = iter(file_paths)
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="srcmodel-extract")
        try:
            for path in remaining:
                pending.append(
                    executor.submit(_extract_file, self.root, path, self._registry, self.config.strict_syntax)
                )
                if len(pending) >= window:
                    break
            done = 0
            while pending:
                if self._cancelled():
                    raise IndexingError.cancelled(done)
                result = pending.popleft().result()
                next_path = next(remaining, None)
                if next_path is not None:
                    pending.append(
                        executor.submit(
                            _extract_file, self.root, next_path, self._registry, self.config.strict_syntax
                        )
                    )
                done += 1
                yield result
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def extract_all(self, file_paths: list[str]) -> Iterator[ExtractionResult]:
        if self.max_workers == 1 or len(file_paths) <= 1:
            return self._sequential_extract(file_paths)
        return self._parallel_extract(file_paths)

    # -- aggregation -------------------------------------------------------

    def walk(self, aggregator: Aggregator, *, attach_mode: AttachMode = "two_pass") -> WalkStats:
        """Enumerate, extract and aggregate every source file under the root.

        Raises:
            IndexingError: Root missing, not a directory or unreadable, or the run
                was cancelled.
        """
        stats = WalkStats()
        file_paths = self.discover(stats)
        stats.files_seen = len(file_paths)
        total = len(file_paths)
        log.debug("walk_started", root=str(self.root), files=total, workers=self.max_workers)

        for rel_dir, reason in stats.unreadable_dirs:
            aggregator.add_diagnostic(rel_dir, reason, DiagnosticKind.EXTRACTION_FAILED)

        registered: list[tuple[str, FileFacts]] = []
        for done, result in enumerate(self.extract_all(file_paths), start=1):
            stats.parse_time_ms += result.parse_time_ms
            if result.facts is None:
                stats.files_failed += 1
                log.warning("file_extraction_failed", file=result.file_path, error=result.error)
                aggregator.add_diagnostic(
                    result.file_path,
                    result.error or "extraction failed",
                    DiagnosticKind.EXTRACTION_FAILED,
                )
            else:
                stats.files_indexed += 1
                if attach_mode == "single_pass":
                    aggregator.merge(result.file_path, result.facts)
                else:
                    aggregator.register(result.file_path, result.facts)
                    registered.append((result.file_path, result.facts))
            if self._on_progress is not None:
                self._on_progress(done, total)

        for file_path, facts in registered:
            aggregator.attach(file_path, facts)
        return stats
