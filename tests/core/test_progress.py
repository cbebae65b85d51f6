"""Tests for core/progress.py module."""

from __future__ import annotations

import pytest

from srcmodel.core.progress import (
    is_console_suppressed,
    pluralize,
    progress_bar,
    suppress_console_logs,
    task,
)


class TestPluralize:
    """Tests for pluralize()."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (2, "2 files")],
    )
    def test_regular(self, count: int, expected: str) -> None:
        assert pluralize(count, "file") == expected

    def test_irregular(self) -> None:
        assert pluralize(3, "package", "packages") == "3 packages"
        assert pluralize(1, "diagnosis", "diagnoses") == "1 diagnosis"


class TestConsoleSuppression:
    """Tests for suppress_console_logs()."""

    def test_suppressed_only_inside_block(self) -> None:
        # Given
        assert not is_console_suppressed()

        # When / Then
        with suppress_console_logs():
            assert is_console_suppressed()
        assert not is_console_suppressed()

    def test_restored_after_exception(self) -> None:
        with pytest.raises(RuntimeError), suppress_console_logs():
            raise RuntimeError("boom")

        assert not is_console_suppressed()


class TestProgressBar:
    """Non-TTY behavior (pytest captures stderr)."""

    def test_callback_accepts_updates(self) -> None:
        with progress_bar("Indexing") as on_progress:
            on_progress(1, 2)
            on_progress(2, 2)


class TestTask:
    """Tests for task()."""

    def test_reraises_failures(self) -> None:
        with pytest.raises(ValueError), task("Failing"):
            raise ValueError("nope")

    def test_success_completes(self) -> None:
        ran = []

        with task("Quick"):
            ran.append(True)

        assert ran == [True]
