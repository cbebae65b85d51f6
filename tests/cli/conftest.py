"""Fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest

MAIN_GO = 'package main\n\nimport (\n\t"fmt"\n\t"pkg"\n)\n\nfunc main() { fmt.Println(pkg.NewService("x").Name()) }\n'
SERVICE_GO = (
    "package pkg\n\n"
    "type Service struct {\n\tname string\n}\n\n"
    "func NewService(name string) *Service { return &Service{name: name} }\n\n"
    "func (s *Service) Name() string { return s.name }\n"
)


@pytest.fixture
def go_project(tmp_path: Path) -> Path:
    """A two-package Go tree plus a test file."""
    root = tmp_path / "project"
    (root / "pkg").mkdir(parents=True)
    (root / "main.go").write_text(MAIN_GO)
    (root / "pkg" / "service.go").write_text(SERVICE_GO)
    (root / "pkg" / "service_test.go").write_text("package pkg_test\n\nfunc TestX() {}\n")
    return root
