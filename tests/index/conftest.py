"""Shared fixtures for index tests."""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

MAIN_GO = """package main

import (
	"fmt"
	"pkg"
)

func main() {
	s := pkg.NewService("demo")
	fmt.Println(s.Name())
}
"""

SERVICE_GO = """package pkg

type Service struct {
	name string
}

func NewService(name string) *Service {
	return &Service{name: name}
}

func (s *Service) Name() string {
	return s.name
}
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory(ignore_cleanup_errors=True) as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_files(temp_dir: Path) -> Callable[[dict[str, str]], Path]:
    """Write a {relative_path: content} mapping under temp_dir and return the root."""

    def _write(files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            path = temp_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return temp_dir

    return _write


@pytest.fixture
def sample_project(write_files: Callable[[dict[str, str]], Path]) -> Path:
    """main.go importing a pkg/ package that declares Service."""
    return write_files({"main.go": MAIN_GO, "pkg/service.go": SERVICE_GO})


@pytest.fixture
def sample_go_content() -> str:
    """Go source touching every declaration kind the extractor handles."""
    return """// Package shapes has a bit of everything.
package shapes

import "io"
import (
	"fmt"
	str "strings"
	_ "embed"
	`net/http`
)

type Shape interface {
	io.Reader
	Area() float64
	Scale(factor float64) (Shape, error)
}

type Base struct {
	ID int
}

type Circle struct {
	*Base
	io.Writer
	Radius, Diameter float64
	Tags             map[string][]string `json:"tags"`
}

type (
	Celsius float64
	Alias   = Circle
)

type List[T any] struct {
	items []T
}

func NewCircle(r float64) *Circle {
	return &Circle{Radius: r}
}

func Sum(prefix string, values ...int) (total int, err error) {
	return 0, nil
}

func (c *Circle) Area() float64 {
	return 3.14 * c.Radius * c.Radius
}

func (c Circle) Scale(float64) (Shape, error) {
	return c, nil
}

func (l *List[T]) Len() int {
	return len(l.items)
}

func helper() {}
"""
