"""Pytest configuration and fixtures for taggo tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from taggo.syntax import Position


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Keep the user's ~/.taggo/config.toml out of every test."""
    monkeypatch.setattr("taggo.config_manager.CONFIG_FILE", tmp_path / "no-config" / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Go project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def pos():
    """Factory for positions in a fake file."""

    def _pos(line: int, column: int = 1, filename: str = "fake.go") -> Position:
        return Position(filename, line, column)

    return _pos


@pytest.fixture
def point_go(temp_dir: Path) -> Path:
    """A Go file with a struct on line 3 and a pointer-receiver method on line 10."""
    source = (
        "package geo\n"
        "\n"
        "type Point struct { X int; Y int }\n"
        "\n"
        "const MaxRetries = 5\n"
        "\n"
        "var zero Point\n"
        "\n"
        "// String renders the point.\n"
        "func (p *Point) String() string {\n"
        "\treturn \"\"\n"
        "}\n"
    )
    path = temp_dir / "point.go"
    path.write_text(source)
    return path


@pytest.fixture
def sample_go_code() -> str:
    """Go source exercising every declaration shape the classifier handles."""
    return '''package shapes

import "math"

type Circle struct {
	Radius float64
	Center, Edge Point
	*Embedded
	Label string `json:"label"`
}

type Shape interface {
	Area() float64
	Perimeter() float64
	Named
}

type List[T any] struct {
	items []T
}

func (l *List[T]) Len() int { return len(l.items) }

func (Circle) Kind() string { return "circle" }

type (
	Meters float64
	Lookup map[string]int
)

var Pi, E = math.Pi, math.E

func Area(c Circle) float64 {
	type local struct{ hidden int }
	var scratch = 1
	_ = scratch
	return Pi * c.Radius * c.Radius
}
'''
