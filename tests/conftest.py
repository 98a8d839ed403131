"""Pytest fixtures for livasense tests."""

import tempfile
from pathlib import Path

import pytest


OUTLINE_SOURCE = """\
const MAX_SIZE = 100

add(a: number, b: number): number => a + b

Point : Measurable {
    x: number
    y: number

    length(): number {
        return x + y
    }
}
"""

SHAPES_SOURCE = """\
// Shapes and the things that draw them
Shape {
    area(): float
    name(): string
}

Drawable {
    draw(canvas: Canvas)
}

Circle : Shape, Drawable {
    radius: float

    constructor(radius: float) {
        this.radius = radius
    }

    area(): float => 3.14 * radius * radius

    draw(canvas: Canvas) {
        canvas.circle(radius)
    }
}

main() {
    let c = Circle(2.0)
    let value, err = divide(10, 2)
    print(c.area())
}
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def data_dir(temp_dir, monkeypatch):
    """Point the settings store at an empty temporary directory."""
    path = temp_dir / "data"
    monkeypatch.setenv("LIVASENSE_DATA_DIR", str(path))
    return path


@pytest.fixture
def outline_source():
    """A constant, a function and a class with two fields and one method.

    The class names an interface declared elsewhere.
    """
    return OUTLINE_SOURCE


@pytest.fixture
def shapes_source():
    """Two interfaces and a class implementing both, plus a main function."""
    return SHAPES_SOURCE


@pytest.fixture
def liva_file(temp_dir, shapes_source):
    """Write the shapes source to a .liva file."""
    path = temp_dir / "shapes.liva"
    path.write_text(shapes_source)
    return path
