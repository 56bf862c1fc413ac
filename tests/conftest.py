"""Pytest configuration and fixtures."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_project(temp_dir: Path):
    """Create a small project with dependency bloat next to its source."""
    project = temp_dir / "test-project"
    project.mkdir()

    node_modules = project / "node_modules"
    node_modules.mkdir()
    (node_modules / "x.js").write_text("x" * 500)

    src = project / "src"
    src.mkdir()
    (src / "index.js").write_text("y" * 40)

    yield project


@pytest.fixture
def bloated_project(temp_dir: Path):
    """Create a project with several kinds of bloat, binaries and large files."""
    project = temp_dir / "bloated"
    project.mkdir()

    # Dependencies and build output
    (project / "node_modules" / "lodash").mkdir(parents=True)
    (project / "node_modules" / "lodash" / "index.js").write_text("a" * 4000)
    (project / "dist").mkdir()
    (project / "dist" / "bundle.js").write_text("b" * 1200)
    (project / "dist" / "bundle.css").write_text("c" * 800)

    # Lock file and logs
    (project / "package-lock.json").write_text("d" * 2000)
    (project / "server.log").write_text("e" * 100)

    # IDE config (medium priority)
    (project / ".vscode").mkdir()
    (project / ".vscode" / "settings.json").write_text("{}")

    # Source and a large unclassified file
    (project / "src").mkdir()
    (project / "src" / "app.js").write_text("f" * 400)
    (project / "report.txt").write_text("g" * 41000)

    # Binary
    (project / "logo.png").write_bytes(b"\x89PNG" + b"\x00" * 1996)

    # Version control metadata is always ignored
    (project / ".git").mkdir()
    (project / ".git" / "HEAD").write_text("ref: refs/heads/main\n")

    (project / "package.json").write_text('{"name": "bloated"}')

    yield project
