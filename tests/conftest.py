"""Shared pytest fixtures for licaudit tests.

Fixtures are organized by category:
- Path fixtures: Source roots and license output directories
- Source tree fixtures: Dependency trees with license files on disk
- Configuration fixtures: Config dictionaries for various scenarios
"""

import logging
from pathlib import Path
from typing import Any

import pytest

from licaudit.analyzers import reset_registry
from tests.fixtures import APACHE_TEXT, BSD3_TEXT, MIT_TEXT, write_tree

# =============================================================================
# Registry isolation
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_registry():
    """Give each test its own global tool registry."""
    reset_registry()
    yield
    reset_registry()


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers the CLI attached to streams that no longer exist."""
    yield
    logger = logging.getLogger("licaudit")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def source_root(tmp_path: Path) -> Path:
    """Return an empty source root (the equivalent of $GOPATH/src)."""
    root = tmp_path / "gopath" / "src"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def licenses_dir(tmp_path: Path) -> Path:
    """Return a path for dumped license files (not yet created)."""
    return tmp_path / "licenses"


# =============================================================================
# Source Tree Fixtures
# =============================================================================


@pytest.fixture
def sample_tree(source_root: Path) -> Path:
    """Create a source tree with nested and sibling repositories.

    Layout:
        example.com/x/a/LICENSE            (MIT)
        example.com/x/a/sub/sub.go         (no license)
        example.com/x/a/vendored/LICENSE   (BSD-3-Clause)
        example.com/x/b/LICENSE            (Apache-2.0)
        example.com/x/b/NOTICE-LICENSE-X   (not a license file name)
        example.com/x/b/internal/util/u.go (no license)
        example.com/nolicense/pkg/p.go     (no license anywhere)
    """
    write_tree(
        source_root,
        {
            "example.com/x/a/LICENSE": MIT_TEXT,
            "example.com/x/a/a.go": "package a\n",
            "example.com/x/a/sub/sub.go": "package sub\n",
            "example.com/x/a/vendored/LICENSE": BSD3_TEXT,
            "example.com/x/b/LICENSE": APACHE_TEXT,
            "example.com/x/b/NOTICE-LICENSE-X": "not matched\n",
            "example.com/x/b/internal/util/u.go": "package util\n",
            "example.com/nolicense/pkg/p.go": "package pkg\n",
        },
    )
    return source_root


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid licaudit configuration."""
    return {"output": {"format": "json"}}


@pytest.fixture
def full_config(tmp_path: Path) -> dict[str, Any]:
    """Return a complete licaudit configuration with all options."""
    return {
        "output": {
            "format": "csv",
            "licenses_dir": str(tmp_path / "licenses"),
        },
        "tools": {
            "collector": "go",
            "classifier": "heuristic",
            "vcs": "git",
            "timeout": 60,
        },
        "search": {
            "source_roots": [str(tmp_path / "gopath" / "src")],
        },
    }
