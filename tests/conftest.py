"""Shared pytest fixtures for the layoutgen test suite.

Provides reusable fixtures for:
- Specification documents as text (single rust project, multi-project)
- Parsed specifications
- Temporary working directories holding a ``layout.yml``
- A mocked git cloner
"""

from __future__ import annotations

import textwrap
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from layoutgen.scaffolder.clone import GitCloner
from layoutgen.spec.models import LayoutSpec
from layoutgen.spec.parser import parse_string


# ---------------------------------------------------------------------------
# Specification text
# ---------------------------------------------------------------------------

RUST_APP_SPEC = textwrap.dedent("""\
    - name: app
      root: true
      lang: rust
      tree:
        - name: src
          file:
            - name: main
          tree:
            - name: domain
              file:
                - name: model
""")

MULTI_PROJECT_SPEC = textwrap.dedent("""\
    # Workspace layout
    - name: api
      lang: python
      file:
        - name: main
      tree:
        - name: handlers
          file:
            - name: users
            - name: orders

    - name: web
      lang: typescript
      tree:
        - name: src
          file:
            - name: index
            - name: app
""")


@pytest.fixture
def rust_spec_text() -> str:
    """The single-project rust layout used across scenarios."""
    return RUST_APP_SPEC


@pytest.fixture
def rust_spec() -> LayoutSpec:
    return parse_string(RUST_APP_SPEC)


@pytest.fixture
def multi_spec_text() -> str:
    """Two sub-projects (python + typescript) with a leading comment."""
    return MULTI_PROJECT_SPEC


@pytest.fixture
def multi_spec() -> LayoutSpec:
    return parse_string(MULTI_PROJECT_SPEC)


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Temporary working directory (auto-cleanup)."""
    work_dir = tmp_path / "workspace"
    work_dir.mkdir()
    yield work_dir


@pytest.fixture
def rust_workspace(workspace: Path) -> Path:
    """Working directory with the rust layout written to ``layout.yml``."""
    (workspace / "layout.yml").write_text(RUST_APP_SPEC, encoding="utf-8")
    return workspace


@pytest.fixture(autouse=True)
def clean_layoutgen_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep LAYOUTGEN_* variables from the caller's shell out of the tests."""
    for name in (
        "LAYOUTGEN_SPEC",
        "LAYOUTGEN_BASE_DIR",
        "LAYOUTGEN_GIT",
        "LAYOUTGEN_CLONE_TIMEOUT",
        "LAYOUTGEN_VERBOSE",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_cloner() -> MagicMock:
    """A ``GitCloner`` stand-in whose ``clone`` does nothing."""
    return MagicMock(spec=GitCloner)
