from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared repository-tree fixtures used by the index and resolver tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Union

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def repo_tree(tmp_path: Path) -> Path:
    """
    Create the canonical two-level policy tree.

    Structure:
    /repo
      AGENTS.md            ("A")
      /django
        AGENTS.md          ("B")
        /app
          views.py
      /react
        app.tsx
      /scripts
        run.sh
    """
    root = tmp_path / "repo"
    (root / "django" / "app").mkdir(parents=True)
    (root / "react").mkdir()
    (root / "scripts").mkdir()

    (root / "AGENTS.md").write_text("A", encoding="utf-8")
    (root / "django" / "AGENTS.md").write_text("B", encoding="utf-8")
    (root / "django" / "app" / "views.py").write_text("", encoding="utf-8")
    (root / "react" / "app.tsx").write_text("", encoding="utf-8")
    (root / "scripts" / "run.sh").write_text("", encoding="utf-8")

    return root


@pytest.fixture
def mock_config_dict(tmp_path: Path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Mirrors the keys produced by 'agentspolicy.domain.config'.
    """
    return {
        "root_path": str(tmp_path),
        "policy_filenames": ["AGENTS.md"],
        "exclude_patterns": [r"^\.git$", r"^node_modules$"],
        "max_symlink_depth": 40,
        "encoding": "utf-8",
        "show_considered": False,
        "count_tokens": False,
        "target_model": "gpt-4o",
    }


@pytest.fixture
def make_symlink() -> Callable[[Path, Union[Path, str]], None]:
    """Return a symlink factory that skips the test where the OS refuses."""
    def _make(link: Path, target: Union[Path, str]) -> None:
        try:
            os.symlink(str(target), str(link))
        except (OSError, NotImplementedError) as e:
            pytest.skip(f"Symlinks not supported here: {e}")
    return _make
