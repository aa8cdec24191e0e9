from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates data directory resolution, path normalization and the ancestry
helpers used by the precedence resolver.
"""

import os
from pathlib import Path
from unittest.mock import patch

from agentspolicy.infra.fs import (
    get_user_data_dir,
    is_within,
    iter_ancestors,
    normalize_path,
    resolve_query_path,
)

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """TC-01: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "AgentsPolicy" in path


def test_get_user_data_dir_unix() -> None:
    """TC-01: Verify resolution of ~/.agentspolicy on Unix-like systems."""
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value="/home/testuser"):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert path.replace("\\", "/").endswith("/home/testuser/.agentspolicy")


def test_get_user_data_dir_tolerates_read_only_home() -> None:
    with patch("os.makedirs", side_effect=OSError("read-only")):
        path = get_user_data_dir()
    assert os.path.isabs(path)


def test_normalize_path_expansion() -> None:
    """TC-02: Verify expansion of environment variables and fallbacks."""
    with patch.dict(os.environ, {"TEST_VAR": "my_folder"}):
        path = normalize_path("$TEST_VAR/sub", fallback=".")
        assert path.lower().endswith(os.path.join("my_folder", "sub").lower())

    assert normalize_path("   ", fallback="/fallback") == os.path.abspath("/fallback")


def test_resolve_query_path_relative_to_root(tmp_path: Path) -> None:
    root = str(tmp_path)

    assert resolve_query_path("a/b.py", root) == str(tmp_path / "a" / "b.py")
    assert resolve_query_path(str(tmp_path / "x.py"), "/elsewhere") == str(tmp_path / "x.py")

# -----------------------------------------------------------------------------
# ANCESTRY TESTS
# -----------------------------------------------------------------------------

def test_is_within(tmp_path: Path) -> None:
    root = str(tmp_path / "repo")

    assert is_within(str(tmp_path / "repo" / "a.py"), root)
    assert is_within(root, root)
    assert not is_within(str(tmp_path / "repository" / "a.py"), root)
    assert not is_within(str(tmp_path / "a.py"), root)


def test_iter_ancestors_nearest_first(tmp_path: Path) -> None:
    root = tmp_path / "repo"
    chain = list(iter_ancestors(str(root / "a" / "b" / "c.py"), str(root)))

    assert chain == [str(root / "a" / "b"), str(root / "a"), str(root)]


def test_iter_ancestors_outside_root_is_empty(tmp_path: Path) -> None:
    assert list(iter_ancestors(str(tmp_path / "other" / "c.py"), str(tmp_path / "repo"))) == []
    assert list(iter_ancestors(str(tmp_path / "repo"), str(tmp_path / "repo"))) == []
