from __future__ import annotations

"""
Unit tests for the Policy Snapshot Store.

Verifies lazy first build, fingerprint-based staleness, atomic swaps that
leave old snapshots untouched, and failure isolation.
"""

import os
from pathlib import Path

import pytest

from agentspolicy.core.services.resolver import resolve
from agentspolicy.core.services.snapshot import SnapshotStore, tree_fingerprint
from agentspolicy.domain.errors import CycleError, NotFoundError


def _bump_mtime(path: Path) -> None:
    """Move a file's mtime forward so the change is visible on coarse clocks."""
    st = path.stat()
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 5_000_000_000))


def test_current_builds_on_first_use(repo_tree: Path) -> None:
    store = SnapshotStore(str(repo_tree))

    assert store.is_stale()
    index = store.current()

    assert len(index) == 2
    assert store.fingerprint
    assert store.current() is index


def test_first_build_failure_propagates_and_leaves_store_empty(tmp_path: Path) -> None:
    store = SnapshotStore(str(tmp_path / "missing"))

    with pytest.raises(NotFoundError):
        store.current()

    assert store.fingerprint == ""
    assert store.is_stale()


def test_fingerprint_is_stable_for_unchanged_tree(repo_tree: Path) -> None:
    names, exclude = ["AGENTS.md"], []

    assert tree_fingerprint(str(repo_tree), names, exclude) == tree_fingerprint(str(repo_tree), names, exclude)


def test_refresh_without_changes_keeps_snapshot(repo_tree: Path) -> None:
    store = SnapshotStore(str(repo_tree))
    index = store.current()

    assert store.refresh() is False
    assert store.current() is index
    assert not store.is_stale()


def test_edit_triggers_swap_and_old_readers_keep_their_view(repo_tree: Path) -> None:
    store = SnapshotStore(str(repo_tree))
    old = store.current()

    policy = repo_tree / "django" / "AGENTS.md"
    policy.write_text("B2 with more text", encoding="utf-8")
    _bump_mtime(policy)

    assert store.is_stale()
    assert store.refresh() is True

    new = store.current()
    assert new is not old
    assert resolve(new, "django/views.py").content == "B2 with more text"
    assert resolve(old, "django/views.py").content == "B"


def test_new_policy_file_is_detected(repo_tree: Path) -> None:
    store = SnapshotStore(str(repo_tree))
    store.current()

    (repo_tree / "react" / "AGENTS.md").write_text("R", encoding="utf-8")

    assert store.is_stale()
    store.refresh()
    assert store.resolve("react/app.tsx").content == "R"


def test_forced_refresh_always_swaps(repo_tree: Path) -> None:
    store = SnapshotStore(str(repo_tree))
    first = store.current()

    assert store.refresh(force=True) is True
    assert store.current() is not first


def test_failed_rebuild_keeps_previous_snapshot(repo_tree: Path, make_symlink) -> None:
    store = SnapshotStore(str(repo_tree))
    good = store.current()

    (repo_tree / "loop").mkdir()
    make_symlink(repo_tree / "loop" / "AGENTS.md", repo_tree / "loop" / "AGENTS.md")

    with pytest.raises(CycleError):
        store.refresh()

    assert store.current() is good


def test_build_options_are_forwarded(repo_tree: Path) -> None:
    (repo_tree / "react" / "CLAUDE.md").write_text("R", encoding="utf-8")
    store = SnapshotStore(str(repo_tree), policy_filenames=["AGENTS.md", "CLAUDE.md"], encoding="utf-8")

    assert store.resolve("react/app.tsx").content == "R"
