from __future__ import annotations

"""
Unit tests for Policy Symlink Resolution.

Covers plain files, relative and absolute chains, dangling links, cycles
and the link depth limit.
"""

from pathlib import Path

import pytest

from agentspolicy.core.services.links import resolve_link_chain
from agentspolicy.domain.errors import CycleError, NotFoundError, PolicyReadError


def test_plain_file_has_no_target(tmp_path: Path) -> None:
    policy = tmp_path / "AGENTS.md"
    policy.write_text("plain", encoding="utf-8")

    target, chain = resolve_link_chain(str(policy), max_depth=40)

    assert target is None
    assert chain == ()


def test_relative_chain_is_followed_transitively(tmp_path: Path, make_symlink) -> None:
    """AGENTS.md -> middle.md -> shared/final.md resolves to final.md."""
    (tmp_path / "shared").mkdir()
    final = tmp_path / "shared" / "final.md"
    final.write_text("final", encoding="utf-8")
    make_symlink(tmp_path / "middle.md", Path("shared") / "final.md")
    make_symlink(tmp_path / "AGENTS.md", "middle.md")

    target, chain = resolve_link_chain(str(tmp_path / "AGENTS.md"), max_depth=40)

    assert target == str(final.resolve())
    assert chain == (str(tmp_path / "AGENTS.md"), str(tmp_path / "middle.md"))


def test_two_link_cycle_raises(tmp_path: Path, make_symlink) -> None:
    """A -> B -> A must fail fast instead of looping."""
    a = tmp_path / "a.md"
    b = tmp_path / "b.md"
    make_symlink(a, b)
    make_symlink(b, a)

    with pytest.raises(CycleError) as exc_info:
        resolve_link_chain(str(a), max_depth=40)

    assert exc_info.value.path == str(a)
    assert exc_info.value.chain[0] == str(a)
    assert exc_info.value.chain[-1] == str(a)


def test_self_link_is_a_cycle(tmp_path: Path, make_symlink) -> None:
    loop = tmp_path / "AGENTS.md"
    make_symlink(loop, loop)

    with pytest.raises(CycleError):
        resolve_link_chain(str(loop), max_depth=40)


def test_depth_limit_raises_cycle_error(tmp_path: Path, make_symlink) -> None:
    """Chains longer than the limit are treated like loops."""
    final = tmp_path / "final.md"
    final.write_text("x", encoding="utf-8")
    previous = final
    for i in range(5):
        link = tmp_path / f"link{i}.md"
        make_symlink(link, previous)
        previous = link

    with pytest.raises(CycleError, match="Too many levels"):
        resolve_link_chain(str(previous), max_depth=3)

    target, chain = resolve_link_chain(str(previous), max_depth=5)
    assert target == str(final.resolve())
    assert len(chain) == 5


def test_dangling_link_raises_not_found(tmp_path: Path, make_symlink) -> None:
    link = tmp_path / "AGENTS.md"
    make_symlink(link, tmp_path / "gone.md")

    with pytest.raises(NotFoundError):
        resolve_link_chain(str(link), max_depth=40)


def test_link_to_directory_raises_read_error(tmp_path: Path, make_symlink) -> None:
    folder = tmp_path / "folder"
    folder.mkdir()
    link = tmp_path / "AGENTS.md"
    make_symlink(link, folder)

    with pytest.raises(PolicyReadError):
        resolve_link_chain(str(link), max_depth=40)


def test_loop_through_directory_link_is_a_cycle(tmp_path: Path, make_symlink) -> None:
    """A target path running through a self-referencing directory link loops."""
    loopdir = tmp_path / "loopdir"
    make_symlink(loopdir, loopdir)
    repo = tmp_path / "repo"
    repo.mkdir()
    make_symlink(repo / "AGENTS.md", loopdir / "policy.md")

    with pytest.raises(CycleError) as exc_info:
        resolve_link_chain(str(repo / "AGENTS.md"), max_depth=40)

    assert exc_info.value.path == str(repo / "AGENTS.md")
    assert exc_info.value.chain[-1] == str(loopdir / "policy.md")
