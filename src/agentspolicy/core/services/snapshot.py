from __future__ import annotations

"""
Policy Snapshot Store.

Keeps the current PolicyIndex for a root and rebuilds it on demand. A
rebuild produces a brand new index and replaces the reference in a single
assignment; readers that already hold the previous index keep using it,
unchanged, so no locking is involved. Staleness is detected through a
SHA-256 fingerprint of the policy files' metadata, which is much cheaper
than reading their content.
"""

import hashlib
import logging
import os
from typing import Any, List, Optional, Sequence

from agentspolicy.core.services.filters import compile_patterns
from agentspolicy.core.services.index import PolicyIndex
from agentspolicy.core.services.resolver import resolve
from agentspolicy.core.services.scanner import yield_policy_candidates
from agentspolicy.domain.config import default_exclude_patterns, default_policy_filenames
from agentspolicy.domain.errors import PolicyReadError
from agentspolicy.domain.policy_models import ResolutionResult

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Holder of the current policy index for one repository root.

    Build options are passed straight to PolicyIndex.build().
    """

    def __init__(
            self,
            root_path: str,
            policy_filenames: Optional[Sequence[str]] = None,
            exclude_patterns: Optional[List[str]] = None,
            **build_options: Any,
    ) -> None:
        self._root = os.path.abspath(root_path)
        self._filenames = list(policy_filenames) if policy_filenames else default_policy_filenames()
        self._exclude = (
            list(exclude_patterns) if exclude_patterns is not None else default_exclude_patterns()
        )
        self._build_options = build_options

        self._index: Optional[PolicyIndex] = None
        self._fingerprint: str = ""

    @property
    def root(self) -> str:
        return self._root

    @property
    def fingerprint(self) -> str:
        """Fingerprint of the tree when the current snapshot was built."""
        return self._fingerprint

    def current(self) -> PolicyIndex:
        """Return the current snapshot, building it on first use."""
        index = self._index
        if index is None:
            index = self._swap(self._compute_fingerprint())
        return index

    def is_stale(self) -> bool:
        """Check whether policy files changed since the snapshot was built."""
        if self._index is None:
            return True
        return self._compute_fingerprint() != self._fingerprint

    def refresh(self, force: bool = False) -> bool:
        """
        Rebuild the snapshot if the tree changed (or unconditionally).

        On failure the previous snapshot stays in place and the error is
        raised to the caller.

        Args:
            force: Rebuild even if the fingerprint is unchanged.

        Returns:
            bool: True if a new snapshot was swapped in.
        """
        # Fingerprint before building so a concurrent edit forces another rebuild
        new_fingerprint = self._compute_fingerprint()
        if not force and self._index is not None and new_fingerprint == self._fingerprint:
            logger.debug(f"Policy snapshot for {self._root} is up to date.")
            return False

        self._swap(new_fingerprint)
        return True

    def resolve(self, file_path: str) -> ResolutionResult:
        """Resolve a path against the current snapshot."""
        return resolve(self.current(), file_path)

    def _swap(self, fingerprint: str) -> PolicyIndex:
        """Build a fresh index and make it the current snapshot."""
        index = PolicyIndex.build(
            self._root,
            policy_filenames=self._filenames,
            exclude_patterns=self._exclude,
            **self._build_options,
        )

        self._index = index
        self._fingerprint = fingerprint
        logger.info(f"Policy snapshot swapped for {self._root} ({len(index)} policies)")
        return index

    def _compute_fingerprint(self) -> str:
        try:
            return tree_fingerprint(self._root, self._filenames, self._exclude)
        except OSError as e:
            raise PolicyReadError(f"Cannot scan policy tree: {e}", path=self._root) from e


def tree_fingerprint(
        root_path: str,
        policy_filenames: Sequence[str],
        exclude_patterns: List[str],
) -> str:
    """
    Compute a deterministic SHA-256 over the metadata of every policy file.

    Each policy contributes its path, its lstat mtime and size and, for
    symlinks, the raw link text plus the stat of the final target. Broken
    links contribute a 'missing' marker rather than failing, so a tree that
    cannot be indexed can still be fingerprinted.

    Args:
        root_path: Repository root.
        policy_filenames: Accepted policy file names.
        exclude_patterns: Regexes for directory names to skip.

    Returns:
        str: Hexadecimal SHA-256 digest.
    """
    digest = hashlib.sha256()
    root = os.path.abspath(root_path)
    if not os.path.isdir(root):
        digest.update(f"missing-root|{root}".encode("utf-8"))
        return digest.hexdigest()

    exclude_rx = compile_patterns(exclude_patterns)
    for candidate in yield_policy_candidates(root, policy_filenames, exclude_rx):
        for name in candidate["names"]:  # type: ignore[attr-defined]
            path = os.path.join(str(candidate["directory"]), name)
            digest.update(_describe_entry(path).encode("utf-8"))
            digest.update(b"\n")

    return digest.hexdigest()


def _describe_entry(path: str) -> str:
    """Serialize the metadata fingerprinted for one policy path."""
    st = os.lstat(path)
    parts = [path, str(st.st_mtime_ns), str(st.st_size)]
    if os.path.islink(path):
        parts.append(os.readlink(path))
        try:
            target = os.stat(path)
            parts.extend([os.path.realpath(path), str(target.st_mtime_ns), str(target.st_size)])
        except OSError:
            parts.append("missing")
    return "|".join(parts)
