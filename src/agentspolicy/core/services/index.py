from __future__ import annotations

"""
Policy Index.

Builds an immutable mapping from directory path to PolicyFile by scanning a
repository tree for files named by convention. Symlinked policies are
resolved and their content is loaded eagerly during the build, so a built
index never touches the filesystem again and can be shared freely between
readers. The build is all-or-nothing: any failure raises and no partial
index is returned.
"""

import logging
import os
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from agentspolicy.core.services.filters import compile_patterns
from agentspolicy.core.services.links import resolve_link_chain
from agentspolicy.core.services.scanner import yield_policy_candidates
from agentspolicy.domain.config import (
    DEFAULT_MAX_SYMLINK_DEPTH,
    default_exclude_patterns,
    default_policy_filenames,
)
from agentspolicy.domain.errors import (
    AmbiguousPolicyError,
    NotFoundError,
    PolicyError,
    PolicyReadError,
)
from agentspolicy.domain.policy_models import PolicyFile

logger = logging.getLogger(__name__)


def directory_key(path: str) -> str:
    """Canonical lookup key for a directory path."""
    return os.path.normcase(os.path.normpath(path))


class PolicyIndex:
    """
    Read-only snapshot of the policy files found under a root directory.

    Use PolicyIndex.build() (or build_index()) to create one from disk.
    """

    def __init__(
            self,
            root: str,
            policies: Mapping[str, PolicyFile],
            policy_filenames: Sequence[str],
    ) -> None:
        self._root = os.path.normpath(root)
        self._policies: Mapping[str, PolicyFile] = MappingProxyType(
            {directory_key(d): p for d, p in policies.items()}
        )
        self._filenames: Tuple[str, ...] = tuple(policy_filenames)

    # --------------------------------------------------------------------------
    # CONSTRUCTION
    # --------------------------------------------------------------------------

    @classmethod
    def build(
            cls,
            root_path: str,
            policy_filenames: Optional[Sequence[str]] = None,
            exclude_patterns: Optional[List[str]] = None,
            max_symlink_depth: int = DEFAULT_MAX_SYMLINK_DEPTH,
            encoding: str = "utf-8",
    ) -> "PolicyIndex":
        """
        Scan a directory tree and load every policy file found in it.

        Args:
            root_path: Repository root to scan.
            policy_filenames: Accepted policy file names (default: AGENTS.md).
            exclude_patterns: Regexes for directory names to skip.
            max_symlink_depth: Maximum links followed per policy file.
            encoding: Text encoding of policy files.

        Returns:
            PolicyIndex: The built snapshot.

        Raises:
            NotFoundError: Root missing or a policy symlink dangles.
            CycleError: A policy symlink chain loops.
            AmbiguousPolicyError: A directory holds several policy files.
            PolicyReadError: A policy file or directory cannot be read.
        """
        root = os.path.abspath(root_path)
        if not os.path.isdir(root):
            raise NotFoundError(f"Policy root does not exist or is not a directory: {root}", path=root)

        names = list(policy_filenames) if policy_filenames else default_policy_filenames()
        exclude_rx = compile_patterns(
            exclude_patterns if exclude_patterns is not None else default_exclude_patterns()
        )

        logger.info(f"Building policy index for {root}")

        policies: Dict[str, PolicyFile] = {}
        # Content cache keyed by real path; several links may share a target
        content_cache: Dict[str, str] = {}

        try:
            for candidate in yield_policy_candidates(root, names, exclude_rx):
                directory = str(candidate["directory"])
                found = list(candidate["names"])  # type: ignore[call-overload]

                if len(found) > 1:
                    raise AmbiguousPolicyError(
                        f"Directory {directory} holds more than one policy file: {', '.join(found)}",
                        path=directory,
                        candidates=found,
                    )

                policy = _load_policy(
                    directory, found[0], max_symlink_depth, encoding, content_cache
                )
                policies[directory] = policy
        except PolicyError as e:
            logger.error(f"Policy index build failed: {e}")
            raise
        except OSError as e:
            logger.error(f"Policy index build failed: {e}")
            raise PolicyReadError(f"Cannot scan policy tree: {e}", path=getattr(e, "filename", "") or root) from e

        logger.info(f"Indexed {len(policies)} policy file(s) under {root}")
        return cls(root, policies, names)

    # --------------------------------------------------------------------------
    # READ ACCESS
    # --------------------------------------------------------------------------

    @property
    def root(self) -> str:
        return self._root

    @property
    def policy_filenames(self) -> Tuple[str, ...]:
        return self._filenames

    def get(self, directory: str) -> Optional[PolicyFile]:
        """Return the policy stored for a directory, if any."""
        return self._policies.get(directory_key(directory))

    def policies(self) -> List[PolicyFile]:
        """Return every indexed policy, ordered by directory."""
        return [self._policies[k] for k in sorted(self._policies)]

    def __contains__(self, directory: object) -> bool:
        return isinstance(directory, str) and directory_key(directory) in self._policies

    def __len__(self) -> int:
        return len(self._policies)

    def __iter__(self) -> Iterator[str]:
        for policy in self.policies():
            yield policy.directory

    def __repr__(self) -> str:
        return f"PolicyIndex(root={self._root!r}, policies={len(self)})"


def build_index(root_path: str, **kwargs) -> PolicyIndex:
    """Shortcut for PolicyIndex.build()."""
    return PolicyIndex.build(root_path, **kwargs)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _load_policy(
        directory: str,
        name: str,
        max_symlink_depth: int,
        encoding: str,
        content_cache: Dict[str, str],
) -> PolicyFile:
    """Resolve links for one policy file and read its effective content."""
    path = os.path.join(directory, name)
    target, chain = resolve_link_chain(path, max_symlink_depth)

    source = target or os.path.realpath(path)
    content = content_cache.get(source)
    if content is None:
        content = _read_text(source, encoding, path)
        content_cache[source] = content

    return PolicyFile(
        directory=directory,
        path=path,
        content=content,
        symlink_target=target,
        link_chain=chain,
    )


def _read_text(source: str, encoding: str, policy_path: str) -> str:
    """Read a policy file, mapping I/O and decoding failures to PolicyReadError."""
    try:
        with open(source, "r", encoding=encoding) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PolicyReadError(f"Cannot read policy file {source}: {e}", path=policy_path) from e
