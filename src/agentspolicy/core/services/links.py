from __future__ import annotations

"""
Policy Symlink Resolution.

Follows a chain of file symlinks one hop at a time so that loops are
reported as CycleError instead of being hidden by os.path.realpath().
"""

import errno
import logging
import os
import stat
from typing import List, Optional, Tuple

from agentspolicy.domain.errors import CycleError, NotFoundError, PolicyReadError

logger = logging.getLogger(__name__)


def resolve_link_chain(path: str, max_depth: int) -> Tuple[Optional[str], Tuple[str, ...]]:
    """
    Resolve a policy path to the real file its content comes from.

    Args:
        path: Absolute path of the policy file as found in the tree.
        max_depth: Maximum number of links to follow.

    Returns:
        Tuple[Optional[str], Tuple[str, ...]]: (Absolute real path of the final
            target, or None if 'path' is not a symlink; every link followed).

    Raises:
        CycleError: The chain revisits a link or exceeds 'max_depth'.
        NotFoundError: The chain ends at a path that does not exist.
        PolicyReadError: The final target is not a regular file.
    """
    if not os.path.islink(path):
        return None, ()

    chain: List[str] = []
    seen = set()
    current = path

    while os.path.islink(current):
        key = os.path.normcase(os.path.abspath(current))
        if key in seen:
            chain.append(current)
            raise CycleError(
                f"Symlink cycle detected: {' -> '.join(chain)}",
                path=path,
                chain=chain,
            )
        seen.add(key)
        chain.append(current)

        if len(chain) > max_depth:
            raise CycleError(
                f"Too many levels of symbolic links (>{max_depth}) from {path}",
                path=path,
                chain=chain,
            )

        target = os.readlink(current)
        if not os.path.isabs(target):
            target = os.path.join(os.path.dirname(current), target)
        current = target

    # A loop through a directory link in the target path surfaces here as ELOOP
    try:
        st = os.stat(current)
    except OSError as e:
        if e.errno == errno.ELOOP:
            chain.append(current)
            raise CycleError(
                f"Symlink cycle detected in target path of {path}: {current}",
                path=path,
                chain=chain,
            ) from e
        raise NotFoundError(f"Policy symlink {path} points to missing target {current}", path=path) from e
    if not stat.S_ISREG(st.st_mode):
        raise PolicyReadError(f"Policy symlink {path} does not point to a file: {current}", path=path)

    real = os.path.realpath(current)
    logger.debug(f"Resolved policy link {path} -> {real} ({len(chain)} hop(s))")
    return real, tuple(chain)
