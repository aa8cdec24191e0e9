from __future__ import annotations

"""
Policy File Discovery Service.

Walks a repository tree, pruning excluded directories early, and reports
every directory that holds one or more files named by the policy
convention. The scanner never reads file content.
"""

import logging
import os
import re
from typing import Dict, Iterable, List, Sequence

from agentspolicy.core.services.filters import matches_any

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def yield_policy_candidates(
        root_path: str,
        policy_filenames: Sequence[str],
        exclude_rx: List[re.Pattern],
) -> Iterable[Dict[str, object]]:
    """
    Traverse the filesystem and yield directories containing policy files.

    Directory symlinks are not followed, so a linked subtree cannot make
    the walk revisit a directory. File symlinks (including dangling or
    looping ones) are reported like regular files; resolving them is the
    index's job.

    Args:
        root_path: Absolute path to the repository root.
        policy_filenames: Accepted policy file names.
        exclude_rx: Compiled regexes for directory names to prune.

    Yields:
        Dict[str, object]: One record per governed directory:
                           - directory: Absolute directory path.
                           - names: Matching file names, sorted.
    """
    wanted = set(policy_filenames)
    root_abs = os.path.abspath(root_path)

    for root, dirs, files in os.walk(root_abs, onerror=_raise_walk_error):
        # In-place pruning; the root itself is never excluded
        dirs[:] = sorted(d for d in dirs if not matches_any(d, exclude_rx))

        names = sorted(f for f in files if f in wanted)
        if not names:
            continue

        logger.debug(f"Policy candidate(s) {names} in {root}")
        yield {"directory": root, "names": names}


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _raise_walk_error(err: OSError) -> None:
    """Propagate directory listing failures so the build fails atomically."""
    raise err
