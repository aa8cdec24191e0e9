from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation and ancestry helpers used by the
policy index and the precedence resolver. Acts as an abstraction over the
'os' module to ensure uniform behavior across Windows and Unix-like systems.
"""

import os
from typing import Iterator, Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "AgentsPolicy"
UNIX_APP_DIR_NAME = ".agentspolicy"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/AgentsPolicy
    - Linux/Mac: ~/.agentspolicy

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    # Windows specific resolution
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation; a read-only home only disables persistence
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)


def resolve_query_path(path: str, root: str) -> str:
    """
    Turn a queried file path into an absolute, normalized path.

    Relative paths are interpreted against the index root rather than the
    current working directory.

    Args:
        path: Raw query path (absolute or root-relative).
        root: Absolute index root.

    Returns:
        str: Absolute normalized path.
    """
    expanded = os.path.expanduser(path)
    if not os.path.isabs(expanded):
        expanded = os.path.join(root, expanded)
    return os.path.normpath(os.path.abspath(expanded))

# -----------------------------------------------------------------------------
# ANCESTRY API
# -----------------------------------------------------------------------------

def is_within(path: str, root: str) -> bool:
    """
    Check whether an absolute path equals or lies below a root directory.

    Args:
        path: Absolute path to test.
        root: Absolute directory path.

    Returns:
        bool: True if 'path' is 'root' or one of its descendants.
    """
    path_n = os.path.normcase(os.path.normpath(path))
    root_n = os.path.normcase(os.path.normpath(root))
    try:
        return os.path.commonpath([path_n, root_n]) == root_n
    except ValueError:
        # Different drives on Windows
        return False


def iter_ancestors(file_path: str, root: str) -> Iterator[str]:
    """
    Yield the ancestor directories of a file, nearest first, stopping at root.

    The first yielded directory is the immediate parent of 'file_path'; the
    last one is 'root' itself. Nothing is yielded for paths outside 'root'.

    Args:
        file_path: Absolute normalized file path.
        root: Absolute normalized root directory.

    Yields:
        str: Ancestor directory paths in nearest-first order.
    """
    if not is_within(file_path, root) or _same_path(file_path, root):
        return

    current = os.path.dirname(file_path)
    while True:
        yield current
        if _same_path(current, root):
            return
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _same_path(a: str, b: str) -> bool:
    """Compare two paths after case and separator normalization."""
    return os.path.normcase(os.path.normpath(a)) == os.path.normcase(os.path.normpath(b))
