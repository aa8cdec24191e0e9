from __future__ import annotations

"""
Policy Resolution Error Hierarchy.

All failures raised while building a policy index derive from PolicyError,
so callers can trap the whole family with a single except clause. Every
error carries the filesystem path that triggered it.
"""

from typing import Sequence


class PolicyError(Exception):
    """
    Base class for all policy index and resolution failures.

    Attributes:
        path: Filesystem path that triggered the failure.
    """

    kind: str = "policy_error"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(PolicyError):
    """The index root or a symlinked policy target does not exist."""

    kind = "not_found"


class CycleError(PolicyError):
    """
    A policy symlink chain loops back on itself or exceeds the link limit.

    Attributes:
        chain: The link paths followed before the loop was detected.
    """

    kind = "cycle"

    def __init__(self, message: str, path: str = "", chain: Sequence[str] = ()) -> None:
        super().__init__(message, path)
        self.chain = tuple(chain)


class AmbiguousPolicyError(PolicyError):
    """
    More than one policy file claims the same directory.

    Attributes:
        candidates: The competing policy file names.
    """

    kind = "ambiguous"

    def __init__(self, message: str, path: str = "", candidates: Sequence[str] = ()) -> None:
        super().__init__(message, path)
        self.candidates = tuple(candidates)


class PolicyReadError(PolicyError):
    """A policy file exists but its content cannot be read or decoded."""

    kind = "read_error"
