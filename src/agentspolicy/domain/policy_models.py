from __future__ import annotations

"""
Policy Domain Data Models.

Defines the immutable records exchanged between the index, the precedence
resolver and the override gate.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

# -----------------------------------------------------------------------------
# ORIGIN MARKERS
# -----------------------------------------------------------------------------

ORIGIN_INSTRUCTION = "instruction"
ORIGIN_POLICY = "policy"
ORIGIN_NONE = "none"

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PolicyFile:
    """
    A policy document governing one directory subtree.

    The identity of a policy is the directory it lives in. When the file in
    that directory is a symlink, 'content' already holds the text of the
    final target, so consumers never follow links themselves.

    Attributes:
        directory: Absolute directory the policy governs.
        path: Absolute path of the policy file inside 'directory'.
        content: Effective policy text.
        symlink_target: Absolute real path of the final link target, if any.
        link_chain: Every link path followed, starting with 'path'.
    """
    directory: str
    path: str
    content: str
    symlink_target: Optional[str] = None
    link_chain: Tuple[str, ...] = ()

    @property
    def is_symlink(self) -> bool:
        return self.symlink_target is not None

    @property
    def source_path(self) -> str:
        """Path the content was actually read from."""
        return self.symlink_target or self.path


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of a precedence lookup for one file path.

    Attributes:
        file_path: Absolute normalized path that was queried.
        policy: Governing policy, or None when the path is unpoliced.
        considered: Ancestor directories inspected, nearest first.
    """
    file_path: str
    policy: Optional[PolicyFile] = None
    considered: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def policed(self) -> bool:
        return self.policy is not None

    @property
    def content(self) -> Optional[str]:
        return self.policy.content if self.policy else None

    @property
    def source_directory(self) -> Optional[str]:
        return self.policy.directory if self.policy else None


@dataclass(frozen=True)
class EffectivePolicy:
    """
    Text that governs a single edit after live instructions are applied.

    Attributes:
        text: Effective policy text, or None when nothing applies.
        origin: One of 'instruction', 'policy' or 'none'.
        policy: The standing policy that was resolved, even if overridden.
    """
    text: Optional[str]
    origin: str
    policy: Optional[PolicyFile] = None

    @property
    def overridden(self) -> bool:
        return self.origin == ORIGIN_INSTRUCTION
