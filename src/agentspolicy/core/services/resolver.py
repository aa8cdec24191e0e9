from __future__ import annotations

"""
Precedence Resolver.

Determines which policy governs a file: walking from the file's immediate
parent directory up to the index root, the first directory holding a
policy wins. Deeper policies therefore always shadow shallower ones.
"""

import logging
from typing import Iterable, List

from agentspolicy.core.services.index import PolicyIndex
from agentspolicy.domain.policy_models import ResolutionResult
from agentspolicy.infra.fs import iter_ancestors, resolve_query_path

logger = logging.getLogger(__name__)


def resolve(index: PolicyIndex, file_path: str) -> ResolutionResult:
    """
    Find the policy governing a file path.

    The file does not need to exist. Relative paths are taken relative to
    the index root; paths outside the root are unpoliced.

    Args:
        index: Built policy index.
        file_path: Path of the file about to be edited.

    Returns:
        ResolutionResult: The nearest policy (or none) and the directories
            that were considered, nearest first.
    """
    target = resolve_query_path(file_path, index.root)

    considered: List[str] = []
    for directory in iter_ancestors(target, index.root):
        considered.append(directory)
        policy = index.get(directory)
        if policy is not None:
            logger.debug(f"{target} governed by {policy.path}")
            return ResolutionResult(file_path=target, policy=policy, considered=tuple(considered))

    logger.debug(f"{target} is unpoliced ({len(considered)} directories considered)")
    return ResolutionResult(file_path=target, policy=None, considered=tuple(considered))


def resolve_many(index: PolicyIndex, file_paths: Iterable[str]) -> List[ResolutionResult]:
    """Resolve a batch of paths against the same snapshot, preserving order."""
    return [resolve(index, p) for p in file_paths]
