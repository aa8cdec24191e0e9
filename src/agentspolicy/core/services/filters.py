from __future__ import annotations

"""
Directory Filtering Helpers.

Compiles the user's exclusion regexes and matches directory names against
them during the index walk.
"""

import logging
import re
from typing import List

logger = logging.getLogger(__name__)


def compile_patterns(patterns: List[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are dropped with a warning instead of aborting
    the index build.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Ignoring invalid exclusion pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: List[re.Pattern]) -> bool:
    """
    Verify if a name matches at least one compiled regex pattern.

    Args:
        name: Directory name to evaluate.
        compiled_patterns: Pre-compiled regex objects.

    Returns:
        bool: True if any match is found.
    """
    return any(rx.search(name) for rx in compiled_patterns)
