from __future__ import annotations

"""
Policy Token Estimation.

Policy files end up in a coding agent's context window, so reports can
include the size of the effective policy in LLM tokens. Counting uses
tiktoken's BPE encoders; if an encoder cannot be loaded (tiktoken fetches
its vocabularies on first use, which fails offline) the service degrades
to a character-density heuristic instead of failing the resolution.
"""

import logging
import math
from abc import ABC, abstractmethod

import tiktoken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

# Approximate ratio for English prose and code
CHARS_PER_TOKEN_AVG = 4
DEFAULT_MODEL = "gpt-4o"

# -----------------------------------------------------------------------------
# STRATEGY INTERFACES
# -----------------------------------------------------------------------------

class TokenizerStrategy(ABC):
    """
    Abstract base class for token counting algorithms.
    """

    @abstractmethod
    def count(self, text: str, model_id: str) -> int:
        """
        Calculate the token count for a given text segment.

        Args:
            text: Input string to be tokenized.
            model_id: Model identifier used to pick an encoding.

        Returns:
            int: Total token count.
        """


class HeuristicStrategy(TokenizerStrategy):
    """Estimate tokens from character density."""

    def count(self, text: str, model_id: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / CHARS_PER_TOKEN_AVG)


class TiktokenStrategy(TokenizerStrategy):
    """
    Local BPE encoding via tiktoken.

    Modern models use 'o200k_base'; GPT-3.5 and GPT-4 (non-'o') variants use
    'cl100k_base'.
    """

    def count(self, text: str, model_id: str) -> int:
        encoding_name = "o200k_base"
        if any(x in model_id.lower() for x in ["gpt-4-", "gpt-3.5", "legacy"]) or model_id.lower() == "gpt-4":
            encoding_name = "cl100k_base"

        try:
            encoding = tiktoken.get_encoding(encoding_name)
        except ValueError:
            logger.debug(f"Encoding '{encoding_name}' not found, falling back to cl100k.")
            encoding = tiktoken.get_encoding("cl100k_base")

        return len(encoding.encode(text, disallowed_special=()))

# -----------------------------------------------------------------------------
# SERVICE ORCHESTRATION (FACADE)
# -----------------------------------------------------------------------------

class TokenizerService:
    """
    Model-aware token estimation with a heuristic safety net.
    """

    def __init__(self) -> None:
        self.heuristic = HeuristicStrategy()
        self.encoder = TiktokenStrategy()

    def count(self, text: str, model: str = DEFAULT_MODEL) -> int:
        """
        Count tokens with tiktoken, degrading to the heuristic on failure.

        Args:
            text: Raw input text.
            model: Target model identifier.

        Returns:
            int: Token count (0 for empty text).
        """
        if not text:
            return 0

        try:
            return self.encoder.count(text, model or DEFAULT_MODEL)
        except Exception as e:
            # Encoders download vocabularies lazily; offline runs land here
            logger.warning(f"tiktoken encoding failed: {e}. Using heuristic estimate.")
            return self.heuristic.count(text, model)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

_SERVICE_INSTANCE = TokenizerService()


def count_tokens(text: str, model: str = DEFAULT_MODEL) -> int:
    """
    Estimate the number of tokens in a policy text.

    Args:
        text: Input string content.
        model: Target model name (e.g., "gpt-4o").

    Returns:
        int: Total token count.
    """
    return _SERVICE_INSTANCE.count(text, model)
