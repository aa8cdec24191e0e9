from __future__ import annotations

"""
Override Gate.

A live instruction given at edit time outranks every standing policy file.
"""

from typing import Optional, Union

from agentspolicy.domain.policy_models import (
    ORIGIN_INSTRUCTION,
    ORIGIN_NONE,
    ORIGIN_POLICY,
    EffectivePolicy,
    PolicyFile,
    ResolutionResult,
)


def has_live_instruction(live_instruction: Optional[str]) -> bool:
    """Blank or whitespace-only instructions count as absent."""
    return bool(live_instruction and live_instruction.strip())


def effective_policy(
        resolved: Union[ResolutionResult, PolicyFile, None],
        live_instruction: Optional[str] = None,
) -> EffectivePolicy:
    """
    Combine a resolved policy with an optional live instruction.

    Never raises: every combination of inputs yields an EffectivePolicy.

    Args:
        resolved: Resolver output, a bare policy, or None.
        live_instruction: Ad-hoc directive for this single operation.

    Returns:
        EffectivePolicy: The instruction if present, else the policy content,
            else an empty result with origin 'none'.
    """
    policy = resolved.policy if isinstance(resolved, ResolutionResult) else resolved

    if has_live_instruction(live_instruction):
        return EffectivePolicy(text=live_instruction, origin=ORIGIN_INSTRUCTION, policy=policy)

    if policy is not None:
        return EffectivePolicy(text=policy.content, origin=ORIGIN_POLICY, policy=policy)

    return EffectivePolicy(text=None, origin=ORIGIN_NONE, policy=None)
