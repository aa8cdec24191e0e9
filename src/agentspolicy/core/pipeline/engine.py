from __future__ import annotations

"""
Resolution Engine.

Coordinates a complete resolution run for interfaces:
1. Validates configuration and normalizes the root path.
2. Builds the policy index (atomic: all or nothing).
3. Resolves every queried path with nearest-ancestor precedence.
4. Applies the live instruction through the override gate.
5. Optionally estimates the token size of each effective policy.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from agentspolicy.core.pipeline.validator import validate_config
from agentspolicy.core.processing.tokenizer import count_tokens
from agentspolicy.core.services.gate import effective_policy, has_live_instruction
from agentspolicy.core.services.index import PolicyIndex
from agentspolicy.core.services.resolver import resolve_many
from agentspolicy.domain.errors import PolicyError
from agentspolicy.domain.policy_models import EffectivePolicy, PolicyFile, ResolutionResult
from agentspolicy.domain.report_models import (
    ResolutionReport,
    create_error_report,
    create_success_report,
)

logger = logging.getLogger(__name__)


def run_resolution(
        config: Optional[Dict[str, Any]],
        paths: Sequence[str] = (),
        *,
        live_instruction: Optional[str] = None,
        include_content: bool = True,
) -> ResolutionReport:
    """
    Build the policy index for the configured root and resolve paths.

    Domain failures are returned as an error report, never raised.

    Args:
        config: The configuration dictionary (raw or partial).
        paths: File paths to resolve (absolute or root-relative).
        live_instruction: Optional directive overriding every policy.
        include_content: If False, effective texts are left out of results.

    Returns:
        ResolutionReport: Status, indexed policies and per-path results.
    """
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    root_path = cfg["root_path"]
    logger.info(f"Resolution run started for {root_path} ({len(paths)} path(s)).")

    try:
        index = PolicyIndex.build(
            root_path,
            policy_filenames=cfg["policy_filenames"],
            exclude_patterns=cfg["exclude_patterns"],
            max_symlink_depth=cfg["max_symlink_depth"],
            encoding=cfg["encoding"],
        )
    except PolicyError as e:
        logger.error(f"Cannot build policy index: {e}")
        return create_error_report(
            str(e), cfg, root_path, error_kind=e.kind,
            summary_extra={"error_path": e.path},
        )

    results = resolve_many(index, paths)
    entries = [
        _serialize_result(
            res,
            effective_policy(res, live_instruction),
            cfg,
            include_content,
        )
        for res in results
    ]

    summary = {
        "policies_indexed": len(index),
        "paths_resolved": len(entries),
        "policed": sum(1 for r in results if r.policed),
        "unpoliced": sum(1 for r in results if not r.policed),
        "live_instruction": has_live_instruction(live_instruction),
    }
    logger.info(f"Resolution run finished: {summary['policed']} policed, {summary['unpoliced']} unpoliced.")

    return create_success_report(
        cfg,
        index.root,
        policies=[_serialize_policy(p) for p in index.policies()],
        results=entries,
        summary_extra=summary,
    )


# -----------------------------------------------------------------------------
# SERIALIZATION HELPERS
# -----------------------------------------------------------------------------

def _serialize_policy(policy: PolicyFile) -> Dict[str, Any]:
    """Flatten a policy into a JSON-friendly dict (content excluded)."""
    return {
        "directory": policy.directory,
        "path": policy.path,
        "symlink_target": policy.symlink_target,
        "link_chain": list(policy.link_chain),
        "size": len(policy.content),
    }


def _serialize_result(
        res: ResolutionResult,
        eff: EffectivePolicy,
        cfg: Dict[str, Any],
        include_content: bool,
) -> Dict[str, Any]:
    """Flatten a resolution plus its effective policy into a dict."""
    entry: Dict[str, Any] = {
        "file_path": res.file_path,
        "policed": res.policed,
        "source_directory": res.source_directory,
        "policy_path": res.policy.path if res.policy else None,
        "symlink_target": res.policy.symlink_target if res.policy else None,
        "origin": eff.origin,
    }
    if include_content:
        entry["effective_text"] = eff.text
    if cfg.get("show_considered"):
        entry["considered"] = list(res.considered)
    if cfg.get("count_tokens"):
        entry["token_count"] = count_tokens(eff.text or "", cfg["target_model"])
    return entry

