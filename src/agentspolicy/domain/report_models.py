from __future__ import annotations

"""
Resolution Report Data Models.

Defines the result object and factory functions used to hand a complete
resolution run from the engine to the interface layer (CLI or embedding
tool). Reports are plain data, serializable with dataclasses.asdict().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ResolutionReport:
    """
    Unified result of a resolution run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        error_kind: Machine-readable error family ('not_found', 'cycle', ...).
        root_path: Normalized index root.
        policy_filenames: Policy file names that were searched for.
        policies: One entry per indexed policy file.
        results: One entry per queried path, in query order.
        summary: Execution statistics.
    """
    ok: bool
    error: str
    error_kind: str

    root_path: str
    policy_filenames: List[str] = field(default_factory=list)

    policies: List[Dict[str, Any]] = field(default_factory=list)
    results: List[Dict[str, Any]] = field(default_factory=list)

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_report(
        error: str,
        cfg: Dict[str, Any],
        root_path: str,
        error_kind: str = "policy_error",
        summary_extra: Optional[Dict[str, Any]] = None
) -> ResolutionReport:
    """
    Create a failed resolution report.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        root_path: The index root that was targeted.
        error_kind: Error family identifier.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        ResolutionReport: An immutable error report.
    """
    return ResolutionReport(
        ok=False,
        error=error,
        error_kind=error_kind,
        root_path=root_path,
        policy_filenames=list(cfg.get("policy_filenames", [])),
        summary=summary_extra or {},
    )


def create_success_report(
        cfg: Dict[str, Any],
        root_path: str,
        policies: List[Dict[str, Any]],
        results: List[Dict[str, Any]],
        summary_extra: Optional[Dict[str, Any]] = None
) -> ResolutionReport:
    """
    Create a successful resolution report.

    Args:
        cfg: Final configuration used during execution.
        root_path: Normalized index root.
        policies: Serialized indexed policies.
        results: Serialized per-path resolutions.
        summary_extra: Execution statistics.

    Returns:
        ResolutionReport: An immutable success report.
    """
    return ResolutionReport(
        ok=True,
        error="",
        error_kind="",
        root_path=root_path,
        policy_filenames=list(cfg.get("policy_filenames", [])),
        policies=policies,
        results=results,
        summary=summary_extra or {},
    )
