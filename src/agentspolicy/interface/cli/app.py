from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, loading and merging of
configuration sources (defaults, saved settings and CLI overrides), the
resolution run and result rendering.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from agentspolicy.core.pipeline.engine import run_resolution
from agentspolicy.core.pipeline.validator import validate_config
from agentspolicy.domain.config import get_default_config, load_config, save_config
from agentspolicy.domain.report_models import ResolutionReport
from agentspolicy.infra.logging import LoggingConfig, configure_logging, get_logger
from agentspolicy.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ROOT_MISSING = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    configure_logging(LoggingConfig.for_cli(debug=args.debug, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    if args.save_config:
        save_config(clean_conf)

    root_path = clean_conf["root_path"]
    if not os.path.isdir(root_path):
        msg = f"Root directory does not exist: {root_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_ROOT_MISSING

    try:
        report = run_resolution(
            clean_conf,
            args.paths,
            live_instruction=args.live_instruction,
            include_content=bool(args.show_content or args.json_output),
        )
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED

    if args.json_output:
        print(json.dumps(asdict(report), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(report, list_policies=args.list_policies, show_content=args.show_content)

    if report.ok:
        return EXIT_OK
    # A dangling policy link is also 'not_found' but is a resolution failure
    if report.error_kind == "not_found" and report.summary.get("error_path") == root_path:
        return EXIT_ROOT_MISSING
    return EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None override values for known keys into the base.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "root_path", "policy_filenames", "exclude_patterns", "max_symlink_depth",
        "encoding", "show_considered", "count_tokens", "target_model",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(report: ResolutionReport, *, list_policies: bool, show_content: bool) -> None:
    """
    Render a resolution report for the terminal.

    Args:
        report: The report to render.
        list_policies: Whether to print every indexed policy.
        show_content: Whether to print the effective policy texts.
    """
    if not report.ok:
        print(f"ERROR: {report.error}", file=sys.stderr)
        return

    if list_policies or not report.results:
        print(f"{len(report.policies)} policy file(s) under {report.root_path}")
    if list_policies:
        for policy in report.policies:
            line = f"  {policy['path']}"
            if policy["symlink_target"]:
                line += f" -> {policy['symlink_target']}"
            print(line)

    for entry in report.results:
        print(f"{entry['file_path']}: {_describe_source(entry)}")

        if "considered" in entry:
            for directory in entry["considered"]:
                print(f"  considered: {directory}")
        if "token_count" in entry:
            print(f"  tokens: {entry['token_count']:,}")
        if show_content and entry.get("effective_text") is not None:
            print("-" * 80)
            print(entry["effective_text"].rstrip("\n"))
            print("-" * 80)


def _describe_source(entry: Dict[str, Any]) -> str:
    """Summarize where the effective policy of one result comes from."""
    if entry["origin"] == "instruction":
        return "live instruction"
    if not entry["policed"]:
        return "(unpoliced)"
    source = str(entry["policy_path"])
    if entry.get("symlink_target"):
        source += f" -> {entry['symlink_target']}"
    return source

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
