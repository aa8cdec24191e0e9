from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates the parsed argparse
namespace into configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the agentspolicy CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="agentspolicy",
        description=(
            "Resolve which AGENTS.md policy governs a file: the most deeply "
            "nested policy wins and a live instruction overrides them all."
        ),
    )

    p.add_argument(
        "paths",
        nargs="*",
        help="Files to resolve (absolute, or relative to the root).",
    )

    # --- Index ---
    p.add_argument(
        "-r", "--root",
        dest="root_path",
        default=None,
        help="Repository root to index (default: current directory).",
    )
    p.add_argument(
        "--names",
        dest="policy_filenames",
        default=None,
        help="Comma-separated policy file names (default: AGENTS.md).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated regexes of directory names to skip.",
    )
    p.add_argument(
        "--max-links",
        dest="max_symlink_depth",
        type=int,
        default=None,
        help="Maximum symlinks followed per policy file.",
    )
    p.add_argument(
        "--encoding",
        default=None,
        help="Text encoding of policy files.",
    )

    # --- Override ---
    p.add_argument(
        "-I", "--instruction",
        dest="live_instruction",
        default=None,
        help="Live instruction that overrides every policy for this run.",
    )

    # --- Reporting ---
    p.add_argument(
        "--list",
        dest="list_policies",
        action="store_true",
        help="List every indexed policy file.",
    )
    p.add_argument(
        "--content",
        dest="show_content",
        action="store_true",
        help="Print the effective policy text for each path.",
    )
    p.add_argument(
        "--considered",
        dest="show_considered",
        action="store_true",
        help="Show the ancestor directories inspected for each path.",
    )
    p.add_argument(
        "--tokens",
        dest="count_tokens",
        action="store_true",
        help="Estimate the token size of each effective policy.",
    )
    p.add_argument(
        "--model",
        dest="target_model",
        default=None,
        help="Model used for token estimation (default: gpt-4o).",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit the full report as JSON.",
    )

    # --- Configuration and Diagnostics ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore saved settings.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective settings for future runs.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration overrides dict.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["root_path"] = args.root_path
    overrides["encoding"] = args.encoding
    overrides["target_model"] = args.target_model
    overrides["max_symlink_depth"] = args.max_symlink_depth

    if args.policy_filenames:
        overrides["policy_filenames"] = _split_csv(args.policy_filenames)
    if args.exclude_patterns is not None:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)

    if args.show_considered:
        overrides["show_considered"] = True
    if args.count_tokens:
        overrides["count_tokens"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
