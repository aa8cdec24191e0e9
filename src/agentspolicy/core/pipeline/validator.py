from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration sources (CLI flags, the JSON
settings file, embedding tools) and the resolution engine. Coerces types,
normalizes the root path and injects defaults for missing keys.
"""

import codecs
import logging
import os
import re
from typing import Any, Dict, List, Tuple

from agentspolicy.domain.config import (
    DEFAULT_MAX_SYMLINK_DEPTH,
    default_exclude_patterns,
    default_policy_filenames,
    get_default_config,
)
from agentspolicy.infra.fs import normalize_path

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of coercing them.

    Returns:
        Tuple[Dict[str, Any], List[str]]: The normalized configuration and
            a list of human-readable warnings.

    Raises:
        TypeError: In strict mode, when a field has the wrong type.
        ValueError: In strict mode, when a field has an invalid value.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    string_fields = ["root_path", "encoding", "target_model"]
    bool_fields = ["show_considered", "count_tokens"]
    list_fields_map = {
        "policy_filenames": default_policy_filenames(),
        "exclude_patterns": default_exclude_patterns(),
    }

    for field in string_fields:
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in bool_fields:
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    for field, fallback in list_fields_map.items():
        merged[field] = _as_list_str(merged.get(field), fallback, field, warnings, strict)

    merged["max_symlink_depth"] = _as_positive_int(
        merged.get("max_symlink_depth"), DEFAULT_MAX_SYMLINK_DEPTH, "max_symlink_depth", warnings, strict
    )

    # Domain-specific normalization
    merged["root_path"] = normalize_path(merged["root_path"], os.getcwd())
    merged["policy_filenames"] = _normalize_filenames(merged["policy_filenames"], warnings, strict)
    merged["exclude_patterns"] = _check_patterns(merged["exclude_patterns"], warnings, strict)
    merged["encoding"] = _check_encoding(merged["encoding"], defaults["encoding"], warnings, strict)

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure input is a list of sanitized strings, supporting CSV parsing."""
    if value is None:
        return list(fallback)

    if isinstance(value, str) and not strict:
        items = [x.strip() for x in value.split(",") if x.strip()]
        if items:
            warnings.append(f"Field '{field}' converted from CSV string to list.")
            return items
        return list(fallback)

    if isinstance(value, list):
        out: List[str] = []
        for i, item in enumerate(value):
            if isinstance(item, str):
                s = item.strip()
                if s:
                    out.append(s)
            else:
                msg = f"Invalid item in '{field}[{i}]': expected str."
                if strict:
                    raise TypeError(msg)
                warnings.append(f"{msg} Item discarded.")
        return out if out or field == "exclude_patterns" else list(fallback)

    msg = f"Invalid field '{field}': expected list[str], received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return list(fallback)


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Coerce integers (or numeric strings) and reject values below 1."""
    if value is None:
        return fallback

    parsed = None
    if isinstance(value, int) and not isinstance(value, bool):
        parsed = value
    elif isinstance(value, str) and not strict and value.strip().isdigit():
        parsed = int(value.strip())
        warnings.append(f"Field '{field}' converted from '{value}' to {parsed}.")

    if parsed is not None and parsed >= 1:
        return parsed

    msg = f"Invalid field '{field}': expected positive int, received {value!r}."
    if strict:
        raise ValueError(msg) if parsed is not None else TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _normalize_filenames(names: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Policy names are bare file names; anything with a separator is rejected."""
    out: List[str] = []
    for name in names:
        if os.sep in name or (os.altsep and os.altsep in name) or name in (".", ".."):
            msg = f"Invalid policy filename '{name}': must be a bare file name."
            if strict:
                raise ValueError(msg)
            warnings.append(f"{msg} Discarded.")
            continue
        if name not in out:
            out.append(name)
    return out if out else default_policy_filenames()


def _check_patterns(patterns: List[str], warnings: List[str], strict: bool) -> List[str]:
    """Drop exclusion patterns that do not compile."""
    out: List[str] = []
    for p in patterns:
        try:
            re.compile(p)
        except re.error as e:
            msg = f"Invalid exclusion pattern '{p}': {e}."
            if strict:
                raise ValueError(msg) from e
            warnings.append(f"{msg} Discarded.")
            continue
        out.append(p)
    return out


def _check_encoding(encoding: str, fallback: str, warnings: List[str], strict: bool) -> str:
    """Ensure the configured text encoding is known to Python."""
    try:
        codecs.lookup(encoding)
        return encoding
    except LookupError as e:
        msg = f"Unknown encoding '{encoding}'."
        if strict:
            raise ValueError(msg) from e
        warnings.append(f"{msg} Using '{fallback}'.")
        return fallback
