from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences as JSON in the user data
directory. Supports a version stamp and default fallback for missing or
corrupted files.
"""

import json
import logging
import os
from typing import Any, Dict, List

from agentspolicy.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
CURRENT_CONFIG_VERSION = "1.0.0"

DEFAULT_POLICY_FILENAME = "AGENTS.md"

# Linux MAXSYMLINKS
DEFAULT_MAX_SYMLINK_DEPTH = 40

DEFAULT_TARGET_MODEL = "gpt-4o"


def default_policy_filenames() -> List[str]:
    """Return the conventional policy file names."""
    return [DEFAULT_POLICY_FILENAME]


def default_exclude_patterns() -> List[str]:
    """
    Return directory-name regexes pruned during the index walk.

    Covers version control metadata, dependency caches and virtualenvs,
    none of which hold project policies.
    """
    return [
        r"^(\.git|\.hg|\.svn)$",
        r"^(node_modules|__pycache__|\.mypy_cache|\.pytest_cache|\.tox)$",
        r"^(\.venv|venv|\.idea|\.vscode)$",
    ]


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Index
        "root_path": os.getcwd(),
        "policy_filenames": default_policy_filenames(),
        "exclude_patterns": default_exclude_patterns(),
        "max_symlink_depth": DEFAULT_MAX_SYMLINK_DEPTH,
        "encoding": "utf-8",

        # Reporting
        "show_considered": False,
        "count_tokens": False,
        "target_model": DEFAULT_TARGET_MODEL,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default persisted state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "settings": get_default_config(),
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state() -> Dict[str, Any]:
    """
    Load persisted state from disk, merging it over the defaults.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    default_state = get_default_app_state()

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return default_state

    state = default_state
    settings = data.get("settings")
    if isinstance(settings, dict):
        state["settings"].update(settings)

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist the state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Retrieve the active configuration (defaults overlaid with saved settings).
    """
    state = load_app_state()
    defaults = get_default_config()
    defaults.update(state.get("settings", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Save the provided config as the persisted settings.

    The index root is session-specific and is never persisted.
    """
    state = load_app_state()
    settings = {k: v for k, v in config.items() if k != "root_path"}
    state["settings"].update(settings)
    state["settings"].pop("root_path", None)
    save_app_state(state)
