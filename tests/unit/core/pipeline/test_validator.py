from __future__ import annotations

"""
Unit tests for the Configuration Validator.

Verifies:
1. Default value injection.
2. Type coercion (strings to bools, lists and ints).
3. Domain checks (filenames, regexes, encodings).
4. Strict mode validation.
"""

import os
from pathlib import Path

import pytest

from agentspolicy.core.pipeline.validator import validate_config


def test_validate_none_returns_defaults() -> None:
    cfg, warnings = validate_config(None)

    assert cfg["policy_filenames"] == ["AGENTS.md"]
    assert cfg["max_symlink_depth"] == 40
    assert len(warnings) == 1


def test_validate_empty_dict_is_clean() -> None:
    cfg, warnings = validate_config({})

    assert cfg["root_path"] == os.getcwd()
    assert cfg["encoding"] == "utf-8"
    assert warnings == []


def test_complete_config_passes_unchanged(mock_config_dict) -> None:
    cfg, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert cfg == mock_config_dict


def test_root_path_is_normalized(tmp_path: Path) -> None:
    cfg, _ = validate_config({"root_path": str(tmp_path / "a" / ".." / "b")})

    assert cfg["root_path"] == str(tmp_path / "b")


def test_string_coercions() -> None:
    raw = {
        "show_considered": "yes",
        "count_tokens": "0",
        "policy_filenames": "AGENTS.md, CLAUDE.md",
        "max_symlink_depth": "8",
    }
    cfg, warnings = validate_config(raw)

    assert cfg["show_considered"] is True
    assert cfg["count_tokens"] is False
    assert cfg["policy_filenames"] == ["AGENTS.md", "CLAUDE.md"]
    assert cfg["max_symlink_depth"] == 8
    assert len(warnings) == 4


def test_empty_exclusion_list_is_respected() -> None:
    cfg, warnings = validate_config({"exclude_patterns": []})

    assert cfg["exclude_patterns"] == []
    assert warnings == []


def test_filenames_with_separators_are_discarded() -> None:
    cfg, warnings = validate_config({"policy_filenames": ["docs/AGENTS.md", "AGENTS.md", "AGENTS.md"]})

    assert cfg["policy_filenames"] == ["AGENTS.md"]
    assert any("bare file name" in w for w in warnings)


def test_invalid_regex_is_dropped() -> None:
    cfg, warnings = validate_config({"exclude_patterns": [r"^ok$", r"(broken"]})

    assert cfg["exclude_patterns"] == [r"^ok$"]
    assert len(warnings) == 1


def test_unknown_encoding_falls_back() -> None:
    cfg, warnings = validate_config({"encoding": "klingon-8"})

    assert cfg["encoding"] == "utf-8"
    assert "klingon-8" in warnings[0]


@pytest.mark.parametrize("value", [0, -3, "many", 2.5])
def test_bad_link_depth_falls_back(value) -> None:
    cfg, warnings = validate_config({"max_symlink_depth": value})

    assert cfg["max_symlink_depth"] == 40
    assert len(warnings) == 1


def test_strict_mode_raises() -> None:
    with pytest.raises(TypeError):
        validate_config([], strict=True)
    with pytest.raises(TypeError):
        validate_config({"count_tokens": "yes"}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"max_symlink_depth": 0}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"exclude_patterns": ["(broken"]}, strict=True)
    with pytest.raises(ValueError):
        validate_config({"encoding": "klingon-8"}, strict=True)
