from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies type coercion, range clamping and the strict mode contract.
"""

import pytest

from plantocode.core.validator import validate_config
from plantocode.domain.config import get_default_config


def test_valid_config_passes_without_warnings(mock_config_dict) -> None:
    clean, warnings = validate_config(mock_config_dict)

    assert warnings == []
    assert clean["gemini_model"] == "gemini-2.0-flash"
    assert clean["max_output_tokens"] == 1024
    assert clean["exclude_patterns"] == ["node_modules", ".git"]


def test_missing_keys_take_defaults() -> None:
    clean, warnings = validate_config({})

    assert warnings == []
    assert clean == get_default_config()


def test_non_dict_input_returns_defaults() -> None:
    clean, warnings = validate_config(["not", "a", "dict"])

    assert clean == get_default_config()
    assert len(warnings) == 1


def test_non_dict_input_raises_in_strict_mode() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


def test_string_numbers_and_booleans_are_coerced(mock_config_dict) -> None:
    mock_config_dict.update({"top_k": "15", "respect_gitignore": "yes", "temperature": "0.5"})

    clean, warnings = validate_config(mock_config_dict)

    assert clean["top_k"] == 15
    assert clean["respect_gitignore"] is True
    assert clean["temperature"] == 0.5
    assert len(warnings) == 3


def test_out_of_range_values_are_clamped(mock_config_dict) -> None:
    mock_config_dict.update({"temperature": 5, "top_p": -1, "max_output_tokens": 0})

    clean, warnings = validate_config(mock_config_dict)

    assert clean["temperature"] == 2.0
    assert clean["top_p"] == 0.0
    assert clean["max_output_tokens"] == 1
    assert len(warnings) == 3


def test_zero_temperature_is_kept(mock_config_dict) -> None:
    mock_config_dict["temperature"] = 0

    clean, warnings = validate_config(mock_config_dict)

    assert clean["temperature"] == 0.0
    assert warnings == []


def test_out_of_range_raises_in_strict_mode(mock_config_dict) -> None:
    mock_config_dict["top_p"] = 1.5

    with pytest.raises(ValueError):
        validate_config(mock_config_dict, strict=True)


def test_wrong_type_raises_in_strict_mode(mock_config_dict) -> None:
    mock_config_dict["include_hidden"] = "true"

    with pytest.raises(TypeError):
        validate_config(mock_config_dict, strict=True)


def test_max_depth_rules(mock_config_dict) -> None:
    mock_config_dict["max_depth"] = -3
    clean, warnings = validate_config(mock_config_dict)
    assert clean["max_depth"] is None
    assert warnings

    mock_config_dict["max_depth"] = 2
    clean, _ = validate_config(mock_config_dict)
    assert clean["max_depth"] == 2


def test_exclude_patterns_accept_csv_and_drop_bad_items(mock_config_dict) -> None:
    mock_config_dict["exclude_patterns"] = "dist, build ,"
    clean, _ = validate_config(mock_config_dict)
    assert clean["exclude_patterns"] == ["dist", "build"]

    mock_config_dict["exclude_patterns"] = ["dist", 3, " "]
    clean, warnings = validate_config(mock_config_dict)
    assert clean["exclude_patterns"] == ["dist"]
    assert any("discarded" in w for w in warnings)


def test_bool_is_not_a_number(mock_config_dict) -> None:
    mock_config_dict["top_k"] = True

    clean, warnings = validate_config(mock_config_dict)

    assert clean["top_k"] == get_default_config()["top_k"]
    assert warnings


@pytest.mark.parametrize("field", ["top_k", "temperature"])
@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "1e999"])
def test_non_finite_numbers_fall_back(mock_config_dict, field, value) -> None:
    mock_config_dict[field] = value

    clean, warnings = validate_config(mock_config_dict)

    assert clean[field] == get_default_config()[field]
    assert any(field in w for w in warnings)


def test_non_finite_float_raises_in_strict_mode(mock_config_dict) -> None:
    mock_config_dict["temperature"] = float("nan")

    with pytest.raises(ValueError):
        validate_config(mock_config_dict, strict=True)
