from __future__ import annotations

"""
Configuration Validation Service.

Normalizes configuration dictionaries coming from disk or the CLI into
strictly typed values. Lenient mode coerces and records warnings; strict
mode raises on the first violation.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from plantocode.domain.config import get_default_config

logger = logging.getLogger(__name__)

# (field, minimum, maximum); None leaves that side open
_INT_FIELDS: List[Tuple[str, int, Optional[int]]] = [
    ("max_output_tokens", 1, None),
    ("top_k", 1, None),
]
_FLOAT_FIELDS: List[Tuple[str, float, Optional[float]]] = [
    ("temperature", 0.0, 2.0),
    ("top_p", 0.0, 1.0),
    ("request_timeout", 1.0, None),
]
_STRING_FIELDS = ["gemini_model", "log_level"]
_BOOL_FIELDS = ["respect_gitignore", "include_hidden"]

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
        config: Raw configuration data.
        strict: Raise instead of coercing on type or range violations.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.

    Raises:
        TypeError: In strict mode, on a type mismatch.
        ValueError: In strict mode, on an out-of-range value.
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

    for name in _STRING_FIELDS:
        merged[name] = _as_str(merged.get(name), defaults[name], name, warnings, strict)

    for name in _BOOL_FIELDS:
        merged[name] = _as_bool(merged.get(name), defaults[name], name, warnings, strict)

    for name, low, high in _INT_FIELDS:
        merged[name] = _as_number(merged.get(name), defaults[name], name, int, low, high, warnings, strict)

    for name, low, high in _FLOAT_FIELDS:
        merged[name] = _as_number(merged.get(name), defaults[name], name, float, low, high, warnings, strict)

    merged["max_depth"] = _as_optional_depth(merged.get("max_depth"), warnings, strict)
    merged["exclude_patterns"] = _as_list_str(
        merged.get("exclude_patterns"), defaults["exclude_patterns"], "exclude_patterns", warnings, strict
    )

    log_file = merged.get("log_file")
    merged["log_file"] = log_file.strip() if isinstance(log_file, str) else ""

    return merged, warnings

# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _fail(msg: str, warnings: List[str], strict: bool, exc: type = TypeError) -> None:
    if strict:
        raise exc(msg)
    warnings.append(f"{msg} Using fallback.")


def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return fallback
    if isinstance(value, str):
        v = value.strip()
        return v if v else fallback

    _fail(f"Invalid field '{field}': expected str, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict and isinstance(value, str):
        s = value.strip().lower()
        if s in ("true", "1", "yes", "y", "on"):
            warnings.append(f"Field '{field}' converted from '{value}' to True.")
            return True
        if s in ("false", "0", "no", "n", "off"):
            warnings.append(f"Field '{field}' converted from '{value}' to False.")
            return False

    _fail(f"Invalid field '{field}': expected bool, received {type(value).__name__}.", warnings, strict)
    return fallback


def _as_number(
        value: Any,
        fallback: Any,
        field: str,
        kind: type,
        low: Any,
        high: Any,
        warnings: List[str],
        strict: bool,
) -> Any:
    """Coerce to int/float and clamp into [low, high]."""
    if value is None:
        return fallback

    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        _fail(f"Invalid field '{field}': expected {kind.__name__}, received {type(value).__name__}.",
              warnings, strict)
        return fallback

    if isinstance(value, str) or (kind is int and isinstance(value, float)):
        if strict:
            raise TypeError(f"Invalid field '{field}': expected {kind.__name__}, received {type(value).__name__}.")
        try:
            parsed = float(value)
            if not math.isfinite(parsed):
                raise ValueError(value)
            number = kind(parsed)
        except (ValueError, OverflowError):
            warnings.append(f"Invalid field '{field}': cannot parse '{value}'. Using fallback.")
            return fallback
        warnings.append(f"Field '{field}' converted from '{value}' to {number}.")
    elif isinstance(value, float) and not math.isfinite(value):
        _fail(f"Invalid field '{field}': non-finite value {value}.", warnings, strict, ValueError)
        return fallback
    else:
        try:
            number = kind(value)
        except OverflowError:
            _fail(f"Invalid field '{field}': value out of representable range.", warnings, strict, ValueError)
            return fallback

    if number < low or (high is not None and number > high):
        bound = f"[{low}, {high}]" if high is not None else f">= {low}"
        msg = f"Field '{field}' out of range {bound}: {number}."
        if strict:
            raise ValueError(msg)
        number = max(low, number) if high is None else min(max(low, number), high)
        warnings.append(f"{msg} Clamped to {number}.")

    return number


def _as_optional_depth(value: Any, warnings: List[str], strict: bool) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            if strict:
                raise ValueError(f"Field 'max_depth' must be >= 0, received {value}.")
            warnings.append(f"Field 'max_depth' negative ({value}). Depth limit disabled.")
            return None
        return value

    _fail(f"Invalid field 'max_depth': expected int, received {type(value).__name__}.", warnings, strict)
    return None


def _as_list_str(value: Any, fallback: List[str], field: str, warnings: List[str], strict: bool) -> List[str]:
    """Ensure a list of non-empty strings, accepting CSV text in lenient mode."""
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
                continue
            msg = f"Invalid item in '{field}[{i}]': expected str."
            if strict:
                raise TypeError(msg)
            warnings.append(f"{msg} Item discarded.")
        return out

    _fail(f"Invalid field '{field}': expected list[str], received {type(value).__name__}.", warnings, strict)
    return list(fallback)
