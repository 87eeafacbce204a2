from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import yaml

from resume_insights.core.config import settings

_DEFAULT_SCORING_PATH = Path(__file__).resolve().parent / "scoring.yaml"
_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_ATS_WEIGHT_KEYS = ("keywords", "format", "completeness", "experience")


def _config_path() -> Path:
    if settings.scoring_config_path:
        return Path(settings.scoring_config_path)
    return _DEFAULT_SCORING_PATH


def _check_ats_weights(parsed: dict[str, Any], path: Path) -> None:
    weights = (parsed.get("ats") or {}).get("weights")
    if weights is None:
        return
    if not isinstance(weights, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': ats.weights must be a mapping.")

    values = []
    for key in _ATS_WEIGHT_KEYS:
        value = weights.get(key)
        if not isinstance(value, (int, float)) or value < 0:
            raise RuntimeError(f"Invalid scoring config '{path}': ats.weights.{key} must be a non-negative number.")
        values.append(float(value))

    if not math.isclose(sum(values), 1.0, abs_tol=1e-6):
        raise RuntimeError(f"Invalid scoring config '{path}': ats.weights must sum to 1 (got {sum(values):.4f}).")


def load_scoring_config(path: Path) -> dict[str, Any]:
    """Read and validate one scoring YAML file. Raises RuntimeError on any problem."""
    if not path.exists():
        raise RuntimeError(f"Scoring config not found at '{path}'.")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")

    _check_ats_weights(parsed, path)
    return parsed


def get_scoring_config() -> dict[str, Any]:
    """Scoring constants, loaded once per process from SCORING_CONFIG_PATH or the packaged file."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is None:
        _SCORING_CONFIG_CACHE = load_scoring_config(_config_path())
    return _SCORING_CONFIG_CACHE


def clear_scoring_config_cache() -> None:
    global _SCORING_CONFIG_CACHE
    _SCORING_CONFIG_CACHE = None


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Dot-path lookup, e.g. ``get_scoring_value("ats.weights.keywords", 0.30)``.

    Missing keys, or walking into a non-mapping, return ``default``.
    """
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current
