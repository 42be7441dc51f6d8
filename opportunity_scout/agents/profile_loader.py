"""Profile loader — reads profile.yaml and produces a frozen Profile."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from opportunity_scout.exceptions import ConfigurationError
from opportunity_scout.models.profile import Profile

logger = logging.getLogger(__name__)


def load_profile(filepath: str = "profile.yaml") -> Profile:
    """Parse a human-written profile.yaml into a Profile.

    A missing file yields the default profile. The parser is lenient:
    unknown keys are ignored, comma-separated strings are accepted where
    lists are expected, and ``skills`` may be grouped by category.

    Raises:
        ConfigurationError: If the file is not valid YAML or holds invalid values.
    """
    path = Path(filepath)
    if not path.exists():
        logger.warning("Profile file not found at %s — using defaults", filepath)
        return Profile()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Profile file {filepath} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Profile file {filepath} must contain a mapping")

    data = _normalize(data)
    try:
        profile = Profile(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid profile in {filepath}: {e}") from e

    logger.info(
        "Loaded profile from %s: %d skills, %d target roles, class of %d",
        filepath,
        len(profile.skills),
        len(profile.target_roles),
        profile.graduation_year,
    )
    return profile


# =============================================================================
# Parsing helpers
# =============================================================================

_LIST_FIELDS = (
    "skills", "frameworks", "target_roles", "role_keywords", "cohort_keywords",
    "preferred_locations", "must_have_keywords", "avoid_keywords",
)


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    out = {k: v for k, v in data.items() if v is not None}

    skills = out.get("skills")
    if isinstance(skills, dict):
        out["skills"] = _flatten_groups(skills)

    for field in _LIST_FIELDS:
        if field in out:
            out[field] = _as_list(out[field])

    if "min_compensation" in out:
        out["min_compensation"] = _parse_number(out["min_compensation"])
    return out


def _flatten_groups(groups: dict[str, Any]) -> list[str]:
    """Flatten {category: [skills]} keeping first occurrence order."""
    flat: list[str] = []
    for items in groups.values():
        flat.extend(_as_list(items))
    return list(dict.fromkeys(flat))


def _as_list(value: Any) -> list[str]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        items = [str(value)]
    return [item.strip() for item in items if item.strip()]


def _parse_number(value: Any) -> Any:
    """Accept 50000, "50,000" or "₹50,000"."""
    if isinstance(value, str):
        cleaned = value.replace(",", "").replace("₹", "").strip()
        try:
            return int(float(cleaned))
        except ValueError:
            return value
    return value
