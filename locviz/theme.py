"""Persisted display theme preference (light / dark / automatic)."""

import logging
from pathlib import Path

import yaml

from locviz.models import ThemePreference

logger = logging.getLogger(__name__)

PREFERENCE_KEY = "color_scheme"


def parse_preference(value: object) -> ThemePreference | None:
    """Accept enum values and the CSS form 'light dark' for automatic."""
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    if value == ThemePreference.AUTO.css_value:
        return ThemePreference.AUTO
    try:
        return ThemePreference(value)
    except ValueError:
        return None


class ThemeStore:
    """Reads and writes the single theme preference to a YAML file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> ThemePreference:
        if not self.path.exists():
            return ThemePreference.AUTO
        try:
            raw = yaml.safe_load(self.path.read_text()) or {}
        except yaml.YAMLError as e:
            logger.warning("Could not parse %s (%s); using automatic", self.path, e)
            return ThemePreference.AUTO
        stored = raw.get(PREFERENCE_KEY) if isinstance(raw, dict) else None
        pref = parse_preference(stored)
        if pref is None:
            logger.warning("Unrecognised theme %r in %s; using automatic", stored, self.path)
            return ThemePreference.AUTO
        return pref

    def save(self, pref: ThemePreference) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump({PREFERENCE_KEY: pref.value}))
        logger.info("Color scheme changed to %s", pref.value)
