"""Settings bundle: profile, fill settings and site rules in one JSON document."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from .field_types import FieldType
from .orchestrator import NameLockMode
from .site_rules import SiteRules

DEFAULT_PROFILE: Dict[str, str] = {field_type.value: "" for field_type in FieldType}
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug": False,
    "nameLock": {"enabled": True, "mode": NameLockMode.IF_EMPTY.value},
    "fillPolicy": {"skipIfNotEmpty": True, "dryRun": False},
}
DEFAULT_SITE_RULES: Dict[str, Any] = {"mode": "neutral", "domains": {}}

_BOOLEAN_SETTINGS = (
    ("debug",),
    ("nameLock", "enabled"),
    ("fillPolicy", "skipIfNotEmpty"),
    ("fillPolicy", "dryRun"),
)


class ConfigError(ValueError):
    """Raised when an imported settings document cannot be used."""


@dataclass(slots=True)
class SettingsBundle:
    profile: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PROFILE))
    settings: Dict[str, Any] = field(default_factory=lambda: copy.deepcopy(DEFAULT_SETTINGS))
    site_rules: SiteRules = field(default_factory=SiteRules)

    @property
    def debug(self) -> bool:
        return bool(self.settings.get("debug"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": dict(self.profile),
            "settings": copy.deepcopy(self.settings),
            "siteRules": self.site_rules.to_dict(),
        }


def parse_bundle(text: str) -> SettingsBundle:
    """Parse and validate a settings document; nothing is applied on failure."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("Settings document must be a JSON object")
    return bundle_from_dict(payload)


def bundle_from_dict(payload: Mapping[str, Any]) -> SettingsBundle:
    profile_raw = _section(payload, "profile")
    settings_raw = _section(payload, "settings")
    rules_raw = _section(payload, "siteRules")

    profile = dict(DEFAULT_PROFILE)
    for key, value in profile_raw.items():
        if key in profile:
            profile[key] = "" if value is None else str(value)

    settings = copy.deepcopy(DEFAULT_SETTINGS)
    for key, value in settings_raw.items():
        if isinstance(settings.get(key), dict):
            if not isinstance(value, dict):
                raise ConfigError(f"settings.{key} must be an object")
            settings[key].update(value)
        else:
            settings[key] = value
    mode = settings["nameLock"].get("mode")
    if mode not in {item.value for item in NameLockMode}:
        raise ConfigError(f"Unknown nameLock mode: {mode}")
    for path in _BOOLEAN_SETTINGS:
        value = settings
        for key in path:
            value = value[key]
        if not isinstance(value, bool):
            raise ConfigError(f"settings.{'.'.join(path)} must be true or false")

    merged_rules = {**DEFAULT_SITE_RULES, **rules_raw}
    if not isinstance(merged_rules.get("domains"), dict):
        raise ConfigError("siteRules.domains must be an object")
    for domain, rule in merged_rules["domains"].items():
        if not isinstance(rule, dict):
            raise ConfigError(f"siteRules.domains.{domain} must be an object")
    try:
        site_rules = SiteRules.from_dict(merged_rules)
    except (ValueError, AttributeError, TypeError) as exc:
        raise ConfigError(str(exc)) from exc

    return SettingsBundle(profile=profile, settings=settings, site_rules=site_rules)


def load_bundle(path: Path) -> SettingsBundle:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    return parse_bundle(text)


def export_bundle(bundle: SettingsBundle) -> str:
    return json.dumps(bundle.to_dict(), indent=2, ensure_ascii=False)


def _section(payload: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be an object")
    return value


__all__ = [
    "ConfigError",
    "SettingsBundle",
    "DEFAULT_PROFILE",
    "DEFAULT_SETTINGS",
    "DEFAULT_SITE_RULES",
    "parse_bundle",
    "bundle_from_dict",
    "load_bundle",
    "export_bundle",
]
