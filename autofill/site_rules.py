"""Per-domain allow/block rules and field overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

import tldextract

SITE_MODES = ("neutral", "whitelist", "blacklist")
_TLD_EXTRACTOR = tldextract.TLDExtract(suffix_list_urls=())


@dataclass(slots=True)
class DomainRule:
    rule: str = "neutral"
    enabled_types: List[str] = field(default_factory=list)
    disabled_types: List[str] = field(default_factory=list)
    custom_map: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "DomainRule":
        """Build a rule from its wire form; raises ``ValueError`` on wrong shapes."""
        rule = data.get("rule") or "neutral"
        if rule not in SITE_MODES:
            raise ValueError(f"Unknown domain rule: {rule!r}")
        custom_map = data.get("customMap") or {}
        if not isinstance(custom_map, dict) or not all(
            isinstance(value, str) for value in custom_map.values()
        ):
            raise ValueError("customMap must be an object of selector strings")
        return cls(
            rule=rule,
            enabled_types=_string_list(data.get("enabledTypes"), "enabledTypes"),
            disabled_types=_string_list(data.get("disabledTypes"), "disabledTypes"),
            custom_map={str(key): value for key, value in custom_map.items()},
        )

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = {"rule": self.rule}
        if self.enabled_types:
            payload["enabledTypes"] = list(self.enabled_types)
        if self.disabled_types:
            payload["disabledTypes"] = list(self.disabled_types)
        if self.custom_map:
            payload["customMap"] = dict(self.custom_map)
        return payload


@dataclass(slots=True)
class SiteRules:
    mode: str = "neutral"
    domains: Dict[str, DomainRule] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, object]]) -> "SiteRules":
        data = data or {}
        mode = str(data.get("mode") or "neutral")
        if mode not in SITE_MODES:
            raise ValueError(f"Unknown site rules mode: {mode}")
        domains = {
            _strip_www(str(domain)): DomainRule.from_dict(rule or {})
            for domain, rule in (data.get("domains") or {}).items()
        }
        return cls(mode=mode, domains=domains)

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode,
            "domains": {domain: rule.to_dict() for domain, rule in self.domains.items()},
        }

    def lookup(self, domain: str) -> Optional[DomainRule]:
        """Exact host first, then its registrable domain."""
        if not domain:
            return None
        rule = self.domains.get(domain)
        if rule is not None:
            return rule
        registrable = registrable_domain(domain)
        if registrable and registrable != domain:
            return self.domains.get(registrable)
        return None


def _string_list(value: object, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{key} must be a list of strings")
    return list(value)


def _strip_www(host: str) -> str:
    host = host.strip().lower()
    return host[4:] if host.startswith("www.") else host


def domain_from_url(url: str) -> str:
    try:
        host = urlparse(url or "").hostname or ""
    except ValueError:
        return ""
    return _strip_www(host)


def registrable_domain(host: str) -> str:
    extracted = _TLD_EXTRACTOR(host)
    if extracted.domain and extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}".lower()
    return host


def is_allowed(domain: str, rules: SiteRules) -> Tuple[bool, str]:
    entry = rules.lookup(domain)
    listed = entry.rule if entry else None
    if rules.mode == "whitelist":
        if listed == "whitelist":
            return True, "domain whitelisted"
        return False, "not in whitelist mode list"
    if rules.mode == "blacklist":
        if listed == "blacklist":
            return False, "domain blacklisted (mode)"
        return True, "blacklist mode allow"
    if listed == "blacklist":
        return False, "domain blacklisted"
    return True, "neutral"


def policy_overrides(domain: str, rules: SiteRules) -> Dict[str, object]:
    """Override bundle for the fill policy: enabled/disabled types and custom map."""
    entry = rules.lookup(domain)
    if entry is None:
        return {"enabledTypes": None, "disabledTypes": [], "customMap": None}
    return {
        "enabledTypes": list(entry.enabled_types) or None,
        "disabledTypes": list(entry.disabled_types),
        "customMap": dict(entry.custom_map) or None,
    }


__all__ = [
    "DomainRule",
    "SiteRules",
    "domain_from_url",
    "registrable_domain",
    "is_allowed",
    "policy_overrides",
]
