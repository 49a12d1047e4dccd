"""Policy-gated fill pass over one document context."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Frame

from .candidate_selector import assign_pairs, eligible_candidates, score_candidates
from .collector import collect_candidates
from .field_scorer import ScoringConfig
from .field_types import (
    FIELD_TYPES,
    NAME_LOCK_FIELD_TYPES,
    SENSITIVE_FIELD_TYPES,
    FieldType,
    parse_field_types,
)
from .form_models import FieldDescriptor
from .normalizer import Profile
from .value_injector import set_value

LOGGER = logging.getLogger(__name__)

_DIGIT = re.compile(r"\d")


class NameLockMode(str, Enum):
    IF_EMPTY = "IF_EMPTY"
    NEVER = "NEVER"
    PROTECT = "PROTECT"


class FillPhase(str, Enum):
    IDLE = "idle"
    COLLECTING_CANDIDATES = "collecting_candidates"
    SCORING = "scoring"
    SELECTING = "selecting"
    APPLYING_POLICY = "applying_policy"
    INJECTING = "injecting"
    REPORTED = "reported"


@dataclass(frozen=True, slots=True)
class NameLock:
    enabled: bool = True
    mode: NameLockMode = NameLockMode.IF_EMPTY


@dataclass(frozen=True, slots=True)
class FillPolicy:
    skip_if_not_empty: bool = True
    dry_run: bool = False
    name_lock: NameLock = field(default_factory=NameLock)
    enabled_types: Optional[FrozenSet[FieldType]] = None
    disabled_types: FrozenSet[FieldType] = frozenset()
    custom_map: Mapping[FieldType, str] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Mapping[str, object]] = None,
        options: Optional[Mapping[str, object]] = None,
    ) -> "FillPolicy":
        """Build a policy from wire-format settings and a domain override bundle."""
        settings = settings or {}
        options = options or {}
        fill_policy = settings.get("fillPolicy") or {}
        name_lock = settings.get("nameLock") or {}
        try:
            mode = NameLockMode(str(name_lock.get("mode") or NameLockMode.IF_EMPTY.value))
        except ValueError:
            mode = NameLockMode.IF_EMPTY
        enabled = parse_field_types(options.get("enabledTypes"))
        custom_map: Dict[FieldType, str] = {}
        for key, selector in (options.get("customMap") or {}).items():
            resolved = parse_field_types([key])
            if resolved and isinstance(selector, str) and selector.strip():
                custom_map[resolved[0]] = selector.strip()
        return cls(
            skip_if_not_empty=fill_policy.get("skipIfNotEmpty", True) is not False,
            dry_run=fill_policy.get("dryRun") is True,
            name_lock=NameLock(enabled=name_lock.get("enabled", True) is not False, mode=mode),
            enabled_types=frozenset(enabled) if enabled else None,
            disabled_types=frozenset(parse_field_types(options.get("disabledTypes"))),
            custom_map=custom_map,
        )


@dataclass(slots=True)
class FieldReport:
    field_type: FieldType
    element_ref: str
    action: str
    reason: str = ""
    descriptor: Optional[FieldDescriptor] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, str]:
        return {
            "fieldType": self.field_type.value,
            "elementRef": self.element_ref,
            "action": self.action,
            "reason": self.reason,
        }


@dataclass(slots=True)
class FillStats:
    filled: int = 0
    skipped: int = 0
    errors: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"filled": self.filled, "skipped": self.skipped, "errors": self.errors}


@dataclass(slots=True)
class FillReport:
    stats: FillStats = field(default_factory=FillStats)
    per_field: List[FieldReport] = field(default_factory=list)

    def record(self, entry: FieldReport) -> None:
        self.per_field.append(entry)
        if entry.action == "filled":
            self.stats.filled += 1
        elif entry.action == "skipped":
            self.stats.skipped += 1
        elif entry.action == "error":
            self.stats.errors += 1

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": self.stats.to_dict(),
            "reports": [entry.to_dict() for entry in self.per_field],
        }


def looks_like_name(value: str) -> bool:
    text = value.strip()
    return bool(text) and not _DIGIT.search(text)


def mask_value(field_type: FieldType, value: str) -> str:
    if field_type in SENSITIVE_FIELD_TYPES:
        return "***"
    if len(value) > 18:
        return f"{value[:8]}…"
    return value


def run_fill(
    descriptors: Sequence[FieldDescriptor],
    profile: Profile,
    policy: Optional[FillPolicy] = None,
    *,
    config: Optional[ScoringConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> FillReport:
    """Classify ``descriptors`` and fill them from ``profile`` under ``policy``."""
    log = logger or LOGGER
    policy = policy or FillPolicy()
    report = FillReport()

    _enter(FillPhase.SCORING, log)
    pinned = _resolve_custom_map(descriptors, policy, log)
    open_types = [ft for ft in FIELD_TYPES if ft not in pinned]
    pairs = score_candidates(descriptors, open_types, config)

    _enter(FillPhase.SELECTING, log)
    assignment = assign_pairs(pairs, FIELD_TYPES, config, pinned=pinned, logger=log)

    _enter(FillPhase.APPLYING_POLICY, log)
    planned: List[FieldReport] = []
    for field_type in FIELD_TYPES:
        descriptor = assignment.get(field_type)
        if descriptor is None:
            continue
        reason = _skip_reason(field_type, descriptor, profile, policy)
        entry = FieldReport(
            field_type=field_type,
            element_ref=descriptor.canonical_name(),
            action="skipped" if reason else "pending",
            reason=reason or ("custom-map" if field_type in pinned else "matched"),
            descriptor=descriptor,
        )
        if entry.action == "pending" and policy.dry_run:
            entry.action = "would-fill"
        planned.append(entry)

    _enter(FillPhase.INJECTING, log)
    for entry in planned:
        if entry.action == "pending":
            value = profile.get(entry.field_type)
            outcome = set_value(entry.descriptor, value, logger=log)
            if outcome.ok:
                entry.action = "filled"
                log.debug(
                    "Filled %s (%s) with %s",
                    entry.element_ref,
                    entry.field_type.value,
                    mask_value(entry.field_type, value),
                )
            else:
                entry.action = "error"
                entry.reason = outcome.detail
                log.warning(
                    "Failed to fill %s (%s): %s",
                    entry.element_ref,
                    entry.field_type.value,
                    outcome.detail,
                )
        report.record(entry)

    _enter(FillPhase.REPORTED, log)
    log.info(
        "Fill pass complete: filled=%d skipped=%d errors=%d",
        report.stats.filled,
        report.stats.skipped,
        report.stats.errors,
    )
    return report


def _enter(phase: FillPhase, log: logging.Logger) -> None:
    log.debug("Fill phase -> %s", phase.value)


def _resolve_custom_map(
    descriptors: Sequence[FieldDescriptor],
    policy: FillPolicy,
    log: logging.Logger,
) -> Dict[FieldType, FieldDescriptor]:
    pinned: Dict[FieldType, FieldDescriptor] = {}
    if not policy.custom_map:
        return pinned
    candidates = eligible_candidates(descriptors)
    for field_type, selector in policy.custom_map.items():
        if field_type in policy.disabled_types:
            log.debug("Custom map for %s ignored: type disabled", field_type.value)
            continue
        match = next((d for d in candidates if selector in d.matched_selectors), None)
        if match is None:
            log.debug("Custom map selector %r for %s matched nothing", selector, field_type.value)
            continue
        if any(match is claimed for claimed in pinned.values()):
            log.warning(
                "Custom map selector %r for %s hits an element already pinned; scoring it instead",
                selector,
                field_type.value,
            )
            continue
        log.debug("Custom map pins %s -> %s", field_type.value, match.canonical_name())
        pinned[field_type] = match
    return pinned


def _skip_reason(
    field_type: FieldType,
    descriptor: FieldDescriptor,
    profile: Profile,
    policy: FillPolicy,
) -> Optional[str]:
    if policy.enabled_types and field_type not in policy.enabled_types:
        return "not-enabled"
    if field_type in policy.disabled_types:
        return "disabled"
    if not profile.get(field_type):
        return "no-value"
    current = (descriptor.value or "").strip()
    if field_type in NAME_LOCK_FIELD_TYPES and policy.name_lock.enabled:
        mode = policy.name_lock.mode
        if mode is NameLockMode.NEVER:
            return "name-locked"
        if mode is NameLockMode.PROTECT:
            return "name-protected" if looks_like_name(current) else None
        return "already-filled" if current else None
    if policy.skip_if_not_empty and current:
        return "already-filled"
    return None


def fill_frame(
    frame: Frame,
    profile: Profile,
    policy: Optional[FillPolicy] = None,
    *,
    config: Optional[ScoringConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> FillReport:
    """Run one isolated fill pass over a live frame.

    A frame that cannot be queried yields an empty report.
    """
    log = logger or LOGGER
    policy = policy or FillPolicy()
    _enter(FillPhase.COLLECTING_CANDIDATES, log)
    try:
        descriptors = collect_candidates(
            frame, selectors=policy.custom_map.values(), logger=log
        )
    except PlaywrightError as exc:
        log.warning("Could not collect controls from %s: %s", frame.url, exc)
        return FillReport()
    if not descriptors:
        log.info("No candidate controls in %s", frame.url)
        return FillReport()
    return run_fill(descriptors, profile, policy, config=config, logger=log)


def ping_frame(frame: Frame) -> Dict[str, object]:
    return {"ok": True, "url": frame.url}


__all__ = [
    "NameLockMode",
    "NameLock",
    "FillPolicy",
    "FillPhase",
    "FieldReport",
    "FillStats",
    "FillReport",
    "looks_like_name",
    "mask_value",
    "run_fill",
    "fill_frame",
    "ping_frame",
]
