"""Dispatch fill passes to every frame of a page and aggregate the reports."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from .config import SettingsBundle
from .normalizer import normalize_profile
from .orchestrator import FillPolicy, fill_frame, ping_frame
from .site_rules import domain_from_url, is_allowed, policy_overrides

LOGGER = logging.getLogger(__name__)


def run_fill_pass(
    page: Page,
    bundle: SettingsBundle,
    *,
    url: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """Fill every frame of ``page`` from ``bundle`` unless the site is blocked."""
    log = logger or LOGGER
    domain = domain_from_url(url or page.url)
    allowed, reason = is_allowed(domain, bundle.site_rules)
    if not allowed:
        log.info("Fill blocked on %s: %s", domain or "<unknown>", reason)
        return {"ok": False, "blocked": True, "reason": reason, "domain": domain}

    overrides = policy_overrides(domain, bundle.site_rules)
    policy = FillPolicy.from_settings(bundle.settings, overrides)
    profile = normalize_profile(bundle.profile)
    log.debug("Policy for %s: %s", domain, policy)

    frame_results: List[Dict[str, Any]] = []
    for index, frame in enumerate(page.frames):
        try:
            report = fill_frame(frame, profile, policy, logger=log)
        except PlaywrightError as exc:
            log.warning("Frame #%s (%s) did not complete: %s", index, frame.url, exc)
            frame_results.append({"ok": False, "frameId": index, "error": str(exc)})
            continue
        frame_results.append(
            {"ok": True, "frameId": index, "res": {"ok": True, "report": report.to_dict()}}
        )

    summary = summarize_frame_results(frame_results)
    log.info(
        "Filled %d, skipped %d, errors %d across %d frames on %s",
        summary["filled"],
        summary["skipped"],
        summary["errors"],
        summary["framesResponded"],
        domain,
    )
    return {"ok": True, "domain": domain, "allow": reason, "summary": summary}


def summarize_frame_results(frame_results: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "framesResponded": 0,
        "filled": 0,
        "skipped": 0,
        "errors": 0,
        "reports": [],
    }
    for result in frame_results:
        payload = result.get("res") if result.get("ok") else None
        if not payload or not payload.get("ok"):
            summary["errors"] += 1
            continue
        summary["framesResponded"] += 1
        report = payload.get("report") or {}
        stats = report.get("stats")
        if stats:
            summary["filled"] += stats.get("filled", 0)
            summary["skipped"] += stats.get("skipped", 0)
            summary["errors"] += stats.get("errors", 0)
            summary["reports"].append(report)
    return summary


def ping_frames(
    page: Page, *, logger: Optional[logging.Logger] = None
) -> List[Dict[str, Any]]:
    log = logger or LOGGER
    results: List[Dict[str, Any]] = []
    for index, frame in enumerate(page.frames):
        try:
            results.append({"ok": True, "frameId": index, "res": ping_frame(frame)})
        except PlaywrightError as exc:
            log.debug("Frame #%s did not answer ping: %s", index, exc)
            results.append({"ok": False, "frameId": index, "error": str(exc)})
    return results


__all__ = ["run_fill_pass", "summarize_frame_results", "ping_frames"]
