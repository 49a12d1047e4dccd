"""Write resolved profile values into live form controls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .form_models import ElementKind, FieldDescriptor, OptionMetadata
from .text_utils import normalize_for_compare, safe_str

LOGGER = logging.getLogger(__name__)

# Goes through the prototype setter so framework-wrapped inputs (React, Vue)
# see the change on the next input/change event.
SET_TEXT_SCRIPT = """
(el, value) => {
  const previous = el.value;
  const proto = Object.getPrototypeOf(el);
  const descriptor = proto ? Object.getOwnPropertyDescriptor(proto, 'value') : null;
  if (descriptor && typeof descriptor.set === 'function') {
    descriptor.set.call(el, value);
  } else {
    el.value = value;
  }
  el.dispatchEvent(new Event('input', { bubbles: true }));
  el.dispatchEvent(new Event('change', { bubbles: true }));
  return { from: previous, to: el.value };
}
"""

SET_SELECT_SCRIPT = """
(el, value) => {
  const previous = el.value;
  el.value = value;
  el.dispatchEvent(new Event('input', { bubbles: true }));
  el.dispatchEvent(new Event('change', { bubbles: true }));
  return { from: previous, to: el.value };
}
"""


@dataclass(slots=True)
class InjectionResult:
    ok: bool
    detail: str = ""
    previous: Optional[str] = None
    value: Optional[str] = None
    matched: Optional[str] = None


def match_select_option(
    options: Sequence[OptionMetadata], desired: object
) -> Optional[Tuple[OptionMetadata, str]]:
    """Pick the option for ``desired``: value, then text, then containment."""
    wanted = normalize_for_compare(desired)
    if not wanted:
        return None
    for option in options:
        if normalize_for_compare(option.value) == wanted:
            return option, "value"
    for option in options:
        if normalize_for_compare(option.text) == wanted:
            return option, "text"
    for option in options:
        text = normalize_for_compare(option.text)
        if text and (wanted in text or text in wanted):
            return option, "fuzzy"
    return None


def set_value(
    descriptor: FieldDescriptor,
    value: object,
    *,
    logger: Optional[logging.Logger] = None,
) -> InjectionResult:
    """Inject ``value`` into the control; failures come back as results."""
    log = logger or LOGGER
    try:
        if descriptor.kind is ElementKind.DISCRETE_CHOICE:
            return _set_select_value(descriptor, value, log)
        text = safe_str(value)
        outcome = descriptor.handle.evaluate(SET_TEXT_SCRIPT, text) or {}
        return InjectionResult(
            ok=True,
            previous=outcome.get("from"),
            value=outcome.get("to", text),
        )
    except Exception as exc:  # noqa: BLE001
        log.debug("Injection failed for %s: %s", descriptor.canonical_name(), exc)
        return InjectionResult(ok=False, detail=str(exc))


def _set_select_value(
    descriptor: FieldDescriptor, value: object, log: logging.Logger
) -> InjectionResult:
    if not safe_str(value):
        return InjectionResult(ok=False, detail="empty desired value")
    match = match_select_option(descriptor.options, value)
    if match is None:
        return InjectionResult(ok=False, detail="no option match")
    option, tier = match
    log.debug(
        "Select %s matched option %r via %s",
        descriptor.canonical_name(),
        option.value,
        tier,
    )
    outcome = descriptor.handle.evaluate(SET_SELECT_SCRIPT, option.value) or {}
    return InjectionResult(
        ok=True,
        previous=outcome.get("from"),
        value=outcome.get("to", option.value),
        matched=tier,
    )


__all__ = [
    "InjectionResult",
    "SET_TEXT_SCRIPT",
    "SET_SELECT_SCRIPT",
    "match_select_option",
    "set_value",
]
