"""Snapshot candidate controls from a live Playwright frame."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from playwright.sync_api import ElementHandle, Frame
from playwright.sync_api import Error as PlaywrightError

from .form_models import ElementKind, FieldDescriptor, LabelBox, OptionMetadata, Rect

LOGGER = logging.getLogger(__name__)

# Playwright's CSS engine pierces open shadow roots.
FIELD_QUERY = "input, textarea, select"
SNAPSHOT_ATTRIBUTES = (
    "placeholder",
    "aria-label",
    "name",
    "id",
    "autocomplete",
    "data-testid",
    "data-test",
    "data-qa",
)

FIELD_SNAPSHOT_SCRIPT = """
(el, [attributeNames, selectors]) => {
  const text = (node) => ((node && (node.innerText || node.textContent)) || '').trim();
  const box = (node) => {
    const r = node.getBoundingClientRect();
    return { top: r.top, left: r.left, width: r.width, height: r.height };
  };
  const attributes = {};
  for (const name of attributeNames) {
    const value = el.getAttribute(name);
    if (value !== null) attributes[name] = value;
  }
  const tag = el.tagName.toLowerCase();

  let labelFor = null;
  if (el.id) {
    const root = el.getRootNode ? el.getRootNode() : document;
    const scope = root && root.querySelector ? root : document;
    const bound = scope.querySelector(`label[for="${CSS.escape(el.id)}"]`);
    if (bound) labelFor = text(bound);
  }
  const wrapping = el.closest('label');

  const BLOCK_TAGS = new Set(['div', 'section', 'form', 'fieldset', 'li', 'p', 'td', 'article']);
  const BLOCK_DISPLAYS = new Set(['block', 'flex', 'grid', 'table-cell', 'list-item', 'flow-root']);
  let container = el.parentElement;
  while (container) {
    const display = window.getComputedStyle(container).display;
    if (BLOCK_TAGS.has(container.tagName.toLowerCase()) || BLOCK_DISPLAYS.has(display)) break;
    container = container.parentElement;
  }
  const containerLabels = [];
  if (container) {
    const found = container.querySelectorAll("label, [role='label'], .label, .field-label, .form-label");
    for (const node of Array.from(found)) {
      const value = text(node);
      if (value) containerLabels.push({ text: value, rect: box(node) });
    }
  }

  const style = window.getComputedStyle(el);
  const options = [];
  if (tag === 'select') {
    for (const opt of Array.from(el.options || [])) {
      options.push({ value: opt.value, text: (opt.textContent || '').trim() });
    }
  }
  const matched = [];
  for (const selector of selectors) {
    try {
      if (el.matches(selector)) matched.push(selector);
    } catch (err) {}
  }
  return {
    tag,
    type: tag === 'input' ? (el.getAttribute('type') || 'text').toLowerCase() : tag,
    attributes,
    labelFor,
    wrappingLabel: wrapping ? text(wrapping) : null,
    containerLabels,
    rect: box(el),
    cssVisible: style.visibility !== 'hidden' && style.display !== 'none',
    hiddenAttribute: el.hasAttribute('hidden'),
    value: el.value == null ? '' : String(el.value),
    options,
    matched,
  };
}
"""


def collect_candidates(
    frame: Frame,
    *,
    selectors: Iterable[str] = (),
    logger: Optional[logging.Logger] = None,
) -> List[FieldDescriptor]:
    """Return a descriptor for every input, textarea and select in ``frame``.

    ``selectors`` are custom-map hints; each descriptor records the ones its
    element matches. Elements that cannot be snapshotted are skipped.
    """
    log = logger or LOGGER
    wanted = [selector for selector in selectors if selector]
    handles = frame.query_selector_all(FIELD_QUERY)
    descriptors: List[FieldDescriptor] = []
    for order, handle in enumerate(handles):
        descriptor = _build_field_descriptor(handle, order, wanted, log)
        if descriptor is not None:
            descriptors.append(descriptor)
    log.debug("Collected %d of %d controls in %s", len(descriptors), len(handles), frame.url)
    return descriptors


def _build_field_descriptor(
    handle: ElementHandle,
    order: int,
    selectors: List[str],
    log: logging.Logger,
) -> Optional[FieldDescriptor]:
    try:
        data = handle.evaluate(
            FIELD_SNAPSHOT_SCRIPT, [list(SNAPSHOT_ATTRIBUTES), selectors]
        )
    except PlaywrightError as exc:
        log.debug("Skipping control #%s: %s", order, exc)
        return None
    if not data:
        return None
    return descriptor_from_snapshot(handle, data, order)


def descriptor_from_snapshot(
    handle: Any, data: Dict[str, Any], order: int
) -> Optional[FieldDescriptor]:
    kind = ElementKind.from_tag(data.get("tag", ""))
    if kind is None:
        return None
    return FieldDescriptor(
        handle=handle,
        kind=kind,
        input_type=(data.get("type") or "text").lower(),
        attributes={k: str(v) for k, v in (data.get("attributes") or {}).items()},
        label_for_text=data.get("labelFor"),
        wrapping_label_text=data.get("wrappingLabel"),
        container_labels=[
            LabelBox(text=str(item.get("text") or ""), rect=Rect.from_dict(item.get("rect")))
            for item in data.get("containerLabels") or []
        ],
        rect=Rect.from_dict(data.get("rect")),
        css_visible=bool(data.get("cssVisible", True)),
        hidden_attribute=bool(data.get("hiddenAttribute", False)),
        value=str(data.get("value") or ""),
        options=[
            OptionMetadata(value=str(opt.get("value") or ""), text=str(opt.get("text") or ""))
            for opt in data.get("options") or []
        ],
        matched_selectors=frozenset(data.get("matched") or ()),
        order=order,
    )


__all__ = ["FIELD_QUERY", "collect_candidates", "descriptor_from_snapshot"]
