"""Collect weighted textual hints from a candidate control."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .form_models import FieldDescriptor, LabelBox, Rect
from .text_utils import safe_str

LOGGER = logging.getLogger(__name__)

SIGNAL_WEIGHTS: Dict[str, int] = {
    "placeholder": 4,
    "aria-label": 5,
    "name": 3,
    "id": 3,
    "autocomplete": 7,
    "data-testid": 2,
    "data-test": 2,
    "data-qa": 2,
    "label-for": 9,
    "label-wrap": 9,
    "near-label": 6,
}
ATTRIBUTE_SOURCES = (
    "placeholder",
    "aria-label",
    "name",
    "id",
    "autocomplete",
    "data-testid",
    "data-test",
    "data-qa",
)
NEAR_LABEL_TOLERANCE = 8.0
NEAR_LABEL_MAX_DISTANCE = 80.0


@dataclass(frozen=True, slots=True)
class Signal:
    text: str
    weight: int
    source: str


def extract_signals(
    descriptor: FieldDescriptor,
    weights: Optional[Dict[str, int]] = None,
) -> List[Signal]:
    """Return one signal per non-empty hint, in fixed source order."""
    table = weights or SIGNAL_WEIGHTS
    signals: List[Signal] = []

    def add(text: object, source: str) -> None:
        cleaned = safe_str(text)
        if cleaned:
            weight = table.get(source, SIGNAL_WEIGHTS[source])
            signals.append(Signal(text=cleaned, weight=weight, source=source))

    for source in ATTRIBUTE_SOURCES:
        add(descriptor.attributes.get(source), source)
    add(descriptor.label_for_text, "label-for")
    add(descriptor.wrapping_label_text, "label-wrap")
    add(find_nearest_label_text(descriptor), "near-label")
    return signals


def find_nearest_label_text(descriptor: FieldDescriptor) -> str:
    """Closest label above or left of the control inside its container.

    Geometry is best-effort: anything missing or malformed yields ``""``.
    """
    try:
        element_rect = descriptor.rect
        if element_rect is None or not descriptor.container_labels:
            return ""
        best: Optional[Tuple[float, str]] = None
        for label in descriptor.container_labels:
            distance = _label_distance(label, element_rect)
            if distance is None or distance > NEAR_LABEL_MAX_DISTANCE:
                continue
            if best is None or distance < best[0]:
                best = (distance, label.text.strip())
        return best[1] if best else ""
    except (AttributeError, TypeError, ValueError) as exc:
        LOGGER.debug("Nearest label lookup failed for %s: %s", descriptor.order, exc)
        return ""


def _label_distance(label: LabelBox, element: Rect) -> Optional[float]:
    if label.rect is None or not safe_str(label.text):
        return None
    box = label.rect
    gaps: List[float] = []
    if box.bottom <= element.top + NEAR_LABEL_TOLERANCE:
        gaps.append(max(element.top - box.bottom, 0.0))
    same_row = (
        box.top < element.bottom + NEAR_LABEL_TOLERANCE
        and box.bottom > element.top - NEAR_LABEL_TOLERANCE
    )
    if same_row and box.right <= element.left + NEAR_LABEL_TOLERANCE:
        gaps.append(max(element.left - box.right, 0.0))
    if not gaps:
        return None
    return min(gaps)


__all__ = [
    "Signal",
    "SIGNAL_WEIGHTS",
    "NEAR_LABEL_MAX_DISTANCE",
    "extract_signals",
    "find_nearest_label_text",
]
