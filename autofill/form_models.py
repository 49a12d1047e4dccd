"""Snapshots of candidate form controls shared across the fill pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional


class ElementKind(str, Enum):
    SINGLE_LINE = "single_line"
    MULTI_LINE = "multi_line"
    DISCRETE_CHOICE = "discrete_choice"

    @classmethod
    def from_tag(cls, tag: str) -> Optional["ElementKind"]:
        return _KIND_BY_TAG.get((tag or "").lower())


_KIND_BY_TAG = {
    "input": ElementKind.SINGLE_LINE,
    "textarea": ElementKind.MULTI_LINE,
    "select": ElementKind.DISCRETE_CHOICE,
}


@dataclass(frozen=True, slots=True)
class Rect:
    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Rect"]:
        if not data:
            return None
        try:
            return cls(
                top=float(data["top"]),
                left=float(data["left"]),
                width=float(data["width"]),
                height=float(data["height"]),
            )
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True, slots=True)
class LabelBox:
    text: str
    rect: Optional[Rect]


@dataclass(frozen=True, slots=True)
class OptionMetadata:
    value: str
    text: str


@dataclass(slots=True)
class FieldDescriptor:
    """One candidate control as seen at the start of an invocation.

    ``handle`` is borrowed from the host document (a Playwright
    ``ElementHandle`` in production); only the injector touches it.
    """

    handle: Any
    kind: ElementKind
    input_type: str = "text"
    attributes: Dict[str, str] = field(default_factory=dict)
    label_for_text: Optional[str] = None
    wrapping_label_text: Optional[str] = None
    container_labels: List[LabelBox] = field(default_factory=list)
    rect: Optional[Rect] = None
    css_visible: bool = True
    hidden_attribute: bool = False
    value: str = ""
    options: List[OptionMetadata] = field(default_factory=list)
    matched_selectors: FrozenSet[str] = frozenset()
    order: int = 0

    def attr(self, name: str) -> str:
        return (self.attributes.get(name) or "").strip()

    @property
    def top(self) -> float:
        if self.rect is None:
            return float("inf")
        return self.rect.top

    def canonical_name(self) -> str:
        for candidate in (
            self.attr("name"),
            self.attr("id"),
            self.attr("placeholder"),
            self.attr("aria-label"),
        ):
            if candidate:
                return candidate
        return f"field_{self.order}"


__all__ = [
    "ElementKind",
    "Rect",
    "LabelBox",
    "OptionMetadata",
    "FieldDescriptor",
]
