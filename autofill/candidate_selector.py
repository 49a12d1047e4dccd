"""Global assignment of profile field types to candidate controls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .field_scorer import DEFAULT_CONFIG, ScoreResult, ScoringConfig, score_field_type
from .field_types import FIELD_TYPES, FieldType
from .form_models import ElementKind, FieldDescriptor

LOGGER = logging.getLogger(__name__)

BLOCKED_INPUT_TYPES = frozenset(
    {"password", "hidden", "file", "submit", "button", "reset", "checkbox", "radio", "image"}
)
MIN_RENDERED_SIZE = 2.0


@dataclass(slots=True)
class ScoredPair:
    descriptor: FieldDescriptor
    field_type: FieldType
    result: ScoreResult


def is_fillable(descriptor: FieldDescriptor) -> bool:
    if descriptor.kind in (ElementKind.MULTI_LINE, ElementKind.DISCRETE_CHOICE):
        return True
    return (descriptor.input_type or "text").lower() not in BLOCKED_INPUT_TYPES


def is_visible(descriptor: FieldDescriptor) -> bool:
    if not descriptor.css_visible or descriptor.hidden_attribute:
        return False
    rect = descriptor.rect
    if rect is None:
        return False
    return rect.width >= MIN_RENDERED_SIZE and rect.height >= MIN_RENDERED_SIZE


def eligible_candidates(descriptors: Iterable[FieldDescriptor]) -> List[FieldDescriptor]:
    return [d for d in descriptors if is_fillable(d) and is_visible(d)]


def score_candidates(
    descriptors: Sequence[FieldDescriptor],
    field_types: Sequence[FieldType],
    config: Optional[ScoringConfig] = None,
) -> List[ScoredPair]:
    """Score every eligible (control, field type) pair."""
    pairs: List[ScoredPair] = []
    for descriptor in eligible_candidates(descriptors):
        for field_type in field_types:
            pairs.append(
                ScoredPair(
                    descriptor=descriptor,
                    field_type=field_type,
                    result=score_field_type(descriptor, field_type, config),
                )
            )
    return pairs


def select_assignment(
    descriptors: Sequence[FieldDescriptor],
    field_types: Optional[Sequence[FieldType]] = None,
    config: Optional[ScoringConfig] = None,
    *,
    pinned: Optional[Dict[FieldType, FieldDescriptor]] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[FieldType, Optional[FieldDescriptor]]:
    """Assign each field type at most one control and each control at most one type.

    Pairs are consumed greedily from the highest score down; equal scores go
    to the control rendered nearest the top of the document, then document
    order, then taxonomy order. Only scores above the selection threshold can
    win. ``pinned`` assignments are claimed before scoring.
    """
    types = list(field_types) if field_types is not None else list(FIELD_TYPES)
    pinned = pinned or {}
    open_types = [ft for ft in types if ft not in pinned]
    pairs = score_candidates(descriptors, open_types, config)
    return assign_pairs(pairs, types, config, pinned=pinned, logger=logger)


def assign_pairs(
    pairs: Sequence[ScoredPair],
    field_types: Sequence[FieldType],
    config: Optional[ScoringConfig] = None,
    *,
    pinned: Optional[Dict[FieldType, FieldDescriptor]] = None,
    logger: Optional[logging.Logger] = None,
) -> Dict[FieldType, Optional[FieldDescriptor]]:
    log = logger or LOGGER
    types = list(field_types)
    threshold = (config or DEFAULT_CONFIG).selection_threshold
    assignment: Dict[FieldType, Optional[FieldDescriptor]] = {ft: None for ft in types}
    claimed: Set[int] = set()

    for field_type, descriptor in (pinned or {}).items():
        if field_type in assignment and id(descriptor) not in claimed:
            assignment[field_type] = descriptor
            claimed.add(id(descriptor))
            log.debug(
                "Pinned %s -> %s", field_type.value, descriptor.canonical_name()
            )

    pairs = [
        pair
        for pair in pairs
        if pair.field_type in assignment
        and assignment[pair.field_type] is None
        and pair.result.score > threshold
        and id(pair.descriptor) not in claimed
    ]
    type_rank = {ft: index for index, ft in enumerate(FIELD_TYPES)}
    pairs.sort(
        key=lambda pair: (
            -pair.result.score,
            pair.descriptor.top,
            pair.descriptor.order,
            type_rank[pair.field_type],
        )
    )

    for pair in pairs:
        if assignment[pair.field_type] is not None or id(pair.descriptor) in claimed:
            continue
        assignment[pair.field_type] = pair.descriptor
        claimed.add(id(pair.descriptor))
        log.debug(
            "Assigned %s -> %s (score=%.1f; %s)",
            pair.field_type.value,
            pair.descriptor.canonical_name(),
            pair.result.score,
            ", ".join(pair.result.reasons),
        )
    return assignment


__all__ = [
    "ScoredPair",
    "is_fillable",
    "is_visible",
    "eligible_candidates",
    "score_candidates",
    "assign_pairs",
    "select_assignment",
]
