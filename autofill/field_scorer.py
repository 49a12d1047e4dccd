"""Rule-based scoring of a candidate control against one profile field type."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Pattern, Tuple

from .field_types import (
    AUTOCOMPLETE_MAP,
    FIELD_SYNONYMS,
    NAME_FIELD_TYPES,
    FieldType,
)
from .form_models import ElementKind, FieldDescriptor
from .signals import SIGNAL_WEIGHTS, extract_signals
from .text_utils import tokenize

AMBIGUOUS_NAME_TOKENS = frozenset({"name", "isim"})
SEARCH_TOKENS = frozenset({"ara", "arama", "search"})

INPUT_TYPE_BONUS: Dict[FieldType, Tuple[FrozenSet[str], int]] = {
    FieldType.EMAIL: (frozenset({"email"}), 18),
    FieldType.PHONE: (frozenset({"tel"}), 16),
    FieldType.WEBSITE: (frozenset({"url"}), 10),
    FieldType.LINKEDIN: (frozenset({"url"}), 10),
    FieldType.GITHUB: (frozenset({"url"}), 10),
    FieldType.DATE_OF_BIRTH: (frozenset({"date"}), 18),
    FieldType.SALARY_EXPECTATION: (frozenset({"number"}), 10),
}

_NOT_LETTER_BEFORE = r"(?<![a-z])"
_NOT_LETTER_AFTER = r"(?![a-z])"

ATTRIBUTE_PATTERNS: Dict[FieldType, Tuple[Pattern[str], int]] = {
    FieldType.FIRST_NAME: (
        re.compile(
            r"(?:first|given)[-_ ]?name|"
            + _NOT_LETTER_BEFORE
            + r"fname"
            + _NOT_LETTER_AFTER
            + r"|"
            + _NOT_LETTER_BEFORE
            + r"ad(?:i|iniz)?"
            + _NOT_LETTER_AFTER
        ),
        20,
    ),
    FieldType.LAST_NAME: (
        re.compile(
            r"(?:last|family|sur)[-_ ]?name|"
            + _NOT_LETTER_BEFORE
            + r"lname"
            + _NOT_LETTER_AFTER
            + r"|soyad"
        ),
        20,
    ),
    FieldType.EMAIL: (re.compile(r"e[-_ ]?mail"), 16),
    FieldType.PHONE: (
        re.compile(
            r"phone|mobile|gsm|telefon|"
            + _NOT_LETTER_BEFORE
            + r"(?:tel|cep)"
            + _NOT_LETTER_AFTER
        ),
        14,
    ),
    FieldType.POSTAL_CODE: (re.compile(r"zip|postal|posta"), 12),
    FieldType.LINKEDIN: (re.compile(r"linkedin"), 14),
    FieldType.GITHUB: (re.compile(r"github"), 14),
}


@dataclass(frozen=True, slots=True)
class ScoringConfig:
    """Tunable heuristics; the defaults are the production values."""

    autocomplete_match: int = 30
    autocomplete_mismatch: int = -8
    token_match: int = 3
    ambiguous_name_bonus: int = 3
    ambiguous_name_penalty: int = -2
    search_penalty: int = -10
    selection_threshold: float = 0.0
    signal_weights: Dict[str, int] = field(default_factory=lambda: dict(SIGNAL_WEIGHTS))
    input_type_bonus: Dict[FieldType, Tuple[FrozenSet[str], int]] = field(
        default_factory=lambda: dict(INPUT_TYPE_BONUS)
    )
    attribute_patterns: Dict[FieldType, Tuple[Pattern[str], int]] = field(
        default_factory=lambda: dict(ATTRIBUTE_PATTERNS)
    )


DEFAULT_CONFIG = ScoringConfig()


@dataclass(slots=True)
class ScoreResult:
    score: float = 0.0
    reasons: List[str] = field(default_factory=list)

    def add(self, amount: float, reason: str) -> None:
        self.score += amount
        self.reasons.append(reason)


_SYNONYM_TOKENS: Dict[FieldType, FrozenSet[str]] = {
    field_type: frozenset(
        token for phrase in phrases for token in tokenize(phrase)
    )
    for field_type, phrases in FIELD_SYNONYMS.items()
}


def autocomplete_field_type(value: str) -> Optional[FieldType]:
    """Map an ``autocomplete`` attribute to a field type.

    The whole value is tried first, then its last token, which is where the
    field name sits in section/shipping-prefixed values.
    """
    lowered = (value or "").strip().lower()
    if not lowered:
        return None
    mapped = AUTOCOMPLETE_MAP.get(lowered)
    if mapped is None:
        mapped = AUTOCOMPLETE_MAP.get(lowered.split()[-1])
    return mapped


def score_field_type(
    descriptor: FieldDescriptor,
    field_type: FieldType,
    config: Optional[ScoringConfig] = None,
) -> ScoreResult:
    cfg = config or DEFAULT_CONFIG
    result = ScoreResult()

    autocomplete = descriptor.attr("autocomplete").lower()
    mapped = autocomplete_field_type(autocomplete)
    if mapped is field_type:
        result.add(
            cfg.autocomplete_match,
            f"autocomplete:{autocomplete} ({cfg.autocomplete_match:+d})",
        )
    elif mapped is not None:
        result.add(
            cfg.autocomplete_mismatch,
            f"autocomplete:{autocomplete} mismatch ({cfg.autocomplete_mismatch:+d})",
        )

    if descriptor.kind is ElementKind.SINGLE_LINE:
        bonus = cfg.input_type_bonus.get(field_type)
        input_type = (descriptor.input_type or "text").lower()
        if bonus and input_type in bonus[0]:
            result.add(bonus[1], f"type={input_type} ({bonus[1]:+d})")

    _score_signal_tokens(descriptor, field_type, cfg, result)

    name_and_id = f"{descriptor.attr('name')} {descriptor.attr('id')}".strip().lower()
    pattern = cfg.attribute_patterns.get(field_type)
    if name_and_id and pattern and pattern[0].search(name_and_id):
        result.add(pattern[1], f"name/id pattern ({pattern[1]:+d})")

    if _looks_like_search(descriptor.attr("placeholder")):
        result.add(cfg.search_penalty, f"search-like ({cfg.search_penalty:+d})")

    return result


def _score_signal_tokens(
    descriptor: FieldDescriptor,
    field_type: FieldType,
    cfg: ScoringConfig,
    result: ScoreResult,
) -> None:
    synonyms = _SYNONYM_TOKENS.get(field_type, frozenset())
    for signal in extract_signals(descriptor, cfg.signal_weights):
        tokens = tokenize(signal.text)
        local = sum(cfg.token_match for token in tokens if token in synonyms)
        if any(token in AMBIGUOUS_NAME_TOKENS for token in tokens):
            if field_type is FieldType.FULL_NAME:
                local += cfg.ambiguous_name_bonus
            elif field_type not in NAME_FIELD_TYPES:
                local += cfg.ambiguous_name_penalty
        if local:
            result.add(
                local * signal.weight,
                f"{signal.source} match ({local}*w{signal.weight})",
            )


def _looks_like_search(placeholder: str) -> bool:
    lowered = placeholder.lower()
    if "search" in lowered:
        return True
    return any(token in SEARCH_TOKENS for token in tokenize(lowered))


__all__ = [
    "ScoringConfig",
    "ScoreResult",
    "DEFAULT_CONFIG",
    "autocomplete_field_type",
    "score_field_type",
]
