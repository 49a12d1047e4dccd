"""Canonicalize raw profile values before they reach the form."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Dict, Mapping, Optional

from .field_types import URL_FIELD_TYPES, FieldType
from .text_utils import safe_str

_SCHEME = re.compile(r"^https?://", re.IGNORECASE)
_BARE_DOMAIN = re.compile(r"^[a-z0-9.-]+\.[a-z]{2,}", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Profile:
    first_name: str = ""
    last_name: str = ""
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address_line: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""
    date_of_birth: str = ""
    summary: str = ""
    cover_letter: str = ""
    graduation_year: str = ""
    experience_years: str = ""
    salary_expectation: str = ""

    def get(self, field_type: FieldType) -> str:
        return getattr(self, _ATTRIBUTE_BY_TYPE[field_type])

    def to_dict(self) -> Dict[str, str]:
        return {field_type.value: self.get(field_type) for field_type in FieldType}


_ATTRIBUTE_BY_TYPE: Dict[FieldType, str] = dict(
    zip(FieldType, (item.name for item in fields(Profile)))
)


def normalize_phone(phone: object) -> str:
    """Keep digits only, restoring a leading ``+`` when the input had one."""
    text = safe_str(phone)
    if not text:
        return ""
    digits = re.sub(r"\D", "", text)
    if text.startswith("+"):
        return f"+{digits}"
    return digits


def normalize_url(url: object) -> str:
    text = safe_str(url)
    if not text:
        return ""
    if not _SCHEME.match(text) and _BARE_DOMAIN.match(text):
        return f"https://{text}"
    return text


def normalize_profile(raw: Optional[Mapping[str, object]] = None) -> Profile:
    """Build a canonical :class:`Profile` from wire-named raw values.

    Missing or ``None`` values become empty strings. ``fullName`` is derived
    from the name parts when absent, and the parts are split out of
    ``fullName`` when one of them is missing. Explicit values are never
    overwritten.
    """
    raw = raw or {}
    values: Dict[FieldType, str] = {
        field_type: safe_str(raw.get(field_type.value)) for field_type in FieldType
    }
    values[FieldType.EMAIL] = values[FieldType.EMAIL].lower()
    values[FieldType.PHONE] = normalize_phone(values[FieldType.PHONE])
    for field_type in URL_FIELD_TYPES:
        values[field_type] = normalize_url(values[field_type])

    first = values[FieldType.FIRST_NAME]
    last = values[FieldType.LAST_NAME]
    if not values[FieldType.FULL_NAME]:
        values[FieldType.FULL_NAME] = " ".join(part for part in (first, last) if part)

    full = values[FieldType.FULL_NAME]
    if (not first or not last) and full:
        parts = full.split()
        if not first:
            values[FieldType.FIRST_NAME] = parts[0]
        if not last:
            values[FieldType.LAST_NAME] = " ".join(parts[1:])

    return Profile(
        **{_ATTRIBUTE_BY_TYPE[field_type]: value for field_type, value in values.items()}
    )


__all__ = ["Profile", "normalize_profile", "normalize_phone", "normalize_url"]
