"""Profile field taxonomy shared by every stage of the fill pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Dict, List


class FieldType(str, Enum):
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    FULL_NAME = "fullName"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS_LINE = "addressLine"
    CITY = "city"
    STATE = "state"
    POSTAL_CODE = "postalCode"
    COUNTRY = "country"
    LINKEDIN = "linkedin"
    GITHUB = "github"
    WEBSITE = "website"
    DATE_OF_BIRTH = "dateOfBirth"
    SUMMARY = "summary"
    COVER_LETTER = "coverLetter"
    GRADUATION_YEAR = "graduationYear"
    EXPERIENCE_YEARS = "experienceYears"
    SALARY_EXPECTATION = "salaryExpectation"


# Canonical order; reports and tie-breaks follow it.
FIELD_TYPES: List[FieldType] = list(FieldType)

NAME_FIELD_TYPES = frozenset(
    {FieldType.FIRST_NAME, FieldType.LAST_NAME, FieldType.FULL_NAME}
)
NAME_LOCK_FIELD_TYPES = frozenset({FieldType.FIRST_NAME, FieldType.LAST_NAME})
URL_FIELD_TYPES = frozenset({FieldType.LINKEDIN, FieldType.GITHUB, FieldType.WEBSITE})
SENSITIVE_FIELD_TYPES = frozenset(
    {FieldType.EMAIL, FieldType.PHONE, FieldType.DATE_OF_BIRTH}
)

# English and Turkish phrases seen next to each kind of field.
FIELD_SYNONYMS: Dict[FieldType, List[str]] = {
    FieldType.FIRST_NAME: [
        "first name",
        "given name",
        "forename",
        "ad",
        "isim",
        "adı",
        "adınız",
        "adiniz",
    ],
    FieldType.LAST_NAME: [
        "last name",
        "surname",
        "family name",
        "soyad",
        "soyadı",
        "soyadınız",
        "soyadiniz",
    ],
    FieldType.FULL_NAME: [
        "full name",
        "name",
        "your name",
        "ad soyad",
        "isim soyisim",
        "adınız soyadınız",
        "adiniz soyadiniz",
    ],
    FieldType.EMAIL: ["email", "e-mail", "mail", "eposta", "e posta", "e-posta"],
    FieldType.PHONE: [
        "phone",
        "mobile",
        "telephone",
        "tel",
        "cell",
        "telefon",
        "cep",
        "gsm",
        "mobil",
    ],
    FieldType.ADDRESS_LINE: [
        "address",
        "address line",
        "street",
        "street address",
        "adres",
        "adres satırı",
        "sokak",
        "cadde",
        "mahalle",
    ],
    FieldType.CITY: ["city", "town", "şehir", "sehir", "ilçe", "ilce", "il"],
    FieldType.STATE: ["state", "province", "region", "eyalet", "bölge", "bolge", "il"],
    FieldType.POSTAL_CODE: [
        "zip",
        "zipcode",
        "postal",
        "postal code",
        "posta kodu",
        "pk",
        "zip code",
    ],
    FieldType.COUNTRY: ["country", "nation", "ülke", "ulke"],
    FieldType.LINKEDIN: ["linkedin", "linked in", "linkedin url", "linkedin profili"],
    FieldType.GITHUB: ["github", "github url", "git hub"],
    FieldType.WEBSITE: [
        "website",
        "web site",
        "portfolio",
        "site",
        "kişisel site",
        "kisisel site",
        "portföy",
        "portfoy",
    ],
    FieldType.DATE_OF_BIRTH: [
        "date of birth",
        "birth date",
        "dob",
        "birthday",
        "doğum tarihi",
        "dogum tarihi",
    ],
    FieldType.SUMMARY: [
        "summary",
        "about",
        "about me",
        "bio",
        "profil",
        "hakkımda",
        "hakkimda",
        "özet",
        "ozet",
    ],
    FieldType.COVER_LETTER: [
        "cover letter",
        "motivation letter",
        "additional information",
        "additional info",
        "anything else",
        "message",
        "notes",
        "comment",
        "ön yazı",
        "on yazı",
        "niyet mektubu",
        "ek bilgi",
        "ek bilgiler",
        "mesaj",
        "not",
        "açıklama",
        "aciklama",
    ],
    FieldType.GRADUATION_YEAR: [
        "graduation year",
        "graduation date",
        "graduated",
        "degree date",
        "mezuniyet",
        "mezuniyet yılı",
        "mezuniyet yili",
        "mezun olma",
        "mezun oldum",
    ],
    FieldType.EXPERIENCE_YEARS: [
        "years of experience",
        "experience",
        "work experience",
        "yoe",
        "tecrübe",
        "tecrube",
        "deneyim",
        "kaç yıl",
        "kac yil",
        "yıl deneyim",
    ],
    FieldType.SALARY_EXPECTATION: [
        "salary expectation",
        "expected salary",
        "salary",
        "compensation",
        "pay",
        "maaş beklentisi",
        "maas beklentisi",
        "beklenen maaş",
        "ucret",
        "ücret",
        "maaş",
        "maas",
    ],
}

AUTOCOMPLETE_MAP: Dict[str, FieldType] = {
    "given-name": FieldType.FIRST_NAME,
    "additional-name": FieldType.FIRST_NAME,
    "family-name": FieldType.LAST_NAME,
    "name": FieldType.FULL_NAME,
    "email": FieldType.EMAIL,
    "tel": FieldType.PHONE,
    "tel-national": FieldType.PHONE,
    "tel-country-code": FieldType.PHONE,
    "street-address": FieldType.ADDRESS_LINE,
    "address-line1": FieldType.ADDRESS_LINE,
    "address-line2": FieldType.ADDRESS_LINE,
    "address-level2": FieldType.CITY,
    "address-level1": FieldType.STATE,
    "postal-code": FieldType.POSTAL_CODE,
    "country": FieldType.COUNTRY,
    "bday": FieldType.DATE_OF_BIRTH,
}


def parse_field_types(values) -> List[FieldType]:
    """Resolve wire names, silently dropping ones outside the taxonomy."""
    resolved: List[FieldType] = []
    for value in values or ():
        try:
            field_type = FieldType(value)
        except ValueError:
            continue
        if field_type not in resolved:
            resolved.append(field_type)
    return resolved


__all__ = [
    "FieldType",
    "FIELD_TYPES",
    "FIELD_SYNONYMS",
    "AUTOCOMPLETE_MAP",
    "NAME_FIELD_TYPES",
    "NAME_LOCK_FIELD_TYPES",
    "URL_FIELD_TYPES",
    "SENSITIVE_FIELD_TYPES",
    "parse_field_types",
]
