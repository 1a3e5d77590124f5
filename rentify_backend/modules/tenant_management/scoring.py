"""Tenant profile completion score and strength tiers.

The score weighs five groups: basic info 30, address 20, employment 20,
documents 20 and references 10. Pure functions over a profile-like object
(ORM row, pydantic model or mapping) and the document/reference counts.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

BASIC_FIELDS = ("phone_number", "date_of_birth", "national_id", "national_id_type")
ADDRESS_FIELDS = ("home_address", "home_city", "home_district")
EMPLOYMENT_FIELDS = ("employment_status", "employer_name", "monthly_income_ugx")

BASIC_FIELD_WEIGHT = 7.5
# Address and employment fields share 20 between three fields each.
DETAIL_FIELD_WEIGHT = 6.67
DOCUMENTS_WEIGHT = 20
REFERENCES_WEIGHT = 10


@dataclass(frozen=True)
class ProfileStrength:
    label: str
    description: str


# Highest threshold first.
STRENGTH_TIERS = (
    (
        90,
        ProfileStrength(
            "Excellent", "Your profile stands out! Landlords will be impressed."
        ),
    ),
    (70, ProfileStrength("Strong", "Great profile! Just a few more details to go.")),
    (50, ProfileStrength("Good", "You're halfway there! Keep adding information.")),
    (30, ProfileStrength("Fair", "Add more details to improve your chances.")),
    (0, ProfileStrength("Weak", "Complete your profile to apply for properties.")),
)


def _field_value(profile: Any, name: str) -> Any:
    if isinstance(profile, Mapping):
        return profile.get(name)
    return getattr(profile, name, None)


def is_filled(value: Any) -> bool:
    """Empty strings, zero and None do not count as provided."""
    if isinstance(value, str):
        return bool(value.strip())
    return bool(value)


def _tiered(count: int, weight: float) -> float:
    """Full weight for two or more items, half for exactly one."""
    if count >= 2:
        return weight
    if count == 1:
        return weight / 2
    return 0


def calculate_profile_completion(
    profile: Any, documents_count: int = 0, references_count: int = 0
) -> int:
    """Weighted completion score in 0..100; no profile scores 0."""
    if profile is None:
        return 0

    weighted_fields = [(name, BASIC_FIELD_WEIGHT) for name in BASIC_FIELDS]
    weighted_fields += [
        (name, DETAIL_FIELD_WEIGHT) for name in ADDRESS_FIELDS + EMPLOYMENT_FIELDS
    ]

    total = sum(weight for _, weight in weighted_fields)
    completed = sum(
        weight
        for name, weight in weighted_fields
        if is_filled(_field_value(profile, name))
    )

    total += DOCUMENTS_WEIGHT + REFERENCES_WEIGHT
    completed += _tiered(documents_count, DOCUMENTS_WEIGHT)
    completed += _tiered(references_count, REFERENCES_WEIGHT)

    return int(completed / total * 100 + 0.5)


def profile_strength(percentage: int) -> ProfileStrength:
    for threshold, strength in STRENGTH_TIERS:
        if percentage >= threshold:
            return strength
    return STRENGTH_TIERS[-1][1]


def missing_fields(profile: Any) -> list[str]:
    """Scored profile fields that are still empty, in scoring order."""
    if profile is None:
        return list(BASIC_FIELDS + ADDRESS_FIELDS + EMPLOYMENT_FIELDS)
    return [
        name
        for name in BASIC_FIELDS + ADDRESS_FIELDS + EMPLOYMENT_FIELDS
        if not is_filled(_field_value(profile, name))
    ]
