"""
Tenant profile completion score and strength labels.
"""

from datetime import date

import pytest

from rentify_backend.modules.tenant_management.scoring import (
    calculate_profile_completion,
    is_filled,
    missing_fields,
    profile_strength,
)

BASIC_INFO = {
    "phone_number": "+256 700 000000",
    "date_of_birth": date(1994, 5, 17),
    "national_id": "CM94012345ABCD",
    "national_id_type": "National ID",
}
ADDRESS = {
    "home_address": "Plot 12, Kira Road",
    "home_city": "Kampala",
    "home_district": "Kampala Central",
}
EMPLOYMENT = {
    "employment_status": "Employed",
    "employer_name": "Stanbic Bank",
    "monthly_income_ugx": 4_500_000,
}


class TestCompletionScore:
    def test_basic_info_only_is_fair(self):
        percentage = calculate_profile_completion(BASIC_INFO)
        assert percentage == 30
        assert profile_strength(percentage).label == "Fair"

    def test_complete_profile_is_excellent(self):
        profile = {**BASIC_INFO, **ADDRESS, **EMPLOYMENT}
        percentage = calculate_profile_completion(
            profile, documents_count=2, references_count=3
        )
        assert percentage == 100
        assert profile_strength(percentage).label == "Excellent"

    def test_single_document_and_reference_count_half(self):
        profile = {**BASIC_INFO, **ADDRESS, **EMPLOYMENT}
        assert calculate_profile_completion(profile, 1, 1) == 85
        assert calculate_profile_completion(profile, 0, 0) == 70

    def test_missing_profile_scores_zero(self):
        assert calculate_profile_completion(None, 5, 5) == 0

    def test_blank_strings_do_not_count(self):
        profile = {**BASIC_INFO, "phone_number": "   "}
        assert calculate_profile_completion(profile) < 30

    def test_works_with_attribute_objects(self):
        class Profile:
            pass

        profile = Profile()
        for key, value in BASIC_INFO.items():
            setattr(profile, key, value)
        assert calculate_profile_completion(profile) == 30


class TestStrength:
    @pytest.mark.parametrize(
        "percentage,label",
        [
            (100, "Excellent"),
            (90, "Excellent"),
            (89, "Strong"),
            (70, "Strong"),
            (69, "Good"),
            (50, "Good"),
            (49, "Fair"),
            (30, "Fair"),
            (29, "Weak"),
            (0, "Weak"),
        ],
    )
    def test_tiers(self, percentage, label):
        assert profile_strength(percentage).label == label

    def test_descriptions(self):
        assert (
            profile_strength(95).description
            == "Your profile stands out! Landlords will be impressed."
        )
        assert (
            profile_strength(10).description
            == "Complete your profile to apply for properties."
        )


class TestMissingFields:
    def test_lists_empty_fields_in_order(self):
        assert missing_fields(BASIC_INFO) == [
            "home_address",
            "home_city",
            "home_district",
            "employment_status",
            "employer_name",
            "monthly_income_ugx",
        ]

    def test_everything_missing_without_profile(self):
        assert len(missing_fields(None)) == 10

    def test_is_filled(self):
        assert is_filled("x")
        assert not is_filled("  ")
        assert not is_filled(None)
        assert not is_filled(0)
        assert is_filled(date(2020, 1, 1))
