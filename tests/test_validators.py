"""
Tests for input validators and identifier generation.
"""
import pytest

from schemefinder.models import Gender, IncomeBracket, State
from schemefinder.utils import generate_scheme_id, validate_profile_data


class TestValidateProfileData:

    def test_valid_partial_update(self):
        assert validate_profile_data({"state": "mh", "gender": "female"}) == []

    def test_valid_full_profile(self):
        assert validate_profile_data({
            "age": "45",
            "state": "GJ",
            "gender": "Male",
            "incomeBracket": "BELOW_1_LAKH",
            "annualIncome": 80000,
        }) == []

    @pytest.mark.parametrize("age,message", [
        (0, "Age must be between 1 and 120"),
        (121, "Age must be between 1 and 120"),
        ("old", "Age must be a valid number"),
        (True, "Age must be a valid number"),
    ])
    def test_bad_age(self, age, message):
        assert validate_profile_data({"age": age}) == [message]

    def test_bad_state_codes(self):
        assert validate_profile_data({"state": "Gujarat"}) == ["State must be a 2-letter code"]
        assert validate_profile_data({"state": "XX"}) == ["Unknown state code: XX"]

    def test_bad_gender_and_bracket(self):
        errors = validate_profile_data({"gender": "unknown", "income_bracket": "LOTS"})

        assert len(errors) == 2
        assert errors[0].startswith("Gender must be one of: Male, Female, Other")
        assert errors[1].startswith("Income bracket must be one of: BELOW_1_LAKH")

    def test_enum_members_accepted(self):
        assert validate_profile_data({
            "state": State.KA,
            "gender": Gender.FEMALE,
            "income_bracket": IncomeBracket.LAKH_1_TO_3,
        }) == []

    def test_negative_income(self):
        assert validate_profile_data({"annual_income": -1}) == ["Income cannot be negative"]

    def test_unrelated_fields_ignored(self):
        assert validate_profile_data({"occupation": "farmer", "isFarmer": True}) == []


class TestGenerateSchemeId:

    def test_slug_and_hash(self):
        scheme_id = generate_scheme_id("PM-Kisan Samman Nidhi")

        assert scheme_id.startswith("pm_kisan_samman_nidhi_")
        assert len(scheme_id.rsplit("_", 1)[1]) == 8

    def test_stable_and_distinct(self):
        assert generate_scheme_id("Farmer Scheme") == generate_scheme_id("Farmer Scheme")
        assert generate_scheme_id("Farmer Scheme") != generate_scheme_id("Farmer Scheme!")

    def test_source_prefix(self):
        assert generate_scheme_id("Farmer Scheme", source="Gujarat Govt").startswith("gujaratgovt_farmer_scheme_")

    def test_long_names_truncated(self):
        scheme_id = generate_scheme_id("x" * 80)

        assert len(scheme_id) == 50 + 1 + 8
