"""Tests for completeness rules."""
import pytest

from careerpath.core.models.recovery import ValidationOutcome
from careerpath.core.models.schema import TargetSchema, object_list, req, scalar
from careerpath.core.recovery.completeness import (
    check_completeness,
    evaluate_rules,
    get_path,
    require_each,
    require_equals,
    require_non_empty,
    require_present,
    require_type,
)

DATA = {
    "country": {"name": "US", "topCities": [{"city": "Austin", "rolesSalaries": []}]},
    "analysis": {"isRealistic": False, "percentile": "50", "recommendation": ""},
}


class TestGetPath:
    def test_follows_dotted_path(self):
        assert get_path(DATA, "country.name") == "US"

    def test_missing_path(self):
        assert get_path(DATA, "country.population") is get_path(DATA, "country.name.first")
        assert require_present("country.population")(DATA) == ["country.population"]


class TestRules:
    def test_require_present(self):
        assert require_present("country.name")(DATA) == []
        assert require_present("analysis.recommendation")(DATA) == ["analysis.recommendation"]

    def test_require_non_empty(self):
        assert require_non_empty("country.topCities")(DATA) == []
        assert require_non_empty("country.topCities")({"country": {"topCities": []}}) == ["country.topCities"]
        assert require_non_empty("nowhere")(DATA) == ["nowhere"]

    def test_require_equals(self):
        assert require_equals("country.name", "US")(DATA) == []
        assert require_equals("country.name", "India")(DATA) == ["country.name (expected: India)"]

    def test_require_type_is_strict(self):
        assert require_type("analysis.isRealistic", "boolean")(DATA) == []
        assert require_type("analysis.percentile", "number")(DATA) == ["analysis.percentile"]

    def test_require_type_rejects_bool_as_number(self):
        assert require_type("flag", "number")({"flag": True}) == ["flag"]

    def test_require_type_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown type"):
            require_type("a", "decimal")

    def test_require_each(self):
        data = {"cities": [{"rolesSalaries": []}, {"city": "Denver"}, "Boston"]}

        assert require_each("cities", "rolesSalaries")(data) == [
            "cities[1].rolesSalaries is not an array",
            "cities[2] is not a valid object",
        ]

    def test_require_each_ignores_missing_array(self):
        assert require_each("cities", "rolesSalaries")({}) == []

    def test_evaluate_rules_deduplicates(self):
        rules = (require_present("a"), require_non_empty("a"), require_present("b"))
        assert evaluate_rules({}, rules) == ["a", "b"]


class TestCheckCompleteness:
    SCHEMA = TargetSchema(
        name="report",
        fields={
            "cities": object_list(req("city"), required=True),
            "growthRate": scalar(10, scalar_type="number"),
        },
        rules=(require_non_empty("cities"), require_type("growthRate", "number")),
    )

    def test_complete(self):
        outcome = ValidationOutcome(data={"cities": [{"city": "Austin"}], "growthRate": 4})
        report = check_completeness(outcome, self.SCHEMA)

        assert report.is_complete is True
        assert report.missing_fields == []

    def test_backfilled_required_fields_come_first(self):
        outcome = ValidationOutcome(
            data={"cities": [], "growthRate": "4"},
            backfilled=["cities"],
            missing_required=["cities"],
        )
        report = check_completeness(outcome, self.SCHEMA)

        assert report.is_complete is False
        assert report.missing_fields == ["cities", "growthRate"]
