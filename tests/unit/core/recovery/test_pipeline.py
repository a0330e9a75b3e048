"""Tests for single-shot recovery."""
import json

import pytest

from careerpath.core.exceptions import JsonRecoveryFailure
from careerpath.core.insights.schemas import INDUSTRY_INSIGHTS_SCHEMA
from careerpath.core.models.schema import (
    TargetSchema,
    nested,
    object_list,
    req,
    scalar,
    string_list,
)
from careerpath.core.recovery.pipeline import recover_structured, recover_with_report

SCHEMA = TargetSchema(
    name="salary_report",
    fields={
        "topSkills": string_list(),
        "rolesSalaries": object_list(req("role"), req("minSalary", kind="number")),
        "range": nested(default={"min": 80000, "max": 120000}),
        "outlook": scalar("Neutral", scalar_type="string"),
    },
)


class TestRecoverStructured:
    def test_valid_json_augmented_with_defaults(self):
        payload = {"topSkills": ["Python"], "rolesSalaries": [{"role": "Dev", "minSalary": 1}], "extra": 1}
        data = recover_structured(json.dumps(payload), SCHEMA)

        assert data == {**payload, "range": {"min": 80000, "max": 120000}, "outlook": "Neutral"}

    def test_fenced_json_same_as_unwrapped(self):
        payload = {"topSkills": ["Go"], "outlook": "Positive"}
        plain = recover_structured(json.dumps(payload), SCHEMA)
        fenced = recover_structured(f"```json\n{json.dumps(payload)}\n```", SCHEMA)

        assert fenced == plain

    def test_truncated_mid_array(self):
        text = (
            '{"topSkills": ["SQL"], "rolesSalaries": [{"role": "Analyst", "minSalary": 900}, '
            '{"role":"Engineer","minSalary":1000'
        )
        data = recover_structured(text, SCHEMA)

        assert data["rolesSalaries"][0] == {"role": "Analyst", "minSalary": 900}
        assert len(data["rolesSalaries"]) in (1, 2)
        assert data["range"] == {"min": 80000, "max": 120000}

    def test_javascript_style_object(self):
        schema = TargetSchema(name="role", fields={"name": scalar(), "salary": scalar()})
        assert recover_structured("{name: 'Engineer', salary: 1000}", schema) == {
            "name": "Engineer",
            "salary": 1000,
        }

    def test_only_complete_entries_survive(self):
        text = '{"rolesSalaries": [{"role": "Dev"}, {"role": "SRE", "minSalary": 5}]}'
        data = recover_structured(text, SCHEMA)

        assert data["rolesSalaries"] == [{"role": "SRE", "minSalary": 5}]

    @pytest.mark.parametrize("text", [
        '{"topSkills": ["a", "b",], outlook: \'Positive\'}',
        '```json\n{"rolesSalaries": [{"role": "Dev", "minSalary": 1}, {"role": "x"}]}\n```',
        '{"rolesSalaries": [{"role": "Dev", "minSalary": 1}',
    ])
    def test_recovery_is_idempotent(self, text):
        once = recover_structured(text, SCHEMA)
        assert recover_structured(json.dumps(once), SCHEMA) == once

    def test_prose_without_fallback_raises(self):
        with pytest.raises(JsonRecoveryFailure):
            recover_structured("The market is growing quickly.", SCHEMA)

    def test_prose_with_fallback_returns_it_unchanged(self):
        fallback = {"outlook": "unknown"}
        assert recover_structured("The market is growing quickly.", SCHEMA, fallback_data=fallback) is fallback


class TestOversizedNumbers:
    def test_huge_integers_recovered(self):
        huge = "9" * 400
        text = ('{"growthRate": ' + huge + ', "topSkills": ["A"], '
                '"rolesSalaries": [{"role": "E", "minSalary": ' + huge + '}]}')

        data = recover_structured(text, SCHEMA)

        assert data["topSkills"] == ["A"]
        assert data["rolesSalaries"] == [{"role": "E", "minSalary": int(huge)}]
        assert data["growthRate"] == int(huge)

    def test_huge_growth_rate_in_industry_insights(self):
        text = '{"growthRate": ' + "9" * 400 + ', "topSkills": ["A"]}'
        data = recover_structured(text, INDUSTRY_INSIGHTS_SCHEMA)

        assert data["growthRate"] == int("9" * 400)
        assert data["topSkills"] == ["A"]


class TestRecoverWithReport:
    def test_reports_parse_and_validation(self):
        data, validation, parsed = recover_with_report('{"topSkills": "Python"}', SCHEMA)

        assert parsed.strategy == "strict"
        assert data["topSkills"] == []
        assert "topSkills" in validation.backfilled

    def test_no_validation_for_fallback(self):
        data, validation, parsed = recover_with_report("nothing", SCHEMA, fallback_data={"x": 1})

        assert data == {"x": 1}
        assert validation is None
        assert parsed.used_fallback is True
