"""Tests for domain-pattern repairs."""
import json

from careerpath.core.recovery.brackets import balance
from careerpath.core.recovery.domain_repair import (
    DOMAIN_PATTERNS,
    DomainPatternRepairer,
    DomainPatterns,
    close_object_array,
    close_string_array,
    insert_sibling_commas,
    seal_tail,
)

SALARY_KEYS = ("rolesSalaries", "topCities")
SKILL_KEYS = ("requiredSkills", "skillGaps")


class TestSealTail:
    def test_closes_dangling_string_value(self):
        assert seal_tail('{"a": "Eng') == '{"a": "Eng"'

    def test_dangling_key_gets_null_value(self):
        assert seal_tail('{"a": 1, "ro') == '{"a": 1, "ro":null'

    def test_fills_dangling_colon(self):
        assert seal_tail('{"a":') == '{"a":null'

    def test_drops_dangling_comma(self):
        assert seal_tail('{"a": 1,') == '{"a": 1'

    def test_complete_value_unchanged(self):
        assert seal_tail('{"a": 1') == '{"a": 1'


class TestCloseObjectArray:
    def test_closes_entry_and_array_under_known_key(self):
        text = '{"rolesSalaries": [{"role": "Eng"'
        fixed = close_object_array(text, SALARY_KEYS)

        assert fixed == '{"rolesSalaries": [{"role": "Eng"}]'
        assert json.loads(balance(fixed)) == {"rolesSalaries": [{"role": "Eng"}]}

    def test_seals_tail_before_closing(self):
        fixed = close_object_array('{"topCities": [{"city": "Aus', SALARY_KEYS)
        assert json.loads(balance(fixed)) == {"topCities": [{"city": "Aus"}]}

    def test_unknown_key_unchanged(self):
        text = '{"courses": [{"name": "ML"'
        assert close_object_array(text, SALARY_KEYS) == text

    def test_not_inside_array_entry_unchanged(self):
        text = '{"rolesSalaries": {"role": "Eng"'
        assert close_object_array(text, SALARY_KEYS) == text


class TestCloseStringArray:
    def test_closes_open_string_and_array(self):
        fixed = close_string_array('{"skillGaps": ["Python", "Ja', SKILL_KEYS)
        assert fixed == '{"skillGaps": ["Python", "Ja"]'

    def test_replaces_trailing_comma(self):
        fixed = close_string_array('{"skillGaps": ["Python",', SKILL_KEYS)
        assert fixed == '{"skillGaps": ["Python"]'

    def test_unknown_key_unchanged(self):
        text = '{"hobbies": ["Chess", "Go'
        assert close_string_array(text, SKILL_KEYS) == text


class TestInsertSiblingCommas:
    def test_adjacent_strings_in_array(self):
        fixed = insert_sibling_commas('{"skills": ["a" "b"]}')
        assert json.loads(fixed) == {"skills": ["a", "b"]}

    def test_adjacent_strings_in_object_unchanged(self):
        text = '{"a": "x" "b": 1}'
        assert insert_sibling_commas(text) == text

    def test_adjacent_objects(self):
        fixed = insert_sibling_commas('[{"a": 1} {"b": 2}]')
        assert json.loads(fixed) == [{"a": 1}, {"b": 2}]


class TestDomainPatternRepairer:
    def test_supports_registered_types(self):
        repairer = DomainPatternRepairer()

        assert repairer.supports("comparison") is True
        assert repairer.supports("countryComparison") is True
        assert repairer.supports("roleComparison") is True
        assert repairer.supports("general") is False

    def test_unknown_type_unchanged(self):
        text = '{"rolesSalaries": [{"role": "Eng"'
        assert DomainPatternRepairer().repair(text, "general") == text

    def test_repairs_truncated_comparison_salaries(self):
        text = (
            '{"countrySalaryComparison": {"currentCountry": {"name": "US", '
            '"topCities": [{"city": "Austin", "rolesSalaries": '
            '[{"role": "Dev", "minSalary": 1'
        )
        fixed = DomainPatternRepairer().repair(text, "comparison")
        data = json.loads(balance(fixed))

        city = data["countrySalaryComparison"]["currentCountry"]["topCities"][0]
        assert city["rolesSalaries"] == [{"role": "Dev", "minSalary": 1}]

    def test_role_comparison_ignores_salary_keys(self):
        text = '{"rolesSalaries": [{"role": "Eng"'
        assert DomainPatternRepairer().repair(text, "roleComparison") == text

    def test_custom_patterns(self):
        repairer = DomainPatternRepairer({"courses": DomainPatterns(string_array_keys=("tags",))})
        assert repairer.repair('{"tags": ["ml", "d', "courses") == '{"tags": ["ml", "d"]'

    def test_registry_keys(self):
        assert set(DOMAIN_PATTERNS) == {"comparison", "countryComparison", "roleComparison"}
