"""
Completeness rules.

Structural validity is guaranteed by the validator; completeness is about
content the caller asked for: a non-empty city list, the exact country name
that was requested, a boolean verdict. An incomplete object is a normal
outcome that drives retries, never an error.
"""
from typing import Any, Callable, Dict, List, Tuple

from careerpath.core.models.recovery import CompletenessReport, ValidationOutcome
from careerpath.core.models.schema import TargetSchema

Rule = Callable[[Dict[str, Any]], List[str]]

_MISSING = object()

_TYPE_CHECKS = {
    "string": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "list": lambda v: isinstance(v, list),
    "object": lambda v: isinstance(v, dict),
}


def get_path(data: Any, path: str) -> Any:
    """Follow a dotted path through nested dicts; _MISSING when absent."""
    current = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def require_present(path: str) -> Rule:
    def rule(data: Dict[str, Any]) -> List[str]:
        value = get_path(data, path)
        return [path] if value is _MISSING or value in (None, "") else []
    return rule


def require_non_empty(path: str) -> Rule:
    """Value must be a non-empty list, dict or string."""
    def rule(data: Dict[str, Any]) -> List[str]:
        value = get_path(data, path)
        if isinstance(value, (list, dict, str)) and len(value) > 0:
            return []
        return [path]
    return rule


def require_equals(path: str, expected: Any) -> Rule:
    def rule(data: Dict[str, Any]) -> List[str]:
        if get_path(data, path) == expected:
            return []
        return [f"{path} (expected: {expected})"]
    return rule


def require_type(path: str, *kinds: str) -> Rule:
    """Value must match one of the kinds: string, number, boolean, list, object."""
    unknown = [k for k in kinds if k not in _TYPE_CHECKS]
    if unknown:
        raise ValueError(f"Unknown type names: {unknown}")

    def rule(data: Dict[str, Any]) -> List[str]:
        value = get_path(data, path)
        if any(_TYPE_CHECKS[k](value) for k in kinds):
            return []
        return [path]
    return rule


def require_each(path: str, subpath: str) -> Rule:
    """Every entry of the array at path must be an object with an array at subpath."""
    def rule(data: Dict[str, Any]) -> List[str]:
        entries = get_path(data, path)
        if not isinstance(entries, list):
            return []
        missing = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                missing.append(f"{path}[{index}] is not a valid object")
            elif not isinstance(entry.get(subpath), list):
                missing.append(f"{path}[{index}].{subpath} is not an array")
        return missing
    return rule


def evaluate_rules(data: Dict[str, Any], rules: Tuple[Rule, ...]) -> List[str]:
    missing: List[str] = []
    for rule in rules:
        for item in rule(data):
            if item not in missing:
                missing.append(item)
    return missing


def check_completeness(outcome: ValidationOutcome, schema: TargetSchema) -> CompletenessReport:
    """
    Build the completeness report for a validated object.

    Missing fields are the required fields the validator had to backfill,
    followed by the schema's content-rule failures, without duplicates.
    """
    missing = list(outcome.missing_required)
    for item in evaluate_rules(outcome.data, schema.rules):
        if item not in missing:
            missing.append(item)
    return CompletenessReport.from_missing(missing)
