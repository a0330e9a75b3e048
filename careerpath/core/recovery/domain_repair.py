"""
DomainPatternRepairer - Schema-aware patches for known truncation sites.

Generic repairs must never assume which keys matter. These do: comparison
responses are long and usually run out of tokens inside the same few
arrays, so each data type lists the keys whose arrays are worth closing
explicitly before general balancing.
"""
import logging
import re
from dataclasses import dataclass
from typing import Dict, Tuple

from careerpath.core.recovery.brackets import CODE, STRING, scan, split_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainPatterns:
    """Keys with known truncation behavior for one data type."""
    object_array_keys: Tuple[str, ...] = ()
    string_array_keys: Tuple[str, ...] = ()


_SALARY_ARRAYS = ("rolesSalaries", "topCities", "citySalaryData")
_SKILL_ARRAYS = ("requiredSkills", "skillGaps", "transferableSkills")

DOMAIN_PATTERNS: Dict[str, DomainPatterns] = {
    "comparison": DomainPatterns(
        object_array_keys=_SALARY_ARRAYS,
        string_array_keys=_SKILL_ARRAYS,
    ),
    "countryComparison": DomainPatterns(object_array_keys=_SALARY_ARRAYS),
    "roleComparison": DomainPatterns(string_array_keys=_SKILL_ARRAYS),
}

_ADJACENT_OBJECTS_RE = re.compile(r"\}(\s*)\{")


def _key_before(text: str, index: int) -> str:
    """Name of the key whose value starts at index, or '' if none."""
    match = re.search(r'"([^"\\]+)"\s*:\s*$', text[:index])
    return match.group(1) if match else ""


def seal_tail(text: str) -> str:
    """
    Make a truncated tail closable.

    Closes a dangling string (turning a dangling key into 'key: null'),
    fills a dangling ':' with null and drops a dangling ','.
    """
    state = scan(text)
    if state.in_string:
        before = text[:state.string_start].rstrip()
        text += '\\"' if state.escaped else '"'
        if state.innermost == "{" and before.endswith(("{", ",")):
            text += ":null"
        return text

    stripped = text.rstrip()
    if stripped.endswith(":"):
        return stripped + "null"
    if stripped.endswith(","):
        return stripped[:-1]
    return text


def close_object_array(text: str, keys: Tuple[str, ...]) -> str:
    """Close an object left open inside an array under one of keys."""
    stack = scan(text).stack
    if len(stack) < 2:
        return text

    (outer, outer_at), (inner, _) = stack[-2], stack[-1]
    if outer != "[" or inner != "{":
        return text

    key = _key_before(text, outer_at)
    if key not in keys:
        return text

    logger.debug(f"Closing truncated {key} entry and array")
    return seal_tail(text) + "}]"


def close_string_array(text: str, keys: Tuple[str, ...]) -> str:
    """Close a string (and its array) left open inside one of keys."""
    state = scan(text)
    if state.innermost != "[":
        return text

    key = _key_before(text, state.stack[-1][1])
    if key not in keys:
        return text

    if state.in_string:
        logger.debug(f"Closing truncated string in {key}")
        return text + ('\\"]' if state.escaped else '"]')

    stripped = text.rstrip()
    if stripped.endswith(","):
        return stripped[:-1] + "]"
    return text


def insert_sibling_commas(text: str) -> str:
    """
    Add commas between array siblings that lack one.

    Covers adjacent object literals and adjacent quoted strings; strings are
    only joined when the innermost open container is an array, since two
    strings side by side in an object are more likely a missing colon.
    """
    out = []
    stack = []
    prev_kind = None

    for kind, chunk in split_segments(text):
        if kind == STRING:
            if prev_kind == STRING and stack and stack[-1] == "[":
                out.append(",")
            out.append(chunk)
            prev_kind = STRING
            continue

        # code segment: whitespace between two strings keeps prev_kind
        if chunk.strip() == "" and prev_kind == STRING:
            out.append(chunk)
            continue

        for ch in chunk:
            if ch in "{[":
                stack.append(ch)
            elif ch in "}]" and stack:
                stack.pop()
        out.append(_ADJACENT_OBJECTS_RE.sub(r"},\1{", chunk))
        prev_kind = CODE

    return "".join(out)


class DomainPatternRepairer:
    """
    Apply the patches registered for a data type.

    Usage:
        repaired = DomainPatternRepairer().repair(text, "comparison")
    """

    def __init__(self, patterns: Dict[str, DomainPatterns] = None):
        self._patterns = patterns if patterns is not None else DOMAIN_PATTERNS

    def supports(self, data_type: str) -> bool:
        return data_type in self._patterns

    def repair(self, text: str, data_type: str) -> str:
        """
        Patch known truncation shapes for data_type.

        Unknown data types are returned unchanged. The result is not
        balanced; callers rebalance before parsing.
        """
        patterns = self._patterns.get(data_type)
        if patterns is None:
            return text

        fixed = text
        if patterns.string_array_keys:
            fixed = close_string_array(fixed, patterns.string_array_keys)
        if patterns.object_array_keys:
            fixed = close_object_array(fixed, patterns.object_array_keys)

        fixed = insert_sibling_commas(fixed)

        if fixed != text:
            logger.debug(f"Applied {data_type} domain patches")
        return fixed
