"""
ResponseParser - Parse a JSON object out of raw LLM output.

Tries seven strategies of increasing aggressiveness and stops at the first
one that yields a JSON object. Every failure is recorded so a total failure
can explain itself. Strategies are pure functions of the input text, so the
same input always picks the same strategy and produces the same object.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import json5
from json_repair import repair_json

from careerpath.config.recovery_limits import ERROR_CONTEXT_CHARS
from careerpath.core.exceptions import JsonRecoveryFailure
from careerpath.core.models.recovery import ParseAttempt, ParseOutcome
from careerpath.core.recovery.brackets import (
    CLOSERS,
    balance,
    strip_excess_closers,
    trailing_closer_run,
)
from careerpath.core.recovery.domain_repair import DomainPatternRepairer, seal_tail
from careerpath.core.recovery.normalizer import TextNormalizer, describe_decode_error

logger = logging.getLogger(__name__)

_DANGLING_KEY_RE = re.compile(r'[{,]\s*"[^"]+"\s*:\s*$')
_DANGLING_COMMA_RE = re.compile(r",\s*$")


class _Candidate:
    """Normalizer output computed once per parse call."""

    def __init__(self, normalizer: TextNormalizer, text: str):
        self.rewritten = normalizer.rewrite(text)
        self.normalized = normalizer.normalize(text)


def _require_object(parsed: Any) -> Dict[str, Any]:
    if not isinstance(parsed, dict):
        raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _strict(text: str) -> Dict[str, Any]:
    try:
        return _require_object(json.loads(text))
    except json.JSONDecodeError as e:
        logger.debug(f"JSON error context around position {e.pos}: "
                     f"{describe_decode_error(text, e, ERROR_CONTEXT_CHARS)}")
        raise


class ResponseParser:
    """Parse JSON objects from LLM responses with layered recovery."""

    def __init__(
        self,
        normalizer: Optional[TextNormalizer] = None,
        repairer: Optional[DomainPatternRepairer] = None,
    ):
        self._normalizer = normalizer or TextNormalizer()
        self._repairer = repairer or DomainPatternRepairer()

    @property
    def strategies(self) -> Tuple[Tuple[str, Callable[[_Candidate, str], Dict[str, Any]]], ...]:
        return (
            ("strict", self._parse_strict),
            ("lenient", self._parse_lenient),
            ("structural_repair", self._parse_structural_repair),
            ("truncation", self._parse_truncation),
            ("domain_pattern", self._parse_domain_pattern),
            ("nested_section", self._parse_nested_section),
            ("excess_closer", self._parse_excess_closer),
        )

    def parse(
        self,
        response: str,
        data_type: str = "general",
        fallback_data: Optional[Dict[str, Any]] = None,
    ) -> ParseOutcome:
        """
        Parse LLM response into a JSON object.

        Args:
            response: Raw LLM response text
            data_type: Tag selecting domain patches ("comparison", ...)
            fallback_data: Returned unchanged if every strategy fails

        Returns:
            ParseOutcome with the object and the per-strategy attempts

        Raises:
            JsonRecoveryFailure: All strategies failed and no fallback given
        """
        attempts: List[ParseAttempt] = []
        candidate = _Candidate(self._normalizer, response or "")
        logger.debug(f"Parsing {len(response or '')} chars as {data_type} "
                     f"({len(candidate.normalized)} after normalization)")

        for name, strategy in self.strategies:
            try:
                data = strategy(candidate, data_type)
            except Exception as e:
                attempts.append(ParseAttempt(strategy=name, succeeded=False, error=str(e)))
                logger.debug(f"Strategy {name} failed: {e}")
                continue

            attempts.append(ParseAttempt(strategy=name, succeeded=True))
            if name != "strict":
                logger.info(f"Recovered {data_type} JSON with {name} strategy")
            return ParseOutcome(data=data, strategy=name, attempts=attempts)

        details = "; ".join(f"{a.strategy}: {a.error}" for a in attempts)

        if fallback_data is not None:
            logger.warning(f"All JSON parsing strategies failed, returning fallback data: {details}")
            return ParseOutcome(
                data=fallback_data, strategy=None, attempts=attempts, used_fallback=True
            )

        logger.warning(f"All JSON parsing strategies failed: {details}")
        raise JsonRecoveryFailure(f"All JSON parsing methods failed: {details}", attempts)

    # --- strategies ---------------------------------------------------------

    def _parse_strict(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        return _strict(candidate.normalized)

    def _parse_lenient(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        return _require_object(json5.loads(candidate.normalized))

    def _parse_structural_repair(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        repaired = repair_json(candidate.normalized)
        return _strict(repaired)

    def _parse_truncation(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        """Fix a value-less trailing property or a dangling comma."""
        fixed = candidate.rewritten.rstrip()

        if _DANGLING_KEY_RE.search(fixed):
            logger.debug("JSON truncated after a property name, adding null value")
            fixed += "null"

        if _DANGLING_COMMA_RE.search(fixed):
            logger.debug("JSON truncated after a comma, removing trailing comma")
            fixed = _DANGLING_COMMA_RE.sub("", fixed)

        return _strict(balance(fixed))

    def _parse_domain_pattern(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        if not self._repairer.supports(data_type):
            raise ValueError(f"no domain patterns for data type '{data_type}'")

        fixed = self._repairer.repair(candidate.rewritten, data_type)
        return _strict(balance(seal_tail(fixed)))

    def _parse_nested_section(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        """Rebuild an ambiguous run of closers ending deeply nested sections."""
        prefix, run = trailing_closer_run(candidate.rewritten)
        if sum(1 for ch in run if ch in CLOSERS) < 2:
            raise ValueError("no ambiguous closer run at end of text")

        logger.debug(f"Rebuilding closer run {run.strip()!r} from open containers")
        return _strict(balance(seal_tail(prefix)))

    def _parse_excess_closer(self, candidate: _Candidate, data_type: str) -> Dict[str, Any]:
        return _strict(balance(strip_excess_closers(candidate.normalized)))


def parse_response(
    response: str,
    data_type: str = "general",
    fallback_data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Parse with a default ResponseParser and return only the object."""
    return ResponseParser().parse(response, data_type, fallback_data).data
