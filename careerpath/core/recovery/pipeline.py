"""
Single-shot recovery: raw model text in, schema-conformant object out.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from careerpath.core.models.recovery import ParseOutcome, ValidationOutcome
from careerpath.core.models.schema import TargetSchema
from careerpath.core.recovery.response_parser import ResponseParser
from careerpath.core.recovery.schema_validator import SchemaValidator

logger = logging.getLogger(__name__)


def recover_with_report(
    raw_text: str,
    target_schema: TargetSchema,
    data_type: str = "general",
    fallback_data: Optional[Dict[str, Any]] = None,
    parser: Optional[ResponseParser] = None,
    validator: Optional[SchemaValidator] = None,
) -> Tuple[Dict[str, Any], Optional[ValidationOutcome], ParseOutcome]:
    """
    Parse and validate, keeping the intermediate records.

    Returns:
        (data, validation, parse); validation is None when the fallback
        data was returned, since fallback data is passed through unchanged.

    Raises:
        JsonRecoveryFailure: Parsing failed and no fallback was supplied
    """
    parser = parser or ResponseParser()
    validator = validator or SchemaValidator()

    parsed = parser.parse(raw_text, data_type=data_type, fallback_data=fallback_data)
    if parsed.used_fallback:
        return parsed.data, None, parsed

    validation = validator.validate(parsed.data, target_schema)
    return validation.data, validation, parsed


def recover_structured(
    raw_text: str,
    target_schema: TargetSchema,
    data_type: str = "general",
    fallback_data: Optional[Dict[str, Any]] = None,
    parser: Optional[ResponseParser] = None,
    validator: Optional[SchemaValidator] = None,
) -> Dict[str, Any]:
    """
    Recover a structurally complete object from raw model output.

    Args:
        raw_text: Raw LLM response text
        target_schema: Expected shape with defaults
        data_type: Tag selecting domain patches
        fallback_data: Returned unchanged if parsing fails entirely

    Returns:
        Object holding every field declared by target_schema

    Raises:
        JsonRecoveryFailure: Parsing failed and no fallback was supplied
    """
    data, _, _ = recover_with_report(
        raw_text, target_schema, data_type, fallback_data, parser, validator
    )
    return data
