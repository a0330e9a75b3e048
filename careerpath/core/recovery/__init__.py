"""JSON recovery pipeline: normalize, parse, validate, retry."""
from careerpath.core.recovery.domain_repair import DomainPatternRepairer
from careerpath.core.recovery.normalizer import TextNormalizer
from careerpath.core.recovery.orchestrator import RetryOrchestrator
from careerpath.core.recovery.pipeline import recover_structured, recover_with_report
from careerpath.core.recovery.prompt_loader import PromptLoader
from careerpath.core.recovery.response_parser import ResponseParser, parse_response
from careerpath.core.recovery.schema_validator import SchemaValidator

__all__ = [
    "TextNormalizer",
    "DomainPatternRepairer",
    "ResponseParser",
    "parse_response",
    "SchemaValidator",
    "recover_structured",
    "recover_with_report",
    "RetryOrchestrator",
    "PromptLoader",
]
