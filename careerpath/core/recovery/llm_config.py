"""
Centralized generation and recovery settings.

Token limits, model ids and retry-loop bounds live here so the
orchestrator, the insight service and the Bedrock adapter agree.
"""
from dataclasses import dataclass, field

from careerpath.config.recovery_limits import (
    MAX_GENERATION_ATTEMPTS,
    OVERALL_TIMEOUT_SECONDS,
    RETRY_DELAY_SECONDS,
)


@dataclass
class GenerationConfig:
    """Configuration for a single use case."""
    max_tokens: int
    temperature: float = 0.2
    model_preference: str = "haiku"


@dataclass
class RecoverySettings:
    """
    Settings shared by the recovery pipeline.

    Usage:
        from careerpath.core.recovery.llm_config import RECOVERY_SETTINGS

        attempts = RECOVERY_SETTINGS.max_attempts
    """
    industry_insights: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(max_tokens=4096)
    )

    # Comparison responses are the longest and the ones that truncate
    comparison_insights: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(max_tokens=8192)
    )

    job_recommendations: GenerationConfig = field(
        default_factory=lambda: GenerationConfig(max_tokens=2048, temperature=0.4)
    )

    # Model IDs for Bedrock
    haiku_model_id: str = "us.anthropic.claude-haiku-4-5-20251001-v1:0"
    sonnet_model_id: str = "us.anthropic.claude-sonnet-4-5-20250929-v1:0"

    default_model: str = "haiku"

    # Orchestrator retry loop
    max_attempts: int = MAX_GENERATION_ATTEMPTS
    retry_delay: float = RETRY_DELAY_SECONDS
    overall_timeout: float = OVERALL_TIMEOUT_SECONDS

    # Provider throttling retries inside the adapter
    provider_max_retries: int = 3
    provider_base_delay: float = 1.0
    provider_max_delay: float = 20.0


# Global singleton instance
RECOVERY_SETTINGS = RecoverySettings()
