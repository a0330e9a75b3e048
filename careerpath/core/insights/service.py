"""
InsightService - Career insight use cases on top of the retry orchestrator.

Renders the YAML prompt for a use case, runs it through the orchestrator
against that use case's target schema, and returns the RecoveryResult.
Callers serialize with result.to_dict() to get the {data, meta} envelope
the dashboard reads.
"""
import logging
from typing import Optional

from careerpath.core.exceptions import GenerationFailure, JsonRecoveryFailure
from careerpath.core.insights.fallback import fallback_recommendations
from careerpath.core.insights.schemas import (
    INDUSTRY_INSIGHTS_SCHEMA,
    JOB_RECOMMENDATIONS_SCHEMA,
    comparison_schema,
)
from careerpath.core.models.profile import CURRENCY, AssessmentResult, CareerProfile
from careerpath.core.models.recovery import (
    OrchestratorState,
    RecoveryMeta,
    RecoveryResult,
)
from careerpath.core.ports.llm import LLMPort
from careerpath.core.recovery.llm_config import RECOVERY_SETTINGS, GenerationConfig, RecoverySettings
from careerpath.core.recovery.orchestrator import RetryOrchestrator
from careerpath.core.recovery.prompt_loader import PromptLoader

logger = logging.getLogger(__name__)


class InsightService:
    """
    Generate industry insights, comparisons and job recommendations.

    Usage:
        service = InsightService(llm=BedrockAdapter())
        result = await service.generate_comparison_insights(profile)
        payload = result.to_dict()
    """

    def __init__(
        self,
        llm: LLMPort,
        orchestrator: Optional[RetryOrchestrator] = None,
        prompts: Optional[PromptLoader] = None,
        settings: Optional[RecoverySettings] = None,
    ):
        """
        Initialize service.

        Args:
            llm: Generation client
            orchestrator: Retry orchestrator (built over llm by default)
            prompts: Prompt template loader
            settings: Per-use-case generation settings
        """
        self._settings = settings or RECOVERY_SETTINGS
        self._orchestrator = orchestrator or RetryOrchestrator(llm=llm, settings=self._settings)
        self._prompts = prompts or PromptLoader()

    async def generate_industry_insights(self, profile: CareerProfile) -> RecoveryResult:
        """Salary, demand and skills overview for one industry in one country."""
        logger.info(f"Generating industry insights for {profile.industry} in {profile.country}")

        prompt = self._prompts.render(
            "industry_insights",
            industry=profile.industry,
            country=profile.country,
            experience=profile.experience,
            skills=profile.skills_text,
            salary_expectation=profile.salary_expectation,
            currency=CURRENCY,
        )
        return await self._run("industry_insights", prompt, INDUSTRY_INSIGHTS_SCHEMA,
                               "general", self._settings.industry_insights)

    async def generate_comparison_insights(self, profile: CareerProfile) -> RecoveryResult:
        """
        Compare the user's current country and role with their target.

        The comparison is retried until it describes exactly the requested
        countries and roles, or until attempts run out.
        """
        logger.info(f"Generating comparison insights: {profile.current_role} in "
                    f"{profile.current_country} -> {profile.target_role} in {profile.target_country}")

        schema = comparison_schema(
            profile.current_country,
            profile.target_country,
            profile.current_role,
            profile.target_role,
        )
        prompt = self._prompts.render(
            "comparison_insights",
            industry=profile.industry,
            experience=profile.experience,
            skills=profile.skills_text,
            current_country=profile.current_country,
            target_country=profile.target_country,
            current_role=profile.current_role,
            target_role=profile.target_role,
            salary_expectation=profile.salary_expectation,
            currency=CURRENCY,
        )
        return await self._run("comparison_insights", prompt, schema,
                               "comparison", self._settings.comparison_insights)

    async def generate_recommendations(self, assessment: AssessmentResult) -> RecoveryResult:
        """
        Job recommendations and learning resources from an assessment.

        Falls back to deterministic recommendations built from the
        assessment when generation or JSON recovery fails outright.
        """
        logger.info(f"Generating recommendations for {assessment.category} "
                    f"assessment ({assessment.quiz_score}%)")

        performance = "\n".join(
            f"  - {q.question}: {'Correct' if q.is_correct else 'Incorrect'}"
            for q in assessment.questions
        )
        prompt = self._prompts.render(
            "job_recommendations",
            category=assessment.category,
            sub_industry=assessment.sub_industry,
            quiz_score=assessment.quiz_score,
            performance=performance,
        )

        try:
            return await self._run("job_recommendations", prompt, JOB_RECOMMENDATIONS_SCHEMA,
                                   "general", self._settings.job_recommendations)
        except (GenerationFailure, JsonRecoveryFailure) as e:
            logger.error(f"Error generating recommendations, using fallback: {e}")
            meta = RecoveryMeta(
                attempts=e.generation_calls,
                is_complete=False,
                state=OrchestratorState.EXHAUSTED,
                source="fallback",
            )
            return RecoveryResult(data=fallback_recommendations(assessment), meta=meta)

    async def _run(self, name, prompt, schema, data_type, config: GenerationConfig) -> RecoveryResult:
        result = await self._orchestrator.generate_and_recover(
            prompt,
            schema,
            data_type=data_type,
            model=config.model_preference,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            system=self._prompts.system_prompt(name),
        )
        if not result.is_complete:
            logger.warning(f"Returning incomplete {name}: {', '.join(result.meta.missing_fields)}")
        return result
