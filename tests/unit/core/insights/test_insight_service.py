"""Tests for InsightService use cases."""
import json

import pytest

from careerpath.core.exceptions import ConfigurationError, GenerationFailure
from careerpath.core.insights.service import InsightService
from careerpath.core.models.profile import AssessmentResult, CareerProfile, QuestionResult
from careerpath.core.models.recovery import OrchestratorState
from careerpath.core.ports.llm import LLMPort, ModelConfig
from careerpath.core.recovery.llm_config import RecoverySettings
from careerpath.core.recovery.orchestrator import RetryOrchestrator


class FakeLLM(LLMPort):
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get_model_config(self, model):
        return ModelConfig(
            name=model, role="career_insights", max_tokens=8192,
            temperature=0.2, timeout=30.0, system_prompt="",
        )

    async def generate(self, prompt, model, max_tokens=None, temperature=None, system=None):
        self.calls.append({
            "prompt": prompt, "model": model, "max_tokens": max_tokens,
            "temperature": temperature, "system": system,
        })
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


async def no_sleep(delay):
    return None


def make_service(responses):
    llm = FakeLLM(responses)
    settings = RecoverySettings()
    orchestrator = RetryOrchestrator(llm=llm, settings=settings, sleep=no_sleep)
    return InsightService(llm=llm, orchestrator=orchestrator, settings=settings), llm


INSIGHTS = json.dumps({
    "growthRate": 8,
    "topSkills": ["Python", "Kubernetes"],
    "citySalaryData": [{
        "city": "Berlin",
        "avgSalary": 70000,
        "rolesSalaries": [{"role": "Engineer", "minSalary": 55000, "medianSalary": 70000, "maxSalary": 95000}],
    }],
})


class TestIndustryInsights:
    @pytest.mark.asyncio
    async def test_renders_prompt_and_returns_complete(self):
        service, llm = make_service(["```json\n" + INSIGHTS + "\n```"])
        profile = CareerProfile(industry="Fintech", country="Germany", skills=["Python", "SQL"],
                                salary_expectation="75000")

        result = await service.generate_industry_insights(profile)

        assert result.is_complete is True
        assert result.data["topSkills"] == ["Python", "Kubernetes"]
        assert result.data["marketOutlook"] == "Neutral"
        call = llm.calls[0]
        assert "Fintech industry in Germany" in call["prompt"]
        assert "75000 USD" in call["prompt"]
        assert call["max_tokens"] == 4096
        assert call["model"] == "haiku"
        assert call["system"]

    @pytest.mark.asyncio
    async def test_incomplete_after_retries(self):
        partial = json.dumps({"growthRate": 8, "topSkills": ["Python"]})
        service, llm = make_service([partial, partial, partial])

        result = await service.generate_industry_insights(CareerProfile())

        assert result.is_complete is False
        assert result.meta.attempts == 3
        assert result.meta.missing_fields == ["citySalaryData"]
        assert len(llm.calls) == 3


class TestComparisonInsights:
    @pytest.mark.asyncio
    async def test_uses_profile_countries_and_roles(self):
        service, llm = make_service([json.dumps({}), json.dumps({}), json.dumps({})])
        profile = CareerProfile(current_country="India", target_country="Canada",
                                current_role="Analyst", target_role="Data Scientist")

        result = await service.generate_comparison_insights(profile)

        assert result.meta.state == OrchestratorState.EXHAUSTED
        countries = result.data["countrySalaryComparison"]
        assert countries["currentCountry"]["name"] == "India"
        assert countries["targetCountry"]["name"] == "Canada"
        assert llm.calls[0]["max_tokens"] == 8192
        assert "Data Scientist" in llm.calls[0]["prompt"]


class TestRecommendations:
    ASSESSMENT = AssessmentResult(
        category="behavioral",
        sub_industry="Retail",
        quiz_score=35,
        questions=[
            QuestionResult("How do you handle communication breakdowns?", False),
            QuestionResult("What is a stand-up?", True),
        ],
    )

    @pytest.mark.asyncio
    async def test_recovered_recommendations(self):
        payload = json.dumps({"jobRecommendations": [{"title": "Store Manager"}]})
        service, llm = make_service([payload])

        result = await service.generate_recommendations(self.ASSESSMENT)

        assert result.is_complete is True
        assert result.data["jobRecommendations"][0]["title"] == "Store Manager"
        prompt = llm.calls[0]["prompt"]
        assert "Quiz Score: 35%" in prompt
        assert "How do you handle communication breakdowns?: Incorrect" in prompt
        assert "What is a stand-up?: Correct" in prompt
        assert llm.calls[0]["temperature"] == 0.4

    @pytest.mark.asyncio
    async def test_unparseable_falls_back(self):
        service, _ = make_service(["Sorry, recommendations are not available right now."])

        result = await service.generate_recommendations(self.ASSESSMENT)

        assert result.meta.source == "fallback"
        assert result.meta.attempts == 1
        assert result.is_complete is False
        assert result.data["jobRecommendations"][0]["title"] == "Project Manager"
        assert result.data["jobRecommendations"][0]["missingSkills"] == ["communication"]

    @pytest.mark.asyncio
    async def test_fallback_counts_every_generation_call(self):
        service, llm = make_service([
            json.dumps({"jobRecommendations": []}),
            "Sorry, recommendations are not available right now.",
        ])

        result = await service.generate_recommendations(self.ASSESSMENT)

        assert len(llm.calls) == 2
        assert result.meta.source == "fallback"
        assert result.meta.attempts == 2

    @pytest.mark.asyncio
    async def test_generation_failure_falls_back(self):
        service, _ = make_service([GenerationFailure("throttled")])

        result = await service.generate_recommendations(self.ASSESSMENT)

        assert result.meta.source == "fallback"
        assert result.data["skillDevelopmentAreas"] == ["Soft Skill Development"]

    @pytest.mark.asyncio
    async def test_configuration_errors_propagate(self):
        service, _ = make_service([ConfigurationError("Unknown model: opus")])

        with pytest.raises(ConfigurationError):
            await service.generate_recommendations(self.ASSESSMENT)
