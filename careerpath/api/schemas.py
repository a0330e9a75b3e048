"""
API Pydantic models for the career insight endpoints.

Request models accept the camelCase payloads the web client sends and
convert to core profile models; the envelope model serializes a
RecoveryResult the way the dashboard reads it.
"""
from datetime import datetime
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, validator

from careerpath.core.models.profile import (
    DEFAULT_COUNTRY,
    DEFAULT_INDUSTRY,
    DEFAULT_ROLE,
    AssessmentResult,
    CareerProfile,
    QuestionResult,
)
from careerpath.core.models.recovery import RecoveryResult

ASSESSMENT_CATEGORIES = ("technical", "behavioral", "industry")


def _split_skills(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [s.strip() for s in value.split(",") if s.strip()]
    return [str(s).strip() for s in value if s is not None and str(s).strip()]


class _ProfileRequest(BaseModel):
    """Fields shared by the profile-based requests."""

    industry: str = Field(DEFAULT_INDUSTRY, description="Industry the user works in")
    experience: int = Field(1, ge=0, le=60, description="Years of experience")
    skills: List[str] = Field(default_factory=list, description="Current skills")
    salary_expectation: str = Field("", alias="salaryExpectation", description="Expected salary in USD")

    class Config:
        populate_by_name = True

    @validator("skills", pre=True)
    def split_skills(cls, v):
        return _split_skills(v)

    @validator("salary_expectation", pre=True)
    def stringify_salary(cls, v):
        return "" if v is None else str(v).strip()

    @validator("industry", pre=True)
    def default_industry(cls, v):
        return v or DEFAULT_INDUSTRY

    @validator("experience", pre=True)
    def default_experience(cls, v):
        return 1 if v in (None, "") else v


class IndustryInsightRequest(_ProfileRequest):
    """Request model for industry insights"""

    country: str = Field(DEFAULT_COUNTRY, description="Country to analyze")

    @validator("country", pre=True)
    def default_country(cls, v):
        return v or DEFAULT_COUNTRY

    def to_profile(self) -> CareerProfile:
        return CareerProfile(
            industry=self.industry,
            experience=self.experience,
            skills=list(self.skills),
            country=self.country,
            salary_expectation=self.salary_expectation,
        )


class ComparisonRequest(_ProfileRequest):
    """Request model for current vs. target comparison"""

    current_country: str = Field(DEFAULT_COUNTRY, alias="currentCountry")
    target_country: str = Field(DEFAULT_COUNTRY, alias="targetCountry")
    current_role: str = Field(DEFAULT_ROLE, alias="currentRole")
    target_role: str = Field(DEFAULT_ROLE, alias="targetRole")

    @validator("current_country", "target_country", pre=True)
    def default_country(cls, v):
        return v or DEFAULT_COUNTRY

    @validator("current_role", "target_role", pre=True)
    def default_role(cls, v):
        return v or DEFAULT_ROLE

    def to_profile(self) -> CareerProfile:
        return CareerProfile(
            industry=self.industry,
            experience=self.experience,
            skills=list(self.skills),
            current_country=self.current_country,
            target_country=self.target_country,
            current_role=self.current_role,
            target_role=self.target_role,
            salary_expectation=self.salary_expectation,
        )


class QuestionResultModel(BaseModel):
    """One answered assessment question"""

    question: str
    is_correct: bool = Field(..., alias="isCorrect")

    class Config:
        populate_by_name = True


class AssessmentRequest(BaseModel):
    """Request model for assessment-based job recommendations"""

    category: str = Field(..., description="technical, behavioral or industry")
    sub_industry: str = Field(..., alias="subIndustry")
    quiz_score: float = Field(..., ge=0, le=100, alias="quizScore")
    questions: List[QuestionResultModel] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @validator("category")
    def validate_category(cls, v):
        v = v.strip().lower()
        if v not in ASSESSMENT_CATEGORIES:
            raise ValueError(f"category must be one of {', '.join(ASSESSMENT_CATEGORIES)}")
        return v

    def to_assessment(self) -> AssessmentResult:
        return AssessmentResult(
            category=self.category,
            sub_industry=self.sub_industry,
            quiz_score=self.quiz_score,
            questions=[QuestionResult(q.question, q.is_correct) for q in self.questions],
        )


class RecoveryMetaModel(BaseModel):
    """Metadata the dashboard uses to flag partial results"""

    generated_at: datetime = Field(..., alias="generatedAt")
    source: str
    attempts: int = Field(ge=0)
    is_complete: bool = Field(..., alias="isComplete")
    missing_fields: List[str] = Field(default_factory=list, alias="missingFields")

    class Config:
        populate_by_name = True


class InsightEnvelope(BaseModel):
    """Response model wrapping recovered data with its metadata"""

    data: Dict[str, Any]
    meta: RecoveryMetaModel

    @classmethod
    def from_result(cls, result: RecoveryResult) -> "InsightEnvelope":
        return cls(data=result.data, meta=RecoveryMetaModel(**result.meta.to_dict()))


__all__ = [
    "IndustryInsightRequest",
    "ComparisonRequest",
    "QuestionResultModel",
    "AssessmentRequest",
    "RecoveryMetaModel",
    "InsightEnvelope",
]
