"""
User profile and assessment models.

Inputs to the insight use cases. Defaults match what the web client omits
for a freshly registered user.
"""
from dataclasses import dataclass, field
from typing import List

DEFAULT_INDUSTRY = "Software Development"
DEFAULT_COUNTRY = "US"
DEFAULT_ROLE = "Software Developer"
CURRENCY = "USD"


@dataclass
class CareerProfile:
    """What the user told us about their current and target situation."""
    industry: str = DEFAULT_INDUSTRY
    experience: int = 1
    skills: List[str] = field(default_factory=list)
    country: str = DEFAULT_COUNTRY
    current_country: str = DEFAULT_COUNTRY
    target_country: str = DEFAULT_COUNTRY
    current_role: str = DEFAULT_ROLE
    target_role: str = DEFAULT_ROLE
    salary_expectation: str = ""

    @property
    def skills_text(self) -> str:
        return ", ".join(self.skills)


@dataclass
class QuestionResult:
    """One answered assessment question."""
    question: str
    is_correct: bool


@dataclass
class AssessmentResult:
    """A completed skills assessment."""
    category: str                   # technical | behavioral | industry
    sub_industry: str
    quiz_score: float               # 0-100
    questions: List[QuestionResult] = field(default_factory=list)

    @property
    def incorrect_questions(self) -> List[QuestionResult]:
        return [q for q in self.questions if not q.is_correct]
