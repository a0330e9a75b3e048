"""
Deterministic job recommendations derived from an assessment.

Used when the model's recommendations cannot be recovered at all, so the
user still sees advice grounded in the questions they got wrong.
"""
from typing import Any, Dict, List

from careerpath.core.models.profile import AssessmentResult

SKILL_KEYWORDS = (
    "programming",
    "communication",
    "leadership",
    "technical",
    "problem-solving",
    "analysis",
    "strategy",
    "implementation",
)
GENERIC_SKILL = "Generic Skill"
MAX_MISSING_SKILLS = 3

_TITLES = {
    "technical": "Software Engineer",
    "behavioral": "Project Manager",
}
_DEVELOPMENT_AREAS = {
    "technical": "Technical Skill Enhancement",
    "behavioral": "Soft Skill Development",
}


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def identify_missing_skills(assessment: AssessmentResult) -> List[str]:
    """First matching skill keyword per incorrect question, deduplicated, at most three."""
    skills = []
    for question in assessment.incorrect_questions:
        text = question.question.lower()
        matched = next((k for k in SKILL_KEYWORDS if k in text), GENERIC_SKILL)
        skills.append(matched)
    return _unique(skills)[:MAX_MISSING_SKILLS]


def identify_development_areas(assessment: AssessmentResult) -> List[str]:
    if not assessment.incorrect_questions:
        return []
    return [_DEVELOPMENT_AREAS.get(assessment.category, "Industry Knowledge Expansion")]


def fallback_recommendations(assessment: AssessmentResult) -> Dict[str, Any]:
    """
    Build recommendations without the model.

    Args:
        assessment: Completed assessment

    Returns:
        Object shaped like JOB_RECOMMENDATIONS_SCHEMA
    """
    missing_skills = identify_missing_skills(assessment)

    return {
        "jobRecommendations": [
            {
                "title": _TITLES.get(assessment.category, "Industry Consultant"),
                "matchPercentage": assessment.quiz_score,
                "requiredSkills": ["Communication", "Technical Skills", "Problem-Solving"],
                "missingSkills": missing_skills,
                "potentialCareerPath": "Continuous learning and skill development",
                "companyTypes": ["Tech Startups", "Multinational Corporations"],
                "growthPotential": "Strong opportunities for skill advancement",
            }
        ],
        "learningResources": [
            {
                "title": f"{assessment.sub_industry} Skill Mastery Course",
                "type": "Online Course",
                "difficulty": "Beginner" if assessment.quiz_score < 50 else "Intermediate",
                "focusAreas": list(missing_skills),
                "estimatedCompletionTime": "8-12 weeks",
                "recommendationReason": "Targeted skill development based on assessment",
                "platform": "Coursera",
                "certificateValue": "Industry-recognized certification",
            }
        ],
        "skillDevelopmentAreas": identify_development_areas(assessment),
        "careerInsights": "Focus on continuous learning and adapting to industry trends",
    }
