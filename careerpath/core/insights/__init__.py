"""Career insight use cases: schemas, fallbacks and the insight service."""
from careerpath.core.insights.fallback import fallback_recommendations
from careerpath.core.insights.schemas import (
    INDUSTRY_INSIGHTS_SCHEMA,
    JOB_RECOMMENDATIONS_SCHEMA,
    comparison_schema,
)
from careerpath.core.insights.service import InsightService

__all__ = [
    "InsightService",
    "INDUSTRY_INSIGHTS_SCHEMA",
    "JOB_RECOMMENDATIONS_SCHEMA",
    "comparison_schema",
    "fallback_recommendations",
]
