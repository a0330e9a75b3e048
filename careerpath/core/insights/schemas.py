"""
Target schemas for the career insight use cases.

Each schema declares the shape the web dashboard renders, the neutral
defaults used when the model leaves something out, and the content rules
that decide whether another generation attempt is worth making.
"""
from careerpath.core.models.profile import CURRENCY
from careerpath.core.models.schema import (
    FieldSpec,
    TargetSchema,
    nested,
    object_list,
    req,
    scalar,
    string_list,
)
from careerpath.core.recovery.completeness import (
    require_each,
    require_equals,
    require_non_empty,
    require_present,
    require_type,
)
from careerpath.core.recovery.schema_validator import clean_text, flatten_names

DEFAULT_SALARY_RANGE = {"min": 80000, "max": 120000, "currency": CURRENCY}
NO_OVERVIEW = "Industry overview information not available."
NO_SALARY_ANALYSIS = "No salary analysis available. Please try again later."


_ROLE_SALARY = object_list(
    req("role"),
    req("minSalary", kind="number"),
    req("medianSalary", kind="number"),
    req("maxSalary", kind="number"),
)

INDUSTRY_INSIGHTS_SCHEMA = TargetSchema(
    name="industry_insights",
    fields={
        "growthRate": scalar(10, scalar_type="number", required=True),
        "demandLevel": scalar("Medium", scalar_type="string"),
        "topSkills": string_list(required=True),
        "marketOutlook": scalar("Neutral", scalar_type="string"),
        "industryOverview": scalar(NO_OVERVIEW, scalar_type="string", post_process=clean_text),
        "marketDemand": object_list(req("skill"), req("demandScore", kind="number")),
        "expectedSalaryRange": nested(default=DEFAULT_SALARY_RANGE),
        # avgSalary is optional; many responses only carry per-role figures
        "citySalaryData": object_list(
            req("city"),
            fields={"rolesSalaries": _ROLE_SALARY},
            required=True,
        ),
        "skillBasedBoosts": object_list(req("skill"), req("salaryIncrease", kind="number")),
        "topCompanies": object_list(
            req("name"),
            fields={"roles": string_list(post_process=flatten_names)},
        ),
        "recommendedCourses": object_list(req("name"), req("platform")),
        "careerPathInsights": object_list(req("title"), req("description")),
        "emergingTrends": object_list(req("name"), req("description")),
        "quickInsights": object_list(req("title", "name"), req("type", "category")),
        "nextActions": object_list(),
    },
    rules=(
        require_type("growthRate", "number"),
        require_non_empty("topSkills"),
        require_non_empty("citySalaryData"),
    ),
)


def _country(name: str) -> FieldSpec:
    # rolesSalaries is checked by a rule instead of declared, so a city
    # without it is reported rather than silently backfilled
    return nested(
        fields={
            "name": scalar(name, scalar_type="string", required=True),
            "topCities": object_list(req("city"), required=True),
        },
        required=True,
    )


def _role(title: str) -> FieldSpec:
    return nested(
        fields={
            "title": scalar(title, scalar_type="string", required=True),
            "requiredSkills": string_list(required=True),
            "avgSalary": scalar(0, scalar_type="number"),
            "growthOutlook": scalar("Neutral", scalar_type="string"),
            "demandLevel": scalar("Medium", scalar_type="string"),
        },
        required=True,
    )


def comparison_schema(
    current_country: str,
    target_country: str,
    current_role: str,
    target_role: str,
) -> TargetSchema:
    """
    Build the comparison schema for one request.

    Defaults and equality rules depend on the countries and roles the user
    asked about, so a response describing some other country is incomplete.
    """
    current_cities = "countrySalaryComparison.currentCountry.topCities"
    target_cities = "countrySalaryComparison.targetCountry.topCities"

    return TargetSchema(
        name="comparison_insights",
        fields={
            "countrySalaryComparison": nested(
                fields={
                    "currentCountry": _country(current_country),
                    "targetCountry": _country(target_country),
                },
                required=True,
            ),
            "roleComparison": nested(
                fields={
                    "currentRole": _role(current_role),
                    "targetRole": _role(target_role),
                    "skillGaps": string_list(required=True),
                    "transferableSkills": string_list(required=True),
                },
                required=True,
            ),
            "salaryExpectationAnalysis": nested(
                fields={
                    "isRealistic": scalar(True, scalar_type="boolean", required=True),
                    "differenceFromMedian": scalar(0, scalar_type="number"),
                    "percentile": scalar(50, scalar_type="number", required=True),
                    "recommendation": scalar(NO_SALARY_ANALYSIS, scalar_type="string", required=True),
                },
                required=True,
            ),
        },
        rules=(
            require_equals("countrySalaryComparison.currentCountry.name", current_country),
            require_non_empty(current_cities),
            require_each(current_cities, "rolesSalaries"),
            require_equals("countrySalaryComparison.targetCountry.name", target_country),
            require_non_empty(target_cities),
            require_each(target_cities, "rolesSalaries"),
            require_equals("roleComparison.currentRole.title", current_role),
            require_non_empty("roleComparison.currentRole.requiredSkills"),
            require_equals("roleComparison.targetRole.title", target_role),
            require_non_empty("roleComparison.targetRole.requiredSkills"),
            require_type("salaryExpectationAnalysis.percentile", "number"),
            require_present("salaryExpectationAnalysis.recommendation"),
        ),
    )


JOB_RECOMMENDATIONS_SCHEMA = TargetSchema(
    name="job_recommendations",
    fields={
        "jobRecommendations": object_list(
            req("title"),
            fields={
                "requiredSkills": string_list(),
                "missingSkills": string_list(),
                "companyTypes": string_list(),
            },
            required=True,
        ),
        "learningResources": object_list(
            req("title"),
            fields={"focusAreas": string_list()},
        ),
        "skillDevelopmentAreas": string_list(),
        "careerInsights": scalar(
            "Focus on continuous learning and adapting to industry trends",
            scalar_type="string",
            post_process=clean_text,
        ),
    },
    rules=(require_non_empty("jobRecommendations"),),
)
