"""Domain models: career profiles, target schemas and recovery records."""

from careerpath.core.models.profile import (
    AssessmentResult,
    CareerProfile,
    QuestionResult,
)
from careerpath.core.models.recovery import (
    CompletenessReport,
    OrchestratorState,
    ParseAttempt,
    ParseOutcome,
    RecoveryMeta,
    RecoveryResult,
    ValidationOutcome,
)
from careerpath.core.models.schema import (
    FieldKind,
    FieldSpec,
    Subfield,
    TargetSchema,
    nested,
    object_list,
    req,
    scalar,
    string_list,
)

__all__ = [
    # profile.py models
    "CareerProfile",
    "AssessmentResult",
    "QuestionResult",
    # recovery.py models
    "ParseAttempt",
    "ParseOutcome",
    "ValidationOutcome",
    "CompletenessReport",
    "OrchestratorState",
    "RecoveryMeta",
    "RecoveryResult",
    # schema.py descriptors
    "FieldKind",
    "FieldSpec",
    "Subfield",
    "TargetSchema",
    "req",
    "scalar",
    "string_list",
    "object_list",
    "nested",
]
