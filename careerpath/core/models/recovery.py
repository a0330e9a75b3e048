"""
Recovery result models.

Per-call records produced by the parser, validator and retry orchestrator.
Nothing here is persisted; every instance lives for one request.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class ParseAttempt:
    """Outcome of one parse strategy."""
    strategy: str
    succeeded: bool
    error: Optional[str] = None


@dataclass
class ParseOutcome:
    """Result of the layered parser.

    ``strategy`` names the strategy that produced ``data``; it is None when
    the caller's fallback data was returned instead.
    """
    data: Any
    strategy: Optional[str]
    attempts: List[ParseAttempt] = field(default_factory=list)
    used_fallback: bool = False


@dataclass
class ValidationOutcome:
    """Backfilled object plus what the validator had to change."""
    data: Dict[str, Any]
    backfilled: List[str] = field(default_factory=list)        # dotted paths
    missing_required: List[str] = field(default_factory=list)  # backfilled and required
    dropped: int = 0                                            # array entries removed


@dataclass
class CompletenessReport:
    """Which content requirements remain unmet."""
    is_complete: bool
    missing_fields: List[str] = field(default_factory=list)

    @classmethod
    def from_missing(cls, missing: List[str]) -> "CompletenessReport":
        return cls(is_complete=not missing, missing_fields=list(missing))


class OrchestratorState(Enum):
    """States of the retry orchestrator."""
    IDLE = "idle"
    REQUESTING = "requesting"
    PARSING = "parsing"
    VALIDATING = "validating"
    ACCEPTED = "accepted"
    RETRY_PENDING = "retry_pending"
    EXHAUSTED = "exhausted"


@dataclass
class RecoveryMeta:
    """Metadata attached to an orchestrated recovery."""
    attempts: int
    is_complete: bool
    state: OrchestratorState
    missing_fields: List[str] = field(default_factory=list)
    strategies: List[Optional[str]] = field(default_factory=list)
    history: Tuple[OrchestratorState, ...] = ()
    source: str = "bedrock"
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys the web client reads."""
        return {
            "generatedAt": self.generated_at.isoformat(),
            "source": self.source,
            "attempts": self.attempts,
            "isComplete": self.is_complete,
            "missingFields": list(self.missing_fields),
        }


@dataclass
class RecoveryResult:
    """Recovered object plus metadata."""
    data: Dict[str, Any]
    meta: RecoveryMeta

    @property
    def is_complete(self) -> bool:
        return self.meta.is_complete

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data, "meta": self.meta.to_dict()}
