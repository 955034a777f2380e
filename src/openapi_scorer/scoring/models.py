"""Result models produced by the scoring engine.

Everything here is frozen and serializes with camelCase keys, so a report can
be handed to a renderer (or dumped to JSON) without calling back into the engine.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Grade = Literal["A", "B", "C", "D", "F"]


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Points deducted per issue; total over Severity.
SEVERITY_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 5,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


class ResultModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Issue(ResultModel):
    """A single detected defect."""

    path: str
    operation: str | None = None
    location: str
    description: str
    severity: Severity
    suggestion: str
    criterion: str

    @property
    def penalty(self) -> int:
        return SEVERITY_PENALTIES[self.severity]


class CriterionResult(ResultModel):
    """Score and issues for one criterion. ``weight`` doubles as the point budget."""

    criterion: str
    score: float
    max_score: float
    weight: float
    weighted_score: float
    issues: tuple[Issue, ...] = ()


class IssueSummary(ResultModel):
    critical_issues: int = 0
    high_issues: int = 0
    medium_issues: int = 0
    low_issues: int = 0

    @property
    def total(self) -> int:
        return self.critical_issues + self.high_issues + self.medium_issues + self.low_issues


class SpecInfo(ResultModel):
    title: str
    version: str
    path_count: int
    operation_count: int


class ScoreReport(ResultModel):
    """Overall outcome of scoring one document."""

    overall_score: float
    grade: Grade
    max_score: float
    results: tuple[CriterionResult, ...]
    total_issues: int
    summary: IssueSummary
    timestamp: datetime
    spec_info: SpecInfo

    def issues(self) -> list[Issue]:
        """All issues across criteria, in evaluation order."""
        return [issue for result in self.results for issue in result.issues]

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
