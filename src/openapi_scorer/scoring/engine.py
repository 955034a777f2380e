"""Scoring engine — runs the rule set and aggregates a graded ScoreReport."""

import logging
from datetime import datetime, timezone

from openapi_scorer.parser.base import Document
from openapi_scorer.scoring.config import ScoringConfig
from openapi_scorer.scoring.models import (
    CriterionResult,
    Grade,
    IssueSummary,
    ScoreReport,
    Severity,
    SpecInfo,
)
from openapi_scorer.scoring.rules import EVALUATORS

logger = logging.getLogger(__name__)

GRADE_BANDS: tuple[tuple[float, Grade], ...] = ((90, "A"), (80, "B"), (70, "C"), (60, "D"))


def calculate_grade(score: float) -> Grade:
    """Map an overall score to a letter; each band includes its lower bound."""
    for threshold, grade in GRADE_BANDS:
        if score >= threshold:
            return grade
    return "F"


class ScoringEngine:
    """Scores OpenAPI documents against the seven weighted criteria.

    The engine keeps only its frozen config, so one instance can score any
    number of documents, from any number of callers.
    """

    def __init__(self, config: ScoringConfig | dict | None = None):
        if config is None:
            config = ScoringConfig()
        elif isinstance(config, dict):
            config = ScoringConfig.model_validate(config)
        self.config = config

    def score(self, document: Document) -> ScoreReport:
        """Score a document and return a new report."""
        results = self.evaluate(document)

        overall = round(sum(result.weighted_score for result in results), 2)
        summary = _summarize(results)

        report = ScoreReport(
            overall_score=overall,
            grade=calculate_grade(overall),
            max_score=self.config.weights.total,
            results=tuple(results),
            total_issues=summary.total,
            summary=summary,
            timestamp=datetime.now(timezone.utc),
            spec_info=SpecInfo(
                title=document.info.title or "Unknown",
                version=document.info.version or "Unknown",
                path_count=len(document.paths),
                operation_count=sum(1 for _ in document.iter_operations()),
            ),
        )
        logger.info("Scored %r: %s (%s), %d issues",
                    report.spec_info.title, report.overall_score, report.grade, report.total_issues)
        return report

    def evaluate(self, document: Document) -> list[CriterionResult]:
        """Run every criterion in evaluation order."""
        results = []
        for key, weight in self.config.criteria():
            result = EVALUATORS[key](document, weight)
            logger.debug("%s: %s/%s with %d issues",
                         result.criterion, result.score, result.max_score, len(result.issues))
            results.append(result)
        return results


def _summarize(results: list[CriterionResult]) -> IssueSummary:
    counts = {severity: 0 for severity in Severity}
    for result in results:
        for issue in result.issues:
            counts[issue.severity] += 1
    return IssueSummary(
        critical_issues=counts[Severity.CRITICAL],
        high_issues=counts[Severity.HIGH],
        medium_issues=counts[Severity.MEDIUM],
        low_issues=counts[Severity.LOW],
    )
