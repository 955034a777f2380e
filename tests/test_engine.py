from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from openapi_scorer.parser.base import Document
from openapi_scorer.parser.loader import load_document
from openapi_scorer.scoring.config import ScoringConfig, ScoringWeights
from openapi_scorer.scoring.engine import ScoringEngine, calculate_grade

FIXTURES = Path(__file__).parent / "fixtures"

CRITERIA_ORDER = [
    "Schema & Types",
    "Descriptions & Documentation",
    "Paths & Operations",
    "Response Codes",
    "Examples & Samples",
    "Security",
    "Best Practices",
]


def _by_criterion(report) -> dict:
    return {result.criterion: result for result in report.results}


class TestCalculateGrade:
    @pytest.mark.parametrize("score,grade", [
        (100, "A"), (90, "A"), (89.99, "B"), (80, "B"), (79.99, "C"),
        (70, "C"), (69.99, "D"), (60, "D"), (59.99, "F"), (0, "F"),
    ])
    def test_band_boundaries(self, score, grade):
        assert calculate_grade(score) == grade

    def test_monotonic(self):
        order = "FDCBA"
        grades = [calculate_grade(s / 4) for s in range(0, 401)]
        ranks = [order.index(g) for g in grades]
        assert ranks == sorted(ranks)


class TestScoringEngine:
    def test_petstore_scores_full_marks(self):
        report = ScoringEngine().score(load_document(str(FIXTURES / "petstore.yaml")))
        assert report.overall_score == 100
        assert report.grade == "A"
        assert report.total_issues == 0
        assert report.spec_info.path_count == 2
        assert report.spec_info.operation_count == 4

    def test_results_in_fixed_order(self):
        report = ScoringEngine().score(load_document(str(FIXTURES / "minimal.yaml")))
        assert [r.criterion for r in report.results] == CRITERIA_ORDER
        assert [r.weight for r in report.results] == [20, 20, 15, 15, 10, 10, 10]

    def test_overall_is_rounded_sum_of_weighted_scores(self):
        report = ScoringEngine().score(load_document(str(FIXTURES / "minimal.yaml")))
        assert report.overall_score == round(sum(r.weighted_score for r in report.results), 2)
        for result in report.results:
            assert 0 <= result.score <= result.weight

    def test_issue_totals_agree(self):
        report = ScoringEngine().score(load_document(str(FIXTURES / "minimal.yaml")))
        summary = report.summary
        severity_total = summary.critical_issues + summary.high_issues + summary.medium_issues + summary.low_issues
        assert report.total_issues == severity_total
        assert report.total_issues == sum(len(r.issues) for r in report.results)
        assert report.total_issues == len(report.issues())

    def test_zero_paths(self):
        doc = Document.model_validate({"openapi": "3.0.0", "info": {"title": "Empty", "version": "0.1.0"}, "paths": {}})
        report = ScoringEngine().score(doc)
        paths_result = _by_criterion(report)["Paths & Operations"]
        assert paths_result.score == 0
        assert len(paths_result.issues) == 1
        assert paths_result.issues[0].severity.value == "critical"
        assert report.summary.critical_issues == 1
        assert report.spec_info.operation_count == 0

    def test_idempotent(self):
        engine = ScoringEngine()
        doc = load_document(str(FIXTURES / "minimal.yaml"))
        first = engine.score(doc)
        second = engine.score(doc)
        assert first.overall_score == second.overall_score
        assert first.grade == second.grade
        assert first.issues() == second.issues()
        assert first.results == second.results

    def test_document_not_mutated(self):
        doc = load_document(str(FIXTURES / "minimal.yaml"))
        before = doc.model_dump()
        ScoringEngine().score(doc)
        assert doc.model_dump() == before

    def test_timestamp_is_recent_utc(self):
        report = ScoringEngine().score(load_document(str(FIXTURES / "minimal.yaml")))
        assert report.timestamp.tzinfo is not None
        assert datetime.now(timezone.utc) - report.timestamp < timedelta(minutes=1)

    def test_spec_info_unknown_when_missing(self):
        report = ScoringEngine().score(Document.model_validate({"paths": {}}))
        assert report.spec_info.title == "Unknown"
        assert report.spec_info.version == "Unknown"


class TestMinimalDocumentScenario:
    """Default 1.0.0 version, no servers/security, one GET /users returning only 200."""

    @pytest.fixture
    def report(self):
        return ScoringEngine().score(load_document(str(FIXTURES / "minimal.yaml")))

    def test_issue_counts_per_criterion(self, report):
        counts = {name: len(result.issues) for name, result in _by_criterion(report).items()}
        assert counts == {
            "Schema & Types": 2,
            "Descriptions & Documentation": 1,
            "Paths & Operations": 1,
            "Response Codes": 1,
            "Examples & Samples": 1,
            "Security": 3,
            "Best Practices": 3,
        }

    def test_scores(self, report):
        scores = {name: result.score for name, result in _by_criterion(report).items()}
        assert scores == {
            "Schema & Types": 16,
            "Descriptions & Documentation": 18,
            "Paths & Operations": 14,
            "Response Codes": 13,
            "Examples & Samples": 9,
            "Security": 3,
            "Best Practices": 6,
        }
        assert report.overall_score == 79
        assert report.grade == "C"

    def test_summary(self, report):
        assert report.summary.high_issues == 1
        assert report.summary.medium_issues == 7
        assert report.summary.low_issues == 4
        assert report.total_issues == 12


class TestCustomWeights:
    def test_dict_config(self):
        engine = ScoringEngine({"weights": {"schemaTypes": 40}})
        assert engine.config.weights.schema_types == 40
        assert engine.config.weights.documentation == 20

    def test_weights_are_not_renormalized(self):
        engine = ScoringEngine(ScoringConfig(weights=ScoringWeights(schema_types=40)))
        report = engine.score(load_document(str(FIXTURES / "petstore.yaml")))
        assert report.overall_score == 120
        assert report.max_score == 120
        assert report.grade == "A"

    def test_zero_weight_criterion(self):
        engine = ScoringEngine({"weights": {"security": 0}})
        report = engine.score(load_document(str(FIXTURES / "minimal.yaml")))
        security = _by_criterion(report)["Security"]
        assert security.score == 0
        assert len(security.issues) == 3
        assert report.overall_score == 76

    def test_small_weight_floors_at_zero(self):
        engine = ScoringEngine({"weights": {"bestPractices": 2}})
        report = engine.score(load_document(str(FIXTURES / "minimal.yaml")))
        assert _by_criterion(report)["Best Practices"].score == 0

    def test_config_is_frozen(self):
        engine = ScoringEngine()
        with pytest.raises(Exception):
            engine.config.weights.schema_types = 5
