"""Unit tests for keyword grading and the evaluation service."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from minirag.models.evaluation import EvalCase, Grade
from minirag.models.rag import Answer, RankedSource
from minirag.services.evaluation import (
    EvaluationService,
    grade_answer,
    load_cases,
    verdict,
)
from minirag.utils.errors import ConfigurationError, StorageError


class TestGradeAnswer:
    def test_all_keywords_correct(self) -> None:
        outcome = grade_answer("Uses RAG with vector search.", ["rag", "Vector Search"])
        assert outcome.grade is Grade.CORRECT
        assert outcome.percentage == 100.0

    def test_eighty_percent_is_correct(self) -> None:
        outcome = grade_answer("a b c d", ["a", "b", "c", "d", "z"])
        assert outcome.grade is Grade.CORRECT
        assert (outcome.matched, outcome.total) == (4, 5)

    def test_half_is_partial(self) -> None:
        assert grade_answer("a b", ["a", "b", "y", "z"]).grade is Grade.PARTIAL

    def test_below_half_is_incorrect(self) -> None:
        outcome = grade_answer("a", ["a", "x", "y", "z"])
        assert outcome.grade is Grade.INCORRECT
        assert outcome.percentage == 25.0

    def test_empty_expected_rejected(self) -> None:
        with pytest.raises(ValueError):
            grade_answer("anything", [])


class TestVerdict:
    @pytest.mark.parametrize(
        ("accuracy", "prefix"),
        [(80.0, "Excellent"), (60.0, "Good"), (59.9, "Performance needs")],
    )
    def test_thresholds(self, accuracy: float, prefix: str) -> None:
        assert verdict(accuracy).startswith(prefix)


class TestLoadCases:
    def test_bundled_questions(self, project_root) -> None:
        cases = load_cases(project_root / "config" / "eval_questions.yaml")

        assert len(cases) == 5
        assert cases[1].category == "Technical Details"
        assert "sliding window" in cases[1].expected

    def test_plain_list_format(self, tmp_path) -> None:
        path = tmp_path / "q.yaml"
        path.write_text("- question: Why?\n  expected: [because]\n")

        cases = load_cases(path)

        assert cases == [EvalCase(question="Why?", expected=["because"])]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_cases(tmp_path / "nope.yaml")

    def test_malformed_case(self, tmp_path) -> None:
        path = tmp_path / "q.yaml"
        path.write_text("questions:\n  - question: Why?\n    expected: []\n")
        with pytest.raises(ConfigurationError):
            load_cases(path)


class TestEvaluationService:
    @pytest.mark.asyncio
    async def test_aggregates_counts_and_categories(self) -> None:
        answers = {
            "q1": "alpha beta",
            "q2": "alpha",
            "q3": "nothing relevant",
        }
        pipeline = MagicMock()
        pipeline.query = AsyncMock(
            side_effect=lambda q: Answer(
                query=q, text=answers[q], sources=[RankedSource(rank=1, text="ctx")]
            )
        )
        cases = [
            EvalCase(question="q1", expected=["alpha", "beta"], category="A"),
            EvalCase(question="q2", expected=["alpha", "beta"], category="A"),
            EvalCase(question="q3", expected=["alpha", "beta"], category="B"),
        ]

        report = await EvaluationService(pipeline).run(cases)

        assert (report.correct_answers, report.partial_answers, report.incorrect_answers) == (1, 1, 1)
        assert report.overall_accuracy == pytest.approx(50.0)
        assert report.category_performance["A"].accuracy == pytest.approx(75.0)
        assert report.category_performance["B"].incorrect == 1
        assert report.results[0].source_count == 1
        assert report.total_response_time_ms >= 0

    @pytest.mark.asyncio
    async def test_failed_query_graded_incorrect_and_run_continues(self) -> None:
        pipeline = MagicMock()
        pipeline.query = AsyncMock(
            side_effect=[
                StorageError("unreachable", provider_name="qdrant"),
                Answer(query="q2", text="alpha"),
            ]
        )
        cases = [
            EvalCase(question="q1", expected=["alpha"]),
            EvalCase(question="q2", expected=["alpha"]),
        ]

        report = await EvaluationService(pipeline).run(cases)

        assert report.results[0].outcome.grade is Grade.INCORRECT
        assert report.results[0].error.startswith("Database connection error")
        assert report.results[1].outcome.grade is Grade.CORRECT
        assert report.category_performance["General"].total == 2
