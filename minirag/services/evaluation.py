"""Keyword-based answer evaluation against a running pipeline.

Each :class:`EvalCase` lists keywords a good answer should mention.  An
answer is graded by the share of those keywords it contains
(case-insensitive substring match):

    >= 80 %  correct
    >= 50 %  partial
    else     incorrect

Overall and per-category accuracy count a partial answer as half correct.
The grading is deliberately crude: it catches regressions in retrieval or
prompting, it does not measure answer quality.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
import yaml
from pydantic import ValidationError

from minirag.models.evaluation import (
    CategoryStats,
    EvalCase,
    EvalCaseResult,
    EvalOutcome,
    EvalReport,
    Grade,
)
from minirag.utils.errors import ConfigurationError, describe_error

if TYPE_CHECKING:
    from minirag.pipeline.orchestrator import RAGPipeline

logger = structlog.get_logger(logger_name=__name__)

DEFAULT_QUESTIONS_PATH = "config/eval_questions.yaml"

CORRECT_THRESHOLD = 80.0
PARTIAL_THRESHOLD = 50.0


def grade_answer(answer: str, expected: list[str]) -> EvalOutcome:
    """Grade *answer* by how many *expected* keywords it contains."""
    if not expected:
        raise ValueError("expected keywords must not be empty")

    answer_lower = answer.lower()
    matched = sum(1 for keyword in expected if keyword.lower() in answer_lower)
    percentage = matched / len(expected) * 100

    if percentage >= CORRECT_THRESHOLD:
        grade = Grade.CORRECT
    elif percentage >= PARTIAL_THRESHOLD:
        grade = Grade.PARTIAL
    else:
        grade = Grade.INCORRECT
    return EvalOutcome(grade=grade, percentage=percentage, matched=matched, total=len(expected))


def verdict(accuracy: float) -> str:
    """One-line summary of an overall accuracy percentage."""
    if accuracy >= 80:
        return "Excellent performance! The system is working very well."
    if accuracy >= 60:
        return "Good performance with room for improvement."
    return "Performance needs improvement. Check system configuration."


def load_cases(path: str | Path = DEFAULT_QUESTIONS_PATH) -> list[EvalCase]:
    """Load evaluation cases from a YAML file.

    The file holds either a top-level list of cases or a mapping with a
    ``questions`` key; each case has ``question``, ``expected`` and an
    optional ``category``.

    Raises
    ------
    ConfigurationError
        If the file is missing, unparsable, or a case is malformed.
    """
    file_path = Path(path)
    try:
        raw = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(message=f"Cannot read evaluation questions from {file_path}: {exc}") from exc

    if isinstance(raw, dict):
        raw = raw.get("questions")
    if not isinstance(raw, list) or not raw:
        raise ConfigurationError(message=f"{file_path} contains no evaluation questions")

    try:
        return [EvalCase.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise ConfigurationError(message=f"Invalid evaluation question in {file_path}: {exc}") from exc


class EvaluationService:
    """Runs evaluation cases through a :class:`RAGPipeline` and aggregates grades.

    Cases run sequentially so response times are not skewed by contention
    between questions.  A case whose query raises is graded incorrect with
    the error recorded; the run continues.
    """

    def __init__(self, pipeline: RAGPipeline) -> None:
        self._pipeline = pipeline

    async def run_case(self, case: EvalCase) -> EvalCaseResult:
        started = time.perf_counter()
        try:
            answer = await self._pipeline.query(case.question)
        except Exception as exc:  # noqa: BLE001
            elapsed = (time.perf_counter() - started) * 1000
            logger.warning("eval_case_failed", question=case.question, error=str(exc))
            return EvalCaseResult(
                case=case,
                outcome=EvalOutcome(grade=Grade.INCORRECT, percentage=0.0, matched=0, total=len(case.expected)),
                response_time_ms=round(elapsed, 2),
                error=describe_error(exc),
            )

        elapsed = (time.perf_counter() - started) * 1000
        outcome = grade_answer(answer.text, case.expected)
        logger.info(
            "eval_case_graded",
            category=case.category,
            grade=outcome.grade.value,
            percentage=round(outcome.percentage, 1),
            response_time_ms=round(elapsed, 2),
        )
        return EvalCaseResult(
            case=case,
            outcome=outcome,
            answer=answer.text,
            response_time_ms=round(elapsed, 2),
            source_count=answer.chunk_count,
        )

    async def run(self, cases: list[EvalCase]) -> EvalReport:
        report = EvalReport(total_questions=len(cases))
        for case in cases:
            result = await self.run_case(case)
            report.results.append(result)
            report.total_response_time_ms += result.response_time_ms

            stats = report.category_performance.setdefault(case.category, CategoryStats())
            stats.total += 1
            if result.outcome.grade == Grade.CORRECT:
                report.correct_answers += 1
                stats.correct += 1
            elif result.outcome.grade == Grade.PARTIAL:
                report.partial_answers += 1
                stats.partial += 1
            else:
                report.incorrect_answers += 1
                stats.incorrect += 1

        logger.info(
            "evaluation_complete",
            total=report.total_questions,
            correct=report.correct_answers,
            partial=report.partial_answers,
            incorrect=report.incorrect_answers,
            overall_accuracy=round(report.overall_accuracy, 1),
        )
        return report
