"""Models for the keyword-based answer evaluation harness."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Grade(str, Enum):
    CORRECT = "correct"
    PARTIAL = "partial"
    INCORRECT = "incorrect"


class EvalCase(BaseModel):
    """A question with the keywords a good answer is expected to mention."""

    model_config = ConfigDict(frozen=True)

    question: str = Field(min_length=1)
    expected: list[str] = Field(min_length=1)
    category: str = "General"


class EvalOutcome(BaseModel):
    """Grade for one answer against its expected keywords."""

    model_config = ConfigDict(frozen=True)

    grade: Grade
    percentage: float = Field(ge=0.0, le=100.0)
    matched: int = Field(ge=0)
    total: int = Field(ge=0)


class EvalCaseResult(BaseModel):
    """Outcome of running one :class:`EvalCase` through the pipeline."""

    model_config = ConfigDict(frozen=True)

    case: EvalCase
    outcome: EvalOutcome
    answer: str = ""
    response_time_ms: float = 0.0
    source_count: int = 0
    error: str | None = None


class CategoryStats(BaseModel):
    total: int = 0
    correct: int = 0
    partial: int = 0
    incorrect: int = 0

    @property
    def accuracy(self) -> float:
        """Percentage accuracy counting partial answers as half correct."""
        if not self.total:
            return 0.0
        return (self.correct + self.partial * 0.5) / self.total * 100


class EvalReport(BaseModel):
    """Aggregate results of an evaluation run."""

    total_questions: int = 0
    correct_answers: int = 0
    partial_answers: int = 0
    incorrect_answers: int = 0
    total_response_time_ms: float = 0.0
    category_performance: dict[str, CategoryStats] = Field(default_factory=dict)
    results: list[EvalCaseResult] = Field(default_factory=list)

    @property
    def average_response_time_ms(self) -> float:
        if not self.total_questions:
            return 0.0
        return self.total_response_time_ms / self.total_questions

    @property
    def overall_accuracy(self) -> float:
        if not self.total_questions:
            return 0.0
        return (
            (self.correct_answers + self.partial_answers * 0.5)
            / self.total_questions
            * 100
        )
