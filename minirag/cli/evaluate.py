# =============================================================================
# minirag/cli/evaluate.py - Answer Quality Evaluation
# =============================================================================
#
# Runs a fixed set of questions through the live pipeline and grades each
# answer by the share of expected keywords it mentions (>= 80 % correct,
# >= 50 % partial).  Prints overall and per-category accuracy, counting
# partial answers as half correct.
#
# Questions live in config/eval_questions.yaml:
#
#   questions:
#     - question: How does the chunking work?
#       expected: ["1000 characters", "150 character overlap"]
#       category: Technical Details
#
# Usage examples:
#   python -m minirag.cli.evaluate
#   python -m minirag.cli.evaluate --questions my_questions.yaml --json
# =============================================================================

"""Standalone CLI for keyword-graded evaluation of the minirag pipeline."""

from __future__ import annotations

import argparse
import asyncio
import sys

from minirag.config.settings import Settings
from minirag.main import pipeline_session
from minirag.models.evaluation import EvalCase, EvalReport, Grade
from minirag.services.evaluation import (
    DEFAULT_QUESTIONS_PATH,
    EvaluationService,
    load_cases,
    verdict,
)
from minirag.utils.errors import MiniRAGError, describe_error

_RULE = "=" * 60
_MARKS = {Grade.CORRECT: "PASS", Grade.PARTIAL: "PART", Grade.INCORRECT: "FAIL"}


def _pct(part: int, total: int) -> float:
    return part / total * 100 if total else 0.0


def format_report(report: EvalReport) -> str:
    """Render *report* as the plain-text summary printed by the CLI."""
    n = report.total_questions
    lines = [
        _RULE,
        "MINIRAG EVALUATION RESULTS",
        _RULE,
        "",
        "Overall Performance:",
        f"   Total Questions:   {n}",
        f"   Correct Answers:   {report.correct_answers} ({_pct(report.correct_answers, n):.1f}%)",
        f"   Partial Answers:   {report.partial_answers} ({_pct(report.partial_answers, n):.1f}%)",
        f"   Incorrect Answers: {report.incorrect_answers} ({_pct(report.incorrect_answers, n):.1f}%)",
        "",
        "Performance Metrics:",
        f"   Average Response Time: {report.average_response_time_ms:.0f}ms",
        f"   Total Response Time:   {report.total_response_time_ms:.0f}ms",
        "",
        "Category Performance:",
    ]
    for category, stats in report.category_performance.items():
        lines.append(
            f"   {category}: {stats.accuracy:.1f}% accuracy "
            f"({stats.correct}/{stats.total} correct, {stats.partial}/{stats.total} partial)"
        )

    lines += ["", "Detailed Results:"]
    for index, result in enumerate(report.results, start=1):
        outcome = result.outcome
        lines.append(f"   {index}. [{_MARKS[outcome.grade]}] {result.case.question}")
        lines.append(f"      Expected: {', '.join(result.case.expected)}")
        lines.append(f"      Score: {outcome.grade.value} ({outcome.percentage:.1f}%)")
        lines.append(f"      Matched: {outcome.matched}/{outcome.total} keywords")
        lines.append(f"      Response Time: {result.response_time_ms:.0f}ms")
        if result.error:
            lines.append(f"      Error: {result.error}")
        lines.append("")

    lines += [
        _RULE,
        f"Overall Accuracy: {report.overall_accuracy:.1f}%",
        verdict(report.overall_accuracy),
        _RULE,
    ]
    return "\n".join(lines)


async def _run(cases: list[EvalCase], app_settings: Settings, as_json: bool) -> int:
    async with pipeline_session(app_settings) as pipeline:
        try:
            await pipeline.ensure_ready()
        except MiniRAGError as exc:
            print(f"Error: {describe_error(exc)}", file=sys.stderr)
            return 1
        report = await EvaluationService(pipeline).run(cases)

    if as_json:
        print(report.model_dump_json(indent=2))
    else:
        print(format_report(report))
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m minirag.cli.evaluate",
        description="Grade pipeline answers against expected keywords.",
    )
    parser.add_argument(
        "--questions",
        default=DEFAULT_QUESTIONS_PATH,
        help=f"YAML file of evaluation questions (default: {DEFAULT_QUESTIONS_PATH})",
    )
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the evaluation tool.  Returns the exit code."""
    args = _build_parser().parse_args(argv)

    try:
        cases = load_cases(args.questions)
        app_settings = Settings()
    except MiniRAGError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_run(cases, app_settings, args.json))
    except MiniRAGError as exc:
        print(f"Error: {describe_error(exc)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
