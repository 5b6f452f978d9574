"""
Survey Analyzer: dependency extraction and diagnostics for survey definitions.

This module provides lightweight analysis of SurveyQuestions objects:
    - Which questions each condition reads (dependencies)
    - A reverse index used by FilteredQuestions for incremental recompute
    - Condition complexity metrics
    - Warning flags for definitions that cannot behave as intended

IMPORTANT: This module does NOT evaluate conditions and does NOT modify
the survey. It only produces read-only reports.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from .conditions import Condition, CustomCondition, DecisionCondition, SimpleCondition
from .model import Question, SurveyQuestions


@dataclass
class ConditionMetrics:
    """Metrics about a single condition tree."""
    depth: int = 0
    node_count: int = 0
    question_references: Set[str] = field(default_factory=set)
    custom_nodes: int = 0


def _analyze_condition(condition: Condition | None) -> ConditionMetrics:
    """Recursively analyze a condition tree."""
    if condition is None:
        return ConditionMetrics()

    metrics = ConditionMetrics(depth=1, node_count=1)

    if isinstance(condition, SimpleCondition):
        metrics.question_references.add(condition.question_id)

    elif isinstance(condition, DecisionCondition):
        for sub in condition.subconditions:
            child = _analyze_condition(sub)
            metrics.depth = max(metrics.depth, 1 + child.depth)
            metrics.node_count += child.node_count
            metrics.custom_nodes += child.custom_nodes
            metrics.question_references.update(child.question_references)

    elif isinstance(condition, CustomCondition):
        metrics.custom_nodes = 1
        metrics.question_references.update(condition.question_ids)

    else:
        raise TypeError(f"Unsupported Condition type: {type(condition)}")

    return metrics


def condition_dependencies(condition: Condition | None) -> Set[str]:
    """Return the ids of every question whose answer the condition reads."""
    return _analyze_condition(condition).question_references


def build_dependency_index(questions: Sequence[Question]) -> Dict[str, List[int]]:
    """
    Map each question id to the indices of the questions whose condition
    reads it.

    Visibility of a question depends only on answers, never on the
    visibility of other questions, so direct references are complete.
    """
    index: Dict[str, List[int]] = defaultdict(list)
    for position, question in enumerate(questions):
        for question_id in sorted(condition_dependencies(question.condition)):
            index[question_id].append(position)
    return dict(index)


@dataclass
class SurveyReport:
    """Analysis report for a survey definition."""

    total_questions: int = 0
    conditional_questions: int = 0
    unconditional_questions: int = 0
    custom_conditions: int = 0

    # Reference problems
    undefined_references: Dict[str, Set[str]] = field(default_factory=dict)
    forward_references: Dict[str, Set[str]] = field(default_factory=dict)
    self_references: Set[str] = field(default_factory=set)

    # Complexity
    max_condition_depth: int = 0
    avg_condition_depth: float = 0.0
    total_condition_nodes: int = 0

    # Reverse dependencies: answered id -> questions to re-evaluate
    dependents: Dict[str, List[str]] = field(default_factory=dict)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_survey(survey: SurveyQuestions, max_depth: Optional[int] = 5) -> SurveyReport:
    """
    Perform analysis of a survey definition.

    Checks for:
    - Conditions on question ids that do not exist
    - Forward references: a condition on a question that comes later,
      which progressive disclosure reveals only after this one is answered
    - Conditions that read their own question
    - Condition complexity

    Returns a SurveyReport with metrics and warnings.
    """
    report = SurveyReport(total_questions=len(survey.questions))
    position_by_id = {q.id: i for i, q in enumerate(survey.questions)}

    depths = []
    for position, question in enumerate(survey.questions):
        if question.condition is None:
            report.unconditional_questions += 1
            continue

        report.conditional_questions += 1
        metrics = _analyze_condition(question.condition)
        depths.append(metrics.depth)
        report.total_condition_nodes += metrics.node_count
        report.custom_conditions += metrics.custom_nodes

        for ref in metrics.question_references:
            if ref not in position_by_id:
                report.undefined_references.setdefault(question.id, set()).add(ref)
            elif ref == question.id:
                report.self_references.add(question.id)
            elif position_by_id[ref] > position:
                report.forward_references.setdefault(question.id, set()).add(ref)

    if depths:
        report.max_condition_depth = max(depths)
        report.avg_condition_depth = sum(depths) / len(depths)

    for question_id, positions in build_dependency_index(survey.questions).items():
        report.dependents[question_id] = [survey.questions[p].id for p in positions]

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    for question_id in sorted(report.undefined_references):
        refs = ", ".join(sorted(report.undefined_references[question_id]))
        report.add_warning(f"Condition of '{question_id}' references unknown questions: {refs}")

    for question_id in sorted(report.forward_references):
        refs = ", ".join(sorted(report.forward_references[question_id]))
        report.add_warning(f"Condition of '{question_id}' references later questions: {refs}")

    if report.self_references:
        report.add_warning(
            f"Conditions reading their own answer: {', '.join(sorted(report.self_references))}"
        )

    if max_depth is not None and report.max_condition_depth > max_depth:
        report.add_warning(
            f"High condition complexity: max depth {report.max_condition_depth}"
        )

    return report
