#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
NEC4 programme compliance rules

Evaluates a milestone list against contractual schedule obligations:
- Clause 31.2: key dates shown on the programme
- Clause 32.1: delays reported in the revised programme
- Clause 63.3: delays to the Completion Date
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .models.analysis import ComplianceMetrics, ComplianceReport, Issue, Severity
from .models.milestone import Milestone, MilestoneStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComplianceRule:
    """
    Rule over the whole milestone list

    Attributes:
        name: Rule identifier
        applies: Predicate over the milestone list
        build: Issue factory, called only when the rule applies
    """
    name: str
    applies: Callable[[Sequence[Milestone]], bool]
    build: Callable[[Sequence[Milestone]], Issue]

    def evaluate(self, milestones: Sequence[Milestone]) -> List[Issue]:
        if not self.applies(milestones):
            return []
        return [self.build(milestones)]


def _key_dates(milestones: Sequence[Milestone]) -> List[Milestone]:
    return [m for m in milestones if m.is_key_date]


def _delayed(milestones: Sequence[Milestone]) -> List[Milestone]:
    return [m for m in milestones if m.is_delayed]


def _completion_impacted(milestones: Sequence[Milestone]) -> bool:
    return any(
        m.affects_completion_date and m.status != MilestoneStatus.COMPLETED and m.is_delayed
        for m in milestones
    )


COMPLIANCE_RULES: List[ComplianceRule] = [
    ComplianceRule(
        name="key_dates_missing",
        applies=lambda ms: len(_key_dates(ms)) == 0,
        build=lambda ms: Issue(
            severity=Severity.MODERATE,
            description="No key dates identified in programme",
            clause_reference="31.2",
            recommendation="Add key dates to the programme as required by the contract",
        ),
    ),
    ComplianceRule(
        name="milestones_delayed",
        applies=lambda ms: len(_delayed(ms)) > 0,
        build=lambda ms: Issue(
            severity=Severity.HIGH,
            description=f"{len(_delayed(ms))} milestone(s) showing delay",
            clause_reference="32.1",
            recommendation="Notify compensation events for delays that are not the Contractor's risk",
        ),
    ),
    ComplianceRule(
        name="completion_date_impacted",
        applies=_completion_impacted,
        build=lambda ms: Issue(
            severity=Severity.CRITICAL,
            description="Delays affecting Completion Date identified",
            clause_reference="63.3",
            recommendation="Assess impact on Completion Date and prepare compensation event quotations",
        ),
    ),
]


class ComplianceEvaluator:
    """
    Runs the ordered rule list and aggregates metrics
    """

    def __init__(self, rules: Optional[Sequence[ComplianceRule]] = None):
        self.rules = list(rules) if rules is not None else list(COMPLIANCE_RULES)

    def evaluate_issues(self, milestones: Sequence[Milestone]) -> List[Issue]:
        issues: List[Issue] = []
        for rule in self.rules:
            found = rule.evaluate(milestones)
            if found:
                logger.debug(f"Rule {rule.name} raised {found[0].severity.value} issue")
            issues.extend(found)
        return issues

    def compute_metrics(self, milestones: Sequence[Milestone]) -> ComplianceMetrics:
        return ComplianceMetrics(
            total_milestones=len(milestones),
            completed_milestones=sum(1 for m in milestones if m.status == MilestoneStatus.COMPLETED),
            delayed_milestones=len(_delayed(milestones)),
            total_delay_days=sum(m.delay_days or 0 for m in milestones),
            critical_path_milestones=sum(1 for m in milestones if m.affects_completion_date),
        )

    def analyze(self, milestones: Sequence[Milestone]) -> ComplianceReport:
        """
        Full compliance report

        Args:
            milestones: Milestones from one analysis run

        Returns:
            Issues and metrics
        """
        milestones = tuple(milestones)
        report = ComplianceReport(
            issues=self.evaluate_issues(milestones),
            metrics=self.compute_metrics(milestones),
        )
        logger.info(
            f"Compliance check: {len(report.issues)} issue(s) over "
            f"{report.metrics.total_milestones} milestone(s)"
        )
        return report


def evaluate_issues(milestones: Sequence[Milestone]) -> List[Issue]:
    return ComplianceEvaluator().evaluate_issues(milestones)


def compute_metrics(milestones: Sequence[Milestone]) -> ComplianceMetrics:
    return ComplianceEvaluator().compute_metrics(milestones)
