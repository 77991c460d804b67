#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Programme compliance analysis models.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .milestone import Milestone


class Severity(str, Enum):
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Issue(BaseModel):
    """Compliance finding against a contract clause."""

    model_config = ConfigDict(frozen=True)

    severity: Severity
    description: str
    clause_reference: str
    recommendation: str


class ComplianceMetrics(BaseModel):
    total_milestones: int = 0
    completed_milestones: int = 0
    delayed_milestones: int = 0
    total_delay_days: int = 0
    critical_path_milestones: int = 0


class ComplianceReport(BaseModel):
    issues: List[Issue] = Field(default_factory=list)
    metrics: ComplianceMetrics = Field(default_factory=ComplianceMetrics)


class ProjectSummary(BaseModel):
    """Project-level facts read from the interchange document."""

    name: Optional[str] = None
    title: Optional[str] = None
    start_date: Optional[datetime] = None
    finish_date: Optional[datetime] = None
    status_date: Optional[datetime] = None
    task_count: int = 0
    critical_task_count: int = 0


class ProgrammeAnalysis(BaseModel):
    project: ProjectSummary = Field(default_factory=ProjectSummary)
    milestones: List[Milestone] = Field(default_factory=list)
    report: ComplianceReport = Field(default_factory=ComplianceReport)
    warnings: List[str] = Field(default_factory=list)
    analysed_at: datetime = Field(default_factory=datetime.now)
    parse_time: Optional[float] = None
