#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data models for the programme analyzer
"""

from .milestone import Milestone, MilestoneStatus, RawTask, get_extended_attribute
from .analysis import (
    ComplianceMetrics,
    ComplianceReport,
    Issue,
    ProgrammeAnalysis,
    ProjectSummary,
    Severity,
)

__all__ = [
    "RawTask",
    "Milestone",
    "MilestoneStatus",
    "get_extended_attribute",
    "Severity",
    "Issue",
    "ComplianceMetrics",
    "ComplianceReport",
    "ProjectSummary",
    "ProgrammeAnalysis",
]
