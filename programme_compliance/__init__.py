# -*- coding: utf-8 -*-
"""
Programme Compliance - schedule import and milestone compliance analysis

Version 1.0.0 includes:
- MS Project XML (MSPDI) import
- Milestone extraction with status, key date and critical path inference
- Delay calculation against planned dates
- NEC4 compliance rules (clauses 31.2, 32.1, 63.3) and metrics
- REST API and command-line interface
"""

__version__ = "1.0.0"

from .analyzer import ProgrammeAnalyzer, analyze_compliance, parse_schedule_document
from .compliance import ComplianceEvaluator, ComplianceRule, COMPLIANCE_RULES
from .exceptions import FormatError, ScheduleError, UnsupportedFormatError
from .extractor import MilestoneExtractor
from .models import ComplianceReport, Issue, Milestone, MilestoneStatus, Severity

__all__ = [
    "ProgrammeAnalyzer",
    "parse_schedule_document",
    "analyze_compliance",
    "MilestoneExtractor",
    "ComplianceEvaluator",
    "ComplianceRule",
    "COMPLIANCE_RULES",
    "Milestone",
    "MilestoneStatus",
    "Issue",
    "Severity",
    "ComplianceReport",
    "FormatError",
    "ScheduleError",
    "UnsupportedFormatError",
]
