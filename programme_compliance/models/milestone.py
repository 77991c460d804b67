#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Task and milestone models.

RawTask is the parser output for a single <Task> record; Milestone is the
canonical, immutable unit handed to the compliance rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass
class RawTask:
    """
    Task record as read from the interchange document

    Attributes:
        id: Task ID (<ID>)
        name: Task name
        start_text: Raw <Start> text
        finish_text: Raw <Finish> text
        duration_text: Raw <Duration> text (ISO-8601 duration)
        percent_complete: Raw <PercentComplete> text
        priority: Raw <Priority> text
        constraint_type: Raw <ConstraintType> text
        is_critical: Raw <IsCritical> flag text
        milestone_flag: Raw <Milestone> flag text
        notes: Free-text notes
        extended_attributes: Attribute name -> value, in source order
    """
    id: Optional[str] = None
    name: Optional[str] = None
    start_text: Optional[str] = None
    finish_text: Optional[str] = None
    duration_text: Optional[str] = None
    percent_complete: Optional[str] = None
    priority: Optional[str] = None
    constraint_type: Optional[str] = None
    is_critical: Optional[str] = None
    milestone_flag: Optional[str] = None
    notes: Optional[str] = None
    extended_attributes: Dict[str, str] = field(default_factory=dict)


def get_extended_attribute(task: RawTask, name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read one extended attribute of a task

    Args:
        task: Parsed task
        name: Attribute name (e.g. "KeyDate")
        default: Value returned when the attribute is absent

    Returns:
        Attribute value or default
    """
    value = task.extended_attributes.get(name)
    return default if value is None else value


class MilestoneStatus(str, Enum):
    """Milestone lifecycle status."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DELAYED = "Delayed"
    ON_TRACK = "On Track"
    AT_RISK = "At Risk"


class Milestone(BaseModel):
    """Programme milestone."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    planned_date: datetime
    actual_date: Optional[datetime] = None
    forecast_date: Optional[datetime] = None
    status: MilestoneStatus = MilestoneStatus.NOT_STARTED
    is_key_date: bool = False
    affects_completion_date: bool = False
    description: Optional[str] = None
    delay_days: Optional[int] = None
    delay_reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "Milestone":
        if self.actual_date is not None and self.forecast_date is not None:
            raise ValueError("milestone cannot have both an actual and a forecast date")
        if self.delay_days is not None:
            if self.delay_days <= 0:
                raise ValueError("delay_days must be positive")
            if self.status == MilestoneStatus.COMPLETED:
                raise ValueError("completed milestone cannot carry a delay")
        return self

    @property
    def is_delayed(self) -> bool:
        return bool(self.delay_days and self.delay_days > 0)
