#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Milestone extraction and status inference

Selects milestone tasks from a parsed schedule and maps each into a
Milestone:
- Selection: explicit milestone flag or zero duration
- Field defaults for missing or unparseable values
- Ordered status rules (first match wins)
- Key date and critical path flags
- Delay against the planned date
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from .delay import calculate_delay
from .models.milestone import Milestone, MilestoneStatus, RawTask, get_extended_attribute

logger = logging.getLogger(__name__)

TRUE_FLAGS = {"true", "1", "yes", "y"}
KEY_DATE_ATTRIBUTE = "KeyDate"
ASAP_MARKERS = ("asap", "as soon as possible")

ISO_DURATION = re.compile(
    r"^P(?:(?P<years>\d+(?:\.\d+)?)Y)?(?:(?P<months>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:\.\d+)?)W)?(?:(?P<days>\d+(?:\.\d+)?)D)?"
    r"(?:T(?:(?P<hours>\d+(?:\.\d+)?)H)?(?:(?P<minutes>\d+(?:\.\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?$"
)

FALLBACK_DATE_FORMATS = [
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y/%m/%d",
]


# ===================== Field helpers =====================

def parse_date(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a schedule date; unparseable text counts as absent

    Args:
        text: Raw date text

    Returns:
        Naive datetime or None
    """
    if not text or not text.strip():
        return None
    text = text.strip()

    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        value = datetime.fromisoformat(candidate)
    except ValueError:
        value = None
        for fmt in FALLBACK_DATE_FORMATS:
            try:
                value = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if value is None:
        logger.debug(f"Ignoring unparseable date: {text!r}")
        return None

    if value.tzinfo is not None:
        try:
            value = value.astimezone().replace(tzinfo=None)
        except (OverflowError, ValueError):
            logger.debug(f"Ignoring out-of-range date: {text!r}")
            return None
    return value


def parse_percent(text: Optional[str]) -> float:
    """Percent complete clamped to 0..100; unparseable -> 0"""
    if text is None:
        return 0.0
    try:
        value = float(str(text).strip().rstrip("%"))
    except ValueError:
        logger.debug(f"Ignoring unparseable percent complete: {text!r}")
        return 0.0
    if value != value:  # NaN
        return 0.0
    return max(0.0, min(100.0, value))


def parse_flag(text: Optional[str]) -> bool:
    return text is not None and text.strip().lower() in TRUE_FLAGS


def is_zero_duration(text: Optional[str]) -> bool:
    """
    True for ISO-8601 durations whose every component is zero (PT0H0M0S, P0D, ...)
    """
    if not text:
        return False
    match = ISO_DURATION.match(text.strip().upper())
    if not match or text.strip().upper() in ("P", "PT"):
        return False
    components = [float(value) for value in match.groupdict().values() if value is not None]
    return bool(components) and all(value == 0 for value in components)


# ===================== Status rules =====================

@dataclass(frozen=True)
class StatusContext:
    """Inputs of the status decision for one task"""
    percent_complete: float
    start: Optional[datetime]
    constraint_type: Optional[str]
    now: datetime


def _is_complete(ctx: StatusContext) -> bool:
    return ctx.percent_complete == 100


def _has_progress(ctx: StatusContext) -> bool:
    return 0 < ctx.percent_complete < 100


def _start_has_passed(ctx: StatusContext) -> bool:
    return ctx.start is not None and ctx.start < ctx.now and ctx.percent_complete != 100


def _is_asap(ctx: StatusContext) -> bool:
    constraint = (ctx.constraint_type or "").lower()
    return any(marker in constraint for marker in ASAP_MARKERS)


# Order matters: progress outranks lateness, lateness outranks constraint hints
STATUS_RULES: List[Tuple[Callable[[StatusContext], bool], MilestoneStatus]] = [
    (_is_complete, MilestoneStatus.COMPLETED),
    (_has_progress, MilestoneStatus.IN_PROGRESS),
    (_start_has_passed, MilestoneStatus.DELAYED),
    (_is_asap, MilestoneStatus.ON_TRACK),
]


def infer_status(ctx: StatusContext) -> MilestoneStatus:
    for predicate, status in STATUS_RULES:
        if predicate(ctx):
            return status
    return MilestoneStatus.NOT_STARTED


# ===================== Extractor =====================

class MilestoneExtractor:
    """
    Maps parsed tasks to Milestone records
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            config: Extractor configuration (key_date_priority)
            clock: Source of "now"; datetime.now by default
        """
        self.config = config or {}
        self.clock = clock or datetime.now
        self.key_date_priority = str(self.config.get("key_date_priority", "1000"))

    def is_milestone(self, task: RawTask) -> bool:
        return parse_flag(task.milestone_flag) or is_zero_duration(task.duration_text)

    def is_key_date(self, task: RawTask) -> bool:
        if task.priority is not None and task.priority.strip() == self.key_date_priority:
            return True
        return parse_flag(get_extended_attribute(task, KEY_DATE_ATTRIBUTE))

    def extract(self, tasks: List[RawTask]) -> List[Milestone]:
        """
        Extract milestones from parsed tasks

        Args:
            tasks: Tasks in source order

        Returns:
            Milestones in source order
        """
        now = self.clock()
        milestones = [self.to_milestone(task, now) for task in tasks if self.is_milestone(task)]
        logger.info(f"Selected {len(milestones)} milestone(s) from {len(tasks)} task(s)")
        return milestones

    def to_milestone(self, task: RawTask, now: Optional[datetime] = None) -> Milestone:
        """
        Build one milestone; missing data degrades to defaults

        Args:
            task: Parsed task
            now: Analysis time (defaults to the clock)

        Returns:
            Milestone
        """
        now = now or self.clock()
        percent = parse_percent(task.percent_complete)
        start = parse_date(task.start_text)
        finish = parse_date(task.finish_text)

        planned_date = start or now
        # Completed milestones always carry an actual date
        actual_date = (finish or planned_date) if percent == 100 else None
        forecast_date = finish if percent != 100 else None

        status = infer_status(StatusContext(
            percent_complete=percent,
            start=start,
            constraint_type=task.constraint_type,
            now=now,
        ))
        delay_days, delay_reason = calculate_delay(status, planned_date, finish)

        return Milestone(
            name=task.name or f"Milestone {task.id or '?'}",
            planned_date=planned_date,
            actual_date=actual_date,
            forecast_date=forecast_date,
            status=status,
            is_key_date=self.is_key_date(task),
            affects_completion_date=parse_flag(task.is_critical),
            description=task.notes or None,
            delay_days=delay_days,
            delay_reason=delay_reason,
        )
