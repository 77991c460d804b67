#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Milestone delay calculation
"""

import math
from datetime import datetime, timedelta
from typing import Optional, Tuple

from .models.milestone import MilestoneStatus

DELAY_REASON = "Identified from schedule document"


def calculate_delay(
    status: MilestoneStatus,
    planned_date: Optional[datetime],
    current_finish: Optional[datetime],
) -> Tuple[Optional[int], Optional[str]]:
    """
    Delay of an open milestone against its planned date

    Args:
        status: Inferred milestone status
        planned_date: Original commitment date
        current_finish: Finish date currently shown in the schedule

    Returns:
        (delay_days, delay_reason); both None when there is no delay
    """
    if status == MilestoneStatus.COMPLETED:
        return None, None
    if planned_date is None or current_finish is None:
        return None, None

    delay_days = math.ceil((current_finish - planned_date) / timedelta(days=1))
    if delay_days <= 0:
        return None, None

    return delay_days, DELAY_REASON
