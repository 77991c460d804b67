#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Errors raised by the programme analyzer
"""

from typing import Dict, Optional


class ScheduleError(Exception):
    """Base error for the programme analyzer"""

    stage = "analysis"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def to_dict(self) -> Dict[str, str]:
        return {"stage": self.stage, "error": type(self).__name__, "message": str(self)}


class FormatError(ScheduleError):
    """Document is not a recognized schedule document"""

    stage = "parsing"


class UnsupportedFormatError(FormatError):
    """File type the analyzer cannot read (binary .mpp, unknown suffix)"""
    pass
