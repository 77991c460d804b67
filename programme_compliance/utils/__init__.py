#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Helper utilities
"""

from .document_factory import ScheduleParserFactory

__all__ = [
    "ScheduleParserFactory",
]
