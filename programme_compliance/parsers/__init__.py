#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Schedule document parsers

Supported formats:
- MS Project XML (MSPDI)
- Binary .mpp is recognised and rejected
"""

from .xml_parser import ProjectXMLParser
from .mpp_parser import MPPParser
from .base_parser import BaseParser, ScheduleParseResult

__all__ = [
    "ProjectXMLParser",
    "MPPParser",
    "BaseParser",
    "ScheduleParseResult",
]
