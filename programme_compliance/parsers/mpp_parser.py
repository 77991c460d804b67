#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Binary MS Project (.mpp) files
"""

from pathlib import Path
from typing import Union

from .base_parser import BaseParser, ScheduleParseResult
from ..exceptions import UnsupportedFormatError


class MPPParser(BaseParser):
    """
    Recognises binary .mpp files and rejects them.

    The binary format is not read; users must export the programme
    to MS Project XML first.
    """

    SUPPORTED_EXTENSIONS = [".mpp"]
    MESSAGE = "Binary MS Project files (.mpp) are not supported; export the programme as MS Project XML"

    def parse(self, file_path: Path) -> ScheduleParseResult:
        self.logger.warning(f"Rejected binary schedule file: {Path(file_path).name}")
        raise UnsupportedFormatError(self.MESSAGE)

    def parse_document(self, document: Union[str, bytes]) -> ScheduleParseResult:
        raise UnsupportedFormatError(self.MESSAGE)
