#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Factory for schedule document parsers
"""

from pathlib import Path
from typing import Optional
import logging

from ..exceptions import UnsupportedFormatError
from ..parsers import BaseParser, MPPParser, ProjectXMLParser

logger = logging.getLogger(__name__)


class ScheduleParserFactory:
    """
    Picks a parser by file suffix
    """

    _parsers = [
        ProjectXMLParser,
        MPPParser,
    ]

    @classmethod
    def create_parser(cls, file_path: Path, config: Optional[dict] = None) -> BaseParser:
        """
        Create a parser for the file

        Args:
            file_path: Path to the file
            config: Parser configuration

        Returns:
            Parser instance

        Raises:
            UnsupportedFormatError: If no parser handles the suffix
        """
        file_path = Path(file_path)
        for parser_class in cls._parsers:
            parser = parser_class(config)
            if parser.supports(file_path):
                logger.info(f"Selected parser: {parser_class.__name__} for {file_path.suffix}")
                return parser

        raise UnsupportedFormatError(f"Unsupported file type: {file_path.suffix or '(none)'}")

    @classmethod
    def get_supported_formats(cls) -> list:
        """
        File suffixes that produce milestones

        Returns:
            Sorted list of extensions
        """
        formats = set()
        for parser_class in cls._parsers:
            if parser_class is MPPParser:
                continue
            formats.update(parser_class.SUPPORTED_EXTENSIONS)
        return sorted(formats)
