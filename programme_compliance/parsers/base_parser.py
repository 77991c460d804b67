#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base class for all schedule document parsers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from pathlib import Path
import logging
import time
from datetime import datetime

import chardet

from ..models.milestone import RawTask

logger = logging.getLogger(__name__)


@dataclass
class ScheduleParseResult:
    """
    Result of parsing a schedule document

    Attributes:
        tasks: Task records in source order
        metadata: Project-level fields and file facts
        warnings: Non-fatal remarks
        parse_time: Parse time in seconds
    """
    tasks: List[RawTask] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    parse_time: float = 0.0

    @property
    def task_count(self) -> int:
        return len(self.tasks)


class BaseParser(ABC):
    """
    Abstract base class for schedule parsers
    """

    SUPPORTED_EXTENSIONS: List[str] = []

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialise the parser

        Args:
            config: Parser configuration
        """
        self.config = config or {}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse_document(self, document: Union[str, bytes]) -> ScheduleParseResult:
        """
        Parse document content

        Args:
            document: Document text or raw bytes

        Returns:
            Parse result

        Raises:
            FormatError: If the document is not a recognized schedule
        """
        pass

    def supports(self, file_path: Path) -> bool:
        """
        Check whether the file format is supported

        Args:
            file_path: Path to the file

        Returns:
            True if the suffix is supported
        """
        return file_path.suffix.lower() in self.SUPPORTED_EXTENSIONS

    def parse(self, file_path: Path) -> ScheduleParseResult:
        """
        Parse a schedule file

        Args:
            file_path: Path to the file

        Returns:
            Parse result with file metadata merged in
        """
        file_path = Path(file_path)
        start_time = time.time()

        self.validate_file(file_path)
        raw = file_path.read_bytes()

        encoding = self._detect_encoding(raw)
        result = self.parse_document(raw.decode(encoding, errors="replace"))

        result.metadata.update(self.extract_metadata(file_path))
        result.metadata["encoding"] = encoding
        result.parse_time = time.time() - start_time
        return result

    def validate_file(self, file_path: Path) -> None:
        """
        Validate the file before parsing

        Args:
            file_path: Path to the file

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is too large or not a file
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if not file_path.is_file():
            raise ValueError(f"Path is not a file: {file_path}")

        max_size = self.config.get("max_file_size_mb", 50) * 1024 * 1024
        if file_path.stat().st_size > max_size:
            raise ValueError(f"File too large: {file_path.stat().st_size / 1024 / 1024:.2f} MB")

    def extract_metadata(self, file_path: Path) -> Dict[str, Any]:
        """
        Basic file metadata

        Args:
            file_path: Path to the file

        Returns:
            Metadata dict
        """
        stat = file_path.stat()
        return {
            "filename": file_path.name,
            "extension": file_path.suffix,
            "size_bytes": stat.st_size,
            "modified_at": datetime.fromtimestamp(stat.st_mtime).isoformat(),
            "parser_class": self.__class__.__name__,
        }

    def _detect_encoding(self, raw_data: bytes) -> str:
        """
        Detect the text encoding of raw file content

        Args:
            raw_data: File bytes

        Returns:
            Encoding name
        """
        if raw_data.startswith(b"\xef\xbb\xbf"):
            return "utf-8-sig"
        if raw_data.startswith((b"\xff\xfe", b"\xfe\xff")):
            return "utf-16"

        result = chardet.detect(raw_data)
        encoding = result["encoding"]
        confidence = result["confidence"] or 0.0
        self.logger.info(f"Detected encoding: {encoding} (confidence: {confidence:.2%})")

        return encoding or "utf-8"
