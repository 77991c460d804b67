#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Programme analyzer

Pipeline from an MS Project XML document to a compliance report:
document -> task records -> milestones (status, key dates, delay) -> issues and metrics.
Every stage is a pure transformation; only parsing can fail (FormatError).
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .compliance import ComplianceEvaluator
from .exceptions import ScheduleError
from .extractor import MilestoneExtractor, parse_date, parse_flag
from .models.analysis import ComplianceReport, ProgrammeAnalysis, ProjectSummary
from .models.milestone import Milestone
from .parsers import ProjectXMLParser, ScheduleParseResult
from .utils.document_factory import ScheduleParserFactory

logger = logging.getLogger(__name__)


class ProgrammeAnalyzer:
    """
    Schedule import and milestone compliance analyzer
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialise the analyzer

        Args:
            config: Settings shared by parser and extractor
                    (max_file_size_mb, key_date_priority)
            clock: Source of "now" for status and fallback dates
        """
        self.config = config or {}
        self.clock = clock or datetime.now
        self.parser = ProjectXMLParser(self.config)
        self.extractor = MilestoneExtractor(self.config, clock=self.clock)
        self.evaluator = ComplianceEvaluator()

    def parse_milestones(self, document_text: Union[str, bytes]) -> List[Milestone]:
        """
        Extract milestones from a schedule document

        Args:
            document_text: MS Project XML

        Returns:
            Milestones in source order (empty if no task is a milestone)

        Raises:
            FormatError: If the document is not a recognized schedule
        """
        tasks = self.parser.parse_text(document_text)
        return self.extractor.extract(tasks)

    def analyze_compliance(self, milestones: Sequence[Milestone]) -> ComplianceReport:
        return self.evaluator.analyze(milestones)

    def analyze_text(self, document_text: Union[str, bytes]) -> ProgrammeAnalysis:
        """
        Full analysis of document text

        Args:
            document_text: MS Project XML

        Returns:
            Project summary, milestones and compliance report
        """
        return self._analyze(self.parser.parse_document(document_text))

    def load_document(self, file_path: Union[str, Path]) -> ScheduleParseResult:
        """
        Read and parse a schedule file

        Args:
            file_path: Path to the file

        Returns:
            Parse result

        Raises:
            FileNotFoundError: If the file does not exist
            UnsupportedFormatError: For .mpp and unknown file types
            FormatError: If the content is not a recognized schedule
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File {file_path} not found")

        parser = ScheduleParserFactory.create_parser(file_path, self.config)
        return parser.parse(file_path)

    def analyze_file(self, file_path: Union[str, Path]) -> ProgrammeAnalysis:
        return self._analyze(self.load_document(file_path))

    def summarize(self, parse_result: ScheduleParseResult) -> ProjectSummary:
        metadata = parse_result.metadata
        return ProjectSummary(
            name=metadata.get("project_name"),
            title=metadata.get("project_title"),
            start_date=parse_date(metadata.get("start_date")),
            finish_date=parse_date(metadata.get("finish_date")),
            status_date=parse_date(metadata.get("status_date")),
            task_count=parse_result.task_count,
            critical_task_count=sum(1 for task in parse_result.tasks if parse_flag(task.is_critical)),
        )

    def _analyze(self, parse_result: ScheduleParseResult) -> ProgrammeAnalysis:
        milestones = self.extractor.extract(parse_result.tasks)
        if not milestones:
            logger.warning("No milestones found in schedule document")

        return ProgrammeAnalysis(
            project=self.summarize(parse_result),
            milestones=milestones,
            report=self.analyze_compliance(milestones),
            warnings=list(parse_result.warnings),
            analysed_at=self.clock(),
            parse_time=parse_result.parse_time,
        )


def parse_schedule_document(document_text: Union[str, bytes]) -> List[Milestone]:
    """Document text -> milestones; raises FormatError on unrecognized structure"""
    return ProgrammeAnalyzer().parse_milestones(document_text)


def analyze_compliance(milestones: Sequence[Milestone]) -> ComplianceReport:
    """Milestones -> issues and metrics"""
    return ComplianceEvaluator().analyze(milestones)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line entry point: print the analysis of a schedule file as JSON
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    arg_parser = argparse.ArgumentParser(
        prog="programme-analyzer",
        description="Milestone compliance analysis of an MS Project XML programme",
    )
    arg_parser.add_argument("file", help="MS Project XML file")
    arg_parser.add_argument("--max-file-size-mb", type=int, default=50)
    args = arg_parser.parse_args(argv)

    analyzer = ProgrammeAnalyzer(config={"max_file_size_mb": args.max_file_size_mb})

    try:
        analysis = analyzer.analyze_file(args.file)
    except ScheduleError as e:
        logger.error(f"File is not a recognized schedule document: {e}")
        print(json.dumps(e.to_dict(), ensure_ascii=False, indent=2))
        return 2
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    print(json.dumps(analysis.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
