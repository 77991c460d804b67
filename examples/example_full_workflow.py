#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Example of the full programme analysis workflow

Demonstrates:
1. Loading an MS Project XML export
2. Milestone extraction
3. NEC4 compliance check
4. Exporting the result
"""

import sys
from pathlib import Path
import json

# Add the project root to the path
sys.path.append(str(Path(__file__).parent.parent))

from programme_compliance.analyzer import ProgrammeAnalyzer
from programme_compliance.exceptions import FormatError


def main():
    """
    Full workflow for one programme file
    """
    print("=" * 70)
    print("PROGRAMME MILESTONE COMPLIANCE ANALYSIS")
    print("=" * 70)
    print()

    print("STEP 1: Load the programme")
    print("-" * 70)

    programme_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("programme.xml")

    if not programme_file.exists():
        print(f"File {programme_file} not found")
        print("Export the programme from MS Project as XML and pass its path")
        return

    analyzer = ProgrammeAnalyzer(config={"max_file_size_mb": 50})

    try:
        parse_result = analyzer.load_document(programme_file)
    except FormatError as e:
        print(f"File is not a recognized schedule document: {e}")
        return

    print(f"Tasks read: {parse_result.task_count}")
    print(f"Parse time: {parse_result.parse_time:.2f}s")
    print()

    print("STEP 2: Milestones")
    print("-" * 70)

    milestones = analyzer.extractor.extract(parse_result.tasks)
    if not milestones:
        print("No milestones found")
        return

    for milestone in milestones:
        delay = f"{milestone.delay_days}d late" if milestone.delay_days else ""
        key = "KEY" if milestone.is_key_date else ""
        print(f"  {milestone.planned_date:%Y-%m-%d}  {milestone.status.value:<12} {key:<4} {milestone.name} {delay}")
    print()

    print("STEP 3: NEC4 compliance")
    print("-" * 70)

    report = analyzer.analyze_compliance(milestones)
    for issue in report.issues:
        print(f"  [{issue.severity.value.upper()}] clause {issue.clause_reference}: {issue.description}")
        print(f"      -> {issue.recommendation}")
    if not report.issues:
        print("  No issues found")
    print()
    print(json.dumps(report.metrics.model_dump(), indent=2))
    print()

    print("STEP 4: Export")
    print("-" * 70)

    output_file = programme_file.with_suffix(".analysis.json")
    analysis = analyzer.analyze_file(programme_file)
    output_file.write_text(analysis.model_dump_json(indent=2), encoding="utf-8")
    print(f"Saved: {output_file}")


if __name__ == "__main__":
    main()
