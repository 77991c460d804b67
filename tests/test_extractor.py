#!/usr/bin/env python3
"""
Tests for milestone extraction

Covers:
- Milestone selection (flag, zero duration)
- Field defaults for missing or malformed values
- Status rule precedence
- Key date and critical path flags
- Delay calculation
"""

import unittest
from datetime import datetime

from pydantic import ValidationError

from programme_compliance.delay import DELAY_REASON, calculate_delay
from programme_compliance.extractor import (
    MilestoneExtractor,
    STATUS_RULES,
    StatusContext,
    infer_status,
    is_zero_duration,
    parse_date,
    parse_flag,
    parse_percent,
)
from programme_compliance.models import Milestone, MilestoneStatus, RawTask

NOW = datetime(2025, 6, 1, 12, 0)


def milestone_task(**fields) -> RawTask:
    fields.setdefault("id", "1")
    fields.setdefault("milestone_flag", "1")
    return RawTask(**fields)


class TestFieldHelpers(unittest.TestCase):
    """Extract-or-default helpers"""

    def test_parse_date_iso(self):
        self.assertEqual(parse_date("2025-03-01T08:00:00"), datetime(2025, 3, 1, 8, 0))
        self.assertEqual(parse_date("2025-03-01"), datetime(2025, 3, 1))

    def test_parse_date_fallback_formats(self):
        self.assertEqual(parse_date("15/05/2025"), datetime(2025, 5, 15))
        self.assertEqual(parse_date("15.05.2025"), datetime(2025, 5, 15))

    def test_parse_date_timezone_is_dropped(self):
        value = parse_date("2025-03-01T08:00:00Z")

        self.assertIsNotNone(value)
        self.assertIsNone(value.tzinfo)

    def test_parse_date_malformed(self):
        for text in (None, "", "   ", "next tuesday", "2025-13-45", "NA"):
            with self.subTest(text=text):
                self.assertIsNone(parse_date(text))

    def test_parse_date_out_of_range_offset(self):
        self.assertIsNone(parse_date("9999-12-31T23:00:00-05:00"))
        self.assertIsNone(parse_date("0001-01-01T00:30:00+01:00"))

    def test_parse_percent(self):
        self.assertEqual(parse_percent("100"), 100.0)
        self.assertEqual(parse_percent("42.5"), 42.5)
        self.assertEqual(parse_percent("60%"), 60.0)
        self.assertEqual(parse_percent("150"), 100.0)
        self.assertEqual(parse_percent("-5"), 0.0)
        self.assertEqual(parse_percent("abc"), 0.0)
        self.assertEqual(parse_percent("nan"), 0.0)
        self.assertEqual(parse_percent(None), 0.0)

    def test_parse_flag(self):
        for text in ("true", "TRUE", "1", " yes "):
            self.assertTrue(parse_flag(text))
        for text in (None, "", "0", "false", "no"):
            self.assertFalse(parse_flag(text))

    def test_zero_duration(self):
        for text in ("PT0H0M0S", "PT0S", "P0D", "PT0H0M0.0S", "pt0h0m0s"):
            with self.subTest(text=text):
                self.assertTrue(is_zero_duration(text))
        for text in (None, "", "P", "PT", "PT8H0M0S", "P1D", "0", "garbage"):
            with self.subTest(text=text):
                self.assertFalse(is_zero_duration(text))


class TestSelection(unittest.TestCase):
    """Which tasks become milestones"""

    def setUp(self):
        self.extractor = MilestoneExtractor(clock=lambda: NOW)

    def test_flagged_task_is_selected(self):
        self.assertTrue(self.extractor.is_milestone(RawTask(milestone_flag="true")))

    def test_zero_duration_task_is_selected(self):
        self.assertTrue(self.extractor.is_milestone(RawTask(milestone_flag="0", duration_text="PT0H0M0S")))

    def test_regular_task_is_dropped(self):
        tasks = [
            RawTask(id="1", name="Excavation", duration_text="PT80H0M0S", milestone_flag="0"),
            RawTask(id="2", name="Handover", milestone_flag="1"),
        ]

        milestones = self.extractor.extract(tasks)

        self.assertEqual([m.name for m in milestones], ["Handover"])

    def test_no_milestones(self):
        tasks = [RawTask(id="1", duration_text="PT8H0M0S")]

        self.assertEqual(self.extractor.extract(tasks), [])


class TestMilestoneMapping(unittest.TestCase):
    """Derived milestone fields"""

    def setUp(self):
        self.extractor = MilestoneExtractor(clock=lambda: NOW)

    def test_task_without_data_degrades_gracefully(self):
        milestone = self.extractor.to_milestone(milestone_task(id="12"))

        self.assertEqual(milestone.name, "Milestone 12")
        self.assertEqual(milestone.planned_date, NOW)
        self.assertIsNone(milestone.actual_date)
        self.assertIsNone(milestone.forecast_date)
        self.assertEqual(milestone.status, MilestoneStatus.NOT_STARTED)
        self.assertFalse(milestone.is_key_date)
        self.assertFalse(milestone.affects_completion_date)
        self.assertIsNone(milestone.description)
        self.assertIsNone(milestone.delay_days)

    def test_completed_milestone_has_actual_date(self):
        milestone = self.extractor.to_milestone(milestone_task(
            start_text="2025-03-01T08:00:00", finish_text="2025-03-05T08:00:00", percent_complete="100",
        ))

        self.assertEqual(milestone.status, MilestoneStatus.COMPLETED)
        self.assertEqual(milestone.actual_date, datetime(2025, 3, 5, 8, 0))
        self.assertIsNone(milestone.forecast_date)
        self.assertIsNone(milestone.delay_days)

    def test_completed_milestone_without_finish(self):
        milestone = self.extractor.to_milestone(milestone_task(
            start_text="2025-03-01T08:00:00", percent_complete="100",
        ))

        self.assertEqual(milestone.status, MilestoneStatus.COMPLETED)
        self.assertEqual(milestone.actual_date, datetime(2025, 3, 1, 8, 0))

    def test_completed_with_finish_before_start(self):
        milestone = self.extractor.to_milestone(milestone_task(
            start_text="2025-03-10", finish_text="2025-03-01", percent_complete="100",
        ))

        self.assertEqual(milestone.status, MilestoneStatus.COMPLETED)
        self.assertEqual(milestone.actual_date, datetime(2025, 3, 1))

    def test_open_milestone_has_forecast_date(self):
        milestone = self.extractor.to_milestone(milestone_task(
            start_text="2025-07-01", finish_text="2025-07-03", percent_complete="0",
        ))

        self.assertIsNone(milestone.actual_date)
        self.assertEqual(milestone.forecast_date, datetime(2025, 7, 3))

    def test_malformed_dates_are_treated_as_absent(self):
        milestone = self.extractor.to_milestone(milestone_task(
            start_text="not a date", finish_text="31/31/2025", percent_complete="0",
        ))

        self.assertEqual(milestone.planned_date, NOW)
        self.assertIsNone(milestone.forecast_date)
        self.assertEqual(milestone.status, MilestoneStatus.NOT_STARTED)
        self.assertIsNone(milestone.delay_days)

    def test_key_date_from_priority(self):
        milestone = self.extractor.to_milestone(milestone_task(priority="1000"))

        self.assertTrue(milestone.is_key_date)

    def test_key_date_from_extended_attribute(self):
        milestone = self.extractor.to_milestone(milestone_task(
            priority="500", extended_attributes={"KeyDate": "true"},
        ))

        self.assertTrue(milestone.is_key_date)

    def test_key_date_attribute_false(self):
        milestone = self.extractor.to_milestone(milestone_task(extended_attributes={"KeyDate": "false"}))

        self.assertFalse(milestone.is_key_date)

    def test_key_date_priority_is_configurable(self):
        extractor = MilestoneExtractor({"key_date_priority": 900}, clock=lambda: NOW)

        self.assertTrue(extractor.to_milestone(milestone_task(priority="900")).is_key_date)
        self.assertFalse(extractor.to_milestone(milestone_task(priority="1000")).is_key_date)

    def test_critical_flag(self):
        self.assertTrue(self.extractor.to_milestone(milestone_task(is_critical="1")).affects_completion_date)
        self.assertTrue(self.extractor.to_milestone(milestone_task(is_critical="true")).affects_completion_date)
        self.assertFalse(self.extractor.to_milestone(milestone_task(is_critical="0")).affects_completion_date)

    def test_notes_become_description(self):
        milestone = self.extractor.to_milestone(milestone_task(name="Award", notes="Contract award"))

        self.assertEqual(milestone.name, "Award")
        self.assertEqual(milestone.description, "Contract award")

    def test_milestone_is_immutable(self):
        milestone = self.extractor.to_milestone(milestone_task())

        with self.assertRaises(ValidationError):
            milestone.status = MilestoneStatus.COMPLETED


class TestStatusRules(unittest.TestCase):
    """Ordered status decision"""

    def setUp(self):
        self.extractor = MilestoneExtractor(clock=lambda: NOW)

    def status_of(self, **fields) -> MilestoneStatus:
        return self.extractor.to_milestone(milestone_task(**fields)).status

    def test_rule_order(self):
        self.assertEqual(
            [status for _, status in STATUS_RULES],
            [
                MilestoneStatus.COMPLETED,
                MilestoneStatus.IN_PROGRESS,
                MilestoneStatus.DELAYED,
                MilestoneStatus.ON_TRACK,
            ],
        )

    def test_complete_wins_over_past_start(self):
        self.assertEqual(
            self.status_of(start_text="2025-01-01", percent_complete="100"),
            MilestoneStatus.COMPLETED,
        )

    def test_progress_wins_over_lateness(self):
        self.assertEqual(
            self.status_of(start_text="2025-01-01", percent_complete="40", constraint_type="ASAP"),
            MilestoneStatus.IN_PROGRESS,
        )

    def test_past_start_is_delayed(self):
        self.assertEqual(
            self.status_of(start_text="2025-05-31", percent_complete="0", constraint_type="ASAP"),
            MilestoneStatus.DELAYED,
        )

    def test_asap_constraint_is_on_track(self):
        self.assertEqual(
            self.status_of(start_text="2025-09-01", constraint_type="ASAP"),
            MilestoneStatus.ON_TRACK,
        )
        self.assertEqual(
            self.status_of(start_text="2025-09-01", constraint_type="As Soon As Possible"),
            MilestoneStatus.ON_TRACK,
        )

    def test_future_start_without_constraint(self):
        self.assertEqual(self.status_of(start_text="2025-09-01"), MilestoneStatus.NOT_STARTED)

    def test_start_equal_to_now_is_not_delayed(self):
        ctx = StatusContext(percent_complete=0, start=NOW, constraint_type=None, now=NOW)

        self.assertEqual(infer_status(ctx), MilestoneStatus.NOT_STARTED)

    def test_missing_start_never_delays(self):
        self.assertEqual(self.status_of(percent_complete="0"), MilestoneStatus.NOT_STARTED)


class TestDelayCalculator(unittest.TestCase):
    """Delay against the planned date"""

    def test_delay_rounds_up_to_whole_days(self):
        days, reason = calculate_delay(
            MilestoneStatus.DELAYED, datetime(2025, 5, 10, 8, 0), datetime(2025, 5, 15, 17, 0),
        )

        self.assertEqual(days, 6)
        self.assertEqual(reason, DELAY_REASON)

    def test_exact_days(self):
        days, _ = calculate_delay(MilestoneStatus.NOT_STARTED, datetime(2025, 7, 1), datetime(2025, 7, 6))

        self.assertEqual(days, 5)

    def test_ahead_of_schedule_is_not_a_delay(self):
        self.assertEqual(
            calculate_delay(MilestoneStatus.ON_TRACK, datetime(2025, 7, 10), datetime(2025, 7, 1)),
            (None, None),
        )

    def test_same_day_is_not_a_delay(self):
        self.assertEqual(
            calculate_delay(MilestoneStatus.ON_TRACK, datetime(2025, 7, 1), datetime(2025, 7, 1)),
            (None, None),
        )

    def test_completed_has_no_delay(self):
        self.assertEqual(
            calculate_delay(MilestoneStatus.COMPLETED, datetime(2025, 3, 1), datetime(2025, 4, 1)),
            (None, None),
        )

    def test_missing_finish(self):
        self.assertEqual(calculate_delay(MilestoneStatus.DELAYED, datetime(2025, 3, 1), None), (None, None))

    def test_extractor_records_delay(self):
        extractor = MilestoneExtractor(clock=lambda: NOW)

        milestone = extractor.to_milestone(milestone_task(
            start_text="2025-05-10T08:00:00", finish_text="2025-05-15T17:00:00", percent_complete="0",
        ))

        self.assertEqual(milestone.status, MilestoneStatus.DELAYED)
        self.assertEqual(milestone.delay_days, 6)
        self.assertEqual(milestone.delay_reason, DELAY_REASON)


class TestMilestoneInvariants(unittest.TestCase):
    """Model-level invariants"""

    def test_actual_and_forecast_are_exclusive(self):
        with self.assertRaises(ValidationError):
            Milestone(
                name="Both", planned_date=NOW, actual_date=NOW, forecast_date=NOW,
            )

    def test_delay_must_be_positive(self):
        with self.assertRaises(ValidationError):
            Milestone(name="Zero", planned_date=NOW, delay_days=0)

    def test_completed_cannot_be_delayed(self):
        with self.assertRaises(ValidationError):
            Milestone(name="Done", planned_date=NOW, status=MilestoneStatus.COMPLETED, delay_days=3)

    def test_name_required(self):
        with self.assertRaises(ValidationError):
            Milestone(name="", planned_date=NOW)


if __name__ == "__main__":
    unittest.main(verbosity=2)
