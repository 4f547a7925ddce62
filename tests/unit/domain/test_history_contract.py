from __future__ import annotations

from datetime import date, datetime, timezone

from survey_tracker.domain.enums import SurveyStatus
from survey_tracker.domain.history import build_history_entries, canonical_value, diff_tracked_fields


def test_canonical_values():
    assert canonical_value(None) is None
    assert canonical_value(SurveyStatus.COMPLETED) == "completed"
    assert canonical_value(True) == "true"
    assert canonical_value(False) == "false"
    assert canonical_value(date(2024, 1, 2)) == "2024-01-02"
    assert canonical_value(42) == "42"


def test_diff_reports_only_changed_tracked_fields():
    before = {"status": "received", "system_name": "A", "is_archived": False, "survey_date": date(2024, 1, 1)}
    after = {"status": "in_writing", "system_name": "A", "is_archived": False, "survey_date": date(2024, 1, 1)}
    changes = diff_tracked_fields(before, after)
    assert len(changes) == 1
    assert (changes[0].field_name, changes[0].old_value, changes[0].new_value) == ("status", "received", "in_writing")


def test_untracked_fields_are_ignored():
    assert diff_tracked_fields({"phone": "1"}, {"phone": "2"}) == []


def test_entries_are_attributed_and_timestamped():
    at = datetime(2024, 5, 1, tzinfo=timezone.utc)
    changes = diff_tracked_fields({"is_archived": False}, {"is_archived": True})
    [entry] = build_history_entries(survey_id=9, changes=changes, user_id=3, at=at)
    assert entry.survey_id == 9
    assert entry.user_id == 3
    assert entry.created_at == at
    assert (entry.old_value, entry.new_value) == ("false", "true")
