from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from safedrive.models.notification import NotificationRecord
from safedrive.state.notifications import append_records, format_timestamp, normalize_record, render


def _record(ts: str, issue: str) -> dict:
    return {"timestamp": ts, "issues": [issue]}


class TestFormatTimestamp:
    def test_afternoon(self) -> None:
        assert format_timestamp(datetime(2025, 1, 5, 15, 4, 9, tzinfo=UTC)) == "01/05/25 3:04:09 PM"

    def test_midnight_and_noon(self) -> None:
        assert format_timestamp(datetime(2025, 12, 31, 0, 0, 0, tzinfo=UTC)) == "12/31/25 12:00:00 AM"
        assert format_timestamp(datetime(2025, 12, 31, 12, 30, 1, tzinfo=UTC)) == "12/31/25 12:30:01 PM"

    def test_display_time_zone(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        assert format_timestamp(datetime(2025, 1, 5, 23, 0, 0, tzinfo=UTC), plus_two) == "01/06/25 1:00:00 AM"


class TestNormalizeRecord:
    def test_message_becomes_single_issue(self) -> None:
        record = normalize_record({"timestamp": "2025-01-05T15:04:09.000Z", "message": "Loose Grip"})
        assert record is not None
        assert record.issues == ("Loose Grip",)
        assert record.instant == datetime(2025, 1, 5, 15, 4, 9, tzinfo=UTC)

    def test_record_without_text_is_skipped(self) -> None:
        assert normalize_record({"timestamp": "2025-01-05T15:04:09.000Z"}) is None
        assert normalize_record({"timestamp": "2025-01-05T15:04:09.000Z", "issues": []}) is None


class TestRender:
    def test_sorted_newest_first(self) -> None:
        log = [
            _record("2025-01-05T10:00:00.000Z", "Loose Grip"),
            _record("2025-01-05T12:00:00.000Z", "Eyes Closed"),
        ]
        rendered = render(log)
        assert [item.issues for item in rendered] == [["Eyes Closed"], ["Loose Grip"]]
        assert rendered[0].timestamp == "01/05/25 12:00:00 PM"

    def test_duplicates_collapse(self) -> None:
        log = [_record("2025-01-05T10:00:00.000Z", "Loose Grip")]
        embedded = [_record("2025-01-05T10:00:00.000Z", "Loose Grip")]
        assert len(render(log, embedded)) == 1

    def test_message_and_issue_forms_deduplicate(self) -> None:
        log = [{"timestamp": "2025-01-05T10:00:00.000Z", "message": "Loose Grip"}]
        embedded = [_record("2025-01-05T10:00:00Z", "Loose Grip")]
        assert len(render(log, embedded)) == 1

    def test_same_instant_different_issue_kept(self) -> None:
        log = [
            _record("2025-01-05T10:00:00.000Z", "Loose Grip"),
            _record("2025-01-05T10:00:00.000Z", "Eyes Closed"),
        ]
        assert len(render(log)) == 2

    def test_multi_issue_records_are_excluded(self) -> None:
        log = [
            {"timestamp": "2025-01-05T10:00:00.000Z", "issues": ["Loose Grip", "Eyes Closed"]},
            _record("2025-01-05T09:00:00.000Z", "Unsafe Driving"),
        ]
        rendered = render(log)
        assert [item.issues for item in rendered] == [["Unsafe Driving"]]

    def test_malformed_timestamp_sorts_last(self) -> None:
        log = [
            _record("not-a-date", "Loose Grip"),
            _record("2025-01-05T10:00:00.000Z", "Eyes Closed"),
        ]
        rendered = render(log)
        assert rendered[-1].timestamp == "not-a-date"
        assert rendered[-1].issues == ["Loose Grip"]

    @pytest.mark.parametrize(
        ("timestamp", "shown"),
        [
            (1e20, "1e+20"),
            (float("inf"), "inf"),
            (10**400, str(10**400)),
            ("0001-01-01T00:00:00+01:00", "0001-01-01T00:00:00+01:00"),
        ],
    )
    def test_out_of_range_timestamp_is_treated_as_malformed(self, timestamp: object, shown: str) -> None:
        log = [
            {"timestamp": timestamp, "issues": ["Loose Grip"]},
            _record("2025-01-05T10:00:00.000Z", "Eyes Closed"),
        ]
        rendered = render(log)
        assert [item.issues[0] for item in rendered] == ["Eyes Closed", "Loose Grip"]
        assert rendered[-1].timestamp == shown

    def test_instant_outside_display_zone_range_shows_raw_text(self) -> None:
        log = [_record("0001-01-01T00:00:00Z", "Loose Grip")]
        rendered = render(log, tz=timezone(timedelta(hours=-5)))
        assert rendered[0].timestamp == "0001-01-01T00:00:00Z"

    def test_rendering_is_deterministic(self) -> None:
        log = [
            _record("2025-01-05T10:00:00.000Z", "Loose Grip"),
            _record("2025-01-05T10:00:00.001Z", "Eyes Closed"),
            {"timestamp": "2025-01-05T09:00:00.000Z", "message": "Unsafe Driving"},
        ]
        embedded = [_record("2025-01-05T10:00:00.000Z", "Loose Grip")]
        assert render(log, embedded) == render(log, embedded)


class TestAppendRecords:
    def test_appends_new_records(self) -> None:
        new = [NotificationRecord(timestamp=datetime(2025, 1, 5, tzinfo=UTC), issues=["Loose Grip"])]
        updated = append_records([], new)
        assert updated == [{"timestamp": "2025-01-05T00:00:00.000Z", "issues": ["Loose Grip"]}]

    def test_migrates_embedded_once(self) -> None:
        log = [_record("2025-01-05T10:00:00.000Z", "Loose Grip")]
        embedded = [
            _record("2025-01-05T10:00:00.000Z", "Loose Grip"),
            _record("2025-01-05T11:00:00.000Z", "Eyes Closed"),
        ]
        updated = append_records(log, [], migrated=embedded)
        assert [item["issues"][0] for item in updated] == ["Loose Grip", "Eyes Closed"]

    def test_out_of_range_records_in_log_are_kept(self) -> None:
        log = [{"timestamp": 1e20, "issues": ["Loose Grip"]}, {"timestamp": float("inf"), "issues": ["Eyes Closed"]}]
        new = [NotificationRecord(timestamp=datetime(2025, 1, 5, tzinfo=UTC), issues=["Unsafe Driving"])]
        updated = append_records(log, new)
        assert [item["issues"][0] for item in updated] == ["Loose Grip", "Eyes Closed", "Unsafe Driving"]

    def test_limit_drops_oldest(self) -> None:
        log = [_record(f"2025-01-05T10:00:0{i}.000Z", f"Issue {i}") for i in range(5)]
        new = [NotificationRecord(timestamp=datetime(2025, 1, 6, tzinfo=UTC), issues=["Newest"])]
        updated = append_records(log, new, limit=3)
        assert [item["issues"][0] for item in updated] == ["Issue 3", "Issue 4", "Newest"]
