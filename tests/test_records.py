"""Tests for the shared record helpers."""

from datetime import datetime, timedelta, timezone

from incommand.services.records import field_value, parse_timestamp


class TestFieldValue:
    def test_mapping(self):
        assert field_value({"id": 4}, "id") == 4
        assert field_value({"id": 4}, "occurrence") is None

    def test_attribute_record(self):
        class Record:
            occurrence = "Fight near bar"

        assert field_value(Record(), "occurrence") == "Fight near bar"
        assert field_value(Record(), "timestamp") is None


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2026-06-01T12:00:00Z") == datetime(2026, 6, 1, 12, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        parsed = parse_timestamp("2026-06-01T12:00:00")
        assert parsed.tzinfo == timezone.utc
        assert parsed.hour == 12

    def test_offset_converted_to_utc(self):
        parsed = parse_timestamp("2026-06-01T14:00:00+02:00")
        assert parsed.tzinfo == timezone.utc
        assert parsed.hour == 12

    def test_datetime_passthrough(self):
        local = datetime(2026, 6, 1, 13, tzinfo=timezone(timedelta(hours=1)))
        assert parse_timestamp(local) == datetime(2026, 6, 1, 12, tzinfo=timezone.utc)

    def test_unparseable(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("yesterday") is None
