"""Tests for the records CSV parser."""

import pytest

from recordboard.services.csv_parser import (
    generate_csv_template,
    normalize_date,
    parse_boolean,
    parse_records_csv,
    summarize_errors,
)


class TestParseRecordsCSV:
    """Tests for parse_records_csv."""

    def test_full_import_scenario(self):
        """One good row, one bad time on row 3."""
        result = parse_records_csv("Event,Time,Swimmer\n50 Free,24.56,John Smith\n100 Free,bad,Jane Doe")

        assert len(result.records) == 1
        record = result.records[0]
        assert record.event_name == "50 Free"
        assert record.time_ms == 24560
        assert record.swimmer_name == "John Smith"
        assert record.row_number == 2

        assert len(result.errors) == 1
        assert result.errors[0].startswith("Row 3:")
        assert "Invalid time format" in result.errors[0]
        assert '"bad"' in result.errors[0]

    def test_missing_swimmer_rejected(self):
        result = parse_records_csv("Event,Time,Swimmer\n50 Free,24.56,")

        assert result.records == []
        assert len(result.errors) == 1
        assert "Missing required field" in result.errors[0]
        assert result.errors[0] == "Row 2: Missing required field (event, time, or swimmer)"

    def test_missing_required_column(self):
        result = parse_records_csv("Event,Time\n50 Free,24.56\n100 Free,55.00")

        assert result.records == []
        assert [e.split(":")[0] for e in result.errors] == ["Row 2", "Row 3"]

    def test_template_parses_cleanly(self):
        """The template's example row imports as exactly one record."""
        result = parse_records_csv(generate_csv_template())

        assert result.errors == []
        assert len(result.records) == 1
        assert result.records[0].event_name == "50 Free"

    def test_header_aliases_and_case(self):
        text = (
            "EVENT_NAME, Record_Time ,Athlete,RecordDate,Venue,WR,Relay\n"
            "200 IM,2:05.33,Ana Lee,2023/7,Nationals,x,no\n"
        )
        result = parse_records_csv(text)

        assert result.errors == []
        record = result.records[0]
        assert record.event_name == "200 IM"
        assert record.time_ms == 125330
        assert record.swimmer_name == "Ana Lee"
        assert record.record_date == "2023-07"
        assert record.location == "Nationals"
        assert record.is_world_record is True
        assert record.is_relay_split is False

    def test_first_matching_alias_wins(self):
        result = parse_records_csv("swimmer,name,event,time\nFirst,Second,50 Back,30.00")
        assert result.records[0].swimmer_name == "First"

    def test_flag_columns(self):
        text = (
            "Event,Time,Swimmer,is_National,is_Current_National,is_Provincial,"
            "is_Current_Provincial,is_Split,is_RelaySplit,is_New,is_World_Record\n"
            "50 Free,24.56,A,TRUE,yes,1,x,false,0,Y,\n"
        )
        record = parse_records_csv(text).records[0]

        assert record.is_national
        assert record.is_current_national
        assert record.is_provincial
        assert record.is_current_provincial
        assert not record.is_split
        assert not record.is_relay_split
        assert not record.is_new
        assert not record.is_world_record

    def test_blank_lines_and_bom_ignored(self):
        text = "\ufeffEvent,Time,Swimmer\n\n50 Free,24.56,A\n,,\n100 Free,55.10,B\n"
        result = parse_records_csv(text)

        assert result.errors == []
        assert [r.event_name for r in result.records] == ["50 Free", "100 Free"]
        assert [r.row_number for r in result.records] == [2, 3]

    def test_optional_fields_trimmed_to_none(self):
        record = parse_records_csv("Event,Time,Swimmer,Date,Location\n 50 Free , 24.56 , A ,  ,  ").records[0]

        assert record.event_name == "50 Free"
        assert record.swimmer_name == "A"
        assert record.record_date is None
        assert record.location is None

    def test_quoted_fields(self):
        text = 'Event,Time,Swimmer,Location\n50 Free,24.56,"Smith, John","Pool ""A"""\n'
        record = parse_records_csv(text).records[0]

        assert record.swimmer_name == "Smith, John"
        assert record.location == 'Pool "A"'

    def test_field_count_mismatch_reported(self):
        result = parse_records_csv("Event,Time,Swimmer\n50 Free,24.56,A,extra\n")

        assert len(result.records) == 1
        assert result.errors == ["Row 2: Too many fields: expected 3 fields but parsed 4"]

    def test_mistyped_time_accepted(self):
        record = parse_records_csv("Event,Time,Swimmer\n100 Free,1:02:45,A").records[0]
        assert record.time_ms == 62450

    def test_empty_input(self):
        result = parse_records_csv("")
        assert result.records == []
        assert result.errors == []

    def test_never_raises_on_garbage(self):
        result = parse_records_csv('Event,Time,Swimmer\n"unterminated,1,2\n')
        assert result.records == []

    def test_rows_after_a_rejected_line_still_parse(self):
        oversized = "x" * 200_000  # past the csv module's field size limit
        text = f"Event,Time,Swimmer\n50 Free,24.56,{oversized}\n100 Free,55.00,B\n"

        result = parse_records_csv(text)

        assert [r.event_name for r in result.records] == ["100 Free"]
        assert result.records[0].row_number == 3
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Row 2: Malformed CSV:")


class TestNormalizeDate:
    """Tests for normalize_date."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2024", "2024"),
            ("2024-3", "2024-03"),
            ("2024/11", "2024-11"),
            ("2024-3-5", "2024-03-05"),
            ("2024/03/15", "2024-03-15"),
            (" 2024-03-15 ", "2024-03-15"),
            ("March 2024", "2024-03"),
            ("Mar 15, 2024", "2024-03-15"),
            ("15 March 2024", "2024-03-15"),
            ("03/15/2024", "2024-03-15"),
        ],
    )
    def test_normalizes(self, value: str, expected: str):
        assert normalize_date(value) == expected

    def test_unreadable_passes_through(self):
        assert normalize_date("sometime in spring") == "sometime in spring"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_none(self, value):
        assert normalize_date(value) is None


class TestParseBoolean:
    """Tests for parse_boolean."""

    @pytest.mark.parametrize("value", ["true", "TRUE", " Yes ", "1", "x", "X"])
    def test_truthy(self, value: str):
        assert parse_boolean(value) is True

    @pytest.mark.parametrize("value", [None, "", "false", "no", "0", "y", "✓"])
    def test_falsy(self, value):
        assert parse_boolean(value) is False


class TestSummarizeErrors:
    """Tests for summarize_errors."""

    def test_short_list_unchanged(self):
        errors = ["Row 2: a", "Row 3: b"]
        assert summarize_errors(errors) == errors

    def test_long_list_summarized(self):
        errors = [f"Row {n}: bad" for n in range(2, 10)]
        summary = summarize_errors(errors)

        assert summary[:5] == errors[:5]
        assert summary[5] == "...and 3 more errors"
        assert len(summary) == 6
