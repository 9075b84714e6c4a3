"""
Tests for layout detection and full race page extraction.
"""

from datetime import date, timedelta

import pytest
from lxml import html

from trackresults.extract import (
    MILE_MEET,
    SINGLE_TABLE,
    STANDARD_MEET,
    detect_layout,
    extract_events,
    parse_race,
    shared_event_name,
)
from trackresults.util import Distance


RACE_DATE = date(2024, 6, 5)

SPLIT_HEADERS = ["First Name", "Last Name", "Sex", "Age", "Time"]


# =============================================================================
# Layout detection
# =============================================================================

class TestDetectLayout:
    """Tests for detect_layout."""

    def test_no_sections(self):
        assert detect_layout("Summer Mile", 0) is None

    def test_mile_wins_over_section_count(self):
        assert detect_layout("Summer MILE", 1) == MILE_MEET
        assert detect_layout("summer mile", 4) == MILE_MEET

    def test_single_table(self):
        assert detect_layout("Track Meet #2", 1) == SINGLE_TABLE

    def test_standard(self):
        assert detect_layout("Track Meet #2", 3) == STANDARD_MEET


class TestSharedEventName:
    """Tests for shared_event_name."""

    @pytest.mark.parametrize(
        "key, expected",
        [
            ("men 100m", "100m"),
            ("Women 100m", "100m"),
            ("men Long Jump", "Long Jump"),
            ("Women's 800m", "800m"),
            ("men 100m Dash", "100m Dash"),
        ],
    )
    def test_names(self, key, expected):
        assert shared_event_name(key) == expected


# =============================================================================
# Standard meet
# =============================================================================

class TestStandardMeet:
    """Tests for pages with one section per (divided) event."""

    def test_men_and_women_tables_merge(self, make_table, make_section, make_page):
        page = make_page(
            make_section("Men 100m Results", make_table(SPLIT_HEADERS, [["John", "Smith", "M", "25", "11.2"]])),
            make_section("Women 100m Results", make_table(SPLIT_HEADERS, [["Jane", "Doe", "F", "31", "12.5"]])),
        )
        race = parse_race(name="Track Meet #1", race_date=RACE_DATE, html_bytes=page)

        assert list(race.events) == ["100m"]
        results = race.events["100m"]
        assert [(r.name, r.division, r.time) for r in results] == [
            ("John Smith", "M", timedelta(seconds=11.2)),
            ("Jane Doe", "F", timedelta(seconds=12.5)),
        ]

    def test_division_comes_from_table_not_cell(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("Women 400m Results", make_table(headers, [["Jane Doe", "61.0"]])),
            make_section("Men 400m Results", make_table(headers, [["John Smith", "55.0"]])),
        )
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert [(r.name, r.division) for r in race.events["400m"]] == [("John Smith", "M"), ("Jane Doe", "F")]

    def test_divided_results_join_existing_event(self, make_table, make_section, make_page):
        headers = ["Name", "Sex", "Time"]
        page = make_page(
            make_section("100m Results", make_table(headers, [["Open Runner", "", "11.8"]])),
            make_section("Men 100m Results", make_table(headers, [["John Smith", "M", "11.2"]])),
            make_section("Women 100m Results", make_table(headers, [["Jane Doe", "F", "12.5"]])),
        )
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert list(race.events) == ["100m"]
        assert [r.name for r in race.events["100m"]] == ["John Smith", "Open Runner", "Jane Doe"]

    def test_multi_word_divided_event_keeps_full_name(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("100m Results", make_table(headers, [["Open Runner", "11.8"]])),
            make_section("Men 100m Dash Results", make_table(headers, [["John Smith", "11.2"]])),
            make_section("Women 100m Dash Results", make_table(headers, [["Jane Doe", "12.5"]])),
        )
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert sorted(race.events) == ["100m", "100m Dash"]
        assert [r.name for r in race.events["100m"]] == ["Open Runner"]
        assert [(r.name, r.division) for r in race.events["100m Dash"]] == [("John Smith", "M"), ("Jane Doe", "F")]

    def test_field_events_sorted_by_distance(self, make_table, make_section, make_page):
        headers = ["Name", "Distance"]
        page = make_page(
            make_section("Men Long Jump Results", make_table(headers, [["John Smith", "18-2"]])),
            make_section("Women Long Jump Results", make_table(headers, [["Jane Doe", "19-0.5"]])),
        )
        race = parse_race(name="Field Day", race_date=RACE_DATE, html_bytes=page)
        results = race.events["Long Jump"]
        assert [r.distance for r in results] == [Distance(19, 0.5), Distance(18, 2)]
        assert [r.division for r in results] == ["F", "M"]

    def test_relays_dropped_and_aliases_folded(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("4x100m Relay Results", make_table(headers, [["Team A", "50.1"]])),
            make_section("3000 Meters Results", make_table(headers, [["John Smith", "9:59.0"]])),
            make_section("Race Walk Results", make_table(headers, [["Jane Doe", "8:01.0"]])),
        )
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert sorted(race.events) == ["3000m", "Racewalk"]

    def test_duplicate_headings_concatenate(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("800m Results", make_table(headers, [["A", "2:10.0"]])),
            make_section("800m Results", make_table(headers, [["B", "2:05.0"]])),
        )
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert [r.name for r in race.events["800m"]] == ["B", "A"]


# =============================================================================
# Mile meet
# =============================================================================

class TestMileMeet:
    """Tests for races whose name contains 'Mile'."""

    def test_single_table_is_the_mile(self, make_table, make_section, make_page):
        headers = ["Name", "Sex", "Age", "Time"]
        page = make_page(
            make_section(
                "Results",
                make_table(headers, [["Slow Runner", "M", "40", "6:01.0"], ["Fast Runner", "W", "28", "5:02.5"]]),
            ),
        )
        race = parse_race(name="Summer Mile", race_date=RACE_DATE, html_bytes=page)
        assert list(race.events) == ["1mi"]
        assert [(r.name, r.division) for r in race.events["1mi"]] == [("Fast Runner", "F"), ("Slow Runner", "M")]

    def test_only_all_tables_merge(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("Heat 1", make_table(headers, [["Heat Runner", "4:59.0"]])),
            make_section("All Women", make_table(headers, [["Jane Doe", "5:20.0"]])),
            make_section("All Men", make_table(headers, [["John Smith", "5:10.0"]])),
        )
        race = parse_race(name="Downtown Mile", race_date=RACE_DATE, html_bytes=page)
        assert [(r.name, r.division) for r in race.events["1mi"]] == [("John Smith", "M"), ("Jane Doe", "F")]

    def test_no_all_tables_gives_empty_mile(self, make_table, make_section, make_page):
        headers = ["Name", "Time"]
        page = make_page(
            make_section("Heat 1", make_table(headers, [["A", "4:59.0"]])),
            make_section("Heat 2", make_table(headers, [["B", "5:09.0"]])),
        )
        race = parse_race(name="Downtown Mile", race_date=RACE_DATE, html_bytes=page)
        assert race.events == {"1mi": []}


# =============================================================================
# Single combined table
# =============================================================================

class TestSingleTable:
    """Tests for pages with one table holding every event."""

    def test_groups_by_event_column(self, make_table, make_section, make_page):
        headers = ["Event", "Name", "Sex", "Time", "Distance"]
        rows = [
            ["100 m", "John Smith", "M", "11.9", ""],
            ["100m", "Jane Doe", "F", "11.5", ""],
            ["Shot Put", "Bob Jones", "M", "", "30-6"],
            ["4x400m Relay", "Team A", "", "4:01.0", ""],
            ["1 Mile", "Ann Lee", "F", "5:30.0", ""],
        ]
        page = make_page(make_section("Results", make_table(headers, rows)))
        race = parse_race(name="All Comers Meet", race_date=RACE_DATE, html_bytes=page)

        assert sorted(race.events) == ["100m", "1mi", "Shot Put"]
        assert [r.name for r in race.events["100m"]] == ["Jane Doe", "John Smith"]
        assert race.events["Shot Put"][0].distance == Distance(30, 6)

    def test_heading_used_when_no_event_column(self, make_table, make_section, make_page):
        page = make_page(make_section("800 Meters Results", make_table(["Name", "Time"], [["A", "2:10.0"]])))
        race = parse_race(name="Twilight Meet", race_date=RACE_DATE, html_bytes=page)
        assert list(race.events) == ["800m"]


# =============================================================================
# Race assembly
# =============================================================================

class TestParseRace:
    """Tests for parse_race."""

    def test_no_sections_is_no_race(self, make_page):
        page = make_page("<p>Results coming soon</p>")
        assert parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page) is None

    def test_empty_document(self):
        assert parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=b"") is None

    def test_comment_only_page(self):
        assert parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=b"<!-- nothing -->") is None

    def test_str_page_with_xml_declaration(self, make_table, make_section, make_page):
        page = make_page(make_section("Results", make_table(["Event", "Name", "Time"], [["200m", "A", "25.0"]])))
        text = "<?xml version='1.0' encoding='utf-8'?>" + page.decode("utf-8")
        race = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=text)
        assert list(race.events) == ["200m"]

    def test_str_page_without_sections(self):
        text = "<?xml version='1.0' encoding='utf-8'?><html><body><p>soon</p></body></html>"
        assert parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=text) is None

    def test_race_fields(self, make_table, make_section, make_page):
        page = make_page(make_section("Results", make_table(["Event", "Name", "Time"], [["200m", "A", "25.0"]])))
        race = parse_race(name="  Track Meet  ", race_date=RACE_DATE, html_bytes=page, url="https://example.org/r/1")
        assert race.name == "Track Meet"
        assert race.date == RACE_DATE
        assert race.url == "https://example.org/r/1"

    def test_idempotent(self, make_table, make_section, make_page):
        page = make_page(
            make_section("Men 100m Results", make_table(SPLIT_HEADERS, [["John", "Smith", "M", "25", "11.2"]])),
            make_section("Women 100m Results", make_table(SPLIT_HEADERS, [["Jane", "Doe", "F", "31", "12.5"]])),
        )
        first = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        second = parse_race(name="Track Meet", race_date=RACE_DATE, html_bytes=page)
        assert first == second

    def test_extract_events_without_sections(self):
        doc = html.fromstring("<html><body><p>nothing</p></body></html>")
        assert extract_events(doc, race_name="Track Meet") is None
