"""Tests for collector_tracker data models.

Tests: Coordinate, Location, Task, Collector, FinancialYear, Roster loading
Focus: Parsing roster records, reference resolution, validation and filtering

Note: Fixtures are defined in conftest.py (sample_roster).
"""

import json
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from collector_tracker.model.collector import CollectorStatus, LocationHistoryEntry
from collector_tracker.model.financial_year import FinancialYear
from collector_tracker.model.location import Coordinate, Location, parse_timestamp
from collector_tracker.model.roster import Roster, RosterLoadError, load_roster
from collector_tracker.model.task import TaskStatus
from conftest import make_client, make_location, make_task

NAN = float("nan")


# =============================================================================
# LOCATION
# =============================================================================


class TestCoordinate:
    """Coordinate validity and ordering helpers."""

    def test_valid(self) -> None:
        assert Coordinate(latitude=23.0225, longitude=72.5714).is_valid

    @pytest.mark.parametrize(
        ("lat", "lon"),
        [(NAN, 72.5), (23.0, NAN), (91.0, 72.5), (23.0, -181.0), (float("inf"), 0.0)],
    )
    def test_invalid(self, lat: float, lon: float) -> None:
        """NaN, infinite and out-of-range values are invalid but constructible."""
        assert not Coordinate(latitude=lat, longitude=lon).is_valid

    def test_orders(self) -> None:
        """lat_lon is geographic order, lon_lat is pydeck order."""
        coord = Coordinate(latitude=23.0, longitude=72.5)
        assert coord.lat_lon == (23.0, 72.5)
        assert coord.lon_lat == (72.5, 23.0)


class TestLocation:
    """Location parsing from roster records."""

    def test_from_dict_lng_key(self) -> None:
        loc = Location.from_dict({"lat": 23.0, "lng": 72.5, "timestamp": "2025-01-27T11:00:00+05:30"})
        assert loc.lat == 23.0
        assert loc.lon == 72.5
        assert loc.address is None
        assert loc.timestamp.utcoffset().total_seconds() == 5.5 * 3600

    def test_unusable_numbers_become_invalid(self) -> None:
        """Null or non-numeric coordinates load but are flagged invalid."""
        loc = Location.from_dict({"lat": None, "lng": "abc", "timestamp": "2025-01-27T11:00:00Z"})
        assert not loc.is_valid

    def test_parse_timestamp_z_suffix(self) -> None:
        assert parse_timestamp("2025-01-27T06:30:00Z") == datetime(2025, 1, 27, 6, 30, tzinfo=timezone.utc)

    def test_parse_timestamp_naive_is_utc(self) -> None:
        assert parse_timestamp("2025-01-27T06:30:00").tzinfo == timezone.utc

    def test_parse_timestamp_rejects_numbers(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp(1737960000)


# =============================================================================
# TASKS AND COLLECTORS
# =============================================================================


class TestTask:
    """Task validation and derived amounts."""

    def test_open_and_completed(self) -> None:
        client = make_client()
        assert make_task("t1", client, "c1", status=TaskStatus.PENDING).is_open
        assert make_task("t2", client, "c1", status=TaskStatus.IN_PROGRESS).is_open
        assert make_task("t3", client, "c1", status=TaskStatus.COMPLETED).is_completed
        failed = make_task("t4", client, "c1", status=TaskStatus.FAILED)
        assert not failed.is_open
        assert not failed.is_completed

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValueError):
            make_task("t1", make_client(), "c1", status="paused")

    def test_amount_remaining(self, sample_roster: Roster) -> None:
        """task-4 is half collected."""
        assert sample_roster.tasks["task-4"].amount_remaining == 175000


class TestCollector:
    """Collector parsing and status handling."""

    def test_sample_collector(self, sample_roster: Roster) -> None:
        collector = sample_roster.get_collector("collector-1")
        assert collector is not None
        assert collector.name == "Arjun Sharma"
        assert collector.initials == "AS"
        assert collector.status_enum is CollectorStatus.ACTIVE
        assert collector.current_task is sample_roster.tasks["task-1"]
        assert len(collector.location_history) == 3

    def test_history_client_references_resolved(self, sample_roster: Roster) -> None:
        """clientVisitedId resolves to the shared Client object."""
        collector = sample_roster.get_collector("collector-1")
        assert collector is not None
        visits = [e.client_visited for e in collector.location_history]
        assert visits[0] is None
        assert visits[1] is sample_roster.clients["client-2"]
        assert visits[2] is sample_roster.clients["client-1"]

    def test_online(self, sample_roster: Roster) -> None:
        """Active and traveling collectors are online."""
        online = {c.id for c in sample_roster.collectors if c.is_online}
        assert online == {"collector-1", "collector-2"}

    def test_unknown_status_parses_as_idle(self) -> None:
        assert CollectorStatus.parse("on-break") is CollectorStatus.IDLE

    def test_negative_duration_rejected(self) -> None:
        with pytest.raises(ValueError):
            LocationHistoryEntry(location=make_location(lat=23.0, lon=72.5), duration_minutes=-1)


class TestFinancialYear:
    """Indian financial years (April to March)."""

    def test_starting(self) -> None:
        fy = FinancialYear.starting(2024)
        assert fy.id == "FY2024-25"
        assert fy.label == "FY 2024-25"
        assert fy.start_date == date(2024, 4, 1)
        assert fy.end_date == date(2025, 3, 31)

    def test_contains(self) -> None:
        fy = FinancialYear.starting(2024)
        assert fy.contains(date(2025, 1, 27))
        assert fy.contains(datetime(2024, 4, 1, 0, 0))
        assert not fy.contains(date(2024, 3, 31))

    def test_century_rollover(self) -> None:
        assert FinancialYear.starting(2099).id == "FY2099-00"


# =============================================================================
# ROSTER
# =============================================================================


class TestRoster:
    """Roster loading, lookups and filtering."""

    def test_sample_counts(self, sample_roster: Roster) -> None:
        assert len(sample_roster.collectors) == 4
        assert len(sample_roster.clients) == 6
        assert len(sample_roster.tasks) == 6
        assert [fy.id for fy in sample_roster.financial_years][0] == "FY2024-25"

    def test_get_collector(self, sample_roster: Roster) -> None:
        assert sample_roster.get_collector("collector-3").name == "Rahul Kumar"
        assert sample_roster.get_collector("missing") is None
        assert sample_roster.get_collector(None) is None

    def test_filter_by_search(self, sample_roster: Roster) -> None:
        """Search matches name or current address, case-insensitively."""
        assert [c.id for c in sample_roster.filter_collectors(search="patel")] == ["collector-4"]
        assert [c.id for c in sample_roster.filter_collectors(search="MANINAGAR")] == ["collector-3"]

    def test_filter_by_status(self, sample_roster: Roster) -> None:
        assert [c.id for c in sample_roster.filter_collectors(status="traveling")] == ["collector-2"]
        assert len(sample_roster.filter_collectors(status="all")) == 4

    def test_filter_by_status_uses_normalised_status(self) -> None:
        """A drifted status is filtered as idle, the way the map draws it."""
        roster = Roster.from_dict({"collectors": [_collector_record(id="c1", status="on-break")]})
        assert [c.id for c in roster.filter_collectors(status="idle")] == ["c1"]
        assert roster.filter_collectors(status="on-break") == []

    def test_filter_combined(self, sample_roster: Roster) -> None:
        assert sample_roster.filter_collectors(search="arjun", status="idle") == []

    def test_unknown_task_reference(self) -> None:
        """A collector pointing at a missing task is a load error."""
        data = {"collectors": [_collector_record(currentTaskId="task-404")]}
        with pytest.raises(RosterLoadError, match="task-404"):
            Roster.from_dict(data)

    def test_missing_field(self) -> None:
        record = _collector_record()
        del record["name"]
        with pytest.raises(RosterLoadError):
            Roster.from_dict({"collectors": [record]})

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(RosterLoadError, match="Cannot read"):
            load_roster(tmp_path / "nope.json")

    def test_load_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RosterLoadError, match="not valid JSON"):
            load_roster(path)

    def test_load_non_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(RosterLoadError, match="JSON object"):
            load_roster(path)

    def test_load_custom_financial_years(self, tmp_path: Path) -> None:
        path = tmp_path / "roster.json"
        data = {
            "collectors": [_collector_record()],
            "financialYears": [
                {"id": "FY2030-31", "label": "FY 2030-31", "startDate": "2030-04-01", "endDate": "2031-03-31"}
            ],
        }
        path.write_text(json.dumps(data), encoding="utf-8")
        roster = load_roster(path)
        assert [fy.id for fy in roster.financial_years] == ["FY2030-31"]
        assert roster.collectors[0].current_task is None


def _collector_record(**overrides: object) -> dict[str, object]:
    record: dict[str, object] = {
        "id": "collector-x",
        "name": "Test Collector",
        "status": "idle",
        "currentLocation": {"lat": 23.0, "lng": 72.5, "timestamp": "2025-01-27T12:00:00+05:30"},
    }
    record.update(overrides)
    return record
