"""Unit tests for junior_golf_etl.aggregate and the sample data set."""

from __future__ import annotations

import json

import pytest

from junior_golf_etl.aggregate import (
    SearchFilters,
    filter_tournaments,
    find_tournament,
    load_tournaments,
    read_snapshot,
    tournament_problem,
)
from junior_golf_etl.models import AGE_GROUPS, GENDERS, STATUSES, Snapshot, Tournament
from junior_golf_etl.sample_data import SAMPLE_TOURNAMENTS, sample_tournaments


def _tournament(id_: str, name: str, **overrides) -> Tournament:
    base = dict(
        id=id_,
        name=name,
        date="2026-06-01",
        location="St. George, UT",
        state="UT",
        course_name="Southgate GC",
        age_groups=["U18"],
        gender="Mixed",
        registration_deadline="2026-05-18",
        status="Upcoming",
    )
    base.update(overrides)
    return Tournament(**base)


def _write(path, source, tournaments, scraped_at="2026-03-01T12:00:00+00:00"):
    snap = Snapshot(source=source, scraped_at=scraped_at, tournaments=tournaments)
    path.write_text(json.dumps(snap.to_dict()), encoding="utf-8")


# ---------------------------------------------------------------------------
# read_snapshot
# ---------------------------------------------------------------------------

class TestReadSnapshot:
    def test_missing(self, tmp_path):
        assert read_snapshot(tmp_path / "usga.json") is None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "usga.json"
        path.write_text("{not json", encoding="utf-8")
        assert read_snapshot(path) is None

    def test_missing_keys(self, tmp_path):
        path = tmp_path / "usga.json"
        path.write_text(json.dumps({"source": "USGA"}), encoding="utf-8")
        assert read_snapshot(path) is None

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "usga.json"
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        assert read_snapshot(path) is None

    def test_valid(self, tmp_path):
        path = tmp_path / "ujga.json"
        _write(path, "UJGA", [_tournament("ujga-0", "Spring Junior Classic")])
        snap = read_snapshot(path)
        assert snap.source == "UJGA"
        assert [t.id for t in snap.tournaments] == ["ujga-0"]


# ---------------------------------------------------------------------------
# load_tournaments
# ---------------------------------------------------------------------------

class TestLoadTournaments:
    def test_concatenates_in_file_order(self, tmp_path):
        _write(tmp_path / "usga.json", "USGA", [_tournament("usga-0", "U.S. Junior Amateur")])
        _write(tmp_path / "ujga.json", "UJGA", [
            _tournament("ujga-0", "Spring Junior Classic"),
            _tournament("ujga-1", "Summer Junior Classic"),
        ])
        result = load_tournaments(tmp_path)
        assert [t.id for t in result.tournaments] == ["usga-0", "ujga-0", "ujga-1"]
        assert [(m.source, m.count) for m in result.meta] == [("USGA", 1), ("UJGA", 2)]
        assert result.using_mock is False

    def test_one_missing_file_contributes_nothing(self, tmp_path):
        _write(tmp_path / "ujga.json", "UJGA", [_tournament("ujga-0", "Spring Junior Classic")])
        result = load_tournaments(tmp_path)
        assert [m.source for m in result.meta] == ["UJGA"]
        assert result.using_mock is False

    def test_malformed_file_skipped(self, tmp_path):
        (tmp_path / "usga.json").write_text("garbage", encoding="utf-8")
        _write(tmp_path / "ujga.json", "UJGA", [_tournament("ujga-0", "Spring Junior Classic")])
        result = load_tournaments(tmp_path)
        assert [t.id for t in result.tournaments] == ["ujga-0"]

    def test_nothing_on_disk_uses_mock(self, tmp_path):
        result = load_tournaments(tmp_path)
        assert result.using_mock is True
        assert len(result.tournaments) == len(SAMPLE_TOURNAMENTS)
        assert [m.to_dict() for m in result.meta] == [
            {"source": "mock", "scrapedAt": None, "count": len(SAMPLE_TOURNAMENTS)}
        ]

    def test_empty_snapshots_use_mock(self, tmp_path):
        _write(tmp_path / "usga.json", "USGA", [])
        _write(tmp_path / "ujga.json", "UJGA", [])
        assert load_tournaments(tmp_path).using_mock is True

    def test_custom_filenames(self, tmp_path):
        _write(tmp_path / "fcg.json", "FCG", [_tournament("fcg-0", "Florida Junior")])
        result = load_tournaments(tmp_path, ["fcg.json"])
        assert [t.id for t in result.tournaments] == ["fcg-0"]

    def test_to_dict_shape(self, tmp_path):
        _write(tmp_path / "ujga.json", "UJGA", [_tournament("ujga-0", "Spring Junior Classic")])
        d = load_tournaments(tmp_path).to_dict()
        assert set(d) == {"tournaments", "meta", "usingMock"}
        assert d["tournaments"][0]["courseName"] == "Southgate GC"
        assert d["meta"][0]["scrapedAt"] == "2026-03-01T12:00:00+00:00"


# ---------------------------------------------------------------------------
# Record validation
# ---------------------------------------------------------------------------

def _record(**overrides):
    record = _tournament("ujga-0", "Spring Junior Classic").to_dict()
    record.update(overrides)
    return record


class TestTournamentProblem:
    def test_valid_record(self):
        assert tournament_problem(_record()) is None

    def test_optional_fields_accepted(self):
        record = _record(endDate="2026-06-02", entryFee=150, description="2-day event", state="")
        assert tournament_problem(record) is None

    @pytest.mark.parametrize("overrides, expected", [
        ({"id": ""}, "missing id"),
        ({"name": "   "}, "missing name"),
        ({"date": "not-a-date"}, "invalid date"),
        ({"date": "2026-02-30"}, "invalid date"),
        ({"registrationDeadline": "May 18"}, "invalid registrationDeadline"),
        ({"endDate": "2026-05-31"}, "invalid endDate"),
        ({"ageGroups": "U14"}, "invalid ageGroups"),
        ({"ageGroups": []}, "invalid ageGroups"),
        ({"ageGroups": ["U14", "U21"]}, "invalid ageGroups"),
        ({"gender": "Alien"}, "invalid gender"),
        ({"status": "Cancelled"}, "invalid status"),
        ({"state": "utah"}, "invalid state"),
        ({"state": 49}, "invalid state"),
    ])
    def test_invalid_fields(self, overrides, expected):
        assert tournament_problem(_record(**overrides)).startswith(expected)

    def test_not_an_object(self):
        assert tournament_problem(["ujga-0"]) == "record is not an object"


class TestReadSnapshotValidation:
    def _write_records(self, path, records):
        path.write_text(json.dumps({
            "source": "UJGA",
            "scrapedAt": "2026-03-01T12:00:00+00:00",
            "tournaments": records,
        }), encoding="utf-8")

    def test_invalid_records_dropped(self, tmp_path, caplog):
        path = tmp_path / "ujga.json"
        self._write_records(path, [
            _record(id="ujga-0"),
            _record(id="ujga-1", date="not-a-date"),
            _record(id="ujga-2", ageGroups="U14"),
            _record(id="ujga-3", gender="Alien"),
            _record(id="ujga-4", state="utah"),
            _record(id="ujga-5", ageGroups=["U12", "U14"], gender="Girls"),
        ])

        with caplog.at_level("WARNING", logger="junior_golf_etl.aggregate"):
            snap = read_snapshot(path)

        assert [t.id for t in snap.tournaments] == ["ujga-0", "ujga-5"]
        assert snap.tournaments[1].age_groups == ["U12", "U14"]
        assert sum("Dropping record" in r.getMessage() for r in caplog.records) == 4

    def test_tournaments_not_a_list(self, tmp_path):
        path = tmp_path / "ujga.json"
        self._write_records(path, {"ujga-0": _record()})
        assert read_snapshot(path) is None

    def test_only_invalid_records_falls_back_to_mock(self, tmp_path):
        self._write_records(tmp_path / "ujga.json", [
            _record(date="not-a-date"),
            _record(gender="Alien"),
        ])
        result = load_tournaments(tmp_path)
        assert result.using_mock is True
        assert [t.id for t in result.tournaments] == [t.id for t in SAMPLE_TOURNAMENTS]

    def test_valid_records_survive_alongside_invalid(self, tmp_path):
        self._write_records(tmp_path / "ujga.json", [
            _record(id="ujga-0"),
            _record(id="ujga-1", ageGroups="U14"),
        ])
        result = load_tournaments(tmp_path)
        assert result.using_mock is False
        assert [t.id for t in result.tournaments] == ["ujga-0"]
        assert [(m.source, m.count) for m in result.meta] == [("UJGA", 1)]


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog() -> list[Tournament]:
    return [
        _tournament("a", "Spring Junior Classic", age_groups=["U14", "U16"]),
        _tournament("b", "Girls' 14-Under Championship", gender="Girls", state="AZ",
                    location="Scottsdale, AZ", age_groups=["U14"], status="Open"),
        _tournament("c", "Boys' Invitational", gender="Boys", course_name="Pinehurst No. 8",
                    state="NC", location="Pinehurst, NC"),
    ]


class TestFilterTournaments:
    def test_blank_filters_match_all(self, catalog):
        assert filter_tournaments(catalog, SearchFilters()) == catalog

    def test_query_matches_name_location_course(self, catalog):
        assert [t.id for t in filter_tournaments(catalog, SearchFilters(query="girls"))] == ["b"]
        assert [t.id for t in filter_tournaments(catalog, SearchFilters(query="scottsdale"))] == ["b"]
        assert [t.id for t in filter_tournaments(catalog, SearchFilters(query="PINEHURST NO"))] == ["c"]

    def test_state(self, catalog):
        assert [t.id for t in filter_tournaments(catalog, SearchFilters(state="UT"))] == ["a"]

    def test_age_group_membership(self, catalog):
        assert [t.id for t in filter_tournaments(catalog, SearchFilters(age_group="U14"))] == ["a", "b"]

    def test_combined(self, catalog):
        filters = SearchFilters(gender="Girls", status="Open")
        assert [t.id for t in filter_tournaments(catalog, filters)] == ["b"]

    def test_no_match(self, catalog):
        assert filter_tournaments(catalog, SearchFilters(status="Completed")) == []


class TestFindTournament:
    def test_found(self, catalog):
        assert find_tournament(catalog, "c").name == "Boys' Invitational"

    def test_missing(self, catalog):
        assert find_tournament(catalog, "zzz") is None


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

class TestSampleData:
    def test_sample_records_are_valid(self):
        ids = [t.id for t in SAMPLE_TOURNAMENTS]
        assert len(ids) == len(set(ids))
        for t in SAMPLE_TOURNAMENTS:
            assert t.name
            assert t.age_groups and set(t.age_groups) <= set(AGE_GROUPS)
            assert t.gender in GENDERS
            assert t.status in STATUSES
            assert t.end_date is None or t.end_date > t.date

    def test_sample_tournaments_returns_copies(self):
        first = sample_tournaments()
        first[0].age_groups.append("Open")
        first[0].name = "changed"
        again = sample_tournaments()
        assert again[0].name == SAMPLE_TOURNAMENTS[0].name
        assert "Open" not in again[0].age_groups
