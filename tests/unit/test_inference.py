"""Unit tests for junior_golf_etl.inference."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from junior_golf_etl.inference import (
    infer_age_groups,
    infer_gender,
    infer_status,
    is_junior_event,
    status_from_marker,
)
from junior_golf_etl.models import STATUSES

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Age groups
# ---------------------------------------------------------------------------

class TestInferAgeGroups:
    def test_fourteen_under(self):
        assert infer_age_groups("Boys' 14-Under Championship") == ["U14"]

    def test_fourteen_under_spaced(self):
        assert infer_age_groups("14 Under Series #2") == ["U14"]

    def test_twelve_under(self):
        assert infer_age_groups("12-Under Skins") == ["U10", "U12"]

    def test_ten_under(self):
        assert infer_age_groups("10-Under Fun Day") == ["U10", "U12"]

    def test_sixteen_under(self):
        assert infer_age_groups("16 under Invitational") == ["U16"]

    def test_default(self):
        assert infer_age_groups("State Junior Amateur") == ["U18"]

    def test_empty_name_still_non_empty(self):
        assert infer_age_groups("") == ["U18"]

    def test_clinic_only_when_enabled(self):
        name = "Drive, Chip and Putt Local Qualifier"
        assert infer_age_groups(name, clinic=True) == ["U10", "U12", "U14"]
        assert infer_age_groups(name) == ["U18"]

    def test_returns_fresh_list(self):
        groups = infer_age_groups("Open")
        groups.append("U10")
        assert infer_age_groups("Open") == ["U18"]


# ---------------------------------------------------------------------------
# Gender
# ---------------------------------------------------------------------------

class TestInferGender:
    def test_boys(self):
        assert infer_gender("Boys' 14-Under Championship") == "Boys"

    def test_girls(self):
        assert infer_gender("Girls' Junior Amateur") == "Girls"

    def test_womens(self):
        assert infer_gender("U.S. Women's Amateur") == "Girls"

    def test_mixed_default(self):
        assert infer_gender("Spring Junior Classic") == "Mixed"

    def test_boys_ignored_when_source_does_not_distinguish(self):
        assert infer_gender("U.S. Boys' Junior", distinguish_boys=False) == "Mixed"

    def test_girls_wins_over_boys(self):
        assert infer_gender("Boys and Girls Open") == "Girls"


class TestIsJuniorEvent:
    @pytest.mark.parametrize("name", [
        "U.S. Junior Amateur",
        "U.S. Girls' Junior",
        "Drive, Chip and Putt Championship",
        "Drive Chip & Putt",
    ])
    def test_junior(self, name):
        assert is_junior_event(name)

    @pytest.mark.parametrize("name", ["U.S. Open", "U.S. Senior Amateur", ""])
    def test_not_junior(self, name):
        assert not is_junior_event(name)


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------

class TestStatusFromMarker:
    def test_full(self):
        assert status_from_marker("Full") == "Closed"

    def test_results(self):
        assert status_from_marker("Results") == "Completed"
        assert status_from_marker("View Result") == "Completed"

    def test_other_markers_ignored(self):
        assert status_from_marker("Register") is None
        assert status_from_marker("") is None
        assert status_from_marker(None) is None

    def test_full_must_be_exact(self):
        assert status_from_marker("Full Field Expected") is None


class TestInferStatus:
    def test_past_start_completed(self):
        assert infer_status(date(2026, 2, 1), date(2026, 1, 18), NOW) == "Completed"

    def test_deadline_passed_closed(self):
        assert infer_status(date(2026, 3, 10), date(2026, 2, 24), NOW) == "Closed"

    def test_within_two_weeks_open(self):
        assert infer_status(date(2026, 3, 10), date(2026, 3, 5), NOW) == "Open"

    def test_far_future_upcoming(self):
        assert infer_status(date(2026, 6, 1), date(2026, 5, 18), NOW) == "Upcoming"

    def test_same_day_start_is_completed_after_midnight(self):
        assert infer_status(date(2026, 3, 1), date(2026, 3, 1), NOW) == "Completed"

    def test_naive_now_treated_as_utc(self):
        naive = NOW.replace(tzinfo=None)
        assert infer_status(date(2026, 6, 1), date(2026, 5, 18), naive) == "Upcoming"

    def test_marker_overrides_dates(self):
        assert infer_status(date(2026, 6, 1), date(2026, 5, 18), NOW, marker="Full") == "Closed"
        assert infer_status(date(2026, 6, 1), date(2026, 5, 18), NOW, marker="Results") == "Completed"
        assert infer_status(date(2026, 2, 1), date(2026, 1, 18), NOW, marker="Full") == "Closed"

    def test_total_over_date_grid(self):
        for start_offset in range(-30, 60, 3):
            for lead in (-5, 0, 7, 14, 21):
                start = (NOW + timedelta(days=start_offset)).date()
                deadline = start - timedelta(days=lead)
                for marker in (None, "Full", "Results", "Register"):
                    status = infer_status(start, deadline, NOW, marker=marker)
                    assert status in STATUSES
                    if marker == "Full":
                        assert status == "Closed"
                    elif marker == "Results":
                        assert status == "Completed"
