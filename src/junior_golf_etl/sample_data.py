"""Built-in sample tournaments served when no snapshot artifact is available."""

from __future__ import annotations

from junior_golf_etl.models import Tournament

SAMPLE_TOURNAMENTS: tuple[Tournament, ...] = (
    Tournament(
        id="mock-1",
        name="Spring Junior Classic",
        date="2026-04-11",
        end_date="2026-04-12",
        location="St. George, UT",
        state="UT",
        course_name="Southgate GC",
        age_groups=["U14", "U16", "U18"],
        gender="Mixed",
        registration_deadline="2026-03-28",
        status="Upcoming",
        entry_fee=150,
        description="Two-day stroke play event for junior golfers.",
    ),
    Tournament(
        id="mock-2",
        name="Girls' 14-Under Championship",
        date="2026-05-02",
        end_date="2026-05-03",
        location="Scottsdale, AZ",
        state="AZ",
        course_name="Grayhawk GC",
        age_groups=["U14"],
        gender="Girls",
        registration_deadline="2026-04-18",
        status="Upcoming",
        entry_fee=175,
    ),
    Tournament(
        id="mock-3",
        name="Boys' 16-Under Invitational",
        date="2026-06-08",
        end_date="2026-06-10",
        location="Pinehurst, NC",
        state="NC",
        course_name="Pinehurst No. 8",
        age_groups=["U16"],
        gender="Boys",
        registration_deadline="2026-05-25",
        status="Upcoming",
        entry_fee=325,
    ),
    Tournament(
        id="mock-4",
        name="Drive, Chip and Putt Local Qualifier",
        date="2026-06-20",
        location="Dallas, TX",
        state="TX",
        course_name="Cedar Crest GC",
        age_groups=["U10", "U12", "U14"],
        gender="Mixed",
        registration_deadline="2026-06-06",
        status="Upcoming",
        description="Free skills competition for ages 7-15.",
    ),
    Tournament(
        id="mock-5",
        name="Summer 12-Under Series",
        date="2026-07-14",
        location="Sacramento, CA",
        state="CA",
        course_name="Haggin Oaks GC",
        age_groups=["U10", "U12"],
        gender="Mixed",
        registration_deadline="2026-06-30",
        status="Upcoming",
        entry_fee=60,
    ),
    Tournament(
        id="mock-6",
        name="U.S. Junior Amateur",
        date="2026-07-20",
        end_date="2026-07-25",
        location="Charleston, SC",
        state="SC",
        course_name="Country Club of Charleston",
        age_groups=["U18"],
        gender="Mixed",
        registration_deadline="2026-07-06",
        status="Upcoming",
    ),
)


def sample_tournaments() -> list[Tournament]:
    return [
        Tournament(**{**t.__dict__, "age_groups": list(t.age_groups)})
        for t in SAMPLE_TOURNAMENTS
    ]
