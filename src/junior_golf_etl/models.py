"""junior_golf_etl.models

Canonical record shapes shared by the scrape pipeline and the aggregation
reader.

Tournament is serialized with camelCase keys because the snapshot artifacts
are consumed directly by the web UI. Optional fields (endDate, entryFee,
description) are omitted from the JSON when absent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

AGE_GROUPS = ("U10", "U12", "U14", "U16", "U18", "Open")
GENDERS = ("Boys", "Girls", "Mixed")
STATUSES = ("Open", "Upcoming", "Closed", "Completed")

COURSE_PLACEHOLDER = "TBD"


# ---------------------------------------------------------------------------
# Staging record (retrieval output)
# ---------------------------------------------------------------------------

@dataclass
class RawEvent:
    """One upstream event exactly as retrieved, before any parsing.

    Every retrieval shape (DOM scrape, intercepted JSON, direct feed GET)
    fills whichever fields its source exposes and leaves the rest empty.
    """

    name: str = ""
    date_text: str = ""          # "Apr 2-3" (BlueGolf) or locale string (USGA)
    start_date_iso: str = ""     # machine-readable start date, when published
    end_date_text: str = ""      # locale end date string (USGA feed)
    location_text: str = ""
    course_name: str = ""
    fee_text: str = ""
    registration_end: str = ""
    status_marker: str = ""      # "Full", "Results", "Register", ...
    event_url: str = ""


# ---------------------------------------------------------------------------
# Canonical record
# ---------------------------------------------------------------------------

@dataclass
class Tournament:
    id: str
    name: str
    date: str
    location: str
    state: str
    course_name: str
    age_groups: list[str]
    gender: str
    registration_deadline: str
    status: str
    end_date: str | None = None
    entry_fee: int | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "date": self.date,
        }
        if self.end_date:
            d["endDate"] = self.end_date
        d.update({
            "location": self.location,
            "state": self.state,
            "courseName": self.course_name,
            "ageGroups": list(self.age_groups),
            "gender": self.gender,
            "registrationDeadline": self.registration_deadline,
            "status": self.status,
        })
        if self.entry_fee is not None:
            d["entryFee"] = self.entry_fee
        if self.description:
            d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tournament:
        """Build a Tournament from its JSON form.

        Raises KeyError when a required key is missing and TypeError when
        ageGroups is not a list, so callers reading persisted artifacts can
        treat the whole artifact as malformed.
        """
        fee = data.get("entryFee")
        if not isinstance(data["ageGroups"], list):
            raise TypeError(f"ageGroups must be a list, got {data['ageGroups']!r}")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            date=str(data["date"]),
            end_date=data.get("endDate") or None,
            location=str(data.get("location") or ""),
            state=str(data.get("state") or ""),
            course_name=str(data.get("courseName") or COURSE_PLACEHOLDER),
            age_groups=list(data["ageGroups"]),
            gender=str(data["gender"]),
            registration_deadline=str(data["registrationDeadline"]),
            status=str(data["status"]),
            entry_fee=int(fee) if fee is not None else None,
            description=data.get("description") or None,
        )


# ---------------------------------------------------------------------------
# Snapshot artifact
# ---------------------------------------------------------------------------

@dataclass
class Snapshot:
    source: str
    scraped_at: str
    tournaments: list[Tournament] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "scrapedAt": self.scraped_at,
            "tournaments": [t.to_dict() for t in self.tournaments],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Snapshot:
        return cls(
            source=str(data["source"]),
            scraped_at=str(data["scrapedAt"]),
            tournaments=[Tournament.from_dict(t) for t in data["tournaments"]],
        )
