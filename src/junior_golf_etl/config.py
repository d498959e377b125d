"""junior_golf_etl.config

YAML-based source definitions for the scrape pipeline.

Responsibilities:
  - Load and validate source files such as config/sources.yml
  - Provide the built-in default sources when no file is given
  - Hash YAML content for traceability in run reports

Usage:
    from pathlib import Path
    from junior_golf_etl.config import load_source_catalog

    catalog = load_source_catalog(Path("config/sources.yml"))
    for source in catalog.select(["UJGA"]):
        ...
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VALID_KINDS = frozenset({"bluegolf", "usga"})

REQUIRED_SOURCE_KEYS = frozenset({"name", "kind", "url", "output"})

_STATE_CODE_RE = re.compile(r"^[A-Z]{2}$")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SourceConfigValidationError(ValueError):
    """Raised when a source definition file fails schema validation."""


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass
class SourceConfig:
    """One upstream schedule to scrape."""

    name: str
    kind: str
    url: str
    output: str
    id_prefix: str = ""
    default_state: str = ""
    year: int | None = None
    response_match: str | None = None
    feed_url: str | None = None
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.id_prefix:
            self.id_prefix = self.name.lower()


@dataclass
class SourceCatalog:
    sources: list[SourceConfig]
    yaml_hash: str | None = None
    raw_yaml: str = field(repr=False, default="")

    def select(self, names: list[str] | tuple[str, ...] | None = None) -> list[SourceConfig]:
        """Enabled sources, optionally restricted to ``names`` (case-insensitive).

        Raises:
            SourceConfigValidationError: If a requested name is not defined.
        """
        enabled = [s for s in self.sources if s.enabled]
        if not names:
            return enabled
        wanted = {n.lower() for n in names}
        known = {s.name.lower() for s in self.sources}
        unknown = sorted(wanted - known)
        if unknown:
            raise SourceConfigValidationError(f"unknown source(s): {unknown}")
        return [s for s in enabled if s.name.lower() in wanted]


DEFAULT_SOURCES: tuple[SourceConfig, ...] = (
    SourceConfig(
        name="UJGA",
        kind="bluegolf",
        url="https://ujga.bluegolf.com/bluegolf/ujga26/schedule/index.htm",
        output="ujga.json",
        default_state="UT",
    ),
    SourceConfig(
        name="USGA",
        kind="usga",
        url="https://www.usga.org/championships",
        output="usga.json",
        response_match="usga-events",
    ),
)


def default_catalog() -> SourceCatalog:
    return SourceCatalog(sources=[SourceConfig(**s.__dict__) for s in DEFAULT_SOURCES])


# ---------------------------------------------------------------------------
# Loader + validator
# ---------------------------------------------------------------------------

def load_source_catalog(yaml_path: Path) -> SourceCatalog:
    """Load, validate, and return a SourceCatalog from a YAML file.

    Raises:
        SourceConfigValidationError: If any source definition is invalid.
        FileNotFoundError: If the YAML file does not exist.
    """
    raw = yaml_path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw)
    validate_source_file(data)
    sources = [
        SourceConfig(
            name=str(entry["name"]),
            kind=str(entry["kind"]),
            url=str(entry["url"]),
            output=str(entry["output"]),
            id_prefix=str(entry.get("id_prefix") or ""),
            default_state=str(entry.get("default_state") or ""),
            year=int(entry["year"]) if entry.get("year") is not None else None,
            response_match=entry.get("response_match") or None,
            feed_url=entry.get("feed_url") or None,
            enabled=bool(entry.get("enabled", True)),
        )
        for entry in data["sources"]
    ]
    return SourceCatalog(
        sources=sources,
        yaml_hash=hashlib.sha256(raw.encode("utf-8")).hexdigest(),
        raw_yaml=raw,
    )


def validate_source_file(data: Any) -> None:
    """Raise SourceConfigValidationError if data does not match the schema.

    Validates:
      - top level is a mapping with a non-empty 'sources' list
      - each source has the required keys and a known kind
      - output is a .json filename, unique across sources
      - names are unique (case-insensitive)
      - default_state is empty or two uppercase letters
      - usga sources name a response_match substring or a feed_url
    """
    if not isinstance(data, dict) or not isinstance(data.get("sources"), list):
        raise SourceConfigValidationError("source file must contain a 'sources' list")
    if not data["sources"]:
        raise SourceConfigValidationError("'sources' list is empty")

    seen_names: set[str] = set()
    seen_outputs: set[str] = set()
    for idx, entry in enumerate(data["sources"]):
        if not isinstance(entry, dict):
            raise SourceConfigValidationError(f"sources[{idx}] must be a mapping")
        missing = REQUIRED_SOURCE_KEYS - {k for k, v in entry.items() if v}
        if missing:
            raise SourceConfigValidationError(
                f"sources[{idx}] missing required keys: {sorted(missing)}"
            )
        name = str(entry["name"])
        if entry["kind"] not in VALID_KINDS:
            raise SourceConfigValidationError(
                f"{name}: kind {entry['kind']!r} not in {sorted(VALID_KINDS)}"
            )
        output = str(entry["output"])
        if not output.endswith(".json") or "/" in output or "\\" in output:
            raise SourceConfigValidationError(
                f"{name}: output must be a bare .json filename, got {output!r}"
            )
        if name.lower() in seen_names:
            raise SourceConfigValidationError(f"duplicate source name: {name}")
        if output in seen_outputs:
            raise SourceConfigValidationError(f"duplicate output file: {output}")
        seen_names.add(name.lower())
        seen_outputs.add(output)

        default_state = entry.get("default_state") or ""
        if default_state and not _STATE_CODE_RE.match(str(default_state)):
            raise SourceConfigValidationError(
                f"{name}: default_state must be two uppercase letters, got {default_state!r}"
            )
        year = entry.get("year")
        if year is not None and not isinstance(year, int):
            raise SourceConfigValidationError(f"{name}: year must be an integer")
        if entry["kind"] == "usga" and not (entry.get("response_match") or entry.get("feed_url")):
            raise SourceConfigValidationError(
                f"{name}: usga sources need response_match or feed_url"
            )
