"""junior_golf_etl.retrieval

Retrieval shapes that turn an upstream schedule into RawEvent bundles.

Every shape implements the EventFetcher protocol, one method:
fetch_raw_events(source) -> list[RawEvent]. Adapters never see how the
content was obtained.

  DomScrapeFetcher      Playwright page load + BeautifulSoup over the HTML
                        (BlueGolf schedule pages, AWS WAF protected)
  JsonInterceptFetcher  Playwright navigation, capturing the JSON response
                        whose URL contains source.response_match (USGA)
  FeedRequestFetcher    direct requests GET of an already-known feed URL
  StaticFetcher         pre-built events, for tests and offline replays

Anti-automation countermeasures for browser shapes:
  - randomized realistic user agent and viewport per session
  - navigator.webdriver masked before any page script runs
  - explicit network-idle wait plus a grace delay before reading the DOM
  - bot-challenge pages (title mentions verification / human) raise
    BotChallengeDetected; the adapter turns that into an empty result

Each browser session is closed on every exit path, including challenge
pages and timeouts.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from junior_golf_etl.config import SourceConfig
from junior_golf_etl.models import RawEvent
from junior_golf_etl.normalize import normalize_space
from junior_golf_etl.shared import BotChallengeDetected, FetchError

log = logging.getLogger(__name__)

# User agents for rotation
USER_AGENTS = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
]

VIEWPORTS = [
    {"width": 1920, "height": 1080},
    {"width": 1680, "height": 1050},
    {"width": 1440, "height": 900},
    {"width": 1366, "height": 768},
]

BOT_TITLE_MARKERS = ("verification", "human")

_STEALTH_INIT_SCRIPT = "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_GRACE_MS = 2_000


def random_user_agent() -> str:
    return random.choice(USER_AGENTS)


def is_bot_challenge(title: str | None) -> bool:
    lower = (title or "").lower()
    return any(marker in lower for marker in BOT_TITLE_MARKERS)


# ---------------------------------------------------------------------------
# Interface
# ---------------------------------------------------------------------------

class EventFetcher(Protocol):
    def fetch_raw_events(self, source: SourceConfig) -> list[RawEvent]:
        """Return the raw per-event bundles published by ``source``.

        Raises FetchError on network/timeout failure and
        BotChallengeDetected when the upstream served a challenge page.
        """
        ...


# ---------------------------------------------------------------------------
# Parsers (no browser required)
# ---------------------------------------------------------------------------

def _text(el: Any) -> str:
    if el is None:
        return ""
    return normalize_space(el.get_text(" ", strip=True)) or ""


def parse_schedule_html(html: str, base_url: str = "") -> list[RawEvent]:
    """Extract one RawEvent per ``.vevent`` block of a BlueGolf schedule page.

    Fields per block:
      .value-title[title]          ISO start date ("2026-04-02")
      .dtstart span:first-child    human date range ("Apr 2-3")
      .summary a                   name + event link
      .tinfo a.hoverlink.gray      course name
      .address.gray                "St. George, UT"
      [data-regend] / data-regfee  registration close date / fee text
      td:last-child                status cell ("Full", "Register", "Results")
    """
    soup = BeautifulSoup(html, "html.parser")
    events: list[RawEvent] = []
    for el in soup.select(".vevent"):
        start_el = el.select_one(".value-title[title]")
        link = el.select_one(".summary a")
        reg = el.select_one("[data-regend]")
        href = (link.get("href") or "") if link is not None else ""
        events.append(RawEvent(
            name=_text(link),
            date_text=_text(el.select_one(".dtstart span:first-child")),
            start_date_iso=(start_el.get("title") or "").strip() if start_el is not None else "",
            location_text=_text(el.select_one(".address.gray")),
            course_name=_text(el.select_one(".tinfo a.hoverlink.gray")),
            fee_text=(reg.get("data-regfee") or "").strip() if reg is not None else "",
            registration_end=(reg.get("data-regend") or "").strip() if reg is not None else "",
            status_marker=_text(el.select_one("td:last-child")),
            event_url=urljoin(base_url, href) if href else "",
        ))
    return events


def parse_feed_payload(payload: Any) -> list[RawEvent]:
    """Map the JSON feed's ``items`` array to RawEvents.

    Items that are not objects are skipped; missing fields become "".
    """
    if not isinstance(payload, dict):
        return []
    items = payload.get("items") or []
    events: list[RawEvent] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        events.append(RawEvent(
            name=normalize_space(item.get("name")) or "",
            date_text=str(item.get("startDate") or ""),
            end_date_text=str(item.get("endDate") or ""),
            location_text=normalize_space(item.get("courseLocation")) or "",
            course_name=normalize_space(item.get("courseName")) or "",
            event_url=str(item.get("eventUrl") or ""),
        ))
    return events


# ---------------------------------------------------------------------------
# Browser session
# ---------------------------------------------------------------------------

class BrowserSession:
    """Context manager owning one Playwright browser/context/page.

    Yields the page. Everything is torn down on exit regardless of how the
    block ends; teardown failures are logged, never raised over the
    original error.
    """

    def __init__(
        self,
        headless: bool = True,
        playwright_factory: Callable[[], Any] = sync_playwright,
    ) -> None:
        self._headless = headless
        self._factory = playwright_factory
        self._pw: Any = None
        self._browser: Any = None
        self._context: Any = None
        self.user_agent = random_user_agent()
        self.viewport = random.choice(VIEWPORTS)

    def __enter__(self) -> Any:
        try:
            self._pw = self._factory().start()
            self._browser = self._pw.chromium.launch(
                headless=self._headless,
                args=["--disable-blink-features=AutomationControlled"],
            )
            self._context = self._browser.new_context(
                user_agent=self.user_agent,
                viewport=self.viewport,
                locale="en-US",
            )
            self._context.add_init_script(_STEALTH_INIT_SCRIPT)
            page = self._context.new_page()
        except PlaywrightError as exc:
            self.close()
            raise FetchError(f"browser launch failed: {exc}") from exc
        log.debug("Browser session started (user_agent=%s)", self.user_agent[:50])
        return page

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        for label, closer in (
            ("context", self._context),
            ("browser", self._browser),
        ):
            if closer is None:
                continue
            try:
                closer.close()
            except Exception as exc:  # noqa: BLE001
                log.warning("Closing %s failed: %s", label, exc)
        if self._pw is not None:
            try:
                self._pw.stop()
            except Exception as exc:  # noqa: BLE001
                log.warning("Stopping playwright failed: %s", exc)
        self._context = self._browser = self._pw = None


# ---------------------------------------------------------------------------
# Fetchers
# ---------------------------------------------------------------------------

@dataclass
class DomScrapeFetcher:
    """Load a schedule page in a real browser and parse its event blocks."""

    headless: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    grace_ms: int = DEFAULT_GRACE_MS
    playwright_factory: Callable[[], Any] = sync_playwright

    def fetch_raw_events(self, source: SourceConfig) -> list[RawEvent]:
        with BrowserSession(self.headless, self.playwright_factory) as page:
            try:
                page.goto(source.url, wait_until="networkidle", timeout=self.timeout_ms)
                page.wait_for_timeout(self.grace_ms)
                title = page.title()
            except PlaywrightError as exc:
                raise FetchError(f"{source.name}: loading {source.url} failed: {exc}") from exc

            if is_bot_challenge(title):
                raise BotChallengeDetected(source.name, title)

            log.info('%s page loaded: "%s"', source.name, title)
            try:
                html = page.content()
            except PlaywrightError as exc:
                raise FetchError(f"{source.name}: reading {source.url} failed: {exc}") from exc

        events = parse_schedule_html(html, base_url=source.url)
        log.info("%s: found %d events on page", source.name, len(events))
        return events


@dataclass
class JsonInterceptFetcher:
    """Navigate to a page and capture the JSON feed it requests."""

    headless: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    playwright_factory: Callable[[], Any] = sync_playwright

    def fetch_raw_events(self, source: SourceConfig) -> list[RawEvent]:
        match = source.response_match
        if not match:
            raise FetchError(f"{source.name}: no response_match configured")

        with BrowserSession(self.headless, self.playwright_factory) as page:
            try:
                with page.expect_response(
                    lambda r: match in r.url, timeout=self.timeout_ms
                ) as response_info:
                    page.goto(source.url, wait_until="commit", timeout=self.timeout_ms)
                response = response_info.value
                payload = response.json()
            except PlaywrightError as exc:
                raise FetchError(
                    f"{source.name}: no response matching {match!r} from {source.url}: {exc}"
                ) from exc
            except ValueError as exc:
                raise FetchError(f"{source.name}: feed response is not JSON: {exc}") from exc
            log.info("%s feed URL: %s", source.name, response.url)

        events = parse_feed_payload(payload)
        log.info("%s: found %d feed items", source.name, len(events))
        return events


@dataclass
class FeedRequestFetcher:
    """GET a known JSON feed URL directly, without a browser."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    session: requests.Session = field(default_factory=requests.Session)

    def fetch_raw_events(self, source: SourceConfig) -> list[RawEvent]:
        if not source.feed_url:
            raise FetchError(f"{source.name}: no feed_url configured")
        headers = {"User-Agent": random_user_agent(), "Accept": "application/json"}
        try:
            resp = self.session.get(
                source.feed_url, headers=headers, timeout=self.timeout_ms / 1000
            )
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise FetchError(f"{source.name}: GET {source.feed_url} failed: {exc}") from exc
        except ValueError as exc:
            raise FetchError(f"{source.name}: feed response is not JSON: {exc}") from exc

        events = parse_feed_payload(payload)
        log.info("%s: fetched %d feed items directly", source.name, len(events))
        return events


@dataclass
class StaticFetcher:
    """Serve pre-built events keyed by source name. Unknown sources get []."""

    events: dict[str, list[RawEvent]] = field(default_factory=dict)

    def fetch_raw_events(self, source: SourceConfig) -> list[RawEvent]:
        return list(self.events.get(source.name, []))


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

@dataclass
class FetchOptions:
    headless: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    grace_ms: int = DEFAULT_GRACE_MS
    direct_feed: bool = False


def build_fetcher(source: SourceConfig, options: FetchOptions) -> EventFetcher:
    """Pick the retrieval shape for a source kind."""
    if source.kind == "bluegolf":
        return DomScrapeFetcher(
            headless=options.headless,
            timeout_ms=options.timeout_ms,
            grace_ms=options.grace_ms,
        )
    if source.kind == "usga":
        if options.direct_feed and source.feed_url:
            return FeedRequestFetcher(timeout_ms=options.timeout_ms)
        return JsonInterceptFetcher(headless=options.headless, timeout_ms=options.timeout_ms)
    raise ValueError(f"no fetcher for source kind {source.kind!r}")
