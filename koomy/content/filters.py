"""Client-side filtering for community content lists."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from koomy.models.domain import FAQ, Event
from koomy.types import EventFilter


def _aware(value: datetime) -> datetime:
    # Naive timestamps from the API are UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def split_events(
    events: Iterable[Event], now: datetime | None = None
) -> tuple[list[Event], list[Event]]:
    """Split into (upcoming, past); an event starting exactly now is upcoming."""
    now = _aware(now or datetime.now(UTC))
    upcoming: list[Event] = []
    past: list[Event] = []
    for event in events:
        (upcoming if _aware(event.date) >= now else past).append(event)
    return upcoming, past


def filter_events(
    events: Iterable[Event], which: EventFilter | str, now: datetime | None = None
) -> list[Event]:
    upcoming, past = split_events(events, now)
    return upcoming if EventFilter(which) == EventFilter.UPCOMING else past


def faqs_for_role(faqs: Iterable[FAQ], role: str) -> list[FAQ]:
    """FAQs aimed at ``role`` plus those aimed at everyone."""
    return [faq for faq in faqs if faq.target_role in (role, "all")]
