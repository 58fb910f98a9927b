"""Day-granularity date handling for production schedules.

Farm records carry calendar days with no time component. Everything is
reduced to a ``datetime.date`` in UTC here, at the parsing boundary, so the
overlap and calendar maths never depend on the machine's local timezone.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        """Length in whole days; 0 for a single-day event."""
        return (self.end - self.start).days


def parse_day(value) -> date | None:
    """Coerce a date-like value to a UTC calendar day.

    Accepts ``date``, ``datetime`` (aware values are converted to UTC,
    naive ones are taken as UTC) and ISO-8601 strings. Returns None for
    anything unparseable instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        moment = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def field_of(record, name: str):
    """Read a field from a dataclass/object or a plain dict."""
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def to_date_range(record) -> DateRange | None:
    """Planting-to-harvest window of a production.

    End date priority: actual harvest, then estimated harvest, then the
    planting day itself. A bad date borrows its companion; an end before
    the start is clamped to the start. None only if no date parses at all.
    """
    start = parse_day(field_of(record, "planting_date"))
    end = (
        parse_day(field_of(record, "harvest_date"))
        or parse_day(field_of(record, "estimated_harvest_date"))
    )

    if start is None and end is None:
        return None
    if start is None:
        start = end
    if end is None or end < start:
        end = start
    return DateRange(start, end)


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    """Inclusive overlap: sharing a single day counts."""
    return a.start <= b.end and b.start <= a.end


def calculate_overlap_days(a: DateRange, b: DateRange) -> int:
    """Number of days both ranges occupy, counting both ends."""
    if not ranges_overlap(a, b):
        return 0
    return (min(a.end, b.end) - max(a.start, b.start)).days + 1
