"""Daily forecast windowing: the next N days starting at "today" in the location timezone."""

import logging
import re
from datetime import UTC, date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from weathersearch.errors import ProjectionFailure
from weathersearch.models.common import utc_now
from weathersearch.models.forecast import DailyBlock, ForecastResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 7

_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?([+-])(\d{1,2})(?::?(\d{2}))?$")


def resolve_timezone(name: str | None, utc_offset_seconds: int | None = None) -> tzinfo:
    """Resolve an IANA name or fixed offset ('+05:30', 'UTC-03:00').

    Falls back to `utc_offset_seconds` when the name is not recognised.
    """
    if name:
        try:
            return ZoneInfo(name)
        # directory names such as "America" raise IsADirectoryError
        except (ZoneInfoNotFoundError, ValueError, OSError):
            pass
        m = _OFFSET_RE.match(name.strip())
        if m:
            sign = -1 if m.group(1) == "-" else 1
            offset = timedelta(hours=int(m.group(2)), minutes=int(m.group(3) or 0))
            return timezone(sign * offset)
    if utc_offset_seconds is not None:
        return timezone(timedelta(seconds=utc_offset_seconds))
    raise ProjectionFailure(f"Unknown timezone: {name!r}")


def local_date(stamp: str, tz: tzinfo) -> date:
    """Calendar date of a forecast timestamp in the given timezone.

    Date-only and naive values are already local to the forecast location.
    """
    try:
        if len(stamp) == 10:
            return date.fromisoformat(stamp)
        dt = datetime.fromisoformat(stamp)
        if dt.tzinfo is None:
            return dt.date()
        return dt.astimezone(tz).date()
    except (TypeError, ValueError, OverflowError) as e:
        raise ProjectionFailure(f"Malformed timestamp: {stamp!r}") from e


def today_in(tz: tzinfo, now: datetime | None = None) -> date:
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(tz).date()


def window_bounds(
    times: tuple[str, ...] | list[str],
    tz: tzinfo,
    today: date,
    days: int = DEFAULT_WINDOW_DAYS,
) -> tuple[int, int]:
    """Return (start, stop) of the window. Raises ProjectionFailure.

    start is the first entry dated on or after today, or 0 if every entry
    is in the past.
    """
    start = next(
        (i for i, stamp in enumerate(times) if local_date(stamp, tz) >= today),
        0,
    )
    return start, min(start + days, len(times))


def project(
    daily: DailyBlock | None,
    timezone_name: str | None,
    now: datetime | None = None,
    utc_offset_seconds: int | None = None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> DailyBlock:
    """Slice a daily block to at most `days` entries starting today.

    An absent block yields empty arrays. If the bounds cannot be computed the
    original block is returned unsliced.
    """
    if daily is None:
        return DailyBlock()

    try:
        tz = resolve_timezone(timezone_name, utc_offset_seconds)
        start, stop = window_bounds(daily.time, tz, today_in(tz, now), days)
    except ProjectionFailure as e:
        logger.warning("Daily window fallback to unsliced data: %s", e)
        return daily

    return daily.slice(start, stop)


def project_forecast(
    forecast: ForecastResult | None,
    now: datetime | None = None,
    days: int = DEFAULT_WINDOW_DAYS,
) -> DailyBlock:
    if forecast is None:
        return DailyBlock()
    return project(
        forecast.daily,
        forecast.timezone,
        now=now,
        utc_offset_seconds=forecast.utc_offset_seconds,
        days=days,
    )
