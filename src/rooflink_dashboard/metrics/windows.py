"""Reporting windows for dashboard refreshes."""

import calendar
from datetime import date, timedelta

from rooflink_dashboard.constants import DateRangeType
from rooflink_dashboard.metrics.schemas import DateWindow


def date_window_for(
    range_type: DateRangeType | str = DateRangeType.TODAY,
    today: date | None = None,
    custom_start: date | None = None,
    custom_end: date | None = None,
) -> DateWindow:
    """
    Build the reporting window for a preset.

    Weeks run Sunday to Saturday. A custom range missing either bound falls
    back to today.

    Args:
        range_type: Preset to build
        today: Reference date (defaults to the current date)
        custom_start: First day of a custom range
        custom_end: Last day of a custom range

    Returns:
        DateWindow
    """
    today = today or date.today()
    range_type = DateRangeType(range_type)

    if range_type == DateRangeType.CURRENT_WEEK:
        # date.weekday() is Monday=0; shift so Sunday starts the week
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        return DateWindow(
            start_date=start,
            end_date=start + timedelta(days=6),
            label=f"Week of {start.strftime('%b')} {start.day}",
        )

    if range_type == DateRangeType.MONTHLY:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return DateWindow(
            start_date=today.replace(day=1),
            end_date=today.replace(day=last_day),
            label=today.strftime("%B %Y"),
        )

    if range_type == DateRangeType.YEARLY:
        return DateWindow(
            start_date=date(today.year, 1, 1),
            end_date=date(today.year, 12, 31),
            label=str(today.year),
        )

    if range_type == DateRangeType.CUSTOM:
        if custom_start is None or custom_end is None:
            return DateWindow(start_date=today, end_date=today, label="Custom Range")
        if custom_end < custom_start:
            raise ValueError("custom_end must not be before custom_start")
        return DateWindow(
            start_date=custom_start,
            end_date=custom_end,
            label=f"Custom: {custom_start.isoformat()} - {custom_end.isoformat()}",
        )

    return DateWindow(start_date=today, end_date=today, label="Today")
