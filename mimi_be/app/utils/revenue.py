from datetime import date, datetime, time
from typing import Optional, Tuple

ALL_TIME_LABEL = "Tất cả thời gian"
OPEN_START_LABEL = "Bắt đầu"
OPEN_END_LABEL = "Hiện tại"
UNCATEGORIZED_LABEL = "Khác"

END_OF_DAY = time(23, 59, 59)


def day_bounds(start_date: Optional[date], end_date: Optional[date]) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Expand a date window into inclusive datetimes: start at 00:00:00, end at 23:59:59."""
    start_dt = datetime.combine(start_date, time.min) if start_date else None
    end_dt = datetime.combine(end_date, END_OF_DAY) if end_date else None
    return start_dt, end_dt


def format_period(start_date: Optional[date], end_date: Optional[date]) -> str:
    if start_date is None and end_date is None:
        return ALL_TIME_LABEL
    start = start_date.strftime("%d/%m/%Y") if start_date else OPEN_START_LABEL
    end = end_date.strftime("%d/%m/%Y") if end_date else OPEN_END_LABEL
    return f"{start} - {end}"


def category_matches(category_name: Optional[str], wanted: str) -> bool:
    # casefold so "Đồ chơi" and "đồ chơi" compare equal
    if category_name is None:
        return False
    return category_name.casefold() == wanted.casefold()
