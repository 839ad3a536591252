from datetime import date, datetime, time, timedelta


WEEK_LENGTH = timedelta(days=7)


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, '%Y-%m-%d').date()


def start_of_week(day, week_starts_on=6):
    """Roll ``day`` back to the first day of its week (date.weekday() numbering)."""
    offset = (day.weekday() - week_starts_on) % 7
    return day - timedelta(days=offset)


def week_bounds(week_start):
    """Half-open [start, end) datetimes covering the seven days from ``week_start``."""
    start = datetime.combine(parse_date(week_start), time.min)
    return start, start + WEEK_LENGTH


def format_week(week_start):
    return parse_date(week_start).strftime('%b %d, %Y')


def overlaps(start_a, end_a, start_b, end_b):
    return start_a < end_b and start_b < end_a
