from datetime import datetime, timezone


def utc_now():
    """Naive UTC timestamp, the form SQLite DateTime columns round-trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def start_of_month(moment=None):
    moment = moment or utc_now()
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def isoformat(value):
    return value.isoformat() if value else None
