# server/linkku/utils/helpers.py

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from urllib.parse import urlparse

HTML_TAG_REGEX = re.compile(r"<[^>]*>")
WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 150


def utcnow() -> datetime:
    """Naive UTC timestamp, the convention for every stored DateTime column"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(moment: datetime) -> datetime:
    # Naive values are taken as server local time
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def local_day_bounds(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Return the [start, end) of the server-local calendar day containing
    `moment`, expressed as naive UTC so it compares against stored columns."""
    if moment is None:
        local = datetime.now()
    elif moment.tzinfo is None:
        local = moment
    else:
        local = moment.astimezone().replace(tzinfo=None)

    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)

    return to_utc_naive(start), to_utc_naive(end)


def strip_html(value: str) -> str:
    if not value:
        return ""
    return HTML_TAG_REGEX.sub("", value)


def calculate_reading_time(content: str) -> int:
    words = strip_html(content).split()
    return math.ceil(len(words) / WORDS_PER_MINUTE)


def make_excerpt(content: str, length: int = EXCERPT_LENGTH) -> str:
    plain = strip_html(content).strip()
    if len(plain) > length:
        return plain[:length] + "..."
    return plain


def extract_domain(url: str, include_subdomain: bool = False) -> str:
    try:
        parsed = urlparse(url)
        domain = parsed.netloc

        domain = domain.split(":")[0]

        if not include_subdomain and domain.startswith("www."):
            domain = domain[4:]

        return domain.lower()
    except Exception:
        return ""


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    elif size < 1024 ** 2:
        return f"{size / 1024:.2f} KB"
    elif size < 1024 ** 3:
        return f"{size / 1024 ** 2:.2f} MB"
    else:
        return f"{size / 1024 ** 3:.2f} GB"


def percentage(part: float, whole: float, digits: int = 2) -> float:
    if not whole:
        return 0.0
    return round(part / whole * 100, digits)


def ratio(part: float, whole: float, digits: int = 2) -> float:
    if not whole:
        return 0.0
    return round(part / whole, digits)


def parse_bool(value) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None
