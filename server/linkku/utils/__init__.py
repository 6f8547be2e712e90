# server/linkku/utils/__init__.py

from linkku.utils.validators import URLValidator, InputValidator
from linkku.utils.slug import SlugGenerator
from linkku.utils.responses import ApiResponse
from linkku.utils.base_url import (
    get_public_base_url,
    build_linktree_url,
    build_article_url,
)
from linkku.utils.helpers import (
    utcnow,
    to_utc_naive,
    local_day_bounds,
    strip_html,
    calculate_reading_time,
    make_excerpt,
    extract_domain,
    format_file_size,
    percentage,
    ratio,
    parse_bool,
)

__all__ = [
    "URLValidator",
    "InputValidator",
    "SlugGenerator",
    "ApiResponse",
    "get_public_base_url",
    "build_linktree_url",
    "build_article_url",
    "utcnow",
    "to_utc_naive",
    "local_day_bounds",
    "strip_html",
    "calculate_reading_time",
    "make_excerpt",
    "extract_domain",
    "format_file_size",
    "percentage",
    "ratio",
    "parse_bool",
]
