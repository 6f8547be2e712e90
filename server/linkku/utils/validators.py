# server/linkku/utils/validators.py

import re
from typing import Any, List, Optional, Tuple
from urllib.parse import urlparse


class URLValidator:
    ALLOWED_SCHEMES = {"http", "https"}
    BLOCKED_SCHEMES = {"javascript", "data", "vbscript", "file"}
    MAX_URL_LENGTH = 2048

    # A colon followed by a digit is a port, not a scheme
    SCHEME_REGEX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:(?!\d)")

    @classmethod
    def normalize(cls, url: str) -> str:
        url = url.strip()

        if not cls.SCHEME_REGEX.match(url):
            url = f"https://{url}"

        return url

    @classmethod
    def validate(cls, url: str) -> Tuple[bool, Optional[str], Optional[str]]:
        if not url or not str(url).strip():
            return False, None, "URL is required"

        url = cls.normalize(str(url))

        if len(url) > cls.MAX_URL_LENGTH:
            return False, None, f"URL is too long (max {cls.MAX_URL_LENGTH} characters)"

        try:
            parsed = urlparse(url)
        except ValueError:
            return False, None, "Invalid URL format"

        scheme = parsed.scheme.lower()

        if scheme in cls.BLOCKED_SCHEMES:
            return False, None, "This URL type is not allowed"

        if scheme not in cls.ALLOWED_SCHEMES:
            return False, None, "URL must start with http:// or https://"

        host = (parsed.hostname or "").lower()
        if not host or ("." not in host and host != "localhost"):
            return False, None, "URL must include a valid domain"

        return True, url, None


class InputValidator:
    EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
    HEX_COLOR_REGEX = re.compile(r'^#[0-9A-Fa-f]{6}$')

    MIN_PASSWORD_LENGTH = 6
    MAX_PASSWORD_LENGTH = 128
    MIN_NAME_LENGTH = 2

    @classmethod
    def validate_email(cls, email: str) -> Tuple[bool, Optional[str], Optional[str]]:
        if not email or not isinstance(email, str):
            return False, None, "Email is required"

        email = email.strip().lower()

        if len(email) > 255:
            return False, None, "Email is too long"

        if not cls.EMAIL_REGEX.match(email):
            return False, None, "Please enter a valid email address"

        return True, email, None

    @classmethod
    def validate_password(cls, password: str) -> Tuple[bool, Optional[str]]:
        if not password or not isinstance(password, str):
            return False, "Password is required"

        if len(password) < cls.MIN_PASSWORD_LENGTH:
            return False, f"Password must be at least {cls.MIN_PASSWORD_LENGTH} characters"

        if len(password) > cls.MAX_PASSWORD_LENGTH:
            return False, "Password is too long"

        return True, None

    @classmethod
    def validate_name(cls, name: str) -> Tuple[bool, Optional[str], Optional[str]]:
        if not name or not isinstance(name, str) or not name.strip():
            return False, None, "Name is required"

        name = name.strip()

        if len(name) < cls.MIN_NAME_LENGTH:
            return False, None, f"Name must be at least {cls.MIN_NAME_LENGTH} characters"

        if len(name) > 100:
            return False, None, "Name is too long (max 100 characters)"

        return True, name, None

    @classmethod
    def validate_text(
        cls,
        value: Any,
        label: str,
        max_length: int = 255,
        required: bool = True,
    ) -> Tuple[bool, Optional[str], Optional[str]]:
        if value is None or (isinstance(value, str) and not value.strip()):
            if required:
                return False, None, f"{label} is required"
            return True, None, None

        if not isinstance(value, str):
            return False, None, f"{label} must be text"

        value = cls.sanitize_string(value, max_length=None)

        if len(value) > max_length:
            return False, None, f"{label} is too long (max {max_length} characters)"

        return True, value, None

    @classmethod
    def validate_color(cls, color: str) -> Tuple[bool, Optional[str], Optional[str]]:
        if not color:
            return True, None, None

        color = str(color).strip()

        if cls.HEX_COLOR_REGEX.match(color):
            return True, color.upper(), None

        return False, None, "Color must be a valid hex code (e.g., #FF5733)"

    @classmethod
    def validate_image_path(cls, value: str, label: str = "Image") -> Tuple[bool, Optional[str], Optional[str]]:
        """Accept absolute http(s) URLs or site-relative paths such as /uploads/x.png"""
        if not value:
            return True, None, None

        if not isinstance(value, str):
            return False, None, f"{label} must be a URL or path"

        value = value.strip()

        if value.startswith("/") and not value.startswith("//"):
            return True, value, None

        parsed = urlparse(value)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return True, value, None

        return False, None, f"{label} must be an http(s) URL or a path starting with /"

    @classmethod
    def validate_tags(cls, tags: Any) -> Tuple[bool, Optional[List[str]], Optional[str]]:
        if tags is None:
            return True, [], None

        if isinstance(tags, str):
            tags = [t for t in tags.split(",")]

        if not isinstance(tags, list):
            return False, None, "Tags must be a list of strings"

        cleaned = []
        for tag in tags:
            if not isinstance(tag, str):
                return False, None, "Tags must be a list of strings"
            tag = tag.strip()
            if tag and tag not in cleaned:
                cleaned.append(tag[:50])

        return True, cleaned, None

    @classmethod
    def validate_int(cls, value: Any, label: str, minimum: Optional[int] = None) -> Tuple[bool, Optional[int], Optional[str]]:
        if isinstance(value, bool) or value is None:
            return False, None, f"{label} must be an integer"

        try:
            number = int(value)
        except (TypeError, ValueError):
            return False, None, f"{label} must be an integer"

        if isinstance(value, float) and not value.is_integer():
            return False, None, f"{label} must be an integer"

        if minimum is not None and number < minimum:
            return False, None, f"{label} must be at least {minimum}"

        return True, number, None

    @classmethod
    def sanitize_string(cls, value: str, max_length: Optional[int] = 255) -> str:
        if not value:
            return ""

        value = value.strip()

        if max_length and len(value) > max_length:
            value = value[:max_length]

        value = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', value)

        return value
