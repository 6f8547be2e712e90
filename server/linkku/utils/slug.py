# server/linkku/utils/slug.py

import re
import secrets
from typing import Iterable, Optional

from linkku.extensions import db

INVALID_CHARS_REGEX = re.compile(r"[^a-z0-9\s-]")
WHITESPACE_REGEX = re.compile(r"\s+")


class SlugGenerator:
    WORD_SAFE_CHARS = "abcdefghjkmnpqrstuvwxyz23456789"

    def __init__(self, length: int = 6):
        self.length = length

    def generate(self, length: Optional[int] = None) -> str:
        return "".join(secrets.choice(self.WORD_SAFE_CHARS) for _ in range(length or self.length))

    @staticmethod
    def normalize(text: str) -> str:
        """Turn free text into a base slug.

        Lowercases, drops anything outside [a-z0-9], whitespace and hyphen,
        collapses whitespace runs into one hyphen and trims edge hyphens.
        Existing hyphen runs are left alone.
        """
        if not text:
            return ""

        slug = INVALID_CHARS_REGEX.sub("", text.lower())
        slug = WHITESPACE_REGEX.sub("-", slug)

        return slug.strip("-")

    @staticmethod
    def is_taken(model, slug: str, exclude_id: Optional[str] = None) -> bool:
        query = db.session.query(model.id).filter(model.slug == slug)
        if exclude_id:
            query = query.filter(model.id != exclude_id)
        return query.first() is not None

    @classmethod
    def allocate(
        cls,
        model,
        text: str,
        exclude_id: Optional[str] = None,
        reserved: Optional[Iterable[str]] = None,
    ) -> str:
        """Return a slug for `text` that no other `model` row holds.

        Probes base, base-1, base-2, ... one query per candidate. `exclude_id`
        lets a row being renamed keep its own slug family.
        """
        reserved = set(reserved or ())

        base = cls.normalize(text)
        if not base:
            base = cls().generate()

        candidate = base
        counter = 1
        while candidate in reserved or cls.is_taken(model, candidate, exclude_id):
            candidate = f"{base}-{counter}"
            counter += 1

        return candidate
