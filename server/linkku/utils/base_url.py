# server/linkku/utils/base_url.py

from flask import current_app


def get_public_base_url() -> str:
    return current_app.config.get("PUBLIC_BASE_URL", "https://linkku.web.id").rstrip("/")


def build_linktree_url(slug: str) -> str:
    return f"{get_public_base_url()}/{slug}"


def build_article_url(slug: str) -> str:
    return f"{get_public_base_url()}/articles/{slug}"
