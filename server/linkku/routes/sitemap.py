# server/linkku/routes/sitemap.py

import logging
from xml.sax.saxutils import escape

from flask import Blueprint, Response

from linkku.models.article import Article, ArticleStatus
from linkku.models.linktree import Linktree
from linkku.utils.base_url import get_public_base_url, build_article_url, build_linktree_url
from linkku.utils.helpers import utcnow

sitemap_bp = Blueprint("sitemap", __name__)
logger = logging.getLogger(__name__)


def _url_entry(loc: str, lastmod, changefreq: str, priority: float) -> str:
    return (
        "<url>"
        f"<loc>{escape(loc)}</loc>"
        f"<lastmod>{lastmod.strftime('%Y-%m-%d')}</lastmod>"
        f"<changefreq>{changefreq}</changefreq>"
        f"<priority>{priority:.1f}</priority>"
        "</url>"
    )


@sitemap_bp.route("/sitemap.xml", methods=["GET"])
def sitemap():
    base_url = get_public_base_url()
    today = utcnow()

    entries = [
        _url_entry(f"{base_url}/", today, "daily", 1.0),
        _url_entry(f"{base_url}/articles", today, "daily", 0.8),
    ]

    articles = (
        Article.query
        .filter(Article.status == ArticleStatus.PUBLISHED)
        .order_by(Article.published_at.desc())
        .all()
    )
    for article in articles:
        entries.append(_url_entry(build_article_url(article.slug), article.updated_at or today, "weekly", 0.7))

    for linktree in Linktree.query.filter_by(is_active=True).order_by(Linktree.created_at.asc()).all():
        entries.append(_url_entry(build_linktree_url(linktree.slug), linktree.updated_at or today, "weekly", 0.6))

    xml = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "\n".join(entries)
        + "\n</urlset>"
    )

    return Response(xml, mimetype="application/xml")
