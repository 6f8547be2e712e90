# server/linkku/routes/articles.py

import logging

from flask import Blueprint, request, current_app

from linkku.extensions import limiter
from linkku.services.article_service import ArticleService
from linkku.services.category_service import ArticleCategoryService
from linkku.services.tracking_service import TrackingService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability, get_current_user
from linkku.utils.helpers import parse_bool

articles_bp = Blueprint("articles", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


def _page_args(default_limit: int):
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    limit = request.args.get("limit", default_limit, type=int) or default_limit
    limit = max(1, min(limit, current_app.config.get("MAX_PAGE_SIZE", 100)))
    return page, limit


# Public

@articles_bp.route("/articles", methods=["GET"])
def list_published_articles():
    page, limit = _page_args(current_app.config.get("DEFAULT_PUBLIC_PAGE_SIZE", 6))

    featured = request.args.get("featured")
    result = ArticleService.list_published(
        page=page,
        limit=limit,
        category=request.args.get("category"),
        featured=parse_bool(featured) if featured is not None else None,
    )

    return api_response().success(data=result)


@articles_bp.route("/articles/categories", methods=["GET"])
def list_article_categories():
    return api_response().success(data={
        "categories": ArticleCategoryService.list_with_counts(published_only=True)
    })


@articles_bp.route("/articles/<slug>", methods=["GET"])
def get_published_article(slug: str):
    return api_response().success(data=ArticleService.get_published(slug))


@articles_bp.route("/articles/<slug>/track-view", methods=["POST"])
@limiter.limit("60 per minute")
def track_article_view(slug: str):
    body = json_body()
    request_data = TrackingService.parse_request(request, body)

    result = TrackingService.record_article_view(slug, request_data)

    return api_response().success(data=result)


# Admin

@articles_bp.route("/admin/articles", methods=["GET"])
@require_capability("article", "read")
def admin_list_articles():
    page, limit = _page_args(current_app.config.get("DEFAULT_ADMIN_PAGE_SIZE", 10))

    result = ArticleService.list_admin(
        page=page,
        limit=limit,
        status=request.args.get("status"),
        category=request.args.get("category"),
        search=request.args.get("search"),
    )

    return api_response().success(data=result)


@articles_bp.route("/admin/articles", methods=["POST"])
@require_capability("article", "create")
def admin_create_article():
    data = json_body()

    article = ArticleService.create(get_current_user(), data)

    return api_response().success(
        data={"article": article.to_dict()},
        message="Article created",
        status=201,
    )


@articles_bp.route("/admin/articles/stats", methods=["GET"])
@require_capability("article", "read")
def admin_article_stats():
    return api_response().success(data=ArticleService.get_stats())


@articles_bp.route("/admin/articles/categories", methods=["GET"])
@require_capability("article", "read")
def admin_article_category_options():
    return api_response().success(data={
        "categories": ArticleCategoryService.list_with_counts()
    })


@articles_bp.route("/admin/articles/<article_id>", methods=["GET"])
@require_capability("article", "read")
def admin_get_article(article_id: str):
    return api_response().success(data={"article": ArticleService.get(article_id).to_dict()})


@articles_bp.route("/admin/articles/<article_id>", methods=["PATCH", "PUT"])
@require_capability("article", "update")
def admin_update_article(article_id: str):
    data = json_body()

    article = ArticleService.update(article_id, data)

    return api_response().success(data={"article": article.to_dict()}, message="Article updated")


@articles_bp.route("/admin/articles/<article_id>", methods=["DELETE"])
@require_capability("article", "delete")
def admin_delete_article(article_id: str):
    ArticleService.delete(article_id)

    return api_response().success(message="Article deleted")
