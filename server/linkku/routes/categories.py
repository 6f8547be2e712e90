# server/linkku/routes/categories.py

import logging

from flask import Blueprint, current_app

from linkku.services.category_service import CategoryService, ArticleCategoryService
from linkku.utils.request_data import json_body
from linkku.utils.auth import require_capability

categories_bp = Blueprint("categories", __name__)
logger = logging.getLogger(__name__)


def api_response():
    return current_app.api_response


@categories_bp.route("/categories", methods=["GET"])
@require_capability("category", "read")
def get_categories():
    categories = CategoryService.list_categories()

    return api_response().success(data={
        "categories": [c.to_dict() for c in categories]
    })


# Admin: link categories

@categories_bp.route("/admin/categories", methods=["GET"])
@require_capability("category", "manage")
def admin_list_categories():
    categories = CategoryService.list_categories()

    return api_response().success(data={
        "categories": [c.to_dict(include_counts=True) for c in categories]
    })


@categories_bp.route("/admin/categories", methods=["POST"])
@require_capability("category", "create")
def admin_create_category():
    data = json_body()

    category = CategoryService.create_category(data)

    return api_response().success(
        data={"category": category.to_dict(include_counts=True)},
        message="Category created",
        status=201,
    )


@categories_bp.route("/admin/categories/<category_id>", methods=["GET"])
@require_capability("category", "manage")
def admin_get_category(category_id: str):
    category = CategoryService.get_category(category_id)

    return api_response().success(data={"category": category.to_dict(include_counts=True)})


@categories_bp.route("/admin/categories/<category_id>", methods=["PATCH", "PUT"])
@require_capability("category", "update")
def admin_update_category(category_id: str):
    data = json_body()

    category = CategoryService.update_category(category_id, data)

    return api_response().success(
        data={"category": category.to_dict(include_counts=True)},
        message="Category updated",
    )


@categories_bp.route("/admin/categories/<category_id>", methods=["DELETE"])
@require_capability("category", "delete")
def admin_delete_category(category_id: str):
    CategoryService.delete_category(category_id)

    return api_response().success(message="Category deleted")


@categories_bp.route("/admin/categories/<category_id>/links", methods=["GET"])
@require_capability("category", "manage")
def admin_get_category_links(category_id: str):
    return api_response().success(data=CategoryService.get_category_links(category_id))


# Admin: article categories

@categories_bp.route("/admin/article-categories", methods=["GET"])
@require_capability("article_category", "read")
def admin_list_article_categories():
    return api_response().success(data={
        "categories": ArticleCategoryService.list_with_counts()
    })


@categories_bp.route("/admin/article-categories", methods=["POST"])
@require_capability("article_category", "create")
def admin_create_article_category():
    data = json_body()

    category = ArticleCategoryService.create(data)

    return api_response().success(
        data={"category": category.to_dict(article_count=0)},
        message="Article category created",
        status=201,
    )


@categories_bp.route("/admin/article-categories/<category_id>", methods=["GET"])
@require_capability("article_category", "read")
def admin_get_article_category(category_id: str):
    category = ArticleCategoryService.get(category_id)

    return api_response().success(data={
        "category": category.to_dict(article_count=category.articles.count())
    })


@categories_bp.route("/admin/article-categories/<category_id>", methods=["PATCH", "PUT"])
@require_capability("article_category", "update")
def admin_update_article_category(category_id: str):
    data = json_body()

    category = ArticleCategoryService.update(category_id, data)

    return api_response().success(
        data={"category": category.to_dict(article_count=category.articles.count())},
        message="Article category updated",
    )


@categories_bp.route("/admin/article-categories/<category_id>", methods=["DELETE"])
@require_capability("article_category", "delete")
def admin_delete_article_category(category_id: str):
    ArticleCategoryService.delete(category_id)

    return api_response().success(message="Article category deleted")


@categories_bp.route("/admin/article-categories/<category_id>/articles", methods=["GET"])
@require_capability("article_category", "read")
def admin_get_article_category_articles(category_id: str):
    return api_response().success(data=ArticleCategoryService.get_articles(category_id))
