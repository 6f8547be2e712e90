# server/linkku/services/category_service.py

import logging
from typing import List, Optional

from sqlalchemy import func

from linkku.errors import Conflict, NotFound, ValidationFailed
from linkku.extensions import db
from linkku.models.article import Article, ArticleStatus
from linkku.models.article_category import ArticleCategory
from linkku.models.category import Category
from linkku.models.detail_linktree import DetailLinktree
from linkku.services.linktree_service import LinktreeService
from linkku.utils.slug import SlugGenerator
from linkku.utils.validators import InputValidator

logger = logging.getLogger(__name__)


class CategoryService:
    """Platform-wide link categories."""

    @staticmethod
    def _name_taken(name: str, exclude_id: Optional[str] = None) -> bool:
        query = Category.query.filter(func.lower(Category.name) == name.lower())
        if exclude_id:
            query = query.filter(Category.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def list_categories() -> List[Category]:
        return Category.query.order_by(Category.name.asc()).all()

    @staticmethod
    def get_category(category_id: str) -> Category:
        category = db.session.get(Category, category_id)
        if not category:
            raise NotFound("Category not found")
        return category

    @staticmethod
    def create_category(data: dict) -> Category:
        errors = {}

        is_valid, name, error = InputValidator.validate_text(data.get("name"), "Name", max_length=50)
        if not is_valid:
            errors["name"] = error

        is_valid, icon, error = InputValidator.validate_text(data.get("icon"), "Icon", max_length=255, required=False)
        if not is_valid:
            errors["icon"] = error

        if errors:
            raise ValidationFailed(errors)

        if CategoryService._name_taken(name):
            raise Conflict("Category name already exists")

        category = Category(
            name=name,
            slug=SlugGenerator.allocate(Category, name),
            icon=icon,
        )
        db.session.add(category)
        db.session.commit()

        logger.info(f"Category created: {category.slug}")
        return category

    @staticmethod
    def update_category(category_id: str, data: dict) -> Category:
        category = CategoryService.get_category(category_id)
        errors = {}

        if "name" in data:
            is_valid, name, error = InputValidator.validate_text(data.get("name"), "Name", max_length=50)
            if not is_valid:
                errors["name"] = error
            elif name != category.name:
                if CategoryService._name_taken(name, exclude_id=category.id):
                    raise Conflict("Category name already exists")
                category.name = name
                category.slug = SlugGenerator.allocate(Category, name, exclude_id=category.id)

        if "icon" in data:
            is_valid, icon, error = InputValidator.validate_text(data.get("icon"), "Icon", max_length=255, required=False)
            if is_valid:
                category.icon = icon
            else:
                errors["icon"] = error

        if errors:
            db.session.rollback()
            raise ValidationFailed(errors)

        db.session.commit()
        LinktreeService.invalidate_caches(LinktreeService.slugs_using_category(category.id))
        return category

    @staticmethod
    def delete_category(category_id: str) -> None:
        category = CategoryService.get_category(category_id)

        link_count = DetailLinktree.query.filter_by(category_id=category.id).count()
        if link_count > 0:
            raise Conflict(
                f"Cannot delete category that is used by {link_count} link(s)",
                "CATEGORY_IN_USE",
            )

        db.session.delete(category)
        db.session.commit()
        logger.info(f"Category deleted: {category_id}")

    @staticmethod
    def get_category_links(category_id: str) -> dict:
        category = CategoryService.get_category(category_id)

        links = (
            DetailLinktree.query
            .filter_by(category_id=category.id)
            .order_by(DetailLinktree.created_at.desc())
            .all()
        )

        result = []
        for link in links:
            data = link.to_dict()
            data["linktree"] = {
                "id": link.linktree.id,
                "title": link.linktree.title,
                "slug": link.linktree.slug,
                "user": {
                    "id": link.linktree.user.id,
                    "name": link.linktree.user.name,
                    "email": link.linktree.user.email,
                },
            }
            result.append(data)

        return {"category": category.to_dict(include_counts=True), "links": result}


class ArticleCategoryService:
    """Categories for CMS articles."""

    @staticmethod
    def _validate(data: dict, partial: bool = False) -> dict:
        errors = {}
        cleaned = {}

        if not partial or "name" in data:
            is_valid, name, error = InputValidator.validate_text(data.get("name"), "Name", max_length=50)
            if is_valid:
                cleaned["name"] = name
            else:
                errors["name"] = error

        if "description" in data:
            is_valid, value, error = InputValidator.validate_text(
                data.get("description"), "Description", max_length=500, required=False
            )
            if is_valid:
                cleaned["description"] = value
            else:
                errors["description"] = error

        if "icon" in data:
            is_valid, value, error = InputValidator.validate_text(data.get("icon"), "Icon", max_length=255, required=False)
            if is_valid:
                cleaned["icon"] = value
            else:
                errors["icon"] = error

        if "color" in data:
            is_valid, value, error = InputValidator.validate_color(data.get("color"))
            if is_valid:
                cleaned["color"] = value
            else:
                errors["color"] = error

        if errors:
            raise ValidationFailed(errors)

        return cleaned

    @staticmethod
    def _name_taken(name: str, exclude_id: Optional[str] = None) -> bool:
        query = ArticleCategory.query.filter(func.lower(ArticleCategory.name) == name.lower())
        if exclude_id:
            query = query.filter(ArticleCategory.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def get(category_id: str) -> ArticleCategory:
        category = db.session.get(ArticleCategory, category_id)
        if not category:
            raise NotFound("Article category not found")
        return category

    @staticmethod
    def list_with_counts(published_only: bool = False) -> List[dict]:
        count_query = db.session.query(Article.category_id, func.count(Article.id))
        if published_only:
            count_query = count_query.filter(Article.status == ArticleStatus.PUBLISHED)
        counts = dict(count_query.group_by(Article.category_id).all())

        categories = ArticleCategory.query.order_by(ArticleCategory.name.asc()).all()
        return [c.to_dict(article_count=counts.get(c.id, 0)) for c in categories]

    @staticmethod
    def create(data: dict) -> ArticleCategory:
        cleaned = ArticleCategoryService._validate(data)

        if ArticleCategoryService._name_taken(cleaned["name"]):
            raise Conflict("Article category name already exists")

        category = ArticleCategory(
            name=cleaned["name"],
            slug=SlugGenerator.allocate(ArticleCategory, cleaned["name"]),
            description=cleaned.get("description"),
            icon=cleaned.get("icon"),
            color=cleaned.get("color"),
        )
        db.session.add(category)
        db.session.commit()

        logger.info(f"Article category created: {category.slug}")
        return category

    @staticmethod
    def update(category_id: str, data: dict) -> ArticleCategory:
        category = ArticleCategoryService.get(category_id)
        cleaned = ArticleCategoryService._validate(data, partial=True)

        if "name" in cleaned and cleaned["name"] != category.name:
            if ArticleCategoryService._name_taken(cleaned["name"], exclude_id=category.id):
                raise Conflict("Article category name already exists")
            category.name = cleaned["name"]
            category.slug = SlugGenerator.allocate(ArticleCategory, cleaned["name"], exclude_id=category.id)

        for field in ("description", "icon", "color"):
            if field in cleaned:
                setattr(category, field, cleaned[field])

        db.session.commit()
        return category

    @staticmethod
    def delete(category_id: str) -> None:
        category = ArticleCategoryService.get(category_id)

        article_count = Article.query.filter_by(category_id=category.id).count()
        if article_count > 0:
            raise Conflict(
                f"Cannot delete category that is used by {article_count} article(s)",
                "CATEGORY_IN_USE",
            )

        db.session.delete(category)
        db.session.commit()
        logger.info(f"Article category deleted: {category_id}")

    @staticmethod
    def get_articles(category_id: str) -> dict:
        category = ArticleCategoryService.get(category_id)
        articles = (
            Article.query
            .filter_by(category_id=category.id)
            .order_by(Article.created_at.desc())
            .all()
        )
        return {
            "category": category.to_dict(article_count=len(articles)),
            "articles": [a.to_dict(include_content=False) for a in articles],
        }
