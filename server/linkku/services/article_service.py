# server/linkku/services/article_service.py

import logging
from typing import Optional

from sqlalchemy import func, or_

from linkku.errors import NotFound, ValidationFailed
from linkku.extensions import db
from linkku.models.article import Article, ArticleStatus
from linkku.models.article_category import ArticleCategory
from linkku.models.user import User
from linkku.utils.helpers import calculate_reading_time, make_excerpt, parse_bool, utcnow
from linkku.utils.slug import SlugGenerator
from linkku.utils.validators import InputValidator

logger = logging.getLogger(__name__)

RELATED_ARTICLES_LIMIT = 3


def _pagination_dict(pagination) -> dict:
    return {
        "currentPage": pagination.page,
        "totalPages": pagination.pages,
        "totalArticles": pagination.total,
        "hasNextPage": pagination.has_next,
        "hasPrevPage": pagination.has_prev,
    }


class ArticleService:

    @staticmethod
    def _validate(data: dict, partial: bool = False) -> dict:
        """Validate an article payload, collecting one message per field."""
        errors = {}
        cleaned = {}

        text_fields = (
            ("title", "Title", 200, True),
            ("excerpt", "Excerpt", 300, False),
            ("metaTitle", "Meta title", 60, False),
            ("metaDescription", "Meta description", 160, False),
        )
        for key, label, max_length, required in text_fields:
            if not partial or key in data:
                is_valid, value, error = InputValidator.validate_text(
                    data.get(key), label, max_length=max_length, required=required
                )
                if is_valid:
                    cleaned[key] = value
                else:
                    errors[key] = error

        if not partial or "content" in data:
            content = data.get("content")
            if not isinstance(content, str) or not content.strip():
                errors["content"] = "Content is required"
            else:
                cleaned["content"] = content

        if "featuredImage" in data:
            is_valid, value, error = InputValidator.validate_image_path(data.get("featuredImage"), "Featured image")
            if is_valid:
                cleaned["featuredImage"] = value
            else:
                errors["featuredImage"] = error

        if "categoryId" in data:
            category_id = data.get("categoryId") or None
            if category_id and not db.session.get(ArticleCategory, category_id):
                errors["categoryId"] = "Article category not found"
            else:
                cleaned["categoryId"] = category_id

        if "status" in data:
            try:
                cleaned["status"] = ArticleStatus(str(data.get("status")).upper())
            except ValueError:
                errors["status"] = "Status must be one of DRAFT, PUBLISHED, ARCHIVED"

        if "tags" in data:
            is_valid, tags, error = InputValidator.validate_tags(data.get("tags"))
            if is_valid:
                cleaned["tags"] = tags
            else:
                errors["tags"] = error

        if "isFeatured" in data:
            value = parse_bool(data.get("isFeatured"))
            if value is None:
                errors["isFeatured"] = "isFeatured must be a boolean"
            else:
                cleaned["isFeatured"] = value

        if errors:
            raise ValidationFailed(errors)

        return cleaned

    @staticmethod
    def get(article_id: str) -> Article:
        article = db.session.get(Article, article_id)
        if not article:
            raise NotFound("Article not found")
        return article

    @staticmethod
    def create(author: User, data: dict) -> Article:
        cleaned = ArticleService._validate(data)

        title = cleaned["title"]
        content = cleaned["content"]
        excerpt = cleaned.get("excerpt") or make_excerpt(content)

        article = Article(
            author_id=author.id,
            title=title,
            slug=SlugGenerator.allocate(Article, title),
            content=content,
            excerpt=excerpt,
            featured_image=cleaned.get("featuredImage"),
            category_id=cleaned.get("categoryId"),
            status=cleaned.get("status", ArticleStatus.DRAFT),
            reading_time=calculate_reading_time(content),
            tags=cleaned.get("tags"),
            is_featured=cleaned.get("isFeatured", False),
            meta_title=cleaned.get("metaTitle") or title[:60],
            meta_description=cleaned.get("metaDescription") or excerpt[:160],
        )
        db.session.add(article)
        db.session.commit()

        logger.info(f"Article created: {article.slug} by {author.id}")
        return article

    @staticmethod
    def update(article_id: str, data: dict) -> Article:
        article = ArticleService.get(article_id)
        cleaned = ArticleService._validate(data, partial=True)

        if "title" in cleaned and cleaned["title"] != article.title:
            article.title = cleaned["title"]
            article.slug = SlugGenerator.allocate(Article, cleaned["title"], exclude_id=article.id)

        if "content" in cleaned and cleaned["content"] != article.content:
            article.content = cleaned["content"]
            article.reading_time = calculate_reading_time(article.content)
            if not cleaned.get("excerpt"):
                article.excerpt = make_excerpt(article.content)

        if cleaned.get("excerpt"):
            article.excerpt = cleaned["excerpt"]

        if "status" in cleaned:
            if cleaned["status"] == ArticleStatus.PUBLISHED and article.status != ArticleStatus.PUBLISHED:
                article.published_at = utcnow()
            article.status = cleaned["status"]

        field_map = {
            "featuredImage": "featured_image",
            "categoryId": "category_id",
            "tags": "tags",
            "isFeatured": "is_featured",
            "metaTitle": "meta_title",
            "metaDescription": "meta_description",
        }
        for key, attr in field_map.items():
            if key in cleaned:
                setattr(article, attr, cleaned[key])

        db.session.commit()
        logger.info(f"Article updated: {article.slug}")
        return article

    @staticmethod
    def delete(article_id: str) -> None:
        article = ArticleService.get(article_id)
        db.session.delete(article)
        db.session.commit()
        logger.info(f"Article deleted: {article_id}")

    @staticmethod
    def list_admin(
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> dict:
        query = Article.query

        if status and status.upper() != "ALL":
            try:
                query = query.filter(Article.status == ArticleStatus(status.upper()))
            except ValueError:
                raise ValidationFailed({"status": "Status must be one of ALL, DRAFT, PUBLISHED, ARCHIVED"})

        if category and category.lower() != "all":
            query = query.outerjoin(ArticleCategory, Article.category_id == ArticleCategory.id).filter(
                or_(Article.category_id == category, ArticleCategory.slug == category)
            )

        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(or_(
                func.lower(Article.title).like(pattern),
                func.lower(Article.content).like(pattern),
            ))

        pagination = query.order_by(Article.created_at.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

        return {
            "articles": [a.to_dict(include_content=False) for a in pagination.items],
            "pagination": _pagination_dict(pagination),
        }

    @staticmethod
    def list_published(
        page: int = 1,
        limit: int = 6,
        category: Optional[str] = None,
        featured: Optional[bool] = None,
    ) -> dict:
        query = Article.query.filter(Article.status == ArticleStatus.PUBLISHED)

        if category and category.lower() != "all":
            query = query.join(ArticleCategory, Article.category_id == ArticleCategory.id).filter(
                ArticleCategory.slug == category
            )

        if featured is not None:
            query = query.filter(Article.is_featured.is_(featured))

        query = query.order_by(
            Article.is_featured.desc(),
            Article.published_at.desc(),
            Article.created_at.desc(),
        )
        pagination = query.paginate(page=page, per_page=limit, error_out=False)

        return {
            "articles": [a.to_dict(include_content=False) for a in pagination.items],
            "pagination": _pagination_dict(pagination),
        }

    @staticmethod
    def get_published(slug: str) -> dict:
        article = Article.query.filter_by(slug=slug, status=ArticleStatus.PUBLISHED).first()
        if not article:
            raise NotFound("Article not found")

        related = []
        if article.category_id:
            related = (
                Article.query
                .filter(
                    Article.category_id == article.category_id,
                    Article.status == ArticleStatus.PUBLISHED,
                    Article.id != article.id,
                )
                .order_by(Article.published_at.desc())
                .limit(RELATED_ARTICLES_LIMIT)
                .all()
            )

        return {
            "article": article.to_dict(),
            "relatedArticles": [a.to_dict(include_content=False) for a in related],
        }

    @staticmethod
    def get_stats() -> dict:
        counts = dict(
            db.session.query(Article.status, func.count(Article.id)).group_by(Article.status).all()
        )
        total_views = db.session.query(func.coalesce(func.sum(Article.view_count), 0)).scalar()

        return {
            "total": sum(counts.values()),
            "published": counts.get(ArticleStatus.PUBLISHED, 0),
            "draft": counts.get(ArticleStatus.DRAFT, 0),
            "archived": counts.get(ArticleStatus.ARCHIVED, 0),
            "totalViews": int(total_views or 0),
        }
