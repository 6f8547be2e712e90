# server/linkku/models/article.py

import enum
import uuid
from typing import List, Optional

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class ArticleStatus(enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Article(db.Model):
    __tablename__ = "articles"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    author_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = db.Column(db.String(36), db.ForeignKey("article_categories.id"), nullable=True, index=True)

    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.String(300), nullable=True)
    featured_image = db.Column(db.String(512), nullable=True)

    status = db.Column(db.Enum(ArticleStatus), nullable=False, default=ArticleStatus.DRAFT, index=True)
    reading_time = db.Column(db.Integer, default=0, nullable=False)
    tags = db.Column(db.JSON, nullable=True)
    is_featured = db.Column(db.Boolean, default=False, nullable=False, index=True)
    view_count = db.Column(db.Integer, default=0, nullable=False)

    # SEO
    meta_title = db.Column(db.String(60), nullable=True)
    meta_description = db.Column(db.String(160), nullable=True)

    published_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    author = db.relationship("User", back_populates="articles")
    category = db.relationship("ArticleCategory", back_populates="articles")
    views = db.relationship("ArticleView", back_populates="article", lazy="dynamic", cascade="all, delete-orphan")

    def __init__(
        self,
        author_id: str,
        title: str,
        slug: str,
        content: str,
        excerpt: Optional[str] = None,
        featured_image: Optional[str] = None,
        category_id: Optional[str] = None,
        status: ArticleStatus = ArticleStatus.DRAFT,
        reading_time: int = 0,
        tags: Optional[List[str]] = None,
        is_featured: bool = False,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None,
    ):
        self.author_id = author_id
        self.title = title
        self.slug = slug
        self.content = content
        self.excerpt = excerpt
        self.featured_image = featured_image
        self.category_id = category_id
        self.status = status
        self.reading_time = reading_time
        self.tags = tags or []
        self.is_featured = is_featured
        self.view_count = 0
        self.meta_title = meta_title
        self.meta_description = meta_description

        if status == ArticleStatus.PUBLISHED:
            self.published_at = utcnow()

    def to_dict(self, include_content: bool = True) -> dict:
        data = {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "featuredImage": self.featured_image,
            "status": self.status.value,
            "readingTime": self.reading_time,
            "tags": self.tags or [],
            "isFeatured": self.is_featured,
            "viewCount": self.view_count,
            "metaTitle": self.meta_title,
            "metaDescription": self.meta_description,
            "publishedAt": self.published_at.isoformat() if self.published_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "author": {
                "id": self.author.id,
                "name": self.author.name,
            } if self.author else None,
            "category": {
                "id": self.category.id,
                "name": self.category.name,
                "slug": self.category.slug,
                "color": self.category.color,
                "icon": self.category.icon,
            } if self.category else None,
        }

        if include_content:
            data["content"] = self.content

        return data

    def __repr__(self) -> str:
        return f"<Article {self.slug}>"
