# server/linkku/models/article_category.py

import uuid

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class ArticleCategory(db.Model):
    __tablename__ = "article_categories"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = db.Column(db.String(50), unique=True, nullable=False)
    slug = db.Column(db.String(60), unique=True, nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    icon = db.Column(db.String(255), nullable=True)
    color = db.Column(db.String(7), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    articles = db.relationship("Article", back_populates="category", lazy="dynamic")

    def __init__(
        self,
        name: str,
        slug: str,
        description: str = None,
        icon: str = None,
        color: str = None,
    ):
        self.name = name
        self.slug = slug.lower()
        self.description = description
        self.icon = icon
        self.color = color

    def to_dict(self, article_count: int = None) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if article_count is not None:
            data["articleCount"] = article_count

        return data

    def __repr__(self) -> str:
        return f"<ArticleCategory {self.slug}>"
