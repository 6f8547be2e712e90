# server/linkku/models/category.py

import uuid

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = db.Column(db.String(50), unique=True, nullable=False)
    slug = db.Column(db.String(60), unique=True, nullable=False, index=True)
    icon = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    links = db.relationship("DetailLinktree", back_populates="category", lazy="dynamic")

    def __init__(self, name: str, slug: str, icon: str = None):
        self.name = name
        self.slug = slug.lower()
        self.icon = icon

    def to_dict(self, include_counts: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "icon": self.icon,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

        if include_counts:
            data["_count"] = {"detailLinktrees": self.links.count()}

        return data

    def __repr__(self) -> str:
        return f"<Category {self.name}>"
