# server/linkku/models/linktree.py

import uuid
from typing import Optional

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class Linktree(db.Model):
    __tablename__ = "linktrees"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    photo = db.Column(db.String(512), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = db.relationship("User", back_populates="linktrees")
    links = db.relationship(
        "DetailLinktree",
        back_populates="linktree",
        lazy="dynamic",
        cascade="all, delete-orphan",
        order_by="DetailLinktree.sort_order",
    )
    views = db.relationship("LinktreeView", back_populates="linktree", lazy="dynamic", cascade="all, delete-orphan")

    def __init__(
        self,
        user_id: str,
        title: str,
        slug: str,
        photo: Optional[str] = None,
        is_active: bool = True,
    ):
        self.user_id = user_id
        self.title = title
        self.slug = slug
        self.photo = photo
        self.is_active = is_active

    def to_dict(self, include_links: bool = False, visible_only: bool = False) -> dict:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "slug": self.slug,
            "photo": self.photo,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_links:
            from linkku.models.detail_linktree import DetailLinktree

            query = self.links
            if visible_only:
                query = query.filter(DetailLinktree.is_visible.is_(True))
            data["detailLinktrees"] = [link.to_dict(include_category=True) for link in query.all()]

        return data

    def __repr__(self) -> str:
        return f"<Linktree {self.slug}>"
