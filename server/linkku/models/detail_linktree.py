# server/linkku/models/detail_linktree.py

import uuid

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class DetailLinktree(db.Model):
    __tablename__ = "detail_linktrees"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    linktree_id = db.Column(db.String(36), db.ForeignKey("linktrees.id", ondelete="CASCADE"), nullable=False, index=True)
    # Deletion is guarded by a reference count in CategoryService
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=False, index=True)

    title = db.Column(db.String(100), nullable=False)
    url = db.Column(db.Text, nullable=False)
    sort_order = db.Column(db.Integer, default=0, nullable=False)
    is_visible = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    linktree = db.relationship("Linktree", back_populates="links")
    category = db.relationship("Category", back_populates="links")
    clicks = db.relationship("LinkClick", back_populates="link", lazy="dynamic", cascade="all, delete-orphan")

    __table_args__ = (
        db.Index("idx_detail_linktree_order", "linktree_id", "sort_order"),
    )

    def __init__(
        self,
        linktree_id: str,
        category_id: str,
        title: str,
        url: str,
        sort_order: int = 0,
        is_visible: bool = True,
    ):
        self.linktree_id = linktree_id
        self.category_id = category_id
        self.title = title
        self.url = url
        self.sort_order = sort_order
        self.is_visible = is_visible

    def to_dict(self, include_category: bool = False) -> dict:
        data = {
            "id": self.id,
            "linktreeId": self.linktree_id,
            "categoryId": self.category_id,
            "title": self.title,
            "url": self.url,
            "sortOrder": self.sort_order,
            "isVisible": self.is_visible,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_category:
            data["category"] = self.category.to_dict() if self.category else None

        return data

    def __repr__(self) -> str:
        return f"<DetailLinktree {self.title} #{self.sort_order}>"
