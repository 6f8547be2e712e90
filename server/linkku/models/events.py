# server/linkku/models/events.py
#
# Append-only analytics records. Rows are never updated after insert.

import uuid
from datetime import datetime
from typing import Optional

from linkku.extensions import db
from linkku.utils.helpers import utcnow, extract_domain


class LinktreeView(db.Model):
    __tablename__ = "linktree_views"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    linktree_id = db.Column(db.String(36), db.ForeignKey("linktrees.id", ondelete="CASCADE"), nullable=False, index=True)

    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)
    device_type = db.Column(db.String(20), nullable=True)
    browser = db.Column(db.String(50), nullable=True)
    os = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    linktree = db.relationship("Linktree", back_populates="views")

    __table_args__ = (
        db.Index("idx_linktree_view_date", "linktree_id", "created_at"),
    )

    def __init__(self, linktree_id: str, ip_address: Optional[str] = None, user_agent: Optional[str] = None,
                 created_at: Optional[datetime] = None, **kwargs):
        self.linktree_id = linktree_id
        self.ip_address = ip_address
        self.user_agent = user_agent
        if created_at:
            self.created_at = created_at

        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "linktreeId": self.linktree_id,
            "deviceType": self.device_type,
            "browser": self.browser,
            "os": self.os,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<LinktreeView {self.linktree_id[:8]}>"


class ArticleView(db.Model):
    __tablename__ = "article_views"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    article_id = db.Column(db.String(36), db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True)

    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    article = db.relationship("Article", back_populates="views")

    __table_args__ = (
        db.Index("idx_article_view_dedup", "article_id", "ip_address", "created_at"),
    )

    def __init__(self, article_id: str, ip_address: Optional[str] = None, user_agent: Optional[str] = None,
                 created_at: Optional[datetime] = None):
        self.article_id = article_id
        self.ip_address = ip_address
        self.user_agent = user_agent
        if created_at:
            self.created_at = created_at

    def __repr__(self) -> str:
        return f"<ArticleView {self.article_id[:8]}>"


class LinkClick(db.Model):
    __tablename__ = "link_clicks"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    detail_linktree_id = db.Column(
        db.String(36), db.ForeignKey("detail_linktrees.id", ondelete="CASCADE"), nullable=False, index=True
    )

    ip_address = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)
    referrer = db.Column(db.String(512), nullable=True)
    referrer_domain = db.Column(db.String(255), nullable=True, index=True)
    device_type = db.Column(db.String(20), nullable=True)
    browser = db.Column(db.String(50), nullable=True)
    os = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    link = db.relationship("DetailLinktree", back_populates="clicks")

    __table_args__ = (
        db.Index("idx_click_link_date", "detail_linktree_id", "created_at"),
    )

    def __init__(
        self,
        detail_linktree_id: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
        created_at: Optional[datetime] = None,
        **kwargs
    ):
        self.detail_linktree_id = detail_linktree_id
        self.ip_address = ip_address
        self.user_agent = user_agent
        self.referrer = referrer
        if created_at:
            self.created_at = created_at

        if referrer:
            self.referrer_domain = extract_domain(referrer) or None

        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "linkId": self.detail_linktree_id,
            "referrerDomain": self.referrer_domain,
            "deviceType": self.device_type,
            "browser": self.browser,
            "os": self.os,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<LinkClick {self.detail_linktree_id[:8]}>"
