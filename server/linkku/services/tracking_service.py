# server/linkku/services/tracking_service.py

import logging
from datetime import datetime
from typing import Optional

from flask import Request
from user_agents import parse as parse_user_agent

from linkku.errors import NotFound, ValidationFailed
from linkku.extensions import db
from linkku.models.article import Article, ArticleStatus
from linkku.models.detail_linktree import DetailLinktree
from linkku.models.events import ArticleView, LinkClick, LinktreeView
from linkku.models.linktree import Linktree
from linkku.utils.helpers import local_day_bounds, to_utc_naive, utcnow

logger = logging.getLogger(__name__)


class TrackingService:

    @staticmethod
    def get_client_ip(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first[:64]

        real_ip = request.headers.get("X-Real-IP")
        if real_ip and real_ip.strip():
            return real_ip.strip()[:64]

        return (request.remote_addr or "unknown")[:64]

    @staticmethod
    def describe_user_agent(user_agent_str: Optional[str]) -> dict:
        device_type = None
        browser = None
        os = None

        if user_agent_str:
            ua = parse_user_agent(user_agent_str)

            if ua.is_bot:
                device_type = "Bot"
            elif ua.is_mobile:
                device_type = "Mobile"
            elif ua.is_tablet:
                device_type = "Tablet"
            elif ua.is_pc:
                device_type = "Desktop"
            else:
                device_type = "Other"

            browser = ua.browser.family[:50] if ua.browser.family else None
            os = ua.os.family[:50] if ua.os.family else None

        return {"device_type": device_type, "browser": browser, "os": os}

    @staticmethod
    def parse_request(request: Request, body: dict) -> dict:
        # Body wins over the header so the page can forward the visitor's agent
        user_agent_str = body.get("userAgent") or request.headers.get("User-Agent") or ""
        if not isinstance(user_agent_str, str):
            user_agent_str = ""
        referrer = body.get("referrer") or request.headers.get("Referer") or ""
        if not isinstance(referrer, str):
            referrer = ""

        data = {
            "ip_address": TrackingService.get_client_ip(request),
            "user_agent": user_agent_str[:512] or None,
            "referrer": referrer[:512] or None,
        }
        data.update(TrackingService.describe_user_agent(user_agent_str))
        return data

    @staticmethod
    def record_linktree_view(slug: str, request_data: dict) -> LinktreeView:
        if not slug or not isinstance(slug, str):
            raise ValidationFailed({"slug": "Slug is required"})

        linktree = Linktree.query.filter_by(slug=slug, is_active=True).first()
        if not linktree:
            raise NotFound("Linktree not found")

        view = LinktreeView(
            linktree_id=linktree.id,
            ip_address=request_data.get("ip_address"),
            user_agent=request_data.get("user_agent"),
            device_type=request_data.get("device_type"),
            browser=request_data.get("browser"),
            os=request_data.get("os"),
        )
        db.session.add(view)
        db.session.commit()
        return view

    @staticmethod
    def record_link_click(link_id: str, request_data: dict) -> LinkClick:
        if not link_id or not isinstance(link_id, str):
            raise ValidationFailed({"linkId": "Link ID is required"})

        link = (
            DetailLinktree.query
            .join(Linktree, DetailLinktree.linktree_id == Linktree.id)
            .filter(
                DetailLinktree.id == link_id,
                DetailLinktree.is_visible.is_(True),
                Linktree.is_active.is_(True),
            )
            .first()
        )
        if not link:
            raise NotFound("Link not found")

        click = LinkClick(
            detail_linktree_id=link.id,
            ip_address=request_data.get("ip_address"),
            user_agent=request_data.get("user_agent"),
            referrer=request_data.get("referrer"),
            device_type=request_data.get("device_type"),
            browser=request_data.get("browser"),
            os=request_data.get("os"),
        )
        db.session.add(click)
        db.session.commit()
        return click

    @staticmethod
    def record_article_view(slug: str, request_data: dict, now: Optional[datetime] = None) -> dict:
        """Count at most one view per (article, IP) per server-local calendar day.

        `now` defaults to the current time; a naive value is read as local time.
        """
        article = Article.query.filter_by(slug=slug, status=ArticleStatus.PUBLISHED).first()
        if not article:
            raise NotFound("Article not found")

        ip_address = request_data.get("ip_address") or "unknown"
        day_start, day_end = local_day_bounds(now)

        already_viewed = (
            db.session.query(ArticleView.id)
            .filter(
                ArticleView.article_id == article.id,
                ArticleView.ip_address == ip_address,
                ArticleView.created_at >= day_start,
                ArticleView.created_at < day_end,
            )
            .first()
        )

        if already_viewed:
            return {"tracked": False, "newViewCount": article.view_count}

        db.session.add(ArticleView(
            article_id=article.id,
            ip_address=ip_address,
            user_agent=request_data.get("user_agent"),
            created_at=to_utc_naive(now) if now else utcnow(),
        ))
        # Increment in SQL so concurrent views do not overwrite each other
        Article.query.filter_by(id=article.id).update(
            {Article.view_count: Article.view_count + 1},
            synchronize_session=False,
        )
        db.session.commit()

        db.session.refresh(article)
        return {"tracked": True, "newViewCount": article.view_count}
