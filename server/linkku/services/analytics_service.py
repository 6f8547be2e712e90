# server/linkku/services/analytics_service.py

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func

from linkku.extensions import db
from linkku.models.article import Article, ArticleStatus
from linkku.models.category import Category
from linkku.models.detail_linktree import DetailLinktree
from linkku.models.events import LinkClick, LinktreeView
from linkku.models.linktree import Linktree
from linkku.models.user import User, UserRole
from linkku.utils.helpers import local_day_bounds, percentage, ratio, to_utc_naive, utcnow
from linkku.utils.permissions import can

logger = logging.getLogger(__name__)

TOP_LIMIT = 5
RECENT_ACTIVITY_LIMIT = 10


class AnalyticsService:

    @staticmethod
    def dashboard_stats(actor: User, now: Optional[datetime] = None) -> dict:
        now = to_utc_naive(now) if now else utcnow()
        week_ago = now - timedelta(days=7)
        two_weeks_ago = now - timedelta(days=14)

        total_users = User.query.count()
        total_categories = Category.query.count()
        total_linktrees = Linktree.query.count()
        total_links = DetailLinktree.query.count()

        recent_users = User.query.filter(User.created_at >= week_ago).count()
        previous_users = User.query.filter(
            User.created_at >= two_weeks_ago, User.created_at < week_ago
        ).count()
        recent_linktrees = Linktree.query.filter(Linktree.created_at >= week_ago).count()

        if previous_users:
            growth_rate = percentage(recent_users - previous_users, previous_users)
        else:
            growth_rate = 100.0 if recent_users else 0.0

        users_with_linktree = db.session.query(func.count(func.distinct(Linktree.user_id))).scalar() or 0

        popular = (
            db.session.query(Category, func.count(DetailLinktree.id).label("link_count"))
            .outerjoin(DetailLinktree, DetailLinktree.category_id == Category.id)
            .group_by(Category.id)
            .order_by(func.count(DetailLinktree.id).desc(), Category.name.asc())
            .limit(TOP_LIMIT)
            .all()
        )

        data = {
            "totalUsers": total_users,
            "totalCategories": total_categories,
            "totalLinktrees": total_linktrees,
            "totalLinks": total_links,
            "recentUsers": recent_users,
            "recentLinktrees": recent_linktrees,
            "userGrowthRate": growth_rate,
            "popularCategories": [
                {"id": c.id, "name": c.name, "icon": c.icon, "linkCount": count}
                for c, count in popular
            ],
            "linktreesPerUser": ratio(total_linktrees, total_users),
            "linksPerLinktree": ratio(total_links, total_linktrees),
            "activeUsersPercentage": percentage(users_with_linktree, total_users),
        }

        if can(actor.role, "analytics", "cross_role"):
            counts = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
            data["usersByRole"] = {role.value: counts.get(role, 0) for role in UserRole}

        return data

    @staticmethod
    def platform_analytics() -> dict:
        top_linktrees = (
            db.session.query(Linktree, func.count(LinktreeView.id).label("views"))
            .outerjoin(LinktreeView, LinktreeView.linktree_id == Linktree.id)
            .group_by(Linktree.id)
            .order_by(func.count(LinktreeView.id).desc(), Linktree.created_at.desc())
            .limit(TOP_LIMIT)
            .all()
        )

        top_articles = (
            Article.query
            .order_by(Article.view_count.desc(), Article.created_at.desc())
            .limit(TOP_LIMIT)
            .all()
        )

        return {
            "totalUsers": User.query.count(),
            "totalLinktrees": Linktree.query.count(),
            "totalArticles": Article.query.count(),
            "totalViews": LinktreeView.query.count(),
            "topLinktrees": [
                {
                    "id": lt.id,
                    "title": lt.title,
                    "slug": lt.slug,
                    "views": views,
                    "user": {"name": lt.user.name, "email": lt.user.email} if lt.user else None,
                }
                for lt, views in top_linktrees
            ],
            "topArticles": [
                {"id": a.id, "title": a.title, "slug": a.slug, "viewCount": a.view_count}
                for a in top_articles
            ],
            "recentActivity": AnalyticsService.recent_activity(),
        }

    @staticmethod
    def recent_activity(limit: int = RECENT_ACTIVITY_LIMIT) -> list:
        linktrees = Linktree.query.order_by(Linktree.created_at.desc()).limit(limit).all()
        articles = (
            Article.query
            .filter(Article.status == ArticleStatus.PUBLISHED, Article.published_at.isnot(None))
            .order_by(Article.published_at.desc())
            .limit(limit)
            .all()
        )

        events = [
            {
                "type": "linktree_created",
                "title": lt.title,
                "slug": lt.slug,
                "user": lt.user.name if lt.user else None,
                "timestamp": lt.created_at,
            }
            for lt in linktrees
        ] + [
            {
                "type": "article_published",
                "title": a.title,
                "slug": a.slug,
                "user": a.author.name if a.author else None,
                "timestamp": a.published_at,
            }
            for a in articles
        ]

        events.sort(key=lambda e: e["timestamp"], reverse=True)
        for event in events:
            event["timestamp"] = event["timestamp"].isoformat()

        return events[:limit]

    @staticmethod
    def linktree_stats(user: User, now: Optional[datetime] = None) -> dict:
        linktree = Linktree.query.filter_by(user_id=user.id).first()
        if not linktree:
            return {
                "linktree": None,
                "profileViews": 0,
                "totalClicks": 0,
                "todayViews": 0,
                "weeklyViews": 0,
                "topLinks": [],
            }

        day_start, day_end = local_day_bounds(now)
        week_start = (to_utc_naive(now) if now else utcnow()) - timedelta(days=7)

        views = LinktreeView.query.filter_by(linktree_id=linktree.id)

        top_links = (
            db.session.query(DetailLinktree, func.count(LinkClick.id).label("clicks"))
            .outerjoin(LinkClick, LinkClick.detail_linktree_id == DetailLinktree.id)
            .filter(DetailLinktree.linktree_id == linktree.id)
            .group_by(DetailLinktree.id)
            .order_by(func.count(LinkClick.id).desc(), DetailLinktree.sort_order.asc())
            .limit(TOP_LIMIT)
            .all()
        )

        total_clicks = (
            db.session.query(func.count(LinkClick.id))
            .join(DetailLinktree, LinkClick.detail_linktree_id == DetailLinktree.id)
            .filter(DetailLinktree.linktree_id == linktree.id)
            .scalar()
        ) or 0

        return {
            "linktree": {"id": linktree.id, "title": linktree.title, "slug": linktree.slug},
            "profileViews": views.count(),
            "totalClicks": total_clicks,
            "todayViews": views.filter(
                LinktreeView.created_at >= day_start, LinktreeView.created_at < day_end
            ).count(),
            "weeklyViews": views.filter(LinktreeView.created_at >= week_start).count(),
            "topLinks": [
                {"id": link.id, "title": link.title, "url": link.url, "clicks": clicks}
                for link, clicks in top_links
            ],
        }
