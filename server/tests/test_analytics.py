"""Tests for the admin dashboard and platform analytics."""

from datetime import datetime, timedelta, timezone

import pytest

from linkku.extensions import db
from linkku.models import Article, ArticleStatus, LinktreeView, User
from linkku.services.analytics_service import AnalyticsService

NOW = datetime(2030, 1, 15, 12, 0, tzinfo=timezone.utc)


def _signups(days_ago_list):
    for index, days_ago in enumerate(days_ago_list):
        user = User(email=f"signup{index}@example.com", password="secret123", name=f"Signup {index}")
        user.created_at = (NOW - timedelta(days=days_ago)).replace(tzinfo=None)
        db.session.add(user)
    db.session.commit()


# =============================================================================
# User growth
# =============================================================================


@pytest.mark.parametrize(
    "days_ago, expected_recent, expected_rate",
    [
        ([], 0, 0.0),
        ([1, 3], 2, 100.0),
        ([1, 2, 3, 9, 10], 3, 50.0),
        ([2, 8, 9, 10, 11], 1, -75.0),
    ],
)
def test_user_growth_rate(admin, days_ago, expected_recent, expected_rate):
    """Growth compares the last seven days with the seven before."""
    _signups(days_ago)

    data = AnalyticsService.dashboard_stats(admin, now=NOW)

    assert data["recentUsers"] == expected_recent
    assert data["userGrowthRate"] == expected_rate


# =============================================================================
# Platform analytics
# =============================================================================


@pytest.fixture
def activity(admin, linktree, other_linktree):
    linktree.created_at = datetime(2030, 1, 1)
    other_linktree.created_at = datetime(2030, 1, 3)

    db.session.add_all([LinktreeView(linktree_id=other_linktree.id) for _ in range(3)])
    db.session.add(LinktreeView(linktree_id=linktree.id))

    db.session.add_all([
        Article(
            author_id=admin.id,
            title="Launch Notes",
            slug="launch-notes",
            content="Hello",
            status=ArticleStatus.PUBLISHED,
            published_at=datetime(2030, 1, 2),
            view_count=5,
        ),
        Article(
            author_id=admin.id,
            title="Draft Plans",
            slug="draft-plans",
            content="Soon",
            status=ArticleStatus.DRAFT,
            view_count=9,
        ),
    ])
    db.session.commit()


def test_platform_analytics(client, auth_headers, admin, activity):
    """Top lists are ranked by views and activity is newest first."""
    response = client.get("/api/admin/analytics", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.get_json()["data"]

    assert data["totalLinktrees"] == 2
    assert data["totalArticles"] == 2
    assert data["totalViews"] == 4
    assert [(t["slug"], t["views"]) for t in data["topLinktrees"]] == [("other", 3), ("owner", 1)]
    assert data["topLinktrees"][0]["user"] == {"name": "Other", "email": "other@example.com"}
    assert [a["slug"] for a in data["topArticles"]] == ["draft-plans", "launch-notes"]

    assert [(e["type"], e["slug"]) for e in data["recentActivity"]] == [
        ("linktree_created", "other"),
        ("article_published", "launch-notes"),
        ("linktree_created", "owner"),
    ]
    assert data["recentActivity"][1]["user"] == "Admin"
    assert data["recentActivity"][0]["timestamp"] == "2030-01-03T00:00:00"


def test_users_cannot_read_analytics(client, auth_headers, user):
    """Platform analytics are admin-only."""
    response = client.get("/api/admin/analytics", headers=auth_headers(user))

    assert response.status_code == 403
