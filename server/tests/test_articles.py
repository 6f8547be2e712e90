"""Tests for the article CMS: derived fields, publishing and public listing."""

import pytest

from linkku.extensions import db
from linkku.models import Article, ArticleCategory, ArticleStatus
from linkku.services.article_service import ArticleService
from linkku.utils.helpers import calculate_reading_time, make_excerpt


@pytest.fixture
def news(app):
    category = ArticleCategory(name="News", slug="news")
    db.session.add(category)
    db.session.commit()
    return category


def _words(count):
    return " ".join(["word"] * count)


# =============================================================================
# Derived fields
# =============================================================================


@pytest.mark.parametrize(
    "content, minutes",
    [
        ("", 0),
        (_words(1), 1),
        (_words(200), 1),
        (_words(201), 2),
        ("<p>" + _words(400) + "</p>", 2),
    ],
)
def test_reading_time(content, minutes):
    """Reading time is ceil(words / 200) ignoring markup."""
    assert calculate_reading_time(content) == minutes


def test_excerpt_truncates_plain_text():
    """Excerpts are the first 150 plain characters plus an ellipsis."""
    content = "<p>" + "a" * 200 + "</p>"

    excerpt = make_excerpt(content)

    assert excerpt == "a" * 150 + "..."


def test_short_excerpt_kept_whole():
    """Short content is not padded or ellipsized."""
    assert make_excerpt("<b>Short</b> text") == "Short text"


def test_create_article_derives_fields(admin, news):
    """Slug, excerpt, reading time and SEO defaults are filled in."""
    article = ArticleService.create(admin, {
        "title": "Launching Linkku",
        "content": "<p>" + _words(250) + "</p>",
        "categoryId": news.id,
        "tags": ["launch", " news ", ""],
    })

    assert article.slug == "launching-linkku"
    assert article.reading_time == 2
    assert article.excerpt.endswith("...")
    assert article.meta_title == "Launching Linkku"
    assert article.status == ArticleStatus.DRAFT
    assert article.published_at is None
    assert article.tags == ["launch", "news"]


def test_duplicate_titles_get_suffixed_slugs(admin):
    """Two articles with one title keep distinct slugs."""
    first = ArticleService.create(admin, {"title": "Hello", "content": "x"})
    second = ArticleService.create(admin, {"title": "Hello", "content": "y"})

    assert (first.slug, second.slug) == ("hello", "hello-1")


def test_publishing_sets_published_at_once(admin):
    """published_at is stamped on the first transition to PUBLISHED."""
    article = ArticleService.create(admin, {"title": "Draft", "content": "x"})

    ArticleService.update(article.id, {"status": "published"})
    stamped = article.published_at
    assert stamped is not None

    ArticleService.update(article.id, {"title": "Draft v2"})
    assert article.published_at == stamped
    assert article.slug == "draft-v2"


def test_content_change_recomputes_reading_time(admin):
    """Editing content refreshes reading time and excerpt."""
    article = ArticleService.create(admin, {"title": "Long", "content": "short"})

    ArticleService.update(article.id, {"content": _words(450)})

    assert article.reading_time == 3
    assert article.excerpt.startswith("word word")


def test_create_article_validation(client, auth_headers, admin):
    """Missing title and content are reported together."""
    response = client.post("/api/admin/articles", json={"status": "LIVE"}, headers=auth_headers(admin))

    assert response.status_code == 400
    assert set(response.get_json()["error"]["fields"]) == {"title", "content", "status"}


def test_users_cannot_write_articles(client, auth_headers, user):
    """Article management is for admins."""
    response = client.post(
        "/api/admin/articles",
        json={"title": "Nope", "content": "x"},
        headers=auth_headers(user),
    )

    assert response.status_code == 403
    assert Article.query.count() == 0


# =============================================================================
# Public listing
# =============================================================================


@pytest.fixture
def mixed_articles(admin, news):
    ArticleService.create(admin, {"title": "Published One", "content": "a", "status": "PUBLISHED", "categoryId": news.id})
    ArticleService.create(admin, {"title": "Published Two", "content": "b", "status": "PUBLISHED", "isFeatured": True})
    ArticleService.create(admin, {"title": "Still Draft", "content": "c"})
    ArticleService.create(admin, {"title": "Old One", "content": "d", "status": "ARCHIVED"})


def test_public_list_shows_only_published(client, mixed_articles):
    """Drafts and archived articles stay private; featured comes first."""
    response = client.get("/api/articles")

    assert response.status_code == 200
    data = response.get_json()["data"]
    titles = [a["title"] for a in data["articles"]]
    assert titles[0] == "Published Two"
    assert set(titles) == {"Published One", "Published Two"}
    assert "content" not in data["articles"][0]
    assert data["pagination"]["totalArticles"] == 2


def test_public_list_filters_by_category(client, mixed_articles):
    """Category filter matches by slug."""
    response = client.get("/api/articles?category=news")

    titles = [a["title"] for a in response.get_json()["data"]["articles"]]
    assert titles == ["Published One"]


def test_public_article_detail(client, mixed_articles):
    """Published articles are readable by slug; drafts are not."""
    assert client.get("/api/articles/published-one").status_code == 200
    assert client.get("/api/articles/still-draft").status_code == 404


def test_admin_list_pagination(client, auth_headers, admin, mixed_articles):
    """Admin listing covers every status and paginates."""
    response = client.get("/api/admin/articles?limit=3", headers=auth_headers(admin))

    pagination = response.get_json()["data"]["pagination"]
    assert pagination["totalArticles"] == 4
    assert pagination["totalPages"] == 2
    assert pagination["hasNextPage"] is True


def test_article_stats(client, auth_headers, admin, mixed_articles):
    """Stats count articles by status."""
    response = client.get("/api/admin/articles/stats", headers=auth_headers(admin))

    assert response.get_json()["data"] == {
        "total": 4,
        "published": 2,
        "draft": 1,
        "archived": 1,
        "totalViews": 0,
    }
