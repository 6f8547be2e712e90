"""Tests for link CRUD and ownership-checked reordering."""

from linkku.extensions import db
from linkku.models import DetailLinktree, Setting
from linkku.services.settings_service import SettingsService


def _orders(linktree):
    return {link.title: link.sort_order for link in DetailLinktree.query.filter_by(linktree_id=linktree.id)}


# =============================================================================
# Create / update / delete
# =============================================================================


def test_create_link(client, auth_headers, user, linktree, categories):
    """A link is added to the caller's linktree."""
    response = client.post(
        "/api/links",
        json={"title": "Portfolio", "url": "example.com/me", "categoryId": categories[1].id},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    link = response.get_json()["data"]["link"]
    assert link["url"] == "https://example.com/me"
    assert link["linktreeId"] == linktree.id
    assert link["isVisible"] is True
    assert link["category"]["name"] == "Website"


def test_create_link_defaults_to_end_of_list(client, auth_headers, user, links, categories):
    """Without sortOrder the link goes after the current maximum."""
    response = client.post(
        "/api/links",
        json={"title": "New", "url": "https://new.example.com", "categoryId": categories[0].id},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    assert response.get_json()["data"]["link"]["sortOrder"] == 4


def test_create_link_validation(client, auth_headers, user, linktree):
    """Bad input is reported per field."""
    response = client.post(
        "/api/links",
        json={"title": "", "url": "javascript:alert(1)", "categoryId": "missing"},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    fields = response.get_json()["error"]["fields"]
    assert set(fields) == {"title", "url", "categoryId"}


def test_create_link_without_linktree(client, auth_headers, user, categories):
    """Links need a linktree first."""
    response = client.post(
        "/api/links",
        json={"title": "Shop", "url": "https://shop.example.com", "categoryId": categories[0].id},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert "linktree" in response.get_json()["error"]["fields"]


def test_create_link_respects_limit(app, client, auth_headers, user, links, categories):
    """maxLinksPerUser caps the number of links."""
    SettingsService.update({"maxLinksPerUser": 3})

    response = client.post(
        "/api/links",
        json={"title": "Fourth", "url": "https://four.example.com", "categoryId": categories[0].id},
        headers=auth_headers(user),
    )

    assert response.status_code == 409
    assert response.get_json()["error"]["code"] == "LINK_LIMIT_REACHED"


def test_create_link_with_unreadable_limit(client, auth_headers, user, links, categories):
    """A corrupt stored limit falls back to the default."""
    db.session.add(Setting(key="maxLinksPerUser", value="ten"))
    db.session.commit()

    response = client.post(
        "/api/links",
        json={"title": "Fourth", "url": "https://four.example.com", "categoryId": categories[0].id},
        headers=auth_headers(user),
    )

    assert response.status_code == 201


def test_create_link_rejects_non_object_body(client, auth_headers, user, linktree):
    """A JSON array body is a validation error."""
    response = client.post("/api/links", json=[{"title": "x"}], headers=auth_headers(user))

    assert response.status_code == 400
    assert "body" in response.get_json()["error"]["fields"]


def test_update_link(client, auth_headers, user, links):
    """Owners can hide and rename a link."""
    response = client.patch(
        f"/api/links/{links[0].id}",
        json={"title": "IG", "isVisible": False},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    data = response.get_json()["data"]["link"]
    assert data["title"] == "IG"
    assert data["isVisible"] is False


def test_other_users_link_is_not_found(client, auth_headers, other_user, links):
    """Links outside the caller's linktree look missing."""
    headers = auth_headers(other_user)

    assert client.get(f"/api/links/{links[0].id}", headers=headers).status_code == 404
    assert client.delete(f"/api/links/{links[0].id}", headers=headers).status_code == 404
    assert db.session.get(DetailLinktree, links[0].id) is not None


def test_delete_link(client, auth_headers, user, links):
    """Owners can delete their links."""
    response = client.delete(f"/api/links/{links[2].id}", headers=auth_headers(user))

    assert response.status_code == 200
    assert db.session.get(DetailLinktree, links[2].id) is None


# =============================================================================
# Reorder
# =============================================================================


def test_reorder_links(client, auth_headers, user, linktree, links):
    """Positions are applied as given."""
    payload = {"links": [
        {"id": links[0].id, "sortOrder": 3},
        {"id": links[1].id, "sortOrder": 1},
        {"id": links[2].id, "sortOrder": 2},
    ]}

    response = client.patch("/api/links/reorder", json=payload, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.get_json()["data"]["updated"] == 3
    assert _orders(linktree) == {"Instagram": 3, "Blog": 1, "Shop": 2}


def test_reorder_allows_duplicate_positions(client, auth_headers, user, linktree, links):
    """Duplicate sortOrder values are stored as sent."""
    payload = {"links": [
        {"id": links[0].id, "sortOrder": 1},
        {"id": links[1].id, "sortOrder": 1},
    ]}

    response = client.patch("/api/links/reorder", json=payload, headers=auth_headers(user))

    assert response.status_code == 200
    assert _orders(linktree) == {"Instagram": 1, "Blog": 1, "Shop": 3}


def test_reorder_with_foreign_link_changes_nothing(
    client, auth_headers, user, linktree, links, other_linktree, categories
):
    """One link from another linktree rejects the whole batch."""
    foreign = DetailLinktree(
        linktree_id=other_linktree.id,
        category_id=categories[0].id,
        title="Theirs",
        url="https://theirs.example.com",
        sort_order=7,
    )
    db.session.add(foreign)
    db.session.commit()

    payload = {"links": [
        {"id": links[0].id, "sortOrder": 9},
        {"id": foreign.id, "sortOrder": 0},
    ]}

    response = client.patch("/api/links/reorder", json=payload, headers=auth_headers(user))

    assert response.status_code == 404
    db.session.expire_all()
    assert _orders(linktree) == {"Instagram": 1, "Blog": 2, "Shop": 3}
    assert db.session.get(DetailLinktree, foreign.id).sort_order == 7


def test_reorder_without_linktree(client, auth_headers, user):
    """Callers with no linktree get a validation error."""
    response = client.patch(
        "/api/links/reorder",
        json={"links": [{"id": "x", "sortOrder": 1}]},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_reorder_rejects_malformed_items(client, auth_headers, user, links):
    """Each item needs an id and a non-negative integer position."""
    response = client.patch(
        "/api/links/reorder",
        json={"links": [{"id": links[0].id, "sortOrder": -1}, {"sortOrder": 2}]},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert set(response.get_json()["error"]["fields"]) == {"links[0].sortOrder", "links[1].id"}


def test_links_require_authentication(client):
    """Anonymous callers are rejected."""
    response = client.get("/api/links")

    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "AUTH_REQUIRED"
