"""Shared fixtures for the Linkku API tests."""

import pytest
from flask_jwt_extended import create_access_token

from linkku import create_app
from linkku.config import TestingConfig
from linkku.extensions import db
from linkku.models import Category, DetailLinktree, Linktree, User, UserRole
from linkku.services.redis_service import RedisService


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app(tmp_path):
    """Fresh application with an in-memory database per test."""
    RedisService.reset()

    app = create_app(TestingConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

    RedisService.reset()


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """Build a bearer header for a user."""
    def _headers(user):
        token = create_access_token(identity=user.id, additional_claims={"role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def cleared_caches(monkeypatch):
    """Record the slugs whose cached public page is invalidated."""
    slugs = []

    def _record(self, slug):
        slugs.append(slug)
        return True

    monkeypatch.setattr(RedisService, "invalidate_linktree_cache", _record)
    return slugs


# =============================================================================
# Accounts
# =============================================================================


def _make_user(email, role=UserRole.USER, name=None):
    user = User(email=email, password="secret123", name=name, role=role)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def user(app):
    """Plain USER account."""
    return _make_user("owner@example.com", name="Owner")


@pytest.fixture
def other_user(app):
    """Second USER account."""
    return _make_user("other@example.com", name="Other")


@pytest.fixture
def admin(app):
    """ADMIN account."""
    return _make_user("admin@example.com", UserRole.ADMIN, name="Admin")


@pytest.fixture
def superadmin(app):
    """SUPERADMIN account."""
    return _make_user("root@example.com", UserRole.SUPERADMIN, name="Root")


# =============================================================================
# Content
# =============================================================================


@pytest.fixture
def categories(app):
    """Two link categories."""
    social = Category(name="Social Media", slug="social-media", icon="📱")
    website = Category(name="Website", slug="website", icon="🌐")
    db.session.add_all([social, website])
    db.session.commit()
    return [social, website]


@pytest.fixture
def linktree(user):
    """Active linktree owned by `user`."""
    linktree = Linktree(user_id=user.id, title="Owner Links", slug="owner")
    db.session.add(linktree)
    db.session.commit()
    return linktree


@pytest.fixture
def other_linktree(other_user):
    """Active linktree owned by `other_user`."""
    linktree = Linktree(user_id=other_user.id, title="Other Links", slug="other")
    db.session.add(linktree)
    db.session.commit()
    return linktree


@pytest.fixture
def links(linktree, categories):
    """Three links on `linktree` at sort positions 1, 2, 3."""
    created = []
    for position, title in enumerate(["Instagram", "Blog", "Shop"], start=1):
        link = DetailLinktree(
            linktree_id=linktree.id,
            category_id=categories[0].id,
            title=title,
            url=f"https://example.com/{title.lower()}",
            sort_order=position,
        )
        db.session.add(link)
        created.append(link)
    db.session.commit()
    return created
