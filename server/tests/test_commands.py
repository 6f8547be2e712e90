"""Tests for the flask CLI commands."""

from linkku.models import Category, User, UserRole
from linkku.services.seed_service import DEFAULT_CATEGORIES


def test_seed_is_idempotent(app, monkeypatch):
    """Seeding twice creates the defaults once."""
    monkeypatch.setenv("SEED_ADMIN_EMAIL", "boss@example.com")
    monkeypatch.setenv("SEED_ADMIN_PASSWORD", "secret123")
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed"])
    second = runner.invoke(args=["seed"])

    assert first.exit_code == 0
    assert f"Categories created: {len(DEFAULT_CATEGORIES)}" in first.output
    assert "Categories created: 0" in second.output
    assert Category.query.count() == len(DEFAULT_CATEGORIES)
    assert User.query.filter_by(email="boss@example.com").one().role == UserRole.SUPERADMIN


def test_seed_without_admin_env(app, monkeypatch):
    """No superadmin is created without credentials."""
    monkeypatch.delenv("SEED_ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)

    result = app.test_cli_runner().invoke(args=["seed"])

    assert "skipping superadmin" in result.output
    assert User.query.count() == 0


def test_cleanup_uploads_reports(app):
    """The cleanup command summarizes an empty upload folder."""
    result = app.test_cli_runner().invoke(args=["cleanup-uploads"])

    assert result.exit_code == 0
    assert "Total files: 0" in result.output
