"""Tests for typed site settings."""

import pytest

from linkku.errors import ValidationFailed
from linkku.extensions import db
from linkku.models import Setting, SettingType
from linkku.services.settings_service import DEFAULT_SETTINGS, SettingsService


def test_defaults_when_nothing_stored(app):
    """Every known key has a default."""
    settings = SettingsService.get_all()

    for key, value in DEFAULT_SETTINGS.items():
        assert settings[key] == value
    assert settings["databaseStatus"] == "connected"
    assert settings["environment"] == "testing"


def test_update_stores_typed_values(app):
    """Values round-trip with their type."""
    updated = SettingsService.update({
        "siteName": "My Links",
        "allowRegistration": False,
        "maxLinksPerUser": 25,
        "unknownKey": "ignored",
    })

    assert sorted(updated) == ["allowRegistration", "maxLinksPerUser", "siteName"]
    assert SettingsService.get("allowRegistration") is False
    assert SettingsService.get("maxLinksPerUser") == 25
    assert Setting.query.filter_by(key="maxLinksPerUser").one().type == SettingType.NUMBER
    assert Setting.query.filter_by(key="unknownKey").first() is None


def test_update_is_an_upsert(app):
    """Saving a key twice keeps one row."""
    SettingsService.update({"theme": "dark"})
    SettingsService.update({"theme": "light"})

    assert Setting.query.filter_by(key="theme").count() == 1
    assert SettingsService.get("theme") == "light"


def test_settings_endpoints(client, auth_headers, admin, user):
    """Admins read and write settings; users cannot."""
    assert client.get("/api/admin/settings", headers=auth_headers(user)).status_code == 403

    response = client.post(
        "/api/admin/settings",
        json={"primaryColor": "#000000"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["updated"] == ["primaryColor"]
    assert data["settings"]["primaryColor"] == "#000000"


def test_registration_can_be_disabled(client):
    """allowRegistration=false closes sign-up."""
    SettingsService.update({"allowRegistration": False})

    response = client.post(
        "/api/auth/register",
        json={"name": "Someone", "email": "someone@example.com", "password": "secret123"},
    )

    assert response.status_code == 403
    assert response.get_json()["error"]["code"] == "REGISTRATION_DISABLED"


@pytest.mark.parametrize("value", ["ten", 0, -3, 2.5, {"n": 1}, [5], True])
def test_max_links_must_be_positive_integer(app, value):
    """Bad link limits are refused and nothing is written."""
    with pytest.raises(ValidationFailed) as excinfo:
        SettingsService.update({"maxLinksPerUser": value, "theme": "dark"})

    assert "maxLinksPerUser" in excinfo.value.fields
    assert Setting.query.count() == 0


def test_max_links_numeric_string_is_stored_as_number(app):
    """A numeric string is normalized to an int."""
    SettingsService.update({"maxLinksPerUser": "12"})

    assert SettingsService.get("maxLinksPerUser") == 12
    assert SettingsService.max_links_per_user() == 12


def test_unreadable_stored_limit_falls_back_to_default(app):
    """A corrupt stored limit uses the default."""
    db.session.add(Setting(key="maxLinksPerUser", value="ten"))
    db.session.commit()

    assert SettingsService.max_links_per_user() == DEFAULT_SETTINGS["maxLinksPerUser"]


def test_settings_endpoint_rejects_bad_limit(client, auth_headers, admin):
    """The API reports an invalid limit as a field error."""
    response = client.post(
        "/api/admin/settings",
        json={"maxLinksPerUser": "ten"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 400
    assert "maxLinksPerUser" in response.get_json()["error"]["fields"]
