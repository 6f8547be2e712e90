# server/linkku/services/settings_service.py

import logging
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy import text

from linkku.errors import ValidationFailed
from linkku.extensions import db
from linkku.models.setting import Setting
from linkku.utils.validators import InputValidator

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS: Dict[str, Any] = {
    "siteName": "Linkku",
    "siteDescription": "Platform untuk mengelola link bio Anda",
    "allowRegistration": True,
    "requireEmailVerification": False,
    "maxLinksPerUser": 10,
    "maintenanceMode": False,
    "theme": "light",
    "primaryColor": "#3B82F6",
}

ALLOWED_KEYS = frozenset(DEFAULT_SETTINGS)


class SettingsService:

    @staticmethod
    def get(key: str) -> Any:
        setting = Setting.query.filter_by(key=key).first()
        if setting:
            return setting.get_value()
        return DEFAULT_SETTINGS.get(key)

    @staticmethod
    def get_all() -> Dict[str, Any]:
        settings = dict(DEFAULT_SETTINGS)

        for setting in Setting.query.all():
            if setting.key in ALLOWED_KEYS:
                settings[setting.key] = setting.get_value()

        settings.update(SettingsService._runtime_status())
        return settings

    @staticmethod
    def _runtime_status() -> Dict[str, Any]:
        try:
            db.session.execute(text("SELECT 1"))
            database_status = "connected"
        except Exception as e:
            logger.error(f"Database status check failed: {e}")
            database_status = "disconnected"

        return {
            "serverStatus": "online",
            "databaseStatus": database_status,
            "version": current_app.config.get("VERSION", "1.0.0"),
            "environment": current_app.config.get("FLASK_ENV", "production"),
        }

    @staticmethod
    def max_links_per_user() -> int:
        value = SettingsService.get("maxLinksPerUser")
        is_valid, number, _error = InputValidator.validate_int(value, "maxLinksPerUser", minimum=1)
        if not is_valid:
            logger.warning(f"Ignoring stored maxLinksPerUser {value!r}")
            return DEFAULT_SETTINGS["maxLinksPerUser"]
        return number

    @staticmethod
    def update(values: Dict[str, Any]) -> List[str]:
        """Upsert the allowed keys found in `values`; unknown keys are ignored.
        Returns the keys that were written."""
        values = dict(values)

        if values.get("maxLinksPerUser") is not None:
            is_valid, number, error = InputValidator.validate_int(
                values["maxLinksPerUser"], "maxLinksPerUser", minimum=1
            )
            if not is_valid:
                raise ValidationFailed({"maxLinksPerUser": error})
            values["maxLinksPerUser"] = number

        updated = []

        for key, value in values.items():
            if key not in ALLOWED_KEYS or value is None:
                continue

            setting = Setting.query.filter_by(key=key).first()
            if setting:
                setting.set_value(value)
            else:
                db.session.add(Setting(key=key, value=value))
            updated.append(key)

        db.session.commit()

        if updated:
            logger.info(f"Settings updated: {', '.join(updated)}")

        return updated
