# server/linkku/models/setting.py

import enum
import json
import uuid
from typing import Any

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class SettingType(enum.Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    JSON = "json"


class Setting(db.Model):
    __tablename__ = "settings"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    key = db.Column(db.String(100), unique=True, nullable=False, index=True)
    value = db.Column(db.Text, nullable=False)
    type = db.Column(db.Enum(SettingType), nullable=False, default=SettingType.STRING)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, key: str, value: Any):
        self.key = key
        self.set_value(value)

    @staticmethod
    def infer_type(value: Any) -> SettingType:
        # bool first, it is a subclass of int
        if isinstance(value, bool):
            return SettingType.BOOLEAN
        if isinstance(value, (int, float)):
            return SettingType.NUMBER
        if isinstance(value, (dict, list)):
            return SettingType.JSON
        return SettingType.STRING

    def set_value(self, value: Any) -> None:
        self.type = self.infer_type(value)

        if self.type == SettingType.JSON:
            self.value = json.dumps(value)
        elif self.type == SettingType.BOOLEAN:
            self.value = "true" if value else "false"
        else:
            self.value = str(value)

    def get_value(self) -> Any:
        if self.type == SettingType.BOOLEAN:
            return self.value == "true"
        if self.type == SettingType.NUMBER:
            number = float(self.value)
            return int(number) if number.is_integer() else number
        if self.type == SettingType.JSON:
            return json.loads(self.value)
        return self.value

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "value": self.get_value(),
            "type": self.type.value,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:
        return f"<Setting {self.key}>"
