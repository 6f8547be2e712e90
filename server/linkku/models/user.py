# server/linkku/models/user.py

import enum
import uuid

from werkzeug.security import generate_password_hash, check_password_hash

from linkku.extensions import db
from linkku.utils.helpers import utcnow


class UserRole(enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPERADMIN = "SUPERADMIN"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=True)

    # Password hash for local auth
    password_hash = db.Column(db.String(255), nullable=True)

    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.USER, index=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    linktrees = db.relationship("Linktree", back_populates="user", lazy="dynamic", cascade="all, delete-orphan")
    articles = db.relationship("Article", back_populates="author", lazy="dynamic", cascade="all, delete-orphan")

    def __init__(self, email: str, password: str = None, name: str = None, role: UserRole = UserRole.USER):
        if not email:
            raise ValueError("Email is required")

        self.email = str(email).lower().strip()
        self.name = name or self.email.split("@")[0].replace(".", " ").title()
        self.role = role or UserRole.USER

        if password:
            self.set_password(password)

    def set_password(self, password: str) -> None:
        """Set user password hash"""
        if not password:
            raise ValueError("Password cannot be empty")

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check if provided password matches stored hash"""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def linktree(self):
        return self.linktrees.first()

    def to_dict(self, include_counts: bool = False) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_counts:
            data["_count"] = {"linktrees": self.linktrees.count()}

        return data

    def __repr__(self) -> str:
        return f"<User {self.email}>"
