# server/linkku/services/user_service.py

import logging
from typing import Optional, Tuple

from sqlalchemy import func

from linkku.errors import AuthenticationRequired, Conflict, NotFound, PermissionDenied, ValidationFailed
from linkku.extensions import db
from linkku.models.linktree import Linktree
from linkku.models.user import User, UserRole
from linkku.services.linktree_service import LinktreeService
from linkku.services.settings_service import SettingsService
from linkku.utils.permissions import (
    can,
    ensure_can,
    ensure_can_assign_role,
    ensure_can_manage_user,
)
from linkku.utils.validators import InputValidator

logger = logging.getLogger(__name__)


class UserService:

    @staticmethod
    def _email_taken(email: str, exclude_id: Optional[str] = None) -> bool:
        query = User.query.filter(func.lower(User.email) == email.lower())
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    @staticmethod
    def _parse_role(value) -> Tuple[Optional[UserRole], Optional[str]]:
        if value is None:
            return UserRole.USER, None
        try:
            return UserRole(str(value).upper()), None
        except ValueError:
            return None, "Role must be one of USER, ADMIN, SUPERADMIN"

    @staticmethod
    def _validate_account(data: dict, partial: bool = False) -> dict:
        errors = {}
        cleaned = {}

        if not partial or "name" in data:
            is_valid, name, error = InputValidator.validate_name(data.get("name"))
            if is_valid:
                cleaned["name"] = name
            else:
                errors["name"] = error

        if not partial or "email" in data:
            is_valid, email, error = InputValidator.validate_email(data.get("email"))
            if is_valid:
                cleaned["email"] = email
            else:
                errors["email"] = error

        if not partial or data.get("password"):
            is_valid, error = InputValidator.validate_password(data.get("password"))
            if is_valid:
                cleaned["password"] = data["password"]
            else:
                errors["password"] = error

        if "role" in data:
            role, error = UserService._parse_role(data.get("role"))
            if error:
                errors["role"] = error
            else:
                cleaned["role"] = role

        if errors:
            raise ValidationFailed(errors)

        return cleaned

    # Self-service

    @staticmethod
    def register(data: dict) -> User:
        if not SettingsService.get("allowRegistration"):
            raise PermissionDenied("Registration is currently disabled", "REGISTRATION_DISABLED")

        cleaned = UserService._validate_account(
            {k: data.get(k) for k in ("name", "email", "password")}
        )

        if UserService._email_taken(cleaned["email"]):
            raise Conflict("An account with this email already exists")

        user = User(
            email=cleaned["email"],
            password=cleaned["password"],
            name=cleaned["name"],
            role=UserRole.USER,
        )
        db.session.add(user)
        db.session.commit()

        logger.info(f"User registered: {user.id}")
        return user

    @staticmethod
    def authenticate(email: str, password: str) -> User:
        errors = {}
        if not email:
            errors["email"] = "Email is required"
        if not password:
            errors["password"] = "Password is required"
        if errors:
            raise ValidationFailed(errors)

        user = User.query.filter(func.lower(User.email) == str(email).strip().lower()).first()
        if not user or not user.check_password(password):
            raise AuthenticationRequired("Invalid email or password", "INVALID_CREDENTIALS")

        return user

    @staticmethod
    def update_profile(user: User, data: dict) -> User:
        errors = {}

        if "name" in data:
            is_valid, name, error = InputValidator.validate_name(data.get("name"))
            if is_valid:
                user.name = name
            else:
                errors["name"] = error

        if "email" in data:
            is_valid, email, error = InputValidator.validate_email(data.get("email"))
            if not is_valid:
                errors["email"] = error
            elif email != user.email and UserService._email_taken(email, exclude_id=user.id):
                raise Conflict("Email is already in use")
            else:
                user.email = email

        new_password = data.get("newPassword")
        if new_password:
            current_password = data.get("currentPassword")
            if not current_password:
                errors["currentPassword"] = "Current password is required to set a new password"
            elif not user.check_password(current_password):
                errors["currentPassword"] = "Current password is incorrect"
            else:
                is_valid, error = InputValidator.validate_password(new_password)
                if is_valid:
                    user.set_password(new_password)
                else:
                    errors["newPassword"] = error

        if errors:
            db.session.rollback()
            raise ValidationFailed(errors)

        db.session.commit()
        LinktreeService.invalidate_caches(linktree.slug for linktree in user.linktrees)
        logger.info(f"Profile updated: {user.id}")
        return user

    # Admin management

    @staticmethod
    def list_users(actor: User, page: int = 1, per_page: int = 10, search: Optional[str] = None) -> dict:
        ensure_can(actor, "user", "read")

        query = User.query
        if not can(actor.role, "user", "read_all_roles"):
            query = query.filter(User.role == UserRole.USER)

        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                db.or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern))
            )

        pagination = query.order_by(User.created_at.desc()).paginate(
            page=page, per_page=per_page, error_out=False
        )

        return {
            "users": [u.to_dict(include_counts=True) for u in pagination.items],
            "pagination": {
                "currentPage": pagination.page,
                "perPage": pagination.per_page,
                "totalPages": pagination.pages,
                "totalUsers": pagination.total,
                "hasNextPage": pagination.has_next,
                "hasPrevPage": pagination.has_prev,
            },
        }

    @staticmethod
    def get_user(actor: User, user_id: str) -> User:
        ensure_can(actor, "user", "read")

        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found")

        ensure_can_manage_user(actor, user, "read")
        return user

    @staticmethod
    def create_user(actor: User, data: dict) -> User:
        ensure_can(actor, "user", "create")

        cleaned = UserService._validate_account(
            {k: data[k] for k in ("name", "email", "password", "role") if k in data}
        )
        role = cleaned.get("role", UserRole.USER)
        ensure_can_assign_role(actor, role)

        if UserService._email_taken(cleaned["email"]):
            raise Conflict("An account with this email already exists")

        user = User(
            email=cleaned["email"],
            password=cleaned["password"],
            name=cleaned["name"],
            role=role,
        )
        db.session.add(user)
        db.session.commit()

        logger.info(f"User {user.id} created by {actor.id} with role {role.value}")
        return user

    @staticmethod
    def update_user(actor: User, user_id: str, data: dict) -> User:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found")

        ensure_can_manage_user(actor, user, "update")

        cleaned = UserService._validate_account(
            {k: data[k] for k in ("name", "email", "password", "role") if k in data},
            partial=True,
        )

        if "role" in cleaned:
            ensure_can_assign_role(actor, cleaned["role"])

        if "email" in cleaned and cleaned["email"] != user.email:
            if UserService._email_taken(cleaned["email"], exclude_id=user.id):
                raise Conflict("Email is already in use")
            user.email = cleaned["email"]

        if "name" in cleaned:
            user.name = cleaned["name"]
        if "password" in cleaned:
            user.set_password(cleaned["password"])
        if "role" in cleaned:
            user.role = cleaned["role"]

        db.session.commit()
        LinktreeService.invalidate_caches(linktree.slug for linktree in user.linktrees)
        logger.info(f"User {user.id} updated by {actor.id}")
        return user

    @staticmethod
    def delete_user(actor: User, user_id: str) -> None:
        user = db.session.get(User, user_id)
        if not user:
            raise NotFound("User not found")

        ensure_can_manage_user(actor, user, "delete")

        slugs = [linktree.slug for linktree in user.linktrees]

        db.session.delete(user)
        db.session.commit()
        LinktreeService.invalidate_caches(slugs)
        logger.info(f"User {user_id} deleted by {actor.id}")

    @staticmethod
    def get_user_linktrees(actor: User, user_id: str) -> list:
        user = UserService.get_user(actor, user_id)

        linktrees = Linktree.query.filter_by(user_id=user.id).order_by(Linktree.created_at.desc()).all()

        result = []
        for linktree in linktrees:
            data = linktree.to_dict()
            data["_count"] = {"detailLinktrees": linktree.links.count()}
            result.append(data)

        return result
