# server/linkku/services/linktree_service.py

import logging
from typing import Iterable, List, Optional

from flask import current_app

from linkku.errors import Conflict, NotFound, ValidationFailed
from linkku.extensions import db
from linkku.models.detail_linktree import DetailLinktree
from linkku.models.linktree import Linktree
from linkku.models.user import User
from linkku.services.redis_service import RedisService
from linkku.utils.helpers import parse_bool
from linkku.utils.slug import SlugGenerator
from linkku.utils.validators import InputValidator

logger = logging.getLogger(__name__)


class LinktreeService:

    @staticmethod
    def _reserved_slugs() -> set:
        return current_app.config.get("RESERVED_SLUGS", set())

    @staticmethod
    def get_for_user(user: User) -> Optional[Linktree]:
        return Linktree.query.filter_by(user_id=user.id).first()

    @staticmethod
    def require_for_user(user: User) -> Linktree:
        linktree = LinktreeService.get_for_user(user)
        if not linktree:
            raise ValidationFailed(
                {"linktree": "Create your linktree before adding links"},
            )
        return linktree

    @staticmethod
    def check_slug(slug: str, exclude_id: Optional[str] = None) -> dict:
        normalized = SlugGenerator.normalize(slug or "")
        if not normalized:
            return {"slug": normalized, "available": False}

        available = (
            normalized not in LinktreeService._reserved_slugs()
            and not SlugGenerator.is_taken(Linktree, normalized, exclude_id)
        )
        return {"slug": normalized, "available": available}

    @staticmethod
    def create(user: User, data: dict) -> Linktree:
        if LinktreeService.get_for_user(user):
            raise Conflict("You already have a linktree", "LINKTREE_EXISTS")

        errors = {}

        is_valid, title, error = InputValidator.validate_text(data.get("title"), "Title", max_length=100)
        if not is_valid:
            errors["title"] = error

        is_valid, photo, error = InputValidator.validate_image_path(data.get("photo"), "Photo")
        if not is_valid:
            errors["photo"] = error

        requested_slug = data.get("slug")
        if requested_slug is not None and not isinstance(requested_slug, str):
            errors["slug"] = "Slug must be text"

        if errors:
            raise ValidationFailed(errors)

        slug = SlugGenerator.allocate(
            Linktree,
            requested_slug or title,
            reserved=LinktreeService._reserved_slugs(),
        )

        linktree = Linktree(user_id=user.id, title=title, slug=slug, photo=photo)
        db.session.add(linktree)
        db.session.commit()

        logger.info(f"Linktree created: {linktree.slug} for user {user.id}")
        return linktree

    @staticmethod
    def update(user: User, data: dict) -> Linktree:
        linktree = LinktreeService.get_for_user(user)
        if not linktree:
            raise NotFound("Linktree not found")

        old_slug = linktree.slug
        errors = {}

        if "title" in data:
            is_valid, title, error = InputValidator.validate_text(data.get("title"), "Title", max_length=100)
            if is_valid:
                linktree.title = title
            else:
                errors["title"] = error

        if "photo" in data:
            is_valid, photo, error = InputValidator.validate_image_path(data.get("photo"), "Photo")
            if is_valid:
                linktree.photo = photo
            else:
                errors["photo"] = error

        if "isActive" in data:
            is_active = parse_bool(data.get("isActive"))
            if is_active is None:
                errors["isActive"] = "isActive must be a boolean"
            else:
                linktree.is_active = is_active

        if "slug" in data:
            requested = data.get("slug")
            if not isinstance(requested, str) or not SlugGenerator.normalize(requested):
                errors["slug"] = "Slug must contain letters or numbers"
            elif SlugGenerator.normalize(requested) != linktree.slug:
                linktree.slug = SlugGenerator.allocate(
                    Linktree,
                    requested,
                    exclude_id=linktree.id,
                    reserved=LinktreeService._reserved_slugs(),
                )

        if errors:
            db.session.rollback()
            raise ValidationFailed(errors)

        db.session.commit()

        LinktreeService.invalidate_cache(old_slug)
        if linktree.slug != old_slug:
            logger.info(f"Linktree slug changed: {old_slug} -> {linktree.slug}")

        return linktree

    @staticmethod
    def get_public(slug: str) -> dict:
        redis = RedisService()
        cached = redis.get_cached_linktree(slug)
        if cached:
            return cached

        linktree = Linktree.query.filter_by(slug=slug, is_active=True).first()
        if not linktree:
            raise NotFound("Linktree not found")

        data = linktree.to_dict(include_links=True, visible_only=True)
        data["user"] = {"name": linktree.user.name} if linktree.user else None

        redis.cache_linktree(slug, data)
        return data

    @staticmethod
    def invalidate_cache(slug: str) -> None:
        RedisService().invalidate_linktree_cache(slug)

    @staticmethod
    def invalidate_caches(slugs: Iterable[str]) -> None:
        for slug in slugs:
            LinktreeService.invalidate_cache(slug)

    @staticmethod
    def slugs_using_category(category_id: str) -> List[str]:
        rows = (
            db.session.query(Linktree.slug)
            .join(DetailLinktree, DetailLinktree.linktree_id == Linktree.id)
            .filter(DetailLinktree.category_id == category_id)
            .distinct()
            .all()
        )
        return [slug for (slug,) in rows]
