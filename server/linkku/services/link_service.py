# server/linkku/services/link_service.py

import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from linkku.errors import Conflict, NotFound, ValidationFailed
from linkku.extensions import db
from linkku.models.category import Category
from linkku.models.detail_linktree import DetailLinktree
from linkku.models.linktree import Linktree
from linkku.models.user import User
from linkku.services.linktree_service import LinktreeService
from linkku.services.settings_service import SettingsService
from linkku.utils.helpers import parse_bool
from linkku.utils.validators import InputValidator, URLValidator

logger = logging.getLogger(__name__)


class LinkService:

    @staticmethod
    def _get_owned(user: User, link_id: str) -> DetailLinktree:
        link = (
            DetailLinktree.query
            .join(Linktree, DetailLinktree.linktree_id == Linktree.id)
            .filter(DetailLinktree.id == link_id, Linktree.user_id == user.id)
            .first()
        )
        if not link:
            raise NotFound("Link not found")
        return link

    @staticmethod
    def _validate_category(category_id, errors: dict) -> None:
        if not category_id or not isinstance(category_id, str):
            errors["categoryId"] = "Category is required"
        elif not db.session.get(Category, category_id):
            errors["categoryId"] = "Category not found"

    @staticmethod
    def list_links(user: User) -> List[DetailLinktree]:
        linktree = LinktreeService.get_for_user(user)
        if not linktree:
            return []
        return linktree.links.all()

    @staticmethod
    def get_link(user: User, link_id: str) -> DetailLinktree:
        return LinkService._get_owned(user, link_id)

    @staticmethod
    def create_link(user: User, data: dict) -> DetailLinktree:
        linktree = LinktreeService.require_for_user(user)
        errors = {}

        is_valid, title, error = InputValidator.validate_text(data.get("title"), "Title", max_length=100)
        if not is_valid:
            errors["title"] = error

        is_valid, url, error = URLValidator.validate(data.get("url"))
        if not is_valid:
            errors["url"] = error

        LinkService._validate_category(data.get("categoryId"), errors)

        sort_order = None
        if data.get("sortOrder") is not None:
            is_valid, sort_order, error = InputValidator.validate_int(data.get("sortOrder"), "Sort order", minimum=0)
            if not is_valid:
                errors["sortOrder"] = error

        is_visible = True
        if "isVisible" in data:
            is_visible = parse_bool(data.get("isVisible"))
            if is_visible is None:
                errors["isVisible"] = "isVisible must be a boolean"

        if errors:
            raise ValidationFailed(errors)

        max_links = SettingsService.max_links_per_user()
        if linktree.links.count() >= max_links:
            raise Conflict(f"You can add at most {max_links} links", "LINK_LIMIT_REACHED")

        if sort_order is None:
            current_max = (
                db.session.query(func.max(DetailLinktree.sort_order))
                .filter(DetailLinktree.linktree_id == linktree.id)
                .scalar()
            )
            sort_order = (current_max or 0) + 1

        link = DetailLinktree(
            linktree_id=linktree.id,
            category_id=data["categoryId"],
            title=title,
            url=url,
            sort_order=sort_order,
            is_visible=is_visible,
        )
        db.session.add(link)
        db.session.commit()

        LinktreeService.invalidate_cache(linktree.slug)
        logger.info(f"Link created: {link.id} in linktree {linktree.slug}")
        return link

    @staticmethod
    def update_link(user: User, link_id: str, data: dict) -> DetailLinktree:
        link = LinkService._get_owned(user, link_id)
        errors = {}

        if "title" in data:
            is_valid, title, error = InputValidator.validate_text(data.get("title"), "Title", max_length=100)
            if is_valid:
                link.title = title
            else:
                errors["title"] = error

        if "url" in data:
            is_valid, url, error = URLValidator.validate(data.get("url"))
            if is_valid:
                link.url = url
            else:
                errors["url"] = error

        if "categoryId" in data:
            LinkService._validate_category(data.get("categoryId"), errors)
            if "categoryId" not in errors:
                link.category_id = data["categoryId"]

        if "sortOrder" in data:
            is_valid, sort_order, error = InputValidator.validate_int(data.get("sortOrder"), "Sort order", minimum=0)
            if is_valid:
                link.sort_order = sort_order
            else:
                errors["sortOrder"] = error

        if "isVisible" in data:
            is_visible = parse_bool(data.get("isVisible"))
            if is_visible is None:
                errors["isVisible"] = "isVisible must be a boolean"
            else:
                link.is_visible = is_visible

        if errors:
            db.session.rollback()
            raise ValidationFailed(errors)

        db.session.commit()
        LinktreeService.invalidate_cache(link.linktree.slug)
        return link

    @staticmethod
    def delete_link(user: User, link_id: str) -> None:
        link = LinkService._get_owned(user, link_id)
        slug = link.linktree.slug

        db.session.delete(link)
        db.session.commit()

        LinktreeService.invalidate_cache(slug)
        logger.info(f"Link deleted: {link_id}")

    @staticmethod
    def reorder_links(user: User, items) -> int:
        """Apply client-supplied sort positions as one transaction.

        Every id must belong to the caller's linktree; a single foreign id
        rejects the whole batch before anything is written.
        """
        linktree = LinktreeService.require_for_user(user)

        if not isinstance(items, list) or not items:
            raise ValidationFailed({"links": "A non-empty list of links is required"})

        updates = {}
        errors = {}
        for index, item in enumerate(items):
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                errors[f"links[{index}].id"] = "Link id is required"
                continue
            is_valid, sort_order, error = InputValidator.validate_int(item.get("sortOrder"), "Sort order", minimum=0)
            if not is_valid:
                errors[f"links[{index}].sortOrder"] = error
                continue
            updates[item["id"]] = sort_order

        if errors:
            raise ValidationFailed(errors)

        owned = {
            link.id: link
            for link in DetailLinktree.query.filter(
                DetailLinktree.linktree_id == linktree.id,
                DetailLinktree.id.in_(list(updates)),
            ).all()
        }

        missing = [link_id for link_id in updates if link_id not in owned]
        if missing:
            logger.warning(f"Reorder rejected for user {user.id}: {len(missing)} link(s) not owned")
            raise NotFound("One or more links were not found")

        try:
            for link_id, sort_order in updates.items():
                owned[link_id].sort_order = sort_order
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Link reorder failed: {e}")
            raise

        LinktreeService.invalidate_cache(linktree.slug)
        return len(updates)
