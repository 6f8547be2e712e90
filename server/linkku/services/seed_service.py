# server/linkku/services/seed_service.py

import logging
from typing import Optional

from linkku.extensions import db
from linkku.models.category import Category
from linkku.models.user import User, UserRole
from linkku.utils.slug import SlugGenerator

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = [
    ("Social Media", "📱"),
    ("Website", "🌐"),
    ("E-commerce", "🛒"),
    ("Contact", "📞"),
    ("Portfolio", "💼"),
    ("Blog", "📝"),
    ("Video", "🎥"),
    ("Music", "🎵"),
    ("Other", "🔗"),
]


class SeedService:

    @staticmethod
    def seed_categories() -> int:
        created = 0
        for name, icon in DEFAULT_CATEGORIES:
            if Category.query.filter_by(name=name).first():
                continue
            db.session.add(Category(name=name, slug=SlugGenerator.allocate(Category, name), icon=icon))
            # Flush so the next allocation sees this slug
            db.session.flush()
            created += 1

        db.session.commit()
        logger.info(f"Seeded {created} categories")
        return created

    @staticmethod
    def seed_superadmin(email: Optional[str], password: Optional[str], name: str = "Super Admin") -> Optional[User]:
        if not email or not password:
            return None

        user = User.query.filter_by(email=email.strip().lower()).first()
        if user:
            return user

        user = User(email=email, password=password, name=name, role=UserRole.SUPERADMIN)
        db.session.add(user)
        db.session.commit()

        logger.info(f"Seeded superadmin {user.id}")
        return user
