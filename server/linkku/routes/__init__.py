# server/linkku/routes/__init__.py

from linkku.routes.auth import auth_bp
from linkku.routes.profile import profile_bp
from linkku.routes.linktree import linktree_bp
from linkku.routes.links import links_bp
from linkku.routes.categories import categories_bp
from linkku.routes.articles import articles_bp
from linkku.routes.tracking import tracking_bp
from linkku.routes.admin_users import admin_users_bp
from linkku.routes.admin import admin_bp
from linkku.routes.uploads import uploads_bp
from linkku.routes.sitemap import sitemap_bp

__all__ = [
    "auth_bp",
    "profile_bp",
    "linktree_bp",
    "links_bp",
    "categories_bp",
    "articles_bp",
    "tracking_bp",
    "admin_users_bp",
    "admin_bp",
    "uploads_bp",
    "sitemap_bp",
]
