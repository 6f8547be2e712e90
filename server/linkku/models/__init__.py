# server/linkku/models/__init__.py

from linkku.models.user import User, UserRole
from linkku.models.linktree import Linktree
from linkku.models.detail_linktree import DetailLinktree
from linkku.models.category import Category
from linkku.models.article import Article, ArticleStatus
from linkku.models.article_category import ArticleCategory
from linkku.models.events import LinktreeView, ArticleView, LinkClick
from linkku.models.setting import Setting, SettingType

__all__ = [
    "User",
    "UserRole",
    "Linktree",
    "DetailLinktree",
    "Category",
    "Article",
    "ArticleStatus",
    "ArticleCategory",
    "LinktreeView",
    "ArticleView",
    "LinkClick",
    "Setting",
    "SettingType",
]
