# server/linkku/services/__init__.py

from linkku.services.redis_service import RedisService
from linkku.services.settings_service import SettingsService
from linkku.services.user_service import UserService
from linkku.services.category_service import CategoryService, ArticleCategoryService
from linkku.services.linktree_service import LinktreeService
from linkku.services.link_service import LinkService
from linkku.services.tracking_service import TrackingService
from linkku.services.article_service import ArticleService
from linkku.services.upload_service import UploadService
from linkku.services.storage_service import StorageCleanupService
from linkku.services.analytics_service import AnalyticsService
from linkku.services.seed_service import SeedService

__all__ = [
    "RedisService",
    "SettingsService",
    "UserService",
    "CategoryService",
    "ArticleCategoryService",
    "LinktreeService",
    "LinkService",
    "TrackingService",
    "ArticleService",
    "UploadService",
    "StorageCleanupService",
    "AnalyticsService",
    "SeedService",
]
