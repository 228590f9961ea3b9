"""
Configuration settings for django-techblog.

Override these in your Django settings.py:

    TECHBLOG = {
        'UPLOAD_BASE_URL': 'https://cdn.example.com',
        'POSTS_PER_PAGE': 20,
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Rendering
    "UPLOAD_BASE_URL": "",

    # Summaries shown in list views
    "SUMMARY_MAX_LENGTH": 200,

    # Listing
    "POSTS_PER_PAGE": 10,
    "MAX_PAGE_SIZE": 50,
    "POPULAR_LIMIT": 10,
    "POPULAR_CACHE_TIMEOUT": 300,

    # One counted view per viewer per blog within this window (seconds)
    "VIEW_DEDUP_TIMEOUT": 86400,

    # Uploads
    "MEDIA_UPLOAD_PATH": "techblog/uploads/",
    "MEDIA_MAX_SIZE_MB": 10,
    "ALLOWED_IMAGE_TYPES": ["image/jpeg", "image/png", "image/gif", "image/webp"],

    # Comments
    "COMMENT_MAX_LENGTH": 5000,

    # SEO
    "SLUG_MAX_LENGTH": 255,
}


class TechBlogSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from techblog.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid techblog setting: {name}")

        user_settings = getattr(settings, "TECHBLOG", {})
        return user_settings.get(name, DEFAULTS[name])


blog_settings = TechBlogSettings()
