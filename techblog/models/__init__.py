"""
Models for django-techblog.

All models are importable from techblog.models:

    from techblog.models import Blog, Category, Tag, Comment, Like, ImageUpload
"""
from .blogs import Category, Tag, Blog
from .comments import Comment, Like
from .media import ImageUpload

__all__ = [
    # Blogs
    "Category",
    "Tag",
    "Blog",
    # Engagement
    "Comment",
    "Like",
    # Media
    "ImageUpload",
]
