"""
Django-backed collaborators for editing sessions.

    session = EditingSession(ModelBlogStore(request.user), MediaUploader(request.user))
"""
import structlog
from django.core.exceptions import PermissionDenied

from .models import Blog, ImageUpload

logger = structlog.get_logger()

BLOG_FIELDS = ("title", "content", "excerpt", "cover_image", "published")


class ModelBlogStore:
    """Saves and loads blogs owned by ``author``."""

    def __init__(self, author):
        self.author = author

    def save(self, blog_id, data):
        fields = {key: data[key] for key in BLOG_FIELDS if key in data}

        if blog_id is None:
            blog = Blog.objects.create(author=self.author, **fields)
            logger.info("blog_created", blog_id=blog.pk, author_id=self.author.pk)
            return blog.pk

        blog = Blog.objects.get(pk=blog_id)
        if not blog.can_edit(self.author):
            raise PermissionDenied("You can only update your own blogs")
        if "title" in fields and fields["title"] != blog.title:
            blog.slug = ""
        for key, value in fields.items():
            setattr(blog, key, value)
        blog.save()
        logger.info("blog_updated", blog_id=blog.pk, fields=sorted(fields))
        return blog.pk

    def load(self, blog_id):
        blog = Blog.objects.get(pk=blog_id)
        return {key: getattr(blog, key) for key in BLOG_FIELDS}


class MediaUploader:
    """Stores uploaded images in the media library."""

    def __init__(self, user=None):
        self.user = user

    def upload_image(self, file):
        item, _ = ImageUpload.get_or_create_from_file(file, uploaded_by=self.user)
        return item.url
