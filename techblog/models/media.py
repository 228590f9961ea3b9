"""
Image upload storage for django-techblog.

Uploads are content-addressed: the same file uploaded twice is stored once
and both uploads get the same URL.
"""
import hashlib
import os

import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from PIL import Image

from ..conf import blog_settings

logger = structlog.get_logger()


def get_upload_path(instance, filename):
    """Store files under their content hash, keeping the extension."""
    extension = os.path.splitext(filename)[1].lower()
    return f"{blog_settings.MEDIA_UPLOAD_PATH}{instance.content_hash}{extension}"


class ImageUpload(models.Model):
    """An uploaded image referenced from blog sections or covers."""

    file = models.ImageField(upload_to=get_upload_path, width_field="width", height_field="height")
    content_hash = models.CharField(
        max_length=64,
        unique=True,
        db_index=True,
        help_text="SHA256 hash of file content for deduplication",
    )
    original_filename = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(default=0, help_text="File size in bytes")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    mime_type = models.CharField(max_length=100, blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="blog_uploads",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Image Upload"

    def __str__(self):
        return self.original_filename

    @property
    def url(self):
        return self.file.url

    @property
    def human_file_size(self):
        """Return human-readable file size."""
        size = self.file_size
        for unit in ["B", "KB", "MB"]:
            if size < 1024:
                return f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} GB"

    @classmethod
    def get_or_create_from_file(cls, file_obj, uploaded_by=None):
        """
        Get the existing upload for this content or store a new one.

        Args:
            file_obj: Django UploadedFile
            uploaded_by: User who uploaded the file

        Returns:
            (ImageUpload instance, created boolean)

        Raises:
            ValidationError: wrong type, too large, or not a readable image
        """
        mime_type = getattr(file_obj, "content_type", "") or ""
        if mime_type not in blog_settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Unsupported image type: {mime_type or 'unknown'}")
        if file_obj.size > blog_settings.MEDIA_MAX_SIZE_MB * 1024 * 1024:
            raise ValidationError("Image is too large")

        hasher = hashlib.sha256()
        for chunk in file_obj.chunks():
            hasher.update(chunk)
        content_hash = hasher.hexdigest()

        existing = cls.objects.filter(content_hash=content_hash).first()
        if existing:
            return existing, False

        file_obj.seek(0)
        try:
            with Image.open(file_obj) as img:
                img.verify()
        except (OSError, SyntaxError, ValueError) as exc:
            raise ValidationError("File is not a valid image") from exc
        file_obj.seek(0)

        item = cls(
            content_hash=content_hash,
            original_filename=file_obj.name,
            file_size=file_obj.size,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )
        item.file.save(file_obj.name, file_obj, save=False)
        item.save()
        logger.info("image_uploaded", content_hash=content_hash, size=file_obj.size)
        return item, True
