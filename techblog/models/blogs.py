"""
Blog, Category, and Tag models for django-techblog.
"""
from django.conf import settings
from django.core.cache import cache
from django.db import models
from django.urls import reverse
from django.utils import timezone
from django.utils.text import slugify

from ..conf import blog_settings
from ..content import RenderMode, decode, extract_summary, render_stored

# First path segments used by techblog.urls; a blog slug must not shadow them.
RESERVED_SLUGS = frozenset({"popular", "new", "preview", "id", "comments", "uploads"})

POPULAR_VERSION_KEY = "techblog:popular:version"


class Category(models.Model):
    """Category for organizing blogs."""

    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:100]
        super().save(*args, **kwargs)


class Tag(models.Model):
    """Flat tag for blogs."""

    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:100]
        super().save(*args, **kwargs)


class Blog(models.Model):
    """
    Blog post.

    ``content`` holds the encoded section list written by the editor, or
    plain text for posts that predate sections. It is decoded and rendered on
    read; nothing here interprets it beyond that.
    """

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    content = models.TextField(blank=True)
    excerpt = models.TextField(
        blank=True,
        help_text="Optional manual excerpt. Derived from the content if blank.",
    )
    cover_image = models.CharField(max_length=500, blank=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogs",
    )
    category = models.ForeignKey(
        Category,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="blogs",
    )
    tags = models.ManyToManyField(Tag, related_name="blogs", blank=True)

    published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)
    views = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["published", "-created_at"], name="techblog_blog_pub_created_idx"),
            models.Index(fields=["published", "-views"], name="techblog_blog_pub_views_idx"),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = self._unique_slug()

        if self.published and not self.published_at:
            self.published_at = timezone.now()

        existing = self.pk is not None
        super().save(*args, **kwargs)
        if existing and not self.published:
            self.clear_popular_cache()

    def delete(self, *args, **kwargs):
        result = super().delete(*args, **kwargs)
        self.clear_popular_cache()
        return result

    def _unique_slug(self):
        """Slug from the title, suffixed with -N when taken or reserved by a route."""
        max_length = blog_settings.SLUG_MAX_LENGTH
        base_slug = slugify(self.title)[:max_length] or "blog"
        slug = base_slug
        counter = 1
        while slug in RESERVED_SLUGS or Blog.objects.filter(slug=slug).exclude(pk=self.pk).exists():
            suffix = f"-{counter}"
            slug = base_slug[:max_length - len(suffix)] + suffix
            counter += 1
        return slug

    def get_absolute_url(self):
        return reverse("techblog:blog_detail", kwargs={"slug": self.slug})

    def decode_content(self):
        """Return the Structured or LegacyText form of the body."""
        return decode(self.content)

    def render_content(self, mode=RenderMode.RENDER):
        """Return the body as HTML."""
        return render_stored(self.content, mode)

    @property
    def display_text(self):
        """Preview text for list views: the excerpt, else a content summary."""
        if self.excerpt:
            return self.excerpt
        return extract_summary(self.content, blog_settings.SUMMARY_MAX_LENGTH)

    def can_edit(self, user):
        return bool(user and user.is_authenticated and user.pk == self.author_id)

    def publish(self):
        self.published = True
        self.published_at = timezone.now()
        self.save(update_fields=["published", "published_at", "updated_at"])

    def unpublish(self):
        self.published = False
        self.save(update_fields=["published", "updated_at"])

    def register_view(self, user=None):
        """
        Count a view, at most once per viewer per VIEW_DEDUP_TIMEOUT.

        Returns True when the view was counted.
        """
        viewer = user.pk if user and user.is_authenticated else "anonymous"
        key = f"techblog:view:{self.pk}:{viewer}"
        if not cache.add(key, 1, blog_settings.VIEW_DEDUP_TIMEOUT):
            return False
        Blog.objects.filter(pk=self.pk).update(views=models.F("views") + 1)
        self.views += 1
        return True

    @classmethod
    def with_counts(cls):
        return (
            cls.objects.select_related("author", "category")
            .prefetch_related("tags")
            .annotate(
                like_count=models.Count("likes", distinct=True),
                comment_count=models.Count("comments", distinct=True),
            )
        )

    @classmethod
    def listing(cls, category=None, tag=None, author=None):
        """
        Blogs for list views, newest first.

        Only published blogs are listed unless filtering by author email, in
        which case that author's drafts are included.
        """
        qs = cls.with_counts()
        if author:
            qs = qs.filter(author__email=author)
        else:
            qs = qs.filter(published=True)
        if category:
            qs = qs.filter(category__slug=category)
        if tag:
            qs = qs.filter(tags__slug=tag)
        return qs.order_by("-created_at")

    @classmethod
    def popular(cls, limit=None):
        """Most viewed published blogs, cached for POPULAR_CACHE_TIMEOUT."""
        limit = limit or blog_settings.POPULAR_LIMIT
        version = cache.get(POPULAR_VERSION_KEY, 0)
        return cache.get_or_set(
            f"techblog:popular:{version}:{limit}",
            lambda: list(
                cls.with_counts().filter(published=True).order_by("-views", "-created_at")[:limit]
            ),
            blog_settings.POPULAR_CACHE_TIMEOUT,
        )

    @staticmethod
    def clear_popular_cache():
        """Drop every cached popular list by moving to a new key version."""
        try:
            cache.incr(POPULAR_VERSION_KEY)
        except ValueError:
            cache.set(POPULAR_VERSION_KEY, 1, None)
