"""
Django admin configuration for techblog.
"""
from django.contrib import admin
from django.utils.html import format_html

from .content import RenderMode
from .models import Blog, Category, Comment, ImageUpload, Like, Tag


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "created_at"]
    search_fields = ["name", "slug", "description"]
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ["created_at"]


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "author",
        "published",
        "category",
        "views",
        "summary",
        "created_at",
    ]
    list_filter = ["published", "category", "created_at"]
    search_fields = ["title", "excerpt", "author__username", "author__email"]
    raw_id_fields = ["author", "category"]
    filter_horizontal = ["tags"]
    date_hierarchy = "created_at"
    readonly_fields = ["content_preview", "views", "created_at", "updated_at", "published_at"]
    prepopulated_fields = {"slug": ("title",)}

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "author", "excerpt", "cover_image")
        }),
        ("Content", {
            "fields": ("content", "content_preview"),
        }),
        ("Taxonomy", {
            "fields": ("category", "tags")
        }),
        ("Status", {
            "fields": ("published", "published_at", "views", "created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_blogs", "unpublish_blogs"]

    @admin.display(description="Summary")
    def summary(self, obj):
        return obj.display_text[:80]

    @admin.display(description="Preview")
    def content_preview(self, obj):
        if not obj.pk:
            return "-"
        return format_html('<div class="techblog-preview">{}</div>', obj.render_content(RenderMode.PREVIEW))

    @admin.action(description="Publish selected blogs")
    def publish_blogs(self, request, queryset):
        for blog in queryset:
            blog.publish()
        self.message_user(request, f"{queryset.count()} blogs published.")

    @admin.action(description="Unpublish selected blogs")
    def unpublish_blogs(self, request, queryset):
        count = queryset.update(published=False)
        Blog.clear_popular_cache()
        self.message_user(request, f"{count} blogs unpublished.")

    def delete_queryset(self, request, queryset):
        super().delete_queryset(request, queryset)
        Blog.clear_popular_cache()


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ["preview", "author", "blog", "parent", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["content", "author__username", "blog__title"]
    raw_id_fields = ["blog", "author", "parent"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Like)
class LikeAdmin(admin.ModelAdmin):
    list_display = ["user", "blog", "created_at"]
    search_fields = ["user__username", "blog__title"]
    raw_id_fields = ["user", "blog"]


@admin.register(ImageUpload)
class ImageUploadAdmin(admin.ModelAdmin):
    list_display = [
        "thumbnail_preview",
        "original_filename",
        "human_file_size",
        "dimensions",
        "uploaded_by",
        "created_at",
    ]
    list_filter = ["created_at"]
    search_fields = ["original_filename"]
    readonly_fields = [
        "content_hash",
        "file_size",
        "width",
        "height",
        "mime_type",
        "created_at",
    ]

    @admin.display(description="Preview")
    def thumbnail_preview(self, obj):
        if obj.file:
            return format_html(
                '<img src="{}" style="max-width: 50px; max-height: 50px;" />',
                obj.file.url,
            )
        return "-"

    @admin.display(description="Size")
    def dimensions(self, obj):
        if obj.width and obj.height:
            return f"{obj.width}x{obj.height}"
        return "-"
