"""
Tests for django-techblog models.
"""
import pytest
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile

from techblog.content import LegacyText, RenderMode, Structured
from techblog.models import Blog, Category, Comment, ImageUpload, Like, Tag
from techblog.store import MediaUploader, ModelBlogStore


@pytest.fixture
def category(db):
    """Create a test category."""
    return Category.objects.create(name="Test Category")


@pytest.fixture
def tag(db):
    """Create a test tag."""
    return Tag.objects.create(name="Python Tips")


@pytest.fixture
def blog(db, user, category, encoded):
    """Create a published test blog."""
    return Blog.objects.create(
        title="Test Blog",
        content=encoded,
        author=user,
        category=category,
        published=True,
    )


class TestCategory:
    """Tests for Category model."""

    def test_str(self, category):
        assert str(category) == "Test Category"

    def test_slug_generated(self, category):
        assert category.slug == "test-category"


class TestTag:
    def test_slug_generated(self, tag):
        assert tag.slug == "python-tips"
        assert str(tag) == "Python Tips"


class TestBlog:
    """Tests for Blog model."""

    def test_str(self, blog):
        assert str(blog) == "Test Blog"

    def test_slug_generated(self, blog):
        assert blog.slug == "test-blog"

    def test_slug_deduplicated(self, blog, user):
        second = Blog.objects.create(title="Test Blog", author=user)
        third = Blog.objects.create(title="Test Blog", author=user)
        assert second.slug == "test-blog-1"
        assert third.slug == "test-blog-2"

    @pytest.mark.parametrize("title", ["Popular", "New", "Preview", "Comments", "Uploads", "Id"])
    def test_slug_avoids_route_names(self, user, title):
        blog = Blog.objects.create(title=title, author=user)
        assert blog.slug == f"{title.lower()}-1"

    def test_long_slug_suffix_fits(self, user):
        title = "a" * 300
        first = Blog.objects.create(title=title, author=user)
        second = Blog.objects.create(title=title, author=user)
        assert first.slug == "a" * 255
        assert len(second.slug) == 255
        assert second.slug.endswith("-1")

    def test_slug_fallback(self, user):
        assert Blog.objects.create(title="!!!", author=user).slug == "blog"

    def test_published_at_set(self, blog):
        assert blog.published_at is not None

    def test_draft_has_no_published_at(self, user):
        draft = Blog.objects.create(title="Draft", author=user)
        assert draft.published_at is None

    def test_absolute_url(self, blog):
        assert blog.get_absolute_url() == "/blogs/test-blog/"

    def test_decode_content(self, blog, user):
        assert isinstance(blog.decode_content(), Structured)
        legacy = Blog.objects.create(title="Old", content="plain", author=user)
        assert legacy.decode_content() == LegacyText(text="plain")

    def test_render_content(self, blog):
        html = blog.render_content()
        assert html.startswith('<div class="max-w-none">')
        assert '<h1 class="text-3xl font-bold mb-6">Getting started</h1>' in html
        assert "blog-preview" in blog.render_content(RenderMode.PREVIEW)

    def test_display_text_prefers_excerpt(self, blog):
        blog.excerpt = "Hand written"
        assert blog.display_text == "Hand written"

    def test_display_text_from_summary(self, blog):
        assert blog.display_text == "Getting started Install Run **pip** first"

    def test_display_text_for_legacy_content(self, user):
        legacy = Blog.objects.create(title="Old", content="plain words", author=user)
        assert legacy.display_text == ""

    def test_can_edit(self, blog, user, other_user):
        assert blog.can_edit(user)
        assert not blog.can_edit(other_user)
        assert not blog.can_edit(AnonymousUser())

    def test_publish_and_unpublish(self, user):
        draft = Blog.objects.create(title="Draft", author=user)
        draft.publish()
        draft.refresh_from_db()
        assert draft.published
        assert draft.published_at is not None

        draft.unpublish()
        draft.refresh_from_db()
        assert not draft.published


class TestViewCounting:
    """Tests for Blog.register_view."""

    def test_counts_once_per_viewer(self, blog, user):
        assert blog.register_view(user) is True
        assert blog.register_view(user) is False
        blog.refresh_from_db()
        assert blog.views == 1

    def test_viewers_counted_separately(self, blog, user, other_user):
        blog.register_view(user)
        blog.register_view(other_user)
        blog.register_view(AnonymousUser())
        blog.refresh_from_db()
        assert blog.views == 3

    def test_counts_again_after_expiry(self, blog, user):
        blog.register_view(user)
        cache.clear()
        blog.register_view(user)
        blog.refresh_from_db()
        assert blog.views == 2


class TestQueries:
    """Listing and popularity queries."""

    @pytest.fixture
    def blogs(self, user, other_user, category, tag):
        first = Blog.objects.create(title="First", author=user, published=True, views=5)
        second = Blog.objects.create(
            title="Second", author=other_user, published=True, views=50, category=category
        )
        second.tags.add(tag)
        draft = Blog.objects.create(title="Draft", author=user, views=500)
        return first, second, draft

    def test_listing_excludes_drafts(self, blogs):
        first, second, _ = blogs
        assert list(Blog.listing()) == [second, first]

    def test_listing_by_author_includes_drafts(self, blogs, user):
        first, _, draft = blogs
        assert list(Blog.listing(author=user.email)) == [draft, first]

    def test_listing_by_category_and_tag(self, blogs, category, tag):
        _, second, _ = blogs
        assert list(Blog.listing(category=category.slug)) == [second]
        assert list(Blog.listing(tag=tag.slug)) == [second]

    def test_listing_counts(self, blogs, user, other_user):
        first, _, _ = blogs
        Like.objects.create(blog=first, user=user)
        Like.objects.create(blog=first, user=other_user)
        Comment.objects.create(blog=first, author=user, content="Hi")
        annotated = Blog.listing().get(pk=first.pk)
        assert annotated.like_count == 2
        assert annotated.comment_count == 1

    def test_popular_by_views(self, blogs):
        first, second, _ = blogs
        assert [b.pk for b in Blog.popular()] == [second.pk, first.pk]

    def test_popular_is_cached(self, blogs, user):
        before = [b.pk for b in Blog.popular()]
        Blog.objects.create(title="Hot", author=user, published=True, views=9999)
        assert [b.pk for b in Blog.popular()] == before

    def test_popular_drops_unpublished_blog(self, blogs):
        first, second, _ = blogs
        assert second.pk in [b.pk for b in Blog.popular()]
        second.unpublish()
        assert [b.pk for b in Blog.popular()] == [first.pk]

    def test_popular_drops_deleted_blog(self, blogs):
        first, second, _ = blogs
        Blog.popular()
        second.delete()
        assert [b.pk for b in Blog.popular()] == [first.pk]

    def test_popular_limit(self, blogs):
        assert len(Blog.popular(1)) == 1


class TestComment:
    """Tests for Comment model."""

    def test_thread_order(self, blog, user, other_user):
        older = Comment.objects.create(blog=blog, author=user, content="older")
        newer = Comment.objects.create(blog=blog, author=other_user, content="newer")
        reply_a = Comment.objects.create(blog=blog, author=other_user, parent=older, content="a")
        reply_b = Comment.objects.create(blog=blog, author=user, parent=older, content="b")

        thread = list(Comment.thread_for(blog))
        assert thread == [newer, older]
        assert list(thread[1].replies.all()) == [reply_a, reply_b]
        assert reply_a.is_reply
        assert not older.is_reply

    def test_preview_truncated(self, blog, user):
        comment = Comment(blog=blog, author=user, content="x" * 150)
        assert comment.preview == "x" * 100 + "..."

    def test_can_delete(self, blog, user, other_user):
        comment = Comment.objects.create(blog=blog, author=user, content="mine")
        assert comment.can_delete(user)
        assert not comment.can_delete(other_user)


class TestLike:
    def test_toggle(self, blog, user):
        assert Like.toggle(blog, user) is True
        assert blog.likes.count() == 1
        assert Like.toggle(blog, user) is False
        assert blog.likes.count() == 0

    def test_likes_are_per_user(self, blog, user, other_user):
        Like.toggle(blog, user)
        Like.toggle(blog, other_user)
        assert blog.likes.count() == 2


class TestImageUpload:
    """Tests for ImageUpload model."""

    def test_create_from_file(self, user, png_upload):
        item, created = ImageUpload.get_or_create_from_file(png_upload(), uploaded_by=user)
        assert created
        assert (item.width, item.height) == (4, 3)
        assert item.mime_type == "image/png"
        assert item.original_filename == "pixel.png"
        assert item.url.startswith("/uploads/techblog/uploads/")
        assert item.url.endswith(".png")

    def test_same_content_deduplicated(self, user, png_upload):
        first, _ = ImageUpload.get_or_create_from_file(png_upload("a.png"), uploaded_by=user)
        second, created = ImageUpload.get_or_create_from_file(png_upload("b.png"), uploaded_by=user)
        assert not created
        assert second.pk == first.pk
        assert ImageUpload.objects.count() == 1

    def test_different_content_stored_separately(self, user, png_upload):
        ImageUpload.get_or_create_from_file(png_upload(color="red"))
        ImageUpload.get_or_create_from_file(png_upload(color="blue"))
        assert ImageUpload.objects.count() == 2

    def test_rejects_wrong_type(self, db, png_upload):
        upload = png_upload()
        upload.content_type = "application/pdf"
        with pytest.raises(ValidationError):
            ImageUpload.get_or_create_from_file(upload)

    def test_rejects_broken_image(self, db):
        upload = SimpleUploadedFile("bad.png", b"not an image", content_type="image/png")
        with pytest.raises(ValidationError):
            ImageUpload.get_or_create_from_file(upload)
        assert ImageUpload.objects.count() == 0

    def test_human_file_size(self):
        assert ImageUpload(file_size=512).human_file_size == "512.0 B"
        assert ImageUpload(file_size=2048).human_file_size == "2.0 KB"


class TestModelBlogStore:
    """Tests for the Django-backed editor collaborators."""

    def test_create_and_load(self, user, encoded):
        store = ModelBlogStore(user)
        blog_id = store.save(None, {"title": "New", "content": encoded, "published": True})
        data = store.load(blog_id)
        assert data["title"] == "New"
        assert data["content"] == encoded
        assert data["published"] is True
        assert Blog.objects.get(pk=blog_id).author == user

    def test_update_resets_slug_on_title_change(self, blog, user):
        ModelBlogStore(user).save(blog.pk, {"title": "Renamed"})
        blog.refresh_from_db()
        assert blog.slug == "renamed"

    def test_partial_update(self, blog, user):
        ModelBlogStore(user).save(blog.pk, {"published": False})
        blog.refresh_from_db()
        assert not blog.published
        assert blog.slug == "test-blog"

    def test_update_by_other_user_denied(self, blog, other_user):
        with pytest.raises(PermissionDenied):
            ModelBlogStore(other_user).save(blog.pk, {"title": "Mine now"})

    def test_media_uploader(self, user, png_upload):
        url = MediaUploader(user).upload_image(png_upload())
        assert url == ImageUpload.objects.get().url
