"""
JSON views for django-techblog.
"""
import json
import math

import structlog
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.paginator import Paginator
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404
from django.views import View

from .conf import blog_settings
from .content import RenderMode, render_stored
from .forms import BlogForm, CommentForm
from .models import Blog, Comment, Like
from .store import MediaUploader

logger = structlog.get_logger()


class ApiLoginRequiredMixin(LoginRequiredMixin):
    """Answer anonymous requests with 403 instead of a login redirect."""

    raise_exception = True


def _read_payload(request):
    """Return the request body as a dict (JSON or form encoded)."""
    if request.content_type == "application/json":
        try:
            payload = json.loads(request.body or b"{}")
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None
    return request.POST.dict()


def _int_param(params, name, default):
    try:
        value = int(params.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _author_payload(user):
    return {
        "id": user.pk,
        "username": user.get_username(),
        "name": user.get_full_name() or user.get_username(),
    }


def blog_payload(blog, user=None, include_content=False):
    """Serialize a blog for API responses."""
    like_count = getattr(blog, "like_count", None)
    comment_count = getattr(blog, "comment_count", None)
    payload = {
        "id": blog.pk,
        "title": blog.title,
        "slug": blog.slug,
        "excerpt": blog.excerpt,
        "display_text": blog.display_text,
        "cover_image": blog.cover_image,
        "published": blog.published,
        "published_at": blog.published_at.isoformat() if blog.published_at else None,
        "views": blog.views,
        "created_at": blog.created_at.isoformat(),
        "updated_at": blog.updated_at.isoformat(),
        "author": _author_payload(blog.author),
        "category": (
            {"name": blog.category.name, "slug": blog.category.slug} if blog.category else None
        ),
        "tags": [{"name": tag.name, "slug": tag.slug} for tag in blog.tags.all()],
        "like_count": like_count if like_count is not None else blog.likes.count(),
        "comment_count": comment_count if comment_count is not None else blog.comments.count(),
        "is_liked": bool(
            user and user.is_authenticated and blog.likes.filter(user=user).exists()
        ),
    }
    if include_content:
        payload["content"] = blog.content
        payload["html"] = str(blog.render_content())
    return payload


def comment_payload(comment, include_replies=True):
    payload = {
        "id": comment.pk,
        "content": comment.content,
        "author": _author_payload(comment.author),
        "parent_id": comment.parent_id,
        "created_at": comment.created_at.isoformat(),
    }
    if include_replies:
        payload["replies"] = [
            comment_payload(reply, include_replies=False) for reply in comment.replies.all()
        ]
    return payload


def _visible_blog(user, **lookup):
    """Fetch a blog; drafts are only visible to their author."""
    blog = get_object_or_404(Blog.with_counts(), **lookup)
    if not blog.published and not blog.can_edit(user):
        raise Http404("Blog not found")
    return blog


class BlogListView(View):
    """Paginated list of published blogs, optionally filtered."""

    def get(self, request):
        page = _int_param(request.GET, "page", 1)
        limit = min(
            _int_param(request.GET, "limit", blog_settings.POSTS_PER_PAGE),
            blog_settings.MAX_PAGE_SIZE,
        )
        qs = Blog.listing(
            category=request.GET.get("category"),
            tag=request.GET.get("tag"),
            author=request.GET.get("author"),
        )
        paginator = Paginator(qs, limit)
        total = paginator.count
        blogs = paginator.page(page).object_list if page <= paginator.num_pages else []

        return JsonResponse({
            "blogs": [blog_payload(blog, request.user) for blog in blogs],
            "total": total,
            "pages": math.ceil(total / limit),
            "page": page,
        })


class PopularBlogListView(View):
    """Most viewed blogs."""

    def get(self, request):
        limit = min(
            _int_param(request.GET, "limit", blog_settings.POPULAR_LIMIT),
            blog_settings.MAX_PAGE_SIZE,
        )
        blogs = Blog.popular(limit)
        return JsonResponse({"blogs": [blog_payload(blog, request.user) for blog in blogs]})


class BlogDetailView(View):
    """A single blog by slug. Counts a view."""

    def get(self, request, slug):
        blog = _visible_blog(request.user, slug=slug)
        blog.register_view(request.user)
        return JsonResponse(blog_payload(blog, request.user, include_content=True))


class BlogByIdView(View):
    """A single blog by id, as loaded by the editor. Does not count a view."""

    def get(self, request, pk):
        blog = _visible_blog(request.user, pk=pk)
        return JsonResponse(blog_payload(blog, request.user, include_content=True))


class BlogCreateView(ApiLoginRequiredMixin, View):
    """Create a blog owned by the current user."""

    def post(self, request):
        payload = _read_payload(request)
        if payload is None:
            return JsonResponse({"error": "Invalid request body"}, status=400)

        form = BlogForm(payload)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

        blog = form.save(commit=False)
        blog.author = request.user
        blog.save()
        form.save_m2m()
        logger.info("blog_created", blog_id=blog.pk, author_id=request.user.pk)
        return JsonResponse(blog_payload(blog, request.user, include_content=True), status=201)


class BlogUpdateView(ApiLoginRequiredMixin, View):
    """Update or delete one of the current user's blogs."""

    def _get_owned(self, request, pk):
        blog = get_object_or_404(Blog, pk=pk)
        if not blog.can_edit(request.user):
            raise PermissionDenied("You can only change your own blogs")
        return blog

    def patch(self, request, pk):
        blog = self._get_owned(request, pk)
        payload = _read_payload(request)
        if payload is None:
            return JsonResponse({"error": "Invalid request body"}, status=400)

        data = BlogForm.initial_data(blog)
        data.update(payload)
        title_changed = data["title"] != blog.title
        form = BlogForm(data, instance=blog)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

        blog = form.save(commit=False)
        if title_changed:
            blog.slug = ""
        blog.save()
        form.save_m2m()
        logger.info("blog_updated", blog_id=blog.pk, fields=sorted(payload))
        return JsonResponse(blog_payload(blog, request.user, include_content=True))

    def delete(self, request, pk):
        blog = self._get_owned(request, pk)
        blog.delete()
        logger.info("blog_deleted", blog_id=pk)
        return JsonResponse({"message": "Blog deleted successfully"})


class LikeToggleView(ApiLoginRequiredMixin, View):
    """Toggle the current user's like on a blog."""

    def post(self, request, pk):
        blog = _visible_blog(request.user, pk=pk)
        liked = Like.toggle(blog, request.user)
        return JsonResponse({"liked": liked, "like_count": blog.likes.count()})


class CommentListView(View):
    """Threaded comments for a blog."""

    def get(self, request, pk):
        blog = _visible_blog(request.user, pk=pk)
        comments = Comment.thread_for(blog)
        return JsonResponse({"comments": [comment_payload(c) for c in comments]})


class CommentCreateView(ApiLoginRequiredMixin, View):
    """Add a comment, or a reply when ``parent_id`` is given."""

    def post(self, request, pk):
        blog = _visible_blog(request.user, pk=pk)
        payload = _read_payload(request)
        if payload is None:
            return JsonResponse({"error": "Invalid request body"}, status=400)

        form = CommentForm(payload)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors.get_json_data()}, status=400)

        parent = None
        parent_id = form.cleaned_data.get("parent_id")
        if parent_id:
            parent = get_object_or_404(Comment, pk=parent_id, blog=blog)

        comment = Comment.objects.create(
            blog=blog,
            author=request.user,
            parent=parent,
            content=form.cleaned_data["content"],
        )
        return JsonResponse(comment_payload(comment), status=201)


class CommentDeleteView(ApiLoginRequiredMixin, View):
    """Delete one of the current user's comments."""

    def delete(self, request, pk):
        comment = get_object_or_404(Comment, pk=pk)
        if not comment.can_delete(request.user):
            raise PermissionDenied("You can only delete your own comments")
        comment.delete()
        return JsonResponse({"message": "Comment deleted successfully"})


class ImageUploadView(ApiLoginRequiredMixin, View):
    """Store an uploaded image and return its URL."""

    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return JsonResponse({"error": "No file uploaded"}, status=400)
        try:
            url = MediaUploader(request.user).upload_image(upload)
        except ValidationError as exc:
            return JsonResponse({"error": " ".join(exc.messages)}, status=400)
        return JsonResponse({"url": url}, status=201)


class PreviewView(ApiLoginRequiredMixin, View):
    """Render unsaved editor content the way the published page will."""

    def post(self, request):
        payload = _read_payload(request)
        if payload is None:
            return JsonResponse({"error": "Invalid request body"}, status=400)
        html = render_stored(payload.get("content") or "[]", RenderMode.PREVIEW)
        return JsonResponse({"html": str(html)})
