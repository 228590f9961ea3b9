"""
URL configuration for django-techblog.

Include in your project urls.py:

    path('api/blogs/', include('techblog.urls')),
"""
from django.urls import path

from . import views

app_name = "techblog"

urlpatterns = [
    # Listing
    path("", views.BlogListView.as_view(), name="blog_list"),
    path("popular/", views.PopularBlogListView.as_view(), name="blog_popular"),

    # Blog CRUD
    path("new/", views.BlogCreateView.as_view(), name="blog_create"),
    path("preview/", views.PreviewView.as_view(), name="blog_preview"),
    path("id/<int:pk>/", views.BlogByIdView.as_view(), name="blog_by_id"),
    path("id/<int:pk>/edit/", views.BlogUpdateView.as_view(), name="blog_update"),

    # Interactions
    path("id/<int:pk>/like/", views.LikeToggleView.as_view(), name="like_toggle"),
    path("id/<int:pk>/comments/", views.CommentListView.as_view(), name="comment_list"),
    path("id/<int:pk>/comments/new/", views.CommentCreateView.as_view(), name="comment_create"),
    path("comments/<int:pk>/", views.CommentDeleteView.as_view(), name="comment_delete"),

    # Uploads
    path("uploads/image/", views.ImageUploadView.as_view(), name="image_upload"),

    # Must stay last: matches any slug
    path("<slug:slug>/", views.BlogDetailView.as_view(), name="blog_detail"),
]
