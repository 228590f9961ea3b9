"""
Forms for django-techblog.
"""
from django import forms

from .conf import blog_settings
from .models import Blog, Comment


class BlogForm(forms.ModelForm):
    """Validates blog create/update payloads."""

    class Meta:
        model = Blog
        fields = ["title", "content", "excerpt", "cover_image", "published", "category", "tags"]

    def clean_title(self):
        title = self.cleaned_data["title"].strip()
        if not title:
            raise forms.ValidationError("Title is required")
        return title

    @staticmethod
    def initial_data(blog):
        """Current field values of ``blog``, shaped like a request payload."""
        return {
            "title": blog.title,
            "content": blog.content,
            "excerpt": blog.excerpt,
            "cover_image": blog.cover_image,
            "published": blog.published,
            "category": blog.category_id,
            "tags": [tag.pk for tag in blog.tags.all()],
        }


class CommentForm(forms.ModelForm):
    """Validates new comments."""

    parent_id = forms.IntegerField(required=False)

    class Meta:
        model = Comment
        fields = ["content"]

    def clean_content(self):
        content = self.cleaned_data["content"].strip()
        if not content:
            raise forms.ValidationError("Comment content required")
        if len(content) > blog_settings.COMMENT_MAX_LENGTH:
            raise forms.ValidationError("Comment is too long")
        return content
