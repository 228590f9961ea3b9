"""
Shared fixtures for django-techblog tests.
"""
import io

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from techblog.content import Document, Section, SectionKind, encode

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Popular lists and view counters live in the cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username="testuser",
        email="test@example.com",
        password="testpass123",
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username="other",
        email="other@example.com",
        password="pass",
    )


@pytest.fixture
def document():
    """A document with one section of every kind."""
    return Document(sections=[
        Section(id="s1", kind=SectionKind.HEADER, content="Getting started"),
        Section(id="s2", kind=SectionKind.SUBHEADER, content="Install"),
        Section(
            id="s3",
            kind=SectionKind.TEXT,
            content="Run **pip** first",
            text_color="#333",
            is_bold=True,
        ),
        Section(id="s4", kind=SectionKind.IMAGE, image_url="/uploads/shot.png"),
        Section(
            id="s5",
            kind="two-column",
            layout="double",
            left_content="Left side",
            left_text_color="red",
            right_content="one\ntwo",
            right_is_bullet_list=True,
            right_list_style="list-decimal",
        ),
        Section(id="s6", kind=SectionKind.CODE, content="print('hi')", language="python"),
    ])


@pytest.fixture
def encoded(document):
    return encode(document)


@pytest.fixture
def png_upload():
    """A small valid PNG as an uploaded file."""

    def make(name="pixel.png", color="red", size=(4, 3)):
        buffer = io.BytesIO()
        Image.new("RGB", size, color).save(buffer, format="PNG")
        return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")

    return make
