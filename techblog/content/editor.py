"""
Editing sessions for structured blog posts.

An EditingSession owns one Document for the life of an editor. All changes go
through it, each one replacing the document with a new snapshot. Saving and
image uploads are delegated to collaborators so the session itself does no
I/O.
"""
from typing import Protocol

import structlog
from django.core.exceptions import ValidationError

from .renderer import RenderMode, render_document
from .sections import COLUMN_ONLY_FIELDS, Document, Section, SectionKind
from .serializer import LegacyText, decode, encode

logger = structlog.get_logger()

IMAGE_FIELDS = ("image_url", "left_image_url", "right_image_url")


class BlogStore(Protocol):
    """Where blog posts are saved and loaded."""

    def save(self, blog_id, data):
        """Create (``blog_id`` is None) or update a post and return its id."""

    def load(self, blog_id):
        """Return the stored fields of a post, ``content`` included."""


class ImageUploader(Protocol):
    """Stores image files and hands back a path to reference them by."""

    def upload_image(self, file):
        ...


class EditingSession:
    """
    Single-writer editor state for one blog post.

    Holds the post metadata and the current Document. Reordering by drag is
    two-phase: ``pick_up`` remembers a source index, ``drop`` applies the
    move in one step or not at all.
    """

    def __init__(self, store, uploader=None, blog_id=None, title="", excerpt="",
                 cover_image="", document=None):
        self.store = store
        self.uploader = uploader
        self.blog_id = blog_id
        self.title = title
        self.excerpt = excerpt
        self.cover_image = cover_image
        self.document = document if document is not None else Document()
        self._picked_index = None

    @classmethod
    def load(cls, store, blog_id, uploader=None):
        """
        Open an existing post for editing.

        Posts stored as plain text are converted into a single text section
        so they can be edited with the same tools.
        """
        data = store.load(blog_id)
        result = decode(data.get("content") or "[]")
        if isinstance(result, LegacyText):
            document = Document(sections=[Section.create(SectionKind.TEXT, content=result.text)])
        else:
            document = result.document
        return cls(
            store,
            uploader=uploader,
            blog_id=blog_id,
            title=data.get("title") or "",
            excerpt=data.get("excerpt") or "",
            cover_image=data.get("cover_image") or "",
            document=document,
        )

    @property
    def sections(self):
        return self.document.sections

    def add_section(self, kind, layout=None, **fields):
        """Append a new section and return its id."""
        section = Section.create(kind, layout, **fields)
        while self.document.index_of(section.id) >= 0:
            section = Section.create(kind, layout, **fields)
        self.document = self.document.append(section)
        return section.id

    def update_section(self, section_id, **changes):
        self.document = self.document.update(section_id, **changes)

    def delete_section(self, section_id):
        self.document = self.document.delete(section_id)

    def move_section_up(self, section_id):
        self.document = self.document.move_up(section_id)

    def move_section_down(self, section_id):
        self.document = self.document.move_down(section_id)

    def move_section(self, from_index, to_index):
        self.document = self.document.move(from_index, to_index)

    def pick_up(self, index):
        """Start a drag from ``index``."""
        self._picked_index = index if 0 <= index < len(self.document) else None

    def drop(self, index):
        """
        Finish a drag at ``index``.

        Returns True when the document changed. Dropping with nothing picked
        up, or onto the same place, changes nothing.
        """
        source, self._picked_index = self._picked_index, None
        if source is None:
            return False
        before = self.document
        self.document = before.move(source, index)
        return self.document is not before

    def attach_image(self, file, section_id=None, field="image_url"):
        """
        Upload ``file`` and reference it from a section or the cover.

        Without ``section_id`` the upload becomes the cover image.
        """
        if self.uploader is None:
            raise RuntimeError("No image uploader configured for this session")
        if field not in IMAGE_FIELDS:
            raise ValueError(f"Not an image field: {field}")
        section = self.document.get(section_id) if section_id is not None else None
        if section is not None and section.kind is SectionKind.TWO_COLUMN and field in COLUMN_ONLY_FIELDS:
            raise ValueError("Two-column images go on a side: use left_image_url or right_image_url")
        url = self.uploader.upload_image(file)
        if section_id is None:
            self.cover_image = url
        else:
            self.update_section(section_id, **{field: url})
        logger.info("session_image_attached", blog_id=self.blog_id, section_id=section_id, url=url)
        return url

    def preview(self, image_base_url=None):
        """Render the current document exactly as the published page would."""
        return render_document(self.document, RenderMode.PREVIEW, image_base_url=image_base_url)

    def content(self):
        return encode(self.document)

    def save(self, publish=False):
        """
        Encode the document and hand it to the store.

        A post needs a title and at least one section.
        """
        if not self.title.strip() or len(self.document) == 0:
            logger.warning("session_save_rejected", blog_id=self.blog_id)
            raise ValidationError("Title and content are required")

        data = {
            "title": self.title,
            "content": self.content(),
            "excerpt": self.excerpt.strip(),
            "cover_image": self.cover_image,
            "published": publish,
        }
        self.blog_id = self.store.save(self.blog_id, data)
        logger.info("session_saved", blog_id=self.blog_id, sections=len(self.document), published=publish)
        return self.blog_id

    def unpublish(self):
        if self.blog_id is None:
            raise ValueError("Cannot unpublish a post that was never saved")
        self.store.save(self.blog_id, {"published": False})
