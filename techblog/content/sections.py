"""
Section and Document models for structured blog content.

A blog body is an ordered sequence of typed sections. Sections are immutable;
every editing operation on a Document returns a new Document, so a snapshot
can be rendered or encoded while the editor keeps working on the next one.
"""
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator
from pydantic.alias_generators import to_camel


class SectionKind(str, Enum):
    HEADER = "header"
    SUBHEADER = "subheader"
    TEXT = "text"
    IMAGE = "image"
    TWO_COLUMN = "two-column"
    CODE = "code"


class Layout(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ListStyle(str, Enum):
    """Marker styles for bulleted text."""

    DISC = "disc"
    DECIMAL = "decimal"
    LOWER_ALPHA = "lower-alpha"
    UPPER_ALPHA = "upper-alpha"
    LOWER_ROMAN = "lower-roman"
    UPPER_ROMAN = "upper-roman"

    @classmethod
    def parse(cls, value):
        """
        Resolve a stored list style to a member.

        Accepts both the bare name ("decimal") and the editor's class-name
        form ("list-decimal"). Anything unrecognised falls back to DISC.
        """
        if not value:
            return cls.DISC
        name = value[len("list-"):] if value.startswith("list-") else value
        try:
            return cls(name)
        except ValueError:
            return cls.DISC


# Kinds whose primary content is text typed by the author.
TEXT_KINDS = frozenset({
    SectionKind.HEADER,
    SectionKind.SUBHEADER,
    SectionKind.TEXT,
    SectionKind.CODE,
})

# Top-level fields a two-column section keeps on its sides instead.
COLUMN_ONLY_FIELDS = ("content", "image_url")

# Validation context for content read back from storage.
STORED_CONTEXT = {"stored": True}

# Per-block fields, repeated with a left_/right_ prefix on two-column sections.
BLOCK_FIELDS = (
    "content",
    "image_url",
    "text_color",
    "font_size",
    "is_bold",
    "is_italic",
    "is_underline",
    "is_strikethrough",
    "is_bullet_list",
    "list_style",
)


def new_section_id():
    """Return a fresh section id."""
    return uuid.uuid4().hex


class Block(BaseModel):
    """
    Content and style of one renderable text/image block.

    A plain section has a single block built from its top-level fields; a
    two-column section has two, one per side, and they share nothing.
    """

    model_config = ConfigDict(frozen=True)

    content: Optional[str] = None
    image_url: Optional[str] = None
    text_color: Optional[str] = None
    font_size: Optional[str] = None
    is_bold: Optional[bool] = None
    is_italic: Optional[bool] = None
    is_underline: Optional[bool] = None
    is_strikethrough: Optional[bool] = None
    is_bullet_list: Optional[bool] = None
    list_style: Optional[str] = None


class Section(BaseModel):
    """
    One typed, styled block of blog content.

    Attributes use Python names; the persisted form uses the camelCase keys
    the editor writes (``imageUrl``, ``leftIsBold``, ``type`` for ``kind``).
    ``None`` means the attribute is absent, which is not the same as an empty
    string. Keys this model does not know about are kept as extras so they
    survive a decode/encode cycle.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
        extra="allow",
    )

    id: str
    kind: SectionKind = Field(alias="type")
    layout: Layout = Layout.SINGLE

    content: Optional[str] = None
    image_url: Optional[str] = None
    language: Optional[str] = None

    text_color: Optional[str] = None
    font_size: Optional[str] = None
    is_bold: Optional[bool] = None
    is_italic: Optional[bool] = None
    is_underline: Optional[bool] = None
    is_strikethrough: Optional[bool] = None
    is_bullet_list: Optional[bool] = None
    list_style: Optional[str] = None

    # Two-column sections: left side
    left_content: Optional[str] = None
    left_image_url: Optional[str] = None
    left_text_color: Optional[str] = None
    left_font_size: Optional[str] = None
    left_is_bold: Optional[bool] = None
    left_is_italic: Optional[bool] = None
    left_is_underline: Optional[bool] = None
    left_is_strikethrough: Optional[bool] = None
    left_is_bullet_list: Optional[bool] = None
    left_list_style: Optional[str] = None

    # Two-column sections: right side
    right_content: Optional[str] = None
    right_image_url: Optional[str] = None
    right_text_color: Optional[str] = None
    right_font_size: Optional[str] = None
    right_is_bold: Optional[bool] = None
    right_is_italic: Optional[bool] = None
    right_is_underline: Optional[bool] = None
    right_is_strikethrough: Optional[bool] = None
    right_is_bullet_list: Optional[bool] = None
    right_list_style: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _strip_stored_column_fields(cls, data, info):
        """Drop top-level content and image from stored two-column sections."""
        if not (info.context or {}).get("stored") or not isinstance(data, dict):
            return data
        if data.get("type", data.get("kind")) != SectionKind.TWO_COLUMN.value:
            return data
        dropped = {"content", "imageUrl", "image_url"}
        return {key: value for key, value in data.items() if key not in dropped}

    @model_validator(mode="after")
    def _check_column_fields(self):
        if self.kind is SectionKind.TWO_COLUMN:
            for name in COLUMN_ONLY_FIELDS:
                if getattr(self, name) is not None:
                    raise ValueError(f"Two-column sections have no top-level {name}")
        return self

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler):
        # Declared fields that are None are absent; extras are kept as stored.
        data = handler(self)
        extra = self.__pydantic_extra__ or {}
        return {key: value for key, value in data.items() if value is not None or key in extra}

    @classmethod
    def create(cls, kind, layout=None, **fields):
        """
        Build a new section of the given kind with a fresh id.

        Text-bearing kinds start with empty content. Two-column sections
        default to the double layout and leave the top-level content and
        image fields unset.
        """
        kind = SectionKind(kind)
        if layout is None:
            layout = Layout.DOUBLE if kind is SectionKind.TWO_COLUMN else Layout.SINGLE
        if kind in TEXT_KINDS:
            fields.setdefault("content", "")
        return cls(id=new_section_id(), kind=kind, layout=Layout(layout), **fields)

    @property
    def main(self):
        """The block built from this section's top-level fields."""
        return Block(**{name: getattr(self, name) for name in BLOCK_FIELDS})

    def column(self, side):
        """The left or right block of a two-column section."""
        prefix = Side(side).value
        return Block(**{name: getattr(self, f"{prefix}_{name}") for name in BLOCK_FIELDS})

    def evolve(self, **changes):
        """
        Return a copy with ``changes`` applied and validated.

        Changes may use attribute names or persisted keys. ``id`` and
        ``kind`` are fixed for the life of a section; changing the kind is
        done by deleting the section and creating a new one.
        """
        resolved = {}
        for key, value in changes.items():
            name = _ALIAS_TO_NAME.get(key, key)
            if name not in type(self).model_fields:
                raise ValueError(f"Unknown section attribute: {key}")
            if name in ("id", "kind"):
                raise ValueError(f"Section {name} cannot be changed")
            resolved[name] = value

        merged = self.model_dump()
        merged.update(resolved)
        return type(self).model_validate(merged)


_ALIAS_TO_NAME = {
    field.alias: name
    for name, field in Section.model_fields.items()
    if field.alias and field.alias != name
}


class Document(BaseModel):
    """
    Ordered sequence of sections forming one blog body.

    Order is the display order. Section ids are unique within a document.
    """

    model_config = ConfigDict(frozen=True)

    sections: tuple[Section, ...] = ()

    def __len__(self):
        return len(self.sections)

    @property
    def ids(self):
        return [section.id for section in self.sections]

    def index_of(self, section_id):
        """Return the position of ``section_id`` or -1 when absent."""
        for index, section in enumerate(self.sections):
            if section.id == section_id:
                return index
        return -1

    def get(self, section_id):
        index = self.index_of(section_id)
        return self.sections[index] if index >= 0 else None

    def append(self, section):
        if self.index_of(section.id) >= 0:
            raise ValueError(f"Duplicate section id: {section.id}")
        return Document(sections=self.sections + (section,))

    def update(self, section_id, **changes):
        """Apply ``changes`` to one section. Unknown ids are a no-op."""
        index = self.index_of(section_id)
        if index < 0:
            return self
        updated = self.sections[index].evolve(**changes)
        sections = list(self.sections)
        sections[index] = updated
        return Document(sections=sections)

    def delete(self, section_id):
        """Remove one section. Unknown ids are a no-op."""
        if self.index_of(section_id) < 0:
            return self
        return Document(sections=[s for s in self.sections if s.id != section_id])

    def move_up(self, section_id):
        index = self.index_of(section_id)
        if index <= 0:
            return self
        return self.move(index, index - 1)

    def move_down(self, section_id):
        index = self.index_of(section_id)
        if index < 0 or index >= len(self.sections) - 1:
            return self
        return self.move(index, index + 1)

    def move(self, from_index, to_index):
        """
        Move the section at ``from_index`` so it ends up at ``to_index``.

        The new sequence is rebuilt from the old one (remove, then insert),
        keeping every other section in its relative order. Indexes outside
        the document leave it unchanged.
        """
        size = len(self.sections)
        if not (0 <= from_index < size and 0 <= to_index < size):
            return self
        if from_index == to_index:
            return self
        rest = self.sections[:from_index] + self.sections[from_index + 1:]
        moved = self.sections[from_index]
        return Document(sections=rest[:to_index] + (moved,) + rest[to_index:])
