"""
Encode and decode the persisted form of a blog body.

The stored form is a JSON array of section objects. Posts written before
sections existed hold plain text instead; those decode to LegacyText rather
than failing.
"""
import re
from dataclasses import dataclass

import structlog
from pydantic import TypeAdapter, ValidationError

from .sections import STORED_CONTEXT, Document, Section, SectionKind

logger = structlog.get_logger()

_SECTION_LIST = TypeAdapter(tuple[Section, ...])

TAG_PATTERN = re.compile(r"<[^>]*>")

SUMMARY_KINDS = frozenset({
    SectionKind.TEXT,
    SectionKind.HEADER,
    SectionKind.SUBHEADER,
})

ELLIPSIS = "..."


@dataclass(frozen=True)
class Structured:
    """Stored content that parsed as a section list."""

    document: Document

    @property
    def sections(self):
        return self.document.sections


@dataclass(frozen=True)
class LegacyText:
    """Stored content that is not section data, kept exactly as stored."""

    text: str


def encode(document):
    """
    Serialize a Document (or any iterable of sections) to a string.

    Absent attributes are left out, so they stay absent after decoding.
    Unknown keys carried over from stored content are written back as they
    were, null values included.
    An empty document encodes to ``"[]"``.
    """
    sections = document.sections if isinstance(document, Document) else tuple(document)
    return _SECTION_LIST.dump_json(sections, by_alias=True).decode()


def decode(stored):
    """
    Parse stored content into Structured or LegacyText.

    Never raises: anything that is not a JSON array of section objects with
    a string id and a known type comes back as LegacyText. Stray top-level
    content or image fields on stored two-column sections are dropped.
    """
    if stored is None:
        return LegacyText(text="")
    try:
        sections = _SECTION_LIST.validate_json(stored, context=STORED_CONTEXT)
    except ValidationError as exc:
        logger.debug("content_decode_fallback", reason=exc.errors()[0]["type"])
        return LegacyText(text=stored)
    return Structured(document=Document(sections=sections))


def extract_summary(source, max_length=200):
    """
    Build a plain-text preview of a blog body.

    ``source`` may be a Document, a decode result or the raw stored string.
    Only text, header and subheader sections contribute. Tags are stripped,
    parts joined with single spaces and the result cut to ``max_length``
    characters, with an ellipsis only when something was actually cut.

    Returns "" for legacy text and on any failure.
    """
    try:
        if isinstance(source, str):
            source = decode(source)
        if isinstance(source, LegacyText):
            return ""
        if isinstance(source, Structured):
            source = source.document

        joined = " ".join(
            section.content or ""
            for section in source.sections
            if section.kind in SUMMARY_KINDS
        )
        text = TAG_PATTERN.sub("", joined)
        if len(text) > max_length:
            return text[:max_length] + ELLIPSIS
        return text
    except Exception as exc:
        logger.debug("summary_extraction_failed", error=str(exc))
        return ""
