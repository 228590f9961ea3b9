"""
Structured content for techblog posts.

    from techblog.content import Section, Document, encode, decode, render_document
"""
from .sections import Block, Document, Layout, ListStyle, Section, SectionKind, Side
from .serializer import LegacyText, Structured, decode, encode, extract_summary
from .markup import INLINE_RULES, expand_inline
from .renderer import RenderMode, render_document, render_section, render_stored

__all__ = [
    # Model
    "Block",
    "Document",
    "Layout",
    "ListStyle",
    "Section",
    "SectionKind",
    "Side",
    # Serialization
    "LegacyText",
    "Structured",
    "decode",
    "encode",
    "extract_summary",
    # Rendering
    "INLINE_RULES",
    "expand_inline",
    "RenderMode",
    "render_document",
    "render_section",
    "render_stored",
]
