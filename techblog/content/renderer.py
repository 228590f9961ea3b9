"""
HTML rendering for structured blog content.

The published page and the editor's live preview both go through
render_document(), so a post looks the same in both places. The mode only
changes the class on the outer wrapper; section markup is identical.
"""
import re
from dataclasses import dataclass
from enum import Enum

from django.utils.html import escape, format_html, format_html_join
from django.utils.safestring import mark_safe

from ..conf import blog_settings
from .markup import expand_inline
from .sections import ListStyle, SectionKind, Side
from .serializer import LegacyText, decode

LANGUAGE_PATTERN = re.compile(r"[^A-Za-z0-9_+#.-]")
ABSOLUTE_URL_PATTERN = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


class RenderMode(str, Enum):
    RENDER = "render"
    PREVIEW = "preview"


_WRAPPER_CLASSES = {
    RenderMode.RENDER: "max-w-none",
    RenderMode.PREVIEW: "max-w-none blog-preview",
}


@dataclass(frozen=True)
class TextStyle:
    """Resolved CSS for a text block."""

    color: str = "inherit"
    font_size: str = "inherit"
    font_weight: str = "normal"
    font_style: str = "normal"
    text_decoration: str = "none"

    @classmethod
    def from_block(cls, block):
        decorations = []
        if block.is_underline:
            decorations.append("underline")
        if block.is_strikethrough:
            decorations.append("line-through")
        return cls(
            color=block.text_color or "inherit",
            font_size=block.font_size or "inherit",
            font_weight="bold" if block.is_bold else "normal",
            font_style="italic" if block.is_italic else "normal",
            text_decoration=" ".join(decorations) or "none",
        )

    def css(self):
        return (
            f"color: {self.color}; font-size: {self.font_size}; "
            f"font-weight: {self.font_weight}; font-style: {self.font_style}; "
            f"text-decoration: {self.text_decoration}"
        )


def resolve_image_url(url, base_url=None):
    """Resolve a stored upload path against the upload base address."""
    if base_url is None:
        base_url = blog_settings.UPLOAD_BASE_URL
    if not base_url or ABSOLUTE_URL_PATTERN.match(url):
        return url
    return base_url.rstrip("/") + "/" + url.lstrip("/")


def list_items(content):
    """Split bulleted content into lines, dropping blank ones. Lines are kept as typed."""
    return [line for line in (content or "").split("\n") if line.strip()]


def _render_image(url, base_url, alt="Blog image", css_class="w-full rounded-lg mb-6"):
    if not url:
        return mark_safe("")
    return format_html(
        '<img src="{}" alt="{}" class="{}">',
        resolve_image_url(url, base_url),
        alt,
        css_class,
    )


def _render_paragraph(block):
    return format_html(
        '<p class="mb-6 whitespace-pre-wrap leading-relaxed" style="{}">{}</p>',
        TextStyle.from_block(block).css(),
        expand_inline(block.content),
    )


def _render_list(block):
    style = TextStyle.from_block(block)
    marker = ListStyle.parse(block.list_style)
    items = format_html_join(
        "",
        '<li class="mb-2" style="color: {}">{}</li>',
        ((style.color, expand_inline(line)) for line in list_items(block.content)),
    )
    return format_html(
        '<ul class="leading-relaxed" style="list-style-type: {}; margin-left: 2rem; '
        'padding-left: 0.5rem; margin-bottom: 1.5rem; {}">{}</ul>',
        marker.value,
        style.css(),
        items,
    )


def render_block(block):
    """Render the text of one block as a paragraph or a list."""
    if block.is_bullet_list:
        return _render_list(block)
    return _render_paragraph(block)


def render_column(section, side, *, image_base_url=None):
    """
    Render one side of a two-column section.

    Only that side's fields are read, so nothing on the other side can change
    the result.
    """
    side = Side(side)
    block = section.column(side)
    image = _render_image(
        block.image_url,
        image_base_url,
        alt=f"{side.value.capitalize()} column image",
        css_class="w-full rounded mb-2",
    )
    return format_html(
        '<div class="column column-{}">{}{}</div>',
        side.value,
        image,
        render_block(block),
    )


def _header(section, image_base_url):
    return format_html('<h1 class="text-3xl font-bold mb-6">{}</h1>', section.content or "")


def _subheader(section, image_base_url):
    return format_html('<h2 class="text-2xl font-semibold mb-4">{}</h2>', section.content or "")


def _text(section, image_base_url):
    return render_block(section.main)


def _image(section, image_base_url):
    return _render_image(section.image_url, image_base_url)


def _two_column(section, image_base_url):
    return format_html(
        '<div class="grid grid-cols-2 gap-6 mb-4">{}{}</div>',
        render_column(section, Side.LEFT, image_base_url=image_base_url),
        render_column(section, Side.RIGHT, image_base_url=image_base_url),
    )


def _code(section, image_base_url):
    language = LANGUAGE_PATTERN.sub("", section.language or "") or "none"
    return format_html(
        '<div class="code-block mb-6"><pre><code class="language-{} text-sm">{}</code></pre></div>',
        language,
        section.content or "",
    )


SECTION_RENDERERS = {
    SectionKind.HEADER: _header,
    SectionKind.SUBHEADER: _subheader,
    SectionKind.TEXT: _text,
    SectionKind.IMAGE: _image,
    SectionKind.TWO_COLUMN: _two_column,
    SectionKind.CODE: _code,
}


def render_section(section, *, image_base_url=None):
    """Render a single section to HTML."""
    return SECTION_RENDERERS[section.kind](section, image_base_url)


def render_document(document, mode=RenderMode.RENDER, *, image_base_url=None):
    """Render every section of ``document`` in order."""
    body = format_html_join(
        "",
        '<div class="section" data-section-id="{}">{}</div>',
        (
            (section.id, render_section(section, image_base_url=image_base_url))
            for section in document.sections
        ),
    )
    return format_html('<div class="{}">{}</div>', _WRAPPER_CLASSES[RenderMode(mode)], body)


def render_legacy_text(text):
    """Render pre-section content as plain text with line breaks kept."""
    return format_html(
        '<div class="prose max-w-none"><div>{}</div></div>',
        mark_safe(escape(text).replace("\n", "<br>")),
    )


def render_stored(stored, mode=RenderMode.RENDER, *, image_base_url=None):
    """Decode stored content and render it, whichever form it is in."""
    result = decode(stored)
    if isinstance(result, LegacyText):
        return render_legacy_text(result.text)
    return render_document(result.document, mode, image_base_url=image_base_url)
