"""
Inline markup for text sections.

A small fixed grammar, applied as an ordered list of regex replacements:

    **bold**  *italic*  __underline__  ~~strike~~
    {{large:text}}  {{small:text}}  [label](url)

Rules run one after another over the whole string, in the order of
INLINE_RULES. They do not nest: each rule is a single non-greedy
match-and-replace pass. Input is HTML-escaped before any rule runs, so the
only tags in the output are the ones the rules produce.
"""
import re
from dataclasses import dataclass
from typing import Callable, Pattern, Union

from django.utils.html import escape
from django.utils.safestring import mark_safe

UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:")


@dataclass(frozen=True)
class InlineRule:
    name: str
    pattern: Pattern
    replacement: Union[str, Callable]

    def apply(self, text):
        return self.pattern.sub(self.replacement, text)


def _link(match):
    label, url = match.group(1), match.group(2)
    if url.strip().lower().startswith(UNSAFE_URL_SCHEMES):
        return label
    return (
        f'<a href="{url}" target="_blank" rel="noopener noreferrer" '
        f'class="text-blue-600 hover:underline">{label}</a>'
    )


INLINE_RULES = (
    InlineRule("bold", re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    InlineRule("italic", re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    InlineRule("underline", re.compile(r"__(.*?)__"), r"<u>\1</u>"),
    InlineRule("strikethrough", re.compile(r"~~(.*?)~~"), r"<del>\1</del>"),
    InlineRule(
        "large",
        re.compile(r"\{\{large:(.*?)\}\}"),
        r'<span style="font-size: 1.25em">\1</span>',
    ),
    InlineRule(
        "small",
        re.compile(r"\{\{small:(.*?)\}\}"),
        r'<span style="font-size: 0.875em">\1</span>',
    ),
    InlineRule("link", re.compile(r"\[(.*?)\]\((.*?)\)"), _link),
)


def expand_inline(text, rules=INLINE_RULES):
    """Escape ``text`` and expand inline markup into HTML."""
    html = escape(text or "")
    for rule in rules:
        html = rule.apply(html)
    return mark_safe(html)
