"""
django-techblog - A technical blogging platform for Django.

Features:
- Structured posts built from typed sections (headers, text, images,
  two-column layouts, code blocks)
- Lossless section serialization with a fallback for plain-text posts
- Inline markup for bold, italic, underline, strikethrough, sizes and links
- One shared renderer for published pages and the editor preview
- Likes, threaded comments, view counting and popular posts
- Content-addressed image uploads
"""

__version__ = "0.1.0"
