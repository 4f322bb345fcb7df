"""
Content renderer - Generate HTML for lesson pages.

Features:
- Video embeds for YouTube, Vimeo and stream IDs, <video> for direct files
- Markdown text blocks rendered with python-markdown
- Image and document blocks
- Dispatch over the page union (stream / block / quiz / nav)
"""

import html
import re
from typing import Optional

import markdown

from lessonflow.schemas import (
    BlockPage,
    ContentBlock,
    NavPage,
    Page,
    QuizPage,
    StreamPage,
)

from .quiz import render_quiz_header


STREAM_EMBED_BASE = "https://iframe.videodelivery.net"

YOUTUBE_RE = re.compile(r"(?:youtube\.com/(?:watch\?v=|embed/)|youtu\.be/)([^&\s?]+)")
VIMEO_RE = re.compile(r"vimeo\.com/(\d+)")
STREAM_ID_RE = re.compile(r"^[a-f0-9]{32}$")

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def resolve_video_embed(content: str) -> tuple[str, bool]:
    """
    Resolve a video reference to a playable URL.

    Returns:
        (url, use_iframe) - iframe for hosted players, False for direct files
    """
    ref = content.strip()
    if STREAM_ID_RE.match(ref):
        return f"{STREAM_EMBED_BASE}/{ref}", True

    match = YOUTUBE_RE.search(ref)
    if match:
        return f"https://www.youtube.com/embed/{match.group(1)}", True

    match = VIMEO_RE.search(ref)
    if match:
        return f"https://player.vimeo.com/video/{match.group(1)}", True

    if "videodelivery.net" in ref or "cloudflarestream.com" in ref:
        return ref, True

    return ref, False


def render_text_block(content: str) -> str:
    """Render a markdown text block."""
    body = markdown.markdown(content, extensions=MARKDOWN_EXTENSIONS)
    return f'<div class="lesson-text">{body}</div>'


def render_video(content: str, title: Optional[str] = None) -> str:
    """Render a video player; empty content renders nothing."""
    if not content.strip():
        return ""

    url, use_iframe = resolve_video_embed(content)
    label = html.escape(title or "Video")
    parts = []
    if title:
        parts.append(f'<h3 class="block-title">{label}</h3>')
    if use_iframe:
        parts.append(
            f'<iframe src="{html.escape(url)}" title="{label}" '
            'allow="accelerometer; autoplay; encrypted-media; picture-in-picture" allowfullscreen></iframe>'
        )
    else:
        parts.append(f'<video src="{html.escape(url)}" title="{label}" controls></video>')
    return ''.join(parts)


def render_image(block: ContentBlock) -> str:
    alt = html.escape(block.alt_text or block.title or "Lesson image")
    parts = ['<figure>', f'<img src="{html.escape(block.content)}" alt="{alt}" loading="lazy">']
    if block.title:
        parts.append(f'<figcaption>{html.escape(block.title)}</figcaption>')
    parts.append('</figure>')
    return ''.join(parts)


def render_document(block: ContentBlock) -> str:
    url = html.escape(block.content)
    name = block.title or block.content.rsplit("/", 1)[-1] or "Document"
    return (
        f'<iframe src="{url}" title="{html.escape(name)}"></iframe>'
        f'<a href="{url}" target="_blank" rel="noopener noreferrer">Open {html.escape(name)} in new tab</a>'
    )


def render_block(block: ContentBlock) -> str:
    """Render one content block by type."""
    if block.type == "video":
        return render_video(block.content, block.title)
    if block.type == "text":
        return render_text_block(block.content)
    if block.type == "image":
        return render_image(block)
    if block.type == "document":
        return render_document(block)
    return ""


def render_page(page: Page) -> str:
    """Render the static part of a page. Quiz interaction is left to the app."""
    if isinstance(page, StreamPage):
        return render_video(page.video_ref)
    if isinstance(page, BlockPage):
        return render_block(page.block)
    if isinstance(page, QuizPage):
        return render_quiz_header(page.quiz)
    if isinstance(page, NavPage):
        return '<div class="lesson-nav">Lesson complete</div>'
    raise TypeError(f"Unknown page type: {type(page).__name__}")
