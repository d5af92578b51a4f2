"""Render Contentful rich-text documents to HTML."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List
from urllib.parse import urlsplit

from markupsafe import Markup, escape

from .models import absolute_asset_url

LOGGER = logging.getLogger(__name__)

LINK_SCHEMES = ("http", "https", "mailto")

MARK_TAGS = {
    "bold": "strong",
    "italic": "em",
    "underline": "u",
    "code": "code",
}

BLOCK_TAGS = {
    "paragraph": ("p", "mb-6 text-lg leading-relaxed"),
    "heading-1": ("h1", "text-4xl font-bold mt-12 mb-4"),
    "heading-2": ("h2", "text-3xl font-bold mt-12 mb-4 border-b pb-2"),
    "heading-3": ("h3", "text-2xl font-bold mt-10 mb-4"),
    "heading-4": ("h4", "text-xl font-semibold mt-8 mb-3"),
    "heading-5": ("h5", "text-lg font-semibold mt-6 mb-2"),
    "heading-6": ("h6", "font-semibold mt-6 mb-2"),
    "unordered-list": ("ul", "list-disc list-inside mb-6 pl-4 space-y-2"),
    "ordered-list": ("ol", "list-decimal list-inside mb-6 pl-4 space-y-2"),
    "list-item": ("li", None),
    "blockquote": ("blockquote", "border-l-4 p-4 my-6 italic"),
    "table": ("table", "my-6"),
    "table-row": ("tr", None),
    "table-cell": ("td", None),
    "table-header-cell": ("th", None),
}


def _render_text(node: Dict[str, Any]) -> str:
    html = str(escape(node.get("value", "")))
    for mark in node.get("marks") or []:
        tag = MARK_TAGS.get(mark.get("type", ""))
        if tag:
            html = f"<{tag}>{html}</{tag}>"
    return html


def _render_children(node: Dict[str, Any]) -> str:
    return "".join(render_node(child) for child in node.get("content") or [])


def _render_hyperlink(node: Dict[str, Any]) -> str:
    uri = str((node.get("data") or {}).get("uri") or "").strip()
    if urlsplit(uri).scheme.lower() not in LINK_SCHEMES:
        LOGGER.warning("Dropping rich-text link with disallowed URI %r", uri)
        return _render_children(node)
    return (
        f'<a href="{escape(uri)}" target="_blank" rel="noopener noreferrer" '
        f'class="text-primary hover:underline">{_render_children(node)}</a>'
    )


def _render_embedded_asset(node: Dict[str, Any]) -> str:
    target = (node.get("data") or {}).get("target") or {}
    fields = target.get("fields") or {}
    file_info = fields.get("file") or {}
    if "image" not in (file_info.get("contentType") or ""):
        return ""
    url = file_info.get("url")
    if not url:
        return ""
    dimensions = (file_info.get("details") or {}).get("image") or {}
    size_attrs = ""
    if dimensions.get("width") and dimensions.get("height"):
        size_attrs = f' width="{int(dimensions["width"])}" height="{int(dimensions["height"])}"'
    parts: List[str] = [
        '<figure class="my-8">',
        f'<img src="{escape(absolute_asset_url(url))}" alt="{escape(fields.get("title") or "")}"'
        f'{size_attrs} class="rounded-lg shadow-lg mx-auto">',
    ]
    if fields.get("description"):
        parts.append(
            f'<figcaption class="text-center text-sm mt-2">{escape(fields["description"])}</figcaption>'
        )
    parts.append("</figure>")
    return "".join(parts)


_SPECIAL: Dict[str, Callable[[Dict[str, Any]], str]] = {
    "text": _render_text,
    "document": _render_children,
    "hyperlink": _render_hyperlink,
    "embedded-asset-block": _render_embedded_asset,
    "hr": lambda node: "<hr>",
}


def render_node(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    node_type = node.get("nodeType", "")
    special = _SPECIAL.get(node_type)
    if special is not None:
        return special(node)
    block = BLOCK_TAGS.get(node_type)
    if block is not None:
        tag, css = block
        attrs = f' class="{css}"' if css else ""
        return f"<{tag}{attrs}>{_render_children(node)}</{tag}>"
    # Entry hyperlinks and embedded entries have no page to point at.
    LOGGER.debug("Skipping unsupported rich-text node %r", node_type)
    return _render_children(node)


def render_document(document: Any) -> Markup:
    """Render a rich-text document to safe HTML."""

    if not document:
        return Markup("")
    return Markup(render_node(document))


__all__ = ["render_document", "render_node"]
