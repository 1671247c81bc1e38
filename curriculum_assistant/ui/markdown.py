"""Markdown to HTML for chat display.

Assistant replies are parsed with markdown-it-py into a syntax tree and
rendered by a small visitor. Presentation lives in ``ELEMENT_STYLES``, a table
mapping each HTML element to its Tailwind classes, so the rendering rules can
be changed and tested without touching the page.

Supports: headings, paragraphs, bold, italic, strikethrough, inline code,
code blocks, links, lists, blockquotes, tables, horizontal rules.
Raw HTML in the source is escaped, never passed through.
"""

from collections.abc import Callable
from html import escape

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

_parser = MarkdownIt("commonmark", {"html": False, "linkify": False}).enable(
    ["table", "strikethrough"]
)

ELEMENT_STYLES: dict[str, str] = {
    "h1": "text-2xl font-bold mt-4 mb-2",
    "h2": "text-xl font-bold mt-4 mb-2",
    "h3": "text-lg font-semibold mt-3 mb-2",
    "h4": "text-base font-semibold mt-3 mb-1",
    "h5": "text-sm font-semibold mt-2 mb-1",
    "h6": "text-sm font-medium mt-2 mb-1",
    "p": "my-2 leading-relaxed",
    "strong": "font-semibold",
    "em": "italic",
    "s": "line-through",
    "ul": "list-disc list-inside my-2 space-y-1",
    "ol": "list-decimal list-inside my-2 space-y-1",
    "li": "leading-relaxed",
    "blockquote": "border-l-4 border-emerald-400 pl-4 my-2 italic text-gray-600",
    "code": "bg-gray-200 text-pink-600 px-1.5 py-0.5 rounded text-xs",
    "pre": "bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs",
    "a": "text-blue-600 underline",
    "table": "table-auto border-collapse my-2 text-sm",
    "thead": "bg-emerald-50",
    "th": "border border-gray-300 px-3 py-1 font-semibold",
    "td": "border border-gray-300 px-3 py-1",
    "hr": "my-4 border-gray-300",
}

# Nodes rendered as their children only
_TRANSPARENT = {"root", "inline"}


def _open_tag(tag: str, attrs: dict[str, str] | None = None) -> str:
    attributes = dict(attrs or {})
    if tag in ELEMENT_STYLES:
        attributes["class"] = ELEMENT_STYLES[tag]
    rendered = "".join(f' {name}="{escape(value)}"' for name, value in attributes.items())
    return f"<{tag}{rendered}>"


def _render_text(node: SyntaxTreeNode) -> str:
    return escape(node.content)


def _render_code_inline(node: SyntaxTreeNode) -> str:
    return f"{_open_tag('code')}{escape(node.content)}</code>"


def _render_code_block(node: SyntaxTreeNode) -> str:
    language = node.info.strip().split(" ")[0] if node.info else ""
    code_open = f'<code class="language-{escape(language)}">' if language else "<code>"
    return f"{_open_tag('pre')}{code_open}{escape(node.content)}</code></pre>"


def _render_image(node: SyntaxTreeNode) -> str:
    # Images are shown as their alt text
    return "".join(_render_node(child) for child in node.children)


_LEAF_RENDERERS: dict[str, Callable[[SyntaxTreeNode], str]] = {
    "text": _render_text,
    "softbreak": lambda node: "<br>",
    "hardbreak": lambda node: "<br>",
    "code_inline": _render_code_inline,
    "fence": _render_code_block,
    "code_block": _render_code_block,
    "hr": lambda node: _open_tag("hr"),
    "image": _render_image,
}


def _node_attributes(node: SyntaxTreeNode) -> dict[str, str]:
    if node.type == "link":
        attrs = {"href": str(node.attrs.get("href", "")), "target": "_blank"}
        if node.attrs.get("title"):
            attrs["title"] = str(node.attrs["title"])
        return attrs
    if node.type == "ordered_list" and node.attrs.get("start"):
        return {"start": str(node.attrs["start"])}
    return {}


def _is_hidden(node: SyntaxTreeNode) -> bool:
    # Paragraphs inside tight lists carry no markup of their own
    return node.type == "paragraph" and node.nester_tokens.opening.hidden


def _render_node(node: SyntaxTreeNode) -> str:
    renderer = _LEAF_RENDERERS.get(node.type)
    if renderer is not None:
        return renderer(node)

    inner = "".join(_render_node(child) for child in node.children)
    if node.type in _TRANSPARENT or _is_hidden(node):
        return inner

    tag = node.tag
    return f"{_open_tag(tag, _node_attributes(node))}{inner}</{tag}>"


def render_markdown(text: str) -> str:
    """Convert markdown to styled HTML for assistant messages."""
    if not text:
        return ""
    return _render_node(SyntaxTreeNode(_parser.parse(text)))


def render_plain(text: str) -> str:
    """Escape user text for verbatim display, keeping line breaks."""
    return escape(text).replace("\n", "<br>")
