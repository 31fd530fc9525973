"""
Markdown parsing into document trees.

Uses markdown-it-py with the CommonMark grammar plus the GitHub
extensions commonly found in READMEs: tables, strikethrough, task lists,
footnotes and bare-URL autolinks.
"""

import logging
from typing import Any, Dict, List, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from repolens.core.config import DocumentConfig, Config
from repolens.document.tree import DocumentNode, DocumentTree

logger = logging.getLogger(__name__)

TYPE_ALIASES = {
    "bullet_list": "list",
    "ordered_list": "list",
    "fence": "code_block",
    "code_inline": "inline_code",
    "hr": "thematic_break",
    "em": "emphasis",
    "s": "strikethrough",
    "html_block": "html",
    "html_inline": "html",
}

# Rendering artifacts that carry no document content
SKIPPED_TYPES = frozenset({"footnote_anchor"})

# Opening of the checkbox the task list plugin inserts into a task item
TASK_CHECKBOX_PREFIX = '<input class="task-list-item-checkbox"'


class MarkdownParser:
    """
    Parses README text into a DocumentTree.

    Parsing is deterministic and accepts any text; malformed markdown
    degrades to paragraphs and text nodes.
    """

    def __init__(self, config: DocumentConfig = None):
        self.config = config or Config.get().document
        self._md = self._build_markdown()

    def _build_markdown(self) -> MarkdownIt:
        """Create the markdown-it instance for the configured extensions."""
        md = MarkdownIt("commonmark", {"linkify": self.config.enable_linkify})

        if self.config.enable_tables:
            md.enable("table")

        if self.config.enable_strikethrough:
            md.enable("strikethrough")

        if self.config.enable_linkify:
            md.enable("linkify")

        if self.config.enable_tasklists:
            md.use(tasklists_plugin)

        if self.config.enable_footnotes:
            md.use(footnote_plugin)

        return md

    def parse(self, text: str) -> DocumentTree:
        """
        Parse markdown text.

        Args:
            text: Raw README content.

        Returns:
            DocumentTree whose root children are the top-level blocks.
        """
        tokens = self._md.parse(text)
        syntax_root = SyntaxTreeNode(tokens)

        children = self._convert_children(syntax_root)
        tree = DocumentTree(DocumentNode(type="root", children=tuple(children)))

        logger.debug(f"Parsed {len(text)} characters into {tree.top_level_count} top-level nodes")
        return tree

    def _convert_children(
        self,
        node: SyntaxTreeNode,
        skip: Optional[SyntaxTreeNode] = None,
    ) -> List[DocumentNode]:
        converted: List[DocumentNode] = []
        for child in node.children:
            converted.extend(self._convert(child, skip))
        return converted

    def _convert(
        self,
        node: SyntaxTreeNode,
        skip: Optional[SyntaxTreeNode] = None,
    ) -> List[DocumentNode]:
        """
        Convert one syntax node; inline containers are flattened.

        ``skip`` is the task checkbox of the enclosing list item, which is
        reported through the item's attrs instead of as a child.
        """
        node_type = node.type

        if node is skip or node_type in SKIPPED_TYPES:
            return []

        if node_type == "inline":
            return self._convert_children(node, skip)

        if node_type == "list_item":
            skip = self._task_checkbox(node)

        attrs = self._node_attrs(node)
        level = None
        info = None
        content = ""

        if node_type == "heading":
            level = int(node.tag[1:])
        elif node_type in ("fence", "code_block"):
            info = (node.info or "").strip() or None
            content = node.content
        elif node_type in ("text", "code_inline", "html_block", "html_inline"):
            content = node.content
        elif node_type == "image":
            content = node.content

        return [
            DocumentNode(
                type=TYPE_ALIASES.get(node_type, node_type),
                children=tuple(self._convert_children(node, skip)),
                content=content,
                level=level,
                info=info,
                attrs=attrs,
                line=node.map[0] if node.map else None,
            )
        ]

    def _node_attrs(self, node: SyntaxTreeNode) -> Dict[str, Any]:
        node_type = node.type
        raw = dict(node.attrs)
        attrs: Dict[str, Any] = {}

        if node_type == "link":
            attrs["href"] = raw.get("href", "")
            if raw.get("title"):
                attrs["title"] = raw["title"]
        elif node_type == "image":
            attrs["src"] = raw.get("src", "")
            if raw.get("title"):
                attrs["title"] = raw["title"]
        elif node_type in ("bullet_list", "ordered_list"):
            attrs["ordered"] = node_type == "ordered_list"
            if node_type == "ordered_list":
                attrs["start"] = int(raw.get("start", 1))
        elif node_type == "list_item":
            checkbox = self._task_checkbox(node)
            if checkbox is not None:
                attrs["task"] = True
                attrs["checked"] = 'checked="checked"' in checkbox.content
        elif node_type in ("th", "td"):
            align = self._cell_alignment(raw.get("style"))
            if align:
                attrs["align"] = align

        return attrs

    @staticmethod
    def _task_checkbox(item: SyntaxTreeNode) -> Optional[SyntaxTreeNode]:
        """Find the checkbox the task list plugin puts at the start of an item."""
        for block in item.children[:1]:
            for inline in block.children[:1]:
                for candidate in inline.children[:1]:
                    if (
                        candidate.type == "html_inline"
                        and candidate.content.startswith(TASK_CHECKBOX_PREFIX)
                    ):
                        return candidate
        return None

    @staticmethod
    def _cell_alignment(style: Optional[str]) -> Optional[str]:
        if not style:
            return None
        prefix = "text-align:"
        if style.startswith(prefix):
            return style[len(prefix):].strip()
        return None


def parse_markdown(text: str, config: DocumentConfig = None) -> DocumentTree:
    """
    Convenience function to parse README text.

    Args:
        text: Markdown text.
        config: Optional document configuration.

    Returns:
        Parsed DocumentTree.
    """
    return MarkdownParser(config).parse(text)
