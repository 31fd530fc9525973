"""
Structural README statistics.

Gross metrics derived from a document tree, used as input for
documentation-oriented scorers such as ramp-up time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from repolens.document.tree import DocumentTree


@dataclass
class ReadmeStats:
    """Structural metrics of one README."""

    top_level_nodes: int = 0
    heading_count: int = 0
    max_heading_depth: int = 0
    section_titles: List[str] = field(default_factory=list)
    paragraphs: int = 0
    code_blocks: int = 0
    code_languages: List[str] = field(default_factory=list)
    links: int = 0
    images: int = 0
    tables: int = 0
    list_items: int = 0
    task_items: int = 0
    completed_tasks: int = 0
    word_count: int = 0

    def has_section(self, *keywords: str) -> bool:
        """Check whether any section title contains one of the keywords."""
        lowered = [title.lower() for title in self.section_titles]
        return any(
            keyword.lower() in title
            for keyword in keywords
            for title in lowered
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "top_level_nodes": self.top_level_nodes,
            "heading_count": self.heading_count,
            "max_heading_depth": self.max_heading_depth,
            "section_titles": list(self.section_titles),
            "paragraphs": self.paragraphs,
            "code_blocks": self.code_blocks,
            "code_languages": list(self.code_languages),
            "links": self.links,
            "images": self.images,
            "tables": self.tables,
            "list_items": self.list_items,
            "task_items": self.task_items,
            "completed_tasks": self.completed_tasks,
            "word_count": self.word_count,
        }


def compute_readme_stats(tree: DocumentTree) -> ReadmeStats:
    """
    Compute structural metrics for a parsed README.

    Args:
        tree: Parsed document tree.

    Returns:
        ReadmeStats for the tree.
    """
    counts = tree.count_by_type()
    headings = tree.headings()

    languages = sorted({
        node.info.split()[0]
        for node in tree.find_all("code_block")
        if node.info
    })

    task_items = [
        node for node in tree.find_all("list_item")
        if node.attrs.get("task")
    ]

    words = sum(
        len(node.content.split())
        for node in tree.walk()
        if node.type == "text"
    )

    return ReadmeStats(
        top_level_nodes=tree.top_level_count,
        heading_count=len(headings),
        max_heading_depth=max((level for level, _ in headings), default=0),
        section_titles=[title for _, title in headings],
        paragraphs=counts["paragraph"],
        code_blocks=counts["code_block"],
        code_languages=languages,
        links=counts["link"],
        images=counts["image"],
        tables=counts["table"],
        list_items=counts["list_item"],
        task_items=len(task_items),
        completed_tasks=sum(1 for node in task_items if node.attrs.get("checked")),
        word_count=words,
    )
