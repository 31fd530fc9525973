"""
Read-only document tree produced from README markdown.

A tree is a root node holding an ordered sequence of block nodes; block
nodes hold inline nodes. Nodes are frozen once built.
"""

from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

# Node types that carry literal text in ``content``
TEXT_NODE_TYPES = frozenset({"text", "inline_code", "code_block", "html"})


@dataclass(frozen=True)
class DocumentNode:
    """A single node of the document tree."""

    type: str
    children: Tuple["DocumentNode", ...] = ()
    content: str = ""
    level: Optional[int] = None
    info: Optional[str] = None
    attrs: Mapping[str, Any] = field(default_factory=dict)
    line: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "attrs", MappingProxyType(dict(self.attrs)))

    def walk(self) -> Iterator["DocumentNode"]:
        """Iterate over this node and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find_all(self, node_type: str) -> List["DocumentNode"]:
        """Get all descendants (and self) of the given type."""
        return [node for node in self.walk() if node.type == node_type]

    @property
    def text(self) -> str:
        """Concatenated inline text below this node."""
        if self.type in ("text", "inline_code"):
            return self.content
        if self.type in ("softbreak", "hardbreak"):
            return " "
        return "".join(child.text for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {"type": self.type}
        if self.content:
            data["content"] = self.content
        if self.level is not None:
            data["level"] = self.level
        if self.info:
            data["info"] = self.info
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.line is not None:
            data["line"] = self.line
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class DocumentTree:
    """
    Parsed README document.

    ``len(tree)`` is the number of top-level block nodes.
    """

    root: DocumentNode

    @property
    def children(self) -> Tuple[DocumentNode, ...]:
        return self.root.children

    @property
    def top_level_count(self) -> int:
        return len(self.root.children)

    def __len__(self) -> int:
        return self.top_level_count

    def __iter__(self) -> Iterator[DocumentNode]:
        return iter(self.root.children)

    @property
    def is_empty(self) -> bool:
        return not self.root.children

    def walk(self) -> Iterator[DocumentNode]:
        """Iterate over all nodes below the root in document order."""
        for child in self.root.children:
            yield from child.walk()

    def find_all(self, node_type: str) -> List[DocumentNode]:
        return [node for node in self.walk() if node.type == node_type]

    def count_by_type(self) -> Counter:
        """Count nodes below the root by type."""
        return Counter(node.type for node in self.walk())

    def headings(self) -> List[Tuple[int, str]]:
        """Get (level, title) for every heading in document order."""
        return [
            (node.level or 0, node.text.strip())
            for node in self.walk()
            if node.type == "heading"
        ]

    def to_dict(self) -> Dict[str, Any]:
        return self.root.to_dict()
