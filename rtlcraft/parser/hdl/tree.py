"""
Concrete syntax tree produced by the VHDL grammar.

Nodes store source offsets only; text is always sliced out of the source
the tree was parsed from. The four query functions below are the whole
traversal API used by the lifter.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

ERROR_KIND = "ERROR"

_COMMENT_RE = re.compile(r"--[^\n]*")


@dataclass
class Node:
    """One grammar production matched at ``source[start:end]``."""

    kind: str
    start: int
    end: int
    children: List["Node"] = field(default_factory=list)

    @property
    def is_error(self) -> bool:
        return self.kind == ERROR_KIND

    def walk(self) -> Iterator["Node"]:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __repr__(self) -> str:
        return f"Node({self.kind!r}, {self.start}, {self.end}, children={len(self.children)})"


@dataclass
class SyntaxTree:
    """Root node plus the (comment-blanked) text it was parsed from."""

    source: str
    root: Node

    @property
    def has_error(self) -> bool:
        return any(node.is_error for node in self.root.walk())

    def error_nodes(self) -> List[Node]:
        return [node for node in self.root.walk() if node.is_error]

    def line_of(self, offset: int) -> int:
        """1-based line number of a source offset."""
        return self.source.count("\n", 0, offset) + 1


def blank_comments(text: str) -> str:
    """Replace ``--`` comments with spaces, keeping every offset unchanged."""
    return _COMMENT_RE.sub(lambda m: " " * len(m.group(0)), text)


def node_text(node: Node, source: str) -> str:
    """Exact source text spanned by a node."""
    return source[node.start:node.end]


def find_child(node: Node, kind: str) -> Optional[Node]:
    """First direct child of the given kind."""
    return next((child for child in node.children if child.kind == kind), None)


def find_children(node: Node, kind: str) -> List[Node]:
    """All direct children of the given kind."""
    return [child for child in node.children if child.kind == kind]


def find_descendants(node: Node, kind: str) -> List[Node]:
    """All nodes of the given kind below ``node``, pre-order, including itself."""
    return [n for n in node.walk() if n.kind == kind]
