"""Text rendering for declarations and the namespace index."""

from .declarations import render_declaration, render_namespace_block
from .namespace_tree import NamespaceNode, build_namespace_tree, render_namespace_tree

__all__ = [
    "NamespaceNode",
    "build_namespace_tree",
    "render_declaration",
    "render_namespace_block",
    "render_namespace_tree",
]
