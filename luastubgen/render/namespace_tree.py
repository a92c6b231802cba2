"""Global namespace index (``CS = { UnityEngine = { ... } }``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..constants import ROOT_TABLE


@dataclass
class NamespaceNode:
    name: str
    children: Dict[str, "NamespaceNode"] = field(default_factory=dict)

    def child(self, name: str) -> "NamespaceNode":
        node = self.children.get(name)
        if node is None:
            node = NamespaceNode(name)
            self.children[name] = node
        return node

    def ordered_children(self) -> List["NamespaceNode"]:
        return [self.children[name] for name in sorted(self.children)]


def build_namespace_tree(namespaces: Iterable[Optional[str]]) -> NamespaceNode:
    """Nest every dotted namespace under the root table; empty namespaces are skipped."""
    root = NamespaceNode(ROOT_TABLE)
    for namespace in namespaces:
        if not namespace:
            continue
        node = root
        for segment in namespace.split("."):
            node = node.child(segment)
    return root


def render_namespace_tree(root: NamespaceNode) -> str:
    return _render_node(root, last=True, depth=0)


def _render_node(node: NamespaceNode, *, last: bool, depth: int) -> str:
    indent = " " * (depth * 4)
    closing = "}" if last else "},"
    children = node.ordered_children()
    if not children:
        return f"{indent}{node.name} = {{{closing}\n"

    text = f"{indent}{node.name} = {{\n"
    for index, child in enumerate(children):
        text += _render_node(child, last=index == len(children) - 1, depth=depth + 1)
    text += f"{indent}{closing}\n"
    return text


__all__ = ["NamespaceNode", "build_namespace_tree", "render_namespace_tree"]
