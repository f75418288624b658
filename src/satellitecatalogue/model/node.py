"""
Catalogue Node
==============
The recursive record shared by satellites (roots) and their modules.

Nodes hold no reference to their parent. Ownership flows strictly downwards
through ``modules``; the parent of a node is reconstructed from the
navigation path whenever it is needed.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class Node:
    """
    A satellite or a module at any depth.

    Equality is structural: two nodes are equal when all their fields,
    including the whole ``modules`` subtree, are equal.
    """
    name: str
    id: Optional[str] = None
    icon: str = ""
    type: str = ""
    image: str = ""
    description: str = ""
    modules: List[Node] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.modules)

    def copy(self) -> Node:
        """Deep copy of the node and its subtree."""
        return copy.deepcopy(self)

    def walk(self) -> Iterator[Node]:
        """Yield this node and every descendant, parents before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            # Reversed so siblings come out in display order
            stack.extend(reversed(node.modules))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "type": self.type,
            "image": self.image,
            "description": self.description,
            "modules": [child.to_dict() for child in self.modules],
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> Node:
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object for a node, got {type(data).__name__}.")

        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError("Node is missing a 'name'.")

        modules = data.get("modules") or []
        if not isinstance(modules, list):
            raise ValueError(f"Node '{name}' has 'modules' that is not a list.")

        node_id = data.get("id")
        return Node(
            name=name,
            id=str(node_id) if node_id else None,
            icon=data.get("icon") or "",
            type=data.get("type") or "",
            image=data.get("image") or "",
            description=data.get("description") or "",
            modules=[Node.from_dict(child) for child in modules],
        )


def copy_nodes(nodes: List[Node]) -> List[Node]:
    return [node.copy() for node in nodes]
