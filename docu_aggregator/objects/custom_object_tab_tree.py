"""Custom object tab trees.

A custom tab groups the referenced objects of selected types into a tree
following the order in which they are nested in the documentation: an
order referenced inside a scenario that also references a customer ends
up below that customer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from docu_aggregator.config import CustomObjectTab
from docu_aggregator.domain.models import ObjectReference, ReferencePath


@dataclass
class ObjectTreeNode:
    """One object in a custom tab tree."""

    reference: ObjectReference | None
    children: dict[ObjectReference, ObjectTreeNode] = field(default_factory=dict)

    def child(self, reference: ObjectReference) -> ObjectTreeNode:
        node = self.children.get(reference)
        if node is None:
            node = ObjectTreeNode(reference)
            self.children[reference] = node
        return node

    def to_dict(self) -> dict:
        return {
            'type': self.reference.type if self.reference else None,
            'name': self.reference.name if self.reference else None,
            'children': self._children_to_dicts(),
        }

    def _children_to_dicts(self) -> list[dict]:
        ordered = sorted(self.children.values(), key=lambda n: (n.reference.type, n.reference.name))
        return [node.to_dict() for node in ordered]


class CustomObjectTabTree:
    """Prefix tree of the object paths relevant for one custom tab.

    Each added path is reduced to the references of the searched types;
    the reduced sequence is merged into the tree so that paths sharing a
    prefix share nodes.
    """

    def __init__(self, tab: CustomObjectTab) -> None:
        self.tab = tab
        self._searched_types = frozenset(tab.searched_object_types)
        self._root = ObjectTreeNode(None)

    def add_path(self, path: ReferencePath) -> None:
        node = self._root
        for reference in path.filtered(self._searched_types):
            node = node.child(reference)

    def is_empty(self) -> bool:
        return not self._root.children

    def to_dict(self) -> dict:
        return {
            'tab': {
                'id': self.tab.tab_id,
                'title': self.tab.title,
                'searched_object_types': list(self.tab.searched_object_types),
            },
            'nodes': self._root._children_to_dicts(),
        }
