"""Tests for custom object tab trees."""

from docu_aggregator.config import CustomObjectTab
from docu_aggregator.domain.models import ContextReference, ObjectReference, ReferencePath
from docu_aggregator.objects.custom_object_tab_tree import CustomObjectTabTree

USECASE = ContextReference('usecase', 'Find Page')
ALICE = ObjectReference('customer', 'Alice')
BOB = ObjectReference('customer', 'Bob')
BOOK = ObjectReference('product', 'Book')
ORDER = ObjectReference('order', 'Order 1')


def _tree(*types):
    return CustomObjectTabTree(CustomObjectTab(tab_id='tab', title='Tab', searched_object_types=types))


class TestCustomObjectTabTree:

    def test_empty_tree(self):
        tree = _tree('customer')
        assert tree.is_empty()
        assert tree.to_dict()['nodes'] == []

    def test_paths_without_searched_types_are_ignored(self):
        tree = _tree('customer')
        tree.add_path(ReferencePath((USECASE, ORDER)))
        assert tree.is_empty()

    def test_nested_objects_follow_path_order(self):
        tree = _tree('customer', 'product')
        tree.add_path(ReferencePath((USECASE, ALICE, ORDER, BOOK)))
        nodes = tree.to_dict()['nodes']
        assert nodes == [{
            'type': 'customer', 'name': 'Alice',
            'children': [{'type': 'product', 'name': 'Book', 'children': []}],
        }]

    def test_shared_prefixes_are_merged(self):
        tree = _tree('customer', 'product')
        tree.add_path(ReferencePath((ALICE,)))
        tree.add_path(ReferencePath((ALICE, BOOK)))
        tree.add_path(ReferencePath((ALICE, BOOK)))
        nodes = tree.to_dict()['nodes']
        assert len(nodes) == 1
        assert len(nodes[0]['children']) == 1

    def test_children_sorted_by_type_and_name(self):
        tree = _tree('customer', 'product')
        tree.add_path(ReferencePath((BOOK,)))
        tree.add_path(ReferencePath((BOB,)))
        tree.add_path(ReferencePath((ALICE,)))
        names = [(n['type'], n['name']) for n in tree.to_dict()['nodes']]
        assert names == [('customer', 'Alice'), ('customer', 'Bob'), ('product', 'Book')]

    def test_to_dict_includes_tab(self):
        tree = _tree('customer', 'product')
        assert tree.to_dict()['tab'] == {
            'id': 'tab', 'title': 'Tab', 'searched_object_types': ['customer', 'product'],
        }
