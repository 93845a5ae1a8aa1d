"""Unit tests for tree mutation and traversal."""
import unittest

from figma_renderer.model.elements import NodeKind
from figma_renderer.model.node_tree import Node


def make_node(node_id: str, kind: NodeKind = NodeKind.FRAME) -> Node:
    return Node(id=node_id, name=f"Node {node_id}", kind=kind)


class AppendChildTest(unittest.TestCase):
    """Sibling links follow insertion order in both directions."""

    def setUp(self) -> None:
        self.root = make_node("root", NodeKind.DOCUMENT)
        self.a = self.root.append_child(make_node("a"))
        self.b = self.root.append_child(make_node("b"))
        self.c = self.root.append_child(make_node("c"))

    def test_children_follow_insertion_order(self) -> None:
        self.assertEqual([child.id for child in self.root.children], ["a", "b", "c"])
        self.assertIs(self.root.first_child, self.a)
        self.assertIs(self.root.last_child, self.c)
        for child in (self.a, self.b, self.c):
            self.assertIs(child.parent, self.root)

    def test_sibling_links_are_bidirectional(self) -> None:
        self.assertIsNone(self.a.previous_sibling)
        self.assertIs(self.a.next_sibling, self.b)
        self.assertIs(self.b.previous_sibling, self.a)
        self.assertIs(self.b.next_sibling, self.c)
        self.assertIs(self.c.previous_sibling, self.b)
        self.assertIsNone(self.c.next_sibling)

    def test_insert_after_given_sibling(self) -> None:
        x = self.root.append_child(make_node("x"), after=self.a)
        self.assertEqual([child.id for child in self.root.children], ["a", "x", "b", "c"])
        self.assertIs(self.a.next_sibling, x)
        self.assertIs(x.previous_sibling, self.a)
        self.assertIs(x.next_sibling, self.b)
        self.assertIs(self.b.previous_sibling, x)

    def test_insert_first_with_none(self) -> None:
        x = self.root.append_child(make_node("x"), after=None)
        self.assertIs(self.root.first_child, x)
        self.assertIsNone(x.previous_sibling)
        self.assertIs(x.next_sibling, self.a)
        self.assertIs(self.a.previous_sibling, x)

    def test_insert_after_last_updates_last_child(self) -> None:
        x = self.root.append_child(make_node("x"), after=self.c)
        self.assertIs(self.root.last_child, x)
        self.assertIs(self.c.next_sibling, x)

    def test_insertion_point_must_be_a_child(self) -> None:
        stranger = make_node("stranger")
        with self.assertRaises(ValueError):
            self.root.append_child(make_node("x"), after=stranger)

    def test_attached_node_is_moved(self) -> None:
        other = self.root.append_child(make_node("other"))
        other.append_child(self.a)
        self.assertIs(self.a.parent, other)
        self.assertEqual([child.id for child in self.root.children], ["b", "c", "other"])
        self.assertIs(self.b.previous_sibling, None)
        self.assertEqual([child.id for child in other.children], ["a"])

    def test_cannot_insert_ancestor_into_descendant(self) -> None:
        grandchild = self.a.append_child(make_node("grandchild"))
        with self.assertRaises(ValueError):
            grandchild.append_child(self.root)
        with self.assertRaises(ValueError):
            self.a.append_child(self.a)

    def test_subtree_built_bottom_up_can_be_attached(self) -> None:
        frame = make_node("f")
        rect = frame.append_child(make_node("r", NodeKind.RECTANGLE))
        label = frame.append_child(make_node("t", NodeKind.TEXT))

        self.b.append_child(frame)

        self.assertIs(frame.parent, self.b)
        self.assertIs(rect.parent, frame)
        self.assertIs(rect.next_sibling, label)
        self.assertIs(label.previous_sibling, rect)
        self.assertIs(frame.tree, self.root.tree)
        self.assertIs(rect.tree, self.root.tree)
        self.assertEqual(
            [node.id for node in self.root.descendants()],
            ["a", "b", "f", "r", "t", "c"],
        )
        self.assertIs(self.root.query_selector(kind=NodeKind.TEXT), label)

    def test_subtree_moves_out_of_another_tree(self) -> None:
        other_root = make_node("other-root", NodeKind.DOCUMENT)
        branch = other_root.append_child(make_node("branch"))
        leaf = branch.append_child(make_node("leaf"))
        stay = other_root.append_child(make_node("stay"))

        self.root.append_child(branch, after=self.a)

        self.assertEqual([child.id for child in self.root.children], ["a", "branch", "b", "c"])
        self.assertIs(leaf.parent, branch)
        self.assertEqual([child.id for child in other_root.children], ["stay"])
        self.assertIsNone(stay.previous_sibling)
        self.assertEqual([node.id for node in other_root.descendants()], ["stay"])
        self.assertEqual(len(other_root.tree), 2)

        leaf.remove()
        self.assertIsNone(branch.first_child)
        self.assertEqual([node.id for node in self.root.descendants()], ["a", "branch", "b", "c"])


class RemoveTest(unittest.TestCase):
    """Removal leaves no dangling references."""

    def test_remove_middle_child(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        a = root.append_child(make_node("a"))
        b = root.append_child(make_node("b"))
        c = root.append_child(make_node("c"))

        b.remove()

        self.assertIsNone(b.parent)
        self.assertIsNone(b.previous_sibling)
        self.assertIsNone(b.next_sibling)
        self.assertIs(a.next_sibling, c)
        self.assertIs(c.previous_sibling, a)
        self.assertEqual([child.id for child in root.children], ["a", "c"])
        self.assertNotIn(b, list(root.descendants()))

    def test_remove_only_child(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        only = root.append_child(make_node("only"))
        only.remove()
        self.assertIsNone(root.first_child)
        self.assertIsNone(root.last_child)
        self.assertEqual(len(root.children), 0)

    def test_removed_node_keeps_its_subtree(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        branch = root.append_child(make_node("branch"))
        leaf = branch.append_child(make_node("leaf"))
        branch.remove()
        self.assertIs(leaf.parent, branch)
        self.assertEqual([node.id for node in branch.descendants()], ["leaf"])

    def test_remove_detached_node_is_noop(self) -> None:
        lonely = make_node("lonely")
        lonely.remove()
        self.assertIsNone(lonely.parent)


class ChildrenListTest(unittest.TestCase):
    """Child lists are live until materialized."""

    def test_lazy_children_see_later_mutations(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        root.append_child(make_node("a"))
        children = root.children
        root.append_child(make_node("b"))
        self.assertEqual([child.id for child in children], ["a", "b"])

    def test_materialized_snapshot_is_stable(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        root.append_child(make_node("a"))
        children = root.children
        snapshot = children.to_list()
        root.append_child(make_node("b"))
        self.assertTrue(children.materialized)
        self.assertEqual([child.id for child in snapshot], ["a"])
        self.assertEqual([child.id for child in children], ["a"])

    def test_item_out_of_range_returns_none(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        root.append_child(make_node("a"))
        self.assertEqual(root.children.item(0).id, "a")
        self.assertIsNone(root.children.item(5))

    def test_removing_current_child_during_iteration(self) -> None:
        root = make_node("root", NodeKind.DOCUMENT)
        for node_id in ("a", "b", "c"):
            root.append_child(make_node(node_id))
        seen = []
        for child in root.children:
            seen.append(child.id)
            child.remove()
        self.assertEqual(seen, ["a", "b", "c"])
        self.assertIsNone(root.first_child)


if __name__ == "__main__":
    unittest.main()
