#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

The ordered map engine: a self-balancing binary search tree based on the
**Red-Black** algorithm.  It satisfies the ``AbstractMap`` contract while
guaranteeing O(log n) insert, delete and lookup, and iterates keys in
ascending order.

Nodes are kept in an *arena* – a plain list – and refer to each other by
index.  Slot ``NIL`` (index 0) is the single shared sentinel that stands for
every absent child; it is always black and never carries a key.  Removed
nodes leave a hole that is recycled by the next insertion.

The end position of an iterator is an explicit state of the iterator
(``Position.END``), so the sentinel is never used as scratch storage except
for the parent link that delete-fixup needs while it walks upward.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> rbt = RedBlackTree()
>>> rbt[5] = "five"
>>> rbt[2] = "two"
>>> rbt[8] = "eight"
>>> rbt.min_key()
2
>>> rbt.items()
[(2, 'two'), (5, 'five'), (8, 'eight')]
>>> it = rbt.end()
>>> it.retreat().key
8
>>> del rbt[5]
>>> 5 in rbt
False
"""

from __future__ import annotations

import enum
import logging
from typing import (
    Any,
    Callable,
    Generator,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from map_base import AbstractMap, MapIterator, Position
from map_errors import IteratorOutOfRange, NotFound

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Type variables (keys must be comparable, values may be anything)
# ----------------------------------------------------------------------
K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Node colour constants – using simple booleans is fastest
# ----------------------------------------------------------------------
RED = True
BLACK = False

# Arena index of the sentinel
NIL = 0


class NodeKind(enum.Enum):
    SENTINEL = "sentinel"
    VALUE = "value"


class _Node:
    """Arena slot – either the sentinel or a key-bearing value node."""

    __slots__ = ("kind", "key", "value", "color", "left", "right", "parent")

    def __init__(
        self,
        kind: NodeKind,
        key: Any = None,
        value: Any = None,
        color: bool = BLACK,
        parent: int = NIL,
    ) -> None:
        self.kind = kind
        self.key = key
        self.value = value
        self.color = color
        self.left = NIL
        self.right = NIL
        self.parent = parent

    def __repr__(self) -> str:
        if self.kind is NodeKind.SENTINEL:
            return "<nil>"
        col = "R" if self.color == RED else "B"
        return f"<{col} {self.key!r}:{self.value!r}>"


def _sentinel() -> _Node:
    return _Node(NodeKind.SENTINEL)


class TreeIterator(MapIterator[K, V]):
    """Bidirectional cursor walking parent links for successor/predecessor."""

    __slots__ = ("_node",)

    def __init__(self, tree: "RedBlackTree[K, V]", node: int) -> None:
        super().__init__(tree, Position.END if node == NIL else Position.ENTRY)
        self._node = node

    def _entry(self) -> _Node:
        return self._map._nodes[self._node]

    def _same_position(self, other: MapIterator[K, V]) -> bool:
        return self._node == other._node  # type: ignore[attr-defined]

    def copy(self) -> "TreeIterator[K, V]":
        return TreeIterator(self._map, self._node)

    def _move_to(self, node: int) -> None:
        self._node = node
        self._state = Position.END if node == NIL else Position.ENTRY

    def _step_forward(self) -> None:
        nodes = self._map._nodes
        cur = self._node
        if nodes[cur].right != NIL:
            self._move_to(self._map._minimum(nodes[cur].right))
            return

        # Walk up until we arrive from a left child.
        up = nodes[cur].parent
        while up != NIL and cur == nodes[up].right:
            cur = up
            up = nodes[up].parent
        self._move_to(up)

    def _step_backward(self) -> None:
        tree = self._map
        nodes = tree._nodes
        if self._state is Position.END:
            if tree._root == NIL:
                raise IteratorOutOfRange("cannot retreat in an empty map")
            self._move_to(tree._maximum(tree._root))
            return

        cur = self._node
        if nodes[cur].left != NIL:
            self._move_to(tree._maximum(nodes[cur].left))
            return

        up = nodes[cur].parent
        while up != NIL and cur == nodes[up].left:
            cur = up
            up = nodes[up].parent
        if up == NIL:
            raise IteratorOutOfRange("cannot retreat before the first entry")
        self._move_to(up)


class RedBlackTree(AbstractMap[K, V]):
    """
    An ordered map implemented with a red-black binary search tree.

    The mapping protocol comes from ``AbstractMap``; this class supplies the
    search, insertion and deletion primitives together with their
    rebalancing, plus ``min_key`` / ``max_key`` and ``validate``.
    """

    __slots__ = ("_nodes", "_free", "_root")

    # ------------------------------------------------------------------
    #   Construction / state management
    # ------------------------------------------------------------------
    def __init__(
        self,
        items: Optional[Union[AbstractMap[K, V], Iterable[Tuple[K, V]]]] = None,
        default_factory: Optional[Callable[[], V]] = None,
    ) -> None:
        """
        Create an empty tree or optionally initialise it from an iterable of
        ``(key, value)`` pairs (last value wins for repeated keys).
        """
        super().__init__(items, default_factory=default_factory)

    def _reset(self) -> None:
        self._nodes: List[Optional[_Node]] = [_sentinel()]
        self._free: List[int] = []
        self._root: int = NIL
        self._size = 0

    def _adopt(self, other: AbstractMap[K, V]) -> None:
        self._nodes = other._nodes  # type: ignore[attr-defined]
        self._free = other._free  # type: ignore[attr-defined]
        self._root = other._root  # type: ignore[attr-defined]

    def _empty_like(self) -> "RedBlackTree[K, V]":
        return RedBlackTree(default_factory=self._default_factory)

    def _allocate(self, key: K, value: V, parent: int) -> int:
        node = _Node(NodeKind.VALUE, key, value, RED, parent)
        if self._free:
            index = self._free.pop()
            self._nodes[index] = node
        else:
            index = len(self._nodes)
            self._nodes.append(node)
        return index

    def _release(self, index: int) -> None:
        self._nodes[index] = None
        self._free.append(index)

    # ------------------------------------------------------------------
    #   Helper index look-up (internal)
    # ------------------------------------------------------------------
    def _search(self, key: K) -> int:
        """Return the index of the node holding *key* or ``NIL``."""
        nodes = self._nodes
        cur = self._root
        while cur != NIL:
            node = nodes[cur]
            if key == node.key:
                return cur
            elif key < node.key:
                cur = node.left
            else:
                cur = node.right
        return NIL

    def _minimum(self, start: int) -> int:
        nodes = self._nodes
        while nodes[start].left != NIL:
            start = nodes[start].left
        return start

    def _maximum(self, start: int) -> int:
        nodes = self._nodes
        while nodes[start].right != NIL:
            start = nodes[start].right
        return start

    # ------------------------------------------------------------------
    #   Public engine primitives
    # ------------------------------------------------------------------
    def find(self, key: K) -> TreeIterator[K, V]:
        return TreeIterator(self, self._search(key))

    def begin(self) -> TreeIterator[K, V]:
        if self._root == NIL:
            return TreeIterator(self, NIL)
        return TreeIterator(self, self._minimum(self._root))

    def end(self) -> TreeIterator[K, V]:
        return TreeIterator(self, NIL)

    def __iter__(self) -> Generator[K, None, None]:
        """Yield keys in ascending order (in-order traversal)."""
        nodes = self._nodes
        stack: List[int] = []
        cur = self._root
        while stack or cur != NIL:
            while cur != NIL:
                stack.append(cur)
                cur = nodes[cur].left
            cur = stack.pop()
            yield nodes[cur].key
            cur = nodes[cur].right

    # ------------------------------------------------------------------
    #   Minimum / maximum helpers
    # ------------------------------------------------------------------
    def min_key(self) -> K:
        """Return the smallest key stored in the tree."""
        if self._root == NIL:
            raise ValueError("Tree is empty")
        return self._nodes[self._minimum(self._root)].key

    def max_key(self) -> K:
        """Return the largest key stored in the tree."""
        if self._root == NIL:
            raise ValueError("Tree is empty")
        return self._nodes[self._maximum(self._root)].key

    # ------------------------------------------------------------------
    #   Core BST insertion
    # ------------------------------------------------------------------
    def _insert(self, key: K, value: V) -> TreeIterator[K, V]:
        """Attach a new red leaf for *key* and rebalance."""
        nodes = self._nodes
        parent = NIL
        cur = self._root
        while cur != NIL:
            parent = cur
            if key < nodes[cur].key:
                cur = nodes[cur].left
            else:
                cur = nodes[cur].right

        z = self._allocate(key, value, parent)
        if parent == NIL:
            self._root = z
        elif key < nodes[parent].key:
            nodes[parent].left = z
        else:
            nodes[parent].right = z

        self._size += 1
        self._fix_insert(z)
        return TreeIterator(self, z)

    # ------------------------------------------------------------------
    #   Insert fix-up (preserves red-black properties)
    # ------------------------------------------------------------------
    def _fix_insert(self, z: int) -> None:
        """Restore red-black properties after inserting node `z` (which is RED)."""
        nodes = self._nodes
        while nodes[nodes[z].parent].color == RED:
            parent = nodes[z].parent
            grand = nodes[parent].parent
            if parent == nodes[grand].left:
                y = nodes[grand].right  # uncle
                if nodes[y].color == RED:
                    # Case 1 – recolour
                    nodes[parent].color = BLACK
                    nodes[y].color = BLACK
                    nodes[grand].color = RED
                    z = grand
                else:
                    if z == nodes[parent].right:
                        # Case 2 – left-rotate at parent
                        z = parent
                        self._rotate_left(z)
                    # Case 3 – right-rotate at grandparent
                    parent = nodes[z].parent
                    grand = nodes[parent].parent
                    nodes[parent].color = BLACK
                    nodes[grand].color = RED
                    self._rotate_right(grand)
            else:  # Mirror of the above (parent is a right child)
                y = nodes[grand].left  # uncle
                if nodes[y].color == RED:
                    nodes[parent].color = BLACK
                    nodes[y].color = BLACK
                    nodes[grand].color = RED
                    z = grand
                else:
                    if z == nodes[parent].left:
                        z = parent
                        self._rotate_right(z)
                    parent = nodes[z].parent
                    grand = nodes[parent].parent
                    nodes[parent].color = BLACK
                    nodes[grand].color = RED
                    self._rotate_left(grand)
        nodes[self._root].color = BLACK

    # ------------------------------------------------------------------
    #   Left / right rotations – helper primitives
    # ------------------------------------------------------------------
    def _rotate_left(self, x: int) -> None:
        """Left-rotate the subtree rooted at `x`."""
        nodes = self._nodes
        y = nodes[x].right
        if y == NIL:
            raise RuntimeError("rotate_left called on a node with nil right child")
        # Turn y's left subtree into x's right subtree
        nodes[x].right = nodes[y].left
        if nodes[y].left != NIL:
            nodes[nodes[y].left].parent = x
        # Link x's parent to y
        up = nodes[x].parent
        nodes[y].parent = up
        if up == NIL:
            self._root = y
        elif x == nodes[up].left:
            nodes[up].left = y
        else:
            nodes[up].right = y
        # Put x on y's left
        nodes[y].left = x
        nodes[x].parent = y

    def _rotate_right(self, y: int) -> None:
        """Right-rotate the subtree rooted at `y`."""
        nodes = self._nodes
        x = nodes[y].left
        if x == NIL:
            raise RuntimeError("rotate_right called on a node with nil left child")
        nodes[y].left = nodes[x].right
        if nodes[x].right != NIL:
            nodes[nodes[x].right].parent = y
        up = nodes[y].parent
        nodes[x].parent = up
        if up == NIL:
            self._root = x
        elif y == nodes[up].right:
            nodes[up].right = x
        else:
            nodes[up].left = x
        nodes[x].right = y
        nodes[y].parent = x

    # ------------------------------------------------------------------
    #   Deletion
    # ------------------------------------------------------------------
    def _remove_key(self, key: K) -> None:
        z = self._search(key)
        if z == NIL:
            raise NotFound(key)
        self._delete_node(z)

    def _transplant(self, u: int, v: int) -> None:
        """Replace subtree rooted at `u` with the subtree rooted at `v`."""
        nodes = self._nodes
        up = nodes[u].parent
        if up == NIL:
            self._root = v
        elif u == nodes[up].left:
            nodes[up].left = v
        else:
            nodes[up].right = v
        nodes[v].parent = up

    def _delete_node(self, z: int) -> None:
        """Delete the node `z` from the tree and fix up any colour violations."""
        nodes = self._nodes
        y = z  # node physically removed from its slot
        y_original_color = nodes[y].color
        if nodes[z].left == NIL:
            x = nodes[z].right
            self._transplant(z, x)
        elif nodes[z].right == NIL:
            x = nodes[z].left
            self._transplant(z, x)
        else:
            # z has two children: its in-order successor `y` takes its place
            y = self._minimum(nodes[z].right)
            y_original_color = nodes[y].color
            x = nodes[y].right
            if nodes[y].parent == z:
                nodes[x].parent = y
            else:
                self._transplant(y, x)
                nodes[y].right = nodes[z].right
                nodes[nodes[y].right].parent = y
            self._transplant(z, y)
            nodes[y].left = nodes[z].left
            nodes[nodes[y].left].parent = y
            nodes[y].color = nodes[z].color

        self._size -= 1

        if y_original_color == BLACK:
            self._fix_delete(x)
        # The sentinel only carried a parent link for the fix-up walk.
        nodes[NIL].parent = NIL
        self._release(z)

    # ------------------------------------------------------------------
    #   Delete fix-up (preserves red-black properties)
    # ------------------------------------------------------------------
    def _fix_delete(self, x: int) -> None:
        """
        Restore red-black properties after deleting a black node.
        `x` is the node that moved into the removed node's slot (may be `NIL`).
        """
        nodes = self._nodes
        while x != self._root and nodes[x].color == BLACK:
            parent = nodes[x].parent
            if x == nodes[parent].left:
                w = nodes[parent].right  # sibling
                if nodes[w].color == RED:
                    # Case 1 – sibling is red
                    nodes[w].color = BLACK
                    nodes[parent].color = RED
                    self._rotate_left(parent)
                    w = nodes[parent].right
                if nodes[nodes[w].left].color == BLACK and nodes[nodes[w].right].color == BLACK:
                    # Case 2 – both of sibling's children are black
                    nodes[w].color = RED
                    x = parent
                else:
                    if nodes[nodes[w].right].color == BLACK:
                        # Case 3 – sibling's right child is black, left child is red
                        nodes[nodes[w].left].color = BLACK
                        nodes[w].color = RED
                        self._rotate_right(w)
                        w = nodes[parent].right
                    # Case 4 – sibling's right child is red
                    nodes[w].color = nodes[parent].color
                    nodes[parent].color = BLACK
                    nodes[nodes[w].right].color = BLACK
                    self._rotate_left(parent)
                    x = self._root
            else:
                # Mirror of the above, with "left" and "right" swapped
                w = nodes[parent].left
                if nodes[w].color == RED:
                    nodes[w].color = BLACK
                    nodes[parent].color = RED
                    self._rotate_right(parent)
                    w = nodes[parent].left
                if nodes[nodes[w].right].color == BLACK and nodes[nodes[w].left].color == BLACK:
                    nodes[w].color = RED
                    x = parent
                else:
                    if nodes[nodes[w].left].color == BLACK:
                        nodes[nodes[w].right].color = BLACK
                        nodes[w].color = RED
                        self._rotate_left(w)
                        w = nodes[parent].left
                    nodes[w].color = nodes[parent].color
                    nodes[parent].color = BLACK
                    nodes[nodes[w].left].color = BLACK
                    self._rotate_right(parent)
                    x = self._root
        nodes[x].color = BLACK

    # ------------------------------------------------------------------
    #   Validation/checking utilities – useful for debugging
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify that the tree satisfies all red-black invariants.
        Raises ``AssertionError`` with a descriptive message if something is broken.
        """
        nodes = self._nodes
        sentinel = nodes[NIL]
        assert sentinel.kind is NodeKind.SENTINEL, "Slot 0 is not the sentinel"
        assert sentinel.color == BLACK, "Sentinel is not black"
        assert nodes[self._root].color == BLACK, "Root is not black"

        def dfs(index: int) -> Tuple[int, int]:
            """Return ``(black_height, node_count)`` of the subtree at *index*."""
            if index == NIL:
                return 1, 0  # leaves count as black height 1 (they are black)

            node = nodes[index]
            assert node is not None, f"Link to released slot {index}"
            assert node.kind is NodeKind.VALUE, "Sentinel reachable as a value node"

            # Red nodes have black children
            if node.color == RED:
                assert nodes[node.left].color == BLACK, "Red node has red left child"
                assert nodes[node.right].color == BLACK, "Red node has red right child"

            # BST ordering and parent links
            if node.left != NIL:
                assert nodes[node.left].key < node.key, "BST property violated (left child larger)"
                assert nodes[node.left].parent == index, "Broken parent link"
            if node.right != NIL:
                assert nodes[node.right].key > node.key, "BST property violated (right child smaller)"
                assert nodes[node.right].parent == index, "Broken parent link"

            left_black, left_count = dfs(node.left)
            right_black, right_count = dfs(node.right)

            # All paths have the same black height
            assert left_black == right_black, "Black-height mismatch"

            bh = left_black + (1 if node.color == BLACK else 0)
            return bh, left_count + right_count + 1

        _, count = dfs(self._root)
        assert count == self._size, "Node count does not match size"
