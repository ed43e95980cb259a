"""
Ordered trie (prefix tree) over Unicode codepoints.

Techniques used:
  - One node per codepoint: no path compression, so every edge label is a
    single character and the tree shape mirrors the stored keys exactly.
  - Insertion-ordered children: siblings live in a list and are scanned
    linearly.  Enumeration therefore follows insertion order, not
    lexicographic order.
  - Parent back-references: ``delete`` clears the terminal flag and then
    walks up the parent chain, pruning nodes no stored key needs anymore.
  - Iterative traversal: no method recurses, so the call stack stays
    constant regardless of key length.

Complexity (n = key length, k = number of siblings at a level):
  insert / lookup / delete    — O(n * k)
  keys_with_prefix            — O(n * k + size of the matching subtree)
  dump_keys                   — O(total nodes)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, TextIO

log = logging.getLogger(__name__)

__all__ = [
    "EmptyKeyError",
    "KeyNotFoundError",
    "Node",
    "Trie",
    "TrieError",
    "dump_keys",
]


class TrieError(Exception):
    """Base class for errors raised by trie operations."""


class EmptyKeyError(TrieError, ValueError):
    """Raised when a key of zero length is inserted or deleted."""

    def __init__(self, message: str = "key length cannot be zero") -> None:
        super().__init__(message)


class KeyNotFoundError(TrieError, KeyError):
    """Raised when deleting a key that is not stored in the trie."""


# eq=False: nodes compare by identity, and the parent link would otherwise
# make the generated __eq__ and __repr__ recurse through the whole tree.
@dataclass(eq=False)
class Node:
    """A single node of the trie, labelled by one codepoint."""

    label: str = ""
    children: list[Node] = field(default_factory=list, repr=False)
    parent: Node | None = field(default=None, repr=False)
    leaf: bool = False

    def is_leaf(self) -> bool:
        """Return ``True`` when a stored key ends at this node."""
        return self.leaf

    def child(self, label: str) -> Node | None:
        """Return the child labelled *label*, or ``None``."""
        for c in self.children:
            if c.label == label:
                return c
        return None

    def path(self) -> str:
        """Spell the labels from the root down to this node."""
        labels = []
        node = self
        while node.parent is not None:
            labels.append(node.label)
            node = node.parent
        return "".join(reversed(labels))

    def lookup(self, key: str) -> tuple[Node, bool]:
        """Follow *key* below this node.

        Returns the landing node and whether a stored key ends there.  When
        the walk falls off the tree, the deepest matched node is returned
        together with ``False``.  The empty key is never found.
        """
        if not key:
            return self, False
        node, consumed = self._descend(key)
        if consumed < len(key):
            return node, False
        return node, node.leaf

    def insert(self, key: str) -> bool:
        """Add *key* below this node.

        Returns ``True`` when the key was not stored before.
        """
        if not key:
            raise EmptyKeyError()
        node, consumed = self._descend(key)
        created = 0
        for ch in key[consumed:]:
            new_child = Node(label=ch, parent=node)
            node.children.append(new_child)
            node = new_child
            created += 1
        if created:
            log.debug("insert %r created %d node(s)", key, created)
        added = not node.leaf
        node.leaf = True
        return added

    def prune(self) -> int:
        """Remove this node and any ancestor left without purpose.

        The walk stops at the first node that is still a leaf, still has
        children, or is the root.  Returns the number of nodes removed.
        """
        removed = 0
        node = self
        while node.parent is not None and not node.leaf and not node.children:
            parent = node.parent
            # identity, not label: a sibling with an equal label is a
            # different node
            parent.children = [c for c in parent.children if c is not node]
            node.parent = None
            node = parent
            removed += 1
        return removed

    def iter_keys(self, prefix: str = "") -> Iterator[str]:
        """Yield every stored key in this subtree, pre-order.

        *prefix* is the spelling of the path above this node.  Children are
        visited in insertion order.
        """
        start = prefix + self.label if self.parent is not None else prefix
        # DFS with explicit stack: (node, accumulated_prefix)
        stack: list[tuple[Node, str]] = [(self, start)]
        while stack:
            current, acc = stack.pop()
            if current.leaf:
                yield acc
            for c in reversed(current.children):
                stack.append((c, acc + c.label))

    def dump_keys(self, out: TextIO, sep: str, prefix: str = "") -> None:
        """Write every key in this subtree to *out*, each followed by *sep*.

        Exceptions raised by ``out.write`` abort the dump and propagate.
        """
        for key in self.iter_keys(prefix):
            out.write(key + sep)

    def _descend(self, key: str) -> tuple[Node, int]:
        """Walk *key* as far as the tree allows.

        Returns the deepest node reached and how many codepoints matched.
        """
        node = self
        for i, ch in enumerate(key):
            nxt = node.child(ch)
            if nxt is None:
                return node, i
            node = nxt
        return node, len(key)


class Trie:
    """An ordered prefix tree storing a set of non-empty string keys.

    >>> t = Trie()
    >>> for w in ("go", "goad", "goal"):
    ...     t.insert(w)
    >>> t.lookup("go")[1]
    True
    >>> t.lookup("goa")[1]
    False
    >>> t.delete("go")
    >>> list(t)
    ['goad', 'goal']
    """

    def __init__(self) -> None:
        self._root = Node()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def root(self) -> Node:
        return self._root

    def insert(self, key: str) -> None:
        """Store *key*.  Inserting an existing key is a no-op."""
        self._root.insert(key)

    def lookup(self, key: str) -> tuple[Node, bool]:
        """Return the node reached by *key* and whether *key* is stored."""
        return self._root.lookup(key)

    def delete(self, key: str) -> None:
        """Remove *key*, pruning nodes that no stored key needs anymore."""
        if not key:
            raise EmptyKeyError()
        node, ok = self._root.lookup(key)
        if not ok:
            raise KeyNotFoundError(key)
        node.leaf = False
        removed = node.prune()
        log.debug("delete %r pruned %d node(s)", key, removed)

    def dump_keys(self, out: TextIO, sep: str) -> None:
        """Write all keys to *out* in pre-order, each followed by *sep*."""
        self._root.dump_keys(out, sep)

    def keys_with_prefix(self, prefix: str) -> Iterator[str]:
        """Yield all keys that begin with *prefix*, lazily."""
        node, consumed = self._root._descend(prefix)
        if consumed < len(prefix):
            return
        # iter_keys appends the landing node's own label
        yield from node.iter_keys(prefix[:-1])

    def node_count(self) -> int:
        """Number of nodes below the root."""
        count = 0
        stack = list(self._root.children)
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count

    def __len__(self) -> int:
        # counted from the tree, so keys added through Node.insert are seen
        return sum(1 for _ in self._root.iter_keys())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.lookup(key)[1]

    def __iter__(self) -> Iterator[str]:
        return self._root.iter_keys()


def dump_keys(out: TextIO, sep: str, trie: Trie) -> None:
    """Write the keys of *trie* to *out*, each followed by *sep*."""
    trie.dump_keys(out, sep)


# ------------------------------------------------------------------
# Quick demo
# ------------------------------------------------------------------

if __name__ == "__main__":
    import sys
    import timeit

    trie = Trie()

    words = ["go", "goad", "goaded", "goal", "goalie", "goalpost", "goals"]
    for w in words:
        trie.insert(w)

    print(f"Trie size: {len(trie)} keys, {trie.node_count()} nodes")
    print(f"lookup('goal')       → {trie.lookup('goal')[1]}")
    print(f"lookup('goa')        → {trie.lookup('goa')[1]}")
    print(f"lookup('goat')       → {trie.lookup('goat')[1]}")
    print(f"keys_with_prefix('goal') → {list(trie.keys_with_prefix('goal'))}")

    trie.delete("go")
    print("\nAfter deleting 'go':")
    print(f"lookup('go')         → {trie.lookup('go')[1]}")
    print(f"lookup('goad')       → {trie.lookup('goad')[1]}")
    print("dump_keys:")
    dump_keys(sys.stdout, "\n", trie)

    # trie lookup against a linear scan over the same keys
    keys = [f"{i:010d}" for i in range(1000)]
    numeric = Trie()
    for k in keys:
        numeric.insert(k)
    last = keys[-1]
    n = 10000
    trie_t = timeit.timeit(lambda: numeric.lookup(last), number=n)
    scan_t = timeit.timeit(lambda: next(s for s in keys if s == last), number=n)
    print(f"\nlookup of {last!r} among {len(keys)} keys, {n} runs:")
    print(f"  trie  {trie_t * 1e6 / n:8.2f} us/op")
    print(f"  scan  {scan_t * 1e6 / n:8.2f} us/op")
