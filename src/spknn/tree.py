# Copyright (C) 2018 DataStorm
#
# This file is part of SpatialKNN.
#
# SpatialKNN is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# SpatialKNN is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# A copy of the GNU General Public License is available in the LICENSE
# file or at <http://www.gnu.org/licenses/>.
'''
R-tree data structure.

The data model for the tree is given by the following specifications:
  1. The tree has a single root node, which may be empty.
  1. A node is a :class:`ParentNode` holding an ordered list of children.
  1. There are 2 types of children:
         a. :class:`Leaf` wrapping one stored item and its envelope.
         a. :class:`ParentNode` wrapping a nested node.
  1. The children of a node are either all leaves or all parent nodes, and
     every leaf lies at the same depth.
  1. To each node corresponds an envelope enclosing all its children's
     envelopes.
  1. Non-root nodes hold between `min_children` and `max_children` children,
     except after bulk loading where the last page of a slab may be smaller.

Trees are built either by bulk loading via sort-tile-recurse packing, or
incrementally via Guttman's insertion with quadratic split. Nearest
neighbour queries are delegated to the best-first traversal of
:mod:`spknn.knn`.
'''
import collections
import math

import toolz

from . import config
from . import knn as best_first
from . import str as packing
from .envelope import AAMBR, envelope_of
from .logging import get_logger

logger = get_logger("tree")


class Leaf(collections.namedtuple("Leaf", "item envelope")):
    """A child wrapping one stored item."""
    __slots__ = ()
    is_leaf = True


class ParentNode:
    """An internal node of the tree."""
    __slots__ = ("children", "envelope")
    is_leaf = False

    def __init__(self, children=()):
        self.children = list(children)
        self.recompute()

    @property
    def is_leaf_level(self):
        """Boolean: are the children leaves? Empty nodes count as such."""
        return not self.children or self.children[0].is_leaf

    def recompute(self):
        if self.children:
            self.envelope = AAMBR.merge(c.envelope for c in self.children)
        else:
            self.envelope = None

    def extend(self, envelope):
        if self.envelope is None:
            self.envelope = envelope
        else:
            self.envelope = self.envelope.union(envelope)

    def leaves(self):
        """Depth-first generator of the leaves under this node."""
        for child in self.children:
            if child.is_leaf:
                yield child
            else:
                yield from child.leaves()

    def copy(self):
        if self.is_leaf_level:
            return ParentNode(self.children)
        return ParentNode(child.copy() for child in self.children)

    def __repr__(self):
        return "ParentNode(children={}, envelope={!r})".format(
            len(self.children), self.envelope)


class RTree():
    """
    R-tree spatial index over arbitrary items.

    Items are stored as is; their envelopes are derived once at insertion
    through :func:`spknn.envelope.envelope_of`. Equality of items, as used by
    `remove` and `contains`, is Python equality.

    Args:
        items (iterable, optional): items to bulk load.
        max_children (int, optional): maximum fan-out of a node. Defaults to
            the runtime configuration.
        min_children (int, optional): minimum fill of a non-root node.
            Defaults to 40% of `max_children`.
    """

    def __init__(self, items=None, max_children=None, min_children=None):
        runtime = config.runtime_config()
        if max_children is None:
            max_children = runtime.max_children
            if min_children is None:
                min_children = runtime.min_children
        if min_children is None:
            min_children = config.default_min_children(max_children)
        config.check_fanout(max_children, min_children)
        self.max_children = max_children
        self.min_children = min_children
        self.clear()
        if items is not None:
            self._bulk_load(items)

    @classmethod
    def load(cls, items, max_children=None, min_children=None):
        """Builds a tree from `items` by sort-tile-recurse packing."""
        return cls(items, max_children=max_children,
                   min_children=min_children)

    def _bulk_load(self, items):
        leaves = [Leaf(item, envelope_of(item)) for item in items]
        self._root = packing.pack(leaves, page_size=self.max_children)
        self._size = len(leaves)
        logger.debug("Bulk loaded %d items into a tree of height %d",
                     self._size, self.height)

    @property
    def root(self):
        return self._root

    def size(self):
        return self._size

    def __len__(self):
        """Returns the number of items."""
        return self._size

    @property
    def is_empty(self):
        """Boolean: Is the tree empty?"""
        return self._size == 0

    @property
    def height(self):
        """Number of node levels, 0 for an empty tree."""
        if self.is_empty:
            return 0
        height = 1
        node = self._root
        while not node.is_leaf_level:
            node = node.children[0]
            height += 1
        return height

    def __iter__(self):
        return (leaf.item for leaf in self._root.leaves())

    def each(self, func):
        for item in self:
            func(item)

    def clear(self):
        self._root = ParentNode()
        self._size = 0

    def copy(self):
        """Structural copy of the tree. Items themselves are shared."""
        other = self.__class__(max_children=self.max_children,
                               min_children=self.min_children)
        other._root = self._root.copy()
        other._size = self._size
        return other

    # ==========================  Insertion  ==================================

    def insert(self, item):
        self._insert_leaf(Leaf(item, envelope_of(item)))
        self._size += 1

    def extend(self, items):
        for item in items:
            self.insert(item)

    def _insert_leaf(self, leaf):
        sibling = self._insert(self._root, leaf)
        if sibling is not None:
            self._root = ParentNode([self._root, sibling])
            logger.debug("Root split, tree height is now %d", self.height)

    def _insert(self, node, leaf):
        """Inserts `leaf` under `node`; returns the new sibling on split."""
        if node.is_leaf_level:
            node.children.append(leaf)
        else:
            child = min(
                node.children,
                key=lambda c: (c.envelope.enlargement(leaf.envelope),
                               c.envelope.area),
            )
            sibling = self._insert(child, leaf)
            if sibling is not None:
                node.children.append(sibling)
        node.extend(leaf.envelope)
        if len(node.children) > self.max_children:
            return self._split(node)
        return None

    def _split(self, node):
        """Quadratic split: `node` keeps one group, the other is returned."""
        entries = node.children

        def waste(pair):
            a, b = entries[pair[0]].envelope, entries[pair[1]].envelope
            return (a.union(b).area - a.area - b.area, a.distance_square(b))

        pairs = ((i, j) for i in range(len(entries))
                 for j in range(i + 1, len(entries)))
        i, j = max(pairs, key=waste)
        groups = ([entries[i]], [entries[j]])
        envelopes = [entries[i].envelope, entries[j].envelope]
        rest = [e for k, e in enumerate(entries) if k not in (i, j)]

        while rest:
            # Each group must end up with at least min_children entries.
            short = [g for g in groups
                     if len(g) + len(rest) <= self.min_children]
            if short:
                short[0].extend(rest)
                break

            def preference(entry):
                return abs(envelopes[0].enlargement(entry.envelope)
                           - envelopes[1].enlargement(entry.envelope))

            entry = rest.pop(max(range(len(rest)),
                                 key=lambda k: preference(rest[k])))
            g = min((0, 1), key=lambda k: (
                envelopes[k].enlargement(entry.envelope),
                envelopes[k].area,
                len(groups[k]),
            ))
            groups[g].append(entry)
            envelopes[g] = envelopes[g].union(entry.envelope)

        node.children = groups[0]
        node.recompute()
        return ParentNode(groups[1])

    # ===========================  Deletion  ==================================

    def remove(self, item):
        """
        Removes one item equal to `item`.

        Returns:
            The removed item, or None if no equal item is stored.
        """
        if self.is_empty:
            return None
        orphans = []
        leaf = self._remove(self._root, item, envelope_of(item), orphans)
        if leaf is None:
            return None
        self._size -= 1
        # Shrink the root while it has a single parent child.
        while len(self._root.children) == 1 and not self._root.is_leaf_level:
            self._root = self._root.children[0]
        for orphan in orphans:
            self._insert_leaf(orphan)
        if orphans:
            logger.debug("Condensed tree, reinserted %d items", len(orphans))
        return leaf.item

    def _remove(self, node, item, envelope, orphans):
        if node.is_leaf_level:
            for k, child in enumerate(node.children):
                if child.item == item:
                    del node.children[k]
                    node.recompute()
                    return child
            return None
        for k, child in enumerate(node.children):
            if not child.envelope.contains(envelope):
                continue
            leaf = self._remove(child, item, envelope, orphans)
            if leaf is not None:
                if len(child.children) < self.min_children:
                    del node.children[k]
                    orphans.extend(child.leaves())
                node.recompute()
                return leaf
        return None

    def remove_at_point(self, point):
        """Removes and returns one item whose envelope contains `point`."""
        if self.is_empty:
            return None
        hits = list(toolz.take(
            1, self._intersecting(self._root, AAMBR.from_point(point))))
        if not hits:
            return None
        return self.remove(hits[0].item)

    # ============================  Queries  ==================================

    def contains(self, item):
        if self.is_empty:
            return False
        envelope = envelope_of(item)
        return any(leaf.item == item
                   for leaf in self._containing(self._root, envelope))

    def __contains__(self, item):
        return self.contains(item)

    def _containing(self, node, envelope):
        for child in node.children:
            if not child.envelope.contains(envelope):
                continue
            if child.is_leaf:
                yield child
            else:
                yield from self._containing(child, envelope)

    def search(self, envelope):
        """Items whose envelopes intersect `envelope`, touching included."""
        if self.is_empty:
            return []
        envelope = envelope_of(envelope)
        return [leaf.item
                for leaf in self._intersecting(self._root, envelope)]

    def _intersecting(self, node, envelope):
        for child in node.children:
            if not child.envelope.intersects(envelope):
                continue
            if child.is_leaf:
                yield child
            else:
                yield from self._intersecting(child, envelope)

    def nearest_neighbor(self, point, distance_fn=None):
        """
        Item closest to `point`, or None if the tree is empty.

        Args:
            point (sequence of float): the query point.
            distance_fn (callable, optional): `distance_fn(item, point)`. It
                must never be smaller than the distance from `point` to the
                item's envelope. Defaults to that envelope distance.
        """
        found = self.knn(AAMBR.from_point(point), limit=1,
                         distance_fn=_point_score(point, distance_fn))
        return found[0] if found else None

    def locate_within_distance(self, point, sqr_radius, distance_fn=None):
        """
        Items within squared distance `sqr_radius` of `point`, nearest first.

        `distance_fn` follows the contract of :meth:`nearest_neighbor`.
        """
        def within(candidate):
            inside = candidate.distance**2 <= sqr_radius
            return inside, not inside

        return self.knn(AAMBR.from_point(point),
                        distance_fn=_point_score(point, distance_fn),
                        predicate_fn=within)

    def knn(self, query, limit=0, distance_fn=None, predicate_fn=None):
        """See :func:`spknn.knn.knn`."""
        return best_first.knn(self, query, limit=limit,
                              distance_fn=distance_fn,
                              predicate_fn=predicate_fn)

    def knn_min_dist(self, query, distance_fn=None, predicate_fn=None,
                     initial_mindist=math.inf):
        """See :func:`spknn.knn.knn_min_dist`."""
        return best_first.knn_min_dist(self, query, distance_fn=distance_fn,
                                       predicate_fn=predicate_fn,
                                       initial_mindist=initial_mindist)

    def __repr__(self):
        return "<{} size={} height={}>".format(
            self.__class__.__name__, self._size, self.height)


def _point_score(point, distance_fn):
    if distance_fn is None:
        return None

    def score(query, item, candidate):
        if item is None:
            return candidate.distance
        return distance_fn(item, point)

    return score
