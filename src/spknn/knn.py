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
Best-first nearest neighbours search on R-trees.

Both searches walk the tree with a min-priority queue of candidates keyed by
distance to the query. The children of the current node are pushed as
candidates; item candidates reaching the front of the queue are handed to the
caller's predicate; once the front is an internal node, that node becomes
the next one to expand. Since the distance of an internal node is a lower
bound on the distance of anything it contains, items come out of the queue
in non-decreasing order of distance (branch-and-bound).

The tree is only read. Internal nodes and items discovered during one call
are kept in append-only tables local to that call; candidates refer to them
by index.
'''
import math

from .candidate import Candidate, CandidateQueue
from .envelope import envelope_of
from .logging import get_logger

logger = get_logger("knn")

NO_NODE = -1


def box_score(query, item, candidate):
    """Default score of :func:`knn`: the box-distance to the query."""
    return candidate.distance


def accept_all(candidate):
    """Default predicate of :func:`knn`: accept everything, never stop."""
    return True, False


def knn(tree, query, limit=0, distance_fn=None, predicate_fn=None):
    """
    Items of `tree` nearest to `query`, in non-decreasing order of score.

    Args:
        tree (RTree): the spatial index, left untouched.
        query: any object :func:`spknn.envelope.envelope_of` accepts.
        limit (int, optional): stop once that many items are accepted. 0,
            the default, means no limit.
        distance_fn (callable, optional): `distance_fn(query, item,
            candidate) -> float` scores a candidate. `candidate.distance`
            already holds the box-distance to the query. Internal nodes are
            scored with `item` set to None, and their score must not exceed
            the score of any item they contain. Defaults to
            :func:`box_score`.
        predicate_fn (callable, optional): `predicate_fn(candidate) ->
            (accept, stop_all)` decides whether an item candidate is kept,
            and whether the whole search halts. Defaults to
            :func:`accept_all`.

    Returns:
        list: the accepted items. Empty if `tree` is empty.
    """
    if limit < 0:
        raise ValueError("limit must be non-negative, got {}".format(limit))
    if tree.is_empty:
        return []
    if distance_fn is None:
        distance_fn = box_score
    if predicate_fn is None:
        predicate_fn = accept_all

    query_box = envelope_of(query)
    nodes = [tree.root]
    items = []
    queue = CandidateQueue()
    results = []
    node = tree.root
    stop = False

    while not stop and node is not None:
        for child in node.children:
            candidate = Candidate(child.envelope.distance(query_box),
                                  child.is_leaf, child.envelope, NO_NODE)
            if child.is_leaf:
                candidate = candidate._replace(
                    distance=distance_fn(query, child.item, candidate),
                    node=len(items),
                )
                items.append(child.item)
            else:
                candidate = candidate._replace(
                    distance=distance_fn(query, None, candidate),
                    node=len(nodes),
                )
                nodes.append(child)
            queue.push(candidate)

        while queue and queue.peek().is_item:
            candidate = queue.pop()
            accept, stop = predicate_fn(candidate)
            if accept:
                results.append(items[candidate.node])
                if limit and len(results) >= limit:
                    _log_stats("knn", nodes, items, len(results))
                    return results
            if stop:
                break

        if not stop:
            candidate = queue.pop()
            node = None if candidate is None else nodes[candidate.node]

    _log_stats("knn", nodes, items, len(results))
    return results


def knn_min_dist(tree, query, distance_fn=None, predicate_fn=None,
                 initial_mindist=math.inf):
    """
    Smallest distance from `query` to an item of `tree`.

    The running minimum prunes the search: a child is only queued when its
    box-distance is below the best distance found so far.

    Args:
        tree (RTree): the spatial index, left untouched.
        query: any object :func:`spknn.envelope.envelope_of` accepts.
        distance_fn (callable, optional): `distance_fn(query, item) -> float`.
            It must never be smaller than the box-distance between the item
            and the query. Defaults to that box-distance.
        predicate_fn (callable, optional): `predicate_fn(candidate, mindist)
            -> bool` is called on every dequeued item candidate; returning
            True stops the search. Defaults to never stopping.
        initial_mindist (float, optional): a known upper bound on the
            result. Defaults to infinity.

    Returns:
        float: the smallest distance found, `initial_mindist` if nothing
        beats it, or NaN if `tree` is empty.
    """
    if tree.is_empty:
        return math.nan

    query_box = envelope_of(query)
    nodes = [tree.root]
    queue = CandidateQueue()
    mindist = initial_mindist
    node = tree.root
    stop = False
    scored = 0

    while not stop and node is not None:
        for child in node.children:
            box_dist = child.envelope.distance(query_box)
            if not box_dist < mindist:
                continue
            if child.is_leaf:
                if distance_fn is None:
                    dist = box_dist
                else:
                    dist = distance_fn(query, child.item)
                scored += 1
                if dist < mindist:
                    mindist = dist
                candidate = Candidate(dist, True, child.envelope, NO_NODE)
            else:
                candidate = Candidate(box_dist, False, child.envelope,
                                      len(nodes))
                nodes.append(child)
            queue.push(candidate)

        while queue and queue.peek().is_item:
            candidate = queue.pop()
            stop = predicate_fn is not None and predicate_fn(candidate,
                                                             mindist)
            if stop:
                break

        if not stop:
            candidate = queue.pop()
            # Queue is ordered: nothing left can beat the bound.
            if candidate is None or not candidate.distance < mindist:
                node = None
            else:
                node = nodes[candidate.node]

    logger.debug("knn_min_dist queued %d nodes, scored %d items, "
                 "mindist=%r", len(nodes), scored, mindist)
    return mindist


def _log_stats(name, nodes, items, accepted):
    logger.debug("%s queued %d nodes, scored %d items, accepted %d",
                 name, len(nodes), len(items), accepted)
