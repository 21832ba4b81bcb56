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
"""
Best-first nearest neighbours search on R-trees.

R-trees summarise each subtree by the bounding rectangle of everything it
holds. The box-distance from a query to such a rectangle never exceeds the
distance to anything inside it, so a priority queue ordered by that distance
can walk the tree cheapest-first and stop as soon as enough neighbours are
found, without ever visiting most of the tree.

The search is generic: callers supply the scoring function and a predicate
deciding which items to keep and when to stop.

    >>> tree = RTree.load(items)
    >>> tree.knn(query, limit=3)
    >>> tree.knn_min_dist(query, distance_fn=lambda q, item: q.distance(item))
"""
from .envelope import AAMBR, envelope_of  # noqa: F401
from .candidate import Candidate, CandidateQueue  # noqa: F401
from .tree import RTree, ParentNode, Leaf  # noqa: F401
from .knn import knn, knn_min_dist  # noqa: F401

__version__ = "0.3.0"
