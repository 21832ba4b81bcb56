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
STR-Tree packing algorithm

Sort-Tile-Recurse tree packing algorithm is simple and efficient. Entries are
sorted along the first coordinate of their centers and cut into vertical
slabs, each slab is then recursively sorted and tiled along the remaining
coordinates. Consecutive runs of `page_size` entries become the nodes of the
next level.
"""
import math

import numpy
import toolz

from . import tree


def sort_tile_recurse(entries, page_size=16):
    """
    Groups entries into spatially coherent pages.

    Parameters:
        entries (list): objects with an `envelope` attribute (AAMBR).
        page_size (int): maximum number of entries per page.

    Returns:
        list of lists: the pages, each holding at most `page_size` entries.
    """
    if not entries:
        return []
    centers = numpy.array([e.envelope.centers for e in entries])

    def get_slab_size(nobs, ndims):
        """Number of entries per slab along the current coordinate."""
        nb_pages = math.ceil(nobs / page_size)
        nb_slabs = math.ceil(nb_pages ** (1 / ndims))
        return page_size * math.ceil(nb_pages / nb_slabs)

    def sort_tile(idx, axis):
        idx = idx[numpy.argsort(centers[idx, axis], kind="stable")]
        remaining = centers.shape[1] - axis
        if remaining == 1 or len(idx) <= page_size:
            return [list(page) for page in toolz.partition_all(page_size, idx)]
        slabs = toolz.partition_all(get_slab_size(len(idx), remaining), idx)
        return list(toolz.concat(
            sort_tile(numpy.array(slab), axis + 1) for slab in slabs
        ))

    pages = sort_tile(numpy.arange(len(entries)), 0)
    return [[entries[i] for i in page] for page in pages]


def pack(leaves, page_size=16):
    """
    Builds a tree bottom-up from its leaf entries.

    Parameters:
        leaves (list of Leaf): the item entries.
        page_size (int): maximum number of children per node.

    Returns:
        ParentNode: the root of a tree whose leaves all lie at the same
            depth.
    """
    level = list(leaves)
    while len(level) > page_size:
        level = [tree.ParentNode(page)
                 for page in sort_tile_recurse(level, page_size)]
    return tree.ParentNode(level)
