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
Axis-aligned minimum bounding rectangles.

Every node and item of the R-tree is summarised by an :class:`AAMBR`. The
box-distance between two of them is a lower bound on the distance between
anything they enclose, which is what makes branch-and-bound pruning
admissible.
"""
import numpy
import shapely.geometry


class AAMBR:
    """
    Axis-aligned minimum bounding rectangle in any number of dimensions.

    Args:
        mins (array-like): lower corner, one value per dimension.
        maxs (array-like): upper corner, one value per dimension.

    Attributes:
        mins (1d-float-array)
        maxs (1d-float-array)
    """
    __slots__ = ("mins", "maxs")

    def __init__(self, mins, maxs):
        mins = numpy.asarray(mins, dtype=float).reshape(-1)
        maxs = numpy.asarray(maxs, dtype=float).reshape(-1)
        if mins.shape != maxs.shape:
            raise ValueError("Mins and maxs must be of same shape")
        if (mins > maxs).any():
            raise ValueError(
                "Mins {} must not exceed maxs {}".format(
                    mins.tolist(), maxs.tolist())
            )
        self.mins = mins
        self.maxs = maxs

    @classmethod
    def from_bounds(cls, bounds):
        """From shapely-like bounds: all mins followed by all maxs."""
        bounds = numpy.asarray(bounds, dtype=float).reshape(-1)
        if len(bounds) % 2:
            raise ValueError(
                "Bounds must be of even length, got {}".format(len(bounds)))
        half = len(bounds) // 2
        return cls(bounds[:half], bounds[half:])

    @classmethod
    def from_corners(cls, a, b):
        a = numpy.asarray(a, dtype=float)
        b = numpy.asarray(b, dtype=float)
        return cls(numpy.minimum(a, b), numpy.maximum(a, b))

    @classmethod
    def from_point(cls, point):
        return cls(point, point)

    @classmethod
    def merge(cls, collection):
        """Smallest rectangle enclosing every rectangle of `collection`."""
        collection = list(collection)
        if not collection:
            raise ValueError("Cannot merge an empty collection")
        return cls(
            numpy.min([e.mins for e in collection], axis=0),
            numpy.max([e.maxs for e in collection], axis=0),
        )

    @property
    def ndims(self):
        return self.mins.shape[0]

    @property
    def bounds(self):
        return tuple(self.mins.tolist() + self.maxs.tolist())

    @property
    def centers(self):
        return 0.5 * (self.mins + self.maxs)

    @property
    def area(self):
        return float(numpy.prod(self.maxs - self.mins))

    def check_dims(self, other):
        if self.ndims != other.ndims:
            raise ValueError(
                "Incompatible number of dimensions {} and {} in {}."
                .format(self.ndims, other.ndims, self.__class__.__name__)
            )

    def union(self, other):
        self.check_dims(other)
        return self.__class__(numpy.minimum(self.mins, other.mins),
                              numpy.maximum(self.maxs, other.maxs))

    def enlargement(self, other):
        """Area gained by growing `self` to also cover `other`."""
        return self.union(other).area - self.area

    def intersects(self, other):
        # Closed boxes: touching edges intersect.
        self.check_dims(other)
        return bool(((self.mins <= other.maxs)
                     & (self.maxs >= other.mins)).all())

    def contains(self, other):
        self.check_dims(other)
        return bool(((self.mins <= other.mins)
                     & (self.maxs >= other.maxs)).all())

    def contains_point(self, point):
        return self.contains(self.from_point(point))

    def _gaps(self, other):
        self.check_dims(other)
        return numpy.maximum(
            numpy.maximum(other.mins - self.maxs, self.mins - other.maxs),
            0.,
        )

    def distance_square(self, other):
        gaps = self._gaps(other)
        return float((gaps**2).sum())

    def distance(self, other):
        """
        Box-distance: zero if the rectangles intersect or touch, otherwise
        the Euclidean norm of the per-axis gaps between nearest edges.
        """
        return float(numpy.sqrt(self.distance_square(other)))

    def distance_to_point(self, point):
        return self.distance(self.from_point(point))

    def to_shapely(self):
        if self.ndims != 2:
            raise ValueError(
                "Only 2d rectangles convert to shapely, got {} dimensions"
                .format(self.ndims)
            )
        return shapely.geometry.box(*self.bounds)

    @property
    def wkt(self):
        return self.to_shapely().wkt

    def __eq__(self, other):
        if not isinstance(other, AAMBR):
            return NotImplemented
        return (numpy.array_equal(self.mins, other.mins)
                and numpy.array_equal(self.maxs, other.maxs))

    __hash__ = None

    def __repr__(self):
        return "AAMBR(mins={}, maxs={})".format(
            self.mins.tolist(), self.maxs.tolist())


def envelope_of(obj):
    """
    Adapts an indexable object to its :class:`AAMBR`.

    Accepted objects, in order of precedence: an AAMBR itself, anything with
    an `envelope` method or attribute, anything with shapely-like `bounds`,
    and finally a flat sequence of coordinates taken as a point.
    """
    if isinstance(obj, AAMBR):
        return obj
    envelope = getattr(obj, "envelope", None)
    if envelope is not None:
        if callable(envelope):
            envelope = envelope()
        if isinstance(envelope, AAMBR):
            return envelope
    bounds = getattr(obj, "bounds", None)
    if bounds is not None:
        return AAMBR.from_bounds(bounds)
    try:
        coords = numpy.asarray(obj, dtype=float)
    except (TypeError, ValueError):
        coords = None
    if coords is not None and coords.ndim == 1 and coords.size > 0:
        return AAMBR.from_point(coords)
    raise TypeError(
        "Cannot derive an envelope from object of type {}"
        .format(type(obj).__name__)
    )
