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
Runtime configuration read from the environment.

Recognised variables:

    SPKNN_MAX_CHILDREN   maximum number of children per tree node (16).
    SPKNN_MIN_CHILDREN   minimum fill of a non-root node, 40% of the max.
    SPKNN_LOG_LEVEL      level of the ``spknn`` logger (WARNING).
"""
import collections
import functools
import logging
import math
import os

DEFAULT_MAX_CHILDREN = 16


def _parse_optional_int(raw):
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError("Invalid integer value '{}'".format(raw)) from exc


def _parse_log_level(raw):
    if raw is None or raw.strip() == "":
        return logging.WARNING
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError("Unknown log level '{}'".format(raw))
    return level


def default_min_children(max_children):
    return max(2, math.floor(0.4 * max_children))


def check_fanout(max_children, min_children):
    if max_children < 4:
        raise ValueError(
            "max_children must be at least 4, got {}".format(max_children))
    if not 2 <= min_children <= max_children // 2:
        raise ValueError(
            "min_children must lie in [2, {}], got {}"
            .format(max_children // 2, min_children)
        )


class RuntimeConfig(collections.namedtuple(
        "RuntimeConfig", "max_children min_children log_level")):
    """Tree fan-out and log level in effect."""
    __slots__ = ()

    @classmethod
    def from_env(cls):
        max_children = _parse_optional_int(os.getenv("SPKNN_MAX_CHILDREN"))
        if max_children is None:
            max_children = DEFAULT_MAX_CHILDREN
        min_children = _parse_optional_int(os.getenv("SPKNN_MIN_CHILDREN"))
        if min_children is None:
            min_children = default_min_children(max_children)
        check_fanout(max_children, min_children)
        return cls(
            max_children=max_children,
            min_children=min_children,
            log_level=_parse_log_level(os.getenv("SPKNN_LOG_LEVEL")),
        )


@functools.lru_cache(maxsize=None)
def runtime_config():
    return RuntimeConfig.from_env()


def reset_runtime_config():
    """
    Forget the cached configuration so the environment is read again.

    The new log level applies to every ``spknn`` logger at the next
    :func:`spknn.logging.get_logger` call, as module loggers inherit it
    from the ``spknn`` parent logger.
    """
    runtime_config.cache_clear()
