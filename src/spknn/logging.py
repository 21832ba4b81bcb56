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
Package loggers.

Module loggers are children of the ``spknn`` logger and keep the NOTSET
level, so the level set from the runtime configuration on the parent
applies to all of them.
"""
import logging

from . import config

ROOT_NAME = "spknn"


def get_logger(name=None):
    """
    Returns the ``spknn`` logger, or its child ``spknn.<name>``.

    The level of the ``spknn`` logger is refreshed from the runtime
    configuration on every call.
    """
    logging.getLogger(ROOT_NAME).setLevel(config.runtime_config().log_level)
    if name is None:
        return logging.getLogger(ROOT_NAME)
    return logging.getLogger("{}.{}".format(ROOT_NAME, name))
