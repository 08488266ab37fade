# Copyright(C) 2024 gdbrowser project
#
# This file is part of gdbrowser.
#
# gdbrowser is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# gdbrowser is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public License
# along with gdbrowser. If not, see <http://www.gnu.org/licenses/>.

from __future__ import annotations

from collections import defaultdict
import logging
from typing import Any, DefaultDict


__all__ = ['DEBUG_FILTERS', 'getLogger', 'settings']


# Below DEBUG, to trace every value produced by page filters.
DEBUG_FILTERS = 8
logging.addLevelName(DEBUG_FILTERS, 'DEBUG_FILTERS')

ROOT_LOGGER_NAME = 'gdbrowser'

settings: DefaultDict[str, Any] = defaultdict(lambda: None)
"""
Settings shared by every logger returned by :func:`getLogger`.

Known keys:

* ``ssl_insecure``: do not check TLS certificates
* ``save_responses``: directory where browsers dump responses
* ``export_session``: log the session token after login
"""


def getLogger(name: str, parent: logging.Logger | str | None = None) -> logging.Logger:
    """
    Get a logger, child of ``parent`` or of the ``gdbrowser`` root logger.

    The returned logger carries the global :data:`settings` in its
    ``settings`` attribute.

    :param name: name of the logger
    :param parent: parent logger, or name of the parent logger
    """
    if isinstance(parent, logging.Logger):
        name = '%s.%s' % (parent.name, name)
    elif parent:
        name = '%s.%s' % (parent, name)
    elif name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = '%s.%s' % (ROOT_LOGGER_NAME, name)

    logger = logging.getLogger(name)
    logger.settings = settings  # type: ignore[attr-defined]
    return logger

