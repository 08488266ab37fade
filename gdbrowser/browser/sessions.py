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

from concurrent.futures import ThreadPoolExecutor

import requests
from requests.adapters import DEFAULT_POOLSIZE

from .adapters import HTTPAdapter


__all__ = ['FuturesSession']


class FuturesSession(requests.Session):
    """
    Session able to send requests in a thread pool.

    :meth:`send` takes two extra arguments: ``is_async`` to get a
    :class:`concurrent.futures.Future` instead of a response, and
    ``callback``, called as ``callback(session, response)`` in the worker
    thread once the response is received.

    :param max_workers: size of the thread pool
    :param max_retries: connection retries of the mounted adapters
    :param adapter_class: transport adapter to mount
    """

    def __init__(self, executor=None, max_workers=2, max_retries=2, adapter_class=HTTPAdapter, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if executor is None:
            executor = ThreadPoolExecutor(max_workers=max_workers)
            # set connection pool size equal to max_workers if needed
            if max_workers > DEFAULT_POOLSIZE:
                adapter_kwargs = dict(pool_connections=max_workers,
                                      pool_maxsize=max_workers,
                                      max_retries=max_retries)
                self.mount('https://', adapter_class(**adapter_kwargs))
                self.mount('http://', adapter_class(**adapter_kwargs))
        self.executor = executor

    def send(self, *args, **kwargs):
        callback = kwargs.pop('callback', lambda session, response: response)
        is_async = kwargs.pop('is_async', False)

        def func(*args, **kwargs):
            resp = super(FuturesSession, self).send(*args, **kwargs)
            return callback(self, resp)

        if is_async:
            return self.executor.submit(func, *args, **kwargs)
        return func(*args, **kwargs)

    def close(self):
        super().close()
        self.executor.shutdown()
