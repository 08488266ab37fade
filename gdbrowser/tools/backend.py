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

from copy import copy
import logging
from threading import RLock
from typing import Any, ClassVar, Dict, Iterator, Type, TYPE_CHECKING
from urllib.request import getproxies

from gdbrowser.capabilities.base import Capability
from gdbrowser.tools.log import getLogger
from gdbrowser.tools.value import ValuesDict, ValueBool, dump_values

if TYPE_CHECKING:
    from gdbrowser.browser import Browser


__all__ = ['BackendConfig', 'Module']


class BackendConfig(ValuesDict):
    """
    Configuration of a backend.

    This class is firstly instanced as a :class:`gdbrowser.tools.value.ValuesDict`,
    containing some :class:`gdbrowser.tools.value.Value` (and derivated) objects.

    Then, using the :func:`load` method will load configuration from a dict and
    create a copy of the :class:`BackendConfig` object with the loaded values.
    """
    modname: str
    instname: str

    def load(
        self,
        modname: str,
        instname: str,
        config: Dict,
        nofail: bool = False
    ) -> BackendConfig:
        """
        Load configuration from dict to create an instance.

        :param modname: name of the module
        :type modname: :class:`str`
        :param instname: name of this backend
        :type instname: :class:`str`
        :param config: parameters to load
        :type config: :class:`dict`
        :param nofail: if true, this call can't fail
        :type nofail: :class:`bool`
        :rtype: :class:`BackendConfig`
        """
        cfg = self.__class__()
        cfg.modname = modname
        cfg.instname = instname
        for name, field in self.items():
            value = config.get(name, None)

            if value is None:
                if not nofail and field.required:
                    raise Module.ConfigError(
                        f'Backend({cfg.instname}): Configuration error: Missing parameter {name} ({field.description})',
                        bad_fields=[name]
                    )
                value = field.default

            field = copy(field)
            try:
                field.load(cfg.instname, value)
            except ValueError as v:
                if not nofail:
                    raise Module.ConfigError(
                        f'Backend({cfg.instname}): Configuration error for field "{name}": {v}',
                        bad_fields=[name]
                    )

            cfg[name] = field
        return cfg

    def dump(self) -> dict:
        """
        Dump config in a dictionary.

        Credentials are left out unless their value is stored.

        :rtype: :class:`dict`
        """
        return dump_values(self)


class Module:
    """
    Base class for modules.

    You may derivate it, and also all capabilities you want to implement.

    :param name: name of backend
    :type name: :class:`str`
    :param config: configuration of backend (optional)
    :type config: :class:`dict`
    :param logger: parent logger (optional)
    :type logger: :class:`logging.Logger`
    :param nofail: load the configuration even if it is not valid
    :type nofail: :class:`bool`
    """

    NAME: ClassVar[str]
    """Name of the module."""

    MAINTAINER: ClassVar[str] = '<unspecified>'
    """Name of the maintainer."""

    EMAIL: ClassVar[str] = '<unspecified>'
    """Email address of the maintainer."""

    DESCRIPTION: ClassVar[str] = '<unspecified>'
    """Description"""

    LICENSE: ClassVar[str] = '<unspecified>'
    """License of the module"""

    CONFIG: ClassVar[BackendConfig] = BackendConfig()
    """Configuration required for backends.

    Values must be :class:`gdbrowser.tools.value.Value` objects.
    """

    BROWSER: Type[Browser] | None = None
    """Browser class"""

    class ConfigError(Exception):
        """
        Raised when the config can't be loaded.
        """

        def __init__(self, message, bad_fields=None):
            """
            :type message: str
            :param message: message of the exception
            :type bad_fields: list[str]
            :param bad_fields: names of the config fields which are incorrect
            """

            super().__init__(message)
            self.bad_fields = bad_fields or ()

    def __enter__(self):
        self.lock.acquire()

    def __exit__(self, t, v, tb):
        self.lock.release()

    def __repr__(self):
        return f"<Backend {self.name}>"

    def __init__(
        self,
        name: str | None = None,
        config: Dict | None = None,
        logger: logging.Logger | None = None,
        nofail: bool = False
    ):
        self.name = name or self.NAME
        self.logger = getLogger(self.name, parent=logger)
        self.lock = RLock()
        if config is None:
            config = {}

        # Private fields (which start with '_')
        self._private_config = dict((key, value) for key, value in config.items() if key.startswith('_'))

        # Load configuration of backend.
        self.config = self.CONFIG.load(self.NAME, self.name, config, nofail)

    def deinit(self):
        """
        This abstract method is called when the backend is unloaded.
        """
        if self._browser is None:
            return

        if hasattr(self.browser, 'deinit'):
            self.browser.deinit()

    _browser = None

    @property
    def browser(self) -> Browser:
        """
        Attribute 'browser'. The browser is created at the first call
        of this attribute, to avoid useless pages access.

        Note that the :func:`create_default_browser` method is called to create it.
        """
        if self._browser is None:
            self._browser = self.create_default_browser()
        return self._browser

    def create_default_browser(self) -> Browser | None:
        """
        Method to overload to build the default browser in
        attribute 'browser'.
        """
        return self.create_browser()

    def create_browser(self, *args, **kwargs) -> Browser | None:
        """
        Build a browser from the BROWSER class attribute and the
        given arguments.

        :param klass: optional parameter to give another browser class to instanciate
        :type klass: :class:`gdbrowser.browser.browsers.Browser`
        """

        klass = kwargs.pop('klass', self.BROWSER)
        if not klass:
            return None

        kwargs['proxy'] = self.get_proxy()
        if '_proxy_headers' in self._private_config:
            kwargs['proxy_headers'] = self._private_config['_proxy_headers']

        if '_ssl_verify' in self._private_config:
            # value can be either a boolean or a string (path)
            value = ValueBool()
            try:
                value.set(self._private_config['_ssl_verify'])
            except ValueError:
                kwargs.setdefault('verify', self._private_config['_ssl_verify'])
            else:
                kwargs.setdefault('verify', value.get())

        kwargs['logger'] = self.logger

        return klass(*args, **kwargs)

    def get_proxy(self) -> Dict[str, str]:
        """
        Get proxy to use.

        It will read in environment variables, then in backend config.

        Proxy keys in backend config are:

        * ``_proxy`` for HTTP requests
        * ``_proxy_ssl`` for HTTPS requests
        """
        # Get proxies from environment variables
        proxies = getproxies()
        # Override them with backend-specific config
        if '_proxy' in self._private_config:
            proxies['http'] = self._private_config['_proxy']
        if '_proxy_ssl' in self._private_config:
            proxies['https'] = self._private_config['_proxy_ssl']
        # Remove empty values
        for key in list(proxies.keys()):
            if not proxies[key]:
                del proxies[key]
        return proxies

    @classmethod
    def iter_caps(cls) -> Iterator[Type[Capability]]:
        """
        Iter capabilities implemented by this backend.

        :rtype: iter[:class:`gdbrowser.capabilities.base.Capability`]
        """
        for base in cls.mro():
            if issubclass(base, Capability) and base != Capability and base != cls and not issubclass(base, Module):
                yield base

    def has_caps(self, *caps: Type[Capability] | str) -> bool:
        """
        Check if this backend implements at least one of these capabilities.
        """
        available_cap_names = [cap.__name__ for cap in self.iter_caps()]
        return any(
            c in available_cap_names if isinstance(c, str) else isinstance(self, c)
            for c in caps
        )

    def dump_config(self) -> Dict[str, Any]:
        """
        Configuration as it can be stored, without unstored credentials.
        """
        return self.config.dump()

    def get_config(self, name: str) -> Any:
        return self.config[name].get()


