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

# flake8: compatible

import pytest

from gdbrowser.tools.backend import BackendConfig, Module
from gdbrowser.tools.misc import to_unicode
from gdbrowser.tools.value import (
    Value, ValueBackendPassword, ValueBool, ValueInt, ValuesDict,
)


@pytest.mark.parametrize("cls", (ValuesDict, BackendConfig))
def test_with_values(cls):
    """Test creating copies of dictionaries using with_values."""
    first_obj = cls(
        Value("url", label="Database URL"),
        Value("relay_url", label="Relay URL"),
    )
    second_obj = first_obj.with_values(
        Value("url", label="Private server URL"),
        ValueInt("worker_threshold", label="Worker threshold"),
    )

    assert second_obj is not first_obj
    assert set(first_obj) == {"url", "relay_url"}
    assert first_obj["url"].label == "Database URL"

    assert set(second_obj) == {"url", "relay_url", "worker_threshold"}
    assert second_obj["url"] is not first_obj["url"]
    assert second_obj["relay_url"] is first_obj["relay_url"]
    assert second_obj["url"].label == "Private server URL"


@pytest.mark.parametrize("cls", (ValuesDict, BackendConfig))
def test_without_values(cls):
    """Test creating copies of dictionaries using without_values."""
    first_obj = cls(
        Value("url", label="Database URL"),
        Value("relay_url", label="Relay URL"),
    )
    second_obj = first_obj.without_values("relay_url")

    assert second_obj is not first_obj
    assert set(first_obj) == {"url", "relay_url"}
    assert set(second_obj) == {"url"}
    assert second_obj["url"] is first_obj["url"]


def test_value():
    value = Value("url", default="http://www.boomlings.com/database/")
    assert not value.required
    value.set("http://localhost/database/")
    assert value.get() == "http://localhost/database/"

    with pytest.raises(ValueError):
        value.set("")

    assert Value("login").required


def test_value_choices():
    value = Value("kind", choices=("top", "creators"))
    value.set("top")
    with pytest.raises(ValueError):
        value.set("friends")


def test_value_int():
    value = ValueInt("worker_threshold", default=0)
    value.set("4096")
    assert value.get() == 4096

    value.set(-1)
    assert value.get() == -1

    with pytest.raises(ValueError):
        value.set("4k")


@pytest.mark.parametrize("raw, expected", [
    ("y", True), ("on", True), ("1", True), (True, True),
    ("n", False), ("off", False), ("0", False), (False, False),
])
def test_value_bool(raw, expected):
    value = ValueBool("verify")
    value.set(raw)
    assert value.get() is expected


def test_value_bool_invalid():
    with pytest.raises(ValueError):
        ValueBool("verify").set("/etc/ssl/certs/ca.pem")


def test_value_backend_password():
    password = ValueBackendPassword("password")
    assert password.masked
    assert not password.required
    password.set("")
    password.set("hunter2")
    assert password.get() == "hunter2"
    assert password.show_value("hunter2") == ""
    assert password.dump() == ""

    stored = ValueBackendPassword("password", stored=True)
    stored.set("hunter2")
    assert stored.dump() == "hunter2"


def test_backend_config_load():
    config = BackendConfig(
        ValueBackendPassword("login", masked=False),
        ValueBackendPassword("password"),
        Value("relay_url", default=""),
        ValueInt("worker_threshold", default=0),
        Value("proxy", transient=True, default=""),
    )

    loaded = config.load("geometrydash", "gd", {"login": "Player", "password": "hunter2"})

    assert loaded is not config
    assert (loaded.modname, loaded.instname) == ("geometrydash", "gd")
    assert loaded["login"].get() == "Player"
    assert loaded["worker_threshold"].get() == 0
    assert config["login"].get() is None
    assert loaded.dump() == {
        "login": "",
        "password": "",
        "relay_url": "",
        "worker_threshold": 0,
    }


def test_backend_config_errors():
    config = BackendConfig(Value("url"), ValueInt("worker_threshold", default=0))

    with pytest.raises(Module.ConfigError) as exc:
        config.load("geometrydash", "gd", {})
    assert exc.value.bad_fields == ["url"]

    with pytest.raises(Module.ConfigError) as exc:
        config.load("geometrydash", "gd", {"url": "http://localhost/", "worker_threshold": "many"})
    assert exc.value.bad_fields == ["worker_threshold"]

    loaded = config.load("geometrydash", "gd", {"worker_threshold": "many"}, nofail=True)
    assert set(loaded) == {"url", "worker_threshold"}


def test_to_unicode():
    assert to_unicode("déjà") == "déjà"
    assert to_unicode("déjà".encode("utf-8")) == "déjà"
    assert to_unicode("déjà".encode("iso-8859-15")) == "déjà"
    assert to_unicode(42) == "42"
