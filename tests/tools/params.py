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

from urllib.parse import parse_qsl

import pytest

from gdbrowser.tools.params import DEFAULT_PARAMS, RequestParams, SessionToken


def test_default_fields():
    params = RequestParams()
    assert dict(params) == {'gdw': 0, 'gameVersion': 21, 'binaryVersion': 35}
    assert list(params)[:3] == list(DEFAULT_PARAMS)


def test_fields_override_defaults():
    params = RequestParams({'gameVersion': 22}, levelID=128)
    assert params['gameVersion'] == 22
    assert params['levelID'] == 128


def test_insert():
    params = RequestParams(str='')
    merged = params.insert({'page': 0}, page=1)
    assert params['page'] == 1
    assert merged == dict(params)
    assert merged is not params._data


def test_authorize():
    params = RequestParams()
    params.authorize()
    assert params['secret'] == 'Wmfd2893gb7'
    params.authorize('account')
    assert params['secret'] == 'Wmfv3899gc9'

    with pytest.raises(KeyError):
        params.authorize('admin')


def test_login_and_session():
    params = RequestParams()
    params.login('Player', 'hunter2')
    assert (params['userName'], params['password']) == ('Player', 'hunter2')

    params = RequestParams()
    params.session(SessionToken(16, 'W0JbRlNBBQ=='))
    assert (params['accountID'], params['gjp']) == (16, 'W0JbRlNBBQ==')
    assert 'password' not in params


def test_serialize():
    params = RequestParams(str='a b&c', total=True, featured=False)
    params.authorize()
    body = params.serialize()

    assert body.startswith('gdw=0&gameVersion=21&binaryVersion=35&str=a+b%26c')
    assert dict(parse_qsl(body)) == {
        'gdw': '0',
        'gameVersion': '21',
        'binaryVersion': '35',
        'str': 'a b&c',
        'total': '1',
        'featured': '0',
        'secret': 'Wmfd2893gb7',
    }


def test_copy():
    params = RequestParams(levelID=128)
    copy = params.copy()
    copy.insert(levelID=1)
    assert params['levelID'] == 128
    assert copy['levelID'] == 1


def test_session_token():
    token = SessionToken(16, 'W0JbRlNBBQ==')
    assert token.user_id is None
    assert token.username is None
    assert token._replace(user_id=4).user_id == 4
