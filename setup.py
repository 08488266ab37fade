#! /usr/bin/env python3

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

import os
import sys

from setuptools import find_packages, setup


def install_gdbrowser():
    packages = set(find_packages(include=['gdbrowser', 'gdbrowser.*', 'gdbrowser_modules', 'gdbrowser_modules.*']))

    requirements = [
        'requests >= 2.0.0',
        'urllib3',
        'python-dateutil',
    ]

    try:
        if sys.argv[1] == 'requirements':
            print('\n'.join(requirements))
            sys.exit(0)
    except IndexError:
        pass

    setup(
        packages=packages,
        install_requires=requirements,
        extras_require={
            'test': ['pytest'],
        },
    )


if os.getenv('GDBROWSER_SETUP'):
    args = os.getenv('GDBROWSER_SETUP').split()
else:
    args = sys.argv[1:]

sys.argv = [sys.argv[0]] + args

install_gdbrowser()
