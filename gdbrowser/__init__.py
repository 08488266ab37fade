from datetime import datetime

__title__ = 'gdbrowser'
__version__ = '1.0'
__author__ = 'gdbrowser project'
__copyright__ = 'Copyright(C) 2024-%s gdbrowser project' % datetime.today().year
