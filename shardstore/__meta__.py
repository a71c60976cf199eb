# -*- coding: utf-8 -*-
"""Define project metadata
"""

__title__ = 'shardstore'
__summary__ = 'File backed storage adapter for sharded, content-addressed items.'

__version__ = '0.1.0'

__install_requires__ = ['attrs', 'click', 'humanize']
__tests_require__ = ['pytest']

__author__ = 'shardstore developers'

__license__ = 'MIT License'
