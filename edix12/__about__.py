# -*- coding: utf-8 -*-
"""
edix12 __about__.py
"""
from importlib import metadata

__all__ = [
    '__version__', '__version_info__',
    '__title__', '__summary__',
    '__author__', '__license__',
]

__title__ = 'edi-x12'

__version__ = metadata.version(__title__)
__version_info__ = __version__.split(".")

__summary__ = """Schema driven ANSI ASC X12 reader and writer"""

__license__ = "GNU General Public License (GPL v3.0)"

__author__ = "The edix12 developers"
