"""
edix12 global vars
"""
# pylint: disable=invalid-name

import logging

from .__about__ import __version__

# Globals used by edix12. Nothing here holds state of a parse or write call.
version = __version__             # edix12 version
logger = logging.getLogger('edix12')
