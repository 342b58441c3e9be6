"""
edix12: schema driven reader and writer for ANSI ASC X12 edi.
"""

from .__about__ import __version__
from .exceptions import ConfigurationError, GrammarError, TreeFormatError, X12Error
from .grammar import DocumentSpec, FieldDefinition, SegmentDefinition, SpecCatalog
from .node import DetailLoop, FunctionalGroup, Interchange, TransactionSet
from .x12 import X12

__all__ = [
    '__version__',
    'X12',
    'X12Error',
    'ConfigurationError',
    'GrammarError',
    'TreeFormatError',
    'SpecCatalog',
    'DocumentSpec',
    'SegmentDefinition',
    'FieldDefinition',
    'Interchange',
    'FunctionalGroup',
    'TransactionSet',
    'DetailLoop',
]
