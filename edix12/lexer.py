"""
edix12 lexer: split edi text into segments and elements.
"""

import re
from typing import List

from . import x12global
from .x12config import SEPARATOR, TERMINATOR

_LINEBREAKS = re.compile(r'[\r\n]')


def lex(text: str, terminator: str = TERMINATOR, separator: str = SEPARATOR) -> List[List[str]]:
    """
    Returns list of segments; each segment is a list of elements, first element is the tag.
    Line breaks are removed first. There is no escaping: terminator and separator can not be in data.
    Text after the last terminator is dropped when it is blank.
    """
    text = _LINEBREAKS.sub('', text)
    segments = [segment.split(separator) for segment in text.split(terminator)]
    while segments and len(segments[-1]) == 1 and not segments[-1][0].strip():
        segments.pop()
    return segments


def display(lex_records):
    """for debugging: log lexed segments."""
    for lex_record in lex_records:
        x12global.logger.debug('%s    (segment)', lex_record[0])
        for element in lex_record[1:]:
            x12global.logger.debug('    %s    (element)', element)
