"""
edix12 field codec: decode and encode the elements of one segment against its definition.
"""

import re
from typing import Any, Dict, Mapping, Optional, Sequence

from .grammar import FORMAT_CONVERSION, FieldDefinition, SegmentDefinition
from .x12config import SEPARATOR, TERMINATOR

_INTEGER = re.compile(r'\s*([-+]?\d+)')
_FLOAT = re.compile(r'\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)')
_INTEGER_CONVERSIONS = 'diouxX'
_FLOAT_CONVERSIONS = 'eEfFgG'


class FieldCodec:
    """
    Field level rules for reading and writing segments.
    Holds only the (immutable) delimiter options; definitions are never changed.
    """

    def __init__(self, terminator=TERMINATOR, separator=SEPARATOR, new_lines=False, truncate_null=False):
        self.terminator = terminator
        self.separator = separator
        self.new_lines = bool(new_lines)
        self.truncate_null = bool(truncate_null)

    def decode(self, elements: Sequence[str], segment: SegmentDefinition) -> Dict[str, str]:
        """
        elements: the elements of the segment, without tag.
        Missing trailing elements are read as ''; fields without name are skipped.
        """
        record = {}
        for index, field in enumerate(segment.fields):
            value = elements[index].rstrip() if index < len(elements) else ''
            if field.name:
                record[field.name] = value
        return record

    def encode(self, tag: str, record: Optional[Mapping[str, Any]], segment: SegmentDefinition) -> str:
        line = [tag]
        line.extend(encodefield(field, record) for field in segment.fields)
        if self.truncate_null:
            while len(line) > 1 and line[-1] == '':
                line.pop()
        string = self.separator.join(line) + self.terminator
        if self.new_lines:
            string += '\n'
        return string


def fieldvalue(field: FieldDefinition, record: Optional[Mapping[str, Any]]) -> str:
    """value from record; else static value from definition; else ''."""
    if field.name and record is not None and field.name in record:
        value = record[field.name]
    else:
        value = field.value
    if value is None:
        return ''
    return str(value)


def fieldwidth(field: FieldDefinition, value: str) -> int:
    """bytes if set; else min if value is shorter; else 0 (no padding)."""
    if field.bytes:
        return field.bytes
    if field.min and value and len(value) < field.min:
        return field.min
    return 0


def encodefield(field: FieldDefinition, record: Optional[Mapping[str, Any]]) -> str:
    value = fieldvalue(field, record)
    if field.max:
        value = value[:field.max]
    if field.format:
        return formatvalue(field.format, value)
    return value.ljust(fieldwidth(field, value))


def formatvalue(fmt: str, value: str) -> str:
    """
    Apply printf style format. For numeric conversions the leading number in value is used
    (no number: 0), eg '%09i' with '12' gives '000000012'.
    """
    conversions = [conv for conv in FORMAT_CONVERSION.findall(fmt) if conv != '%']
    if not conversions:
        return fmt.replace('%%', '%')
    conversion = conversions[0]
    if conversion in _INTEGER_CONVERSIONS:
        found = _INTEGER.match(value)
        argument: Any = int(found.group(1)) if found else 0
    elif conversion in _FLOAT_CONVERSIONS:
        found = _FLOAT.match(value)
        argument = float(found.group(1)) if found else 0.0
    else:
        argument = value
    return fmt % (argument,)
