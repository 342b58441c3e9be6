"""
edix12 node lib: the record tree of an interchange.

    Interchange          ISA fields, functional groups
      FunctionalGroup    GS fields, transaction sets
        TransactionSet   ST fields, header, detail loops, footer
          DetailLoop     tag -> fields, one repeat of the detail segments

Field values are strings. Trailer segments (SE, GE, IEA) are not in the tree;
their counts and control numbers are derived when writing.
"""

import dataclasses
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .exceptions import TreeFormatError
from .x12config import (
    CONTROL_NUMBER,
    DETAIL,
    FOOTER,
    HEADER,
    IDENTIFIER_CODE,
    TREE_DETAIL,
    TREE_FOOTER,
    TREE_GROUPS,
    TREE_HEADER,
    TREE_ISA,
    TREE_SETS,
)

Fields = Dict[str, Any]


@dataclasses.dataclass
class DetailLoop:
    """One repetition of the detail segment group: tag -> fields."""
    segments: Dict[str, Fields] = dataclasses.field(default_factory=dict)

    def __contains__(self, tag):
        return tag in self.segments

    def __getitem__(self, tag):
        return self.segments[tag]

    def __setitem__(self, tag, fields):
        self.segments[tag] = fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.segments)

    def __len__(self):
        return len(self.segments)

    def get(self, tag, default=None):
        return self.segments.get(tag, default)


@dataclasses.dataclass
class TransactionSet:
    fields: Fields = dataclasses.field(default_factory=dict)
    header: Dict[str, Fields] = dataclasses.field(default_factory=dict)
    detail_loops: List[DetailLoop] = dataclasses.field(default_factory=list)
    footer: Dict[str, Fields] = dataclasses.field(default_factory=dict)

    @property
    def identifier_code(self) -> Optional[str]:
        """transaction set identifier from ST, eg '850'; selects the document spec."""
        value = self.fields.get(IDENTIFIER_CODE)
        return None if value is None else str(value)

    @property
    def control_number(self):
        return self.fields.get(CONTROL_NUMBER)

    def section(self, name: str) -> Dict[str, Fields]:
        """header or footer segments"""
        if name == HEADER:
            return self.header
        if name == FOOTER:
            return self.footer
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.fields)
        result[TREE_HEADER] = {tag: dict(fields) for tag, fields in self.header.items()}
        result[TREE_DETAIL] = [
            {tag: dict(fields) for tag, fields in loop.segments.items()} for loop in self.detail_loops
        ]
        result[TREE_FOOTER] = {tag: dict(fields) for tag, fields in self.footer.items()}
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'TransactionSet':
        data = _mapping(data, 'transaction set')
        return cls(
            fields={key: value for key, value in data.items() if key not in (TREE_HEADER, TREE_DETAIL, TREE_FOOTER)},
            header=_segments(data.get(TREE_HEADER), HEADER),
            detail_loops=[
                DetailLoop(_segments(loop, DETAIL)) for loop in _sequence(data.get(TREE_DETAIL), DETAIL)
            ],
            footer=_segments(data.get(TREE_FOOTER), FOOTER),
        )


@dataclasses.dataclass
class FunctionalGroup:
    fields: Fields = dataclasses.field(default_factory=dict)
    sets: List[TransactionSet] = dataclasses.field(default_factory=list)

    @property
    def control_number(self):
        return self.fields.get(CONTROL_NUMBER)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.fields)
        result[TREE_SETS] = [transaction_set.to_dict() for transaction_set in self.sets]
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'FunctionalGroup':
        data = _mapping(data, 'functional group')
        return cls(
            fields={key: value for key, value in data.items() if key != TREE_SETS},
            sets=[TransactionSet.from_dict(item) for item in _sequence(data.get(TREE_SETS), TREE_SETS)],
        )


@dataclasses.dataclass
class Interchange:
    isa: Fields = dataclasses.field(default_factory=dict)
    groups: List[FunctionalGroup] = dataclasses.field(default_factory=list)

    @property
    def control_number(self):
        return self.isa.get(CONTROL_NUMBER)

    def to_dict(self) -> Dict[str, Any]:
        """nested dicts: {'ISA': {...}, 'GROUPS': [{..., 'SETS': [{..., 'HEADER', 'DETAIL', 'FOOTER'}]}]}"""
        return {
            TREE_ISA: dict(self.isa),
            TREE_GROUPS: [group.to_dict() for group in self.groups],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Interchange':
        data = _mapping(data, 'interchange')
        return cls(
            isa=dict(_mapping(data.get(TREE_ISA) or {}, TREE_ISA)),
            groups=[FunctionalGroup.from_dict(item) for item in _sequence(data.get(TREE_GROUPS), TREE_GROUPS)],
        )


def _mapping(value, what):
    if not isinstance(value, Mapping):
        raise TreeFormatError('Expected a mapping for %(what)s, found "%(type)s".', {'what': what, 'type': type(value).__name__})
    return value


def _sequence(value, what):
    if value is None:
        return []
    if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, '__iter__'):
        raise TreeFormatError('Expected a list for %(what)s, found "%(type)s".', {'what': what, 'type': type(value).__name__})
    return list(value)


def _segments(value, what) -> Dict[str, Fields]:
    if value is None:
        return {}
    if isinstance(value, DetailLoop):
        value = value.segments
    value = _mapping(value, what)
    return {tag: dict(_mapping(fields, tag)) for tag, fields in value.items()}
