"""
edix12 outmessage: write a record tree as edi text.

Order of segments:
    ISA
      GS                                     per functional group
        ST                                   per transaction set
          header segments                    in structure order
          detail segments                    per detail loop, in structure order
          footer segments                    in structure order
        SE  total, control_number
      GE  total, control_number
    IEA total, control_number
Segments that are not in the record are not written.
Missing control numbers: interchange 1; groups and sets their position (1-based).
The record tree is not changed.
"""

from . import x12global
from .exceptions import ConfigurationError
from .field import FieldCodec
from .grammar import SpecCatalog
from .node import Interchange
from .x12config import CONTROL_NUMBER, DETAIL, FOOTER, GE, GS, HEADER, IEA, ISA, SE, ST, TOTAL


class HierarchyWriter:
    """Renders an Interchange. Holds no state of a write; one instance can do concurrent writes."""

    def __init__(self, catalog: SpecCatalog, codec: FieldCodec):
        self.catalog = catalog
        self.codec = codec

    def write(self, interchange: Interchange) -> str:
        out = []
        isa = dict(interchange.isa)
        isa.setdefault(CONTROL_NUMBER, 1)
        out.append(self._envelope(ISA, isa))
        for groupnr, group in enumerate(interchange.groups, start=1):
            out.extend(self._group(group, groupnr))
        out.append(self._envelope(IEA, {TOTAL: len(interchange.groups), CONTROL_NUMBER: isa[CONTROL_NUMBER]}))
        x12global.logger.debug(
            'Written interchange %(control)s with %(groups)s functional group(s).',
            {'control': isa[CONTROL_NUMBER], 'groups': len(interchange.groups)},
        )
        return ''.join(out)

    def _group(self, group, groupnr):
        gs_fields = dict(group.fields)
        gs_fields.setdefault(CONTROL_NUMBER, groupnr)
        yield self._envelope(GS, gs_fields)
        for setnr, transaction_set in enumerate(group.sets, start=1):
            yield from self._transaction_set(transaction_set, setnr)
        yield self._envelope(GE, {TOTAL: len(group.sets), CONTROL_NUMBER: gs_fields[CONTROL_NUMBER]})

    def _transaction_set(self, transaction_set, setnr):
        document = self.catalog.document(transaction_set.identifier_code)
        if document is None:
            raise ConfigurationError(
                'Can not find spec for transaction set "%(doc)s".',
                {'doc': transaction_set.identifier_code},
            )
        st_fields = dict(transaction_set.fields)
        st_fields.setdefault(CONTROL_NUMBER, setnr)
        segments = [self._envelope(ST, st_fields)]
        for tag in document.tags(HEADER):
            if tag in transaction_set.header:
                segments.append(self.codec.encode(tag, transaction_set.header[tag], document.segment(tag)))
        for loop in transaction_set.detail_loops:
            for tag in document.tags(DETAIL):
                if tag in loop:
                    segments.append(self.codec.encode(tag, loop[tag], document.segment(tag)))
        for tag in document.tags(FOOTER):
            if tag in transaction_set.footer:
                segments.append(self.codec.encode(tag, transaction_set.footer[tag], document.segment(tag)))
        # total counts ST and SE too
        segments.append(self._envelope(SE, {TOTAL: len(segments) + 1, CONTROL_NUMBER: st_fields[CONTROL_NUMBER]}))
        return segments

    def _envelope(self, tag, fields):
        return self.codec.encode(tag, fields, self.catalog.segment(tag))
