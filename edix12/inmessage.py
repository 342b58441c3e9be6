"""
edix12 inmessage: read edi text into a record tree.

Envelope segments drive a state machine:
    OUTSIDE -ISA-> IN_INTERCHANGE -GS-> IN_GROUP -ST-> IN_SET
    IN_SET -SE-> IN_GROUP -GE-> IN_INTERCHANGE -IEA-> OUTSIDE
Other segments are payload of the current transaction set. They are placed in
header, detail or footer using the structure of the document spec for the set.
Reading is forgiving: unknown segments are skipped, missing fields are ''.
"""

from typing import Optional

from . import x12global
from .field import FieldCodec
from .grammar import DocumentSpec, SpecCatalog
from .lexer import display, lex
from .node import DetailLoop, FunctionalGroup, Interchange, TransactionSet
from .x12config import (
    DETAIL,
    GE,
    GS,
    IEA,
    IN_GROUP,
    IN_INTERCHANGE,
    IN_SET,
    ISA,
    OUTSIDE,
    SE,
    ST,
    STATENAMES,
)


class ParseContext:
    """State of one read. Never shared between reads."""
    __slots__ = ('state', 'interchange', 'group', 'transaction_set', 'loop', 'document', 'segmentnr')

    def __init__(self):
        self.state = OUTSIDE
        self.interchange = Interchange()
        self.group: Optional[FunctionalGroup] = None
        self.transaction_set: Optional[TransactionSet] = None
        self.loop: Optional[DetailLoop] = None
        self.document: Optional[DocumentSpec] = None
        self.segmentnr = 0


class HierarchyParser:
    """Builds an Interchange from edi text. Holds no state of a read; one instance can do concurrent reads."""

    def __init__(self, catalog: SpecCatalog, codec: FieldCodec, debug=False):
        self.catalog = catalog
        self.codec = codec
        self.debug = debug
        self._transitions = {
            ISA: self._isa,
            IEA: self._iea,
            GS: self._gs,
            GE: self._ge,
            ST: self._st,
            SE: self._se,
        }

    def parse(self, text: str) -> Interchange:
        segments = lex(text, self.codec.terminator, self.codec.separator)
        if self.debug:
            display(segments)
        context = ParseContext()
        for segment in segments:
            context.segmentnr += 1
            tag = segment[0].strip().upper()
            handler = self._transitions.get(tag, self._payload)
            handler(context, tag, segment[1:])
        self._checkendstate(context)
        return context.interchange

    def _decode(self, tag, elements):
        return self.codec.decode(elements, self.catalog.segment(tag))

    # ********************************************************
    # *** envelope segments **********************************
    # ********************************************************
    def _isa(self, context, tag, elements):
        if context.state != OUTSIDE:
            x12global.logger.warning(
                'Segment %(nr)s: ISA while in state %(state)s; interchange header is replaced.',
                {'nr': context.segmentnr, 'state': STATENAMES[context.state]},
            )
        context.interchange.isa = self._decode(tag, elements)
        context.state = IN_INTERCHANGE

    def _iea(self, context, tag, elements):
        self._dropunclosed(context, f'Segment {context.segmentnr}: IEA')
        context.state = OUTSIDE

    def _gs(self, context, tag, elements):
        if context.group is not None:
            x12global.logger.warning(
                'Segment %(nr)s: GS while previous functional group has no GE; previous group is dropped.',
                {'nr': context.segmentnr},
            )
        context.group = FunctionalGroup(fields=self._decode(tag, elements))
        context.state = IN_GROUP

    def _ge(self, context, tag, elements):
        if context.group is None:
            x12global.logger.debug('Segment %(nr)s: GE without GS is skipped.', {'nr': context.segmentnr})
            return
        context.interchange.groups.append(context.group)
        context.group = None
        context.state = IN_INTERCHANGE

    def _st(self, context, tag, elements):
        if context.transaction_set is not None:
            x12global.logger.warning(
                'Segment %(nr)s: ST while previous transaction set has no SE; previous set is dropped.',
                {'nr': context.segmentnr},
            )
        context.transaction_set = TransactionSet(fields=self._decode(tag, elements))
        context.loop = None
        context.document = self.catalog.document(context.transaction_set.identifier_code)
        if context.document is None:
            x12global.logger.debug(
                'Segment %(nr)s: no document spec for transaction set "%(doc)s"; its segments are skipped.',
                {'nr': context.segmentnr, 'doc': context.transaction_set.identifier_code},
            )
        context.state = IN_SET

    def _se(self, context, tag, elements):
        transaction_set = context.transaction_set
        if transaction_set is None:
            x12global.logger.debug('Segment %(nr)s: SE without ST is skipped.', {'nr': context.segmentnr})
            return
        if context.loop is not None:
            transaction_set.detail_loops.append(context.loop)
        if context.group is not None:
            context.group.sets.append(transaction_set)
        else:
            x12global.logger.warning(
                'Segment %(nr)s: transaction set "%(doc)s" is not in a functional group; set is dropped.',
                {'nr': context.segmentnr, 'doc': transaction_set.identifier_code},
            )
        context.transaction_set = None
        context.loop = None
        context.document = None
        context.state = IN_GROUP

    # ********************************************************
    # *** payload segments ***********************************
    # ********************************************************
    def _payload(self, context, tag, elements):
        transaction_set = context.transaction_set
        document = context.document
        if transaction_set is None or document is None:
            x12global.logger.debug(
                'Segment %(nr)s: "%(tag)s" outside a known transaction set is skipped.',
                {'nr': context.segmentnr, 'tag': tag},
            )
            return
        section = document.section_of(tag)
        if section is None:
            x12global.logger.debug(
                'Segment %(nr)s: "%(tag)s" is not in document "%(doc)s"; skipped.',
                {'nr': context.segmentnr, 'tag': tag, 'doc': document.identifier},
            )
            return
        fields = self.codec.decode(elements, document.segment(tag))
        if section == DETAIL:
            if context.loop is None:
                context.loop = DetailLoop()
            elif tag in context.loop:
                # repeat of a tag: start of next loop
                transaction_set.detail_loops.append(context.loop)
                context.loop = DetailLoop()
            context.loop[tag] = fields
        else:
            transaction_set.section(section)[tag] = fields

    @staticmethod
    def _dropunclosed(context, where):
        """drop the open transaction set and functional group; they have no trailer."""
        if context.transaction_set is not None:
            x12global.logger.warning(
                '%(where)s while transaction set "%(doc)s" has no SE; set is dropped.',
                {'where': where, 'doc': context.transaction_set.identifier_code},
            )
        if context.group is not None:
            x12global.logger.warning(
                '%(where)s while functional group "%(control)s" has no GE; group is dropped.',
                {'where': where, 'control': context.group.control_number},
            )
        context.transaction_set = None
        context.loop = None
        context.document = None
        context.group = None

    def _checkendstate(self, context):
        self._dropunclosed(context, 'End of edi text')
        if context.state != OUTSIDE:
            x12global.logger.warning(
                'End of edi text in state %(state)s; no IEA.',
                {'state': STATENAMES[context.state]},
            )
