"""
edix12 grammar: field, segment and document definitions.

A schema document describes transaction sets (documents). Per document:
    segments:   tag -> {definition: [field definition, ...]}
    structure:  {header: [tag, ...], detail: [tag, ...], footer: [tag, ...]}
Top level keys that carry a 'definition' are segment definitions outside any
document; this is how the envelope segments (ISA, GS, ST, SE, GE, IEA) are
overridden.

Structure entries the codec can not use (unknown sections, envelope tags, tags
without definition, repeated tags) are skipped; unknown field keys are ignored.

The schema is read once into a SpecCatalog. Nothing in a SpecCatalog is changed
after construction; one catalog is shared by all reads and writes.
"""

import dataclasses
import os
import re
import types
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from . import x12global
from .x12config import (
    BYTES,
    DEFINITION,
    ENVELOPE_TAGS,
    FIELDKEYS,
    FORMAT,
    MAX,
    MIN,
    NAME,
    SECTIONS,
    SEGMENTS,
    STRUCTURE,
    TYPE,
    VALUE,
)
from .exceptions import ConfigurationError, GrammarError

# printf style conversion in a field format, eg %09i, %-5s, %.2f
FORMAT_CONVERSION = re.compile(r"%[-+ 0#]*\d*(?:\.\d+)?([diouxXeEfFgGs%])")


@dataclasses.dataclass(frozen=True)
class FieldDefinition:
    """One element of a segment. A field without name is a positional filler."""
    name: Optional[str] = None
    value: Optional[str] = None
    bytes: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None
    format: Optional[str] = None
    type: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class SegmentDefinition:
    tag: str
    fields: Tuple[FieldDefinition, ...] = ()


@dataclasses.dataclass(frozen=True)
class DocumentSpec:
    """Layout of one transaction set type, eg '850'."""
    identifier: str
    segments: Mapping[str, SegmentDefinition]
    structure: Mapping[str, Tuple[str, ...]]
    _sections: Mapping[str, str] = dataclasses.field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        lookup = {}
        for section in SECTIONS:
            for tag in self.structure.get(section, ()):
                lookup[tag] = section
        object.__setattr__(self, '_sections', types.MappingProxyType(lookup))

    def section_of(self, tag: str) -> Optional[str]:
        """header, detail, footer; None if tag is not in structure."""
        return self._sections.get(tag)

    def segment(self, tag: str) -> Optional[SegmentDefinition]:
        return self.segments.get(tag)

    def tags(self, section: str) -> Tuple[str, ...]:
        return self.structure.get(section, ())


class SpecCatalog:
    """
    Built-in envelope segment definitions merged with a schema document.
    Keys in the schema document override the built-in ones.
    """

    def __init__(self, schema: Mapping[str, Any]):
        if not isinstance(schema, Mapping):
            raise GrammarError('Schema must be a mapping, found "%(type)s".', {'type': type(schema).__name__})
        segments: Dict[str, SegmentDefinition] = dict(DEFAULT_SEGMENTS)
        documents: Dict[str, DocumentSpec] = {}
        for key, raw in schema.items():
            key = str(key).strip()
            if not isinstance(raw, Mapping):
                raise GrammarError('Schema entry "%(key)s" must be a mapping.', {'key': key})
            if DEFINITION in raw:
                segments[key.upper()] = parse_segment(key, raw)
            elif SEGMENTS in raw or STRUCTURE in raw:
                documents[key] = parse_document(key, raw)
            else:
                raise GrammarError(
                    'Schema entry "%(key)s" has neither "%(definition)s" nor "%(segments)s"/"%(structure)s".',
                    {'key': key, 'definition': DEFINITION, 'segments': SEGMENTS, 'structure': STRUCTURE},
                )
        self._segments = types.MappingProxyType(segments)
        self._documents = types.MappingProxyType(documents)
        x12global.logger.debug(
            'Schema read: documents %(documents)s, segments %(segments)s.',
            {'documents': sorted(documents), 'segments': sorted(segments)},
        )

    def segment(self, tag: str) -> Optional[SegmentDefinition]:
        """Segment definition outside documents (envelope segments)."""
        return self._segments.get(tag)

    def document(self, identifier: Optional[str]) -> Optional[DocumentSpec]:
        if identifier is None:
            return None
        return self._documents.get(str(identifier))

    @property
    def documents(self) -> Mapping[str, DocumentSpec]:
        return self._documents

    @property
    def segments(self) -> Mapping[str, SegmentDefinition]:
        return self._segments


# ********************************************************
# *** reading the schema document ************************
# ********************************************************
def load_schema(spec: Any = None, spec_file: Optional[str] = None) -> Mapping[str, Any]:
    """
    Get the schema document: either spec (mapping or YAML text) or spec_file (path to YAML).
    Exactly one has to be given.
    """
    if spec is not None and spec_file is not None:
        raise ConfigurationError('Use either "spec" or "spec_file", not both.')
    if spec is not None:
        if isinstance(spec, Mapping):
            return spec
        if isinstance(spec, (str, bytes)):
            return _yaml_load(spec, '<spec>')
        raise ConfigurationError('"spec" must be a mapping or YAML text, found "%(type)s".', {'type': type(spec).__name__})
    if spec_file is not None:
        try:
            with open(os.fspath(spec_file), 'r', encoding='utf-8') as handle:
                return _yaml_load(handle, spec_file)
        except OSError as exc:
            raise ConfigurationError(
                'Can not read spec file "%(spec_file)s": %(exc)s',
                {'spec_file': spec_file, 'exc': exc},
            ) from exc
    raise ConfigurationError('Argument "spec" or "spec_file" must be specified.')


def _yaml_load(stream, source) -> Mapping[str, Any]:
    try:
        raw = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise GrammarError('Schema "%(source)s" is not valid YAML: %(exc)s', {'source': source, 'exc': exc}) from exc
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise GrammarError('Schema "%(source)s" must contain a top-level mapping.', {'source': source})
    return raw


def parse_document(identifier: str, raw: Mapping[str, Any]) -> DocumentSpec:
    raw_segments = raw.get(SEGMENTS) or {}
    if not isinstance(raw_segments, Mapping):
        raise GrammarError('Document "%(doc)s": "segments" must be a mapping.', {'doc': identifier})
    segments = {}
    for tag, raw_segment in raw_segments.items():
        tag = str(tag).strip().upper()
        if not isinstance(raw_segment, Mapping):
            raise GrammarError('Document "%(doc)s", segment "%(tag)s": must be a mapping.', {'doc': identifier, 'tag': tag})
        segments[tag] = parse_segment(tag, raw_segment, identifier)

    raw_structure = raw.get(STRUCTURE) or {}
    if not isinstance(raw_structure, Mapping):
        raise GrammarError('Document "%(doc)s": "structure" must be a mapping.', {'doc': identifier})
    structure = {}
    seen = {}
    for section, tags in raw_structure.items():
        section = str(section).strip().lower()
        if section not in SECTIONS:
            x12global.logger.debug(
                'Document "%(doc)s": section "%(section)s" is not one of %(sections)s; skipped.',
                {'doc': identifier, 'section': section, 'sections': ', '.join(SECTIONS)},
            )
            continue
        if tags is None:
            tags = []
        if not isinstance(tags, (list, tuple)):
            raise GrammarError('Document "%(doc)s": section "%(section)s" must be a list of tags.', {'doc': identifier, 'section': section})
        ordered = []
        for tag in tags:
            tag = str(tag).strip().upper()
            if tag in ENVELOPE_TAGS or tag not in segments or tag in seen:
                # payload needs a definition; a tag belongs to its first section
                x12global.logger.debug(
                    'Document "%(doc)s": segment "%(tag)s" in section "%(section)s" is skipped.',
                    {'doc': identifier, 'tag': tag, 'section': section},
                )
                continue
            seen[tag] = section
            ordered.append(tag)
        structure[section] = tuple(ordered)
    return DocumentSpec(
        identifier=identifier,
        segments=types.MappingProxyType(segments),
        structure=types.MappingProxyType(structure),
    )


def parse_segment(tag: str, raw: Mapping[str, Any], identifier: str = '') -> SegmentDefinition:
    tag = str(tag).strip().upper()
    where = f'Document "{identifier}", segment "{tag}"' if identifier else f'Segment "{tag}"'
    if not 2 <= len(tag) <= 3:
        raise GrammarError('%(where)s: tag must be 2 or 3 characters.', {'where': where})
    definition = raw.get(DEFINITION)
    if definition is None:
        definition = []
    if not isinstance(definition, (list, tuple)):
        raise GrammarError('%(where)s: "definition" must be a list.', {'where': where})
    fields = []
    for number, raw_field in enumerate(definition, start=1):
        if not isinstance(raw_field, Mapping):
            raise GrammarError('%(where)s, field %(nr)s: must be a mapping.', {'where': where, 'nr': number})
        fields.append(_parse_field(raw_field, f'{where}, field {number}'))
    return SegmentDefinition(tag=tag, fields=tuple(fields))


def _parse_field(raw: Mapping[str, Any], where: str) -> FieldDefinition:
    unknown = [str(key) for key in raw if key not in FIELDKEYS]
    if unknown:
        x12global.logger.debug('%(where)s: key(s) %(keys)s not used.', {'where': where, 'keys': ', '.join(unknown)})
    fmt = _opt_str(raw.get(FORMAT), where, FORMAT)
    if fmt is not None:
        conversions = [conv for conv in FORMAT_CONVERSION.findall(fmt) if conv != '%']
        if len(conversions) != 1 or fmt.count('%') != len(FORMAT_CONVERSION.findall(fmt)) + fmt.count('%%'):
            raise GrammarError(
                '%(where)s: format "%(format)s" must have exactly one conversion like %%09i or %%-5s.',
                {'where': where, 'format': fmt},
            )
    return FieldDefinition(
        name=_opt_str(raw.get(NAME), where, NAME),
        value=_opt_value(raw.get(VALUE)),
        bytes=_opt_int(raw.get(BYTES), where, BYTES),
        min=_opt_int(raw.get(MIN), where, MIN),
        max=_opt_int(raw.get(MAX), where, MAX),
        format=fmt,
        type=_opt_str(raw.get(TYPE), where, TYPE),
    )


def _opt_str(value: Any, where: str, key: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise GrammarError('%(where)s: "%(key)s" must be a string.', {'where': where, 'key': key})
    return value or None


def _opt_value(value: Any) -> Optional[str]:
    # YAML turns unquoted 10 or true into int/bool; the edi value is the text.
    if value is None:
        return None
    return str(value)


def _opt_int(value: Any, where: str, key: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise GrammarError('%(where)s: "%(key)s" must be an integer.', {'where': where, 'key': key})
    if value < 0:
        raise GrammarError('%(where)s: "%(key)s" must be >= 0.', {'where': where, 'key': key})
    return value or None


# ********************************************************
# *** built-in envelope segments *************************
# ********************************************************
DEFAULT_ENVELOPE = {
    'ISA': {
        'definition': [
            {'type': 'text', 'name': 'authorization_information_qualifier', 'value': '00', 'bytes': 2},
            {'type': 'filler', 'bytes': 10, 'value': ' '},
            {'type': 'text', 'name': 'security_information_qualifier', 'value': '00', 'bytes': 2},
            {'type': 'filler', 'bytes': 10, 'value': ' '},
            {'type': 'text', 'name': 'interchange_id_qualifier_1', 'value': '00', 'bytes': 2},
            {'type': 'text', 'name': 'interchange_id_1', 'value': '00', 'bytes': 15},
            {'type': 'text', 'name': 'interchange_id_qualifier_2', 'value': '00', 'bytes': 2},
            {'type': 'text', 'name': 'interchange_id_2', 'value': '00', 'bytes': 15},
            {'type': 'text', 'name': 'date', 'value': '', 'bytes': 6},
            {'type': 'text', 'name': 'time', 'value': '', 'bytes': 4},
            {'type': 'text', 'name': 'repetition_separator', 'value': 'U', 'bytes': 1},
            {'type': 'text', 'name': 'control_version_number', 'bytes': 5},
            {'type': 'text', 'name': 'control_number', 'bytes': 9, 'format': '%09i'},
            {'type': 'text', 'name': 'acknowledgment_requested', 'bytes': 1},
            {'type': 'text', 'name': 'usage_indicator', 'bytes': 1, 'value': 'P'},
            {'type': 'text', 'bytes': 1, 'value': '>'},
        ],
    },
    'IEA': {
        'definition': [
            {'name': 'total', 'min': 1, 'max': 10},
            {'name': 'control_number', 'min': 4, 'max': 9, 'format': '%09i'},
        ],
    },
    'GS': {
        'definition': [
            {'type': 'text', 'name': 'type', 'value': '00', 'bytes': 2},
            {'type': 'text', 'name': 'sender_code', 'bytes': 9},
            {'type': 'text', 'name': 'receiver_code', 'bytes': 9},
            {'type': 'text', 'name': 'date', 'value': '', 'bytes': 8},
            {'type': 'text', 'name': 'time', 'value': '', 'bytes': 4},
            {'type': 'text', 'name': 'control_number', 'bytes': 9, 'format': '%09i'},
            {'type': 'text', 'name': 'agency_code', 'bytes': 1, 'value': 'X'},
            {'type': 'text', 'name': 'version_number', 'bytes': 6},
        ],
    },
    'ST': {
        'definition': [
            {'name': 'identifier_code', 'min': 3, 'max': 3},
            {'name': 'control_number', 'min': 4, 'max': 9, 'format': '%04i'},
        ],
    },
    'SE': {
        'definition': [
            {'name': 'total', 'min': 1, 'max': 10},
            {'name': 'control_number', 'min': 4, 'max': 9, 'format': '%04i'},
        ],
    },
    'GE': {
        'definition': [
            {'name': 'total', 'min': 1, 'max': 10},
            {'name': 'control_number', 'min': 4, 'max': 9, 'format': '%09i'},
        ],
    },
}

DEFAULT_SEGMENTS = types.MappingProxyType(
    {tag: parse_segment(tag, raw) for tag, raw in DEFAULT_ENVELOPE.items()}
)
