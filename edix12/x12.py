"""
edix12 X12: read and write X12 interchanges using a schema document.

    x12 = X12(spec_file='edi.yaml', new_lines=True, truncate_null=True)
    interchange = x12.read_record(text)
    text = x12.write_record(interchange)

An X12 instance only holds the schema (read-only) and the options. All state of
a read or write lives in that call, so one instance can be used from several threads.
"""

import os
from typing import Any, Mapping, Union

from . import x12global
from . import x12init
from .exceptions import ConfigurationError
from .field import FieldCodec
from .grammar import SpecCatalog, load_schema
from .inmessage import HierarchyParser
from .node import Interchange
from .outmessage import HierarchyWriter
from .x12config import SEPARATOR, TERMINATOR


class X12:
    # pylint: disable=too-many-arguments

    def __init__(
            self,
            spec: Any = None,
            spec_file=None,
            terminator: str = TERMINATOR,
            separator: str = SEPARATOR,
            new_lines: bool = False,
            truncate_null: bool = False,
            debug: bool = False):
        terminator = terminator or TERMINATOR
        separator = separator or SEPARATOR
        _checkdelimiter('terminator', terminator)
        _checkdelimiter('separator', separator)
        if terminator == separator:
            raise ConfigurationError('Terminator and separator are both "%(sep)s".', {'sep': terminator})
        self.catalog = SpecCatalog(load_schema(spec, spec_file))
        self.codec = FieldCodec(
            terminator=terminator, separator=separator, new_lines=new_lines, truncate_null=truncate_null,
        )
        self.debug = bool(debug)
        self._parser = HierarchyParser(self.catalog, self.codec, debug=self.debug)
        self._writer = HierarchyWriter(self.catalog, self.codec)

    @classmethod
    def from_ini(cls, path, section='settings'):
        """
        Options from an ini file, eg:
            [settings]
            spec_file = edi.yaml
            new_lines = True
            truncate_null = True
            log_level = DEBUG
        A relative spec_file is relative to the ini file.
        """
        config = x12init.readconfig(path)
        if not config.has_section(section):
            raise ConfigurationError('No section "%(section)s" in "%(path)s".', {'section': section, 'path': path})
        spec_file = config.get(section, 'spec_file')
        if not os.path.isabs(spec_file):
            spec_file = os.path.join(os.path.dirname(os.path.abspath(path)), spec_file)
        log_level = config.get(section, 'log_level', None)
        log_file = config.get(section, 'log_file', None)
        if log_level or log_file:
            x12init.initlogging(
                x12global.logger.name,
                level=log_level or 'INFO',
                logfile=log_file,
                console=config.getboolean(section, 'log_console', True),
                backupcount=config.getint(section, 'log_file_number', 10),
            )
        return cls(
            spec_file=spec_file,
            terminator=config.get(section, 'terminator', TERMINATOR),
            separator=config.get(section, 'separator', SEPARATOR),
            new_lines=config.getboolean(section, 'new_lines', False),
            truncate_null=config.getboolean(section, 'truncate_null', False),
            debug=config.getboolean(section, 'debug', False),
        )

    def decode(self, text: str) -> Interchange:
        """edi text -> Interchange. Never fails on content of text."""
        return self._parser.parse(text)

    def encode(self, interchange: Union[Interchange, Mapping[str, Any]]) -> str:
        """Interchange (or its dict form) -> edi text."""
        if not isinstance(interchange, Interchange):
            interchange = Interchange.from_dict(interchange)
        return self._writer.write(interchange)

    read_record = decode
    write_record = encode

    def read_file(self, path, encoding='utf-8') -> Interchange:
        with open(path, 'r', encoding=encoding, newline='') as edifile:
            return self.decode(edifile.read())

    def write_file(self, interchange, path, encoding='utf-8'):
        text = self.encode(interchange)
        with open(path, 'w', encoding=encoding, newline='') as edifile:
            edifile.write(text)


def _checkdelimiter(what, value):
    if not isinstance(value, str) or len(value) != 1:
        raise ConfigurationError('%(what)s must be one character, found "%(value)s".', {'what': what, 'value': value})
    if value in '\r\n':
        raise ConfigurationError('%(what)s can not be a line break.', {'what': what})
