"""
edix12 init lib: configuration file and logging.
"""

import configparser
import logging
import logging.handlers
import os

from .exceptions import ConfigurationError

LOG_FORMAT = '%(asctime)s %(levelname)-9s [%(name)s] %(message)s'
LOG_DT_FORMAT = '%Y.%m.%d %H:%M:%S'
LOG_CONSOLE_FORMAT = LOG_FORMAT


class X12Config(configparser.RawConfigParser):
    """As ConfigParser, but with defaults."""
    # pylint: disable=arguments-differ

    def get(self, section, option, default='', **kwargs):
        if self.has_option(section, option):
            result = super().get(section, option, **kwargs)
            return result or default
        if default == '':
            raise ConfigurationError(
                'No entry "%(option)s" in section "%(section)s" in configuration file.',
                {'option': option, 'section': section},
            )
        return default

    def getint(self, section, option, default, **kwargs):
        if self.has_option(section, option):
            try:
                return configparser.RawConfigParser.getint(self, section, option, **kwargs)
            except ValueError as exc:
                raise ConfigurationError(
                    'Entry "%(option)s" in section "%(section)s" is not an integer.',
                    {'option': option, 'section': section},
                ) from exc
        return default

    def getboolean(self, section, option, default, **kwargs):
        if self.has_option(section, option):
            try:
                return configparser.RawConfigParser.getboolean(self, section, option, **kwargs)
            except ValueError as exc:
                raise ConfigurationError(
                    'Entry "%(option)s" in section "%(section)s" is not a boolean.',
                    {'option': option, 'section': section},
                ) from exc
        return default


def readconfig(path):
    """Read an ini file into a X12Config."""
    config = X12Config()
    try:
        with open(path, 'r', encoding='utf-8') as configfile:
            config.read_file(configfile)
    except OSError as exc:
        raise ConfigurationError('Can not read configuration file "%(path)s": %(exc)s', {'path': path, 'exc': exc}) from exc
    except configparser.Error as exc:
        raise ConfigurationError('Configuration file "%(path)s" is not valid: %(exc)s', {'path': path, 'exc': exc}) from exc
    return config


def dirshouldbethere(path):
    if path and not os.path.exists(path):
        os.makedirs(path)


# *******************************************************************
# *** init logging **************************************************
# *******************************************************************
def initlogging(logname='edix12', level='INFO', logfile=None, console=True, backupcount=10):
    """
    initialise logging for edix12: console and/or rotating log file.
    Calling again replaces the handlers set by an earlier call.
    """
    logger = logging.getLogger(logname)
    level = str(level).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError('Unknown log level "%(level)s".', {'level': level})
    for handler in list(logger.handlers):
        if handler.get_name() in (f'{logname}.file', f'{logname}.console'):
            logger.removeHandler(handler)
            handler.close()

    if logfile:
        dirshouldbethere(os.path.dirname(os.path.abspath(logfile)))
        handler = logging.handlers.RotatingFileHandler(logfile, encoding='utf-8', backupCount=backupcount)
        handler.set_name(f'{logname}.file')
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DT_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)

    if console:
        handler = logging.StreamHandler()
        handler.set_name(f'{logname}.console')
        handler.setFormatter(logging.Formatter(LOG_CONSOLE_FORMAT, LOG_DT_FORMAT))
        handler.setLevel(level)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
