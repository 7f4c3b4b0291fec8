"""
.. Logging support.
   This module allows modules to register themselves for logging which is
   turned on after the app reads configuration information. Modules call
   logger = pyminicam.log.getLogger(__name__) as a top-level statement, evaluated
   at load time. This returns the logger, which may not yet be configured.
   When the configuration file has been read, all registered loggers are
   initialized, and all subsequently registered loggers are initialized
   upon instantiation.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
"""
import os
import logging
from .config import getParam, getParamAsBoolean, configLoaded
from .error import PyminicamException

_logLevel   = None

def getLevels(levelStr=None):
    """
    Get log levels for pyminicam as a whole or for indicated modules individually.
    Modules not prefixed are interpreted to be in pyminicam.
    Example: LogLevel = WARNING, sector:DEBUG, solver:INFO

    :param levelStr: a comma-delimited string of module:logLevel values. If
        no ':' is present, the value is treated as the default logLevel for pyminicam.
        If levelStr is None, the value of the variable 'MiniCAM.LogLevel' is used.
    :return: (dict) log level names keyed by logger name
    """
    result = {}

    levelStr = levelStr or getParam('MiniCAM.LogLevel')

    levels = map(str.strip, levelStr.split(','))
    for level in levels:
        if ':' in level:
            module, lvl = map(str.strip, level.split(':'))
            if '.' not in module:
                module = 'pyminicam.' + module
        else:
            module = 'pyminicam'
            lvl = level

        result[module] = lvl.upper()

    return result

# Loggers for top-level package names, e.g., 'pyminicam'.
_PkgLoggers = {}

def _createPkgLogger(dotspec):
    pkgName = dotspec.split('.')[0]

    if pkgName and pkgName not in _PkgLoggers:
        logger = logging.getLogger(pkgName)
        logger.propagate = False
        _PkgLoggers[pkgName] = logger

        if configLoaded():
            _configureLogger(pkgName)

def getLogger(name):
    '''
    Register a logger, which will be set up after the configuration
    file is read.

    :param name: the name of the logger, conventionally passed as __name__.
    :return: a logging logger instance
    '''
    logger = logging.getLogger(name)
    _createPkgLogger(name)
    return logger

def _addHandler(logger, formatStr, logFile=None):
    if logFile:
        dirname = os.path.dirname(logFile)
        if dirname:
            os.makedirs(dirname, exist_ok=True)

    handler = logging.FileHandler(logFile, mode='a') if logFile else logging.StreamHandler()
    handler.setFormatter(logging.Formatter(formatStr))
    logger.addHandler(handler)

def _configureLogger(name, force=False):
    try:
        logger = _PkgLoggers[name]
    except KeyError:
        raise PyminicamException("Can't configure unknown logger '%s'" % name)

    # If not forcing, skip loggers that already have handlers installed
    if not force and logger.handlers:
        return

    global _logLevel
    levels = getLevels(_logLevel)
    logger.setLevel(levels.pop(name, 'WARNING'))

    # per-module levels, e.g., "sector:DEBUG"
    for moduleName, level in levels.items():
        if moduleName.startswith(name + '.'):
            logging.getLogger(moduleName).setLevel(level)

    for handler in list(logger.handlers):
        # a console handler's stream may have been closed by its owner
        stream = getattr(handler, 'stream', None)
        if stream is not None and not getattr(stream, 'closed', False):
            handler.flush()
        logger.removeHandler(handler)

    logConsole = getParamAsBoolean('MiniCAM.LogConsole')
    if logConsole:
        consoleFormat = getParam('MiniCAM.LogConsoleFormat')
        _addHandler(logger, consoleFormat)

    logFile = getParam('MiniCAM.LogFile')
    if logFile:
        fileFormat = getParam('MiniCAM.LogFileFormat')
        _addHandler(logger, fileFormat, logFile=logFile)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


def configureLogs(force=False):
    '''
    Configure package loggers based on the configuration information.
    Unless force == True, loggers with handlers will not be reconfigured.

    :param force: (bool) if True, reconfigure the logs even if already configured.
    :return: none
    '''
    if not configLoaded():
        return

    for name in _PkgLoggers.keys():
        _configureLogger(name, force=force)

def getLogLevel():
    """
    Get the currently set LogLevel.

    :return: (str) a level string in the format accepted by :py:func:`getLevels`,
        or None if the level is taken from the config variable MiniCAM.LogLevel.
    """
    return _logLevel

def setLogLevel(level):
    '''
    Set the logging level for all defined loggers. The level string may
    name per-module levels, as described for :py:func:`getLevels`.

    :param level: (str) e.g., ``'DEBUG'``, or ``'WARNING, sector:DEBUG'`` (case insensitive)
    :return: none
    '''
    global _logLevel
    _logLevel = level
    configureLogs(force=True)
