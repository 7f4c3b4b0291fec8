__author__ = 'rjp'

# Only modules without third-party dependencies are imported here, since
# setup.py imports pyminicam.version before requirements are installed.

from .error import (PyminicamException, FileMissingError, FileFormatError, XmlFormatError,
                    ConfigFileError, CommandlineError, SolverError)

from .config import (getSection, setSection, configLoaded, getConfig, readConfigFiles,
                     readConfigFile, getConfigDict, getParam, setParam, getParamAsBoolean,
                     getParamAsInt, getParamAsFloat)

from .log import getLogger, getLogLevel, setLogLevel, configureLogs

from .version import VERSION
