'''
.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import configparser
import os
import platform
from importlib import resources

from .error import ConfigFileError, PyminicamException

DEFAULT_SECTION = 'DEFAULT'
USR_CONFIG_FILE = '.pyminicam.cfg'

PlatformName = platform.system()

_ConfigParser = None

_ProjectSection = DEFAULT_SECTION

def unixPath(path, rmFinalSlash=False, abspath=False):
    """
    Convert a path to use Unix-style slashes, optionally
    removing the final slash, if present.

    :param path: (str) a pathname
    :param rmFinalSlash: (bool) True if a final slash should
           be removed, if present.
    :return: (str) the modified pathname
    """
    if abspath:
        path = os.path.abspath(path)

    if PlatformName == 'Windows':
        path = path.replace('\\', '/')

    if rmFinalSlash and len(path) and path[-1] == '/':
        path = path[0:-1]

    return path

def pathjoin(*elements, **kwargs):
    path = os.path.join(*elements)

    if kwargs.get('expanduser'):
        path = os.path.expanduser(path)

    if kwargs.get('abspath'):
        path = os.path.abspath(path)

    if kwargs.get('normpath'):
        path = os.path.normpath(path)

    return unixPath(path, rmFinalSlash=True)

def getSection():
    return _ProjectSection

def setSection(section):
    """
    Set the name of the default config file section to read from.

    :param section: (str) a config file section name.
    :return: none
    """
    global _ProjectSection
    _ProjectSection = section

def configLoaded():
    return bool(_ConfigParser)

def getConfig(reload=False):
    """
    Return the configuration object. If one has been created already via
    `readConfigFiles`, it is returned; otherwise a new one is created
    and the configuration files are read. Applications generally do not
    need to use this object directly since the single instance is stored
    internally and referenced by the other API functions.

    :param: reload (bool) if True, instantiate a new global ConfigParser.
    :return: a `ConfigParser` instance.
    """
    if reload:
        global _ConfigParser
        _ConfigParser = None

    return _ConfigParser or readConfigFiles()

def _readConfigResourceFile(filename, package='pyminicam', raiseError=True):
    try:
        data = resources.files(package).joinpath(filename).read_text(encoding='utf-8')
    except (IOError, OSError):
        if raiseError:
            raise
        else:
            return None

    _ConfigParser.read_string(data, source=filename)
    return data

def getHomeDir():
    if PlatformName == 'Windows':
        # HOME exists on all Unix-like systems; for Windows it's HOMEPATH or HOMESHARE.
        # If set, we use PYMINICAM_HOME to identify the folder with the config file;
        # otherwise, we use HOMESHARE if set, or HOMEPATH, in that order.
        env = os.environ
        homedir = env.get('PYMINICAM_HOME') or env.get('HOMESHARE') or env.get('HOMEPATH') or ''
        drive, path = os.path.splitdrive(homedir)
        drive = drive or env.get('HOMEDRIVE') or 'C:'
        home = os.path.realpath(drive + path)
        home = home.replace('\\', '/')            # avoids '\' quoting issues
    else:
        home = os.getenv('HOME', '')

    return home

def userConfigPath():
    path = pathjoin(getHomeDir(), USR_CONFIG_FILE)
    return path

def _newConfigParser():
    global _ConfigParser

    # Strict mode prevents duplicate sections, which we do not restrict
    _ConfigParser = configparser.ConfigParser(comment_prefixes=('#'),
                                              strict=False,
                                              empty_lines_in_values=False)

    # don't force keys to lower-case: variable names are case sensitive
    _ConfigParser.optionxform = lambda option: option

    _ConfigParser.set(DEFAULT_SECTION, 'Home', getHomeDir())
    _ConfigParser.set(DEFAULT_SECTION, 'User', os.getenv('USER', 'unknown'))

    # Initialize config parser with default values
    _readConfigResourceFile('etc/system.cfg')

    # Read platform-specific defaults, if defined. No error if file is missing.
    _readConfigResourceFile('etc/%s.cfg' % PlatformName, raiseError=False)

    return _ConfigParser

def readConfigFiles():
    """
    Read the pyminicam configuration files, starting with ``pyminicam/etc/system.cfg``,
    followed by ``pyminicam/etc/{platform}.cfg`` if present. If the environment variable
    ``PYMINICAM_SITE_CONFIG`` is defined, its value should be a config file, which is
    read next. Finally, the user's config file, ``~/.pyminicam.cfg``, is read if it
    exists. Each successive file overrides values for any variable defined in an
    earlier file.

    :return: a populated ConfigParser instance
    """
    _newConfigParser()

    siteConfig = os.getenv('PYMINICAM_SITE_CONFIG')
    if siteConfig:
        try:
            with open(siteConfig) as f:
                _ConfigParser.read_file(f)
        except IOError as e:
            raise ConfigFileError("Failed to read site config file %s: %s" % (siteConfig, e))

    # Customizations are stored in ~/.pyminicam.cfg, which is optional
    usrConfigPath = userConfigPath()
    if os.path.lexists(usrConfigPath):
        try:
            with open(usrConfigPath) as f:
                _ConfigParser.read_file(f)

        except IOError:
            raise ConfigFileError("Can't read configuration file %s" % usrConfigPath)

    _setDefaultProject()
    return _ConfigParser

def readConfigFile(stream):
    """
    Reset the configuration to the system defaults and then read config
    text from an open file-like object. Used mainly to load configuration
    held in memory, e.g., for testing.

    :param stream: an object with a ``readline()`` method
    :return: a populated ConfigParser instance
    """
    _newConfigParser()
    _ConfigParser.read_file(stream)
    _setDefaultProject()
    return _ConfigParser

def _setDefaultProject():
    projectName = _ConfigParser.get(DEFAULT_SECTION, 'MiniCAM.DefaultProject', fallback='')
    if projectName:
        setSection(projectName)

def getSections():
    return getConfig().sections()

def getConfigDict(section=DEFAULT_SECTION, raw=False):
    """
    Return all variables defined in `section` as a dictionary.

    :param section: (str) the name of a section in the config file
    :param raw: (bool) whether to return raw or interpolated values.
    :return: (dict) all variables defined in the section (which includes
       those defined in DEFAULT.)
    """
    d = {key : value for key, value in getConfig().items(section, raw=raw)}
    return d

def setParam(name, value, section=None):
    """
    Set a configuration parameter in memory.

    :param name: (str) parameter name
    :param value: (str) parameter value
    :param section: (str) if given, the name of the section in which to set the value.
       If not given, the value is set in the established project section, or DEFAULT
       if no project section has been set.
    :return: value
    """
    section = section or getSection()
    parser = getConfig()

    if section != DEFAULT_SECTION and not parser.has_section(section):
        parser.add_section(section)

    parser.set(section, name, value)
    return value

def getParam(name, section=None, raw=False, raiseError=True):
    """
    Get the value of the configuration parameter `name`. Calls
    :py:func:`getConfig` if needed.

    :param name: (str) the name of a configuration parameters. Note
       that variable names are case-sensitive.
    :param section: (str) the name of the section to read from, which
      defaults to the value used in the first call to ``getConfig``,
      ``readConfigFiles``, or any of the ``getParam`` variants.
    :return: (str) the value of the variable, or None if the variable
      doesn't exist and raiseError is False.
    :raises PyminicamException: if the variable is not found in the given
      section and raiseError is True
    """
    section = section or getSection()

    if not section:
        raise PyminicamException('getParam was called without setting "section"')

    parser = getConfig()

    try:
        value = parser.get(section, name, raw=raw)

    except configparser.NoSectionError:
        if raiseError:
            raise PyminicamException('getParam: unknown section "%s"' % section)
        else:
            return None

    except configparser.NoOptionError:
        if raiseError:
            raise PyminicamException('getParam: unknown variable "%s"' % name)
        else:
            return None

    return value

_True  = ['t', 'y', 'true',  'yes', 'on',  '1']
_False = ['f', 'n', 'false', 'no',  'off', '0']

def stringTrue(value, raiseError=True):
    value = str(value).lower()

    if value in _True:
        return True

    if value in _False:
        return False

    if raiseError:
        msg = 'Unrecognized boolean value: "{}". Must one of {}'.format(value, _True + _False)
        raise ConfigFileError(msg)
    else:
        return None

def getParamAsBoolean(name, section=None):
    """
    Get the value of the configuration parameter `name`, coerced
    into a boolean value, where any (case-insensitive) value in the
    set ``{'true','yes','on','1'}`` are converted to ``True``, and
    any value in the set ``{'false','no','off','0'}`` is converted to
    ``False``. Any other value raises an exception.
    Calls :py:func:`getConfig` if needed.

    :param name: (str) the name of a configuration parameters.
    :param section: (str) the name of the section to read from, which
      defaults to the value used in the first call to ``getConfig``,
      ``readConfigFiles``, or any of the ``getParam`` variants.
    :return: (bool) the value of the variable
    :raises: :py:exc:`pyminicam.error.ConfigFileError`
    """
    value = getParam(name, section=section)
    result = stringTrue(value, raiseError=False)

    if result is None:
        msg = 'The value of variable "{}", {}, could not converted to boolean.'.format(name, value)
        raise ConfigFileError(msg)

    return result

def getParamAsInt(name, section=None):
    """
    Get the value of the configuration parameter `name`, coerced
    to an integer. Calls :py:func:`getConfig` if needed.

    :param name: (str) the name of a configuration parameters.
    :param section: (str) the name of the section to read from
    :return: (int) the value of the variable
    """
    value = getParam(name, section=section)
    try:
        return int(value)
    except ValueError:
        raise ConfigFileError('The value of variable "{}", {}, is not an integer.'.format(name, value))

def getParamAsFloat(name, section=None):
    """
    Get the value of the configuration parameter `name` as a
    float. Calls :py:func:`getConfig` if needed.

    :param name: (str) the name of a configuration parameters.
    :param section: (str) the name of the section to read from
    :return: (float) the value of the variable
    """
    value = getParam(name, section=section)
    try:
        return float(value)
    except ValueError:
        raise ConfigFileError('The value of variable "{}", {}, is not a number.'.format(name, value))
