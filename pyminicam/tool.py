'''
.. The "mct" (minicam tool) commandline program

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import argparse
import sys

from .config import getParam, getConfig, getParamAsBoolean, setParam, getSection, setSection, getSections, DEFAULT_SECTION
from .error import CommandlineError
from .log import setLogLevel, configureLogs
from .subcommand import clean_help
from .version import VERSION

PROGRAM = 'mct'

class MiniCamTool(object):

    # plugin instances by command name
    _plugins = {}

    _instance = None

    @classmethod
    def getInstance(cls, reload=False):
        """
        Get the singleton instance of the MiniCamTool class.

        :param reload: (bool) If true, a new MiniCamTool instance is
           created.
        :return: (MiniCamTool instance) the new or cached instance.
        """
        if reload:
            MiniCamTool._instance = None
            MiniCamTool._plugins = {}

        if not MiniCamTool._instance:
            MiniCamTool._instance = cls()

        return MiniCamTool._instance

    @classmethod
    def getPlugin(cls, name):
        return cls._plugins.get(name, None)

    def __init__(self, loadBuiltins=True):
        self.parser = self.subparsers = None
        self.addParsers()

        # load all built-in sub-commands
        if loadBuiltins:
            from .built_ins import BuiltinSubcommands
            for item in BuiltinSubcommands:
                self.instantiatePlugin(item)

    def addParsers(self):
        self.parser = parser = argparse.ArgumentParser(prog=PROGRAM, prefix_chars='-+')

        logLevel = str(getParam('MiniCAM.LogLevel'))
        parser.add_argument('+l', '--logLevel',
                            default=logLevel or 'notset',
                            help=clean_help('''Sets the log level for modules of the program. A default
                                log level can be set for the entire program, or individual
                                modules can have levels set using the syntax
                                "module:level, module:level,...", where the level names must be
                                one of {debug,info,warning,error,fatal} (case insensitive).'''))

        parser.add_argument('+P', '--projectName', metavar='name', default=getParam('MiniCAM.DefaultProject'),
                            choices=sorted(getSections()) + [''],
                            help=clean_help('''The project name (the config file section to read from),
                            which defaults to the value of config variable MiniCAM.DefaultProject'''))

        parser.add_argument('+s', '--set', dest='configVars', metavar='name=value', action='append', default=[],
                            help=clean_help('''Assign a value to override a configuration file parameter. For example,
                            to print the values of market flows on dependency graphs, use
                            --set "MiniCAM.PrintValuesOnGraphs=True". Enclose the argument in quotes if
                            it contains spaces or other characters that would confuse the shell.
                            Use multiple --set flags and arguments to set multiple variables.'''))

        parser.add_argument('+v', '--verbose', action='store_true',
                            help=clean_help('''Show diagnostic output'''))

        parser.add_argument('--version', action='version', version=VERSION)   # goes to stderr, handled by argparse

        self.subparsers = self.parser.add_subparsers(dest='subcommand', title='Subcommands',
                               description='''For help on subcommands, use the "-h" flag after the subcommand name''')

    def instantiatePlugin(self, pluginClass):
        plugin = pluginClass(self.subparsers)
        self._plugins[plugin.name] = plugin

    def run(self, args=None, argList=None):
        """
        Parse the script's arguments and invoke the run() method of the
        designated sub-command.

        :param args: an argparse.Namespace of parsed arguments
        :param argList: (list of str) argument list to parse
        :return: none
        """
        assert args or argList is not None, "MiniCamTool.run requires either args or argList"

        if argList is not None:
            args = self.parser.parse_args(args=argList)

        if not args.subcommand:
            raise CommandlineError('No sub-command given. Use "%s -h" for help.' % PROGRAM)

        args.projectName = section = args.projectName or getParam('MiniCAM.DefaultProject')
        if section:
            setSection(section)

        logLevel = 'INFO' if args.verbose else (args.logLevel or getParam('MiniCAM.LogLevel'))
        if logLevel and logLevel != 'notset':
            setLogLevel(logLevel)

        configureLogs(force=True)

        # Get the sub-command and run it with the given args
        obj = self.getPlugin(args.subcommand)
        obj.run(args, self)


def _setDefaultProject(argv):
    parser = argparse.ArgumentParser(prog=PROGRAM, add_help=False, prefix_chars='-+')
    parser.add_argument('+P', '--projectName', metavar='name')

    ns, _otherArgs = parser.parse_known_args(args=argv)

    section = ns.projectName
    if section:
        setParam('MiniCAM.DefaultProject', section, section=DEFAULT_SECTION)
        setSection(section)

def _main(argv=None):
    getConfig()
    configureLogs()

    _setDefaultProject(argv)

    # This parser handles only the --set args, which must be applied before
    # the main parser reads its defaults from the configuration.
    parser = argparse.ArgumentParser(prog=PROGRAM, add_help=False, prefix_chars='-+')
    parser.add_argument('+s', '--set', dest='configVars', action='append', default=[])

    ns, _otherArgs = parser.parse_known_args(args=argv)

    for arg in ns.configVars:
        if not '=' in arg:
            raise CommandlineError('+s requires an argument of the form variable=value, got "%s"' % arg)

        name, value = arg.split('=', 1)
        setParam(name, value, section=getSection())

    tool = MiniCamTool.getInstance()
    args = tool.parser.parse_args(args=argv)
    tool.run(args=args)


def main(argv=None, raiseError=False):
    try:
        _main(argv)
        return 0

    except CommandlineError as e:
        print(e)

    except Exception as e:
        if raiseError:
            raise

        print("%s failed: %s" % (PROGRAM, e))

        if getParamAsBoolean('MiniCAM.ShowStackTrace'):
            import traceback
            traceback.print_exc()

    return 1

if __name__ == '__main__':
    sys.exit(main())
