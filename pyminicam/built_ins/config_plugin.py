'''
.. codeauthor:: Richard Plevin

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from ..error import CommandlineError
from ..subcommand import SubcommandABC, clean_help

class ConfigCommand(SubcommandABC):
    def __init__(self, subparsers):
        kwargs = {'help' : '''List the values of configuration variables from
                  ~/.pyminicam.cfg configuration file.'''}

        super(ConfigCommand, self).__init__('config', subparsers, kwargs, group='utils')

    def addArgs(self, parser):
        parser.add_argument('-d', '--useDefault', action='store_true',
                            help=clean_help('Indicates to operate on the DEFAULT section rather '
                                 'than the project section.'))

        parser.add_argument('name', nargs='?', default='',
                            help=clean_help('Show the names and values of all parameters whose '
                            'name contains the given value. The match is case-insensitive. '
                            'If not specified, all variable values are shown.'))

        parser.add_argument('-x', '--exact', action='store_true',
                            help=clean_help('Treat the text not as a substring to match, but '
                            'as the name of a specific variable. Match is case-sensitive. '
                            'Prints only the value.'))

        return parser

    def run(self, args, tool):
        import re
        from ..config import getConfig, getParam, DEFAULT_SECTION

        parser = getConfig()
        section = DEFAULT_SECTION if args.useDefault else (args.projectName or DEFAULT_SECTION)

        if section != DEFAULT_SECTION and not parser.has_section(section):
            raise CommandlineError("Unknown configuration file section '%s'" % section)

        if args.name and args.exact:
            value = getParam(args.name, section=section, raiseError=False)
            if value is not None:
                print(value)
            return

        # if no name is given, the pattern matches all variables
        pattern = re.compile('.*' + re.escape(args.name) + '.*', re.IGNORECASE)

        print("[%s]" % section)
        for name, value in sorted(parser.items(section)):
            if pattern.match(name):
                print("%25s = %s" % (name, value))


PluginClass = ConfigCommand
