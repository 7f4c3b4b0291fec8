"""
.. Write the sector dependency graph of a solved scenario in Graphviz format.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
"""
from ..subcommand import SubcommandABC, clean_help


class GraphCommand(SubcommandABC):
    def __init__(self, subparsers):
        kwargs = {'help' : '''Run a scenario through the given year and write the
                  dependency graph of its sectors in Graphviz "dot" format.'''}

        super(GraphCommand, self).__init__('graph', subparsers, kwargs, group='utils')

    def addArgs(self, parser):
        parser.add_argument('scenarioFile',
                            help=clean_help('''The XML file describing the scenario.'''))

        parser.add_argument('-o', '--outFile',
                            help=clean_help('''The file to write. By default, the graph is
                            printed to stdout.'''))

        parser.add_argument('-y', '--year', type=int, required=True,
                            help=clean_help('''The year to graph. The scenario is solved through
                            this year.'''))

        return parser

    def run(self, args, tool):
        import sys
        from ..context import ModelConfig
        from ..scenario import Scenario

        scenario = Scenario.fromFile(args.scenarioFile, config=ModelConfig.fromConfig())
        scenario.run(endYear=args.year)

        if args.outFile:
            with open(args.outFile, 'w') as f:
                scenario.writeDependencyGraph(f, args.year)
        else:
            scenario.writeDependencyGraph(sys.stdout, args.year)


PluginClass = GraphCommand
