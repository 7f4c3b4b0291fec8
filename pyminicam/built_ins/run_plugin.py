"""
.. Run a scenario described in a model input XML file and report the
   resulting sector prices and quantities.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
"""
from ..subcommand import SubcommandABC, clean_help


class RunCommand(SubcommandABC):
    def __init__(self, subparsers, name='run', help='Run a scenario defined in a model input XML file'):
        kwargs = {'help' : help}
        super(RunCommand, self).__init__(name, subparsers, kwargs)

    def addArgs(self, parser):
        parser.add_argument('scenarioFile',
                            help=clean_help('''The XML file describing the scenario.'''))

        parser.add_argument('-d', '--dependencies', action='store_true',
                            help=clean_help('''Log each sector's dependencies, as comma-separated
                            values, at the INFO level.'''))

        parser.add_argument('-e', '--emissions', action='store_true',
                            help=clean_help('''Report emissions by gas rather than sector prices
                            and quantities.'''))

        parser.add_argument('-E', '--endYear', type=int,
                            help=clean_help('''The last year to solve. By default, all model years
                            are solved.'''))

        parser.add_argument('-o', '--outFile',
                            help=clean_help('''Write the results to the given CSV file rather than
                            printing them.'''))

        parser.add_argument('-y', '--year', dest='years', type=int, action='append',
                            help=clean_help('''Report results only for the given year. Repeat the
                            flag to report several years. By default, all solved years are reported.'''))

        return parser

    def run(self, args, tool):
        from ..context import ModelConfig
        from ..log import getLogger
        from ..scenario import Scenario

        _logger = getLogger(__name__)

        scenario = Scenario.fromFile(args.scenarioFile, config=ModelConfig.fromConfig())

        if args.dependencies:
            for region in scenario.regions:
                region.printSectorDependencies(_logger)

        converged = scenario.run(endYear=args.endYear)
        if not converged:
            _logger.warning("Scenario '%s' did not converge in all periods", scenario.name)

        df = scenario.getEmissions() if args.emissions else scenario.getResults()
        if args.years:
            df = df[df.year.isin(args.years)]

        if args.outFile:
            df.to_csv(args.outFile, index=False)
            _logger.info("Wrote %s", args.outFile)
        else:
            print(df.to_string(index=False))


PluginClass = RunCommand
