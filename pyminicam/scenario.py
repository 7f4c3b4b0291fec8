'''
.. Scenario: reads model input XML, builds the world, and runs it.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import pandas as pd

from .context import ModelConfig, ModelContext
from .error import PyminicamException, XmlFormatError
from .log import getLogger
from .modeltime import Modeltime
from .region import Region
from .solver import Solver
from .XMLFile import XMLFile, childElements

_logger = getLogger(__name__)

class Scenario(object):
    """
    A model run: the regions of the world, solved period by period.

    :param name: (str) the scenario name
    :param context: (ModelContext) configuration, model time and marketplace.
        If None, a context is created with default settings.
    """
    def __init__(self, name='', context=None):
        self.name = name
        self.context = context or ModelContext()
        self.regions = []
        self.regionMap = {}
        self.solver = None
        self.converged = {}     # by period
        self.lastPeriod = -1

    def __str__(self):
        return "<Scenario %s>" % self.name

    @classmethod
    def fromFile(cls, filename, config=None):
        """
        Read a scenario from an XML file.

        :param filename: (str) the path to the XML file
        :param config: (ModelConfig) the model configuration; defaults are
            used if None
        :return: (Scenario) the initialized scenario
        """
        xmlFile = XMLFile(filename)
        return cls.fromElement(xmlFile.getRoot(), config=config)

    @classmethod
    def fromElement(cls, root, config=None):
        """
        Create a scenario from a parsed <scenario> element. Model time is read
        first since all per-period arrays are sized from it.
        """
        if root.tag != 'scenario':
            raise XmlFormatError('Expected <scenario> as root element, got <%s>' % root.tag)

        modeltime = Modeltime()
        node = root.find('modeltime')
        if node is not None:
            try:
                modeltime = Modeltime(startYear=int(node.get('start-year', 1975)),
                                      endYear=int(node.get('end-year', 2095)),
                                      timestep=int(node.get('timestep', 15)))
            except ValueError as e:
                raise XmlFormatError('Bad <modeltime> element: %s' % e)

        context = ModelContext(config=config or ModelConfig(), modeltime=modeltime)
        scenario = cls(name=root.get('name', ''), context=context)
        scenario.XMLParse(root)
        scenario.completeInit()
        return scenario

    def XMLParse(self, root):
        for child in childElements(root):
            if child.tag == 'modeltime':
                continue

            if child.tag == 'world':
                for node in childElements(child):
                    if node.tag == 'region':
                        self._parseRegion(node)
                    else:
                        _logger.warning("Unrecognized element <%s> found while parsing world", node.tag)
            else:
                _logger.warning("Unrecognized element <%s> found while parsing scenario", child.tag)

    def _parseRegion(self, node):
        name = node.get('name', '')
        region = self.regionMap.get(name) or self.addRegion(Region(self.context, name=name))
        region.XMLParse(node)

    def addRegion(self, region):
        name = region.getName()
        if name in self.regionMap:
            raise PyminicamException('Scenario already has a region named "%s"' % name)

        self.regions.append(region)
        self.regionMap[name] = region
        return region

    def getRegion(self, name):
        try:
            return self.regionMap[name]
        except KeyError:
            raise PyminicamException('Unknown region "%s"' % name)

    def completeInit(self):
        for region in self.regions:
            region.completeInit()

        self.solver = Solver(self.context, self.regions)

    def getModeltime(self):
        return self.context.modeltime

    def run(self, endYear=None):
        """
        Solve each period in turn through `endYear` (default: all periods).

        :param endYear: (int) the last year to solve
        :return: (bool) True if all periods converged
        """
        modeltime = self.context.modeltime
        endPeriod = modeltime.getmaxper() - 1 if endYear is None else modeltime.getyr_to_per(endYear)

        if self.solver is None:
            self.completeInit()

        for period in range(self.lastPeriod + 1, endPeriod + 1):
            self.converged[period] = self.solver.solve(period)
            self.lastPeriod = period

        return all(self.converged.values())

    def getResults(self):
        """
        Return a DataFrame with one row per region, sector and solved year,
        with columns region, sector, year, price, output, input.
        """
        modeltime = self.context.modeltime
        rows = []
        for region in self.regions:
            for sector in region.sectorOrder:
                for period in range(self.lastPeriod + 1):
                    rows.append({'region': region.getName(),
                                 'sector': sector.getName(),
                                 'year'  : modeltime.getper_to_yr(period),
                                 'price' : sector.sectorprice[period],
                                 'output': sector.getOutput(period),
                                 'input' : sector.input[period]})

        return pd.DataFrame(rows, columns=['region', 'sector', 'year', 'price', 'output', 'input'])

    def getEmissions(self):
        """
        Return a DataFrame of direct emissions with columns region, sector,
        year, gas, value.
        """
        modeltime = self.context.modeltime
        rows = []
        for region in self.regions:
            for sector in region.sectorOrder:
                for period in range(self.lastPeriod + 1):
                    for gas, value in sorted(sector.getemission(period).items()):
                        rows.append({'region': region.getName(),
                                     'sector': sector.getName(),
                                     'year'  : modeltime.getper_to_yr(period),
                                     'gas'   : gas,
                                     'value' : value})

        return pd.DataFrame(rows, columns=['region', 'sector', 'year', 'gas', 'value'])

    def getDrivers(self):
        """
        Return a DataFrame with columns region, year, gdp, population.
        """
        modeltime = self.context.modeltime
        rows = []
        for region in self.regions:
            gdp = region.gdp
            for period in range(self.lastPeriod + 1):
                rows.append({'region'    : region.getName(),
                             'year'      : modeltime.getper_to_yr(period),
                             'gdp'       : gdp.getGDP(period),
                             'population': gdp.getPopulation(period)})

        return pd.DataFrame(rows, columns=['region', 'year', 'gdp', 'population'])

    def writeDependencyGraph(self, stream, year):
        period = self.context.modeltime.getyr_to_per(year)
        for region in self.regions:
            region.printGraph(stream, period)
