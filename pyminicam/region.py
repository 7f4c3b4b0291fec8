'''
.. A region: sectors, resources and final demands solved together.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .demand import FinalDemand
from .error import PyminicamException
from .gdp import GDP
from .log import getLogger
from .resource import FixedPriceResource
from .sector import Sector
from .subsector import CO2, CO2_COEF
from .summary import Summary, TOTAL
from .utils import periodArray, fillForward, replaceSpaces
from .XMLFile import childElements, insertValueIntoVector, getValueFloat

_logger = getLogger(__name__)

class Region(object):
    """
    Owns the supply sectors, resources and final demands of one region and
    performs one solver iteration over them per call to :py:meth:`calc`.
    Sectors are calculated in dependency order, so each sector's inputs are
    priced before the sector itself.

    :param context: (ModelContext) configuration, model time and marketplace
    :param name: (str) the region name
    """
    def __init__(self, context, name=''):
        self.context = context
        self.name = name
        self.gdp = GDP(context.modeltime)

        maxper = context.getmaxper()
        self.carbonTax = periodArray(maxper)
        self._carbonTaxSet = periodArray(maxper, fill=False, dtype=bool)

        self.supplySectors = []
        self.sectorNameMap = {}
        self.sectorOrder = []
        self.resources = []
        self.demands = []
        self.primaryFuelCO2Coef = {}    # CO2 per unit of primary fuel, by fuel
        self.summary = [Summary() for _ in range(maxper)]

    def __str__(self):
        return "<Region %s>" % self.name

    def getName(self):
        return self.name

    @property
    def marketplace(self):
        return self.context.marketplace

    #
    # Construction
    #
    def addSector(self, sector):
        name = sector.getName()
        if name in self.sectorNameMap:
            raise PyminicamException('Region %s already has a sector named "%s"' % (self.name, name))

        self.sectorNameMap[name] = sector
        self.supplySectors.append(sector)
        return sector

    def getSector(self, name):
        try:
            return self.sectorNameMap[name]
        except KeyError:
            raise PyminicamException('Region %s has no sector named "%s"' % (self.name, name))

    def addResource(self, resource):
        self.resources.append(resource)
        return resource

    def addDemand(self, demand):
        self.demands.append(demand)
        return demand

    def setCarbonTax(self, period, value):
        self.carbonTax[period] = value
        self._carbonTaxSet[period] = True

    def setPrimaryFuelCO2Coef(self, fuelName, value):
        self.primaryFuelCO2Coef[fuelName] = value

    def XMLParse(self, node):
        self.name = node.get('name', self.name)
        modeltime = self.context.modeltime

        for child in childElements(node):
            tag = child.tag
            name = child.get('name', '')

            if tag == 'GDP':
                self.gdp.XMLParse(child)

            elif tag == 'resource':
                resource = FixedPriceResource(self.name, self.context, name=name)
                resource.XMLParse(child)
                self.addResource(resource)

            elif tag == 'carbon-tax':
                for price in childElements(child):
                    insertValueIntoVector(price, self.carbonTax, modeltime, self._carbonTaxSet)

            elif tag == 'primary-fuel-CO2-coef':
                self.setPrimaryFuelCO2Coef(name, getValueFloat(child))

            elif tag == 'supplysector':
                sector = self.sectorNameMap.get(name) or self.addSector(Sector(self.name, self.context, name=name))
                sector.XMLParse(child)

            elif tag == 'final-demand':
                demand = FinalDemand(self.name, self.context, name=name)
                demand.XMLParse(child)
                self.addDemand(demand)

            else:
                _logger.warning("Unrecognized element <%s> found while parsing region %s", tag, self.name)

    def completeInit(self):
        self.gdp.completeInit()
        fillForward(self.carbonTax, self._carbonTaxSet)
        self.marketplace.createMarket(self.name, self.name, CO2)

        for resource in self.resources:
            resource.completeInit()

        for sector in self.supplySectors:
            sector.completeInit()

        for demand in self.demands:
            demand.completeInit()

        self.setupForSort()

    #
    # Sector ordering
    #
    def getSectorDependencies(self, sectorName):
        """
        Return the dependencies of the named sector, or an empty list if the
        name is not a sector in this region (e.g., a resource).
        """
        sector = self.sectorNameMap.get(sectorName)
        return sector.getInputDependencies(self) if sector else []

    def findSimuls(self):
        """
        Find cycles among sector inputs and record each edge that closes one
        as a simultaneity on both sectors involved.
        """
        state = {}      # 1 => on the current path, 2 => finished

        def visit(sector):
            name = sector.getName()
            state[name] = 1
            for inputName in sector.getInputNames():
                other = self.sectorNameMap.get(inputName)
                if other is None or inputName in sector.simulList:
                    continue

                if state.get(inputName) == 1:
                    _logger.warning("Sectors %s and %s in region %s depend on each other; treating as simultaneous",
                                    name, inputName, self.name)
                    sector.addSimul(inputName)
                    other.addSimul(name)

                elif inputName not in state:
                    visit(other)

            state[name] = 2

        for sector in self.supplySectors:
            if sector.getName() not in state:
                visit(sector)

    def setupForSort(self):
        """
        Order the sectors so each one follows the sectors it depends on,
        otherwise keeping the order in which they were defined.
        """
        self.findSimuls()

        for sector in self.supplySectors:
            sector.setupForSort(self)

        ordered = []
        placed = set()
        remaining = list(self.supplySectors)

        while remaining:
            for sector in remaining:
                if all(dep in placed or dep not in self.sectorNameMap for dep in sector.getDependsList()):
                    break
            else:
                _logger.error("Unable to order sectors %s in region %s", [s.getName() for s in remaining], self.name)
                ordered.extend(remaining)
                break

            ordered.append(sector)
            placed.add(sector.getName())
            remaining.remove(sector)

        self.sectorOrder = ordered
        _logger.debug("Sector order for %s: %s", self.name, [s.getName() for s in ordered])

    def getSectorOrder(self):
        return [sector.getName() for sector in self.sectorOrder]

    def printSectorDependencies(self, logger):
        logger.info('Region,%s', self.name)
        for sector in self.sectorOrder:
            sector.printSectorDependencies(logger)

    def printGraph(self, stream, period):
        """
        Write the sector dependency graph for `period` in Graphviz "dot" format.
        """
        stream.write('digraph %s {\n' % replaceSpaces(self.name))
        for sector in self.sectorOrder:
            sector.addToDependencyGraph(stream, period)
        stream.write('}\n')

    #
    # Calibration
    #
    def propagateCalibrations(self, period):
        """
        Where a sector's output is entirely calibrated or fixed, make the
        calibrated inputs of the sectors consuming its good consistent with
        it: a single unfixed consumer is calibrated to take up the remainder,
        or fully fixed consumers are scaled.
        """
        tiny = self.context.config.tinyNumber

        for sector in self.sectorOrder:
            good = sector.getName()
            if sector.getCalOutput(period) <= 0 or not sector.outputsAllFixed(period):
                continue

            goodDemands = [d for d in self.demands if d.getName() == good]
            if any(not d.serviceSet[period] for d in goodDemands):
                continue

            consumers = [s for s in self.sectorOrder if good in s.getInputNames()]
            if not consumers:
                continue

            required = sector.getCalAndFixedOutputs(period, good) - sum(d.getService(period) for d in goodDemands)
            fixedInputs = sum(s.getCalAndFixedInputs(period, good) for s in consumers)
            unfixed = [s for s in consumers if not s.inputsAllFixed(period, good)]

            if len(unfixed) == 1 and required - fixedInputs > tiny:
                unfixed[0].setImpliedFixedInput(period, good, required - fixedInputs)

            elif not unfixed and fixedInputs > 0 and required > 0 and abs(required - fixedInputs) > tiny:
                _logger.info("Scaling calibrated inputs of %s in %s by %.4g", good, self.name, required / fixedInputs)
                for consumer in consumers:
                    consumer.scaleCalibratedValues(period, good, required / fixedInputs)

    def calibrateSectors(self, period):
        for sector in self.sectorOrder:
            sector.calibrateSector(period)

    def isAllCalibrated(self, period, calAccuracy, printWarnings=False):
        results = [sector.isAllCalibrated(period, calAccuracy, printWarnings) for sector in self.sectorOrder]
        return all(results)

    #
    # GDP
    #
    def calcGDP(self, period):
        return self.gdp.calcGDP(period, self.context.config.calibrationActive)

    def getEndUseServicePrice(self, period):
        """
        Return the price of final demand goods in `period`, weighted by each
        good's share of base period service.
        """
        total = sum(demand.getService(0) for demand in self.demands)
        if total <= 0:
            return 0.0

        marketplace = self.marketplace
        return sum(demand.getService(0) / total * marketplace.getPrice(demand.getName(), self.name, period)
                   for demand in self.demands)

    def adjustGDP(self, period):
        """
        Adjust GDP for the change in end-use service price since the previous
        period. Calibrated GDP is not adjusted.
        """
        if period == 0 or self.gdp.isCalibrated(period, self.context.config.calibrationActive):
            return

        prevPrice = self.getEndUseServicePrice(period - 1)
        ratio = self.getEndUseServicePrice(period) / prevPrice if prevPrice > 0 else 1.0
        self.gdp.adjustGDP(period, ratio)

    #
    # Primary fuel emissions
    #
    def setCO2CoefsIntoMarketplace(self, period):
        for fuelName, coef in self.primaryFuelCO2Coef.items():
            if not self.marketplace.doesMarketExist(fuelName, self.name, period):
                _logger.warning("No market for primary fuel %s in %s; CO2 coefficient ignored", fuelName, self.name)
                continue

            self.marketplace.setMarketInfo(fuelName, self.name, period, CO2_COEF, coef)

    def calcEmissFuel(self, period):
        """
        Compute CO2 emissions from the consumption of each primary fuel.
        """
        summary = self.summary[period]
        emissions = {fuelName: coef * summary.get_fmap_second(fuelName)
                     for fuelName, coef in self.primaryFuelCO2Coef.items()}
        emissions[TOTAL] = sum(emissions.values())

        summary.clearemissfuel()
        summary.updateemissfuel(emissions)

    #
    # Calculation
    #
    def initCalc(self, period):
        self.calcGDP(period)
        self.marketplace.setPrice(CO2, self.name, self.carbonTax[period], period)

        for resource in self.resources:
            resource.initCalc(period)

        self.setCO2CoefsIntoMarketplace(period)

        for sector in self.sectorOrder:
            sector.initCalc(period)
            sector.checkSectorCalData(period)

        if self.context.config.calibrationActive:
            self.propagateCalibrations(period)

        for sector in self.sectorOrder:
            sector.tabulateFixedDemands(period)

    def calc(self, period):
        """
        Perform one iteration: price every sector in dependency order, adjust
        GDP for the new prices, add final demands, then supply every sector
        in reverse order so that
        each sector's demand for its inputs is known before they are supplied.
        """
        marketplace = self.marketplace
        gdp = self.gdp

        marketplace.nullSupplies(period)

        for sector in self.sectorOrder:
            sector.calcFinalSupplyPrice(gdp, period)

        self.adjustGDP(period)
        marketplace.nullDemands(period)

        for demand in self.demands:
            demand.calc(period, gdp)

        for sector in reversed(self.sectorOrder):
            sector.supply(period, gdp)
            sector.setFinalSupply(period)

        for resource in self.resources:
            resource.calc(period)

    def postCalc(self, period):
        """
        Compute summaries and emissions once `period` is solved.
        """
        for sector in self.sectorOrder:
            sector.updateSummary(period)
            sector.emission(period)

        coefs = [sector.getIndirectEmissCoef(period) for sector in self.sectorOrder]
        for sector in self.sectorOrder:
            sector.indemission(period, coefs)

        self.updateSummary(period)

    def updateSummary(self, period):
        summary = self.summary[period]
        summary.clearfuelcons()
        summary.clearemiss()
        summary.clearemfuelmap()
        summary.clearemindmap()

        for sector in self.sectorOrder:
            summary.updatefuelcons(sector.getfuelcons(period))
            summary.updateemiss(sector.getemission(period))
            summary.updateemfuelmap(sector.getemfuelmap(period))
            summary.updateemindmap(sector.getemindmap(period))

        self.calcEmissFuel(period)

    def getSummary(self, period):
        return self.summary[period]
