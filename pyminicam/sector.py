'''
.. The supply sector: shares, prices, and outputs of competing subsectors.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from .emissions import IndirectEmissCoef
from .error import PyminicamException
from .log import getLogger
from .subsector import Subsector, CapLimitStatus
from .summary import Summary, TOTAL
from .utils import periodArray, isValidNumber, replaceSpaces
from .XMLFile import childElements, getValueString, insertValueIntoVector

_logger = getLogger(__name__)

# Dependency graph edges below this value are omitted
DISPLAY_THRESHOLD = 0.00001
DISPLAY_PRECISION = 2

# Edge values at which the line style changes
DOTTED_LEVEL = 1.0
DASHED_LEVEL = 5.0
LINE_LEVEL   = 10.0

SUPPLY_TOLERANCE = 0.01

class Sector(object):
    """
    A sector produces one good, sharing its output among subsectors
    according to their relative costs, fixed outputs, and capacity limits.
    The sector reads the demand for its good from the marketplace and
    publishes its price and supply there.

    :param regionName: (str) the name of the containing region
    :param context: (ModelContext) configuration, model time and marketplace
    :param name: (str) the name of the sector and of the good it produces
    """
    def __init__(self, regionName, context, name=''):
        self.regionName = regionName
        self.context = context
        self.config  = context.config
        self.debugChecking = context.config.debugChecking
        self.name   = name
        self.market = ''
        self.unit   = ''

        maxper = context.getmaxper()
        self.sectorprice = periodArray(maxper)
        self.output      = periodArray(maxper)
        self.input       = periodArray(maxper)
        self.fixedOutput = periodArray(maxper)
        self.capLimitsPresent = periodArray(maxper, fill=False, dtype=bool)
        self.summary = [Summary() for _ in range(maxper)]

        self.subsec = []
        self.subSectorNameMap = {}
        self.simulList   = []
        self.dependsList = []

        self.anyFixedCapacity = False
        self.CO2EmFactor = 0.0

    def __str__(self):
        return "<Sector %s in %s>" % (self.name, self.regionName)

    @property
    def marketplace(self):
        return self.context.marketplace

    @property
    def nosubsec(self):
        return len(self.subsec)

    def getName(self):
        return self.name

    def getRegionName(self):
        return self.regionName

    def getMarketName(self):
        return self.market

    def clear(self):
        self.subsec = []
        self.subSectorNameMap = {}

    #
    # Construction
    #
    def addSubsector(self, subsector):
        """
        Add a subsector, which becomes owned by this sector.

        :raises PyminicamException: if a subsector with the same name exists
        """
        name = subsector.getName()
        if name in self.subSectorNameMap:
            raise PyminicamException('Sector %s in %s already has a subsector named "%s"' % (self.name, self.regionName, name))

        self.subSectorNameMap[name] = len(self.subsec)
        self.subsec.append(subsector)
        return subsector

    def getSubsector(self, name):
        index = self.subSectorNameMap.get(name)
        if index is None:
            raise PyminicamException('Sector %s in %s has no subsector named "%s"' % (self.name, self.regionName, name))

        return self.subsec[index]

    def XMLParse(self, node):
        """
        Set data members from a <supplysector> element. A subsector element
        naming an existing subsector updates it rather than adding another.
        """
        self.name = node.get('name', self.name)
        modeltime = self.context.modeltime

        for child in childElements(node):
            tag = child.tag

            if tag == 'market':
                self.market = getValueString(child)

            elif tag == 'unit':
                self.unit = getValueString(child)

            elif tag == 'price':
                insertValueIntoVector(child, self.sectorprice, modeltime)

            elif tag == 'output':
                insertValueIntoVector(child, self.output, modeltime)

            elif tag == 'subsector':
                subName = child.get('name', '')
                if subName in self.subSectorNameMap:
                    subsector = self.subsec[self.subSectorNameMap[subName]]
                else:
                    subsector = self.addSubsector(Subsector(self.regionName, self.name, self.context, name=subName))
                subsector.XMLParse(child)

            else:
                _logger.warning("Unrecognized element <%s> found while parsing sector %s", tag, self.name)

    def completeInit(self):
        """
        Complete initialization once all input has been read: bind the
        market name and create the market for this sector's good.
        """
        if not self.market:
            _logger.info("No market name set in %s->%s. Defaulting to regional market.", self.regionName, self.name)
            self.market = self.regionName

        for subsector in self.subsec:
            subsector.completeInit()

        self.setMarket()

    def setMarket(self):
        if self.marketplace.createMarket(self.regionName, self.market, self.name):
            # Use a read-in base year price, if any, as the initial price
            for period, price in enumerate(self.sectorprice):
                if price:
                    self.marketplace.setPrice(self.name, self.regionName, price, period)

    def initCalc(self, period):
        # share weights must be normalized before subsectors are initialized
        self.normalizeShareWeights(period)

        for subsector in self.subsec:
            subsector.initCalc(period)

        if self.getFixedOutput(period) > 0:
            self.anyFixedCapacity = True

        self.capLimitsPresent[period] = self.isCapacityLimitsInSector(period)

    #
    # Shares
    #
    def calcShare(self, period, gdp=None):
        """
        Calculate normalized subsector shares for `period`. Subsectors with
        no fixed output divide whatever part of the market is not fixed in
        proportion to their unnormalized shares; subsectors with fixed output
        are set to their fixed share. Capacity limits are applied last.

        :param period: (int) the model period
        :param gdp: (GDP) used for subsectors with a fuel preference elasticity
        :return: none
        """
        tiny = self.config.tinyNumber
        total = 0.0
        fixedSum = 0.0

        for i, subsector in enumerate(self.subsec):
            subsector.calcShare(period, gdp)

            fixedShare = 0.0
            if self.anyFixedCapacity:
                fixedShare = self.getFixedShare(i, period)
                fixedSum += fixedShare

            if fixedShare < tiny:
                total += subsector.getShare(period)

            subsector.setCapLimitStatus(CapLimitStatus.UNLIMITED, period)

        # fixed demands cannot sum to more than the total demand
        scaleFixedShare = 1.0
        if fixedSum > 1:
            scaleFixedShare = 1 / fixedSum
            fixedSum = 1.0

        for i, subsector in enumerate(self.subsec):
            if subsector.getFixedOutput(period) == 0:
                if fixedSum < 1:
                    subsector.normShare(total / (1 - fixedSum), period)
                else:
                    subsector.normShare(total / tiny, period)
            else:
                fixedShare = self.getFixedShare(i, period) * scaleFixedShare
                currentShare = subsector.getFixedShare(period)

                subsector.setShareToFixedValue(period)
                if currentShare > 0:
                    subsector.scalefixedOutput(fixedShare / currentShare, period)
                subsector.setShareToFixedValue(period)

        if self.capLimitsPresent[period]:
            self.adjSharesCapLimit(period)

        if self.debugChecking:
            self.checkShareSum(period)

    def adjSharesCapLimit(self, period):
        """
        Shift share in excess of subsector capacity limits to subsectors that
        are under their limits. Since the shift can push another subsector over
        its limit, this is repeated up to once per subsector. Subsectors with
        fixed output are not adjusted.

        If newS[i] = a * S[i] for the unlimited subsectors, the shares still sum
        to 1 when a = 1 + sumSharesOverLimit / sumSharesNotLimited.

        :param period: (int) the model period
        :return: (bool) True if no subsector remains over its limit
        """
        smallNumber = self.config.smallNumber
        capLimited = True

        for _ in range(self.nosubsec):
            if not capLimited:
                break

            sumSharesOverLimit  = 0.0
            sumSharesNotLimited = 0.0
            capLimited = False

            for subsector in self.subsec:
                # fixed shares are set by fixed output and never capped or scaled
                if subsector.getFixedShare(period) > 0:
                    continue

                share  = subsector.getShare(period)
                status = subsector.getCapLimitStatus(period)

                # the transform can be applied only once
                if status == CapLimitStatus.APPLIED:
                    continue

                # only a share above the declared limit is capped
                capLimit = subsector.getCapacityLimit(period)
                if share - capLimit > smallNumber:
                    capLimited = True
                    sumSharesOverLimit += share - Subsector.capLimitTransform(capLimit, share, smallNumber)
                    subsector.setCapLimitStatus(CapLimitStatus.PENDING, period)

                elif share < capLimit:
                    sumSharesNotLimited += share

            if capLimited:
                if sumSharesNotLimited > 0:
                    multiplier = 1 + sumSharesOverLimit / sumSharesNotLimited
                    for subsector in self.subsec:
                        subsector.limitShares(multiplier, period)

                elif sumSharesOverLimit > 0:
                    _logger.error("%s: Insufficient capacity to meet demand in sector %s", self.regionName, self.name)
                    break

        if capLimited:
            _logger.error("Capacity limit not resolved in sector %s in %s", self.name, self.regionName)

        return not capLimited

    def checkShareSum(self, period):
        """
        Log an error if shares do not sum to 1.
        """
        sumShares = 0.0
        for subsector in self.subsec:
            share = subsector.getShare(period)
            assert isValidNumber(share), "Share of %s is not a valid number: %s" % (subsector.getName(), share)
            sumShares += share

        if abs(sumShares - 1) > self.config.smallNumber:
            shares = ', '.join('%s' % sub.getShare(period) for sub in self.subsec)
            _logger.error("Shares do not sum to 1. Sum = %s in sector %s, region %s. Shares: %s",
                          sumShares, self.name, self.regionName, shares)

    def getFixedShare(self, subsectorNum, period):
        """
        Return the stored fixed share of the given subsector, or its fixed
        output divided by the market demand for this sector's good when that
        demand is available.
        """
        if not 0 <= subsectorNum < self.nosubsec:
            _logger.error("Illegal subsector number: %d", subsectorNum)
            return 0.0

        subsector = self.subsec[subsectorNum]
        fixedShare = subsector.getFixedShare(period)
        if fixedShare > 0:
            demand = self.marketplace.getDemand(self.name, self.regionName, period)
            if demand > 0:
                fixedShare = subsector.getFixedOutput(period) / demand

        return fixedShare

    def isCapacityLimitsInSector(self, period):
        if period < 0:
            return False

        return any(subsector.getCapacityLimit(period) != 1 for subsector in self.subsec)

    #
    # Fixed output and calibration
    #
    def adjustForFixedOutput(self, marketDemand, period):
        """
        Determine the total fixed output of this sector and adjust the other
        shares to fill the rest of `marketDemand`. If fixed output exceeds
        demand, all fixed outputs are scaled down so their total equals the
        demand. Each subsector's fixed share is set as a side effect.

        :param marketDemand: (float) demand for the good produced by this sector
        :param period: (int) the model period
        :return: (float) the total fixed output
        """
        totalfixedOutput = 0.0
        variableShares = 0.0      # original sum of shares of non-fixed subsectors

        for subsector in self.subsec:
            subsector.resetfixedOutput(period)
            fixed = subsector.getFixedOutput(period)
            subsector.setFixedShare(period, 0.0)

            if fixed == 0:
                variableShares += subsector.getShare(period)
            elif marketDemand != 0:
                subsector.setFixedShare(period, min(fixed / marketDemand, 1.0))

            totalfixedOutput += fixed

        if totalfixedOutput > marketDemand:
            for subsector in self.subsec:
                subsector.scalefixedOutput(marketDemand / totalfixedOutput, period)
            totalfixedOutput = marketDemand

        if totalfixedOutput > 0:
            if totalfixedOutput > marketDemand:
                variableSharesNew = 0.0
            else:
                variableSharesNew = 1 - totalfixedOutput / marketDemand

            # all subsectors have fixed output
            shareRatio = 0.0 if variableShares == 0 else variableSharesNew / variableShares

            for subsector in self.subsec:
                subsector.adjShares(marketDemand, shareRatio, totalfixedOutput, period)

        self.fixedOutput[period] = totalfixedOutput
        return totalfixedOutput

    def getFixedOutput(self, period, printValues=False):
        total = 0.0
        for i, subsector in enumerate(self.subsec):
            value = subsector.getFixedOutput(period)
            total += value
            if printValues:
                _logger.debug("subsector[%d] %s fixed output: %s", i, subsector.getName(), value)

        return total

    def getCalOutput(self, period):
        """
        Return the total calibrated output of all subsectors, which excludes
        outputs that are otherwise fixed.
        """
        return sum(subsector.getTotalCalOutputs(period) for subsector in self.subsec)

    def getCalAndFixedInputs(self, period, goodName, bothVals=True):
        """
        Return the total calibrated (and if `bothVals`, fixed) input of
        `goodName`, or of all inputs if `goodName` is "allInputs".
        """
        return sum(subsector.getCalAndFixedInputs(period, goodName, bothVals) for subsector in self.subsec)

    def getCalAndFixedOutputs(self, period, goodName, bothVals=True):
        return sum(subsector.getCalAndFixedOutputs(period, goodName, bothVals) for subsector in self.subsec)

    def setImpliedFixedInput(self, period, goodName, requiredInput):
        """
        Set the calibrated input of `goodName` needed to consume `requiredInput`.
        Normally a single subsector is changed.
        """
        inputWasChanged = False
        for subsector in self.subsec:
            changed = subsector.setImpliedFixedInput(period, goodName, requiredInput)
            if changed and inputWasChanged:
                _logger.info("Calibrated demands for more than one subsector were changed in sector %s in region %s",
                             self.name, self.regionName)
            inputWasChanged = inputWasChanged or changed

        return inputWasChanged

    def inputsAllFixed(self, period, goodName):
        """
        Return True if every subsector's input of `goodName` is fixed, by
        fixed output, calibration, or a zero share weight.
        """
        return all(subsector.inputsAllFixed(period, goodName) for subsector in self.subsec)

    def outputsAllFixed(self, period):
        if period < 0:
            return False

        return all(subsector.allOutputFixed(period) for subsector in self.subsec)

    def scaleCalibratedValues(self, period, goodName, scaleValue):
        for subsector in self.subsec:
            subsector.scaleCalibratedValues(period, goodName, scaleValue)

    def calibrateSector(self, period):
        """
        Adjust share weights of calibrated subsectors toward their calibrated
        outputs, given the current demand for this sector's good.
        """
        totalfixedOutput = self.getFixedOutput(period)
        demand = self.marketplace.getDemand(self.name, self.regionName, period)
        totalCalOutputs = self.getCalOutput(period)
        allFixed = self.outputsAllFixed(period)

        for subsector in self.subsec:
            if subsector.getCalibrationStatus(period):
                subsector.adjustForCalibration(demand, totalfixedOutput, totalCalOutputs, allFixed, period)

    def normalizeShareWeights(self, period):
        """
        If the previous period was fully calibrated or fixed, scale its share
        weights so they sum to the number of subsectors with non-zero weights.
        """
        if period <= 0 or not self.config.calibrationActive:
            return

        prev = period - 1
        if not (self.inputsAllFixed(prev, self.name) and self.getCalOutput(prev) > 0):
            return

        weights = [subsector.getShareWeight(prev) for subsector in self.subsec]
        total = sum(weights)
        nonZero = len([w for w in weights if w > 0])

        if total < self.config.tinyNumber:
            _logger.error("In sector %s, share weights sum to zero.", self.name)
            return

        for subsector in self.subsec:
            subsector.scaleShareWeight(nonZero / total, prev)

        _logger.debug("Share weights normalized for sector %s in region %s", self.name, self.regionName)

    def isAllCalibrated(self, period, calAccuracy, printWarnings=False):
        """
        Compare the sum of calibrated and fixed outputs with the sector output.
        A mismatch fails the check if calibrated plus fixed output exceeds the
        actual output by more than `calAccuracy`, or, when every output is fixed,
        if the fractional difference exceeds `calAccuracy`.

        :param period: (int) the model period
        :param calAccuracy: (float) the tolerance
        :param printWarnings: (bool) if True, log a warning on failure
        :return: (bool) True if calibration is within tolerance
        """
        if period <= 0 or not self.config.calibrationActive:
            return True

        calOutputs = self.getCalOutput(period)
        if calOutputs <= 0:
            return True

        totalFixed = calOutputs + self.getFixedOutput(period)
        calDiff = totalFixed - self.getOutput(period)
        diffFraction = calDiff / calOutputs

        if calDiff > calAccuracy or (abs(diffFraction) > calAccuracy and self.outputsAllFixed(period)):
            if printWarnings:
                year = self.context.modeltime.getper_to_yr(period)
                _logger.warning("%s in %s != cal+fixed vals (%s) in yr %d by: %s (%.4g%%)",
                                self.name, self.regionName, totalFixed, year, calDiff, calDiff * 100 / calOutputs)
            return False

        return True

    def checkSectorCalData(self, period):
        for subsector in self.subsec:
            subsector.checkSubSectorCalData(period)

    def tabulateFixedDemands(self, period):
        for subsector in self.subsec:
            subsector.tabulateFixedDemands(period)

    #
    # Price and supply
    #
    def calcPrice(self, period):
        """
        Set the sector price to the share-weighted average of subsector prices,
        and the CO2 emission factor likewise.
        """
        price = 0.0
        CO2EmFactor = 0.0
        for subsector in self.subsec:
            share = subsector.getShare(period)
            price += share * subsector.getPrice(period)
            CO2EmFactor += share * subsector.getCO2EmFactor(period)

        self.sectorprice[period] = price
        self.CO2EmFactor = CO2EmFactor

        if self.marketplace.doesMarketExist(self.name, self.regionName, period):
            self.marketplace.setMarketInfo(self.name, self.regionName, period, 'CO2EmFactor', CO2EmFactor)

    def calcFinalSupplyPrice(self, gdp, period):
        self.calcShare(period, gdp)
        self.calcPrice(period)
        self.marketplace.setPrice(self.name, self.regionName, self.sectorprice[period], period)

    def getPrice(self, period):
        self.calcPrice(period)
        return self.sectorprice[period]

    def supply(self, period, gdp=None):
        """
        Distribute the market demand for this sector's good among the
        subsectors, adjusting shares first for any fixed output.
        """
        demand = self.marketplace.getDemand(self.name, self.regionName, period)
        if demand < 0:
            _logger.error("Demand value < 0 for good %s in region %s", self.name, self.regionName)

        if self.anyFixedCapacity:
            self.adjustForFixedOutput(demand, period)

        for subsector in self.subsec:
            subsector.setoutput(demand, period, gdp)

        if self.debugChecking:
            supply = self.updateAndGetOutput(period)
            if period > 0 and abs(supply - demand) > SUPPLY_TOLERANCE:
                _logger.warning("%s market %s demand and derived supply are not equal by %s: S: %s D: %s",
                                self.regionName, self.name, abs(supply - demand), supply, demand)

    def setoutput(self, demand, period, gdp=None):
        for subsector in self.subsec:
            subsector.setoutput(demand, period, gdp)

    def setFinalSupply(self, period):
        supply = self.updateAndGetOutput(period)
        self.marketplace.addToSupply(self.name, self.regionName, supply, period)

    def sumOutput(self, period):
        total = 0.0
        for i, subsector in enumerate(self.subsec):
            value = subsector.getOutput(period)
            if not isValidNumber(value):
                _logger.error("Output for subsector %d (%s) is not valid, with value %s in sector %s, region %s",
                              i, subsector.getName(), value, self.name, self.regionName)
            total += value

        self.output[period] = total

    def updateAndGetOutput(self, period):
        # a read-in output for period 0 is not replaced by the sum
        if period > 0 or self.output[period] == 0:
            self.sumOutput(period)

        return self.output[period]

    def getOutput(self, period):
        return self.output[period]

    def sumInput(self, period):
        self.input[period] = sum(subsector.getInput(period) for subsector in self.subsec)

    def getInput(self, period):
        self.sumInput(period)
        return self.input[period]

    def getEnergyInput(self, period):
        return self.getInput(period)

    #
    # Emissions and summaries
    #
    def emission(self, period):
        summary = self.summary[period]
        summary.clearemiss()
        summary.clearemfuelmap()
        for subsector in self.subsec:
            subsector.emission(period)
            summary.updateemiss(subsector.getemission(period))
            summary.updateemfuelmap(subsector.getemfuelmap(period))

    def indemission(self, period, emcoefInd):
        summary = self.summary[period]
        summary.clearemindmap()
        for subsector in self.subsec:
            subsector.indemission(period, emcoefInd)
            summary.updateemindmap(subsector.getemindmap(period))

    def getIndirectEmissCoef(self, period):
        return IndirectEmissCoef(self.name, self.getemission(period), self.getOutput(period))

    def getTotalCarbonTaxPaid(self, period):
        return sum(subsector.getTotalCarbonTaxPaid(period) for subsector in self.subsec)

    def getfuelcons(self, period):
        return self.summary[period].getfuelcons()

    def getConsByFuel(self, period, fuelName):
        return self.summary[period].get_fmap_second(fuelName)

    def clearfuelcons(self, period):
        self.summary[period].clearfuelcons()

    def getemission(self, period):
        return self.summary[period].getemission()

    def getemfuelmap(self, period):
        return self.summary[period].getemfuelmap()

    def getemindmap(self, period):
        return self.summary[period].getemindmap()

    def updateSummary(self, period):
        summary = self.summary[period]
        summary.clearfuelcons()
        for subsector in self.subsec:
            subsector.updateSummary(period)
            summary.updatefuelcons(subsector.getfuelcons(period))

        # reporting only
        self.input[period] = summary.get_fmap_second(TOTAL)

    #
    # Dependencies
    #
    def addSimul(self, sectorName):
        """
        Record that this sector is solved simultaneously with `sectorName`,
        so the latter is not treated as an ordering dependency.
        """
        if sectorName not in self.simulList:
            self.simulList.append(sectorName)

    def getInputNames(self):
        names = []
        for subsector in self.subsec:
            fuel = subsector.getFuelName()
            if fuel and fuel != TOTAL and fuel not in names:
                names.append(fuel)

        return names

    def getInputDependencies(self, region):
        """
        Return the names of all goods this sector depends on, including the
        inputs of its inputs, but excluding those it is simultaneous with.

        :param region: (Region) the containing region
        :return: (list of str) the dependencies
        """
        depends = []
        for inputName in self.getInputNames():
            if inputName in self.simulList:
                continue

            if inputName not in depends:
                depends.append(inputName)

            for name in region.getSectorDependencies(inputName):
                if name not in depends:
                    depends.append(name)

        return depends

    def setupForSort(self, region):
        self.dependsList = sorted(self.getInputDependencies(region))

    def getDependsList(self):
        return self.dependsList

    def printSectorDependencies(self, logger):
        logger.info(',%s,%s', self.name, ''.join(dep + ',' for dep in self.dependsList))

    def addToDependencyGraph(self, stream, period):
        """
        Write this sector's input edges for `period` in Graphviz "dot"
        format. Line styles indicate the size of the flow (or price).
        """
        sectorName = replaceSpaces(self.name)
        self.printStyle(stream)

        config = self.config
        for fuelName, quantity in self.getfuelcons(period).items():
            if fuelName == TOTAL:
                continue

            if config.printPrices:
                value = self.marketplace.getPrice(fuelName, self.regionName, period)
            else:
                value = quantity

            if value <= DISPLAY_THRESHOLD and not config.showNullPaths:
                continue

            if value < DOTTED_LEVEL:
                style = 'dotted'
            elif value < DASHED_LEVEL:
                style = 'dashed'
            elif value < LINE_LEVEL:
                style = ''
            else:
                style = 'bold'

            attrs = 'style="%s"' % style
            if config.printValuesOnGraphs:
                attrs += ',label="%.*f"' % (DISPLAY_PRECISION, value)

            stream.write('\t%s -> %s [%s];\n' % (replaceSpaces(fuelName), sectorName, attrs))

    def printStyle(self, stream):
        stream.write('\t%s [shape=box];\n' % replaceSpaces(self.name))
