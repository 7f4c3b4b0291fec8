'''
.. Subsectors: the competing alternatives that share a sector's output.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
from enum import Enum

from .log import getLogger
from .summary import TOTAL
from .utils import periodArray, fillForward, isValidNumber, SMALL_NUMBER
from .XMLFile import childElements, insertValueIntoVector, getValueString, getValueFloat

_logger = getLogger(__name__)

CO2 = 'CO2'
ALL_INPUTS = 'allInputs'

# Market info item holding the CO2 coefficient of a primary fuel
CO2_COEF = 'CO2Coef'

# Exponent of the smooth minimum used to approach a capacity limit
CAP_LIMIT_EXPONENT = 8

DEFAULT_LOGIT_EXPONENT = -3.0

class CapLimitStatus(Enum):
    UNLIMITED = 0
    PENDING   = 1   # over the limit in the current pass, not yet applied
    APPLIED   = 2   # capped for the remainder of the share calculation


class Subsector(object):
    """
    A subsector competes for a share of its sector's output on the basis of
    its price, share weight and logit exponent. It consumes a single fuel,
    converting it to the sector's good at the given efficiency, and may
    carry a fixed output, a calibrated output and a capacity limit.

    :param regionName: (str) the name of the containing region
    :param sectorName: (str) the name of the containing sector
    :param context: (ModelContext) configuration, model time and marketplace
    :param name: (str) the subsector name
    :param fuelName: (str) the name of the good consumed
    """
    def __init__(self, regionName, sectorName, context, name='', fuelName=''):
        self.regionName = regionName
        self.sectorName = sectorName
        self.context = context
        self.name = name
        self.fuelName = fuelName
        self.fuelPrefElasticity = 0.0
        self.emissCoefs = {}       # per unit of fuel input, by gas

        maxper = context.getmaxper()
        self.shareWeight     = periodArray(maxper, fill=1.0)
        self.logitExponent   = periodArray(maxper, fill=DEFAULT_LOGIT_EXPONENT)
        self.efficiency      = periodArray(maxper, fill=1.0)
        self.nonEnergyCost   = periodArray(maxper)
        self.capLimit        = periodArray(maxper, fill=1.0)
        self.fixedOutputBase = periodArray(maxper)
        self.fixedOutput     = periodArray(maxper)
        self.fixedShare      = periodArray(maxper)
        self.calOutput       = periodArray(maxper)
        self.share           = periodArray(maxper)
        self.price           = periodArray(maxper)
        self.output          = periodArray(maxper)
        self.input           = periodArray(maxper)
        self.capLimitStatus  = [CapLimitStatus.UNLIMITED] * maxper

        self.emissions       = [{} for _ in range(maxper)]   # by gas
        self.fuelEmissions   = [{} for _ in range(maxper)]   # by fuel
        self.indEmissions    = [{} for _ in range(maxper)]   # indirect, by gas
        self.fuelConsumption = [{} for _ in range(maxper)]

        # periods given explicitly in the input, for parameters carried forward
        self._specified = {}

    def __str__(self):
        return "<Subsector %s in %s/%s>" % (self.name, self.regionName, self.sectorName)

    def getName(self):
        return self.name

    def getFuelName(self):
        return self.fuelName

    @property
    def marketplace(self):
        return self.context.marketplace

    _paramTags = {
        'share-weight'   : 'shareWeight',
        'logit-exponent' : 'logitExponent',
        'efficiency'     : 'efficiency',
        'non-energy-cost': 'nonEnergyCost',
        'capacity-limit' : 'capLimit',
    }

    _quantityTags = {
        'fixed-output' : 'fixedOutputBase',
        'cal-output'   : 'calOutput',
    }

    def XMLParse(self, node):
        """
        Set data members from a <subsector> element.
        """
        self.name = node.get('name', self.name)
        modeltime = self.context.modeltime

        for child in childElements(node):
            tag = child.tag

            if tag == 'fuel':
                self.fuelName = getValueString(child)

            elif tag in self._paramTags:
                attr = self._paramTags[tag]
                specified = self._specified.setdefault(attr, periodArray(len(self.share), fill=False, dtype=bool))
                insertValueIntoVector(child, getattr(self, attr), modeltime, specified)

            elif tag in self._quantityTags:
                insertValueIntoVector(child, getattr(self, self._quantityTags[tag]), modeltime)

            elif tag == 'emissions-coef':
                gas = child.get('gas', CO2)
                self.emissCoefs[gas] = getValueFloat(child)

            elif tag == 'fuel-pref-elasticity':
                self.fuelPrefElasticity = getValueFloat(child)

            else:
                _logger.warning("Unrecognized element <%s> found while parsing subsector %s", tag, self.name)

    def completeInit(self):
        for attr, specified in self._specified.items():
            fillForward(getattr(self, attr), specified)

        for period, eff in enumerate(self.efficiency):
            if eff <= 0:
                _logger.error("Efficiency %s in period %d of subsector %s in sector %s is not positive; using 1",
                              eff, period, self.name, self.sectorName)
                self.efficiency[period] = 1.0

        self.fixedOutput[:] = self.fixedOutputBase

    def isSpecified(self, attr, period):
        """
        Return True if a value for `attr` in `period` was given in the input.
        """
        specified = self._specified.get(attr)
        return specified is not None and bool(specified[period])

    def initCalc(self, period):
        # carry a calibrated share weight into the next period unless one was given
        if (period > 0 and self.context.config.calibrationActive and self.calOutput[period - 1] > 0
                and not self.isSpecified('shareWeight', period)):
            self.shareWeight[period] = self.shareWeight[period - 1]

        self.resetfixedOutput(period)
        self.capLimitStatus[period] = CapLimitStatus.UNLIMITED

    #
    # Price and share
    #
    def getCarbonPrice(self, period):
        return self.marketplace.getPrice(CO2, self.regionName, period)

    def getCO2Coef(self, period):
        """
        Return CO2 emitted per unit of fuel input: this subsector's own
        coefficient if it has one, else the primary fuel coefficient
        published in the fuel's market.
        """
        if CO2 in self.emissCoefs:
            return self.emissCoefs[CO2]

        if not self.fuelName:
            return 0.0

        return self.marketplace.getMarketInfo(self.fuelName, self.regionName, period, CO2_COEF)

    def calcPrice(self, period):
        fuelPrice = self.marketplace.getPrice(self.fuelName, self.regionName, period) if self.fuelName else 0.0
        carbonCost = self.getCO2Coef(period) * self.getCarbonPrice(period)
        self.price[period] = self.nonEnergyCost[period] + (fuelPrice + carbonCost) / self.efficiency[period]

    def getPrice(self, period):
        return self.price[period]

    def getCO2EmFactor(self, period):
        """
        Return CO2 emitted per unit of this subsector's output.
        """
        return self.getCO2Coef(period) / self.efficiency[period]

    def calcShare(self, period, gdp):
        """
        Compute the price and the unnormalized share for `period`.
        A non-positive price leaves the share equal to the share weight.
        """
        self.calcPrice(period)
        price = self.price[period]
        share = self.shareWeight[period]

        if price > 0:
            share *= price ** self.logitExponent[period]

        if self.fuelPrefElasticity and gdp is not None:
            share *= gdp.getBestScaledGDPperCap(period) ** self.fuelPrefElasticity

        self.share[period] = share

    def getShare(self, period):
        return self.share[period]

    def normShare(self, total, period):
        self.share[period] = self.share[period] / total if total != 0 else 0.0

    def getShareWeight(self, period):
        return self.shareWeight[period]

    def scaleShareWeight(self, scaleValue, period):
        self.shareWeight[period] *= scaleValue

    #
    # Fixed output
    #
    def getFixedOutput(self, period):
        return self.fixedOutput[period]

    def resetfixedOutput(self, period):
        self.fixedOutput[period] = self.fixedOutputBase[period]

    def scalefixedOutput(self, ratio, period):
        self.fixedOutput[period] *= ratio
        self.fixedShare[period]  *= ratio

    def getFixedShare(self, period):
        return self.fixedShare[period]

    def setFixedShare(self, period, value):
        self.fixedShare[period] = value

    def setShareToFixedValue(self, period):
        self.share[period] = self.fixedShare[period]

    def adjShares(self, demand, shareRatio, totalfixedOutput, period):
        """
        Set the share of a fixed-output subsector to its fraction of `demand`;
        scale the share of any other subsector by `shareRatio`.
        """
        fixed = self.fixedOutput[period]
        if fixed > 0:
            self.share[period] = fixed / demand if demand > 0 else 0.0
        else:
            self.share[period] *= shareRatio

    #
    # Capacity limits
    #
    def getCapacityLimit(self, period):
        return self.capLimit[period]

    def getCapLimitStatus(self, period):
        return self.capLimitStatus[period]

    def setCapLimitStatus(self, status, period):
        self.capLimitStatus[period] = status

    @staticmethod
    def capLimitTransform(capLimit, share, smallNumber=SMALL_NUMBER):
        """
        Return the capped share of a subsector whose share is over its limit.
        A limit of (nearly) 1 is no limit; otherwise a smooth minimum of
        `share` and `capLimit` is returned, which is always below both and
        approaches `capLimit` as `share` grows. At 80% of the limit the
        result is about 2% below `share`, so shares at or below the limit
        are not capped.
        """
        if capLimit >= 1 - smallNumber:
            return capLimit

        if capLimit <= 0:
            return 0.0

        k = CAP_LIMIT_EXPONENT
        return share / (1 + (share / capLimit) ** k) ** (1.0 / k)

    def limitShares(self, multiplier, period):
        """
        Apply a capacity-limit pass to this subsector's share: a pending
        subsector is set to its limit and marked applied, an applied one is
        unchanged, and any other non-fixed subsector is scaled by `multiplier`.
        """
        if self.fixedShare[period] > 0:
            return

        status = self.capLimitStatus[period]
        if status == CapLimitStatus.PENDING:
            smallNumber = self.context.config.smallNumber
            self.share[period] = self.capLimitTransform(self.capLimit[period], self.share[period], smallNumber)
            self.capLimitStatus[period] = CapLimitStatus.APPLIED

        elif status == CapLimitStatus.UNLIMITED:
            self.share[period] *= multiplier

    #
    # Calibration
    #
    def getTotalCalOutputs(self, period):
        return self.calOutput[period]

    def getCalibrationStatus(self, period):
        return self.calOutput[period] > 0

    def allOutputFixed(self, period):
        return self.calOutput[period] > 0 or self.fixedOutput[period] > 0 or self.shareWeight[period] == 0

    def usesInput(self, goodName):
        return goodName == ALL_INPUTS or (self.fuelName and goodName == self.fuelName)

    def inputsAllFixed(self, period, goodName):
        if not self.usesInput(goodName):
            return True

        return self.allOutputFixed(period)

    def getCalAndFixedInputs(self, period, goodName, bothVals=True):
        if not self.usesInput(goodName):
            return 0.0

        total = self.calOutput[period] + (self.fixedOutput[period] if bothVals else 0.0)
        return total / self.efficiency[period]

    def getCalAndFixedOutputs(self, period, goodName, bothVals=True):
        if goodName not in (ALL_INPUTS, self.sectorName):
            return 0.0

        return self.calOutput[period] + (self.fixedOutput[period] if bothVals else 0.0)

    def setImpliedFixedInput(self, period, goodName, requiredInput):
        """
        If this subsector consumes `goodName` and its output is not otherwise
        fixed, calibrate its output to consume `requiredInput`.

        :return: (bool) True if the calibrated output was set
        """
        if not self.usesInput(goodName) or self.allOutputFixed(period):
            return False

        self.calOutput[period] = requiredInput * self.efficiency[period]
        return True

    def scaleCalibratedValues(self, period, goodName, scaleValue):
        if self.usesInput(goodName) and self.calOutput[period] > 0:
            self.calOutput[period] *= scaleValue

    def adjustForCalibration(self, sectorDemand, totalfixedOutput, totalCalOutputs, allFixed, period):
        """
        Scale the share weight so the share in `period` produces the
        calibrated output given the sector's demand.
        """
        calOutput = self.calOutput[period]

        if self.shareWeight[period] == 0 and calOutput > 0:
            _logger.info("Share weight of calibrated subsector %s in sector %s reset to 1", self.name, self.sectorName)
            self.shareWeight[period] = 1.0

        share = self.share[period]
        if sectorDemand <= 0 or share <= 0:
            return

        requiredShare = calOutput / sectorDemand

        # If everything is fixed, divide the variable portion among calibrated subsectors
        if allFixed and totalCalOutputs > 0:
            variable = max(sectorDemand - totalfixedOutput, 0.0)
            requiredShare = (calOutput / totalCalOutputs) * variable / sectorDemand

        self.shareWeight[period] *= requiredShare / share

    def checkSubSectorCalData(self, period):
        if self.calOutput[period] > 0 and self.fixedOutputBase[period] > 0:
            _logger.warning("Subsector %s in sector %s, region %s has both calibrated and fixed output in period %d",
                            self.name, self.sectorName, self.regionName, period)

    def tabulateFixedDemands(self, period):
        """
        Record the fixed or calibrated demand for this subsector's fuel in the
        market info of the fuel's market.
        """
        if self.fuelName and self.allOutputFixed(period):
            fixedInput = self.getCalAndFixedInputs(period, self.fuelName)
            self.marketplace.addToMarketInfo(self.fuelName, self.regionName, period, 'calDemand', fixedInput)

    #
    # Output and input
    #
    def setoutput(self, demand, period, gdp=None):
        """
        Set output to this subsector's share of `demand` and add the fuel
        required to the demand in the fuel's market.
        """
        output = self.share[period] * demand
        self.output[period] = output
        self.input[period] = output / self.efficiency[period]

        if self.fuelName:
            self.marketplace.addToDemand(self.fuelName, self.regionName, self.input[period], period)

    def getOutput(self, period):
        return self.output[period]

    def getInput(self, period):
        return self.input[period]

    #
    # Emissions and summaries
    #
    def emission(self, period):
        fuelInput = self.input[period]
        coefs = dict(self.emissCoefs)
        coef = self.getCO2Coef(period)
        if coef > 0:
            coefs[CO2] = coef

        emissions = {gas: fuelInput * value for gas, value in coefs.items()}
        self.emissions[period] = emissions

        fuelKey = self.fuelName or self.name
        self.fuelEmissions[period] = {fuelKey: emissions.get(CO2, 0.0)}

        for gas, value in emissions.items():
            if not isValidNumber(value):
                _logger.error("Emissions of %s in subsector %s are not valid: %s", gas, self.name, value)

    def getemission(self, period):
        return self.emissions[period]

    def getemfuelmap(self, period):
        return self.fuelEmissions[period]

    def indemission(self, period, emcoefInd):
        """
        Compute emissions attributable to the production of this subsector's fuel.

        :param emcoefInd: (list of IndirectEmissCoef) coefficients by supplying sector
        """
        emissions = {}
        for coef in emcoefInd:
            if coef.getName() == self.fuelName:
                for gas in coef.getGases():
                    emissions[gas] = emissions.get(gas, 0.0) + self.input[period] * coef.getemcoef(gas)

        self.indEmissions[period] = emissions

    def getemindmap(self, period):
        return self.indEmissions[period]

    def getTotalCarbonTaxPaid(self, period):
        return self.emissions[period].get(CO2, 0.0) * self.getCarbonPrice(period)

    def updateSummary(self, period):
        fuelcons = {TOTAL: self.input[period]}
        if self.fuelName:
            fuelcons[self.fuelName] = self.input[period]
        self.fuelConsumption[period] = fuelcons

    def getfuelcons(self, period):
        return self.fuelConsumption[period]
