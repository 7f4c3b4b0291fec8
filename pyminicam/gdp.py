'''
.. Regional GDP and population drivers.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import numpy as np

from .log import getLogger
from .utils import periodArray, fillForward
from .XMLFile import childElements, insertValueIntoVector, getValueFloat

_logger = getLogger(__name__)

class GDP(object):
    """
    Per-period GDP and population for a region. Population and labor
    productivity growth carry forward from the most recent period that
    has a value. GDP given in the input is used as is; in other periods
    it grows from the previous period's GDP:

        GDP[t] = GDP[t-1] * (pop[t] / pop[t-1]) * (1 + laborProd[t]) ** timestep

    When calibration is active, a calibrated GDP (or calibrated GDP per
    capita times population) replaces the value for its period. GDP then
    responds to the change in the region's end-use service price:

        GDP[t] = unadjusted[t] * (P[t] / P[t-1]) ** energyElasticity

    Since each period grows from the adjusted GDP of the period before,
    the price feedback carries into later periods.

    :param modeltime: (Modeltime) the model time definition
    """
    def __init__(self, modeltime):
        self.modeltime = modeltime
        maxper = modeltime.getmaxper()
        self.gdpInput      = periodArray(maxper)
        self.gdpUnadjusted = periodArray(maxper)
        self.gdp           = periodArray(maxper)
        self.population    = periodArray(maxper)
        self.laborProductivity    = periodArray(maxper)   # annual growth rate
        self.calibrationGDP       = periodArray(maxper)
        self.calibrationGDPperCap = periodArray(maxper)
        self.energyElasticity = 0.0

        self._gdpSet = periodArray(maxper, fill=False, dtype=bool)
        self._popSet = periodArray(maxper, fill=False, dtype=bool)
        self._lpSet  = periodArray(maxper, fill=False, dtype=bool)

    @classmethod
    def fromValues(cls, modeltime, gdp, population):
        """
        Create a GDP instance from sequences of per-period values.
        """
        obj = cls(modeltime)
        obj.gdpInput[:] = np.asarray(gdp, dtype=float)
        obj.gdpUnadjusted[:] = obj.gdpInput
        obj.gdp[:] = obj.gdpInput
        obj.population[:] = np.asarray(population, dtype=float)
        obj._gdpSet[:] = True
        obj._popSet[:] = True
        return obj

    def XMLParse(self, node):
        modeltime = self.modeltime

        for child in childElements(node):
            tag = child.tag
            if tag == 'gdp':
                insertValueIntoVector(child, self.gdpInput, modeltime, self._gdpSet)
            elif tag == 'population':
                insertValueIntoVector(child, self.population, modeltime, self._popSet)
            elif tag == 'labor-productivity':
                insertValueIntoVector(child, self.laborProductivity, modeltime, self._lpSet)
            elif tag == 'calibration-gdp':
                insertValueIntoVector(child, self.calibrationGDP, modeltime)
            elif tag == 'calibration-gdp-per-capita':
                insertValueIntoVector(child, self.calibrationGDPperCap, modeltime)
            elif tag == 'energy-elasticity':
                self.energyElasticity = getValueFloat(child)
            else:
                _logger.warning("Unrecognized element <%s> found while parsing GDP", tag)

    def completeInit(self):
        fillForward(self.population, self._popSet)
        fillForward(self.laborProductivity, self._lpSet)

        # approximate values until each period is calculated
        self.gdpUnadjusted[:] = self.calcFutureGDP()
        self.gdp[:] = self.gdpUnadjusted

    def _grow(self, prevGDP, period):
        prevPop = self.population[period - 1]
        popRatio = self.population[period] / prevPop if prevPop > 0 else 1.0
        return prevGDP * popRatio * (1 + self.laborProductivity[period]) ** self.modeltime.timestep

    def calcFutureGDP(self):
        """
        Return GDP for all periods from the input values and growth rates
        alone, with no calibration or energy price feedback.

        :return: (numpy.ndarray) GDP by period
        """
        values = periodArray(self.modeltime.getmaxper())
        for period in range(len(values)):
            if self._gdpSet[period]:
                values[period] = self.gdpInput[period]
            elif period > 0:
                values[period] = self._grow(values[period - 1], period)

        return values

    def isCalibrated(self, period, calibrationActive=True):
        return calibrationActive and (self.calibrationGDP[period] > 0 or self.calibrationGDPperCap[period] > 0)

    def calcGDP(self, period, calibrationActive=True):
        """
        Set the unadjusted GDP for `period` from a calibrated value, an input
        value, or growth from the previous period, in that order of preference.
        """
        if calibrationActive and self.calibrationGDP[period] > 0:
            value = self.calibrationGDP[period]

        elif calibrationActive and self.calibrationGDPperCap[period] > 0:
            value = self.calibrationGDPperCap[period] * self.population[period]

        elif self._gdpSet[period] or period == 0:
            value = self.gdpInput[period]

        else:
            value = self._grow(self.gdp[period - 1], period)

        self.gdpUnadjusted[period] = value
        self.gdp[period] = value
        return value

    def adjustGDP(self, period, priceRatio):
        """
        Apply the energy price feedback to the unadjusted GDP of `period`.

        :param priceRatio: (float) end-use service price in `period` relative to the previous period
        """
        value = self.gdpUnadjusted[period]
        if self.energyElasticity and priceRatio > 0:
            value *= priceRatio ** self.energyElasticity

        self.gdp[period] = value

    def getGDP(self, period):
        return self.gdp[period]

    def getApproxGDP(self, period):
        return self.gdpUnadjusted[period]

    def getPopulation(self, period):
        return self.population[period]

    def getGDPperCap(self, period):
        pop = self.population[period]
        return self.gdp[period] / pop if pop > 0 else 0.0

    def getBestScaledGDPperCap(self, period):
        """
        Return GDP per capita in `period` relative to period 0, or 1 if
        either value is unavailable.
        """
        base = self.getGDPperCap(0)
        curr = self.getGDPperCap(period)
        if base <= 0 or curr <= 0:
            return 1.0

        return curr / base
