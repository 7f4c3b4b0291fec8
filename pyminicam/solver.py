'''
.. Iterative solution of each model period.

.. Copyright (c) 2016 Richard Plevin
   See the https://opensource.org/licenses/MIT for license details.
'''
import numpy as np

from .error import SolverError
from .log import getLogger

_logger = getLogger(__name__)

class Solver(object):
    """
    Repeats region iterations for a period until market prices and demands
    stop changing and, when calibration is active, calibrated outputs are met.

    :param context: (ModelContext) configuration, model time and marketplace
    :param regions: (list of Region) the regions to solve
    """
    def __init__(self, context, regions):
        self.context = context
        self.regions = regions
        self.iterations = {}    # iterations used, by period

    def relativeChange(self, old, new):
        if len(old) == 0:
            return 0.0

        tiny = self.context.config.tinyNumber
        denom = np.maximum(np.abs(old), tiny)
        return float(np.max(np.abs(new - old) / denom))

    def isCalibrated(self, period, printWarnings=False):
        config = self.context.config
        results = [region.isAllCalibrated(period, config.calAccuracy, printWarnings) for region in self.regions]
        return all(results)

    def solve(self, period):
        """
        Solve `period`, returning True if the solution converged.

        :param period: (int) the model period
        :return: (bool) whether the period converged
        :raises SolverError: if `period` is outside the model time horizon
        """
        config = self.context.config
        marketplace = self.context.marketplace
        maxper = self.context.getmaxper()

        if not 0 <= period < maxper:
            raise SolverError("Period %s is outside the model time horizon (0-%d)" % (period, maxper - 1))

        year = self.context.modeltime.getper_to_yr(period)
        _logger.info("Solving period %d (%d)", period, year)

        for region in self.regions:
            region.initCalc(period)

        prices = demands = None
        converged = False
        iteration = 0

        for iteration in range(1, config.maxIterations + 1):
            for region in self.regions:
                region.calc(period)

            calibrated = True
            if config.calibrationActive:
                for region in self.regions:
                    region.calibrateSectors(period)
                calibrated = self.isCalibrated(period)

            newPrices  = marketplace.getPrices(period)
            newDemands = marketplace.getDemands(period)

            if prices is not None:
                change = max(self.relativeChange(prices, newPrices), self.relativeChange(demands, newDemands))
                _logger.debug("Iteration %d: relative change %.3g", iteration, change)

                if change < config.solverTolerance and calibrated:
                    converged = True
                    break

            prices, demands = newPrices, newDemands

        self.iterations[period] = iteration

        if converged:
            _logger.info("Period %d converged in %d iterations", period, iteration)
        else:
            _logger.warning("Period %d (%d) did not converge in %d iterations", period, year, config.maxIterations)

        if config.calibrationActive:
            self.isCalibrated(period, printWarnings=True)

        for region in self.regions:
            region.postCalc(period)

        return converged
